"""Filter criteria for the profit dashboard.

Every criterion is optional and they are AND-combined. Date bounds compare
local calendar days, inclusive on both ends. A record without a usable date
never reaches a dashboard view, since it has no month to be bucketed under.
An unparseable bound drops every record.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import tzinfo
from typing import Any

from shopledger.services.reconciliation import find_stock
from shopledger.services.records import ExpenseRecord, LedgerRow, StockRef, local_date

ALL = "All"


def _is_unset(value: str | None) -> bool:
    return value is None or value == "" or value == ALL


@dataclass(frozen=True)
class LedgerFilter:
    from_date: Any = None
    to_date: Any = None
    description: str | None = None
    category: str | None = None
    gsm: str | None = None

    def within_dates(self, value: Any, tz: tzinfo | None = None) -> bool:
        day = local_date(value, tz)
        if day is None:
            return False
        if not _is_blank(self.from_date):
            lower = local_date(self.from_date, tz)
            if lower is None or day < lower:
                return False
        if not _is_blank(self.to_date):
            upper = local_date(self.to_date, tz)
            if upper is None or day > upper:
                return False
        return True

    def matches_row(self, row: LedgerRow, stock: Sequence[StockRef] = (), tz: tzinfo | None = None) -> bool:
        if self.gsm and row.gsm != self.gsm:
            return False
        if not _is_unset(self.description) and row.description != self.description:
            return False
        if not _is_unset(self.category):
            ref = find_stock(stock, row.gsm)
            if ref is None or (ref.category or "") != self.category:
                return False
        return self.within_dates(row.date, tz)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def filter_ledger(
    rows: Iterable[LedgerRow],
    criteria: LedgerFilter,
    stock: Iterable[StockRef] = (),
    tz: tzinfo | None = None,
) -> list[LedgerRow]:
    catalog = list(stock)
    return [row for row in rows if criteria.matches_row(row, catalog, tz)]


def filter_expenses(
    records: Iterable[ExpenseRecord],
    criteria: LedgerFilter,
    tz: tzinfo | None = None,
) -> list[ExpenseRecord]:
    # Expenses carry no code or category; only the date range applies.
    return [record for record in records if criteria.within_dates(record.created_at, tz)]
