"""Monthly rollup and headline totals for the profit dashboard."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, tzinfo
from decimal import Decimal

from shopledger.services.records import ZERO, ExpenseRecord, LedgerRow, month_key


@dataclass(frozen=True)
class MonthlyAggregate:
    month: str
    label: str
    profit: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.profit - self.expense


@dataclass(frozen=True)
class ReportSummary:
    total_profit: Decimal
    total_expense: Decimal
    total_sales: Decimal
    ledger_rows: int
    expense_rows: int

    @property
    def net_total(self) -> Decimal:
        return self.total_profit - self.total_expense


def month_label(month: str) -> str:
    year, mon = month.split("-")
    return date(int(year), int(mon), 1).strftime("%b %Y")


def aggregate_monthly(
    ledger: Iterable[LedgerRow],
    expenses: Iterable[ExpenseRecord],
    tz: tzinfo | None = None,
) -> list[MonthlyAggregate]:
    buckets: dict[str, dict[str, Decimal]] = {}

    for row in ledger:
        month = month_key(row.date, tz)
        if month is None:
            continue
        bucket = buckets.setdefault(month, {"profit": ZERO, "expense": ZERO})
        bucket["profit"] += row.profit

    for record in expenses:
        month = month_key(record.created_at, tz)
        if month is None:
            continue
        bucket = buckets.setdefault(month, {"profit": ZERO, "expense": ZERO})
        bucket["expense"] += record.amount

    return [
        MonthlyAggregate(
            month=month,
            label=month_label(month),
            profit=values["profit"],
            expense=values["expense"],
        )
        for month, values in sorted(buckets.items())
    ]


def summarize(
    monthly: Sequence[MonthlyAggregate],
    ledger: Sequence[LedgerRow],
    expenses: Sequence[ExpenseRecord],
) -> ReportSummary:
    return ReportSummary(
        total_profit=sum((m.profit for m in monthly), ZERO),
        total_expense=sum((e.amount for e in expenses), ZERO),
        total_sales=sum((row.sales for row in ledger), ZERO),
        ledger_rows=len(ledger),
        expense_rows=len(expenses),
    )
