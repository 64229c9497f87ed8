"""Bill line items -> ledger rows, and collapsing of re-synced duplicates."""

from collections.abc import Iterable, Sequence
from datetime import tzinfo
from decimal import Decimal
from typing import Any

from shopledger.services.records import (
    ZERO,
    BillLineItem,
    LedgerRow,
    StockRef,
    normalized_date,
    read_field,
    to_datetime,
    to_decimal,
    to_quantity,
    to_text,
)


def find_stock(stock: Iterable[StockRef], gsm_number: str) -> StockRef | None:
    """First catalog entry with this code, or None."""
    for ref in stock:
        if ref.gsm_number == gsm_number:
            return ref
    return None


def resolve_cost(item: BillLineItem, stock: Sequence[StockRef]) -> Decimal:
    if item.cost_price:
        return item.cost_price
    ref = find_stock(stock, item.gsm_number)
    if ref is None or ref.cost_price is None:
        return ZERO
    return ref.cost_price


def normalize_bill_item(item: BillLineItem, stock: Sequence[StockRef]) -> LedgerRow:
    return LedgerRow(
        id=item.id,
        date=item.bill_date,
        gsm=item.gsm_number,
        description=item.description,
        qty=item.quantity,
        price=item.price,
        cost=resolve_cost(item, stock),
    )


def build_ledger(items: Iterable[BillLineItem], stock: Iterable[StockRef]) -> list[LedgerRow]:
    catalog = list(stock)
    return [normalize_bill_item(item, catalog) for item in items]


def ledger_row_from_cache(entry: Any) -> LedgerRow:
    """Cached profit-ledger rows keep their stored cost; profit is recomputed."""
    return LedgerRow(
        id=read_field(entry, "id"),
        date=to_datetime(read_field(entry, "entry_date")),
        gsm=to_text(read_field(entry, "gsm_number")),
        description=to_text(read_field(entry, "description")),
        qty=to_quantity(read_field(entry, "quantity")),
        price=to_decimal(read_field(entry, "price")) or ZERO,
        cost=to_decimal(read_field(entry, "cost")) or ZERO,
        source="cache",
    )


def _key_number(value: Decimal | int) -> str:
    if isinstance(value, int):
        return str(value)
    text = format(value.normalize(), "f")
    return "0" if text in {"-0", ""} else text


def dedup_key(row: LedgerRow, tz: tzinfo | None = None) -> str:
    return "-".join(
        [
            normalized_date(row.date, tz),
            row.gsm,
            row.description,
            _key_number(row.qty),
            _key_number(row.price),
        ]
    )


def dedupe_ledger(rows: Iterable[LedgerRow], tz: tzinfo | None = None) -> list[LedgerRow]:
    """Keep the first row seen for each key, in input order.

    Heuristic only: two genuine same-day sales with identical code,
    description, quantity and price collapse into one.
    """
    seen: set[str] = set()
    result: list[LedgerRow] = []
    for row in rows:
        key = dedup_key(row, tz)
        if key in seen:
            continue
        seen.add(key)
        result.append(row)
    return result
