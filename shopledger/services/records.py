"""Typed records flowing into the profit pipeline.

Backend rows (ORM objects or JSON dicts) are coerced into these records once,
here, so the rest of the pipeline never deals with missing or malformed fields.

Defaulting rules:

- ``quantity``: missing, zero or unparseable -> 1
- ``price`` / ``amount``: missing or unparseable -> 0
- ``cost_price``: unparseable -> None (resolved later against the stock catalog)
- dates: unparseable -> None (excluded from range-bounded views)
- codes and descriptions: coerced to ``str``, missing -> ""
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def to_quantity(value: Any) -> int:
    number = to_decimal(value)
    if number is None:
        return 1
    qty = int(number)
    return qty if qty else 1


def to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def to_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raw = str(value).strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def to_local(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Project a timestamp onto local wall-clock time.

    Naive timestamps are taken as already local. Aware ones are converted to
    ``tz``, or to the server's zone when ``tz`` is None.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(tz)


def local_date(value: Any, tz: tzinfo | None = None) -> date | None:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = to_datetime(value)
    if parsed is None:
        return None
    return to_local(parsed, tz).date()


def normalized_date(value: Any, tz: tzinfo | None = None) -> str:
    """``YYYY-MM-DD`` of the local calendar day, or "" when unparseable."""
    day = local_date(value, tz)
    return day.isoformat() if day else ""


def month_key(value: Any, tz: tzinfo | None = None) -> str | None:
    day = local_date(value, tz)
    if day is None:
        return None
    return f"{day.year:04d}-{day.month:02d}"


def read_field(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


@dataclass(frozen=True)
class BillLineItem:
    id: Any
    bill_id: Any
    bill_date: datetime | None
    gsm_number: str
    description: str
    quantity: int
    price: Decimal
    cost_price: Decimal | None

    @classmethod
    def coerce(cls, source: Any) -> "BillLineItem":
        bill_date = read_field(source, "bill_date")
        if bill_date is None:
            bill_date = read_field(source, "created_at")
        return cls(
            id=read_field(source, "id"),
            bill_id=read_field(source, "bill_id"),
            bill_date=to_datetime(bill_date),
            gsm_number=to_text(read_field(source, "gsm_number")),
            description=to_text(read_field(source, "description")),
            quantity=to_quantity(read_field(source, "quantity")),
            price=to_decimal(read_field(source, "price")) or ZERO,
            cost_price=to_decimal(read_field(source, "cost_price")),
        )


@dataclass(frozen=True)
class StockRef:
    id: Any
    gsm_number: str
    category: str | None
    cost_price: Decimal | None

    @classmethod
    def coerce(cls, source: Any) -> "StockRef":
        category = read_field(source, "category")
        return cls(
            id=read_field(source, "id"),
            gsm_number=to_text(read_field(source, "gsm_number")),
            category=None if category is None else str(category),
            cost_price=to_decimal(read_field(source, "cost_price")),
        )


@dataclass(frozen=True)
class ExpenseRecord:
    id: Any
    item: str
    qty: int
    amount: Decimal
    created_at: datetime | None

    @classmethod
    def coerce(cls, source: Any) -> "ExpenseRecord":
        return cls(
            id=read_field(source, "id"),
            item=to_text(read_field(source, "item")),
            qty=to_quantity(read_field(source, "qty")),
            amount=to_decimal(read_field(source, "amount")) or ZERO,
            created_at=to_datetime(read_field(source, "created_at")),
        )


@dataclass(frozen=True)
class LedgerRow:
    id: Any
    date: datetime | None
    gsm: str
    description: str
    qty: int
    price: Decimal
    cost: Decimal
    source: str = "bill"

    @property
    def profit_per_piece(self) -> Decimal:
        return self.price - self.cost

    @property
    def profit(self) -> Decimal:
        return (self.price - self.cost) * self.qty

    @property
    def sales(self) -> Decimal:
        return self.price * self.qty
