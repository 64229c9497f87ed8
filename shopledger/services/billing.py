import logging
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from shopledger.models.inventory import Bill, BillItem, ProfitLedgerEntry, StockItem

logger = logging.getLogger(__name__)


class BillingError(Exception):
    pass


def _first_stock(db: Session, gsm_number: str) -> StockItem | None:
    return db.scalar(
        select(StockItem)
        .where(StockItem.gsm_number == gsm_number)
        .order_by(StockItem.id.asc())
        .limit(1)
        .with_for_update()
    )


def create_bill(
    db: Session,
    *,
    customer_name: str,
    payment_mode: str | None,
    status: str,
    bill_date: datetime | None,
    items: Iterable[Any],
) -> Bill:
    """Persist a bill and its lines, taking the sold quantities out of stock.

    ``items`` only need ``gsm_number``, ``description``, ``quantity``, ``price``
    and optionally ``cost_price`` attributes. Nothing is committed when a line
    fails.
    """
    bill = Bill(
        customer_name=customer_name.strip(),
        payment_mode=payment_mode.strip() if payment_mode else None,
        status=status,
        bill_date=bill_date or datetime.now(),
    )
    subtotal = Decimal("0")
    for line in items:
        gsm_number = line.gsm_number.strip()
        stock = _first_stock(db, gsm_number)
        description = (line.description or "").strip()
        if stock is not None:
            if stock.stock < line.quantity:
                db.rollback()
                raise BillingError(f"Insufficient stock for GSM {gsm_number}")
            stock.stock -= line.quantity
            if not description:
                description = stock.description or ""

        price = Decimal(line.price)
        total = price * line.quantity
        subtotal += total
        bill.items.append(
            BillItem(
                gsm_number=gsm_number,
                description=description,
                quantity=line.quantity,
                price=price,
                cost_price=getattr(line, "cost_price", None),
                total=total,
                created_at=bill.bill_date,
            )
        )

    bill.subtotal = subtotal
    db.add(bill)
    db.commit()
    db.refresh(bill)
    logger.info("Created bill %s with %d items", bill.id, len(bill.items))
    return bill


def drop_cached_ledger(db: Session, bill: Bill) -> None:
    item_ids = [item.id for item in bill.items]
    if item_ids:
        db.execute(delete(ProfitLedgerEntry).where(ProfitLedgerEntry.bill_item_id.in_(item_ids)))


def delete_bill(db: Session, bill: Bill) -> None:
    """Remove a bill, put its quantities back and drop its cached ledger rows."""
    for item in bill.items:
        stock = _first_stock(db, item.gsm_number)
        if stock is not None:
            stock.stock += item.quantity
    drop_cached_ledger(db, bill)
    db.delete(bill)
    db.commit()
