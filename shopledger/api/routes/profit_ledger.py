from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from shopledger.api.deps import require_session
from shopledger.core.config import settings
from shopledger.db.database import get_db
from shopledger.models.inventory import ProfitLedgerEntry
from shopledger.schemas.inventory import BulkInsertRequest, BulkInsertResult, ProfitLedgerEntryOut
from shopledger.services.reconciliation import ledger_row_from_cache
from shopledger.services.snapshot import insert_new_entries

router = APIRouter(prefix="/api/profit-ledger", tags=["Profit Ledger"], dependencies=[Depends(require_session)])


def _entry_out(entry: ProfitLedgerEntry) -> ProfitLedgerEntryOut:
    row = ledger_row_from_cache(entry)
    return ProfitLedgerEntryOut(
        id=entry.id,
        bill_item_id=entry.bill_item_id,
        entry_date=entry.entry_date,
        gsm_number=entry.gsm_number,
        description=entry.description,
        quantity=entry.quantity,
        price=entry.price,
        cost=entry.cost,
        profit=row.profit,
        synced_at=entry.synced_at,
    )


@router.get("", response_model=list[ProfitLedgerEntryOut])
def list_profit_ledger(
    date_from: datetime | None = Query(default=None),
    date_to: datetime | None = Query(default=None),
    db: Session = Depends(get_db),
):
    query = select(ProfitLedgerEntry).order_by(ProfitLedgerEntry.id.asc())
    if date_from is not None:
        query = query.where(ProfitLedgerEntry.entry_date >= date_from)
    if date_to is not None:
        query = query.where(ProfitLedgerEntry.entry_date <= date_to)
    return [_entry_out(entry) for entry in db.scalars(query).all()]


@router.post("/bulk-insert", response_model=BulkInsertResult, status_code=status.HTTP_201_CREATED)
def bulk_insert_profit_ledger(payload: BulkInsertRequest, db: Session = Depends(get_db)):
    """Append rows to the cache, skipping any whose dedup key is already present."""
    entries = [
        ProfitLedgerEntry(
            bill_item_id=incoming.bill_item_id,
            entry_date=incoming.entry_date,
            gsm_number=incoming.gsm_number.strip(),
            description=incoming.description.strip(),
            quantity=incoming.quantity,
            price=incoming.price,
            cost=incoming.cost,
            synced_at=datetime.now(),
        )
        for incoming in payload.rows
    ]
    inserted = insert_new_entries(db, entries, settings.report_tzinfo)
    db.commit()
    return BulkInsertResult(
        received=len(payload.rows),
        inserted=inserted,
        skipped=len(payload.rows) - inserted,
    )
