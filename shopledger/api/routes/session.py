from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from shopledger.api.deps import require_session
from shopledger.api.routes.billing import bill_detail_out
from shopledger.db.database import get_db
from shopledger.schemas.inventory import BillDetailOut
from shopledger.schemas.session import (
    BillDraftConfirm,
    BillDraftOut,
    DraftItemIn,
    DraftItemOut,
    PreferencesIn,
    PreferencesOut,
)
from shopledger.services.billing import BillingError, create_bill
from shopledger.services.view_cache import BILL_DRAFT_VIEW, PREFERENCES_VIEW, ViewStateCache, get_view_cache

router = APIRouter(prefix="/api/session", tags=["Session"])


def _draft_out(items: list[dict[str, Any]]) -> BillDraftOut:
    lines = [DraftItemOut(**item, total=Decimal(item["price"]) * item["quantity"]) for item in items]
    return BillDraftOut(items=lines, subtotal=sum((line.total for line in lines), Decimal("0")))


@router.get("/bill-draft", response_model=BillDraftOut)
def get_bill_draft(
    session_id: str = Depends(require_session),
    cache: ViewStateCache = Depends(get_view_cache),
):
    return _draft_out(cache.load(session_id, BILL_DRAFT_VIEW, default=[]))


@router.post("/bill-draft", response_model=BillDraftOut)
def add_draft_item(
    payload: DraftItemIn,
    session_id: str = Depends(require_session),
    cache: ViewStateCache = Depends(get_view_cache),
):
    items = cache.load(session_id, BILL_DRAFT_VIEW, default=[])
    items.append(payload.model_dump())
    cache.save(session_id, BILL_DRAFT_VIEW, items)
    return _draft_out(items)


@router.delete("/bill-draft/{index}", response_model=BillDraftOut)
def remove_draft_item(
    index: int,
    session_id: str = Depends(require_session),
    cache: ViewStateCache = Depends(get_view_cache),
):
    items = cache.load(session_id, BILL_DRAFT_VIEW, default=[])
    if index < 0 or index >= len(items):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Draft item not found")
    del items[index]
    cache.save(session_id, BILL_DRAFT_VIEW, items)
    return _draft_out(items)


@router.delete("/bill-draft", response_model=BillDraftOut)
def clear_bill_draft(
    session_id: str = Depends(require_session),
    cache: ViewStateCache = Depends(get_view_cache),
):
    cache.clear(session_id, BILL_DRAFT_VIEW)
    return _draft_out([])


@router.post("/bill-draft/confirm", response_model=BillDetailOut, status_code=status.HTTP_201_CREATED)
def confirm_bill_draft(
    payload: BillDraftConfirm,
    session_id: str = Depends(require_session),
    cache: ViewStateCache = Depends(get_view_cache),
    db: Session = Depends(get_db),
):
    items = cache.load(session_id, BILL_DRAFT_VIEW, default=[])
    if not items:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bill draft is empty")
    try:
        bill = create_bill(
            db,
            customer_name=payload.customer_name,
            payment_mode=payload.payment_mode,
            status=payload.status,
            bill_date=None,
            items=[DraftItemIn(**item) for item in items],
        )
    except BillingError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    cache.clear(session_id, BILL_DRAFT_VIEW)
    return bill_detail_out(bill)


@router.get("/preferences", response_model=PreferencesOut)
def get_preferences(
    session_id: str = Depends(require_session),
    cache: ViewStateCache = Depends(get_view_cache),
):
    return PreferencesOut(**cache.load(session_id, PREFERENCES_VIEW, default={}))


@router.put("/preferences", response_model=PreferencesOut)
def update_preferences(
    payload: PreferencesIn,
    session_id: str = Depends(require_session),
    cache: ViewStateCache = Depends(get_view_cache),
):
    cache.save(session_id, PREFERENCES_VIEW, payload.model_dump())
    return PreferencesOut(**payload.model_dump())
