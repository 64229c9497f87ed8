from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from shopledger.api.deps import require_session
from shopledger.core.config import settings
from shopledger.db.database import get_db
from shopledger.models.inventory import Bill
from shopledger.schemas.inventory import BillCreate, BillDetailOut, BillItemOut, BillOut, BillUpdate
from shopledger.services.billing import BillingError, create_bill, delete_bill, drop_cached_ledger
from shopledger.services.exports import (
    EXPORT_FORMATS,
    TabularExport,
    bill_number,
    bills_export,
    format_timestamp,
    money,
    render_export,
    to_print_html,
)

router = APIRouter(prefix="/api/billing", tags=["Billing"], dependencies=[Depends(require_session)])


def _get_bill_or_404(db: Session, bill_id: int) -> Bill:
    bill = db.get(Bill, bill_id)
    if not bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    return bill


def bill_out(bill: Bill) -> BillOut:
    return BillOut(
        id=bill.id,
        bill_number=bill_number(bill.id),
        customer_name=bill.customer_name,
        payment_mode=bill.payment_mode,
        status=bill.status,
        bill_date=bill.bill_date,
        subtotal=bill.subtotal,
    )


def bill_detail_out(bill: Bill) -> BillDetailOut:
    return BillDetailOut(
        **bill_out(bill).model_dump(),
        items=[BillItemOut.model_validate(item) for item in bill.items],
    )


def _file_response(content: str | bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("", response_model=list[BillOut])
def list_bills(db: Session = Depends(get_db)):
    bills = db.scalars(select(Bill).order_by(Bill.id.desc())).all()
    return [bill_out(bill) for bill in bills]


@router.get("/export/{fmt}")
def export_bills(fmt: str, db: Session = Depends(get_db)):
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported export format: {fmt}")
    bills = db.scalars(select(Bill).options(selectinload(Bill.items)).order_by(Bill.id.desc())).all()
    content, media_type, filename = render_export(bills_export(bills, settings.report_tzinfo), fmt)
    return _file_response(content, media_type, filename)


@router.post("", response_model=BillDetailOut, status_code=status.HTTP_201_CREATED)
def create_bill_route(payload: BillCreate, db: Session = Depends(get_db)):
    try:
        bill = create_bill(
            db,
            customer_name=payload.customer_name,
            payment_mode=payload.payment_mode,
            status=payload.status,
            bill_date=payload.bill_date,
            items=payload.items,
        )
    except BillingError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return bill_detail_out(bill)


@router.get("/{bill_id}", response_model=BillDetailOut)
def get_bill(bill_id: int, db: Session = Depends(get_db)):
    return bill_detail_out(_get_bill_or_404(db, bill_id))


@router.get("/{bill_id}/items", response_model=list[BillItemOut])
def list_bill_items(bill_id: int, db: Session = Depends(get_db)):
    return list(_get_bill_or_404(db, bill_id).items)


@router.get("/{bill_id}/print")
def print_bill(bill_id: int, db: Session = Depends(get_db)):
    bill = _get_bill_or_404(db, bill_id)
    symbol = settings.currency_symbol
    invoice = TabularExport(
        title=f"Invoice {bill_number(bill.id)}",
        filename=f"invoice_{bill_number(bill.id)}",
        headers=["#", "GSM", "Description", "Qty", "Price", "Total"],
        preamble=[
            f"Customer: {bill.customer_name}",
            f"Date: {format_timestamp(bill.bill_date, settings.report_tzinfo)}",
            f"Payment Mode: {bill.payment_mode or '-'}",
        ],
        footer=[f"Total: {symbol}{money(bill.subtotal)}"],
    )
    for index, item in enumerate(bill.items, start=1):
        invoice.rows.append(
            [
                str(index),
                item.gsm_number,
                item.description,
                str(item.quantity),
                f"{symbol}{money(item.price)}",
                f"{symbol}{money(item.total)}",
            ]
        )
    return Response(content=to_print_html(invoice), media_type="text/html")


@router.put("/{bill_id}", response_model=BillOut)
def update_bill(bill_id: int, payload: BillUpdate, db: Session = Depends(get_db)):
    bill = _get_bill_or_404(db, bill_id)

    if payload.customer_name is not None:
        bill.customer_name = payload.customer_name.strip()
    if payload.payment_mode is not None:
        bill.payment_mode = payload.payment_mode.strip() or None
    if payload.status is not None:
        bill.status = payload.status
    if payload.bill_date is not None:
        bill.bill_date = payload.bill_date
        # Cached rows are keyed on the old date.
        drop_cached_ledger(db, bill)

    db.commit()
    db.refresh(bill)
    return bill_out(bill)


@router.delete("/{bill_id}", response_model=BillOut)
def delete_bill_route(bill_id: int, db: Session = Depends(get_db)):
    bill = _get_bill_or_404(db, bill_id)
    result = bill_out(bill)
    delete_bill(db, bill)
    return result
