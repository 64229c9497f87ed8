import logging
from decimal import ROUND_HALF_UP, Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from shopledger.api.deps import require_session
from shopledger.db.database import get_db
from shopledger.models.inventory import StockItem
from shopledger.schemas.inventory import StockCreate, StockOut, StockSummaryOut, StockUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stock", tags=["Stock"], dependencies=[Depends(require_session)])


def derive_cost_price(kg: Decimal | None, amount: Decimal | None) -> Decimal | None:
    """Cost per 100 g from a bulk purchase of ``kg`` kilograms for ``amount``."""
    if not kg or not amount:
        return None
    return (Decimal(amount) / (Decimal(kg) * 1000) * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _get_stock_or_404(db: Session, stock_id: int) -> StockItem:
    item = db.get(StockItem, stock_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock item not found")
    return item


@router.get("", response_model=list[StockOut])
def list_stock(
    q: str | None = None,
    category: str | None = None,
    db: Session = Depends(get_db),
):
    query = select(StockItem).order_by(StockItem.gsm_number.asc(), StockItem.id.asc())
    if q is not None and q.strip():
        pattern = f"%{q.strip()}%"
        query = query.where(
            or_(
                StockItem.gsm_number.ilike(pattern),
                StockItem.category.ilike(pattern),
                StockItem.manufacturer.ilike(pattern),
            )
        )
    if category is not None and category.strip():
        query = query.where(StockItem.category == category.strip())
    return list(db.scalars(query).all())


@router.get("/summary", response_model=StockSummaryOut)
def stock_summary(db: Session = Depends(get_db)):
    items = list(db.scalars(select(StockItem)).all())
    inventory_value = sum(
        (Decimal(item.selling_price or 0) * item.stock for item in items),
        Decimal("0"),
    )
    total_parts = len(items)
    return StockSummaryOut(
        total_parts=total_parts,
        inventory_value=inventory_value,
        average_value=(inventory_value / total_parts) if total_parts else Decimal("0"),
        low_stock_count=sum(1 for item in items if item.stock <= item.minimum_stock),
    )


@router.get("/{stock_id}", response_model=StockOut)
def get_stock(stock_id: int, db: Session = Depends(get_db)):
    return _get_stock_or_404(db, stock_id)


@router.post("", response_model=StockOut, status_code=status.HTTP_201_CREATED)
def create_stock(payload: StockCreate, db: Session = Depends(get_db)):
    derived = derive_cost_price(payload.kg, payload.amount)
    item = StockItem(
        gsm_number=payload.gsm_number.strip(),
        category=payload.category.strip() if payload.category else None,
        description=payload.description.strip() if payload.description else None,
        manufacturer=payload.manufacturer.strip() if payload.manufacturer else None,
        stock=payload.stock,
        cost_price=derived if derived is not None else payload.cost_price,
        selling_price=payload.selling_price,
        minimum_stock=payload.minimum_stock,
        unit=payload.unit,
        kg=payload.kg,
        amount=payload.amount,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Created stock item %s (gsm=%s)", item.id, item.gsm_number)
    return item


@router.put("/{stock_id}", response_model=StockOut)
def update_stock(stock_id: int, payload: StockUpdate, db: Session = Depends(get_db)):
    item = _get_stock_or_404(db, stock_id)

    if payload.gsm_number is not None:
        item.gsm_number = payload.gsm_number.strip()
    if payload.category is not None:
        item.category = payload.category.strip() or None
    if payload.description is not None:
        item.description = payload.description.strip() or None
    if payload.manufacturer is not None:
        item.manufacturer = payload.manufacturer.strip() or None
    if payload.stock is not None:
        item.stock = payload.stock
    if payload.cost_price is not None:
        item.cost_price = payload.cost_price
    if payload.selling_price is not None:
        item.selling_price = payload.selling_price
    if payload.minimum_stock is not None:
        item.minimum_stock = payload.minimum_stock
    if payload.unit is not None:
        item.unit = payload.unit
    if payload.kg is not None:
        item.kg = payload.kg
    if payload.amount is not None:
        item.amount = payload.amount

    if payload.kg is not None or payload.amount is not None:
        derived = derive_cost_price(item.kg, item.amount)
        if derived is not None:
            item.cost_price = derived

    db.commit()
    db.refresh(item)
    return item


@router.delete("/{stock_id}", response_model=StockOut)
def delete_stock(stock_id: int, db: Session = Depends(get_db)):
    item = _get_stock_or_404(db, stock_id)
    result = StockOut.model_validate(item)
    db.delete(item)
    db.commit()
    return result
