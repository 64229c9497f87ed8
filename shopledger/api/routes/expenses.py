from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from shopledger.api.deps import require_session
from shopledger.db.database import get_db
from shopledger.models.inventory import Expense
from shopledger.schemas.inventory import ExpenseCreate, ExpenseOut, ExpenseSummaryOut, ExpenseUpdate

router = APIRouter(prefix="/api/expenses", tags=["Expenses"], dependencies=[Depends(require_session)])


def _get_expense_or_404(db: Session, expense_id: int) -> Expense:
    expense = db.get(Expense, expense_id)
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


def _expenses_query(date_from: datetime | None, date_to: datetime | None):
    query = select(Expense).order_by(Expense.created_at.desc(), Expense.id.desc())
    if date_from is not None:
        query = query.where(Expense.created_at >= date_from)
    if date_to is not None:
        query = query.where(Expense.created_at <= date_to)
    return query


@router.get("", response_model=list[ExpenseOut])
def list_expenses(
    date_from: datetime | None = Query(default=None),
    date_to: datetime | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return list(db.scalars(_expenses_query(date_from, date_to)).all())


@router.get("/summary", response_model=ExpenseSummaryOut)
def expense_summary(
    date_from: datetime | None = Query(default=None),
    date_to: datetime | None = Query(default=None),
    db: Session = Depends(get_db),
):
    expenses = list(db.scalars(_expenses_query(date_from, date_to)).all())
    return ExpenseSummaryOut(
        count=len(expenses),
        total_amount=sum((Decimal(e.amount) * e.qty for e in expenses), Decimal("0")),
    )


@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(payload: ExpenseCreate, db: Session = Depends(get_db)):
    expense = Expense(
        item=payload.item.strip(),
        qty=payload.qty,
        amount=payload.amount,
        created_at=payload.created_at or datetime.now(),
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


@router.put("/{expense_id}", response_model=ExpenseOut)
def update_expense(expense_id: int, payload: ExpenseUpdate, db: Session = Depends(get_db)):
    expense = _get_expense_or_404(db, expense_id)

    if payload.item is not None:
        expense.item = payload.item.strip()
    if payload.qty is not None:
        expense.qty = payload.qty
    if payload.amount is not None:
        expense.amount = payload.amount
    if payload.created_at is not None:
        expense.created_at = payload.created_at

    db.commit()
    db.refresh(expense)
    return expense


@router.delete("/{expense_id}", response_model=ExpenseOut)
def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    expense = _get_expense_or_404(db, expense_id)
    result = ExpenseOut.model_validate(expense)
    db.delete(expense)
    db.commit()
    return result
