from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

from shopledger.services.aggregation import MonthlyAggregate, ReportSummary
from shopledger.services.records import ExpenseRecord, LedgerRow


class LedgerRowOut(BaseModel):
    id: int | str | None
    source: Literal["bill", "cache"]
    date: datetime | None
    gsm: str
    description: str
    qty: int
    price: Decimal
    cost: Decimal
    profit_per_piece: Decimal
    profit: Decimal

    @classmethod
    def from_row(cls, row: LedgerRow) -> "LedgerRowOut":
        return cls(
            id=row.id,
            source=row.source,
            date=row.date,
            gsm=row.gsm,
            description=row.description,
            qty=row.qty,
            price=row.price,
            cost=row.cost,
            profit_per_piece=row.profit_per_piece,
            profit=row.profit,
        )


class ExpenseRowOut(BaseModel):
    id: int | str | None
    item: str
    qty: int
    amount: Decimal
    created_at: datetime | None

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "ExpenseRowOut":
        return cls(
            id=record.id,
            item=record.item,
            qty=record.qty,
            amount=record.amount,
            created_at=record.created_at,
        )


class MonthlyAggregateOut(BaseModel):
    month: str
    label: str
    profit: Decimal
    expense: Decimal
    net: Decimal

    @classmethod
    def from_bucket(cls, bucket: MonthlyAggregate) -> "MonthlyAggregateOut":
        return cls(
            month=bucket.month,
            label=bucket.label,
            profit=bucket.profit,
            expense=bucket.expense,
            net=bucket.net,
        )


class ReportSummaryOut(BaseModel):
    total_profit: Decimal
    total_expense: Decimal
    net_total: Decimal
    total_sales: Decimal
    ledger_rows: int
    expense_rows: int

    @classmethod
    def from_summary(cls, summary: ReportSummary) -> "ReportSummaryOut":
        return cls(
            total_profit=summary.total_profit,
            total_expense=summary.total_expense,
            net_total=summary.net_total,
            total_sales=summary.total_sales,
            ledger_rows=summary.ledger_rows,
            expense_rows=summary.expense_rows,
        )


class ReportFiltersIn(BaseModel):
    from_date: str | None = None
    to_date: str | None = None
    description: str | None = None
    category: str | None = None
    gsm: str | None = None


class ProfitReportOut(BaseModel):
    filters: ReportFiltersIn
    summary: ReportSummaryOut
    monthly: list[MonthlyAggregateOut]
    ledger: list[LedgerRowOut]
    expenses: list[ExpenseRowOut]
    warnings: list[str]


class ReportFilterOptionsOut(BaseModel):
    descriptions: list[str]
    categories: list[str]
    gsm_numbers: list[str]
