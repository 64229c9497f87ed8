from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

StockUnit = Literal["piece", "kg", "litre", "set", "box"]
BillStatus = Literal["Pending", "Paid", "Unpaid"]


class StockCreate(BaseModel):
    gsm_number: str = Field(min_length=1, max_length=64)
    category: str | None = Field(default=None, max_length=120)
    description: str | None = None
    manufacturer: str | None = Field(default=None, max_length=160)
    stock: int = Field(default=0, ge=0)
    cost_price: Decimal | None = Field(default=None, ge=0)
    selling_price: Decimal = Field(default=Decimal("0"), ge=0)
    minimum_stock: int = Field(default=0, ge=0)
    unit: StockUnit = "piece"
    kg: Decimal | None = Field(default=None, gt=0)
    amount: Decimal | None = Field(default=None, gt=0)


class StockUpdate(BaseModel):
    gsm_number: str | None = Field(default=None, min_length=1, max_length=64)
    category: str | None = Field(default=None, max_length=120)
    description: str | None = None
    manufacturer: str | None = Field(default=None, max_length=160)
    stock: int | None = Field(default=None, ge=0)
    cost_price: Decimal | None = Field(default=None, ge=0)
    selling_price: Decimal | None = Field(default=None, ge=0)
    minimum_stock: int | None = Field(default=None, ge=0)
    unit: StockUnit | None = None
    kg: Decimal | None = Field(default=None, gt=0)
    amount: Decimal | None = Field(default=None, gt=0)


class StockOut(BaseModel):
    id: int
    gsm_number: str
    category: str | None
    description: str | None
    manufacturer: str | None
    stock: int
    cost_price: Decimal | None
    selling_price: Decimal
    minimum_stock: int
    unit: str
    kg: Decimal | None
    amount: Decimal | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StockSummaryOut(BaseModel):
    total_parts: int
    inventory_value: Decimal
    average_value: Decimal
    low_stock_count: int


class BillItemCreate(BaseModel):
    gsm_number: str = Field(min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=255)
    quantity: int = Field(gt=0)
    price: Decimal = Field(gt=0)
    cost_price: Decimal | None = Field(default=None, ge=0)


class BillCreate(BaseModel):
    customer_name: str = Field(min_length=1, max_length=160)
    payment_mode: str | None = Field(default=None, max_length=40)
    status: BillStatus = "Pending"
    bill_date: datetime | None = None
    items: list[BillItemCreate] = Field(min_length=1)


class BillUpdate(BaseModel):
    customer_name: str | None = Field(default=None, min_length=1, max_length=160)
    payment_mode: str | None = Field(default=None, max_length=40)
    status: BillStatus | None = None
    bill_date: datetime | None = None


class BillItemOut(BaseModel):
    id: int
    bill_id: int
    gsm_number: str
    description: str
    quantity: int
    price: Decimal
    cost_price: Decimal | None
    total: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class BillOut(BaseModel):
    id: int
    bill_number: str
    customer_name: str
    payment_mode: str | None
    status: str
    bill_date: datetime
    subtotal: Decimal


class BillDetailOut(BillOut):
    items: list[BillItemOut]


class ExpenseCreate(BaseModel):
    item: str = Field(min_length=1, max_length=160)
    qty: int = Field(default=1, gt=0)
    amount: Decimal = Field(gt=0)
    created_at: datetime | None = None


class ExpenseUpdate(BaseModel):
    item: str | None = Field(default=None, min_length=1, max_length=160)
    qty: int | None = Field(default=None, gt=0)
    amount: Decimal | None = Field(default=None, gt=0)
    created_at: datetime | None = None


class ExpenseOut(BaseModel):
    id: int
    item: str
    qty: int
    amount: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class ExpenseSummaryOut(BaseModel):
    count: int
    total_amount: Decimal


class ProfitLedgerEntryIn(BaseModel):
    bill_item_id: int | None = None
    entry_date: datetime
    gsm_number: str = Field(min_length=1, max_length=64)
    description: str = Field(default="", max_length=255)
    quantity: int = Field(default=1, gt=0)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    cost: Decimal = Field(default=Decimal("0"), ge=0)


class ProfitLedgerEntryOut(BaseModel):
    id: int
    bill_item_id: int | None
    entry_date: datetime | None
    gsm_number: str
    description: str
    quantity: int
    price: Decimal
    cost: Decimal
    profit: Decimal
    synced_at: datetime


class BulkInsertRequest(BaseModel):
    rows: list[ProfitLedgerEntryIn]


class BulkInsertResult(BaseModel):
    received: int
    inserted: int
    skipped: int
