from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from shopledger.schemas.inventory import BillStatus

ChartType = Literal["bar", "line"]


class DraftItemIn(BaseModel):
    gsm_number: str = Field(min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=255)
    quantity: int = Field(gt=0)
    price: Decimal = Field(gt=0)


class DraftItemOut(DraftItemIn):
    total: Decimal


class BillDraftOut(BaseModel):
    items: list[DraftItemOut]
    subtotal: Decimal


class BillDraftConfirm(BaseModel):
    customer_name: str = Field(min_length=1, max_length=160)
    payment_mode: str | None = Field(default=None, max_length=40)
    status: BillStatus = "Pending"


class PreferencesIn(BaseModel):
    chart_type: ChartType


class PreferencesOut(BaseModel):
    chart_type: ChartType = "bar"
