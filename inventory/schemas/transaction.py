from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from inventory.models.transaction import TransactionType


class TransactionCreate(BaseModel):
    product_id: str
    type: TransactionType
    quantity: int = Field(ge=1)
    # Defaults to the product's price_in (IN) or price_out (OUT)
    unit_price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    supplier_id: str | None = None
    # Defaults to the authenticated caller
    user_id: str | None = None
    notes: str | None = Field(default=None, max_length=500)
    reference_number: str | None = Field(default=None, max_length=50)


class TransactionUpdate(BaseModel):
    quantity: int = Field(ge=1)
    # Keeps the price frozen at creation when omitted
    unit_price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    supplier_id: str | None = None
    notes: str | None = Field(default=None, max_length=500)
    reference_number: str | None = Field(default=None, max_length=50)


class TransactionOut(BaseModel):
    id: str
    product_id: str
    product_name: str
    type: TransactionType
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    supplier_id: str | None
    supplier_name: str | None = None
    user_id: str
    username: str
    notes: str | None
    reference_number: str | None
    transaction_date: datetime

    model_config = {"from_attributes": True}


class TransactionSummaryOut(BaseModel):
    date: date
    period: str = "DAILY"
    total_transactions: int
    in_transactions: int
    out_transactions: int
    total_in_value: Decimal
    total_out_value: Decimal
    net_value: Decimal
