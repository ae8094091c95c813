from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category: str | None = Field(default=None, max_length=50)
    sku: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=500)
    price_in: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    price_out: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)  # opening stock
    minimum_stock: int = Field(default=0, ge=0)
    supplier_id: str | None = None


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    category: str | None = Field(default=None, max_length=50)
    sku: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=500)
    price_in: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    price_out: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    minimum_stock: int | None = Field(default=None, ge=0)
    supplier_id: str | None = None
    active: bool | None = None


class ProductOut(BaseModel):
    id: str
    name: str
    category: str | None
    sku: str | None
    description: str | None
    price_in: Decimal
    price_out: Decimal
    stock: int
    minimum_stock: int
    supplier_id: str | None
    supplier_name: str | None = None
    low_stock: bool
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
