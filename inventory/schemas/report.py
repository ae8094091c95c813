from decimal import Decimal

from pydantic import BaseModel


class StockReportRow(BaseModel):
    product_id: str
    product_name: str
    category: str | None
    sku: str | None
    current_stock: int
    minimum_stock: int
    price_in: Decimal
    price_out: Decimal
    supplier_name: str | None
    low_stock: bool
    stock_value: Decimal
