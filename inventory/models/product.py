import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory.database import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    sku: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    price_in: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_out: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Only moved by the stock ledger, never by product edits
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    minimum_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    supplier_id: Mapped[str | None] = mapped_column(String, ForeignKey("suppliers.id"), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    supplier: Mapped[Optional["Supplier"]] = relationship("Supplier", back_populates="products")

    @property
    def supplier_name(self) -> str | None:
        return self.supplier.name if self.supplier else None

    @property
    def low_stock(self) -> bool:
        return self.stock <= self.minimum_stock


from inventory.models.supplier import Supplier  # noqa: E402, F401
