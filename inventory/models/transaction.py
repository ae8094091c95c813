import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory.database import Base


class TransactionType(str, PyEnum):
    IN = "IN"
    OUT = "OUT"


class Transaction(Base):
    """One stock movement. Its delta is applied to the product exactly once."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id: Mapped[str] = mapped_column(String, ForeignKey("products.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False, index=True)
    supplier_id: Mapped[str | None] = mapped_column(String, ForeignKey("suppliers.id"), nullable=True)

    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    reference_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Set once on insert
    transaction_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, index=True)

    product: Mapped["Product"] = relationship("Product")
    user: Mapped["User"] = relationship("User")
    supplier: Mapped[Optional["Supplier"]] = relationship("Supplier")

    @property
    def product_name(self) -> str:
        return self.product.name if self.product else ""

    @property
    def username(self) -> str:
        return self.user.username if self.user else ""

    @property
    def supplier_name(self) -> str | None:
        return self.supplier.name if self.supplier else None

    def recompute_total(self) -> None:
        self.total_price = Decimal(self.quantity) * Decimal(self.unit_price)


from inventory.models.product import Product  # noqa: E402, F401
from inventory.models.supplier import Supplier  # noqa: E402, F401
from inventory.models.user import User  # noqa: E402, F401
