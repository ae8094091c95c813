"""Stock bookkeeping for inventory transactions.

A transaction's delta is +quantity for IN and -quantity for OUT. ``apply``
adds that delta to the product's stock, ``reverse`` subtracts it again; the
transaction service uses the pair to re-book edits and deletions.

Stock is written with an in-database increment (``stock = stock + delta``)
rather than by saving a value computed in Python, so two requests moving the
same product cannot overwrite each other's update. OUT applies carry a
``stock >= quantity`` guard on the same statement.

Neither function commits; callers run them inside ``unit_of_work``.
"""

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from inventory.exceptions import InsufficientStockError
from inventory.models.product import Product
from inventory.models.transaction import TransactionType

logger = logging.getLogger(__name__)


def stock_delta(txn_type: TransactionType, quantity: int) -> int:
    return quantity if txn_type == TransactionType.IN else -quantity


def check_feasible(stock: int, txn_type: TransactionType, quantity: int) -> None:
    """Raise InsufficientStockError if an OUT movement would overdraw ``stock``."""
    if txn_type == TransactionType.OUT and quantity > stock:
        raise InsufficientStockError(available=stock, requested=quantity)


def _increment_stock(db: Session, product: Product, delta: int, minimum: int | None = None) -> bool:
    stmt = update(Product).where(Product.id == product.id).values(stock=Product.stock + delta)
    if minimum is not None:
        stmt = stmt.where(Product.stock >= minimum)
    result = db.execute(stmt.execution_options(synchronize_session=False))
    # Pick up the stored value, including changes made by other requests
    db.refresh(product, attribute_names=["stock"])
    return result.rowcount > 0


def apply(db: Session, product: Product, txn_type: TransactionType, quantity: int) -> Product:
    """Book a movement against ``product`` and return it with the new stock."""
    check_feasible(product.stock, txn_type, quantity)
    before = product.stock
    delta = stock_delta(txn_type, quantity)
    minimum = quantity if txn_type == TransactionType.OUT else None
    if not _increment_stock(db, product, delta, minimum):
        # Stock was drained by a concurrent request after we read it
        raise InsufficientStockError(available=product.stock, requested=quantity)
    logger.info(
        "Applied %s %d to product %s: stock %d -> %d",
        txn_type.value, quantity, product.id, before, product.stock,
    )
    return product


def reverse(db: Session, product: Product, txn_type: TransactionType, quantity: int) -> Product:
    """Undo a previously applied movement. No feasibility check is made."""
    before = product.stock
    _increment_stock(db, product, -stock_delta(txn_type, quantity))
    logger.info(
        "Reversed %s %d on product %s: stock %d -> %d",
        txn_type.value, quantity, product.id, before, product.stock,
    )
    return product
