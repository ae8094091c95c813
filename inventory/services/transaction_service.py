import logging
from collections import defaultdict
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy.orm import Session

from inventory.database import unit_of_work
from inventory.exceptions import NotFoundError
from inventory.models.product import Product
from inventory.models.supplier import Supplier
from inventory.models.transaction import Transaction, TransactionType
from inventory.models.user import User
from inventory.schemas.transaction import TransactionCreate, TransactionSummaryOut, TransactionUpdate
from inventory.services import stock_ledger

logger = logging.getLogger(__name__)


def _require_product(db: Session, product_id: str) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    return product


def _require_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def _require_supplier(db: Session, supplier_id: str) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise NotFoundError("Supplier not found")
    return supplier


def _require_transaction(db: Session, txn_id: str) -> Transaction:
    txn = get_transaction(db, txn_id)
    if not txn:
        raise NotFoundError("Transaction not found")
    return txn


def default_unit_price(product: Product, txn_type: TransactionType) -> Decimal:
    return product.price_in if txn_type == TransactionType.IN else product.price_out


def create_transaction(db: Session, data: TransactionCreate, user_id: str) -> Transaction:
    """Record a movement and book its delta against the product's stock.

    ``user_id`` is the author; ``data.user_id`` overrides it when given.
    """
    with unit_of_work(db):
        product = _require_product(db, data.product_id)
        user = _require_user(db, data.user_id or user_id)
        supplier = _require_supplier(db, data.supplier_id) if data.supplier_id else None

        # Frozen into the record so later product price changes don't rewrite history
        unit_price = data.unit_price if data.unit_price is not None else default_unit_price(product, data.type)

        stock_ledger.check_feasible(product.stock, data.type, data.quantity)

        txn = Transaction(
            product_id=product.id,
            user_id=user.id,
            supplier_id=supplier.id if supplier else None,
            type=data.type,
            quantity=data.quantity,
            unit_price=unit_price,
            notes=data.notes,
            reference_number=data.reference_number,
            transaction_date=datetime.now(),
        )
        txn.recompute_total()
        db.add(txn)
        db.flush()

        stock_ledger.apply(db, product, data.type, data.quantity)

    db.refresh(txn)
    logger.info("Created %s transaction %s for product %s by %s", txn.type.value, txn.id, product.id, user.username)
    return txn


def update_transaction(db: Session, txn_id: str, data: TransactionUpdate) -> Transaction:
    """Re-book an edited transaction: reverse the old delta, then apply the new one.

    Product and type never change. A failed feasibility check rolls the
    reversal back along with everything else.
    """
    with unit_of_work(db):
        txn = _require_transaction(db, txn_id)
        supplier = _require_supplier(db, data.supplier_id) if data.supplier_id else None
        product = txn.product

        stock_ledger.reverse(db, product, txn.type, txn.quantity)

        txn.quantity = data.quantity
        if data.unit_price is not None:
            txn.unit_price = data.unit_price
        txn.notes = data.notes
        txn.reference_number = data.reference_number
        if supplier:
            txn.supplier_id = supplier.id
        txn.recompute_total()
        db.flush()

        stock_ledger.apply(db, product, txn.type, txn.quantity)

    db.refresh(txn)
    logger.info("Updated transaction %s: %s %d", txn.id, txn.type.value, txn.quantity)
    return txn


def delete_transaction(db: Session, txn_id: str) -> None:
    with unit_of_work(db):
        txn = _require_transaction(db, txn_id)
        stock_ledger.reverse(db, txn.product, txn.type, txn.quantity)
        db.delete(txn)
    logger.info("Deleted transaction %s", txn_id)


def get_transaction(db: Session, txn_id: str) -> Transaction | None:
    return db.query(Transaction).filter(Transaction.id == txn_id).first()


def list_transactions(db: Session, skip: int = 0, limit: int = 100) -> list[Transaction]:
    return (
        db.query(Transaction)
        .order_by(Transaction.transaction_date.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_by_product(db: Session, product_id: str) -> list[Transaction]:
    return (
        db.query(Transaction)
        .filter(Transaction.product_id == product_id)
        .order_by(Transaction.transaction_date.desc())
        .all()
    )


def list_by_user(db: Session, user_id: str) -> list[Transaction]:
    return (
        db.query(Transaction)
        .filter(Transaction.user_id == user_id)
        .order_by(Transaction.transaction_date.desc())
        .all()
    )


def list_by_type(db: Session, txn_type: TransactionType) -> list[Transaction]:
    return (
        db.query(Transaction)
        .filter(Transaction.type == txn_type)
        .order_by(Transaction.transaction_date.desc())
        .all()
    )


def _day_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    return datetime.combine(start_date, time.min), datetime.combine(end_date, time.max)


def list_by_date_range(db: Session, start_date: date, end_date: date) -> list[Transaction]:
    start, end = _day_bounds(start_date, end_date)
    return (
        db.query(Transaction)
        .filter(Transaction.transaction_date >= start, Transaction.transaction_date <= end)
        .order_by(Transaction.transaction_date.desc())
        .all()
    )


def transaction_summary(db: Session, start_date: date, end_date: date) -> list[TransactionSummaryOut]:
    """Daily counts and values of IN/OUT movements, oldest day first."""
    days: dict[date, dict] = defaultdict(
        lambda: {"total": 0, "in": 0, "out": 0, "in_value": Decimal("0"), "out_value": Decimal("0")}
    )
    for txn in list_by_date_range(db, start_date, end_date):
        day = days[txn.transaction_date.date()]
        day["total"] += 1
        if txn.type == TransactionType.IN:
            day["in"] += 1
            day["in_value"] += txn.total_price
        else:
            day["out"] += 1
            day["out_value"] += txn.total_price

    return [
        TransactionSummaryOut(
            date=d,
            total_transactions=v["total"],
            in_transactions=v["in"],
            out_transactions=v["out"],
            total_in_value=v["in_value"],
            total_out_value=v["out_value"],
            net_value=v["in_value"] - v["out_value"],
        )
        for d, v in sorted(days.items())
    ]
