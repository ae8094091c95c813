import logging
from decimal import Decimal

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from inventory.exceptions import DuplicateKeyError, NotFoundError
from inventory.models.product import Product
from inventory.models.supplier import Supplier
from inventory.schemas.product import ProductCreate, ProductUpdate
from inventory.schemas.report import StockReportRow

logger = logging.getLogger(__name__)

# Explicit nulls for these are ignored on update; the rest may be cleared
_NOT_NULL_FIELDS = ("name", "price_in", "price_out", "minimum_stock", "active")


def _sku_taken(db: Session, sku: str, exclude_id: str | None = None) -> bool:
    q = db.query(Product).filter(func.lower(Product.sku) == sku.lower())
    if exclude_id:
        q = q.filter(Product.id != exclude_id)
    return q.first() is not None


def _resolve_supplier(db: Session, supplier_id: str | None) -> str | None:
    if not supplier_id:
        return None
    if not db.query(Supplier).filter(Supplier.id == supplier_id).first():
        raise NotFoundError("Supplier not found")
    return supplier_id


def create_product(db: Session, data: ProductCreate) -> Product:
    if data.sku and _sku_taken(db, data.sku):
        raise DuplicateKeyError(f"Product with SKU {data.sku} already exists")
    product = Product(
        name=data.name,
        category=data.category,
        sku=data.sku,
        description=data.description,
        price_in=data.price_in,
        price_out=data.price_out,
        stock=data.stock,
        minimum_stock=data.minimum_stock,
        supplier_id=_resolve_supplier(db, data.supplier_id),
        active=True,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s) with opening stock %d", product.id, product.name, product.stock)
    return product


def get_product(db: Session, product_id: str) -> Product | None:
    return db.query(Product).filter(Product.id == product_id).first()


def list_products(db: Session, skip: int = 0, limit: int = 100) -> list[Product]:
    return db.query(Product).order_by(Product.name).offset(skip).limit(limit).all()


def list_active_products(db: Session) -> list[Product]:
    return db.query(Product).filter(Product.active == True).order_by(Product.name).all()


def list_by_category(db: Session, category: str) -> list[Product]:
    return db.query(Product).filter(Product.active == True, Product.category == category).all()


def list_by_supplier(db: Session, supplier_id: str) -> list[Product]:
    return db.query(Product).filter(Product.active == True, Product.supplier_id == supplier_id).all()


def search_products(db: Session, keyword: str) -> list[Product]:
    pattern = f"%{keyword.lower()}%"
    return (
        db.query(Product)
        .filter(
            Product.active == True,
            or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.category).like(pattern),
                func.lower(Product.sku).like(pattern),
            ),
        )
        .all()
    )


def get_low_stock(db: Session) -> list[Product]:
    return (
        db.query(Product)
        .filter(Product.active == True, Product.stock <= Product.minimum_stock)
        .all()
    )


def list_categories(db: Session) -> list[str]:
    rows = (
        db.query(Product.category)
        .filter(Product.active == True, Product.category.is_not(None))
        .distinct()
        .order_by(Product.category)
        .all()
    )
    return [r[0] for r in rows]


def update_product(db: Session, product_id: str, data: ProductUpdate) -> Product | None:
    product = get_product(db, product_id)
    if not product:
        return None
    update_data = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k not in _NOT_NULL_FIELDS
    }
    sku = update_data.get("sku")
    if sku and _sku_taken(db, sku, exclude_id=product.id):
        raise DuplicateKeyError(f"Product with SKU {sku} already exists")
    if "supplier_id" in update_data:
        update_data["supplier_id"] = _resolve_supplier(db, update_data["supplier_id"])
    for field, value in update_data.items():
        setattr(product, field, value)
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: str) -> bool:
    """Soft delete: the product keeps its transaction history."""
    product = get_product(db, product_id)
    if not product:
        return False
    product.active = False
    db.commit()
    logger.info("Deactivated product %s", product_id)
    return True


def stock_report(db: Session) -> list[StockReportRow]:
    return [
        StockReportRow(
            product_id=p.id,
            product_name=p.name,
            category=p.category,
            sku=p.sku,
            current_stock=p.stock,
            minimum_stock=p.minimum_stock,
            price_in=p.price_in,
            price_out=p.price_out,
            supplier_name=p.supplier_name,
            low_stock=p.low_stock,
            stock_value=Decimal(p.price_in) * p.stock,
        )
        for p in list_active_products(db)
    ]
