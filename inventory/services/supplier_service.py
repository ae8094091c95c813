from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from inventory.exceptions import DuplicateKeyError
from inventory.models.supplier import Supplier
from inventory.schemas.supplier import SupplierCreate, SupplierUpdate

_NOT_NULL_FIELDS = ("name", "active")


def _name_taken(db: Session, name: str, exclude_id: str | None = None) -> bool:
    q = db.query(Supplier).filter(func.lower(Supplier.name) == name.lower())
    if exclude_id:
        q = q.filter(Supplier.id != exclude_id)
    return q.first() is not None


def create_supplier(db: Session, data: SupplierCreate) -> Supplier:
    if _name_taken(db, data.name):
        raise DuplicateKeyError(f"Supplier '{data.name}' already exists")
    supplier = Supplier(**data.model_dump(), active=True)
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


def get_supplier(db: Session, supplier_id: str) -> Supplier | None:
    return db.query(Supplier).filter(Supplier.id == supplier_id).first()


def list_suppliers(db: Session, active_only: bool = False) -> list[Supplier]:
    q = db.query(Supplier)
    if active_only:
        q = q.filter(Supplier.active == True)
    return q.order_by(Supplier.name).all()


def search_suppliers(db: Session, keyword: str) -> list[Supplier]:
    pattern = f"%{keyword.lower()}%"
    return (
        db.query(Supplier)
        .filter(
            Supplier.active == True,
            or_(
                func.lower(Supplier.name).like(pattern),
                func.lower(Supplier.contact_person).like(pattern),
            ),
        )
        .all()
    )


def update_supplier(db: Session, supplier_id: str, data: SupplierUpdate) -> Supplier | None:
    supplier = get_supplier(db, supplier_id)
    if not supplier:
        return None
    update_data = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k not in _NOT_NULL_FIELDS
    }
    name = update_data.get("name")
    if name and _name_taken(db, name, exclude_id=supplier.id):
        raise DuplicateKeyError(f"Supplier '{name}' already exists")
    for field, value in update_data.items():
        setattr(supplier, field, value)
    db.commit()
    db.refresh(supplier)
    return supplier


def delete_supplier(db: Session, supplier_id: str) -> bool:
    supplier = get_supplier(db, supplier_id)
    if not supplier:
        return False
    supplier.active = False
    db.commit()
    return True
