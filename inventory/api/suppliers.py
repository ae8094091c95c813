from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from inventory.api.auth import get_current_user, require_admin
from inventory.database import get_db
from inventory.schemas.supplier import SupplierCreate, SupplierOut, SupplierUpdate
from inventory.services import supplier_service

router = APIRouter(prefix="/suppliers", tags=["Suppliers"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[SupplierOut])
def list_suppliers(db: Session = Depends(get_db)):
    return supplier_service.list_suppliers(db)


@router.get("/active", response_model=list[SupplierOut])
def list_active_suppliers(db: Session = Depends(get_db)):
    return supplier_service.list_suppliers(db, active_only=True)


@router.get("/search", response_model=list[SupplierOut])
def search_suppliers(keyword: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return supplier_service.search_suppliers(db, keyword)


@router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier(supplier_id: str, db: Session = Depends(get_db)):
    supplier = supplier_service.get_supplier(db, supplier_id)
    if not supplier:
        raise HTTPException(404, "Supplier not found")
    return supplier


@router.post("", response_model=SupplierOut, status_code=201, dependencies=[Depends(require_admin)])
def create_supplier(data: SupplierCreate, db: Session = Depends(get_db)):
    return supplier_service.create_supplier(db, data)


@router.put("/{supplier_id}", response_model=SupplierOut, dependencies=[Depends(require_admin)])
def update_supplier(supplier_id: str, data: SupplierUpdate, db: Session = Depends(get_db)):
    supplier = supplier_service.update_supplier(db, supplier_id, data)
    if not supplier:
        raise HTTPException(404, "Supplier not found")
    return supplier


@router.delete("/{supplier_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_supplier(supplier_id: str, db: Session = Depends(get_db)):
    if not supplier_service.delete_supplier(db, supplier_id):
        raise HTTPException(404, "Supplier not found")
