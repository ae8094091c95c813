from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from inventory.api.auth import get_current_user, require_admin
from inventory.database import get_db
from inventory.schemas.product import ProductCreate, ProductOut, ProductUpdate
from inventory.services import product_service

router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[ProductOut])
def list_products(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return product_service.list_products(db, skip=skip, limit=limit)


@router.get("/active", response_model=list[ProductOut])
def list_active_products(db: Session = Depends(get_db)):
    return product_service.list_active_products(db)


@router.get("/low-stock", response_model=list[ProductOut])
def low_stock(db: Session = Depends(get_db)):
    return product_service.get_low_stock(db)


@router.get("/categories", response_model=list[str])
def categories(db: Session = Depends(get_db)):
    return product_service.list_categories(db)


@router.get("/search", response_model=list[ProductOut])
def search_products(keyword: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return product_service.search_products(db, keyword)


@router.get("/category/{category}", response_model=list[ProductOut])
def products_by_category(category: str, db: Session = Depends(get_db)):
    return product_service.list_by_category(db, category)


@router.get("/supplier/{supplier_id}", response_model=list[ProductOut])
def products_by_supplier(supplier_id: str, db: Session = Depends(get_db)):
    return product_service.list_by_supplier(db, supplier_id)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = product_service.get_product(db, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product


@router.post("", response_model=ProductOut, status_code=201, dependencies=[Depends(require_admin)])
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    return product_service.create_product(db, data)


@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_product(product_id: str, data: ProductUpdate, db: Session = Depends(get_db)):
    product = product_service.update_product(db, product_id, data)
    if not product:
        raise HTTPException(404, "Product not found")
    return product


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: str, db: Session = Depends(get_db)):
    if not product_service.delete_product(db, product_id):
        raise HTTPException(404, "Product not found")
