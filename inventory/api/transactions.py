from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from inventory.api.auth import get_current_user, require_admin
from inventory.database import get_db
from inventory.models.transaction import TransactionType
from inventory.models.user import User
from inventory.schemas.transaction import TransactionCreate, TransactionOut, TransactionUpdate
from inventory.services import transaction_service

router = APIRouter(prefix="/transactions", tags=["Transactions"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[TransactionOut])
def list_transactions(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return transaction_service.list_transactions(db, skip=skip, limit=limit)


@router.get("/date-range", response_model=list[TransactionOut])
def transactions_by_date_range(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
):
    if end_date < start_date:
        raise HTTPException(400, "end_date must not be before start_date")
    return transaction_service.list_by_date_range(db, start_date, end_date)


@router.get("/product/{product_id}", response_model=list[TransactionOut])
def transactions_by_product(product_id: str, db: Session = Depends(get_db)):
    return transaction_service.list_by_product(db, product_id)


@router.get("/user/{user_id}", response_model=list[TransactionOut])
def transactions_by_user(user_id: str, db: Session = Depends(get_db)):
    return transaction_service.list_by_user(db, user_id)


@router.get("/type/{txn_type}", response_model=list[TransactionOut])
def transactions_by_type(txn_type: TransactionType, db: Session = Depends(get_db)):
    return transaction_service.list_by_type(db, txn_type)


@router.get("/{txn_id}", response_model=TransactionOut)
def get_transaction(txn_id: str, db: Session = Depends(get_db)):
    txn = transaction_service.get_transaction(db, txn_id)
    if not txn:
        raise HTTPException(404, "Transaction not found")
    return txn


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(
    data: TransactionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return transaction_service.create_transaction(db, data, user_id=user.id)


@router.put("/{txn_id}", response_model=TransactionOut, dependencies=[Depends(require_admin)])
def update_transaction(txn_id: str, data: TransactionUpdate, db: Session = Depends(get_db)):
    return transaction_service.update_transaction(db, txn_id, data)


@router.delete("/{txn_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_transaction(txn_id: str, db: Session = Depends(get_db)):
    transaction_service.delete_transaction(db, txn_id)
