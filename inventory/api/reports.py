from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from inventory.api.auth import get_current_user
from inventory.database import get_db
from inventory.schemas.report import StockReportRow
from inventory.schemas.transaction import TransactionSummaryOut
from inventory.services import product_service, transaction_service

router = APIRouter(prefix="/reports", tags=["Reports"], dependencies=[Depends(get_current_user)])


@router.get("/stock", response_model=list[StockReportRow])
def stock_report(db: Session = Depends(get_db)):
    return product_service.stock_report(db)


@router.get("/summary", response_model=list[TransactionSummaryOut])
def transaction_summary(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
):
    if end_date < start_date:
        raise HTTPException(400, "end_date must not be before start_date")
    return transaction_service.transaction_summary(db, start_date, end_date)
