from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_estate_db as get_db
from ...crud.financials import expenses_crud as crud
from ...schemas.financials.expenses_schemas import (
    BankDepositCreate, BankDepositListResponse, BankDepositOut, BankDepositRequest,
    DeletionRequest
)

router = APIRouter(
    prefix="/api/bank-deposits",
    tags=["bank-deposits"],
)


@router.get("", response_model=BankDepositListResponse)
def get_bank_deposits(
    params: BankDepositRequest = Depends(),
    db: Session = Depends(get_db),
):
    return crud.get_bank_deposits(db, params)


@router.post("", response_model=BankDepositOut, status_code=201)
def create_bank_deposit(payload: BankDepositCreate, db: Session = Depends(get_db)):
    return crud.create_bank_deposit(db, payload)


# soft delete; the reason is kept in the deletion log
@router.delete("/{deposit_id}", response_model=BankDepositOut)
def delete_bank_deposit(
    deposit_id: int,
    payload: DeletionRequest,
    db: Session = Depends(get_db),
):
    return crud.soft_delete_bank_deposit(db, deposit_id, payload.reason)
