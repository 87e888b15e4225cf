from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_estate_db as get_db
from ...crud.financials import expenses_crud as crud
from ...schemas.financials.expenses_schemas import (
    DeletionRequest, ExpenseCreate, ExpenseOut, ExpenseRequest
)

router = APIRouter(
    prefix="/api/expenses",
    tags=["expenses"],
)


@router.get("", response_model=List[ExpenseOut])
def get_expenses(
    params: ExpenseRequest = Depends(),
    db: Session = Depends(get_db),
):
    return crud.get_expenses(db, params)


@router.post("", response_model=ExpenseOut, status_code=201)
def create_expense(payload: ExpenseCreate, db: Session = Depends(get_db)):
    return crud.create_expense(db, payload)


# soft delete; the reason is kept in the deletion log
@router.delete("/{expense_id}", response_model=ExpenseOut)
def delete_expense(
    expense_id: int,
    payload: DeletionRequest,
    db: Session = Depends(get_db),
):
    return crud.soft_delete_expense(db, expense_id, payload.reason)
