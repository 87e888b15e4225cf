from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_estate_db as get_db
from ...crud.financials import payments_crud as crud
from ...schemas.financials.payments_schemas import (
    PaymentCreate, PaymentDeleteRequest, PaymentListResponse, PaymentOut, PaymentRequest
)

router = APIRouter(
    prefix="/api/payments",
    tags=["payments"],
)


@router.get("", response_model=PaymentListResponse)
def get_payments(
    params: PaymentRequest = Depends(),
    db: Session = Depends(get_db),
):
    return crud.get_list(db, params)


@router.post("", response_model=PaymentOut, status_code=201)
def record_payment(payload: PaymentCreate, db: Session = Depends(get_db)):
    return crud.record_payment(db, payload)


# soft delete; the reason is kept in the deletion log
@router.delete("/{payment_id}", response_model=PaymentOut)
def delete_payment(
    payment_id: int,
    payload: PaymentDeleteRequest,
    db: Session = Depends(get_db),
):
    return crud.soft_delete_payment(db, payment_id, payload.reason)
