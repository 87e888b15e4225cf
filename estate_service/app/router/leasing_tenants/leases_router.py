from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from shared.core.database import get_estate_db as get_db
from ...crud.financials import ledger_crud, rent_invoices_crud, settlement_crud
from ...crud.leasing_tenants import leases_crud as crud
from ...crud.leasing_tenants import rent_adjustments_crud
from ...schemas.financials.ledger_schemas import LedgerOut
from ...schemas.financials.settlement_schemas import SettlementRequest, SettlementResult, TerminationOut
from ...schemas.leasing_tenants.leases_schemas import (
    LeaseCreate, LeaseListResponse, LeaseOut, LeaseRequest, LeaseUpdate, PaymentFormData,
    RentAdjustmentCreate, RentAdjustmentOut, RentInvoiceOut
)

router = APIRouter(
    prefix="/api/leases",
    tags=["leases"],
)


@router.get("", response_model=LeaseListResponse)
def get_leases(
    params: LeaseRequest = Depends(),
    db: Session = Depends(get_db),
):
    return crud.get_list(db, params)


@router.post("", response_model=LeaseOut, status_code=201)
def create_lease(
    payload: LeaseCreate,
    db: Session = Depends(get_db),
):
    try:
        return crud.create_lease(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("", response_model=LeaseOut)
def update_lease(
    payload: LeaseUpdate,
    db: Session = Depends(get_db),
):
    try:
        return crud.update_lease(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{lease_id}", response_model=LeaseOut)
def get_lease(lease_id: int, db: Session = Depends(get_db)):
    return crud.get_lease(db, lease_id)


# ----------------------------------------------------
# Invoices
# ----------------------------------------------------
@router.post("/{lease_id}/regenerate-invoices", response_model=List[RentInvoiceOut])
def regenerate_invoices(lease_id: int, db: Session = Depends(get_db)):
    invoices = rent_invoices_crud.regenerate_invoices(db, lease_id)
    return [RentInvoiceOut.model_validate(inv) for inv in invoices]


@router.get("/{lease_id}/invoices", response_model=List[RentInvoiceOut])
def get_invoices(lease_id: int, db: Session = Depends(get_db)):
    return rent_invoices_crud.get_invoices(db, lease_id)


@router.get("/{lease_id}/ledger", response_model=LedgerOut)
def get_lease_ledger(lease_id: int, db: Session = Depends(get_db)):
    return ledger_crud.build_lease_ledger(db, lease_id)


@router.get("/{lease_id}/payment-form-data", response_model=PaymentFormData)
def get_payment_form_data(lease_id: int, db: Session = Depends(get_db)):
    return crud.get_payment_form_data(db, lease_id)


# ----------------------------------------------------
# Rent adjustments
# ----------------------------------------------------
@router.get("/{lease_id}/rent-adjustments", response_model=List[RentAdjustmentOut])
def get_rent_adjustments(lease_id: int, db: Session = Depends(get_db)):
    return rent_adjustments_crud.get_rent_adjustments(db, lease_id)


@router.post("/{lease_id}/rent-adjustments", response_model=RentAdjustmentOut, status_code=201)
def create_rent_adjustment(
    lease_id: int,
    payload: RentAdjustmentCreate,
    db: Session = Depends(get_db),
):
    try:
        return rent_adjustments_crud.create_rent_adjustment(db, lease_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ----------------------------------------------------
# Settlement
# ----------------------------------------------------
@router.get("/{lease_id}/settlement", response_model=SettlementResult)
def get_settlement(
    lease_id: int,
    use_security_deposit: bool = Query(False),
    transfer_amount: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return settlement_crud.compute_settlement(
        db, lease_id, use_security_deposit, transfer_amount)


@router.patch("/{lease_id}/terminate", response_model=TerminationOut)
def terminate_lease(
    lease_id: int,
    payload: SettlementRequest,
    db: Session = Depends(get_db),
):
    return settlement_crud.terminate_lease_summary(db, lease_id, payload)
