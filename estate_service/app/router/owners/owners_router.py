from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.database import get_estate_db as get_db
from ...crud.owners import owner_reports_crud, owners_crud as crud
from ...schemas.owners.owners_schemas import (
    OwnerCreate, OwnerDetailsOut, OwnerOut, OwnerOutstandingOut, OwnerStatementOut,
    OwnerStatementRequest
)

router = APIRouter(
    prefix="/api/owners",
    tags=["owners"],
)


@router.get("", response_model=List[OwnerOut])
def get_owners(db: Session = Depends(get_db)):
    return crud.get_owners(db)


@router.post("", response_model=OwnerOut, status_code=201)
def create_owner(payload: OwnerCreate, db: Session = Depends(get_db)):
    return crud.create_owner(db, payload)


@router.get("/{owner_id}/statement", response_model=OwnerStatementOut)
def get_owner_statement(
    owner_id: int,
    params: OwnerStatementRequest = Depends(),
    db: Session = Depends(get_db),
):
    return owner_reports_crud.get_owner_statement(
        db, owner_id, params.start_date, params.end_date)


@router.get("/{owner_id}/outstanding", response_model=OwnerOutstandingOut)
def get_owner_outstanding(
    owner_id: int,
    limit: int = Query(5, ge=1),
    db: Session = Depends(get_db),
):
    return owner_reports_crud.get_owner_outstanding(db, owner_id, limit)


@router.get("/{owner_id}/details", response_model=OwnerDetailsOut)
def get_owner_details(owner_id: int, db: Session = Depends(get_db)):
    return owner_reports_crud.get_owner_details(db, owner_id)
