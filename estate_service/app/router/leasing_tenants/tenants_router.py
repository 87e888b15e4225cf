from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_estate_db as get_db
from ...crud.financials import ledger_crud
from ...crud.leasing_tenants import tenants_crud as crud
from ...schemas.financials.ledger_schemas import LedgerOut
from ...schemas.leasing_tenants.tenants_schemas import (
    TenantCreate, TenantListResponse, TenantOut, TenantRequest, TenantWithDues
)

router = APIRouter(
    prefix="/api/tenants",
    tags=["tenants"],
)


@router.get("", response_model=TenantListResponse)
def get_tenants(
    params: TenantRequest = Depends(),
    db: Session = Depends(get_db),
):
    return crud.get_list(db, params)


@router.post("", response_model=TenantOut, status_code=201)
def create_tenant(payload: TenantCreate, db: Session = Depends(get_db)):
    return crud.create_tenant(db, payload)


@router.get("/{tenant_id}", response_model=TenantWithDues)
def get_tenant(tenant_id: int, db: Session = Depends(get_db)):
    return crud.get_tenant(db, tenant_id)


@router.get("/{tenant_id}/ledger", response_model=LedgerOut)
def get_tenant_ledger(tenant_id: int, db: Session = Depends(get_db)):
    return ledger_crud.build_tenant_ledger(db, tenant_id)
