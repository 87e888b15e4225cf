from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_estate_db as get_db
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.financials import rent_invoices_crud
from ...crud.scheduler import scheduler_service

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
)


@router.post("/recalculate-fifo")
def recalculate_fifo(db: Session = Depends(get_db)):
    result = rent_invoices_crud.recalculate_all(db)
    return success_response(
        data=result,
        message=f"Recalculated FIFO for {result['processed']} leases",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )


@router.post("/nightly-billing")
def run_nightly_billing(db: Session = Depends(get_db)):
    return success_response(
        data=scheduler_service.process_nightly_billing(db),
        message="Lease statuses refreshed and invoices synced",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )
