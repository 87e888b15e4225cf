from decimal import Decimal

from fastapi import APIRouter, HTTPException, Query

from ...helpers.common_share_helper import allocate_common_share
from ...schemas.owners.owners_schemas import CommonShareOut

router = APIRouter(
    prefix="/api/common-share",
    tags=["owners"],
)


@router.get("", response_model=CommonShareOut)
def get_common_share(
    amount: Decimal = Query(...),
    owner_count: int = Query(...),
):
    try:
        share = allocate_common_share(amount, owner_count)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CommonShareOut(full_amount=amount, owner_count=owner_count, share=share)
