from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.database import get_estate_db as get_db
from ...crud.owners import shops_crud as crud
from shared.core.schemas import Lookup
from ...schemas.owners.owners_schemas import ShopCreate, ShopOut

router = APIRouter(
    prefix="/api/shops",
    tags=["shops"],
)


@router.get("", response_model=List[ShopOut])
def get_shops(
    status: Optional[str] = Query(None),
    owner_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return crud.get_shops(db, status, owner_id)


@router.get("/vacant-lookup", response_model=List[Lookup])
def vacant_shop_lookup(db: Session = Depends(get_db)):
    return crud.vacant_shop_lookup(db)


@router.post("", response_model=ShopOut, status_code=201)
def create_shop(payload: ShopCreate, db: Session = Depends(get_db)):
    return crud.create_shop(db, payload)
