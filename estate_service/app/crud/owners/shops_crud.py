from typing import List, Optional

from sqlalchemy.orm import Session

from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import error_response, invalid_input_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.estate_enum import OwnershipType, ShopStatus
from ...models.owners.owners import Owner
from ...models.owners.shops import Shop
from ...schemas.owners.owners_schemas import ShopCreate, ShopOut


def get_shops(db: Session, status: Optional[str] = None, owner_id: Optional[int] = None) -> List[ShopOut]:
    q = db.query(Shop).filter(Shop.is_deleted == False)
    if status and status.lower() != "all":
        q = q.filter(Shop.status == status)
    if owner_id:
        q = q.filter(Shop.owner_id == owner_id)
    return [ShopOut.model_validate(s) for s in q.order_by(Shop.shop_number).all()]


def create_shop(db: Session, payload: ShopCreate) -> Shop:
    if payload.ownership_type == OwnershipType.common:
        if payload.owner_id is not None:
            invalid_input_response("A common shop cannot have an owner")
    else:
        if payload.owner_id is None:
            invalid_input_response("A sole shop needs an owner")
        if not db.query(Owner).filter(Owner.id == payload.owner_id).first():
            not_found_response("Owner", payload.owner_id)

    duplicate = (
        db.query(Shop)
        .filter(Shop.shop_number == payload.shop_number,
                Shop.floor == payload.floor.value,
                Shop.is_deleted == False)
        .first()
    )
    if duplicate:
        error_response(
            message=f"Shop {payload.shop_number} already exists on the {payload.floor.value} floor",
            status_code=AppStatusCode.DUPLICATE_ADD_ERROR,
            http_status=400,
        )

    data = payload.model_dump()
    data["floor"] = payload.floor.value
    data["ownership_type"] = payload.ownership_type.value
    shop = Shop(**data, status=ShopStatus.vacant.value)
    db.add(shop)
    db.commit()
    db.refresh(shop)
    return shop


def vacant_shop_lookup(db: Session) -> List[Lookup]:
    shops = (
        db.query(Shop)
        .filter(Shop.is_deleted == False, Shop.status == ShopStatus.vacant.value)
        .order_by(Shop.floor, Shop.shop_number)
        .all()
    )
    return [Lookup(id=s.id, name=f"{s.floor.title()} - {s.shop_number}") for s in shops]
