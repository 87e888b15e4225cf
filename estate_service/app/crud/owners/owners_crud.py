from typing import List

from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import not_found_response
from ...models.owners.owners import Owner
from ...schemas.owners.owners_schemas import OwnerCreate, OwnerOut


def get_owner_or_404(db: Session, owner_id: int) -> Owner:
    owner = db.query(Owner).filter(Owner.id == owner_id).first()
    if not owner:
        not_found_response("Owner", owner_id)
    return owner


def owner_count(db: Session) -> int:
    # common shares divide by the owners on file today
    return db.query(Owner).count()


def owner_ids(db: Session) -> List[int]:
    return [row.id for row in db.query(Owner.id).order_by(Owner.id).all()]


def get_owners(db: Session) -> List[OwnerOut]:
    return [OwnerOut.model_validate(o) for o in db.query(Owner).order_by(Owner.name).all()]


def create_owner(db: Session, payload: OwnerCreate) -> Owner:
    owner = Owner(**payload.model_dump())
    db.add(owner)
    db.commit()
    db.refresh(owner)
    return owner
