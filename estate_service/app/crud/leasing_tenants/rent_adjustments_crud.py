import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import invalid_input_response
from ...helpers.lease_lock_helper import lease_guard
from ...helpers.money_helper import to_money
from ...helpers.rent_rate_helper import resolve_rent_for_month
from ...models.leasing_tenants.rent_adjustments import RentAdjustment
from ...schemas.leasing_tenants.leases_schemas import RentAdjustmentCreate, RentAdjustmentOut
from ..financials.rent_invoices_crud import (
    apply_fifo, ensure_not_terminated, get_lease_adjustments,
    get_lease_invoices, get_lease_or_404
)

logger = logging.getLogger(__name__)


def get_rent_adjustments(db: Session, lease_id: int) -> List[RentAdjustmentOut]:
    get_lease_or_404(db, lease_id)
    rows = (
        db.query(RentAdjustment)
        .filter(RentAdjustment.lease_id == lease_id)
        .order_by(RentAdjustment.created_at.desc(), RentAdjustment.id.desc())
        .all()
    )
    return [RentAdjustmentOut.model_validate(r) for r in rows]


def create_rent_adjustment(db: Session, lease_id: int, payload: RentAdjustmentCreate,
                           today: Optional[date] = None) -> RentAdjustment:
    """
    Append a rent change and reprice the invoices it reaches.

    Invoices from the effective month on are repriced through the rent
    resolver so they match what a full regeneration would produce, then
    the lease is reallocated.
    """
    get_lease_or_404(db, lease_id)

    with lease_guard(db, [lease_id]) as leases:
        lease = leases[lease_id]
        ensure_not_terminated(lease, "adjust rent")

        existing = get_lease_adjustments(db, lease_id)
        if existing and payload.effective_date < existing[-1].effective_date:
            invalid_input_response(
                f"Effective date must be on or after the last adjustment ({existing[-1].effective_date})")

        previous_rent = to_money(lease.monthly_rent)
        new_rent = to_money(payload.new_rent)

        try:
            adjustment = RentAdjustment(
                lease_id=lease_id,
                previous_rent=previous_rent,
                new_rent=new_rent,
                adjustment_amount=new_rent - previous_rent,
                effective_date=payload.effective_date,
                agreement_terms=payload.agreement_terms,
                notes=payload.notes,
            )
            db.add(adjustment)
            lease.monthly_rent = new_rent
            db.flush()

            adjustments = existing + [adjustment]
            effective_key = (payload.effective_date.year, payload.effective_date.month)
            repriced = 0
            for inv in get_lease_invoices(db, lease_id):
                if (inv.year, inv.month) < effective_key:
                    continue
                inv.amount = resolve_rent_for_month(lease, adjustments, inv.year, inv.month)
                # paid_amount may now exceed amount until FIFO runs
                inv.paid_amount = 0
                inv.is_paid = False
                repriced += 1
            db.flush()

            apply_fifo(db, lease, today)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(adjustment)
    logger.info("Rent for lease %s changed %s -> %s from %s, repriced %s invoices",
                lease_id, previous_rent, new_rent, payload.effective_date, repriced)
    return adjustment
