import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...enum.estate_enum import LeaseStatus
from ...models.leasing_tenants.leases import Lease
from ..financials.rent_invoices_crud import regenerate_invoices
from ..leasing_tenants.leases_crud import refresh_status

logger = logging.getLogger(__name__)


def refresh_lease_statuses(db: Session, today: Optional[date] = None) -> int:
    today = today or date.today()

    try:
        leases = (
            db.query(Lease)
            .filter(Lease.status != LeaseStatus.terminated.value)
            .all()
        )
        changed = 0
        for lease in leases:
            if refresh_status(db, lease, today):
                changed += 1
                logger.info("Lease %s is now %s", lease.id, lease.status)

        db.commit()
    except Exception:
        db.rollback()
        raise

    return changed


def process_nightly_billing(db: Session, today: Optional[date] = None) -> dict:
    """Roll statuses forward and bill any month that started since the last run."""
    today = today or date.today()
    changed = refresh_lease_statuses(db, today)

    lease_ids = [
        row.id for row in
        db.query(Lease.id)
        .filter(Lease.status != LeaseStatus.terminated.value)
        .order_by(Lease.id)
        .all()
    ]

    regenerated = skipped = 0
    for lease_id in lease_ids:
        if regenerate_invoices(db, lease_id, today, skip_terminated=True) is None:
            skipped += 1
        else:
            regenerated += 1

    logger.info("Nightly billing: %s status changes, %s leases rebilled, %s skipped",
                changed, regenerated, skipped)
    return {"status_changes": changed, "leases_regenerated": regenerated, "leases_skipped": skipped}
