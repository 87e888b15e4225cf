import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import (
    invalid_input_response, lease_terminated_response, not_found_response
)
from ...enum.estate_enum import LeaseStatus
from ...helpers.fifo_helper import allocate_fifo, lease_credit_postings, total_credits
from ...helpers.invoice_schedule_helper import build_invoice_schedule, filter_elapsed_invoices
from ...helpers.lease_lock_helper import lease_guard
from ...helpers.settlement_helper import compute_lease_due
from ...models.financials.ledger_transfers import LedgerTransfer
from ...models.financials.payments import Payment
from ...models.financials.rent_invoices import RentInvoice
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.rent_adjustments import RentAdjustment
from ...schemas.leasing_tenants.leases_schemas import RentInvoiceOut

logger = logging.getLogger(__name__)


# ----------------------------------------------------
# Lookups
# ----------------------------------------------------
def get_lease_or_404(db: Session, lease_id: int) -> Lease:
    lease = db.query(Lease).filter(Lease.id == lease_id).first()
    if not lease:
        not_found_response("Lease", lease_id)
    return lease


def ensure_not_terminated(lease: Lease, action: str):
    if lease.status == LeaseStatus.terminated.value:
        logger.warning("Rejected %s on terminated lease %s", action, lease.id)
        lease_terminated_response(lease.id, action)


def get_lease_invoices(db: Session, lease_id: int) -> List[RentInvoice]:
    return (
        db.query(RentInvoice)
        .filter(RentInvoice.lease_id == lease_id)
        .order_by(RentInvoice.year, RentInvoice.month)
        .all()
    )


def get_lease_adjustments(db: Session, lease_id: int) -> List[RentAdjustment]:
    return (
        db.query(RentAdjustment)
        .filter(RentAdjustment.lease_id == lease_id)
        .order_by(RentAdjustment.effective_date, RentAdjustment.id)
        .all()
    )


def get_lease_payments(db: Session, lease_id: int, include_deleted: bool = False) -> List[Payment]:
    q = db.query(Payment).filter(Payment.lease_id == lease_id)
    if not include_deleted:
        q = q.filter(Payment.is_deleted == False)
    return q.order_by(Payment.payment_date, Payment.id).all()


def get_lease_transfers(db: Session, lease_id: int) -> List[LedgerTransfer]:
    return (
        db.query(LedgerTransfer)
        .filter(or_(
            LedgerTransfer.source_lease_id == lease_id,
            LedgerTransfer.target_lease_id == lease_id,
        ))
        .order_by(LedgerTransfer.transfer_date, LedgerTransfer.id)
        .all()
    )


def get_lease_postings(db: Session, lease_id: int):
    return lease_credit_postings(
        lease_id,
        get_lease_payments(db, lease_id),
        get_lease_transfers(db, lease_id),
    )


# ----------------------------------------------------
# FIFO
# ----------------------------------------------------
def apply_fifo(db: Session, lease: Lease, today: Optional[date] = None) -> List[RentInvoice]:
    """Write FIFO allocation onto the lease's invoices; caller commits."""
    invoices = filter_elapsed_invoices(get_lease_invoices(db, lease.id), today)
    credit = total_credits(get_lease_postings(db, lease.id))

    by_id = {inv.id: inv for inv in invoices}
    for allocation in allocate_fifo(invoices, credit):
        inv = by_id[allocation.invoice_id]
        inv.is_paid = allocation.is_paid
        inv.paid_amount = allocation.paid_amount

    db.flush()
    return invoices


def _skip_if_terminated(lease: Lease, action: str) -> bool:
    if lease.status != LeaseStatus.terminated.value:
        return False
    logger.warning("Skipped %s on lease %s, terminated during the run", action, lease.id)
    return True


def recalculate_fifo(db: Session, lease_id: int, today: Optional[date] = None,
                     skip_terminated: bool = False) -> Optional[List[RentInvoice]]:
    """With skip_terminated a terminated lease returns None instead of a 409."""
    get_lease_or_404(db, lease_id)

    with lease_guard(db, [lease_id]) as leases:
        lease = leases[lease_id]
        if skip_terminated and _skip_if_terminated(lease, "recalculate payments"):
            return None
        ensure_not_terminated(lease, "recalculate payments")
        try:
            invoices = apply_fifo(db, lease, today)
            db.commit()
        except Exception:
            db.rollback()
            raise

    return invoices


def recalculate_all(db: Session, today: Optional[date] = None) -> dict:
    """Re-run FIFO on every lease that is not terminated."""
    lease_ids = [
        row.id for row in
        db.query(Lease.id)
        .filter(Lease.status != LeaseStatus.terminated.value)
        .order_by(Lease.id)
        .all()
    ]

    processed = skipped = 0
    for lease_id in lease_ids:
        if recalculate_fifo(db, lease_id, today, skip_terminated=True) is None:
            skipped += 1
        else:
            processed += 1

    logger.info("Recalculated FIFO for %s leases, skipped %s", processed, skipped)
    return {"processed": processed, "skipped": skipped}


# ----------------------------------------------------
# Invoice generation
# ----------------------------------------------------
def replace_invoices(db: Session, lease: Lease, today: Optional[date] = None) -> List[RentInvoice]:
    """Delete and rebuild every invoice of the lease, then reallocate. Caller commits."""
    try:
        drafts = build_invoice_schedule(
            lease, get_lease_adjustments(db, lease.id), today)
    except ValueError as e:
        invalid_input_response(str(e))

    db.query(RentInvoice).filter(RentInvoice.lease_id == lease.id).delete(
        synchronize_session="fetch")
    db.flush()

    for draft in drafts:
        db.add(RentInvoice(
            lease_id=lease.id,
            tenant_id=lease.tenant_id,
            amount=draft.amount,
            due_date=draft.due_date,
            month=draft.month,
            year=draft.year,
            is_paid=False,
            paid_amount=0,
        ))
    db.flush()

    return apply_fifo(db, lease, today)


def regenerate_invoices(db: Session, lease_id: int, today: Optional[date] = None,
                        skip_terminated: bool = False) -> Optional[List[RentInvoice]]:
    get_lease_or_404(db, lease_id)

    with lease_guard(db, [lease_id]) as leases:
        lease = leases[lease_id]
        if skip_terminated and _skip_if_terminated(lease, "regenerate invoices"):
            return None
        ensure_not_terminated(lease, "regenerate invoices")
        try:
            invoices = replace_invoices(db, lease, today)
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info("Regenerated %s invoices for lease %s", len(invoices), lease_id)
    return invoices


def get_invoices(db: Session, lease_id: int) -> List[RentInvoiceOut]:
    get_lease_or_404(db, lease_id)
    return [RentInvoiceOut.model_validate(inv) for inv in get_lease_invoices(db, lease_id)]


def lease_current_due(db: Session, lease: Lease, today: Optional[date] = None):
    """opening + elapsed rent - credits; negative when the lease is in credit."""
    elapsed = filter_elapsed_invoices(get_lease_invoices(db, lease.id), today)
    return compute_lease_due(lease.opening_due_balance, elapsed, get_lease_postings(db, lease.id))
