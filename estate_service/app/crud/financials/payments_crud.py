import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import invalid_input_response, not_found_response
from ...enum.estate_enum import DeletionRecordType
from ...models.common.deletion_logs import DeletionLog
from ...models.financials.payments import Payment
from ...models.leasing_tenants.tenants import Tenant
from ...schemas.financials.payments_schemas import (
    PaymentCreate, PaymentListResponse, PaymentOut, PaymentRequest
)
from ...helpers.lease_lock_helper import lease_guard
from .rent_invoices_crud import apply_fifo, ensure_not_terminated, get_lease_or_404

logger = logging.getLogger(__name__)


def get_list(db: Session, params: PaymentRequest) -> PaymentListResponse:
    q = db.query(Payment)

    if params.tenant_id:
        q = q.filter(Payment.tenant_id == params.tenant_id)
    if params.lease_id:
        q = q.filter(Payment.lease_id == params.lease_id)
    if not params.include_deleted:
        q = q.filter(Payment.is_deleted == False)
    if params.search:
        q = q.filter(Payment.receipt_number.ilike(f"%{params.search}%"))

    total = q.count()
    rows = (
        q.order_by(Payment.payment_date.desc(), Payment.id.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return PaymentListResponse(
        payments=[PaymentOut.model_validate(p) for p in rows],
        total=total,
    )


def get_payment_or_404(db: Session, payment_id: int) -> Payment:
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        not_found_response("Payment", payment_id)
    return payment


def record_payment(db: Session, payload: PaymentCreate, today: Optional[date] = None) -> Payment:
    lease = get_lease_or_404(db, payload.lease_id)
    if lease.tenant_id != payload.tenant_id:
        invalid_input_response(
            f"Lease {lease.id} does not belong to tenant {payload.tenant_id}")

    tenant = db.query(Tenant).filter(Tenant.id == payload.tenant_id).first()
    if not tenant:
        not_found_response("Tenant", payload.tenant_id)

    with lease_guard(db, [lease.id]) as leases:
        lease = leases[lease.id]
        ensure_not_terminated(lease, "record payment")
        try:
            payment = Payment(**payload.model_dump())
            db.add(payment)
            db.flush()
            apply_fifo(db, lease, today)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(payment)
    logger.info("Recorded payment %s of %s on lease %s",
                payment.id, payment.amount, payment.lease_id)
    return payment


def _payment_snapshot(payment: Payment) -> dict:
    return {
        "tenant_id": payment.tenant_id,
        "lease_id": payment.lease_id,
        "amount": str(payment.amount),
        "payment_date": payment.payment_date.isoformat(),
        "rent_months": payment.rent_months,
        "receipt_number": payment.receipt_number,
        "notes": payment.notes,
    }


def soft_delete_payment(db: Session, payment_id: int, reason: str,
                        today: Optional[date] = None) -> Payment:
    if not reason or not reason.strip():
        invalid_input_response("A reason is required to delete a payment")

    payment = get_payment_or_404(db, payment_id)
    if payment.is_deleted:
        invalid_input_response(f"Payment {payment_id} is already deleted")

    with lease_guard(db, [payment.lease_id]) as leases:
        lease = leases[payment.lease_id]
        ensure_not_terminated(lease, "delete payment")
        try:
            payment.is_deleted = True
            payment.deleted_at = datetime.now(timezone.utc)
            payment.deletion_reason = reason.strip()
            db.add(DeletionLog(
                record_type=DeletionRecordType.payment.value,
                record_id=payment.id,
                record_details=_payment_snapshot(payment),
                reason=reason.strip(),
            ))
            db.flush()
            apply_fifo(db, lease, today)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(payment)
    logger.info("Soft-deleted payment %s on lease %s: %s",
                payment.id, payment.lease_id, payment.deletion_reason)
    return payment
