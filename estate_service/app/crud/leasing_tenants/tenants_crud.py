import logging
from datetime import date
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import not_found_response
from ...helpers.invoice_schedule_helper import filter_elapsed_invoices
from ...helpers.fifo_helper import active_payments
from ...helpers.money_helper import ZERO, sum_money, to_money
from ...models.financials.payments import Payment
from ...models.financials.rent_invoices import RentInvoice
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.tenants import Tenant
from ...schemas.leasing_tenants.tenants_schemas import (
    TenantCreate, TenantListResponse, TenantOut, TenantRequest, TenantWithDues
)

logger = logging.getLogger(__name__)


def get_tenant_or_404(db: Session, tenant_id: int) -> Tenant:
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id, Tenant.is_deleted == False).first()
    if not tenant:
        not_found_response("Tenant", tenant_id)
    return tenant


def tenant_with_dues(db: Session, tenant: Tenant, today: Optional[date] = None) -> TenantWithDues:
    leases = db.query(Lease).filter(Lease.tenant_id == tenant.id).all()
    invoices = filter_elapsed_invoices(
        db.query(RentInvoice).filter(RentInvoice.tenant_id == tenant.id).all(), today)
    payments = active_payments(db.query(Payment).filter(Payment.tenant_id == tenant.id).all())

    total_due = (
        to_money(tenant.opening_due_balance)
        + sum_money(lease.opening_due_balance for lease in leases)
        + sum_money(inv.amount for inv in invoices)
    )
    total_paid = sum_money(p.amount for p in payments)

    monthly_dues = {}
    for inv in invoices:
        owed = to_money(inv.amount) - to_money(inv.paid_amount)
        if owed > ZERO:
            key = f"{inv.year:04d}-{inv.month:02d}"
            monthly_dues[key] = monthly_dues.get(key, ZERO) + owed

    out = TenantOut.model_validate(tenant)
    return TenantWithDues(
        **out.model_dump(),
        total_due=total_due,
        total_paid=total_paid,
        current_due=total_due - total_paid,
        monthly_dues=monthly_dues,
    )


def get_list(db: Session, params: TenantRequest, today: Optional[date] = None) -> TenantListResponse:
    q = db.query(Tenant).filter(Tenant.is_deleted == False)

    if params.search:
        like = f"%{params.search}%"
        q = q.filter(or_(
            Tenant.name.ilike(like),
            Tenant.phone.ilike(like),
            Tenant.business_name.ilike(like),
        ))

    total = q.count()
    rows = q.order_by(Tenant.name).offset(params.skip).limit(params.limit).all()
    return TenantListResponse(
        tenants=[tenant_with_dues(db, t, today) for t in rows],
        total=total,
    )


def get_tenant(db: Session, tenant_id: int, today: Optional[date] = None) -> TenantWithDues:
    return tenant_with_dues(db, get_tenant_or_404(db, tenant_id), today)


def create_tenant(db: Session, payload: TenantCreate) -> Tenant:
    tenant = Tenant(**payload.model_dump())
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    logger.info("Created tenant %s", tenant.id)
    return tenant
