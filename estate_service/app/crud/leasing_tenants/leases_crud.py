import logging
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from shared.core.config import settings
from shared.helpers.json_response_helper import invalid_input_response, not_found_response
from ...enum.estate_enum import LeaseStatus, ShopStatus
from ...helpers.fifo_helper import active_payments, total_credits, unallocated_credit
from ...helpers.invoice_schedule_helper import filter_elapsed_invoices, month_start
from ...helpers.lease_lock_helper import lease_guard
from ...helpers.lease_status_helper import derive_lease_status
from ...helpers.money_helper import ZERO, to_money
from ...helpers.rent_rate_helper import resolve_rent_for_month
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.tenants import Tenant
from ...models.owners.shops import Shop
from ...schemas.leasing_tenants.leases_schemas import (
    LeaseCreate, LeaseListResponse, LeaseOut, LeaseRequest, LeaseUpdate,
    PaymentFormData, PaymentFormMonth
)
from ..financials.rent_invoices_crud import (
    ensure_not_terminated, get_lease_adjustments, get_lease_invoices,
    get_lease_or_404, get_lease_payments, get_lease_postings, lease_current_due,
    replace_invoices
)

logger = logging.getLogger(__name__)


def lease_out(lease: Lease) -> LeaseOut:
    out = LeaseOut.model_validate(lease)
    out.tenant_name = lease.tenant.name if lease.tenant else None
    out.shop_number = lease.shop.shop_number if lease.shop else None
    return out


def refresh_status(db: Session, lease: Lease, today: Optional[date] = None) -> bool:
    """
    Bring the stored status in line with the calendar; True when a row changed.

    Written as a conditional UPDATE so a termination committed after
    `lease` was loaded is never overwritten. Caller commits.
    """
    status = derive_lease_status(lease.status, lease.end_date, today)
    if status == lease.status:
        return False

    updated = (
        db.query(Lease)
        .filter(Lease.id == lease.id, Lease.status != LeaseStatus.terminated.value)
        .update({Lease.status: status}, synchronize_session=False)
    )
    # reload from the row, which may have been terminated meanwhile
    db.expire(lease, ["status"])
    return bool(updated)


# ----------------------------------------------------
# Build filters
# ----------------------------------------------------
def build_filters(params: LeaseRequest):
    filters = []

    if params.tenant_id:
        filters.append(Lease.tenant_id == params.tenant_id)

    if params.shop_id:
        filters.append(Lease.shop_id == params.shop_id)

    if params.status and params.status.lower() != "all":
        filters.append(Lease.status == params.status)

    if params.search:
        like = f"%{params.search}%"
        filters.append(or_(Tenant.name.ilike(like), Shop.shop_number.ilike(like)))

    return filters


def get_list(db: Session, params: LeaseRequest, today: Optional[date] = None) -> LeaseListResponse:
    # statuses drift with the calendar; settle them before filtering on them
    leases = db.query(Lease).filter(Lease.status != LeaseStatus.terminated.value).all()
    changed = [lease for lease in leases if refresh_status(db, lease, today)]
    if changed:
        db.commit()

    q = (
        db.query(Lease)
        .join(Tenant, Tenant.id == Lease.tenant_id)
        .join(Shop, Shop.id == Lease.shop_id)
        .options(joinedload(Lease.tenant), joinedload(Lease.shop))
        .filter(*build_filters(params))
        .order_by(Lease.id.desc())
    )

    total = q.count()
    rows = q.offset(params.skip).limit(params.limit).all()
    return LeaseListResponse(leases=[lease_out(row) for row in rows], total=total)


def get_lease(db: Session, lease_id: int, today: Optional[date] = None) -> LeaseOut:
    lease = get_lease_or_404(db, lease_id)
    if refresh_status(db, lease, today):
        db.commit()
        db.refresh(lease)
    return lease_out(lease)


# ----------------------------------------------------
# Create / update
# ----------------------------------------------------
def _validate_dates(start_date: date, end_date: date):
    if end_date < start_date:
        invalid_input_response("Lease end date cannot be before its start date")


def create_lease(db: Session, payload: LeaseCreate, today: Optional[date] = None) -> LeaseOut:
    _validate_dates(payload.start_date, payload.end_date)

    tenant = db.query(Tenant).filter(Tenant.id == payload.tenant_id, Tenant.is_deleted == False).first()
    if not tenant:
        not_found_response("Tenant", payload.tenant_id)

    shop = db.query(Shop).filter(Shop.id == payload.shop_id, Shop.is_deleted == False).first()
    if not shop:
        not_found_response("Shop", payload.shop_id)

    running = (
        db.query(Lease)
        .filter(
            Lease.shop_id == shop.id,
            Lease.status.in_([LeaseStatus.active.value, LeaseStatus.expiring_soon.value]),
        )
        .first()
    )
    if running:
        invalid_input_response(
            f"Shop {shop.shop_number} already has a running lease ({running.id})")

    try:
        lease = Lease(**payload.model_dump(), security_deposit_used=0)
        lease.status = derive_lease_status(
            LeaseStatus.active.value, payload.end_date, today)
        db.add(lease)
        shop.status = ShopStatus.occupied.value
        db.flush()

        invoices = replace_invoices(db, lease, today)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(lease)
    logger.info("Created lease %s for tenant %s on shop %s with %s invoices",
                lease.id, lease.tenant_id, shop.shop_number, len(invoices))
    return lease_out(lease)


def update_lease(db: Session, payload: LeaseUpdate, today: Optional[date] = None) -> LeaseOut:
    get_lease_or_404(db, payload.id)
    update_data = payload.model_dump(exclude_unset=True, exclude={"id"})

    with lease_guard(db, [payload.id]) as leases:
        lease = leases[payload.id]
        ensure_not_terminated(lease, "update lease")

        if "tenant_id" in update_data and update_data["tenant_id"] != lease.tenant_id:
            invalid_input_response("A lease cannot be moved to another tenant")
        if "shop_id" in update_data and update_data["shop_id"] != lease.shop_id:
            invalid_input_response("A lease cannot be moved to another shop")

        rent_changed = (
            update_data.get("monthly_rent") is not None
            and to_money(update_data["monthly_rent"]) != to_money(lease.monthly_rent)
        )
        if rent_changed and get_lease_adjustments(db, lease.id):
            invalid_input_response(
                "Lease has rent adjustments; record a rent adjustment instead of editing the rent")

        start_date = update_data.get("start_date") or lease.start_date
        end_date = update_data.get("end_date") or lease.end_date
        _validate_dates(start_date, end_date)

        dates_changed = start_date != lease.start_date or end_date != lease.end_date

        try:
            for key, value in update_data.items():
                if value is not None:
                    setattr(lease, key, value)
            lease.status = derive_lease_status(lease.status, lease.end_date, today)
            db.flush()

            if dates_changed or rent_changed:
                invoices = replace_invoices(db, lease, today)
                logger.info("Lease %s terms changed, rebuilt %s invoices",
                            lease.id, len(invoices))
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(lease)
    return lease_out(lease)


# ----------------------------------------------------
# Payment form
# ----------------------------------------------------
def get_payment_form_data(db: Session, lease_id: int, today: Optional[date] = None) -> PaymentFormData:
    today = today or date.today()
    lease = get_lease_or_404(db, lease_id)
    tenant = lease.tenant

    adjustments = get_lease_adjustments(db, lease.id)
    lease_invoices = get_lease_invoices(db, lease.id)
    invoices = {(inv.year, inv.month): inv for inv in lease_invoices}
    paid_total = total_credits(get_lease_postings(db, lease.id))
    payments = active_payments(get_lease_payments(db, lease.id))

    dates_by_month = {}
    for p in payments:
        for key in p.rent_months or []:
            dates_by_month.setdefault(key, [])
            if p.payment_date not in dates_by_month[key]:
                dates_by_month[key].append(p.payment_date)

    current = month_start(today)
    horizon = current + relativedelta(months=settings.PAYMENT_FORM_FUTURE_MONTHS - 1)
    cursor = month_start(lease.start_date)

    months = []
    while cursor <= horizon:
        if lease.status == LeaseStatus.terminated.value and cursor > lease.end_date:
            break

        invoice = invoices.get((cursor.year, cursor.month))
        rent = resolve_rent_for_month(lease, adjustments, cursor.year, cursor.month)
        paid = to_money(invoice.paid_amount) if invoice else ZERO

        months.append(PaymentFormMonth(
            year=cursor.year,
            month=cursor.month,
            label=cursor.strftime("%B %Y"),
            rent=rent,
            is_paid=bool(invoice and invoice.is_paid),
            paid_amount=paid,
            remaining_balance=max(ZERO, rent - paid),
            payment_dates=dates_by_month.get(cursor.strftime("%Y-%m"), []),
            is_past=cursor < current,
            is_current=cursor == current,
            is_future=cursor > current,
        ))
        cursor = cursor + relativedelta(months=1)

    return PaymentFormData(
        lease_id=lease.id,
        tenant_id=tenant.id,
        tenant_name=tenant.name,
        current_rent=to_money(lease.monthly_rent),
        opening_balance=to_money(lease.opening_due_balance),
        outstanding_balance=max(ZERO, lease_current_due(db, lease, today)),
        total_paid=paid_total,
        advance_credit=unallocated_credit(
            filter_elapsed_invoices(lease_invoices, today), paid_total),
        months=months,
    )
