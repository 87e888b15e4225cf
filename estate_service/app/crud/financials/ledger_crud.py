from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import not_found_response
from ...helpers.invoice_schedule_helper import filter_elapsed_invoices
from ...helpers.ledger_helper import (
    LedgerRow, build_ledger_rows, invoice_rows, payment_rows, transfer_rows, verify_final_balance
)
from ...helpers.money_helper import ZERO, sum_money, to_money
from ...models.financials.ledger_transfers import LedgerTransfer
from ...models.financials.payments import Payment
from ...models.financials.rent_invoices import RentInvoice
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.tenants import Tenant
from ...schemas.financials.ledger_schemas import LedgerEntryOut, LedgerOut
from .rent_invoices_crud import (
    get_lease_invoices, get_lease_or_404, get_lease_payments, get_lease_transfers, lease_current_due
)


def _ledger_out(tenant_id: int, lease_id: Optional[int], opening, rows: List[LedgerRow]) -> LedgerOut:
    return LedgerOut(
        tenant_id=tenant_id,
        lease_id=lease_id,
        opening_balance=to_money(opening),
        total_debits=sum_money(r.debit for r in rows),
        total_credits=sum_money(r.credit for r in rows),
        current_due=rows[-1].balance if rows else ZERO,
        entries=[
            LedgerEntryOut(
                id=idx,
                date=r.date,
                type=r.type,
                description=r.description,
                lease_id=r.lease_id,
                debit=r.debit,
                credit=r.credit,
                balance=r.balance,
            )
            for idx, r in enumerate(rows, start=1)
        ],
    )


def build_lease_ledger(db: Session, lease_id: int, today: Optional[date] = None) -> LedgerOut:
    lease = get_lease_or_404(db, lease_id)

    elapsed = filter_elapsed_invoices(get_lease_invoices(db, lease.id), today)
    rows = (
        invoice_rows(elapsed)
        + payment_rows(get_lease_payments(db, lease.id))
        + transfer_rows(get_lease_transfers(db, lease.id), [lease.id])
    )
    ledger = build_ledger_rows(lease.opening_due_balance, lease.start_date, rows)
    verify_final_balance(ledger, lease_current_due(db, lease, today))

    return _ledger_out(lease.tenant_id, lease.id, lease.opening_due_balance, ledger)


def build_tenant_ledger(db: Session, tenant_id: int, today: Optional[date] = None) -> LedgerOut:
    """Statement across every lease the tenant holds or held."""
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        not_found_response("Tenant", tenant_id)

    leases = db.query(Lease).filter(Lease.tenant_id == tenant_id).order_by(Lease.id).all()
    lease_ids = [lease.id for lease in leases]

    invoices = filter_elapsed_invoices(
        db.query(RentInvoice).filter(RentInvoice.tenant_id == tenant_id).all(), today)
    payments = (
        db.query(Payment)
        .filter(Payment.tenant_id == tenant_id)
        .order_by(Payment.payment_date, Payment.id)
        .all()
    )
    transfers = (
        db.query(LedgerTransfer)
        .filter(LedgerTransfer.tenant_id == tenant_id)
        .order_by(LedgerTransfer.transfer_date, LedgerTransfer.id)
        .all()
    )

    opening = to_money(tenant.opening_due_balance) + sum_money(
        lease.opening_due_balance for lease in leases)
    opening_date = min([lease.start_date for lease in leases], default=date.today())

    rows = invoice_rows(invoices) + payment_rows(payments) + transfer_rows(transfers, lease_ids)
    ledger = build_ledger_rows(opening, opening_date, rows)

    expected = to_money(tenant.opening_due_balance) + sum_money(
        lease_current_due(db, lease, today) for lease in leases)
    verify_final_balance(ledger, expected)

    return _ledger_out(tenant.id, None, opening, ledger)
