from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from estate_service.app.crud.financials import payments_crud, rent_invoices_crud
from estate_service.app.crud.leasing_tenants import leases_crud, rent_adjustments_crud
from estate_service.app.models.common.deletion_logs import DeletionLog
from estate_service.app.models.financials.payments import Payment
from estate_service.app.models.leasing_tenants.leases import Lease
from estate_service.app.models.owners.shops import Shop
from estate_service.app.schemas.financials.payments_schemas import PaymentCreate
from estate_service.app.schemas.leasing_tenants.leases_schemas import LeaseUpdate, RentAdjustmentCreate


def invoice_state(db, lease_id):
    return [
        (inv.year, inv.month, Decimal(inv.amount), inv.is_paid, Decimal(inv.paid_amount))
        for inv in rent_invoices_crud.get_lease_invoices(db, lease_id)
    ]


def pay(db, tenant, lease_id, amount, today, paid_on=date(2024, 5, 10)):
    return payments_crud.record_payment(db, PaymentCreate(
        tenant_id=tenant.id, lease_id=lease_id,
        amount=Decimal(amount), payment_date=paid_on,
    ), today=today)


class TestLeaseCreation:
    def test_bills_elapsed_months_and_occupies_shop(self, db, make_lease):
        lease_id = make_lease()
        lease = db.get(Lease, lease_id)

        assert [(y, m) for y, m, *_ in invoice_state(db, lease_id)] == [(2024, m) for m in range(1, 6)]
        assert db.get(Shop, lease.shop_id).status == "occupied"
        assert lease.status == "active"

    def test_future_lease_has_no_invoices(self, db, make_lease):
        lease_id = make_lease(start=date(2024, 8, 1), end=date(2025, 7, 31))
        assert invoice_state(db, lease_id) == []


class TestRegenerateInvoices:
    def test_is_idempotent(self, db, tenant, make_lease, today):
        lease_id = make_lease()
        pay(db, tenant, lease_id, "25000", today)
        before = invoice_state(db, lease_id)

        rent_invoices_crud.regenerate_invoices(db, lease_id, today=today)
        rent_invoices_crud.regenerate_invoices(db, lease_id, today=today)

        assert invoice_state(db, lease_id) == before

    def test_date_change_rebuilds_invoices(self, db, make_lease, today):
        lease_id = make_lease()
        leases_crud.update_lease(db, LeaseUpdate(id=lease_id, start_date=date(2024, 3, 1)), today=today)
        assert [m for _, m, *_ in invoice_state(db, lease_id)] == [3, 4, 5]

    def test_terminated_lease_is_rejected(self, db, make_lease, today):
        lease_id = make_lease()
        db.get(Lease, lease_id).status = "terminated"
        db.commit()

        with pytest.raises(HTTPException) as exc:
            rent_invoices_crud.regenerate_invoices(db, lease_id, today=today)
        assert exc.value.status_code == 409


class TestPayments:
    def test_fifo_allocation(self, db, tenant, make_lease, today):
        lease_id = make_lease()
        pay(db, tenant, lease_id, "25000", today)

        state = invoice_state(db, lease_id)
        assert [s[3] for s in state] == [True, True, False, False, False]
        assert [s[4] for s in state] == [
            Decimal("10000"), Decimal("10000"), Decimal("5000"), Decimal("0"), Decimal("0")]

    def test_soft_delete_restores_invoices(self, db, tenant, make_lease, today):
        lease_id = make_lease()
        payment = pay(db, tenant, lease_id, "25000", today)

        payments_crud.soft_delete_payment(db, payment.id, "Bounced cheque", today=today)

        assert all(not s[3] and s[4] == 0 for s in invoice_state(db, lease_id))
        stored = db.get(Payment, payment.id)
        assert stored.is_deleted and stored.deletion_reason == "Bounced cheque"
        log = db.query(DeletionLog).one()
        assert log.record_type == "payment" and log.record_id == payment.id

    def test_delete_needs_reason(self, db, tenant, make_lease, today):
        lease_id = make_lease()
        payment = pay(db, tenant, lease_id, "100", today)
        with pytest.raises(HTTPException) as exc:
            payments_crud.soft_delete_payment(db, payment.id, "  ")
        assert exc.value.status_code == 400

    def test_lease_must_belong_to_tenant(self, db, tenant, make_lease, today):
        lease_id = make_lease()
        with pytest.raises(HTTPException) as exc:
            payments_crud.record_payment(db, PaymentCreate(
                tenant_id=tenant.id + 1, lease_id=lease_id,
                amount=Decimal("100"), payment_date=today,
            ), today=today)
        assert exc.value.status_code == 400

    def test_terminated_lease_refuses_payments(self, db, tenant, make_lease, today):
        lease_id = make_lease()
        db.get(Lease, lease_id).status = "terminated"
        db.commit()
        with pytest.raises(HTTPException) as exc:
            pay(db, tenant, lease_id, "100", today)
        assert exc.value.status_code == 409


class TestRentAdjustments:
    def test_reprices_from_effective_month(self, db, tenant, make_lease, today):
        lease_id = make_lease()
        rent_adjustments_crud.create_rent_adjustment(db, lease_id, RentAdjustmentCreate(
            new_rent=Decimal("12000"), effective_date=date(2024, 3, 1)), today=today)
        pay(db, tenant, lease_id, "25000", today)

        state = invoice_state(db, lease_id)
        assert [s[2] for s in state] == [Decimal(v) for v in ("10000", "10000", "12000", "12000", "12000")]
        assert [s[4] for s in state] == [
            Decimal("10000"), Decimal("10000"), Decimal("5000"), Decimal("0"), Decimal("0")]
        assert Decimal(db.get(Lease, lease_id).monthly_rent) == Decimal("12000")

    def test_matches_full_regeneration(self, db, make_lease, today):
        lease_id = make_lease()
        rent_adjustments_crud.create_rent_adjustment(db, lease_id, RentAdjustmentCreate(
            new_rent=Decimal("12000"), effective_date=date(2024, 3, 15)), today=today)
        adjusted = invoice_state(db, lease_id)

        rent_invoices_crud.regenerate_invoices(db, lease_id, today=today)

        assert invoice_state(db, lease_id) == adjusted
        assert [s[2] for s in adjusted][2:4] == [Decimal("10000"), Decimal("12000")]

    def test_direct_rent_edit_rejected_once_adjusted(self, db, make_lease, today):
        lease_id = make_lease()
        rent_adjustments_crud.create_rent_adjustment(db, lease_id, RentAdjustmentCreate(
            new_rent=Decimal("12000"), effective_date=date(2024, 3, 1)), today=today)

        with pytest.raises(HTTPException) as exc:
            leases_crud.update_lease(db, LeaseUpdate(id=lease_id, monthly_rent=Decimal("15000")), today=today)
        assert exc.value.status_code == 400


def test_recalculate_all_skips_terminated(db, tenant, make_lease, today):
    running = make_lease()
    closed = make_lease()
    db.get(Lease, closed).status = "terminated"
    db.commit()

    assert rent_invoices_crud.recalculate_all(db, today=today) == {"processed": 1, "skipped": 0}
    assert len(invoice_state(db, running)) == 5


class TestRegenerationIsAtomic:
    def test_failed_insert_keeps_previous_invoices(self, db, tenant, make_lease, today, monkeypatch):
        lease_id = make_lease()
        pay(db, tenant, lease_id, "15000", today)
        before = invoice_state(db, lease_id)
        build = rent_invoices_crud.build_invoice_schedule

        def duplicate_last_month(lease, adjustments, today=None):
            drafts = build(lease, adjustments, today)
            return drafts + [drafts[-1]]

        monkeypatch.setattr(rent_invoices_crud, "build_invoice_schedule", duplicate_last_month)

        with pytest.raises(IntegrityError):
            rent_invoices_crud.regenerate_invoices(db, lease_id, today=date(2024, 7, 1))

        assert invoice_state(db, lease_id) == before

    def test_failed_allocation_keeps_previous_invoices(self, db, tenant, make_lease, today, monkeypatch):
        lease_id = make_lease()
        pay(db, tenant, lease_id, "15000", today)
        before = invoice_state(db, lease_id)

        def broken_fifo(*args, **kwargs):
            raise RuntimeError("allocation failed")

        monkeypatch.setattr(rent_invoices_crud, "apply_fifo", broken_fifo)

        with pytest.raises(RuntimeError):
            rent_invoices_crud.regenerate_invoices(db, lease_id, today=date(2024, 7, 1))

        assert invoice_state(db, lease_id) == before
        assert len(before) == 5


def test_payment_form_reports_advance_credit(db, tenant, make_lease, today):
    lease_id = make_lease(start=date(2024, 4, 1), rent="1000")
    pay(db, tenant, lease_id, "3500", today)

    form = leases_crud.get_payment_form_data(db, lease_id, today=today)

    assert form.total_paid == Decimal("3500.00")
    assert form.advance_credit == Decimal("1500.00")
    assert form.outstanding_balance == Decimal("0.00")
