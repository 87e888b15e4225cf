from datetime import date
from decimal import Decimal

import pytest

from estate_service.app.crud.financials import payments_crud, settlement_crud
from estate_service.app.crud.owners import owner_reports_crud
from estate_service.app.models.financials.bank_deposits import BankDeposit
from estate_service.app.models.financials.expenses import Expense
from estate_service.app.models.leasing_tenants.leases import Lease
from estate_service.app.models.owners.owners import Owner
from estate_service.app.schemas.financials.payments_schemas import PaymentCreate
from estate_service.app.schemas.financials.settlement_schemas import SettlementRequest


def pay(db, tenant, lease_id, amount, today, paid_on):
    payments_crud.record_payment(db, PaymentCreate(
        tenant_id=tenant.id, lease_id=lease_id,
        amount=Decimal(amount), payment_date=paid_on,
    ), today=today)


def test_statement_splits_common_shop_rent(db, owner, tenant, make_lease, today):
    db.add(Owner(name="Second Owner"))
    db.commit()

    sole = make_lease(rent="3000", deposit="6000")
    common = make_lease(rent="8000", ownership_type="common")
    pay(db, tenant, sole, "3000", today, date(2024, 2, 1))
    pay(db, tenant, common, "8000", today, date(2024, 3, 1))
    db.add(Expense(expense_type="guard", description="Night guard", amount=Decimal("1000"),
                   expense_date=date(2024, 3, 5), allocation="common"))
    db.add(Expense(expense_type="maintenance", description="Shutter repair", amount=Decimal("250"),
                   expense_date=date(2024, 3, 6), allocation="owner", owner_id=owner.id))
    db.commit()

    statement = owner_reports_crud.get_owner_statement(db, owner.id)

    summary = statement.summary
    assert statement.owner_count == 2
    assert summary.rent_payments == Decimal("3000.00")
    assert summary.common_shop_share == Decimal("4000.00")
    assert summary.security_deposits == Decimal("6000.00")
    assert summary.total_expenses == Decimal("750.00")
    assert summary.net_balance == Decimal("12250.00")
    assert statement.transactions[-1].balance == summary.net_balance


def test_statement_window_filters_by_date(db, owner, tenant, make_lease, today):
    lease_id = make_lease(rent="3000")
    pay(db, tenant, lease_id, "3000", today, date(2024, 2, 1))
    pay(db, tenant, lease_id, "3000", today, date(2024, 4, 1))

    statement = owner_reports_crud.get_owner_statement(
        db, owner.id, start_date=date(2024, 3, 1), end_date=date(2024, 4, 30))

    assert [t.date for t in statement.transactions] == [date(2024, 4, 1)]


def test_outstanding_scales_common_shops(db, owner, tenant, make_lease, today):
    db.add(Owner(name="Second Owner"))
    db.commit()
    make_lease(rent="1000")
    make_lease(rent="4000", ownership_type="common")

    result = owner_reports_crud.get_owner_outstanding(db, owner.id, limit=5, today=today)

    assert [(e.is_common, e.outstanding) for e in result.data] == [
        (True, Decimal("10000.00")), (False, Decimal("5000.00"))]
    assert result.total == Decimal("15000.00")


class TestOwnerDetails:
    @pytest.fixture
    def owners(self, db, owner):
        others = [Owner(name="Second Owner"), Owner(name="Third Owner")]
        db.add_all(others)
        db.commit()
        return [owner] + others

    def test_sole_shop_figures_and_reports(self, db, owners, tenant, make_lease, today):
        owner = owners[0]
        lease_id = make_lease(rent="3000", deposit="6000")
        db.get(Lease, lease_id).security_deposit_used = Decimal("1000")
        db.commit()
        pay(db, tenant, lease_id, "3000", today, date(2024, 5, 2))
        db.add(BankDeposit(owner_id=owner.id, amount=Decimal("2000"),
                           deposit_date=date(2024, 5, 3), bank_name="Sonali Bank"))
        db.add(Expense(expense_type="maintenance", description="Shutter repair", amount=Decimal("250"),
                       expense_date=date(2024, 5, 6), allocation="owner", owner_id=owner.id))
        db.add(Expense(expense_type="guard", description="Night guard", amount=Decimal("900"),
                       expense_date=date(2024, 5, 7), allocation="common"))
        db.commit()

        details = owner_reports_crud.get_owner_details(db, owner.id, today=today)

        (entry,) = details.tenants
        assert entry.security_deposit == Decimal("5000.00")
        assert entry.current_dues == Decimal("12000.00")
        assert entry.last_payment_date == date(2024, 5, 2)
        assert details.summary.total_owners == 3
        assert details.summary.total_common_expense_share == Decimal("300.00")
        assert details.summary.total_private_expense == Decimal("250.00")

        may = details.monthly_reports[0]
        assert may.period == "May 2024"
        assert (may.rent_collection, may.bank_deposits, may.expenses, may.net_income) == (
            Decimal("3000.00"), Decimal("2000.00"), Decimal("550.00"), Decimal("2450.00"))
        assert [y.period for y in details.yearly_reports] == ["2024", "2023"]

    def test_common_shop_shares_reconcile(self, db, owners, make_lease, today):
        make_lease(start=date(2024, 4, 1), rent="1000", deposit="1000", ownership_type="common")

        reports = [owner_reports_crud.get_owner_details(db, o.id, today=today) for o in owners]

        deposits = [r.summary.common_security_deposit for r in reports]
        dues = [r.summary.common_outstanding_dues for r in reports]
        assert deposits[0] == Decimal("333.33")
        assert sum(deposits) == Decimal("1000.00")
        assert sum(dues) == Decimal("2000.00")
        assert reports[0].common_tenants[0].monthly_rent == Decimal("333.33")
        assert reports[0].tenants == []

    def test_terminated_leases_left_out(self, db, owners, make_lease, today):
        lease_id = make_lease(deposit="6000")
        settlement_crud.terminate_lease(db, lease_id, SettlementRequest(), today=today)

        details = owner_reports_crud.get_owner_details(db, owners[0].id, today=today)

        assert details.tenants == []
        assert details.summary.total_security_deposit == Decimal("0.00")
