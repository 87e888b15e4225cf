from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from estate_service.app.crud.financials import expenses_crud
from estate_service.app.crud.owners import owner_reports_crud
from estate_service.app.models.common.deletion_logs import DeletionLog
from estate_service.app.schemas.financials.expenses_schemas import (
    BankDepositCreate, BankDepositRequest, ExpenseCreate, ExpenseRequest
)


@pytest.fixture
def deposits(db, owner):
    return [
        expenses_crud.create_bank_deposit(db, BankDepositCreate(
            owner_id=owner.id, amount=Decimal(amount), deposit_date=date(2024, month, 10),
            bank_name="Sonali Bank"))
        for month, amount in [(1, "1000"), (2, "2000"), (3, "3000")]
    ]


def owner_expense(db, owner, amount="250"):
    return expenses_crud.create_expense(db, ExpenseCreate(
        expense_type="maintenance", description="Shutter repair", amount=Decimal(amount),
        expense_date=date(2024, 3, 6), allocation="owner", owner_id=owner.id))


class TestBankDeposits:
    def test_total_covers_every_page(self, db, deposits):
        page = expenses_crud.get_bank_deposits(db, BankDepositRequest(limit=1))

        assert [Decimal(d.amount) for d in page.deposits] == [Decimal("3000.00")]
        assert page.total == Decimal("6000.00")

    def test_soft_delete_logs_and_hides(self, db, deposits):
        removed = expenses_crud.soft_delete_bank_deposit(db, deposits[0].id, "  Bounced  ")

        assert removed.is_deleted is True
        assert removed.deletion_reason == "Bounced"
        log = db.query(DeletionLog).one()
        assert (log.record_type, log.record_id) == ("bank_deposit", deposits[0].id)
        assert Decimal(log.record_details["amount"]) == Decimal("1000")

        active = expenses_crud.get_bank_deposits(db, BankDepositRequest())
        assert active.total == Decimal("5000.00")
        assert len(active.deposits) == 2
        everything = expenses_crud.get_bank_deposits(db, BankDepositRequest(include_deleted=True))
        assert len(everything.deposits) == 3

    def test_delete_twice_rejected(self, db, deposits):
        expenses_crud.soft_delete_bank_deposit(db, deposits[0].id, "Bounced")

        with pytest.raises(HTTPException) as exc:
            expenses_crud.soft_delete_bank_deposit(db, deposits[0].id, "Bounced")
        assert exc.value.status_code == 400


class TestExpenses:
    def test_reason_required(self, db, owner):
        expense = owner_expense(db, owner)

        with pytest.raises(HTTPException) as exc:
            expenses_crud.soft_delete_expense(db, expense.id, "   ")
        assert exc.value.status_code == 400
        assert db.query(DeletionLog).count() == 0

    def test_missing_expense(self, db):
        with pytest.raises(HTTPException) as exc:
            expenses_crud.soft_delete_expense(db, 999, "Entered twice")
        assert exc.value.status_code == 404

    def test_deleted_expense_leaves_owner_statement(self, db, owner):
        kept = owner_expense(db, owner, "250")
        dropped = owner_expense(db, owner, "900")

        expenses_crud.soft_delete_expense(db, dropped.id, "Entered twice")

        log = db.query(DeletionLog).one()
        assert (log.record_type, log.record_id) == ("expense", dropped.id)
        listed = expenses_crud.get_expenses(db, ExpenseRequest())
        assert [e.id for e in listed] == [kept.id]
        statement = owner_reports_crud.get_owner_statement(db, owner.id)
        assert statement.summary.total_expenses == Decimal("250.00")
