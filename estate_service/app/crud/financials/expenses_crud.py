import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import invalid_input_response, not_found_response
from ...enum.estate_enum import DeletionRecordType, ExpenseAllocation
from ...models.common.deletion_logs import DeletionLog
from ...models.financials.bank_deposits import BankDeposit
from ...models.financials.expenses import Expense
from ...models.owners.owners import Owner
from ...schemas.financials.expenses_schemas import (
    BankDepositCreate, BankDepositListResponse, BankDepositOut, BankDepositRequest,
    ExpenseCreate, ExpenseOut, ExpenseRequest
)
from ...helpers.money_helper import to_money

logger = logging.getLogger(__name__)


def _require_reason(reason: str, record: str) -> str:
    if not reason or not reason.strip():
        invalid_input_response(f"A reason is required to delete {record}")
    return reason.strip()


# ----------------------------------------------------
# Expenses
# ----------------------------------------------------
def get_expenses(db: Session, params: ExpenseRequest) -> List[ExpenseOut]:
    q = db.query(Expense)
    if not params.include_deleted:
        q = q.filter(Expense.is_deleted == False)
    if params.owner_id:
        q = q.filter(Expense.owner_id == params.owner_id)
    if params.allocation and params.allocation.lower() != "all":
        q = q.filter(Expense.allocation == params.allocation)
    if params.search:
        q = q.filter(Expense.description.ilike(f"%{params.search}%"))

    rows = (
        q.order_by(Expense.expense_date.desc(), Expense.id.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return [ExpenseOut.model_validate(e) for e in rows]


def get_expense_or_404(db: Session, expense_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        not_found_response("Expense", expense_id)
    return expense


def create_expense(db: Session, payload: ExpenseCreate) -> Expense:
    if payload.allocation == ExpenseAllocation.owner:
        if payload.owner_id is None:
            invalid_input_response("An owner expense needs an owner")
        if not db.query(Owner).filter(Owner.id == payload.owner_id).first():
            not_found_response("Owner", payload.owner_id)
    elif payload.owner_id is not None:
        invalid_input_response("A common expense cannot name an owner")

    data = payload.model_dump()
    data["expense_type"] = payload.expense_type.value
    data["allocation"] = payload.allocation.value
    expense = Expense(**data)
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("Recorded %s expense %s of %s", expense.allocation, expense.id, expense.amount)
    return expense


def soft_delete_expense(db: Session, expense_id: int, reason: str) -> Expense:
    reason = _require_reason(reason, "an expense")
    expense = get_expense_or_404(db, expense_id)
    if expense.is_deleted:
        invalid_input_response(f"Expense {expense_id} is already deleted")

    try:
        expense.is_deleted = True
        expense.deleted_at = datetime.now(timezone.utc)
        expense.deletion_reason = reason
        db.add(DeletionLog(
            record_type=DeletionRecordType.expense.value,
            record_id=expense.id,
            record_details={
                "expense_type": expense.expense_type,
                "description": expense.description,
                "amount": str(expense.amount),
                "expense_date": expense.expense_date.isoformat(),
                "allocation": expense.allocation,
                "owner_id": expense.owner_id,
                "receipt_ref": expense.receipt_ref,
            },
            reason=reason,
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(expense)
    logger.info("Soft-deleted expense %s: %s", expense.id, reason)
    return expense


# ----------------------------------------------------
# Bank deposits (informational, no ledger effect)
# ----------------------------------------------------
def get_bank_deposits(db: Session, params: BankDepositRequest) -> BankDepositListResponse:
    q = db.query(BankDeposit)
    if not params.include_deleted:
        q = q.filter(BankDeposit.is_deleted == False)
    if params.owner_id:
        q = q.filter(BankDeposit.owner_id == params.owner_id)
    if params.search:
        q = q.filter(BankDeposit.bank_name.ilike(f"%{params.search}%"))

    # total covers every matching deposit, not just this page
    total = q.with_entities(func.coalesce(func.sum(BankDeposit.amount), 0)).scalar()
    rows = (
        q.order_by(BankDeposit.deposit_date.desc(), BankDeposit.id.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return BankDepositListResponse(
        deposits=[BankDepositOut.model_validate(d) for d in rows],
        total=to_money(total),
    )


def get_bank_deposit_or_404(db: Session, deposit_id: int) -> BankDeposit:
    deposit = db.query(BankDeposit).filter(BankDeposit.id == deposit_id).first()
    if not deposit:
        not_found_response("Bank deposit", deposit_id)
    return deposit


def create_bank_deposit(db: Session, payload: BankDepositCreate) -> BankDeposit:
    if not db.query(Owner).filter(Owner.id == payload.owner_id).first():
        not_found_response("Owner", payload.owner_id)

    deposit = BankDeposit(**payload.model_dump())
    db.add(deposit)
    db.commit()
    db.refresh(deposit)
    return deposit


def soft_delete_bank_deposit(db: Session, deposit_id: int, reason: str) -> BankDeposit:
    reason = _require_reason(reason, "a bank deposit")
    deposit = get_bank_deposit_or_404(db, deposit_id)
    if deposit.is_deleted:
        invalid_input_response(f"Bank deposit {deposit_id} is already deleted")

    try:
        deposit.is_deleted = True
        deposit.deleted_at = datetime.now(timezone.utc)
        deposit.deletion_reason = reason
        db.add(DeletionLog(
            record_type=DeletionRecordType.bank_deposit.value,
            record_id=deposit.id,
            record_details={
                "owner_id": deposit.owner_id,
                "amount": str(deposit.amount),
                "deposit_date": deposit.deposit_date.isoformat(),
                "bank_name": deposit.bank_name,
                "deposit_slip_ref": deposit.deposit_slip_ref,
                "notes": deposit.notes,
            },
            reason=reason,
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(deposit)
    logger.info("Soft-deleted bank deposit %s: %s", deposit.id, reason)
    return deposit
