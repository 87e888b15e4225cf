from datetime import date
from decimal import Decimal
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...enum.estate_enum import (
    ExpenseAllocation, LeaseStatus, OwnershipType, RUNNING_LEASE_STATUSES, ShopFloor
)
from ...helpers.common_share_helper import (
    allocate_common_share, owner_share, share_ratio, split_common_amount
)
from ...helpers.fifo_helper import active_payments
from ...helpers.money_helper import ZERO, sum_money, to_money
from ...models.financials.bank_deposits import BankDeposit
from ...models.financials.expenses import Expense
from ...models.financials.payments import Payment
from ...models.leasing_tenants.leases import Lease
from ...models.owners.shops import Shop
from ...schemas.financials.expenses_schemas import BankDepositOut
from ...schemas.owners.owners_schemas import (
    OutstandingEntry, OwnerDetailsOut, OwnerDetailsSummary, OwnerExpenseEntry, OwnerOut,
    OwnerOutstandingOut, OwnerPeriodReport, OwnerStatementOut, OwnerStatementSummary,
    OwnerStatementTransaction, OwnerTenantEntry
)
from ..financials.rent_invoices_crud import lease_current_due
from .owners_crud import get_owner_or_404, owner_count, owner_ids


def _in_window(value: date, start_date: Optional[date], end_date: Optional[date]) -> bool:
    if start_date and value < start_date:
        return False
    if end_date and value > end_date:
        return False
    return True


def _owner_shops(db: Session, owner_id: int):
    return (
        db.query(Shop)
        .filter(
            Shop.is_deleted == False,
            or_(Shop.owner_id == owner_id, Shop.ownership_type == OwnershipType.common.value),
        )
        .all()
    )


def _owner_expenses(db: Session, owner_id: int):
    return (
        db.query(Expense)
        .filter(
            Expense.is_deleted == False,
            or_(Expense.owner_id == owner_id, Expense.allocation == ExpenseAllocation.common.value),
        )
        .all()
    )


def get_owner_statement(db: Session, owner_id: int, start_date: Optional[date] = None,
                        end_date: Optional[date] = None) -> OwnerStatementOut:
    """
    Owner-facing statement: rent collected on the owner's shops and its
    share of common-shop rent as credits, expenses as debits.
    """
    owner = get_owner_or_404(db, owner_id)
    count = owner_count(db)
    shops = {s.id: s for s in _owner_shops(db, owner_id)}

    leases = db.query(Lease).filter(Lease.shop_id.in_(list(shops))).all() if shops else []
    lease_by_id = {lease.id: lease for lease in leases}

    transactions = []
    rent_total = common_total = deposit_total = ZERO

    payments = active_payments(
        db.query(Payment).filter(Payment.lease_id.in_(list(lease_by_id))).all()
    ) if lease_by_id else []
    for p in payments:
        if not _in_window(p.payment_date, start_date, end_date):
            continue
        lease = lease_by_id[p.lease_id]
        shop = shops[lease.shop_id]
        amount = owner_share(p.amount, shop, owner_id, count)
        is_common = shop.ownership_type == OwnershipType.common.value
        if is_common:
            common_total += amount
        else:
            rent_total += amount
        transactions.append(dict(
            date=p.payment_date,
            description=f"Rent payment{' (common share)' if is_common else ''}",
            type="credit",
            category="common_shop_share" if is_common else "rent",
            amount=amount,
            shop_number=shop.shop_number,
            tenant_name=lease.tenant.name if lease.tenant else None,
        ))

    for lease in leases:
        shop = shops[lease.shop_id]
        deposit = to_money(lease.security_deposit)
        if shop.ownership_type != OwnershipType.sole.value or deposit <= ZERO:
            continue
        if not _in_window(lease.start_date, start_date, end_date):
            continue
        deposit_total += deposit
        transactions.append(dict(
            date=lease.start_date,
            description="Security deposit",
            type="credit",
            category="security_deposit",
            amount=deposit,
            shop_number=shop.shop_number,
            tenant_name=lease.tenant.name if lease.tenant else None,
        ))

    expense_total = ZERO
    for e in _owner_expenses(db, owner_id):
        if not _in_window(e.expense_date, start_date, end_date):
            continue
        is_common = e.allocation == ExpenseAllocation.common.value
        amount = allocate_common_share(e.amount, count) if is_common else to_money(e.amount)
        expense_total += amount
        transactions.append(dict(
            date=e.expense_date,
            description=e.description,
            type="debit",
            category=f"{e.expense_type}{' (common)' if is_common else ''}",
            amount=amount,
        ))

    transactions.sort(key=lambda t: t["date"])
    balance = ZERO
    rows = []
    for t in transactions:
        balance += t["amount"] if t["type"] == "credit" else -t["amount"]
        rows.append(OwnerStatementTransaction(**t, balance=balance))

    credits = rent_total + common_total + deposit_total
    return OwnerStatementOut(
        owner=OwnerOut.model_validate(owner),
        owner_count=count,
        transactions=rows,
        summary=OwnerStatementSummary(
            total_credits=credits,
            total_debits=expense_total,
            net_balance=credits - expense_total,
            rent_payments=rent_total,
            security_deposits=deposit_total,
            common_shop_share=common_total,
            total_expenses=expense_total,
        ),
    )


def get_owner_outstanding(db: Session, owner_id: int, limit: int = 5,
                          today: Optional[date] = None) -> OwnerOutstandingOut:
    get_owner_or_404(db, owner_id)
    count = owner_count(db)
    shops = {s.id: s for s in _owner_shops(db, owner_id)}
    if not shops:
        return OwnerOutstandingOut(data=[], total=ZERO)

    leases = (
        db.query(Lease)
        .filter(
            Lease.shop_id.in_(list(shops)),
            Lease.status.in_([s.value for s in RUNNING_LEASE_STATUSES]),
        )
        .all()
    )

    entries = []
    for lease in leases:
        due = lease_current_due(db, lease, today)
        if due <= ZERO:
            continue
        shop = shops[lease.shop_id]
        entries.append(OutstandingEntry(
            tenant_id=lease.tenant_id,
            tenant_name=lease.tenant.name,
            lease_id=lease.id,
            shop_number=shop.shop_number,
            floor=shop.floor,
            is_common=shop.ownership_type == OwnershipType.common.value,
            outstanding=owner_share(due, shop, owner_id, count),
        ))

    entries.sort(key=lambda e: e.outstanding, reverse=True)
    return OwnerOutstandingOut(
        data=entries[:limit],
        total=sum_money(e.outstanding for e in entries),
    )


# ----------------------------------------------------
# Owner details
# ----------------------------------------------------
FLOOR_ORDER = {floor.value: i for i, floor in enumerate(ShopFloor)}


def _shop_sort_key(entry: OwnerTenantEntry):
    digits = "".join(ch for ch in entry.shop_number if ch.isdigit())
    return (FLOOR_ORDER.get(entry.floor, len(FLOOR_ORDER)),
            int(digits) if digits else 0, entry.shop_number)


def _owner_portion(amount, shop: Shop, owner_id: int, ids: List[int]) -> Decimal:
    """Owner's slice of a shop figure; common slices add back up to the full figure."""
    if shop.ownership_type == OwnershipType.common.value:
        return split_common_amount(amount, ids)[owner_id]
    return to_money(amount) if shop.owner_id == owner_id else ZERO


def _tenant_entry(db: Session, lease: Lease, shop: Shop, owner_id: int,
                  ids: List[int], today: Optional[date]) -> OwnerTenantEntry:
    held = to_money(lease.security_deposit) - to_money(lease.security_deposit_used)
    dues = max(ZERO, lease_current_due(db, lease, today))
    paid_on = [p.payment_date for p in active_payments(lease.payments)]
    ratio = share_ratio(shop, owner_id, len(ids))

    return OwnerTenantEntry(
        tenant_id=lease.tenant_id,
        tenant_name=lease.tenant.name,
        phone=lease.tenant.phone,
        lease_id=lease.id,
        shop_number=shop.shop_number,
        floor=shop.floor,
        is_common=shop.ownership_type == OwnershipType.common.value,
        lease_status=lease.status,
        security_deposit=_owner_portion(held, shop, owner_id, ids),
        monthly_rent=to_money(to_money(lease.monthly_rent) * ratio),
        current_dues=_owner_portion(dues, shop, owner_id, ids),
        full_security_deposit=held,
        full_monthly_rent=to_money(lease.monthly_rent),
        full_current_dues=dues,
        last_payment_date=max(paid_on) if paid_on else None,
    )


def _month_key(value: date):
    return value.year, value.month


def _recent_months(today: date, count: int = 12):
    first = today.replace(day=1)
    return [first - relativedelta(months=i) for i in range(count)]


def get_owner_details(db: Session, owner_id: int, today: Optional[date] = None) -> OwnerDetailsOut:
    """
    Owner dashboard: tenants on sole and common shops with the deposit
    the owner still holds and the dues owed to them, bank deposits,
    expenses and rolling monthly and yearly income reports.
    """
    today = today or date.today()
    owner = get_owner_or_404(db, owner_id)
    ids = owner_ids(db)
    count = len(ids)

    shops = {s.id: s for s in _owner_shops(db, owner_id)}
    sole_shops = [s for s in shops.values() if s.ownership_type == OwnershipType.sole.value]
    common_shops = [s for s in shops.values() if s.ownership_type == OwnershipType.common.value]

    leases = db.query(Lease).filter(Lease.shop_id.in_(list(shops))).all() if shops else []

    tenants, common_tenants = [], []
    for lease in leases:
        if lease.status == LeaseStatus.terminated.value:
            continue
        shop = shops[lease.shop_id]
        entry = _tenant_entry(db, lease, shop, owner_id, ids, today)
        (common_tenants if entry.is_common else tenants).append(entry)
    tenants.sort(key=_shop_sort_key)
    common_tenants.sort(key=_shop_sort_key)

    deposits = (
        db.query(BankDeposit)
        .filter(BankDeposit.owner_id == owner_id, BankDeposit.is_deleted == False)
        .order_by(BankDeposit.deposit_date.desc(), BankDeposit.id.desc())
        .all()
    )

    expenses = []
    for e in _owner_expenses(db, owner_id):
        is_common = e.allocation == ExpenseAllocation.common.value
        expenses.append(OwnerExpenseEntry(
            id=e.id,
            expense_date=e.expense_date,
            expense_type=e.expense_type,
            description=e.description,
            amount=to_money(e.amount),
            allocated_amount=allocate_common_share(e.amount, count) if is_common else to_money(e.amount),
            is_common=is_common,
        ))
    expenses.sort(key=lambda e: (e.expense_date, e.id), reverse=True)

    lease_by_id = {lease.id: lease for lease in leases}
    payments = active_payments(
        db.query(Payment).filter(Payment.lease_id.in_(list(lease_by_id))).all()
    ) if lease_by_id else []

    monthly = []
    for month in _recent_months(today):
        key = _month_key(month)
        rent = sum_money(
            owner_share(p.amount, shops[lease_by_id[p.lease_id].shop_id], owner_id, count)
            for p in payments if _month_key(p.payment_date) == key
        )
        spent = sum_money(e.allocated_amount for e in expenses if _month_key(e.expense_date) == key)
        monthly.append(OwnerPeriodReport(
            period=month.strftime("%b %Y"),
            rent_collection=rent,
            bank_deposits=sum_money(d.amount for d in deposits if _month_key(d.deposit_date) == key),
            expenses=spent,
            net_income=rent - spent,
        ))

    yearly = {}
    for month, report in zip(_recent_months(today), monthly):
        year = yearly.setdefault(month.year, OwnerPeriodReport(
            period=str(month.year), rent_collection=ZERO, bank_deposits=ZERO,
            expenses=ZERO, net_income=ZERO))
        year.rent_collection += report.rent_collection
        year.bank_deposits += report.bank_deposits
        year.expenses += report.expenses
        year.net_income += report.net_income

    return OwnerDetailsOut(
        owner=OwnerOut.model_validate(owner),
        summary=OwnerDetailsSummary(
            total_security_deposit=sum_money(t.security_deposit for t in tenants),
            total_outstanding_dues=sum_money(t.current_dues for t in tenants),
            total_tenants=len(tenants),
            total_shops=len(sole_shops),
            common_security_deposit=sum_money(t.security_deposit for t in common_tenants),
            common_outstanding_dues=sum_money(t.current_dues for t in common_tenants),
            common_tenants=len(common_tenants),
            common_shops=len(common_shops),
            total_common_expense_share=sum_money(e.allocated_amount for e in expenses if e.is_common),
            total_private_expense=sum_money(e.allocated_amount for e in expenses if not e.is_common),
            total_owners=count,
        ),
        tenants=tenants,
        common_tenants=common_tenants,
        bank_deposits=[BankDepositOut.model_validate(d) for d in deposits],
        expenses=expenses,
        monthly_reports=monthly,
        yearly_reports=[yearly[y] for y in sorted(yearly, reverse=True)],
    )
