from datetime import date
from typing import Optional, List
from decimal import Decimal
from pydantic import BaseModel

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.estate_enum import OwnershipType, ShopFloor
from ..financials.expenses_schemas import BankDepositOut


class OwnerCreate(EmptyStringModel):
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_branch: Optional[str] = None


class OwnerOut(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_branch: Optional[str] = None

    model_config = {"from_attributes": True}


class ShopCreate(EmptyStringModel):
    shop_number: str
    floor: ShopFloor
    ownership_type: OwnershipType
    owner_id: Optional[int] = None
    square_feet: Optional[Decimal] = None
    description: Optional[str] = None


class ShopOut(BaseModel):
    id: int
    shop_number: str
    floor: str
    status: str
    ownership_type: str
    owner_id: Optional[int] = None
    square_feet: Optional[Decimal] = None
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class OwnerStatementRequest(EmptyStringModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class OwnerStatementTransaction(BaseModel):
    date: date
    description: str
    type: str  # credit|debit
    category: str
    amount: Decimal
    balance: Decimal
    shop_number: Optional[str] = None
    tenant_name: Optional[str] = None


class OwnerStatementSummary(BaseModel):
    total_credits: Decimal
    total_debits: Decimal
    net_balance: Decimal
    rent_payments: Decimal
    security_deposits: Decimal
    common_shop_share: Decimal
    total_expenses: Decimal


class OwnerStatementOut(BaseModel):
    owner: OwnerOut
    owner_count: int
    transactions: List[OwnerStatementTransaction]
    summary: OwnerStatementSummary


class OutstandingEntry(BaseModel):
    tenant_id: int
    tenant_name: str
    lease_id: int
    shop_number: str
    floor: str
    is_common: bool
    outstanding: Decimal


class OwnerOutstandingOut(BaseModel):
    data: List[OutstandingEntry]
    total: Decimal


class CommonShareOut(BaseModel):
    full_amount: Decimal
    owner_count: int
    share: Decimal


class OwnerTenantEntry(BaseModel):
    tenant_id: int
    tenant_name: str
    phone: Optional[str] = None
    lease_id: int
    shop_number: str
    floor: str
    is_common: bool
    lease_status: str
    # owner's slice; equals the full figure on a sole shop
    security_deposit: Decimal
    monthly_rent: Decimal
    current_dues: Decimal
    full_security_deposit: Decimal
    full_monthly_rent: Decimal
    full_current_dues: Decimal
    last_payment_date: Optional[date] = None


class OwnerExpenseEntry(BaseModel):
    id: int
    expense_date: date
    expense_type: str
    description: str
    amount: Decimal
    allocated_amount: Decimal
    is_common: bool


class OwnerPeriodReport(BaseModel):
    period: str
    rent_collection: Decimal
    bank_deposits: Decimal
    expenses: Decimal
    net_income: Decimal


class OwnerDetailsSummary(BaseModel):
    total_security_deposit: Decimal
    total_outstanding_dues: Decimal
    total_tenants: int
    total_shops: int
    common_security_deposit: Decimal
    common_outstanding_dues: Decimal
    common_tenants: int
    common_shops: int
    total_common_expense_share: Decimal
    total_private_expense: Decimal
    total_owners: int


class OwnerDetailsOut(BaseModel):
    owner: OwnerOut
    summary: OwnerDetailsSummary
    tenants: List[OwnerTenantEntry]
    common_tenants: List[OwnerTenantEntry]
    bank_deposits: List[BankDepositOut]
    expenses: List[OwnerExpenseEntry]
    monthly_reports: List[OwnerPeriodReport]
    yearly_reports: List[OwnerPeriodReport]
