from datetime import datetime, date
from typing import Optional, List
from decimal import Decimal
from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class LeaseBase(EmptyStringModel):
    tenant_id: Optional[int] = None
    shop_id: Optional[int] = None

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    monthly_rent: Optional[Decimal] = Field(default=None, ge=0)
    security_deposit: Optional[Decimal] = Field(default=None, ge=0)
    opening_due_balance: Optional[Decimal] = None
    notes: Optional[str] = None


class LeaseCreate(LeaseBase):
    tenant_id: int
    shop_id: int
    start_date: date
    end_date: date
    monthly_rent: Decimal = Field(ge=0)
    security_deposit: Decimal = Field(default=Decimal("0"), ge=0)
    opening_due_balance: Decimal = Decimal("0")


class LeaseUpdate(LeaseBase):
    id: int


class LeaseOut(BaseModel):
    id: int
    tenant_id: int
    shop_id: int
    start_date: date
    end_date: date
    monthly_rent: Decimal
    security_deposit: Decimal
    security_deposit_used: Decimal
    opening_due_balance: Decimal
    status: str
    notes: Optional[str] = None
    termination_notes: Optional[str] = None
    terminated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    tenant_name: Optional[str] = None
    shop_number: Optional[str] = None

    model_config = {"from_attributes": True}


class LeaseRequest(CommonQueryParams):
    tenant_id: Optional[int] = None
    shop_id: Optional[int] = None
    status: Optional[str] = None       # "all" | "active" | ...


class LeaseListResponse(BaseModel):
    leases: List[LeaseOut]
    total: int


class RentInvoiceOut(BaseModel):
    id: int
    lease_id: int
    tenant_id: int
    amount: Decimal
    due_date: date
    month: int
    year: int
    is_paid: bool
    paid_amount: Decimal

    model_config = {"from_attributes": True}


class RentAdjustmentCreate(EmptyStringModel):
    new_rent: Decimal = Field(ge=0)
    effective_date: date
    agreement_terms: Optional[str] = None
    notes: Optional[str] = None


class RentAdjustmentOut(BaseModel):
    id: int
    lease_id: int
    previous_rent: Decimal
    new_rent: Decimal
    adjustment_amount: Decimal
    effective_date: date
    agreement_terms: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PaymentFormMonth(BaseModel):
    year: int
    month: int
    label: str
    rent: Decimal
    is_paid: bool
    paid_amount: Decimal
    remaining_balance: Decimal
    payment_dates: List[date] = []
    is_past: bool
    is_current: bool
    is_future: bool


class PaymentFormData(BaseModel):
    lease_id: int
    tenant_id: int
    tenant_name: str
    current_rent: Decimal
    opening_balance: Decimal
    outstanding_balance: Decimal
    total_paid: Decimal
    # paid beyond every billed month, waiting for future invoices
    advance_credit: Decimal
    months: List[PaymentFormMonth]
