from datetime import datetime, date
from typing import Optional, List
from decimal import Decimal
from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.estate_enum import ExpenseAllocation, ExpenseType


class ExpenseCreate(EmptyStringModel):
    expense_type: ExpenseType
    description: str
    amount: Decimal = Field(gt=0)
    expense_date: date
    allocation: ExpenseAllocation
    owner_id: Optional[int] = None
    receipt_ref: Optional[str] = None


class ExpenseOut(BaseModel):
    id: int
    expense_type: str
    description: str
    amount: Decimal
    expense_date: date
    allocation: str
    owner_id: Optional[int] = None
    receipt_ref: Optional[str] = None
    created_at: Optional[datetime] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    deletion_reason: Optional[str] = None

    model_config = {"from_attributes": True}


class ExpenseRequest(CommonQueryParams):
    owner_id: Optional[int] = None
    allocation: Optional[str] = None
    include_deleted: bool = False


class BankDepositCreate(EmptyStringModel):
    owner_id: int
    amount: Decimal = Field(gt=0)
    deposit_date: date
    bank_name: str
    deposit_slip_ref: Optional[str] = None
    notes: Optional[str] = None


class BankDepositOut(BaseModel):
    id: int
    owner_id: int
    amount: Decimal
    deposit_date: date
    bank_name: str
    deposit_slip_ref: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    deletion_reason: Optional[str] = None

    model_config = {"from_attributes": True}


class BankDepositRequest(CommonQueryParams):
    owner_id: Optional[int] = None
    include_deleted: bool = False


class BankDepositListResponse(BaseModel):
    deposits: List[BankDepositOut]
    total: Decimal


class DeletionRequest(EmptyStringModel):
    reason: str

