import re
from datetime import datetime, date
from typing import Optional, List
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

RENT_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class PaymentCreate(EmptyStringModel):
    tenant_id: int
    lease_id: int
    amount: Decimal = Field(gt=0)
    payment_date: date
    rent_months: Optional[List[str]] = None
    receipt_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("rent_months")
    @classmethod
    def validate_rent_months(cls, value):
        if not value:
            return None
        for month_key in value:
            if not RENT_MONTH_PATTERN.match(month_key):
                raise ValueError(f"rent month must look like YYYY-MM, got {month_key!r}")
        # keep order stable and drop duplicates
        return sorted(set(value))


class PaymentDeleteRequest(EmptyStringModel):
    reason: str


class PaymentOut(BaseModel):
    id: int
    tenant_id: int
    lease_id: int
    amount: Decimal
    payment_date: date
    rent_months: Optional[List[str]] = None
    receipt_number: Optional[str] = None
    notes: Optional[str] = None
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    deletion_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PaymentRequest(CommonQueryParams):
    tenant_id: Optional[int] = None
    lease_id: Optional[int] = None
    include_deleted: Optional[bool] = False


class PaymentListResponse(BaseModel):
    payments: List[PaymentOut]
    total: int


class LedgerTransferOut(BaseModel):
    id: int
    tenant_id: int
    source_lease_id: int
    target_lease_id: int
    amount: Decimal
    transfer_date: date
    notes: Optional[str] = None

    model_config = {"from_attributes": True}
