from datetime import datetime
from typing import Optional, List, Dict
from decimal import Decimal
from pydantic import BaseModel

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class TenantCreate(EmptyStringModel):
    name: str
    phone: str
    email: Optional[str] = None
    business_name: Optional[str] = None
    notes: Optional[str] = None
    opening_due_balance: Decimal = Decimal("0")


class TenantOut(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str] = None
    business_name: Optional[str] = None
    notes: Optional[str] = None
    opening_due_balance: Decimal
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TenantWithDues(TenantOut):
    total_due: Decimal
    total_paid: Decimal
    current_due: Decimal
    # "YYYY-MM" -> rent still owed for that month
    monthly_dues: Dict[str, Decimal] = {}


class TenantRequest(CommonQueryParams):
    pass


class TenantListResponse(BaseModel):
    tenants: List[TenantWithDues]
    total: int
