from datetime import date
from typing import Optional, List
from decimal import Decimal
from pydantic import BaseModel


class LedgerEntryOut(BaseModel):
    id: int
    date: date
    type: str  # opening|rent|payment|transfer_in|transfer_out
    description: str
    lease_id: Optional[int] = None
    debit: Decimal
    credit: Decimal
    balance: Decimal


class LedgerOut(BaseModel):
    tenant_id: int
    lease_id: Optional[int] = None
    opening_balance: Decimal
    total_debits: Decimal
    total_credits: Decimal
    current_due: Decimal
    entries: List[LedgerEntryOut]
