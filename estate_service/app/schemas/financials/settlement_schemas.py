from datetime import date
from typing import Optional, List, Any
from decimal import Decimal
from pydantic import BaseModel

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class SettlementRequest(EmptyStringModel):
    use_security_deposit: bool = False
    # credit to pull from the tenant's other leases; validated as > 0
    transfer_amount: Optional[Any] = None
    termination_notes: Optional[str] = None


class PlannedTransfer(BaseModel):
    source_lease_id: int
    target_lease_id: int
    amount: Decimal
    source_balance: Decimal


class SiblingLeaseBalance(BaseModel):
    lease_id: int
    status: str
    balance: Decimal


class SettlementResult(BaseModel):
    lease_id: int
    tenant_id: int
    settlement_date: date

    opening_balance: Decimal
    total_invoiced: Decimal
    total_credited: Decimal
    # opening + invoiced - credited, before any transfer
    current_due_before_transfer: Decimal

    transfer_requested: Decimal
    transferred_amount: Decimal
    transfers: List[PlannedTransfer] = []

    this_lease_current_due: Decimal
    security_deposit: Decimal
    security_deposit_used: Decimal
    final_settled_amount: Decimal

    # positive: owed elsewhere, negative: credit elsewhere
    global_ledger_balance: Decimal
    sibling_balances: List[SiblingLeaseBalance] = []


class TerminationOut(BaseModel):
    lease_id: int
    status: str
    terminated_at: Optional[Any] = None
    termination_notes: Optional[str] = None
    settlement: SettlementResult
