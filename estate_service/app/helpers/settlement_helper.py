from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from .fifo_helper import CreditPosting, total_credits
from .money_helper import ZERO, sum_money, to_money


@dataclass(frozen=True)
class LeaseBalance:
    lease_id: int
    status: str
    balance: Decimal


@dataclass(frozen=True)
class TransferPlan:
    source_lease_id: int
    target_lease_id: int
    amount: Decimal
    source_balance: Decimal


@dataclass
class SettlementFigures:
    opening_balance: Decimal
    total_invoiced: Decimal
    total_credited: Decimal
    due_before_transfer: Decimal
    transfer_requested: Decimal
    transfers: List[TransferPlan] = field(default_factory=list)
    security_deposit: Decimal = ZERO
    security_deposit_used: Decimal = ZERO

    @property
    def transferred_amount(self) -> Decimal:
        return sum_money(t.amount for t in self.transfers)

    @property
    def due_after_transfer(self) -> Decimal:
        return self.due_before_transfer - self.transferred_amount

    @property
    def final_settled_amount(self) -> Decimal:
        return self.due_after_transfer - self.security_deposit_used


def compute_lease_due(opening_balance: Any, elapsed_invoices: Sequence,
                      postings: Sequence[CreditPosting]) -> Decimal:
    """opening + billed - credited; negative means the lease is in credit."""
    billed = sum_money(inv.amount for inv in elapsed_invoices)
    return to_money(opening_balance) + billed - total_credits(postings)


def compute_security_deposit_used(due: Decimal, security_deposit: Any, use_deposit: bool) -> Decimal:
    if not use_deposit:
        return ZERO
    return min(max(ZERO, to_money(due)), to_money(security_deposit))


def validate_transfer_amount(raw: Any) -> Optional[Decimal]:
    """None when no transfer was asked for; raises on anything but a positive amount."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValueError("Transfer amount must be a number")
    try:
        amount = to_money(raw)
    except ValueError:
        raise ValueError(f"Transfer amount must be a number, got {raw!r}")
    if amount <= ZERO:
        raise ValueError("Transfer amount must be greater than zero")
    return amount


def plan_transfers(target_lease_id: int, siblings: Sequence[LeaseBalance],
                   requested: Decimal) -> List[TransferPlan]:
    """
    Drain sibling leases that are in credit, lowest lease id first.

    Each drain is bounded only by the sibling's credit and the amount still
    requested. The target may end up in credit, which is owed to the tenant.
    """
    remaining_requested = to_money(requested)
    plans = []

    for sibling in sorted(siblings, key=lambda s: s.lease_id):
        if sibling.lease_id == target_lease_id or sibling.balance >= ZERO:
            continue
        if remaining_requested <= ZERO:
            break

        amount = min(-sibling.balance, remaining_requested)
        plans.append(TransferPlan(
            source_lease_id=sibling.lease_id,
            target_lease_id=target_lease_id,
            amount=amount,
            source_balance=sibling.balance,
        ))
        remaining_requested -= amount

    return plans


def calculate_settlement(
    opening_balance: Any,
    elapsed_invoices: Sequence,
    postings: Sequence[CreditPosting],
    security_deposit: Any,
    use_security_deposit: bool,
    target_lease_id: int,
    siblings: Sequence[LeaseBalance] = (),
    transfer_amount: Any = None,
) -> SettlementFigures:
    requested = validate_transfer_amount(transfer_amount)
    due = compute_lease_due(opening_balance, elapsed_invoices, postings)

    figures = SettlementFigures(
        opening_balance=to_money(opening_balance),
        total_invoiced=sum_money(inv.amount for inv in elapsed_invoices),
        total_credited=total_credits(postings),
        due_before_transfer=due,
        transfer_requested=requested or ZERO,
        security_deposit=to_money(security_deposit),
        security_deposit_used=compute_security_deposit_used(
            due, security_deposit, use_security_deposit),
    )

    if requested:
        figures.transfers = plan_transfers(target_lease_id, siblings, requested)

    return figures
