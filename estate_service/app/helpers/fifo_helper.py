from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from .money_helper import ZERO, sum_money, to_money


@dataclass(frozen=True)
class CreditPosting:
    """Signed amount credited to one lease."""
    lease_id: Any
    amount: Decimal
    posted_on: date
    kind: str  # payment | transfer_in | transfer_out
    reference_id: Any = None


@dataclass(frozen=True)
class InvoiceAllocation:
    invoice_id: Any
    year: int
    month: int
    amount: Decimal
    is_paid: bool
    paid_amount: Decimal


def active_payments(payments: Sequence) -> list:
    return [p for p in payments if not p.is_deleted]


def lease_credit_postings(lease_id, payments: Sequence, transfers: Sequence = ()) -> List[CreditPosting]:
    """
    Everything that reduces a lease's balance: its non-deleted payments,
    plus transfers landing on it, minus transfers drawn from it.
    """
    postings = [
        CreditPosting(
            lease_id=lease_id,
            amount=to_money(p.amount),
            posted_on=p.payment_date,
            kind="payment",
            reference_id=p.id,
        )
        for p in active_payments(payments)
        if p.lease_id == lease_id
    ]

    for t in transfers:
        if t.target_lease_id == lease_id:
            postings.append(CreditPosting(
                lease_id=lease_id, amount=to_money(t.amount),
                posted_on=t.transfer_date, kind="transfer_in", reference_id=t.id))
        elif t.source_lease_id == lease_id:
            postings.append(CreditPosting(
                lease_id=lease_id, amount=-to_money(t.amount),
                posted_on=t.transfer_date, kind="transfer_out", reference_id=t.id))

    return postings


def total_credits(postings: Sequence[CreditPosting]) -> Decimal:
    return sum_money(p.amount for p in postings)


def allocate_fifo(invoices: Sequence, credit_total: Decimal) -> List[InvoiceAllocation]:
    """
    Spread the lease's total credit over its invoices oldest month first.

    A negative total (more drawn out than paid in) leaves every invoice
    unpaid. Sum of paid_amount == clamp(credit_total, 0, sum of amounts).
    """
    remaining = to_money(credit_total)
    allocations = []

    for inv in sorted(invoices, key=lambda i: (i.year, i.month)):
        amount = to_money(inv.amount)

        if remaining >= amount:
            is_paid, paid = True, amount
            remaining -= amount
        elif remaining > ZERO:
            is_paid, paid = False, remaining
            remaining = ZERO
        else:
            is_paid, paid = False, ZERO

        allocations.append(InvoiceAllocation(
            invoice_id=inv.id,
            year=inv.year,
            month=inv.month,
            amount=amount,
            is_paid=is_paid,
            paid_amount=paid,
        ))

    return allocations


def unallocated_credit(invoices: Sequence, credit_total: Decimal) -> Decimal:
    """Credit left over once every invoice is covered (advance payment)."""
    billed = sum_money(inv.amount for inv in invoices)
    return max(ZERO, to_money(credit_total) - billed)
