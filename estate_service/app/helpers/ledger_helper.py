from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from .money_helper import ZERO, to_money
from ..enum.estate_enum import LedgerEntryType


@dataclass
class LedgerRow:
    date: date
    type: str
    description: str
    lease_id: Optional[int]
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    balance: Decimal = ZERO


def month_label(year: int, month: int) -> str:
    return date(year, month, 1).strftime("%b %Y")


def explode_rent_months(amount: Any, rent_months: Sequence[str]) -> List[tuple]:
    """
    Split a payment evenly across the months it names.

    Returns (first day of month, amount) pairs; rounding cents land on
    the last month so the parts add up to the payment.
    """
    total = to_money(amount)
    months = sorted(rent_months)
    if not months:
        return []

    share = to_money(total / len(months))
    parts = []
    for idx, key in enumerate(months):
        year, month = (int(p) for p in key.split("-"))
        value = share if idx < len(months) - 1 else total - share * (len(months) - 1)
        parts.append((date(year, month, 1), value))
    return parts


def invoice_rows(invoices: Sequence) -> List[LedgerRow]:
    return [
        LedgerRow(
            date=inv.due_date,
            type=LedgerEntryType.rent.value,
            description=f"Rent for {month_label(inv.year, inv.month)}",
            lease_id=inv.lease_id,
            debit=to_money(inv.amount),
        )
        for inv in invoices
    ]


def payment_rows(payments: Sequence) -> List[LedgerRow]:
    rows = []
    for p in payments:
        if p.is_deleted:
            continue
        receipt = f" ({p.receipt_number})" if p.receipt_number else ""
        if p.rent_months:
            for first_day, value in explode_rent_months(p.amount, p.rent_months):
                rows.append(LedgerRow(
                    date=first_day,
                    type=LedgerEntryType.payment.value,
                    description=f"Payment for {month_label(first_day.year, first_day.month)}{receipt}",
                    lease_id=p.lease_id,
                    credit=value,
                ))
        else:
            rows.append(LedgerRow(
                date=p.payment_date,
                type=LedgerEntryType.payment.value,
                description=f"Payment received{receipt}",
                lease_id=p.lease_id,
                credit=to_money(p.amount),
            ))
    return rows


def transfer_rows(transfers: Sequence, lease_ids: Sequence[int]) -> List[LedgerRow]:
    """Credit on the receiving lease, debit on the lease the money left."""
    rows = []
    for t in transfers:
        amount = to_money(t.amount)
        if t.target_lease_id in lease_ids:
            rows.append(LedgerRow(
                date=t.transfer_date,
                type=LedgerEntryType.transfer_in.value,
                description=f"Balance transfer from lease {t.source_lease_id}",
                lease_id=t.target_lease_id,
                credit=amount,
            ))
        if t.source_lease_id in lease_ids:
            rows.append(LedgerRow(
                date=t.transfer_date,
                type=LedgerEntryType.transfer_out.value,
                description=f"Balance transfer to lease {t.target_lease_id}",
                lease_id=t.source_lease_id,
                debit=amount,
            ))
    return rows


def build_ledger_rows(opening_balance: Any, opening_date: date,
                      rows: Sequence[LedgerRow]) -> List[LedgerRow]:
    """Order rows by date (debits first on a tie) and attach the running balance."""
    opening = to_money(opening_balance)
    ordered = sorted(rows, key=lambda r: (r.date, 0 if r.debit > ZERO else 1))

    result = []
    if opening != ZERO:
        result.append(LedgerRow(
            date=min([opening_date] + [r.date for r in ordered]),
            type=LedgerEntryType.opening.value,
            description="Opening balance",
            lease_id=None,
            debit=opening if opening > ZERO else ZERO,
            credit=-opening if opening < ZERO else ZERO,
        ))
    result.extend(ordered)

    balance = ZERO
    for row in result:
        balance = balance + row.debit - row.credit
        row.balance = balance
    return result


def verify_final_balance(rows: Sequence[LedgerRow], expected_due: Decimal) -> Decimal:
    final = rows[-1].balance if rows else ZERO
    if final != to_money(expected_due):
        raise ValueError(
            f"Ledger balance {final} does not match current due {expected_due}")
    return final
