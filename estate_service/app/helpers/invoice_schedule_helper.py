from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from .rent_rate_helper import resolve_rent_for_month


@dataclass(frozen=True)
class InvoiceDraft:
    year: int
    month: int
    due_date: date
    amount: Decimal


def month_start(value: date) -> date:
    return value.replace(day=1)


def is_elapsed_month(year: int, month: int, today: date) -> bool:
    """A month counts as elapsed once it has started."""
    return (year, month) <= (today.year, today.month)


def filter_elapsed_invoices(invoices: Sequence, today: Optional[date] = None) -> list:
    today = today or date.today()
    return sorted(
        (inv for inv in invoices if is_elapsed_month(inv.year, inv.month, today)),
        key=lambda inv: (inv.year, inv.month),
    )


def billing_months(start_date: date, end_date: date, today: date) -> List[date]:
    """
    First day of every month to bill: from the lease start month through
    min(end_date, current month). Empty for leases that have not started.
    """
    current = month_start(start_date)
    limit = min(end_date, month_start(today))

    months = []
    while current <= limit:
        months.append(current)
        current = current + relativedelta(months=1)
    return months


def build_invoice_schedule(lease, adjustments: Sequence, today: Optional[date] = None) -> List[InvoiceDraft]:
    today = today or date.today()
    if lease.end_date < lease.start_date:
        raise ValueError("Lease end date is before its start date")

    return [
        InvoiceDraft(
            year=first_day.year,
            month=first_day.month,
            due_date=first_day,
            amount=resolve_rent_for_month(
                lease, adjustments, first_day.year, first_day.month),
        )
        for first_day in billing_months(lease.start_date, lease.end_date, today)
    ]
