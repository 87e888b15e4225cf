from datetime import date
from decimal import Decimal
from typing import Sequence

from .money_helper import to_money


def sort_adjustments(adjustments: Sequence) -> list:
    return sorted(
        adjustments,
        key=lambda adj: (adj.effective_date, getattr(adj, "id", None) or 0),
    )


def initial_rent(lease, adjustments: Sequence) -> Decimal:
    """Rent agreed before any adjustment was recorded."""
    ordered = sort_adjustments(adjustments)
    if ordered:
        return to_money(ordered[0].previous_rent)
    return to_money(lease.monthly_rent)


def resolve_rent_for_month(lease, adjustments: Sequence, year: int, month: int) -> Decimal:
    """
    Rent contractually in force for (year, month).

    An adjustment applies to a month when its effective date falls on or
    before the first day of that month, so a mid-month adjustment first
    bills in the following month.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")

    target = date(year, month, 1)
    rent = initial_rent(lease, adjustments)

    for adj in sort_adjustments(adjustments):
        if adj.effective_date <= target:
            rent = to_money(adj.new_rent)
        else:
            break

    return rent
