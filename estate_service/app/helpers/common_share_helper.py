from decimal import Decimal
from typing import Any, Dict, Sequence

from .money_helper import ZERO, to_money
from ..enum.estate_enum import OwnershipType


def allocate_common_share(full_amount: Any, owner_count: int) -> Decimal:
    """Equal per-owner slice of an amount on a commonly held shop."""
    if owner_count is None or owner_count <= 0:
        raise ValueError("Owner count must be greater than zero")
    return to_money(to_money(full_amount) / owner_count)


def split_common_amount(full_amount: Any, owner_ids: Sequence) -> Dict[Any, Decimal]:
    """Per-owner shares that add back up to the full amount; the last owner absorbs the cents."""
    if not owner_ids:
        raise ValueError("Owner count must be greater than zero")

    total = to_money(full_amount)
    share = allocate_common_share(total, len(owner_ids))
    shares = {owner_id: share for owner_id in owner_ids[:-1]}
    shares[owner_ids[-1]] = total - share * (len(owner_ids) - 1)
    return shares


def share_ratio(shop, owner_id, owner_count: int) -> Decimal:
    if shop.ownership_type == OwnershipType.common.value:
        if owner_count <= 0:
            raise ValueError("Owner count must be greater than zero")
        return Decimal(1) / Decimal(owner_count)
    return Decimal(1) if shop.owner_id == owner_id else Decimal(0)


def owner_share(amount: Any, shop, owner_id, owner_count: int) -> Decimal:
    if shop.ownership_type == OwnershipType.common.value:
        return allocate_common_share(amount, owner_count)
    return to_money(amount) if shop.owner_id == owner_id else ZERO
