from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from estate_service.app.helpers.rent_rate_helper import initial_rent, resolve_rent_for_month


def adjustment(id, effective, previous, new):
    return SimpleNamespace(
        id=id, effective_date=effective,
        previous_rent=Decimal(previous), new_rent=Decimal(new),
    )


LEASE = SimpleNamespace(monthly_rent=Decimal("12000"), start_date=date(2024, 1, 1))


class TestResolveRentForMonth:
    def test_without_adjustments_uses_monthly_rent(self):
        assert resolve_rent_for_month(LEASE, [], 2024, 3) == Decimal("12000.00")

    def test_adjustment_applies_from_its_month(self):
        adjs = [adjustment(1, date(2024, 3, 1), "10000", "12000")]
        assert resolve_rent_for_month(LEASE, adjs, 2024, 2) == Decimal("10000.00")
        assert resolve_rent_for_month(LEASE, adjs, 2024, 3) == Decimal("12000.00")
        assert resolve_rent_for_month(LEASE, adjs, 2024, 5) == Decimal("12000.00")

    def test_mid_month_adjustment_starts_next_month(self):
        adjs = [adjustment(1, date(2024, 3, 15), "10000", "12000")]
        assert resolve_rent_for_month(LEASE, adjs, 2024, 3) == Decimal("10000.00")
        assert resolve_rent_for_month(LEASE, adjs, 2024, 4) == Decimal("12000.00")

    def test_multiple_adjustments_unsorted_input(self):
        adjs = [
            adjustment(2, date(2024, 6, 1), "12000", "15000"),
            adjustment(1, date(2024, 3, 1), "10000", "12000"),
        ]
        assert initial_rent(LEASE, adjs) == Decimal("10000.00")
        assert resolve_rent_for_month(LEASE, adjs, 2024, 1) == Decimal("10000.00")
        assert resolve_rent_for_month(LEASE, adjs, 2024, 4) == Decimal("12000.00")
        assert resolve_rent_for_month(LEASE, adjs, 2024, 7) == Decimal("15000.00")

    def test_rejects_bad_month(self):
        with pytest.raises(ValueError):
            resolve_rent_for_month(LEASE, [], 2024, 13)
