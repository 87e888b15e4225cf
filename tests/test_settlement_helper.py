from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from estate_service.app.helpers.fifo_helper import CreditPosting
from estate_service.app.helpers.settlement_helper import (
    LeaseBalance, calculate_settlement, compute_security_deposit_used,
    plan_transfers, validate_transfer_amount
)


def invoices(total_months, rent="10000"):
    return [SimpleNamespace(amount=Decimal(rent)) for _ in range(total_months)]


def credit(amount, lease_id=1):
    return CreditPosting(lease_id=lease_id, amount=Decimal(amount),
                         posted_on=date(2024, 5, 1), kind="payment")


class TestDepositNetting:
    def test_deposit_covers_part_of_due(self):
        figures = calculate_settlement(
            opening_balance="0",
            elapsed_invoices=invoices(2, "7500"),
            postings=[],
            security_deposit="10000",
            use_security_deposit=True,
            target_lease_id=1,
        )
        assert figures.due_before_transfer == Decimal("15000.00")
        assert figures.security_deposit_used == Decimal("10000.00")
        assert figures.final_settled_amount == Decimal("5000.00")

    def test_deposit_unused_when_not_requested(self):
        assert compute_security_deposit_used(Decimal("500"), "1000", False) == Decimal("0.00")

    def test_no_deposit_used_when_lease_in_credit(self):
        assert compute_security_deposit_used(Decimal("-500"), "1000", True) == Decimal("0.00")

    def test_conservation(self):
        figures = calculate_settlement(
            opening_balance="1000",
            elapsed_invoices=invoices(3),
            postings=[credit("12000")],
            security_deposit="5000",
            use_security_deposit=True,
            target_lease_id=1,
            siblings=[LeaseBalance(2, "active", Decimal("-8000"))],
            transfer_amount="20000",
        )
        assert (figures.final_settled_amount
                == figures.due_before_transfer - figures.transferred_amount
                - figures.security_deposit_used)
        assert figures.transferred_amount == Decimal("8000.00")
        assert figures.final_settled_amount == Decimal("6000.00")


class TestTransfers:
    def test_drains_sources_in_lease_id_order(self):
        siblings = [
            LeaseBalance(5, "expired", Decimal("-3000")),
            LeaseBalance(3, "active", Decimal("-1000")),
            LeaseBalance(4, "active", Decimal("2000")),
        ]
        plans = plan_transfers(9, siblings, Decimal("3500"))
        assert [(p.source_lease_id, p.amount) for p in plans] == [
            (3, Decimal("1000.00")), (5, Decimal("2500.00"))]

    def test_capped_by_requested_amount(self):
        plans = plan_transfers(1, [LeaseBalance(2, "active", Decimal("-5000"))],
                               Decimal("1200"))
        assert [p.amount for p in plans] == [Decimal("1200.00")]

    def test_drain_ignores_target_due(self):
        figures = calculate_settlement(
            opening_balance="0",
            elapsed_invoices=invoices(1, "1000"),
            postings=[credit("1000")],
            security_deposit="0",
            use_security_deposit=False,
            target_lease_id=1,
            siblings=[LeaseBalance(2, "active", Decimal("-3000"))],
            transfer_amount="3000",
        )
        assert figures.due_before_transfer == Decimal("0.00")
        assert figures.transferred_amount == Decimal("3000.00")
        assert figures.final_settled_amount == Decimal("-3000.00")

    def test_target_over_drained_past_deposit(self):
        figures = calculate_settlement(
            opening_balance="0",
            elapsed_invoices=invoices(1, "2000"),
            postings=[],
            security_deposit="1500",
            use_security_deposit=True,
            target_lease_id=1,
            siblings=[LeaseBalance(2, "active", Decimal("-5000"))],
            transfer_amount="5000",
        )
        assert figures.security_deposit_used == Decimal("1500.00")
        assert figures.transferred_amount == Decimal("5000.00")
        assert figures.final_settled_amount == Decimal("-4500.00")

    @pytest.mark.parametrize("raw", ["0", "-5", "abc", True])
    def test_invalid_transfer_amount(self, raw):
        with pytest.raises(ValueError):
            validate_transfer_amount(raw)

    def test_absent_transfer_amount(self):
        assert validate_transfer_amount(None) is None
        assert validate_transfer_amount("250.5") == Decimal("250.50")
