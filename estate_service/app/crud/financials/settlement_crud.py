import logging
from dataclasses import asdict
from datetime import date, datetime, timezone
from typing import Any, List, Optional, Tuple

from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import invalid_input_response
from ...enum.estate_enum import LeaseStatus, SETTLEMENT_SOURCE_STATUSES, ShopStatus
from ...helpers.invoice_schedule_helper import filter_elapsed_invoices
from ...helpers.lease_lock_helper import lease_guard
from ...helpers.money_helper import sum_money
from ...helpers.settlement_helper import (
    LeaseBalance, SettlementFigures, calculate_settlement
)
from ...models.financials.ledger_transfers import LedgerTransfer
from ...models.leasing_tenants.leases import Lease
from ...schemas.financials.settlement_schemas import (
    PlannedTransfer, SettlementRequest, SettlementResult, SiblingLeaseBalance, TerminationOut
)
from .rent_invoices_crud import (
    apply_fifo, ensure_not_terminated, get_lease_invoices, get_lease_or_404,
    get_lease_postings, lease_current_due
)

logger = logging.getLogger(__name__)


def sibling_balances(db: Session, lease: Lease, today: Optional[date] = None) -> List[LeaseBalance]:
    siblings = (
        db.query(Lease)
        .filter(
            Lease.tenant_id == lease.tenant_id,
            Lease.id != lease.id,
            Lease.status.in_([s.value for s in SETTLEMENT_SOURCE_STATUSES]),
        )
        .order_by(Lease.id)
        .all()
    )
    return [
        LeaseBalance(lease_id=s.id, status=s.status, balance=lease_current_due(db, s, today))
        for s in siblings
    ]


def _calculate(db: Session, lease: Lease, use_security_deposit: bool,
               transfer_amount: Any, today: Optional[date]) -> Tuple[SettlementFigures, List[LeaseBalance]]:
    elapsed = filter_elapsed_invoices(get_lease_invoices(db, lease.id), today)
    siblings = sibling_balances(db, lease, today)
    try:
        figures = calculate_settlement(
            opening_balance=lease.opening_due_balance,
            elapsed_invoices=elapsed,
            postings=get_lease_postings(db, lease.id),
            security_deposit=lease.security_deposit,
            use_security_deposit=use_security_deposit,
            target_lease_id=lease.id,
            siblings=siblings,
            transfer_amount=transfer_amount,
        )
    except ValueError as e:
        invalid_input_response(str(e))
    return figures, siblings


def _result(lease: Lease, figures: SettlementFigures, siblings: List[LeaseBalance],
            today: date) -> SettlementResult:
    return SettlementResult(
        lease_id=lease.id,
        tenant_id=lease.tenant_id,
        settlement_date=today,
        opening_balance=figures.opening_balance,
        total_invoiced=figures.total_invoiced,
        total_credited=figures.total_credited,
        current_due_before_transfer=figures.due_before_transfer,
        transfer_requested=figures.transfer_requested,
        transferred_amount=figures.transferred_amount,
        transfers=[PlannedTransfer(**asdict(t)) for t in figures.transfers],
        this_lease_current_due=figures.due_after_transfer,
        security_deposit=figures.security_deposit,
        security_deposit_used=figures.security_deposit_used,
        final_settled_amount=figures.final_settled_amount,
        global_ledger_balance=sum_money(s.balance for s in siblings),
        sibling_balances=[
            SiblingLeaseBalance(lease_id=s.lease_id, status=s.status, balance=s.balance)
            for s in siblings
        ],
    )


def compute_settlement(db: Session, lease_id: int, use_security_deposit: bool,
                       transfer_amount: Any = None, today: Optional[date] = None) -> SettlementResult:
    """Read-only settlement preview; nothing is written."""
    today = today or date.today()
    lease = get_lease_or_404(db, lease_id)
    figures, siblings = _calculate(db, lease, use_security_deposit, transfer_amount, today)
    return _result(lease, figures, siblings, today)


def terminate_lease_with_settlement(db: Session, lease_id: int, request: SettlementRequest,
                                    today: Optional[date] = None) -> Tuple[Lease, SettlementResult]:
    today = today or date.today()
    lease = get_lease_or_404(db, lease_id)
    ensure_not_terminated(lease, "terminate lease")

    tenant_lease_ids = [
        row.id for row in db.query(Lease.id).filter(Lease.tenant_id == lease.tenant_id).all()
    ]

    with lease_guard(db, tenant_lease_ids) as leases:
        # re-read under the lock; the preview may be stale
        lease = leases[lease_id]
        ensure_not_terminated(lease, "terminate lease")

        figures, siblings = _calculate(
            db, lease, request.use_security_deposit, request.transfer_amount, today)

        try:
            for plan in figures.transfers:
                db.add(LedgerTransfer(
                    tenant_id=lease.tenant_id,
                    source_lease_id=plan.source_lease_id,
                    target_lease_id=plan.target_lease_id,
                    amount=plan.amount,
                    transfer_date=today,
                    notes=f"Settlement of lease {lease.id}",
                ))

            lease.security_deposit_used = figures.security_deposit_used
            lease.termination_notes = request.termination_notes
            lease.terminated_at = datetime.now(timezone.utc)
            db.flush()

            # last allocation before the invoices freeze
            apply_fifo(db, lease, today)
            for plan in figures.transfers:
                source = leases[plan.source_lease_id]
                if source.status != LeaseStatus.terminated.value:
                    apply_fifo(db, source, today)

            lease.status = LeaseStatus.terminated.value
            if lease.shop:
                lease.shop.status = ShopStatus.vacant.value
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(lease)
    result = _result(lease, figures, siblings, today)
    logger.info(
        "Terminated lease %s: due %s, transferred %s, deposit used %s, final %s",
        lease.id, result.current_due_before_transfer, result.transferred_amount,
        result.security_deposit_used, result.final_settled_amount,
    )
    return lease, result


def terminate_lease(db: Session, lease_id: int, request: SettlementRequest,
                    today: Optional[date] = None) -> Lease:
    lease, _ = terminate_lease_with_settlement(db, lease_id, request, today)
    return lease


def terminate_lease_summary(db: Session, lease_id: int, request: SettlementRequest,
                            today: Optional[date] = None) -> TerminationOut:
    lease, result = terminate_lease_with_settlement(db, lease_id, request, today)
    return TerminationOut(
        lease_id=lease.id,
        status=lease.status,
        terminated_at=lease.terminated_at,
        termination_notes=lease.termination_notes,
        settlement=result,
    )
