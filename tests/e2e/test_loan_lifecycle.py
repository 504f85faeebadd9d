"""
E2E test of a loan moving through every engine decision.

Lifecycle:
- score the borrower from history and price the loan
- check approval thresholds and fraud signals on the endorsements
- generate the schedule, repay the first installment
- let the rest go late, default, and run the loss waterfall
- rescore the borrower with the default on record
"""

from datetime import datetime, timedelta

from trustlend.domain.approval import evaluate_approval
from trustlend.domain.audit import build_decision_record, verify_decision_hash
from trustlend.domain.fraud import run_comprehensive_check, should_trigger_review
from trustlend.domain.models import (
    InstallmentStatus,
    LoanInfo,
    LoanState,
    PricingTable,
    StakeInfo,
    TierName,
    UserInfo,
)
from trustlend.domain.pricing import price_by_score
from trustlend.domain.scoring import compute_score, compute_score_inputs_from_history
from trustlend.domain.servicing import (
    calculate_total_owed,
    generate_installments,
    process_payment,
    update_installment_status,
)
from trustlend.domain.waterfall import execute_waterfall
from trustlend.utils.money import coverage_pct


def test_loan_from_approval_to_liquidation(
    now: datetime,
    pricing_table: PricingTable,
    balanced_loan: LoanInfo,
    established_users: list[UserInfo],
):
    principal = balanced_loan.total_amount_micro
    total_stakes = sum(e.stake_micro for e in balanced_loan.endorsements)
    coverage = coverage_pct(total_stakes, principal)
    assert coverage == 50.0

    # Score and price
    inputs = compute_score_inputs_from_history(
        base=50,
        installment_statuses=[InstallmentStatus.PAID] * 3,
        loan_states=[LoanState.REPAID],
        coverage_pct=coverage,
        under_review=False,
    )
    score = compute_score(inputs)
    assert score == 56

    pricing = price_by_score(score, coverage, pricing_table)
    assert pricing.tier == TierName.MEDIUM
    assert pricing.final_apr_bps == 1400

    # Approval and fraud
    approval = evaluate_approval(score, coverage, principal, len(balanced_loan.endorsements), pricing_table)
    assert approval.approved is True

    alerts = run_comprehensive_check(balanced_loan, established_users, approval_time=now, now=now)
    assert alerts == []
    assert should_trigger_review(alerts).under_review is False

    record = build_decision_record("approval", balanced_loan.id, "v1.0.0", {"score": score}, approval)
    assert verify_decision_hash(record.decision_hash, balanced_loan.id, "v1.0.0", {"score": score}, record.decision)

    # Schedule and first repayment
    installments = generate_installments(principal, pricing.final_apr_bps, 30, 3, 10, now)
    assert [i.amount_micro for i in installments] == [1_011_507] * 3

    payment = process_payment(installments, 1_011_507, now + timedelta(seconds=5))
    assert payment.paid_indices == [1]
    assert payment.remaining_balance_micro == 2_023_014
    for installment in installments:
        if installment.index in payment.paid_indices:
            installment.status = InstallmentStatus.PAID
            installment.paid_at = payment.paid_at

    # Remaining installments go late
    updates = update_installment_status(installments, now + timedelta(seconds=100), tolerance_seconds=30)
    for installment, update in zip(installments, updates):
        installment.status = update.status
    assert [i.status for i in installments] == [
        InstallmentStatus.PAID,
        InstallmentStatus.LATE,
        InstallmentStatus.LATE,
    ]

    owed = calculate_total_owed(installments)
    assert owed.overdue_micro == 2_023_014
    assert owed.current_micro == 0

    # Default: stakes absorb first, the mutual fund covers the rest
    stakes = [StakeInfo(e.supporter_id, e.stake_micro) for e in balanced_loan.endorsements]
    waterfall = execute_waterfall(owed.total_owed_micro, 0, stakes, 1_000_000_000)

    assert all(c.cut_micro == 500_000 and c.released_micro == 0 for c in waterfall.supporter_cuts)
    assert waterfall.mutual_fund_used_micro == 523_014
    assert waterfall.total_recovered_micro == owed.total_owed_micro

    # Rescore with the default on record
    rescored = compute_score(
        compute_score_inputs_from_history(
            base=50,
            installment_statuses=[InstallmentStatus.PAID] * 3 + [i.status for i in installments],
            loan_states=[LoanState.REPAID, LoanState.LIQUIDATED],
            coverage_pct=coverage,
            under_review=False,
        )
    )
    assert rescored == 42
    assert rescored < score
