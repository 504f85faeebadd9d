"""Loan servicing - installment schedules, overdue detection and FIFO payment application"""

from datetime import datetime
from typing import List

from trustlend.domain.exceptions import InvalidAmountError, InvalidScheduleError
from trustlend.domain.models import (
    AppliedPayment,
    Installment,
    InstallmentStatus,
    InstallmentStatusUpdate,
    OutstandingSummary,
    PaymentResult,
)
from trustlend.utils.money import div_round_half_up, total_with_simple_interest
from trustlend.utils.time_utils import installment_due_dates, is_overdue


def generate_installments(
    principal_micro: int,
    apr_bps: int,
    term_days: int,
    num_installments: int,
    interval_seconds: int,
    start_date: datetime,
) -> List[Installment]:
    """
    Generate an equal-installment schedule with simple interest.

    Requirements:
    - Total = round(principal * (1 + apr/10000 * term_days/365)), rounded
      once at the total level
    - Equal parts of round(total / n); the last installment absorbs the
      rounding remainder
    - Due dates every interval_seconds, the first one interval after start
    - 1-based indices, all installments OPEN

    Args:
        principal_micro: Loan principal in micro-units
        apr_bps: Annual rate in basis points (1400 = 14%)
        term_days: Loan term used for the interest factor
        num_installments: Number of payments
        interval_seconds: Seconds between due dates (simulated time)
        start_date: Origination time

    Returns:
        List of Installment objects, empty when principal is not positive

    Example:
        1_000_000 at 1400 bps over 30 days → total 1_011_507
        3 installments → [337_169, 337_169, 337_169]
    """
    if principal_micro <= 0:
        return []

    if num_installments < 1:
        raise InvalidScheduleError(f"Number of installments must be at least 1, got {num_installments}")
    if interval_seconds <= 0:
        raise InvalidScheduleError(f"Installment interval must be positive, got {interval_seconds}")
    if apr_bps < 0 or term_days < 0:
        raise InvalidScheduleError("APR and term must not be negative")

    total_amount = total_with_simple_interest(principal_micro, apr_bps, term_days)
    installment_amount = div_round_half_up(total_amount, num_installments)
    last_amount = total_amount - installment_amount * (num_installments - 1)

    if installment_amount <= 0 or last_amount <= 0:
        raise InvalidScheduleError(
            f"Total of {total_amount} micro-units cannot be split into {num_installments} positive installments"
        )

    due_dates = installment_due_dates(start_date, num_installments, interval_seconds)

    installments = []
    for i, due_at in enumerate(due_dates):
        # Last installment absorbs remainder to ensure exact total
        amount = last_amount if i == num_installments - 1 else installment_amount
        installments.append(Installment(index=i + 1, amount_micro=amount, due_at=due_at))

    return installments


def update_installment_status(
    installments: List[Installment],
    now: datetime,
    tolerance_seconds: float = 0,
) -> List[InstallmentStatusUpdate]:
    """
    Mark overdue installments LATE.

    PAID never changes. OPEN becomes LATE when now > due_at + tolerance.
    LATE never reverts to OPEN.
    """
    updates = []
    for installment in installments:
        status = InstallmentStatus(installment.status)
        was_updated = False

        if status == InstallmentStatus.OPEN and is_overdue(installment.due_at, now, tolerance_seconds):
            status = InstallmentStatus.LATE
            was_updated = True

        updates.append(InstallmentStatusUpdate(index=installment.index, status=status, was_updated=was_updated))

    return updates


def process_payment(
    installments: List[Installment],
    payment_micro: int,
    now: datetime,
) -> PaymentResult:
    """
    Apply a payment FIFO by ascending index across unpaid installments.

    Each installment receives min(remaining, amount) and counts as paid only
    when this payment covers it entirely. A partially covered installment is
    reported in applied_payments with fully_paid=False; it keeps its status
    and the caller decides how to carry the partial amount forward.

    Example:
        three OPEN installments of 100, payment 150 → paid [first],
        remaining balance 150, second installment shows 50 applied
    """
    if payment_micro <= 0:
        raise InvalidAmountError(f"Payment must be positive, got {payment_micro}")

    unpaid = sorted(
        (i for i in installments if InstallmentStatus(i.status) != InstallmentStatus.PAID),
        key=lambda i: i.index,
    )

    remaining = payment_micro
    paid_indices: List[int] = []
    applied: List[AppliedPayment] = []

    for installment in unpaid:
        if remaining <= 0:
            break

        amount_applied = min(remaining, installment.amount_micro)
        fully_paid = amount_applied >= installment.amount_micro
        applied.append(
            AppliedPayment(index=installment.index, amount_applied_micro=amount_applied, fully_paid=fully_paid)
        )
        if fully_paid:
            paid_indices.append(installment.index)

        remaining -= amount_applied

    total_owed = sum(i.amount_micro for i in unpaid)

    return PaymentResult(
        paid_indices=paid_indices,
        remaining_balance_micro=max(0, total_owed - payment_micro),
        applied_payments=applied,
        paid_at=now,
    )


def calculate_total_owed(installments: List[Installment]) -> OutstandingSummary:
    """Split the unpaid balance into overdue (LATE) and current (OPEN) amounts"""
    overdue = 0
    current = 0
    for installment in installments:
        status = InstallmentStatus(installment.status)
        if status == InstallmentStatus.LATE:
            overdue += installment.amount_micro
        elif status == InstallmentStatus.OPEN:
            current += installment.amount_micro

    return OutstandingSummary(total_owed_micro=overdue + current, overdue_micro=overdue, current_micro=current)
