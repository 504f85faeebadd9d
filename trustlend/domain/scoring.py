"""Credit score engine - deterministic additive rules, no ML"""

from typing import Iterable

from trustlend.domain.models import InstallmentStatus, LoanState, ScoreInputs

MIN_SCORE = 0
MAX_SCORE = 100

ON_TIME_PAYMENT_POINTS = 2
LATE_PAYMENT_PENALTY = 3
DEFAULT_PENALTY = 10
HIGH_COVERAGE_BONUS = 1
HIGH_COVERAGE_THRESHOLD_PCT = 80
UNDER_REVIEW_PENALTY = 5

DEFAULTED_STATES = frozenset({LoanState.DEFAULTED, LoanState.LIQUIDATED})


def compute_score(inputs: ScoreInputs) -> int:
    """
    Compute a borrower's 0-100 credit score.

    Rules (applied in this order, then clamped):
    - start at inputs.base (caller-supplied, nominally 50)
    - +2 per on-time payment
    - -3 per late payment
    - -10 once if the borrower has defaulted
    - +1 if coverage >= 80%
    - -5 if under fraud review

    Inputs are assumed pre-validated; the result is always within [0, 100].

    Example:
        base=50, on_time=5, late=1, coverage=85 → 50 + 10 - 3 + 1 = 58
    """
    score = inputs.base
    score += inputs.on_time_payments * ON_TIME_PAYMENT_POINTS
    score -= inputs.late_count * LATE_PAYMENT_PENALTY

    if inputs.has_defaulted:
        score -= DEFAULT_PENALTY

    if inputs.coverage_pct >= HIGH_COVERAGE_THRESHOLD_PCT:
        score += HIGH_COVERAGE_BONUS

    if inputs.under_review:
        score -= UNDER_REVIEW_PENALTY

    return max(MIN_SCORE, min(MAX_SCORE, score))


def compute_score_inputs_from_history(
    base: int,
    installment_statuses: Iterable[InstallmentStatus],
    loan_states: Iterable[LoanState],
    coverage_pct: float,
    under_review: bool,
) -> ScoreInputs:
    """
    Build ScoreInputs from a borrower's full history.

    PAID installments count as on-time payments and LATE ones as late
    payments; OPEN installments are ignored. Any loan that reached
    DEFAULTED or LIQUIDATED marks the borrower as defaulted.
    """
    statuses = [InstallmentStatus(s) for s in installment_statuses]

    return ScoreInputs(
        base=base,
        on_time_payments=sum(1 for s in statuses if s == InstallmentStatus.PAID),
        late_count=sum(1 for s in statuses if s == InstallmentStatus.LATE),
        has_defaulted=any(LoanState(state) in DEFAULTED_STATES for state in loan_states),
        coverage_pct=coverage_pct,
        under_review=under_review,
    )
