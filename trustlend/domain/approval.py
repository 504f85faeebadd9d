"""Approval threshold checks against a pricing result"""

from trustlend.domain.models import ApprovalDecision, PricingTable
from trustlend.domain.pricing import price_by_score

DEFAULT_MIN_SCORE = 20
DEFAULT_MIN_SUPPORTERS = 2


def evaluate_approval(
    score: int,
    coverage_pct: float,
    amount_micro: int,
    endorsement_count: int,
    table: PricingTable,
    min_score: int = DEFAULT_MIN_SCORE,
    min_supporters: int = DEFAULT_MIN_SUPPORTERS,
) -> ApprovalDecision:
    """
    Check whether a pending loan may be approved.

    All checks must pass:
    - minimum_score: score >= min_score
    - minimum_coverage: coverage >= the tier's required coverage
    - within_limit: amount <= the tier's max limit
    - minimum_supporters: at least min_supporters endorsements
    """
    pricing = price_by_score(score, coverage_pct, table)

    checks = {
        "minimum_score": score >= min_score,
        "minimum_coverage": coverage_pct >= pricing.required_coverage_pct,
        "within_limit": amount_micro <= pricing.max_limit_micro,
        "minimum_supporters": endorsement_count >= min_supporters,
    }

    return ApprovalDecision(
        approved=all(checks.values()),
        checks=checks,
        requirements={
            "min_score": min_score,
            "min_coverage_pct": pricing.required_coverage_pct,
            "max_amount_micro": pricing.max_limit_micro,
            "min_supporters": min_supporters,
        },
    )
