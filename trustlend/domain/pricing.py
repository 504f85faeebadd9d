"""Pricing engine - maps (score, coverage) to APR, credit limit and required coverage"""

from trustlend.domain.exceptions import InvalidAmountError, InvalidScoreError, PricingTierNotFoundError
from trustlend.domain.models import PricingResult, PricingTable, PricingTier
from trustlend.domain.scoring import MAX_SCORE, MIN_SCORE


def find_tier(score: int, table: PricingTable) -> PricingTier:
    """Return the tier whose inclusive [score_min, score_max] contains score"""
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidScoreError(f"Invalid score: {score}. Must be an integer between 0 and 100.")

    for tier in table.tiers:
        if tier.score_min <= score <= tier.score_max:
            return tier

    raise PricingTierNotFoundError(f"No pricing tier covers score {score}")


def coverage_adjustment_bps(coverage_pct: float, table: PricingTable) -> int:
    """
    Select the APR adjustment for a coverage percentage.

    Zero coverage gets no adjustment: the borrower pays the tier rate and the
    tier's required coverage (full collateral) applies. Otherwise the row with
    the highest coverage_min <= coverage_pct wins.
    """
    if coverage_pct < 0:
        raise InvalidAmountError(f"Coverage cannot be negative: {coverage_pct}")

    if coverage_pct == 0:
        return 0

    eligible = [row for row in table.coverage_adjustments if row.coverage_min <= coverage_pct]
    if not eligible:
        return 0

    return max(eligible, key=lambda row: row.coverage_min).adjustment_bps


def price_by_score(score: int, coverage_pct: float, table: PricingTable) -> PricingResult:
    """
    Price a loan from the borrower's score and supporter coverage.

    The table is always supplied by the caller (the active parameter set).
    final_apr_bps = max(0, tier.apr_bps + adjustment_bps), never negative.

    Example (default table):
        score=75, coverage=60 → HIGH (70-89, 900 bps), adjustment 0 → 900 bps

    Raises:
        InvalidScoreError: score outside [0, 100]
        PricingTierNotFoundError: table has no tier for the score
    """
    tier = find_tier(score, table)
    adjustment = coverage_adjustment_bps(coverage_pct, table)

    return PricingResult(
        tier=tier.name,
        apr_bps=tier.apr_bps,
        max_limit_micro=tier.max_limit_micro,
        required_coverage_pct=tier.required_coverage_pct,
        adjustment_bps=adjustment,
        final_apr_bps=max(0, tier.apr_bps + adjustment),
    )


def is_within_credit_limit(amount_micro: int, score: int, table: PricingTable) -> bool:
    """Amount fits the tier limit (priced at 0% coverage)"""
    return amount_micro <= price_by_score(score, 0, table).max_limit_micro


def get_minimum_coverage(score: int, table: PricingTable) -> float:
    return price_by_score(score, 0, table).required_coverage_pct
