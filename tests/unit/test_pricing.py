"""Unit tests for tier lookup, coverage adjustments and approval checks"""

import pytest
from trustlend.domain.approval import evaluate_approval
from trustlend.domain.exceptions import InvalidAmountError, InvalidScoreError, PricingTierNotFoundError
from trustlend.domain.models import PricingTable, TierName
from trustlend.domain.pricing import (
    coverage_adjustment_bps,
    find_tier,
    get_minimum_coverage,
    is_within_credit_limit,
    price_by_score,
)


@pytest.mark.parametrize(
    "score,tier",
    [
        (0, TierName.LOW),
        (39, TierName.LOW),
        (40, TierName.MEDIUM),
        (69, TierName.MEDIUM),
        (70, TierName.HIGH),
        (89, TierName.HIGH),
        (90, TierName.EXCELLENT),
        (100, TierName.EXCELLENT),
    ],
)
def test_find_tier_boundaries(score: int, tier: TierName, pricing_table: PricingTable):
    assert find_tier(score, pricing_table).name == tier


@pytest.mark.parametrize("score", [-1, 101, 50.5, True])
def test_find_tier_rejects_invalid_score(score, pricing_table: PricingTable):
    with pytest.raises(InvalidScoreError):
        find_tier(score, pricing_table)


def test_find_tier_missing_band(pricing_table: PricingTable):
    """A table with a hole raises instead of guessing a tier"""
    pricing_table.tiers = [t for t in pricing_table.tiers if t.name != TierName.HIGH]
    with pytest.raises(PricingTierNotFoundError):
        find_tier(75, pricing_table)


def test_price_by_score_documented_example(pricing_table: PricingTable):
    """Score 75 with 60% coverage lands in HIGH at 900 bps with no adjustment"""
    result = price_by_score(75, 60, pricing_table)

    assert result.tier == TierName.HIGH
    assert result.apr_bps == 900
    assert result.adjustment_bps == 0
    assert result.final_apr_bps == 900
    assert result.max_limit_micro == 8_000_000
    assert result.required_coverage_pct == 25


@pytest.mark.parametrize(
    "coverage,adjustment",
    [
        (0, 0),
        (10, 0),
        (29.9, 0),
        (30, 150),
        (49, 150),
        (50, 0),
        (79, 0),
        (80, -100),
        (150, -100),
    ],
)
def test_coverage_adjustment_rows(coverage: float, adjustment: int, pricing_table: PricingTable):
    assert coverage_adjustment_bps(coverage, pricing_table) == adjustment


def test_coverage_adjustment_rejects_negative(pricing_table: PricingTable):
    with pytest.raises(InvalidAmountError):
        coverage_adjustment_bps(-1, pricing_table)


def test_final_apr_never_negative(pricing_table: PricingTable):
    pricing_table.tiers[-1].apr_bps = 50
    result = price_by_score(95, 90, pricing_table)
    assert result.final_apr_bps == 0


def test_higher_score_never_prices_higher(pricing_table: PricingTable):
    """Base APR is non-increasing in score for a fixed coverage"""
    aprs = [price_by_score(score, 60, pricing_table).final_apr_bps for score in range(0, 101)]
    assert all(later <= earlier for earlier, later in zip(aprs, aprs[1:]))


def test_pricing_is_deterministic(pricing_table: PricingTable):
    assert price_by_score(64, 42.5, pricing_table) == price_by_score(64, 42.5, pricing_table)


def test_credit_limit_helpers(pricing_table: PricingTable):
    assert is_within_credit_limit(5_000_000, 55, pricing_table) is True
    assert is_within_credit_limit(5_000_001, 55, pricing_table) is False
    assert get_minimum_coverage(20, pricing_table) == 100
    assert get_minimum_coverage(95, pricing_table) == 0


def test_approval_all_checks_pass(pricing_table: PricingTable):
    decision = evaluate_approval(
        score=75,
        coverage_pct=60,
        amount_micro=3_000_000,
        endorsement_count=3,
        table=pricing_table,
    )

    assert decision.approved is True
    assert all(decision.checks.values())
    assert decision.requirements == {
        "min_score": 20,
        "min_coverage_pct": 25,
        "max_amount_micro": 8_000_000,
        "min_supporters": 2,
    }


def test_approval_rejects_each_failed_check(pricing_table: PricingTable):
    """Score 30 is LOW: needs full coverage and at most 2 units"""
    decision = evaluate_approval(
        score=30,
        coverage_pct=90,
        amount_micro=2_500_000,
        endorsement_count=1,
        table=pricing_table,
    )

    assert decision.approved is False
    assert decision.checks == {
        "minimum_score": True,
        "minimum_coverage": False,
        "within_limit": False,
        "minimum_supporters": False,
    }


def test_approval_minimum_score(pricing_table: PricingTable):
    decision = evaluate_approval(
        score=15,
        coverage_pct=100,
        amount_micro=1_000_000,
        endorsement_count=2,
        table=pricing_table,
    )

    assert decision.approved is False
    assert decision.checks["minimum_score"] is False
    assert decision.checks["minimum_coverage"] is True
