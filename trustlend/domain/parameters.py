"""Seed parameter set owned by the governance layer.

The engine never falls back to these values; callers load the active
parameter set and pass its table explicitly. This table is the canonical
seed (LOW/MEDIUM/HIGH/EXCELLENT at 2200/1400/900/600 bps).
"""

from trustlend.domain.models import CoverageAdjustment, PricingTable, PricingTier, TierName

INITIAL_PARAMETER_VERSION = "v1.0.0"


def default_pricing_table() -> PricingTable:
    """Fresh copy of the seed pricing table"""
    return PricingTable(
        tiers=[
            PricingTier(
                name=TierName.LOW,
                score_min=0,
                score_max=39,
                apr_bps=2200,
                max_limit_micro=2_000_000,  # 2 units
                required_coverage_pct=100,
            ),
            PricingTier(
                name=TierName.MEDIUM,
                score_min=40,
                score_max=69,
                apr_bps=1400,
                max_limit_micro=5_000_000,
                required_coverage_pct=50,
            ),
            PricingTier(
                name=TierName.HIGH,
                score_min=70,
                score_max=89,
                apr_bps=900,
                max_limit_micro=8_000_000,
                required_coverage_pct=25,
            ),
            PricingTier(
                name=TierName.EXCELLENT,
                score_min=90,
                score_max=100,
                apr_bps=600,
                max_limit_micro=10_000_000,
                required_coverage_pct=0,
            ),
        ],
        coverage_adjustments=[
            CoverageAdjustment(coverage_min=80, adjustment_bps=-100),
            CoverageAdjustment(coverage_min=50, adjustment_bps=0),
            CoverageAdjustment(coverage_min=30, adjustment_bps=150),
            CoverageAdjustment(coverage_min=0, adjustment_bps=0),  # full collateral
        ],
    )
