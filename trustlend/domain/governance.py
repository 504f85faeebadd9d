"""Governance - validation and versioning of system parameter changes"""

import re
from datetime import datetime
from typing import Optional

from trustlend.domain.models import (
    GovernanceResult,
    ParameterChanges,
    ParameterUpdate,
    PricingTable,
    TierName,
    UserRole,
    ValidationResult,
)
from trustlend.domain.parameters import INITIAL_PARAMETER_VERSION
from trustlend.domain.scoring import MAX_SCORE, MIN_SCORE
from trustlend.utils.money import BPS_DENOMINATOR
from trustlend.utils.time_utils import add_seconds, utc_now

# Delay between proposal and activation
ACTIVATION_DELAY_SECONDS = 30

REQUIRED_TIERS = (TierName.LOW, TierName.MEDIUM, TierName.HIGH, TierName.EXCELLENT)

_VERSION_PATTERN = re.compile(r"v(\d+)\.(\d+)\.(\d+)")


def _tier_label(name: object) -> str:
    return name.value if isinstance(name, TierName) else str(name)


def propose_parameter_update(
    current_version: str,
    changes: ParameterChanges,
    proposer_role: UserRole,
    proposer_id: str,
    now: Optional[datetime] = None,
) -> GovernanceResult:
    """
    Propose new system parameters.

    Only operators may propose. Rejections come back as
    GovernanceResult(success=False, message=...) and are never raised.
    An accepted proposal gets the next patch version and activates
    ACTIVATION_DELAY_SECONDS after `now`.
    """
    if proposer_role != UserRole.OPERATOR:
        return GovernanceResult(success=False, message="Only operators can change system parameters")

    validation = validate_parameters(changes)
    if not validation.valid:
        return GovernanceResult(success=False, message=validation.message)

    if now is None:
        now = utc_now()

    new_version = generate_new_version(current_version)
    activates_at = add_seconds(now, ACTIVATION_DELAY_SECONDS)

    update = ParameterUpdate(
        version=new_version,
        proposed_by=proposer_id,
        proposed_at=now,
        activates_at=activates_at,
        is_active=False,
        pricing_table=changes.pricing_table,
        late_tolerance_seconds=changes.late_tolerance_seconds,
        installment_period_seconds=changes.installment_period_seconds,
    )

    return GovernanceResult(
        success=True,
        message=f"Parameters updated to version {new_version}. Activation at {activates_at.isoformat()}",
        new_version=new_version,
        activates_at=activates_at,
        update=update,
    )


def is_version_active(activates_at: datetime, now: Optional[datetime] = None) -> bool:
    if now is None:
        now = utc_now()
    return now >= activates_at


def generate_new_version(current_version: str) -> str:
    """Bump the patch number of vMAJOR.MINOR.PATCH; unparsable input restarts at v1.0.0"""
    match = _VERSION_PATTERN.fullmatch(current_version or "")
    if not match:
        return INITIAL_PARAMETER_VERSION

    major, minor, patch = match.groups()
    return f"v{major}.{minor}.{int(patch) + 1}"


def validate_parameters(changes: ParameterChanges) -> ValidationResult:
    if changes.late_tolerance_seconds is not None and changes.late_tolerance_seconds <= 0:
        return ValidationResult(valid=False, message="Late tolerance must be greater than zero")

    if changes.installment_period_seconds is not None and changes.installment_period_seconds <= 0:
        return ValidationResult(valid=False, message="Installment period must be greater than zero")

    if changes.pricing_table is not None:
        table_result = validate_pricing_table(changes.pricing_table)
        if not table_result.valid:
            return table_result

    return ValidationResult(valid=True, message="Parameters are valid")


def validate_pricing_table(table: PricingTable) -> ValidationResult:
    """
    Check the table structure.

    - exactly four tiers, one of each of LOW, MEDIUM, HIGH, EXCELLENT
    - ranges partition [0, 100]: first starts at 0, last ends at 100,
      each max + 1 == next min
    - every apr_bps within [0, 10000]
    """
    names = [_tier_label(tier.name) for tier in table.tiers]
    known = {tier.value for tier in REQUIRED_TIERS}
    for name in names:
        if name not in known:
            return ValidationResult(valid=False, message=f"Unknown tier: {name}")

    for required in REQUIRED_TIERS:
        if required.value not in names:
            return ValidationResult(valid=False, message=f"Missing required tier: {required.value}")

    if len(table.tiers) != len(REQUIRED_TIERS):
        return ValidationResult(
            valid=False,
            message=f"Pricing table must have exactly {len(REQUIRED_TIERS)} tiers, got {len(table.tiers)}",
        )

    ordered = sorted(table.tiers, key=lambda tier: tier.score_min)

    if ordered[0].score_min != MIN_SCORE:
        return ValidationResult(valid=False, message="First tier must start at score 0")

    if ordered[-1].score_max != MAX_SCORE:
        return ValidationResult(valid=False, message="Last tier must end at score 100")

    for tier in ordered:
        if tier.score_max < tier.score_min:
            return ValidationResult(valid=False, message=f"Tier {_tier_label(tier.name)} has an empty range")

    for current, following in zip(ordered, ordered[1:]):
        if current.score_max + 1 != following.score_min:
            return ValidationResult(
                valid=False,
                message=f"Gap or overlap between tiers {_tier_label(current.name)} and {_tier_label(following.name)}",
            )

    for tier in table.tiers:
        if not 0 <= tier.apr_bps <= BPS_DENOMINATOR:
            return ValidationResult(
                valid=False,
                message=f"Invalid APR for tier {_tier_label(tier.name)}: {tier.apr_bps} bps",
            )

    return ValidationResult(valid=True, message="Pricing table is valid")
