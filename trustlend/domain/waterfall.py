"""
Loss waterfall - distributes a realized default loss across collateral,
supporter stakes and the mutual fund.

Absorption order, each stage seeing only the loss left by the previous one:
1. Borrower collateral
2. Supporter stakes, proportionally, never more than a supporter's stake
3. Mutual fund

Anything beyond the three sources is an unrecovered shortfall.

Stake cuts are integer micro-units. Each supporter's proportional share is
floored and the leftover units (fewer than the number of supporters) go one
at a time to the largest fractional remainders, ties by input order, so the
stakes absorb exactly min(remaining loss, total stakes).
"""

from typing import List

from trustlend.domain.exceptions import InvalidAmountError
from trustlend.domain.models import StakeInfo, SupporterCut, WaterfallResult, WaterfallSimulation


def _require_non_negative(**amounts: int) -> None:
    for name, value in amounts.items():
        if value < 0:
            raise InvalidAmountError(f"{name} cannot be negative: {value}")


def _proportional_cuts(loss_micro: int, stakes: List[StakeInfo]) -> List[int]:
    total_stakes = sum(s.stake_micro for s in stakes)
    absorbable = min(loss_micro, total_stakes)

    cuts = []
    remainders = []
    for position, stake in enumerate(stakes):
        share, fraction = divmod(loss_micro * stake.stake_micro, total_stakes)
        cut = min(share, stake.stake_micro)
        cuts.append(cut)
        if cut < stake.stake_micro and fraction:
            remainders.append((-fraction, position))

    leftover = absorbable - sum(cuts)
    for _, position in sorted(remainders)[:leftover]:
        cuts[position] += 1

    return cuts


def execute_waterfall(
    total_loss_micro: int,
    borrower_collateral_micro: int,
    stakes: List[StakeInfo],
    mutual_fund_available_micro: int,
) -> WaterfallResult:
    """
    Run the loss waterfall.

    Invariants:
    - cut + released == original stake, cut >= 0, for every supporter
    - total_recovered == collateral_used + sum(cuts) + mutual_fund_used
    - total_recovered <= total_loss

    Example:
        loss 1_000_000, collateral 200_000, stakes A=400_000 B=400_000
        → collateral 200_000, A cut 400_000, B cut 400_000, fund 0
    """
    _require_non_negative(
        total_loss=total_loss_micro,
        borrower_collateral=borrower_collateral_micro,
        mutual_fund_available=mutual_fund_available_micro,
    )
    for stake in stakes:
        _require_non_negative(stake=stake.stake_micro)

    remaining_loss = total_loss_micro

    # 1. Borrower collateral
    collateral_used = min(remaining_loss, borrower_collateral_micro)
    remaining_loss -= collateral_used

    # 2. Supporter stakes, proportional
    total_stakes = sum(s.stake_micro for s in stakes)
    if remaining_loss > 0 and total_stakes > 0:
        cuts = _proportional_cuts(remaining_loss, stakes)
    else:
        cuts = [0] * len(stakes)

    supporter_cuts = [
        SupporterCut(
            supporter_id=stake.supporter_id,
            original_stake_micro=stake.stake_micro,
            cut_micro=cut,
            released_micro=stake.stake_micro - cut,
        )
        for stake, cut in zip(stakes, cuts)
    ]
    total_cuts = sum(cuts)
    remaining_loss -= total_cuts

    # 3. Mutual fund
    fund_used = min(remaining_loss, mutual_fund_available_micro)

    return WaterfallResult(
        collateral_used_micro=collateral_used,
        supporter_cuts=supporter_cuts,
        mutual_fund_used_micro=fund_used,
        total_recovered_micro=collateral_used + total_cuts + fund_used,
    )


def simulate_waterfall(
    outstanding_balance_micro: int,
    expected_recovery_micro: int,
    borrower_collateral_micro: int,
    stakes: List[StakeInfo],
    mutual_fund_available_micro: int,
) -> WaterfallSimulation:
    """Preview a liquidation without side effects, with recovery rate and shortfall"""
    total_loss = max(0, outstanding_balance_micro - expected_recovery_micro)
    result = execute_waterfall(total_loss, borrower_collateral_micro, stakes, mutual_fund_available_micro)

    if outstanding_balance_micro > 0:
        recovery_rate = result.total_recovered_micro / outstanding_balance_micro
    else:
        recovery_rate = 1.0

    return WaterfallSimulation(
        result=result,
        total_loss_micro=total_loss,
        recovery_rate=recovery_rate,
        shortfall_micro=max(0, total_loss - result.total_recovered_micro),
    )


def calculate_max_coverage(
    borrower_collateral_micro: int,
    stakes: List[StakeInfo],
    mutual_fund_available_micro: int,
) -> int:
    """Largest loss the three sources can absorb together"""
    return borrower_collateral_micro + sum(s.stake_micro for s in stakes) + mutual_fund_available_micro


def calculate_coverage_ratio(
    loan_amount_micro: int,
    borrower_collateral_micro: int,
    stakes: List[StakeInfo],
) -> float:
    """(collateral + stakes) / loan amount, 0.0 for an empty loan"""
    if loan_amount_micro <= 0:
        return 0.0
    total_coverage = borrower_collateral_micro + sum(s.stake_micro for s in stakes)
    return total_coverage / loan_amount_micro
