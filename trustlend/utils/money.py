"""Integer-safe arithmetic on micro-denominated currency amounts.

Every amount is an ``int`` in micro-units (10^-6 of the nominal currency).
Rates are basis points (10000 bps = 100%). Rounding is always half away from
zero and happens exactly once per operation, on exact integer ratios, so the
same inputs give the same result on every platform.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from trustlend.domain.exceptions import InvalidAmountError

MICRO_DECIMALS = 6
MICRO_MULTIPLIER = 10**MICRO_DECIMALS
BPS_DENOMINATOR = 10_000
DAYS_PER_YEAR = 365


def div_round_half_up(numerator: int, denominator: int) -> int:
    """Exact integer division rounded half away from zero"""
    if denominator == 0:
        raise InvalidAmountError("Division by zero")

    negative = (numerator < 0) != (denominator < 0)
    quotient, remainder = divmod(abs(numerator), abs(denominator))
    if 2 * remainder >= abs(denominator):
        quotient += 1
    return -quotient if negative else quotient


def to_micro(amount: Union[int, str, Decimal, float]) -> int:
    """Convert a nominal amount (e.g. 1.5) to micro-units (1_500_000)"""
    nominal = Decimal(str(amount))
    return int((nominal * MICRO_MULTIPLIER).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_micro(amount_micro: int) -> Decimal:
    """Convert micro-units back to an exact nominal Decimal"""
    return Decimal(amount_micro) / MICRO_MULTIPLIER


def percentage_of(amount_micro: int, percent: int) -> int:
    return div_round_half_up(amount_micro * percent, 100)


def basis_points_of(amount_micro: int, bps: int) -> int:
    return div_round_half_up(amount_micro * bps, BPS_DENOMINATOR)


def simple_interest(principal_micro: int, apr_bps: int, term_days: int) -> int:
    """Interest = principal * apr * term_days / 365, rounded once"""
    return div_round_half_up(principal_micro * apr_bps * term_days, BPS_DENOMINATOR * DAYS_PER_YEAR)


def total_with_simple_interest(principal_micro: int, apr_bps: int, term_days: int) -> int:
    """
    Total owed = round(principal * (1 + apr/10000 * term_days/365)).

    The principal is a whole number of micro-units, so rounding the interest
    once is the same as rounding the total once.
    """
    return principal_micro + simple_interest(principal_micro, apr_bps, term_days)


def coverage_pct(total_stakes_micro: int, principal_micro: int) -> float:
    """Supporter stakes as a percentage of principal (0.0 when principal is 0)"""
    if principal_micro <= 0:
        return 0.0
    return total_stakes_micro / principal_micro * 100


def is_valid_amount(amount_micro: object) -> bool:
    return isinstance(amount_micro, int) and not isinstance(amount_micro, bool) and amount_micro >= 0


def is_valid_bps(bps: object) -> bool:
    return isinstance(bps, int) and not isinstance(bps, bool) and 0 <= bps <= BPS_DENOMINATOR


def is_valid_percentage(percent: object) -> bool:
    return isinstance(percent, (int, float)) and not isinstance(percent, bool) and 0 <= percent <= 100
