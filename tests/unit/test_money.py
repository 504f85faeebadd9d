"""Unit tests for micro-unit arithmetic, time helpers and canonical hashing"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from trustlend.domain.exceptions import InvalidAmountError
from trustlend.domain.models import InstallmentStatus, StakeInfo
from trustlend.utils.hashing import canonical_json, sha256_hex
from trustlend.utils.money import (
    basis_points_of,
    coverage_pct,
    div_round_half_up,
    from_micro,
    is_valid_amount,
    is_valid_bps,
    is_valid_percentage,
    percentage_of,
    simple_interest,
    to_micro,
    total_with_simple_interest,
)
from trustlend.utils.time_utils import installment_due_dates, is_overdue


@pytest.mark.parametrize(
    "numerator,denominator,expected",
    [
        (5, 2, 3),
        (4, 2, 2),
        (7, 3, 2),
        (-5, 2, -3),
        (5, -2, -3),
        (1, 3, 0),
    ],
)
def test_div_round_half_up(numerator: int, denominator: int, expected: int):
    assert div_round_half_up(numerator, denominator) == expected


def test_div_by_zero():
    with pytest.raises(InvalidAmountError):
        div_round_half_up(1, 0)


def test_micro_conversions():
    assert to_micro("1.5") == 1_500_000
    assert to_micro(0.0000005) == 1
    assert from_micro(1_500_000) == Decimal("1.5")


def test_percentages_and_basis_points():
    assert percentage_of(1_000_000, 25) == 250_000
    assert basis_points_of(1_000_000, 1400) == 140_000
    assert basis_points_of(3, 5000) == 2


def test_simple_interest_rounded_once():
    assert simple_interest(1_000_000, 1400, 30) == 11_507
    assert total_with_simple_interest(1_000_000, 1400, 30) == 1_011_507
    assert total_with_simple_interest(1_000_000, 0, 30) == 1_000_000


def test_coverage_pct():
    assert coverage_pct(500_000, 1_000_000) == 50.0
    assert coverage_pct(500_000, 0) == 0.0


def test_validators():
    assert is_valid_amount(0) is True
    assert is_valid_amount(-1) is False
    assert is_valid_amount(True) is False
    assert is_valid_bps(10_000) is True
    assert is_valid_bps(10_001) is False
    assert is_valid_percentage(99.5) is True
    assert is_valid_percentage(101) is False


def test_due_dates_and_overdue(now: datetime):
    dates = installment_due_dates(now, 2, 10)

    assert dates == [now + timedelta(seconds=10), now + timedelta(seconds=20)]
    assert is_overdue(dates[0], dates[0]) is False
    assert is_overdue(dates[0], dates[0] + timedelta(microseconds=1)) is True


def test_canonical_json_is_order_independent():
    assert canonical_json({"b": 1, "a": [2, 3]}) == '{"a":[2,3],"b":1}'
    assert sha256_hex({"b": 1, "a": 2}) == sha256_hex({"a": 2, "b": 1})


def test_canonical_json_domain_values(now: datetime):
    payload = {InstallmentStatus.LATE: StakeInfo("A", 5), "at": now}
    assert canonical_json(payload) == '{"LATE":{"stake_micro":5,"supporter_id":"A"},"at":"2025-01-15T12:00:00+00:00"}'
