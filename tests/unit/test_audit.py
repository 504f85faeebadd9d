"""Unit tests for decision hashes and idempotency keys"""

import pytest
from datetime import datetime, timedelta
from trustlend.domain.audit import (
    build_decision_record,
    extract_operation,
    generate_decision_hash,
    generate_idempotency_key,
    validate_idempotency_key,
    verify_decision_hash,
)
from trustlend.domain.models import PricingResult, TierName


def test_decision_hash_is_deterministic():
    first = generate_decision_hash("loan_1", "v1.0.0", {"score": 75, "coverage": 60}, {"apr": 900})
    second = generate_decision_hash("loan_1", "v1.0.0", {"coverage": 60, "score": 75}, {"apr": 900})

    assert first == second
    assert len(first) == 64


def test_decision_hash_changes_with_any_field():
    base = generate_decision_hash("loan_1", "v1.0.0", {"score": 75}, {"apr": 900})

    assert generate_decision_hash("loan_2", "v1.0.0", {"score": 75}, {"apr": 900}) != base
    assert generate_decision_hash("loan_1", "v1.0.1", {"score": 75}, {"apr": 900}) != base
    assert generate_decision_hash("loan_1", "v1.0.0", {"score": 76}, {"apr": 900}) != base
    assert generate_decision_hash("loan_1", "v1.0.0", {"score": 75}, {"apr": 901}) != base


def test_verify_decision_hash():
    stored = generate_decision_hash("loan_1", "v1.0.0", {"a": 1}, {"b": 2})

    assert verify_decision_hash(stored, "loan_1", "v1.0.0", {"a": 1}, {"b": 2}) is True
    assert verify_decision_hash(stored, "loan_1", "v1.0.0", {"a": 1}, {"b": 3}) is False


def test_decision_record_canonicalizes_domain_objects():
    pricing = PricingResult(
        tier=TierName.HIGH,
        apr_bps=900,
        max_limit_micro=8_000_000,
        required_coverage_pct=25,
        adjustment_bps=0,
        final_apr_bps=900,
    )
    record = build_decision_record("pricing", None, "v1.0.0", {"score": 75}, pricing)

    assert record.loan_id == "system"
    assert record.decision["tier"] == "HIGH"
    assert verify_decision_hash(record.decision_hash, "system", "v1.0.0", {"score": 75}, record.decision)


def test_idempotency_key_same_window(now: datetime):
    first = generate_idempotency_key("repay", "loan_1", {"amount": 100}, now=now)
    second = generate_idempotency_key("repay", "loan_1", {"amount": 100}, now=now + timedelta(seconds=30))

    assert first == second
    assert first.startswith("REPAY_")
    assert len(first) == len("REPAY_") + 16


def test_idempotency_key_changes_across_windows(now: datetime):
    first = generate_idempotency_key("repay", "loan_1", now=now)
    next_minute = generate_idempotency_key("repay", "loan_1", now=now + timedelta(minutes=1))
    same_day = generate_idempotency_key("repay", "loan_1", time_window="day", now=now + timedelta(hours=3))

    assert first != next_minute
    assert generate_idempotency_key("repay", "loan_1", time_window="day", now=now) == same_day


def test_idempotency_key_without_time_window(now: datetime):
    first = generate_idempotency_key("approve", "loan_1", time_window="none", now=now)
    later = generate_idempotency_key("approve", "loan_1", time_window="none", now=now + timedelta(days=3))
    assert first == later


def test_idempotency_key_unknown_window():
    with pytest.raises(ValueError):
        generate_idempotency_key("approve", "loan_1", time_window="week")


def test_idempotency_key_validation(now: datetime):
    generated = generate_idempotency_key("execute_waterfall", "loan_9", now=now)

    assert validate_idempotency_key(generated) is True
    assert validate_idempotency_key("3f2b8c1e-9d4a-4c6b-8e2f-1a2b3c4d5e6f") is True
    assert validate_idempotency_key("not-a-key") is False
    assert extract_operation(generated) == "EXECUTE_WATERFALL"
    assert extract_operation("not-a-key") is None
