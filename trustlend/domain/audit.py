"""Decision hashes and idempotency keys for the audit trail"""

import hmac
import re
from datetime import datetime
from typing import Any, Dict, Optional

from trustlend.domain.models import DecisionRecord
from trustlend.utils.hashing import canonicalize, sha256_hex
from trustlend.utils.time_utils import utc_now

IDEMPOTENCY_HASH_LENGTH = 16
TIME_WINDOW_FORMATS = {
    "minute": "%Y-%m-%dT%H:%M",
    "hour": "%Y-%m-%dT%H",
    "day": "%Y-%m-%d",
    "none": "",
}

_UUID_KEY = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE)
_GENERATED_KEY = re.compile(r"^([A-Z_]+)_[a-f0-9]{16}$")


def generate_decision_hash(loan_id: str, version: str, inputs: Any, decision: Any) -> str:
    """
    SHA-256 over the canonical JSON of a decision.

    No wall-clock component goes into the digest, so the hash can be
    recomputed later from the persisted inputs and must match bit-for-bit.
    """
    return sha256_hex(
        {
            "loan_id": loan_id,
            "version": version,
            "inputs": inputs,
            "decision": decision,
        }
    )


def verify_decision_hash(stored_hash: str, loan_id: str, version: str, inputs: Any, decision: Any) -> bool:
    expected = generate_decision_hash(loan_id, version, inputs, decision)
    return hmac.compare_digest(stored_hash, expected)


def build_decision_record(
    operation: str,
    loan_id: Optional[str],
    version: str,
    inputs: Any,
    decision: Any,
) -> DecisionRecord:
    """Audit log entry for a decision; loan-less decisions are filed under 'system'"""
    loan_id = loan_id or "system"
    canonical_inputs = canonicalize(inputs)
    canonical_decision = canonicalize(decision)

    return DecisionRecord(
        operation=operation,
        loan_id=loan_id,
        version=version,
        inputs=canonical_inputs,
        decision=canonical_decision,
        decision_hash=generate_decision_hash(loan_id, version, canonical_inputs, canonical_decision),
    )


def generate_idempotency_key(
    operation: str,
    resource_id: str,
    params: Optional[Dict[str, Any]] = None,
    time_window: str = "minute",
    now: Optional[datetime] = None,
) -> str:
    """
    Deterministic idempotency key: "{OPERATION}_{16 hex chars}".

    The digest covers the operation, resource, canonical params and the
    current time bucket, so repeats inside the same window collide on purpose.
    """
    if time_window not in TIME_WINDOW_FORMATS:
        raise ValueError(f"Unknown time window: {time_window}")

    bucket = ""
    if time_window != "none":
        if now is None:
            now = utc_now()
        bucket = now.strftime(TIME_WINDOW_FORMATS[time_window])

    operation = operation.upper()
    digest = sha256_hex(
        {
            "operation": operation,
            "resource_id": resource_id,
            "timestamp": bucket,
            "params": params or {},
        }
    )
    return f"{operation}_{digest[:IDEMPOTENCY_HASH_LENGTH]}"


def validate_idempotency_key(key: str) -> bool:
    """Accept client UUID4 keys and generated OPERATION_hash keys"""
    return bool(_UUID_KEY.match(key) or _GENERATED_KEY.match(key))


def extract_operation(key: str) -> Optional[str]:
    match = _GENERATED_KEY.match(key)
    return match.group(1) if match else None
