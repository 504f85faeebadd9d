"""Shared handling for engine decisions served over HTTP"""

import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import HTTPException
from pydantic import BaseModel

from trustlend.config import settings
from trustlend.domain.audit import build_decision_record
from trustlend.domain.exceptions import DomainException
from trustlend.infrastructure.observability.logging import log_decision, log_rejection
from trustlend.infrastructure.observability.metrics import record_decision


@contextmanager
def domain_errors(request_id: str, operation: str) -> Iterator[None]:
    """Turn invalid-input domain errors into 422 responses"""
    try:
        yield
    except DomainException as e:
        log_rejection(request_id, operation, str(e))
        raise HTTPException(status_code=422, detail=str(e)) from e


def finalize_decision(
    request_id: str,
    operation: str,
    loan_id: Optional[str],
    request_body: BaseModel,
    decision: Any,
    start_time: float,
) -> str:
    """
    Hash, count and log a decision; return its decision hash.

    The hash covers the request exactly as received (JSON form) and the
    domain result, under the active parameter version, so the orchestrator
    can store it and recompute it later.
    """
    record = build_decision_record(
        operation=operation,
        loan_id=loan_id,
        version=settings.parameter_version,
        inputs=request_body.model_dump(mode="json"),
        decision=decision,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_decision(operation)
    log_decision(request_id, operation, record.decision_hash, duration_ms, loan_id=record.loan_id)

    return record.decision_hash
