"""POST /v1/parameters/proposals - versioned parameter changes"""

import logging
import time

from fastapi import APIRouter, Request

from trustlend.api.decisions import finalize_decision
from trustlend.api.dependencies import get_request_id, with_defaults
from trustlend.api.v1.schemas import ProposalRequest, ProposalResponse
from trustlend.config import settings
from trustlend.domain.governance import propose_parameter_update
from trustlend.infrastructure.observability.logging import log_rejection
from trustlend.infrastructure.observability.metrics import record_governance_proposal
from trustlend.utils.time_utils import utc_now

router = APIRouter()


@router.post("/parameters/proposals", response_model=ProposalResponse)
def propose(request_body: ProposalRequest, request: Request):
    """
    Propose a new parameter version.

    Rejections (non-operator proposer, invalid table or tolerances) are
    returned with success=false and HTTP 200; callers branch on them.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = with_defaults(request_body, current_version=settings.parameter_version, now=utc_now())

    result = propose_parameter_update(
        current_version=request_body.current_version,
        changes=request_body.changes(),
        proposer_role=request_body.proposer_role,
        proposer_id=request_body.proposer_id,
        now=request_body.now,
    )
    record_governance_proposal(result.success)

    if not result.success:
        log_rejection(
            request_id, "parameter_proposal", result.message, level=logging.INFO, proposer_id=request_body.proposer_id
        )
        return ProposalResponse(success=False, message=result.message)

    decision_hash = finalize_decision(request_id, "parameter_proposal", None, request_body, result, start_time)

    return ProposalResponse(
        success=True,
        message=result.message,
        new_version=result.new_version,
        activates_at=result.activates_at,
        decision_hash=decision_hash,
    )
