"""POST /v1/score, /v1/pricing, /v1/approval - borrower scoring and loan pricing"""

import time

from fastapi import APIRouter, Request

from trustlend.api.decisions import domain_errors, finalize_decision
from trustlend.api.dependencies import get_request_id, resolve_pricing_table, with_defaults
from trustlend.api.v1.schemas import (
    ApprovalRequest,
    ApprovalResponse,
    PricingRequest,
    PricingResponse,
    PricingResultSchema,
    ScoreHistoryRequest,
    ScoreInputsSchema,
    ScoreRequest,
    ScoreResponse,
)
from trustlend.config import settings
from trustlend.domain.approval import evaluate_approval
from trustlend.domain.pricing import price_by_score
from trustlend.domain.scoring import compute_score, compute_score_inputs_from_history
from trustlend.infrastructure.observability.metrics import record_approval

router = APIRouter()


@router.post("/score", response_model=ScoreResponse)
def score(request_body: ScoreRequest, request: Request):
    """Compute a credit score from prepared score inputs"""
    start_time = time.time()
    request_id = get_request_id(request)

    inputs = request_body.inputs.to_domain()
    result = compute_score(inputs)
    decision_hash = finalize_decision(request_id, "score", request_body.loan_id, request_body, result, start_time)

    return ScoreResponse(score=result, inputs=request_body.inputs, decision_hash=decision_hash)


@router.post("/score/history", response_model=ScoreResponse)
def score_from_history(request_body: ScoreHistoryRequest, request: Request):
    """
    Recalculate a borrower's score from full history.

    Counts PAID/LATE installment statuses and checks loan states for a default.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = with_defaults(request_body, base=settings.base_score)

    inputs = compute_score_inputs_from_history(
        base=request_body.base,
        installment_statuses=request_body.installment_statuses,
        loan_states=request_body.loan_states,
        coverage_pct=request_body.coverage_pct,
        under_review=request_body.under_review,
    )
    result = compute_score(inputs)
    decision_hash = finalize_decision(
        request_id, "score_history", request_body.loan_id, request_body, {"score": result, "inputs": inputs}, start_time
    )

    return ScoreResponse(
        score=result,
        inputs=ScoreInputsSchema.model_validate(inputs),
        decision_hash=decision_hash,
    )


@router.post("/pricing", response_model=PricingResponse)
def pricing(request_body: PricingRequest, request: Request):
    """Price a loan for a score and coverage percentage"""
    start_time = time.time()
    request_id = get_request_id(request)

    with domain_errors(request_id, "pricing"):
        result = price_by_score(
            request_body.score,
            request_body.coverage_pct,
            resolve_pricing_table(request_body.pricing_table),
        )

    decision_hash = finalize_decision(request_id, "pricing", request_body.loan_id, request_body, result, start_time)

    return PricingResponse(pricing=PricingResultSchema.model_validate(result), decision_hash=decision_hash)


@router.post("/approval", response_model=ApprovalResponse)
def approval(request_body: ApprovalRequest, request: Request):
    """
    Run approval threshold checks for a pending loan.

    A failed check is a normal outcome (approved=false), not an error.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    with domain_errors(request_id, "approval"):
        result = evaluate_approval(
            score=request_body.score,
            coverage_pct=request_body.coverage_pct,
            amount_micro=request_body.amount_micro,
            endorsement_count=request_body.endorsement_count,
            table=resolve_pricing_table(request_body.pricing_table),
            min_score=settings.min_approval_score,
            min_supporters=settings.min_supporters,
        )

    decision_hash = finalize_decision(request_id, "approval", request_body.loan_id, request_body, result, start_time)
    record_approval(result.approved)

    return ApprovalResponse(
        approved=result.approved,
        checks=result.checks,
        requirements=result.requirements,
        decision_hash=decision_hash,
    )
