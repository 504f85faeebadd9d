"""POST /v1/waterfall, /v1/waterfall/simulate - default loss distribution"""

import time

from fastapi import APIRouter, Request

from trustlend.api.decisions import domain_errors, finalize_decision
from trustlend.api.dependencies import get_request_id, with_defaults
from trustlend.api.v1.schemas import (
    SimulationRequest,
    SimulationResponse,
    WaterfallRequest,
    WaterfallResponse,
    WaterfallResultSchema,
)
from trustlend.config import settings
from trustlend.domain.waterfall import execute_waterfall, simulate_waterfall
from trustlend.infrastructure.observability.metrics import record_waterfall

router = APIRouter()


@router.post("/waterfall", response_model=WaterfallResponse)
def liquidate(request_body: WaterfallRequest, request: Request):
    """Distribute a realized loss: collateral, then stakes pro rata, then the mutual fund"""
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = with_defaults(request_body, mutual_fund_available_micro=settings.mutual_fund_available_micro)

    with domain_errors(request_id, "waterfall"):
        result = execute_waterfall(
            request_body.total_loss_micro,
            request_body.borrower_collateral_micro,
            [s.to_domain() for s in request_body.stakes],
            request_body.mutual_fund_available_micro,
        )

    decision_hash = finalize_decision(request_id, "waterfall", request_body.loan_id, request_body, result, start_time)
    record_waterfall(result, request_body.total_loss_micro)

    return WaterfallResponse(
        result=WaterfallResultSchema.model_validate(result),
        shortfall_micro=request_body.total_loss_micro - result.total_recovered_micro,
        decision_hash=decision_hash,
    )


@router.post("/waterfall/simulate", response_model=SimulationResponse)
def simulate(request_body: SimulationRequest, request: Request):
    """Preview a liquidation; nothing is recorded as recovered"""
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = with_defaults(request_body, mutual_fund_available_micro=settings.mutual_fund_available_micro)

    with domain_errors(request_id, "waterfall_simulation"):
        simulation = simulate_waterfall(
            request_body.outstanding_balance_micro,
            request_body.expected_recovery_micro,
            request_body.borrower_collateral_micro,
            [s.to_domain() for s in request_body.stakes],
            request_body.mutual_fund_available_micro,
        )

    decision_hash = finalize_decision(
        request_id, "waterfall_simulation", request_body.loan_id, request_body, simulation, start_time
    )

    return SimulationResponse(
        result=WaterfallResultSchema.model_validate(simulation.result),
        total_loss_micro=simulation.total_loss_micro,
        recovery_rate=simulation.recovery_rate,
        shortfall_micro=simulation.shortfall_micro,
        decision_hash=decision_hash,
    )
