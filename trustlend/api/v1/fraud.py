"""POST /v1/fraud/check - endorsement fraud signals and review decision"""

import time

from fastapi import APIRouter, Request

from trustlend.api.decisions import finalize_decision
from trustlend.api.dependencies import get_request_id, with_defaults
from trustlend.api.v1.schemas import FraudAlertSchema, FraudCheckRequest, FraudCheckResponse, ReviewDecisionSchema
from trustlend.config import settings
from trustlend.domain.fraud import calculate_fraud_risk, run_comprehensive_check, should_trigger_review
from trustlend.infrastructure.observability.metrics import record_fraud_alerts
from trustlend.utils.time_utils import utc_now

router = APIRouter()


@router.post("/fraud/check", response_model=FraudCheckResponse)
def fraud_check(request_body: FraudCheckRequest, request: Request):
    """
    Scan a loan's endorsements for fraud patterns.

    Multi-account alerts are heuristics: they drive review, never an automatic block.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = with_defaults(request_body, now=utc_now())

    alerts = run_comprehensive_check(
        loan=request_body.loan_info(),
        users=[u.to_domain() for u in request_body.users],
        approval_time=request_body.approval_time,
        now=request_body.now,
        wallet_age_threshold_hours=settings.wallet_age_threshold_hours,
        withdrawal_window_minutes=settings.stake_withdrawal_window_minutes,
    )
    risk_score = calculate_fraud_risk(alerts)
    review = should_trigger_review(alerts)

    decision_hash = finalize_decision(
        request_id,
        "fraud_check",
        request_body.loan_id,
        request_body,
        {"alerts": alerts, "risk_score": risk_score, "review": review},
        start_time,
    )
    record_fraud_alerts(alerts, review.under_review)

    return FraudCheckResponse(
        alerts=[FraudAlertSchema.model_validate(alert) for alert in alerts],
        risk_score=risk_score,
        review=ReviewDecisionSchema.model_validate(review),
        decision_hash=decision_hash,
    )
