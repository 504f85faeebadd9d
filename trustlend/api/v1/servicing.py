"""POST /v1/installments/* - schedule generation, late marking and repayments"""

import time

from fastapi import APIRouter, Request

from trustlend.api.decisions import domain_errors, finalize_decision
from trustlend.api.dependencies import get_request_id, with_defaults
from trustlend.api.v1.schemas import (
    AppliedPaymentSchema,
    InstallmentSchema,
    PaymentRequest,
    PaymentResponse,
    ScheduleRequest,
    ScheduleResponse,
    StatusRequest,
    StatusResponse,
    StatusUpdateSchema,
)
from trustlend.config import settings
from trustlend.domain.servicing import generate_installments, process_payment, update_installment_status
from trustlend.utils.time_utils import utc_now

router = APIRouter()


@router.post("/installments/schedule", response_model=ScheduleResponse)
def create_schedule(request_body: ScheduleRequest, request: Request):
    """Generate the installment schedule for a new loan"""
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = with_defaults(
        request_body, interval_seconds=settings.installment_interval_seconds, start_date=utc_now()
    )

    with domain_errors(request_id, "schedule"):
        installments = generate_installments(
            principal_micro=request_body.principal_micro,
            apr_bps=request_body.apr_bps,
            term_days=request_body.term_days,
            num_installments=request_body.num_installments,
            interval_seconds=request_body.interval_seconds,
            start_date=request_body.start_date,
        )

    decision_hash = finalize_decision(
        request_id, "schedule", request_body.loan_id, request_body, installments, start_time
    )

    return ScheduleResponse(
        installments=[InstallmentSchema.model_validate(i) for i in installments],
        total_micro=sum(i.amount_micro for i in installments),
        decision_hash=decision_hash,
    )


@router.post("/installments/status", response_model=StatusResponse)
def mark_late(request_body: StatusRequest, request: Request):
    """Mark overdue installments LATE using the configured tolerance"""
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = with_defaults(request_body, tolerance_seconds=settings.late_tolerance_seconds, now=utc_now())

    updates = update_installment_status(
        [i.to_domain() for i in request_body.installments],
        now=request_body.now,
        tolerance_seconds=request_body.tolerance_seconds,
    )

    decision_hash = finalize_decision(request_id, "late_marking", request_body.loan_id, request_body, updates, start_time)

    return StatusResponse(
        updates=[StatusUpdateSchema.model_validate(u) for u in updates],
        decision_hash=decision_hash,
    )


@router.post("/installments/payment", response_model=PaymentResponse)
def repay(request_body: PaymentRequest, request: Request):
    """Apply a repayment FIFO across unpaid installments"""
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = with_defaults(request_body, now=utc_now())

    with domain_errors(request_id, "repayment"):
        result = process_payment(
            [i.to_domain() for i in request_body.installments],
            request_body.payment_micro,
            now=request_body.now,
        )

    decision_hash = finalize_decision(request_id, "repayment", request_body.loan_id, request_body, result, start_time)

    return PaymentResponse(
        paid_indices=result.paid_indices,
        remaining_balance_micro=result.remaining_balance_micro,
        applied_payments=[AppliedPaymentSchema.model_validate(p) for p in result.applied_payments],
        paid_at=result.paid_at,
        decision_hash=decision_hash,
    )
