"""Prometheus metrics for decision volume, fraud signals, loss recovery and governance"""

from typing import List

from prometheus_client import Counter, Histogram

from trustlend.domain.models import FraudAlert, WaterfallResult

# Decision metrics
decision_counter = Counter(
    "trustlend_decision_total",
    "Total engine decisions made",
    ["operation"],  # score | pricing | approval | fraud_check | schedule | ...
)

approval_counter = Counter(
    "trustlend_approval_total",
    "Approval checks by outcome",
    ["outcome"],  # approved | rejected
)

# Fraud metrics
fraud_alert_counter = Counter(
    "trustlend_fraud_alerts_total",
    "Fraud alerts emitted",
    ["type", "severity"],
)

review_counter = Counter(
    "trustlend_reviews_triggered_total",
    "Fraud checks that put a borrower under review",
)

# Loss recovery metrics
waterfall_recovered_counter = Counter(
    "trustlend_waterfall_recovered_micro_total",
    "Loss recovered by the waterfall in micro-units",
    ["source"],  # collateral | stakes | mutual_fund
)

waterfall_shortfall_counter = Counter(
    "trustlend_waterfall_shortfall_micro_total",
    "Loss left unrecovered after the waterfall in micro-units",
)

# Governance metrics
governance_proposal_counter = Counter(
    "trustlend_parameter_proposals_total",
    "Parameter update proposals",
    ["outcome"],  # accepted | rejected
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_decision(operation: str) -> None:
    decision_counter.labels(operation=operation).inc()


def record_approval(approved: bool) -> None:
    approval_counter.labels(outcome="approved" if approved else "rejected").inc()


def record_fraud_alerts(alerts: List[FraudAlert], under_review: bool) -> None:
    """Count alerts by type/severity for monitoring fraud pressure"""
    for alert in alerts:
        fraud_alert_counter.labels(type=alert.type.value, severity=alert.severity.value).inc()
    if under_review:
        review_counter.inc()


def record_waterfall(result: WaterfallResult, total_loss_micro: int) -> None:
    """Record how much of a realized loss each source absorbed"""
    stakes_used = sum(cut.cut_micro for cut in result.supporter_cuts)
    waterfall_recovered_counter.labels(source="collateral").inc(result.collateral_used_micro)
    waterfall_recovered_counter.labels(source="stakes").inc(stakes_used)
    waterfall_recovered_counter.labels(source="mutual_fund").inc(result.mutual_fund_used_micro)
    waterfall_shortfall_counter.inc(max(0, total_loss_micro - result.total_recovered_micro))


def record_governance_proposal(accepted: bool) -> None:
    governance_proposal_counter.labels(outcome="accepted" if accepted else "rejected").inc()
