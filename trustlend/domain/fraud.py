"""Fraud signal detection from endorsement patterns"""

from datetime import datetime
from typing import Dict, List, Optional

from trustlend.domain.models import (
    AlertType,
    EndorsementInfo,
    FraudAlert,
    LoanInfo,
    ReviewDecision,
    Severity,
    UserInfo,
)
from trustlend.utils.time_utils import SECONDS_PER_HOUR, SECONDS_PER_MINUTE, seconds_between, utc_now

CONCENTRATION_THRESHOLD = 0.5
HIGH_CONCENTRATION_THRESHOLD = 0.8
WALLET_AGE_THRESHOLD_HOURS = 24
STAKE_WITHDRAWAL_WINDOW_MINUTES = 10

SEVERITY_WEIGHTS = {
    Severity.LOW: 10,
    Severity.MEDIUM: 25,
    Severity.HIGH: 50,
}
MAX_FRAUD_RISK = 100
REVIEW_RISK_THRESHOLD = 50
REVIEW_BLOCK_SECONDS = 30  # simulation scale


def detect_concentration_risk(
    loan: LoanInfo,
    threshold: float = CONCENTRATION_THRESHOLD,
) -> Optional[FraudAlert]:
    """
    Flag a loan where one supporter holds more than `threshold` of all stakes.

    Stakes are summed per supporter. Exactly 50% is not flagged; above 80%
    is HIGH severity, otherwise MEDIUM.
    """
    total_stakes = sum(e.stake_micro for e in loan.endorsements)
    if total_stakes == 0:
        return None

    stake_by_supporter: Dict[str, int] = {}
    for endorsement in loan.endorsements:
        stake_by_supporter[endorsement.supporter_id] = (
            stake_by_supporter.get(endorsement.supporter_id, 0) + endorsement.stake_micro
        )

    # First supporter reaching the maximum wins ties
    dominant_id = max(stake_by_supporter, key=lambda supporter_id: stake_by_supporter[supporter_id])
    dominant_stake = stake_by_supporter[dominant_id]
    ratio = dominant_stake / total_stakes

    if ratio <= threshold:
        return None

    return FraudAlert(
        type=AlertType.CONCENTRATION,
        severity=Severity.HIGH if ratio > HIGH_CONCENTRATION_THRESHOLD else Severity.MEDIUM,
        details={
            "loan_id": loan.id,
            "concentration_ratio": ratio,
            "dominant_supporter_id": dominant_id,
            "dominant_stake_micro": dominant_stake,
            "total_stakes_micro": total_stakes,
        },
    )


def detect_multi_account(
    users: List[UserInfo],
    suspect_user_id: str,
    now: datetime,
    wallet_age_threshold_hours: float = WALLET_AGE_THRESHOLD_HOURS,
) -> Optional[FraudAlert]:
    """
    Flag a freshly created account when other fresh accounts exist too.

    Heuristic only: a HIGH alert here is a reason to review, not proof.
    """
    suspect = next((u for u in users if u.id == suspect_user_id), None)
    if suspect is None:
        return None

    def age_hours(user: UserInfo) -> float:
        return seconds_between(user.created_at, now) / SECONDS_PER_HOUR

    suspect_age = age_hours(suspect)
    if suspect_age >= wallet_age_threshold_hours:
        return None

    similar_recent = [u.id for u in users if u.id != suspect_user_id and age_hours(u) < wallet_age_threshold_hours]
    if not similar_recent:
        return None

    return FraudAlert(
        type=AlertType.MULTI_ACCOUNT,
        severity=Severity.HIGH,
        details={
            "suspect_user_id": suspect_user_id,
            "wallet_age_hours": suspect_age,
            "similar_recent_users": similar_recent,
        },
    )


def detect_suspicious_stake_withdrawal(
    endorsements: List[EndorsementInfo],
    approval_time: datetime,
    window_minutes: float = STAKE_WITHDRAWAL_WINDOW_MINUTES,
) -> Optional[FraudAlert]:
    """Flag endorsements placed within `window_minutes` before approval"""
    suspicious = []
    for endorsement in endorsements:
        minutes_before = seconds_between(endorsement.created_at, approval_time) / SECONDS_PER_MINUTE
        if 0 <= minutes_before <= window_minutes:
            suspicious.append(
                {
                    "supporter_id": endorsement.supporter_id,
                    "stake_micro": endorsement.stake_micro,
                    "minutes_before_approval": minutes_before,
                }
            )

    if not suspicious:
        return None

    return FraudAlert(
        type=AlertType.STAKE_WITHDRAWAL,
        severity=Severity.MEDIUM,
        details={"suspicious_endorsements": suspicious},
    )


def run_comprehensive_check(
    loan: LoanInfo,
    users: List[UserInfo],
    approval_time: Optional[datetime] = None,
    now: Optional[datetime] = None,
    wallet_age_threshold_hours: float = WALLET_AGE_THRESHOLD_HOURS,
    withdrawal_window_minutes: float = STAKE_WITHDRAWAL_WINDOW_MINUTES,
) -> List[FraudAlert]:
    """
    Run every fraud check against a loan and collect the alerts.

    Checks are independent and their alerts accumulate:
    1. concentration of stakes
    2. multi-account, once per distinct endorsing supporter
    3. stake timing, only when approval_time is given
    """
    if now is None:
        now = utc_now()

    alerts: List[FraudAlert] = []

    concentration = detect_concentration_risk(loan)
    if concentration:
        alerts.append(concentration)

    supporter_ids = list(dict.fromkeys(e.supporter_id for e in loan.endorsements))
    for supporter_id in supporter_ids:
        multi_account = detect_multi_account(users, supporter_id, now, wallet_age_threshold_hours)
        if multi_account:
            alerts.append(multi_account)

    if approval_time is not None:
        withdrawal = detect_suspicious_stake_withdrawal(loan.endorsements, approval_time, withdrawal_window_minutes)
        if withdrawal:
            alerts.append(withdrawal)

    return alerts


def calculate_fraud_risk(alerts: List[FraudAlert]) -> int:
    """Sum severity weights (LOW 10, MEDIUM 25, HIGH 50), capped at 100"""
    risk = sum(SEVERITY_WEIGHTS[Severity(alert.severity)] for alert in alerts)
    return min(MAX_FRAUD_RISK, risk)


def should_trigger_review(alerts: List[FraudAlert]) -> ReviewDecision:
    """Review when any alert is HIGH or aggregate risk reaches 50"""
    risk = calculate_fraud_risk(alerts)
    has_high = any(Severity(alert.severity) == Severity.HIGH for alert in alerts)

    if has_high or risk >= REVIEW_RISK_THRESHOLD:
        alert_types = ", ".join(AlertType(alert.type).value for alert in alerts)
        return ReviewDecision(
            under_review=True,
            block_duration_seconds=REVIEW_BLOCK_SECONDS,
            reason=f"High fraud risk detected: {alert_types}",
        )

    return ReviewDecision(under_review=False, block_duration_seconds=0, reason="")
