"""Simulated-time helpers"""

from datetime import datetime, timedelta, timezone
from typing import List

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# Demo simulation runs installments every few seconds instead of weeks
DEFAULT_INSTALLMENT_INTERVAL_SECONDS = 10
DEFAULT_LATE_TOLERANCE_SECONDS = 30


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def add_seconds(moment: datetime, seconds: float) -> datetime:
    return moment + timedelta(seconds=seconds)


def seconds_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds()


def is_overdue(due_at: datetime, now: datetime, tolerance_seconds: float = 0) -> bool:
    """Strictly past the due date plus tolerance"""
    return now > add_seconds(due_at, tolerance_seconds)


def installment_due_dates(start: datetime, count: int, interval_seconds: int) -> List[datetime]:
    """Due dates spaced interval_seconds apart, the first one interval after start"""
    return [add_seconds(start, (i + 1) * interval_seconds) for i in range(count)]
