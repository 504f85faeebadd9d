"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from trustlend.api.main import create_app
from trustlend.domain.models import (
    EndorsementInfo,
    Installment,
    LoanInfo,
    PricingTable,
    StakeInfo,
    UserInfo,
    UserRole,
)
from trustlend.domain.parameters import default_pricing_table


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def now() -> datetime:
    """Fixed clock so time-based decisions are reproducible"""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def pricing_table() -> PricingTable:
    return default_pricing_table()


@pytest.fixture
def open_installments(now: datetime) -> list[Installment]:
    """Three OPEN installments of 100 micro-units, 10 seconds apart"""
    return [
        Installment(index=i, amount_micro=100, due_at=now + timedelta(seconds=10 * (i + 1)))
        for i in range(3)
    ]


@pytest.fixture
def established_users(now: datetime) -> list[UserInfo]:
    """Supporters whose wallets are weeks old"""
    return [
        UserInfo(
            id=f"supporter_{i}",
            wallet=f"0x{i:040x}",
            created_at=now - timedelta(days=30 + i),
            role=UserRole.SUPPORTER,
        )
        for i in range(3)
    ]


@pytest.fixture
def balanced_loan(now: datetime) -> LoanInfo:
    """Loan backed by three supporters with equal stakes, endorsed days ago"""
    return LoanInfo(
        id="loan_balanced",
        total_amount_micro=3_000_000,
        endorsements=[
            EndorsementInfo(
                supporter_id=f"supporter_{i}",
                stake_micro=500_000,
                created_at=now - timedelta(days=2),
            )
            for i in range(3)
        ],
    )


@pytest.fixture
def two_stakes() -> list[StakeInfo]:
    return [
        StakeInfo(supporter_id="A", stake_micro=400_000),
        StakeInfo(supporter_id="B", stake_micro=400_000),
    ]

