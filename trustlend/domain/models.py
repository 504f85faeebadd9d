"""Domain models - pure Python dataclasses representing lending entities"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class TierName(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EXCELLENT = "EXCELLENT"


class InstallmentStatus(str, Enum):
    OPEN = "OPEN"
    PAID = "PAID"
    LATE = "LATE"


class LoanState(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    REPAID = "REPAID"
    DEFAULTED = "DEFAULTED"
    LIQUIDATED = "LIQUIDATED"  # liquidated after default


class UserRole(str, Enum):
    BORROWER = "BORROWER"
    SUPPORTER = "SUPPORTER"
    OPERATOR = "OPERATOR"
    PROVIDER = "PROVIDER"


class AlertType(str, Enum):
    MULTI_ACCOUNT = "MULTI_ACCOUNT"
    CONCENTRATION = "CONCENTRATION"
    STAKE_WITHDRAWAL = "STAKE_WITHDRAWAL"


class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Scoring


@dataclass
class ScoreInputs:
    """Borrower history facts consumed once by the score engine"""

    base: int
    on_time_payments: int
    late_count: int
    has_defaulted: bool
    coverage_pct: float
    under_review: bool


# Pricing


@dataclass
class PricingTier:
    """Score band with its rate, limit and collateral requirement"""

    name: TierName
    score_min: int
    score_max: int
    apr_bps: int
    max_limit_micro: int
    required_coverage_pct: float


@dataclass
class CoverageAdjustment:
    """APR adjustment applied when coverage reaches coverage_min"""

    coverage_min: float
    adjustment_bps: int


@dataclass
class PricingTable:
    """Four tiers partitioning [0, 100] plus the coverage adjustment rows"""

    tiers: List[PricingTier]
    coverage_adjustments: List[CoverageAdjustment]


@dataclass
class PricingResult:
    """Output of pricing a loan for a score and coverage"""

    tier: TierName
    apr_bps: int
    max_limit_micro: int
    required_coverage_pct: float
    adjustment_bps: int
    final_apr_bps: int


@dataclass
class ApprovalDecision:
    """Outcome of the approval threshold checks"""

    approved: bool
    checks: Dict[str, bool]
    requirements: Dict[str, Any]


# Fraud


@dataclass
class UserInfo:
    """Account view used by the multi-account heuristic"""

    id: str
    wallet: str
    created_at: datetime
    role: UserRole


@dataclass
class EndorsementInfo:
    """A supporter's pledge on a loan"""

    supporter_id: str
    stake_micro: int
    created_at: datetime


@dataclass
class LoanInfo:
    """Loan view used by the fraud detector"""

    id: str
    total_amount_micro: int
    endorsements: List[EndorsementInfo]


@dataclass
class FraudAlert:
    """Typed fraud signal with free-form details"""

    type: AlertType
    severity: Severity
    details: Dict[str, Any]


@dataclass
class ReviewDecision:
    """Whether alerts put the borrower under review"""

    under_review: bool
    block_duration_seconds: int
    reason: str


# Servicing


@dataclass
class Installment:
    """Single payment in a repayment schedule"""

    index: int
    amount_micro: int
    due_at: datetime
    status: InstallmentStatus = InstallmentStatus.OPEN
    paid_at: Optional[datetime] = None


@dataclass
class InstallmentStatusUpdate:
    index: int
    status: InstallmentStatus
    was_updated: bool


@dataclass
class AppliedPayment:
    index: int
    amount_applied_micro: int
    fully_paid: bool


@dataclass
class PaymentResult:
    """Outcome of applying one payment FIFO across open installments"""

    paid_indices: List[int]
    remaining_balance_micro: int
    applied_payments: List[AppliedPayment]
    paid_at: datetime


@dataclass
class OutstandingSummary:
    total_owed_micro: int
    overdue_micro: int
    current_micro: int


# Waterfall


@dataclass
class StakeInfo:
    supporter_id: str
    stake_micro: int


@dataclass
class SupporterCut:
    supporter_id: str
    original_stake_micro: int
    cut_micro: int
    released_micro: int


@dataclass
class WaterfallResult:
    """Loss absorbed by collateral, supporter stakes and the mutual fund"""

    collateral_used_micro: int
    supporter_cuts: List[SupporterCut]
    mutual_fund_used_micro: int
    total_recovered_micro: int


@dataclass
class WaterfallSimulation:
    """Preview of a waterfall with recovery metrics"""

    result: WaterfallResult
    total_loss_micro: int
    recovery_rate: float
    shortfall_micro: int


# Governance


@dataclass
class ParameterChanges:
    """Proposed changes; None means the parameter is left unchanged"""

    pricing_table: Optional[PricingTable] = None
    late_tolerance_seconds: Optional[int] = None
    installment_period_seconds: Optional[int] = None


@dataclass
class ParameterUpdate:
    """Versioned parameter set with delayed activation"""

    version: str
    proposed_by: str
    proposed_at: datetime
    activates_at: datetime
    is_active: bool = False
    pricing_table: Optional[PricingTable] = None
    late_tolerance_seconds: Optional[int] = None
    installment_period_seconds: Optional[int] = None


@dataclass
class ValidationResult:
    valid: bool
    message: str


@dataclass
class GovernanceResult:
    """Structured outcome of a parameter proposal; rejections are not raised"""

    success: bool
    message: str
    new_version: Optional[str] = None
    activates_at: Optional[datetime] = None
    update: Optional[ParameterUpdate] = None


# Audit


@dataclass
class DecisionRecord:
    """Audit log entry the orchestrator persists next to a decision"""

    operation: str
    loan_id: str
    version: str
    inputs: Any
    decision: Any
    decision_hash: str = ""
