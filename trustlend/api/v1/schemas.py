"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from trustlend.domain.models import (
    AlertType,
    CoverageAdjustment,
    EndorsementInfo,
    Installment,
    InstallmentStatus,
    LoanInfo,
    LoanState,
    ParameterChanges,
    PricingTable,
    PricingTier,
    ScoreInputs,
    Severity,
    StakeInfo,
    TierName,
    UserInfo,
    UserRole,
)


class DomainModel(BaseModel):
    """Response models are filled straight from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# Shared


class PricingTierSchema(DomainModel):
    name: TierName
    score_min: int = Field(..., ge=0, le=100)
    score_max: int = Field(..., ge=0, le=100)
    apr_bps: int
    max_limit_micro: int = Field(..., ge=0)
    required_coverage_pct: float = Field(..., ge=0, le=100)


class CoverageAdjustmentSchema(DomainModel):
    coverage_min: float = Field(..., ge=0)
    adjustment_bps: int


class PricingTableSchema(DomainModel):
    tiers: List[PricingTierSchema]
    coverage_adjustments: List[CoverageAdjustmentSchema]

    def to_domain(self) -> PricingTable:
        return PricingTable(
            tiers=[PricingTier(**tier.model_dump()) for tier in self.tiers],
            coverage_adjustments=[CoverageAdjustment(**row.model_dump()) for row in self.coverage_adjustments],
        )


class InstallmentSchema(DomainModel):
    index: int = Field(..., ge=0)
    amount_micro: int = Field(..., gt=0)
    due_at: AwareDatetime
    status: InstallmentStatus = InstallmentStatus.OPEN
    paid_at: Optional[AwareDatetime] = None

    def to_domain(self) -> Installment:
        return Installment(**self.model_dump())


# Score


class ScoreInputsSchema(DomainModel):
    base: int = Field(..., ge=0, le=100)
    on_time_payments: int = Field(..., ge=0)
    late_count: int = Field(..., ge=0)
    has_defaulted: bool
    coverage_pct: float = Field(..., ge=0, le=100)
    under_review: bool

    def to_domain(self) -> ScoreInputs:
        return ScoreInputs(**self.model_dump())


class ScoreRequest(BaseModel):
    """Request body for POST /v1/score"""

    loan_id: Optional[str] = None
    inputs: ScoreInputsSchema


class ScoreHistoryRequest(BaseModel):
    """Request body for POST /v1/score/history"""

    loan_id: Optional[str] = None
    base: Optional[int] = Field(None, ge=0, le=100, description="Defaults to the configured base score")
    installment_statuses: List[InstallmentStatus]
    loan_states: List[LoanState]
    coverage_pct: float = Field(..., ge=0, le=100)
    under_review: bool = False


class ScoreResponse(BaseModel):
    score: int
    inputs: ScoreInputsSchema
    decision_hash: str


# Pricing / approval


class PricingRequest(BaseModel):
    """Request body for POST /v1/pricing"""

    loan_id: Optional[str] = None
    score: int = Field(..., ge=0, le=100)
    coverage_pct: float = Field(..., ge=0)
    pricing_table: Optional[PricingTableSchema] = Field(None, description="Defaults to the seed table")


class PricingResultSchema(DomainModel):
    tier: TierName
    apr_bps: int
    max_limit_micro: int
    required_coverage_pct: float
    adjustment_bps: int
    final_apr_bps: int


class PricingResponse(BaseModel):
    pricing: PricingResultSchema
    decision_hash: str


class ApprovalRequest(BaseModel):
    """Request body for POST /v1/approval"""

    loan_id: Optional[str] = None
    score: int = Field(..., ge=0, le=100)
    coverage_pct: float = Field(..., ge=0)
    amount_micro: int = Field(..., gt=0)
    endorsement_count: int = Field(..., ge=0)
    pricing_table: Optional[PricingTableSchema] = None


class ApprovalResponse(BaseModel):
    approved: bool
    checks: Dict[str, bool]
    requirements: Dict[str, Any]
    decision_hash: str


# Fraud


class UserSchema(DomainModel):
    id: str
    wallet: str
    created_at: AwareDatetime
    role: UserRole

    def to_domain(self) -> UserInfo:
        return UserInfo(**self.model_dump())


class EndorsementSchema(DomainModel):
    supporter_id: str
    stake_micro: int = Field(..., gt=0)
    created_at: AwareDatetime

    def to_domain(self) -> EndorsementInfo:
        return EndorsementInfo(**self.model_dump())


class FraudCheckRequest(BaseModel):
    """Request body for POST /v1/fraud/check"""

    loan_id: str
    total_amount_micro: int = Field(..., gt=0)
    endorsements: List[EndorsementSchema]
    users: List[UserSchema]
    approval_time: Optional[AwareDatetime] = None
    now: Optional[AwareDatetime] = None

    def loan_info(self) -> LoanInfo:
        return LoanInfo(
            id=self.loan_id,
            total_amount_micro=self.total_amount_micro,
            endorsements=[e.to_domain() for e in self.endorsements],
        )


class FraudAlertSchema(DomainModel):
    type: AlertType
    severity: Severity
    details: Dict[str, Any]


class ReviewDecisionSchema(DomainModel):
    under_review: bool
    block_duration_seconds: int
    reason: str


class FraudCheckResponse(BaseModel):
    alerts: List[FraudAlertSchema]
    risk_score: int
    review: ReviewDecisionSchema
    decision_hash: str


# Servicing


class ScheduleRequest(BaseModel):
    """Request body for POST /v1/installments/schedule"""

    loan_id: Optional[str] = None
    principal_micro: int = Field(..., gt=0)
    apr_bps: int = Field(..., ge=0, le=10_000)
    term_days: int = Field(..., gt=0, le=365)
    num_installments: int = Field(..., gt=0)
    interval_seconds: Optional[int] = Field(None, gt=0, description="Defaults to the configured interval")
    start_date: Optional[AwareDatetime] = None


class ScheduleResponse(BaseModel):
    installments: List[InstallmentSchema]
    total_micro: int
    decision_hash: str


class StatusRequest(BaseModel):
    """Request body for POST /v1/installments/status"""

    loan_id: Optional[str] = None
    installments: List[InstallmentSchema]
    now: Optional[AwareDatetime] = None
    tolerance_seconds: Optional[int] = Field(None, ge=0, description="Defaults to the configured tolerance")


class StatusUpdateSchema(DomainModel):
    index: int
    status: InstallmentStatus
    was_updated: bool


class StatusResponse(BaseModel):
    updates: List[StatusUpdateSchema]
    decision_hash: str


class PaymentRequest(BaseModel):
    """Request body for POST /v1/installments/payment"""

    loan_id: Optional[str] = None
    installments: List[InstallmentSchema]
    payment_micro: int = Field(..., gt=0)
    now: Optional[AwareDatetime] = None


class AppliedPaymentSchema(DomainModel):
    index: int
    amount_applied_micro: int
    fully_paid: bool


class PaymentResponse(BaseModel):
    paid_indices: List[int]
    remaining_balance_micro: int
    applied_payments: List[AppliedPaymentSchema]
    paid_at: datetime
    decision_hash: str


# Waterfall


class StakeSchema(DomainModel):
    supporter_id: str
    stake_micro: int = Field(..., ge=0)

    def to_domain(self) -> StakeInfo:
        return StakeInfo(**self.model_dump())


class WaterfallRequest(BaseModel):
    """Request body for POST /v1/waterfall"""

    loan_id: Optional[str] = None
    total_loss_micro: int = Field(..., ge=0)
    borrower_collateral_micro: int = Field(0, ge=0)
    stakes: List[StakeSchema]
    mutual_fund_available_micro: Optional[int] = Field(None, ge=0)


class SimulationRequest(BaseModel):
    """Request body for POST /v1/waterfall/simulate"""

    loan_id: Optional[str] = None
    outstanding_balance_micro: int = Field(..., ge=0)
    expected_recovery_micro: int = Field(0, ge=0)
    borrower_collateral_micro: int = Field(0, ge=0)
    stakes: List[StakeSchema]
    mutual_fund_available_micro: Optional[int] = Field(None, ge=0)


class SupporterCutSchema(DomainModel):
    supporter_id: str
    original_stake_micro: int
    cut_micro: int
    released_micro: int


class WaterfallResultSchema(DomainModel):
    collateral_used_micro: int
    supporter_cuts: List[SupporterCutSchema]
    mutual_fund_used_micro: int
    total_recovered_micro: int


class WaterfallResponse(BaseModel):
    result: WaterfallResultSchema
    shortfall_micro: int
    decision_hash: str


class SimulationResponse(BaseModel):
    result: WaterfallResultSchema
    total_loss_micro: int
    recovery_rate: float
    shortfall_micro: int
    decision_hash: str


# Governance


class ProposalRequest(BaseModel):
    """Request body for POST /v1/parameters/proposals"""

    current_version: Optional[str] = Field(None, description="Defaults to the configured active version")
    proposer_id: str = Field(..., min_length=1)
    proposer_role: UserRole
    pricing_table: Optional[PricingTableSchema] = None
    late_tolerance_seconds: Optional[int] = None
    installment_period_seconds: Optional[int] = None
    now: Optional[AwareDatetime] = None

    def changes(self) -> ParameterChanges:
        return ParameterChanges(
            pricing_table=self.pricing_table.to_domain() if self.pricing_table else None,
            late_tolerance_seconds=self.late_tolerance_seconds,
            installment_period_seconds=self.installment_period_seconds,
        )


class ProposalResponse(BaseModel):
    success: bool
    message: str
    new_version: Optional[str] = None
    activates_at: Optional[datetime] = None
    decision_hash: Optional[str] = None
