"""
Core Data Models for the Budget Advisor

These models define the schemas for everything flowing into and out of
the allocation engine:
1. BudgetSnapshot - one complete, timestamped set of financial inputs
2. BudgetPlan - the allocation plan computed from a snapshot
3. ValidationResult - issues found while checking a snapshot

DESIGN DECISION: Input models are permissive. Only `income > 0` blocks a
computation; every other out-of-range value is accepted and reported as a
semantic warning by the validator, so the arithmetic can degrade gracefully.

Output models are frozen. A plan is computed fresh for every snapshot and
is never mutated afterwards.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# INPUT MODELS
# =============================================================================

class Debt(BaseModel):
    """
    A single debt that needs a monthly payment.

    Well-formed debts have principal >= 0, annual_rate >= 0,
    term_months >= 1 and min_payment > 0.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        description="Unique debt identifier"
    )
    name: str = Field(
        ...,
        max_length=200,
        description="Display name (e.g., 'Credit card')"
    )
    principal: float = Field(
        ...,
        description="Outstanding balance"
    )
    annual_rate: float = Field(
        ...,
        description="Annual interest rate as a fraction (0.18 = 18%)"
    )
    term_months: int = Field(
        default=12,
        description="Original loan term in months"
    )
    min_payment: float = Field(
        ...,
        description="Minimum monthly payment"
    )


class SavingsGoal(BaseModel):
    """
    A savings target with a deadline.

    Priority runs from 1 (lowest) to 5 (highest). Higher priority goals are
    funded first.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        description="Unique goal identifier"
    )
    name: str = Field(
        ...,
        max_length=200,
        description="Display name (e.g., 'Vacation')"
    )
    target_amount: float = Field(
        ...,
        description="Amount to reach"
    )
    current_amount: float = Field(
        default=0.0,
        description="Amount already saved toward the goal"
    )
    target_date: date = Field(
        ...,
        description="Date by which the target should be reached"
    )
    priority: int = Field(
        default=3,
        description="Priority from 1 (lowest) to 5 (highest)"
    )


class BudgetSnapshot(BaseModel):
    """
    One complete set of financial inputs submitted for analysis.

    All amounts are monthly except the balances (emergency_fund, debt
    principals, goal amounts). The currency is a display symbol and never
    takes part in arithmetic.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    # Identity
    snapshot_id: UUID = Field(
        default_factory=uuid4,
        description="Unique snapshot identifier"
    )
    submitted_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the snapshot was submitted"
    )

    # Cash flow
    income: float = Field(
        ...,
        description="Net monthly income (must be positive)"
    )
    needs: float = Field(
        default=0.0,
        description="Fixed monthly expenses (rent, utilities, food)"
    )
    wants: float = Field(
        default=0.0,
        description="Discretionary monthly spending"
    )
    current_savings: float = Field(
        default=0.0,
        description="Amount already routed to recurring savings each month"
    )

    # Balances
    debts: list[Debt] = Field(default_factory=list)
    emergency_fund: float = Field(
        default=0.0,
        description="Current emergency savings balance"
    )
    emergency_target_months: float = Field(
        default=3.0,
        description="Months of needs the emergency fund should cover"
    )
    savings_goals: list[SavingsGoal] = Field(default_factory=list)

    # Presentation
    currency: str = Field(
        default="$",
        max_length=10,
        description="Display currency symbol"
    )


# =============================================================================
# OUTPUT MODELS
# =============================================================================

class DebtAllocation(BaseModel):
    """
    Monthly payment plan for one debt.

    When the payment never covers the monthly interest the debt cannot be
    paid off: payoff_achievable is False and payoff_months is None.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    min_payment: float
    extra_payment: float = 0.0
    total_payment: float
    payoff_months: Optional[int] = None
    payoff_achievable: bool = True


class GoalAllocation(BaseModel):
    """Monthly contribution toward one savings goal."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    required_monthly: float = Field(
        ...,
        description="Monthly amount needed to hit the target on time"
    )
    allocated_monthly: float = Field(
        ...,
        description="Monthly amount actually assigned"
    )
    shortfall: float
    on_track: bool


class BudgetRatios(BaseModel):
    """Financial-health ratios derived from a snapshot."""
    model_config = ConfigDict(frozen=True)

    debt_service_ratio: float
    free_cash_ratio: float
    emergency_fund_ratio: float = Field(..., ge=0.0, le=1.0)
    savings_ratio: float
    health_score: float = Field(..., ge=0.0, le=100.0)


class PlanAllocations(BaseModel):
    """Where the available cash goes."""
    model_config = ConfigDict(frozen=True)

    debt_allocations: list[DebtAllocation] = Field(default_factory=list)
    emergency_fund_monthly: float
    emergency_fund_gap: float
    general_savings: float
    goal_allocations: list[GoalAllocation] = Field(default_factory=list)
    discretionary_spending: float


class BudgetPlan(BaseModel):
    """
    The allocation plan for one snapshot.

    available_for_allocation may be negative, which signals overspending.
    """
    model_config = ConfigDict(frozen=True)

    available_for_allocation: float
    ratios: BudgetRatios
    allocations: PlanAllocations
    recommendations: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def total_extra_debt_payment(self) -> float:
        """Sum of extra payments on top of the minimums."""
        return sum(d.extra_payment for d in self.allocations.debt_allocations)

    @property
    def total_goal_allocation(self) -> float:
        """Sum of monthly goal contributions."""
        return sum(g.allocated_monthly for g in self.allocations.goal_allocations)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_value', 'inconsistent', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage snapshot validation.

    Stage 1: Structural validation (blocks computation)
    Stage 2: Semantic validation (warnings only)
    """

    snapshot_id: UUID = Field(
        ...,
        description="ID of the snapshot being validated"
    )
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    # Stage results
    structural_valid: bool = Field(
        ...,
        description="Did structural validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )

    # Overall result
    is_valid: bool = Field(
        ...,
        description="Can a plan be computed from this snapshot?"
    )

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    # Warnings don't block but should be shown
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
