"""
Budget Allocation Engine

Turns a BudgetSnapshot into a BudgetPlan in a single pass:
1. Subtract fixed costs (needs, minimum debt payments, recurring savings)
2. Compute financial-health ratios and the health score
3. Fund the emergency reserve
4. Pay down debt (avalanche: extra money goes to the highest rate)
5. Fund savings goals by priority
6. Split what is left between general savings and discretionary spending
7. Write warnings and recommendations

DESIGN DECISION: The engine is a pure function. It holds no state, does no
I/O and never mutates its input, so it can be called from a service, a
script or a test. The only time-dependent input is "now", used for months
remaining until each goal; pass it explicitly for reproducible results.

Only `income <= 0` is rejected. Every other odd value flows through the
arithmetic. Negative available cash is NOT clamped; it shows up as negative
allocations and warnings.
"""

from datetime import date, datetime
from typing import Optional, Union

from budget_advisor.engine.calculations import calculate_payoff_months, months_between
from budget_advisor.engine.constants import (
    DEBT_EXTRA_HEAVY_FACTOR,
    DEBT_EXTRA_NORMAL_FACTOR,
    DEBT_SERVICE_LIMIT,
    EMERGENCY_CRITICAL_RATIO,
    EMERGENCY_NORMAL_FACTOR,
    EMERGENCY_URGENT_FACTOR,
    GENERAL_SAVINGS_SHARE,
    HEALTH_COMPONENT_MAX,
    HEALTH_DEBT_PENALTY_SCALE,
    HEALTH_RATIO_SCALE,
    HEALTH_RATIO_TARGET,
    ON_TRACK_TOLERANCE,
)
from budget_advisor.engine.narrative import build_narrative
from budget_advisor.models.budget import (
    BudgetPlan,
    BudgetRatios,
    BudgetSnapshot,
    Debt,
    DebtAllocation,
    GoalAllocation,
    PlanAllocations,
    ValidationIssue,
)
from budget_advisor.validation import check_structure


class AdvisorError(Exception):
    """Base exception for advisor errors."""
    pass


class InvalidSnapshotError(AdvisorError):
    """Snapshot cannot be analysed (e.g., income is not positive)."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues))


def calculate_health_score(
    free_cash_ratio: float,
    debt_service_ratio: float,
    emergency_fund_ratio: float,
    savings_ratio: float,
) -> float:
    """
    Composite 0-100 score from four components worth up to 25 each.
    """
    if free_cash_ratio >= HEALTH_RATIO_TARGET:
        cash = HEALTH_COMPONENT_MAX
    else:
        cash = free_cash_ratio * HEALTH_RATIO_SCALE

    if debt_service_ratio <= DEBT_SERVICE_LIMIT:
        debt = HEALTH_COMPONENT_MAX
    else:
        debt = max(
            0.0,
            HEALTH_COMPONENT_MAX
            - (debt_service_ratio - DEBT_SERVICE_LIMIT) * HEALTH_DEBT_PENALTY_SCALE,
        )

    emergency = emergency_fund_ratio * HEALTH_COMPONENT_MAX

    if savings_ratio >= HEALTH_RATIO_TARGET:
        savings = HEALTH_COMPONENT_MAX
    else:
        savings = savings_ratio * HEALTH_RATIO_SCALE

    return max(0.0, min(100.0, cash + debt + emergency + savings))


def _debt_allocation(debt: Debt, extra_payment: float = 0.0) -> DebtAllocation:
    total_payment = debt.min_payment + extra_payment
    payoff_months = calculate_payoff_months(
        debt.principal, total_payment, debt.annual_rate
    )
    return DebtAllocation(
        id=debt.id,
        name=debt.name,
        min_payment=debt.min_payment,
        extra_payment=extra_payment,
        total_payment=total_payment,
        payoff_months=payoff_months,
        payoff_achievable=payoff_months is not None,
    )


def compute_plan(
    snapshot: BudgetSnapshot,
    now: Optional[Union[date, datetime]] = None,
) -> BudgetPlan:
    """
    Compute the monthly allocation plan for a snapshot.

    Args:
        snapshot: Financial inputs
        now: Reference date for goal deadlines. Defaults to today, read at
             call time.

    Returns:
        A fresh BudgetPlan

    Raises:
        InvalidSnapshotError: If income is not positive. No partial plan is
            produced.
    """
    issues = check_structure(snapshot)
    if issues:
        raise InvalidSnapshotError(issues)

    if now is None:
        now = date.today()

    income = snapshot.income

    # --- Step 1: Fixed costs ---
    total_min_payments = sum(d.min_payment for d in snapshot.debts)
    fixed_expenses = snapshot.needs + total_min_payments
    available = income - fixed_expenses - snapshot.current_savings

    # --- Step 2: Ratios ---
    debt_service_ratio = total_min_payments / income
    free_cash_ratio = available / income
    emergency_target = snapshot.needs * snapshot.emergency_target_months
    if emergency_target > 0:
        emergency_fund_ratio = max(0.0, min(1.0, snapshot.emergency_fund / emergency_target))
    else:
        emergency_fund_ratio = 1.0
    savings_ratio = snapshot.current_savings / income

    # --- Step 3: Health score ---
    health_score = calculate_health_score(
        free_cash_ratio, debt_service_ratio, emergency_fund_ratio, savings_ratio
    )

    # --- Step 4: Emergency fund ---
    emergency_fund_gap = max(0.0, emergency_target - snapshot.emergency_fund)
    emergency_fund_monthly = 0.0
    if emergency_fund_gap > 0 and emergency_fund_ratio < 1:
        if emergency_fund_ratio < EMERGENCY_CRITICAL_RATIO:
            urgency_factor = EMERGENCY_URGENT_FACTOR
        else:
            urgency_factor = EMERGENCY_NORMAL_FACTOR
        # Negative when available is negative
        emergency_fund_monthly = min(emergency_fund_gap, available * urgency_factor)

    # --- Step 5: Debt paydown (avalanche) ---
    debts_by_rate = sorted(snapshot.debts, key=lambda d: d.annual_rate, reverse=True)
    remaining_for_debt = max(0.0, available - emergency_fund_monthly)
    extra_debt_payment = 0.0

    debt_allocations = []
    if debts_by_rate:
        if debt_service_ratio > DEBT_SERVICE_LIMIT:
            extra_factor = DEBT_EXTRA_HEAVY_FACTOR
        else:
            extra_factor = DEBT_EXTRA_NORMAL_FACTOR
        extra_debt_payment = remaining_for_debt * extra_factor

        top, *rest = debts_by_rate
        debt_allocations.append(_debt_allocation(top, extra_debt_payment))
        debt_allocations.extend(_debt_allocation(d) for d in rest)

    # --- Step 6: Savings goals (priority waterfall) ---
    remaining = remaining_for_debt - extra_debt_payment

    goals_by_priority = sorted(
        snapshot.savings_goals, key=lambda g: g.priority, reverse=True
    )
    goal_allocations = []
    for goal in goals_by_priority:
        needed = max(0.0, goal.target_amount - goal.current_amount)
        months_to_target = max(1, months_between(now, goal.target_date))
        required_monthly = needed / months_to_target

        # Every goal gets a shortfall; only the money runs out
        give = min(required_monthly, max(0.0, remaining))
        shortfall = required_monthly - give
        remaining -= give

        goal_allocations.append(GoalAllocation(
            id=goal.id,
            name=goal.name,
            required_monthly=required_monthly,
            allocated_monthly=give,
            shortfall=shortfall,
            on_track=shortfall <= ON_TRACK_TOLERANCE,
        ))

    # --- Step 7: Residual split ---
    general_savings = remaining * GENERAL_SAVINGS_SHARE
    discretionary_spending = max(0.0, remaining - general_savings)

    # --- Step 8: Narrative ---
    ratios = BudgetRatios(
        debt_service_ratio=debt_service_ratio,
        free_cash_ratio=free_cash_ratio,
        emergency_fund_ratio=emergency_fund_ratio,
        savings_ratio=savings_ratio,
        health_score=health_score,
    )
    recommendations, warnings = build_narrative(
        ratios=ratios,
        debt_allocations=debt_allocations,
        goal_allocations=goal_allocations,
        emergency_target=emergency_target,
        currency=snapshot.currency,
    )

    return BudgetPlan(
        available_for_allocation=available,
        ratios=ratios,
        allocations=PlanAllocations(
            debt_allocations=debt_allocations,
            emergency_fund_monthly=emergency_fund_monthly,
            emergency_fund_gap=emergency_fund_gap,
            general_savings=general_savings,
            goal_allocations=goal_allocations,
            discretionary_spending=discretionary_spending,
        ),
        recommendations=recommendations,
        warnings=warnings,
    )
