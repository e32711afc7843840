"""
Warnings and recommendations for a computed plan.

The output order is fixed: debt, emergency fund, goals, cash flow, savings.
Renderers show both lists verbatim.
"""

from budget_advisor.engine.calculations import format_currency, format_percent
from budget_advisor.engine.constants import (
    DEBT_SERVICE_LIMIT,
    EMERGENCY_LOW_RATIO,
    LOOSE_CASH_RATIO,
    MIN_SAVINGS_RATIO,
    TIGHT_CASH_RATIO,
)
from budget_advisor.models.budget import (
    BudgetRatios,
    DebtAllocation,
    GoalAllocation,
)


def build_narrative(
    ratios: BudgetRatios,
    debt_allocations: list[DebtAllocation],
    goal_allocations: list[GoalAllocation],
    emergency_target: float,
    currency: str,
) -> tuple[list[str], list[str]]:
    """
    Build the recommendation and warning lists.

    Args:
        ratios: Ratios of the plan
        debt_allocations: Debt plan in avalanche order (highest rate first)
        goal_allocations: Goal plan in priority order
        emergency_target: Target emergency balance
        currency: Display currency symbol

    Returns:
        (recommendations, warnings)
    """
    recommendations: list[str] = []
    warnings: list[str] = []

    if ratios.debt_service_ratio > DEBT_SERVICE_LIMIT:
        warnings.append(
            f"High debt ratio ({format_percent(ratios.debt_service_ratio)}). "
            f"Consider consolidation or boosting income."
        )

    for debt in debt_allocations:
        if not debt.payoff_achievable:
            warnings.append(
                f'"{debt.name}" cannot be paid off at '
                f'{format_currency(debt.total_payment, currency)} a month; '
                f'the payment does not cover the interest.'
            )

    if debt_allocations:
        recommendations.append(f'Focus extra payment on "{debt_allocations[0].name}".')

    if ratios.emergency_fund_ratio < EMERGENCY_LOW_RATIO:
        warnings.append(
            f"Emergency fund critically low ({format_percent(ratios.emergency_fund_ratio)})."
        )
    elif ratios.emergency_fund_ratio < 1:
        recommendations.append(
            f"Continue building emergency fund toward "
            f"{format_currency(emergency_target, currency)}."
        )

    for goal in goal_allocations:
        if not goal.on_track:
            shortfall_ratio = goal.shortfall / goal.required_monthly
            warnings.append(
                f'"{goal.name}" underfunded by {format_percent(shortfall_ratio, 0)}.'
            )

    if ratios.free_cash_ratio < TIGHT_CASH_RATIO:
        warnings.append("Very tight budget.")
    elif ratios.free_cash_ratio > LOOSE_CASH_RATIO:
        recommendations.append("Good cash flow; consider more investments.")

    if ratios.savings_ratio < MIN_SAVINGS_RATIO:
        recommendations.append("Aim to save at least 10% of income.")

    return recommendations, warnings
