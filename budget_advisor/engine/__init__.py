"""Budget allocation engine package."""

from budget_advisor.engine.allocation import (
    AdvisorError,
    InvalidSnapshotError,
    calculate_health_score,
    compute_plan,
)
from budget_advisor.engine.calculations import (
    calculate_payoff_months,
    format_currency,
    format_percent,
    months_between,
)
from budget_advisor.engine.narrative import build_narrative

__all__ = [
    "AdvisorError",
    "InvalidSnapshotError",
    "build_narrative",
    "calculate_health_score",
    "calculate_payoff_months",
    "compute_plan",
    "format_currency",
    "format_percent",
    "months_between",
]
