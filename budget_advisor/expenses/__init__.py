"""Expense tracking package."""

from budget_advisor.expenses.tracker import (
    budget_insights,
    default_expense_categories,
    expenses_for_month,
    month_progress,
    monthly_comparison,
    spending_by_category,
    summarize_by_category,
)

__all__ = [
    "budget_insights",
    "default_expense_categories",
    "expenses_for_month",
    "month_progress",
    "monthly_comparison",
    "spending_by_category",
    "summarize_by_category",
]
