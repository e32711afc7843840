"""
Expense tracking and budget insights.

Functions here work on plain lists of Expense and ExpenseCategory models;
loading and saving them is left to the caller.
"""

import calendar
import math
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from budget_advisor.config import get_settings
from budget_advisor.models.expenses import (
    BudgetInsight,
    CategorySummary,
    Expense,
    ExpenseCategory,
    InsightType,
    MonthlyComparison,
)

# Insights list at most this many category names before adding "and more"
MAX_NAMED_CATEGORIES = 3


def default_expense_categories() -> list[ExpenseCategory]:
    """The starter set of spending categories."""
    return [
        ExpenseCategory(id="1", name="Food", color="#FF6384", icon="🍔"),
        ExpenseCategory(id="2", name="Housing", color="#36A2EB", icon="🏠"),
        ExpenseCategory(id="3", name="Transport", color="#FFCE56", icon="🚗"),
        ExpenseCategory(id="4", name="Utilities", color="#4BC0C0", icon="💡"),
        ExpenseCategory(id="5", name="Entertainment", color="#9966FF", icon="🎬"),
        ExpenseCategory(id="6", name="Health", color="#FF6B6B", icon="💊"),
        ExpenseCategory(id="7", name="Clothing", color="#4B5563", icon="👕"),
    ]


def expenses_for_month(
    expenses: Iterable[Expense],
    year: int,
    month: int,
) -> list[Expense]:
    """Expenses dated within the given calendar month."""
    return [
        e for e in expenses
        if e.expense_date.year == year and e.expense_date.month == month
    ]


def spending_by_category(expenses: Iterable[Expense]) -> dict[str, float]:
    """Total spent per category ID."""
    totals: dict[str, float] = defaultdict(float)
    for expense in expenses:
        totals[expense.category_id] += expense.amount
    return dict(totals)


def summarize_by_category(
    categories: list[ExpenseCategory],
    expenses: list[Expense],
) -> list[CategorySummary]:
    """
    Per-category totals and their share of all spending.

    Every category appears, in the given order, even with no spending.
    Expenses in unknown categories count toward the overall total only.
    """
    total = sum(e.amount for e in expenses)
    totals = spending_by_category(expenses)

    summaries = []
    for category in categories:
        amount = totals.get(category.id, 0.0)
        percentage = round(amount / total * 100, 1) if total else 0.0
        summaries.append(CategorySummary(
            category_id=category.id,
            name=category.name,
            total=amount,
            percentage=percentage,
        ))
    return summaries


def _previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def monthly_comparison(
    expenses: list[Expense],
    today: Optional[date] = None,
) -> MonthlyComparison:
    """
    Compare this month's spending with last month's.

    The percentage change is rounded half up to a whole number and is 0
    when there was no spending last month.
    """
    today = today or date.today()
    prev_year, prev_month = _previous_month(today.year, today.month)

    current_total = sum(e.amount for e in expenses_for_month(expenses, today.year, today.month))
    previous_total = sum(e.amount for e in expenses_for_month(expenses, prev_year, prev_month))

    if previous_total > 0:
        percent_diff = math.floor((current_total - previous_total) / previous_total * 100 + 0.5)
    else:
        percent_diff = 0

    return MonthlyComparison(
        current_total=current_total,
        previous_total=previous_total,
        percent_diff=percent_diff,
        direction="up" if percent_diff > 0 else "down",
    )


def month_progress(today: date) -> int:
    """Whole percent of the current month that has elapsed."""
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    return math.floor(today.day / days_in_month * 100)


def _category_count_text(count: int) -> str:
    return "1 category" if count == 1 else f"{count} categories"


def _named_list(categories: list[ExpenseCategory]) -> str:
    names = ", ".join(c.name for c in categories[:MAX_NAMED_CATEGORIES])
    if len(categories) > MAX_NAMED_CATEGORIES:
        names += " and more"
    return names


def budget_insights(
    categories: list[ExpenseCategory],
    expenses: list[Expense],
    today: Optional[date] = None,
) -> list[BudgetInsight]:
    """
    Observations about this month's spending against category budgets.

    Order: over-budget categories, categories near their limit, then the
    spending pace. When nothing stands out a single "balanced" insight is
    returned. No insights are produced when no budget is set.

    A category without a budget (0) counts as over budget once anything is
    spent in it.
    """
    today = today or date.today()
    total_budget = sum(c.budget for c in categories)
    if total_budget <= 0:
        return []

    threshold = get_settings().advisor.near_limit_threshold
    spent = spending_by_category(expenses_for_month(expenses, today.year, today.month))
    total_spent = sum(spent.get(c.id, 0.0) for c in categories)

    over_budget = [c for c in categories if spent.get(c.id, 0.0) > c.budget]
    near_limit = [
        c for c in categories
        if c.budget * threshold <= spent.get(c.id, 0.0) < c.budget
    ]

    insights = []
    if over_budget:
        insights.append(BudgetInsight(
            insight_type=InsightType.OVER_BUDGET,
            text=(
                f"{_category_count_text(len(over_budget))} over budget: "
                f"{_named_list(over_budget)}"
            ),
        ))
    if near_limit:
        insights.append(BudgetInsight(
            insight_type=InsightType.NEAR_LIMIT,
            text=(
                f"{_category_count_text(len(near_limit))} close to the budget limit: "
                f"{_named_list(near_limit)}"
            ),
        ))

    progress = month_progress(today)
    spending_ratio = total_spent / total_budget
    if progress < 50 and spending_ratio > 0.6:
        insights.append(BudgetInsight(
            insight_type=InsightType.FAST_PACE,
            text="Your spending pace is high for this early in the month",
        ))
    elif progress > 80 and spending_ratio < 0.7:
        insights.append(BudgetInsight(
            insight_type=InsightType.SAVING_AHEAD,
            text="You are spending less than expected this month. Well done!",
        ))

    if not insights:
        insights.append(BudgetInsight(
            insight_type=InsightType.BALANCED,
            text="Your budget is balanced this month",
        ))

    return insights
