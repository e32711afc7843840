"""
Tests for expense tracking and budget insights.
"""

import pytest
from datetime import date

from budget_advisor.expenses import (
    budget_insights,
    default_expense_categories,
    expenses_for_month,
    month_progress,
    monthly_comparison,
    spending_by_category,
    summarize_by_category,
)
from budget_advisor.models.expenses import Expense, ExpenseCategory, InsightType


def spend(amount, category_id="food", day=date(2025, 1, 5)):
    return Expense(amount=amount, category_id=category_id, expense_date=day)


@pytest.fixture
def categories():
    return [
        ExpenseCategory(id="food", name="Food", budget=100),
        ExpenseCategory(id="rent", name="Rent", budget=1000),
        ExpenseCategory(id="fun", name="Fun", budget=0),
    ]


class TestDefaults:
    """Tests for the starter categories."""

    def test_default_categories(self):
        categories = default_expense_categories()
        assert [c.id for c in categories] == ["1", "2", "3", "4", "5", "6", "7"]
        assert categories[0].name == "Food"
        assert all(c.budget == 0 for c in categories)


class TestTotals:
    """Tests for grouping and summing."""

    def test_expenses_for_month(self):
        expenses = [
            spend(10, day=date(2025, 1, 1)),
            spend(20, day=date(2025, 1, 31)),
            spend(30, day=date(2025, 2, 1)),
            spend(40, day=date(2024, 1, 15)),
        ]
        assert [e.amount for e in expenses_for_month(expenses, 2025, 1)] == [10, 20]

    def test_spending_by_category(self):
        expenses = [spend(10), spend(5.5), spend(20, "rent")]
        assert spending_by_category(expenses) == {"food": 15.5, "rent": 20}

    def test_summary_shares(self, categories):
        expenses = [spend(25), spend(75, "rent")]
        summaries = summarize_by_category(categories, expenses)

        assert [s.category_id for s in summaries] == ["food", "rent", "fun"]
        assert [s.total for s in summaries] == [25, 75, 0]
        assert [s.percentage for s in summaries] == [25.0, 75.0, 0.0]

    def test_summary_without_spending(self, categories):
        summaries = summarize_by_category(categories, [])
        assert all(s.percentage == 0 for s in summaries)

    def test_unknown_category_counts_toward_total(self, categories):
        summaries = summarize_by_category(categories, [spend(50), spend(50, "gone")])
        assert summaries[0].percentage == 50.0


class TestMonthlyComparison:
    """Tests for month-over-month comparison."""

    def test_spending_up(self):
        expenses = [
            spend(150, day=date(2025, 3, 2)),
            spend(100, day=date(2025, 2, 10)),
        ]
        comparison = monthly_comparison(expenses, today=date(2025, 3, 20))

        assert comparison.current_total == 150
        assert comparison.previous_total == 100
        assert comparison.percent_diff == 50
        assert comparison.direction == "up"

    def test_spending_down(self):
        expenses = [
            spend(60, day=date(2025, 3, 2)),
            spend(100, day=date(2025, 2, 10)),
        ]
        comparison = monthly_comparison(expenses, today=date(2025, 3, 20))
        assert comparison.percent_diff == -40
        assert comparison.direction == "down"

    def test_january_compares_with_december(self):
        expenses = [
            spend(110, day=date(2025, 1, 3)),
            spend(100, day=date(2024, 12, 28)),
        ]
        comparison = monthly_comparison(expenses, today=date(2025, 1, 10))
        assert comparison.previous_total == 100
        assert comparison.percent_diff == 10

    def test_half_rounds_up(self):
        expenses = [
            spend(100.5, day=date(2025, 3, 2)),
            spend(200, day=date(2025, 2, 10)),
        ]
        # -49.75 rounds to -50
        assert monthly_comparison(expenses, today=date(2025, 3, 5)).percent_diff == -50

    def test_no_previous_spending(self):
        comparison = monthly_comparison([spend(80, day=date(2025, 3, 2))], today=date(2025, 3, 5))
        assert comparison.percent_diff == 0
        assert comparison.direction == "down"


class TestMonthProgress:
    """Tests for elapsed-month percentage."""

    @pytest.mark.parametrize("today,expected", [
        (date(2025, 1, 10), 32),
        (date(2025, 1, 20), 64),
        (date(2025, 1, 31), 100),
        (date(2024, 2, 29), 100),
        (date(2025, 2, 14), 50),
    ])
    def test_progress(self, today, expected):
        assert month_progress(today) == expected


class TestBudgetInsights:
    """Tests for budget insights."""

    def test_no_budget_no_insights(self):
        categories = [ExpenseCategory(id="food", name="Food")]
        assert budget_insights(categories, [spend(500)], today=date(2025, 1, 10)) == []

    def test_over_budget(self, categories):
        insights = budget_insights(categories, [spend(120)], today=date(2025, 1, 20))

        assert insights[0].insight_type == InsightType.OVER_BUDGET
        assert insights[0].text == "1 category over budget: Food"

    def test_near_limit(self, categories):
        expenses = [spend(85), spend(800, "rent")]
        insights = budget_insights(categories, expenses, today=date(2025, 1, 31))

        assert insights[0].insight_type == InsightType.NEAR_LIMIT
        assert insights[0].text == "2 categories close to the budget limit: Food, Rent"

    def test_spent_exactly_budget_is_neither(self, categories):
        insights = budget_insights(categories, [spend(100)], today=date(2025, 1, 20))
        assert [i.insight_type for i in insights] == [InsightType.BALANCED]

    def test_spending_without_budget_is_over_budget(self, categories):
        expenses = [spend(50), spend(80, "fun")]
        insights = budget_insights(categories, expenses, today=date(2025, 1, 20))

        assert insights[0].insight_type == InsightType.OVER_BUDGET
        assert insights[0].text == "1 category over budget: Fun"

    def test_many_categories_truncated(self):
        categories = [
            ExpenseCategory(id=str(i), name=f"Cat {i}", budget=10) for i in range(1, 6)
        ]
        expenses = [spend(20, str(i), day=date(2025, 1, 20)) for i in range(1, 6)]
        insights = budget_insights(categories, expenses, today=date(2025, 1, 20))

        assert insights[0].text == "5 categories over budget: Cat 1, Cat 2, Cat 3 and more"

    def test_fast_pace(self, categories):
        # 700 of 1100 spent a third of the way into the month
        expenses = [spend(700, "rent")]
        insights = budget_insights(categories, expenses, today=date(2025, 1, 10))
        assert [i.insight_type for i in insights] == [InsightType.FAST_PACE]

    def test_saving_ahead(self, categories):
        expenses = [spend(300, "rent", day=date(2025, 1, 20))]
        insights = budget_insights(categories, expenses, today=date(2025, 1, 28))
        assert [i.insight_type for i in insights] == [InsightType.SAVING_AHEAD]

    def test_balanced(self, categories):
        expenses = [spend(400, "rent", day=date(2025, 1, 12))]
        insights = budget_insights(categories, expenses, today=date(2025, 1, 15))

        assert len(insights) == 1
        assert insights[0].insight_type == InsightType.BALANCED
        assert insights[0].text == "Your budget is balanced this month"

    def test_other_months_ignored(self, categories):
        expenses = [spend(5000, day=date(2024, 12, 20))]
        insights = budget_insights(categories, expenses, today=date(2025, 1, 15))
        assert [i.insight_type for i in insights] == [InsightType.BALANCED]

    def test_threshold_from_settings(self, categories, monkeypatch):
        monkeypatch.setenv("ADVISOR_NEAR_LIMIT_THRESHOLD", "0.5")
        insights = budget_insights(categories, [spend(55)], today=date(2025, 1, 15))
        assert insights[0].insight_type == InsightType.NEAR_LIMIT


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
