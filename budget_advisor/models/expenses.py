"""
Expense Tracking Models

Expenses are individual purchases tagged with a category. Categories carry
an optional monthly budget used by the budget insights.
"""

from datetime import date
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class InsightType(str, Enum):
    """Kind of budget insight shown to the user."""
    OVER_BUDGET = "over_budget"
    NEAR_LIMIT = "near_limit"
    FAST_PACE = "fast_pace"
    SAVING_AHEAD = "saving_ahead"
    BALANCED = "balanced"


class ExpenseCategory(BaseModel):
    """A spending category."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Unique category identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    color: str = Field(
        default="#4B5563",
        pattern="^#[0-9A-Fa-f]{3,6}$",
        description="Chart color as a hex string"
    )
    icon: str = Field(
        default="📊",
        max_length=8,
    )
    budget: float = Field(
        default=0.0,
        ge=0,
        description="Monthly budget for this category (0 = no budget)"
    )


class Expense(BaseModel):
    """A single expense."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Unique expense identifier"
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    description: str = Field(
        default="",
        max_length=500,
    )
    category_id: str = Field(
        ...,
        description="ID of the ExpenseCategory this expense belongs to"
    )
    expense_date: date = Field(
        default_factory=date.today,
        description="Day the expense happened"
    )


class CategorySummary(BaseModel):
    """Spending total for one category."""
    model_config = ConfigDict(frozen=True)

    category_id: str
    name: str
    total: float
    percentage: float = Field(
        ...,
        description="Share of total spending, rounded to 0.1"
    )


class MonthlyComparison(BaseModel):
    """Current month spending against the previous month."""
    model_config = ConfigDict(frozen=True)

    current_total: float
    previous_total: float
    percent_diff: int = Field(
        ...,
        description="Change versus previous month in whole percent (0 if no previous spending)"
    )
    direction: str = Field(
        ...,
        pattern="^(up|down)$",
    )


class BudgetInsight(BaseModel):
    """A single human-readable observation about the month's budget."""
    model_config = ConfigDict(frozen=True)

    insight_type: InsightType
    text: str
