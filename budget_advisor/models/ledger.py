"""
Allocation Ledger Models

A ledger is a pool of unallocated funds plus a set of investment
categories (index funds, crypto, money market...) holding part of the money.

DESIGN DECISION: Ledger state is immutable. Every operation returns a new
ledger, so a caller can keep the previous state for undo or auditing.
"""

from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class FundsDirection(str, Enum):
    """Direction of a fund movement between the pool and a category."""
    ALLOCATE = "allocate"  # pool -> category
    WITHDRAW = "withdraw"  # category -> pool


class AllocationCategory(BaseModel):
    """A single investment category in the ledger."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Unique category identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name (e.g., 'S&P 500')"
    )
    amount: float = Field(
        default=0.0,
        ge=0,
        description="Money currently held in this category"
    )
    percentage: float = Field(
        default=0.0,
        ge=0,
        le=100,
        description="Share of the total allocated amount, rounded to 0.1"
    )


class AllocationLedger(BaseModel):
    """Available funds plus the categories they can be moved into."""
    model_config = ConfigDict(frozen=True)

    available_funds: float = Field(
        default=0.0,
        description="Money not yet assigned to any category"
    )
    categories: list[AllocationCategory] = Field(default_factory=list)

    @property
    def total_amount(self) -> float:
        """Total money held across all categories."""
        return sum(c.amount for c in self.categories)

    @property
    def net_worth(self) -> float:
        """Available funds plus everything allocated."""
        return self.available_funds + self.total_amount

    def get_category(self, category_id: str) -> Optional[AllocationCategory]:
        """Find a category by ID."""
        for category in self.categories:
            if category.id == category_id:
                return category
        return None
