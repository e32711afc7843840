"""
Allocation Ledger Operations

Moves money between the pool of available funds and investment categories.

GUARANTEES:
- Money is never created or destroyed by a move: available funds plus the
  total held in categories stays the same across allocate, withdraw and
  remove_category
- A category can never go below zero
- Percentages always reflect the current amounts

Every operation returns a NEW ledger; the input ledger is left untouched.
"""

from typing import Optional

from budget_advisor.config import get_settings
from budget_advisor.models.ledger import (
    AllocationCategory,
    AllocationLedger,
    FundsDirection,
)


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class CategoryNotFoundError(LedgerError):
    """No category with the given ID exists in the ledger."""

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(f"Category not found: {category_id}")


class InsufficientFundsError(LedgerError):
    """Tried to allocate more than the available funds."""

    def __init__(self, requested: float, available: float):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough available funds: requested {requested:,.2f}, "
            f"available {available:,.2f}"
        )


class CategoryBalanceError(LedgerError):
    """Tried to withdraw more than a category holds."""

    def __init__(self, category_name: str, requested: float, balance: float):
        self.category_name = category_name
        self.requested = requested
        self.balance = balance
        super().__init__(
            f"Cannot withdraw {requested:,.2f} from {category_name}: "
            f"it only holds {balance:,.2f}"
        )


def recalculate_percentages(
    categories: list[AllocationCategory],
) -> list[AllocationCategory]:
    """
    Recompute each category's share of the total, rounded to 0.1%.

    When nothing is allocated every share is 0.
    """
    total = sum(c.amount for c in categories)
    if total <= 0:
        return [c.model_copy(update={"percentage": 0.0}) for c in categories]
    return [
        c.model_copy(update={"percentage": round(c.amount / total * 100, 1)})
        for c in categories
    ]


def create_ledger(
    available_funds: float = 0.0,
    seed_defaults: Optional[bool] = None,
) -> AllocationLedger:
    """
    Create a new ledger.

    Args:
        available_funds: Starting pool of unallocated money
        seed_defaults: Whether to add the default investment categories.
                       If None, the configured setting is used.
    """
    settings = get_settings().ledger
    if seed_defaults is None:
        seed_defaults = settings.seed_default_categories

    categories = []
    if seed_defaults:
        categories = [
            AllocationCategory(id=str(index), name=name)
            for index, name in enumerate(settings.default_categories_list, start=1)
        ]

    return AllocationLedger(available_funds=available_funds, categories=categories)


def _require_category(ledger: AllocationLedger, category_id: str) -> AllocationCategory:
    category = ledger.get_category(category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    return category


def _require_positive(amount: float) -> None:
    if amount <= 0:
        raise LedgerError(f"Amount must be positive, got {amount}")


def update_funds(ledger: AllocationLedger, delta: float) -> AllocationLedger:
    """Add income to (or take it out of) the available pool."""
    if not delta:
        return ledger
    return ledger.model_copy(update={"available_funds": ledger.available_funds + delta})


def add_category(ledger: AllocationLedger, name: str) -> AllocationLedger:
    """Add an empty category."""
    name = name.strip()
    if not name:
        raise LedgerError("Category name cannot be empty")

    categories = [*ledger.categories, AllocationCategory(name=name)]
    return ledger.model_copy(update={"categories": recalculate_percentages(categories)})


def remove_category(ledger: AllocationLedger, category_id: str) -> AllocationLedger:
    """Remove a category, returning its money to the available pool."""
    category = _require_category(ledger, category_id)

    categories = [c for c in ledger.categories if c.id != category_id]
    return ledger.model_copy(update={
        "available_funds": ledger.available_funds + category.amount,
        "categories": recalculate_percentages(categories),
    })


def allocate(
    ledger: AllocationLedger,
    category_id: str,
    amount: float,
) -> AllocationLedger:
    """Move money from the available pool into a category."""
    _require_positive(amount)
    _require_category(ledger, category_id)
    if amount > ledger.available_funds:
        raise InsufficientFundsError(amount, ledger.available_funds)

    return _apply_change(ledger, category_id, amount)


def withdraw(
    ledger: AllocationLedger,
    category_id: str,
    amount: float,
) -> AllocationLedger:
    """Move money from a category back into the available pool."""
    _require_positive(amount)
    category = _require_category(ledger, category_id)
    if amount > category.amount:
        raise CategoryBalanceError(category.name, amount, category.amount)

    return _apply_change(ledger, category_id, -amount)


def move_funds(
    ledger: AllocationLedger,
    category_id: str,
    amount: float,
    direction: FundsDirection,
) -> AllocationLedger:
    """Allocate or withdraw depending on direction."""
    if direction == FundsDirection.ALLOCATE:
        return allocate(ledger, category_id, amount)
    return withdraw(ledger, category_id, amount)


def _apply_change(
    ledger: AllocationLedger,
    category_id: str,
    change: float,
) -> AllocationLedger:
    categories = [
        c.model_copy(update={"amount": c.amount + change}) if c.id == category_id else c
        for c in ledger.categories
    ]
    return ledger.model_copy(update={
        "available_funds": ledger.available_funds - change,
        "categories": recalculate_percentages(categories),
    })


def sorted_by_percentage(ledger: AllocationLedger) -> list[AllocationCategory]:
    """Categories ordered from largest to smallest share."""
    return sorted(ledger.categories, key=lambda c: c.percentage, reverse=True)
