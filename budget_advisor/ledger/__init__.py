"""Allocation ledger package."""

from budget_advisor.ledger.operations import (
    CategoryBalanceError,
    CategoryNotFoundError,
    InsufficientFundsError,
    LedgerError,
    add_category,
    allocate,
    create_ledger,
    move_funds,
    recalculate_percentages,
    remove_category,
    sorted_by_percentage,
    update_funds,
    withdraw,
)

__all__ = [
    # Exceptions
    "CategoryBalanceError",
    "CategoryNotFoundError",
    "InsufficientFundsError",
    "LedgerError",
    # Operations
    "add_category",
    "allocate",
    "create_ledger",
    "move_funds",
    "recalculate_percentages",
    "remove_category",
    "sorted_by_percentage",
    "update_funds",
    "withdraw",
]
