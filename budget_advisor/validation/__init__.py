"""Snapshot validation package."""

from budget_advisor.validation.validator import SnapshotValidator, check_structure

__all__ = ["SnapshotValidator", "check_structure"]
