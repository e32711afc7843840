"""
Data Models Package

This package contains all Pydantic models used in the Budget Advisor.
All data flowing through the system must conform to these schemas.
"""

from budget_advisor.models.budget import (
    BudgetPlan,
    BudgetRatios,
    BudgetSnapshot,
    Debt,
    DebtAllocation,
    GoalAllocation,
    PlanAllocations,
    SavingsGoal,
    ValidationIssue,
    ValidationResult,
)
from budget_advisor.models.ledger import (
    AllocationCategory,
    AllocationLedger,
    FundsDirection,
)
from budget_advisor.models.expenses import (
    BudgetInsight,
    CategorySummary,
    Expense,
    ExpenseCategory,
    InsightType,
    MonthlyComparison,
)
from budget_advisor.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Budget models
    "BudgetPlan",
    "BudgetRatios",
    "BudgetSnapshot",
    "Debt",
    "DebtAllocation",
    "GoalAllocation",
    "PlanAllocations",
    "SavingsGoal",
    "ValidationIssue",
    "ValidationResult",
    # Ledger models
    "AllocationCategory",
    "AllocationLedger",
    "FundsDirection",
    # Expense models
    "BudgetInsight",
    "CategorySummary",
    "Expense",
    "ExpenseCategory",
    "InsightType",
    "MonthlyComparison",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
