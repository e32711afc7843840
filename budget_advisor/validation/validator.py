"""
Two-Stage Snapshot Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - STRUCTURAL VALIDATION:
- Income must be positive
- This is the only check that blocks a computation

STAGE 2 - SEMANTIC VALIDATION:
- Negative amounts
- Duplicate debt/goal IDs
- Debts whose payment never covers the interest
- Goals with odd targets, priorities or dates
- Implausible emergency targets
- Spending above income
- These are reported as warnings only. The engine accepts such input and
  lets the arithmetic degrade gracefully.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to review.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Optional

from budget_advisor.config import get_settings
from budget_advisor.models.budget import (
    BudgetSnapshot,
    ValidationIssue,
    ValidationResult,
)


def check_structure(snapshot: BudgetSnapshot) -> list[ValidationIssue]:
    """
    Stage 1: Structural validation.

    Returns a list of error-level issues. An empty list means a plan can be
    computed.
    """
    issues = []

    if snapshot.income <= 0:
        issues.append(ValidationIssue(
            field="income",
            issue_type="invalid_value",
            message="Income must be positive",
            severity="error",
            suggested_fix="Enter your net monthly income after deductions",
        ))

    return issues


class SnapshotValidator:
    """
    Validates a budget snapshot through a two-stage pipeline.

    Stage 1: Structural validation (blocking)
    Stage 2: Semantic validation (warnings)
    """

    def __init__(self, today: Optional[date] = None):
        """
        Initialize validator.

        Args:
            today: Reference date for goal deadline checks.
                   If None, the current date is read on each validation.
        """
        self._today = today
        self._settings = get_settings().advisor

    def _validate_semantic(
        self,
        snapshot: BudgetSnapshot,
    ) -> list[ValidationIssue]:
        """
        Stage 2: Semantic validation.

        Returns: list of warning-level issues
        """
        issues = []
        today = self._today or date.today()

        for field in ("needs", "wants", "current_savings", "emergency_fund"):
            value = getattr(snapshot, field)
            if value < 0:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="negative_value",
                    message=f"{field.replace('_', ' ').capitalize()} is negative ({value:,.2f})",
                    severity="warning",
                    suggested_fix="Amounts are normally zero or positive",
                ))

        if snapshot.needs + snapshot.wants > snapshot.income:
            issues.append(ValidationIssue(
                field="wants",
                issue_type="inconsistent",
                message="Needs and wants together exceed income",
                severity="warning",
                suggested_fix="Check your spending figures",
            ))

        max_months = self._settings.max_emergency_target_months
        if snapshot.emergency_target_months > max_months:
            issues.append(ValidationIssue(
                field="emergency_target_months",
                issue_type="suspicious_value",
                message=(
                    f"Emergency target of {snapshot.emergency_target_months:g} months "
                    f"is unusually high"
                ),
                severity="warning",
                suggested_fix="3 to 6 months of needs is a common target",
            ))
        elif snapshot.emergency_target_months < 0:
            issues.append(ValidationIssue(
                field="emergency_target_months",
                issue_type="negative_value",
                message="Emergency target months is negative",
                severity="warning",
            ))

        issues.extend(self._validate_debts(snapshot))
        issues.extend(self._validate_goals(snapshot, today))

        return issues

    def _validate_debts(self, snapshot: BudgetSnapshot) -> list[ValidationIssue]:
        issues = []

        duplicates = [
            debt_id
            for debt_id, count in Counter(d.id for d in snapshot.debts).items()
            if count > 1
        ]
        for debt_id in duplicates:
            issues.append(ValidationIssue(
                field="debts",
                issue_type="duplicate_id",
                message=f"More than one debt uses the ID '{debt_id}'",
                severity="warning",
            ))

        for debt in snapshot.debts:
            field = f"debts[{debt.id}]"
            if debt.principal < 0:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="negative_value",
                    message=f'Debt "{debt.name}" has a negative principal',
                    severity="warning",
                ))
            if debt.annual_rate < 0:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="negative_value",
                    message=f'Debt "{debt.name}" has a negative interest rate',
                    severity="warning",
                ))
            elif debt.annual_rate > 1:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="suspicious_value",
                    message=(
                        f'Debt "{debt.name}" has an annual rate of '
                        f'{debt.annual_rate * 100:.0f}%'
                    ),
                    severity="warning",
                    suggested_fix="Rates are fractions: enter 0.18 for 18%",
                ))
            if debt.term_months < 1:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="invalid_value",
                    message=f'Debt "{debt.name}" has a term shorter than one month',
                    severity="warning",
                ))
            if debt.min_payment <= 0:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="invalid_value",
                    message=f'Debt "{debt.name}" has no minimum payment',
                    severity="warning",
                    suggested_fix="Enter the minimum monthly payment from your statement",
                ))
            elif debt.principal > 0 and debt.min_payment <= debt.principal * debt.annual_rate / 12:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="non_amortizing",
                    message=(
                        f'The minimum payment on "{debt.name}" does not cover '
                        f'its monthly interest'
                    ),
                    severity="warning",
                    suggested_fix="The balance will keep growing at this payment",
                ))

        return issues

    def _validate_goals(
        self,
        snapshot: BudgetSnapshot,
        today: date,
    ) -> list[ValidationIssue]:
        issues = []

        duplicates = [
            goal_id
            for goal_id, count in Counter(g.id for g in snapshot.savings_goals).items()
            if count > 1
        ]
        for goal_id in duplicates:
            issues.append(ValidationIssue(
                field="savings_goals",
                issue_type="duplicate_id",
                message=f"More than one goal uses the ID '{goal_id}'",
                severity="warning",
            ))

        grace = timedelta(days=self._settings.goal_past_due_grace_days)
        for goal in snapshot.savings_goals:
            field = f"savings_goals[{goal.id}]"
            if goal.target_amount <= 0:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="invalid_value",
                    message=f'Goal "{goal.name}" has no target amount',
                    severity="warning",
                ))
            if goal.current_amount < 0:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="negative_value",
                    message=f'Goal "{goal.name}" has a negative saved amount',
                    severity="warning",
                ))
            if not 1 <= goal.priority <= 5:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="out_of_range",
                    message=f'Goal "{goal.name}" has priority {goal.priority} (expected 1-5)',
                    severity="warning",
                ))
            if goal.target_date + grace < today:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="past_date",
                    message=f'Target date of "{goal.name}" ({goal.target_date}) has passed',
                    severity="warning",
                    suggested_fix="The full remaining amount will be expected this month",
                ))

        return issues

    def validate(self, snapshot: BudgetSnapshot) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            snapshot: The snapshot to validate

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        # Stage 1: Structural validation
        structural_issues = check_structure(snapshot)
        all_issues.extend(structural_issues)
        structural_valid = not structural_issues

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if structural_valid:
            semantic_issues = self._validate_semantic(snapshot)
            all_issues.extend(semantic_issues)
            semantic_valid = not semantic_issues

        warnings = [
            issue.message for issue in all_issues if issue.severity == "warning"
        ]

        return ValidationResult(
            snapshot_id=snapshot.snapshot_id,
            structural_valid=structural_valid,
            semantic_valid=semantic_valid,
            is_valid=structural_valid,
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if not result.structural_valid:
            lines.append("❌ The analysis cannot run:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        lines.append("")
        if result.is_valid:
            lines.append("The analysis will still run, but the results may be off.")
        else:
            lines.append("Please fix the issues above before continuing.")

        return "\n".join(lines)
