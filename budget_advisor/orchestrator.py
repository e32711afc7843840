"""
Main Orchestrator for the Budget Advisor

This module ties together all the components and defines the
end-to-end flows for:
1. Analysis (snapshot → validate → compute plan)
2. Allocation ledger (fund movements between the pool and categories)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No plan is computed from a snapshot that fails structural validation
- Analysis only runs on an explicit user action, never implicitly
- Every step is audited

The engine itself stays pure; auditing and validation reporting live here.
"""

from datetime import date, datetime
from typing import Optional, Union
from uuid import UUID

from budget_advisor.audit import (
    AuditLogger,
    InMemoryAuditStorage,
    configure_logging,
    create_correlation_id,
)
from budget_advisor.config import get_settings
from budget_advisor.engine import InvalidSnapshotError, compute_plan
from budget_advisor.ledger import (
    LedgerError,
    add_category,
    create_ledger,
    move_funds,
    remove_category,
    update_funds,
)
from budget_advisor.models.budget import (
    BudgetPlan,
    BudgetSnapshot,
    ValidationResult,
)
from budget_advisor.models.ledger import AllocationLedger, FundsDirection
from budget_advisor.validation import SnapshotValidator


class AdvisorFlow:
    """
    Orchestrates the "run analysis" action.

    Flow:
    1. Submit → Audit the snapshot
    2. Validate → Two-stage validation
    3. Compute → Allocation engine (only if validation allows it)
    4. Audit → Record the outcome
    """

    def __init__(
        self,
        validator: Optional[SnapshotValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or SnapshotValidator()
        self._audit_logger = audit_logger

    def run_analysis(
        self,
        snapshot: BudgetSnapshot,
        now: Optional[Union[date, datetime]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[BudgetPlan, ValidationResult]:
        """
        Validate a snapshot and compute its plan.

        Returns:
            (plan, validation_result)

        Raises:
            InvalidSnapshotError: If the snapshot fails structural validation.
                The failure is audited before raising.
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            self._audit_logger.log_snapshot_submitted(
                snapshot_id=snapshot.snapshot_id,
                debt_count=len(snapshot.debts),
                goal_count=len(snapshot.savings_goals),
                correlation_id=correlation_id,
            )

        result = self._validator.validate(snapshot)

        if not result.is_valid:
            errors = [i for i in result.issues if i.severity == "error"]
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    snapshot_id=snapshot.snapshot_id,
                    issues=[
                        {"field": i.field, "type": i.issue_type, "message": i.message}
                        for i in errors
                    ],
                    correlation_id=correlation_id,
                )
            raise InvalidSnapshotError(errors)

        if self._audit_logger and result.warnings:
            self._audit_logger.log_validation_warnings(
                snapshot_id=snapshot.snapshot_id,
                warnings=result.warnings,
                correlation_id=correlation_id,
            )

        plan = compute_plan(snapshot, now=now)

        if self._audit_logger:
            self._audit_logger.log_plan_computed(
                snapshot_id=snapshot.snapshot_id,
                health_score=plan.ratios.health_score,
                available_for_allocation=plan.available_for_allocation,
                warning_count=len(plan.warnings),
                recommendation_count=len(plan.recommendations),
                correlation_id=correlation_id,
            )

        return plan, result

    def get_validation_summary(self, result: ValidationResult) -> str:
        """User-facing text for a validation result."""
        return self._validator.get_user_friendly_summary(result)


class LedgerFlow:
    """
    Orchestrates changes to one allocation ledger.

    Holds the current ledger state. Each operation replaces it with the new
    ledger returned by the pure ledger functions, and audits the change.
    Rejected operations are audited and re-raised; the state is unchanged.
    """

    def __init__(
        self,
        ledger: Optional[AllocationLedger] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._ledger = ledger if ledger is not None else create_ledger()
        self._audit_logger = audit_logger

    @property
    def ledger(self) -> AllocationLedger:
        return self._ledger

    def _rejected(self, operation: str, error: LedgerError, correlation_id: UUID) -> None:
        if self._audit_logger:
            self._audit_logger.log_ledger_rejected(
                operation=operation,
                reason=str(error),
                correlation_id=correlation_id,
            )

    def update_funds(
        self,
        delta: float,
        correlation_id: Optional[UUID] = None,
    ) -> AllocationLedger:
        """Add to (or take from) the available pool."""
        correlation_id = correlation_id or create_correlation_id()

        self._ledger = update_funds(self._ledger, delta)

        if self._audit_logger and delta:
            self._audit_logger.log_funds_updated(
                delta=delta,
                available_funds=self._ledger.available_funds,
                correlation_id=correlation_id,
            )
        return self._ledger

    def add_category(
        self,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AllocationLedger:
        """Add an empty category."""
        correlation_id = correlation_id or create_correlation_id()

        try:
            ledger = add_category(self._ledger, name)
        except LedgerError as e:
            self._rejected("add_category", e, correlation_id)
            raise

        self._ledger = ledger
        added = ledger.categories[-1]
        if self._audit_logger:
            self._audit_logger.log_category_added(
                category_id=added.id,
                category_name=added.name,
                correlation_id=correlation_id,
            )
        return self._ledger

    def remove_category(
        self,
        category_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AllocationLedger:
        """Remove a category and release its money."""
        correlation_id = correlation_id or create_correlation_id()

        category = self._ledger.get_category(category_id)
        try:
            ledger = remove_category(self._ledger, category_id)
        except LedgerError as e:
            self._rejected("remove_category", e, correlation_id)
            raise

        self._ledger = ledger
        if self._audit_logger:
            self._audit_logger.log_category_removed(
                category_id=category.id,
                category_name=category.name,
                released_amount=category.amount,
                correlation_id=correlation_id,
            )
        return self._ledger

    def move_funds(
        self,
        category_id: str,
        amount: float,
        direction: FundsDirection,
        correlation_id: Optional[UUID] = None,
    ) -> AllocationLedger:
        """Move money between the pool and a category."""
        correlation_id = correlation_id or create_correlation_id()

        try:
            ledger = move_funds(self._ledger, category_id, amount, direction)
        except LedgerError as e:
            self._rejected(f"move_funds:{direction.value}", e, correlation_id)
            raise

        self._ledger = ledger
        if self._audit_logger:
            category = ledger.get_category(category_id)
            self._audit_logger.log_funds_moved(
                category_id=category.id,
                category_name=category.name,
                amount=amount,
                allocated=direction == FundsDirection.ALLOCATE,
                correlation_id=correlation_id,
            )
        return self._ledger


def create_app_components(
    ledger: Optional[AllocationLedger] = None,
) -> tuple[AdvisorFlow, LedgerFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Configures local logging from settings and wires both flows to one
    audit logger backed by in-memory storage.

    Returns:
        (advisor_flow, ledger_flow, audit_logger)
    """
    configure_logging(get_settings().app.effective_log_level)

    audit_logger = AuditLogger(InMemoryAuditStorage())

    advisor_flow = AdvisorFlow(audit_logger=audit_logger)
    ledger_flow = LedgerFlow(ledger=ledger, audit_logger=audit_logger)

    return advisor_flow, ledger_flow, audit_logger
