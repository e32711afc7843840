"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. User can see history of their analyses and fund movements

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from budget_advisor.audit.storage import AuditStorageInterface
from budget_advisor.models.audit import AuditEvent, AuditEventBuilder


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structlog for local JSON logging.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    logging.getLogger().setLevel(getattr(logging, level))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("budget_advisor.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_snapshot_submitted(
        self,
        snapshot_id: UUID,
        debt_count: int,
        goal_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log snapshot submission."""
        self.log(AuditEventBuilder.snapshot_submitted(
            snapshot_id=snapshot_id,
            debt_count=debt_count,
            goal_count=goal_count,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        snapshot_id: UUID,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log a snapshot rejected by validation."""
        self.log(AuditEventBuilder.validation_failed(
            snapshot_id=snapshot_id,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_validation_warnings(
        self,
        snapshot_id: UUID,
        warnings: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log non-blocking validation warnings."""
        self.log(AuditEventBuilder.validation_warnings(
            snapshot_id=snapshot_id,
            warnings=warnings,
            correlation_id=correlation_id,
        ))

    def log_plan_computed(
        self,
        snapshot_id: UUID,
        health_score: float,
        available_for_allocation: float,
        warning_count: int,
        recommendation_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a computed plan."""
        self.log(AuditEventBuilder.plan_computed(
            snapshot_id=snapshot_id,
            health_score=health_score,
            available_for_allocation=available_for_allocation,
            warning_count=warning_count,
            recommendation_count=recommendation_count,
            correlation_id=correlation_id,
        ))

    def log_funds_updated(
        self,
        delta: float,
        available_funds: float,
        correlation_id: UUID,
    ) -> None:
        """Log a change to the available pool."""
        self.log(AuditEventBuilder.funds_updated(
            delta=delta,
            available_funds=available_funds,
            correlation_id=correlation_id,
        ))

    def log_funds_moved(
        self,
        category_id: str,
        category_name: str,
        amount: float,
        allocated: bool,
        correlation_id: UUID,
    ) -> None:
        """Log money moving between the pool and a category."""
        builder = (
            AuditEventBuilder.funds_allocated
            if allocated
            else AuditEventBuilder.funds_withdrawn
        )
        self.log(builder(
            category_id=category_id,
            category_name=category_name,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_category_added(
        self,
        category_id: str,
        category_name: str,
        correlation_id: UUID,
    ) -> None:
        """Log a new ledger category."""
        self.log(AuditEventBuilder.category_added(
            category_id=category_id,
            category_name=category_name,
            correlation_id=correlation_id,
        ))

    def log_category_removed(
        self,
        category_id: str,
        category_name: str,
        released_amount: float,
        correlation_id: UUID,
    ) -> None:
        """Log a removed ledger category."""
        self.log(AuditEventBuilder.category_removed(
            category_id=category_id,
            category_name=category_name,
            released_amount=released_amount,
            correlation_id=correlation_id,
        ))

    def log_ledger_rejected(
        self,
        operation: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log a ledger operation that was refused."""
        self.log(AuditEventBuilder.ledger_operation_rejected(
            operation=operation,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., running an analysis).
    Pass it through all subsequent operations.
    """
    return uuid4()
