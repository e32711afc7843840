"""
Audit Models for the Budget Advisor

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every analysis a user ran
2. Debugging information when a plan looks wrong
3. A history of fund movements in the allocation ledger

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each step of the analysis and ledger flows has its own event type.
    """
    # Analysis
    SNAPSHOT_SUBMITTED = "snapshot_submitted"
    SNAPSHOT_VALIDATION_FAILED = "snapshot_validation_failed"
    SNAPSHOT_VALIDATION_WARNINGS = "snapshot_validation_warnings"
    PLAN_COMPUTED = "plan_computed"

    # Allocation ledger
    FUNDS_UPDATED = "funds_updated"
    FUNDS_ALLOCATED = "funds_allocated"
    FUNDS_WITHDRAWN = "funds_withdrawn"
    CATEGORY_ADDED = "category_added"
    CATEGORY_REMOVED = "category_removed"
    LEDGER_OPERATION_REJECTED = "ledger_operation_rejected"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'snapshot', 'ledger', 'category')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one analysis run)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_row(self) -> list[str]:
        """
        Convert to a flat row for tabular export.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, ensure_ascii=False) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.snapshot_submitted(snapshot_id, 2, 1, correlation_id)
        event = AuditEventBuilder.funds_allocated("cat-1", "Bitcoin", 500.0, correlation_id)
    """

    @staticmethod
    def snapshot_submitted(
        snapshot_id: UUID,
        debt_count: int,
        goal_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SUBMITTED,
            entity_type="snapshot",
            entity_id=str(snapshot_id),
            correlation_id=correlation_id,
            description=f"Snapshot submitted with {debt_count} debts and {goal_count} goals",
            details={
                "debt_count": debt_count,
                "goal_count": goal_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        snapshot_id: UUID,
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            entity_id=str(snapshot_id),
            correlation_id=correlation_id,
            description=f"Snapshot rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def validation_warnings(
        snapshot_id: UUID,
        warnings: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_VALIDATION_WARNINGS,
            severity=AuditSeverity.INFO,
            entity_type="snapshot",
            entity_id=str(snapshot_id),
            correlation_id=correlation_id,
            description=f"Snapshot accepted with {len(warnings)} warnings",
            details={
                "warnings": warnings,
            },
        )

    @staticmethod
    def plan_computed(
        snapshot_id: UUID,
        health_score: float,
        available_for_allocation: float,
        warning_count: int,
        recommendation_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PLAN_COMPUTED,
            entity_type="snapshot",
            entity_id=str(snapshot_id),
            correlation_id=correlation_id,
            description=f"Plan computed with health score {health_score:.0f}/100",
            details={
                "health_score": health_score,
                "available_for_allocation": available_for_allocation,
                "warning_count": warning_count,
                "recommendation_count": recommendation_count,
            },
        )

    @staticmethod
    def funds_updated(
        delta: float,
        available_funds: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FUNDS_UPDATED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Available funds changed by {delta:,.2f}",
            details={
                "delta": delta,
                "available_funds": available_funds,
            },
            is_user_action=True,
        )

    @staticmethod
    def funds_allocated(
        category_id: str,
        category_name: str,
        amount: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FUNDS_ALLOCATED,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=f"Allocated {amount:,.2f} to {category_name}",
            details={
                "category_name": category_name,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def funds_withdrawn(
        category_id: str,
        category_name: str,
        amount: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FUNDS_WITHDRAWN,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=f"Withdrew {amount:,.2f} from {category_name}",
            details={
                "category_name": category_name,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_added(
        category_id: str,
        category_name: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=f"Category added: {category_name}",
            details={
                "category_name": category_name,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_removed(
        category_id: str,
        category_name: str,
        released_amount: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_REMOVED,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=f"Category removed: {category_name}",
            details={
                "category_name": category_name,
                "released_amount": released_amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_operation_rejected(
        operation: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger operation rejected: {operation}",
            error_message=reason,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
