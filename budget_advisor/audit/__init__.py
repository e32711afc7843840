"""Audit logging package."""

from budget_advisor.audit.logger import AuditLogger, configure_logging, create_correlation_id
from budget_advisor.audit.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    StorageError,
)

__all__ = [
    "AuditLogger",
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "StorageError",
    "configure_logging",
    "create_correlation_id",
]
