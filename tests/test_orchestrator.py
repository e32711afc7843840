"""
Flow tests with in-memory audit storage.
"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from uuid import uuid4

from budget_advisor.audit import AuditLogger, InMemoryAuditStorage, StorageError
from budget_advisor.config import get_settings, validate_all_settings
from budget_advisor.engine import InvalidSnapshotError
from budget_advisor.ledger import CategoryNotFoundError, InsufficientFundsError, LedgerError
from budget_advisor.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
)
from budget_advisor.models.budget import BudgetSnapshot, Debt
from budget_advisor.models.ledger import AllocationCategory, AllocationLedger, FundsDirection
from budget_advisor.orchestrator import (
    AdvisorFlow,
    LedgerFlow,
    create_app_components,
)
from budget_advisor.validation import SnapshotValidator

NOW = date(2025, 1, 15)


class FailingStorage(InMemoryAuditStorage):
    """Storage whose writes always fail."""

    def append_event(self, event: AuditEvent) -> bool:
        raise StorageError("disk full")


@pytest.fixture
def storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(storage):
    return AuditLogger(storage)


@pytest.fixture
def advisor_flow(audit_logger):
    return AdvisorFlow(validator=SnapshotValidator(today=NOW), audit_logger=audit_logger)


@pytest.fixture
def ledger_flow(audit_logger):
    ledger = AllocationLedger(
        available_funds=1000,
        categories=[AllocationCategory(id="sp", name="S&P 500", amount=200)],
    )
    return LedgerFlow(ledger=ledger, audit_logger=audit_logger)


def event_types(events):
    return [e.event_type for e in events]


class TestAuditStorage:
    """Tests for the in-memory audit storage."""

    def test_recent_events_newest_first(self, storage):
        first = AuditEvent(event_type=AuditEventType.FUNDS_UPDATED, description="one")
        second = AuditEvent(event_type=AuditEventType.FUNDS_UPDATED, description="two")
        storage.append_event(first)
        storage.append_event(second)

        assert [e.description for e in storage.get_recent_events()] == ["two", "one"]
        assert [e.description for e in storage.get_recent_events(limit=1)] == ["two"]
        assert storage.get_recent_events(limit=0) == []

    def test_bounded_storage_drops_oldest(self):
        storage = InMemoryAuditStorage(max_events=2)
        for text in ("a", "b", "c"):
            storage.append_event(
                AuditEvent(event_type=AuditEventType.FUNDS_UPDATED, description=text)
            )

        assert len(storage) == 2
        assert [e.description for e in storage.get_recent_events()] == ["c", "b"]

    def test_length_under_concurrent_writes(self, storage):
        def write(index):
            storage.append_event(
                AuditEvent(event_type=AuditEventType.FUNDS_UPDATED, description=str(index))
            )
            return len(storage)

        with ThreadPoolExecutor(max_workers=8) as pool:
            lengths = list(pool.map(write, range(200)))

        assert len(storage) == 200
        assert max(lengths) == 200
        assert all(1 <= n <= 200 for n in lengths)

    def test_events_by_entity(self, storage):
        correlation_id = uuid4()
        storage.append_event(
            AuditEventBuilder.funds_allocated("sp", "S&P 500", 10.0, correlation_id)
        )
        storage.append_event(
            AuditEventBuilder.funds_allocated("btc", "Bitcoin", 10.0, correlation_id)
        )

        events = storage.get_events_by_entity("category", "btc")
        assert len(events) == 1
        assert events[0].details["category_name"] == "Bitcoin"


class TestAuditLogger:
    """Tests for the audit logger."""

    def test_log_persists(self, audit_logger, storage):
        assert audit_logger.log(
            AuditEvent(event_type=AuditEventType.PLAN_COMPUTED, description="ok")
        ) is True
        assert len(storage) == 1

    def test_without_storage(self):
        assert AuditLogger().log(
            AuditEvent(event_type=AuditEventType.PLAN_COMPUTED, description="ok")
        ) is True

    def test_storage_failure_does_not_raise(self):
        audit_logger = AuditLogger(FailingStorage())
        assert audit_logger.log(
            AuditEvent(event_type=AuditEventType.PLAN_COMPUTED, description="ok")
        ) is False

    def test_log_error(self, audit_logger, storage):
        audit_logger.log_error("ValueError", "boom", details={"step": "compute"})

        (event,) = storage.get_recent_events()
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.error_message == "boom"


class TestAdvisorFlow:
    """Tests for the run-analysis flow."""

    def test_successful_analysis(self, advisor_flow, storage):
        correlation_id = uuid4()
        snapshot = BudgetSnapshot(income=10000, needs=4000)

        plan, result = advisor_flow.run_analysis(
            snapshot, now=NOW, correlation_id=correlation_id
        )

        assert result.is_valid is True
        assert plan.available_for_allocation == 6000
        assert event_types(storage.get_events_by_correlation_id(correlation_id)) == [
            AuditEventType.SNAPSHOT_SUBMITTED,
            AuditEventType.PLAN_COMPUTED,
        ]

    def test_analysis_with_warnings(self, advisor_flow, storage):
        correlation_id = uuid4()
        snapshot = BudgetSnapshot(
            income=1000,
            needs=850,
            debts=[Debt(id="cc", name="Visa", principal=10000, annual_rate=0.24, min_payment=150)],
        )

        plan, result = advisor_flow.run_analysis(
            snapshot, now=NOW, correlation_id=correlation_id
        )

        assert result.warnings
        assert plan.allocations.debt_allocations[0].payoff_achievable is False
        events = storage.get_events_by_correlation_id(correlation_id)
        assert event_types(events) == [
            AuditEventType.SNAPSHOT_SUBMITTED,
            AuditEventType.SNAPSHOT_VALIDATION_WARNINGS,
            AuditEventType.PLAN_COMPUTED,
        ]
        assert events[1].details["warnings"] == result.warnings

    def test_rejected_snapshot(self, advisor_flow, storage):
        correlation_id = uuid4()
        snapshot = BudgetSnapshot(income=0)

        with pytest.raises(InvalidSnapshotError):
            advisor_flow.run_analysis(snapshot, now=NOW, correlation_id=correlation_id)

        events = storage.get_events_by_correlation_id(correlation_id)
        assert event_types(events) == [
            AuditEventType.SNAPSHOT_SUBMITTED,
            AuditEventType.SNAPSHOT_VALIDATION_FAILED,
        ]
        assert events[1].details["issues"][0]["field"] == "income"

    def test_works_without_audit_logger(self):
        flow = AdvisorFlow(validator=SnapshotValidator(today=NOW))
        plan, _ = flow.run_analysis(BudgetSnapshot(income=5000), now=NOW)
        assert plan.available_for_allocation == 5000

    def test_validation_summary(self, advisor_flow):
        _, result = advisor_flow.run_analysis(BudgetSnapshot(income=5000), now=NOW)
        assert advisor_flow.get_validation_summary(result) == "✅ All checks passed!"


class TestLedgerFlow:
    """Tests for the ledger flow."""

    def test_allocate_updates_state(self, ledger_flow, storage):
        ledger = ledger_flow.move_funds("sp", 300, FundsDirection.ALLOCATE)

        assert ledger is ledger_flow.ledger
        assert ledger.available_funds == 700
        assert ledger.get_category("sp").amount == 500
        (event,) = storage.get_recent_events()
        assert event.event_type == AuditEventType.FUNDS_ALLOCATED
        assert event.entity_id == "sp"

    def test_withdraw(self, ledger_flow, storage):
        ledger_flow.move_funds("sp", 200, FundsDirection.WITHDRAW)

        assert ledger_flow.ledger.available_funds == 1200
        assert storage.get_recent_events()[0].event_type == AuditEventType.FUNDS_WITHDRAWN

    def test_rejected_move_keeps_state(self, ledger_flow, storage):
        before = ledger_flow.ledger

        with pytest.raises(InsufficientFundsError):
            ledger_flow.move_funds("sp", 5000, FundsDirection.ALLOCATE)

        assert ledger_flow.ledger is before
        (event,) = storage.get_recent_events()
        assert event.event_type == AuditEventType.LEDGER_OPERATION_REJECTED
        assert event.details["operation"] == "move_funds:allocate"

    def test_update_funds(self, ledger_flow, storage):
        ledger_flow.update_funds(250)
        ledger_flow.update_funds(0)

        assert ledger_flow.ledger.available_funds == 1250
        assert event_types(storage.get_recent_events()) == [AuditEventType.FUNDS_UPDATED]

    def test_add_and_remove_category(self, ledger_flow, storage):
        ledger = ledger_flow.add_category("Gold")
        gold = ledger.categories[-1]
        ledger_flow.move_funds(gold.id, 100, FundsDirection.ALLOCATE)
        ledger = ledger_flow.remove_category(gold.id)

        assert ledger.get_category(gold.id) is None
        assert ledger.available_funds == 1000
        assert event_types(reversed(storage.get_recent_events())) == [
            AuditEventType.CATEGORY_ADDED,
            AuditEventType.FUNDS_ALLOCATED,
            AuditEventType.CATEGORY_REMOVED,
        ]
        assert storage.get_recent_events()[0].details["released_amount"] == 100

    def test_rejected_category_operations(self, ledger_flow, storage):
        with pytest.raises(LedgerError):
            ledger_flow.add_category("  ")
        with pytest.raises(CategoryNotFoundError):
            ledger_flow.remove_category("nope")

        assert event_types(storage.get_recent_events()) == [
            AuditEventType.LEDGER_OPERATION_REJECTED,
            AuditEventType.LEDGER_OPERATION_REJECTED,
        ]

    def test_default_ledger(self):
        flow = LedgerFlow()
        assert len(flow.ledger.categories) == 5


class TestAppComponents:
    """Tests for the component factory and settings."""

    def test_components_share_audit_logger(self):
        advisor_flow, ledger_flow, audit_logger = create_app_components()

        advisor_flow.run_analysis(BudgetSnapshot(income=5000), now=NOW)
        ledger_flow.update_funds(100)

        assert len(audit_logger.storage) == 3

    def test_components_with_ledger(self):
        ledger = AllocationLedger(available_funds=42)
        _, ledger_flow, _ = create_app_components(ledger=ledger)
        assert ledger_flow.ledger.available_funds == 42

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("ADVISOR_DEFAULT_CURRENCY", "€")
        monkeypatch.setenv("DEBUG_MODE", "true")

        settings = get_settings()
        assert settings.advisor.default_currency == "€"
        assert settings.app.effective_log_level == "DEBUG"

    def test_validate_all_settings(self, monkeypatch):
        assert validate_all_settings() == {"advisor": True, "ledger": True, "app": True}

        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
