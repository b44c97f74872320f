"""Tests for settings and the audit logger."""

import pytest
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from cashflow.audit import AuditLogger
from cashflow.config import get_settings, validate_all_settings
from cashflow.config.settings import AppSettings, LoggingSettings
from cashflow.models.audit import AuditEvent, AuditEventType, AuditSeverity
from cashflow.models.finance import Period
from cashflow.services.storage import InMemoryAuditStorage, StorageError


class BrokenAuditStorage(InMemoryAuditStorage):
    async def append_event(self, event: AuditEvent) -> bool:
        raise StorageError("audit sheet unavailable")


class TestSettings:
    """Tests for configuration loading."""

    def test_defaults(self):
        """Test default limits and currency."""
        settings = AppSettings()
        assert settings.currency_code == "BRL"
        assert settings.currency_symbol == "R$"
        assert settings.max_installments == 72

    def test_env_override(self, monkeypatch):
        """Test limits can be set from the environment."""
        monkeypatch.setenv("MAX_INSTALLMENTS", "12")
        assert AppSettings().max_installments == 12

    def test_log_level_normalized(self, monkeypatch):
        """Test log level is upper-cased and validated."""
        monkeypatch.setenv("CASHFLOW_LOG_LEVEL", "debug")
        assert LoggingSettings().level == "DEBUG"
        monkeypatch.setenv("CASHFLOW_LOG_LEVEL", "loud")
        with pytest.raises(ValidationError):
            LoggingSettings()

    def test_validate_all_settings(self):
        """Test every section reports as loadable."""
        get_settings.cache_clear()
        results = validate_all_settings()
        assert results == {"app": True, "logging": True}


class TestAuditLogger:
    """Tests for local and persisted audit logging."""

    @pytest.mark.asyncio
    async def test_persists_events(self):
        """Test events reach audit storage newest first."""
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)
        period = Period(month=3, year=2024)
        account_id = uuid4()

        await audit.log_bill_paid_toggled(account_id, period, True)
        await audit.log_extra_value_added(account_id, period, Decimal("20"), Decimal("70"))

        events = await storage.get_recent_events()
        assert [e.event_type for e in events] == [
            AuditEventType.EXTRA_VALUE_ADDED,
            AuditEventType.BILL_PAID_TOGGLED,
        ]
        assert events[0].period == period
        assert events[0].entity_id == account_id

    @pytest.mark.asyncio
    async def test_without_storage(self):
        """Test logging works with no storage configured."""
        assert await AuditLogger().log_salary_updated(Decimal("5000")) is None

    @pytest.mark.asyncio
    async def test_storage_failure_is_swallowed(self):
        """Test a failed audit write never raises."""
        audit = AuditLogger(BrokenAuditStorage())
        event = AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description="boom",
        )
        assert await audit.log(event) is False

    @pytest.mark.asyncio
    async def test_validation_failure_is_warning(self):
        """Test rejected input is recorded as a warning."""
        storage = InMemoryAuditStorage()
        await AuditLogger(storage).log_validation_failed("extra_value", "must be positive")
        event = (await storage.get_recent_events())[0]
        assert event.severity == AuditSeverity.WARNING
        assert "must be positive" in event.error_message
