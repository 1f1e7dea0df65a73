"""Unit tests for infrastructure and shared kernel domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import structlog

from infrastructure.observability import (
    DefaultConnectionProbe,
    DefaultStartupProbe,
    ObservationContext,
)
from shared_kernel.auth import DefaultJWTValidatorProbe


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_connection_established_logs_info(self):
        """connection_established should log with host and database."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.connection_established(host="localhost", database="tenant_x_1")

        mock_logger.info.assert_called_once_with(
            "database_connection_established",
            host="localhost",
            database="tenant_x_1",
        )

    def test_connection_failed_logs_error(self):
        """connection_failed should log error with host, database, and error."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.connection_failed(
            host="localhost", database="tenant_x_1", error=OSError("refused")
        )

        mock_logger.error.assert_called_once_with(
            "database_connection_failed",
            host="localhost",
            database="tenant_x_1",
            error="refused",
            error_type="OSError",
        )

    def test_database_provisioned_logs_info(self):
        """database_provisioned should report whether it was created."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.database_provisioned(database="tenant_x_1", created=True)

        mock_logger.info.assert_called_once_with(
            "tenant_database_provisioned",
            database="tenant_x_1",
            created=True,
        )

    def test_with_context_adds_context_fields(self):
        """Bound context is included with every event."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        context = ObservationContext(request_id="req-9").with_tenant("empresa123")
        probe = DefaultConnectionProbe(logger=mock_logger).with_context(context)

        probe.pool_closed(database="tenant_x_1")

        mock_logger.info.assert_called_once_with(
            "connection_pool_closed",
            database="tenant_x_1",
            request_id="req-9",
            tenant_id="empresa123",
        )


class TestStartupProbe:
    """Tests for the application lifecycle probe."""

    def test_application_started_logs_version(self):
        """application_started should log name and version."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.application_started(app_name="Tenancy API", version="0.1.0")

        mock_logger.info.assert_called_once_with(
            "application_started",
            app_name="Tenancy API",
            version="0.1.0",
        )

    def test_jwt_secret_missing_warns(self):
        """A missing secret is reported as a warning."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.jwt_secret_missing()

        mock_logger.warning.assert_called_once()


class TestJWTValidatorProbe:
    """Tests for the token verification probe."""

    def test_token_validation_failed_logs_warning(self):
        """Failures are logged with their reason."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultJWTValidatorProbe(logger=mock_logger)

        probe.token_validation_failed(reason="Token expired")

        mock_logger.warning.assert_called_once_with(
            "jwt_token_validation_failed",
            reason="Token expired",
        )


class TestObservationContext:
    """Tests for ObservationContext."""

    def test_as_dict_omits_unset_fields(self):
        """Only set fields appear in log kwargs."""
        context = ObservationContext(request_id="req-1")
        assert context.as_dict() == {"request_id": "req-1"}

    def test_with_extra_merges_metadata(self):
        """with_extra returns a new context with merged extras."""
        context = ObservationContext(extra={"a": 1})
        extended = context.with_extra(b=2)

        assert extended.as_dict() == {"a": 1, "b": 2}
        assert context.as_dict() == {"a": 1}
