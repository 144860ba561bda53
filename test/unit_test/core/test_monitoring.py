"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Logfire initialization with various configurations
- Feature flag handling
- Event helpers (API requests, orders, QR generation, errors)
- Graceful degradation when Logfire is inactive or failing
"""

import sys
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

import yqpaynow.core.monitoring as monitoring


@pytest.fixture
def fake_logfire():
    """Stand-in for the logfire package so nothing is sent anywhere."""
    module = MagicMock()
    with patch.dict(sys.modules, {"logfire": module}):
        yield module


@pytest.fixture
def logfire_on(monkeypatch):
    monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
    monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "test-token")


class TestIsLogfireActive:
    def test_inactive_when_disabled(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", False)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "test-token")
        assert monitoring.is_logfire_active() is False

    def test_inactive_without_token(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "")
        assert monitoring.is_logfire_active() is False

    def test_active_with_flag_and_token(self, logfire_on):
        assert monitoring.is_logfire_active() is True


class TestInitializeLogfire:
    """Test Logfire initialization function."""

    @patch("yqpaynow.core.monitoring.LOGFIRE_ENABLED", False)
    @patch("yqpaynow.core.monitoring.logger")
    def test_initialize_logfire_disabled(self, mock_logger):
        """Initialization is skipped when Logfire is disabled."""
        assert monitoring.initialize_logfire() is False

        mock_logger.info.assert_called_once()
        assert "disabled" in mock_logger.info.call_args[0][0].lower()

    @patch("yqpaynow.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("yqpaynow.core.monitoring.LOGFIRE_TOKEN", "")
    @patch("yqpaynow.core.monitoring.logger")
    def test_initialize_logfire_no_token(self, mock_logger):
        """Initialization warns when the token is not set."""
        assert monitoring.initialize_logfire() is False

        mock_logger.warning.assert_called_once()
        assert "token" in mock_logger.warning.call_args[0][0].lower()

    def test_configure_called_with_service_details(self, logfire_on, fake_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_SERVICE_NAME", "test-service")
        monkeypatch.setattr(monitoring, "LOGFIRE_ENVIRONMENT", "test")

        assert monitoring.initialize_logfire() is True

        fake_logfire.configure.assert_called_once()
        kwargs = fake_logfire.configure.call_args.kwargs
        assert kwargs["token"] == "test-token"
        assert kwargs["service_name"] == "test-service"
        assert kwargs["environment"] == "test"

    def test_instruments_enabled_integrations(self, logfire_on, fake_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_HTTPX", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_FASTAPI", True)
        app = FastAPI()

        monitoring.initialize_logfire(app=app)

        fake_logfire.instrument_sqlalchemy.assert_called_once()
        fake_logfire.instrument_httpx.assert_called_once()
        fake_logfire.instrument_fastapi.assert_called_once_with(app=app)

    def test_skips_disabled_integrations(self, logfire_on, fake_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", False)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_HTTPX", False)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_FASTAPI", True)

        monitoring.initialize_logfire(app=None)

        fake_logfire.instrument_sqlalchemy.assert_not_called()
        fake_logfire.instrument_httpx.assert_not_called()
        fake_logfire.instrument_fastapi.assert_not_called()

    @patch("yqpaynow.core.monitoring.logger")
    def test_instrumentation_failure_is_only_a_warning(self, mock_logger, logfire_on, fake_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", True)
        fake_logfire.instrument_sqlalchemy.side_effect = RuntimeError("no engine")

        assert monitoring.initialize_logfire() is True
        assert any("SQLAlchemy" in c.args[0] for c in mock_logger.warning.call_args_list)

    @patch("yqpaynow.core.monitoring.logger")
    def test_configure_failure_returns_false(self, mock_logger, logfire_on, fake_logfire):
        fake_logfire.configure.side_effect = RuntimeError("bad token")

        assert monitoring.initialize_logfire() is False
        mock_logger.error.assert_called_once()


class TestEventHelpers:
    @patch("yqpaynow.core.monitoring.logger")
    def test_log_api_request_without_logfire(self, mock_logger, fake_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", False)

        monitoring.log_api_request(method="GET", path="/health", status_code=200, duration_ms=1.5)

        mock_logger.debug.assert_called_once()
        assert "GET /health -> 200" in mock_logger.debug.call_args[0][0]
        fake_logfire.info.assert_not_called()

    def test_log_api_request_forwards_to_logfire(self, logfire_on, fake_logfire):
        monitoring.log_api_request(method="POST", path="/api/v1/orders/theater", status_code=201, duration_ms=12.0)

        fake_logfire.info.assert_called_once()
        kwargs = fake_logfire.info.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["status_code"] == 201

    @patch("yqpaynow.core.monitoring.logger")
    def test_log_order_event(self, mock_logger, logfire_on, fake_logfire):
        monitoring.log_order_event("ORD-20260101-0001", 3, "placed", total=210.0)

        assert "ORD-20260101-0001" in mock_logger.info.call_args[0][0]
        kwargs = fake_logfire.info.call_args.kwargs
        assert kwargs["theater_id"] == 3
        assert kwargs["total"] == 210.0

    @patch("yqpaynow.core.monitoring.logger")
    def test_log_qr_generation(self, mock_logger, fake_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", False)

        monitoring.log_qr_generation(1, "Screen 1", "screen", 40)

        message = mock_logger.info.call_args[0][0]
        assert "40" in message
        assert "Screen 1" in message

    @patch("yqpaynow.core.monitoring.logger")
    def test_log_error_with_context(self, mock_logger, logfire_on, fake_logfire):
        monitoring.log_error("SmsDeliveryError", "gateway down", {"phone": "+911234567890"})

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["extra"] == {"context": {"phone": "+911234567890"}}
        fake_logfire.error.assert_called_once()

    @patch("yqpaynow.core.monitoring.logger")
    def test_logfire_failure_is_swallowed(self, mock_logger, logfire_on, fake_logfire):
        fake_logfire.info.side_effect = RuntimeError("exporter down")

        monitoring.log_qr_generation(1, "Counter", "single", 1)

        mock_logger.debug.assert_called_once()
