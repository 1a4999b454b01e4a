import logging
from unittest.mock import patch

from eventtrace.core import logger as service_logger
from eventtrace.core.config import Settings


class TestServiceLogger:
    """Binding of the shared logging setup to Settings."""

    def test_configure_logging_uses_settings(self):
        config = Settings(
            app_log_level="DEBUG",
            app_environment="staging",
            otel_service_name="kn-event-trace-test",
            app_log_redaction_patterns=["token"],
        )

        with patch.object(service_logger, "_shared_configure_logging") as shared:
            service_logger.configure_logging(config)

        shared.assert_called_once_with(
            service="kn-event-trace-test",
            environment="staging",
            level="DEBUG",
            redaction_patterns=["token"],
        )

    def test_configure_logging_defaults_to_module_settings(self):
        with patch.object(service_logger, "_shared_configure_logging") as shared:
            service_logger.configure_logging()

        kwargs = shared.call_args.kwargs
        assert kwargs["service"] == service_logger.settings.otel_service_name
        assert kwargs["level"] == service_logger.settings.app_log_level

    def test_get_logger_returns_propagating_logger(self):
        logger = service_logger.get_logger("eventtrace.component")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "eventtrace.component"
        assert logger.propagate is True
