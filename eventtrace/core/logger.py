"""Service logger shim.

Binds the shared JSON logging setup to this tool's settings.
"""

from __future__ import annotations

import logging

from eventtrace.shared.logging import configure_logging as _shared_configure_logging
from eventtrace.shared.logging import get_logger as _shared_get_logger

from .config import Settings, settings


def configure_logging(config: Settings | None = None) -> logging.Logger:
    config = config or settings
    return _shared_configure_logging(
        service=config.otel_service_name,
        environment=config.app_environment,
        level=config.app_log_level,
        redaction_patterns=config.app_log_redaction_patterns,
    )


def get_logger(name: str) -> logging.Logger:
    return _shared_get_logger(name)
