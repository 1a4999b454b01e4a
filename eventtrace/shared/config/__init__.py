"""Shared configuration base classes.

Provides the logging settings every entrypoint carries so that
configure_logging can be driven from one place.
"""

from pydantic_settings import BaseSettings


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "WARNING"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "key",
        "authorization",
        "cookie",
    ]
    app_environment: str = "production"
    otel_service_name: str = "kn-event-trace"


__all__ = ["BaseLoggingConfig"]
