"""Error kinds raised by the trace polling engine."""

from __future__ import annotations


class EventTraceError(Exception):
    """Base class for every error this package raises on purpose."""


class ConfigError(EventTraceError):
    """Raised when the backend configuration is missing or invalid."""


class BackendConnectionError(EventTraceError, ConnectionError):
    """Raised when the trace backend is unreachable or rejects a call."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FetchError(EventTraceError):
    """Raised when a fan-out fetch cycle fails.

    ``service`` is the service whose span query failed, or ``None`` when the
    service enumeration itself failed. The underlying connection error is
    chained as ``__cause__``.
    """

    def __init__(self, message: str, service: str | None = None):
        super().__init__(message)
        self.service = service


__all__ = [
    "EventTraceError",
    "ConfigError",
    "BackendConnectionError",
    "FetchError",
]
