"""Shared utilities and components."""

from .config import BaseLoggingConfig
from .constants import CloudEventTags, ZipkinPaths

__all__ = [
    "BaseLoggingConfig",
    "CloudEventTags",
    "ZipkinPaths",
]
