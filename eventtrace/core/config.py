from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlparse

from pydantic_settings import SettingsConfigDict

from eventtrace.domain.models import WindowBoundary
from eventtrace.shared.config import BaseLoggingConfig

from .errors import ConfigError

SUPPORTED_BACKEND = "zipkin"
DISABLED_BACKENDS = {"", "none"}

# Keys of knative's config-tracing ConfigMap
CONFIG_MAP_BACKEND_KEY = "backend"
CONFIG_MAP_ENDPOINT_KEY = "zipkin-endpoint"


class Settings(BaseLoggingConfig):
    model_config = SettingsConfigDict(
        env_prefix="KN_TRACE_", env_file=".env", extra="ignore"
    )

    # Backend
    backend: str = SUPPORTED_BACKEND
    zipkin_endpoint: str = ""
    http_timeout_seconds: float = 10.0
    query_limit: int = 1000  # traces per service query

    # Polling
    poll_interval_seconds: float = 1.0
    window_boundary: WindowBoundary = WindowBoundary.BACKEND

    # Metrics exposition, disabled unless a port is set
    metrics_port: Optional[int] = None


settings = Settings()


def load_tracing_config(data: Mapping[str, str]) -> dict[str, str]:
    """Translate a config-tracing ConfigMap ``data`` block into settings fields.

    Keys other than the backend and the zipkin endpoint are ignored.
    """
    overrides: dict[str, str] = {}
    if CONFIG_MAP_BACKEND_KEY in data:
        overrides["backend"] = str(data[CONFIG_MAP_BACKEND_KEY])
    if CONFIG_MAP_ENDPOINT_KEY in data:
        overrides["zipkin_endpoint"] = str(data[CONFIG_MAP_ENDPOINT_KEY])
    return overrides


def load_config_map_file(path: Path) -> dict[str, str]:
    """Read a ConfigMap dumped as JSON (``kubectl get cm -o json``).

    Accepts either the whole ConfigMap object or just its ``data`` block.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read tracing config {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"tracing config {path} is not valid JSON: {exc}") from exc

    if isinstance(raw, dict) and isinstance(raw.get("data"), dict):
        raw = raw["data"]
    if not isinstance(raw, dict):
        raise ConfigError(f"tracing config {path} must hold a JSON object")
    return load_tracing_config(raw)


def validate_settings(config: Settings) -> Settings:
    backend = config.backend.strip().lower()
    if backend in DISABLED_BACKENDS:
        raise ConfigError("tracing is disabled (backend is 'none')")
    if backend != SUPPORTED_BACKEND:
        raise ConfigError(
            f"unsupported tracing backend {config.backend!r}, "
            f"only {SUPPORTED_BACKEND!r} is supported"
        )

    endpoint = config.zipkin_endpoint.strip()
    if not endpoint:
        raise ConfigError("zipkin endpoint is not configured")
    parsed = urlparse(endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"zipkin endpoint {endpoint!r} is not an http(s) URL")

    if config.query_limit <= 0:
        raise ConfigError("query limit must be positive")
    if config.poll_interval_seconds < 0:
        raise ConfigError("poll interval must not be negative")
    return config


def resolve_settings(
    base: Settings | None = None,
    endpoint: str | None = None,
    config_map: Path | None = None,
) -> Settings:
    """Apply overrides (config map file, then explicit endpoint) and validate."""
    config = base if base is not None else Settings()
    overrides: dict[str, str] = {}
    if config_map is not None:
        overrides.update(load_config_map_file(config_map))
    if endpoint:
        overrides["zipkin_endpoint"] = endpoint
    if overrides:
        config = config.model_copy(update=overrides)
    return validate_settings(config)


__all__ = [
    "Settings",
    "settings",
    "load_tracing_config",
    "load_config_map_file",
    "validate_settings",
    "resolve_settings",
]
