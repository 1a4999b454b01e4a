"""Zipkin query API v2 client."""

from __future__ import annotations

from typing import Any, List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from eventtrace.core.config import Settings
from eventtrace.core.errors import BackendConnectionError
from eventtrace.core.logger import get_logger
from eventtrace.domain.models import Span
from eventtrace.infrastructure.metrics import ZIPKIN_REQUEST_LATENCY_SECONDS
from eventtrace.shared.constants import ZipkinPaths

logger = get_logger("eventtrace.zipkin")

_TRACES_ADAPTER = TypeAdapter(List[List[Span]])


class ZipkinConnection:
    """Blocking connection to a Zipkin server.

    Exposes the two calls the polling engine needs: the list of known
    services and the traces of one service inside a time window.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        query_limit: int = 1000,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = ZipkinPaths.base_url(endpoint)
        self.timeout = timeout
        self.query_limit = query_limit
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    @classmethod
    def from_settings(cls, config: Settings) -> "ZipkinConnection":
        return cls(
            config.zipkin_endpoint,
            timeout=config.http_timeout_seconds,
            query_limit=config.query_limit,
        )

    def _get(self, path: str, params: dict | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            with ZIPKIN_REQUEST_LATENCY_SECONDS.time():
                resp = self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.warning(
                "zipkin_request_failed", extra={"url": url, "status_code": status}
            )
            raise BackendConnectionError(
                f"zipkin returned HTTP {status} for {url}",
                url=url,
                status_code=status,
            ) from exc
        except ValueError as exc:
            # requests' JSONDecodeError is both a ValueError and a RequestException
            logger.warning("zipkin_invalid_json", extra={"url": url})
            raise BackendConnectionError(
                f"zipkin returned invalid JSON for {url}", url=url
            ) from exc
        except requests.RequestException as exc:
            logger.warning(
                "zipkin_request_failed", extra={"url": url, "error": str(exc)}
            )
            raise BackendConnectionError(
                f"cannot reach zipkin at {url}: {exc}", url=url
            ) from exc

    def services(self) -> list[str]:
        data = self._get(ZipkinPaths.SERVICES)
        if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
            raise BackendConnectionError(
                "zipkin returned an unexpected services payload",
                url=self.base_url + ZipkinPaths.SERVICES,
            )
        logger.debug("zipkin_services_listed", extra={"count": len(data)})
        return data

    def spans(
        self, service: str, end_ts_millis: int, lookback_millis: int
    ) -> list[list[Span]]:
        """Return the traces of ``service`` ending in the given window.

        Each element of the result is the span list of one trace.
        """
        params = {
            "serviceName": service,
            "endTs": end_ts_millis,
            "lookback": lookback_millis,
            "limit": self.query_limit,
        }
        data = self._get(ZipkinPaths.TRACES, params=params)
        try:
            traces = _TRACES_ADAPTER.validate_python(data)
        except ValidationError as exc:
            raise BackendConnectionError(
                f"zipkin returned malformed traces for service {service!r}",
                url=self.base_url + ZipkinPaths.TRACES,
            ) from exc
        logger.debug(
            "zipkin_traces_fetched",
            extra={
                "service_name": service,
                "traces": len(traces),
                "end_ts": end_ts_millis,
                "lookback": lookback_millis,
            },
        )
        return traces

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "ZipkinConnection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["ZipkinConnection"]
