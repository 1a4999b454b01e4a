"""Fan-out of a window query over every service known to the backend."""

from __future__ import annotations

from typing import Iterator, List, Protocol, Sequence

from eventtrace.core.errors import FetchError
from eventtrace.core.logger import get_logger
from eventtrace.domain.models import (
    ClassifiedSpan,
    RenderOptions,
    Span,
    TimeWindow,
    WindowBoundary,
)
from eventtrace.infrastructure.metrics import FETCH_ERRORS_TOTAL, SPANS_FETCHED_TOTAL

from .classifier import classify

logger = get_logger("eventtrace.fetcher")


class Connection(Protocol):
    def services(self) -> Sequence[str]: ...

    def spans(
        self, service: str, end_ts_millis: int, lookback_millis: int
    ) -> Sequence[Sequence[Span]]: ...


class SpanFetcher:
    """Retrieve and filter the spans of every service for one window.

    The first backend error aborts the whole cycle; nothing is retried.
    """

    def __init__(
        self,
        connection: Connection,
        options: RenderOptions,
        boundary: WindowBoundary = WindowBoundary.BACKEND,
    ):
        self.connection = connection
        self.options = options
        self.boundary = boundary

    def _keep(self, classified: ClassifiedSpan) -> bool:
        return self.options.include_non_event_spans or classified.is_event

    def iter_window(self, window: TimeWindow) -> Iterator[ClassifiedSpan]:
        """Yield kept spans service by service, in enumeration order.

        Spans of earlier services are yielded before later services are
        queried, so a failure can surface after some spans were produced.
        """
        try:
            services = self.connection.services()
        except ConnectionError as exc:
            FETCH_ERRORS_TOTAL.inc()
            raise FetchError(f"listing services failed: {exc}") from exc

        end_ts = window.end_ts_millis
        lookback = window.lookback_millis
        for service in services:
            try:
                traces = self.connection.spans(service, end_ts, lookback)
            except ConnectionError as exc:
                FETCH_ERRORS_TOTAL.inc()
                raise FetchError(
                    f"fetching spans of service {service!r} failed: {exc}",
                    service=service,
                ) from exc

            for trace in traces:
                for span in trace:
                    SPANS_FETCHED_TOTAL.inc()
                    if not window.contains(span.start_time, self.boundary):
                        continue
                    classified = classify(span)
                    if self._keep(classified):
                        yield classified

    def fetch_window(self, window: TimeWindow) -> List[ClassifiedSpan]:
        """Materialized ``iter_window``; a failure returns no partial result."""
        spans = list(self.iter_window(window))
        logger.debug(
            "window_fetched",
            extra={
                "end_ts": window.end_ts_millis,
                "lookback": window.lookback_millis,
                "spans": len(spans),
            },
        )
        return spans
