"""Polling loop over contiguous, non-overlapping time windows."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable

from eventtrace.core.logger import get_logger
from eventtrace.domain.models import RenderOptions, TimeWindow
from eventtrace.infrastructure.metrics import (
    POLL_CYCLES_TOTAL,
    POLL_WINDOW_LOOKBACK_MS,
    SPANS_EMITTED_TOTAL,
)

from .fetcher import SpanFetcher
from .renderer import render_span

logger = get_logger("eventtrace.poller")

Clock = Callable[[], datetime]
Sink = Callable[[str], None]

DEFAULT_INTERVAL_SECONDS = 1.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Poller:
    """Drive fetch cycles and write rendered lines to ``sink``.

    The first window reaches back to the epoch. In follow mode every later
    window starts where the previous one ended, after a fixed sleep. Any
    FetchError ends the run and propagates; lines already written stay
    written.
    """

    def __init__(
        self,
        fetcher: SpanFetcher,
        options: RenderOptions,
        sink: Sink,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        clock: Clock = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.fetcher = fetcher
        self.options = options
        self.sink = sink
        self.interval = interval
        self.clock = clock
        self.sleep = sleep

    def poll_once(self, window: TimeWindow) -> int:
        """Render every kept span of ``window``; returns the span count."""
        emitted = 0
        for classified in self.fetcher.iter_window(window):
            for line in render_span(classified.span, self.options):
                self.sink(line)
            SPANS_EMITTED_TOTAL.inc()
            emitted += 1
        return emitted

    def _next_window(self, window: TimeWindow) -> TimeWindow:
        # A clock stepping backwards yields an empty window, never an
        # overlapping one.
        return window.advance(max(self.clock(), window.until))

    def run(self, follow: bool = False) -> int:
        """Poll once, or forever when ``follow``; returns completed cycles."""
        window = TimeWindow.initial(self.clock())
        cycles = 0
        while True:
            logger.debug(
                "poll_cycle_started",
                extra={
                    "cycle": cycles + 1,
                    "since": window.since.isoformat(),
                    "until": window.until.isoformat(),
                },
            )
            POLL_WINDOW_LOOKBACK_MS.set(window.lookback_millis)
            emitted = self.poll_once(window)
            cycles += 1
            POLL_CYCLES_TOTAL.inc()
            logger.info(
                "poll_cycle_completed", extra={"cycle": cycles, "spans": emitted}
            )

            if not follow:
                return cycles

            self.sleep(self.interval)
            window = self._next_window(window)
