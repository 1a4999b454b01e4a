from .classifier import classify, is_event_span
from .fetcher import Connection, SpanFetcher
from .poller import Poller
from .renderer import render_span, render_spans

__all__ = [
    "Connection",
    "Poller",
    "SpanFetcher",
    "classify",
    "is_event_span",
    "render_span",
    "render_spans",
]
