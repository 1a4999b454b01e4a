from __future__ import annotations

from eventtrace.domain.models import ClassifiedSpan, Span
from eventtrace.shared.constants import CloudEventTags


def is_event_span(span: Span) -> bool:
    """True when the span carries a CloudEvent id tag, whatever its value."""
    return CloudEventTags.ID in span.tags


def classify(span: Span) -> ClassifiedSpan:
    return ClassifiedSpan(span=span, is_event=is_event_span(span))
