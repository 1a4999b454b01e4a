"""Line rendering of event spans.

Pure functions; writing the lines somewhere is up to the caller.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from eventtrace.domain.models import ClassifiedSpan, RenderOptions, Span
from eventtrace.shared.constants import CloudEventTags

DETAIL_INDENT = "  "
ITEM_INDENT = "    "


def _format_time(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.isoformat()


def summary_line(span: Span) -> str:
    return " ".join(span.tags.get(key, "") for key in CloudEventTags.summary_keys())


def render_span(span: Span, options: RenderOptions) -> List[str]:
    lines = [summary_line(span)]
    if not options.verbose:
        return lines

    if span.local_endpoint is not None:
        lines.append(f"{DETAIL_INDENT}{span.local_endpoint.service_name or ''}")
    if span.remote_endpoint is not None:
        lines.append(f"{DETAIL_INDENT}{span.remote_endpoint.service_name or ''}")

    lines.append(
        f"{DETAIL_INDENT}{_format_time(span.start_time)} {span.name} {span.id}"
    )

    if span.annotations:
        lines.append(f"{DETAIL_INDENT}annotations:")
        for annotation in span.annotations:
            lines.append(
                f"{ITEM_INDENT}{_format_time(annotation.time)} {annotation.value}"
            )

    if span.tags:
        lines.append(f"{DETAIL_INDENT}tags:")
        # sorted only so that a single render is deterministic
        for key in sorted(span.tags):
            lines.append(f"{ITEM_INDENT}{key}={span.tags[key]}")

    return lines


def render_spans(
    spans: Iterable[ClassifiedSpan], options: RenderOptions
) -> List[str]:
    lines: List[str] = []
    for classified in spans:
        lines.extend(render_span(classified.span, options))
    return lines
