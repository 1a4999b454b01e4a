from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def micros_to_datetime(value: int) -> datetime:
    return EPOCH + timedelta(microseconds=value)


def datetime_to_millis(value: datetime) -> int:
    return (value - EPOCH) // timedelta(milliseconds=1)


class WindowBoundary(str, Enum):
    """How span start times are matched against a poll window."""

    # Keep whatever the backend returns for the window
    BACKEND = "backend"
    # Keep only spans starting in [since, until)
    HALF_OPEN = "half_open"


class _WireModel(BaseModel):
    """Zipkin v2 JSON uses camelCase; unknown fields are ignored."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Endpoint(_WireModel):
    service_name: Optional[str] = Field(default=None, alias="serviceName")
    ipv4: Optional[str] = None
    ipv6: Optional[str] = None
    port: Optional[int] = None


class Annotation(_WireModel):
    timestamp: int
    value: str

    @property
    def time(self) -> datetime:
        return micros_to_datetime(self.timestamp)


class Span(_WireModel):
    """A single span as returned by the Zipkin query API.

    ``timestamp`` and ``duration`` are microseconds, as on the wire.
    """

    trace_id: str = Field(alias="traceId")
    id: str
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    name: str = ""
    kind: Optional[str] = None
    timestamp: Optional[int] = None
    duration: Optional[int] = None
    tags: Dict[str, str] = Field(default_factory=dict)
    annotations: List[Annotation] = Field(default_factory=list)
    local_endpoint: Optional[Endpoint] = Field(default=None, alias="localEndpoint")
    remote_endpoint: Optional[Endpoint] = Field(default=None, alias="remoteEndpoint")

    @property
    def start_time(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return micros_to_datetime(self.timestamp)


class ClassifiedSpan(BaseModel):
    model_config = ConfigDict(frozen=True)

    span: Span
    is_event: bool


class RenderOptions(BaseModel):
    """Output verbosity and filter strictness for a whole run."""

    model_config = ConfigDict(frozen=True)

    verbose: bool = False
    include_non_event_spans: bool = False


class TimeWindow(BaseModel):
    """Query window ``[since, until]`` of one poll cycle.

    Both ends are UTC datetimes; naive values are taken as UTC. Consecutive
    windows are built with ``advance`` so that they share exactly one
    boundary and never overlap.
    """

    model_config = ConfigDict(frozen=True)

    since: datetime
    until: datetime

    @field_validator("since", "until")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.since > self.until:
            raise ValueError(
                f"window start {self.since.isoformat()} is after "
                f"window end {self.until.isoformat()}"
            )
        return self

    @classmethod
    def initial(cls, now: datetime) -> "TimeWindow":
        """First window of a run: everything the backend has up to ``now``."""
        return cls(since=EPOCH, until=now)

    def advance(self, now: datetime) -> "TimeWindow":
        return TimeWindow(since=self.until, until=now)

    @property
    def end_ts_millis(self) -> int:
        return datetime_to_millis(self.until)

    @property
    def lookback_millis(self) -> int:
        # Derived from the truncated ends so that end_ts - lookback of one
        # window equals end_ts of the previous one.
        return datetime_to_millis(self.until) - datetime_to_millis(self.since)

    def contains(self, ts: Optional[datetime], boundary: WindowBoundary) -> bool:
        if boundary == WindowBoundary.BACKEND:
            return True
        if ts is None:
            return False
        return self.since <= ts < self.until


__all__ = [
    "EPOCH",
    "Annotation",
    "ClassifiedSpan",
    "Endpoint",
    "RenderOptions",
    "Span",
    "TimeWindow",
    "WindowBoundary",
    "datetime_to_millis",
    "micros_to_datetime",
]
