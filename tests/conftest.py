from datetime import datetime, timezone

import pytest

from eventtrace.core.errors import BackendConnectionError
from eventtrace.domain.models import Span

# 2024-05-17T10:30:00Z in microseconds
BASE_TS_MICROS = 1_715_941_800_000_000


class FakeConnection:
    """In-memory stand-in for ZipkinConnection.

    ``traces_by_service`` maps a service name to its list of traces (each a
    list of spans). Every call is recorded in ``calls``.
    """

    def __init__(self, traces_by_service=None, fail_services=False, fail_on=None):
        self.traces_by_service = traces_by_service or {}
        self.fail_services = fail_services
        self.fail_on = set(fail_on or ())
        self.calls = []

    def services(self):
        self.calls.append(("services",))
        if self.fail_services:
            raise BackendConnectionError("zipkin unreachable", url="http://zipkin")
        return list(self.traces_by_service)

    def spans(self, service, end_ts_millis, lookback_millis):
        self.calls.append(("spans", service, end_ts_millis, lookback_millis))
        if service in self.fail_on:
            raise BackendConnectionError(
                f"zipkin rejected {service}", url="http://zipkin", status_code=500
            )
        return self.traces_by_service[service]


@pytest.fixture
def make_span():
    """Factory building Span models from wire-format keyword arguments."""
    counter = {"n": 0}

    def _make(tags=None, timestamp=BASE_TS_MICROS, **fields):
        counter["n"] += 1
        payload = {
            "traceId": fields.pop("traceId", "5af7183fb1d4cf5f"),
            "id": fields.pop("id", f"{counter['n']:016x}"),
            "name": fields.pop("name", "http:/"),
            "timestamp": timestamp,
            "duration": fields.pop("duration", 1500),
            "tags": tags if tags is not None else {},
        }
        payload.update(fields)
        return Span.model_validate(payload)

    return _make


@pytest.fixture
def event_tags():
    return {
        "cloudevents.source": "/apis/v1/namespaces/default/pingsources/ping",
        "cloudevents.id": "b6a3f0e2-0d1c-4c39-9c5b-7e2f8f1f2c11",
        "cloudevents.type": "dev.knative.sources.ping",
    }


@pytest.fixture
def fake_connection_cls():
    return FakeConnection


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 17, 10, 30, tzinfo=timezone.utc)
