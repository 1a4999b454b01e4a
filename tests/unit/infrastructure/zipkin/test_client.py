import json
from unittest.mock import MagicMock

import pytest
import requests

from eventtrace.core.config import Settings
from eventtrace.core.errors import BackendConnectionError
from eventtrace.infrastructure.zipkin.client import ZipkinConnection

ENDPOINT = "http://zipkin.istio-system.svc.cluster.local:9411/api/v2/spans"
BASE = "http://zipkin.istio-system.svc.cluster.local:9411"


def _response(payload, status=200, raw=None):
    resp = requests.Response()
    resp.status_code = status
    resp._content = raw if raw is not None else json.dumps(payload).encode("utf-8")
    resp.url = BASE
    return resp


def _connection(*responses, **kwargs):
    session = MagicMock()
    session.get.side_effect = list(responses)
    return ZipkinConnection(ENDPOINT, session=session, **kwargs), session


TRACE_PAYLOAD = [
    [
        {
            "traceId": "5af7183fb1d4cf5f",
            "id": "6b221d5bc9e6496c",
            "name": "broker-ingress",
            "timestamp": 1_715_941_800_000_000,
            "duration": 1200,
            "localEndpoint": {"serviceName": "broker-ingress.knative-eventing"},
            "tags": {"cloudevents.id": "1"},
        },
        {"traceId": "5af7183fb1d4cf5f", "id": "352bff9a74ca9ad2", "name": "dispatch"},
    ],
    [],
]


class TestBaseUrl:
    @pytest.mark.parametrize(
        "endpoint",
        [
            ENDPOINT,
            ENDPOINT + "/",
            BASE,
            BASE + "/",
        ],
    )
    def test_collector_path_is_stripped(self, endpoint):
        assert ZipkinConnection(endpoint, session=MagicMock()).base_url == BASE


class TestServices:
    def test_lists_services(self):
        conn, session = _connection(_response(["activator", "broker-ingress"]))

        assert conn.services() == ["activator", "broker-ingress"]
        session.get.assert_called_once_with(
            f"{BASE}/api/v2/services", params=None, timeout=10.0
        )

    def test_http_error_raises_connection_error(self):
        conn, _ = _connection(_response({"error": "boom"}, status=503))

        with pytest.raises(BackendConnectionError) as exc:
            conn.services()

        assert exc.value.status_code == 503
        assert exc.value.url == f"{BASE}/api/v2/services"
        assert isinstance(exc.value, ConnectionError)

    def test_transport_error_raises_connection_error(self):
        conn, _ = _connection(requests.ConnectionError("refused"))

        with pytest.raises(BackendConnectionError) as exc:
            conn.services()

        assert "refused" in str(exc.value)
        assert exc.value.status_code is None

    def test_invalid_json_raises_connection_error(self):
        conn, _ = _connection(_response(None, raw=b"<html>not json</html>"))

        with pytest.raises(BackendConnectionError):
            conn.services()

    def test_unexpected_payload_raises_connection_error(self):
        conn, _ = _connection(_response({"services": ["a"]}))

        with pytest.raises(BackendConnectionError):
            conn.services()


class TestSpans:
    def test_queries_window_and_parses_traces(self):
        conn, session = _connection(_response(TRACE_PAYLOAD), query_limit=50)

        traces = conn.spans("broker-ingress", 1_715_941_800_000, 1000)

        session.get.assert_called_once_with(
            f"{BASE}/api/v2/traces",
            params={
                "serviceName": "broker-ingress",
                "endTs": 1_715_941_800_000,
                "lookback": 1000,
                "limit": 50,
            },
            timeout=10.0,
        )
        assert len(traces) == 2
        assert [s.id for s in traces[0]] == ["6b221d5bc9e6496c", "352bff9a74ca9ad2"]
        assert traces[0][0].tags == {"cloudevents.id": "1"}
        assert traces[0][1].start_time is None
        assert traces[1] == []

    def test_malformed_traces_raise_connection_error(self):
        conn, _ = _connection(_response([[{"name": "no ids"}]]))

        with pytest.raises(BackendConnectionError) as exc:
            conn.spans("svc", 0, 0)

        assert "svc" in str(exc.value)

    def test_timeout_raises_connection_error(self):
        conn, _ = _connection(requests.Timeout("read timed out"))

        with pytest.raises(BackendConnectionError):
            conn.spans("svc", 0, 0)


class TestLifecycle:
    def test_from_settings(self):
        config = Settings(
            zipkin_endpoint=ENDPOINT, http_timeout_seconds=2.5, query_limit=10
        )

        conn = ZipkinConnection.from_settings(config)
        try:
            assert conn.base_url == BASE
            assert conn.timeout == 2.5
            assert conn.query_limit == 10
        finally:
            conn.close()

    def test_owned_session_closed_on_exit(self, monkeypatch):
        session = MagicMock()
        monkeypatch.setattr(requests, "Session", lambda: session)

        with ZipkinConnection(ENDPOINT):
            pass

        session.close.assert_called_once()

    def test_injected_session_left_open(self):
        session = MagicMock()

        with ZipkinConnection(ENDPOINT, session=session):
            pass

        session.close.assert_not_called()
