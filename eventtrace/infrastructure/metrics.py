from eventtrace.shared.metrics import get_counter, get_gauge, get_histogram

SERVICE = "kn_event_trace"

# Polling
POLL_CYCLES_TOTAL = get_counter(
    "poll_cycles_total", "Completed poll cycles.", SERVICE
)
POLL_WINDOW_LOOKBACK_MS = get_gauge(
    "poll_window_lookback_ms", "Lookback of the most recent poll window.", SERVICE
)

# Fan-out fetch
SPANS_FETCHED_TOTAL = get_counter(
    "spans_fetched_total", "Spans returned by the backend (pre-filter).", SERVICE
)
SPANS_EMITTED_TOTAL = get_counter(
    "spans_emitted_total", "Spans that passed the filter and were rendered.", SERVICE
)
FETCH_ERRORS_TOTAL = get_counter(
    "fetch_errors_total", "Fetch cycles aborted by a backend error.", SERVICE
)

# Zipkin HTTP
ZIPKIN_REQUEST_LATENCY_SECONDS = get_histogram(
    "zipkin_request_latency_seconds", "Latency of Zipkin query API calls.", SERVICE
)
