class ZipkinPaths:
    """Centralised Zipkin HTTP API v2 path definitions"""

    API_ROOT = "/api/v2"
    SERVICES = API_ROOT + "/services"
    TRACES = API_ROOT + "/traces"
    # Collector path published in knative's config-tracing ConfigMap
    SPANS = API_ROOT + "/spans"

    @classmethod
    def base_url(cls, endpoint: str) -> str:
        """Strip the collector path and trailing slashes from an endpoint."""
        base = endpoint.strip().rstrip("/")
        if base.endswith(cls.SPANS):
            base = base[: -len(cls.SPANS)]
        return base.rstrip("/")
