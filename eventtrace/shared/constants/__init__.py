from .tags import CloudEventTags
from .zipkin import ZipkinPaths

__all__ = ["CloudEventTags", "ZipkinPaths"]
