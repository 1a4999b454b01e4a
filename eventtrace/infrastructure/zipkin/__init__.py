from .client import ZipkinConnection

__all__ = ["ZipkinConnection"]
