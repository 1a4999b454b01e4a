"""Incremental Zipkin polling and CloudEvents span filtering for Knative."""

__version__ = "0.1.0"
