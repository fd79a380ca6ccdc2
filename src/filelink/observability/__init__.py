"""Observability module for filelink renders."""

from .logging import (
    FilelinkLogger,
    get_logger,
    set_verbose,
    log_config_fingerprint,
    log_store_summary,
    log_timing,
)
from .tracing import (
    FilelinkTracer,
    get_tracer,
    set_trace_attribute,
    enable_tracing,
)

__all__ = [
    "FilelinkLogger",
    "get_logger",
    "set_verbose",
    "log_config_fingerprint",
    "log_store_summary",
    "log_timing",
    "FilelinkTracer",
    "get_tracer",
    "set_trace_attribute",
    "enable_tracing",
]
