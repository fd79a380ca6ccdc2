"""Optional OpenTelemetry spans around file link renders.

Spans are only recorded after :func:`enable_tracing` and when the
``opentelemetry`` SDK is installed; otherwise every call is a no-op.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

try:
    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
    from opentelemetry.trace import Status, StatusCode
    OPENTELEMETRY_AVAILABLE = True
except ImportError:
    OPENTELEMETRY_AVAILABLE = False


class FilelinkTracer:
    def __init__(self, enabled: bool = False, service_name: str = "filelink"):
        self.service_name = service_name
        self.tracer = None
        if enabled and OPENTELEMETRY_AVAILABLE:
            provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
            provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            trace.set_tracer_provider(provider)
            self.tracer = trace.get_tracer(service_name)

    @property
    def enabled(self) -> bool:
        return self.tracer is not None

    @contextmanager
    def span(self, name: str, attributes: Optional[Dict[str, Any]] = None) -> Iterator[Any]:
        """Record ``name`` as the current span; yields None when disabled."""
        if self.tracer is None:
            yield None
            return
        with self.tracer.start_as_current_span(
            name,
            attributes={k: str(v) for k, v in (attributes or {}).items()},
            record_exception=True,
            set_status_on_exception=False,
        ) as span:
            try:
                yield span
            except Exception as exc:
                span.set_status(Status(StatusCode.ERROR, str(exc)))
                raise

    def set_attribute(self, key: str, value: Any) -> None:
        if self.tracer is None:
            return
        current = trace.get_current_span()
        if current.is_recording():
            current.set_attribute(key, str(value))


_filelink_tracer: Optional[FilelinkTracer] = None


def get_tracer() -> FilelinkTracer:
    """Return the process tracer, disabled until :func:`enable_tracing`."""
    global _filelink_tracer
    if _filelink_tracer is None:
        _filelink_tracer = FilelinkTracer()
    return _filelink_tracer


def enable_tracing(service_name: str = "filelink") -> None:
    global _filelink_tracer
    _filelink_tracer = FilelinkTracer(enabled=True, service_name=service_name)


def set_trace_attribute(key: str, value: Any) -> None:
    get_tracer().set_attribute(key, value)
