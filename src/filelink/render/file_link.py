from __future__ import annotations

from typing import Optional, TextIO

from ..core.errors import ConfigError
from ..observability import metrics
from ..observability.logging import get_logger
from ..observability.tracing import get_tracer, set_trace_attribute
from ..pages import FileElement
from .connector import resolve
from .decision import LinkDescriptor, decide
from .env import RenderEnv
from .html import write_link


def render_file_link(
    element: FileElement,
    env: RenderEnv,
    out: Optional[TextIO] = None,
) -> Optional[LinkDescriptor]:
    """Render ``element`` as a link into ``out``.

    When ``out`` is None the resource is still resolved and checked, and its
    connection opened and closed, but nothing is produced.

    Nothing is written for a reference that fails validation.
    """
    if element.resource is None:
        raise ConfigError(f"Resource not set on file: {element}")
    store, ref = element.resource
    metrics.inc("render.total")
    try:
        with get_tracer().span("filelink.render_file_link", {"resource": str(ref)}):
            with resolve(store, ref) as resolved:
                if out is None:
                    metrics.inc("render.validate_only")
                    return None
                link = decide(
                    resolved,
                    element,
                    env,
                    open_file_allowed=env.is_open_file_allowed(),
                )
            set_trace_attribute("link.mode", link.mode.value)
            write_link(link, out)
    except Exception as exc:
        metrics.inc("render.errors")
        get_logger().debug("File link render failed", resource=str(ref), error=str(exc))
        raise
    metrics.inc(f"render.mode.{link.mode.value}")
    return link


__all__ = ["render_file_link"]
