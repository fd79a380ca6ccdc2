from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from ..config.models import (
    EXPORTING_HEADER_NAME,
    LAST_MODIFIED_HEADER_NAME,
    LAST_MODIFIED_PARAMETER_NAME,
    RenderConfig,
)
from ..pages import FileElement, Page, PageIndex
from .policy import OpenFileGate, get_gate

# Header value that turns off last-modified tagging for a request
LAST_MODIFIED_DISABLED = "false"


def _identity(url: str) -> str:
    return url


def _no_css_class(element: FileElement) -> Optional[str]:
    return None


@dataclass
class RenderEnv:
    """Per-request environment for rendering file links.

    - context_path: prefix prepended to every book URL
    - exporting: static export in progress; disables local-open links
    - headers: request headers, looked up case-insensitively
    - request: passed through to the open-file provider
    - encode_url: URL rewriting hook (session ids and the like)
    """

    context_path: str = ""
    exporting: bool = False
    headers: Mapping[str, str] = field(default_factory=dict)
    request: Any = None
    gate: Optional[OpenFileGate] = None
    encode_url: Callable[[str], str] = _identity
    link_css_class: Callable[[FileElement], Optional[str]] = _no_css_class
    page_index: Optional[PageIndex] = None
    last_modified_param: str = LAST_MODIFIED_PARAMETER_NAME
    last_modified_header: str = LAST_MODIFIED_HEADER_NAME

    @classmethod
    def from_config(
        cls,
        cfg: RenderConfig,
        *,
        headers: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "RenderEnv":
        headers = dict(headers or {})
        kwargs: dict[str, Any] = {
            "context_path": cfg.context_path,
            "headers": headers,
            "exporting": (_lookup(headers, cfg.exporting_header or EXPORTING_HEADER_NAME) or "").lower() == "true",
            "last_modified_param": cfg.last_modified_param,
            "last_modified_header": cfg.last_modified_header,
        }
        if cfg.link_css_class:
            css_class = cfg.link_css_class
            kwargs["link_css_class"] = lambda element: css_class
        kwargs.update(overrides)
        return cls(**kwargs)

    def header(self, name: str) -> Optional[str]:
        return _lookup(self.headers, name)

    @property
    def last_modified_disabled(self) -> bool:
        value = self.header(self.last_modified_header)
        return value is not None and value.lower() == LAST_MODIFIED_DISABLED

    def is_open_file_allowed(self) -> bool:
        return (self.gate or get_gate()).is_allowed(self.request)

    def ref_id_in_page(self, page: Optional[Page], element_id: str) -> str:
        if self.page_index is None:
            return element_id
        return self.page_index.ref_id_in_page(page, element_id)


def _lookup(headers: Mapping[str, str], name: str) -> Optional[str]:
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


__all__ = ["LAST_MODIFIED_DISABLED", "RenderEnv"]
