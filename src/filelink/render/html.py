"""HTML output for link descriptors, rendered through autoescaping Jinja2."""

from __future__ import annotations

import json
from typing import TextIO

from jinja2 import BaseLoader, Environment, StrictUndefined

from .decision import LinkDescriptor

OPEN_FILE_HANDLER = "filelink_openfile.openFile"

_ENV = Environment(loader=BaseLoader(), autoescape=True, undefined=StrictUndefined)

_LINK_TEMPLATE = _ENV.from_string(
    "<a"
    "{% if link.element_id is not none %} id=\"{{ link.element_id }}\"{% endif %}"
    "{% if link.css_class %} class=\"{{ link.css_class }}\"{% endif %}"
    " href=\"{{ link.href }}\""
    "{% if onclick %} onclick=\"{{ onclick }}\"{% endif %}"
    ">"
    "{% if link.body is not none %}{{ link.body|safe }}{% else %}{{ link.label }}{% endif %}"
    "</a>"
    "{{ link.size_suffix }}"
)


def _onclick(link: LinkDescriptor) -> str:
    target = link.open_file
    if target is None:
        return ""
    args = ", ".join(json.dumps(v) for v in (target.domain, target.book, target.path))
    return f"{OPEN_FILE_HANDLER}({args}); return false;"


def render_link(link: LinkDescriptor) -> str:
    return _LINK_TEMPLATE.render(link=link, onclick=_onclick(link))


def write_link(link: LinkDescriptor, out: TextIO) -> None:
    out.write(render_link(link))


__all__ = ["OPEN_FILE_HANDLER", "render_link", "write_link"]
