"""Link decision engine: turns a resolved resource into a link descriptor.

Exactly one :class:`LinkMode` is chosen per render, in this order:

1. ``LOCAL_OPEN`` when local opening is allowed, the resource has a local
   file and no export is in progress. The href is the file's own URI and the
   descriptor carries the (domain, book, path) triple for the client-side
   open handler.
2. ``LAST_MODIFIED`` when the resource is a connected, existing,
   non-directory with a known modification time and the request has not
   turned tagging off. The href carries the modification time as a
   cache-busting query parameter.
3. ``PLAIN`` otherwise.
"""

from __future__ import annotations

import enum
import pathlib
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import quote

import humanize

from ..pages import FileElement
from ..resources.base import SEPARATOR, filename_from_path
from .connector import ResolvedResource
from .env import RenderEnv

_RADIX_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

# Reserved and already-escaped characters survive encode_uri untouched
_URI_SAFE = "!#$%&'()*+,/:;=?@[]~"


class LinkMode(str, enum.Enum):
    LOCAL_OPEN = "local_open"
    LAST_MODIFIED = "last_modified"
    PLAIN = "plain"


@dataclass(frozen=True)
class OpenFileTarget:
    domain: str
    book: str
    path: str


@dataclass(frozen=True)
class LinkDescriptor:
    href: str
    mode: LinkMode
    open_file: Optional[OpenFileTarget] = None
    element_id: Optional[str] = None
    css_class: Optional[str] = None
    label: Optional[str] = None
    body: Optional[str] = None
    size: Optional[str] = None

    @property
    def size_suffix(self) -> str:
        return f" ({self.size})" if self.size else ""


def encode_last_modified(last_modified: int) -> str:
    """Whole seconds of a millisecond timestamp, in radix 32."""
    sign = "-" if last_modified < 0 else ""
    seconds = abs(last_modified) // 1000
    if seconds == 0:
        return "0"
    digits = []
    while seconds:
        seconds, rem = divmod(seconds, 32)
        digits.append(_RADIX_DIGITS[rem])
    return sign + "".join(reversed(digits))


def encode_uri(url: str) -> str:
    """Percent-encode characters not allowed in a URI, keeping its structure."""
    return quote(url, safe=_URI_SAFE)


def approximate_size(length: int) -> str:
    return humanize.naturalsize(length, binary=True, format="%.1f")


def select_mode(
    resolved: ResolvedResource,
    env: RenderEnv,
    *,
    open_file_allowed: bool,
) -> Tuple[LinkMode, int]:
    """Pick the link mode; the second item is the last-modified time used, else 0."""
    if open_file_allowed and resolved.local_file is not None and not env.exporting:
        return LinkMode.LOCAL_OPEN, 0
    conn = resolved.connection
    if (
        conn is not None
        and not resolved.is_directory
        and not env.last_modified_disabled
        and conn.exists()
    ):
        last_modified = conn.last_modified()
        if last_modified != 0:
            return LinkMode.LAST_MODIFIED, last_modified
    return LinkMode.PLAIN, 0


def _file_uri(local_file: pathlib.Path, is_directory: bool) -> str:
    """URI of the local file as referenced; symlinks are not followed."""
    uri = local_file.absolute().as_uri()
    if is_directory and not uri.endswith(SEPARATOR):
        uri += SEPARATOR
    return uri


def _href(resolved: ResolvedResource, env: RenderEnv, mode: LinkMode, last_modified: int) -> str:
    if mode is LinkMode.LOCAL_OPEN and resolved.local_file is not None:
        return env.encode_url(_file_uri(resolved.local_file, resolved.is_directory))
    ref = resolved.ref
    url = env.context_path + ref.book_ref.prefix + ref.path
    if mode is LinkMode.LAST_MODIFIED:
        url += f"?{env.last_modified_param}={encode_last_modified(last_modified)}"
    return env.encode_url(encode_uri(url))


def _label(resolved: ResolvedResource) -> str:
    if resolved.local_file is None:
        return filename_from_path(resolved.ref.path)
    name = resolved.local_file.name
    return name + SEPARATOR if resolved.is_directory else name


def _size(resolved: ResolvedResource) -> Optional[str]:
    conn = resolved.connection
    if conn is None or resolved.is_directory or not conn.exists():
        return None
    length = conn.length()
    if length == -1:
        return None
    return approximate_size(length)


def decide(
    resolved: ResolvedResource,
    element: FileElement,
    env: RenderEnv,
    *,
    open_file_allowed: bool,
) -> LinkDescriptor:
    """Build the link descriptor; must run while the connection is open."""
    has_body = bool(element.body)
    mode, last_modified = select_mode(resolved, env, open_file_allowed=open_file_allowed)
    ref = resolved.ref

    open_file = None
    if mode is LinkMode.LOCAL_OPEN:
        open_file = OpenFileTarget(domain=ref.book_ref.domain, book=ref.book_ref.path, path=ref.path)

    element_id = None
    if element.id is not None:
        element_id = env.ref_id_in_page(element.page, element.id)

    return LinkDescriptor(
        href=_href(resolved, env, mode, last_modified),
        mode=mode,
        open_file=open_file,
        element_id=element_id,
        css_class=None if has_body else env.link_css_class(element),
        label=None if has_body else _label(resolved),
        body=element.body if has_body else None,
        size=None if has_body else _size(resolved),
    )


__all__ = [
    "LinkMode",
    "OpenFileTarget",
    "LinkDescriptor",
    "encode_last_modified",
    "encode_uri",
    "approximate_size",
    "select_mode",
    "decide",
]
