from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .resources.base import ResourceRef, ResourceStore


@dataclass(eq=False)
class FileElement:
    """A file reference placed on a page.

    - resource: the store (None when the book is inaccessible) and reference
    - id: optional element id, made page-unique by :class:`PageIndex`
    - body: caller-supplied markup replacing the default label
    """

    resource: Optional[Tuple[Optional[ResourceStore], ResourceRef]]
    id: Optional[str] = None
    body: Optional[str] = None
    hidden: bool = False
    page: Optional["Page"] = None

    def __str__(self) -> str:
        ref = self.resource[1] if self.resource else None
        return f"FileElement(ref={ref}, id={self.id!r})"


@dataclass(eq=False)
class Page:
    path: str
    elements: List[object] = field(default_factory=list)
    children: List["Page"] = field(default_factory=list)
    # Pages in books this site cannot read are not traversed
    accessible: bool = True

    def add(self, element: FileElement) -> FileElement:
        element.page = self
        self.elements.append(element)
        return element


def has_file(page: Page, recursive: bool = False) -> bool:
    """Whether ``page`` (or any accessible descendant) has a visible file element."""
    seen: set[int] = set()
    pending = [page]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if any(isinstance(e, FileElement) and not e.hidden for e in current.elements):
            return True
        if recursive:
            pending.extend(child for child in current.children if child.accessible)
    return False


class PageIndex:
    """Numbering of pages combined into a single document.

    Element ids only need to be unique per page, so in a combined document
    they are qualified with the page number.
    """

    def __init__(self, pages: Iterable[Page]) -> None:
        self._pages = list(pages)

    def index_of(self, page: Optional[Page]) -> Optional[int]:
        for idx, candidate in enumerate(self._pages):
            if candidate is page:
                return idx
        return None

    def ref_id_in_page(self, page: Optional[Page], element_id: str) -> str:
        idx = self.index_of(page)
        if idx is None:
            return element_id
        return f"page{idx}-{element_id}"


__all__ = ["FileElement", "Page", "PageIndex", "has_file"]
