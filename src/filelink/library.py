from __future__ import annotations

from typing import Dict, Optional, Tuple

from .config.models import BookConfig, FilelinkConfig
from .core.errors import ConfigError
from .observability.logging import log_store_summary
from .pages import FileElement, Page
from .resources import build_store
from .resources.base import DEFAULT_DOMAIN, SEPARATOR, BookRef, ResourceRef, ResourceStore


class Library:
    """Books known to this site and the stores serving them.

    A book mapped to None is known but inaccessible; its references render
    from the path alone.
    """

    def __init__(self, books: Optional[Dict[BookRef, Optional[ResourceStore]]] = None) -> None:
        self._books: Dict[BookRef, Optional[ResourceStore]] = dict(books or {})

    @classmethod
    def from_config(cls, cfg: FilelinkConfig) -> "Library":
        library = cls()
        for book in cfg.books:
            library.add_book(book)
        return library

    def add_book(self, book: BookConfig) -> BookRef:
        book_ref = BookRef(domain=book.domain, path=book.path)
        store = None
        if book.accessible and book.store is not None:
            store = build_store(book.store, name=str(book_ref))
        self._books[book_ref] = store
        log_store_summary(str(book_ref), book.store.type if store is not None else None)
        return book_ref

    def bind(self, book_ref: BookRef, store: Optional[ResourceStore]) -> None:
        self._books[book_ref] = store

    def store_for(self, book_ref: BookRef) -> Optional[ResourceStore]:
        try:
            return self._books[book_ref]
        except KeyError as exc:
            raise ConfigError(f"Book not found: {book_ref}") from exc

    def resource(
        self,
        path: str,
        *,
        book: str = SEPARATOR,
        domain: str = DEFAULT_DOMAIN,
    ) -> Tuple[Optional[ResourceStore], ResourceRef]:
        book_ref = BookRef(domain=domain, path=book)
        return self.store_for(book_ref), ResourceRef(book_ref=book_ref, path=path)

    def file(
        self,
        path: str,
        *,
        book: str = SEPARATOR,
        domain: str = DEFAULT_DOMAIN,
        id: Optional[str] = None,
        body: Optional[str] = None,
        page: Optional[Page] = None,
    ) -> FileElement:
        element = FileElement(resource=self.resource(path, book=book, domain=domain), id=id, body=body)
        if page is not None:
            page.add(element)
        return element


__all__ = ["Library"]
