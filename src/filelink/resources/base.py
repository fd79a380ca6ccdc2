from __future__ import annotations

import pathlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.errors import ConfigError

SEPARATOR = "/"

DEFAULT_DOMAIN = "localhost"


def _check_path(kind: str, path: str) -> None:
    if not path.startswith(SEPARATOR):
        raise ConfigError(f"{kind} path must start with {SEPARATOR!r}: {path!r}")
    if "//" in path:
        raise ConfigError(f"{kind} path may not contain empty segments: {path!r}")


@dataclass(frozen=True)
class BookRef:
    """A book within a domain.

    - domain: top-level namespace grouping books
    - path: book path, ``/`` for the root book
    """

    domain: str
    path: str = SEPARATOR

    def __post_init__(self) -> None:
        if not self.domain:
            raise ConfigError("Book domain may not be empty")
        _check_path("Book", self.path)
        if self.path != SEPARATOR and self.path.endswith(SEPARATOR):
            raise ConfigError(f"Book path may not end in {SEPARATOR!r}: {self.path!r}")

    @property
    def prefix(self) -> str:
        """URL prefix of resources in this book; empty for the root book."""
        return "" if self.path == SEPARATOR else self.path

    def __str__(self) -> str:
        return f"{self.domain}:{self.path}"


@dataclass(frozen=True)
class ResourceRef:
    """A resource path within a book.

    A trailing separator declares the reference names a directory.
    """

    book_ref: BookRef
    path: str

    def __post_init__(self) -> None:
        _check_path("Resource", self.path)

    @property
    def is_directory_path(self) -> bool:
        return self.path.endswith(SEPARATOR)

    def __str__(self) -> str:
        return f"{self.book_ref.domain}:{self.book_ref.prefix}{self.path}"


def filename_from_path(path: str) -> str:
    """Return the final segment of ``path``, ignoring one trailing separator."""
    if path.endswith(SEPARATOR):
        slash_before = path.rfind(SEPARATOR, 0, len(path) - 1)
        filename = path[slash_before + 1 : -1]
    else:
        filename = path[path.rfind(SEPARATOR) + 1 :]
    if not filename:
        raise ConfigError(f"Invalid filename for file: {path}")
    return filename


class ResourceConnection(ABC):
    """A live handle on a resource.

    Connections are opened by :meth:`Resource.open` and must be closed exactly
    once by whoever opened them.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Whether the resource currently exists."""

    def last_modified(self) -> int:
        """Milliseconds since the epoch, ``0`` when unknown."""
        return 0

    def length(self) -> int:
        """Size in bytes, ``-1`` when unknown."""
        return -1

    def local_file(self) -> Optional[pathlib.Path]:
        """Local file backing this resource, if any.

        Raises ``FileNotFoundError`` when the file disappeared after
        :meth:`exists` reported it.
        """
        return None

    @abstractmethod
    def close(self) -> None:
        """Release the connection."""

    def __enter__(self) -> "ResourceConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Resource(Protocol):
    path: str

    def open(self) -> ResourceConnection:  # pragma: no cover - implemented by stores
        """Connect to the resource; may raise ``OSError``."""


class ResourceStore(Protocol):
    """Provider of resources for one book."""

    name: str

    def get_resource(self, path: str) -> Optional[Resource]:  # pragma: no cover - implemented by stores
        """Look up ``path``; the returned resource need not exist."""


__all__ = [
    "SEPARATOR",
    "DEFAULT_DOMAIN",
    "BookRef",
    "ResourceRef",
    "filename_from_path",
    "ResourceConnection",
    "Resource",
    "ResourceStore",
]
