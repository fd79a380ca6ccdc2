from __future__ import annotations

import os
import pathlib
from typing import Optional

from ..core.errors import ConfigError
from .base import SEPARATOR, ResourceConnection


class LocalConnection(ResourceConnection):
    def __init__(self, path: pathlib.Path) -> None:
        self.path = path
        self._closed = False

    def _stat(self) -> Optional[os.stat_result]:
        # A closed connection reports the resource as gone
        if self._closed:
            return None
        try:
            return self.path.stat()
        except FileNotFoundError:
            return None

    def exists(self) -> bool:
        return self._stat() is not None

    def last_modified(self) -> int:
        st = self._stat()
        if st is None:
            return 0
        return st.st_mtime_ns // 1_000_000

    def length(self) -> int:
        st = self._stat()
        if st is None or self.path.is_dir():
            return -1
        return st.st_size

    def local_file(self) -> Optional[pathlib.Path]:
        if self._stat() is None:
            raise FileNotFoundError(str(self.path))
        return self.path

    def close(self) -> None:
        self._closed = True


class LocalResource:
    def __init__(self, store: "LocalResourceStore", path: str) -> None:
        self.store = store
        self.path = path

    def open(self) -> LocalConnection:
        return LocalConnection(self.store.file_for(self.path))


class LocalResourceStore:
    """Resources served from a directory on the local filesystem."""

    def __init__(self, *, name: str, root: str) -> None:
        self.name = name
        self.root = os.path.abspath(root)

    def file_for(self, path: str) -> pathlib.Path:
        rel = path.lstrip(SEPARATOR)
        candidate = pathlib.Path(self.root, *[p for p in rel.split(SEPARATOR) if p])
        # Keep lookups inside the store root
        resolved = candidate.resolve()
        root = pathlib.Path(self.root).resolve()
        if resolved != root and root not in resolved.parents:
            raise ConfigError(f"{self.name}: path escapes store root: {path}")
        return candidate

    def get_resource(self, path: str) -> LocalResource:
        return LocalResource(self, path)

    def __repr__(self) -> str:
        return f"LocalResourceStore(name={self.name!r}, root={self.root!r})"


__all__ = ["LocalConnection", "LocalResource", "LocalResourceStore"]
