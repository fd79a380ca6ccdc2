"""Resolve a resource reference to a connection, local file and directory flag."""

from __future__ import annotations

import pathlib
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from ..core.errors import ConfigError
from ..observability.logging import get_logger
from ..resources.base import SEPARATOR, ResourceConnection, ResourceRef, ResourceStore


@dataclass(frozen=True)
class ResolvedResource:
    """What is known about a referenced resource while its connection is open.

    - connection: open connection, None when the store or resource is unavailable
    - local_file: local file backing the resource, if it exists and is local
    - is_directory: from the local file when present, else from the trailing separator
    """

    ref: ResourceRef
    connection: Optional[ResourceConnection]
    local_file: Optional[pathlib.Path]
    is_directory: bool


def _find_local_file(ref: ResourceRef, conn: Optional[ResourceConnection]) -> Optional[pathlib.Path]:
    if conn is None or not conn.exists():
        return None
    try:
        return conn.local_file()
    except FileNotFoundError:
        # Removed between exists() and local_file()
        get_logger().debug("Resource vanished before local file lookup", resource=str(ref))
        return None


def _is_directory(ref: ResourceRef, local_file: Optional[pathlib.Path]) -> bool:
    if local_file is None:
        # In another book or not local: trust the declared shape
        return ref.is_directory_path
    is_directory = local_file.is_dir()
    if is_directory and not ref.is_directory_path:
        raise ConfigError(f"References to directories must end in slash ({SEPARATOR}): {ref}")
    if not is_directory and ref.is_directory_path:
        raise ConfigError(f"References to files may not end in slash ({SEPARATOR}): {ref}")
    return is_directory


@contextmanager
def resolve(store: Optional[ResourceStore], ref: ResourceRef) -> Iterator[ResolvedResource]:
    """Open ``ref`` in ``store`` for the duration of the ``with`` block.

    The connection, when one is opened, is closed exactly once however the
    block exits. Errors from the store lookup or from opening propagate.
    """
    resource = store.get_resource(ref.path) if store is not None else None
    conn = resource.open() if resource is not None else None
    try:
        local_file = _find_local_file(ref, conn)
        yield ResolvedResource(
            ref=ref,
            connection=conn,
            local_file=local_file,
            is_directory=_is_directory(ref, local_file),
        )
    finally:
        if conn is not None:
            conn.close()


__all__ = ["ResolvedResource", "resolve"]
