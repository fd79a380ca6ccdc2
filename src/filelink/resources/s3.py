from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from ..core.errors import StoreError
from .base import SEPARATOR, ResourceConnection

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_not_found(exc: Exception) -> bool:
    response = getattr(exc, "response", None)
    if not isinstance(response, dict):
        return False
    code = str(response.get("Error", {}).get("Code", ""))
    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return code in _NOT_FOUND_CODES or status == 404


class S3Connection(ResourceConnection):
    """Connection to an S3 object; never backed by a local file.

    The object's metadata is fetched once, on first query.
    """

    def __init__(self, store: "S3ResourceStore", key: str) -> None:
        self.store = store
        self.key = key
        self._head: Optional[dict[str, Any]] = None
        self._fetched = False

    def _fetch(self) -> Optional[dict[str, Any]]:
        if self._fetched:
            return self._head
        client = self.store.client()
        if self.key.endswith(SEPARATOR):
            resp = client.list_objects_v2(Bucket=self.store.bucket, Prefix=self.key, MaxKeys=1)
            self._head = {} if resp.get("KeyCount") or resp.get("Contents") else None
        else:
            try:
                self._head = client.head_object(Bucket=self.store.bucket, Key=self.key)
            except Exception as exc:
                if not _is_not_found(exc):
                    raise StoreError(f"{self.store.name}: head_object failed for {self.key}: {exc}") from exc
                self._head = None
        self._fetched = True
        return self._head

    def exists(self) -> bool:
        return self._fetch() is not None

    def last_modified(self) -> int:
        head = self._fetch() or {}
        modified = head.get("LastModified")
        if not isinstance(modified, dt.datetime):
            return 0
        if modified.tzinfo is None:
            modified = modified.replace(tzinfo=dt.timezone.utc)
        return int(modified.timestamp() * 1000)

    def length(self) -> int:
        head = self._fetch() or {}
        size = head.get("ContentLength")
        return int(size) if size is not None else -1

    def close(self) -> None:
        self._head = None
        self._fetched = True


class S3Resource:
    def __init__(self, store: "S3ResourceStore", path: str) -> None:
        self.store = store
        self.path = path

    def open(self) -> S3Connection:
        return S3Connection(self.store, self.store.key_for(self.path))


class S3ResourceStore:
    def __init__(
        self,
        *,
        name: str,
        bucket: str,
        prefix: Optional[str] = None,
        region: Optional[str] = None,
    ) -> None:
        self.name = name
        self.bucket = bucket
        self.prefix = prefix or ""
        if self.prefix and not self.prefix.endswith(SEPARATOR):
            # Normalize to directory-like prefix
            self.prefix += SEPARATOR
        self.region = region
        self._client = None

    def client(self):
        if self._client is not None:
            return self._client
        try:
            import boto3  # type: ignore
        except Exception as e:  # pragma: no cover - import failure
            raise StoreError("boto3 not installed. Install extras: pip install '.[aws]'") from e
        self._client = boto3.client("s3", region_name=self.region)
        return self._client

    def key_for(self, path: str) -> str:
        return self.prefix + path.lstrip(SEPARATOR)

    def get_resource(self, path: str) -> S3Resource:
        return S3Resource(self, path)

    def __repr__(self) -> str:
        return f"S3ResourceStore(name={self.name!r}, bucket={self.bucket!r}, prefix={self.prefix!r})"


__all__ = ["S3Connection", "S3Resource", "S3ResourceStore"]
