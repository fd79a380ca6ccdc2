"""Resource stores.

Includes the reference/connection types and a factory to create stores from config.
"""

from .base import (
    DEFAULT_DOMAIN,
    SEPARATOR,
    BookRef,
    Resource,
    ResourceConnection,
    ResourceRef,
    ResourceStore,
    filename_from_path,
)


def _cfg_get(cfg: object | None, key: str, default=None):
    if cfg is None:
        return default
    if isinstance(cfg, dict):
        return cfg.get(key, default)
    return getattr(cfg, key, default)


def build_store(cfg: object, *, name: str | None = None) -> ResourceStore:
    """Build a store from a config model or dict with a 'type' field."""
    stype = _cfg_get(cfg, "type")
    name = name or _cfg_get(cfg, "name") or stype
    if stype == "local":
        from .local import LocalResourceStore

        return LocalResourceStore(name=name, root=_cfg_get(cfg, "root") or ".")
    if stype == "s3":
        from .s3 import S3ResourceStore

        return S3ResourceStore(
            name=name,
            bucket=_cfg_get(cfg, "bucket"),
            prefix=_cfg_get(cfg, "prefix"),
            region=_cfg_get(cfg, "region"),
        )
    raise ValueError(f"Unsupported store type: {stype!r}")


__all__ = [
    "DEFAULT_DOMAIN",
    "SEPARATOR",
    "BookRef",
    "ResourceRef",
    "Resource",
    "ResourceConnection",
    "ResourceStore",
    "filename_from_path",
    "build_store",
]
