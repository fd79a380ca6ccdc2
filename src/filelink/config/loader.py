from __future__ import annotations

import os
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from ..core.errors import ConfigError
from .models import FilelinkConfig

ENV_PREFIX = "FILELINK_"


def _parse_scalar(value: str) -> Any:
    v = value.strip()
    if v.lower() in {"true", "false"}:
        return v.lower() == "true"
    try:
        if "." in v:
            return float(v)
        return int(v)
    except ValueError:
        return value


def _set_by_path(data: dict, path: list[str], value: Any) -> None:
    """Set a nested value, treating numeric segments as list indices.

    ``FILELINK_BOOKS__0__STORE__ROOT`` therefore lands in ``books[0].store.root``.
    """
    cur: Any = data
    for key, next_key in zip(path[:-1], path[1:]):
        want_list = next_key.isdigit()
        if isinstance(cur, list):
            if not key.isdigit():
                raise ConfigError(f"Expected a list index, got {key!r} in {'.'.join(path)}")
            idx = int(key)
            while len(cur) <= idx:
                cur.append([] if want_list else {})
            if not isinstance(cur[idx], (list, dict)):
                cur[idx] = [] if want_list else {}
            cur = cur[idx]
            continue
        child = cur.get(key)
        if want_list and not isinstance(child, list):
            cur[key] = []
        elif not want_list and not isinstance(child, dict):
            cur[key] = {}
        cur = cur[key]

    leaf = path[-1]
    if isinstance(cur, list):
        if not leaf.isdigit():
            raise ConfigError(f"Expected a list index, got {leaf!r} in {'.'.join(path)}")
        idx = int(leaf)
        while len(cur) <= idx:
            cur.append(None)
        cur[idx] = value
    else:
        cur[leaf] = value


def _apply_env_overrides(cfg: dict, env: Mapping[str, str]) -> None:
    for k, v in env.items():
        if not k.startswith(ENV_PREFIX) or k == f"{ENV_PREFIX}PROFILE":
            continue
        keypath = [p for p in k[len(ENV_PREFIX) :].lower().split("__") if p]
        if not keypath:
            continue
        _set_by_path(cfg, keypath, _parse_scalar(v))


def _parse_set_item(item: str) -> tuple[list[str], Any]:
    """Parse a single --set "key.path=value" string.

    The value is read with YAML so lists and booleans keep their types.
    """
    if "=" not in item:
        raise ConfigError(f"Invalid --set override (missing '='): {item!r}")
    key, raw = item.split("=", 1)
    path = [p for p in key.strip().split(".") if p]
    if not path:
        raise ConfigError(f"Invalid --set override (empty key path): {item!r}")
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        value = _parse_scalar(raw)
    return path, value


def parse_set_overrides(sets: list[str] | None) -> dict[str, Any]:
    """Convert a list of --set items into a nested dict suitable for deep merging."""
    result: dict[str, Any] = {}
    for item in sets or []:
        path, value = _parse_set_item(item)
        _set_by_path(result, path, value)
    return result


def _deep_merge(dst: dict, src: dict) -> dict:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _deep_merge(dst[k], v)
        else:
            dst[k] = v
    return dst


def _apply_profile(cfg: dict, env: Mapping[str, str]) -> None:
    """Merge the active profile overlay into cfg.

    The active profile is ``profiles.active``, then ``FILELINK_PROFILE``,
    then ``run_profile``.
    """
    profiles = cfg.get("profiles")
    if not isinstance(profiles, dict):
        return
    active = profiles.get("active") or env.get(f"{ENV_PREFIX}PROFILE") or cfg.get("run_profile")
    if not active:
        return
    overlay = profiles.get(active)
    if isinstance(overlay, dict):
        _deep_merge(cfg, overlay)


def load_config(
    path: str | None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: dict[str, Any] | None = None,
    set_overrides: list[str] | None = None,
) -> FilelinkConfig:
    """Load config from YAML with env, dict and --set overrides.

    ``path`` may be None to build a config purely from overrides.
    """
    data: dict[str, Any] = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")
        data = loaded

    if env is None:
        env = os.environ
    _apply_env_overrides(data, env)

    if overrides:
        _deep_merge(data, overrides)

    # Highest precedence: explicit --set overrides
    if set_overrides:
        _deep_merge(data, parse_set_overrides(set_overrides))

    _apply_profile(data, env)

    try:
        return FilelinkConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


__all__ = [
    "ENV_PREFIX",
    "load_config",
    "parse_set_overrides",
]
