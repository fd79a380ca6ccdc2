from __future__ import annotations

import threading
from typing import Dict


_COUNTERS: Dict[str, float] = {}
_LOCK = threading.Lock()


def inc(name: str, value: float = 1.0) -> None:
    with _LOCK:
        _COUNTERS[name] = _COUNTERS.get(name, 0.0) + value


def set_value(name: str, value: float) -> None:
    with _LOCK:
        _COUNTERS[name] = float(value)


def get(name: str) -> float:
    return _COUNTERS.get(name, 0.0)


def get_all(prefix: str = "") -> Dict[str, float]:
    with _LOCK:
        return {k: v for k, v in _COUNTERS.items() if k.startswith(prefix)}


def clear() -> None:
    with _LOCK:
        _COUNTERS.clear()


__all__ = ["inc", "set_value", "get", "get_all", "clear"]
