"""Decides whether links may open local files on the desktop.

Desktop integration is an optional add-on. The gate probes for it once per
process; when it is missing, that outcome is kept for the life of the process
and later checks answer ``False`` without probing again. When it is present,
its ``is_allowed`` is asked on every call because the answer may depend on the
request.
"""

from __future__ import annotations

import importlib
import threading
from typing import Any, Callable, Optional, Protocol

from ..core.errors import ProviderError
from ..config.models import OPEN_FILE_MODULE
from ..observability.logging import get_logger


class OpenFileProvider(Protocol):
    def is_allowed(self, context: Any) -> bool:  # pragma: no cover - implemented by providers
        ...


ProviderProbe = Callable[[], Optional[OpenFileProvider]]

_UNAVAILABLE = object()


def import_provider(module_name: str = OPEN_FILE_MODULE) -> Optional[OpenFileProvider]:
    """Import the desktop integration module, None when it is not installed."""
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        if exc.name != module_name and not module_name.startswith(f"{exc.name}."):
            # Installed but broken: one of its own imports is missing
            raise ProviderError(f"Unable to load open-file provider {module_name}: {exc}") from exc
        return None
    if not callable(getattr(module, "is_allowed", None)):
        raise ProviderError(f"Open-file provider {module_name} has no is_allowed(context)")
    return module  # type: ignore[return-value]


class OpenFileGate:
    def __init__(self, probe: Optional[ProviderProbe] = None) -> None:
        self._probe = probe or import_provider
        self._lock = threading.Lock()
        self._provider: Any = None

    def _resolve(self) -> Any:
        with self._lock:
            if self._provider is None:
                provider = self._probe()
                if provider is None:
                    get_logger().warning(
                        "Unable to open local files; install the filelink_openfile package for desktop integration."
                    )
                    self._provider = _UNAVAILABLE
                else:
                    self._provider = provider
            return self._provider

    def is_allowed(self, context: Any = None) -> bool:
        provider = self._provider
        if provider is None:
            provider = self._resolve()
        if provider is _UNAVAILABLE:
            return False
        return bool(provider.is_allowed(context))

    @property
    def available(self) -> Optional[bool]:
        """None until probed."""
        if self._provider is None:
            return None
        return self._provider is not _UNAVAILABLE


# Process-wide gate, created on first use
_gate: Optional[OpenFileGate] = None
_gate_lock = threading.Lock()


def get_gate() -> OpenFileGate:
    global _gate
    if _gate is None:
        with _gate_lock:
            if _gate is None:
                _gate = OpenFileGate()
    return _gate


def set_gate(gate: OpenFileGate) -> None:
    """Install the process-wide gate, e.g. one probing a configured module."""
    global _gate
    with _gate_lock:
        _gate = gate


def reset_gate() -> None:
    global _gate
    with _gate_lock:
        _gate = None


__all__ = [
    "OpenFileProvider",
    "ProviderProbe",
    "OpenFileGate",
    "import_provider",
    "get_gate",
    "set_gate",
    "reset_gate",
]
