from __future__ import annotations


class FilelinkError(Exception):
    """Base exception for filelink."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ConfigError(FilelinkError):
    """Configuration or data inconsistency that aborts a single render."""


class StoreError(FilelinkError):
    pass


class ProviderError(FilelinkError):
    """Raised when the open-file provider is installed but unusable."""


EXIT_CODES: dict[type[FilelinkError], int] = {
    FilelinkError: 1,
    ConfigError: 2,
    StoreError: 3,
    ProviderError: 4,
}


def get_exit_code(exc: FilelinkError) -> int:
    for cls in exc.__class__.__mro__:
        if cls in EXIT_CODES:
            return EXIT_CODES[cls]  # type: ignore[index]
    return 1


__all__ = [
    "FilelinkError",
    "ConfigError",
    "StoreError",
    "ProviderError",
    "EXIT_CODES",
    "get_exit_code",
]
