"""Structured logging for filelink operations."""

import json
import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

# Configure the root logger for filelink
logger = logging.getLogger("filelink")
logger.setLevel(logging.INFO)

# Prevent duplicate handlers
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


class FilelinkLogger:
    """Structured JSON logger with credential redaction."""

    # Store options may carry cloud credentials
    secret_keys = (
        "secret", "password", "token", "api_key",
        "aws_access_key_id", "aws_secret_access_key", "aws_session_token",
    )

    def __init__(self, name: str = "filelink", verbose: bool = False):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def _is_secret_key(self, key: str) -> bool:
        lowered = key.lower()
        return any(secret in lowered for secret in self.secret_keys)

    def _redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively redact credential-like keys."""
        redacted: Dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, dict):
                redacted[key] = self._redact_dict(value)
            elif isinstance(value, list):
                redacted[key] = [self._redact_dict(v) if isinstance(v, dict) else v for v in value]
            elif self._is_secret_key(str(key)):
                redacted[key] = "[REDACTED]"
            else:
                redacted[key] = value
        return redacted

    def _log_structured(self, level: int, message: str, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        log_entry: Dict[str, Any] = {
            "message": message,
            "timestamp": time.time(),
            "level": logging.getLevelName(level),
        }
        if kwargs:
            log_entry["context"] = self._redact_dict(kwargs)
        self.logger.log(level, json.dumps(log_entry, default=str))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.ERROR, message, **kwargs)

    @contextmanager
    def operation(self, operation_name: str, **context: Any):
        """Log start, completion or failure of an operation with its duration."""
        start_time = time.time()
        self.debug(f"Starting {operation_name}", operation=operation_name, **context)
        try:
            yield self
        except Exception as e:
            self.error(
                f"Operation {operation_name} failed",
                operation=operation_name,
                error=str(e),
                duration_ms=(time.time() - start_time) * 1000,
                **context
            )
            raise
        else:
            self.debug(
                f"Completed {operation_name}",
                operation=operation_name,
                duration_ms=(time.time() - start_time) * 1000,
                **context
            )

    def config_fingerprint(self, config: Dict[str, Any]) -> None:
        self.info("Configuration loaded", config_fingerprint=config)

    def store_summary(self, book: str, store_type: Optional[str], **details: Any) -> None:
        self.info(
            f"Book {book} bound to {store_type or 'no'} store",
            book=book,
            store_type=store_type,
            **details
        )

    def timing(self, operation: str, duration_ms: float, **context: Any) -> None:
        self.info(
            f"Timing: {operation} took {duration_ms:.1f}ms",
            operation=operation,
            duration_ms=duration_ms,
            **context
        )


# Global logger instance
_filelink_logger: Optional[FilelinkLogger] = None


def get_logger(name: str = "filelink", verbose: bool = False) -> FilelinkLogger:
    """Get or create the global filelink logger."""
    global _filelink_logger
    if _filelink_logger is None:
        _filelink_logger = FilelinkLogger(name, verbose)
    return _filelink_logger


def set_verbose(verbose: bool) -> None:
    get_logger().logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def log_config_fingerprint(config: Dict[str, Any]) -> None:
    get_logger().config_fingerprint(config)


def log_store_summary(book: str, store_type: Optional[str], **details: Any) -> None:
    get_logger().store_summary(book, store_type, **details)


def log_timing(operation: str, duration_ms: float, **context: Any) -> None:
    get_logger().timing(operation, duration_ms, **context)
