"""
TokiKV — Core Error Types

Defines the closed error taxonomy for the cache core.
All exceptions inherit from TokiKVError and carry an ErrorKind so callers
can branch on the kind of failure without matching on messages.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Kinds of failure surfaced by cache operations."""

    NOT_FOUND = "not_found"
    DECODE = "decode"
    ENCODE = "encode"
    IO = "io"
    CONNECTION = "connection"
    CONFIGURATION = "configuration"


class TokiKVError(Exception):
    """Base exception for all TokiKV errors."""

    kind: ErrorKind | None = None

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for error reporting."""
        return {
            "error": self.__class__.__name__,
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(TokiKVError):
    """Raised when configuration is invalid, e.g. an unsupported connection scheme."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class CacheError(TokiKVError):
    """Base exception for cache operation errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None, status_code: int = 500):
        super().__init__(message, details, status_code=status_code)


class NotFoundError(CacheError):
    """Raised when a key is absent or its entry has expired."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, key: str, details: dict[str, Any] | None = None):
        self.key = key
        super().__init__(f"Not found: {key}", {"key": key, **(details or {})}, status_code=404)


class DecodeError(CacheError):
    """Raised when stored bytes cannot be deserialized into the requested type."""

    kind = ErrorKind.DECODE


class EncodeError(CacheError):
    """Raised when a value cannot be serialized for storage."""

    kind = ErrorKind.ENCODE


class CacheIOError(CacheError):
    """Raised on local filesystem failures other than a missing file."""

    kind = ErrorKind.IO


class CacheConnectionError(CacheError):
    """Raised when the remote store is unreachable or replies with an error."""

    kind = ErrorKind.CONNECTION

    def __init__(self, backend: str, details: dict[str, Any] | None = None):
        message = f"Failed to talk to cache backend: {backend}"
        super().__init__(message, details, status_code=503)


def extract_error_kind(error: BaseException) -> ErrorKind | None:
    """
    Extract the ErrorKind from an exception.

    Args:
        error: Exception to categorize

    Returns:
        The error's kind, or None for exceptions raised outside TokiKV
    """
    if isinstance(error, TokiKVError):
        return error.kind
    return None


def is_not_found(error: BaseException) -> bool:
    """Check whether an error means the key is absent."""
    return extract_error_kind(error) is ErrorKind.NOT_FOUND
