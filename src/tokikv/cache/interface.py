"""
TokiKV — Backend Interface

Defines the abstract interface that both storage backends implement, plus the
JSON codec they share.
"""

import json
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from ..errors import DecodeError, EncodeError


@lru_cache(maxsize=256)
def _type_adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


class KVBackend(ABC):
    """
    Abstract base class for key-value backends.

    Keys handed to a backend are already normalized by the CacheManager.
    Every operation raises a TokiKVError subclass on failure:

    - NotFoundError when the key is absent (or expired)
    - DecodeError when stored data does not decode into the requested type
    - EncodeError when a value cannot be serialized
    - CacheIOError / CacheConnectionError for lower-level failures
    """

    backend_name: str = "abstract"

    @abstractmethod
    async def get(self, key: str, type_: Any = None) -> Any:
        """
        Retrieve a value.

        Args:
            key: Normalized key
            type_: Optional type the stored JSON is validated into

        Returns:
            The stored value

        Raises:
            NotFoundError: If the key is absent or expired
            DecodeError: If the stored data cannot be decoded
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Store a value, overwriting any existing one.

        Args:
            key: Normalized key
            value: JSON-serializable value (pydantic models and dataclasses included)
            ttl: Time-to-live in seconds, 0 = never expires
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Delete a key.

        Backends may raise NotFoundError when the key is absent.
        """

    async def close(self) -> None:  # noqa: B027
        """Release backend resources. Default is a no-op."""

    # ------------ Codec ------------

    @staticmethod
    def encode(value: Any) -> str:
        """Serialize a value to a compact JSON string."""
        try:
            return json.dumps(
                to_jsonable_python(value), ensure_ascii=False, allow_nan=False, separators=(",", ":")
            )
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise EncodeError(
                f"Failed to serialize value of type {type(value).__name__}: {e}",
                details={"value_type": type(value).__name__, "error": str(e)},
            ) from e

    @staticmethod
    def parse(data: str | bytes, key: str) -> Any:
        """Parse raw JSON text or bytes."""
        try:
            return json.loads(data)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Stored data for '{key}' is not valid JSON: {e}",
                details={"key": key, "error": str(e)},
            ) from e

    @staticmethod
    def coerce(data: Any, type_: Any, key: str) -> Any:
        """Validate decoded JSON into the requested type, if any."""
        if type_ is None:
            return data
        try:
            return _type_adapter(type_).validate_python(data)
        except ValidationError as e:
            raise DecodeError(
                f"Stored data for '{key}' does not match {getattr(type_, '__name__', type_)}",
                details={"key": key, "errors": e.errors(include_url=False)},
            ) from e
