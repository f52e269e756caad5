"""
TokiKV — Cache Manager

Facade over a single backend. Every key is normalized before it reaches the
backend, and the derived read operations are built only from get/set/delete.

get_or_init is an unsynchronized read-then-write: concurrent callers that miss
the same key each run their initializer and each write, last write wins.

Example:
    manager = CacheManager.from_url("file:/tmp/kv", prefix="app-")
    result = await manager.get_or_init("user:42", load_user, ttl=300)
    if not result.hit:
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..errors import NotFoundError
from .interface import KVBackend
from .normalize import normalize_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GetOrInitResult(Generic[T]):
    """Outcome of get_or_init: the value and whether it came from the cache."""

    value: T
    hit: bool


class CacheManager:
    """
    Backend-agnostic cache facade.

    Holds exactly one backend for its lifetime and no values of its own.
    """

    def __init__(self, backend: KVBackend, prefix: str = "") -> None:
        """
        Args:
            backend: Storage backend
            prefix: Namespace prepended to every normalized key
        """
        self.backend = backend
        self.prefix = prefix

    @classmethod
    def from_url(cls, connection: str, prefix: str = "", **options: Any) -> CacheManager:
        """
        Build a manager from a connection string.

        Args:
            connection: file:<dir>, redis://... or redis+unix://...
            prefix: Key namespace
            **options: Backend options (redis_max_connections, redis_socket_timeout)

        Raises:
            ConfigurationError: If the connection scheme is not supported
        """
        from .factory import parse_connection_string

        return cls(parse_connection_string(connection, **options), prefix=prefix)

    @property
    def backend_name(self) -> str:
        return self.backend.backend_name

    def normalize(self, key: str) -> str:
        """Normalize a key with this manager's prefix."""
        return normalize_key(key, self.prefix)

    @staticmethod
    def _check_ttl(ttl: int) -> int:
        if ttl < 0:
            raise ValueError(f"ttl must be >= 0, got {ttl}")
        return int(ttl)

    # ------------ Raw operations ------------

    async def get(self, key: str, type_: Any = None) -> Any:
        """
        Retrieve a value.

        Raises:
            NotFoundError: If the key is absent or expired
            DecodeError: If the stored value does not decode into type_
        """
        return await self.backend.get(self.normalize(key), type_)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value for ttl seconds (0 = never expires)."""
        await self.backend.set(self.normalize(key), value, self._check_ttl(ttl))

    async def delete(self, key: str) -> None:
        """Delete a key. Deleting an absent key is not an error."""
        normalized = self.normalize(key)
        try:
            await self.backend.delete(normalized)
        except NotFoundError:
            logger.debug(f"Delete of absent key: {normalized}", extra={"key": normalized})

    # ------------ Derived operations ------------

    async def get_some(self, key: str, type_: Any = None) -> Any | None:
        """Retrieve a value, or None if the key is absent."""
        try:
            return await self.get(key, type_)
        except NotFoundError:
            logger.debug(f"Cache miss: {key}", extra={"key": key, "backend": self.backend_name})
            return None

    async def get_or(self, key: str, default: T, type_: Any = None) -> T:
        """Retrieve a value, or default if the key is absent."""
        try:
            return await self.get(key, type_)
        except NotFoundError:
            logger.debug(f"Cache miss: {key}", extra={"key": key, "backend": self.backend_name})
            return default

    async def get_or_init(
        self,
        key: str,
        init: Callable[[], Awaitable[T]],
        ttl: int,
        type_: Any = None,
    ) -> GetOrInitResult[T]:
        """
        Read-through access: return the cached value, or compute, store and return it.

        Args:
            key: Cache key
            init: Zero-argument coroutine function producing the value on a miss
            ttl: Time-to-live for a newly stored value (0 = never expires)
            type_: Optional type the cached JSON is validated into

        Returns:
            GetOrInitResult with hit=True when init was not called
        """
        self._check_ttl(ttl)
        try:
            return GetOrInitResult(value=await self.get(key, type_), hit=True)
        except NotFoundError:
            logger.debug(f"Cache miss, initializing: {key}", extra={"key": key, "backend": self.backend_name})

        value = await init()
        await self.set(key, value, ttl)
        return GetOrInitResult(value=value, hit=False)

    # ------------ Lifecycle ------------

    async def close(self) -> None:
        """Close the underlying backend."""
        await self.backend.close()

    async def __aenter__(self) -> CacheManager:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"CacheManager(backend={self.backend_name!r}, prefix={self.prefix!r})"
