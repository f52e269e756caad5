"""
TokiKV — Redis Backend

Asynchronous redis backend with:
- JSON serialization for values
- Per-key TTL delegated to redis (SET ... EX)
- redis:// and redis+unix:// connection URLs

Requires: redis>=5.0 with asyncio support

Example:
    backend = RedisBackend("redis://localhost:6379/0")
    await backend.set("greeting", {"msg": "hello"}, ttl=60)
    val = await backend.get("greeting")
"""

from __future__ import annotations

import logging
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ...errors import CacheConnectionError, NotFoundError
from ..interface import KVBackend

logger = logging.getLogger(__name__)

UNIX_SCHEME = "redis+unix:"


def to_redis_py_url(url: str) -> str:
    """
    Translate a connection URL into one redis-py accepts.

    redis-py spells socket URLs unix:///path/to.sock, so a redis+unix:
    prefix is rewritten; every other URL passes through unchanged.
    """
    if url.startswith(UNIX_SCHEME):
        return "unix:" + url[len(UNIX_SCHEME) :]
    return url


class RedisBackend(KVBackend):
    """
    Redis backend with JSON serialization and TTL.

    Notes:
    - Values are stored as UTF-8 JSON strings with no embedded expiry.
    - TTL is applied via redis EX seconds; 0 -> no expiry (plain SET).
    - delete() of an absent key is not an error.
    """

    backend_name = "redis"

    def __init__(
        self,
        redis_url: str,
        max_connections: int = 10,
        socket_timeout: int = 5,
    ) -> None:
        """
        Initialize redis backend.

        Args:
            redis_url: redis://host:port/db or redis+unix:///path/to.sock
            max_connections: Connection pool size
            socket_timeout: Socket timeout in seconds
        """
        if not redis_url:
            raise ValueError("redis_url is required")

        self.redis_url = redis_url

        # Lazy connection; connects on first command
        self._client = Redis.from_url(  # type: ignore[call-overload]
            url=to_redis_py_url(redis_url),
            decode_responses=False,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
        )

    def _connection_error(self, op: str, key: str, e: Exception) -> CacheConnectionError:
        logger.error(
            f"Redis {op} failed for key '{key}': {e}",
            extra={"key": key, "op": op, "error": str(e)},
            exc_info=True,
        )
        return CacheConnectionError(
            self.backend_name,
            details={"key": key, "op": op, "error": str(e)},
        )

    async def get(self, key: str, type_: Any = None) -> Any:
        """Retrieve a value by key."""
        try:
            data = await self._client.get(key)
        except RedisError as e:
            raise self._connection_error("get", key, e) from e

        if data is None:
            raise NotFoundError(key)

        return self.coerce(self.parse(data, key), type_, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value with a TTL (0 = no expiry)."""
        payload = self.encode(value)
        try:
            if ttl > 0:
                await self._client.set(key, payload, ex=ttl)
            else:
                await self._client.set(key, payload)
        except RedisError as e:
            raise self._connection_error("set", key, e) from e

        logger.debug(f"Stored redis key: {key}", extra={"key": key, "ttl": ttl})

    async def delete(self, key: str) -> None:
        """Delete a key; absent keys are ignored."""
        try:
            deleted = await self._client.delete(key)
        except RedisError as e:
            raise self._connection_error("delete", key, e) from e

        logger.debug(f"Deleted redis key: {key}", extra={"key": key, "deleted": int(deleted)})

    async def close(self) -> None:
        """Close the redis client and release pooled connections."""
        try:
            await self._client.aclose()
            logger.info("Closed redis cache backend")
        except RedisError as e:
            logger.warning(f"Error closing redis client: {e}", extra={"error": str(e)})
