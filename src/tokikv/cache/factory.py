"""
TokiKV — Cache Factory

Canonical factory for building backends from connection strings and for
holding one CacheManager per connection string for the process lifetime.

Connection strings (case-sensitive prefix):
- file:<dir>              -> FilesystemBackend rooted at <dir>
- redis://host:port/db    -> RedisBackend
- redis+unix:///path.sock -> RedisBackend over a unix socket

Examples:
    from tokikv.cache.factory import create_cache_manager, get_cache_manager

    # Uses env-configured connection (TOKI_KV_URL)
    manager = create_cache_manager()

    # Or explicitly supply a KVConfig (e.g., for tests)
    from tokikv.config import KVConfig
    manager = create_cache_manager(KVConfig(connection="file:/tmp/kv", prefix="test-"))
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import SUPPORTED_SCHEMES, KVConfig, get_config
from ..errors import ConfigurationError
from .backends.filesystem import FilesystemBackend
from .interface import KVBackend
from .manager import CacheManager

logger = logging.getLogger(__name__)

# Global manager registry, keyed by connection string
_cache_managers: dict[str, CacheManager] = {}


def _create_redis_backend(
    connection: str,
    redis_max_connections: int = 10,
    redis_socket_timeout: int = 5,
) -> KVBackend:
    """Internal helper to construct a redis backend with lazy import."""
    try:
        from .backends.redis import RedisBackend
    except ImportError as e:
        logger.error(
            "Redis connection requested but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis connection requested but redis client is unavailable. Install with: pip install 'redis>=5.0.0'",
            details={"package": "redis>=5.0.0", "error": str(e), "backend": "redis"},
        ) from e

    try:
        return RedisBackend(
            redis_url=connection,
            max_connections=redis_max_connections,
            socket_timeout=redis_socket_timeout,
        )
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid redis connection URL: {e}",
            details={"backend": "redis", "error": str(e)},
        ) from e


def parse_connection_string(connection: str, **options: Any) -> KVBackend:
    """
    Build the backend a connection string selects.

    Args:
        connection: Connection string
        **options: redis_max_connections / redis_socket_timeout, ignored by file:

    Returns:
        Backend instance

    Raises:
        ConfigurationError: If the scheme is not supported
    """
    if connection.startswith("file:"):
        root = connection[len("file:") :]
        if not root:
            raise ConfigurationError(
                "file: connection requires a directory path",
                details={"connection": connection},
            )
        return FilesystemBackend(root)

    if connection.startswith(("redis:", "redis+unix:")):
        return _create_redis_backend(connection, **options)

    raise ConfigurationError(
        f"Unsupported kv connection: {connection!r}",
        details={"connection": connection, "supported": list(SUPPORTED_SCHEMES)},
    )


def create_cache_manager(config: KVConfig | None = None) -> CacheManager:
    """
    Create (or return the existing) manager for a connection string.

    Args:
        config: KV configuration (uses global config if not provided)

    Returns:
        CacheManager for config.connection

    Raises:
        ConfigurationError: If the connection string is invalid
    """
    if config is None:
        config = get_config().kv

    if config.connection in _cache_managers:
        logger.debug("Returning existing cache manager for %s", config.connection)
        return _cache_managers[config.connection]

    backend = parse_connection_string(
        config.connection,
        redis_max_connections=config.redis_max_connections,
        redis_socket_timeout=config.redis_socket_timeout,
    )
    manager = CacheManager(backend, prefix=config.prefix)
    _cache_managers[config.connection] = manager

    logger.info(
        "Cache manager created with backend: %s",
        backend.backend_name,
        extra={"backend": backend.backend_name, "prefix": config.prefix},
    )
    return manager


def get_cache_manager(connection: str | None = None) -> CacheManager:
    """
    Get the manager for a connection string.

    With no argument, returns the manager for the globally configured
    connection, creating it if needed. A connection that has no manager yet
    is created with the global prefix and redis options.
    """
    config = get_config().kv
    if connection is None or connection == config.connection:
        return create_cache_manager(config)

    if connection in _cache_managers:
        return _cache_managers[connection]

    return create_cache_manager(config.model_copy(update={"connection": connection}))


async def close_all_cache_managers() -> None:
    """
    Close all managers and release backend resources.

    Should be called during graceful shutdown.
    """
    if not _cache_managers:
        logger.debug("No cache managers to close")
        return

    logger.info("Closing %d cache manager(s)...", len(_cache_managers))

    for connection, manager in list(_cache_managers.items()):
        try:
            await manager.close()
        except Exception as e:
            logger.error(
                "Error closing cache manager for %s: %s",
                connection,
                e,
                extra={"backend": manager.backend_name, "error": str(e)},
                exc_info=True,
            )

    _cache_managers.clear()
    logger.info("All cache managers closed")


def reset_cache_factory() -> None:
    """
    Clear all manager references without closing them.

    Warning: Only use this in testing contexts.
    """
    count = len(_cache_managers)
    _cache_managers.clear()
    logger.debug("Reset cache factory, cleared %d manager reference(s)", count)


def list_cache_managers() -> list[str]:
    """List the connection strings with a registered manager."""
    return list(_cache_managers.keys())
