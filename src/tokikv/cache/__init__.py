"""
TokiKV — Cache Module

Key-value caching with interchangeable filesystem and redis backends.

- factory.py: builds backends from connection strings, one manager per connection
- manager.py: CacheManager facade with get_some / get_or / get_or_init
- interface.py: abstract backend all implementations follow
- backends/: filesystem and redis implementations

Usage:
    from tokikv.cache import get_cache_manager

    cache = get_cache_manager()
    await cache.set("key", "value", ttl=3600)
    value = await cache.get("key")
"""

from .factory import (
    close_all_cache_managers,
    create_cache_manager,
    get_cache_manager,
    list_cache_managers,
    parse_connection_string,
    reset_cache_factory,
)
from .interface import KVBackend
from .manager import CacheManager, GetOrInitResult
from .normalize import DISALLOWED_KEY_CHARS, normalize_key

__all__ = [
    # Factory functions
    "create_cache_manager",
    "get_cache_manager",
    "close_all_cache_managers",
    "list_cache_managers",
    "parse_connection_string",
    "reset_cache_factory",
    # Facade
    "CacheManager",
    "GetOrInitResult",
    # Interface
    "KVBackend",
    # Keys
    "normalize_key",
    "DISALLOWED_KEY_CHARS",
]
