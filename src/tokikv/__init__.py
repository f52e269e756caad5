"""
TokiKV — backend-agnostic key-value cache.

Store and retrieve JSON-serializable values under string keys with a
time-to-live, on the local filesystem or in redis.
"""

from .cache import (
    CacheManager,
    GetOrInitResult,
    KVBackend,
    close_all_cache_managers,
    create_cache_manager,
    get_cache_manager,
    normalize_key,
)
from .errors import (
    CacheConnectionError,
    CacheError,
    CacheIOError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    ErrorKind,
    NotFoundError,
    TokiKVError,
)
from .observability import setup_logging

__version__ = "0.1.0"

__all__ = [
    "CacheManager",
    "GetOrInitResult",
    "KVBackend",
    "create_cache_manager",
    "get_cache_manager",
    "close_all_cache_managers",
    "normalize_key",
    "setup_logging",
    "ErrorKind",
    "TokiKVError",
    "CacheError",
    "NotFoundError",
    "DecodeError",
    "EncodeError",
    "CacheIOError",
    "CacheConnectionError",
    "ConfigurationError",
]
