"""
TokiKV — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import (
    SUPPORTED_SCHEMES,
    Environment,
    KVConfig,
    LogLevel,
    TokiKVConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "TokiKVConfig",
    # Enums
    "Environment",
    "LogLevel",
    # Config sections
    "KVConfig",
    "SUPPORTED_SCHEMES",
]
