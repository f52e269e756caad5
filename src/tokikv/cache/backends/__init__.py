"""
TokiKV — Cache Backends

Exports available backend implementations.

Redis backend is lazy-loaded via factory.py to avoid import overhead.
"""

from .filesystem import FilesystemBackend

__all__ = [
    "FilesystemBackend",
]
