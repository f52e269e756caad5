"""
TokiKV — Observability Module

Structured JSON logging for the tokikv package.

Usage:
    from tokikv.observability import setup_logging

    setup_logging()  # level from LOG_LEVEL
    setup_logging("DEBUG")
"""

from .logging import JSONFormatter, setup_logging

__all__ = [
    "JSONFormatter",
    "setup_logging",
]
