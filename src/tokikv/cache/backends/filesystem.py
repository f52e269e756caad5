"""
TokiKV — Filesystem Backend

Stores one JSON document per key at <root>/<key>.json:

    {"data": <value>, "expire": <epoch seconds, 0 = never>}

Expiration is lazy: an expired entry is reported as missing on read but stays
on disk until it is overwritten or deleted. Writes go to a temporary file in
the same directory and are swapped in with os.replace, so readers never see a
partially written entry.

Example:
    backend = FilesystemBackend("/var/cache/tokikv")
    await backend.set("greeting", {"msg": "hello"}, ttl=60)
    val = await backend.get("greeting")
"""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
from pydantic import BaseModel, Field, ValidationError

from ...errors import CacheIOError, DecodeError, NotFoundError
from ..interface import KVBackend

logger = logging.getLogger(__name__)


def now() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())


def _discard_temp(temp_path: Path) -> None:
    try:
        temp_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove temp cache file {temp_path}: {e}", extra={"path": str(temp_path)})


class FilesystemEntry(BaseModel):
    """On-disk envelope for a cached value."""

    data: Any
    expire: int = Field(ge=0, description="Absolute expiry in epoch seconds, 0 = never")

    def is_expired(self, at: int) -> bool:
        return self.expire > 0 and self.expire < at


class FilesystemBackend(KVBackend):
    """
    Filesystem backend with lazy expiration.

    Notes:
    - The root directory is created on first write.
    - A ttl of 0 stores expire=0, which never expires.
    - delete() raises NotFoundError when the file is already gone.
    """

    backend_name = "filesystem"

    def __init__(self, root: str | Path) -> None:
        """
        Initialize filesystem backend.

        Args:
            root: Directory that holds the <key>.json files
        """
        if not str(root):
            raise ValueError("root is required")
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    async def get(self, key: str, type_: Any = None) -> Any:
        """Retrieve a value, treating expired entries as missing."""
        path = self._path(key)
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                contents = await f.read()
        except FileNotFoundError as e:
            raise NotFoundError(key) from e
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"Cache file for '{key}' is not valid UTF-8",
                details={"key": key, "path": str(path), "error": str(e)},
            ) from e
        except OSError as e:
            logger.error(
                f"Failed to read cache file {path}: {e}",
                extra={"key": key, "path": str(path), "error": str(e)},
                exc_info=True,
            )
            raise CacheIOError(
                f"Failed to read cache file for '{key}': {e}",
                details={"key": key, "path": str(path), "error": str(e)},
            ) from e

        try:
            entry = FilesystemEntry.model_validate(self.parse(contents, key))
        except ValidationError as e:
            raise DecodeError(
                f"Cache file for '{key}' is not a valid entry",
                details={"key": key, "path": str(path), "errors": e.errors(include_url=False)},
            ) from e

        if entry.is_expired(now()):
            logger.debug(f"Cache entry expired: {key}", extra={"key": key, "expire": entry.expire})
            raise NotFoundError(key, details={"expired": True})

        return self.coerce(entry.data, type_, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value, replacing any existing file atomically."""
        path = self._path(key)
        expire = now() + ttl if ttl > 0 else 0
        payload = self.encode({"data": value, "expire": expire})
        temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")

        replaced = False
        try:
            await aiofiles.os.makedirs(self.root, exist_ok=True)
            async with aiofiles.open(temp_path, mode="w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(temp_path, path)
            replaced = True
        except OSError as e:
            logger.error(
                f"Failed to write cache file {path}: {e}",
                extra={"key": key, "path": str(path), "error": str(e)},
                exc_info=True,
            )
            raise CacheIOError(
                f"Failed to write cache file for '{key}': {e}",
                details={"key": key, "path": str(path), "error": str(e)},
            ) from e
        finally:
            # Also runs on cancellation
            if not replaced:
                _discard_temp(temp_path)

        logger.debug(f"Stored cache file: {path}", extra={"key": key, "expire": expire})

    async def delete(self, key: str) -> None:
        """Remove the file for a key."""
        path = self._path(key)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise NotFoundError(key) from e
        except OSError as e:
            logger.error(
                f"Failed to delete cache file {path}: {e}",
                extra={"key": key, "path": str(path), "error": str(e)},
                exc_info=True,
            )
            raise CacheIOError(
                f"Failed to delete cache file for '{key}': {e}",
                details={"key": key, "path": str(path), "error": str(e)},
            ) from e

        logger.debug(f"Deleted cache file: {path}", extra={"key": key})
