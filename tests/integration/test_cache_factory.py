"""
TokiKV — Cache Factory Integration Tests

Tests connection-string parsing, the one-manager-per-connection registry,
and lifecycle management.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from tokikv.cache.backends.filesystem import FilesystemBackend
from tokikv.cache.backends.redis import RedisBackend
from tokikv.cache.factory import (
    close_all_cache_managers,
    create_cache_manager,
    get_cache_manager,
    list_cache_managers,
    parse_connection_string,
    reset_cache_factory,
)
from tokikv.cache.manager import CacheManager
from tokikv.config import KVConfig
from tokikv.errors import ConfigurationError, ErrorKind


class TestParseConnectionString:
    def test_file(self, tmp_path: Path) -> None:
        backend = parse_connection_string(f"file:{tmp_path}")
        assert isinstance(backend, FilesystemBackend)
        assert backend.root == tmp_path

    def test_file_ignores_redis_options(self, tmp_path: Path) -> None:
        backend = parse_connection_string(f"file:{tmp_path}", redis_max_connections=3, redis_socket_timeout=1)
        assert isinstance(backend, FilesystemBackend)

    def test_file_requires_path(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_connection_string("file:")

    @pytest.mark.parametrize("connection", ["redis://localhost:6379/0", "redis+unix:///tmp/redis.sock"])
    async def test_redis(self, connection: str) -> None:
        backend = parse_connection_string(connection, redis_max_connections=3)
        assert isinstance(backend, RedisBackend)
        assert backend.redis_url == connection
        await backend.close()

    @pytest.mark.parametrize("connection", ["memcached://x", "File:/tmp", "rediss://host", ""])
    def test_unsupported_scheme(self, connection: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_connection_string(connection)
        assert exc_info.value.kind is ErrorKind.CONFIGURATION
        assert exc_info.value.details["supported"] == ["file:", "redis:", "redis+unix:"]


class TestCacheFactory:
    """Test suite for the manager registry."""

    @pytest.fixture(autouse=True)
    async def cleanup(self) -> AsyncGenerator[None, None]:
        yield
        await close_all_cache_managers()
        reset_cache_factory()

    async def test_create_from_environment(self, mock_env_file_backend: str, cache_dir: Path) -> None:
        manager = create_cache_manager()

        assert isinstance(manager, CacheManager)
        assert manager.prefix == "test-"

        await manager.set("user.name", "value", ttl=60)
        assert await manager.get("user.name") == "value"
        assert (cache_dir / "test-user-name.json").is_file()

    async def test_create_with_explicit_config(self, cache_dir: Path) -> None:
        manager = create_cache_manager(KVConfig(connection=f"file:{cache_dir}", prefix="x-"))
        assert manager.prefix == "x-"
        assert list_cache_managers() == [f"file:{cache_dir}"]

    async def test_one_manager_per_connection(self, tmp_path: Path) -> None:
        config_a = KVConfig(connection=f"file:{tmp_path / 'a'}")
        config_b = KVConfig(connection=f"file:{tmp_path / 'b'}")

        assert create_cache_manager(config_a) is create_cache_manager(config_a)
        assert create_cache_manager(config_a) is not create_cache_manager(config_b)
        assert sorted(list_cache_managers()) == sorted([config_a.connection, config_b.connection])

    async def test_get_cache_manager_default(self, mock_env_file_backend: str) -> None:
        manager = get_cache_manager()
        assert manager is get_cache_manager(mock_env_file_backend)
        assert list_cache_managers() == [mock_env_file_backend]

    async def test_get_cache_manager_other_connection(self, mock_env_file_backend: str, tmp_path: Path) -> None:
        other = f"file:{tmp_path / 'other'}"
        manager = get_cache_manager(other)

        assert manager is get_cache_manager(other)
        assert manager.prefix == "test-"
        with pytest.raises(ConfigurationError):
            get_cache_manager("bogus:connection")

    async def test_close_all(self, cache_dir: Path) -> None:
        create_cache_manager(KVConfig(connection=f"file:{cache_dir}"))
        await close_all_cache_managers()
        assert list_cache_managers() == []

        # Closing with nothing registered is a no-op
        await close_all_cache_managers()

    async def test_reset_does_not_close(self, cache_dir: Path) -> None:
        create_cache_manager(KVConfig(connection=f"file:{cache_dir}"))
        reset_cache_factory()
        assert list_cache_managers() == []

    async def test_redis_manager_round_trip(self, redis_client: object, test_redis_url: str) -> None:
        manager = create_cache_manager(KVConfig(connection=test_redis_url, prefix="it-"))

        async def init() -> list[int]:
            return [1, 2, 3]

        first = await manager.get_or_init("nums/all", init, ttl=60)
        second = await manager.get_or_init("nums/all", init, ttl=60)

        assert (first.hit, second.hit) == (False, True)
        assert second.value == [1, 2, 3]
        assert await manager.get_some("missing") is None

        await manager.delete("nums/all")
        await manager.delete("nums/all")
        assert await manager.get_or("nums/all", []) == []
