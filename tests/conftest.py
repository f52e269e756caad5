"""
TokiKV — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
from redis.asyncio import Redis

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture
def test_redis_url() -> str:
    """Get redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
async def redis_client(test_redis_url: str) -> AsyncGenerator[Redis, None]:
    """
    Create a redis client for testing.

    Automatically skips tests if redis is not available.
    Clears the test database before and after each test.
    """
    client: Redis = Redis.from_url(test_redis_url, decode_responses=False)

    try:
        await client.ping()
    except Exception as e:
        await client.aclose()
        pytest.skip(f"Redis not available for testing: {e}")

    await client.flushdb()

    yield client

    try:
        await client.flushdb()
    finally:
        await client.aclose()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for filesystem cache testing."""
    path = tmp_path / "kv"
    path.mkdir()
    return path


@pytest.fixture
def mock_env_file_backend(monkeypatch: pytest.MonkeyPatch, cache_dir: Path) -> str:
    """Point the configured connection at a temporary directory."""
    connection = f"file:{cache_dir}"
    monkeypatch.setenv("TOKI_KV_URL", connection)
    monkeypatch.setenv("TOKI_KV_PREFIX", "test-")
    return connection


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample data for cache testing."""
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "simple_none": None,
        "complex_dict": {
            "nested": {
                "key": "value",
                "number": 123,
                "list": [1, 2, 3],
            }
        },
        "complex_list": [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ],
    }


@pytest.fixture(autouse=True)
def reset_global_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Reset the config singleton and manager registry around each test."""
    from tokikv.cache.factory import reset_cache_factory
    from tokikv.config import loader

    monkeypatch.setattr(loader, "_config_instance", None)
    yield
    reset_cache_factory()
