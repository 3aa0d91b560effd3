from unittest.mock import AsyncMock, MagicMock

import pytest

from chess_daily.core.dependencies import ServiceContainer, build_container, build_lock_table, build_repository
from chess_daily.core.service.attempt.lock_table import InMemoryLockTable, RedisLockTable
from chess_daily.infra.config.settings import Settings
from chess_daily.infra.repository.memory_repository import InMemoryRepository
from chess_daily.infra.repository.sql_repository import SqlRepository


async def test_memory_container():
    container = await build_container(Settings(STORAGE_BACKEND="memory", ATTEMPT_LOCK_BACKEND="memory"))

    assert isinstance(container.repository, InMemoryRepository)
    assert isinstance(container.lock_table, InMemoryLockTable)
    assert container.attempt_tracker.max_attempts == 3
    assert container.scheduler.repository is container.repository
    await container.close()


async def test_sql_repository_from_settings(tmp_path):
    repository = await build_repository(
        Settings(STORAGE_BACKEND="sql", DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path}/chess_daily.db")
    )
    try:
        assert isinstance(repository, SqlRepository)
        assert await repository.list_puzzles() == []
    finally:
        await repository.close()


async def test_redis_lock_table_from_settings(monkeypatch):
    redis_client = MagicMock()
    monkeypatch.setattr("chess_daily.infra.config.redis.get_redis", AsyncMock(return_value=redis_client))

    lock_table = await build_lock_table(Settings(ATTEMPT_LOCK_BACKEND="redis", ATTEMPT_LOCK_TIMEOUT_SECONDS=4))

    assert isinstance(lock_table, RedisLockTable)
    assert lock_table.redis is redis_client
    assert lock_table.timeout == 4


async def test_unknown_backends_rejected():
    with pytest.raises(ValueError):
        await build_repository(Settings(STORAGE_BACKEND="dynamo"))
    with pytest.raises(ValueError):
        await build_lock_table(Settings(ATTEMPT_LOCK_BACKEND="zookeeper"))


def test_max_attempts_override():
    container = ServiceContainer(InMemoryRepository(), InMemoryLockTable(), max_attempts=5)
    assert container.attempt_tracker.max_attempts == 5
