"""
Per-key mutual exclusion for attempt submission.

Submissions for the same (user, puzzle) pair must not interleave between counting
existing attempts and writing the new one.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

import redis.asyncio as redis
from redis.exceptions import LockError

from chess_daily.core.exceptions.base import LockUnavailableError
from chess_daily.core.logger.logger import get_logger

logger = get_logger(__name__)


def attempt_lock_key(user_id: str, puzzle_id: int) -> str:
    return f"attempts:lock:{user_id}:{puzzle_id}"


class LockTable(ABC):
    """Hands out a mutex per key"""

    name = "abstract"

    @abstractmethod
    def hold(self, key: str) -> AsyncIterator[None]:
        """Async context manager holding the lock for `key`"""
        pass

    async def close(self) -> None:
        pass


class InMemoryLockTable(LockTable):
    """asyncio locks keyed by string, valid within one process and event loop"""

    name = "memory"

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                self._locks.pop(key, None)

    def active_keys(self) -> int:
        return len(self._locks)


class RedisLockTable(LockTable):
    """Distributed locks for deployments running several worker processes"""

    name = "redis"

    def __init__(self, redis_client: redis.Redis, timeout: int = 10, blocking_timeout: float = 5.0):
        self.redis = redis_client
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    async def close(self) -> None:
        await self.redis.aclose()

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self.redis.lock(key, timeout=self.timeout, blocking_timeout=self.blocking_timeout)
        acquired = await lock.acquire()
        if not acquired:
            logger.warning("Timed out waiting for attempt lock", extra={"lock_key": key})
            raise LockUnavailableError(key)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError as e:
                # Lease expired while held; the unique attempt index still guards the write
                logger.warning(
                    "Attempt lock expired before release",
                    extra={"lock_key": key, "error": str(e)}
                )
