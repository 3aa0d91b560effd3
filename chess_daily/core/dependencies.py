"""
FastAPI dependency injection functions.
Services are built once per application and stored on app.state; routes resolve
controllers from them through FastAPI's native DI system.
"""

import random
from datetime import date
from typing import Callable, Optional

from fastapi import Depends, Request

from chess_daily.api.controller.attempt.attempt_controller import AttemptController
from chess_daily.api.controller.puzzle.puzzle_controller import PuzzleController
from chess_daily.api.controller.user.user_controller import UserController
from chess_daily.core.exceptions.handler import ServiceError, ServiceErrorCode
from chess_daily.core.logger.logger import get_logger
from chess_daily.core.service.attempt.attempt_tracker import AttemptTracker
from chess_daily.core.service.attempt.lock_table import InMemoryLockTable, LockTable, RedisLockTable
from chess_daily.core.service.puzzle.daily_scheduler import DailyAssignmentScheduler
from chess_daily.core.service.recommendation.recommendation_engine import RecommendationEngine
from chess_daily.core.service.user.user_service import UserService
from chess_daily.infra.config.settings import Settings, get_settings
from chess_daily.infra.repository.base import Repository
from chess_daily.infra.repository.memory_repository import InMemoryRepository

logger = get_logger(__name__)


class ServiceContainer:
    """Wires the repository and lock table into the puzzle services"""

    def __init__(
        self,
        repository: Repository,
        lock_table: LockTable,
        today: Callable[[], date] = date.today,
        rng: Optional[random.Random] = None,
        max_attempts: Optional[int] = None
    ):
        settings = get_settings()
        self.repository = repository
        self.lock_table = lock_table
        self.user_service = UserService(repository)
        self.scheduler = DailyAssignmentScheduler(repository, today)
        self.attempt_tracker = AttemptTracker(
            repository,
            lock_table,
            self.user_service,
            max_attempts=max_attempts or settings.MAX_ATTEMPTS_PER_PUZZLE
        )
        self.recommendation_engine = RecommendationEngine(repository, rng)

    async def close(self) -> None:
        await self.repository.close()
        await self.lock_table.close()


async def build_repository(settings: Settings) -> Repository:
    """Create the repository selected by STORAGE_BACKEND"""
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryRepository()
    if settings.STORAGE_BACKEND == "sql":
        from chess_daily.infra.repository.sql_repository import SqlRepository
        return await SqlRepository.connect(settings.DATABASE_URL)
    raise ValueError(f"Unsupported STORAGE_BACKEND: {settings.STORAGE_BACKEND}")


async def build_lock_table(settings: Settings) -> LockTable:
    """Create the attempt lock table selected by ATTEMPT_LOCK_BACKEND"""
    if settings.ATTEMPT_LOCK_BACKEND == "memory":
        return InMemoryLockTable()
    if settings.ATTEMPT_LOCK_BACKEND == "redis":
        from chess_daily.infra.config.redis import get_redis
        return RedisLockTable(await get_redis(), timeout=settings.ATTEMPT_LOCK_TIMEOUT_SECONDS)
    raise ValueError(f"Unsupported ATTEMPT_LOCK_BACKEND: {settings.ATTEMPT_LOCK_BACKEND}")


async def build_container(settings: Optional[Settings] = None) -> ServiceContainer:
    settings = settings or get_settings()
    repository = await build_repository(settings)
    lock_table = await build_lock_table(settings)
    logger.info(
        "Service container built",
        extra={"storage_backend": settings.STORAGE_BACKEND, "lock_backend": settings.ATTEMPT_LOCK_BACKEND}
    )
    return ServiceContainer(repository, lock_table)


def get_container(request: Request) -> ServiceContainer:
    """Get the service container built at startup."""
    container = getattr(request.app.state, "services", None)
    if container is None:
        raise ServiceError(
            code=ServiceErrorCode.SERVICE_UNAVAILABLE,
            message="Service is not initialized",
            status_code=503
        )
    return container


def get_puzzle_controller(container: ServiceContainer = Depends(get_container)) -> PuzzleController:
    """Get puzzle controller with scheduler and recommendation dependencies."""
    return PuzzleController(container.repository, container.scheduler, container.recommendation_engine)


def get_attempt_controller(container: ServiceContainer = Depends(get_container)) -> AttemptController:
    """Get attempt controller with tracker dependency."""
    return AttemptController(container.attempt_tracker, container.scheduler)


def get_user_controller(container: ServiceContainer = Depends(get_container)) -> UserController:
    """Get user controller with user service dependency."""
    return UserController(container.user_service, container.attempt_tracker)
