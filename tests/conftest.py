"""
Shared test fixtures.
"""

import random

import pytest
from fastapi.testclient import TestClient

from chess_daily.app import create_app
from chess_daily.core.dependencies import ServiceContainer
from chess_daily.core.service.attempt.attempt_tracker import AttemptTracker
from chess_daily.core.service.attempt.lock_table import InMemoryLockTable
from chess_daily.core.service.puzzle.catalog import seed_catalog
from chess_daily.core.service.user.user_service import UserService
from chess_daily.infra.repository.memory_repository import InMemoryRepository

from helpers import NEW_YEAR


@pytest.fixture
def repository():
    """Empty in-memory repository"""
    return InMemoryRepository()


@pytest.fixture
async def seeded_repository(repository):
    """Repository holding the ten-puzzle catalog (ids 1-10)"""
    await seed_catalog(repository)
    return repository


@pytest.fixture
def lock_table():
    return InMemoryLockTable()


@pytest.fixture
def attempt_tracker(seeded_repository, lock_table):
    return AttemptTracker(seeded_repository, lock_table, UserService(seeded_repository))


@pytest.fixture
def container():
    return ServiceContainer(
        InMemoryRepository(),
        InMemoryLockTable(),
        today=lambda: NEW_YEAR,
        rng=random.Random(7)
    )


@pytest.fixture
def client(container):
    """Test client; entering the context runs startup, which seeds the catalog"""
    with TestClient(create_app(container)) as test_client:
        yield test_client
