import asyncio
from datetime import date

import pytest

from chess_daily.core.exceptions.base import NoPuzzlesAvailableError, PuzzleNotFoundError
from chess_daily.core.service.puzzle.daily_scheduler import DailyAssignmentScheduler
from chess_daily.core.service.puzzle.models import DailyAssignment, to_epoch_day

from helpers import NEW_YEAR, make_puzzle


def test_epoch_day_is_days_since_unix_epoch():
    assert to_epoch_day(date(1970, 1, 1)) == 0
    assert to_epoch_day(date(1970, 1, 2)) == 1
    assert to_epoch_day(NEW_YEAR) == 20089


def test_select_index_is_epoch_day_modulo_catalog_size():
    # 20089 % 10 == 9, i.e. the tenth puzzle
    assert DailyAssignmentScheduler.select_index(NEW_YEAR, 10) == 9
    assert DailyAssignmentScheduler.select_index(date(2025, 1, 2), 10) == 0
    assert DailyAssignmentScheduler.select_index(NEW_YEAR, 7) == 20089 % 7


async def test_new_year_assigns_tenth_puzzle(seeded_repository):
    """Should pick catalog[20089 % 10] for 2025-01-01"""
    scheduler = DailyAssignmentScheduler(seeded_repository, today=lambda: NEW_YEAR)

    puzzle = await scheduler.get_or_assign()

    assert puzzle.id == 10
    assignment = await seeded_repository.get_daily_assignment(20089)
    assert assignment.puzzle_id == 10
    assert assignment.puzzle_date == NEW_YEAR


async def test_response_never_carries_solution(seeded_repository):
    scheduler = DailyAssignmentScheduler(seeded_repository)

    puzzle = await scheduler.get_or_assign(NEW_YEAR)

    assert not hasattr(puzzle, "solution")
    assert "solution" not in puzzle.model_dump()


async def test_same_day_returns_same_puzzle(seeded_repository):
    scheduler = DailyAssignmentScheduler(seeded_repository)

    first = await scheduler.get_or_assign(NEW_YEAR)
    second = await scheduler.get_or_assign(NEW_YEAR)

    assert first.id == second.id


async def test_assignment_survives_restart_and_catalog_growth(seeded_repository):
    """A stored binding wins over recomputation, even when the modulo would change"""
    await DailyAssignmentScheduler(seeded_repository).get_or_assign(NEW_YEAR)

    await seeded_repository.put_puzzle(make_puzzle("hard", ["pin"], solution="Qh5"))
    assert len(await seeded_repository.list_puzzles()) == 11
    assert DailyAssignmentScheduler.select_index(NEW_YEAR, 11) != 9

    restarted = DailyAssignmentScheduler(seeded_repository)
    puzzle = await restarted.get_or_assign(NEW_YEAR)

    assert puzzle.id == 10


async def test_concurrent_first_requests_agree(seeded_repository):
    scheduler = DailyAssignmentScheduler(seeded_repository)

    puzzles = await asyncio.gather(*[scheduler.get_or_assign(NEW_YEAR) for _ in range(8)])

    assert {puzzle.id for puzzle in puzzles} == {10}
    assert len(await seeded_repository.scan_daily_assignments()) == 1


async def test_consecutive_days_walk_the_catalog(seeded_repository):
    scheduler = DailyAssignmentScheduler(seeded_repository)

    ids = [
        (await scheduler.get_or_assign(date(2025, 1, day))).id
        for day in range(1, 5)
    ]

    assert ids == [10, 1, 2, 3]


async def test_empty_catalog_raises(repository):
    scheduler = DailyAssignmentScheduler(repository)

    with pytest.raises(NoPuzzlesAvailableError) as exc_info:
        await scheduler.get_or_assign(NEW_YEAR)

    assert exc_info.value.status_code == 503
    assert await repository.get_daily_assignment(20089) is None


async def test_assignment_to_missing_puzzle_raises(seeded_repository):
    await seeded_repository.put_daily_assignment(DailyAssignment.for_date(NEW_YEAR, 99))
    scheduler = DailyAssignmentScheduler(seeded_repository)

    with pytest.raises(PuzzleNotFoundError):
        await scheduler.get_or_assign(NEW_YEAR)


async def test_defaults_to_injected_today(seeded_repository):
    scheduler = DailyAssignmentScheduler(seeded_repository, today=lambda: date(2025, 1, 2))

    puzzle = await scheduler.get_or_assign_puzzle()

    assert scheduler.today() == date(2025, 1, 2)
    assert puzzle.id == 1
    assert puzzle.solution == "Bxf7+"
