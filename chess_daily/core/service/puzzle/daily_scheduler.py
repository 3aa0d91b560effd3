"""
Daily puzzle assignment.

The puzzle for a day is catalog[epoch_day % len(catalog)] over the id-ordered
catalog, so every process picks the same puzzle for the same day without
coordinating. The first pick is persisted and wins forever after, even if the
catalog later grows.
"""

from datetime import date
from typing import Callable, Optional

from chess_daily.core.exceptions.base import NoPuzzlesAvailableError, PuzzleNotFoundError
from chess_daily.core.logger.logger import get_logger
from chess_daily.core.service.puzzle.models import DailyAssignment, Puzzle, PuzzleWithoutSolution, to_epoch_day
from chess_daily.infra.repository.base import Repository

logger = get_logger(__name__)


class DailyAssignmentScheduler:
    """Selects and caches exactly one puzzle per calendar day"""

    def __init__(self, repository: Repository, today: Callable[[], date] = date.today):
        self.repository = repository
        self._today = today

    def today(self) -> date:
        """Current day on the server's local calendar"""
        return self._today()

    @staticmethod
    def select_index(day: date, catalog_size: int) -> int:
        return to_epoch_day(day) % catalog_size

    async def get_or_assign(self, day: Optional[date] = None) -> PuzzleWithoutSolution:
        puzzle = await self.get_or_assign_puzzle(day)
        return puzzle.without_solution()

    async def get_or_assign_puzzle(self, day: Optional[date] = None) -> Puzzle:
        """Full puzzle for the day, for internal callers that need the solution id"""
        day = day or self.today()
        epoch_day = to_epoch_day(day)

        assignment = await self.repository.get_daily_assignment(epoch_day)
        if assignment is None:
            assignment = await self._assign(day)

        puzzle = await self.repository.get_puzzle(assignment.puzzle_id)
        if puzzle is None:
            logger.error(
                "Daily assignment references a missing puzzle",
                extra={"puzzle_date": day.isoformat(), "puzzle_id": assignment.puzzle_id}
            )
            raise PuzzleNotFoundError(assignment.puzzle_id)

        return puzzle

    async def _assign(self, day: date) -> DailyAssignment:
        catalog = await self.repository.list_puzzles()
        if not catalog:
            logger.error(
                "Puzzle catalog is empty, cannot assign daily puzzle",
                extra={"puzzle_date": day.isoformat()}
            )
            raise NoPuzzlesAvailableError("No puzzle available for today")

        selected = catalog[self.select_index(day, len(catalog))]
        # Concurrent first requests compute the same puzzle; the repository keeps one
        stored = await self.repository.put_daily_assignment(
            DailyAssignment.for_date(day, selected.id)
        )

        logger.info(
            "Daily puzzle assigned",
            extra={
                "puzzle_date": day.isoformat(),
                "epoch_day": stored.epoch_day,
                "puzzle_id": stored.puzzle_id,
                "catalog_size": len(catalog)
            }
        )
        return stored
