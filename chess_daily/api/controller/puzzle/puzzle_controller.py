"""Puzzle controller: today's puzzle, lookups and recommendations."""

from datetime import date
from typing import List, Optional

from chess_daily.api.controller.dto.output_dto import PuzzleResponseDto, RecommendationResponseDto
from chess_daily.core.exceptions.base import PuzzleNotFoundError
from chess_daily.core.logger.logger import logger
from chess_daily.core.service.puzzle.models import Difficulty
from chess_daily.core.service.puzzle.daily_scheduler import DailyAssignmentScheduler
from chess_daily.core.service.recommendation.recommendation_engine import RecommendationEngine
from chess_daily.infra.repository.base import Repository


class PuzzleController:
    """Controller for puzzle operations."""

    def __init__(
        self,
        repository: Repository,
        scheduler: DailyAssignmentScheduler,
        recommendation_engine: RecommendationEngine
    ):
        self.repository = repository
        self.scheduler = scheduler
        self.recommendation_engine = recommendation_engine

    async def get_todays_puzzle(self, day: Optional[date] = None) -> PuzzleResponseDto:
        """
        Get the puzzle assigned to the day, assigning it on first request.

        Raises:
            NoPuzzlesAvailableError: If the catalog is empty
        """
        puzzle = await self.scheduler.get_or_assign(day)
        return PuzzleResponseDto.from_puzzle(puzzle)

    async def get_puzzle(self, puzzle_id: int) -> PuzzleResponseDto:
        puzzle = await self.repository.get_puzzle(puzzle_id)
        if puzzle is None:
            raise PuzzleNotFoundError(puzzle_id)
        return PuzzleResponseDto.from_puzzle(puzzle.without_solution())

    async def list_puzzles(
        self, difficulty: Optional[Difficulty] = None, themes: Optional[List[str]] = None
    ) -> List[PuzzleResponseDto]:
        """Catalog puzzles filtered by difficulty and by any of the given themes"""
        if difficulty is not None:
            puzzles = await self.repository.get_puzzles_by_difficulty(difficulty.value)
        else:
            puzzles = await self.repository.list_puzzles()

        if themes:
            matching = {puzzle.id for puzzle in await self.repository.get_puzzles_by_themes(themes)}
            puzzles = [puzzle for puzzle in puzzles if puzzle.id in matching]

        return [PuzzleResponseDto.from_puzzle(puzzle.without_solution()) for puzzle in puzzles]

    async def get_recommendation(self, wallet_address: str) -> RecommendationResponseDto:
        logger.info(f"Recommendation requested for wallet: {wallet_address}")
        recommendation = await self.recommendation_engine.recommend(wallet_address)
        return RecommendationResponseDto.from_recommendation(recommendation)
