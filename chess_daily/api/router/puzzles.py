"""Puzzle router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from chess_daily.api.controller.dto.output_dto import PuzzleResponseDto, RecommendationResponseDto
from chess_daily.api.controller.puzzle.puzzle_controller import PuzzleController
from chess_daily.core.dependencies import get_puzzle_controller
from chess_daily.core.service.puzzle.models import Difficulty

router = APIRouter(
    prefix="/puzzles",
    tags=["puzzles"],
    responses={
        404: {"description": "Not Found"},
        503: {"description": "No puzzles available"}
    }
)


@router.get(
    "",
    response_model=List[PuzzleResponseDto],
    summary="List puzzles",
    description="List catalog puzzles, optionally filtered by difficulty and themes"
)
async def list_puzzles(
    difficulty: Optional[Difficulty] = Query(None),
    theme: Optional[List[str]] = Query(None),
    controller: PuzzleController = Depends(get_puzzle_controller)
) -> List[PuzzleResponseDto]:
    """
    List puzzles without solutions.

    Repeat `theme` to match puzzles carrying any of several themes.
    """
    return await controller.list_puzzles(difficulty, theme)


@router.get(
    "/today",
    response_model=PuzzleResponseDto,
    summary="Get today's puzzle",
    description="Get the puzzle of the day, without its solution"
)
async def get_todays_puzzle(
    controller: PuzzleController = Depends(get_puzzle_controller)
) -> PuzzleResponseDto:
    """
    Get today's puzzle.

    The first request of a day assigns the puzzle; every later request for the
    same day returns the same puzzle.
    """
    return await controller.get_todays_puzzle()


@router.get(
    "/recommended",
    response_model=RecommendationResponseDto,
    summary="Get a personalized puzzle",
    description="Recommend an unsolved puzzle matching the player's skill and favourite themes"
)
async def get_recommended_puzzle(
    wallet_address: str = Query(..., alias="walletAddress", min_length=1),
    controller: PuzzleController = Depends(get_puzzle_controller)
) -> RecommendationResponseDto:
    """
    Get a recommendation for a wallet.

    Unknown wallets get a fresh profile (50% success rate, medium difficulty).
    """
    return await controller.get_recommendation(wallet_address)


@router.get(
    "/{puzzle_id}",
    response_model=PuzzleResponseDto,
    summary="Get a puzzle by id"
)
async def get_puzzle(
    puzzle_id: int,
    controller: PuzzleController = Depends(get_puzzle_controller)
) -> PuzzleResponseDto:
    return await controller.get_puzzle(puzzle_id)
