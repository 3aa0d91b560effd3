"""Attempt router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from chess_daily.api.controller.attempt.attempt_controller import AttemptController
from chess_daily.api.controller.dto.input_dto import MintReferenceRequestDto, SubmitAttemptRequestDto
from chess_daily.api.controller.dto.output_dto import AttemptResponseDto, SubmitAttemptResponseDto
from chess_daily.core.dependencies import get_attempt_controller
from chess_daily.core.logger.logger import logger

router = APIRouter(
    prefix="/attempts",
    tags=["attempts"],
    responses={
        404: {"description": "Not Found"},
        409: {"description": "Attempts exhausted or already minted"},
        422: {"description": "Malformed input"}
    }
)


@router.post(
    "",
    response_model=SubmitAttemptResponseDto,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a move",
    description="Score a move against the puzzle solution. At most three attempts per puzzle."
)
async def submit_attempt(
    request: SubmitAttemptRequestDto,
    controller: AttemptController = Depends(get_attempt_controller)
) -> SubmitAttemptResponseDto:
    """
    Submit an attempt.

    Returns the stored attempt with:
        - isCorrect: Whether the move matches the solution (case-insensitive)
        - attemptNumber: 1, 2 or 3
        - attemptsRemaining: Attempts left for this puzzle
    """
    logger.info(f"Attempt submitted for puzzle {request.puzzle_id} by wallet: {request.wallet_address}")
    return await controller.submit_attempt(request)


@router.get(
    "",
    response_model=List[AttemptResponseDto],
    summary="List attempts",
    description="Attempts of a wallet on a puzzle; today's puzzle when puzzleId is omitted"
)
async def list_attempts(
    wallet_address: str = Query(..., alias="walletAddress", min_length=1),
    puzzle_id: Optional[int] = Query(None, alias="puzzleId"),
    controller: AttemptController = Depends(get_attempt_controller)
) -> List[AttemptResponseDto]:
    return await controller.list_attempts(wallet_address, puzzle_id)


@router.get(
    "/best",
    response_model=Optional[AttemptResponseDto],
    summary="Get best attempt",
    description="Fastest correct attempt of a wallet on a puzzle, or null"
)
async def get_best_attempt(
    wallet_address: str = Query(..., alias="walletAddress", min_length=1),
    puzzle_id: int = Query(..., alias="puzzleId"),
    controller: AttemptController = Depends(get_attempt_controller)
) -> Optional[AttemptResponseDto]:
    return await controller.get_best_attempt(wallet_address, puzzle_id)


@router.post(
    "/{attempt_id}/mint-reference",
    response_model=AttemptResponseDto,
    summary="Attach a mint reference",
    description="Called by the minting service once an attempt has been minted"
)
async def attach_mint_reference(
    attempt_id: int,
    request: MintReferenceRequestDto,
    controller: AttemptController = Depends(get_attempt_controller)
) -> AttemptResponseDto:
    logger.info(f"Mint reference received for attempt: {attempt_id}")
    return await controller.attach_mint_reference(attempt_id, request)
