"""Attempt controller: submissions, history, best attempt and mint callbacks."""

from typing import List, Optional

from chess_daily.api.controller.dto.input_dto import MintReferenceRequestDto, SubmitAttemptRequestDto
from chess_daily.api.controller.dto.output_dto import AttemptResponseDto, SubmitAttemptResponseDto
from chess_daily.core.service.attempt.attempt_tracker import AttemptTracker
from chess_daily.core.service.puzzle.daily_scheduler import DailyAssignmentScheduler


def attempt_message(is_correct: bool, attempts_remaining: int) -> str:
    if is_correct:
        return "Correct! Well played."
    if attempts_remaining == 0:
        return "Incorrect. No attempts left for this puzzle."
    plural = "attempt" if attempts_remaining == 1 else "attempts"
    return f"Incorrect. You have {attempts_remaining} {plural} left."


class AttemptController:
    """Controller for attempt operations."""

    def __init__(self, attempt_tracker: AttemptTracker, scheduler: DailyAssignmentScheduler):
        self.attempt_tracker = attempt_tracker
        self.scheduler = scheduler

    async def submit_attempt(self, request: SubmitAttemptRequestDto) -> SubmitAttemptResponseDto:
        """
        Submit a move for a puzzle.

        Returns:
            SubmitAttemptResponseDto with correctness and remaining attempts

        Raises:
            PuzzleNotFoundError, AttemptsExhaustedError, MalformedMoveError
        """
        attempt = await self.attempt_tracker.submit(
            user_id=request.wallet_address,
            puzzle_id=request.puzzle_id,
            move=request.move,
            elapsed_seconds=request.elapsed_seconds
        )
        remaining = await self.attempt_tracker.attempts_remaining(attempt.user_id, attempt.puzzle_id)

        return SubmitAttemptResponseDto(
            **attempt.model_dump(),
            attempts_remaining=remaining,
            message=attempt_message(attempt.is_correct, remaining)
        )

    async def list_attempts(self, wallet_address: str, puzzle_id: Optional[int] = None) -> List[AttemptResponseDto]:
        """Attempts for a puzzle; defaults to today's puzzle"""
        if puzzle_id is None:
            puzzle_id = (await self.scheduler.get_or_assign(None)).id

        attempts = await self.attempt_tracker.list_attempts(wallet_address, puzzle_id)
        return [AttemptResponseDto.from_attempt(attempt) for attempt in attempts]

    async def get_best_attempt(self, wallet_address: str, puzzle_id: int) -> Optional[AttemptResponseDto]:
        best = await self.attempt_tracker.best_attempt(wallet_address, puzzle_id)
        return AttemptResponseDto.from_attempt(best) if best else None

    async def attach_mint_reference(self, attempt_id: int, request: MintReferenceRequestDto) -> AttemptResponseDto:
        attempt = await self.attempt_tracker.attach_mint_reference(attempt_id, request.reference)
        return AttemptResponseDto.from_attempt(attempt)
