"""
Attempt submission, scoring and lookup.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from chess_daily.core.exceptions.base import (
    AttemptNotFoundError,
    AttemptsExhaustedError,
    InvalidInputError,
    MalformedMoveError,
    MintReferenceAlreadySetError,
    PuzzleNotFoundError,
)
from chess_daily.core.logger.logger import get_logger
from chess_daily.core.service.attempt.lock_table import LockTable, attempt_lock_key
from chess_daily.core.service.attempt.models import Attempt
from chess_daily.core.service.attempt.validators import MoveValidator
from chess_daily.core.service.user.user_service import UserService, normalize_wallet_address
from chess_daily.infra.repository.base import DuplicateAttemptError, Repository

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def is_correct_move(move: str, solution: str) -> bool:
    """Case-insensitive string comparison against the stored solution"""
    return move.strip().casefold() == solution.strip().casefold()


def select_best_attempt(attempts: List[Attempt]) -> Optional[Attempt]:
    """Fastest correct attempt, earliest attempt number on ties; None if none is correct"""
    correct = [attempt for attempt in attempts if attempt.is_correct]
    if not correct:
        return None
    return min(correct, key=lambda attempt: (attempt.elapsed_seconds, attempt.attempt_number))


class AttemptTracker:
    """Records scored attempts and enforces the per-puzzle attempt ceiling"""

    def __init__(
        self,
        repository: Repository,
        lock_table: LockTable,
        user_service: Optional[UserService] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.repository = repository
        self.lock_table = lock_table
        self.user_service = user_service
        self.max_attempts = max_attempts
        self._clock = clock

    async def submit(self, user_id: str, puzzle_id: int, move: str, elapsed_seconds: int) -> Attempt:
        """
        Score a move against the puzzle solution and store it as the next attempt.

        Args:
            user_id: Wallet address of the player
            puzzle_id: Target puzzle
            move: Submitted move in SAN or UCI notation
            elapsed_seconds: Time the player spent on the move

        Returns:
            The stored Attempt, including its correctness flag

        Raises:
            MalformedMoveError: move string has the wrong shape
            InvalidInputError: negative elapsed time or bad wallet address
            PuzzleNotFoundError: unknown puzzle
            AttemptsExhaustedError: the pair already has max_attempts attempts
        """
        is_valid, error_msg = MoveValidator.validate_move(move)
        if not is_valid:
            raise MalformedMoveError(error_msg, {"field": "move"})
        if elapsed_seconds is None or elapsed_seconds < 0:
            raise InvalidInputError("Elapsed time cannot be negative", {"field": "elapsed_seconds"})

        user_id = normalize_wallet_address(user_id)
        move = move.strip()

        puzzle = await self.repository.get_puzzle(puzzle_id)
        if puzzle is None:
            raise PuzzleNotFoundError(puzzle_id)

        if self.user_service is not None:
            await self.user_service.get_or_create_user(user_id)

        async with self.lock_table.hold(attempt_lock_key(user_id, puzzle_id)):
            attempt = await self._append_attempt(user_id, puzzle_id, move, puzzle.solution, elapsed_seconds)

        logger.info(
            "Attempt recorded",
            extra={
                "wallet_address": user_id,
                "puzzle_id": puzzle_id,
                "attempt_number": attempt.attempt_number,
                "is_correct": attempt.is_correct,
                "elapsed_seconds": elapsed_seconds
            }
        )
        return attempt

    async def _append_attempt(
        self, user_id: str, puzzle_id: int, move: str, solution: str, elapsed_seconds: int
    ) -> Attempt:
        # Retries only when another process took the slot despite the lock
        for _ in range(self.max_attempts):
            existing = await self.repository.list_attempts_for_pair(user_id, puzzle_id)
            if len(existing) >= self.max_attempts:
                logger.info(
                    "Attempt rejected, attempts exhausted",
                    extra={"wallet_address": user_id, "puzzle_id": puzzle_id}
                )
                raise AttemptsExhaustedError(user_id, puzzle_id, self.max_attempts)

            attempt = Attempt(
                user_id=user_id,
                puzzle_id=puzzle_id,
                move=move,
                is_correct=is_correct_move(move, solution),
                elapsed_seconds=elapsed_seconds,
                attempt_number=len(existing) + 1,
                created_at=self._clock()
            )
            try:
                return await self.repository.put_attempt(attempt)
            except DuplicateAttemptError as e:
                logger.warning(
                    "Attempt number taken concurrently, re-reading",
                    extra={"wallet_address": user_id, "puzzle_id": puzzle_id, "attempt_number": e.attempt_number}
                )

        raise AttemptsExhaustedError(user_id, puzzle_id, self.max_attempts)

    async def list_attempts(self, user_id: str, puzzle_id: int) -> List[Attempt]:
        user_id = normalize_wallet_address(user_id)
        return await self.repository.list_attempts_for_pair(user_id, puzzle_id)

    async def attempts_remaining(self, user_id: str, puzzle_id: int) -> int:
        attempts = await self.list_attempts(user_id, puzzle_id)
        return max(self.max_attempts - len(attempts), 0)

    async def best_attempt(self, user_id: str, puzzle_id: int) -> Optional[Attempt]:
        return select_best_attempt(await self.list_attempts(user_id, puzzle_id))

    async def attach_mint_reference(self, attempt_id: int, reference: str) -> Attempt:
        """Attach the minted artifact reference to an attempt, once"""
        if not reference or not reference.strip():
            raise InvalidInputError("Mint reference cannot be empty", {"field": "reference"})

        async with self.lock_table.hold(f"attempts:mint:{attempt_id}"):
            attempt = await self.repository.get_attempt(attempt_id)
            if attempt is None:
                raise AttemptNotFoundError(attempt_id)
            if attempt.mint_reference:
                raise MintReferenceAlreadySetError(attempt_id, attempt.mint_reference)

            updated = await self.repository.put_attempt(
                attempt.model_copy(update={"mint_reference": reference.strip()})
            )

        logger.info(
            "Mint reference attached",
            extra={"attempt_id": attempt_id, "wallet_address": updated.user_id}
        )
        return updated

    async def list_minted_attempts(self, user_id: str) -> List[Attempt]:
        user_id = normalize_wallet_address(user_id)
        return await self.repository.get_minted_attempts_for_user(user_id)
