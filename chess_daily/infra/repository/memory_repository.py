"""
In-memory repository, used for development and tests
"""

import threading
from typing import Any, Dict, List, Optional, Tuple

from chess_daily.core.logger.logger import get_logger
from chess_daily.core.service.attempt.models import Attempt
from chess_daily.core.service.puzzle.models import DailyAssignment, Puzzle
from chess_daily.core.service.user.models import ProfileUpdate, User
from chess_daily.infra.repository.base import (
    AssignmentPredicate,
    AttemptPredicate,
    DuplicateAttemptError,
    PuzzlePredicate,
    Repository,
    UserPredicate,
)

logger = get_logger(__name__)


class InMemoryRepository(Repository):
    """Repository backed by process-local dictionaries"""

    def __init__(self):
        self._lock = threading.RLock()
        self._puzzles: Dict[int, Puzzle] = {}
        self._users: Dict[str, User] = {}
        self._attempts: Dict[int, Attempt] = {}
        self._attempt_slots: Dict[Tuple[str, int, int], int] = {}
        self._assignments: Dict[int, DailyAssignment] = {}
        self._puzzle_id_counter = 1
        self._attempt_id_counter = 1

    async def get_puzzle(self, puzzle_id: int) -> Optional[Puzzle]:
        with self._lock:
            return self._puzzles.get(puzzle_id)

    async def put_puzzle(self, puzzle: Puzzle) -> Puzzle:
        with self._lock:
            if puzzle.id is None:
                puzzle = puzzle.model_copy(update={"id": self._puzzle_id_counter})
            self._puzzle_id_counter = max(self._puzzle_id_counter, puzzle.id + 1)
            self._puzzles[puzzle.id] = puzzle
            return puzzle

    async def scan_puzzles(self, predicate: Optional[PuzzlePredicate] = None) -> List[Puzzle]:
        with self._lock:
            puzzles = [self._puzzles[key] for key in sorted(self._puzzles)]
        return [puzzle for puzzle in puzzles if predicate is None or predicate(puzzle)]

    async def get_user(self, wallet_address: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(wallet_address)
            return user.model_copy(deep=True) if user else None

    async def put_user(self, user: User) -> User:
        with self._lock:
            self._users[user.wallet_address] = user.model_copy(deep=True)
            return user

    async def insert_user_if_absent(self, user: User) -> User:
        with self._lock:
            stored = self._users.setdefault(user.wallet_address, user.model_copy(deep=True))
            return stored.model_copy(deep=True)

    async def set_username(self, wallet_address: str, username: str) -> Optional[User]:
        return self._patch_user(wallet_address, {"username": username})

    async def update_user_profile(self, wallet_address: str, profile: ProfileUpdate) -> Optional[User]:
        return self._patch_user(wallet_address, profile.model_dump())

    def _patch_user(self, wallet_address: str, fields: Dict[str, Any]) -> Optional[User]:
        with self._lock:
            stored = self._users.get(wallet_address)
            if stored is None:
                return None
            patched = stored.model_copy(update=fields, deep=True)
            self._users[wallet_address] = patched
            return patched.model_copy(deep=True)

    async def scan_users(self, predicate: Optional[UserPredicate] = None) -> List[User]:
        with self._lock:
            users = [user.model_copy(deep=True) for user in self._users.values()]
        return [user for user in users if predicate is None or predicate(user)]

    async def get_attempt(self, attempt_id: int) -> Optional[Attempt]:
        with self._lock:
            attempt = self._attempts.get(attempt_id)
            return attempt.model_copy() if attempt else None

    async def put_attempt(self, attempt: Attempt) -> Attempt:
        with self._lock:
            if attempt.id is not None:
                stored = self._attempts.get(attempt.id)
                if stored is None:
                    raise ValueError(f"Attempt {attempt.id} does not exist")
                # Only the mint reference may change after creation
                stored = stored.model_copy(update={"mint_reference": attempt.mint_reference})
                self._attempts[stored.id] = stored
                return stored.model_copy()

            slot = (attempt.user_id, attempt.puzzle_id, attempt.attempt_number)
            if slot in self._attempt_slots:
                raise DuplicateAttemptError(*slot)

            attempt = attempt.model_copy(update={"id": self._attempt_id_counter})
            self._attempt_id_counter += 1
            self._attempts[attempt.id] = attempt.model_copy()
            self._attempt_slots[slot] = attempt.id
            return attempt

    async def scan_attempts(self, predicate: Optional[AttemptPredicate] = None) -> List[Attempt]:
        with self._lock:
            attempts = [self._attempts[key].model_copy() for key in sorted(self._attempts)]
        return [attempt for attempt in attempts if predicate is None or predicate(attempt)]

    async def list_attempts_for_pair(self, user_id: str, puzzle_id: int) -> List[Attempt]:
        attempts = await self.scan_attempts(
            lambda attempt: attempt.user_id == user_id and attempt.puzzle_id == puzzle_id
        )
        return sorted(attempts, key=lambda attempt: attempt.attempt_number)

    async def list_attempts_for_user(self, user_id: str) -> List[Attempt]:
        return await self.scan_attempts(lambda attempt: attempt.user_id == user_id)

    async def get_daily_assignment(self, epoch_day: int) -> Optional[DailyAssignment]:
        with self._lock:
            return self._assignments.get(epoch_day)

    async def put_daily_assignment(self, assignment: DailyAssignment) -> DailyAssignment:
        with self._lock:
            existing = self._assignments.get(assignment.epoch_day)
            if existing is not None:
                if existing.puzzle_id != assignment.puzzle_id:
                    logger.warning(
                        "Daily assignment already bound to a different puzzle",
                        extra={
                            "epoch_day": assignment.epoch_day,
                            "stored_puzzle_id": existing.puzzle_id,
                            "rejected_puzzle_id": assignment.puzzle_id
                        }
                    )
                return existing
            self._assignments[assignment.epoch_day] = assignment
            return assignment

    async def scan_daily_assignments(
        self, predicate: Optional[AssignmentPredicate] = None
    ) -> List[DailyAssignment]:
        with self._lock:
            assignments = [self._assignments[key] for key in sorted(self._assignments)]
        return [item for item in assignments if predicate is None or predicate(item)]
