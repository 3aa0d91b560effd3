"""
Repository abstraction for puzzle service storage.
Core services only depend on this interface; the concrete storage is injected.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from chess_daily.core.service.attempt.models import Attempt
from chess_daily.core.service.puzzle.models import DailyAssignment, Puzzle
from chess_daily.core.service.user.models import ProfileUpdate, User

PuzzlePredicate = Callable[[Puzzle], bool]
UserPredicate = Callable[[User], bool]
AttemptPredicate = Callable[[Attempt], bool]
AssignmentPredicate = Callable[[DailyAssignment], bool]


class Repository(ABC):
    """
    Keyed storage for puzzles, users, attempts and daily assignments.

    Lookups return None when the entity is absent and never raise for absence.
    Each put is atomic for the entity it writes.
    """

    # Puzzles

    @abstractmethod
    async def get_puzzle(self, puzzle_id: int) -> Optional[Puzzle]:
        pass

    @abstractmethod
    async def put_puzzle(self, puzzle: Puzzle) -> Puzzle:
        """Store a puzzle, assigning the next id when it has none"""
        pass

    @abstractmethod
    async def scan_puzzles(self, predicate: Optional[PuzzlePredicate] = None) -> List[Puzzle]:
        """Puzzles matching the predicate, ordered by id"""
        pass

    # Users

    @abstractmethod
    async def get_user(self, wallet_address: str) -> Optional[User]:
        pass

    @abstractmethod
    async def put_user(self, user: User) -> User:
        """Insert or replace the user with the same wallet address"""
        pass

    @abstractmethod
    async def insert_user_if_absent(self, user: User) -> User:
        """
        Insert the user unless its wallet is already stored.
        Returns whichever record is stored afterwards.
        """
        pass

    @abstractmethod
    async def set_username(self, wallet_address: str, username: str) -> Optional[User]:
        """Write only the username; None when the wallet is unknown"""
        pass

    @abstractmethod
    async def update_user_profile(self, wallet_address: str, profile: ProfileUpdate) -> Optional[User]:
        """Write only the derived profile columns; None when the wallet is unknown"""
        pass

    @abstractmethod
    async def scan_users(self, predicate: Optional[UserPredicate] = None) -> List[User]:
        pass

    # Attempts

    @abstractmethod
    async def get_attempt(self, attempt_id: int) -> Optional[Attempt]:
        pass

    @abstractmethod
    async def put_attempt(self, attempt: Attempt) -> Attempt:
        """
        Insert a new attempt (id assigned), or patch the mint reference of a
        stored one by id. Every other field of a stored attempt is immutable;
        an id that is not stored raises ValueError.

        Raises DuplicateAttemptError when another attempt already holds the
        same (user_id, puzzle_id, attempt_number).
        """
        pass

    @abstractmethod
    async def scan_attempts(self, predicate: Optional[AttemptPredicate] = None) -> List[Attempt]:
        """Attempts matching the predicate, ordered by id"""
        pass

    @abstractmethod
    async def list_attempts_for_pair(self, user_id: str, puzzle_id: int) -> List[Attempt]:
        """Attempts of one user on one puzzle, ordered by attempt number"""
        pass

    @abstractmethod
    async def list_attempts_for_user(self, user_id: str) -> List[Attempt]:
        """All attempts of one user, ordered by id"""
        pass

    # Daily assignments

    @abstractmethod
    async def get_daily_assignment(self, epoch_day: int) -> Optional[DailyAssignment]:
        pass

    @abstractmethod
    async def put_daily_assignment(self, assignment: DailyAssignment) -> DailyAssignment:
        """
        Insert the assignment unless one already exists for its day.
        Returns whichever assignment is stored for the day afterwards.
        """
        pass

    @abstractmethod
    async def scan_daily_assignments(
        self, predicate: Optional[AssignmentPredicate] = None
    ) -> List[DailyAssignment]:
        pass

    # Convenience filters

    async def list_puzzles(self) -> List[Puzzle]:
        return await self.scan_puzzles()

    async def get_puzzles_by_difficulty(self, difficulty: str) -> List[Puzzle]:
        return await self.scan_puzzles(lambda puzzle: puzzle.difficulty == difficulty)

    async def get_puzzles_by_themes(self, themes: List[str]) -> List[Puzzle]:
        wanted = {theme.lower() for theme in themes}
        return await self.scan_puzzles(lambda puzzle: bool(wanted.intersection(puzzle.themes)))

    async def get_minted_attempts_for_user(self, user_id: str) -> List[Attempt]:
        return await self.scan_attempts(
            lambda attempt: attempt.user_id == user_id and attempt.is_minted
        )

    async def close(self) -> None:
        """Release storage resources"""
        return None


class DuplicateAttemptError(Exception):
    """Raised by put_attempt when an attempt number is already taken for the pair"""

    def __init__(self, user_id: str, puzzle_id: int, attempt_number: int):
        self.user_id = user_id
        self.puzzle_id = puzzle_id
        self.attempt_number = attempt_number
        super().__init__(
            f"Attempt {attempt_number} already exists for user {user_id} on puzzle {puzzle_id}"
        )
