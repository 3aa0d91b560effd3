"""
Builders shared by the test suites.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List

from chess_daily.core.service.attempt.models import Attempt
from chess_daily.core.service.puzzle.models import Puzzle

NEW_YEAR = date(2025, 1, 1)
WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
OTHER_WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


def make_puzzle(difficulty: str, themes: List[str], solution: str = "e4", **kwargs) -> Puzzle:
    return Puzzle(
        fen="rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
        to_move="white",
        difficulty=difficulty,
        themes=themes,
        solution=solution,
        **kwargs
    )


def make_attempt(
    puzzle_id: int,
    is_correct: bool,
    attempt_number: int = 1,
    elapsed_seconds: int = 30,
    user_id: str = WALLET,
    created_at: datetime = None
) -> Attempt:
    return Attempt(
        user_id=user_id,
        puzzle_id=puzzle_id,
        move="e4" if is_correct else "d4",
        is_correct=is_correct,
        elapsed_seconds=elapsed_seconds,
        attempt_number=attempt_number,
        created_at=created_at or datetime(2025, 1, 1, 12, tzinfo=timezone.utc)
    )


def days_after(day: date, count: int) -> datetime:
    moment = datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc)
    return moment + timedelta(days=count)
