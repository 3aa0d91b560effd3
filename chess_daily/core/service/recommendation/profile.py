"""
Pure derivation of a user's puzzle profile from attempt history.

Nothing here touches storage: profile = f(attempts, puzzles). The stored copy on the
User record is only a cache of the latest result.
"""

from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from chess_daily.core.service.attempt.models import Attempt
from chess_daily.core.service.puzzle.models import Difficulty, Puzzle
from chess_daily.core.service.user.models import SkillLevel

DEFAULT_SUCCESS_RATE = 50
PREFERRED_THEME_MIN_ATTEMPTS = 2
PREFERRED_THEME_MIN_RATIO = 0.6
HARD_THRESHOLD = 80
MEDIUM_THRESHOLD = 40


class ThemeTally(BaseModel):
    theme: str
    correct: int = 0
    total: int = 0

    @property
    def ratio(self) -> float:
        return self.correct / self.total if self.total else 0.0

    @property
    def is_preferred(self) -> bool:
        return self.total >= PREFERRED_THEME_MIN_ATTEMPTS and self.ratio >= PREFERRED_THEME_MIN_RATIO


class UserProfile(BaseModel):
    """Skill and theme profile derived from attempts"""
    total_attempts: int = 0
    correct_attempts: int = 0
    success_rate: int = DEFAULT_SUCCESS_RATE
    solved_puzzle_ids: List[int] = Field(default_factory=list)
    preferred_themes: List[str] = Field(default_factory=list)
    preferred_difficulty: Difficulty = Difficulty.MEDIUM
    skill_level: SkillLevel = SkillLevel.INTERMEDIATE
    theme_tallies: Dict[str, ThemeTally] = Field(default_factory=dict)

    @property
    def completed_puzzles(self) -> int:
        return len(self.solved_puzzle_ids)


def compute_success_rate(attempts: List[Attempt]) -> int:
    """Percentage of correct attempts, 50 when there is no history"""
    if not attempts:
        return DEFAULT_SUCCESS_RATE
    correct = sum(1 for attempt in attempts if attempt.is_correct)
    return round(correct * 100 / len(attempts))


def tally_themes(attempts: Iterable[Attempt], puzzles_by_id: Mapping[int, Puzzle]) -> Dict[str, ThemeTally]:
    """Per-theme success counts over attempts whose puzzle carries the theme"""
    tallies: Dict[str, ThemeTally] = {}
    for attempt in attempts:
        puzzle = puzzles_by_id.get(attempt.puzzle_id)
        if puzzle is None:
            continue
        for theme in puzzle.themes:
            tally = tallies.setdefault(theme, ThemeTally(theme=theme))
            tally.total += 1
            if attempt.is_correct:
                tally.correct += 1
    return tallies


def difficulty_for_success_rate(success_rate: int) -> Difficulty:
    if success_rate >= HARD_THRESHOLD:
        return Difficulty.HARD
    if success_rate >= MEDIUM_THRESHOLD:
        return Difficulty.MEDIUM
    return Difficulty.EASY


def skill_level_for_difficulty(difficulty: Difficulty) -> SkillLevel:
    return {
        Difficulty.EASY: SkillLevel.BEGINNER,
        Difficulty.MEDIUM: SkillLevel.INTERMEDIATE,
        Difficulty.HARD: SkillLevel.ADVANCED,
    }[difficulty]


def solved_puzzle_ids(attempts: Iterable[Attempt]) -> List[int]:
    return sorted({attempt.puzzle_id for attempt in attempts if attempt.is_correct})


def build_profile(attempts: List[Attempt], puzzles_by_id: Mapping[int, Puzzle]) -> UserProfile:
    tallies = tally_themes(attempts, puzzles_by_id)
    success_rate = compute_success_rate(attempts)
    difficulty = difficulty_for_success_rate(success_rate)

    return UserProfile(
        total_attempts=len(attempts),
        correct_attempts=sum(1 for attempt in attempts if attempt.is_correct),
        success_rate=success_rate,
        solved_puzzle_ids=solved_puzzle_ids(attempts),
        preferred_themes=sorted(theme for theme, tally in tallies.items() if tally.is_preferred),
        preferred_difficulty=difficulty,
        skill_level=skill_level_for_difficulty(difficulty),
        theme_tallies=tallies,
    )


def longest_streak(attempts: Iterable[Attempt]) -> int:
    """
    Longest run of correct attempts on consecutive calendar days.

    Several correct attempts on the same day count once. An incorrect attempt
    or a skipped day ends the run.
    """
    streak = 0
    best = 0
    last_day: Optional[date] = None

    for attempt in sorted(attempts, key=lambda item: (item.created_at, item.id or 0)):
        if not attempt.is_correct:
            streak = 0
            last_day = None
            continue

        day = attempt.created_at.date()
        if last_day is None:
            streak = 1
        elif (day - last_day).days == 1:
            streak += 1
        elif (day - last_day).days > 1:
            streak = 1

        last_day = day
        best = max(best, streak)

    return best
