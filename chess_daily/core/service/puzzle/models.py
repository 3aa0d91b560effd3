"""
Puzzle and daily assignment models
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

EPOCH = date(1970, 1, 1)


def to_epoch_day(day: date) -> int:
    """Number of days between 1970-01-01 and the given calendar date"""
    if isinstance(day, datetime):
        day = day.date()
    return day.toordinal() - EPOCH.toordinal()


class Difficulty(str, Enum):
    """Puzzle difficulty tier"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    def easier(self) -> "Difficulty":
        """One tier easier; easy stays easy"""
        if self == Difficulty.HARD:
            return Difficulty.MEDIUM
        return Difficulty.EASY


class SideToMove(str, Enum):
    WHITE = "white"
    BLACK = "black"


class PuzzleWithoutSolution(BaseModel):
    """Client-facing projection of a puzzle. Never carries the solution."""
    id: int
    fen: str
    to_move: SideToMove
    difficulty: Difficulty
    themes: List[str] = Field(default_factory=list)
    rating: int = 1500
    popularity: int = 0
    success_percentage: int = 0


class Puzzle(BaseModel):
    """Chess puzzle. Immutable once stored."""
    id: Optional[int] = None
    fen: str = Field(..., min_length=1, description="Board position in FEN notation")
    pgn: str = Field(default="", description="Moves leading to the position")
    to_move: SideToMove
    difficulty: Difficulty
    themes: List[str] = Field(default_factory=list, description="Tactical motifs, no duplicates")
    solution: str = Field(..., min_length=1)
    rating: int = Field(default=1500, ge=0)
    popularity: int = Field(default=0, ge=0)
    success_percentage: int = Field(default=0, ge=0, le=100)

    class Config:
        frozen = True

    @field_validator("themes")
    @classmethod
    def themes_must_be_unique(cls, themes: List[str]) -> List[str]:
        normalized = [theme.strip().lower() for theme in themes]
        if len(set(normalized)) != len(normalized):
            raise ValueError("themes must not contain duplicates")
        if any(not theme for theme in normalized):
            raise ValueError("themes must not be blank")
        return normalized

    def has_theme(self, theme: str) -> bool:
        return theme in self.themes

    def without_solution(self) -> PuzzleWithoutSolution:
        return PuzzleWithoutSolution(
            id=self.id,
            fen=self.fen,
            to_move=self.to_move,
            difficulty=self.difficulty,
            themes=list(self.themes),
            rating=self.rating,
            popularity=self.popularity,
            success_percentage=self.success_percentage,
        )


class DailyAssignment(BaseModel):
    """Binding of one calendar day to one puzzle. Never reassigned."""
    epoch_day: int
    puzzle_date: date
    puzzle_id: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        frozen = True

    @classmethod
    def for_date(cls, day: date, puzzle_id: int) -> "DailyAssignment":
        return cls(epoch_day=to_epoch_day(day), puzzle_date=day, puzzle_id=puzzle_id)
