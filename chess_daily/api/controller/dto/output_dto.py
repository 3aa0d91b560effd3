"""
Output DTOs for puzzle API endpoints.
Responses are camelCase for the frontend and never carry a puzzle solution.
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from datetime import datetime

from chess_daily.core.service.attempt.models import Attempt
from chess_daily.core.service.puzzle.models import PuzzleWithoutSolution
from chess_daily.core.service.recommendation.recommendation_engine import Recommendation
from chess_daily.core.service.user.models import User, UserStats


class CamelResponse(BaseModel):

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PuzzleResponseDto(CamelResponse):
    """DTO for a puzzle as shown to players."""

    id: int
    fen: str
    to_move: str
    difficulty: str
    themes: List[str] = Field(default_factory=list)
    rating: int
    popularity: int
    success_percentage: int

    @classmethod
    def from_puzzle(cls, puzzle: PuzzleWithoutSolution) -> "PuzzleResponseDto":
        return cls(
            id=puzzle.id,
            fen=puzzle.fen,
            to_move=puzzle.to_move.value,
            difficulty=puzzle.difficulty.value,
            themes=list(puzzle.themes),
            rating=puzzle.rating,
            popularity=puzzle.popularity,
            success_percentage=puzzle.success_percentage
        )


class RecommendationResponseDto(CamelResponse):
    """DTO for a personalized recommendation."""

    puzzle: PuzzleResponseDto
    reason: str
    tier: str
    is_recommended: bool = True

    @classmethod
    def from_recommendation(cls, recommendation: Recommendation) -> "RecommendationResponseDto":
        return cls(
            puzzle=PuzzleResponseDto.from_puzzle(recommendation.puzzle.without_solution()),
            reason=recommendation.reason,
            tier=recommendation.tier.value
        )


class AttemptResponseDto(CamelResponse):
    """DTO for a stored attempt."""

    id: int
    user_id: str
    puzzle_id: int
    move: str
    is_correct: bool
    elapsed_seconds: int
    attempt_number: int
    created_at: datetime
    mint_reference: Optional[str] = None

    @classmethod
    def from_attempt(cls, attempt: Attempt) -> "AttemptResponseDto":
        return cls(**attempt.model_dump())


class SubmitAttemptResponseDto(AttemptResponseDto):
    """DTO for a fresh submission, with the number of attempts left."""

    attempts_remaining: int
    message: str


class UserResponseDto(CamelResponse):
    """DTO for a user record and its cached profile."""

    wallet_address: str
    username: Optional[str] = None
    success_rate: int
    completed_puzzles: int
    preferred_themes: List[str] = Field(default_factory=list)
    preferred_difficulty: str
    skill_level: str
    last_recommendation_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponseDto":
        return cls(
            wallet_address=user.wallet_address,
            username=user.username,
            success_rate=user.success_rate,
            completed_puzzles=user.completed_puzzles,
            preferred_themes=list(user.preferred_themes),
            preferred_difficulty=user.preferred_difficulty.value,
            skill_level=user.skill_level.value,
            last_recommendation_at=user.last_recommendation_at
        )


class UserStatsResponseDto(CamelResponse):
    """DTO for user statistics."""

    wallet_address: str
    username: Optional[str] = None
    total_attempts: int
    correct_attempts: int
    success_rate: int
    completed_puzzles: int
    longest_streak: int
    minted_attempts: int
    preferred_themes: List[str] = Field(default_factory=list)
    preferred_difficulty: str
    skill_level: str
    last_recommendation_at: Optional[datetime] = None

    @classmethod
    def from_stats(cls, stats: UserStats) -> "UserStatsResponseDto":
        data = stats.model_dump()
        data["preferred_difficulty"] = stats.preferred_difficulty.value
        data["skill_level"] = stats.skill_level.value
        return cls(**data)


class HealthCheckResponseDto(BaseModel):
    """DTO for health check response."""

    status: str = Field(..., description="Overall service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    services: Dict[str, str] = Field(default_factory=dict, description="Component statuses")
    timestamp: str
