"""
User model with the derived puzzle profile
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from chess_daily.core.service.puzzle.models import Difficulty


class SkillLevel(str, Enum):
    """Coarse skill label shown on the profile"""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class User(BaseModel):
    """User record keyed by wallet address"""
    wallet_address: str
    username: Optional[str] = None
    # Derived profile, only written by the recommendation path
    success_rate: int = Field(default=50, ge=0, le=100)
    completed_puzzles: int = Field(default=0, ge=0)
    preferred_themes: List[str] = Field(default_factory=list)
    preferred_difficulty: Difficulty = Difficulty.MEDIUM
    skill_level: SkillLevel = SkillLevel.INTERMEDIATE
    last_recommendation_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserStats(BaseModel):
    """Aggregate statistics computed from a user's attempt history"""
    wallet_address: str
    username: Optional[str] = None
    total_attempts: int = 0
    correct_attempts: int = 0
    success_rate: int = 50
    completed_puzzles: int = 0
    longest_streak: int = 0
    minted_attempts: int = 0
    preferred_themes: List[str] = Field(default_factory=list)
    preferred_difficulty: Difficulty = Difficulty.MEDIUM
    skill_level: SkillLevel = SkillLevel.INTERMEDIATE
    last_recommendation_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Profile columns written back by the recommendation path"""
    success_rate: int = Field(ge=0, le=100)
    completed_puzzles: int = Field(ge=0)
    preferred_themes: List[str] = Field(default_factory=list)
    preferred_difficulty: Difficulty
    skill_level: SkillLevel
    last_recommendation_at: datetime
