"""
Adaptive puzzle recommendation.

The user's profile is recomputed from the full attempt history on every call and
then used to pick an unsolved puzzle, falling back tier by tier:

    difficulty + preferred theme -> difficulty -> one tier easier
    -> any unsolved -> whole catalog
"""

import random
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel

from chess_daily.core.exceptions.base import NoPuzzlesAvailableError, UserNotFoundError
from chess_daily.core.logger.logger import get_logger
from chess_daily.core.service.puzzle.models import Puzzle
from chess_daily.core.service.recommendation.profile import UserProfile, build_profile
from chess_daily.core.service.user.models import ProfileUpdate, User
from chess_daily.core.service.user.user_service import normalize_wallet_address
from chess_daily.infra.repository.base import Repository

logger = get_logger(__name__)


class RecommendationTier(str, Enum):
    THEME_AND_DIFFICULTY = "theme_and_difficulty"
    DIFFICULTY = "difficulty"
    EASIER = "easier"
    UNSOLVED = "unsolved"
    CATALOG = "catalog"


class Recommendation(BaseModel):
    puzzle: Puzzle
    reason: str
    tier: RecommendationTier
    profile: UserProfile


class RecommendationEngine:
    """Builds a user profile from attempts and selects a matching puzzle"""

    def __init__(
        self,
        repository: Repository,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.repository = repository
        self.rng = rng or random.Random()
        self._clock = clock

    async def recommend(self, user_id: str) -> Recommendation:
        user_id = normalize_wallet_address(user_id)

        catalog = await self.repository.list_puzzles()
        if not catalog:
            logger.error("Puzzle catalog is empty, cannot recommend", extra={"wallet_address": user_id})
            raise NoPuzzlesAvailableError("No puzzles available for recommendation")

        attempts = await self.repository.list_attempts_for_user(user_id)
        profile = build_profile(attempts, {puzzle.id: puzzle for puzzle in catalog})

        await self._store_profile(user_id, profile)

        recommendation = self.select(profile, catalog)
        logger.info(
            "Puzzle recommended",
            extra={
                "wallet_address": user_id,
                "puzzle_id": recommendation.puzzle.id,
                "tier": recommendation.tier.value,
                "success_rate": profile.success_rate,
                "preferred_difficulty": profile.preferred_difficulty.value,
                "preferred_themes": profile.preferred_themes
            }
        )
        return recommendation

    def select(self, profile: UserProfile, catalog: List[Puzzle]) -> Recommendation:
        """Pick a puzzle for an already computed profile"""
        solved = set(profile.solved_puzzle_ids)
        unsolved = [puzzle for puzzle in catalog if puzzle.id not in solved]
        target = profile.preferred_difficulty

        at_target = [puzzle for puzzle in unsolved if puzzle.difficulty == target]

        themed = [
            puzzle for puzzle in at_target
            if any(puzzle.has_theme(theme) for theme in profile.preferred_themes)
        ]
        if themed:
            puzzle = self.rng.choice(themed)
            theme = next(theme for theme in profile.preferred_themes if puzzle.has_theme(theme))
            return self._build(
                puzzle, RecommendationTier.THEME_AND_DIFFICULTY, profile,
                f"Based on your success in {theme} puzzles, here is a {target.value} {theme} challenge."
            )

        if at_target:
            return self._build(
                self.rng.choice(at_target), RecommendationTier.DIFFICULTY, profile,
                f"This {target.value} puzzle matches your current skill level."
            )

        easier = target.easier()
        easier_puzzles = [puzzle for puzzle in unsolved if puzzle.difficulty == easier]
        if easier_puzzles:
            return self._build(
                self.rng.choice(easier_puzzles), RecommendationTier.EASIER, profile,
                f"Stepping down to {easier.value} puzzles to build up your skills."
            )

        if unsolved:
            return self._build(
                self.rng.choice(unsolved), RecommendationTier.UNSOLVED, profile,
                "A new puzzle for you."
            )

        return self._build(
            self.rng.choice(catalog), RecommendationTier.CATALOG, profile,
            "You've solved every puzzle! Here's one to revisit."
        )

    def _build(self, puzzle: Puzzle, tier: RecommendationTier, profile: UserProfile, reason: str) -> Recommendation:
        return Recommendation(puzzle=puzzle, reason=reason, tier=tier, profile=profile)

    async def _store_profile(self, user_id: str, profile: UserProfile) -> User:
        """Write the fresh profile onto the user record, creating the user if needed"""
        await self.repository.insert_user_if_absent(User(wallet_address=user_id))
        profile_update = ProfileUpdate(
            success_rate=profile.success_rate,
            completed_puzzles=profile.completed_puzzles,
            preferred_themes=list(profile.preferred_themes),
            preferred_difficulty=profile.preferred_difficulty,
            skill_level=profile.skill_level,
            last_recommendation_at=self._clock()
        )
        user = await self.repository.update_user_profile(user_id, profile_update)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
