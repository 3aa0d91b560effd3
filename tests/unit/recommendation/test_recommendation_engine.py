import random
from datetime import datetime, timezone

import pytest

from chess_daily.core.exceptions.base import NoPuzzlesAvailableError
from chess_daily.core.service.puzzle.models import Difficulty
from chess_daily.core.service.recommendation.profile import UserProfile
from chess_daily.core.service.recommendation.recommendation_engine import RecommendationEngine, RecommendationTier
from chess_daily.core.service.user.models import SkillLevel, User

from helpers import WALLET, make_attempt, make_puzzle

FIXED_NOW = datetime(2025, 1, 1, 9, tzinfo=timezone.utc)


def make_engine(repository, seed=7):
    return RecommendationEngine(repository, rng=random.Random(seed), clock=lambda: FIXED_NOW)


class TestRecommend:

    async def test_fresh_user_gets_medium_puzzle(self, seeded_repository):
        recommendation = await make_engine(seeded_repository).recommend(WALLET)

        assert recommendation.tier == RecommendationTier.DIFFICULTY
        assert recommendation.puzzle.difficulty == Difficulty.MEDIUM
        assert recommendation.puzzle.id in {3, 4, 9, 10}
        assert recommendation.profile.success_rate == 50
        assert recommendation.reason == "This medium puzzle matches your current skill level."

    async def test_fresh_profile_is_stored(self, seeded_repository):
        await make_engine(seeded_repository).recommend(WALLET)

        user = await seeded_repository.get_user(WALLET)
        assert user.success_rate == 50
        assert user.preferred_difficulty == Difficulty.MEDIUM
        assert user.last_recommendation_at == FIXED_NOW

    async def test_preferred_theme_drives_pick(self, repository):
        """Five attempts, four correct, three correct on fork puzzles"""
        for difficulty, themes in [
            ("medium", ["fork"]),
            ("medium", ["fork"]),
            ("medium", ["fork"]),
            ("easy", ["pin"]),
            ("hard", ["fork"]),
            ("hard", ["pin"]),
            ("medium", ["fork"]),
        ]:
            await repository.put_puzzle(make_puzzle(difficulty, themes))
        for attempt in [
            make_attempt(1, True),
            make_attempt(2, True),
            make_attempt(3, True),
            make_attempt(4, False, attempt_number=1),
            make_attempt(4, True, attempt_number=2),
        ]:
            await repository.put_attempt(attempt)

        for seed in range(5):
            recommendation = await make_engine(repository, seed).recommend(WALLET)

            assert recommendation.profile.success_rate == 80
            assert recommendation.profile.preferred_themes == ["fork"]
            assert recommendation.tier == RecommendationTier.THEME_AND_DIFFICULTY
            assert recommendation.puzzle.id == 5
            assert "fork" in recommendation.reason
            assert "hard" in recommendation.reason

        user = await repository.get_user(WALLET)
        assert user.preferred_themes == ["fork"]
        assert user.skill_level == SkillLevel.ADVANCED
        assert user.completed_puzzles == 4

    async def test_stale_stored_profile_is_recomputed(self, seeded_repository):
        await seeded_repository.put_user(User(
            wallet_address=WALLET,
            username="magnus",
            success_rate=5,
            preferred_difficulty=Difficulty.EASY,
            skill_level=SkillLevel.BEGINNER
        ))

        recommendation = await make_engine(seeded_repository).recommend(WALLET)

        assert recommendation.puzzle.difficulty == Difficulty.MEDIUM
        user = await seeded_repository.get_user(WALLET)
        assert user.success_rate == 50
        assert user.username == "magnus"

    async def test_empty_catalog(self, repository):
        with pytest.raises(NoPuzzlesAvailableError):
            await make_engine(repository).recommend(WALLET)


class TestSelect:
    """Fallback tiers over the seeded catalog"""

    @pytest.fixture
    async def catalog(self, seeded_repository):
        return await seeded_repository.list_puzzles()

    def test_never_returns_solved_puzzle(self, catalog):
        profile = UserProfile(solved_puzzle_ids=[1, 2, 3, 4, 5])
        for seed in range(25):
            recommendation = make_engine(None, seed).select(profile, catalog)
            assert recommendation.puzzle.id not in profile.solved_puzzle_ids

    def test_steps_down_when_target_tier_is_solved(self, catalog):
        profile = UserProfile(preferred_difficulty=Difficulty.MEDIUM, solved_puzzle_ids=[3, 4, 9, 10])

        recommendation = make_engine(None).select(profile, catalog)

        assert recommendation.tier == RecommendationTier.EASIER
        assert recommendation.puzzle.difficulty == Difficulty.EASY
        assert recommendation.reason == "Stepping down to easy puzzles to build up your skills."

    def test_hard_steps_down_to_medium(self, catalog):
        profile = UserProfile(preferred_difficulty=Difficulty.HARD, solved_puzzle_ids=[5, 6])

        recommendation = make_engine(None).select(profile, catalog)

        assert recommendation.tier == RecommendationTier.EASIER
        assert recommendation.puzzle.difficulty == Difficulty.MEDIUM

    def test_any_unsolved_puzzle(self, catalog):
        solved = [puzzle.id for puzzle in catalog if puzzle.id != 5]
        profile = UserProfile(preferred_difficulty=Difficulty.MEDIUM, solved_puzzle_ids=solved)

        recommendation = make_engine(None).select(profile, catalog)

        assert recommendation.tier == RecommendationTier.UNSOLVED
        assert recommendation.puzzle.id == 5

    def test_whole_catalog_when_everything_is_solved(self, catalog):
        profile = UserProfile(solved_puzzle_ids=[puzzle.id for puzzle in catalog])

        recommendation = make_engine(None).select(profile, catalog)

        assert recommendation.tier == RecommendationTier.CATALOG
        assert recommendation.puzzle.id in profile.solved_puzzle_ids
        assert recommendation.reason == "You've solved every puzzle! Here's one to revisit."

    def test_theme_match_requires_target_difficulty(self, catalog):
        # "opening" exists only on easy puzzles, so a medium target ignores it
        profile = UserProfile(preferred_difficulty=Difficulty.MEDIUM, preferred_themes=["opening"])

        recommendation = make_engine(None).select(profile, catalog)

        assert recommendation.tier == RecommendationTier.DIFFICULTY
