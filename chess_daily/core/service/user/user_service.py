"""
User lookup, lazy registration and statistics
"""

from typing import Optional

from chess_daily.core.exceptions.base import InvalidInputError, UserNotFoundError
from chess_daily.core.logger.logger import get_logger
from chess_daily.core.service.attempt.validators import WalletValidator
from chess_daily.core.service.recommendation.profile import build_profile, longest_streak
from chess_daily.core.service.user.models import User, UserStats
from chess_daily.infra.repository.base import Repository

logger = get_logger(__name__)


def normalize_wallet_address(wallet_address: Optional[str]) -> str:
    """Strip and validate a wallet address; base58 addresses are case sensitive"""
    is_valid, error_msg = WalletValidator.validate_wallet_address(wallet_address)
    if not is_valid:
        raise InvalidInputError(error_msg, {"field": "wallet_address"})
    return wallet_address.strip()


class UserService:
    """Service for user records"""

    def __init__(self, repository: Repository):
        self.repository = repository

    async def get_or_create_user(self, wallet_address: str, username: Optional[str] = None) -> User:
        """Return the user for a wallet, creating it on first interaction"""
        wallet_address = normalize_wallet_address(wallet_address)

        user = await self.repository.get_user(wallet_address)
        if user is None:
            user = await self.repository.insert_user_if_absent(
                User(wallet_address=wallet_address, username=username)
            )
            logger.info(
                "New user created",
                extra={"wallet_address": wallet_address}
            )

        if username and user.username != username:
            # Writes only the username column
            user = await self.repository.set_username(wallet_address, username) or user
        return user

    async def get_user(self, wallet_address: str) -> User:
        wallet_address = normalize_wallet_address(wallet_address)
        user = await self.repository.get_user(wallet_address)
        if user is None:
            raise UserNotFoundError(wallet_address)
        return user

    async def get_stats(self, wallet_address: str) -> UserStats:
        """Statistics derived from the full attempt history"""
        user = await self.get_user(wallet_address)

        attempts = await self.repository.list_attempts_for_user(user.wallet_address)
        puzzles_by_id = {puzzle.id: puzzle for puzzle in await self.repository.list_puzzles()}
        profile = build_profile(attempts, puzzles_by_id)

        return UserStats(
            wallet_address=user.wallet_address,
            username=user.username,
            total_attempts=profile.total_attempts,
            correct_attempts=profile.correct_attempts,
            success_rate=profile.success_rate,
            completed_puzzles=profile.completed_puzzles,
            longest_streak=longest_streak(attempts),
            minted_attempts=sum(1 for attempt in attempts if attempt.is_minted),
            preferred_themes=profile.preferred_themes,
            preferred_difficulty=profile.preferred_difficulty,
            skill_level=profile.skill_level,
            last_recommendation_at=user.last_recommendation_at
        )
