"""User controller: registration, stats and minted attempts."""

from typing import List

from chess_daily.api.controller.dto.input_dto import RegisterUserRequestDto
from chess_daily.api.controller.dto.output_dto import AttemptResponseDto, UserResponseDto, UserStatsResponseDto
from chess_daily.core.service.attempt.attempt_tracker import AttemptTracker
from chess_daily.core.service.user.user_service import UserService


class UserController:
    """Controller for user operations."""

    def __init__(self, user_service: UserService, attempt_tracker: AttemptTracker):
        self.user_service = user_service
        self.attempt_tracker = attempt_tracker

    async def register(self, request: RegisterUserRequestDto) -> UserResponseDto:
        user = await self.user_service.get_or_create_user(request.wallet_address, request.username)
        return UserResponseDto.from_user(user)

    async def get_user(self, wallet_address: str) -> UserResponseDto:
        return UserResponseDto.from_user(await self.user_service.get_user(wallet_address))

    async def get_stats(self, wallet_address: str) -> UserStatsResponseDto:
        return UserStatsResponseDto.from_stats(await self.user_service.get_stats(wallet_address))

    async def list_minted(self, wallet_address: str) -> List[AttemptResponseDto]:
        attempts = await self.attempt_tracker.list_minted_attempts(wallet_address)
        return [AttemptResponseDto.from_attempt(attempt) for attempt in attempts]
