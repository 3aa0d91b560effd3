"""User router."""

from typing import List

from fastapi import APIRouter, Depends

from chess_daily.api.controller.dto.input_dto import RegisterUserRequestDto
from chess_daily.api.controller.dto.output_dto import AttemptResponseDto, UserResponseDto, UserStatsResponseDto
from chess_daily.api.controller.user.user_controller import UserController
from chess_daily.core.dependencies import get_user_controller

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "User not found"}}
)


@router.post(
    "",
    response_model=UserResponseDto,
    summary="Register a wallet",
    description="Get or create the user for a wallet address"
)
async def register_user(
    request: RegisterUserRequestDto,
    controller: UserController = Depends(get_user_controller)
) -> UserResponseDto:
    return await controller.register(request)


@router.get("/{wallet_address}", response_model=UserResponseDto, summary="Get a user")
async def get_user(
    wallet_address: str,
    controller: UserController = Depends(get_user_controller)
) -> UserResponseDto:
    return await controller.get_user(wallet_address)


@router.get(
    "/{wallet_address}/stats",
    response_model=UserStatsResponseDto,
    summary="Get user statistics",
    description="Success rate, completed puzzles, longest streak and minted count"
)
async def get_user_stats(
    wallet_address: str,
    controller: UserController = Depends(get_user_controller)
) -> UserStatsResponseDto:
    return await controller.get_stats(wallet_address)


@router.get(
    "/{wallet_address}/minted",
    response_model=List[AttemptResponseDto],
    summary="List minted attempts"
)
async def list_minted_attempts(
    wallet_address: str,
    controller: UserController = Depends(get_user_controller)
) -> List[AttemptResponseDto]:
    return await controller.list_minted(wallet_address)
