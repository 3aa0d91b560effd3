from typing import Any, Dict, Optional
from fastapi import status

from chess_daily.core.exceptions.handler import ServiceError, ServiceErrorCode


class PuzzleNotFoundError(ServiceError):
    def __init__(self, puzzle_id: int, message: str = "Puzzle not found"):
        super().__init__(
            code=ServiceErrorCode.PUZZLE_NOT_FOUND,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"puzzle_id": puzzle_id},
        )


class AttemptNotFoundError(ServiceError):
    def __init__(self, attempt_id: int, message: str = "Attempt not found"):
        super().__init__(
            code=ServiceErrorCode.ATTEMPT_NOT_FOUND,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"attempt_id": attempt_id},
        )


class UserNotFoundError(ServiceError):
    def __init__(self, wallet_address: str, message: str = "User not found"):
        super().__init__(
            code=ServiceErrorCode.USER_NOT_FOUND,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"wallet_address": wallet_address},
        )


class AttemptsExhaustedError(ServiceError):
    def __init__(self, user_id: str, puzzle_id: int, max_attempts: int):
        super().__init__(
            code=ServiceErrorCode.ATTEMPTS_EXHAUSTED,
            message=f"You've already used all {max_attempts} attempts for this puzzle",
            status_code=status.HTTP_409_CONFLICT,
            details={"puzzle_id": puzzle_id, "max_attempts": max_attempts},
            context={"user_id": user_id},
        )


class MintReferenceAlreadySetError(ServiceError):
    def __init__(self, attempt_id: int, mint_reference: str):
        super().__init__(
            code=ServiceErrorCode.MINT_REFERENCE_ALREADY_SET,
            message="This attempt has already been minted",
            status_code=status.HTTP_409_CONFLICT,
            details={"attempt_id": attempt_id, "mint_reference": mint_reference},
        )


class NoPuzzlesAvailableError(ServiceError):
    def __init__(self, message: str = "No puzzle available"):
        super().__init__(
            code=ServiceErrorCode.NO_PUZZLES_AVAILABLE,
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


class MalformedMoveError(ServiceError):
    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ServiceErrorCode.MALFORMED_MOVE,
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=detail,
        )


class InvalidInputError(ServiceError):
    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ServiceErrorCode.INVALID_INPUT,
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=detail,
        )


class LockUnavailableError(ServiceError):
    def __init__(self, key: str):
        super().__init__(
            code=ServiceErrorCode.SERVICE_UNAVAILABLE,
            message="Another submission for this puzzle is in progress. Please try again.",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            context={"lock_key": key},
        )
