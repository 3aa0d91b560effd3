"""
Input DTOs for puzzle API endpoints.
"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional


class CamelModel(BaseModel):
    """Accepts both camelCase (frontend) and snake_case field names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SubmitAttemptRequestDto(CamelModel):
    """DTO for move submission."""

    wallet_address: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Wallet address of the player"
    )
    puzzle_id: int = Field(..., ge=1, description="Puzzle the move is played against")
    move: str = Field(..., max_length=32, description="Move in SAN or UCI notation")
    elapsed_seconds: int = Field(..., ge=0, description="Seconds spent before submitting")

    @field_validator('wallet_address')
    @classmethod
    def validate_wallet_address(cls, v):
        if not v or not v.strip():
            raise ValueError('Wallet address cannot be empty')
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "walletAddress": "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU",
                "puzzleId": 1,
                "move": "Bxf7+",
                "elapsedSeconds": 42
            }
        }


class MintReferenceRequestDto(CamelModel):
    """DTO sent by the minting collaborator after an artifact is minted."""

    reference: str = Field(..., min_length=1, max_length=255, description="Minted artifact reference")

    @field_validator('reference')
    @classmethod
    def validate_reference(cls, v):
        if not v.strip():
            raise ValueError('Mint reference cannot be empty')
        return v.strip()


class RegisterUserRequestDto(CamelModel):
    """DTO for first wallet interaction."""

    wallet_address: str = Field(..., min_length=1, max_length=255)
    username: Optional[str] = Field(None, max_length=64)

    @field_validator('wallet_address')
    @classmethod
    def validate_wallet_address(cls, v):
        if not v or not v.strip():
            raise ValueError('Wallet address cannot be empty')
        return v.strip()
