from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class Attempt(BaseModel):
    """One scored move submission by a user against a puzzle"""
    id: Optional[int] = None
    user_id: str = Field(..., description="Wallet address of the submitting user")
    puzzle_id: int
    move: str
    is_correct: bool
    elapsed_seconds: int = Field(..., ge=0)
    attempt_number: int = Field(..., ge=1, description="1-based position within the user/puzzle pair")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    mint_reference: Optional[str] = Field(None, description="Minted artifact reference, attached after the fact")

    @property
    def is_minted(self) -> bool:
        return bool(self.mint_reference)
