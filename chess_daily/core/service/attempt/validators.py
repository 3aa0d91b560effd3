"""
Input validation for attempt submission.
Moves are only checked for shape here; legality is the chess engine's concern.
"""

import re
from typing import Optional, Tuple

MOVE_MIN_LENGTH = 2
MOVE_MAX_LENGTH = 10

# SAN (Nf3, exd5, e8=Q+, O-O-O) and UCI (e2e4, e7e8q) share this alphabet
_MOVE_PATTERN = re.compile(r'^[A-Za-z0-9+#=\-]+$')
_CASTLING_PATTERN = re.compile(r'^([O0]-[O0](-[O0])?)[+#]?$')
_WALLET_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._\-]{1,254}$')


class MoveValidator:
    """Validators for submitted move strings."""

    @staticmethod
    def validate_move(move: Optional[str]) -> Tuple[bool, str]:
        """
        Validate move string shape.
        Returns: (is_valid, error_message)
        """
        if move is None or not move.strip():
            return False, "Move cannot be empty"

        move = move.strip()

        if len(move) < MOVE_MIN_LENGTH or len(move) > MOVE_MAX_LENGTH:
            return False, f"Invalid move length. Expected {MOVE_MIN_LENGTH}-{MOVE_MAX_LENGTH} characters."

        if not _MOVE_PATTERN.match(move):
            return False, "Invalid move format. Expected SAN or UCI notation."

        if _CASTLING_PATTERN.match(move):
            return True, ""

        # Every non-castling move names a destination rank
        if not any(ch in "12345678" for ch in move):
            return False, "Invalid move format. Expected a destination square."

        return True, ""


class WalletValidator:
    """Validators for wallet address identifiers."""

    @staticmethod
    def validate_wallet_address(address: Optional[str]) -> Tuple[bool, str]:
        if address is None or not address.strip():
            return False, "Wallet address cannot be empty"

        if not _WALLET_PATTERN.match(address.strip()):
            return False, "Invalid wallet address format"

        return True, ""
