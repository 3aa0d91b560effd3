"""
Initial puzzle catalog, seeded once at startup into an empty repository.
"""

from typing import Any, Dict, List, Optional

from chess_daily.core.logger.logger import get_logger
from chess_daily.core.service.puzzle.models import Puzzle
from chess_daily.infra.repository.base import Repository

logger = get_logger(__name__)

_ITALIAN = "r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 2 4"
_ITALIAN_PGN = "1. e4 e5 2. Nf3 Nc6 3. Bc4"
_BISHOPS_OPENING = "rnbqkb1r/pppp1ppp/5n2/4p3/2B1P3/8/PPPP1PPP/RNBQK1NR b KQkq - 2 3"
_BISHOPS_OPENING_PGN = "1. e4 e5 2. Bc4 Nf6"

INITIAL_PUZZLES: List[Dict[str, Any]] = [
    {"fen": _ITALIAN, "pgn": _ITALIAN_PGN, "to_move": "white", "difficulty": "easy",
     "solution": "Bxf7+", "themes": ["opening", "tactics"], "rating": 1200, "popularity": 80, "success_percentage": 65},
    {"fen": _BISHOPS_OPENING, "pgn": _BISHOPS_OPENING_PGN, "to_move": "black", "difficulty": "easy",
     "solution": "Nxe4", "themes": ["tactics"], "rating": 1100, "popularity": 70, "success_percentage": 60},
    {"fen": _ITALIAN, "pgn": _ITALIAN_PGN, "to_move": "white", "difficulty": "medium",
     "solution": "Ng5", "themes": ["attack"], "rating": 1300, "popularity": 75, "success_percentage": 55},
    {"fen": _BISHOPS_OPENING, "pgn": _BISHOPS_OPENING_PGN, "to_move": "black", "difficulty": "medium",
     "solution": "Bc5", "themes": ["defense"], "rating": 1250, "popularity": 60, "success_percentage": 50},
    {"fen": _ITALIAN, "pgn": _ITALIAN_PGN, "to_move": "white", "difficulty": "hard",
     "solution": "d4", "themes": ["center"], "rating": 1400, "popularity": 50, "success_percentage": 40},
    {"fen": _BISHOPS_OPENING, "pgn": _BISHOPS_OPENING_PGN, "to_move": "black", "difficulty": "hard",
     "solution": "Nxe4", "themes": ["tactics", "defense"], "rating": 1350, "popularity": 45, "success_percentage": 35},
    {"fen": _ITALIAN, "pgn": _ITALIAN_PGN, "to_move": "white", "difficulty": "easy",
     "solution": "Bc4", "themes": ["opening"], "rating": 1200, "popularity": 80, "success_percentage": 65},
    {"fen": _BISHOPS_OPENING, "pgn": _BISHOPS_OPENING_PGN, "to_move": "black", "difficulty": "easy",
     "solution": "e4", "themes": ["tactics"], "rating": 1100, "popularity": 70, "success_percentage": 60},
    {"fen": _ITALIAN, "pgn": _ITALIAN_PGN, "to_move": "white", "difficulty": "medium",
     "solution": "Nc3", "themes": ["development"], "rating": 1300, "popularity": 75, "success_percentage": 55},
    {"fen": _BISHOPS_OPENING, "pgn": _BISHOPS_OPENING_PGN, "to_move": "black", "difficulty": "medium",
     "solution": "d5", "themes": ["center"], "rating": 1250, "popularity": 60, "success_percentage": 50},
]


def load_initial_catalog() -> List[Puzzle]:
    """Build Puzzle entities for the bundled catalog, in id order"""
    return [Puzzle(**data) for data in INITIAL_PUZZLES]


async def seed_catalog(repository: Repository, puzzles: Optional[List[Puzzle]] = None) -> int:
    """
    Store the catalog when the repository has no puzzles yet.

    Returns the number of puzzles written (0 when the catalog already exists).
    """
    existing = await repository.list_puzzles()
    if existing:
        logger.debug("Puzzle catalog already seeded", extra={"puzzle_count": len(existing)})
        return 0

    puzzles = puzzles if puzzles is not None else load_initial_catalog()
    for puzzle in puzzles:
        await repository.put_puzzle(puzzle)

    logger.info("Initialized puzzles in storage", extra={"puzzle_count": len(puzzles)})
    return len(puzzles)
