import pytest
from pydantic import ValidationError

from chess_daily.core.service.puzzle.catalog import INITIAL_PUZZLES, load_initial_catalog, seed_catalog
from chess_daily.core.service.puzzle.models import Difficulty

from helpers import make_puzzle


class TestPuzzle:
    """Puzzle entity validation"""

    def test_themes_are_normalized(self):
        puzzle = make_puzzle("easy", [" Fork ", "PIN"])
        assert puzzle.themes == ["fork", "pin"]
        assert puzzle.has_theme("fork")

    def test_duplicate_themes_rejected(self):
        with pytest.raises(ValidationError):
            make_puzzle("easy", ["fork", "Fork"])

    def test_blank_theme_rejected(self):
        with pytest.raises(ValidationError):
            make_puzzle("easy", ["fork", "  "])

    def test_unknown_difficulty_rejected(self):
        with pytest.raises(ValidationError):
            make_puzzle("impossible", ["fork"])

    def test_puzzle_is_immutable(self):
        puzzle = make_puzzle("easy", ["fork"])
        with pytest.raises(ValidationError):
            puzzle.solution = "d4"

    def test_without_solution_keeps_board_fields(self):
        puzzle = make_puzzle("medium", ["pin"], id=4, rating=1300)
        view = puzzle.without_solution()
        assert view.id == 4
        assert view.fen == puzzle.fen
        assert view.rating == 1300
        assert "solution" not in view.model_dump()


class TestDifficulty:

    def test_easier_steps_down_one_tier(self):
        assert Difficulty.HARD.easier() == Difficulty.MEDIUM
        assert Difficulty.MEDIUM.easier() == Difficulty.EASY
        assert Difficulty.EASY.easier() == Difficulty.EASY


class TestCatalog:
    """Bundled catalog and seeding"""

    def test_catalog_has_ten_puzzles(self):
        puzzles = load_initial_catalog()
        assert len(puzzles) == len(INITIAL_PUZZLES) == 10
        assert {puzzle.difficulty for puzzle in puzzles} == set(Difficulty)

    async def test_seed_assigns_ids_in_order(self, repository):
        written = await seed_catalog(repository)

        puzzles = await repository.list_puzzles()
        assert written == 10
        assert [puzzle.id for puzzle in puzzles] == list(range(1, 11))
        assert puzzles[0].solution == "Bxf7+"
        assert puzzles[9].solution == "d5"

    async def test_seed_skips_populated_store(self, seeded_repository):
        assert await seed_catalog(seeded_repository) == 0
        assert len(await seeded_repository.list_puzzles()) == 10

    async def test_difficulty_and_theme_filters(self, seeded_repository):
        hard = await seeded_repository.get_puzzles_by_difficulty("hard")
        defense = await seeded_repository.get_puzzles_by_themes(["defense"])

        assert [puzzle.id for puzzle in hard] == [5, 6]
        assert [puzzle.id for puzzle in defense] == [4, 6]
