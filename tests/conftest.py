import pytest

from queens_ultimate.board import QUEEN, Puzzle
from queens_ultimate.puzzles import LIBRARY


# Common test fixtures
@pytest.fixture
def quadrants():
    """4x4 board split into four 2x2 regions (two solutions)."""
    return Puzzle.from_rows(["0011", "0011", "2233", "2233"], name="quadrants")


@pytest.fixture
def quadrants_solution():
    return {(0, 1), (1, 3), (2, 0), (3, 2)}


@pytest.fixture
def row_claim_puzzle():
    """4x4 puzzle whose top-left region lies entirely in row 0."""
    return Puzzle.from_rows(["0011", "2211", "2233", "2233"], name="row-claim")


@pytest.fixture
def corner_post():
    entry = next(e for e in LIBRARY if e.name == "corner-post")
    return entry.puzzle()


@pytest.fixture
def place_queen():
    """Click (r, c) until it holds a queen, the way a player would."""
    def _place(session, r, c):
        for _ in range(3):
            if session.board.get(r, c) == QUEEN:
                return
            session.click(r, c)
        assert session.board.get(r, c) == QUEEN
    return _place
