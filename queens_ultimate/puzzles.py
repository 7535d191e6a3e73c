"""Built-in puzzle library and the daily level selection.

Each entry stores its region layout as rows of region ids plus one known
solution (column of the queen in each row), so the library can be checked
without trusting the layouts by eye.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Set, Tuple

from .board import Cell, Puzzle
from .rules import is_win
from .solver import count_solutions, solution_board

LEVELS_PER_DAY = 3


@dataclass(frozen=True)
class LibraryEntry:
    name: str
    tier: int
    rows: Tuple[str, ...]
    solution: Tuple[int, ...]

    def puzzle(self) -> Puzzle:
        return Puzzle.from_rows(self.rows, name=self.name)

    def solution_cells(self) -> Set[Cell]:
        return {(r, c) for r, c in enumerate(self.solution)}


LIBRARY: List[LibraryEntry] = [
    LibraryEntry(
        name="lowland",
        tier=0,
        rows=(
            "00011",
            "00111",
            "22311",
            "22331",
            "22334",
        ),
        solution=(1, 3, 0, 2, 4),
    ),
    LibraryEntry(
        name="corner-post",
        tier=0,
        rows=(
            "00001",
            "00221",
            "03344",
            "33444",
            "33344",
        ),
        solution=(4, 2, 0, 3, 1),
    ),
    LibraryEntry(
        name="six-fold",
        tier=1,
        rows=(
            "001111",
            "111112",
            "444442",
            "333444",
            "344444",
            "444455",
        ),
        solution=(1, 3, 5, 0, 2, 4),
    ),
    LibraryEntry(
        name="lattice",
        tier=1,
        rows=(
            "0000000",
            "0112222",
            "0222223",
            "0555553",
            "0444555",
            "0455555",
            "0555566",
        ),
        solution=(0, 2, 4, 6, 1, 3, 5),
    ),
    LibraryEntry(
        name="harbour",
        tier=2,
        rows=(
            "00000007",
            "01122227",
            "02222237",
            "05555537",
            "04445557",
            "04555557",
            "05555667",
            "77777777",
        ),
        solution=(0, 2, 4, 6, 1, 3, 5, 7),
    ),
]


# ============================================================
# Symmetries (the 8 rotations/reflections of the square)
# ============================================================
_SYMMETRIES: List[Callable[[int, int, int], Cell]] = [
    lambda r, c, n: (r, c),
    lambda r, c, n: (c, n - 1 - r),
    lambda r, c, n: (n - 1 - r, n - 1 - c),
    lambda r, c, n: (n - 1 - c, r),
    lambda r, c, n: (r, n - 1 - c),
    lambda r, c, n: (n - 1 - r, c),
    lambda r, c, n: (c, r),
    lambda r, c, n: (n - 1 - c, n - 1 - r),
]


def transform(puzzle: Puzzle, k: int) -> Puzzle:
    """Apply symmetry `k` (0..7) to the region layout."""
    N = puzzle.size
    f = _SYMMETRIES[k % len(_SYMMETRIES)]
    grid = [[0] * N for _ in range(N)]
    for r in range(N):
        for c in range(N):
            rr, cc = f(r, c, N)
            grid[rr][cc] = puzzle.regions[r][c]
    return Puzzle(size=N, regions=tuple(tuple(row) for row in grid), name=puzzle.name)


def transform_cells(cells: Set[Cell], N: int, k: int) -> Set[Cell]:
    f = _SYMMETRIES[k % len(_SYMMETRIES)]
    return {f(r, c, N) for r, c in cells}


# ============================================================
# Daily selection
# ============================================================
def _tiers() -> Dict[int, List[LibraryEntry]]:
    tiers: Dict[int, List[LibraryEntry]] = {}
    for entry in LIBRARY:
        tiers.setdefault(entry.tier, []).append(entry)
    return dict(sorted(tiers.items()))


def puzzles_for_date(day: date) -> List[Puzzle]:
    """The day's levels: one puzzle per tier, easiest first.

    The choice is a pure function of the date, so everyone gets the same
    three boards on the same day.
    """
    rng = random.Random(day.toordinal())
    out: List[Puzzle] = []
    for _, entries in _tiers().items():
        entry = rng.choice(entries)
        out.append(transform(entry.puzzle(), rng.randrange(len(_SYMMETRIES))))
    return out[:LEVELS_PER_DAY]


def check_library() -> List[str]:
    """Returns a list of problems found in the library (empty when clean)."""
    problems: List[str] = []
    for entry in LIBRARY:
        try:
            puzzle = entry.puzzle()
            puzzle.validate()
        except ValueError as e:
            problems.append(f"{entry.name}: {e}")
            continue

        if len(entry.solution) != puzzle.size:
            problems.append(f"{entry.name}: solution has {len(entry.solution)} rows, expected {puzzle.size}")
            continue
        if not is_win(puzzle, solution_board(puzzle, entry.solution_cells())):
            problems.append(f"{entry.name}: recorded solution is not valid")

        n = count_solutions(puzzle, limit=2)
        if n != 1:
            problems.append(f"{entry.name}: expected a unique solution, found {'several' if n > 1 else 'none'}")
    return problems
