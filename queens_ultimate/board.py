from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, Union

Cell = Tuple[int, int]

# Cell states
EMPTY = 0
QUEEN = 1
MARKED = 2

CELL_STATES = (EMPTY, QUEEN, MARKED)

_STATE_CHARS = {".": EMPTY, "Q": QUEEN, "X": MARKED}
_CHAR_FOR_STATE = {v: k for k, v in _STATE_CHARS.items()}


class PuzzleError(ValueError):
    """Raised for malformed puzzle definitions."""


def in_bounds(r, c, N):
    return 0 <= r < N and 0 <= c < N

def touches(r1, c1, r2, c2):
    return abs(r1 - r2) <= 1 and abs(c1 - c2) <= 1


# ============================================================
# Puzzle (immutable level definition)
# ============================================================
@dataclass(frozen=True)
class Puzzle:
    size: int
    regions: Tuple[Tuple[int, ...], ...]
    name: str = ""

    @classmethod
    def from_rows(cls, rows: Sequence[Union[str, Sequence[int]]], name: str = "") -> "Puzzle":
        """Build a puzzle from rows of region ids.

        Rows may be strings of single-character ids ("00112") or sequences of
        ints. Whitespace inside string rows is ignored.
        """
        grid = []
        for row in rows:
            if isinstance(row, str):
                grid.append(tuple(int(ch, 36) for ch in row if not ch.isspace()))
            else:
                grid.append(tuple(int(v) for v in row))
        return cls(size=len(grid), regions=tuple(grid), name=name)

    def region_of(self, r: int, c: int) -> int:
        return self.regions[r][c]

    def region_ids(self) -> List[int]:
        return sorted({rid for row in self.regions for rid in row})

    def region_cells(self, rid: int) -> List[Cell]:
        out = []
        for r in range(self.size):
            for c in range(self.size):
                if self.regions[r][c] == rid:
                    out.append((r, c))
        return out

    def cells(self) -> Iterator[Cell]:
        for r in range(self.size):
            for c in range(self.size):
                yield (r, c)

    def validate(self) -> None:
        N = self.size
        if N <= 0:
            raise PuzzleError("Puzzle size must be positive")
        for i, row in enumerate(self.regions):
            if len(row) != N:
                raise PuzzleError(f"Row {i} has {len(row)} cells, expected {N}")
        ids = self.region_ids()
        if len(ids) != N:
            raise PuzzleError(f"Expected {N} regions, found {len(ids)}: {ids}")
        if any(rid < 0 for rid in ids):
            raise PuzzleError(f"Region ids must be non-negative: {ids}")


# ============================================================
# Board (mutable play state)
# ============================================================
class Board:
    """N x N grid of cell states.

    Legality is never enforced here: two queens in a row is a perfectly good
    board as far as this class is concerned. See `rules` for the checks.
    """

    def __init__(self, size: int):
        self.size = size
        self.cells: List[List[int]] = [[EMPTY for _ in range(size)] for _ in range(size)]

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Board":
        """Parse rows like "Q.X." ('.' empty, 'X' marked, 'Q' queen)."""
        rows = [row.replace(" ", "") for row in rows]
        board = cls(len(rows))
        for r, row in enumerate(rows):
            if len(row) != board.size:
                raise ValueError(f"Row {r} has {len(row)} cells, expected {board.size}")
            for c, ch in enumerate(row.upper()):
                if ch not in _STATE_CHARS:
                    raise ValueError(f"Unknown cell character {ch!r} at ({r}, {c})")
                board.cells[r][c] = _STATE_CHARS[ch]
        return board

    def get(self, r: int, c: int) -> int:
        return self.cells[r][c]

    def set_cell(self, r: int, c: int, state: int) -> None:
        if state not in CELL_STATES:
            raise ValueError(f"Unknown cell state: {state!r}")
        self.cells[r][c] = state

    def clear(self) -> None:
        for row in self.cells:
            for c in range(self.size):
                row[c] = EMPTY

    def queens(self) -> List[Cell]:
        return [(r, c) for r in range(self.size) for c in range(self.size) if self.cells[r][c] == QUEEN]

    def count(self, state: int) -> int:
        return sum(row.count(state) for row in self.cells)

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(row) for row in self.cells)

    def copy(self) -> "Board":
        other = Board(self.size)
        other.cells = [list(row) for row in self.cells]
        return other

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    def __str__(self):
        return "\n".join("".join(_CHAR_FOR_STATE[s] for s in row) for row in self.cells)
