from __future__ import annotations

from typing import Dict, FrozenSet, List, Optional, Set

from .board import QUEEN, Board, Cell, Puzzle


# ============================================================
# Backtracking search, one row at a time
# ============================================================
def row_options(
    puzzle: Puzzle,
    r: int,
    cols: FrozenSet[int],
    regs: FrozenSet[int],
    above: Optional[int],
) -> List[int]:
    """Columns still open in row `r`.

    `cols` and `regs` are taken by the queens of rows 0..r-1 and `above` is the
    column of the queen in row r-1. With one queen per row, only that queen
    can touch row `r`.
    """
    return [
        c for c in range(puzzle.size)
        if c not in cols
        and puzzle.regions[r][c] not in regs
        and (above is None or abs(c - above) > 1)
    ]


def all_solutions(puzzle: Puzzle, board: Optional[Board] = None, limit: int | None = None) -> List[Set[Cell]]:
    """Every full solution extending the queens already on `board`.

    Marks on the board are ignored; only queens constrain the search. Stops
    after `limit` solutions when given.
    """
    N = puzzle.size
    found: List[Set[Cell]] = []

    fixed: Dict[int, int] = {}
    if board is not None:
        for r, c in board.queens():
            if r in fixed:
                # two queens share a row
                return found
            fixed[r] = c

    placed: List[int] = []

    def extend(r: int, cols: FrozenSet[int], regs: FrozenSet[int]):
        if limit is not None and len(found) >= limit:
            return
        if r == N:
            found.append(set(enumerate(placed)))
            return

        options = row_options(puzzle, r, cols, regs, placed[-1] if placed else None)
        if r in fixed:
            options = [c for c in options if c == fixed[r]]
        for c in options:
            placed.append(c)
            extend(r + 1, cols | {c}, regs | {puzzle.regions[r][c]})
            placed.pop()

    extend(0, frozenset(), frozenset())
    return found


def count_solutions(puzzle: Puzzle, limit: int = 2) -> int:
    return len(all_solutions(puzzle, limit=limit))


def find_one_solution(puzzle: Puzzle) -> Set[Cell] | None:
    """One valid solution as a set of (row, col), or None if unsatisfiable."""
    found = all_solutions(puzzle, limit=1)
    return found[0] if found else None


def solution_board(puzzle: Puzzle, solution: Set[Cell]) -> Board:
    board = Board(puzzle.size)
    for r, c in solution:
        board.set_cell(r, c, QUEEN)
    return board
