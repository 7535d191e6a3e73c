from __future__ import annotations

from typing import List

from .board import EMPTY, MARKED, QUEEN, Board, Cell, Puzzle, in_bounds, touches

NEIGHBORS8 = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
]


# ============================================================
# Attack relation
# ============================================================
def attacks(puzzle: Puzzle, a: Cell, b: Cell) -> bool:
    """True if queens on distinct cells `a` and `b` would attack each other."""
    if a == b:
        return False
    r1, c1 = a
    r2, c2 = b
    if r1 == r2 or c1 == c2:
        return True
    if puzzle.region_of(r1, c1) == puzzle.region_of(r2, c2):
        return True
    return touches(r1, c1, r2, c2)


def is_attacked_by_any_queen(puzzle: Puzzle, board: Board, r: int, c: int) -> bool:
    for q in board.queens():
        if attacks(puzzle, q, (r, c)):
            return True
    return False


# ============================================================
# Player validity + solved
# ============================================================
def conflicts_for(puzzle: Puzzle, board: Board, r: int, c: int) -> List[Cell]:
    """Queens attacking a queen assumed to sit at (r, c).

    Scans the row, the column, the region and the 8 neighbours. A queen that
    attacks through more than one of those is reported once.
    """
    N = puzzle.size
    rid = puzzle.region_of(r, c)
    found: List[Cell] = []

    def add(cell: Cell):
        if cell not in found:
            found.append(cell)

    for cc in range(N):
        if cc != c and board.cells[r][cc] == QUEEN:
            add((r, cc))

    for rr in range(N):
        if rr != r and board.cells[rr][c] == QUEEN:
            add((rr, c))

    for rr, cc in puzzle.region_cells(rid):
        if (rr, cc) != (r, c) and board.cells[rr][cc] == QUEEN:
            add((rr, cc))

    for dr, dc in NEIGHBORS8:
        rr, cc = r + dr, c + dc
        if in_bounds(rr, cc, N) and board.cells[rr][cc] == QUEEN:
            add((rr, cc))

    return found


def get_invalid_queens(puzzle: Puzzle, board: Board) -> List[Cell]:
    """Every queen involved in at least one conflict (for highlighting)."""
    return [q for q in board.queens() if conflicts_for(puzzle, board, *q)]


def is_win(puzzle: Puzzle, board: Board) -> bool:
    N = puzzle.size
    rows = set()
    cols = set()
    regs = set()
    count = 0

    for r, c in board.queens():
        count += 1
        rows.add(r)
        cols.add(c)
        regs.add(puzzle.region_of(r, c))
        if conflicts_for(puzzle, board, r, c):
            return False

    return count == N and len(rows) == N and len(cols) == N and len(regs) == N


# ============================================================
# Auto-marking side effects
# ============================================================
def apply_queen_placed(puzzle: Puzzle, board: Board, r: int, c: int) -> List[Cell]:
    """Mark every empty cell the queen at (r, c) attacks. Returns those cells."""
    marked: List[Cell] = []
    for cell in puzzle.cells():
        rr, cc = cell
        if board.cells[rr][cc] != EMPTY:
            continue
        if attacks(puzzle, (r, c), cell):
            board.cells[rr][cc] = MARKED
            marked.append(cell)
    return marked


def apply_queen_removed(puzzle: Puzzle, board: Board, r: int, c: int) -> List[Cell]:
    """Unmark cells the removed queen at (r, c) was attacking.

    Call after (r, c) no longer holds a queen. Marks still covered by another
    queen are kept. Returns the cells that were unmarked.
    """
    unmarked: List[Cell] = []
    for cell in puzzle.cells():
        rr, cc = cell
        if board.cells[rr][cc] != MARKED:
            continue
        if not attacks(puzzle, (r, c), cell):
            continue
        if is_attacked_by_any_queen(puzzle, board, rr, cc):
            continue
        board.cells[rr][cc] = EMPTY
        unmarked.append(cell)
    return unmarked
