"""Hint engine: derive the next move a human solver could justify.

The steps below run in a fixed order and the first one that produces a
suggestion wins, so an explanation based on a claim or adjacency is preferred
over a bare "only spot left".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple, Union

from .board import EMPTY, MARKED, QUEEN, Board, Cell, Puzzle, in_bounds, touches
from .rules import NEIGHBORS8

# Rule tags
ROW_CLAIM = "row-claim"
COL_CLAIM = "col-claim"
ADJACENCY = "adjacency"
REGION_SINGLE = "region-single"
ROW_SINGLE = "row-single"
COL_SINGLE = "col-single"
REGION_NECESSITY = "region-necessity"
ROW_NECESSITY = "row-necessity"
COL_NECESSITY = "col-necessity"
INTERSECTION = "intersection"
NARROW_DOWN = "narrow-down"
EXPLORE = "explore"

NARROW_DOWN_MAX_OPTIONS = 3


@dataclass(frozen=True)
class QueenPlacement:
    row: int
    col: int
    rule: str
    reason: str

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return ((self.row, self.col),)


@dataclass(frozen=True)
class Elimination:
    cells: Tuple[Cell, ...]
    rule: str
    reason: str


Suggestion = Union[QueenPlacement, Elimination]


@dataclass
class _EliminationGroup:
    rule: str
    cells: List[Cell]
    reason: str


# ============================================================
# Candidate set
# ============================================================
class _Occupied:
    """Rows, columns and regions that already hold a queen."""

    def __init__(self, puzzle: Puzzle, board: Board):
        self.queens = board.queens()
        self.rows = {r for r, _ in self.queens}
        self.cols = {c for _, c in self.queens}
        self.regions = {puzzle.region_of(r, c) for r, c in self.queens}


def _is_candidate(puzzle: Puzzle, board: Board, occ: _Occupied, r: int, c: int) -> bool:
    if board.cells[r][c] != EMPTY:
        return False
    if r in occ.rows or c in occ.cols or puzzle.region_of(r, c) in occ.regions:
        return False
    for dr, dc in NEIGHBORS8:
        rr, cc = r + dr, c + dc
        if in_bounds(rr, cc, puzzle.size) and board.cells[rr][cc] == QUEEN:
            return False
    return True


def candidate_cells(puzzle: Puzzle, board: Board) -> List[Cell]:
    """Empty cells that could still take a queen, in row-major order.

    Marked cells are left out: the player has ruled them out already.
    """
    occ = _Occupied(puzzle, board)
    return [cell for cell in puzzle.cells() if _is_candidate(puzzle, board, occ, *cell)]


def _group(cells: List[Cell], key: Callable[[Cell], int]) -> Dict[int, List[Cell]]:
    grouped: Dict[int, List[Cell]] = {}
    for cell in cells:
        grouped.setdefault(key(cell), []).append(cell)
    return dict(sorted(grouped.items()))


# ============================================================
# Eliminations (claims + adjacency)
# ============================================================
def _find_claims(
    puzzle: Puzzle,
    cands: List[Cell],
    by_region: Dict[int, List[Cell]],
    eliminated: Dict[Cell, str],
    groups: List[_EliminationGroup],
) -> None:
    regions = puzzle.regions
    for rid, cells in by_region.items():
        row = cells[0][0]
        if all(r == row for r, _ in cells):
            hit = [(r, c) for r, c in cands if r == row and regions[r][c] != rid]
            for cell in hit:
                eliminated[cell] = ROW_CLAIM
            if hit:
                groups.append(_EliminationGroup(
                    ROW_CLAIM, hit, "This region claims this row - mark other cells with X"))

        col = cells[0][1]
        if all(c == col for _, c in cells):
            hit = [(r, c) for r, c in cands if c == col and regions[r][c] != rid]
            for cell in hit:
                eliminated[cell] = COL_CLAIM
            if hit:
                groups.append(_EliminationGroup(
                    COL_CLAIM, hit, "This region claims this column - mark other cells with X"))


def _find_adjacency(
    puzzle: Puzzle,
    cands: List[Cell],
    by_region: Dict[int, List[Cell]],
    eliminated: Dict[Cell, str],
    groups: List[_EliminationGroup],
) -> None:
    # A cell touching every option of some other region can never hold a queen.
    for cell in cands:
        if cell in eliminated:
            continue
        r, c = cell
        own = puzzle.region_of(r, c)
        for rid, cells in by_region.items():
            if rid == own:
                continue
            if all(touches(r, c, rr, cc) for rr, cc in cells):
                eliminated[cell] = ADJACENCY
                groups.append(_EliminationGroup(
                    ADJACENCY, [cell], "Adjacent to all options in another region - mark with X"))
                break


def _eliminate(puzzle: Puzzle, cands: List[Cell]):
    """Returns (candidates by region, eliminated cell -> rule, groups in discovery order)."""
    by_region = _group(cands, lambda cell: puzzle.region_of(*cell))
    eliminated: Dict[Cell, str] = {}
    groups: List[_EliminationGroup] = []
    _find_claims(puzzle, cands, by_region, eliminated, groups)
    _find_adjacency(puzzle, cands, by_region, eliminated, groups)
    return by_region, eliminated, groups


_CLAIM_REASONS = {
    ROW_CLAIM: "Another region claims this row",
    COL_CLAIM: "Another region claims this column",
    ADJACENCY: "Other spots blocked by adjacent region",
}


def _forced_after_elimination(
    puzzle: Puzzle,
    cands: List[Cell],
    refined: List[Cell],
    eliminated: Dict[Cell, str],
) -> Optional[QueenPlacement]:
    regions = puzzle.regions

    for rid, cells in _group(refined, lambda cell: regions[cell[0]][cell[1]]).items():
        if len(cells) != 1:
            continue
        lost = [cell for cell in cands if regions[cell[0]][cell[1]] == rid and cell in eliminated]
        if lost:
            cause = eliminated[lost[0]]
            r, c = cells[0]
            return QueenPlacement(r, c, cause, _CLAIM_REASONS[cause])

    lines = [
        (lambda cell: cell[0], ROW_SINGLE, "Only valid spot left in this row after elimination"),
        (lambda cell: cell[1], COL_SINGLE, "Only valid spot left in this column after elimination"),
    ]
    for key, single_rule, reason in lines:
        for line, cells in _group(refined, key).items():
            if len(cells) != 1:
                continue
            lost = [cell for cell in cands if key(cell) == line and cell in eliminated]
            rule = eliminated[lost[0]] if lost else single_rule
            r, c = cells[0]
            return QueenPlacement(r, c, rule, reason)

    return None


# ============================================================
# Forcing on the plain candidate set
# ============================================================
def _single_candidate(
    by_region: Dict[int, List[Cell]],
    by_row: Dict[int, List[Cell]],
    by_col: Dict[int, List[Cell]],
) -> Optional[QueenPlacement]:
    checks = [
        (by_region, REGION_SINGLE, "Only valid spot in this color region"),
        (by_row, ROW_SINGLE, "Only valid spot in this row"),
        (by_col, COL_SINGLE, "Only valid spot in this column"),
    ]
    for grouped, rule, reason in checks:
        for cells in grouped.values():
            if len(cells) == 1:
                r, c = cells[0]
                return QueenPlacement(r, c, rule, reason)
    return None


def _necessity(
    puzzle: Puzzle,
    cands: List[Cell],
    by_region: Dict[int, List[Cell]],
    by_row: Dict[int, List[Cell]],
    by_col: Dict[int, List[Cell]],
) -> Optional[QueenPlacement]:
    for cell in cands:
        r, c = cell
        checks = [
            (by_region[puzzle.region_of(r, c)], REGION_NECESSITY, "Must be here - no other spot works for this region"),
            (by_row[r], ROW_NECESSITY, "Must be here - no other spot works for this row"),
            (by_col[c], COL_NECESSITY, "Must be here - no other spot works for this column"),
        ]
        for group, rule, reason in checks:
            if not [other for other in group if other != cell]:
                return QueenPlacement(r, c, rule, reason)
    return None


def _intersection(
    puzzle: Puzzle,
    cands: List[Cell],
    by_row: Dict[int, List[Cell]],
    by_col: Dict[int, List[Cell]],
) -> Optional[QueenPlacement]:
    regions = puzzle.regions
    for cell in cands:
        r, c = cell
        if len(by_row[r]) != 2 or len(by_col[c]) != 2:
            continue
        row_other = next(o for o in by_row[r] if o != cell)
        col_other = next(o for o in by_col[c] if o != cell)
        if row_other == col_other:
            continue
        (r1, c1), (r2, c2) = row_other, col_other
        # If the queen is not here, row_other and col_other must both hold one.
        if c1 == c2 or regions[r1][c1] == regions[r2][c2] or touches(r1, c1, r2, c2):
            return QueenPlacement(r, c, INTERSECTION, "Row and column constraints intersect here")
    return None


def _fallback(cands: List[Cell], by_region: Dict[int, List[Cell]]) -> Optional[QueenPlacement]:
    best: Optional[Cell] = None
    min_options = None
    for cells in by_region.values():
        n = len(cells)
        if n > 1 and (min_options is None or n < min_options):
            min_options = n
            best = cells[0]

    if best is not None and min_options <= NARROW_DOWN_MAX_OPTIONS:
        return QueenPlacement(
            best[0], best[1], NARROW_DOWN,
            f"Try marking X's to narrow down this region ({min_options} options)")

    if cands:
        r, c = cands[0]
        return QueenPlacement(r, c, EXPLORE, "Try placing a queen here and see what follows")
    return None


# ============================================================
# Entry points
# ============================================================
def compute_hint(puzzle: Puzzle, board: Board) -> Optional[Suggestion]:
    """Best next move for the current board, or None when nothing applies."""
    cands = candidate_cells(puzzle, board)
    if not cands:
        return None

    by_region, eliminated, groups = _eliminate(puzzle, cands)

    if eliminated:
        refined = [cell for cell in cands if cell not in eliminated]
        if refined:
            forced = _forced_after_elimination(puzzle, cands, refined, eliminated)
            if forced is not None:
                return forced

    if groups:
        g = groups[0]
        return Elimination(tuple(g.cells), g.rule, g.reason)

    by_row = _group(cands, lambda cell: cell[0])
    by_col = _group(cands, lambda cell: cell[1])

    for step in (
        lambda: _single_candidate(by_region, by_row, by_col),
        lambda: _necessity(puzzle, cands, by_region, by_row, by_col),
        lambda: _intersection(puzzle, cands, by_row, by_col),
        lambda: _fallback(cands, by_region),
    ):
        hint = step()
        if hint is not None:
            return hint
    return None


def is_hint_satisfied(suggestion: Suggestion, board: Board) -> bool:
    if isinstance(suggestion, QueenPlacement):
        want = QUEEN
    elif isinstance(suggestion, Elimination):
        want = MARKED
    else:
        raise TypeError(f"Unknown suggestion type: {type(suggestion).__name__}")
    return all(board.cells[r][c] == want for r, c in suggestion.cells)


def eliminated_cells(puzzle: Puzzle, board: Board) -> Set[Cell]:
    """Every candidate the claim and adjacency rules rule out on this board."""
    _, eliminated, _ = _eliminate(puzzle, candidate_cells(puzzle, board))
    return set(eliminated)
