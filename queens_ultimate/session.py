"""Session controller: everything the front-end needs besides drawing.

Owns the day's levels, the current board, the undo history, the timer, the
pause state and the hint cooldown. The front-end calls `tick()` once per
second and forwards clicks/drags; it never edits the board directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from .board import EMPTY, MARKED, QUEEN, Board, Cell, Puzzle
from .hints import Suggestion, compute_hint, is_hint_satisfied
from .rules import apply_queen_placed, apply_queen_removed, conflicts_for, is_win

HINT_COOLDOWN_TICKS = 10

# Click cycle: empty -> marked -> queen -> empty
NEXT_STATE = {EMPTY: MARKED, MARKED: QUEEN, QUEEN: EMPTY}


@dataclass
class Move:
    row: int
    col: int
    prev_state: int
    auto_marked: List[Cell] = field(default_factory=list)
    auto_unmarked: List[Cell] = field(default_factory=list)


def format_time(seconds: int) -> str:
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


class GameSession:
    def __init__(self, puzzles: Sequence[Puzzle], *, hint_cooldown: int = HINT_COOLDOWN_TICKS):
        if not puzzles:
            raise ValueError("A session needs at least one puzzle")
        self.puzzles = list(puzzles)
        self.hint_cooldown_ticks = hint_cooldown

        self.timer = 0
        self.started = False
        self.paused = True
        self.finished = False
        self.hints_used = 0

        self.level = 0
        self.puzzle: Puzzle = self.puzzles[0]
        self.board = Board(self.puzzle.size)
        self.history: List[Move] = []
        self.conflicts: List[Cell] = []
        self.active_hint: Optional[Suggestion] = None
        self.cooldown = 0
        self.level_complete = False

        self.load_level(0)

    # ------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------
    @property
    def level_count(self) -> int:
        return len(self.puzzles)

    @property
    def victory(self) -> bool:
        return self.finished

    def load_level(self, index: int) -> None:
        self.level = index
        self.puzzle = self.puzzles[index]
        self.board = Board(self.puzzle.size)
        self.history = []
        self.conflicts = []
        self.active_hint = None
        self.cooldown = 0
        self.level_complete = False

    def next_level(self) -> bool:
        """Advance after a completed level. Returns False when there is none."""
        if not self.level_complete or self.level + 1 >= self.level_count:
            return False
        self.load_level(self.level + 1)
        return True

    def _handle_level_complete(self) -> None:
        if self.level + 1 < self.level_count:
            self.level_complete = True
        else:
            self.finished = True

    def reset_level(self) -> None:
        # The timer keeps running.
        if self.paused:
            return
        self.board.clear()
        self.history = []
        self.conflicts = []
        self.active_hint = None

    # ------------------------------------------------------------
    # Pause / timer
    # ------------------------------------------------------------
    def start(self) -> None:
        self.started = True
        self.paused = False

    def pause(self) -> None:
        if self.started and not self.paused:
            self.paused = True

    def resume(self) -> None:
        if self.started and self.paused:
            self.paused = False

    def toggle_pause(self) -> None:
        if not self.started:
            return
        if self.paused:
            self.resume()
        else:
            self.pause()

    @property
    def accepts_input(self) -> bool:
        """False while paused, between levels and after the last level."""
        return self.started and not self.paused and not self.finished and not self.level_complete

    def tick(self) -> None:
        """One second of wall-clock time."""
        if self.started and not self.paused and not self.finished:
            self.timer += 1
        if self.cooldown > 0:
            self.cooldown -= 1
            if self.cooldown == 0:
                self.active_hint = None

    # ------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------
    def click(self, r: int, c: int) -> Optional[Move]:
        """Cycle the state of (r, c), applying auto-marks. Returns the move."""
        if not self.accepts_input:
            return None

        prev = self.board.get(r, c)
        new = NEXT_STATE[prev]
        move = Move(r, c, prev)

        self.board.set_cell(r, c, new)
        self.conflicts = []

        if new == QUEEN:
            hits = conflicts_for(self.puzzle, self.board, r, c)
            if hits:
                self.conflicts = [(r, c)] + hits
            move.auto_marked = apply_queen_placed(self.puzzle, self.board, r, c)

        if prev == QUEEN and new != QUEEN:
            move.auto_unmarked = apply_queen_removed(self.puzzle, self.board, r, c)

        self.history.append(move)
        self._check_hint_completion()

        if is_win(self.puzzle, self.board):
            self._handle_level_complete()
        return move

    def drag_mark(self, r: int, c: int) -> Optional[Move]:
        """Mark an empty cell during a drag. Queens and marks are left alone."""
        if not self.accepts_input:
            return None
        if self.board.get(r, c) != EMPTY:
            return None

        move = Move(r, c, EMPTY)
        self.board.set_cell(r, c, MARKED)
        self.history.append(move)
        self._check_hint_completion()
        return move

    def undo(self) -> Optional[Move]:
        if not self.history or self.paused:
            return None

        move = self.history.pop()
        self.board.set_cell(move.row, move.col, move.prev_state)
        for r, c in move.auto_marked:
            self.board.set_cell(r, c, EMPTY)
        for r, c in move.auto_unmarked:
            self.board.set_cell(r, c, MARKED)
        self.conflicts = []
        return move

    # ------------------------------------------------------------
    # Hints
    # ------------------------------------------------------------
    def request_hint(self) -> Optional[Suggestion]:
        if self.cooldown > 0 or not self.accepts_input:
            return None

        hint = compute_hint(self.puzzle, self.board)
        if hint is None:
            return None

        self.active_hint = hint
        self.hints_used += 1
        self.cooldown = self.hint_cooldown_ticks
        return hint

    def _check_hint_completion(self) -> None:
        if self.active_hint is not None and is_hint_satisfied(self.active_hint, self.board):
            self.active_hint = None

    # ------------------------------------------------------------
    # Share
    # ------------------------------------------------------------
    def share_text(self, today: date) -> str:
        day = f"{today:%b} {today.day}, {today.year}"
        flawless = " FLAWLESS!" if self.hints_used == 0 else ""
        hints = f"\nHints: {self.hints_used}" if self.hints_used > 0 else ""
        return (
            f"Queens Ultimate - {day}\n"
            f"Time: {format_time(self.timer)}{hints}{flawless}\n"
            f"\n"
            f"Play at queensultimate.com"
        )
