"""
Unit Tests for GameSession

Clicks, drags, undo, pause, the timer, hints and level progression.
"""

from datetime import date

import pytest

from queens_ultimate.board import EMPTY, MARKED, QUEEN, Board
from queens_ultimate.hints import QueenPlacement
from queens_ultimate.session import HINT_COOLDOWN_TICKS, GameSession, format_time

QUADRANT_MARKS = {(0, 1), (0, 2), (0, 3), (1, 0), (2, 0), (3, 0), (1, 1)}


@pytest.fixture
def session(quadrants):
    s = GameSession([quadrants])
    s.start()
    return s


@pytest.fixture
def two_levels(quadrants):
    s = GameSession([quadrants, quadrants])
    s.start()
    return s


class TestClick:
    """Tests for the click cycle and auto-marking."""

    def test_click_cycles_empty_marked_queen_empty(self, session):
        session.click(0, 0)
        assert session.board.get(0, 0) == MARKED
        session.click(0, 0)
        assert session.board.get(0, 0) == QUEEN
        session.click(0, 0)
        assert session.board.get(0, 0) == EMPTY

    def test_click_when_queen_placed_then_attacked_cells_marked(self, session):
        session.click(0, 0)
        move = session.click(0, 0)
        assert set(move.auto_marked) == QUADRANT_MARKS
        for r, c in QUADRANT_MARKS:
            assert session.board.get(r, c) == MARKED

    def test_click_when_queen_removed_then_marks_cleared(self, session):
        for _ in range(3):
            move = session.click(0, 0)
        assert set(move.auto_unmarked) == QUADRANT_MARKS
        assert session.board == Board(4)

    def test_click_when_queen_conflicts_then_reports_both(self, session):
        session.click(0, 0)
        session.click(0, 0)
        # (0, 2) was auto-marked, so one click makes it a queen.
        session.click(0, 2)
        assert session.board.get(0, 2) == QUEEN
        assert session.conflicts == [(0, 2), (0, 0)]

    def test_click_when_paused_then_ignored(self, quadrants):
        s = GameSession([quadrants])
        assert s.paused
        assert s.click(0, 0) is None
        assert s.board == Board(4)

    def test_click_records_history(self, session):
        session.click(1, 1)
        session.click(2, 2)
        assert [(m.row, m.col, m.prev_state) for m in session.history] == [(1, 1, EMPTY), (2, 2, EMPTY)]


class TestDragMark:
    """Tests for drag-to-mark."""

    def test_drag_mark_when_empty_then_marks(self, session):
        move = session.drag_mark(2, 2)
        assert move is not None
        assert session.board.get(2, 2) == MARKED

    def test_drag_mark_when_not_empty_then_ignored(self, session):
        session.click(0, 0)
        session.click(0, 0)
        history = len(session.history)
        assert session.drag_mark(0, 0) is None
        assert session.drag_mark(0, 1) is None
        assert session.board.get(0, 0) == QUEEN
        assert len(session.history) == history

    def test_drag_mark_each_cell_undoes_separately(self, session):
        session.drag_mark(2, 2)
        session.drag_mark(2, 3)
        session.undo()
        assert session.board.get(2, 3) == EMPTY
        assert session.board.get(2, 2) == MARKED


class TestUndo:
    """Tests for undo."""

    def test_undo_when_history_empty_then_none(self, session):
        assert session.undo() is None

    def test_undo_restores_every_intermediate_board(self, session):
        seen = [session.board.snapshot()]
        for cell in [(0, 0), (0, 0), (3, 3), (3, 3), (3, 3), (0, 0)]:
            session.click(*cell)
            seen.append(session.board.snapshot())

        for expected in reversed(seen[:-1]):
            session.undo()
            assert session.board.snapshot() == expected
        assert session.history == []

    def test_undo_when_paused_then_ignored(self, session):
        session.click(1, 1)
        session.pause()
        assert session.undo() is None
        assert session.board.get(1, 1) == MARKED


class TestPauseAndTimer:
    """Tests for the pause state and the once-a-second tick."""

    def test_new_session_starts_paused(self, quadrants):
        s = GameSession([quadrants])
        assert not s.started
        assert s.paused
        s.toggle_pause()
        assert s.paused

    def test_tick_when_running_then_counts_seconds(self, session):
        for _ in range(3):
            session.tick()
        assert session.timer == 3

    def test_tick_when_paused_then_timer_stops(self, session):
        session.tick()
        session.toggle_pause()
        session.tick()
        session.toggle_pause()
        session.tick()
        assert session.timer == 2

    def test_reset_level_keeps_timer(self, session):
        session.tick()
        session.click(0, 0)
        session.reset_level()
        assert session.board == Board(4)
        assert session.history == []
        assert session.timer == 1

    def test_format_time(self):
        assert format_time(0) == "0:00"
        assert format_time(75) == "1:15"
        assert format_time(605) == "10:05"


class TestHints:
    """Tests for hint requests, cooldown and completion."""

    def test_request_hint_sets_active_hint_and_cooldown(self, session):
        hint = session.request_hint()
        assert isinstance(hint, QueenPlacement)
        assert session.active_hint == hint
        assert session.hints_used == 1
        assert session.cooldown == HINT_COOLDOWN_TICKS

    def test_request_hint_when_cooling_down_then_none(self, session):
        session.request_hint()
        assert session.request_hint() is None
        assert session.hints_used == 1

    def test_tick_when_cooldown_ends_then_hint_cleared(self, session):
        session.request_hint()
        for _ in range(HINT_COOLDOWN_TICKS - 1):
            session.tick()
        assert session.active_hint is not None
        session.tick()
        assert session.cooldown == 0
        assert session.active_hint is None
        assert session.request_hint() is not None

    def test_hint_when_followed_then_cleared(self, session):
        hint = session.request_hint()
        session.click(hint.row, hint.col)
        assert session.active_hint is not None
        session.click(hint.row, hint.col)
        assert session.active_hint is None

    def test_request_hint_when_paused_then_none(self, session):
        session.pause()
        assert session.request_hint() is None


class TestLevels:
    """Tests for level completion and victory."""

    def test_solving_level_then_level_complete(self, two_levels, quadrants_solution, place_queen):
        for r, c in sorted(quadrants_solution):
            place_queen(two_levels, r, c)
        assert two_levels.level_complete
        assert not two_levels.victory
        assert not two_levels.accepts_input
        assert two_levels.click(3, 3) is None

    def test_next_level_when_complete_then_fresh_board(self, two_levels, quadrants_solution, place_queen):
        two_levels.tick()
        assert two_levels.next_level() is False
        for r, c in sorted(quadrants_solution):
            place_queen(two_levels, r, c)
        assert two_levels.next_level() is True
        assert two_levels.level == 1
        assert two_levels.board == Board(4)
        assert not two_levels.level_complete
        assert two_levels.timer == 1

    def test_solving_last_level_then_victory(self, two_levels, quadrants_solution, place_queen):
        for _ in range(2):
            for r, c in sorted(quadrants_solution):
                place_queen(two_levels, r, c)
            two_levels.next_level()
        assert two_levels.victory
        assert two_levels.next_level() is False
        two_levels.tick()
        assert two_levels.timer == 0

    def test_empty_session_then_raises_error(self):
        with pytest.raises(ValueError):
            GameSession([])


class TestShareText:
    """Tests for the share summary."""

    def test_share_text_when_no_hints_then_flawless(self, session):
        session.timer = 75
        assert session.share_text(date(2026, 10, 19)) == (
            "Queens Ultimate - Oct 19, 2026\n"
            "Time: 1:15 FLAWLESS!\n"
            "\n"
            "Play at queensultimate.com"
        )

    def test_share_text_when_hints_used_then_counted(self, session):
        session.timer = 75
        session.hints_used = 2
        assert session.share_text(date(2026, 3, 5)) == (
            "Queens Ultimate - Mar 5, 2026\n"
            "Time: 1:15\n"
            "Hints: 2\n"
            "\n"
            "Play at queensultimate.com"
        )
