from .board import EMPTY, MARKED, QUEEN, Board, Puzzle, PuzzleError
from .hints import Elimination, QueenPlacement, compute_hint, is_hint_satisfied
from .puzzles import LEVELS_PER_DAY, check_library, puzzles_for_date
from .rules import conflicts_for, get_invalid_queens, is_win
from .session import GameSession
