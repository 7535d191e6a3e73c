from __future__ import annotations

import colorsys
import random
from datetime import date
from typing import List, Optional, Sequence

import pygame

from .board import EMPTY, MARKED, QUEEN, Cell, Puzzle
from .hints import Elimination, QueenPlacement
from .rules import get_invalid_queens
from .session import GameSession, format_time
from .settings import THEMES, load_theme, next_theme, save_theme

# ---------------- Visuals ----------------
FPS = 60

PAD = 24
TOP_BAR = 150
GRID_BORDER = 1
REGION_BORDER = 4
BOARD_PX = 540
MIN_CELL = 48
MAX_CELL = 86

TICK_EVENT = pygame.USEREVENT + 1
TICK_MS = 1000

_FONT_NAMES = ["Times New Roman", "Times"]


# ============================================================
# Helpers
# ============================================================
def cell_size(N: int) -> int:
    return max(MIN_CELL, min(MAX_CELL, BOARD_PX // N))

def cell_rect(r, c, CELL):
    x = PAD + c * CELL
    y = PAD + TOP_BAR + r * CELL
    return pygame.Rect(x, y, CELL, CELL)

def cell_at(pos, N, CELL) -> Optional[Cell]:
    mx, my = pos
    board_rect = pygame.Rect(PAD, PAD + TOP_BAR, N * CELL, N * CELL)
    if not board_rect.collidepoint(mx, my):
        return None
    return ((my - (PAD + TOP_BAR)) // CELL, (mx - PAD) // CELL)


def pastel_palette(k: int, seed: str = "", saturation: float = 0.40, value: float = 0.98):
    cols = []
    for i in range(k):
        h = (i / k) % 1.0
        r, g, b = colorsys.hsv_to_rgb(h, saturation, value)
        cols.append((int(r * 255), int(g * 255), int(b * 255)))
    # Same puzzle, same colours.
    random.Random(seed).shuffle(cols)
    return cols

def draw_text(screen, msg, x, y, f, color):
    screen.blit(f.render(msg, True, color), (x, y))


def _wrap_by_chars(msg: str, max_chars: int) -> list[str]:
    if max_chars <= 0:
        return [msg]
    words = msg.split()
    if not words:
        return [""]

    lines: list[str] = []
    cur = ""
    for w in words:
        if cur and len(cur) + 1 + len(w) <= max_chars:
            cur = cur + " " + w
            continue
        if cur:
            lines.append(cur)
        cur = ""
        if len(w) <= max_chars:
            cur = w
        else:
            for i in range(0, len(w), max_chars):
                lines.append(w[i : i + max_chars])
    if cur:
        lines.append(cur)
    return lines


# ============================================================
# Drawing
# ============================================================
def cell_edges(regions, N, CELL):
    """Splits the inner cell edges into (thin, thick) line segments.

    An edge is thick where the two cells it separates lie in different regions.
    """
    thin, thick = [], []
    for r in range(N):
        for c in range(N):
            rect = cell_rect(r, c, CELL)
            if c + 1 < N:
                edge = (rect.topright, rect.bottomright)
                (thick if regions[r][c] != regions[r][c + 1] else thin).append(edge)
            if r + 1 < N:
                edge = (rect.bottomleft, rect.bottomright)
                (thick if regions[r][c] != regions[r + 1][c] else thin).append(edge)
    return thin, thick


def draw_cell_edges(screen, regions, N, CELL, theme):
    thin, thick = cell_edges(regions, N, CELL)
    # Region borders go on top.
    for a, b in thin:
        pygame.draw.line(screen, theme["grid"], a, b, GRID_BORDER)
    for a, b in thick:
        pygame.draw.line(screen, theme["border"], a, b, REGION_BORDER)
    pygame.draw.rect(screen, theme["border"], pygame.Rect(PAD, PAD + TOP_BAR, N * CELL, N * CELL), REGION_BORDER)

def draw_mark(screen, rect, color):
    cx, cy = rect.center
    s = int(rect.width * 0.18)
    pygame.draw.line(screen, color, (cx - s, cy - s), (cx + s, cy + s), 3)
    pygame.draw.line(screen, color, (cx - s, cy + s), (cx + s, cy - s), 3)

def draw_queen(screen, rect, color):
    # Simple crown: five-point zigzag over a base bar.
    w = rect.width
    x0 = rect.x + int(w * 0.22)
    x1 = rect.x + int(w * 0.78)
    top = rect.y + int(w * 0.28)
    mid = rect.y + int(w * 0.50)
    base = rect.y + int(w * 0.68)
    step = (x1 - x0) / 4
    points = [(x0, base), (x0, top)]
    for i in range(1, 5):
        x = int(x0 + i * step)
        points.append((int(x0 + (i - 0.5) * step), mid))
        points.append((x, top))
    points.append((x1, base))
    pygame.draw.polygon(screen, color, points)
    pygame.draw.rect(screen, color, pygame.Rect(x0, base + 3, x1 - x0, max(3, int(w * 0.08))))

def draw_stripes(screen, rect, color, spacing=10):
    # Diagonal hatching, clipped to the cell.
    clip = screen.get_clip()
    screen.set_clip(rect)
    for off in range(-rect.height, rect.width, spacing):
        pygame.draw.line(screen, color, (rect.x + off, rect.bottom), (rect.x + off + rect.height, rect.y), 2)
    screen.set_clip(clip)


def draw_board(ui, session: GameSession):
    screen = ui["screen"]
    theme = THEMES[ui["theme"]]
    puzzle = session.puzzle
    board = session.board
    N = puzzle.size
    CELL = ui["CELL"]

    screen.fill(theme["bg"])
    pygame.draw.rect(screen, theme["panel"], pygame.Rect(0, 0, ui["W"], TOP_BAR + PAD))

    colors = ui["region_colors"]
    for r in range(N):
        for c in range(N):
            pygame.draw.rect(screen, colors[puzzle.regions[r][c] % len(colors)], cell_rect(r, c, CELL))

    hint = session.active_hint
    if isinstance(hint, Elimination):
        for r, c in hint.cells:
            draw_stripes(screen, cell_rect(r, c, CELL), theme["hint"])

    draw_cell_edges(screen, puzzle.regions, N, CELL, theme)

    for r in range(N):
        for c in range(N):
            state = board.cells[r][c]
            if state == MARKED:
                draw_mark(screen, cell_rect(r, c, CELL), theme["mark"])
            elif state == QUEEN:
                draw_queen(screen, cell_rect(r, c, CELL), theme["queen"])

    invalid = set(get_invalid_queens(puzzle, board)) | set(session.conflicts)
    for r, c in invalid:
        pygame.draw.rect(screen, theme["conflict"], cell_rect(r, c, CELL), 4)

    if isinstance(hint, QueenPlacement):
        pygame.draw.rect(screen, theme["hint"], cell_rect(hint.row, hint.col, CELL), 5)

    return invalid


def draw_info_panel(ui, session: GameSession):
    screen = ui["screen"]
    theme = THEMES[ui["theme"]]
    N = session.puzzle.size
    f = ui["font_tiny"]

    max_chars = max(16, (ui["W"] - 2 * PAD) // 18)
    left: List[str] = [
        f"Level {session.level + 1} of {session.level_count}",
        f"Time {format_time(session.timer)}",
        f"Hints {session.hints_used}" + (f"  (wait {session.cooldown})" if session.cooldown else ""),
        f"Queens {session.board.count(QUEEN)}/{N}",
    ]
    hint = session.active_hint
    if hint is not None:
        left += _wrap_by_chars(f"Hint: {hint.reason}", max_chars)
    elif ui.get("message"):
        left += _wrap_by_chars(ui["message"], max_chars)

    right = [
        "Click cycles X / Q",
        "Drag paints X",
        "U Undo  R Reset",
        "H Hint  P Pause",
        "T Theme  ESC Quit",
    ]

    lh = f.get_linesize() + 2
    y = 10
    for line in left:
        if y + lh > TOP_BAR - 6:
            break
        draw_text(screen, line, PAD, y, f, theme["text"])
        y += lh

    y = 10
    for line in right:
        w = f.size(line)[0]
        draw_text(screen, line, ui["W"] - PAD - w, y, f, theme["text"])
        y += lh


def draw_overlay(ui, session: GameSession):
    lines: List[str] = []
    if not session.started:
        lines = ["Queens Ultimate", "Press SPACE to start"]
    elif session.victory:
        lines = ["All levels complete!", f"Time {format_time(session.timer)}"]
        lines.append("FLAWLESS!" if session.hints_used == 0 else f"Hints used: {session.hints_used}")
        lines.append("S Share  ESC Quit")
    elif session.level_complete:
        lines = [
            f"Level {session.level + 1} of {session.level_count} Complete!",
            f"Time {format_time(session.timer)}",
            "ENTER for the next level",
        ]
    elif session.paused:
        lines = ["Paused", "Press SPACE to resume"]
    if not lines:
        return

    screen = ui["screen"]
    theme = THEMES[ui["theme"]]
    shade = pygame.Surface((ui["W"], ui["H"]), pygame.SRCALPHA)
    shade.fill(theme["overlay"])
    screen.blit(shade, (0, 0))

    f = ui["big_font"]
    y = ui["H"] // 2 - (len(lines) * f.get_linesize()) // 2
    for i, line in enumerate(lines):
        font = f if i == 0 else ui["font"]
        w = font.size(line)[0]
        draw_text(screen, line, (ui["W"] - w) // 2, y, font, theme["text"])
        y += font.get_linesize() + 4


# ============================================================
# Actions
# ============================================================
def hint_message(session: GameSession) -> str:
    """Asks for a hint; returns the panel message ("" unless none exists)."""
    if session.cooldown > 0 or not session.accepts_input:
        return ""
    if session.request_hint() is None:
        return "No hint available"
    return ""


# ============================================================
# State
# ============================================================
def build_ui(puzzle: Puzzle, theme: str, fonts=None):
    N = puzzle.size
    CELL = cell_size(N)
    W = PAD * 2 + N * CELL
    H = PAD * 2 + TOP_BAR + N * CELL

    screen = pygame.display.set_mode((W, H))
    pygame.display.set_caption("Queens Ultimate")

    ui = {
        "N": N, "CELL": CELL, "W": W, "H": H,
        "screen": screen,
        "theme": theme,
        "puzzle": puzzle,
        "message": "",

        # Left-drag paints X's
        "left_down": False,
        "left_down_cell": None,
        "drag_paint_x": False,
    }
    ui.update(fonts or {
        "font": pygame.font.SysFont(_FONT_NAMES, 28),
        "font_tiny": pygame.font.SysFont(_FONT_NAMES, 18),
        "big_font": pygame.font.SysFont(_FONT_NAMES, 46),
    })
    recolor(ui)
    return ui


def recolor(ui):
    theme = THEMES[ui["theme"]]
    puzzle = ui["puzzle"]
    ui["region_colors"] = pastel_palette(
        max(puzzle.region_ids()) + 1,
        seed=str(puzzle.regions),
        saturation=theme["saturation"],
        value=theme["value"],
    )


# ============================================================
# Main
# ============================================================
def run(puzzles: Sequence[Puzzle], *, today: date, level: int = 0, theme: Optional[str] = None) -> int:
    pygame.init()
    clock = pygame.time.Clock()

    session = GameSession(puzzles)
    if level:
        session.load_level(level)
    theme = theme or load_theme()
    ui = build_ui(session.puzzle, theme)
    pygame.time.set_timer(TICK_EVENT, TICK_MS)

    running = True
    while running:
        clock.tick(FPS)

        if ui["puzzle"] is not session.puzzle:
            fonts = {k: ui[k] for k in ("font", "font_tiny", "big_font")}
            ui = build_ui(session.puzzle, ui["theme"], fonts)

        N = ui["N"]
        CELL = ui["CELL"]

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == TICK_EVENT:
                session.tick()

            elif event.type == pygame.WINDOWFOCUSLOST:
                session.pause()

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False

                elif event.key == pygame.K_SPACE:
                    if not session.started:
                        session.start()
                    else:
                        session.toggle_pause()

                elif event.key == pygame.K_p:
                    session.toggle_pause()

                elif event.key in (pygame.K_u, pygame.K_BACKSPACE):
                    session.undo()

                elif event.key == pygame.K_r:
                    session.reset_level()

                elif event.key == pygame.K_h:
                    ui["message"] = hint_message(session)

                elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_n):
                    session.next_level()

                elif event.key == pygame.K_t:
                    ui["theme"] = next_theme(ui["theme"])
                    save_theme(ui["theme"])
                    recolor(ui)

                elif event.key == pygame.K_s and session.victory:
                    print(session.share_text(today))

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button != 1 or session.paused:
                    continue
                cell = cell_at(event.pos, N, CELL)
                if cell is None:
                    continue
                ui["left_down"] = True
                ui["left_down_cell"] = cell
                ui["drag_paint_x"] = False

            elif event.type == pygame.MOUSEMOTION:
                # Dragging with left mouse paints X's.
                if not ui["left_down"]:
                    continue
                if not getattr(event, "buttons", (0, 0, 0))[0]:
                    continue
                cell = cell_at(event.pos, N, CELL)
                if cell is None:
                    continue

                down_cell = ui["left_down_cell"]
                if not ui["drag_paint_x"]:
                    # Only a drag that starts on an empty cell paints.
                    if cell == down_cell or session.board.get(*down_cell) != EMPTY:
                        continue
                    ui["drag_paint_x"] = True
                    session.drag_mark(*down_cell)

                session.drag_mark(*cell)

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button != 1 or not ui["left_down"]:
                    continue

                cell = ui["left_down_cell"]
                ui["left_down"] = False
                ui["left_down_cell"] = None

                # If we were dragging, we already painted X's; don't toggle on release.
                if ui["drag_paint_x"]:
                    ui["drag_paint_x"] = False
                    continue

                if cell is not None:
                    session.click(*cell)
                    ui["message"] = ""

        draw_board(ui, session)
        draw_info_panel(ui, session)
        draw_overlay(ui, session)
        pygame.display.flip()

    pygame.time.set_timer(TICK_EVENT, 0)
    pygame.quit()
    return 0
