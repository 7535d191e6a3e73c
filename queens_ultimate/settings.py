from __future__ import annotations

import json
import os
from pathlib import Path

THEMES = {
    "light": {
        "bg": (245, 245, 245),
        "panel": (235, 235, 235),
        "text": (20, 20, 20),
        "grid": (45, 45, 45),
        "border": (0, 0, 0),
        "mark": (30, 30, 30),
        "queen": (20, 20, 20),
        "hint": (255, 190, 0),
        "conflict": (220, 40, 40),
        "overlay": (255, 255, 255, 215),
        "saturation": 0.40,
        "value": 0.98,
    },
    "dark": {
        "bg": (24, 24, 28),
        "panel": (36, 36, 42),
        "text": (230, 230, 230),
        "grid": (70, 70, 78),
        "border": (8, 8, 10),
        "mark": (15, 15, 15),
        "queen": (10, 10, 10),
        "hint": (255, 200, 40),
        "conflict": (240, 70, 70),
        "overlay": (24, 24, 28, 215),
        "saturation": 0.45,
        "value": 0.80,
    },
}
DEFAULT_THEME = "light"

_SETTINGS_FILE = ".queens_ultimate.json"


def settings_path() -> Path:
    """QUEENS_SETTINGS when set, else a dotfile in the home directory."""
    override = os.environ.get("QUEENS_SETTINGS")
    return Path(override) if override else Path.home() / _SETTINGS_FILE


def load_theme(path: Path | None = None) -> str:
    path = path or settings_path()
    if not path.exists():
        return DEFAULT_THEME
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Couldn't read settings: {path}. Error: {e}")
        return DEFAULT_THEME
    theme = data.get("theme") if isinstance(data, dict) else None
    return theme if theme in THEMES else DEFAULT_THEME


def save_theme(theme: str, path: Path | None = None) -> None:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme!r}")
    path = path or settings_path()
    try:
        path.write_text(json.dumps({"theme": theme}), encoding="utf-8")
    except OSError as e:
        print(f"Couldn't save settings: {path}. Error: {e}")


def next_theme(theme: str) -> str:
    names = list(THEMES)
    i = names.index(theme) if theme in names else -1
    return names[(i + 1) % len(names)]
