from __future__ import annotations

import argparse
import sys
from datetime import date

from .puzzles import LEVELS_PER_DAY, check_library, puzzles_for_date
from .settings import THEMES


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="queens-ultimate", description="Queens Ultimate: the daily queens puzzle")
    parser.add_argument('--date', type=_parse_date, default=None,
                        help='Play the puzzles of another day (YYYY-MM-DD, default: today)')
    parser.add_argument('--level', type=int, default=1,
                        help=f'Start at this level (1-{LEVELS_PER_DAY}, default: 1)')
    parser.add_argument('--theme', choices=sorted(THEMES), default=None,
                        help='Colour theme (default: last used)')
    parser.add_argument('--check', action='store_true',
                        help='Check the puzzle library and exit')
    return parser


def main(argv=None) -> int:
    """Entry point with argument parsing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.check:
        problems = check_library()
        for p in problems:
            print(p)
        if problems:
            return 1
        print("Library OK")
        return 0

    today = args.date or date.today()
    puzzles = puzzles_for_date(today)
    if not 1 <= args.level <= len(puzzles):
        parser.error(f"--level must be between 1 and {len(puzzles)}")

    from .game import run
    return run(puzzles, today=today, level=args.level - 1, theme=args.theme)


if __name__ == '__main__':
    sys.exit(main())
