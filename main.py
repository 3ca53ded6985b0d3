"""CLI entrypoint for the Fn sudoku solver and letters-to-words client."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from fnclient.core.config import ClientConfig
from fnclient.core.constants import BOARD_SIZE, MIN_WORD_OPTIONS, ApplyPolicy
from fnclient.ui.app import FUNCTIONS, App
from fnclient.utils.logger import configure_logging
from fnclient.utils.pretty import format_functions, pretty_print_board, pretty_print_words


def parse_board_argument(text: str) -> str:
    """Validate a board given on the command line (``.`` or ``0`` for empty)."""
    board = "".join(text.split())
    if len(board) != BOARD_SIZE:
        raise argparse.ArgumentTypeError(
            f"board must have {BOARD_SIZE} cells, got {len(board)}"
        )
    invalid = sorted({ch for ch in board if ch != "." and not ("0" <= ch <= "9")})
    if invalid:
        raise argparse.ArgumentTypeError(f"board contains invalid characters: {''.join(invalid)}")
    return board


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Client for the Fn sudoku solver and letters-to-words service",
    )
    parser.add_argument("--base-url", type=str, help="Service base URL (default: $FN_BASE_URL)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument(
        "--policy",
        type=str,
        choices=[p.value for p in ApplyPolicy],
        help="How overlapping responses are applied",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("functions", help="List the available functions")

    sudoku = sub.add_parser("sudoku", help="Solve a sudoku board")
    sudoku.add_argument(
        "board",
        type=parse_board_argument,
        help="81 cells in row-major order, '0' or '.' for empty",
    )

    letters = sub.add_parser("letters", help="Generate words from a set of letters")
    letters.add_argument("letters", type=str, help="Letters to build words from")
    letters.add_argument(
        "--min",
        type=int,
        choices=list(MIN_WORD_OPTIONS),
        default=MIN_WORD_OPTIONS[0],
        help="Minimum word size",
    )
    return parser


def run_sudoku(app: App, board: str) -> int:
    page = app.sudoku
    app.navigate(page.link)
    page.type_board(board)
    page.press_enter()
    if not app.run_until_idle(timeout=app.config.timeout_seconds + 5):
        print("error: timed out waiting for the solver", file=sys.stderr)
        return 1
    if page.status.message:
        print(f"error: {page.status.message}", file=sys.stderr)
        return 1
    pretty_print_board(page.board)
    return 0


def run_letters(app: App, letters: str, min_length: int) -> int:
    page = app.letters
    app.navigate(page.link)
    page.set_letters(letters)
    page.set_min(min_length)
    page.press_enter()
    if not app.run_until_idle(timeout=app.config.timeout_seconds + 5):
        print("error: timed out waiting for the word generator", file=sys.stderr)
        return 1
    if page.status.message:
        print(f"error: {page.status.message}", file=sys.stderr)
        return 1
    pretty_print_words(page.words)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "functions":
        print(format_functions(FUNCTIONS))
        return 0

    try:
        config = ClientConfig.from_env().with_overrides(
            base_url=args.base_url,
            timeout_seconds=args.timeout,
            apply_policy=args.policy,
        )
    except ValueError as exc:
        parser.error(f"invalid configuration: {exc}")
    with App(config) as app:
        if args.command == "sudoku":
            return run_sudoku(app, args.board)
        return run_letters(app, args.letters, args.min)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
