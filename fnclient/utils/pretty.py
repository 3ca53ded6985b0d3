"""Pretty-print helpers for boards, word lists and page status."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Iterable, List, Sequence

from ..core.constants import BOARD_SIDE, BOX_SIDE, EMPTY_CELL

if TYPE_CHECKING:
    from ..core.models import Board, WordResult
    from ..ui.app import FunctionInfo


WORD_COLUMNS = 3


def cell_symbol(value: str) -> str:
    return "." if value == EMPTY_CELL else value


def format_board(board: Board) -> str:
    """Render the board as a 9x9 grid with 3x3 box separators."""
    separator = "+".join(["-" * (2 * BOX_SIDE + 1)] * (BOARD_SIDE // BOX_SIDE))
    lines: List[str] = []
    for r, row in enumerate(board.rows()):
        if r and r % BOX_SIDE == 0:
            lines.append(separator)
        boxes = [
            " ".join(cell_symbol(v) for v in row[c:c + BOX_SIDE])
            for c in range(0, BOARD_SIDE, BOX_SIDE)
        ]
        lines.append(" " + " | ".join(boxes))
    return "\n".join(lines)


def format_words(words: Iterable[str], columns: int = WORD_COLUMNS) -> str:
    items = list(words)
    if not items:
        return "(no words)"
    width = max(len(w) for w in items)
    lines = []
    for start in range(0, len(items), columns):
        chunk = items[start:start + columns]
        lines.append("  ".join(f"{w:<{width}}" for w in chunk).rstrip())
    return "\n".join(lines)


def format_functions(functions: Sequence[FunctionInfo]) -> str:
    width = max((len(f.name) for f in functions), default=0)
    return "\n".join(f"{f.name:<{width}}  {f.link:<18}  {f.description}" for f in functions)


def pretty_print_board(board: Board, *, label: str | None = None, stream=None) -> None:
    """Print the board in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_board(board), file=stream)


def pretty_print_words(result: WordResult, *, stream=None) -> None:
    stream = stream or sys.stdout
    print(format_words(result.words), file=stream)
    print(f"\n{len(result)} word(s)", file=stream)
