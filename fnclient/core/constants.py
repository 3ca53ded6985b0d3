"""Shared constants and enumerations for the Fn client."""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Tuple


BOARD_SIDE = 9
BOARD_SIZE = BOARD_SIDE * BOARD_SIDE
BOX_SIDE = 3
EMPTY_CELL = "0"
DIGITS: FrozenSet[str] = frozenset("0123456789")

CELL_ID_PREFIX = "item-"

MIN_WORD_OPTIONS: Tuple[int, ...] = (3, 4)
DEFAULT_MIN_WORD = 3

SUDOKU_ENDPOINT = "/api/sudoku-solver"
LETTERS_ENDPOINT = "/api/letters-to-words"


class KeyCode(str, Enum):
    """Keyboard codes the client reacts to (DOM ``KeyboardEvent.code`` names)."""

    DIGIT0 = "Digit0"
    DIGIT1 = "Digit1"
    DIGIT2 = "Digit2"
    DIGIT3 = "Digit3"
    DIGIT4 = "Digit4"
    DIGIT5 = "Digit5"
    DIGIT6 = "Digit6"
    DIGIT7 = "Digit7"
    DIGIT8 = "Digit8"
    DIGIT9 = "Digit9"
    ENTER = "Enter"
    NUMPAD_ENTER = "NumpadEnter"


DIGIT_KEYS: FrozenSet[str] = frozenset(
    code.value for code in KeyCode if code.value.startswith("Digit")
)
SUBMIT_KEYS: FrozenSet[str] = frozenset({KeyCode.ENTER.value, KeyCode.NUMPAD_ENTER.value})


class DispatchState(str, Enum):
    """Lifecycle of a remote request."""

    IDLE = "IDLE"
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    FAILED = "FAILED"
    DISCARDED = "DISCARDED"


class ApplyPolicy(str, Enum):
    """How overlapping responses are reconciled into a store."""

    LAST_ARRIVAL = "last-arrival"
    LAST_ISSUED = "last-issued"


def cell_id(index: int) -> str:
    return f"{CELL_ID_PREFIX}{index}"


def digit_for_key(code: str) -> str | None:
    """Return the digit character typed by ``code`` or ``None``."""
    if code in DIGIT_KEYS:
        return code[-1]
    return None
