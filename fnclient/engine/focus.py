"""Keystroke-driven focus navigation across the board cells."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..core.constants import BOARD_SIZE, DIGIT_KEYS, cell_id
from ..core.models import KeyEvent, check_index
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..ui.view import GridView


LOGGER = get_logger(__name__)


def is_digit_key(event: KeyEvent) -> bool:
    return event.code in DIGIT_KEYS


def next_focus(event: KeyEvent, current_index: int) -> Optional[int]:
    """Return the index that should receive focus after ``event``.

    Only the ten digit keys move focus. The move is always one cell forward
    in flat row-major order, wrapping from the last cell to the first.
    """
    check_index(current_index)
    if not is_digit_key(event):
        return None
    return (current_index + 1) % BOARD_SIZE


class FocusController:
    """Applies :func:`next_focus` to a rendered grid."""

    def __init__(self, view: "GridView") -> None:
        self.view = view

    def on_key_up(self, event: KeyEvent, index: int) -> Optional[int]:
        target = next_focus(event, index)
        LOGGER.debug("key %s at cell %d -> %s", event.code, index, target)
        if target is None:
            return None
        handle = self.view.element_by_id(cell_id(target))
        if handle is None:
            return None
        handle.focus()
        handle.select()
        return target
