"""Headless view objects: addressable cell handles, word list, status line."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..core.constants import BOARD_SIZE, cell_id
from ..core.models import Board, WordResult


class CellHandle:
    """One rendered input box of the board."""

    def __init__(self, view: "GridView", index: int, value: str = "") -> None:
        self.view = view
        self.index = index
        self.id = cell_id(index)
        self.value = value
        self.selection: Optional[Tuple[int, int]] = None

    @property
    def focused(self) -> bool:
        return self.view.focused is self

    def focus(self) -> None:
        self.view.set_focus(self)

    def select(self) -> None:
        self.selection = (0, len(self.value))

    def type_char(self, char: str) -> str:
        """Return the raw input value after typing ``char``.

        A full selection is overwritten, otherwise the character is appended.
        The handle value itself only changes on the next render.
        """
        if self.selection == (0, len(self.value)):
            raw = char
        else:
            raw = self.value + char
        self.selection = None
        return raw

    def __repr__(self) -> str:
        return f"CellHandle({self.id!r}, value={self.value!r}, focused={self.focused})"


class GridView:
    """Maps stable ``item-<index>`` ids to mounted cell handles."""

    def __init__(self) -> None:
        self.handles: Dict[str, CellHandle] = {}
        self.focused: Optional[CellHandle] = None

    @property
    def mounted(self) -> bool:
        return bool(self.handles)

    def mount(self, board: Board) -> None:
        self.handles = {cell_id(i): CellHandle(self, i, board[i]) for i in range(BOARD_SIZE)}

    def unmount(self) -> None:
        self.handles = {}
        self.focused = None

    def element_by_id(self, element_id: str) -> Optional[CellHandle]:
        return self.handles.get(element_id)

    def handle(self, index: int) -> Optional[CellHandle]:
        return self.element_by_id(cell_id(index))

    def set_focus(self, handle: CellHandle) -> None:
        if self.handles.get(handle.id) is handle:
            self.focused = handle

    def render(self, board: Board) -> None:
        for handle in self.handles.values():
            handle.value = board[handle.index]

    def values(self) -> List[str]:
        return [self.handles[cell_id(i)].value for i in range(BOARD_SIZE)] if self.mounted else []


class WordListView:
    def __init__(self) -> None:
        self.items: List[str] = []

    def render(self, result: WordResult) -> None:
        self.items = list(result.words)


class StatusLine:
    """Shows the most recent request failure until a request succeeds."""

    def __init__(self) -> None:
        self.message: Optional[str] = None

    def show(self, message: str) -> None:
        self.message = message

    def clear(self) -> None:
        self.message = None
