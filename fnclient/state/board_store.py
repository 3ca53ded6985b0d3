"""Canonical in-memory sudoku board."""

from __future__ import annotations

from typing import Sequence, Union

from ..core.models import Board, CellValue, board_sequence
from .observable import Observable


class BoardStore(Observable[Board]):
    """Single owner of the 81-cell board.

    Every operation validates before it commits, so a rejected call leaves
    the store (and every previously returned :class:`Board`) untouched.
    """

    def __init__(self, board: Board | None = None) -> None:
        super().__init__(board if board is not None else Board.empty())

    def set_cell(self, index: int, value: CellValue) -> Board:
        return self._commit(self._state.with_cell(index, value))

    def replace_all(self, new_board: Union[Board, Sequence[CellValue], str]) -> Board:
        return self._commit(board_sequence(new_board))

    def reset(self) -> Board:
        return self._commit(Board.empty())
