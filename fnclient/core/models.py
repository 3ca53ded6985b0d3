"""Data models shared by the stores, dispatchers and views."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

from .constants import (
    BOARD_SIDE,
    BOARD_SIZE,
    DEFAULT_MIN_WORD,
    DIGITS,
    EMPTY_CELL,
    DispatchState,
)
from .exceptions import InvalidCellValueError, InvalidShapeError, OutOfRangeError


CellValue = Union[str, int]


def normalize_cell(value: CellValue) -> str:
    """Coerce ``value`` into a single digit character."""
    if isinstance(value, bool):
        raise InvalidCellValueError(f"Cell value must be a digit, got {value!r}")
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str) or len(value) != 1 or value not in DIGITS:
        raise InvalidCellValueError(f"Cell value must be a single digit, got {value!r}")
    return value


def check_index(index: int) -> int:
    if isinstance(index, bool) or not isinstance(index, int):
        raise OutOfRangeError(f"Cell index must be an integer, got {index!r}")
    if not 0 <= index < BOARD_SIZE:
        raise OutOfRangeError(f"Cell index {index} outside 0..{BOARD_SIZE - 1}")
    return index


@dataclass(frozen=True)
class Board:
    """Immutable 81-cell sudoku board in row-major order."""

    cells: Tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_SIZE:
            raise InvalidShapeError(
                f"Board must hold exactly {BOARD_SIZE} cells, got {len(self.cells)}"
            )
        for cell in self.cells:
            if cell not in DIGITS:
                raise InvalidCellValueError(f"Cell value must be a single digit, got {cell!r}")

    @classmethod
    def empty(cls) -> "Board":
        return cls((EMPTY_CELL,) * BOARD_SIZE)

    @classmethod
    def from_cells(cls, values: Iterable[CellValue]) -> "Board":
        cells = tuple(values)
        if len(cells) != BOARD_SIZE:
            raise InvalidShapeError(
                f"Board must hold exactly {BOARD_SIZE} cells, got {len(cells)}"
            )
        return cls(tuple(normalize_cell(value) for value in cells))

    @classmethod
    def from_wire(cls, text: str) -> "Board":
        """Parse the 81-character digit string used on the wire."""
        return cls.from_cells(text)

    def to_wire(self) -> str:
        return "".join(self.cells)

    def with_cell(self, index: int, value: CellValue) -> "Board":
        check_index(index)
        digit = normalize_cell(value)
        if self.cells[index] == digit:
            return self
        cells = list(self.cells)
        cells[index] = digit
        return Board(tuple(cells))

    def rows(self) -> List[Tuple[str, ...]]:
        return [self.cells[r * BOARD_SIDE:(r + 1) * BOARD_SIDE] for r in range(BOARD_SIDE)]

    def filled_count(self) -> int:
        return sum(1 for cell in self.cells if cell != EMPTY_CELL)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[str]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> str:
        return self.cells[index]


@dataclass(frozen=True)
class LettersQuery:
    """Free-text letters plus the minimum generated word length."""

    letters: str = ""
    min: int = DEFAULT_MIN_WORD

    def to_payload(self) -> dict:
        return {"letters": self.letters, "min": int(self.min)}


@dataclass(frozen=True)
class WordResult:
    """Distinct words returned by the generator, kept in the order received."""

    words: Tuple[str, ...] = ()

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "WordResult":
        seen: Set[str] = set()
        ordered: List[str] = []
        for word in words:
            if word not in seen:
                seen.add(word)
                ordered.append(word)
        return cls(tuple(ordered))

    @property
    def word_set(self) -> FrozenSet[str]:
        return frozenset(self.words)

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __contains__(self, word: object) -> bool:
        return word in self.words


@dataclass
class KeyEvent:
    """A keystroke delivered to the page.

    ``surface`` names the page the keystroke originated from; ``None`` means
    the event was not attributed to any page and every listener may react.
    """

    code: str
    surface: Optional[str] = None
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class RequestRecord:
    """Book-keeping for one issued request."""

    sequence: int
    snapshot: Any
    state: DispatchState = DispatchState.PENDING
    error: Optional[str] = None
    result: Any = None
    history: List[DispatchState] = field(default_factory=lambda: [DispatchState.PENDING])

    def transition(self, state: DispatchState, error: Optional[str] = None) -> None:
        self.state = state
        self.history.append(state)
        if error is not None:
            self.error = error

    @property
    def finished(self) -> bool:
        return self.state != DispatchState.PENDING


def board_sequence(board: Union[Board, Sequence[CellValue], str]) -> Board:
    """Coerce any accepted board representation into a :class:`Board`."""
    if isinstance(board, Board):
        return board
    return Board.from_cells(board)
