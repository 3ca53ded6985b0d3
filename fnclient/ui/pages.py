"""The two function pages: sudoku solver and letters to words.

A page owns its stores, view and dispatcher between :meth:`Page.mount` and
:meth:`Page.unmount`. Its document-level Enter listener is rebuilt by a
:class:`~fnclient.engine.events.KeyListenerBinding` on every store change, so
the listener always submits the state current at keystroke time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import Callable, List, Optional, TypeVar, Union

from ..core.constants import (
    EMPTY_CELL,
    SUBMIT_KEYS,
    ApplyPolicy,
    digit_for_key,
)
from ..core.exceptions import DispatchError, PageNotMountedError
from ..core.models import Board, KeyEvent, LettersQuery, RequestRecord, WordResult
from ..engine.dispatcher import GenerateDispatcher, RequestDispatcher, SolveDispatcher
from ..engine.events import EventLoop, KeyHub, KeyListener, KeyListenerBinding
from ..engine.focus import FocusController
from ..io.api_client import FnApiClient
from ..state.board_store import BoardStore
from ..state.observable import Unsubscribe
from ..state.query_store import QueryStore, WordResultStore
from ..utils.logger import get_logger
from .view import GridView, StatusLine, WordListView


LOGGER = get_logger(__name__)

T = TypeVar("T")


class Page(ABC):
    link = "/"
    surface = ""
    endpoint = ""
    title = ""
    description = ""

    def __init__(
        self,
        client: FnApiClient,
        hub: KeyHub,
        loop: EventLoop,
        executor: Executor,
        policy: ApplyPolicy = ApplyPolicy.LAST_ARRIVAL,
    ) -> None:
        self.client = client
        self.hub = hub
        self.loop = loop
        self.executor = executor
        self.policy = ApplyPolicy(policy)
        self.status = StatusLine()
        self.binding: Optional[KeyListenerBinding] = None
        self.dispatcher: Optional[RequestDispatcher] = None
        self._dispatchers: List[RequestDispatcher] = []
        self._unsubscribers: List[Unsubscribe] = []

    @property
    def mounted(self) -> bool:
        return self.binding is not None

    @property
    def in_flight(self) -> int:
        """Requests still outstanding, including those issued before a remount."""
        self._dispatchers = [
            d for d in self._dispatchers if d is self.dispatcher or not d.idle
        ]
        return sum(d.in_flight for d in self._dispatchers)

    @abstractmethod
    def mount(self) -> None:
        """Create the page state, render it and bind the Enter listener."""

    def unmount(self) -> None:
        if self.binding is not None:
            self.binding.unbind()
            self.binding = None
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.dispatcher = None
        self.status.clear()

    def accepts(self, event: KeyEvent) -> bool:
        return event.code in SUBMIT_KEYS and event.surface in (None, self.surface)

    def press_enter(self, code: str = "Enter") -> KeyEvent:
        return self.hub.dispatch(KeyEvent(code, surface=self.surface))

    def _attach(self, dispatcher: RequestDispatcher) -> None:
        # Each mount gets its own status line; completions from a dispatcher
        # of an earlier mount never reach it.
        self.status = StatusLine()
        self.dispatcher = dispatcher
        self._dispatchers.append(dispatcher)

        def on_success(record: RequestRecord) -> None:
            if dispatcher is self.dispatcher:
                self._on_success(record)

        def on_failure(record: RequestRecord, exc: DispatchError) -> None:
            if dispatcher is self.dispatcher:
                self._on_failure(record, exc)
            else:
                LOGGER.debug("%s #%d finished after unmount", dispatcher.name, record.sequence)

        dispatcher.on_success(on_success)
        dispatcher.on_failure(on_failure)

    def _on_success(self, record: RequestRecord) -> None:
        self.status.clear()

    def _on_failure(self, record: RequestRecord, exc: DispatchError) -> None:
        self.status.show(f"{self.title}: request failed ({exc})")

    def _submit_listener(self, submit: Callable[[], None]) -> KeyListener:
        def listener(event: KeyEvent) -> None:
            if not self.accepts(event):
                return
            event.prevent_default()
            submit()

        return listener


def _require(value: Optional[T], page: Page) -> T:
    if value is None:
        raise PageNotMountedError(f"{page.title} page is not mounted")
    return value


class SudokuPage(Page):
    link = "/sudoku-solver"
    surface = "sudoku"
    endpoint = "/api/sudoku-solver"
    title = "Sudoku Solver"
    description = "Given an unsolved board (0 for unsolved), returns a solution, if possible."

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.store: Optional[BoardStore] = None
        self.view = GridView()
        self.focus = FocusController(self.view)

    def mount(self) -> None:
        if self.mounted:
            return
        self.store = BoardStore()
        self._attach(
            SolveDispatcher(self.store, self.client, self.loop, self.executor, self.policy)
        )
        self.view.mount(self.store.get())
        self._unsubscribers.append(self.store.subscribe(self.view.render))
        self.binding = KeyListenerBinding(self.hub, self._make_listener, [self.store])
        self.binding.bind()

    def unmount(self) -> None:
        super().unmount()
        self.view.unmount()
        self.store = None

    @property
    def board(self) -> Board:
        return _require(self.store, self).get()

    def _make_listener(self) -> KeyListener:
        board = _require(self.store, self).get()
        dispatcher = _require(self.dispatcher, self)
        return self._submit_listener(lambda: dispatcher.submit(board))

    def change_cell(self, index: int, raw_value: Union[str, int]) -> bool:
        """Apply an input-box change; return ``False`` when it was rejected.

        An emptied box means an empty cell and a longer entry keeps only its
        last character. Anything that is not a digit is refused and the box
        is re-rendered from the store.
        """
        store = _require(self.store, self)
        raw = str(raw_value)
        value = raw[-1:] or EMPTY_CELL
        if not value.isdigit() or not value.isascii():
            LOGGER.debug("Ignoring non-digit input %r at cell %d", raw, index)
            self.view.render(store.get())
            return False
        store.set_cell(index, value)
        return True

    def key_up(self, event: KeyEvent, index: int) -> Optional[int]:
        return self.focus.on_key_up(event, index)

    def type_key(self, index: int, code: str) -> KeyEvent:
        """Emulate a full keystroke in cell ``index``: key-down, input, key-up."""
        event = self.hub.dispatch(KeyEvent(code, surface=self.surface))
        digit = digit_for_key(code)
        handle = self.view.handle(index)
        if digit is not None and handle is not None and not event.default_prevented:
            handle.focus()
            self.change_cell(index, handle.type_char(digit))
        self.key_up(KeyEvent(code, surface=self.surface), index)
        return event

    def type_board(self, text: str, start: int = 0) -> None:
        """Type ``text`` from cell ``start`` on, one digit key per character.

        ``.`` is typed as ``0``; focus follows the controller after each key.
        """
        index = start
        for char in text:
            code = f"Digit{'0' if char == '.' else char}"
            self.type_key(index, code)
            focused = self.view.focused
            index = focused.index if focused is not None else index + 1


class LettersPage(Page):
    link = "/letters-to-words"
    surface = "letters"
    endpoint = "/api/letters-to-words"
    title = "Letters to Words"
    description = (
        "Given a set of letters, return a list of words that can be made from those letters."
    )

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.query: Optional[QueryStore] = None
        self.results: Optional[WordResultStore] = None
        self.words_view = WordListView()

    def mount(self) -> None:
        if self.mounted:
            return
        self.query = QueryStore()
        self.results = WordResultStore()
        self._attach(
            GenerateDispatcher(self.results, self.client, self.loop, self.executor, self.policy)
        )
        self.words_view.render(self.results.get())
        self._unsubscribers.append(self.results.subscribe(self.words_view.render))
        self.binding = KeyListenerBinding(
            self.hub, self._make_listener, [self.query, self.results]
        )
        self.binding.bind()

    def unmount(self) -> None:
        super().unmount()
        self.words_view.render(WordResult())
        self.query = None
        self.results = None

    def _make_listener(self) -> KeyListener:
        query = _require(self.query, self).get()
        dispatcher = _require(self.dispatcher, self)
        return self._submit_listener(lambda: dispatcher.submit(query))

    def set_letters(self, text: str) -> LettersQuery:
        return _require(self.query, self).set_letters(text)

    def set_min(self, value: Union[int, str]) -> LettersQuery:
        return _require(self.query, self).set_min(value)

    @property
    def words(self) -> WordResult:
        return _require(self.results, self).get()
