"""Request dispatchers: snapshot → remote call → reconcile into a store.

A dispatcher moves through ``IDLE → PENDING → {RESOLVED, FAILED}`` for every
request it issues and reports ``IDLE`` again once nothing is in flight.
The blocking HTTP call runs on an executor thread; its completion is posted
back to the :class:`~fnclient.engine.events.EventLoop`, and validation plus
the store write happen on the loop thread.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from concurrent.futures import CancelledError, Executor, Future
from typing import Any, Callable, Generic, List, Optional, TypeVar

from ..core.constants import ApplyPolicy, DispatchState
from ..core.exceptions import DispatchError, MalformedResponseError, ValidationError
from ..core.models import Board, LettersQuery, RequestRecord, WordResult
from ..io.api_client import FnApiClient
from ..state.board_store import BoardStore
from ..state.query_store import WordResultStore
from ..utils.logger import get_logger
from .events import EventLoop


LOGGER = get_logger(__name__)

S = TypeVar("S")
R = TypeVar("R")

SuccessHook = Callable[[RequestRecord], None]
FailureHook = Callable[[RequestRecord, DispatchError], None]


class RequestDispatcher(ABC, Generic[S, R]):
    """Shared state machine; subclasses supply the call and the reconcile step."""

    name = "request"

    def __init__(
        self,
        loop: EventLoop,
        executor: Executor,
        policy: ApplyPolicy = ApplyPolicy.LAST_ARRIVAL,
    ) -> None:
        self.loop = loop
        self.executor = executor
        self.policy = ApplyPolicy(policy)
        self.records: List[RequestRecord] = []
        self.last_error: Optional[DispatchError] = None
        self._sequence = itertools.count(1)
        self._in_flight = 0
        self._applied_sequence = 0
        self._success_hooks: List[SuccessHook] = []
        self._failure_hooks: List[FailureHook] = []

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def state(self) -> DispatchState:
        return DispatchState.PENDING if self._in_flight else DispatchState.IDLE

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def idle(self) -> bool:
        return self._in_flight == 0

    def on_success(self, hook: SuccessHook) -> None:
        self._success_hooks.append(hook)

    def on_failure(self, hook: FailureHook) -> None:
        self._failure_hooks.append(hook)

    def submit(self, snapshot: S) -> RequestRecord:
        """Issue a request for ``snapshot``; never blocks.

        Overlapping submissions are allowed and never de-duplicated.
        """
        record = RequestRecord(sequence=next(self._sequence), snapshot=snapshot)
        future = self.executor.submit(self._call, snapshot)
        self.records.append(record)
        self._in_flight += 1
        LOGGER.debug("%s #%d issued", self.name, record.sequence)
        future.add_done_callback(lambda done: self.loop.post(lambda: self._complete(record, done)))
        return record

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------

    @abstractmethod
    def _call(self, snapshot: S) -> Any:
        """Blocking remote call; runs on an executor thread."""

    @abstractmethod
    def _reconcile(self, snapshot: S, response: Any) -> R:
        """Validate ``response``; raise a :class:`DispatchError` to fail the request."""

    @abstractmethod
    def _apply(self, result: R) -> None:
        """Write a reconciled result into the store."""

    # ------------------------------------------------------------------
    # Completion (runs on the loop thread)
    # ------------------------------------------------------------------

    def _complete(self, record: RequestRecord, future: "Future[Any]") -> None:
        self._in_flight -= 1
        try:
            result = self._reconcile(record.snapshot, future.result())
        except DispatchError as exc:
            self._fail(record, exc)
            return
        except (Exception, CancelledError) as exc:
            error = DispatchError(f"unexpected {type(exc).__name__}: {exc}")
            error.__cause__ = exc
            self._fail(record, error)
            return

        if self.policy == ApplyPolicy.LAST_ISSUED and record.sequence < self._applied_sequence:
            record.transition(DispatchState.DISCARDED)
            LOGGER.warning(
                "%s #%d discarded: #%d already applied",
                self.name, record.sequence, self._applied_sequence,
            )
            return

        self._apply(result)
        self._applied_sequence = max(self._applied_sequence, record.sequence)
        record.result = result
        record.transition(DispatchState.RESOLVED)
        LOGGER.info("%s #%d applied", self.name, record.sequence)
        for hook in list(self._success_hooks):
            hook(record)

    def _fail(self, record: RequestRecord, exc: DispatchError) -> None:
        self.last_error = exc
        record.transition(DispatchState.FAILED, error=str(exc))
        LOGGER.error("%s #%d failed: %s", self.name, record.sequence, exc)
        for hook in list(self._failure_hooks):
            hook(record, exc)


class SolveDispatcher(RequestDispatcher[Board, Board]):
    """Posts the board to the sudoku solver and replaces it with the solution."""

    name = "sudoku-solver"

    def __init__(
        self,
        store: BoardStore,
        client: FnApiClient,
        loop: EventLoop,
        executor: Executor,
        policy: ApplyPolicy = ApplyPolicy.LAST_ARRIVAL,
    ) -> None:
        super().__init__(loop, executor, policy)
        self.store = store
        self.client = client

    def _call(self, snapshot: Board) -> Any:
        return self.client.solve_sudoku(snapshot.to_wire())

    def _reconcile(self, snapshot: Board, response: Any) -> Board:
        if not isinstance(response, dict) or not isinstance(response.get("solution"), str):
            raise MalformedResponseError("Sudoku response is missing a 'solution' string")
        original = response.get("original")
        if original is not None and original != snapshot.to_wire():
            LOGGER.warning("%s echoed a board that differs from the one sent", self.name)
        try:
            return Board.from_wire(response["solution"])
        except ValidationError as exc:
            raise MalformedResponseError(f"Unusable solution: {exc}") from exc

    def _apply(self, result: Board) -> None:
        self.store.replace_all(result)


class GenerateDispatcher(RequestDispatcher[LettersQuery, WordResult]):
    """Posts the letters query and replaces the word result with the reply."""

    name = "letters-to-words"

    def __init__(
        self,
        results: WordResultStore,
        client: FnApiClient,
        loop: EventLoop,
        executor: Executor,
        policy: ApplyPolicy = ApplyPolicy.LAST_ARRIVAL,
    ) -> None:
        super().__init__(loop, executor, policy)
        self.results = results
        self.client = client

    def _call(self, snapshot: LettersQuery) -> Any:
        return self.client.letters_to_words(snapshot.letters, int(snapshot.min))

    def _reconcile(self, snapshot: LettersQuery, response: Any) -> WordResult:
        if not isinstance(response, list) or not all(isinstance(word, str) for word in response):
            raise MalformedResponseError("Letters response must be a list of strings")
        return WordResult.from_words(response)

    def _apply(self, result: WordResult) -> None:
        self.results.replace(result)
