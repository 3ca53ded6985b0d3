"""Single-threaded event loop and keyboard listener plumbing.

All state changes happen on whichever thread drains the :class:`EventLoop`.
Worker threads never touch a store directly; they :meth:`EventLoop.post` a
callback and the loop thread runs it in arrival order.
"""

from __future__ import annotations

import queue
import threading
import time
from typing import Callable, List, Optional, Sequence

from ..core.models import KeyEvent
from ..state.observable import Observable, Unsubscribe
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

Callback = Callable[[], None]
KeyListener = Callable[[KeyEvent], None]


class EventLoop:
    """FIFO queue of callbacks drained by one thread."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Callback]" = queue.Queue()
        self._owner: Optional[int] = None

    def post(self, callback: Callback) -> None:
        """Schedule ``callback``; safe to call from any thread."""
        self._queue.put(callback)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def run_pending(self) -> int:
        """Run every callback queued so far without blocking."""
        ran = 0
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return ran
            self._run(callback)
            ran += 1

    def run_until(self, predicate: Callable[[], bool], timeout: Optional[float] = None) -> bool:
        """Drain callbacks until ``predicate()`` holds or ``timeout`` elapses."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while not predicate():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                return False
            try:
                callback = self._queue.get(timeout=remaining)
            except queue.Empty:
                return predicate()
            self._run(callback)
        return True

    def _run(self, callback: Callback) -> None:
        ident = threading.get_ident()
        if self._owner is None:
            self._owner = ident
        elif self._owner != ident:
            LOGGER.warning("Event loop drained from a second thread (%s)", threading.current_thread().name)
        callback()


class KeyHub:
    """Document-level key-down listener registry."""

    def __init__(self) -> None:
        self._listeners: List[KeyListener] = []

    def add_listener(self, listener: KeyListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: KeyListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self) -> List[KeyListener]:
        return list(self._listeners)

    def dispatch(self, event: KeyEvent) -> KeyEvent:
        for listener in list(self._listeners):
            listener(event)
        return event


class KeyListenerBinding:
    """Keeps exactly one freshly built listener registered on a hub.

    ``factory`` builds a listener closing over the current store snapshots.
    Whenever any watched store commits, the previous listener is removed
    before the rebuilt one is added, so no registered listener ever holds an
    outdated snapshot.
    """

    def __init__(
        self,
        hub: KeyHub,
        factory: Callable[[], KeyListener],
        watched: Sequence[Observable],
    ) -> None:
        self.hub = hub
        self.factory = factory
        self.watched = list(watched)
        self.current: Optional[KeyListener] = None
        self.generation = 0
        self._unsubscribers: List[Unsubscribe] = []

    @property
    def bound(self) -> bool:
        return self.current is not None

    def bind(self) -> None:
        if self.bound:
            return
        self._unsubscribers = [store.subscribe(self._on_change) for store in self.watched]
        self._register()

    def unbind(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        if self.current is not None:
            self.hub.remove_listener(self.current)
            self.current = None

    def _on_change(self, _snapshot: object) -> None:
        if self.current is not None:
            self.hub.remove_listener(self.current)
            self.current = None
        self._register()

    def _register(self) -> None:
        self.current = self.factory()
        self.generation += 1
        self.hub.add_listener(self.current)
        LOGGER.debug("Key listener bound (generation %d)", self.generation)
