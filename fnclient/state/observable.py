"""Minimal synchronous observer support shared by the state stores."""

from __future__ import annotations

from typing import Any, Callable, Generic, List, TypeVar

from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

T = TypeVar("T")
Subscriber = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class Observable(Generic[T]):
    """Holds one immutable snapshot and notifies subscribers when it changes.

    Subclasses mutate state only through :meth:`_commit`, which swaps the
    snapshot reference and then notifies every subscriber, in subscription
    order, with the new snapshot.
    """

    def __init__(self, initial: T) -> None:
        self._state: T = initial
        self._subscribers: List[Subscriber] = []

    def get(self) -> T:
        return self._state

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _commit(self, new_state: T) -> T:
        if new_state is self._state or new_state == self._state:
            return self._state
        self._state = new_state
        # Copy: a subscriber may unsubscribe or subscribe while being notified.
        for callback in list(self._subscribers):
            callback(new_state)
        LOGGER.debug("%s committed new state", type(self).__name__)
        return new_state
