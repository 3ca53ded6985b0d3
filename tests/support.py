"""Test doubles shared by the test modules."""

from concurrent.futures import Executor, Future
from typing import Any, Callable, List, Tuple


class ManualExecutor(Executor):
    """Executor whose work only runs when the test says so, in any order."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Callable[..., Any], tuple, dict, Future]] = []

    def submit(self, fn, *args, **kwargs) -> Future:
        future: Future = Future()
        self.calls.append((fn, args, kwargs, future))
        return future

    def run(self, position: int) -> None:
        fn, args, kwargs, future = self.calls[position]
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    def resolve(self, position: int, value: Any) -> None:
        self.calls[position][3].set_result(value)

    def fail(self, position: int, exc: BaseException) -> None:
        self.calls[position][3].set_exception(exc)

    def args(self, position: int) -> tuple:
        return self.calls[position][1]


def solution(prefix: str = "", fill: str = "0") -> dict:
    wire = prefix + fill * (81 - len(prefix))
    return {"original": wire, "solution": wire}
