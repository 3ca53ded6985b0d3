"""Application shell: function index, routing and the shared event loop."""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.config import ClientConfig
from ..core.models import KeyEvent
from ..engine.events import EventLoop, KeyHub
from ..io.api_client import FnApiClient
from ..utils.logger import get_logger
from .pages import LettersPage, Page, SudokuPage


LOGGER = get_logger(__name__)

INDEX_LINK = "/"


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    link: str
    description: str


FUNCTIONS: List[FunctionInfo] = [
    FunctionInfo(name="sudoku", link=SudokuPage.link, description="sudoku solver"),
    FunctionInfo(
        name="letters",
        link=LettersPage.link,
        description="generate words from a list of letters",
    ),
]


class App:
    """Owns the loop, the key hub and one page per function.

    Only the active page is mounted; navigating away unmounts it, which drops
    its key listener and discards its state.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[FnApiClient] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        self.client = client or FnApiClient(self.config)
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="fn-request"
        )
        self.loop = EventLoop()
        self.hub = KeyHub()
        policy = self.config.apply_policy
        self.sudoku = SudokuPage(self.client, self.hub, self.loop, self.executor, policy)
        self.letters = LettersPage(self.client, self.hub, self.loop, self.executor, policy)
        self.pages: Dict[str, Page] = {page.link: page for page in (self.sudoku, self.letters)}
        self.active: Optional[Page] = None
        self.location = INDEX_LINK

    def __enter__(self) -> "App":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def navigate(self, link: str) -> Optional[Page]:
        """Switch to the page routed at ``link``; unknown links show the index."""
        page = self.pages.get(link)
        if page is self.active and page is not None:
            return page
        if self.active is not None:
            self.active.unmount()
            self.active = None
        if page is None:
            if link != INDEX_LINK:
                LOGGER.debug("No page routed at %s, showing the index", link)
            self.location = INDEX_LINK
            return None
        page.mount()
        self.active = page
        self.location = link
        LOGGER.debug("Navigated to %s", link)
        return page

    def key_down(self, event: KeyEvent) -> KeyEvent:
        return self.hub.dispatch(event)

    def in_flight(self) -> int:
        return sum(page.in_flight for page in self.pages.values())

    def run_until_idle(self, timeout: Optional[float] = None) -> bool:
        """Apply completions until no request is in flight."""
        self.loop.run_pending()
        return self.loop.run_until(lambda: self.in_flight() == 0, timeout=timeout)

    def close(self) -> None:
        if self.active is not None:
            self.active.unmount()
            self.active = None
        if self._owns_executor:
            self.executor.shutdown(wait=False)
        self.client.close()
