"""Headless client for the Fn sudoku solver and letters-to-words service.

This package exposes the public API surface via:

- ``fnclient.ui.app.App``: routes between the function pages and drives the
  shared event loop.
- ``fnclient.state`` stores: the board, the letters query and the word result.
- ``fnclient.engine.dispatcher``: turns store snapshots into remote requests.
"""

from .core.config import ClientConfig
from .core.models import Board, KeyEvent, LettersQuery, WordResult
from .ui.app import App, FUNCTIONS

__all__ = [
    "App",
    "Board",
    "ClientConfig",
    "FUNCTIONS",
    "KeyEvent",
    "LettersQuery",
    "WordResult",
]

__version__ = "0.1.0"
