"""HTTP client for the Fn solving and word-generation service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..core.config import ClientConfig
from ..core.constants import BOARD_SIZE, DIGITS, LETTERS_ENDPOINT, SUDOKU_ENDPOINT
from ..core.exceptions import MalformedResponseError, NetworkError, ServiceError
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class FnApiClient:
    """Thin wrapper around the two POST endpoints.

    Methods block; the dispatchers call them from executor threads. Every
    failure surfaces as a :class:`~fnclient.core.exceptions.DispatchError`.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        self.session = session or requests.Session()

    def url(self, endpoint: str) -> str:
        return f"{self.config.base_url}{endpoint}"

    def solve_sudoku(self, board: str) -> Dict[str, Any]:
        """Post an 81-character board and return the decoded reply.

        The reply is guaranteed to hold a ``solution`` made of exactly 81
        digits.
        """
        response = self._post(
            SUDOKU_ENDPOINT,
            data=board.encode("ascii"),
            headers={"Content-Type": "text/plain"},
        )
        payload = self._decode(response)
        if not isinstance(payload, dict):
            raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")
        solution = payload.get("solution")
        if not isinstance(solution, str):
            raise MalformedResponseError("Sudoku response is missing a 'solution' string")
        if len(solution) != BOARD_SIZE:
            raise MalformedResponseError(
                f"Solution must be {BOARD_SIZE} characters, got {len(solution)}"
            )
        if not set(solution) <= DIGITS:
            raise MalformedResponseError("Solution contains non-digit characters")
        return payload

    def letters_to_words(self, letters: str, min_length: int) -> List[str]:
        response = self._post(
            LETTERS_ENDPOINT,
            json={"letters": letters, "min": int(min_length)},
        )
        payload = self._decode(response)
        if not isinstance(payload, list) or not all(isinstance(word, str) for word in payload):
            raise MalformedResponseError("Letters response must be a JSON array of strings")
        return payload

    def close(self) -> None:
        self.session.close()

    def _post(self, endpoint: str, **kwargs: Any) -> requests.Response:
        url = self.url(endpoint)
        LOGGER.debug("POST %s", url)
        try:
            response = self.session.post(url, timeout=self.config.timeout_seconds, **kwargs)
        except requests.RequestException as exc:
            raise NetworkError(f"Request to {url} failed: {exc}") from exc
        if not response.ok:
            reason = (response.text or response.reason or "").strip()
            raise ServiceError(
                f"{endpoint} answered {response.status_code}: {reason}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"Response is not valid JSON: {exc}") from exc
