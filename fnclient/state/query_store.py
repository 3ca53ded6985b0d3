"""Letters query and generated-word stores."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Union

from ..core.constants import MIN_WORD_OPTIONS
from ..core.exceptions import InvalidOptionError, ValidationError
from ..core.models import LettersQuery, WordResult
from .observable import Observable


def parse_min(value: Union[int, str]) -> int:
    """Parse a minimum word size the way the select box hands it over."""
    if isinstance(value, bool):
        raise InvalidOptionError(f"Minimum word size must be one of {MIN_WORD_OPTIONS}, got {value!r}")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidOptionError(
            f"Minimum word size must be one of {MIN_WORD_OPTIONS}, got {value!r}"
        ) from exc
    if parsed not in MIN_WORD_OPTIONS:
        raise InvalidOptionError(
            f"Minimum word size must be one of {MIN_WORD_OPTIONS}, got {value!r}"
        )
    return parsed


class QueryStore(Observable[LettersQuery]):
    def __init__(self, query: LettersQuery | None = None) -> None:
        super().__init__(query if query is not None else LettersQuery())

    def set_letters(self, text: str) -> LettersQuery:
        if not isinstance(text, str):
            raise ValidationError(f"Letters must be text, got {type(text).__name__}")
        return self._commit(replace(self._state, letters=text))

    def set_min(self, value: Union[int, str]) -> LettersQuery:
        return self._commit(replace(self._state, min=parse_min(value)))


class WordResultStore(Observable[WordResult]):
    """Owns the generated words; every write replaces the whole set."""

    def __init__(self) -> None:
        super().__init__(WordResult())

    def replace(self, words: Union[WordResult, Iterable[str]]) -> WordResult:
        if not isinstance(words, WordResult):
            words = WordResult.from_words(words)
        return self._commit(words)

    def clear(self) -> WordResult:
        return self._commit(WordResult())
