# hep_companion/llm/errors.py
"""
Upstream failure classification.

The provider turns every raw SDK/network failure into an LLMError whose
`retryable` flag is decided once, at construction. The retry wrapper only
ever looks at the result of `classify()`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

RETRYABLE_STATUS_CODES = frozenset({429, 500, 503})
DEFAULT_STATUS_CODE = 500

_TIMEOUT_RE = re.compile(r"timeout|timed? out", re.IGNORECASE)


class LLMError(Exception):
    """Classified failure from the generation API."""

    def __init__(self, message: str, status_code: int = DEFAULT_STATUS_CODE, retryable: bool = False):
        super().__init__(message)
        self._message = message
        self._status_code = status_code
        self._retryable = retryable

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def retryable(self) -> bool:
        return self._retryable

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._message!r}, status_code={self._status_code}, retryable={self._retryable})"


class LLMRetryableError(LLMError):
    """Transient error: timeouts, 429s, 5xx."""

    def __init__(self, message: str, status_code: int = DEFAULT_STATUS_CODE):
        super().__init__(message, status_code=status_code, retryable=True)


class LLMNonRetryableError(LLMError):
    """Bad request, auth, missing configuration."""

    def __init__(self, message: str, status_code: int = DEFAULT_STATUS_CODE):
        super().__init__(message, status_code=status_code, retryable=False)


@dataclass(frozen=True)
class Classified:
    error: LLMError

    @property
    def retryable(self) -> bool:
        return self.error.retryable


@dataclass(frozen=True)
class Unclassified:
    raw: BaseException

    @property
    def retryable(self) -> bool:
        return False


Failure = Union[Classified, Unclassified]


def classify(exc: BaseException) -> Failure:
    if isinstance(exc, LLMError):
        return Classified(exc)
    return Unclassified(exc)


def is_retryable_failure(status_code: int | None, message: str | None) -> bool:
    """Rate limits, 500/503 and anything that reads like a timeout."""
    status = status_code if status_code is not None else DEFAULT_STATUS_CODE
    if status in RETRYABLE_STATUS_CODES:
        return True
    return bool(_TIMEOUT_RE.search(message or ""))
