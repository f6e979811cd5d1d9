# hep_companion/llm/retry.py
"""
Retry with exponential backoff for calls to the generation API.

Only classified, retryable failures are retried. Everything else, and the
last failure once the budget is spent, propagates unchanged. The wait before
attempt k (k >= 2) is base_delay_ms * 2 ** (k - 2); no jitter, no cap.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from hep_companion.llm.errors import classify

T = TypeVar("T")

MAX_RETRIES = 3
BASE_DELAY_MS = 1000

Sleep = Callable[[float], Awaitable[object]]


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = MAX_RETRIES,
    base_delay_ms: int = BASE_DELAY_MS,
    *,
    sleep: Sleep = asyncio.sleep,
) -> T:
    retries = max_retries
    delay_ms = base_delay_ms

    while True:
        try:
            return await operation()
        except Exception as exc:
            if retries <= 0 or not classify(exc).retryable:
                raise

        await sleep(delay_ms / 1000)
        retries -= 1
        delay_ms *= 2
