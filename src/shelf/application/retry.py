"""Caller-side retry for optimistic-concurrency conflicts.

The domain never retries a ConcurrencyConflictError on its own; a caller
that wants retries wraps the whole use case (re-read included) here.
"""

from __future__ import annotations

import time
from typing import Callable, TypeVar

import structlog

from shelf.domain.exceptions import ConcurrencyConflictError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def retry_on_conflict(
    func: Callable[[], T],
    *,
    attempts: int = 3,
    backoff_base: float = 0.05,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call *func*, re-calling it after a conflict with exponential backoff.

    The last ConcurrencyConflictError is re-raised once *attempts* calls
    have failed.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    for attempt in range(attempts):
        try:
            return func()
        except ConcurrencyConflictError as exc:
            if attempt >= attempts - 1:
                raise
            delay = backoff_base * (2 ** attempt)
            logger.info("conflict.retry", attempt=attempt + 1, delay=delay, reason=str(exc))
            sleep(delay)
    raise AssertionError("unreachable")
