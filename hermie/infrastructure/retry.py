"""Store error taxonomy and tenacity-backed retry of SQLite contention.

SQLite reports writer contention as an OperationalError ("database is
locked" / "database is busy"). Those clear within milliseconds on a local
file, so they are retried a few times with jittered backoff. Anything else
(constraint violations, corrupt files, schema errors) surfaces immediately.
"""

import logging
import sqlite3
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import wraps
from typing import ParamSpec, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

CONTENTION_MARKERS = ("locked", "busy")


class StoreError(Exception):
    """Persistence failure raised by the SQLite store."""


class TransientError(StoreError):
    """Lock or busy contention; the same operation may succeed shortly."""


class PermanentError(StoreError):
    """Failure that a retry cannot fix."""


def classify_sqlite_error(error: sqlite3.Error) -> StoreError:
    """Map a sqlite3 exception onto the store error taxonomy."""
    if isinstance(error, sqlite3.OperationalError):
        message = str(error).lower()
        if any(marker in message for marker in CONTENTION_MARKERS):
            return TransientError(str(error))
    return PermanentError(str(error))


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff settings for store operations (seconds).

    Waits grow as min(initial_wait * 2^n + jitter, max_wait).
    """

    max_attempts: int = 3
    initial_wait: float = 0.05
    max_wait: float = 1.0
    jitter: float = 0.05


DEFAULT_POLICY = RetryPolicy()


def _log_retry(state: RetryCallState) -> None:
    error = state.outcome.exception() if state.outcome else None
    name = getattr(state.fn, "__name__", "operation")
    logger.warning(f"{name} hit {error!r}, retry {state.attempt_number} pending")


def with_retry(
    policy: RetryPolicy = DEFAULT_POLICY,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Retry an async store operation while it raises TransientError.

    The last TransientError is re-raised once attempts run out; other
    exceptions pass through on the first occurrence.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            retrying = AsyncRetrying(
                stop=stop_after_attempt(policy.max_attempts),
                wait=wait_exponential_jitter(
                    initial=policy.initial_wait,
                    max=policy.max_wait,
                    jitter=policy.jitter,
                ),
                retry=retry_if_exception_type(TransientError),
                before_sleep=_log_retry,
                reraise=True,
            )
            return await retrying(func, *args, **kwargs)

        return wrapper

    return decorator
