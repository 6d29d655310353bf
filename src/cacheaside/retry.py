"""Fixed-attempt, fixed-delay retry wrapper for async operations.

:class:`RetryExecutor` calls a zero-argument coroutine function until it
succeeds or the attempt budget is spent, sleeping a constant delay between
attempts. The last failure is re-raised as-is.

By default every exception is retried. Passing ``should_retry`` (for
example :func:`is_transient`) lets permanent failures such as HTTP 404 fail
on the first attempt instead.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from cacheaside.exceptions import (
    ConfigurationError,
    ConnectionError_,
    HTTPStatusError,
    ServerError,
)
from cacheaside.models import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


def is_transient(exc: BaseException) -> bool:
    """Return ``True`` if *exc* is worth retrying.

    Connection failures, 5xx responses, 408 and 429 are transient. Any other
    HTTP status error is permanent. Exceptions that did not come from the
    transport are treated as transient.
    """
    if isinstance(exc, (ConnectionError_, ServerError)):
        return True
    if isinstance(exc, HTTPStatusError):
        return exc.status_code in _RETRYABLE_CLIENT_STATUSES
    return True


class RetryExecutor:
    """Run an async operation with a bounded number of attempts.

    Args:
        max_attempts: Total attempts including the first. Must be >= 1.
        delay: Seconds to wait between attempts. Must be >= 0.
        should_retry: Optional predicate deciding whether a failure is
            retried. ``None`` retries every failure.
        sleep: Awaitable sleep function, replaceable in tests.

    Raises:
        ConfigurationError: If ``max_attempts`` or ``delay`` is out of range.

    Example::

        executor = RetryExecutor(max_attempts=3, delay=1.0)
        body = await executor.execute(lambda: transport.request("GET", url, options))
    """

    def __init__(
        self,
        max_attempts: int = 3,
        delay: float = 1.0,
        should_retry: Optional[Callable[[BaseException], bool]] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
            raise ConfigurationError(
                f"max_attempts must be a positive integer, got {max_attempts!r}"
            )
        if delay < 0:
            raise ConfigurationError(f"delay must not be negative, got {delay!r}")
        self._max_attempts = max_attempts
        self._delay = delay
        self._should_retry = should_retry
        self._sleep = sleep or asyncio.sleep

    @classmethod
    def from_policy(
        cls,
        policy: RetryPolicy,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> RetryExecutor:
        """Create an executor from a :class:`~cacheaside.models.RetryPolicy`."""
        should_retry = is_transient if policy.mode == "transient" else None
        return cls(
            max_attempts=policy.max_attempts,
            delay=policy.delay,
            should_retry=should_retry,
            sleep=sleep,
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def delay(self) -> float:
        return self._delay

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Await ``operation()`` until it succeeds or attempts run out.

        Returns:
            The result of the first successful attempt.

        Raises:
            Exception: The exception from the final attempt, or from the
                first attempt the ``should_retry`` predicate rejected.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return await operation()
            except Exception as exc:
                if attempt >= self._max_attempts:
                    logger.error(
                        "Giving up after %d attempt(s): %s", attempt, exc
                    )
                    raise
                if self._should_retry is not None and not self._should_retry(exc):
                    logger.debug("Not retrying non-transient failure: %s", exc)
                    raise
                logger.warning(
                    "Attempt %d/%d failed: %s; retrying in %ss",
                    attempt,
                    self._max_attempts,
                    exc,
                    self._delay,
                )
                await self._sleep(self._delay)
