"""Retry-with-backoff policy for GitHub REST calls.

The policy is a plain value object; :func:`retry_async` drives an explicit
attempt loop around a coroutine factory. Operations signal retryable failures
by raising :class:`TransientFailure`, which carries the error to surface once
the budget is spent and an optional server-supplied wait hint.

Usage
-----
>>> policy = RetryPolicy(max_attempts=3, base_delay_s=0.5, max_delay_s=4.0)
>>> [policy.backoff(attempt) for attempt in range(4)]
[0.5, 1.0, 2.0, 4.0]
>>> policy.delay_for(0, wait_hint_s=3.0)
3.0
>>> policy.delay_for(0, wait_hint_s=60.0) is None
True

"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses
import typing as typ

Sleep = cabc.Callable[[float], cabc.Awaitable[None]]
RetryCallback = cabc.Callable[[int, float, Exception], None]

T = typ.TypeVar("T")

_DEFAULT_MAX_ATTEMPTS = 4
_DEFAULT_BASE_DELAY_S = 1.0
_DEFAULT_MAX_DELAY_S = 30.0


class TransientFailure(Exception):  # noqa: N818 - control-flow signal, not an error
    """Signal a retryable failure to :func:`retry_async`.

    Attributes
    ----------
    error
        Exception surfaced when the retry budget is exhausted.
    wait_hint_s
        Minimum wait advertised by the server, if any.
    give_up
        Exception surfaced immediately when ``wait_hint_s`` exceeds the
        policy's delay cap. Defaults to ``error``.

    """

    def __init__(
        self,
        error: Exception,
        *,
        wait_hint_s: float | None = None,
        give_up: Exception | None = None,
    ) -> None:
        """Wrap ``error`` with retry metadata."""
        self.error = error
        self.wait_hint_s = wait_hint_s
        self.give_up = give_up if give_up is not None else error
        super().__init__(str(error))


@dataclasses.dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Exponential backoff configuration.

    Attributes
    ----------
    max_attempts
        Total attempts, including the first one.
    base_delay_s
        Delay after the first failed attempt; doubles on each retry.
    max_delay_s
        Upper bound for any single delay. Server hints above this bound end
        the retry loop instead of stalling the request.

    """

    max_attempts: int = _DEFAULT_MAX_ATTEMPTS
    base_delay_s: float = _DEFAULT_BASE_DELAY_S
    max_delay_s: float = _DEFAULT_MAX_DELAY_S

    def __post_init__(self) -> None:
        """Reject policies that could never make an attempt or never stop."""
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.base_delay_s < 0 or self.max_delay_s < self.base_delay_s:
            msg = (
                "delays must satisfy 0 <= base_delay_s <= max_delay_s, got "
                f"{self.base_delay_s} and {self.max_delay_s}"
            )
            raise ValueError(msg)

    def backoff(self, attempt: int) -> float:
        """Return the capped exponential delay after failed ``attempt`` (0-based)."""
        return min(self.base_delay_s * (2**attempt), self.max_delay_s)

    def delay_for(
        self, attempt: int, *, wait_hint_s: float | None = None
    ) -> float | None:
        """Return the delay before the next attempt.

        Returns ``None`` when the server asks for a longer wait than
        ``max_delay_s`` allows.
        """
        delay = self.backoff(attempt)
        if wait_hint_s is None:
            return delay
        if wait_hint_s > self.max_delay_s:
            return None
        return max(delay, wait_hint_s)


async def retry_async(
    operation: cabc.Callable[[], cabc.Awaitable[T]],
    *,
    policy: RetryPolicy,
    sleep: Sleep = asyncio.sleep,
    on_retry: RetryCallback | None = None,
) -> T:
    """Run ``operation`` until it succeeds or the retry budget is spent.

    Parameters
    ----------
    operation
        Zero-argument coroutine factory invoked once per attempt.
    policy
        Backoff configuration.
    sleep
        Coroutine used to wait between attempts; tests inject a recorder.
    on_retry
        Optional callback receiving ``(attempt, delay_s, error)`` before each
        wait.

    Returns
    -------
    T
        The first successful result.

    Raises
    ------
    Exception
        ``TransientFailure.error`` once attempts are exhausted, or
        ``TransientFailure.give_up`` when a wait hint exceeds the cap. Any
        other exception propagates on the first occurrence.

    """
    attempt = 0
    while True:
        try:
            return await operation()
        except TransientFailure as failure:
            if attempt + 1 >= policy.max_attempts:
                raise failure.error from failure
            delay = policy.delay_for(attempt, wait_hint_s=failure.wait_hint_s)
            if delay is None:
                raise failure.give_up from failure
            if on_retry is not None:
                on_retry(attempt, delay, failure.error)
            await sleep(delay)
            attempt += 1
