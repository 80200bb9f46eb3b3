# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Bounded polling - fixed-interval retries with a hard attempt limit.

Used wherever the adapter has to wait on an asynchronous operation it
does not control (e.g. an index recovering from a snapshot).
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from osbackup.context import RequestContext

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-interval polling bounded by a number of attempts."""

    max_attempts: int
    interval: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.interval < 0:
            raise ValueError(f"interval must be >= 0, got {self.interval}")


@dataclass
class PollOutcome(Generic[T]):
    """Last observed value of poll_until and the attempts it took."""

    value: T
    attempts: int


def deadline_capped_wait(
    policy: RetryPolicy,
    ctx: RequestContext,
) -> Callable[[RetryCallState], float]:
    """Fixed wait between attempts, never sleeping past the context deadline."""
    fixed = wait_fixed(policy.interval)

    def wait(retry_state: RetryCallState) -> float:
        delay = fixed(retry_state)
        remaining = ctx.remaining()
        if remaining is not None:
            delay = min(delay, remaining)
        return delay

    return wait


def _last_value(retry_state: RetryCallState):
    return retry_state.outcome.result()


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    is_done: Callable[[T], bool],
    policy: RetryPolicy,
    ctx: RequestContext,
) -> PollOutcome[T]:
    """
    Call fetch until is_done accepts its value or attempts run out.

    The context deadline is checked before every attempt and bounds every
    sleep, so an expired request stops polling instead of burning the rest
    of the attempt budget. Task cancellation propagates from the sleep.

    Args:
        fetch: Coroutine factory producing the observed value
        is_done: Predicate deciding whether polling can stop
        policy: Attempt limit and interval
        ctx: Request context

    Returns:
        PollOutcome with the last observed value and the attempts used

    Raises:
        RequestCancelledError: If the context deadline expires
    """
    attempts = 0

    async def attempt() -> T:
        nonlocal attempts
        ctx.ensure_active()
        attempts += 1
        return await fetch()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=deadline_capped_wait(policy, ctx),
        retry=retry_if_result(lambda value: not is_done(value)),
        retry_error_callback=_last_value,
    )
    value = await retrying(attempt)
    return PollOutcome(value=value, attempts=attempts)
