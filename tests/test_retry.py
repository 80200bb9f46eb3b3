# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Bounded polling tests.
"""

import asyncio

import pytest

from osbackup.context import RequestContext, new_request_context
from osbackup.exceptions import RequestCancelledError
from osbackup.retry import RetryPolicy, deadline_capped_wait, poll_until


class Counter:
    """Fetch callable returning 1, 2, 3, ..."""

    def __init__(self):
        self.calls = 0

    async def __call__(self) -> int:
        self.calls += 1
        return self.calls


@pytest.mark.asyncio
async def test_poll_stops_when_done(ctx):
    fetch = Counter()

    outcome = await poll_until(fetch, lambda v: v >= 3, RetryPolicy(max_attempts=10, interval=0), ctx)

    assert outcome.value == 3
    assert outcome.attempts == 3
    assert fetch.calls == 3


@pytest.mark.asyncio
async def test_poll_gives_up_after_max_attempts(ctx):
    fetch = Counter()

    outcome = await poll_until(fetch, lambda v: False, RetryPolicy(max_attempts=5, interval=0), ctx)

    assert outcome.attempts == 5
    assert outcome.value == 5
    assert fetch.calls == 5


@pytest.mark.asyncio
async def test_poll_does_not_sleep_after_last_attempt(ctx):
    """A single-attempt budget returns at once despite a long interval."""
    fetch = Counter()

    outcome = await asyncio.wait_for(
        poll_until(fetch, lambda v: False, RetryPolicy(max_attempts=1, interval=30), ctx),
        timeout=5,
    )

    assert outcome.attempts == 1
    assert fetch.calls == 1


def test_wait_uses_fixed_interval_without_deadline(ctx):
    wait = deadline_capped_wait(RetryPolicy(max_attempts=3, interval=2.5), ctx)

    assert wait(None) == 2.5


@pytest.mark.asyncio
async def test_wait_is_capped_by_remaining_deadline():
    ctx = new_request_context("capped", timeout=0.5)
    wait = deadline_capped_wait(RetryPolicy(max_attempts=3, interval=30), ctx)

    assert 0 <= wait(None) <= 0.5


@pytest.mark.asyncio
async def test_poll_expired_deadline_stops_before_fetch():
    fetch = Counter()
    loop = asyncio.get_running_loop()
    ctx = new_request_context("expired")
    ctx = RequestContext(ctx.request_id, ctx.logger, deadline=loop.time() - 1)

    with pytest.raises(RequestCancelledError):
        await poll_until(fetch, lambda v: False, RetryPolicy(max_attempts=10, interval=0), ctx)

    assert fetch.calls == 0


@pytest.mark.asyncio
async def test_poll_deadline_interrupts_long_interval():
    """A deadline shorter than the interval ends polling early."""
    fetch = Counter()
    ctx = new_request_context("short", timeout=0.05)

    with pytest.raises(RequestCancelledError):
        await poll_until(fetch, lambda v: False, RetryPolicy(max_attempts=100, interval=10), ctx)

    assert fetch.calls < 5


@pytest.mark.parametrize(
    "attempts, interval",
    [(0, 1.0), (-1, 1.0), (1, -0.5)],
)
def test_retry_policy_rejects_invalid_values(attempts, interval):
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=attempts, interval=interval)
