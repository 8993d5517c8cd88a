"""Poll an async operation until it reports a terminal value.

Built on tenacity's result-based retrying: the fetch is repeated with a
fixed wait for as long as ``is_terminal`` rejects its result. Exceptions
raised by the fetch are never retried; they propagate on the first
occurrence.

Polling is unbounded unless ``max_attempts`` or ``timeout`` is given, in
which case exhausting the bound raises :class:`PollingTimeout`. The deadline
is measured on an injectable clock and the sleep is injectable too, so tests
can run without waiting: a fake sleep that advances a fake clock makes the
deadline behave exactly as it would in real time.

Examples:
    Wait for a job to finish, checking once per second::

        >>> polled = await poll_until(
        ...     lambda: fetch_status(job_id),
        ...     lambda status: status in {"done", "error"},
        ...     interval=1.0,
        ... )
        >>> polled.value, polled.attempts
        ('done', 3)

    Give up after ten checks::

        >>> await poll_until(fetch, is_done, max_attempts=10)
        Traceback (most recent call last):
        ...
        shellchat.lib.errors.PollingTimeout: gave up after 10 polls (last status: queued)
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import NamedTuple

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    before_sleep_log,
    retry_if_result,
    stop_after_attempt,
    stop_never,
    wait_fixed,
)
from tenacity.stop import stop_base

from shellchat.lib.errors import PollingTimeout

logger = logging.getLogger(__name__)

type SleepFn = Callable[[float], Awaitable[None]]
type ClockFn = Callable[[], float]


class Polled[T](NamedTuple):
    """Terminal value and how many fetches it took to observe it."""

    value: T
    attempts: int


class stop_at_deadline(stop_base):
    """Stop when the next fetch would not start before the deadline.

    Time is read from *clock*, so a fake clock advanced by a fake sleep
    gives the same result as real waiting. The wait before the next fetch
    (``upcoming_sleep``) counts towards the deadline.
    """

    def __init__(self, timeout: float, clock: ClockFn = time.monotonic) -> None:
        self.timeout = timeout
        self.clock = clock
        self.start = clock()

    def __call__(self, retry_state: RetryCallState) -> bool:
        elapsed = self.clock() - self.start
        return elapsed + retry_state.upcoming_sleep >= self.timeout


def build_stop(
    max_attempts: int | None = None,
    timeout: float | None = None,
    clock: ClockFn = time.monotonic,
) -> stop_base:
    """Combine the optional bounds into a tenacity stop condition.

    The deadline starts counting when this is called.
    """
    stop: stop_base = stop_never
    if max_attempts is not None:
        stop = stop | stop_after_attempt(max_attempts)
    if timeout is not None:
        stop = stop | stop_at_deadline(timeout, clock)
    return stop


async def poll_until[T](
    fetch: Callable[[], Awaitable[T]],
    is_terminal: Callable[[T], bool],
    *,
    interval: float = 1.0,
    max_attempts: int | None = None,
    timeout: float | None = None,
    sleep: SleepFn = asyncio.sleep,
    clock: ClockFn = time.monotonic,
) -> Polled[T]:
    """Call ``fetch`` until ``is_terminal(result)`` holds.

    Args:
        fetch: Zero-argument coroutine function returning the current value.
        is_terminal: Predicate deciding when to stop.
        interval: Seconds to wait between fetches.
        max_attempts: Optional cap on the number of fetches.
        timeout: Optional deadline in seconds since the first fetch. No
            fetch is started at or after the deadline.
        sleep: Awaitable sleep used between fetches.
        clock: Monotonic time source the deadline is measured on.

    Raises:
        PollingTimeout: A bound was exhausted before a terminal value.
        Exception: Anything ``fetch`` raises, unchanged.
    """
    attempts = 0

    async def attempt() -> T:
        nonlocal attempts
        attempts += 1
        return await fetch()

    retryer = AsyncRetrying(
        stop=build_stop(max_attempts, timeout, clock),
        wait=wait_fixed(interval),
        retry=retry_if_result(lambda value: not is_terminal(value)),
        sleep=sleep,
        before_sleep=before_sleep_log(logger, logging.DEBUG),
        reraise=True,
    )
    try:
        value = await retryer(attempt)
    except RetryError as e:
        last = e.last_attempt.result()
        raise PollingTimeout(attempts, None if last is None else str(last)) from e
    return Polled(value, attempts)
