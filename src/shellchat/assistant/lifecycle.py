"""Run lifecycle for a single conversation turn.

A turn posts the user's message, starts a run against the assistant and
polls the run's status until it is terminal::

    Submitting --send/create run--> Running --"completed"--> Completed
        |                             |  ^  \\--"failed"----> Failed
        |                             |  |
        |                             |  +-- any other status: wait, poll again
        +---- error ----> Errored <---+ error

Per-turn failures never raise out of :meth:`RunLifecycle.run_turn`; they
come back as a :class:`TurnResult` so the session can report them and keep
accepting input. Polling is unbounded unless a maximum attempt count or a
deadline is configured.
"""

import asyncio
import logging
import time
from typing import Self

from shellchat.assistant.client import AssistantsClient
from shellchat.assistant.config import Settings
from shellchat.assistant.models import (
    TERMINAL_STATUSES,
    RunOutcome,
    RunStatus,
    TurnPhase,
    TurnResult,
)
from shellchat.lib.errors import RunFailed, ShellchatError
from shellchat.lib.polling import ClockFn, Polled, SleepFn, poll_until

logger = logging.getLogger(__name__)


class RunLifecycle:
    """Drives message -> run -> poll for one assistant.

    Args:
        client: Resource operations to call.
        assistant_id: Assistant every run is submitted against.
        interval: Seconds between status polls.
        max_attempts: Optional cap on polls per run.
        timeout: Optional per-run deadline in seconds.
        sleep: Awaitable sleep used between polls.
        clock: Time source the deadline is measured on.
    """

    def __init__(
        self,
        client: AssistantsClient,
        assistant_id: str,
        *,
        interval: float = 1.0,
        max_attempts: int | None = None,
        timeout: float | None = None,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ) -> None:
        self.client = client
        self.assistant_id = assistant_id
        self.interval = interval
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.sleep = sleep
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        client: AssistantsClient,
        assistant_id: str,
        settings: Settings,
        *,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ) -> Self:
        return cls(
            client,
            assistant_id,
            interval=settings.poll_interval_seconds,
            max_attempts=settings.poll_max_attempts,
            timeout=settings.poll_timeout_seconds,
            sleep=sleep,
            clock=clock,
        )

    async def wait_for_run(
        self,
        thread_id: str,
        run_id: str,
        statuses: list[str] | None = None,
    ) -> Polled[str]:
        """Poll until the run is completed or failed.

        Every observed status is appended to *statuses* when given.

        Raises:
            TransportError: A status request failed.
            ExtractionError: A status response had no string ``status``.
            PollingTimeout: A configured bound was exhausted.
        """

        async def fetch() -> str:
            status = await self.client.get_run_status(thread_id, run_id)
            logger.debug("Run %s status: %s", run_id, status)
            if statuses is not None:
                statuses.append(status)
            return status

        return await poll_until(
            fetch,
            lambda status: status in TERMINAL_STATUSES,
            interval=self.interval,
            max_attempts=self.max_attempts,
            timeout=self.timeout,
            sleep=self.sleep,
            clock=self.clock,
        )

    async def run_turn(self, thread_id: str, text: str) -> TurnResult:
        """Submit *text* to the thread and wait for the assistant's run."""
        try:
            await self.client.send_message(thread_id, text)
        except ShellchatError as e:
            return self._errored(thread_id, TurnPhase.SENDING_MESSAGE, e)

        try:
            run_id = await self.client.create_run(thread_id, self.assistant_id)
        except ShellchatError as e:
            return self._errored(thread_id, TurnPhase.CREATING_RUN, e)

        statuses: list[str] = []
        try:
            polled = await self.wait_for_run(thread_id, run_id, statuses)
        except ShellchatError as e:
            return self._errored(
                thread_id, TurnPhase.GETTING_RUN_STATUS, e, run_id=run_id, statuses=statuses
            )

        if polled.value == RunStatus.COMPLETED:
            logger.info("Run %s completed after %d polls", run_id, polled.attempts)
            return TurnResult(
                outcome=RunOutcome.COMPLETED,
                thread_id=thread_id,
                run_id=run_id,
                statuses=statuses,
            )

        logger.info("Run %s failed after %d polls", run_id, polled.attempts)
        return TurnResult(
            outcome=RunOutcome.FAILED,
            thread_id=thread_id,
            run_id=run_id,
            statuses=statuses,
            error=RunFailed(run_id, polled.value),
        )

    @staticmethod
    def _errored(
        thread_id: str,
        phase: TurnPhase,
        error: ShellchatError,
        *,
        run_id: str | None = None,
        statuses: list[str] | None = None,
    ) -> TurnResult:
        logger.debug("Turn errored while %s: %s", phase, error)
        return TurnResult(
            outcome=RunOutcome.ERRORED,
            thread_id=thread_id,
            run_id=run_id,
            statuses=statuses or [],
            phase=phase,
            error=error,
        )
