"""Typed operations on the assistants API.

Each method maps one domain action to one HTTP call and projects the
field it needs out of the generic response. A missing or mis-typed field
raises :class:`~shellchat.lib.errors.ExtractionError`; transport failures
propagate as :class:`~shellchat.lib.errors.TransportError`.

Two exports:
- AssistantsClient: the operations, over any :class:`Transport`
- build_client(settings, api_key): AsyncContextManager[AssistantsClient]
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from shellchat.assistant.config import Settings
from shellchat.assistant.models import AssistantSpec
from shellchat.lib.json_value import JsonArray, get_list, get_str
from shellchat.lib.transport import Transport

logger = logging.getLogger(__name__)


class AssistantsClient:
    """Assistants, threads, messages and runs."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    async def create_assistant(self, spec: AssistantSpec) -> str:
        response = await self.transport.execute("POST", "/assistants", spec.to_payload())
        assistant_id = get_str(response, "id")
        logger.info("Created assistant %s (%s)", assistant_id, spec.model)
        return assistant_id

    async def create_thread(self) -> str:
        response = await self.transport.execute("POST", "/threads")
        thread_id = get_str(response, "id")
        logger.debug("Created thread %s", thread_id)
        return thread_id

    async def send_message(self, thread_id: str, text: str) -> None:
        """Post a user message; success is the absence of a transport error."""
        await self.transport.execute(
            "POST",
            f"/threads/{thread_id}/messages",
            {"role": "user", "content": text},
        )

    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        response = await self.transport.execute(
            "POST",
            f"/threads/{thread_id}/runs",
            {"assistant_id": assistant_id},
        )
        run_id = get_str(response, "id")
        logger.debug("Created run %s on thread %s", run_id, thread_id)
        return run_id

    async def get_run_status(self, thread_id: str, run_id: str) -> str:
        response = await self.transport.execute(
            "GET", f"/threads/{thread_id}/runs/{run_id}"
        )
        return get_str(response, "status")

    async def get_messages(self, thread_id: str) -> JsonArray:
        """Return the thread's messages in the order the API lists them."""
        response = await self.transport.execute("GET", f"/threads/{thread_id}/messages")
        return get_list(response, "data")


@asynccontextmanager
async def build_client(
    settings: Settings,
    api_key: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[AssistantsClient]:
    """Return an AssistantsClient configured from settings.

    The underlying HTTP connection pool is closed on exit.
    """
    async with Transport(
        api_key,
        base_url=settings.base_url,
        beta_header=settings.beta_header,
        timeout=settings.http_timeout_seconds,
        strict_status=settings.strict_status,
        transport=transport,
    ) as http:
        yield AssistantsClient(http)
