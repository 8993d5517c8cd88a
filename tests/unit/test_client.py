"""Tests for the assistants resource operations."""

import json

import httpx
import pytest

from shellchat.assistant.client import AssistantsClient
from shellchat.assistant.models import AssistantSpec
from shellchat.lib.errors import ExtractionError, SendError
from tests.helpers import FakeApi, assistant_message


class TestOperations:
    """Each operation issues one request and projects one field."""

    @pytest.mark.asyncio
    async def test_create_assistant(self, api: FakeApi, client: AssistantsClient) -> None:
        spec = AssistantSpec(model="gpt-test", name="Shell Assistant", instructions="Help.")

        assert await client.create_assistant(spec) == "asst_1"

        assert api.routes == ["create_assistant"]
        assert json.loads(api.requests[0].content) == {
            "model": "gpt-test",
            "name": "Shell Assistant",
            "instructions": "Help.",
            "tools": [{"type": "code_interpreter"}],
        }

    @pytest.mark.asyncio
    async def test_create_thread_round_trip(
        self, api: FakeApi, client: AssistantsClient
    ) -> None:
        """A serialized {"id": "abc123"} body decodes back to its id."""
        api.overrides["create_thread"] = httpx.Response(
            200, content=json.dumps({"id": "abc123"}).encode()
        )

        assert await client.create_thread() == "abc123"

    @pytest.mark.asyncio
    async def test_send_message(self, api: FakeApi, client: AssistantsClient) -> None:
        result = await client.send_message("thread_1", "list files")

        assert result is None
        request = api.requests[0]
        assert request.url.path == "/v1/threads/thread_1/messages"
        assert json.loads(request.content) == {"role": "user", "content": "list files"}

    @pytest.mark.asyncio
    async def test_send_message_ignores_response_shape(
        self, api: FakeApi, client: AssistantsClient
    ) -> None:
        """Only transport failures count for sending a message."""
        api.overrides["send_message"] = httpx.Response(200, json={"unexpected": 1})

        await client.send_message("thread_1", "hello")

    @pytest.mark.asyncio
    async def test_create_run(self, api: FakeApi, client: AssistantsClient) -> None:
        assert await client.create_run("thread_1", "asst_1") == "run_1"

        request = api.requests[0]
        assert request.url.path == "/v1/threads/thread_1/runs"
        assert json.loads(request.content) == {"assistant_id": "asst_1"}

    @pytest.mark.asyncio
    async def test_get_run_status(self, api: FakeApi, client: AssistantsClient) -> None:
        api.statuses = ["in_progress"]

        assert await client.get_run_status("thread_1", "run_1") == "in_progress"
        assert api.requests[0].method == "GET"
        assert api.requests[0].url.path == "/v1/threads/thread_1/runs/run_1"

    @pytest.mark.asyncio
    async def test_get_messages(self, api: FakeApi, client: AssistantsClient) -> None:
        api.messages = [assistant_message("hi")]

        messages = await client.get_messages("thread_1")

        assert messages == [assistant_message("hi")]
        assert api.requests[0].method == "GET"

    @pytest.mark.asyncio
    async def test_transport_error_propagates(
        self, api: FakeApi, client: AssistantsClient
    ) -> None:
        api.overrides["create_thread"] = httpx.ConnectError("offline")

        with pytest.raises(SendError):
            await client.create_thread()


class TestExtraction:
    """Missing and mis-typed fields are ExtractionError, never a crash."""

    @pytest.mark.parametrize(
        "body",
        [{}, {"id": None}, {"id": 7}, {"id": ["abc"]}, {"id": {"value": "abc"}}],
    )
    @pytest.mark.asyncio
    async def test_create_thread(
        self, api: FakeApi, client: AssistantsClient, body: dict[str, object]
    ) -> None:
        api.overrides["create_thread"] = httpx.Response(200, json=body)

        with pytest.raises(ExtractionError):
            await client.create_thread()

    @pytest.mark.parametrize("body", [{}, {"id": 1}])
    @pytest.mark.asyncio
    async def test_create_assistant(
        self, api: FakeApi, client: AssistantsClient, body: dict[str, object]
    ) -> None:
        api.overrides["create_assistant"] = httpx.Response(200, json=body)
        spec = AssistantSpec(model="m", name="n", instructions="i")

        with pytest.raises(ExtractionError):
            await client.create_assistant(spec)

    @pytest.mark.parametrize("body", [{}, {"id": False}])
    @pytest.mark.asyncio
    async def test_create_run(
        self, api: FakeApi, client: AssistantsClient, body: dict[str, object]
    ) -> None:
        api.overrides["create_run"] = httpx.Response(200, json=body)

        with pytest.raises(ExtractionError):
            await client.create_run("thread_1", "asst_1")

    @pytest.mark.parametrize("body", [{}, {"status": 3}, {"status": None}])
    @pytest.mark.asyncio
    async def test_get_run_status(
        self, api: FakeApi, client: AssistantsClient, body: dict[str, object]
    ) -> None:
        api.overrides["get_run"] = httpx.Response(200, json=body)

        with pytest.raises(ExtractionError):
            await client.get_run_status("thread_1", "run_1")

    @pytest.mark.parametrize("body", [{}, {"data": "nope"}, {"data": {"a": 1}}])
    @pytest.mark.asyncio
    async def test_get_messages(
        self, api: FakeApi, client: AssistantsClient, body: dict[str, object]
    ) -> None:
        api.overrides["list_messages"] = httpx.Response(200, json=body)

        with pytest.raises(ExtractionError):
            await client.get_messages("thread_1")

    @pytest.mark.asyncio
    async def test_error_body_reported(
        self, api: FakeApi, client: AssistantsClient
    ) -> None:
        """Without strict status checking, an API error surfaces here."""
        api.overrides["create_run"] = httpx.Response(
            404, json={"error": {"message": "No assistant found with id 'asst_x'."}}
        )

        with pytest.raises(ExtractionError, match="No assistant found"):
            await client.create_run("thread_1", "asst_x")
