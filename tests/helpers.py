"""Shared test helpers and stub classes.

``FakeApi`` is a scripted stand-in for the assistants API, served through
``httpx.MockTransport`` so the real transport code runs end to end.
"""

import io
import re
from collections.abc import Callable

import httpx

from shellchat.lib.console import Terminal
from shellchat.lib.json_value import JsonArray, JsonObject

BASE_URL = "https://api.test/v1"
API_KEY = "sk-test"

_ROUTES: list[tuple[str, re.Pattern[str], str]] = [
    ("POST", re.compile(r"^/assistants$"), "create_assistant"),
    ("POST", re.compile(r"^/threads$"), "create_thread"),
    ("POST", re.compile(r"^/threads/[^/]+/messages$"), "send_message"),
    ("GET", re.compile(r"^/threads/[^/]+/messages$"), "list_messages"),
    ("POST", re.compile(r"^/threads/[^/]+/runs$"), "create_run"),
    ("GET", re.compile(r"^/threads/[^/]+/runs/[^/]+$"), "get_run"),
]

type Override = httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]


class FakeApi:
    """Scripted assistants API.

    ``statuses`` are handed out one per run-status request; the last one
    repeats once the script is exhausted. ``overrides`` replace the normal
    answer of a route with a response, a raised exception or a callable.
    """

    def __init__(
        self,
        *,
        statuses: list[str] | None = None,
        messages: JsonArray | None = None,
    ) -> None:
        self.statuses = list(statuses or ["completed"])
        self.messages: JsonArray = messages if messages is not None else []
        self.overrides: dict[str, Override] = {}
        self.requests: list[httpx.Request] = []
        self.routes: list[str] = []

    def route_of(self, request: httpx.Request) -> str:
        path = request.url.path.removeprefix("/v1")
        for method, pattern, name in _ROUTES:
            if request.method == method and pattern.match(path):
                return name
        raise AssertionError(f"unexpected request {request.method} {path}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        name = self.route_of(request)
        self.requests.append(request)
        self.routes.append(name)

        match self.overrides.get(name):
            case httpx.Response() as response:
                return response
            case Exception() as error:
                raise error
            case None:
                pass
            case handler:
                return handler(request)

        return httpx.Response(200, json=self._default(name))

    def _default(self, name: str) -> JsonObject:
        match name:
            case "create_assistant":
                return {"id": "asst_1", "object": "assistant"}
            case "create_thread":
                return {"id": "thread_1", "object": "thread"}
            case "send_message":
                return {"id": "msg_user", "object": "thread.message", "role": "user"}
            case "create_run":
                return {"id": "run_1", "object": "thread.run", "status": "queued"}
            case "get_run":
                status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
                return {"id": "run_1", "object": "thread.run", "status": status}
            case "list_messages":
                return {"object": "list", "data": self.messages}
        raise AssertionError(name)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeClock:
    """Monotonic clock stand-in; only RecordingSleep moves it."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingSleep:
    """Async sleep stand-in that records requested delays and returns at once.

    When given a clock, each sleep advances it by the requested delay.
    """

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.calls: list[float] = []
        self.clock = clock

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.clock is not None:
            self.clock.now += seconds


def assistant_message(*texts: str, message_id: str = "msg_ai") -> JsonObject:
    return {
        "id": message_id,
        "role": "assistant",
        "content": [
            {"type": "text", "text": {"value": text, "annotations": []}}
            for text in texts
        ],
    }


def user_message(text: str, message_id: str = "msg_user") -> JsonObject:
    return {
        "id": message_id,
        "role": "user",
        "content": [{"type": "text", "text": {"value": text, "annotations": []}}],
    }


def output(terminal: Terminal) -> str:
    """Everything a buffered test terminal has printed."""
    file = terminal.console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()
