"""Shared test fixtures.

Stub classes live in tests/helpers.py.
"""

import io
from pathlib import Path

import pytest
from rich.console import Console

from shellchat.assistant.client import AssistantsClient
from shellchat.assistant.config import Settings
from shellchat.lib.console import Terminal
from shellchat.lib.transport import Transport
from tests.helpers import API_KEY, BASE_URL, FakeApi, RecordingSleep


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials and overrides out of the tests."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    for name in [
        "SHELLCHAT_ASSISTANT_ID",
        "SHELLCHAT_BASE_URL",
        "SHELLCHAT_CONFIG_PATH",
        "SHELLCHAT_POLL_MAX_ATTEMPTS",
        "SHELLCHAT_POLL_TIMEOUT",
        "SHELLCHAT_POLL_INTERVAL",
        "SHELLCHAT_STRICT_STATUS",
    ]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def transport(api: FakeApi) -> Transport:
    return Transport(API_KEY, base_url=BASE_URL, transport=api.transport())


@pytest.fixture
def client(transport: Transport) -> AssistantsClient:
    return AssistantsClient(transport)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def terminal() -> Terminal:
    """Colourless terminal writing into a buffer (read it with ``output``)."""
    console = Console(file=io.StringIO(), width=120, highlight=False, markup=False)
    return Terminal(color=False, console=console)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        base_url=BASE_URL,
        config_path=tmp_path / "cli-chat-config.json",
        history_path=tmp_path / "history",
        poll_interval_seconds=0.0,
    )
