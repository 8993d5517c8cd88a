"""Interactive chat session and first-run bootstrap.

Bootstrap (fatal on failure):
1. Load the stored config; prompt for an API key if there is none.
2. Create the shell assistant once and persist its id.

Session (per-turn failures are reported, never fatal):
1. Create a thread (retried before the next turn if it failed).
2. Read a line, run a turn, print the assistant's reply; repeat until
   ``exit`` or end of input.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Protocol

import httpx

from shellchat.assistant.client import AssistantsClient, build_client
from shellchat.assistant.config import Settings
from shellchat.assistant.lifecycle import RunLifecycle
from shellchat.assistant.models import (
    Reply,
    RunOutcome,
    StoredConfig,
    TurnPhase,
    TurnResult,
)
from shellchat.assistant.prompts import get_assistant_spec
from shellchat.assistant.replies import extract_reply
from shellchat.lib.console import Palette, Terminal
from shellchat.lib.errors import ConfigError, ShellchatError
from shellchat.lib.store import load_model, save_model

logger = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"exit", "quit"})
API_KEY_QUESTION = "Enter your OpenAI API Key: "

type AskFn = Callable[[str], Awaitable[str | None]]


class LineReader(Protocol):
    async def read_line(self) -> str | None: ...


# =============================================================================
# BOOTSTRAP
# =============================================================================


def load_stored_config(path: Path) -> StoredConfig | None:
    """Return the stored config, or ``None`` if it is missing or unreadable."""
    try:
        return load_model(path, StoredConfig)
    except ConfigError as e:
        logger.debug("No usable stored config: %s", e)
        return None


async def prompt_for_api_key(path: Path, ask: AskFn) -> StoredConfig:
    """Ask for an API key and store it, keeping any stored assistant id.

    Raises:
        ConfigError: No key was entered or the file could not be written.
    """
    answer = await ask(API_KEY_QUESTION)
    api_key = (answer or "").strip()
    if not api_key:
        raise ConfigError("no API key entered")

    stored = load_stored_config(path) or StoredConfig()
    stored = stored.model_copy(update={"api_key": api_key})
    save_model(stored, path)
    return stored


async def resolve_config(settings: Settings, ask: AskFn) -> StoredConfig:
    """Return the effective credentials, environment overriding the file."""
    stored = load_stored_config(settings.config_path)
    if not settings.api_key and (stored is None or not stored.api_key):
        stored = await prompt_for_api_key(settings.config_path, ask)
    stored = stored or StoredConfig()
    return StoredConfig(
        api_key=settings.api_key or stored.api_key,
        assistant_id=settings.assistant_id or stored.assistant_id,
    )


def persist_assistant_id(path: Path, assistant_id: str) -> None:
    stored = load_stored_config(path) or StoredConfig()
    save_model(stored.model_copy(update={"assistant_id": assistant_id}), path)


async def ensure_assistant(
    client: AssistantsClient,
    settings: Settings,
    assistant_id: str | None,
) -> str:
    """Return *assistant_id*, creating and persisting an assistant if empty.

    Raises:
        ShellchatError: Creation failed or the id could not be stored.
    """
    if assistant_id:
        return assistant_id
    spec = get_assistant_spec(model=settings.model, name=settings.assistant_name)
    assistant_id = await client.create_assistant(spec)
    persist_assistant_id(settings.config_path, assistant_id)
    return assistant_id


# =============================================================================
# SESSION
# =============================================================================


class ChatSession:
    """One conversation thread driven from the terminal."""

    def __init__(
        self,
        client: AssistantsClient,
        lifecycle: RunLifecycle,
        terminal: Terminal,
    ) -> None:
        self.client = client
        self.lifecycle = lifecycle
        self.terminal = terminal
        self.thread_id: str | None = None

    async def ensure_thread(self) -> str | None:
        if self.thread_id is None:
            try:
                self.thread_id = await self.client.create_thread()
            except ShellchatError as e:
                self.terminal.display_error(f"Error {TurnPhase.CREATING_THREAD}: {e}")
        return self.thread_id

    async def handle_turn(self, text: str) -> TurnResult | None:
        """Run one turn and print its outcome; ``None`` if there is no thread."""
        thread_id = await self.ensure_thread()
        if thread_id is None:
            return None

        with self.terminal.busy():
            result = await self.lifecycle.run_turn(thread_id, text)

        match result.outcome:
            case RunOutcome.COMPLETED:
                result.reply = await self.show_reply(result)
            case RunOutcome.FAILED:
                self.terminal.display_error("Run failed.")
            case RunOutcome.ERRORED:
                self.terminal.display_error(f"Error {result.phase}: {result.error}")
        return result

    async def show_reply(self, result: TurnResult) -> Reply | None:
        try:
            messages = await self.client.get_messages(result.thread_id)
        except ShellchatError as e:
            result.phase = TurnPhase.RETRIEVING_MESSAGES
            result.error = e
            self.terminal.display_error(f"Error {TurnPhase.RETRIEVING_MESSAGES}: {e}")
            return None

        reply = extract_reply(messages)
        if not reply.found:
            logger.info("No assistant message in thread %s", result.thread_id)
        for line in reply.lines:
            self.terminal.display_reply(line)
        for error in reply.errors:
            self.terminal.display_error(f"Error in reply format: {error}")
        return reply

    async def run(self, reader: LineReader) -> None:
        """Read and answer lines until ``exit`` or end of input."""
        self.terminal.display_line("Enter your message (type 'exit' to quit)", Palette.NOTICE)
        await self.ensure_thread()
        while True:
            line = await reader.read_line()
            if line is None:
                break
            text = line.strip()
            if text.lower() in EXIT_COMMANDS:
                break
            if not text:
                continue
            await self.handle_turn(text)


@asynccontextmanager
async def open_session(
    settings: Settings,
    terminal: Terminal,
    ask: AskFn,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[ChatSession]:
    """Bootstrap credentials and assistant, then yield a ready session.

    *transport* replaces the HTTP transport (tests use httpx.MockTransport).

    Raises:
        ConfigError: Any setup step failed; the caller should exit.
    """
    config = await resolve_config(settings, ask)
    async with build_client(
        settings, config.api_key, transport=transport
    ) as client:
        try:
            assistant_id = await ensure_assistant(client, settings, config.assistant_id)
        except ConfigError:
            raise
        except ShellchatError as e:
            raise ConfigError(f"error creating assistant: {e}") from e
        lifecycle = RunLifecycle.from_settings(client, assistant_id, settings)
        yield ChatSession(client, lifecycle, terminal)
