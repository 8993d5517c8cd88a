"""Command-line entry point for the shell assistant.

The CLI owns process concerns only: logging setup, colour choice, exit
codes. Setup failures (no API key, unwritable config, assistant creation
failure) exit with status 1; per-turn failures are printed and the
session continues.

Usage:
    uv run shellchat                       # interactive chat (default)
    uv run shellchat ask "list files"      # one turn, then exit
    uv run shellchat setup                 # (re)enter the API key
    uv run shellchat --verbose --no-color  # global options, before the command
    uv run python -m shellchat.environment.cli chat --verbose
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Annotated

import typer

from shellchat.assistant.config import Settings, settings
from shellchat.assistant.models import RunOutcome
from shellchat.environment.session import (
    open_session,
    persist_assistant_id,
    prompt_for_api_key,
)
from shellchat.lib.console import PromptReader, Terminal, ask
from shellchat.lib.errors import ConfigError
from shellchat.version import CLIENT_VERSION

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="shellchat",
    help="Chat with a Unix shell assistant from your terminal",
    add_completion=False,
    pretty_exceptions_show_locals=False,
)

Verbose = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose logging"),
]
NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable coloured output"),
]


@dataclass
class GlobalOptions:
    """Options given before the subcommand; they apply to every command."""

    verbose: bool = False
    no_color: bool = False


def _configure(ctx: typer.Context, verbose: bool, no_color: bool) -> Terminal:
    if isinstance(ctx.obj, GlobalOptions):
        verbose = verbose or ctx.obj.verbose
        no_color = no_color or ctx.obj.no_color
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    return Terminal(color=settings.color and not no_color)


async def _ask_secret(question: str) -> str | None:
    return await ask(question, secret=True)


async def _chat(config: Settings, terminal: Terminal) -> int:
    try:
        async with open_session(config, terminal, _ask_secret) as session:
            reader = PromptReader(
                history_path=config.history_path.expanduser(), color=terminal.color
            )
            await session.run(reader)
    except ConfigError as e:
        terminal.display_error(f"Setup failed: {e}")
        return 1
    return 0


async def _ask_once(config: Settings, terminal: Terminal, text: str) -> int:
    try:
        async with open_session(config, terminal, _ask_secret) as session:
            result = await session.handle_turn(text)
    except ConfigError as e:
        terminal.display_error(f"Setup failed: {e}")
        return 1
    if result is None or result.outcome != RunOutcome.COMPLETED:
        return 1
    if result.reply is None or result.reply.text is None:
        return 1
    return 0


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", help="Show the version and exit")
    ] = False,
    verbose: Verbose = False,
    no_color: NoColor = False,
) -> None:
    """Chat with a Unix shell assistant from your terminal."""
    if version:
        typer.echo(f"shellchat {CLIENT_VERSION}")
        raise typer.Exit()
    ctx.obj = GlobalOptions(verbose=verbose, no_color=no_color)
    if ctx.invoked_subcommand is None:
        ctx.invoke(chat, ctx=ctx)


@app.command()
def chat(
    ctx: typer.Context, verbose: Verbose = False, no_color: NoColor = False
) -> None:
    """Start an interactive chat session."""
    terminal = _configure(ctx, verbose, no_color)
    try:
        code = asyncio.run(_chat(settings, terminal))
    except KeyboardInterrupt:
        code = 130
    raise typer.Exit(code)


@app.command(name="ask")
def ask_command(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="Message to send to the assistant")],
    verbose: Verbose = False,
    no_color: NoColor = False,
) -> None:
    """Send one message on a fresh thread, print the reply and exit."""
    terminal = _configure(ctx, verbose, no_color)
    raise typer.Exit(asyncio.run(_ask_once(settings, terminal, text)))


@app.command()
def setup(
    ctx: typer.Context,
    reset_assistant: Annotated[
        bool,
        typer.Option(
            "--reset-assistant",
            help="Forget the stored assistant id so a new one is created",
        ),
    ] = False,
    verbose: Verbose = False,
    no_color: NoColor = False,
) -> None:
    """Enter and store the API key."""
    terminal = _configure(ctx, verbose, no_color)
    try:
        asyncio.run(prompt_for_api_key(settings.config_path, _ask_secret))
        if reset_assistant:
            persist_assistant_id(settings.config_path, "")
    except ConfigError as e:
        terminal.display_error(f"Error obtaining API key: {e}")
        raise typer.Exit(1) from e
    terminal.display_line(f"Saved configuration to {settings.config_path}")


if __name__ == "__main__":
    app()
