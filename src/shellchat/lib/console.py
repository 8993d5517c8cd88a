"""Terminal output, colour formatting, and line input.

Two layers:

- **Formatting** (:func:`styled`): a pure helper turning text plus a
  :class:`Palette` entry into a Rich ``Text``, honouring a colour
  capability flag. No I/O.
- **Terminal I/O** (:class:`Terminal`, :class:`PromptReader`): the
  collaborator the session talks to. ``Terminal`` writes lines, errors
  and a busy spinner through a Rich console; ``PromptReader`` reads lines
  through prompt_toolkit with persistent history.

Examples:
    Format without colour::

        >>> styled("AI: hi", Palette.REPLY, color=False).style
        ''

    Show a spinner while waiting::

        >>> terminal = Terminal(color=True)
        >>> with terminal.busy():
        ...     await slow_call()
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import StrEnum
from pathlib import Path

from rich.console import Console
from rich.status import Status
from rich.text import Text

logger = logging.getLogger(__name__)


class Palette(StrEnum):
    """Rich style strings for each kind of output."""

    ACCENT = "color(45)"
    REPLY = "bright_white"
    ERROR = "red"
    NOTICE = "bright_black"
    SPINNER = "bright_cyan"
    PROMPT = "ansicyan bold"


def styled(text: str, style: Palette | None, *, color: bool = True) -> Text:
    """Return *text* with *style* applied when colour output is enabled."""
    if not color or style is None:
        return Text(text)
    return Text(text, style=str(style))


class Terminal:
    """Line-oriented output with an optional busy spinner.

    Args:
        color: Whether to emit colour/style codes.
        console: Console to write to (defaults to stdout, markup off).
    """

    def __init__(self, *, color: bool = True, console: Console | None = None) -> None:
        self.color = color
        self.console = console or Console(
            highlight=False, markup=False, no_color=not color
        )
        self._status: Status | None = None

    def display_line(self, text: str, style: Palette | None = None) -> None:
        self.console.print(styled(text, style, color=self.color))

    def display_reply(self, text: str) -> None:
        self.display_line(f"AI: {text}", Palette.REPLY)

    def display_error(self, text: str) -> None:
        self.display_line(text, Palette.ERROR)

    def show_busy(self, message: str = "Thinking") -> None:
        if self._status is not None:
            return
        self._status = self.console.status(
            styled(message, Palette.ACCENT, color=self.color),
            spinner="dots",
            spinner_style=str(Palette.SPINNER) if self.color else "",
        )
        self._status.start()

    def hide_busy(self) -> None:
        if self._status is None:
            return
        self._status.stop()
        self._status = None

    @contextmanager
    def busy(self, message: str = "Thinking") -> Iterator[None]:
        """Show the spinner for the duration of the block."""
        self.show_busy(message)
        try:
            yield
        finally:
            self.hide_busy()


class PromptReader:
    """Async line reader backed by a prompt_toolkit session.

    Returns ``None`` at end of input (Ctrl-D). History is persisted to
    *history_path* when given.
    """

    def __init__(
        self,
        *,
        prompt: str = "> ",
        history_path: Path | None = None,
        color: bool = True,
    ) -> None:
        from prompt_toolkit import PromptSession
        from prompt_toolkit.formatted_text import FormattedText
        from prompt_toolkit.history import FileHistory, InMemoryHistory
        from prompt_toolkit.styles import Style as PTStyle

        if history_path is not None:
            history_path.parent.mkdir(parents=True, exist_ok=True)
            history = FileHistory(str(history_path))
        else:
            history = InMemoryHistory()

        self._session: PromptSession[str] = PromptSession(
            message=FormattedText([("class:prompt", prompt)]),
            style=PTStyle.from_dict({"prompt": str(Palette.PROMPT) if color else ""}),
            history=history,
        )

    async def read_line(self) -> str | None:
        try:
            return await self._session.prompt_async()
        except EOFError:
            return None


async def ask(question: str, *, secret: bool = False) -> str | None:
    """Prompt once for a value outside any history; ``None`` at end of input."""
    from prompt_toolkit import PromptSession

    session: PromptSession[str] = PromptSession(is_password=secret)
    try:
        return await session.prompt_async(question)
    except EOFError:
        return None
