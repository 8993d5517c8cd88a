"""Error taxonomy shared by the transport, resource and session layers.

Every error raised by shellchat derives from :class:`ShellchatError` so
callers can report per-turn failures with a single ``except`` clause and
keep the session alive.

Hierarchy::

    ShellchatError
    ├── TransportError          (kind: encode | send | read | decode | status)
    │   ├── EncodeError
    │   ├── SendError
    │   ├── ReadError
    │   ├── DecodeError
    │   └── StatusError         (only with strict status checking)
    ├── ExtractionError         missing or mis-typed response field
    ├── RunFailed               remote run ended in "failed"
    ├── PollingTimeout          optional polling bound exhausted
    ├── FormatError             malformed reply content part
    └── ConfigError             unreadable/unwritable local config (fatal)
"""

from typing import ClassVar


class ShellchatError(Exception):
    """Base class for all shellchat errors."""


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class TransportError(ShellchatError):
    """A single HTTP exchange could not be completed.

    ``kind`` names the stage that failed; ``cause`` keeps the underlying
    exception (also chained as ``__cause__`` when raised ``from`` it).
    """

    kind: ClassVar[str] = "transport"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        base = super().__str__()
        if self.cause is not None:
            return f"{base}: {self.cause}"
        return base


class EncodeError(TransportError):
    kind = "encode"


class SendError(TransportError):
    kind = "send"


class ReadError(TransportError):
    kind = "read"


class DecodeError(TransportError):
    kind = "decode"


class StatusError(TransportError):
    """Non-2xx response rejected because strict status checking is on."""

    kind = "status"

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Resource / lifecycle
# ---------------------------------------------------------------------------


class ExtractionError(ShellchatError):
    """A response did not carry the expected field with the expected type."""

    def __init__(
        self,
        key: str,
        expected: str,
        actual: str,
        *,
        remote_message: str | None = None,
    ) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        self.remote_message = remote_message
        message = f"expected {expected} at {key!r}, got {actual}"
        if remote_message:
            message = f"{message} (API error: {remote_message})"
        super().__init__(message)


class RunFailed(ShellchatError):
    def __init__(self, run_id: str, status: str = "failed") -> None:
        super().__init__(f"run {run_id} ended with status {status!r}")
        self.run_id = run_id
        self.status = status


class PollingTimeout(ShellchatError):
    def __init__(self, attempts: int, last_status: str | None = None) -> None:
        super().__init__(
            f"gave up after {attempts} polls (last status: {last_status or 'none'})"
        )
        self.attempts = attempts
        self.last_status = last_status


class FormatError(ShellchatError):
    """A reply content part had an unexpected shape.

    Collected by the reply extractor rather than raised.
    """

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"{location}: {reason}")
        self.location = location
        self.reason = reason


class ConfigError(ShellchatError):
    """Local configuration could not be read or written."""
