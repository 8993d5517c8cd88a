"""Library utilities for the assistant client.

This package contains reusable, **parametric** abstractions configured
through function arguments. Assistants-specific code belongs in
shellchat.assistant.

Modules:
- console: Colour formatting, terminal output, prompt_toolkit input
- errors: Error taxonomy
- json_value: JSON value type and fallible projections
- polling: Poll-until-terminal helper built on tenacity
- store: JSON-file persistence for pydantic models
- transport: JSON-over-HTTP adapter built on httpx
"""

from shellchat.lib.console import Palette, PromptReader, Terminal, ask, styled
from shellchat.lib.errors import (
    ConfigError,
    DecodeError,
    EncodeError,
    ExtractionError,
    FormatError,
    PollingTimeout,
    ReadError,
    RunFailed,
    SendError,
    ShellchatError,
    StatusError,
    TransportError,
)
from shellchat.lib.json_value import (
    JsonArray,
    JsonObject,
    JsonValue,
    get_list,
    get_str,
    kind_of,
    remote_error_message,
)
from shellchat.lib.polling import Polled, poll_until
from shellchat.lib.store import load_model, save_model
from shellchat.lib.transport import Transport

__all__ = [
    # Console
    "Palette",
    "PromptReader",
    "Terminal",
    "ask",
    "styled",
    # Errors
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "ExtractionError",
    "FormatError",
    "PollingTimeout",
    "ReadError",
    "RunFailed",
    "SendError",
    "ShellchatError",
    "StatusError",
    "TransportError",
    # JSON values
    "JsonArray",
    "JsonObject",
    "JsonValue",
    "get_list",
    "get_str",
    "kind_of",
    "remote_error_message",
    # Polling
    "Polled",
    "poll_until",
    # Store
    "load_model",
    "save_model",
    # Transport
    "Transport",
]
