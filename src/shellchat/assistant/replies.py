"""Pull display text out of a thread's message list.

The API lists messages newest first, so the first assistant-authored
message in the list is the reply to the latest run. Only that message is
read; later assistant messages are older turns.

Malformed entries never abort extraction. Each offending message or
content part is recorded as a :class:`FormatError` on the returned
:class:`Reply` and skipped. Content parts of other kinds (images, file
references) are ignored silently.
"""

import logging

from shellchat.assistant.models import Reply
from shellchat.lib.errors import FormatError
from shellchat.lib.json_value import JsonArray, JsonValue, kind_of

logger = logging.getLogger(__name__)


def _text_of(part: JsonValue, location: str) -> str | FormatError | None:
    match part:
        case {"type": str(kind)} if kind != "text":
            return None
        case {"text": {"value": str(value)}}:
            return value
        case dict():
            return FormatError(location, "text part has no string text.value")
        case _:
            return FormatError(location, f"expected object, got {kind_of(part)}")


def extract_reply(messages: JsonArray) -> Reply:
    """Return the text parts of the first assistant message in *messages*."""
    reply = Reply()

    for index, message in enumerate(messages):
        location = f"message {index}"
        if not isinstance(message, dict):
            reply.errors.append(
                FormatError(location, f"expected object, got {kind_of(message)}")
            )
            continue
        if message.get("role") != "assistant":
            continue

        content = message.get("content")
        if not isinstance(content, list):
            reply.errors.append(
                FormatError(location, f"content: expected list, got {kind_of(content)}")
            )
            continue

        reply.found = True
        for part_index, part in enumerate(content):
            match _text_of(part, f"{location} part {part_index}"):
                case str(value):
                    reply.lines.append(value)
                case FormatError() as error:
                    reply.errors.append(error)
        break

    for error in reply.errors:
        logger.debug("Skipped malformed reply content: %s", error)
    return reply
