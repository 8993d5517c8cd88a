"""JSON value type and fallible projections.

Every remote call returns a :data:`JsonObject`: a mapping from string keys
to arbitrarily nested JSON values. Typed data is pulled out of it with the
``get_*`` projections below, which raise :class:`ExtractionError` on a
missing key *or* a present-but-wrong-typed value, never ``KeyError`` or
``TypeError``.

Examples:
    Project a string field::

        >>> get_str({"id": "abc123"}, "id")
        'abc123'

    Wrong type is treated like absence::

        >>> get_str({"id": 42}, "id")
        Traceback (most recent call last):
        ...
        shellchat.lib.errors.ExtractionError: expected string at 'id', got number

    Classify any value::

        >>> kind_of([1, 2])
        'list'
"""

from shellchat.lib.errors import ExtractionError

type JsonValue = (
    str | int | float | bool | None | list[JsonValue] | dict[str, JsonValue]
)
type JsonObject = dict[str, JsonValue]
type JsonArray = list[JsonValue]

MISSING = "missing"


def kind_of(value: JsonValue) -> str:
    """Return the JSON kind name of *value*."""
    match value:
        case None:
            return "null"
        case bool():
            return "bool"
        case int() | float():
            return "number"
        case str():
            return "string"
        case list():
            return "list"
        case dict():
            return "object"
        case _:
            return type(value).__name__


def remote_error_message(obj: JsonObject) -> str | None:
    """Return ``error.message`` from an API error body, if there is one."""
    match obj.get("error"):
        case {"message": str(message)}:
            return message
        case str(message):
            return message
        case _:
            return None


def _fail(obj: JsonObject, key: str, expected: str) -> ExtractionError:
    actual = kind_of(obj[key]) if key in obj else MISSING
    return ExtractionError(
        key, expected, actual, remote_message=remote_error_message(obj)
    )


def get_str(obj: JsonObject, key: str) -> str:
    match obj.get(key):
        case str(value):
            return value
        case _:
            raise _fail(obj, key, "string")


def get_list(obj: JsonObject, key: str) -> JsonArray:
    match obj.get(key):
        case list(value):
            return value
        case _:
            raise _fail(obj, key, "list")

