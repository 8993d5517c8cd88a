"""JSON-over-HTTP transport for the assistants API.

One :meth:`Transport.execute` call is exactly one HTTP exchange: no
retries, no caching. Every request carries the bearer credential, a JSON
content type and the beta-protocol header. The decoded body is returned
as a :data:`~shellchat.lib.json_value.JsonObject` whatever the HTTP status,
unless ``strict_status`` is enabled.

Each failing stage raises its own :class:`~shellchat.lib.errors.TransportError`
subclass (encode, send, read, decode) chained to the underlying exception.

Examples:
    Talk to the live API::

        >>> async with Transport(api_key="sk-...") as transport:
        ...     thread = await transport.execute("POST", "/threads")
        >>> thread["id"]
        'thread_abc123'

    Use a fake server in tests::

        >>> def handler(request: httpx.Request) -> httpx.Response:
        ...     return httpx.Response(200, json={"id": "abc123"})
        >>> transport = Transport(api_key="test", transport=httpx.MockTransport(handler))
"""

import json
import logging
from types import TracebackType
from typing import Self

import httpx

from shellchat.lib.errors import (
    DecodeError,
    EncodeError,
    ReadError,
    SendError,
    StatusError,
)
from shellchat.lib.json_value import JsonObject, JsonValue, kind_of, remote_error_message
from shellchat.version import CLIENT_VERSION

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_BETA_HEADER = "assistants=v2"


class Transport:
    """Async HTTP adapter bound to a base URL and a static credential.

    Args:
        api_key: Bearer credential sent on every request.
        base_url: Prefix for all relative request paths.
        beta_header: Value of the ``OpenAI-Beta`` protocol header.
        timeout: Per-request timeout in seconds (None disables it).
        strict_status: Reject responses with status >= 400 with
            :class:`StatusError` instead of returning their body.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        beta_header: str = DEFAULT_BETA_HEADER,
        timeout: float | None = 60.0,
        strict_status: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.strict_status = strict_status
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "OpenAI-Beta": beta_header,
                "User-Agent": f"shellchat/{CLIENT_VERSION}",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def execute(
        self,
        method: str,
        path: str,
        payload: JsonValue | None = None,
    ) -> JsonObject:
        """Send one request and return the decoded JSON object body.

        Raises:
            EncodeError: The payload could not be serialized or the request
                could not be built.
            SendError: The request could not be transmitted.
            ReadError: The response body could not be read.
            DecodeError: The body is not a JSON object.
            StatusError: Only with ``strict_status``, on status >= 400.
        """
        try:
            content = json.dumps(payload).encode() if payload is not None else None
            request = self._client.build_request(method, path, content=content)
        except (TypeError, ValueError, httpx.InvalidURL) as e:
            raise EncodeError(f"error encoding {method} {path} request", e) from e

        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as e:
            raise SendError(f"error making {method} {path} request", e) from e

        try:
            body = await response.aread()
        except (httpx.TransportError, httpx.StreamError) as e:
            raise ReadError(f"error reading {method} {path} response body", e) from e
        finally:
            await response.aclose()

        logger.debug("%s %s -> %d (%d bytes)", method, path, response.status_code, len(body))

        if self.strict_status and response.status_code >= 400:
            raise StatusError(response.status_code, self._status_message(response, body))

        return self._decode(body, method, path)

    @staticmethod
    def _decode(body: bytes, method: str, path: str) -> JsonObject:
        try:
            result: JsonValue = json.loads(body)
        except ValueError as e:
            raise DecodeError(f"error decoding {method} {path} response", e) from e
        if not isinstance(result, dict):
            raise DecodeError(
                f"error decoding {method} {path} response: "
                f"expected object, got {kind_of(result)}"
            )
        return result

    @staticmethod
    def _status_message(response: httpx.Response, body: bytes) -> str:
        try:
            decoded = json.loads(body)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict) and (message := remote_error_message(decoded)):
            return message
        return response.reason_phrase or "request failed"
