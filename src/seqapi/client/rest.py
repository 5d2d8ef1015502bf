"""
HTTP transport for the Seq API.

Wraps a single ``httpx.AsyncClient`` so every request shares one connection
pool and one cookie jar (the server may use cookies for session affinity).
Non-success responses are translated into ``SeqApiError``; network failures
into ``SeqConnectionError``.

Usage:
    transport = HttpTransport("https://seq.example.com", api_key="...")
    response = await transport.send("GET", "api")
    await transport.aclose()
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable

import httpx
from pydantic import ValidationError

from seqapi.errors import SeqApiError, SeqConnectionError
from seqapi.serialization import decode, serialize

logger = logging.getLogger(__name__)

# Future versions of Seq may not support every v6 feature; declaring the
# version lets the server serve whatever compatibility it has.
SEQ_API_V6_MEDIA_TYPE = "application/vnd.datalust.seq.v6+json"

API_KEY_HEADER = "X-Seq-ApiKey"

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

_NO_CONTENT = object()


def error_from_response(status_code: int, body: bytes) -> SeqApiError:
    """
    Build the error for a failed response.

    Uses the server's ``Error`` message when the body is a JSON object that
    carries one; anything else gets a generic message with the status code.
    """
    payload: dict[str, Any] | None = None
    try:
        payload = decode(body, dict[str, Any])
    except ValidationError:
        pass

    if payload is not None and payload.get("Error") is not None:
        return SeqApiError(f"{status_code} - {payload['Error']}", status_code)

    return SeqApiError(f"The Seq request failed ({status_code}).", status_code)


class HttpTransport:
    """
    Sends requests to the server with authentication and content negotiation.

    Safe for concurrent use by multiple tasks; httpx serializes access to the
    pool and the cookie jar.
    """

    def __init__(
        self,
        server_url: str,
        api_key: str | None = None,
        use_default_credentials: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        base_url = server_url if server_url.endswith("/") else server_url + "/"

        self.api_key = api_key or None
        self._client = httpx.AsyncClient(
            base_url=base_url,
            cookies=httpx.Cookies(),
            follow_redirects=True,
            trust_env=use_default_credentials,
            transport=transport,
        )
        self._bodies: set[ResponseStream] = set()

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    @property
    def base_url(self) -> httpx.URL:
        return self._client.base_url

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def absolute_url(self, uri: str) -> httpx.URL:
        """Resolve a (possibly relative) link URI against the base address."""
        return self._client.build_request("GET", uri).url

    def cookie_header(self, uri: str) -> str | None:
        """Return the ``Cookie`` header the jar would send to ``uri``, if any."""
        request = httpx.Request("GET", self.absolute_url(uri))
        self._client.cookies.set_cookie_header(request)
        return request.headers.get("Cookie")

    def _headers(self, has_content: bool) -> dict[str, str]:
        headers = {"Accept": SEQ_API_V6_MEDIA_TYPE}
        if self.api_key is not None:
            headers[API_KEY_HEADER] = self.api_key
        if has_content:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return headers

    async def send(
        self,
        method: str,
        uri: str,
        content: Any = _NO_CONTENT,
        stream: bool = False,
    ) -> httpx.Response:
        """
        Send a request and return the successful response.

        Args:
            method: HTTP method
            uri: Absolute URI, or a URI relative to the server base address
            content: Optional body, serialized as JSON (``None`` is sent as
                ``null``; omit the argument to send no body)
            stream: Leave the response body unread; the caller must
                ``aclose()`` the response

        Raises:
            SeqApiError: If the server returns a non-success status
            SeqConnectionError: If the request could not be delivered
        """
        has_content = content is not _NO_CONTENT
        request = self._client.build_request(
            method,
            uri,
            headers=self._headers(has_content),
            content=serialize(content) if has_content else None,
        )

        logger.debug(f"{method} {request.url}")
        try:
            response = await self._client.send(request, stream=stream)
        except httpx.TransportError as e:
            raise SeqConnectionError(
                f"The Seq request to {request.url} could not be completed: {e}"
            ) from e

        logger.debug(f"{method} {request.url} -> {response.status_code}")
        if response.is_success:
            return response

        try:
            body = await response.aread()
        except httpx.TransportError as e:
            raise SeqConnectionError(
                f"The Seq response from {request.url} could not be read: {e}"
            ) from e
        finally:
            await response.aclose()
        raise error_from_response(response.status_code, body)

    async def send_streaming(
        self,
        method: str,
        uri: str,
        content: Any = _NO_CONTENT,
    ) -> ResponseStream:
        """
        Send a request and return its body unread, as a ``ResponseStream``.

        The stream holds a pooled connection until it is exhausted or closed;
        closing the transport closes any stream still open.
        """
        response = await self.send(method, uri, content, stream=True)
        body = ResponseStream(response, on_closed=self._bodies.discard)
        self._bodies.add(body)
        return body

    async def aclose(self) -> None:
        for body in list(self._bodies):
            await body.aclose()
        await self._client.aclose()


class ResponseStream:
    """
    Response body read chunk by chunk.

    Iterate it once. The response is released when the body is exhausted,
    when reading fails, or on ``aclose()``; use ``async with`` to release it
    even when the body is never read.

    Example:
        async with await client.post_read_stream(root, "Query", query) as body:
            async for chunk in body:
                ...
    """

    def __init__(
        self,
        response: httpx.Response,
        on_closed: Callable[["ResponseStream"], None] | None = None,
    ):
        self._response = response
        self._on_closed = on_closed

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def is_closed(self) -> bool:
        return self._response.is_closed

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except httpx.TransportError as e:
            raise SeqConnectionError(
                f"The Seq response from {self._response.url} could not be read: {e}"
            ) from e
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()
        if self._on_closed is not None:
            self._on_closed(self)
            self._on_closed = None

    async def __aenter__(self) -> "ResponseStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
