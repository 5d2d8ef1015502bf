"""
SeqApiClient - hypermedia client for the Seq HTTP/WebSocket API.

Endpoints are never hardcoded: each operation names a link on an entity the
server returned earlier, and the client resolves and follows it.

Example:
    async with SeqApiClient("https://seq.example.com", api_key="...") as client:
        root = await client.get_root()
        signals = await client.list_entities(root, "SignalsResources", SignalEntity)
        async with await client.stream(root, "EventsStream", EventEntity) as events:
            async for event in events:
                ...
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

import httpx

from seqapi.client.links import resolve_link
from seqapi.client.rest import HttpTransport, ResponseStream
from seqapi.client.streaming import ObservableStream, StreamingClient
from seqapi.model import Linked, RootEntity
from seqapi.serialization import decode

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ROOT_PATH = "api"


class SeqApiClient:
    """
    Verb-shaped operations over named links.

    One client owns one connection pool and one cookie jar for its lifetime;
    it is safe to share between concurrent tasks. Cancel the awaiting task to
    abort any operation.
    """

    def __init__(
        self,
        server_url: str,
        api_key: str | None = None,
        use_default_credentials: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            server_url: Base address of the Seq server
            api_key: Sent as ``X-Seq-ApiKey``; empty means none
            use_default_credentials: Let httpx pick up ambient credentials and
                proxy settings from the environment
            transport: Custom httpx transport (tests, proxies)
        """
        if not server_url:
            raise ValueError("server_url is required")

        self._server_url = server_url
        self.rest = HttpTransport(
            server_url,
            api_key=api_key,
            use_default_credentials=use_default_credentials,
            transport=transport,
        )
        self.streaming = StreamingClient(self.rest)

    @classmethod
    def from_config(cls, profile: str) -> "SeqApiClient":
        """Create a client from a profile in ``seq_config.yaml``."""
        from seqapi.config import load_connection_config

        config = load_connection_config(profile)
        return cls(
            config.server_url,
            api_key=config.api_key,
            use_default_credentials=config.use_default_credentials,
        )

    @property
    def server_url(self) -> str:
        return self._server_url

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self.rest.client

    # --- GET ---

    async def get_root(self) -> RootEntity:
        response = await self.rest.send("GET", ROOT_PATH)
        return decode(response.content, RootEntity)

    async def get(
        self,
        entity: Linked,
        link: str,
        model: type[T],
        parameters: Mapping[str, Any] | None = None,
    ) -> T:
        uri = resolve_link(entity, link, parameters)
        response = await self.rest.send("GET", uri)
        return decode(response.content, model)

    async def get_string(
        self,
        entity: Linked,
        link: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> str:
        uri = resolve_link(entity, link, parameters)
        response = await self.rest.send("GET", uri)
        return response.text

    async def list_entities(
        self,
        entity: Linked,
        link: str,
        model: type[T],
        parameters: Mapping[str, Any] | None = None,
    ) -> list[T]:
        uri = resolve_link(entity, link, parameters)
        response = await self.rest.send("GET", uri)
        return decode(response.content, list[model])

    # --- POST / PUT / DELETE ---

    async def post(
        self,
        entity: Linked,
        link: str,
        content: Any,
        parameters: Mapping[str, Any] | None = None,
        response_model: type[R] | None = None,
    ) -> R | None:
        """POST ``content``; decode the response into ``response_model`` if given."""
        uri = resolve_link(entity, link, parameters)
        response = await self.rest.send("POST", uri, content)
        if response_model is None:
            return None
        return decode(response.content, response_model)

    async def post_read_string(
        self,
        entity: Linked,
        link: str,
        content: Any,
        parameters: Mapping[str, Any] | None = None,
    ) -> str:
        uri = resolve_link(entity, link, parameters)
        response = await self.rest.send("POST", uri, content)
        return response.text

    async def post_read_stream(
        self,
        entity: Linked,
        link: str,
        content: Any,
        parameters: Mapping[str, Any] | None = None,
    ) -> ResponseStream:
        """
        POST ``content`` and return the response body as it arrives.

        The link is resolved and the request sent before this returns. The
        response is released once the body is exhausted, on ``aclose()`` or
        on leaving ``async with``, and at the latest when the client closes.
        """
        uri = resolve_link(entity, link, parameters)
        return await self.rest.send_streaming("POST", uri, content)

    async def put(
        self,
        entity: Linked,
        link: str,
        content: Any,
        parameters: Mapping[str, Any] | None = None,
    ) -> None:
        uri = resolve_link(entity, link, parameters)
        await self.rest.send("PUT", uri, content)

    async def delete(
        self,
        entity: Linked,
        link: str,
        content: Any = None,
        parameters: Mapping[str, Any] | None = None,
        response_model: type[R] | None = None,
    ) -> R | None:
        """DELETE, with an optional body; decode the response if asked to."""
        uri = resolve_link(entity, link, parameters)
        if content is None:
            response = await self.rest.send("DELETE", uri)
        else:
            response = await self.rest.send("DELETE", uri, content)
        if response_model is None:
            return None
        return decode(response.content, response_model)

    # --- Streaming ---

    async def stream(
        self,
        entity: Linked,
        link: str,
        model: type[T],
        parameters: Mapping[str, Any] | None = None,
    ) -> ObservableStream[T]:
        """Open a WebSocket link whose frames are JSON documents of ``model``."""
        uri = resolve_link(entity, link, parameters)
        return await self.streaming.open(uri, lambda frame: decode(frame, model))

    async def stream_text(
        self,
        entity: Linked,
        link: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> ObservableStream[str]:
        """Open a WebSocket link and deliver each frame's raw text."""
        uri = resolve_link(entity, link, parameters)
        return await self.streaming.open(uri, lambda frame: frame)

    # --- Lifecycle ---

    async def aclose(self) -> None:
        """Stop open streams and release the connection pool and cookie jar."""
        await self.streaming.aclose()
        await self.rest.aclose()
        logger.debug(f"Closed client for {self._server_url}")

    async def __aenter__(self) -> "SeqApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
