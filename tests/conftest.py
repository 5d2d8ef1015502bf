"""
Pytest fixtures for seqapi tests.

Provides mock transports and sockets for fast testing without a real server.

Key fixture pattern:
- make_client: builds a SeqApiClient whose HTTP traffic goes to a handler
  function through httpx.MockTransport
- fake_socket: in-memory stand-in for a websockets connection; push frames
  or close frames into it and the stream under test receives them
"""

import asyncio
from typing import Callable

import httpx
import pytest
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK
from websockets.frames import Close

from seqapi import SeqApiClient
from seqapi.model import RootEntity

SERVER_URL = "http://seq.example.com"


class FakeSocket:
    """Minimal websockets connection double driven by an in-memory queue."""

    def __init__(self, frames=()):
        self._frames: asyncio.Queue = asyncio.Queue()
        self.closed = False
        self.recv_calls = 0
        for frame in frames:
            self.push(frame)

    def push(self, frame) -> None:
        self._frames.put_nowait(frame)

    def close_cleanly(self) -> None:
        self.push(ConnectionClosedOK(Close(1000, ""), Close(1000, ""), rcvd_then_sent=True))

    def close_abnormally(self, code: int = 1011, reason: str = "server error") -> None:
        self.push(ConnectionClosedError(Close(code, reason), None))

    def pending(self) -> int:
        return self._frames.qsize()

    async def recv(self):
        self.recv_calls += 1
        item = await self._frames.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = True


@pytest.fixture
def fake_socket() -> FakeSocket:
    return FakeSocket()


@pytest.fixture
def root_entity() -> RootEntity:
    """Root document advertising a typical set of links."""
    return RootEntity.model_validate(
        {
            "Product": "Seq",
            "Version": "2024.3",
            "InstanceName": "test",
            "Links": {
                "Self": "api",
                "Signals": "api/signals{?shared,ownerId}",
                "Signal": "api/signals/{id}",
                "Events": "api/events{?filter,count,fromDateUtc}",
                "EventsStream": "api/events/stream{?filter}",
                "Query": "api/data{?q}",
            },
        }
    )


@pytest.fixture
async def make_client():
    """
    Factory for clients backed by an httpx.MockTransport.

    Usage:
        async def test_something(make_client):
            client = make_client(lambda request: httpx.Response(200, json={}))
    """
    clients: list[SeqApiClient] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        api_key: str | None = "test-key",
        server_url: str = SERVER_URL,
    ) -> SeqApiClient:
        client = SeqApiClient(
            server_url,
            api_key=api_key,
            use_default_credentials=False,
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
