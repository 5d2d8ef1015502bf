"""
seq-api - Hypermedia client for the Seq HTTP/WebSocket API.

Client Layer:
    SeqApiClient: Link-driven GET/LIST/POST/PUT/DELETE and streams
    HttpTransport: Authenticated HTTP with structured errors
    StreamingClient / ObservableStream: WebSocket push streams

Model Layer:
    Entity, Link, RootEntity: Decoded resources and their link tables

Example:
    from seqapi import SeqApiClient

    async with SeqApiClient("http://localhost:5341", api_key="...") as client:
        root = await client.get_root()
        text = await client.get_string(root, "Self")
"""

from .client import (
    HttpTransport,
    ObservableStream,
    ResponseStream,
    SeqApiClient,
    StreamingClient,
    format_timestamp,
    resolve_link,
)
from .client.streaming import StreamState, StreamSubscription
from .config import ConnectionConfig, load_connection_config
from .errors import (
    LinkNotAvailableError,
    LinkResolutionError,
    SeqApiError,
    SeqConnectionError,
    SeqError,
    UnknownParameterError,
)
from .model import Entity, Link, Linked, RootEntity

__all__ = [
    # Client
    "SeqApiClient",
    "HttpTransport",
    "ResponseStream",
    "StreamingClient",
    "ObservableStream",
    "StreamState",
    "StreamSubscription",
    "resolve_link",
    "format_timestamp",
    # Model
    "Entity",
    "Link",
    "Linked",
    "RootEntity",
    # Config
    "ConnectionConfig",
    "load_connection_config",
    # Errors
    "SeqError",
    "LinkResolutionError",
    "LinkNotAvailableError",
    "UnknownParameterError",
    "SeqApiError",
    "SeqConnectionError",
]

__version__ = "0.0.1"
