"""Seq WebSocket streaming.

This module provides push-based streams over WebSocket endpoints advertised
by the server.

Usage:
    from seqapi.client.streaming import StreamingClient, ObservableStream
"""

from seqapi.client.streaming.client import (
    Decoder,
    FrameSocket,
    ObservableStream,
    StreamingClient,
    StreamState,
    StreamSubscription,
)

__all__ = [
    "Decoder",
    "FrameSocket",
    "ObservableStream",
    "StreamingClient",
    "StreamState",
    "StreamSubscription",
]
