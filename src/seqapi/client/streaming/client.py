"""
WebSocket streaming for server push endpoints (live event tails, etc).

A stream wraps one open socket. Frames are decoded by a caller-supplied
function and pushed to every subscriber in arrival order. Receiving starts
with the first subscriber, so nothing is lost between opening the socket and
consuming it.

A stream is not restartable: once closed, open a new one.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    Protocol,
    TypeVar,
)

import websockets
from websockets.exceptions import (
    ConnectionClosedError,
    ConnectionClosedOK,
    InvalidStatus,
    WebSocketException,
)

from seqapi.client.rest import API_KEY_HEADER, error_from_response
from seqapi.errors import SeqConnectionError

if TYPE_CHECKING:
    from seqapi.client.rest import HttpTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")

Decoder = Callable[[str], T]


class StreamState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    RECEIVING = "receiving"
    CLOSED = "closed"


class FrameSocket(Protocol):
    """The part of a websockets connection a stream relies on."""

    async def recv(self) -> str | bytes: ...

    async def close(self, code: int = 1000, reason: str = "") -> None: ...


class _Observer(Generic[T]):
    def __init__(
        self,
        on_next: Callable[[T], Awaitable[None]],
        on_error: Callable[[Exception], Awaitable[None]] | None = None,
        on_completed: Callable[[], Awaitable[None]] | None = None,
    ):
        self.on_next = on_next
        self.on_error = on_error
        self.on_completed = on_completed


class StreamSubscription:
    """Handle returned by ``subscribe``; ``dispose()`` stops deliveries to it."""

    def __init__(self, stream: "ObservableStream[Any]", observer: _Observer[Any]):
        self._stream = stream
        self._observer = observer

    def dispose(self) -> None:
        self._stream._detach(self._observer)


_NEXT = "next"
_ERROR = "error"
_COMPLETED = "completed"


class ObservableStream(Generic[T]):
    """
    Push-based sequence of decoded frames from one WebSocket.

    Example:
        async with await client.stream(root, "EventsStream", EventEntity) as events:
            async for event in events:
                print(event.id)

    Or with callbacks:
        subscription = events.subscribe(on_event, on_error=on_failure)
        ...
        await events.stop()
    """

    def __init__(
        self,
        socket: FrameSocket,
        decode: Decoder[T],
        on_closed: Callable[["ObservableStream[T]"], None] | None = None,
    ):
        self._socket = socket
        self._decode = decode
        self._on_closed = on_closed
        self._observers: list[_Observer[T]] = []
        self._state = StreamState.OPEN
        self._stopped = False
        self._error: Exception | None = None
        self._receive_task: asyncio.Task[None] | None = None
        self._closed = asyncio.Event()

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state is StreamState.CLOSED

    @property
    def error(self) -> Exception | None:
        """The exception that terminated the stream, if it failed."""
        return self._error

    # --- Subscription ---

    def subscribe(
        self,
        on_next: Callable[[T], Awaitable[None]],
        on_error: Callable[[Exception], Awaitable[None]] | None = None,
        on_completed: Callable[[], Awaitable[None]] | None = None,
    ) -> StreamSubscription:
        """
        Register async callbacks for values, failure and completion.

        Raises:
            RuntimeError: If the stream is already closed
        """
        if self.is_closed:
            raise RuntimeError("Stream is closed; open a new stream to resume")

        observer = _Observer(on_next, on_error, on_completed)
        self._observers.append(observer)
        self._start()
        return StreamSubscription(self, observer)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        queue: asyncio.Queue[tuple[str, Any]] = asyncio.Queue()

        async def on_next(value: T) -> None:
            queue.put_nowait((_NEXT, value))

        async def on_error(error: Exception) -> None:
            queue.put_nowait((_ERROR, error))

        async def on_completed() -> None:
            queue.put_nowait((_COMPLETED, None))

        subscription = self.subscribe(on_next, on_error, on_completed)
        try:
            while True:
                kind, value = await queue.get()
                if self._stopped or kind == _COMPLETED:
                    return
                if kind == _ERROR:
                    raise value
                yield value
        finally:
            subscription.dispose()

    def _detach(self, observer: _Observer[T]) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    # --- Lifecycle ---

    def _start(self) -> None:
        if self._receive_task is not None or self.is_closed:
            return
        self._state = StreamState.RECEIVING
        self._receive_task = asyncio.create_task(
            self._receive_loop(), name="seq-stream-receive"
        )

    async def stop(self) -> None:
        """
        Close the socket and end the stream.

        Any in-flight receive is aborted and no further values are delivered.
        Safe to call more than once, and from inside a subscriber callback.
        """
        if self.is_closed:
            return

        self._stopped = True
        task = self._receive_task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._terminate(None)

    async def wait_closed(self) -> None:
        """Wait until the stream has closed for any reason."""
        await self._closed.wait()

    async def __aenter__(self) -> "ObservableStream[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    # --- Receive loop ---

    async def _receive_loop(self) -> None:
        error: Exception | None = None
        received = 0
        try:
            while not self._stopped:
                try:
                    frame = await self._socket.recv()
                except ConnectionClosedOK:
                    break
                except ConnectionClosedError as e:
                    raise SeqConnectionError(
                        f"The stream connection closed abnormally: {e}"
                    ) from e

                if not isinstance(frame, str):
                    logger.debug("Skipping binary stream frame")
                    continue

                value = self._decode(frame)
                received += 1
                await self._dispatch(value)
        except Exception as e:
            error = e

        logger.debug(f"Stream receive loop finished after {received} frames")
        await self._terminate(error)

    async def _dispatch(self, value: T) -> None:
        for observer in list(self._observers):
            if self._stopped:
                return
            try:
                await observer.on_next(value)
            except Exception as e:
                logger.warning(f"Stream subscriber failed, detaching it: {e}")
                self._detach(observer)

    async def _terminate(self, error: Exception | None) -> None:
        if self.is_closed:
            return

        self._state = StreamState.CLOSED
        self._error = error
        observers = list(self._observers)
        self._observers.clear()

        await self._socket.close()
        self._closed.set()
        if self._on_closed is not None:
            self._on_closed(self)

        if error is not None:
            logger.warning(f"Stream terminated with error: {error}")
        else:
            logger.info("Stream closed")

        for observer in observers:
            callback = observer.on_error if error is not None else observer.on_completed
            if callback is None:
                continue
            try:
                if error is not None:
                    await callback(error)
                else:
                    await callback()
            except Exception as e:
                logger.warning(f"Stream subscriber failed during shutdown: {e}")


class StreamingClient:
    """
    Opens WebSocket streams that authenticate like the HTTP transport.

    The handshake carries the same API key header and the cookies the server
    has set on HTTP responses.
    """

    def __init__(self, transport: "HttpTransport"):
        self._transport = transport
        self._streams: set[ObservableStream[Any]] = set()

    @property
    def open_streams(self) -> int:
        return len(self._streams)

    def socket_url(self, uri: str) -> str:
        """Resolve ``uri`` against the server and switch to the ws(s) scheme."""
        url = self._transport.absolute_url(uri)
        scheme = {"http": "ws", "https": "wss"}.get(url.scheme, url.scheme)
        return str(url.copy_with(scheme=scheme))

    def handshake_headers(self, uri: str) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._transport.api_key is not None:
            headers[API_KEY_HEADER] = self._transport.api_key
        cookie = self._transport.cookie_header(uri)
        if cookie:
            headers["Cookie"] = cookie
        return headers

    async def open(self, uri: str, decode: Decoder[T]) -> ObservableStream[T]:
        """
        Connect to ``uri`` and return a stream of decoded frames.

        Raises:
            RuntimeError: If the client has been closed
            SeqApiError: If the server rejects the handshake with an HTTP status
            SeqConnectionError: If the connection can't be established
        """
        if self._transport.is_closed:
            raise RuntimeError("Cannot open a stream, as the client has been closed.")

        url = self.socket_url(uri)
        logger.debug(f"Stream {StreamState.CONNECTING.value}: {url}")

        try:
            socket = await websockets.connect(
                url, additional_headers=self.handshake_headers(uri)
            )
        except InvalidStatus as e:
            response = e.response
            raise error_from_response(response.status_code, response.body or b"") from e
        except (WebSocketException, OSError) as e:
            raise SeqConnectionError(f"Could not open stream to {url}: {e}") from e

        stream = ObservableStream(socket, decode, on_closed=self._streams.discard)
        self._streams.add(stream)
        logger.info(f"Stream opened: {url}")
        return stream

    async def aclose(self) -> None:
        """Stop every stream this client opened that is still open."""
        for stream in list(self._streams):
            await stream.stop()
