# Area: Shared
"""
rps_client._shared.transport — WebSocket transport
==================================================

Owns the single duplex connection to the game server.

The socket runs on a private asyncio event loop thread. That thread never
touches session state: every socket callback becomes a TransportEvent in
a thread-safe inbox, and the host delivers them on its own thread by
calling drain() once per tick.

connect(), send() and close() return immediately. connect() and close()
hand back a concurrent.futures.Future for callers that want to wait.
"""

from __future__ import annotations
import asyncio
import concurrent.futures
import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, Union

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..errors import CloseError, ConnectError, ConnectFailure, NotOpenError, TransportError
from ..types import ConnectionState

logger = logging.getLogger("rps_client.transport")

DEFAULT_CONNECT_TIMEOUT = 10.0
NORMAL_CLOSURE = 1000
ABNORMAL_CLOSURE = 1006


# ══════════════════════════════════════════════════════════════
# TRANSPORT EVENTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Opened:
    url: str


@dataclass(frozen=True)
class MessageReceived:
    data: bytes


@dataclass(frozen=True)
class TransportFailed:
    reason: str


@dataclass(frozen=True)
class Closed:
    code: int


TransportEvent = Union[Opened, MessageReceived, TransportFailed, Closed]
Listener = Callable[[TransportEvent], None]

_ACTIVE_STATES = (
    ConnectionState.CONNECTING,
    ConnectionState.OPEN,
    ConnectionState.CLOSING,
)


class WebSocketTransport:
    """
    Single-connection WebSocket transport with a drainable inbox.

    Usage:
        transport = WebSocketTransport(connect_timeout=5.0)
        transport.set_listener(session.on_transport_event)
        transport.connect("ws://localhost:8080/ws")
        while running:
            transport.drain()      # delivers Opened/MessageReceived/... here
            ...
        transport.shutdown()

    Attributes:
        connect_timeout: Seconds allowed for the opening handshake
    """

    def __init__(
        self,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        connector: Optional[Callable[[str], Any]] = None,
    ):
        """
        Initialize transport.

        Args:
            connect_timeout: Seconds allowed for the opening handshake
            connector: Callable returning an awaitable socket for a url
                (defaults to websockets.connect)
        """
        self.connect_timeout = connect_timeout
        self._connector = connector or websockets.connect
        self._inbox: "queue.Queue[Tuple[int, TransportEvent]]" = queue.Queue()
        self._lock = threading.Lock()
        self._state = ConnectionState.DISCONNECTED
        self._url: Optional[str] = None
        self._generation = 0
        self._socket: Any = None
        self._connect_task: Optional[asyncio.Task] = None
        self._listener: Optional[Listener] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    # ── public API ────────────────────────────────────────────

    @property
    def state(self) -> ConnectionState:
        with self._lock:
            return self._state

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    def set_listener(self, listener: Optional[Listener]) -> None:
        """Register the callable that drain() delivers events to."""
        self._listener = listener

    def connect(self, url: str) -> concurrent.futures.Future:
        """
        Start opening a connection.

        Args:
            url: ws:// or wss:// server address

        Returns:
            Future resolving to the url once OPEN, or raising ConnectError
            (TIMEOUT, REFUSED or CANCELLED)

        Raises:
            ConnectError: ALREADY_ACTIVE if a connection is still live
        """
        with self._lock:
            if self._state in _ACTIVE_STATES:
                raise ConnectError(url, ConnectFailure.ALREADY_ACTIVE)
            self._generation += 1
            generation = self._generation
            self._state = ConnectionState.CONNECTING
            self._url = url

        logger.info(f"Connecting to {url}")
        loop = self._ensure_loop()
        return asyncio.run_coroutine_threadsafe(self._open(url, generation), loop)

    def send(self, text: str) -> None:
        """
        Queue one text frame for transmission.

        Raises:
            NotOpenError: If the connection is not OPEN
        """
        with self._lock:
            if self._state != ConnectionState.OPEN or self._socket is None:
                raise NotOpenError(self._state)
            socket, generation, loop = self._socket, self._generation, self._loop
        asyncio.run_coroutine_threadsafe(self._transmit(socket, text, generation), loop)

    def close(self) -> concurrent.futures.Future:
        """
        Start closing the connection. Safe in any state.

        Closing while CONNECTING cancels the handshake; no Opened event is
        delivered for that attempt.

        Returns:
            Future that completes once the socket is released
        """
        with self._lock:
            state = self._state
            if state not in _ACTIVE_STATES or state == ConnectionState.CLOSING:
                done: concurrent.futures.Future = concurrent.futures.Future()
                done.set_result(None)
                return done
            self._state = ConnectionState.CLOSING
            generation, loop = self._generation, self._loop

        logger.info(f"Closing connection (was {state.value})")
        return asyncio.run_coroutine_threadsafe(self._close_socket(generation), loop)

    def drain(self) -> List[TransportEvent]:
        """
        Deliver queued events, in arrival order, on the calling thread.

        Only events already queued when drain() starts are delivered;
        events of a superseded connection attempt are dropped.

        Returns:
            The delivered events
        """
        delivered: List[TransportEvent] = []
        for _ in range(self._inbox.qsize()):
            try:
                generation, event = self._inbox.get_nowait()
            except queue.Empty:
                break
            if generation != self._generation:
                logger.debug(f"Dropping stale {type(event).__name__}")
                continue
            delivered.append(event)
            if self._listener is not None:
                self._listener(event)
        return delivered

    def shutdown(self, timeout: float = 2.0) -> None:
        """Close the connection and stop the event loop thread."""
        try:
            self.close().result(timeout=timeout)
        except (TransportError, concurrent.futures.TimeoutError) as e:
            logger.warning(f"Connection did not close cleanly: {e}")

        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Transport loop thread did not stop")
                return
        loop.close()

    def __enter__(self) -> "WebSocketTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ── event loop side ───────────────────────────────────────

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._run_loop,
                    args=(self._loop,),
                    name="rps-transport",
                    daemon=True,
                )
                self._thread.start()
            return self._loop

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        loop.run_forever()

    async def _open(self, url: str, generation: int) -> str:
        self._connect_task = asyncio.current_task()
        try:
            socket = await asyncio.wait_for(
                self._connector(url), timeout=self.connect_timeout
            )
        except asyncio.CancelledError:
            logger.info(f"Connection to {url} cancelled")
            self._finish(generation, Closed(NORMAL_CLOSURE))
            raise ConnectError(url, ConnectFailure.CANCELLED) from None
        except (asyncio.TimeoutError, TimeoutError):
            error = ConnectError(
                url, ConnectFailure.TIMEOUT, f"no handshake within {self.connect_timeout}s"
            )
            self._fail(generation, error)
            raise error from None
        except (OSError, WebSocketException) as e:
            error = ConnectError(url, ConnectFailure.REFUSED, str(e))
            self._fail(generation, error)
            raise error from e
        finally:
            self._connect_task = None

        with self._lock:
            current = (
                generation == self._generation
                and self._state == ConnectionState.CONNECTING
            )
            if current:
                self._state = ConnectionState.OPEN
                self._socket = socket

        if not current:
            # close() arrived during the handshake
            logger.info(f"Dropping connection to {url} opened after close")
            await socket.close()
            self._finish(generation, Closed(NORMAL_CLOSURE))
            raise ConnectError(url, ConnectFailure.CANCELLED)

        logger.info(f"Connected to {url}")
        self._post(generation, Opened(url))
        asyncio.get_running_loop().create_task(self._read(socket, generation))
        return url

    async def _read(self, socket: Any, generation: int) -> None:
        failure = None
        try:
            async for frame in socket:
                if isinstance(frame, str):
                    frame = frame.encode("utf-8")
                self._post(generation, MessageReceived(frame))
        except ConnectionClosed as e:
            failure = f"connection lost: {e}"
        except (OSError, WebSocketException) as e:
            failure = f"receive failed: {e}"

        if failure:
            logger.warning(failure)
            self._post(generation, TransportFailed(failure))
        code = getattr(socket, "close_code", None) or ABNORMAL_CLOSURE
        self._finish(generation, Closed(code))

    async def _transmit(self, socket: Any, text: str, generation: int) -> None:
        try:
            await socket.send(text)
        except (OSError, WebSocketException) as e:
            logger.error(f"Send failed: {e}")
            self._post(generation, TransportFailed(f"send failed: {e}"))
            self._finish(generation, Closed(ABNORMAL_CLOSURE))

    async def _close_socket(self, generation: int) -> None:
        task = self._connect_task
        if task is not None and not task.done():
            task.cancel()
            return
        socket = self._socket
        if socket is None:
            # handshake finishing concurrently; _open releases it
            return
        try:
            await socket.close()
        except (OSError, WebSocketException) as e:
            self._finish(generation, Closed(ABNORMAL_CLOSURE))
            raise CloseError(f"Close failed: {e}") from e
        code = getattr(socket, "close_code", None) or NORMAL_CLOSURE
        self._finish(generation, Closed(code))

    # ── bookkeeping ───────────────────────────────────────────

    def _post(self, generation: int, event: TransportEvent) -> None:
        with self._lock:
            if generation != self._generation:
                return
            if isinstance(event, MessageReceived) and self._state == ConnectionState.CLOSED:
                return
            self._inbox.put((generation, event))

    def _fail(self, generation: int, error: TransportError) -> None:
        logger.error(str(error))
        with self._lock:
            if generation != self._generation:
                return
            self._state = ConnectionState.CLOSED
            self._socket = None
            self._inbox.put((generation, TransportFailed(str(error))))

    def _finish(self, generation: int, event: Closed) -> None:
        with self._lock:
            if generation != self._generation or self._state == ConnectionState.CLOSED:
                return
            self._state = ConnectionState.CLOSED
            self._socket = None
            self._inbox.put((generation, event))
