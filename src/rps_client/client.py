"""
rps_client.client — Game client
===============================

The one object a host creates at startup and passes to whatever layer
needs it. Owns the transport and the session, and releases the
connection on every exit path.

    with GameClient("ws://localhost:8080/ws") as client:
        client.session.events.subscribe(render)
        client.connect()
        while running:
            client.tick()          # once per frame / timer / poll
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from ._config import DEFAULTS, resolve_server_url, validate_server_url
from ._session import EventChannel, SessionState, SessionStateMachine
from ._shared.transport import DEFAULT_CONNECT_TIMEOUT, TransportEvent, WebSocketTransport
from .types import Choice

logger = logging.getLogger("rps_client")


class GameClient:
    """
    Owns one WebSocketTransport and one SessionStateMachine.

    Attributes:
        server_url: Validated ws:// or wss:// address
        transport: The connection owner
        session: The session state machine
    """

    def __init__(
        self,
        server_url: str,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: Optional[WebSocketTransport] = None,
        events: Optional[EventChannel] = None,
    ):
        self.server_url = validate_server_url(server_url)
        self.transport = transport or WebSocketTransport(connect_timeout=connect_timeout)
        self.session = SessionStateMachine(self.transport, events=events)

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs) -> "GameClient":
        """Build a client from a load_config() dict."""
        return cls(
            resolve_server_url(config),
            connect_timeout=config.get("connect_timeout", DEFAULTS["connect_timeout"]),
            **kwargs,
        )

    @property
    def state(self) -> SessionState:
        return self.session.current_state

    @property
    def events(self) -> EventChannel:
        return self.session.events

    def connect(self):
        """Start connecting to server_url; returns the connect future."""
        logger.info(f"Client connecting to {self.server_url}")
        return self.session.connect(self.server_url)

    def tick(self) -> List[TransportEvent]:
        """Deliver queued transport events to the session on this thread."""
        return self.transport.drain()

    def join(self, name: str) -> str:
        return self.session.join(name)

    def choose(self, choice: Choice) -> str:
        return self.session.choose(choice)

    def play_again(self) -> str:
        return self.session.play_again()

    def disconnect(self) -> str:
        return self.session.disconnect()

    def close(self) -> None:
        """Release the connection and stop the transport thread."""
        if self.session.current_state != SessionState.LOGGED_OUT:
            self.session.disconnect()
        self.transport.shutdown()
        logger.info("Client closed")

    def __enter__(self) -> "GameClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
