"""
rps_client — Rock-Paper-Scissors Game Client
============================================

Client library for the Rock-Paper-Scissors WebSocket game server.

Quick Start:
    from rps_client import GameClient, Choice

    client = GameClient("ws://localhost:8080/ws")
    client.events.subscribe(print)
    client.connect()
    while playing:
        client.tick()              # deliver server messages on this thread
    client.close()

Layers
------
1. Transport (WebSocketTransport) - owns the connection
2. Codec (encode / decode) - {"type": ..., "data": {...}} envelopes
3. Session (SessionStateMachine) - tracks state and publishes events

Developer console:
    rps-client --name Alice --server localhost:8080
"""

from .client import GameClient
from ._config import load_config, build_server_url
from ._session import EventChannel, SessionState, SessionStateMachine, Score
from ._shared.codec import Envelope, decode, encode
from ._shared.transport import WebSocketTransport
from .commands import Disconnect, JoinLobby, MakeChoice, PlayAgain
from .errors import (
    RPSClientError,
    ConfigError,
    TransportError,
    ConnectError,
    SendError,
    NotOpenError,
    DecodeError,
    InvalidTransitionError,
)
from .events import (
    # Server events
    PlayerWaiting,
    GameStarting,
    RoundStart,
    RoundResult,
    GameEnded,
    ServerError,
    # Connection events
    Connected,
    Disconnected,
    ConnectionFailed,
    UnknownMessage,
    RejectedMessage,
)
from .types import Choice, ConnectionState, Outcome

__all__ = [
    # Main classes
    "GameClient",
    "WebSocketTransport",
    "SessionStateMachine",
    "SessionState",
    "EventChannel",
    "Score",
    # Config
    "load_config",
    "build_server_url",
    # Codec
    "Envelope",
    "encode",
    "decode",
    # Commands
    "JoinLobby",
    "MakeChoice",
    "PlayAgain",
    "Disconnect",
    # Server events
    "PlayerWaiting",
    "GameStarting",
    "RoundStart",
    "RoundResult",
    "GameEnded",
    "ServerError",
    # Connection events
    "Connected",
    "Disconnected",
    "ConnectionFailed",
    "UnknownMessage",
    "RejectedMessage",
    # Errors
    "RPSClientError",
    "ConfigError",
    "TransportError",
    "ConnectError",
    "SendError",
    "NotOpenError",
    "DecodeError",
    "InvalidTransitionError",
    # Value types
    "Choice",
    "Outcome",
    "ConnectionState",
]
__version__ = "1.0.0"
