# Area: Shared
"""
Shared building blocks used by the session and the console client.

This package contains:
- WebSocket transport with a drainable inbox
- Envelope codec
- Wire message types
- Logging configuration and protocol console logging
"""

from .codec import Envelope, encode, decode, parse_payload
from .logging_config import (
    setup_logging,
    enable_protocol_mode,
    disable_protocol_mode,
    is_protocol_mode_enabled,
)
from .protocol import IncomingType, OutgoingType, INCOMING_MESSAGE_TYPES
from .protocol_logger import ProtocolLogger
from .transport import (
    WebSocketTransport,
    TransportEvent,
    Opened,
    MessageReceived,
    TransportFailed,
    Closed,
)

__all__ = [
    "Envelope",
    "encode",
    "decode",
    "parse_payload",
    "setup_logging",
    "enable_protocol_mode",
    "disable_protocol_mode",
    "is_protocol_mode_enabled",
    "IncomingType",
    "OutgoingType",
    "INCOMING_MESSAGE_TYPES",
    "ProtocolLogger",
    "WebSocketTransport",
    "TransportEvent",
    "Opened",
    "MessageReceived",
    "TransportFailed",
    "Closed",
]
