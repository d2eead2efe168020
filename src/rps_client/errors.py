"""
rps_client.errors — Custom exception classes
============================================

Defines the exception hierarchy for the game client.
Each exception stores its context as attributes so callers and log
records can report it without parsing the message text.

None of these errors is fatal to the process: transport failures reset
the session to LOGGED_OUT, decode failures become a local ``error``
event, and rejected commands leave the session untouched.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional


class RPSClientError(Exception):
    """Base exception for all rps_client errors."""
    pass


class ConfigError(RPSClientError):
    """Raised when the client configuration is missing or invalid."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid config '{key}': {reason}")


# ══════════════════════════════════════════════════════════════
# TRANSPORT ERRORS
# ══════════════════════════════════════════════════════════════

class ConnectFailure(Enum):
    """Why a connection attempt did not reach OPEN."""
    TIMEOUT = "timeout"
    REFUSED = "refused"
    ALREADY_ACTIVE = "already_active"
    CANCELLED = "cancelled"


class TransportError(RPSClientError):
    """Base class for connect/send/close failures."""
    pass


class ConnectError(TransportError):
    """Raised when a connection attempt fails."""

    def __init__(self, url: str, reason: ConnectFailure, detail: str = ""):
        self.url = url
        self.reason = reason
        self.detail = detail
        message = f"Could not connect to {url}: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SendError(TransportError):
    """Raised when a frame cannot be handed to the connection."""
    pass


class NotOpenError(SendError):
    """Raised when sending while the connection is not OPEN."""

    def __init__(self, state: Any):
        self.state = state
        state_name = getattr(state, "value", state)
        super().__init__(f"Cannot send: connection is {state_name}")


class CloseError(TransportError):
    """Raised when closing the connection fails."""
    pass


# ══════════════════════════════════════════════════════════════
# PROTOCOL ERRORS
# ══════════════════════════════════════════════════════════════

class DecodeError(RPSClientError):
    """Raised when an inbound frame or payload cannot be decoded."""

    def __init__(self, raw: Any, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Malformed frame: {reason}")

    def preview(self, limit: int = 80) -> str:
        """Return a shortened repr of the offending frame for log lines."""
        text = self.raw if isinstance(self.raw, str) else repr(self.raw)
        if len(text) > limit:
            return text[:limit] + "..."
        return text


class InvalidTransitionError(RPSClientError):
    """Raised when a command is not permitted in the current session state."""

    def __init__(self, action: str, state: Any, allowed: Optional[Any] = None):
        self.action = action
        self.state = state
        self.allowed = allowed
        state_name = getattr(state, "value", state)
        super().__init__(f"Invalid transition: {action} from {state_name}")
