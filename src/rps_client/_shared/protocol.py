# Area: Shared
"""
rps_client._shared.protocol — Wire message types
================================================

Message type tags for both directions of the game protocol.
Every frame is one JSON object: {"type": "<tag>", "data": {...}}.
"""

from enum import Enum


class IncomingType(str, Enum):
    """Closed set of message types the server sends to the client."""
    PLAYER_WAITING = "player_waiting"
    GAME_STARTING = "game_starting"
    ROUND_START = "round_start"
    ROUND_RESULT = "round_result"
    GAME_ENDED = "game_ended"
    ERROR = "error"


class OutgoingType(str, Enum):
    """Closed set of message types the client sends to the server."""
    JOIN_LOBBY = "join_lobby"
    MAKE_CHOICE = "make_choice"
    PLAY_AGAIN = "play_again"
    DISCONNECT = "disconnect"


INCOMING_MESSAGE_TYPES = frozenset(t.value for t in IncomingType)
OUTGOING_MESSAGE_TYPES = frozenset(t.value for t in OutgoingType)

# Empty payload sent for commands without fields
EMPTY_PAYLOAD = "{}"


def parse_incoming_type(message_type: str):
    """Return the IncomingType for a tag, or None if the tag is unknown."""
    try:
        return IncomingType(message_type)
    except ValueError:
        return None
