"""
rps_client.events — Typed session events
========================================

Everything the session publishes to subscribers is one of these models.

Server events are parsed straight from the envelope's ``data`` text, so
their fields use the wire names (``opponent_name``, ``round_number``...).
Local events describe connection lifecycle and messages the session
could not apply.

Subscribe to one class or to all of them:

    client.session.events.subscribe(on_round, RoundResult)
    client.session.events.subscribe(print)
"""

from typing import Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from ._shared.protocol import IncomingType
from .types import Choice, Outcome


class SessionEvent(BaseModel):
    """Base class for all published events."""

    model_config = ConfigDict(frozen=True)


# ============================================
# Server -> client events
# ============================================

class PlayerWaiting(SessionEvent):
    """Queued for an opponent."""


class GameStarting(SessionEvent):
    """An opponent was paired; a new game begins.

    Fields
    ------
    opponent_name : str
        Display name of the paired opponent.
    """
    opponent_name: str = ""


class RoundStart(SessionEvent):
    """A new round opened; choices are accepted.

    Fields
    ------
    round_number : int
        1-based, strictly increasing within one game.
    """
    round_number: int = Field(ge=1)


class RoundResult(SessionEvent):
    """The server resolved the current round.

    Fields
    ------
    result : Outcome
        win, lose or draw for this client.
    your_choice : Choice
        The hand the server recorded for this client.
    opponent_choice : Choice
        The opponent's hand.
    """
    result: Outcome
    your_choice: Choice
    opponent_choice: Choice


class GameEnded(SessionEvent):
    """The game is over.

    Fields
    ------
    result : Outcome
        Final outcome for this client.
    score : str, optional
        Final round tally as reported by the server, e.g. "2-1".
    """
    result: Outcome
    score: Optional[str] = None


class ServerError(SessionEvent):
    """Error reported by the server, or a local stand-in for a malformed frame
    (``message`` is empty in that case)."""
    message: str = ""


# ============================================
# Local events
# ============================================

class Connected(SessionEvent):
    url: str


class Disconnected(SessionEvent):
    code: int


class ConnectionFailed(SessionEvent):
    reason: str


class UnknownMessage(SessionEvent):
    """A frame whose type is not part of the protocol."""
    message_type: str
    data: str = "{}"


class RejectedMessage(SessionEvent):
    """A well-formed frame the session refused to apply."""
    message_type: str
    reason: str


INCOMING_EVENT_MODELS: Dict[IncomingType, Type[SessionEvent]] = {
    IncomingType.PLAYER_WAITING: PlayerWaiting,
    IncomingType.GAME_STARTING: GameStarting,
    IncomingType.ROUND_START: RoundStart,
    IncomingType.ROUND_RESULT: RoundResult,
    IncomingType.GAME_ENDED: GameEnded,
    IncomingType.ERROR: ServerError,
}
