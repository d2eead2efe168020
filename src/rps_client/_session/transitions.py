# Area: Session
"""
rps_client._session.transitions — Transition tables
===================================================

Which session states accept each server event and each client command,
and where an accepted server event leads.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Type

from .._shared.protocol import IncomingType
from ..commands import Command, Disconnect, JoinLobby, MakeChoice, PlayAgain
from .enums import SessionState

ALL_STATES: FrozenSet[SessionState] = frozenset(SessionState)


@dataclass(frozen=True)
class EventRule:
    """
    Transition rule for one incoming message type.

    Attributes:
        sources: States in which the event is expected
        target: State after the event, or None to leave the state unchanged
    """

    sources: FrozenSet[SessionState]
    target: Optional[SessionState]


# Incoming events: {message type: rule}
EVENT_RULES: Dict[IncomingType, EventRule] = {
    IncomingType.PLAYER_WAITING: EventRule(
        sources=frozenset({SessionState.LOBBY, SessionState.GAME_OVER}),
        target=SessionState.WAITING,
    ),
    IncomingType.GAME_STARTING: EventRule(
        sources=frozenset({SessionState.WAITING, SessionState.LOBBY}),
        target=SessionState.IN_ROUND,
    ),
    IncomingType.ROUND_START: EventRule(
        sources=frozenset({SessionState.IN_ROUND, SessionState.ROUND_RESOLVED}),
        target=SessionState.IN_ROUND,
    ),
    IncomingType.ROUND_RESULT: EventRule(
        sources=frozenset({SessionState.IN_ROUND}),
        target=SessionState.ROUND_RESOLVED,
    ),
    IncomingType.GAME_ENDED: EventRule(
        sources=frozenset({SessionState.ROUND_RESOLVED, SessionState.IN_ROUND}),
        target=SessionState.GAME_OVER,
    ),
    IncomingType.ERROR: EventRule(
        sources=ALL_STATES,
        target=None,
    ),
}


# Outgoing commands: {command class: states that permit it}
COMMAND_RULES: Dict[Type[Command], FrozenSet[SessionState]] = {
    JoinLobby: frozenset({SessionState.LOBBY}),
    MakeChoice: frozenset({SessionState.IN_ROUND}),
    PlayAgain: frozenset({SessionState.GAME_OVER}),
    Disconnect: ALL_STATES - {SessionState.LOGGED_OUT},
}


def event_rule(message_type: IncomingType) -> EventRule:
    """Return the transition rule for an incoming message type."""
    return EVENT_RULES[message_type]


def command_allowed(command: Command, state: SessionState) -> bool:
    """Check if a command may be issued in the given state."""
    return state in COMMAND_RULES.get(type(command), frozenset())
