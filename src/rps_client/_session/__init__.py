# Area: Session
"""
Session layer - tracks the client's view of the game server's state.

This package handles:
- Session states and transition tables
- Applying server events and validating client commands
- Publishing typed events to the presentation layer
"""

from .enums import SessionState
from .event_channel import EventChannel
from .state_machine import SessionStateMachine, Score
from .transitions import EVENT_RULES, COMMAND_RULES, EventRule

__all__ = [
    "SessionState",
    "EventChannel",
    "SessionStateMachine",
    "Score",
    "EVENT_RULES",
    "COMMAND_RULES",
    "EventRule",
]
