"""
rps_client.types — Shared value types
=====================================

Enumerations used on the wire and in events. Values are the exact
strings the server sends and expects:

    >>> Choice("rock")
    <Choice.ROCK: 'rock'>
    >>> Outcome.WIN.value
    'win'
"""

from enum import Enum


class Choice(str, Enum):
    """A player's hand for one round."""
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class Outcome(str, Enum):
    """Result of a round or a game, from this client's point of view."""
    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"


class ConnectionState(Enum):
    """
    States of the single transport connection.

    DISCONNECTED -> CONNECTING (connect)
    CONNECTING -> OPEN (handshake done)
    CONNECTING -> CLOSING (close before handshake)
    OPEN -> CLOSING (close)
    CLOSING/CONNECTING/OPEN -> CLOSED (socket gone)
    """
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    OPEN = "OPEN"
    CLOSING = "CLOSING"
    CLOSED = "CLOSED"
