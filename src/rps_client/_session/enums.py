# Area: Session
"""
rps_client._session.enums — Session State Enum
==============================================

Defines the states of the client session state machine.
"""

from enum import Enum


class SessionState(Enum):
    """
    States of the session state machine.

    State transitions:
    LOGGED_OUT -> CONNECTING (connect)
    CONNECTING -> LOBBY (connection opened)
    LOBBY -> WAITING (player_waiting)
    LOBBY/WAITING -> IN_ROUND (game_starting)
    IN_ROUND -> ROUND_RESOLVED (make_choice sent, or round_result)
    ROUND_RESOLVED -> IN_ROUND (round_start)
    IN_ROUND/ROUND_RESOLVED -> GAME_OVER (game_ended)
    GAME_OVER -> WAITING (player_waiting after play_again)
    Any state -> LOGGED_OUT (disconnect or transport loss)
    """
    LOGGED_OUT = "LOGGED_OUT"
    CONNECTING = "CONNECTING"
    LOBBY = "LOBBY"
    WAITING = "WAITING"
    IN_ROUND = "IN_ROUND"
    ROUND_RESOLVED = "ROUND_RESOLVED"
    GAME_OVER = "GAME_OVER"
