# Area: Shared
"""
rps_client._shared.protocol_logger — Protocol message logging
=============================================================

Console lines for every frame the client sends or receives, with the
reply the protocol expects next. Used by the developer console.
"""

from __future__ import annotations
import sys
from datetime import datetime
from typing import Optional, TextIO

# ══════════════════════════════════════════════════════════════
# ANSI COLOR CODES
# ══════════════════════════════════════════════════════════════

GREEN = "\033[32m"         # Received
CYAN = "\033[36m"          # Sent
ORANGE = "\033[38;5;208m"  # Session notes
RED = "\033[31m"           # Errors
RESET = "\033[0m"

# What the protocol expects after each message type
EXPECTED_NEXT = {
    # Received
    "player_waiting": "game_starting",
    "game_starting": "round_start",
    "round_start": "make_choice",
    "round_result": "round_start or game_ended",
    "game_ended": "play_again or disconnect",
    "error": "None",
    # Sent
    "join_lobby": "player_waiting",
    "make_choice": "round_result",
    "play_again": "player_waiting",
    "disconnect": "None (terminal)",
}


class ProtocolLogger:
    """Logger for protocol frames and session notes."""

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True):
        self.stream = stream
        self.color = color

    def _out(self) -> TextIO:
        return self.stream or sys.stdout

    def _now(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _paint(self, color: str, text: str) -> str:
        return f"{color}{text}{RESET}" if self.color else text

    def log_sent(self, message_type: str, frame: str) -> None:
        """Log a frame sent to the server."""
        expected = EXPECTED_NEXT.get(message_type, "Unknown")
        line = f"{self._now()} [SEND] {frame}  | EXPECT: {expected}"
        print(self._paint(CYAN, line), file=self._out())

    def log_received(self, message_type: str, frame: str) -> None:
        """Log a frame received from the server."""
        expected = EXPECTED_NEXT.get(message_type, "Unknown")
        line = f"{self._now()} [RECV] {frame}  | NEXT: {expected}"
        print(self._paint(GREEN, line), file=self._out())

    def log_note(self, text: str) -> None:
        """Log a console-client note."""
        print(self._paint(ORANGE, f"[CLIENT] {text}"), file=self._out())

    def log_error(self, description: str) -> None:
        """Log an error."""
        line = f"[ERROR] {self._now()} | {description}"
        print(self._paint(RED, line), file=self.stream or sys.stderr)
