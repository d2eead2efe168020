# Area: Shared
"""
rps_client.cli — Developer console client
=========================================

Plays from the terminal and prints every protocol frame.

Usage:
    rps-client --name Alice                          # ws://localhost:8080/ws
    rps-client --name Alice --server games.example.org
    rps-client --name Alice --url ws://10.0.0.5:8080/ws
    RPS_PLAYER_NAME=Alice rps-client --config client.json

Commands during play:
    1, 2, 3     Rock, Paper, Scissors (while a round is open)
    play        Play again after a game ends
    quit        Disconnect from the server
"""

import argparse
import logging
import queue
import sys
import threading
import time
from typing import Any, Dict, List, Optional, TextIO

from ._config import load_config
from ._session import SessionState
from ._shared import ProtocolLogger, enable_protocol_mode, setup_logging
from ._shared.codec import decode
from ._shared.transport import MessageReceived, TransportEvent
from .client import GameClient
from .commands import Command, Disconnect, JoinLobby, MakeChoice, PlayAgain
from .errors import (
    ConfigError,
    ConnectError,
    DecodeError,
    InvalidTransitionError,
    NotOpenError,
)
from .events import (
    Connected,
    ConnectionFailed,
    Disconnected,
    GameEnded,
    GameStarting,
    PlayerWaiting,
    RejectedMessage,
    RoundResult,
    RoundStart,
    ServerError,
    SessionEvent,
    UnknownMessage,
)
from .types import Choice

logger = logging.getLogger("rps_client.cli")

CHOICE_KEYS = {
    "1": Choice.ROCK,
    "2": Choice.PAPER,
    "3": Choice.SCISSORS,
    "rock": Choice.ROCK,
    "paper": Choice.PAPER,
    "scissors": Choice.SCISSORS,
}
QUIT_WORDS = ("quit", "exit", "q")
POLL_INTERVAL_SECONDS = 0.05


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Rock-Paper-Scissors developer client - prints raw protocol messages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rps-client --name Alice
  rps-client --name Alice --server games.example.org
  rps-client --name Alice --server games.example.org --http
  rps-client --name Alice --url ws://localhost:9000/ws
        """,
    )
    parser.add_argument("--name", type=str, help="Player name (required)")
    parser.add_argument("--server", type=str, help="Server host[:port]")
    parser.add_argument("--url", type=str, help="Full ws:// or wss:// url (overrides --server)")
    parser.add_argument(
        "--http",
        action="store_true",
        help="Force ws:// instead of wss:// for remote servers",
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--timeout", type=float, help="Connect timeout in seconds")
    parser.add_argument("--log-file", type=str, help="Path to the JSON log file")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logs on the terminal instead of protocol lines only",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Load config and apply command line overrides."""
    config = load_config(args.config)
    overrides = {
        "player_name": args.name,
        "server": args.server,
        "server_url": args.url,
        "connect_timeout": args.timeout,
        "log_file": args.log_file,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    if args.server and not args.url:
        config["server_url"] = None
    if args.http:
        config["force_insecure"] = True
    return config


def interpret_input(line: str, state: SessionState) -> Command:
    """
    Map one console line to a command for the current state.

    Raises:
        ValueError: With a hint if the line means nothing in this state
    """
    word = line.strip().lower()
    if word in QUIT_WORDS:
        return Disconnect()
    if state == SessionState.IN_ROUND:
        if word in CHOICE_KEYS:
            return MakeChoice(choice=CHOICE_KEYS[word])
        raise ValueError(f"Invalid choice '{line.strip()}'. Use: 1=rock, 2=paper, 3=scissors")
    if state == SessionState.GAME_OVER:
        if word == "play":
            return PlayAgain()
        raise ValueError(f"Unknown command '{line.strip()}'. Available: play, quit")
    raise ValueError(f"Nothing to do while {state.value}. Available: quit")


class ConsoleClient:
    """
    Terminal front end for a GameClient.

    Joins the lobby once connected, prints [SEND]/[RECV] lines and
    session notes, and turns console lines into commands.
    """

    def __init__(
        self,
        client: GameClient,
        player_name: str,
        protocol_logger: Optional[ProtocolLogger] = None,
        input_stream: Optional[TextIO] = None,
    ):
        self.client = client
        self.player_name = player_name
        self.plog = protocol_logger or ProtocolLogger()
        self.input_stream = input_stream
        self.exit_code = 0
        self._lines: "queue.Queue[str]" = queue.Queue()
        self._running = False
        self._was_connected = False

        client.transport.set_listener(self.on_transport_event)
        client.events.subscribe(self.on_event)

    # ── main loop ─────────────────────────────────────────────

    def run(self, poll_interval: float = POLL_INTERVAL_SECONDS) -> int:
        """Connect and play until disconnected. Returns the exit code."""
        self.plog.log_note(
            f"Connecting to {self.client.server_url} as '{self.player_name}'"
        )
        try:
            self.client.connect()
        except (ConnectError, InvalidTransitionError) as e:
            self.plog.log_error(str(e))
            return 1

        self._running = True
        self._start_input_reader()
        while self._running:
            try:
                self.client.tick()
                self.process_input()
                time.sleep(poll_interval)
            except KeyboardInterrupt:
                self.plog.log_note("Interrupt received, disconnecting...")
                if self.client.state != SessionState.LOGGED_OUT:
                    self.send(Disconnect())
                self._running = False
        return self.exit_code

    def process_input(self) -> None:
        """Handle every console line read since the last tick."""
        while True:
            try:
                line = self._lines.get_nowait()
            except queue.Empty:
                return
            if not line.strip():
                continue
            try:
                command = interpret_input(line, self.client.state)
            except ValueError as e:
                self.plog.log_note(str(e))
                continue
            self.send(command)

    def send(self, command: Command) -> Optional[str]:
        """Issue a command and print the frame sent."""
        try:
            frame = self.client.session.issue(command)
        except (InvalidTransitionError, NotOpenError) as e:
            self.plog.log_error(str(e))
            return None
        self.plog.log_sent(command.TAG.value, frame)
        if isinstance(command, Disconnect):
            self._running = False
        return frame

    # ── callbacks ─────────────────────────────────────────────

    def on_transport_event(self, event: TransportEvent) -> None:
        """Print raw frames, then hand the event to the session."""
        if isinstance(event, MessageReceived):
            frame = event.data.decode("utf-8", errors="replace")
            message_type = _peek_type(frame)
            self.plog.log_received(message_type, frame)
        self.client.session.on_transport_event(event)

    def on_event(self, event: SessionEvent) -> None:
        """Print a note for each session event."""
        if isinstance(event, Connected):
            self._was_connected = True
            self.plog.log_note("Connected! WebSocket established")
            self.send(JoinLobby(name=self.player_name))
        elif isinstance(event, PlayerWaiting):
            self.plog.log_note("Waiting for opponent...")
        elif isinstance(event, GameStarting):
            self.plog.log_note(f"Game starting against {event.opponent_name}")
        elif isinstance(event, RoundStart):
            self.plog.log_note(
                f"Round {event.round_number} - Enter your choice: 1=rock, 2=paper, 3=scissors"
            )
        elif isinstance(event, RoundResult):
            self.plog.log_note(
                f"You {event.result.value}! You: {event.your_choice.value} | "
                f"Opponent: {event.opponent_choice.value} "
                f"(score {self.client.session.score})"
            )
        elif isinstance(event, GameEnded):
            score = event.score or str(self.client.session.score)
            self.plog.log_note(
                f"Game over! You {event.result.value} ({score}). "
                "Enter: play (to play again) or quit (to disconnect)"
            )
        elif isinstance(event, ServerError):
            self.plog.log_error(f"Server error: {event.message or 'malformed message'}")
        elif isinstance(event, UnknownMessage):
            self.plog.log_note(f"Unknown message type '{event.message_type}'")
        elif isinstance(event, RejectedMessage):
            self.plog.log_note(f"Ignored {event.message_type}: {event.reason}")
        elif isinstance(event, ConnectionFailed):
            self.plog.log_error(f"Connection failed: {event.reason}")
            if not self._was_connected:
                self.exit_code = 1
            self._running = False
        elif isinstance(event, Disconnected):
            self.plog.log_note(f"Connection closed (code {event.code})")
            self._running = False

    # ── input ─────────────────────────────────────────────────

    def feed(self, line: str) -> None:
        """Queue a console line (used by the reader thread and tests)."""
        self._lines.put(line)

    def _start_input_reader(self) -> None:
        stream = self.input_stream or sys.stdin
        reader = threading.Thread(
            target=self._read_lines, args=(stream,), name="rps-console-input", daemon=True
        )
        reader.start()

    def _read_lines(self, stream: TextIO) -> None:
        for line in stream:
            self.feed(line)
        self.feed("quit")


def _peek_type(frame: str) -> str:
    try:
        return decode(frame).type
    except DecodeError:
        return "malformed"


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.get("player_name"):
        print("Error: Missing player name.", file=sys.stderr)
        print("Use --name or set RPS_PLAYER_NAME.", file=sys.stderr)
        return 1

    setup_logging(
        log_file_path=config.get("log_file"),
        level=logging.DEBUG if args.verbose else logging.INFO,
    )
    if not args.verbose:
        enable_protocol_mode()

    try:
        client = GameClient.from_config(config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Resolved server url {client.server_url}")
    console = ConsoleClient(client, config["player_name"])
    try:
        return console.run()
    finally:
        client.close()
