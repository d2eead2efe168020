# Area: Session
"""
rps_client._session.state_machine — Session State Machine
=========================================================

Tracks the client's session with the game server. Consumes decoded
envelopes and transport lifecycle events, validates them against the
current state, transitions, and publishes exactly one typed event per
handled message.

Out-of-order server events are applied anyway (the server is the
authority) and logged as protocol anomalies. Commands the current state
does not permit are refused with InvalidTransitionError before anything
is sent. Server messages that arrive while LOGGED_OUT or CONNECTING
(late frames of a closed connection) are rejected without a transition.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from .._shared.codec import Envelope, decode, encode, parse_payload
from .._shared.protocol import IncomingType, parse_incoming_type
from .._shared.transport import Closed, MessageReceived, Opened, TransportEvent, TransportFailed
from ..commands import Command, Disconnect, JoinLobby, MakeChoice, PlayAgain
from ..errors import DecodeError, InvalidTransitionError, TransportError
from ..events import (
    INCOMING_EVENT_MODELS,
    Connected,
    ConnectionFailed,
    Disconnected,
    GameStarting,
    RejectedMessage,
    RoundResult,
    RoundStart,
    ServerError,
    SessionEvent,
    UnknownMessage,
)
from ..types import Choice, Outcome
from .enums import SessionState
from .event_channel import EventChannel
from .transitions import COMMAND_RULES, EventRule, command_allowed, event_rule

logger = logging.getLogger("rps_client.session")

# Server messages are only applied once the connection reached the lobby
_OFFLINE_STATES = frozenset({SessionState.LOGGED_OUT, SessionState.CONNECTING})


@dataclass(frozen=True)
class Score:
    """Round tally for the current game, from this client's point of view."""

    wins: int = 0
    losses: int = 0
    draws: int = 0

    def record(self, outcome: Outcome) -> "Score":
        if outcome is Outcome.WIN:
            return replace(self, wins=self.wins + 1)
        if outcome is Outcome.LOSE:
            return replace(self, losses=self.losses + 1)
        return replace(self, draws=self.draws + 1)

    def __str__(self) -> str:
        return f"{self.wins}-{self.losses}"


class SessionStateMachine:
    """
    State machine for one client session.

    All mutation happens on the host thread: through issue()/connect()
    called by the presentation layer, or through transport events the
    host delivers with transport.drain().

    Attributes:
        current_state: The current SessionState
        events: Channel the session publishes its events on
        player_name: Name sent with the last join_lobby
        opponent_name: Opponent of the current game
        round_number: Last round number of the current game (0 before round 1)
        pending_choice: Choice sent and not yet answered by round_result
        last_result: Most recent RoundResult of the current game
        score: Round tally of the current game
    """

    def __init__(self, transport: Any, events: Optional[EventChannel] = None):
        """
        Initialize the session in LOGGED_OUT and attach to the transport.

        Args:
            transport: A WebSocketTransport (or compatible object)
            events: Channel to publish on (a new one if None)
        """
        self.transport = transport
        self.events = events or EventChannel()
        self.current_state = SessionState.LOGGED_OUT
        self.player_name: Optional[str] = None
        self._clear_game()
        transport.set_listener(self.on_transport_event)

    # ── commands ──────────────────────────────────────────────

    def connect(self, url: str):
        """
        Open the connection: LOGGED_OUT -> CONNECTING.

        Returns:
            The transport's connect future

        Raises:
            InvalidTransitionError: If not LOGGED_OUT
            ConnectError: If the transport refuses to start
        """
        if self.current_state != SessionState.LOGGED_OUT:
            logger.warning(f"Rejected connect in {self.current_state.value}")
            raise InvalidTransitionError(
                "connect", self.current_state, frozenset({SessionState.LOGGED_OUT})
            )
        self.current_state = SessionState.CONNECTING
        try:
            return self.transport.connect(url)
        except TransportError:
            self.current_state = SessionState.LOGGED_OUT
            raise

    def issue(self, command: Command) -> str:
        """
        Validate, encode and send a command, then apply its state update.

        Args:
            command: JoinLobby, MakeChoice, PlayAgain or Disconnect

        Returns:
            The frame handed to the transport

        Raises:
            InvalidTransitionError: If the current state does not permit
                the command (nothing is sent)
            NotOpenError: If the connection is not open (state unchanged)
        """
        tag = command.TAG.value
        if not command_allowed(command, self.current_state):
            logger.warning(f"Rejected {tag} in {self.current_state.value}")
            raise InvalidTransitionError(
                tag, self.current_state, COMMAND_RULES.get(type(command))
            )

        frame = encode(command)
        if isinstance(command, Disconnect):
            self._disconnect(frame)
            return frame

        self.transport.send(frame)
        logger.debug(f"Sent {tag} in {self.current_state.value}")

        if isinstance(command, JoinLobby):
            self.player_name = command.name
        elif isinstance(command, MakeChoice):
            self.pending_choice = command.choice
            self.current_state = SessionState.ROUND_RESOLVED
        elif isinstance(command, PlayAgain):
            logger.info("Rematch requested")
        return frame

    def join(self, name: str) -> str:
        return self.issue(JoinLobby(name=name))

    def choose(self, choice: Choice) -> str:
        return self.issue(MakeChoice(choice=choice))

    def play_again(self) -> str:
        return self.issue(PlayAgain())

    def disconnect(self) -> str:
        return self.issue(Disconnect())

    # ── inbound ───────────────────────────────────────────────

    def on_transport_event(self, event: TransportEvent) -> Optional[SessionEvent]:
        """Apply one event delivered by transport.drain()."""
        if isinstance(event, MessageReceived):
            return self.receive(event.data)
        if isinstance(event, Opened):
            return self._on_opened(event)
        if isinstance(event, TransportFailed):
            logger.error(f"Transport failed: {event.reason}")
            self.reset()
            return self._publish(ConnectionFailed(reason=event.reason))
        if isinstance(event, Closed):
            logger.info(f"Connection closed (code {event.code})")
            self.reset()
            return self._publish(Disconnected(code=event.code))
        logger.warning(f"Ignoring unexpected transport event {event!r}")
        return None

    def receive(self, raw) -> SessionEvent:
        """Decode a raw frame and handle it."""
        try:
            envelope = decode(raw)
        except DecodeError as e:
            return self._decode_failed(e)
        return self.handle(envelope)

    def handle(self, envelope: Envelope) -> SessionEvent:
        """
        Apply one decoded envelope.

        Args:
            envelope: The decoded frame

        Returns:
            The single event published for this envelope (RejectedMessage
            while LOGGED_OUT or CONNECTING)
        """
        if self.current_state in _OFFLINE_STATES:
            reason = f"no session in {self.current_state.value}"
            logger.warning(
                f"Rejected {envelope.type}: {reason}",
                extra={"session_state": self.current_state.value},
            )
            return self._publish(RejectedMessage(message_type=envelope.type, reason=reason))

        message_type = parse_incoming_type(envelope.type)
        if message_type is None:
            logger.warning(f"Unknown message type: {envelope.type}")
            return self._publish(
                UnknownMessage(message_type=envelope.type, data=envelope.data)
            )

        try:
            event = parse_payload(envelope, INCOMING_EVENT_MODELS[message_type])
        except DecodeError as e:
            return self._decode_failed(e)

        if isinstance(event, RoundStart) and event.round_number <= self.round_number:
            reason = (
                f"round {event.round_number} does not follow round {self.round_number}"
            )
            logger.warning(f"Rejected {envelope.type}: {reason}")
            return self._publish(RejectedMessage(message_type=envelope.type, reason=reason))

        rule = event_rule(message_type)
        if not self._expected(message_type, rule):
            target = rule.target.value if rule.target else self.current_state.value
            logger.warning(
                f"Protocol anomaly: {envelope.type} in {self.current_state.value}, "
                f"forcing {target}",
                extra={"session_state": self.current_state.value},
            )

        self._apply(event)
        if rule.target is not None:
            self.current_state = rule.target
        return self._publish(event)

    def reset(self) -> None:
        """Return to LOGGED_OUT and forget the current game."""
        self.current_state = SessionState.LOGGED_OUT
        self.player_name = None
        self._clear_game()

    # ── internals ─────────────────────────────────────────────

    def _expected(self, message_type: IncomingType, rule: EventRule) -> bool:
        if self.current_state in rule.sources:
            return True
        # make_choice moves to ROUND_RESOLVED ahead of the server's answer
        return (
            message_type is IncomingType.ROUND_RESULT
            and self.current_state == SessionState.ROUND_RESOLVED
            and self.pending_choice is not None
        )

    def _apply(self, event: SessionEvent) -> None:
        if isinstance(event, GameStarting):
            self._clear_game()
            self.opponent_name = event.opponent_name
            logger.info(f"Game starting against {event.opponent_name}")
        elif isinstance(event, RoundStart):
            self.round_number = event.round_number
            self.pending_choice = None
        elif isinstance(event, RoundResult):
            if self.pending_choice is not None and event.your_choice != self.pending_choice:
                logger.warning(
                    f"Server recorded {event.your_choice.value}, "
                    f"sent {self.pending_choice.value}"
                )
            self.pending_choice = None
            self.last_result = event
            self.score = self.score.record(event.result)
        elif isinstance(event, ServerError):
            logger.warning(f"Server error: {event.message}")
        else:
            self.pending_choice = None

    def _disconnect(self, frame: str) -> None:
        if self.transport.is_open:
            self.transport.send(frame)
        self.transport.close()
        logger.info(f"Disconnected from {self.current_state.value}")
        self.reset()

    def _on_opened(self, event: Opened) -> Optional[SessionEvent]:
        if self.current_state != SessionState.CONNECTING:
            logger.warning(f"Connection opened in {self.current_state.value}; ignoring")
            return None
        self.current_state = SessionState.LOBBY
        return self._publish(Connected(url=event.url))

    def _decode_failed(self, error: DecodeError) -> SessionEvent:
        logger.error(f"Dropped malformed frame: {error.reason} ({error.preview()})")
        return self._publish(ServerError(message=""))

    def _publish(self, event: SessionEvent) -> SessionEvent:
        self.events.publish(event)
        return event

    def _clear_game(self) -> None:
        self.opponent_name = None
        self.round_number = 0
        self.pending_choice = None
        self.last_result = None
        self.score = Score()
