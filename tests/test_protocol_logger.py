# Area: Shared Tests
"""Tests for protocol logger."""

import io

from rps_client._shared.protocol import IncomingType, OutgoingType
from rps_client._shared.protocol_logger import (
    CYAN,
    EXPECTED_NEXT,
    GREEN,
    RESET,
    ProtocolLogger,
)


class TestExpectedNext:
    """Tests for the expected-next mapping."""

    def test_every_message_type_has_an_entry(self):
        tags = {t.value for t in IncomingType} | {t.value for t in OutgoingType}
        assert tags <= set(EXPECTED_NEXT)

    def test_choice_expects_result(self):
        assert EXPECTED_NEXT["make_choice"] == "round_result"


class TestProtocolLogger:
    """Tests for ProtocolLogger output."""

    def test_log_sent(self):
        stream = io.StringIO()
        ProtocolLogger(stream=stream, color=False).log_sent(
            "join_lobby", '{"type":"join_lobby","data":{"name":"Alice"}}'
        )
        line = stream.getvalue()
        assert "[SEND]" in line
        assert '{"type":"join_lobby","data":{"name":"Alice"}}' in line
        assert "EXPECT: player_waiting" in line

    def test_log_received(self):
        stream = io.StringIO()
        ProtocolLogger(stream=stream, color=False).log_received("round_start", "{...}")
        assert "[RECV] {...}  | NEXT: make_choice" in stream.getvalue()

    def test_unknown_type(self):
        stream = io.StringIO()
        ProtocolLogger(stream=stream, color=False).log_received("spectate", "{}")
        assert "NEXT: Unknown" in stream.getvalue()

    def test_colors(self):
        stream = io.StringIO()
        plog = ProtocolLogger(stream=stream)
        plog.log_sent("play_again", "{}")
        plog.log_received("player_waiting", "{}")
        sent, received = stream.getvalue().splitlines()
        assert sent.startswith(CYAN) and sent.endswith(RESET)
        assert received.startswith(GREEN)

    def test_note_and_error(self):
        stream = io.StringIO()
        plog = ProtocolLogger(stream=stream, color=False)
        plog.log_note("Waiting for opponent...")
        plog.log_error("Connection failed")
        lines = stream.getvalue().splitlines()
        assert lines[0] == "[CLIENT] Waiting for opponent..."
        assert lines[1].startswith("[ERROR]")
        assert lines[1].endswith("| Connection failed")

    def test_defaults_to_stdout(self, capsys):
        ProtocolLogger(color=False).log_note("hi")
        assert capsys.readouterr().out == "[CLIENT] hi\n"
