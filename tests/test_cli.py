# Area: Client Tests
"""Tests for the developer console client."""

import io

import pytest

from rps_client import GameClient
from rps_client._config import ENV_MAPPINGS
from rps_client._session import SessionState
from rps_client._shared.protocol_logger import ProtocolLogger
from rps_client._shared.transport import Closed, MessageReceived, TransportFailed
from rps_client.cli import ConsoleClient, build_config, interpret_input, main, parse_args
from rps_client.commands import Disconnect, MakeChoice, PlayAgain
from rps_client.errors import ConnectError, ConnectFailure
from rps_client.types import Choice

URL = "ws://localhost:8080/ws"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in ENV_MAPPINGS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def console(transport, output):
    client = GameClient(URL, transport=transport)
    return ConsoleClient(client, "Alice", protocol_logger=ProtocolLogger(stream=output, color=False))


def start_round(console, transport):
    console.client.connect()
    transport.open(URL)
    transport.deliver(MessageReceived(b'{"type":"game_starting","data":{"opponent_name":"Bob"}}'))
    transport.deliver(MessageReceived(b'{"type":"round_start","data":{"round_number":1}}'))


class TestInterpretInput:
    """Tests for mapping console lines to commands."""

    @pytest.mark.parametrize(
        "line,choice",
        [("1", Choice.ROCK), ("2", Choice.PAPER), ("3\n", Choice.SCISSORS), ("Rock", Choice.ROCK)],
    )
    def test_choices_in_round(self, line, choice):
        assert interpret_input(line, SessionState.IN_ROUND) == MakeChoice(choice=choice)

    def test_invalid_choice(self):
        with pytest.raises(ValueError, match="1=rock, 2=paper, 3=scissors"):
            interpret_input("4", SessionState.IN_ROUND)

    def test_play_after_game(self):
        assert interpret_input("play", SessionState.GAME_OVER) == PlayAgain()

    def test_choice_after_game_is_not_a_command(self):
        with pytest.raises(ValueError, match="play, quit"):
            interpret_input("1", SessionState.GAME_OVER)

    @pytest.mark.parametrize("word", ["quit", "exit", "q", " QUIT "])
    def test_quit_words(self, word):
        assert interpret_input(word, SessionState.WAITING) == Disconnect()

    def test_nothing_to_do_while_waiting(self):
        with pytest.raises(ValueError, match="WAITING"):
            interpret_input("1", SessionState.WAITING)


class TestBuildConfig:
    """Tests for command line overrides."""

    def test_name_and_server(self):
        config = build_config(parse_args(["--name", "Alice", "--server", "games.example.org"]))
        assert config["player_name"] == "Alice"
        assert config["server"] == "games.example.org"
        assert config["force_insecure"] is False

    def test_http_flag(self):
        config = build_config(parse_args(["--server", "games.example.org", "--http"]))
        assert config["force_insecure"] is True

    def test_server_flag_wins_over_env_url(self, monkeypatch):
        monkeypatch.setenv("RPS_SERVER_URL", "ws://old.example.org/ws")
        config = build_config(parse_args(["--server", "localhost:9000"]))
        assert config["server_url"] is None

    def test_url_and_timeout(self):
        config = build_config(parse_args(["--url", "ws://10.0.0.5:8080/ws", "--timeout", "2"]))
        assert config["server_url"] == "ws://10.0.0.5:8080/ws"
        assert config["connect_timeout"] == 2.0


class TestConsoleClient:
    """Tests for the console session flow."""

    def test_joins_lobby_when_connected(self, console, transport, output):
        console.client.connect()
        transport.open(URL)

        assert transport.sent == ['{"type":"join_lobby","data":{"name":"Alice"}}']
        text = output.getvalue()
        assert "[CLIENT] Connected!" in text
        assert '[SEND] {"type":"join_lobby","data":{"name":"Alice"}}' in text

    def test_prints_received_frames(self, console, transport, output):
        start_round(console, transport)
        text = output.getvalue()
        assert '[RECV] {"type":"game_starting","data":{"opponent_name":"Bob"}}' in text
        assert "Game starting against Bob" in text
        assert "Round 1 - Enter your choice" in text

    def test_choice_from_input(self, console, transport):
        start_round(console, transport)
        console.feed("2\n")
        console.process_input()
        assert transport.sent[-1] == '{"type":"make_choice","data":{"choice":"paper"}}'
        assert console.client.state == SessionState.ROUND_RESOLVED

    def test_invalid_input_prints_hint(self, console, transport, output):
        start_round(console, transport)
        console.feed("lizard\n")
        console.process_input()
        assert "Invalid choice 'lizard'" in output.getvalue()
        assert console.client.state == SessionState.IN_ROUND

    def test_rejected_command_prints_error(self, console, transport, output):
        start_round(console, transport)
        console.send(PlayAgain())
        assert "[ERROR]" in output.getvalue()
        assert "Invalid transition: play_again from IN_ROUND" in output.getvalue()

    def test_round_and_game_notes(self, console, transport, output):
        start_round(console, transport)
        console.feed("1")
        console.process_input()
        transport.deliver(MessageReceived(
            b'{"type":"round_result","data":{"result":"win","your_choice":"rock","opponent_choice":"scissors"}}'
        ))
        transport.deliver(MessageReceived(b'{"type":"game_ended","data":{"result":"win"}}'))

        text = output.getvalue()
        assert "You win! You: rock | Opponent: scissors (score 1-0)" in text
        assert "Game over! You win (1-0)" in text
        assert console.client.state == SessionState.GAME_OVER

    def test_malformed_frame_is_reported(self, console, transport, output):
        start_round(console, transport)
        transport.deliver(MessageReceived(b"garbage"))
        text = output.getvalue()
        assert "[RECV] garbage" in text
        assert "Server error: malformed message" in text

    def test_quit_disconnects(self, console, transport):
        start_round(console, transport)
        console.feed("quit")
        console.process_input()
        assert transport.sent[-1] == '{"type":"disconnect","data":{}}'
        assert console.client.state == SessionState.LOGGED_OUT

    def test_connection_failure_before_open_sets_exit_code(self, console, transport):
        console.client.connect()
        transport.deliver(TransportFailed("refused"))
        assert console.exit_code == 1

    def test_closed_after_play_keeps_exit_code(self, console, transport, output):
        start_round(console, transport)
        transport.deliver(Closed(1001))
        assert console.exit_code == 0
        assert "Connection closed (code 1001)" in output.getvalue()


class TestRun:
    """Tests for ConsoleClient.run()."""

    def test_quit_from_input_stream_ends_run(self, transport, output):
        client = GameClient(URL, transport=transport)
        console = ConsoleClient(
            client,
            "Alice",
            protocol_logger=ProtocolLogger(stream=output, color=False),
            input_stream=io.StringIO("quit\n"),
        )
        assert console.run(poll_interval=0.01) == 0
        assert client.state == SessionState.LOGGED_OUT
        assert transport.close_calls == 1

    def test_connect_error_returns_one(self, transport, output):
        transport.connect_error = ConnectError(URL, ConnectFailure.REFUSED, "nope")
        client = GameClient(URL, transport=transport)
        console = ConsoleClient(client, "Alice", protocol_logger=ProtocolLogger(stream=output, color=False))
        assert console.run(poll_interval=0.01) == 1
        assert "Could not connect" in output.getvalue()


class TestMain:
    """Tests for main() error handling."""

    def test_missing_name(self, capsys):
        assert main(["--server", "localhost:8080"]) == 1
        assert "Missing player name" in capsys.readouterr().err

    def test_bad_url(self, capsys, tmp_path):
        code = main([
            "--name", "Alice",
            "--url", "http://localhost:8080/ws",
            "--log-file", str(tmp_path / "client.log"),
        ])
        assert code == 1
        assert "scheme must be ws or wss" in capsys.readouterr().err

    def test_missing_config_file(self, capsys):
        assert main(["--name", "Alice", "--config", "missing.json"]) == 1
        assert "file not found" in capsys.readouterr().err

    def test_config_file_without_object(self, capsys, tmp_path):
        path = tmp_path / "client.json"
        path.write_text('["localhost:8080"]')
        assert main(["--name", "Alice", "--config", str(path)]) == 1
        assert "must hold a JSON object" in capsys.readouterr().err
