# Area: Shared Tests
"""Tests for configuration loading and server url handling."""

import json

import pytest

from rps_client._config import (
    DEFAULT_SERVER,
    ENV_MAPPINGS,
    build_server_url,
    load_config,
    resolve_server_url,
    validate_server_url,
)
from rps_client.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from RPS_* variables and any .env file."""
    for key in ENV_MAPPINGS:
        # set then delete so teardown removes anything load_dotenv() adds
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults(self):
        config = load_config()
        assert config["server"] == DEFAULT_SERVER
        assert config["server_url"] is None
        assert config["player_name"] is None
        assert config["connect_timeout"] == 10.0
        assert config["force_insecure"] is False

    def test_json_file(self, tmp_path):
        path = tmp_path / "client.json"
        path.write_text(json.dumps({"player_name": "Alice", "connect_timeout": 3}))
        config = load_config(str(path))
        assert config["player_name"] == "Alice"
        assert config["connect_timeout"] == 3.0

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "client.json"
        path.write_text(json.dumps({"player_name": "Alice"}))
        monkeypatch.setenv("RPS_PLAYER_NAME", "Bob")
        monkeypatch.setenv("RPS_FORCE_HTTP", "yes")
        config = load_config(str(path))
        assert config["player_name"] == "Bob"
        assert config["force_insecure"] is True

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("RPS_SERVER=games.example.org\nRPS_CONNECT_TIMEOUT=2.5\n")
        config = load_config(env_file=str(env_file))
        assert config["server"] == "games.example.org"
        assert config["connect_timeout"] == 2.5

    def test_missing_file(self):
        with pytest.raises(ConfigError) as exc_info:
            load_config("nope.json")
        assert exc_info.value.key == "config"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(str(path))

    @pytest.mark.parametrize("content", ["[1, 2]", "\"localhost:9000\"", "42"])
    def test_file_must_hold_an_object(self, tmp_path, content):
        path = tmp_path / "client.json"
        path.write_text(content)
        with pytest.raises(ConfigError) as exc_info:
            load_config(str(path))
        assert exc_info.value.key == "config"
        assert "JSON object" in str(exc_info.value)

    def test_directory_is_unreadable(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(str(tmp_path))
        assert exc_info.value.key == "config"

    def test_invalid_utf8_file(self, tmp_path):
        path = tmp_path / "client.json"
        path.write_bytes(b'{"server": "\xff"}')
        with pytest.raises(ConfigError) as exc_info:
            load_config(str(path))
        assert exc_info.value.key == "config"

    @pytest.mark.parametrize("value", ["abc", "0", "-1"])
    def test_bad_timeout(self, monkeypatch, value):
        monkeypatch.setenv("RPS_CONNECT_TIMEOUT", value)
        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert exc_info.value.key == "connect_timeout"


class TestBuildServerUrl:
    """Tests for deriving ws/wss urls from a host."""

    @pytest.mark.parametrize(
        "server,expected",
        [
            ("localhost:8080", "ws://localhost:8080/ws"),
            ("127.0.0.1:9000", "ws://127.0.0.1:9000/ws"),
            ("gameserver", "ws://gameserver/ws"),
            ("games.example.org", "wss://games.example.org/ws"),
            ("games.example.org:443", "wss://games.example.org:443/ws"),
        ],
    )
    def test_scheme_from_host(self, server, expected):
        assert build_server_url(server) == expected

    def test_force_insecure(self):
        assert build_server_url("games.example.org", force_insecure=True) == "ws://games.example.org/ws"

    def test_existing_scheme_is_kept(self):
        assert build_server_url("ws://10.0.0.5:8080/play") == "ws://10.0.0.5:8080/play"


class TestValidateServerUrl:
    """Tests for validate_server_url() and resolve_server_url()."""

    def test_accepts_ws_and_wss(self):
        assert validate_server_url("ws://localhost:8080/ws") == "ws://localhost:8080/ws"
        assert validate_server_url("wss://games.example.org/ws") == "wss://games.example.org/ws"

    @pytest.mark.parametrize("url", ["http://localhost/ws", "localhost:8080", "ws:///ws", ""])
    def test_rejects(self, url):
        with pytest.raises(ConfigError):
            validate_server_url(url)

    def test_resolve_prefers_explicit_url(self):
        config = {"server": "games.example.org", "server_url": "ws://localhost:9000/ws"}
        assert resolve_server_url(config) == "ws://localhost:9000/ws"

    def test_resolve_from_server(self):
        config = {"server": "games.example.org", "server_url": None, "force_insecure": True}
        assert resolve_server_url(config) == "ws://games.example.org/ws"
