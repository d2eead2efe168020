"""Shared fixtures."""

import logging

import pytest

from rps_client._shared.logging_config import PACKAGE_LOGGER, disable_protocol_mode
from rps_client._shared.transport import Opened
from rps_client.errors import NotOpenError
from rps_client.types import ConnectionState


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog sees package records in every test."""
    yield
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.setLevel(logging.NOTSET)
    pkg_logger.propagate = True
    disable_protocol_mode()


class FakeTransport:
    """In-memory stand-in for WebSocketTransport."""

    def __init__(self):
        self.state = ConnectionState.DISCONNECTED
        self.sent = []
        self.connected_to = []
        self.close_calls = 0
        self.shutdown_calls = 0
        self.listener = None
        self.connect_error = None

    @property
    def is_open(self):
        return self.state == ConnectionState.OPEN

    def set_listener(self, listener):
        self.listener = listener

    def connect(self, url):
        if self.connect_error is not None:
            raise self.connect_error
        self.connected_to.append(url)
        self.state = ConnectionState.CONNECTING

    def send(self, text):
        if not self.is_open:
            raise NotOpenError(self.state)
        self.sent.append(text)

    def close(self):
        self.close_calls += 1
        self.state = ConnectionState.CLOSED

    def shutdown(self, timeout=2.0):
        self.shutdown_calls += 1
        self.close()

    def drain(self):
        return []

    # ── test helpers ──

    def deliver(self, event):
        return self.listener(event)

    def open(self, url="ws://localhost:8080/ws"):
        self.state = ConnectionState.OPEN
        return self.deliver(Opened(url))


@pytest.fixture
def transport():
    return FakeTransport()
