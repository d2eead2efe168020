# Area: Shared
"""
rps_client._shared.logging_config — Structured logging setup
============================================================

Configures dual logging: terminal (colored) + file (JSON lines).
Protocol mode suppresses standard logs on the terminal so the console
client can print its own [SEND]/[RECV] lines undisturbed; the log file
keeps everything.
"""

from __future__ import annotations
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "rps_client"
DEFAULT_LOG_FILE = "rps_client.log"

# Package logger
logger = logging.getLogger(PACKAGE_LOGGER)

# Flag to control protocol-only terminal output
_protocol_mode_enabled = False


class ProtocolFilter(logging.Filter):
    """Filter that suppresses terminal logs while protocol mode is enabled."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not _protocol_mode_enabled


def log_area(name: str) -> str:
    """Return the part of a logger name below the package, e.g. "session"."""
    prefix = PACKAGE_LOGGER + "."
    return name[len(prefix):] if name.startswith(prefix) else name


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output.

    Adds ``%(area)s`` (logger name without the package prefix) and colors
    the level name on a copy of the record.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        shown = logging.makeLogRecord(record.__dict__)
        shown.area = log_area(record.name)
        color = self.COLORS.get(record.levelname, self.RESET)
        shown.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(shown)


class JSONFormatter(logging.Formatter):
    """JSON-lines formatter for the log file.

    One object per record, stamped with the record's own creation time.
    A ``session_state`` passed through ``extra`` is kept as a field.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "area": log_area(record.name),
            "message": record.getMessage(),
        }
        session_state = getattr(record, "session_state", None)
        if session_state is not None:
            entry["session_state"] = session_state
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    log_file_path: Optional[str] = DEFAULT_LOG_FILE,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str, optional
        Path to the JSON log file. None disables file logging.
    level : int
        Logging level. Defaults to INFO.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(level)

    # Remove existing handlers
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()

    terminal_handler = logging.StreamHandler(sys.stderr)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(area)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    terminal_handler.addFilter(ProtocolFilter())
    pkg_logger.addHandler(terminal_handler)

    if log_file_path:
        try:
            log_path = Path(log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            pkg_logger.addHandler(file_handler)
        except OSError as e:
            pkg_logger.warning(f"Could not create log file: {e}")

    # Prevent propagation to root logger
    pkg_logger.propagate = False
    return pkg_logger


def enable_protocol_mode() -> None:
    """
    Enable protocol logging mode.

    In protocol mode:
    - Standard logs are suppressed from the terminal
    - Only [SEND]/[RECV] protocol lines are shown
    - File logging remains unchanged for debugging
    """
    global _protocol_mode_enabled
    _protocol_mode_enabled = True


def disable_protocol_mode() -> None:
    """Disable protocol logging mode (restore standard logging)."""
    global _protocol_mode_enabled
    _protocol_mode_enabled = False


def is_protocol_mode_enabled() -> bool:
    """Check if protocol mode is enabled."""
    return _protocol_mode_enabled
