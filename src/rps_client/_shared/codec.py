# Area: Shared
"""
rps_client._shared.codec — Envelope codec
=========================================

Serializes outgoing commands into the {type, data} wire envelope and
splits inbound frames into (type, raw data text).

Decoding does not parse the payload. It finds the top-level "type"
and "data" keys with a small scanner and returns the data object as the
verbatim substring of the frame, so the session can route on the type
before committing to a payload model. The payload is validated in a
second step with parse_payload().
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..errors import DecodeError
from .protocol import EMPTY_PAYLOAD

logger = logging.getLogger("rps_client.codec")

M = TypeVar("M", bound=BaseModel)

_WHITESPACE = " \t\r\n"


@dataclass(frozen=True)
class Envelope:
    """
    One wire message.

    Attributes:
        type: The message tag, e.g. "round_result"
        data: Unparsed JSON text of the payload object
    """

    type: str
    data: str = EMPTY_PAYLOAD


def encode(command) -> str:
    """
    Serialize a command into a compact wire frame.

    Args:
        command: A rps_client.commands.Command instance

    Returns:
        The frame text, e.g. '{"type":"play_again","data":{}}'
    """
    payload = command.model_dump(mode="json")
    return json.dumps(
        {"type": command.TAG.value, "data": payload},
        separators=(",", ":"),
    )


def decode(raw: Union[str, bytes]) -> Envelope:
    """
    Split a frame into its type tag and verbatim data text.

    Args:
        raw: The frame as received (text or UTF-8 bytes)

    Returns:
        Envelope with the type and the exact data substring
        ("{}" when the frame has no data key or data is null)

    Raises:
        DecodeError: If the frame is not a terminated JSON object, has no
            string "type", or carries a non-object "data" value
    """
    text = _as_text(raw)
    try:
        start = _skip_ws(text, 0)
        if start >= len(text) or text[start] != "{":
            raise ValueError("frame is not a JSON object")
        end = _match_object(text, start)
        if _skip_ws(text, end + 1) != len(text):
            raise ValueError("trailing characters after frame")

        type_pos = _find_key(text, "type", start, end)
        if type_pos is None:
            raise ValueError("missing 'type' key")
        message_type = _read_string(text, type_pos, "type")

        data_pos = _find_key(text, "data", start, end)
        if data_pos is None:
            logger.debug(f"No data key in {message_type} frame")
            return Envelope(message_type, EMPTY_PAYLOAD)
        return Envelope(message_type, _read_object(text, data_pos, end))
    except ValueError as exc:
        raise DecodeError(raw, str(exc)) from None


def parse_payload(envelope: Envelope, model: Type[M]) -> M:
    """
    Validate an envelope's data text against a payload model.

    Raises:
        DecodeError: If the data does not satisfy the model
    """
    try:
        return model.model_validate_json(envelope.data)
    except ValidationError as exc:
        raise DecodeError(
            envelope.data,
            f"invalid {envelope.type} payload ({exc.error_count()} error(s))",
        ) from None


# ══════════════════════════════════════════════════════════════
# SCANNER
# ══════════════════════════════════════════════════════════════

def _as_text(raw: Union[str, bytes]) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            raise DecodeError(raw, "frame is not valid UTF-8") from None
    raise DecodeError(raw, f"unsupported frame type {type(raw).__name__}")


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def _skip_string(text: str, pos: int) -> int:
    """Return the index just past the string literal opening at pos."""
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    raise ValueError("unterminated string")


def _match_object(text: str, pos: int) -> int:
    """Return the index of the brace closing the object opening at pos.

    Braces inside string literals are not counted.
    """
    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch == '"':
            i = _skip_string(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise ValueError("unterminated object")


def _find_key(text: str, key: str, start: int, end: int):
    """Return the value position of a top-level key, or None."""
    depth = 1
    i = start + 1
    while i < end:
        ch = text[i]
        if ch == '"':
            close = _skip_string(text, i)
            if depth == 1:
                colon = _skip_ws(text, close)
                if colon < end and text[colon] == ":" and text[i + 1:close - 1] == key:
                    return _skip_ws(text, colon + 1)
            i = close
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
        i += 1
    return None


def _read_string(text: str, pos: int, key: str) -> str:
    if pos >= len(text) or text[pos] != '"':
        raise ValueError(f"'{key}' is not a string")
    close = _skip_string(text, pos)
    value = text[pos + 1:close - 1]
    if not value:
        raise ValueError(f"'{key}' is empty")
    return value


def _read_object(text: str, pos: int, end: int) -> str:
    if pos >= end:
        raise ValueError("missing 'data' value")
    if text.startswith("null", pos):
        after = _skip_ws(text, pos + 4)
        if after > end or text[after] not in ",}":
            raise ValueError("'data' is not an object")
        return EMPTY_PAYLOAD
    if text[pos] != "{":
        raise ValueError("'data' is not an object")
    close = _match_object(text, pos)
    return text[pos:close + 1]
