"""
Protocol Message Codec
Transport-agnostic parsing and encoding of protocol messages.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError as PydanticValidationError
from returns.result import Failure, Result, Success

from a2ui.core.json import (
    JSONDepthError,
    JSONParseError,
    decode_json,
    encode_json,
    validate_json_depth,
    validate_json_size,
)
from a2ui.core.logging_config import get_logger
from a2ui.core.validate import FieldIssue, dump_wire, issues_from_error
from a2ui.monitoring import metrics_collector
from .messages import CLIENT_MESSAGE_TYPES, SERVER_MESSAGE_TYPES, ActionMessage, ServerMessage

logger = get_logger(__name__)

MAX_MESSAGE_SIZE = 512 * 1024  # 512KB
MAX_JSON_DEPTH = 20


class ProtocolErrorKind(str, Enum):
    MALFORMED_JSON = "malformed_json"
    NOT_AN_OBJECT = "not_an_object"
    MISSING_TYPE = "missing_type"
    UNKNOWN_TYPE = "unknown_type"
    UNEXPECTED_DIRECTION = "unexpected_direction"
    INVALID_MESSAGE = "invalid_message"
    TOO_LARGE = "too_large"
    TOO_DEEP = "too_deep"


@dataclass(frozen=True)
class ProtocolError:
    """Message decoding error (for Result pattern)."""

    kind: ProtocolErrorKind
    message: str
    message_type: str | None = None
    issues: tuple[FieldIssue, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.message_type is not None:
            data["messageType"] = self.message_type
        if self.issues:
            data["issues"] = [
                {"path": issue.path, "code": issue.code.value, "message": issue.message}
                for issue in self.issues
            ]
        return data


def _fail(kind: ProtocolErrorKind, message: str, **extra: Any) -> Failure:
    metrics_collector.record_protocol_error(kind.value)
    logger.warning("protocol_rejected", kind=kind.value, detail=message)
    return Failure(ProtocolError(kind=kind, message=message, **extra))


def _envelope(
    raw: Any, max_size: int, max_depth: int, repair: bool
) -> Result[tuple[str, dict[str, Any]], ProtocolError]:
    """Decode to an object and read its ``type``."""
    if isinstance(raw, (str, bytes, bytearray)):
        data = bytes(raw) if isinstance(raw, bytearray) else raw
        try:
            validate_json_size(data, max_size, "Message")
        except JSONParseError as e:
            return _fail(ProtocolErrorKind.TOO_LARGE, str(e))
        try:
            raw = decode_json(data, repair=repair)
        except JSONDepthError as e:
            return _fail(ProtocolErrorKind.TOO_DEEP, str(e))
        except JSONParseError as e:
            return _fail(ProtocolErrorKind.MALFORMED_JSON, str(e))

    if not isinstance(raw, Mapping):
        return _fail(ProtocolErrorKind.NOT_AN_OBJECT, f"Message must be an object, got {type(raw).__name__}")

    try:
        validate_json_depth(raw, max_depth)
    except JSONParseError as e:
        return _fail(ProtocolErrorKind.TOO_DEEP, str(e))

    msg_type = raw.get("type")
    if not isinstance(msg_type, str) or not msg_type:
        return _fail(ProtocolErrorKind.MISSING_TYPE, "Message has no 'type'")
    return Success((msg_type, dict(raw)))


def _parse(model: type[BaseModel], msg_type: str, payload: dict[str, Any]) -> Result[Any, ProtocolError]:
    try:
        return Success(model.model_validate(payload))
    except PydanticValidationError as e:
        issues = issues_from_error(e)
        return _fail(
            ProtocolErrorKind.INVALID_MESSAGE,
            f"Invalid '{msg_type}' message: {len(issues)} issue(s)",
            message_type=msg_type,
            issues=issues,
        )


def decode_message(
    raw: Any,
    max_size: int = MAX_MESSAGE_SIZE,
    max_depth: int = MAX_JSON_DEPTH,
    repair: bool = False,
) -> Result[ServerMessage, ProtocolError]:
    """
    Decode one server-to-client message.

    Args:
        raw: Mapping, or JSON text/bytes for a single message
        max_size: Maximum size of textual input in bytes
        max_depth: Maximum JSON nesting depth
        repair: Attempt to repair malformed JSON text

    Returns:
        Success with a typed message, or Failure with a ProtocolError
    """
    envelope = _envelope(raw, max_size, max_depth, repair)
    if isinstance(envelope, Failure):
        return envelope
    msg_type, payload = envelope.unwrap()

    model = SERVER_MESSAGE_TYPES.get(msg_type)
    if model is not None:
        return _parse(model, msg_type, payload)
    if msg_type in CLIENT_MESSAGE_TYPES:
        return _fail(
            ProtocolErrorKind.UNEXPECTED_DIRECTION,
            f"'{msg_type}' is a client-to-server message",
            message_type=msg_type,
        )
    return _fail(ProtocolErrorKind.UNKNOWN_TYPE, f"Unknown message type '{msg_type}'", message_type=msg_type)


def decode_client_message(
    raw: Any,
    max_size: int = MAX_MESSAGE_SIZE,
    max_depth: int = MAX_JSON_DEPTH,
    repair: bool = False,
) -> Result[ActionMessage, ProtocolError]:
    """Decode one client-to-server message."""
    envelope = _envelope(raw, max_size, max_depth, repair)
    if isinstance(envelope, Failure):
        return envelope
    msg_type, payload = envelope.unwrap()

    model = CLIENT_MESSAGE_TYPES.get(msg_type)
    if model is not None:
        return _parse(model, msg_type, payload)
    if msg_type in SERVER_MESSAGE_TYPES:
        return _fail(
            ProtocolErrorKind.UNEXPECTED_DIRECTION,
            f"'{msg_type}' is a server-to-client message",
            message_type=msg_type,
        )
    return _fail(ProtocolErrorKind.UNKNOWN_TYPE, f"Unknown message type '{msg_type}'", message_type=msg_type)


def encode_message(message: BaseModel) -> str:
    """Encode a message as one compact JSON line (no trailing newline)."""
    return encode_json(dump_wire(message))
