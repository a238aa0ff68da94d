"""Fast JSON decoding and encoding for untrusted protocol payloads."""

from typing import Any
import json

import msgspec
import orjson
from json_repair import repair_json


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class JSONDepthError(JSONParseError):
    """JSON nesting is deeper than allowed or than the decoder can follow."""


_decoder = msgspec.json.Decoder()


def decode_json(data: str | bytes, repair: bool = False) -> Any:
    """
    Decode a single JSON document.

    Args:
        data: JSON text
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Decoded value (any JSON type)

    Raises:
        JSONParseError: If decoding fails
        JSONDepthError: If nesting overflows the decoder
    """
    # Lone surrogates become invalid UTF-8 and fail below as malformed input
    raw = data.encode("utf-8", errors="surrogatepass") if isinstance(data, str) else data

    # msgspec first (fastest)
    try:
        return _decoder.decode(raw)
    except RecursionError as e:
        raise JSONDepthError("JSON nesting exceeds decoder recursion limit", e)
    except (msgspec.DecodeError, ValueError) as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e)

    # Last resort: json_repair. It returns "" for hopeless input.
    try:
        repaired = repair_json(raw.decode("utf-8", errors="replace"))
        if not repaired or repaired == '""':
            raise JSONParseError("JSON repair produced no document")
        return json.loads(repaired)
    except JSONParseError:
        raise
    except RecursionError as e:
        raise JSONDepthError("Repaired JSON nesting exceeds decoder recursion limit", e)
    except Exception as repair_error:
        raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error)


def encode_json(obj: Any) -> str:
    """
    Encode object to a compact single-line JSON string.

    Args:
        obj: Object to encode

    Returns:
        JSON string
    """
    try:
        return orjson.dumps(obj).decode("utf-8")
    except TypeError:
        # Fallback for edge cases (e.g., integers outside 64-bit range)
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def validate_json_size(data: str | bytes, max_size: int, name: str = "JSON") -> None:
    """
    Validate payload size to prevent DoS attacks.

    Args:
        data: Payload to validate
        max_size: Maximum allowed size in bytes
        name: Name for error messages

    Raises:
        JSONParseError: If size exceeds limit
    """
    size = len(data.encode("utf-8", errors="surrogatepass")) if isinstance(data, str) else len(data)
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = 20, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth to prevent stack overflow.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONDepthError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
