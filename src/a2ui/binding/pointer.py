"""JSON Pointer (RFC 6901) resolution against surface data models.

Resolution is total: any path against any data model yields either the value
at that path or ``UNRESOLVED``. Nothing in this module raises for bad input.
"""

import re
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any


class Unresolved(Enum):
    """Sentinel type for a path that does not lead to a value."""

    TOKEN = "unresolved"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = Unresolved.TOKEN

_INDEX_RE = re.compile(r"^(0|[1-9][0-9]*)$")


def is_root_pointer(path: str) -> bool:
    """Empty string and a lone slash both address the whole data model."""
    return path == "" or path == "/"


def is_valid_pointer(path: Any, allow_relative: bool = False) -> bool:
    """
    Check pointer syntax.

    Absolute pointers start with ``/`` (or are empty for the root) and never
    contain an empty segment (``//``). Relative pointers are only accepted when
    ``allow_relative`` is set; they are resolved against a template scope.
    """
    if not isinstance(path, str):
        return False
    if is_root_pointer(path):
        return True
    if "//" in path:
        return False
    if not path.startswith("/"):
        return allow_relative and not path.endswith("/")
    return not path.endswith("/")


def unescape_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def escape_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def parse_pointer(path: str) -> list[str] | None:
    """
    Split a pointer into unescaped segments.

    Returns:
        Segment list ([] for the root) or None when the syntax is invalid
    """
    if not is_valid_pointer(path, allow_relative=True):
        return None
    if is_root_pointer(path):
        return []
    body = path[1:] if path.startswith("/") else path
    return [unescape_token(token) for token in body.split("/")]


def join_pointer(*segments: str | int) -> str:
    """Build an absolute pointer from raw segments."""
    return "".join(f"/{escape_token(str(segment))}" for segment in segments)


def as_index(segment: str) -> int | None:
    """Canonical non-negative decimal index, or None."""
    if _INDEX_RE.match(segment):
        return int(segment)
    return None


def step(current: Any, segment: str) -> Any:
    """Resolve one segment against one container."""
    if isinstance(current, Mapping):
        return current.get(segment, UNRESOLVED)
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes, bytearray)):
        index = as_index(segment)
        if index is None or index >= len(current):
            return UNRESOLVED
        return current[index]
    # Scalar before the path is exhausted
    return UNRESOLVED


def resolve_pointer(data_model: Any, path: Any, scope: Any = UNRESOLVED) -> Any:
    """
    Resolve a data binding path.

    Args:
        data_model: Surface data model (any JSON value)
        path: Absolute pointer, or a relative pointer when ``scope`` is given
        scope: Template item that relative pointers resolve against

    Returns:
        The value at ``path`` or ``UNRESOLVED``
    """
    segments = parse_pointer(path) if isinstance(path, str) else None
    if segments is None:
        return UNRESOLVED

    if path.startswith("/") or is_root_pointer(path):
        current = data_model
    elif scope is not UNRESOLVED:
        current = scope
    else:
        return UNRESOLVED

    for segment in segments:
        current = step(current, segment)
        if current is UNRESOLVED:
            return UNRESOLVED
    return current
