"""Deep assignment into a JSON data model by pointer segments."""

from copy import deepcopy
from typing import Any

from a2ui.binding.pointer import as_index, is_valid_pointer, parse_pointer

APPEND_TOKEN = "-"


class PathConflict(Exception):
    """A path segment runs into a value that cannot hold children."""

    def __init__(self, message: str, depth: int) -> None:
        super().__init__(message)
        self.depth = depth


def _list_slot(container: list[Any], segment: str, depth: int) -> int:
    if segment == APPEND_TOKEN:
        return len(container)
    index = as_index(segment)
    if index is None:
        raise PathConflict(f"'{segment}' is not an index into a list", depth)
    if index > len(container):
        raise PathConflict(f"index {index} is past the end of a list of {len(container)}", depth)
    return index


def _descend(container: Any, segment: str, depth: int) -> Any:
    """Child container at ``segment``, created as an object when missing."""
    if isinstance(container, dict):
        if segment not in container:
            container[segment] = {}
        child = container[segment]
    elif isinstance(container, list):
        slot = _list_slot(container, segment, depth)
        if slot == len(container):
            container.append({})
        child = container[slot]
    else:
        raise PathConflict(f"cannot descend into {type(container).__name__}", depth)

    if not isinstance(child, (dict, list)):
        raise PathConflict(f"segment '{segment}' holds a {type(child).__name__}", depth + 1)
    return child


def _assign(container: Any, segment: str, value: Any, depth: int) -> None:
    if isinstance(container, dict):
        container[segment] = value
    elif isinstance(container, list):
        slot = _list_slot(container, segment, depth)
        if slot == len(container):
            container.append(value)
        else:
            container[slot] = value
    else:
        raise PathConflict(f"cannot assign into {type(container).__name__}", depth)


def set_at_path(model: Any, path: str, value: Any) -> Any:
    """
    Return a copy of ``model`` with ``value`` written at ``path``.

    The input model is never modified. The root path replaces the model.
    Missing intermediate segments are created as objects; ``-`` or the
    current length appends to a list.

    Raises:
        ValueError: If ``path`` is not a valid absolute pointer
        PathConflict: If a segment runs into a scalar or an impossible index
    """
    if not is_valid_pointer(path):
        raise ValueError(f"invalid pointer '{path}'")
    segments = parse_pointer(path)
    if not segments:
        return deepcopy(value)

    updated = deepcopy(model)
    current = updated
    for depth, segment in enumerate(segments[:-1]):
        current = _descend(current, segment, depth)
    _assign(current, segments[-1], deepcopy(value), len(segments) - 1)
    return updated
