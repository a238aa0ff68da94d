"""Action dispatch errors."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ActionErrorKind(str, Enum):
    DEBOUNCED = "debounced"
    SURFACE_NOT_FOUND = "surface_not_found"
    COMPONENT_NOT_FOUND = "component_not_found"
    NO_ACTION = "no_action"
    SINK_FAILED = "sink_failed"
    FUNCTION_FAILED = "function_failed"


@dataclass(frozen=True)
class ActionError:
    """Action dispatch error (for Result pattern)."""

    kind: ActionErrorKind
    message: str
    surface_id: str | None = None
    component_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.surface_id is not None:
            data["surfaceId"] = self.surface_id
        if self.component_id is not None:
            data["componentId"] = self.component_id
        return data
