"""Validation failure types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from a2ui.core.validate import FieldIssue


class FailureKind(str, Enum):
    """Distinct, recoverable reasons a component payload is rejected."""

    MALFORMED = "malformed"
    UNKNOWN_COMPONENT = "unknown_component"
    INVALID_FIELDS = "invalid_fields"
    DANGLING_REFERENCE = "dangling_reference"
    UNKNOWN_CATALOG = "unknown_catalog"


@dataclass(frozen=True)
class ValidationFailure:
    """Validation error with details (for Result pattern)."""

    kind: FailureKind
    message: str
    component_id: str | None = None
    component_type: str | None = None
    issues: tuple[FieldIssue, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.component_id is not None:
            data["componentId"] = self.component_id
        if self.component_type is not None:
            data["componentType"] = self.component_type
        if self.issues:
            data["issues"] = [
                {"path": issue.path, "code": issue.code.value, "message": issue.message}
                for issue in self.issues
            ]
        return data
