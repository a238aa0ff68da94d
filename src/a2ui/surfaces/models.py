"""Surface snapshots, component entries and store results."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from a2ui.catalog import ComponentBase, FallbackReason
from a2ui.validation import FailureKind, ValidationFailure

ROOT_COMPONENT_ID = "root"


@dataclass(frozen=True)
class InvalidComponent:
    """A component id whose latest payload failed validation."""

    id: str
    raw: Any
    failure: ValidationFailure
    reason: FallbackReason | None = None

    @property
    def tag(self) -> str | None:
        return self.failure.component_type

    @property
    def fallback_reason(self) -> FallbackReason:
        """Placeholder reason; an explicit reason wins over the failure kind."""
        if self.reason is not None:
            return self.reason
        if self.failure.kind is FailureKind.UNKNOWN_COMPONENT:
            return FallbackReason.UNKNOWN_COMPONENT
        if self.failure.kind is FailureKind.MALFORMED:
            return FallbackReason.MALFORMED
        return FallbackReason.INVALID_FIELDS


ComponentEntry = Union[ComponentBase, InvalidComponent]


@dataclass(frozen=True)
class Surface:
    """
    Immutable snapshot of one surface.

    The store replaces snapshots wholesale on every mutation; a snapshot
    handed to a reader never changes afterwards. ``data_model`` is shared
    with the store and must be treated as read-only.
    """

    surface_id: str
    catalog_id: str
    theme: Any = None
    send_data_model: bool = False
    components: Mapping[str, ComponentEntry] = field(default_factory=lambda: MappingProxyType({}))
    data_model: Any = field(default_factory=dict)
    created_at: float = 0.0
    updated_at: float = 0.0
    revision: int = 0

    @property
    def root_id(self) -> str | None:
        """``root`` if present, else the id equal to the surface id, else the first inserted."""
        if ROOT_COMPONENT_ID in self.components:
            return ROOT_COMPONENT_ID
        if self.surface_id in self.components:
            return self.surface_id
        return next(iter(self.components), None)

    @property
    def has_root(self) -> bool:
        return self.root_id is not None

    def get(self, component_id: str) -> ComponentEntry | None:
        return self.components.get(component_id)

    def valid_components(self) -> dict[str, ComponentBase]:
        return {
            cid: entry for cid, entry in self.components.items() if isinstance(entry, ComponentBase)
        }

    def invalid_components(self) -> dict[str, InvalidComponent]:
        return {
            cid: entry for cid, entry in self.components.items() if isinstance(entry, InvalidComponent)
        }


@dataclass(frozen=True)
class ComponentDiff:
    """Outcome of merging one batch of components into a surface."""

    added: tuple[str, ...] = ()
    updated: tuple[str, ...] = ()
    unchanged: tuple[str, ...] = ()
    invalid: tuple[str, ...] = ()
    rejected: tuple[ValidationFailure, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated)

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": list(self.added),
            "updated": list(self.updated),
            "unchanged": list(self.unchanged),
            "invalid": list(self.invalid),
            "rejected": [failure.to_dict() for failure in self.rejected],
        }


class StoreErrorKind(str, Enum):
    SURFACE_EXISTS = "surface_exists"
    SURFACE_NOT_FOUND = "surface_not_found"
    UNKNOWN_CATALOG = "unknown_catalog"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    PATH_CONFLICT = "path_conflict"
    INVALID_PATH = "invalid_path"


@dataclass(frozen=True)
class StoreError:
    """Store operation error (for Result pattern)."""

    kind: StoreErrorKind
    message: str
    surface_id: str | None = None
    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.surface_id is not None:
            data["surfaceId"] = self.surface_id
        if self.path is not None:
            data["path"] = self.path
        return data


class ChangeKind(str, Enum):
    CREATED = "created"
    COMPONENTS = "components"
    DATA_MODEL = "data_model"
    EVICTED = "evicted"
    CLEARED = "cleared"


@dataclass(frozen=True)
class StoreChange:
    """Notification delivered to store listeners after a mutation."""

    kind: ChangeKind
    surface_id: str | None
    surface: Surface | None = None
