"""
Surface Store
Session-wide registry of surfaces with serialized, copy-on-write mutation.
"""

import threading
import time
from collections.abc import Callable, Iterable
from copy import deepcopy
from dataclasses import replace
from types import MappingProxyType
from typing import Any

from returns.result import Failure, Result, Success

from a2ui.catalog import STANDARD_CATALOG_ID
from a2ui.core.config import RetentionPolicy
from a2ui.core.logging_config import get_logger
from a2ui.monitoring import metrics_collector
from a2ui.validation import SchemaValidator
from .models import (
    ChangeKind,
    ComponentDiff,
    ComponentEntry,
    InvalidComponent,
    StoreChange,
    StoreError,
    StoreErrorKind,
    Surface,
)
from .patch import PathConflict, set_at_path

logger = get_logger(__name__)

Listener = Callable[[StoreChange], None]


class SurfaceStore:
    """
    Owns every surface of a session.

    Mutations run under a re-entrant lock and swap in a fresh ``Surface``
    snapshot; readers only ever see complete snapshots. Listeners are
    called after the swap, outside the lock.
    """

    def __init__(
        self,
        validator: SchemaValidator | None = None,
        max_surfaces: int = 10,
        retention_policy: RetentionPolicy = RetentionPolicy.REJECT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_surfaces < 1:
            raise ValueError(f"max_surfaces must be at least 1, got {max_surfaces}")
        self.validator = validator or SchemaValidator()
        self.max_surfaces = max_surfaces
        self.retention_policy = RetentionPolicy(retention_policy)
        self._clock = clock
        self._lock = threading.RLock()
        self._surfaces: dict[str, Surface] = {}
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_surface(
        self,
        surface_id: str,
        catalog_id: str = STANDARD_CATALOG_ID,
        theme: Any = None,
        send_data_model: bool = False,
    ) -> Result[Surface, StoreError]:
        """
        Create an empty surface.

        Returns:
            Success with the new snapshot, or Failure with ``surface_exists``,
            ``unknown_catalog`` or ``capacity_exceeded``
        """
        changes: list[StoreChange] = []
        with self._lock:
            if surface_id in self._surfaces:
                return self._fail(
                    StoreErrorKind.SURFACE_EXISTS,
                    f"Surface '{surface_id}' already exists",
                    surface_id,
                )
            if catalog_id not in self.validator.registry:
                return self._fail(
                    StoreErrorKind.UNKNOWN_CATALOG,
                    f"Unknown catalog '{catalog_id}'",
                    surface_id,
                )
            if len(self._surfaces) >= self.max_surfaces:
                if self.retention_policy is RetentionPolicy.REJECT:
                    return self._fail(
                        StoreErrorKind.CAPACITY_EXCEEDED,
                        f"Maximum of {self.max_surfaces} surfaces reached",
                        surface_id,
                    )
                victim = self._least_recently_updated()
                evicted = self._surfaces.pop(victim)
                metrics_collector.record_eviction()
                logger.info("surface_evicted", surface_id=victim, policy=self.retention_policy.value)
                changes.append(StoreChange(ChangeKind.EVICTED, victim, evicted))

            now = self._clock()
            surface = Surface(
                surface_id=surface_id,
                catalog_id=catalog_id,
                theme=theme,
                send_data_model=send_data_model,
                data_model={},
                created_at=now,
                updated_at=now,
            )
            self._surfaces[surface_id] = surface
            metrics_collector.set_live_surfaces(len(self._surfaces))
            changes.append(StoreChange(ChangeKind.CREATED, surface_id, surface))

        logger.info("surface_created", surface_id=surface_id, catalog_id=catalog_id)
        self._notify(changes)
        return Success(surface)

    def upsert_components(
        self, surface_id: str, components: Iterable[Any]
    ) -> Result[ComponentDiff, StoreError]:
        """
        Validate and merge components by id.

        Invalid payloads that carry an id are stored as ``InvalidComponent``
        so the renderer can substitute a placeholder for exactly that id;
        payloads without a usable id are reported in ``rejected``.
        """
        # Detached from the caller so later edits to its payload cannot reach a snapshot
        raws = deepcopy(list(components))
        with self._lock:
            surface = self._surfaces.get(surface_id)
            if surface is None:
                return self._not_found(surface_id)

            staged: dict[str, ComponentEntry] = dict(surface.components)
            touched: dict[str, None] = {}
            rejected = []
            results = self.validator.validate_components(raws, surface.catalog_id)
            for raw, result in zip(raws, results):
                if isinstance(result, Success):
                    entry: ComponentEntry = result.unwrap()
                else:
                    failure = result.failure()
                    if failure.component_id is None:
                        rejected.append(failure)
                        continue
                    entry = InvalidComponent(id=failure.component_id, raw=raw, failure=failure)
                staged[entry.id] = entry
                touched[entry.id] = None

            added, updated, unchanged, invalid = [], [], [], []
            for component_id in touched:
                previous = surface.components.get(component_id)
                current = staged[component_id]
                if previous is None:
                    added.append(component_id)
                elif previous == current:
                    unchanged.append(component_id)
                else:
                    updated.append(component_id)
                if isinstance(current, InvalidComponent):
                    invalid.append(component_id)

            diff = ComponentDiff(
                added=tuple(added),
                updated=tuple(updated),
                unchanged=tuple(unchanged),
                invalid=tuple(invalid),
                rejected=tuple(rejected),
            )
            if not diff.changed:
                return Success(diff)

            surface = self._swap(surface, components=MappingProxyType(staged))

        logger.debug(
            "components_upserted",
            surface_id=surface_id,
            added=len(diff.added),
            updated=len(diff.updated),
            invalid=len(diff.invalid),
            rejected=len(diff.rejected),
        )
        self._notify([StoreChange(ChangeKind.COMPONENTS, surface_id, surface)])
        return Success(diff)

    def patch_data_model(self, surface_id: str, path: str, value: Any) -> Result[Surface, StoreError]:
        """
        Write ``value`` at ``path`` in the surface data model.

        On failure the stored model is left exactly as it was.
        """
        with self._lock:
            surface = self._surfaces.get(surface_id)
            if surface is None:
                return self._not_found(surface_id)
            try:
                data_model = set_at_path(surface.data_model, path, value)
            except ValueError:
                return self._fail(
                    StoreErrorKind.INVALID_PATH, f"Invalid data model path '{path}'", surface_id, path
                )
            except PathConflict as e:
                return self._fail(StoreErrorKind.PATH_CONFLICT, str(e), surface_id, path)
            surface = self._swap(surface, data_model=data_model)

        logger.debug("data_model_patched", surface_id=surface_id, path=path)
        self._notify([StoreChange(ChangeKind.DATA_MODEL, surface_id, surface)])
        return Success(surface)

    def evict(self, surface_id: str) -> bool:
        """Drop a surface. Returns False if it did not exist."""
        with self._lock:
            surface = self._surfaces.pop(surface_id, None)
            if surface is None:
                return False
            metrics_collector.set_live_surfaces(len(self._surfaces))
        logger.info("surface_evicted", surface_id=surface_id, policy="host")
        self._notify([StoreChange(ChangeKind.EVICTED, surface_id, surface)])
        return True

    def clear(self) -> None:
        with self._lock:
            self._surfaces.clear()
            metrics_collector.set_live_surfaces(0)
        self._notify([StoreChange(ChangeKind.CLEARED, None)])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_surface(self, surface_id: str) -> Surface | None:
        with self._lock:
            return self._surfaces.get(surface_id)

    def get_all_surface_ids(self) -> list[str]:
        """Surface ids in creation order."""
        with self._lock:
            return list(self._surfaces)

    def has_surface(self, surface_id: str) -> bool:
        with self._lock:
            return surface_id in self._surfaces

    def surface_count(self) -> int:
        with self._lock:
            return len(self._surfaces)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, changes: list[StoreChange]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for change in changes:
            for listener in listeners:
                try:
                    listener(change)
                except Exception as e:
                    logger.error(
                        "listener_failed",
                        change=change.kind.value,
                        surface_id=change.surface_id,
                        error=str(e),
                        exc_info=True,
                    )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _swap(self, surface: Surface, **changes: Any) -> Surface:
        updated = replace(
            surface,
            updated_at=self._clock(),
            revision=surface.revision + 1,
            **changes,
        )
        self._surfaces[surface.surface_id] = updated
        return updated

    def _least_recently_updated(self) -> str:
        # min() keeps the first of equal keys, so ties go to the oldest surface
        return min(self._surfaces.values(), key=lambda s: s.updated_at).surface_id

    def _not_found(self, surface_id: str) -> Result[Any, StoreError]:
        return self._fail(
            StoreErrorKind.SURFACE_NOT_FOUND, f"Surface '{surface_id}' does not exist", surface_id
        )

    def _fail(
        self, kind: StoreErrorKind, message: str, surface_id: str | None = None, path: str | None = None
    ) -> Result[Any, StoreError]:
        metrics_collector.record_store_error(kind.value)
        logger.warning("store_rejected", kind=kind.value, surface_id=surface_id, path=path)
        return Failure(StoreError(kind=kind, message=message, surface_id=surface_id, path=path))
