"""
Surfaces
Surface snapshots, the session store and snapshot persistence
"""

from .models import (
    ChangeKind,
    ComponentDiff,
    ComponentEntry,
    InvalidComponent,
    ROOT_COMPONENT_ID,
    StoreChange,
    StoreError,
    StoreErrorKind,
    Surface,
)
from .patch import PathConflict, set_at_path
from .snapshot import dump_surface, dumps_surface, load_surface, loads_surface
from .store import Listener, SurfaceStore

__all__ = [
    "ChangeKind",
    "ComponentDiff",
    "ComponentEntry",
    "InvalidComponent",
    "ROOT_COMPONENT_ID",
    "StoreChange",
    "StoreError",
    "StoreErrorKind",
    "Surface",
    "PathConflict",
    "set_at_path",
    "dump_surface",
    "dumps_surface",
    "load_surface",
    "loads_surface",
    "Listener",
    "SurfaceStore",
]
