"""Tests for the surface store."""

import itertools
import threading

import orjson
import pytest
from returns.result import Failure, Success

from a2ui.catalog import Text
from a2ui.core.config import RetentionPolicy
from a2ui.surfaces import (
    ChangeKind,
    InvalidComponent,
    PathConflict,
    StoreErrorKind,
    SurfaceStore,
    set_at_path,
)


def ticking_clock():
    counter = itertools.count(1)
    return lambda: float(next(counter))


# ============================================================================
# Lifecycle
# ============================================================================

@pytest.mark.unit
def test_create_surface(store):
    """Test creating an empty surface."""
    surface = store.create_surface("s1", "standard", theme="noir", send_data_model=True).unwrap()
    assert surface.surface_id == "s1"
    assert surface.data_model == {}
    assert surface.components == {}
    assert surface.send_data_model is True
    assert surface.root_id is None
    assert store.has_surface("s1")


@pytest.mark.unit
def test_duplicate_surface_rejected(surface_s1):
    """Test a second create with the same id fails and keeps the first."""
    store = surface_s1
    store.upsert_components("s1", [{"id": "t1", "component": "Text", "text": "first"}])
    store.patch_data_model("s1", "/a", 1)
    before = store.get_surface("s1")

    result = store.create_surface("s1", "standard")
    assert isinstance(result, Failure)
    assert result.failure().kind is StoreErrorKind.SURFACE_EXISTS
    assert store.get_surface("s1") is before


@pytest.mark.unit
def test_concurrent_create_only_one_wins(store):
    """Test racing creates: exactly one succeeds."""
    results = []
    barrier = threading.Barrier(8)

    def create():
        barrier.wait()
        results.append(store.create_surface("race", "standard"))

    threads = [threading.Thread(target=create) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sum(isinstance(result, Success) for result in results) == 1
    assert store.surface_count() == 1


@pytest.mark.unit
def test_unknown_catalog(store):
    """Test surfaces must name a registered catalog."""
    assert store.create_surface("s", "nope").failure().kind is StoreErrorKind.UNKNOWN_CATALOG


@pytest.mark.unit
def test_capacity_reject(validator):
    """Test the reject policy refuses surfaces past the limit."""
    store = SurfaceStore(validator, max_surfaces=2)
    store.create_surface("a")
    store.create_surface("b")
    assert store.create_surface("c").failure().kind is StoreErrorKind.CAPACITY_EXCEEDED
    assert store.get_all_surface_ids() == ["a", "b"]


@pytest.mark.unit
@pytest.mark.parametrize("policy", list(RetentionPolicy))
def test_capacity_must_be_positive(validator, policy):
    """Test a store without room for one surface cannot be built."""
    with pytest.raises(ValueError):
        SurfaceStore(validator, max_surfaces=0, retention_policy=policy)


@pytest.mark.unit
def test_capacity_lru_evicts_least_recently_updated(validator):
    """Test the lru policy evicts the stalest surface."""
    store = SurfaceStore(validator, max_surfaces=2, retention_policy=RetentionPolicy.LRU, clock=ticking_clock())
    store.create_surface("a")
    store.create_surface("b")
    store.patch_data_model("a", "/touched", True)

    changes = []
    store.subscribe(changes.append)
    assert isinstance(store.create_surface("c"), Success)

    assert store.get_all_surface_ids() == ["a", "c"]
    assert [(change.kind, change.surface_id) for change in changes] == [
        (ChangeKind.EVICTED, "b"),
        (ChangeKind.CREATED, "c"),
    ]


@pytest.mark.unit
def test_queries_and_eviction(store):
    """Test ids in creation order, evict and clear."""
    for surface_id in ("z", "a", "m"):
        store.create_surface(surface_id)
    assert store.get_all_surface_ids() == ["z", "a", "m"]
    assert store.evict("a") is True
    assert store.evict("a") is False
    assert store.surface_count() == 2
    store.clear()
    assert store.surface_count() == 0
    assert store.get_surface("z") is None


# ============================================================================
# Components
# ============================================================================

@pytest.mark.unit
def test_upsert_diff(surface_s1):
    """Test added, updated, unchanged, invalid and rejected ids."""
    store = surface_s1
    store.upsert_components(
        "s1",
        [
            {"id": "a", "component": "Text", "text": "one"},
            {"id": "b", "component": "Text", "text": "two"},
        ],
    )
    diff = store.upsert_components(
        "s1",
        [
            {"id": "a", "component": "Text", "text": "one"},
            {"id": "b", "component": "Text", "text": "changed"},
            {"id": "c", "component": "Divider"},
            {"id": "d", "componentType": "alien_tech"},
            {"component": "Text", "text": "no id"},
        ],
    ).unwrap()

    assert diff.unchanged == ("a",)
    assert diff.updated == ("b",)
    assert diff.added == ("c", "d")
    assert diff.invalid == ("d",)
    assert len(diff.rejected) == 1

    surface = store.get_surface("s1")
    assert surface.get("b").text == "changed"
    assert isinstance(surface.get("d"), InvalidComponent)
    assert list(surface.components) == ["a", "b", "c", "d"]


@pytest.mark.unit
def test_upsert_without_changes_keeps_snapshot(surface_s1):
    """Test a no-op batch neither bumps the revision nor notifies."""
    store = surface_s1
    store.upsert_components("s1", [{"id": "a", "component": "Text", "text": "x"}])
    before = store.get_surface("s1")
    changes = []
    store.subscribe(changes.append)

    diff = store.upsert_components("s1", [{"id": "a", "component": "Text", "text": "x"}]).unwrap()
    assert not diff.changed
    assert store.get_surface("s1") is before
    assert changes == []


@pytest.mark.unit
def test_upsert_missing_surface(store):
    """Test updating an unknown surface."""
    result = store.upsert_components("ghost", [])
    assert result.failure().kind is StoreErrorKind.SURFACE_NOT_FOUND


@pytest.mark.unit
def test_root_resolution(store):
    """Test root: 'root', then the surface id, then first inserted."""
    store.create_surface("main")
    store.upsert_components("main", [{"id": "first", "component": "Divider"}])
    assert store.get_surface("main").root_id == "first"
    store.upsert_components("main", [{"id": "main", "component": "Divider"}])
    assert store.get_surface("main").root_id == "main"
    store.upsert_components("main", [{"id": "root", "component": "Divider"}])
    assert store.get_surface("main").root_id == "root"


@pytest.mark.unit
def test_surface_isolation(store):
    """Test mutating one surface never touches another."""
    store.create_surface("A")
    store.create_surface("B")
    store.upsert_components("B", [{"id": "t", "component": "Text", "text": "b"}])
    store.patch_data_model("B", "/x", 1)
    before = store.get_surface("B")
    components_before = dict(before.components)
    model_before = orjson.dumps(before.data_model)

    store.upsert_components("A", [{"id": "t", "component": "Text", "text": "a"}])
    store.patch_data_model("A", "/x", 2)
    store.patch_data_model("A", "/", {"replaced": True})

    after = store.get_surface("B")
    assert after is before
    assert dict(after.components) == components_before
    assert orjson.dumps(after.data_model) == model_before
    assert store.get_surface("A").get("t").text == "a"


# ============================================================================
# Data model
# ============================================================================

@pytest.mark.unit
def test_patch_creates_intermediates(surface_s1):
    """Test deep set creates missing objects."""
    surface = surface_s1.patch_data_model("s1", "/user/name", "Jane").unwrap()
    assert surface.data_model == {"user": {"name": "Jane"}}
    assert surface.revision == 1


@pytest.mark.unit
def test_patch_replaces_root(surface_s1):
    """Test the root path replaces the whole model."""
    surface_s1.patch_data_model("s1", "/a", 1)
    surface = surface_s1.patch_data_model("s1", "", {"b": 2}).unwrap()
    assert surface.data_model == {"b": 2}


@pytest.mark.unit
def test_patch_lists(surface_s1):
    """Test list index, append token and append at length."""
    store = surface_s1
    store.patch_data_model("s1", "/items", ["a"])
    store.patch_data_model("s1", "/items/-", "b")
    store.patch_data_model("s1", "/items/2", "c")
    store.patch_data_model("s1", "/items/0", "A")
    assert store.get_surface("s1").data_model == {"items": ["A", "b", "c"]}


@pytest.mark.unit
@pytest.mark.parametrize("path", ["/name/first", "/items/5", "/items/x", "/items/0/deep"])
def test_patch_conflict_leaves_model_identical(surface_s1, path):
    """Test failed patches leave the model byte-for-byte unchanged."""
    store = surface_s1
    store.patch_data_model("s1", "/name", "Jane")
    store.patch_data_model("s1", "/items", [1])
    before = store.get_surface("s1")
    snapshot = orjson.dumps(before.data_model)

    result = store.patch_data_model("s1", path, "x")
    assert result.failure().kind is StoreErrorKind.PATH_CONFLICT
    assert orjson.dumps(store.get_surface("s1").data_model) == snapshot
    assert store.get_surface("s1") is before


@pytest.mark.unit
@pytest.mark.parametrize("path", ["name", "//", "/a/", "/a//b"])
def test_patch_invalid_path(surface_s1, path):
    """Test malformed pointers are rejected."""
    assert surface_s1.patch_data_model("s1", path, 1).failure().kind is StoreErrorKind.INVALID_PATH


@pytest.mark.unit
def test_patch_does_not_alias_value(surface_s1):
    """Test the stored value is a copy of the caller's object."""
    value = {"list": [1]}
    surface_s1.patch_data_model("s1", "/v", value)
    value["list"].append(2)
    assert surface_s1.get_surface("s1").data_model == {"v": {"list": [1]}}


@pytest.mark.unit
def test_upsert_does_not_alias_payload(surface_s1):
    """Test stored components are detached from the caller's payload."""
    button = {
        "id": "b",
        "component": "Button",
        "child": "label",
        "action": {"event": {"name": "go", "context": {"k": {"path": "/x"}}}},
    }
    broken = {"id": "x", "component": "Slider", "extra": {"nested": [1]}}
    surface_s1.upsert_components("s1", [button, broken])

    button["action"]["event"]["context"]["k"]["path"] = "/changed"
    broken["extra"]["nested"].append(2)

    surface = surface_s1.get_surface("s1")
    assert surface.get("b").action.event.context == {"k": {"path": "/x"}}
    assert surface.get("x").raw["extra"] == {"nested": [1]}


@pytest.mark.unit
def test_set_at_path_pure():
    """Test the patch helper never mutates its input."""
    model = {"a": {"b": 1}}
    updated = set_at_path(model, "/a/c", 2)
    assert model == {"a": {"b": 1}}
    assert updated == {"a": {"b": 1, "c": 2}}
    with pytest.raises(PathConflict):
        set_at_path(model, "/a/b/c", 3)


# ============================================================================
# Listeners
# ============================================================================

@pytest.mark.unit
def test_listeners_notified_after_swap(surface_s1):
    """Test listeners see the new snapshot."""
    store = surface_s1
    seen = []

    def listener(change):
        seen.append((change.kind, store.get_surface("s1").revision))

    store.subscribe(listener)
    store.patch_data_model("s1", "/a", 1)
    assert seen == [(ChangeKind.DATA_MODEL, 1)]


@pytest.mark.unit
def test_raising_listener_does_not_undo_mutation(surface_s1):
    """Test a failing listener is contained."""
    store = surface_s1

    def broken(change):
        raise RuntimeError("listener bug")

    calls = []
    store.subscribe(broken)
    store.subscribe(calls.append)
    assert isinstance(store.patch_data_model("s1", "/a", 1), Success)
    assert store.get_surface("s1").data_model == {"a": 1}
    assert len(calls) == 1


@pytest.mark.unit
def test_unsubscribe(surface_s1):
    """Test unsubscribed listeners stop receiving changes."""
    calls = []
    unsubscribe = surface_s1.subscribe(calls.append)
    unsubscribe()
    surface_s1.patch_data_model("s1", "/a", 1)
    assert calls == []


@pytest.mark.unit
def test_snapshots_are_immutable(surface_s1):
    """Test components of a snapshot cannot be reassigned."""
    surface_s1.upsert_components("s1", [{"id": "t", "component": "Text", "text": "x"}])
    surface = surface_s1.get_surface("s1")
    with pytest.raises(TypeError):
        surface.components["t"] = Text(id="t", text="y")
