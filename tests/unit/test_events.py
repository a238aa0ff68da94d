"""Tests for action dispatch and form submission."""

import pytest
from returns.result import Success

from a2ui.events import (
    ActionDispatcher,
    ActionErrorKind,
    FormSubmitHandler,
    FormValueRegistry,
    collect_form_values,
    resolve_event_context,
)


@pytest.fixture
def form_surface(surface_s1, login_form):
    """Store with the login form and a populated data model."""
    surface_s1.upsert_components("s1", login_form).unwrap()
    surface_s1.patch_data_model("s1", "/user", {"name": "Jane", "age": 30}).unwrap()
    return surface_s1


# ============================================================================
# Dispatch
# ============================================================================

@pytest.mark.unit
def test_dispatch_builds_message(form_surface, dispatcher, sent):
    """Test a dispatched action reaches the sink with a millisecond timestamp."""
    message = dispatcher.dispatch("s1", "submit", "login", form_values={"name": "Jane"}).unwrap()
    assert sent == [message]
    assert message.action_name == "login"
    assert message.source_component_id == "submit"
    assert message.timestamp == 1_700_000_000_000
    assert message.context.form_values == {"name": "Jane"}
    assert message.context.data_model is None


@pytest.mark.unit
def test_dispatch_without_context(form_surface, dispatcher):
    """Test an empty context is omitted."""
    assert dispatcher.dispatch("s1", "submit", "ping").unwrap().context is None


@pytest.mark.unit
def test_debounce_per_component(form_surface, dispatcher, sent, clock):
    """Test repeat events inside the window are dropped per component."""
    assert isinstance(dispatcher.dispatch("s1", "submit", "go"), Success)

    clock["now"] += 0.1
    debounced = dispatcher.dispatch("s1", "submit", "go")
    assert debounced.failure().kind is ActionErrorKind.DEBOUNCED
    assert isinstance(dispatcher.dispatch("s1", "name", "go"), Success)

    clock["now"] += 0.25
    assert isinstance(dispatcher.dispatch("s1", "submit", "go"), Success)
    assert len(sent) == 3


@pytest.mark.unit
def test_debounce_disabled_per_call(form_surface, dispatcher, sent):
    """Test callers can bypass the debounce window."""
    dispatcher.dispatch("s1", "submit", "go")
    assert isinstance(dispatcher.dispatch("s1", "submit", "go", debounce=False), Success)
    assert len(sent) == 2


@pytest.mark.unit
def test_dispose_resets_debounce(form_surface, dispatcher):
    """Test dispose forgets the last dispatch times."""
    dispatcher.dispatch("s1", "submit", "go")
    dispatcher.dispose()
    assert isinstance(dispatcher.dispatch("s1", "submit", "go"), Success)


@pytest.mark.unit
def test_resolve_bindings_at_dispatch(form_surface, dispatcher):
    """Test listed paths are read from the data model."""
    message = dispatcher.dispatch(
        "s1", "submit", "go", data_bindings={"extra": 1}, resolve_bindings=["/user/age", "/missing"]
    ).unwrap()
    assert message.context.data_bindings == {"extra": 1, "/user/age": 30, "/missing": None}


@pytest.mark.unit
def test_send_data_model_attaches_copy(store, dispatcher):
    """Test surfaces created with sendDataModel include a detached model copy."""
    store.create_surface("full", send_data_model=True)
    store.patch_data_model("full", "/items", [1]).unwrap()

    message = dispatcher.dispatch("full", "b", "go").unwrap()
    message.context.data_model["items"].append(2)
    assert store.get_surface("full").data_model == {"items": [1]}
    assert message.context.data_model == {"items": [1, 2]}


@pytest.mark.unit
def test_dispatch_unknown_surface(dispatcher):
    """Test dispatching on a surface that does not exist."""
    assert dispatcher.dispatch("ghost", "b", "go").failure().kind is ActionErrorKind.SURFACE_NOT_FOUND


@pytest.mark.unit
def test_sink_failure_reported(form_surface):
    """Test a raising sink becomes a sink_failed error."""
    def sink(message):
        raise ConnectionError("offline")

    dispatcher = ActionDispatcher(form_surface, sink=sink)
    error = dispatcher.dispatch("s1", "submit", "go").failure()
    assert error.kind is ActionErrorKind.SINK_FAILED
    assert error.to_dict()["componentId"] == "submit"


@pytest.mark.unit
def test_no_sink_still_returns_message(form_surface):
    """Test dispatch without a sink returns the built message."""
    dispatcher = ActionDispatcher(form_surface)
    assert dispatcher.dispatch("s1", "submit", "go").unwrap().action_name == "go"


# ============================================================================
# Trigger
# ============================================================================

@pytest.mark.unit
def test_trigger_event_action(form_surface, dispatcher, sent):
    """Test a button's event action resolves its context bindings."""
    outcome = dispatcher.trigger("s1", "submit", form_values={"name": "Jane"}).unwrap()
    assert outcome.message is sent[0]
    assert outcome.message.action_name == "login"
    assert outcome.message.context.data_bindings == {"who": "Jane"}


@pytest.mark.unit
def test_trigger_function_call(store):
    """Test a functionCall action runs locally and sends nothing."""
    sent = []
    dispatcher = ActionDispatcher(store, sink=sent.append, functions={"open": lambda url: f"opened {url}"})
    store.create_surface("s")
    store.upsert_components(
        "s",
        [
            {"id": "l", "component": "Text", "text": "Open"},
            {
                "id": "b",
                "component": "Button",
                "child": "l",
                "action": {"functionCall": {"call": "open", "args": {"url": "http://x"}}},
            },
            {"id": "bad", "component": "Button", "child": "l", "action": {"functionCall": {"call": "nope"}}},
        ],
    )
    assert dispatcher.trigger("s", "b").unwrap().function_result == "opened http://x"
    assert sent == []
    assert dispatcher.trigger("s", "bad").failure().kind is ActionErrorKind.FUNCTION_FAILED


@pytest.mark.unit
def test_trigger_without_action(form_surface, dispatcher):
    """Test components without an action and unknown components."""
    assert dispatcher.trigger("s1", "title").failure().kind is ActionErrorKind.NO_ACTION
    assert dispatcher.trigger("s1", "ghost").failure().kind is ActionErrorKind.COMPONENT_NOT_FOUND


@pytest.mark.unit
def test_resolve_event_context():
    """Test literal, path and missing context entries."""
    model = {"a": {"b": 2}}
    resolved = resolve_event_context({"lit": "x", "p": {"path": "/a/b"}, "gone": {"path": "/z"}}, model)
    assert resolved == {"lit": "x", "p": 2, "gone": None}


# ============================================================================
# Forms
# ============================================================================

@pytest.mark.unit
def test_form_registry_from_surface(form_surface):
    """Test bound inputs seed the registry by binding path."""
    registry = FormValueRegistry.from_surface(form_surface.get_surface("s1"))
    assert registry.field_names == ["/user/name"]
    assert registry.get("/user/name") == "Jane"
    registry.set("/user/name", "Doe")
    assert registry.get_all() == {"/user/name": "Doe"}
    registry.clear()
    assert registry.get_all() == {}


@pytest.mark.unit
def test_collect_form_values_without_get_all():
    """Test registries exposing only field names and get."""
    class Minimal:
        field_names = ["a", "b"]

        def get(self, name):
            return name.upper()

    assert collect_form_values(Minimal()) == {"a": "A", "b": "B"}


@pytest.mark.unit
def test_form_submit_is_not_debounced(form_surface, dispatcher, sent):
    """Test submits go straight through with the collected values."""
    handler = FormSubmitHandler(dispatcher)
    registry = FormValueRegistry({"name": "Jane"})
    first = handler.submit("s1", "submit", registry).unwrap()
    second = handler.submit("s1", "submit", registry, action_name="save").unwrap()
    assert first.action_name == "submit"
    assert second.action_name == "save"
    assert second.context.form_values == {"name": "Jane"}
    assert len(sent) == 2
