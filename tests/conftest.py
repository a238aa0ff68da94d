"""Pytest configuration and fixtures."""

import os

import pytest
from returns.result import Success

from a2ui.catalog import CatalogRegistry
from a2ui.core import create_container, get_settings
from a2ui.events import ActionDispatcher
from a2ui.protocol import MessageProcessor
from a2ui.renderer import Renderer
from a2ui.surfaces import SurfaceStore
from a2ui.validation import SchemaValidator


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["A2UI_LOG_LEVEL"] = "DEBUG"
    os.environ["A2UI_MAX_SURFACES"] = "10"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def di_container():
    """Dependency injection container for testing."""
    return create_container()


@pytest.fixture
def registry():
    """Catalog registry with the standard catalog."""
    return CatalogRegistry()


@pytest.fixture
def validator(registry):
    """Schema validator over the standard catalog."""
    return SchemaValidator(registry)


@pytest.fixture
def store(validator):
    """Empty surface store."""
    return SurfaceStore(validator)


@pytest.fixture
def renderer():
    """Renderer with the standard handler table."""
    return Renderer()


@pytest.fixture
def processor(store):
    """Message processor bound to the store fixture."""
    return MessageProcessor(store)


@pytest.fixture
def sent():
    """Collects messages handed to an action sink."""
    return []


@pytest.fixture
def clock():
    """Mutable monotonic clock in seconds."""
    return {"now": 1000.0}


@pytest.fixture
def dispatcher(store, sent, clock):
    """Action dispatcher with a recording sink and a controllable clock."""
    return ActionDispatcher(
        store,
        sink=sent.append,
        debounce_ms=300,
        clock=lambda: clock["now"],
        wall_clock=lambda: 1_700_000_000.0,
    )


@pytest.fixture
def surface_s1(store):
    """Store holding an empty surface 's1' on the standard catalog."""
    assert isinstance(store.create_surface("s1", "standard"), Success)
    return store


# ============================================================================
# Payload Fixtures
# ============================================================================

@pytest.fixture
def login_form():
    """A small valid component tree."""
    return [
        {"id": "root", "component": "Column", "children": ["title", "name", "submit"]},
        {"id": "title", "component": "Text", "text": "Sign in", "variant": "h2"},
        {"id": "name", "component": "TextField", "label": "Name", "value": {"path": "/user/name"}},
        {
            "id": "submit",
            "component": "Button",
            "child": "submit_label",
            "action": {"event": {"name": "login", "context": {"who": {"path": "/user/name"}}}},
        },
        {"id": "submit_label", "component": "Text", "text": "Go"},
    ]
