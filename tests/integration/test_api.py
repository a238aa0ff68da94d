"""Integration tests for the HTTP surface."""

import orjson
import pytest
from fastapi.testclient import TestClient

from a2ui.api import create_app
from a2ui.core import Settings, create_container


def jsonl(*messages):
    return "\n".join(orjson.dumps(message).decode() for message in messages)


@pytest.fixture
def client():
    """Test client over a fresh container."""
    settings = Settings(_env_file=None, action_debounce_ms=300)
    app = create_app(create_container(settings))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def loaded(client, login_form):
    """Client whose runtime holds the login form surface."""
    body = jsonl(
        {"type": "createSurface", "surfaceId": "s1", "catalogId": "standard"},
        {"type": "updateComponents", "surfaceId": "s1", "components": login_form},
        {"type": "updateDataModel", "surfaceId": "s1", "path": "/user/name", "value": "Jane"},
    )
    response = client.post("/a2ui/messages", content=body)
    assert response.status_code == 200
    assert response.json()["processed"] == 3
    return client


@pytest.mark.integration
def test_health(client):
    """Test the health endpoint."""
    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert data["surfaces"] == 0


@pytest.mark.integration
def test_metrics_endpoint(client):
    """Test Prometheus exposition."""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "a2ui_uptime_seconds" in response.text


@pytest.mark.integration
def test_ingest_sse_body_with_errors(client):
    """Test SSE bodies are applied line by line with errors reported."""
    body = (
        'data: {"type":"createSurface","surfaceId":"a","catalogId":"standard"}\n\n'
        ": comment\n"
        "data: {broken\n\n"
        'data: {"type":"deleteSurface","surfaceId":"a"}\n\n'
        "data: [DONE]\n"
    )
    report = client.post("/a2ui/messages", content=body).json()
    assert report["processed"] == 1
    assert report["failed"] == 2
    assert [error["kind"] for error in report["errors"]] == ["malformed_json", "unknown_type"]
    assert report["surfaces"] == ["a"]


@pytest.mark.integration
def test_list_and_get_surfaces(loaded):
    """Test surface listing and snapshot retrieval."""
    listing = loaded.get("/a2ui/surfaces").json()["surfaces"]
    assert listing == [{"surfaceId": "s1", "catalogId": "standard", "revision": 2, "components": 5, "rootId": "root"}]

    snapshot = loaded.get("/a2ui/surfaces/s1").json()
    assert snapshot["dataModel"] == {"user": {"name": "Jane"}}
    assert loaded.get("/a2ui/surfaces/ghost").status_code == 404


@pytest.mark.integration
def test_render_surface(loaded):
    """Test the rendered tree reflects bound data."""
    data = loaded.get("/a2ui/surfaces/s1/render").json()
    assert data["revision"] == 2
    tree = data["tree"]
    assert tree["kind"] == "Column"
    assert tree["children"][1]["props"]["value"] == "Jane"

    subtree = loaded.get("/a2ui/surfaces/s1/render", params={"root": "title"}).json()["tree"]
    assert subtree["props"]["text"] == "Sign in"


@pytest.mark.integration
def test_trigger_declared_action(loaded):
    """Test triggering a button's declared event."""
    response = loaded.post("/a2ui/surfaces/s1/actions", json={"componentId": "submit"})
    assert response.status_code == 200
    message = response.json()["message"]
    assert message["actionName"] == "login"
    assert message["context"]["dataBindings"] == {"who": "Jane"}

    again = loaded.post("/a2ui/surfaces/s1/actions", json={"componentId": "submit"})
    assert again.status_code == 429


@pytest.mark.integration
def test_dispatch_named_action(loaded):
    """Test dispatching an explicit action with form values."""
    response = loaded.post(
        "/a2ui/surfaces/s1/actions",
        json={"componentId": "name", "actionName": "changed", "formValues": {"name": "Jane"}},
    )
    message = response.json()["message"]
    assert message["sourceComponentId"] == "name"
    assert message["context"] == {"formValues": {"name": "Jane"}}


@pytest.mark.integration
@pytest.mark.parametrize(
    "surface_id,payload,status",
    [
        ("ghost", {"componentId": "submit"}, 404),
        ("s1", {"componentId": "ghost"}, 404),
        ("s1", {"componentId": "title"}, 422),
        ("s1", {}, 422),
    ],
)
def test_action_errors(loaded, surface_id, payload, status):
    """Test action failures map to HTTP status codes."""
    response = loaded.post(f"/a2ui/surfaces/{surface_id}/actions", json=payload)
    assert response.status_code == status
