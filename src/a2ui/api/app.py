"""
HTTP surface
FastAPI app for message ingestion, rendering and actions.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from injector import Injector
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import Field
from returns.result import Failure

from a2ui import __version__
from a2ui.core.config import Settings, get_settings
from a2ui.core.container import create_container
from a2ui.core.logging_config import configure_from_settings, get_logger
from a2ui.core.validate import WireModel, dump_wire
from a2ui.events import ActionDispatcher, ActionError, ActionErrorKind
from a2ui.monitoring import metrics_collector
from a2ui.protocol import MessageProcessor
from a2ui.renderer import Renderer
from a2ui.surfaces import SurfaceStore, dump_surface
from a2ui.transport import iter_payloads

logger = get_logger(__name__)

_ACTION_STATUS = {
    ActionErrorKind.SURFACE_NOT_FOUND: 404,
    ActionErrorKind.COMPONENT_NOT_FOUND: 404,
    ActionErrorKind.DEBOUNCED: 429,
    ActionErrorKind.NO_ACTION: 422,
    ActionErrorKind.FUNCTION_FAILED: 422,
    ActionErrorKind.SINK_FAILED: 502,
}


class ActionRequest(WireModel):
    """Interaction reported by a client.

    Without ``actionName`` the component's declared action is triggered.
    """

    component_id: str = Field(min_length=1)
    action_name: str | None = None
    form_values: dict[str, Any] | None = None
    data_bindings: dict[str, Any] | None = None
    resolve_bindings: list[str] = Field(default_factory=list)


def _action_error(error: ActionError) -> HTTPException:
    return HTTPException(status_code=_ACTION_STATUS.get(error.kind, 400), detail=error.to_dict())


def create_app(container: Injector | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the HTTP app.

    Args:
        container: Injector supplying store, processor, renderer and dispatcher
        settings: Settings used when no container is given
    """
    settings = settings or get_settings()
    container = container or create_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("service_starting", version=__version__)
        yield
        logger.info("service_stopped", surfaces=app.state.store.surface_count())

    app = FastAPI(
        title="A2UI Surface Runtime",
        description="Validates, stores and renders A2UI surfaces",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = container.get(SurfaceStore)
    app.state.processor = container.get(MessageProcessor)
    app.state.renderer = container.get(Renderer)
    app.state.dispatcher = container.get(ActionDispatcher)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "healthy",
            "version": __version__,
            "surfaces": app.state.store.surface_count(),
        }

    @app.get("/metrics")
    async def metrics() -> Response:
        return Response(content=metrics_collector.get_metrics(), media_type=CONTENT_TYPE_LATEST)

    @app.post("/a2ui/messages")
    async def ingest(request: Request) -> dict[str, Any]:
        """Apply a JSONL or SSE body of server messages in order."""
        body = (await request.body()).decode("utf-8", errors="replace")
        report = app.state.processor.process_lines(iter_payloads(body))
        return report.to_dict()

    @app.get("/a2ui/surfaces")
    async def list_surfaces() -> dict[str, Any]:
        store: SurfaceStore = app.state.store
        surfaces = []
        for surface_id in store.get_all_surface_ids():
            surface = store.get_surface(surface_id)
            if surface is None:
                continue
            surfaces.append(
                {
                    "surfaceId": surface.surface_id,
                    "catalogId": surface.catalog_id,
                    "revision": surface.revision,
                    "components": len(surface.components),
                    "rootId": surface.root_id,
                }
            )
        return {"surfaces": surfaces}

    def _surface_or_404(surface_id: str):
        surface = app.state.store.get_surface(surface_id)
        if surface is None:
            raise HTTPException(status_code=404, detail=f"Surface '{surface_id}' not found")
        return surface

    @app.get("/a2ui/surfaces/{surface_id}")
    async def get_surface(surface_id: str) -> dict[str, Any]:
        return dump_surface(_surface_or_404(surface_id))

    @app.get("/a2ui/surfaces/{surface_id}/render")
    async def render_surface(surface_id: str, root: str | None = None) -> dict[str, Any]:
        surface = _surface_or_404(surface_id)
        node = app.state.renderer.render(surface, root)
        return {"surfaceId": surface_id, "revision": surface.revision, "tree": node.to_dict()}

    @app.post("/a2ui/surfaces/{surface_id}/actions")
    async def post_action(surface_id: str, payload: ActionRequest) -> dict[str, Any]:
        dispatcher: ActionDispatcher = app.state.dispatcher
        if payload.action_name is None:
            result = dispatcher.trigger(surface_id, payload.component_id, payload.form_values)
            if isinstance(result, Failure):
                raise _action_error(result.failure())
            outcome = result.unwrap()
            if outcome.message is not None:
                return {"message": dump_wire(outcome.message)}
            return {"functionResult": outcome.function_result}

        result = dispatcher.dispatch(
            surface_id,
            payload.component_id,
            payload.action_name,
            form_values=payload.form_values,
            data_bindings=payload.data_bindings,
            resolve_bindings=payload.resolve_bindings,
        )
        if isinstance(result, Failure):
            raise _action_error(result.failure())
        return {"message": dump_wire(result.unwrap())}

    return app


def main() -> None:
    """Run the HTTP service with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_from_settings(settings)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
