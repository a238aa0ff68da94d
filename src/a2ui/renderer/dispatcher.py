"""
Renderer Dispatcher
Recursive, failure-isolated rendering of a surface snapshot.
"""

from collections.abc import Callable, Mapping

from a2ui.binding import FunctionTable
from a2ui.catalog import ComponentBase, Fallback, FallbackReason
from a2ui.core.logging_config import get_logger
from a2ui.monitoring import metrics_collector
from a2ui.surfaces import InvalidComponent, Surface
from .context import RenderContext
from .handlers import STANDARD_HANDLERS, render_fallback
from .nodes import RenderNode

logger = get_logger(__name__)

Handler = Callable[[ComponentBase, RenderContext], RenderNode]

FALLBACK_TAG = "Fallback"


class Renderer:
    """
    Turns surface snapshots into ``RenderNode`` trees.

    Every component, including the synthetic ``Fallback``, goes through one
    handler table keyed by discriminant. Any failure below a node is
    replaced by a placeholder at that node; siblings and ancestors still
    render. The renderer holds no per-pass state.
    """

    def __init__(
        self,
        handlers: Mapping[str, Handler] | None = None,
        functions: FunctionTable | None = None,
        max_depth: int = 64,
    ) -> None:
        self.handlers: dict[str, Handler] = dict(STANDARD_HANDLERS)
        if handlers:
            self.handlers.update(handlers)
        self.functions: FunctionTable = functions or {}
        self.max_depth = max_depth

    def register(self, tag: str, handler: Handler) -> None:
        self.handlers[tag] = handler

    def render(self, surface: Surface, root_id: str | None = None) -> RenderNode:
        """
        Render a surface from ``root_id`` (or the surface root).

        Args:
            surface: Immutable snapshot from the store
            root_id: Component to start from; defaults to ``surface.root_id``

        Returns:
            Rendered tree; never raises for bad surface content
        """
        with metrics_collector.measure_duration(metrics_collector.record_render):
            ctx = RenderContext(renderer=self, surface=surface, functions=self.functions)
            start = root_id if root_id is not None else surface.root_id
            if start is None:
                return self.render_fallback(
                    ctx, "root", FallbackReason.MISSING, detail="surface has no components"
                )
            return self.render_entry(start, ctx)

    def render_entry(self, component_id: str, ctx: RenderContext, slot: str | None = None) -> RenderNode:
        """Render one component id below ``ctx``."""
        node = self._render_entry(component_id, ctx)
        node.slot = slot
        return node

    def _render_entry(self, component_id: str, ctx: RenderContext) -> RenderNode:
        if component_id in ctx.ancestors:
            return self.render_fallback(
                ctx, component_id, FallbackReason.CYCLE, detail=" -> ".join(ctx.ancestors + (component_id,))
            )
        if ctx.depth >= self.max_depth:
            return self.render_fallback(
                ctx, component_id, FallbackReason.DEPTH_EXCEEDED, detail=f"depth limit {self.max_depth}"
            )

        entry = ctx.surface.get(component_id)
        if entry is None:
            return self.render_fallback(ctx, component_id, FallbackReason.MISSING)
        if isinstance(entry, InvalidComponent):
            return self.render_fallback(
                ctx, component_id, entry.fallback_reason, entry.tag, entry.failure.message
            )

        handler = self.handlers.get(entry.tag)
        if handler is None:
            return self.render_fallback(ctx, component_id, FallbackReason.NO_RENDERER, entry.tag)

        try:
            return handler(entry, ctx.enter(component_id))
        except Exception as e:
            logger.error(
                "render_failed",
                surface_id=ctx.surface.surface_id,
                component_id=component_id,
                component_type=entry.tag,
                error=str(e),
                exc_info=True,
            )
            return self.render_fallback(ctx, component_id, FallbackReason.RENDER_ERROR, entry.tag, str(e))

    def render_fallback(
        self,
        ctx: RenderContext,
        component_id: str,
        reason: FallbackReason,
        original_type: str | None = None,
        detail: str = "",
    ) -> RenderNode:
        """Render the placeholder for a failed id through the handler table."""
        metrics_collector.record_fallback(reason.value)
        placeholder = Fallback(id=component_id, reason=reason, original_type=original_type, detail=detail)
        handler = self.handlers.get(FALLBACK_TAG, render_fallback)
        try:
            return handler(placeholder, ctx)
        except Exception as e:
            logger.error("fallback_render_failed", component_id=component_id, error=str(e))
            return render_fallback(placeholder, ctx)
