"""Placeholder handler for failed artifacts."""

from a2ui.catalog import Fallback
from ..context import RenderContext
from ..nodes import RenderNode


def render_fallback(component: Fallback, ctx: RenderContext) -> RenderNode:
    props = {"reason": component.reason.value, "detail": component.detail}
    if component.original_type is not None:
        props["originalType"] = component.original_type
    return RenderNode(kind="Fallback", component_id=component.id, props=props, fallback=True)


FALLBACK_HANDLERS = {"Fallback": render_fallback}
