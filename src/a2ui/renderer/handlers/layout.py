"""Layout component handlers."""

from typing import Any

from a2ui.catalog import Card, Column, Divider, List, Modal, Row, Tabs
from ..context import RenderContext
from ..nodes import RenderNode


def _flex(component: Row | Column | List, ctx: RenderContext, **defaults: Any) -> RenderNode:
    props = ctx.base_props(component)
    props.update(defaults)
    for name in ("justify", "align", "direction"):
        value = getattr(component, name, None)
        if value is not None:
            props[name] = value
    return RenderNode(
        kind=component.tag,
        component_id=component.id,
        props=props,
        children=ctx.render_children(component.children),
    )


def render_row(component: Row, ctx: RenderContext) -> RenderNode:
    return _flex(component, ctx, justify="start", align="stretch")


def render_column(component: Column, ctx: RenderContext) -> RenderNode:
    return _flex(component, ctx, justify="start", align="stretch")


def render_list(component: List, ctx: RenderContext) -> RenderNode:
    return _flex(component, ctx, direction="vertical")


def render_card(component: Card, ctx: RenderContext) -> RenderNode:
    return RenderNode(
        kind="Card",
        component_id=component.id,
        props=ctx.base_props(component),
        children=[ctx.render_child(component.child, slot="child")],
    )


def render_tabs(component: Tabs, ctx: RenderContext) -> RenderNode:
    props = ctx.base_props(component)
    props["titles"] = [ctx.string(tab.title) for tab in component.tabs]
    return RenderNode(
        kind="Tabs",
        component_id=component.id,
        props=props,
        children=[
            ctx.render_child(tab.child, slot=f"tab[{index}]") for index, tab in enumerate(component.tabs)
        ],
    )


def render_divider(component: Divider, ctx: RenderContext) -> RenderNode:
    props = ctx.base_props(component)
    props["axis"] = component.axis or "horizontal"
    return RenderNode(kind="Divider", component_id=component.id, props=props)


def render_modal(component: Modal, ctx: RenderContext) -> RenderNode:
    return RenderNode(
        kind="Modal",
        component_id=component.id,
        props=ctx.base_props(component),
        children=[
            ctx.render_child(component.trigger, slot="trigger"),
            ctx.render_child(component.content, slot="content"),
        ],
    )


LAYOUT_HANDLERS = {
    "Row": render_row,
    "Column": render_column,
    "List": render_list,
    "Card": render_card,
    "Tabs": render_tabs,
    "Divider": render_divider,
    "Modal": render_modal,
}
