"""Input component handlers.

Bound ``value`` fields report their pointer as ``valuePath`` so a client
can write edits back to the data model.
"""

from typing import Any

from a2ui.catalog import Button, CheckBox, ChoicePicker, ComponentBase, DateTimeInput, Slider, TextField
from ..context import RenderContext
from ..nodes import RenderNode


def _input_props(component: ComponentBase, ctx: RenderContext, value: Any) -> dict[str, Any]:
    props = ctx.base_props(component)
    props.update(ctx.action_props(component))
    path = ctx.binding_path(value)
    if path is not None:
        props["valuePath"] = path
    return props


def render_button(component: Button, ctx: RenderContext) -> RenderNode:
    props = _input_props(component, ctx, None)
    props["variant"] = component.variant or "primary"
    return RenderNode(
        kind="Button",
        component_id=component.id,
        props=props,
        children=[ctx.render_child(component.child, slot="label")],
    )


def render_check_box(component: CheckBox, ctx: RenderContext) -> RenderNode:
    props = _input_props(component, ctx, component.value)
    props["label"] = ctx.string(component.label)
    props["value"] = ctx.boolean(component.value)
    return RenderNode(kind="CheckBox", component_id=component.id, props=props)


def render_text_field(component: TextField, ctx: RenderContext) -> RenderNode:
    props = _input_props(component, ctx, component.value)
    props["label"] = ctx.string(component.label)
    props["value"] = ctx.string(component.value)
    props["variant"] = component.variant or "shortText"
    return RenderNode(kind="TextField", component_id=component.id, props=props)


def _date_input_type(enable_date: bool, enable_time: bool) -> str:
    if enable_date and enable_time:
        return "datetime-local"
    if enable_time:
        return "time"
    return "date"


def render_date_time_input(component: DateTimeInput, ctx: RenderContext) -> RenderNode:
    props = _input_props(component, ctx, component.value)
    props["value"] = ctx.string(component.value)
    props["inputType"] = _date_input_type(bool(component.enable_date), bool(component.enable_time))
    if component.min is not None:
        props["min"] = ctx.string(component.min)
    if component.max is not None:
        props["max"] = ctx.string(component.max)
    return RenderNode(kind="DateTimeInput", component_id=component.id, props=props)


def render_choice_picker(component: ChoicePicker, ctx: RenderContext) -> RenderNode:
    props = _input_props(component, ctx, component.value)
    if component.label is not None:
        props["label"] = ctx.string(component.label)
    props["variant"] = component.variant or "mutuallyExclusive"
    props["options"] = [
        {"label": ctx.string(option.label), "value": option.value} for option in component.options
    ]
    props["value"] = ctx.string_list(component.value)
    return RenderNode(kind="ChoicePicker", component_id=component.id, props=props)


def render_slider(component: Slider, ctx: RenderContext) -> RenderNode:
    props = _input_props(component, ctx, component.value)
    if component.label is not None:
        props["label"] = ctx.string(component.label)
    props["min"] = component.min
    props["max"] = component.max
    value = ctx.number(component.value, default=component.min)
    props["value"] = min(max(value, component.min), component.max)
    return RenderNode(kind="Slider", component_id=component.id, props=props)


INPUT_HANDLERS = {
    "Button": render_button,
    "CheckBox": render_check_box,
    "TextField": render_text_field,
    "DateTimeInput": render_date_time_input,
    "ChoicePicker": render_choice_picker,
    "Slider": render_slider,
}
