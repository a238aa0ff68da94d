"""Per-node render context handed to component handlers."""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from a2ui.binding import (
    UNRESOLVED,
    DataBinding,
    FunctionCall,
    FunctionTable,
    resolve_boolean,
    resolve_number,
    resolve_pointer,
    resolve_string,
    resolve_string_list,
)
from a2ui.binding.dynamic import call_function, is_bare_pointer
from a2ui.catalog import ChildList, ChildTemplate, CheckRule, ComponentBase, FallbackReason
from a2ui.core.validate import dump_wire
from a2ui.surfaces import Surface
from .nodes import RenderNode

if TYPE_CHECKING:
    from .dispatcher import Renderer


@dataclass(frozen=True)
class RenderContext:
    """
    Everything a handler needs to turn one component into a node.

    ``ancestors`` is the chain of component ids from the root down to and
    including the component being rendered; ``scope`` is the current
    template item that relative pointers resolve against.
    """

    renderer: "Renderer"
    surface: Surface
    functions: FunctionTable
    scope: Any = UNRESOLVED
    ancestors: tuple[str, ...] = ()

    @property
    def data_model(self) -> Any:
        return self.surface.data_model

    @property
    def depth(self) -> int:
        return len(self.ancestors)

    def enter(self, component_id: str) -> "RenderContext":
        return replace(self, ancestors=self.ancestors + (component_id,))

    def with_scope(self, item: Any) -> "RenderContext":
        return replace(self, scope=item)

    # ------------------------------------------------------------------
    # Dynamic values
    # ------------------------------------------------------------------

    def string(self, value: Any, default: str = "") -> str:
        return resolve_string(value, self.data_model, self.scope, self.functions, default)

    def number(self, value: Any, default: int | float | None = None) -> int | float | None:
        return resolve_number(value, self.data_model, self.scope, self.functions, default)

    def boolean(self, value: Any, default: bool = False) -> bool:
        return resolve_boolean(value, self.data_model, self.scope, self.functions, default)

    def string_list(self, value: Any) -> list[str]:
        return resolve_string_list(value, self.data_model, self.scope, self.functions)

    def binding_path(self, value: Any) -> str | None:
        """Path a two-way bound field writes back to, if it is bound."""
        if isinstance(value, DataBinding):
            return value.path
        if is_bare_pointer(value):
            return value
        return None

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def render_child(self, component_id: str, slot: str | None = None) -> RenderNode:
        return self.renderer.render_entry(component_id, self, slot)

    def render_children(self, children: ChildList) -> list[RenderNode]:
        if isinstance(children, ChildTemplate):
            return self.render_template(children)
        return [self.render_child(child_id) for child_id in children]

    def render_template(self, template: ChildTemplate) -> list[RenderNode]:
        """Render the template component once per item of the bound list."""
        items = resolve_pointer(self.data_model, template.path, self.scope)
        if not isinstance(items, list):
            return []
        return [
            self.with_scope(item).render_child(template.component_id, slot=f"item[{index}]")
            for index, item in enumerate(items)
        ]

    def fallback(
        self, component_id: str, reason: FallbackReason, original_type: str | None = None, detail: str = ""
    ) -> RenderNode:
        return self.renderer.render_fallback(self, component_id, reason, original_type, detail)

    # ------------------------------------------------------------------
    # Shared props
    # ------------------------------------------------------------------

    def base_props(self, component: ComponentBase) -> dict[str, Any]:
        props: dict[str, Any] = {}
        if component.accessibility is not None:
            props["accessibility"] = {
                "label": self.string(component.accessibility.label),
                "description": self.string(component.accessibility.description),
            }
        if component.weight is not None:
            props["weight"] = component.weight
        return props

    def action_props(self, component: ComponentBase) -> dict[str, Any]:
        props: dict[str, Any] = {}
        action = getattr(component, "action", None)
        if action is not None:
            props["action"] = dump_wire(action)
        checks = getattr(component, "checks", None)
        if checks:
            props["errors"] = self.evaluate_checks(checks)
        return props

    def evaluate_checks(self, checks: list[CheckRule]) -> list[str]:
        """Messages of checks whose function returned a falsy value."""
        errors = []
        for rule in checks:
            outcome = call_function(
                FunctionCall(call=rule.call, args=rule.args), self.data_model, self.scope, self.functions
            )
            if outcome is UNRESOLVED:
                continue
            if not outcome:
                errors.append(rule.message)
        return errors
