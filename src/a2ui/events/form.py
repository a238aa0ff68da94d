"""Form value collection and submission."""

from collections.abc import Iterable, Mapping
from typing import Any

from returns.result import Result

from a2ui.binding import UNRESOLVED, DataBinding, resolve_pointer
from a2ui.binding.dynamic import is_bare_pointer
from a2ui.catalog import ComponentBase, ComponentFamily
from a2ui.protocol import ActionMessage
from a2ui.surfaces import Surface
from .dispatch import ActionDispatcher
from .errors import ActionError

SUBMIT_ACTION = "submit"


class FormValueRegistry:
    """Current values of the input fields of a form, by field name."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    @classmethod
    def from_surface(cls, surface: Surface) -> "FormValueRegistry":
        """Seed from every bound input component, keyed by binding path."""
        values: dict[str, Any] = {}
        for entry in surface.components.values():
            if not isinstance(entry, ComponentBase) or entry.family is not ComponentFamily.INPUT:
                continue
            bound = getattr(entry, "value", None)
            if isinstance(bound, DataBinding):
                path = bound.path
            elif is_bare_pointer(bound):
                path = bound
            else:
                continue
            value = resolve_pointer(surface.data_model, path)
            values[path] = None if value is UNRESOLVED else value
        return cls(values)

    @property
    def field_names(self) -> list[str]:
        return list(self._values)

    def get(self, name: str) -> Any:
        return self._values.get(name)

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def get_all(self) -> dict[str, Any]:
        return dict(self._values)

    def clear(self) -> None:
        self._values.clear()


def collect_form_values(registry: Any) -> dict[str, Any]:
    """Values from ``get_all()`` when the registry has it, else field by field."""
    get_all = getattr(registry, "get_all", None)
    if callable(get_all):
        return dict(get_all())
    return {name: registry.get(name) for name in registry.field_names}


class FormSubmitHandler:
    """Collects form values and sends a submit action. Submits are not debounced."""

    def __init__(self, dispatcher: ActionDispatcher) -> None:
        self.dispatcher = dispatcher

    def submit(
        self,
        surface_id: str,
        component_id: str,
        registry: Any,
        action_name: str = SUBMIT_ACTION,
        data_bindings: Mapping[str, Any] | None = None,
        resolve_bindings: Iterable[str] = (),
    ) -> Result[ActionMessage, ActionError]:
        return self.dispatcher.dispatch(
            surface_id,
            component_id,
            action_name,
            form_values=collect_form_values(registry),
            data_bindings=data_bindings,
            resolve_bindings=resolve_bindings,
            debounce=False,
        )
