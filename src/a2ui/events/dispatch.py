"""
Action Dispatcher
Turns user interactions into ``action`` messages for the server.
"""

import threading
import time
from collections.abc import Callable, Iterable, Mapping
from copy import deepcopy
from dataclasses import dataclass
from typing import Any

from returns.result import Failure, Result, Success

from a2ui.binding import UNRESOLVED, FunctionTable, resolve_dynamic, resolve_pointer
from a2ui.binding.dynamic import call_function
from a2ui.catalog import ComponentBase, EventAction, FunctionCallAction
from a2ui.core.logging_config import get_logger
from a2ui.monitoring import metrics_collector
from a2ui.protocol import ActionContext, ActionMessage
from a2ui.surfaces import Surface, SurfaceStore
from .errors import ActionError, ActionErrorKind

logger = get_logger(__name__)

Sink = Callable[[ActionMessage], Any]

DEFAULT_DEBOUNCE_MS = 300


@dataclass(frozen=True)
class TriggerOutcome:
    """What a component's action descriptor produced."""

    message: ActionMessage | None = None
    function_result: Any = None


def _plain(value: Any) -> Any:
    return None if value is UNRESOLVED else value


def resolve_event_context(
    context: Mapping[str, Any] | None,
    data_model: Any,
    functions: FunctionTable | None = None,
) -> dict[str, Any]:
    """Resolve an event's context entries; ``{"path": ...}`` entries read the data model."""
    resolved: dict[str, Any] = {}
    for name, value in (context or {}).items():
        if isinstance(value, Mapping) and set(value.keys()) == {"path"}:
            resolved[name] = _plain(resolve_pointer(data_model, value["path"]))
        else:
            resolved[name] = _plain(resolve_dynamic(value, data_model, functions=functions))
    return resolved


class ActionDispatcher:
    """
    Builds, debounces and sends action messages.

    Debouncing is per component: a second event from the same component
    within ``debounce_ms`` of the last accepted one is dropped.
    """

    def __init__(
        self,
        store: SurfaceStore,
        sink: Sink | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        functions: FunctionTable | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.sink = sink
        self.debounce_ms = debounce_ms
        self.functions: FunctionTable = functions or {}
        self._clock = clock
        self._wall_clock = wall_clock
        self._last_dispatch: dict[tuple[str, str], float] = {}
        self._lock = threading.Lock()

    def set_sink(self, sink: Sink | None) -> None:
        self.sink = sink

    def dispose(self) -> None:
        """Forget debounce history."""
        with self._lock:
            self._last_dispatch.clear()

    def _accept(self, surface_id: str, component_id: str) -> bool:
        key = (surface_id, component_id)
        now = self._clock() * 1000
        with self._lock:
            last = self._last_dispatch.get(key)
            if last is not None and now - last < self.debounce_ms:
                return False
            self._last_dispatch[key] = now
        return True

    def _surface(self, surface_id: str) -> Result[Surface, ActionError]:
        surface = self.store.get_surface(surface_id)
        if surface is None:
            return Failure(
                ActionError(
                    ActionErrorKind.SURFACE_NOT_FOUND,
                    f"Surface '{surface_id}' does not exist",
                    surface_id=surface_id,
                )
            )
        return Success(surface)

    def dispatch(
        self,
        surface_id: str,
        component_id: str,
        action_name: str,
        form_values: Mapping[str, Any] | None = None,
        data_bindings: Mapping[str, Any] | None = None,
        resolve_bindings: Iterable[str] = (),
        debounce: bool = True,
    ) -> Result[ActionMessage, ActionError]:
        """
        Build an action message and hand it to the sink.

        Args:
            surface_id: Surface the interaction happened on
            component_id: Source component
            action_name: Event name
            form_values: Collected form values
            data_bindings: Pre-resolved binding values
            resolve_bindings: Paths resolved against the data model at dispatch time
            debounce: Apply the per-component debounce window

        Returns:
            Success with the sent message, or Failure (debounced, unknown surface, sink error)
        """
        found = self._surface(surface_id)
        if isinstance(found, Failure):
            return found
        surface = found.unwrap()

        if debounce and not self._accept(surface_id, component_id):
            metrics_collector.record_action("debounced")
            logger.debug("action_debounced", surface_id=surface_id, component_id=component_id)
            return Failure(
                ActionError(
                    ActionErrorKind.DEBOUNCED,
                    f"Action from '{component_id}' debounced",
                    surface_id=surface_id,
                    component_id=component_id,
                )
            )

        bindings = dict(data_bindings or {})
        for path in resolve_bindings:
            bindings[path] = _plain(resolve_pointer(surface.data_model, path))

        context = ActionContext(
            form_values=dict(form_values) if form_values else None,
            data_bindings=bindings or None,
            data_model=deepcopy(surface.data_model) if surface.send_data_model else None,
        )
        message = ActionMessage(
            surface_id=surface_id,
            source_component_id=component_id,
            action_name=action_name,
            timestamp=int(self._wall_clock() * 1000),
            context=None if context.is_empty() else context,
        )

        if self.sink is not None:
            try:
                self.sink(message)
            except Exception as e:
                metrics_collector.record_action("failed")
                logger.error(
                    "action_sink_failed",
                    surface_id=surface_id,
                    component_id=component_id,
                    action=action_name,
                    error=str(e),
                    exc_info=True,
                )
                return Failure(
                    ActionError(
                        ActionErrorKind.SINK_FAILED,
                        f"Sink failed: {e}",
                        surface_id=surface_id,
                        component_id=component_id,
                    )
                )

        metrics_collector.record_action("sent")
        logger.info("action_dispatched", surface_id=surface_id, component_id=component_id, action=action_name)
        return Success(message)

    def trigger(
        self,
        surface_id: str,
        component_id: str,
        form_values: Mapping[str, Any] | None = None,
    ) -> Result[TriggerOutcome, ActionError]:
        """Run the action declared on a component (server event or local function)."""
        found = self._surface(surface_id)
        if isinstance(found, Failure):
            return found
        surface = found.unwrap()

        component = surface.get(component_id)
        if not isinstance(component, ComponentBase):
            return Failure(
                ActionError(
                    ActionErrorKind.COMPONENT_NOT_FOUND,
                    f"No valid component '{component_id}'",
                    surface_id=surface_id,
                    component_id=component_id,
                )
            )

        action = getattr(component, "action", None)
        if isinstance(action, EventAction):
            bindings = resolve_event_context(action.event.context, surface.data_model, self.functions)
            return self.dispatch(
                surface_id,
                component_id,
                action.event.name,
                form_values=form_values,
                data_bindings=bindings,
            ).map(lambda message: TriggerOutcome(message=message))

        if isinstance(action, FunctionCallAction):
            result = call_function(action.function_call, surface.data_model, functions=self.functions)
            if result is UNRESOLVED:
                metrics_collector.record_action("failed")
                return Failure(
                    ActionError(
                        ActionErrorKind.FUNCTION_FAILED,
                        f"Function '{action.function_call.call}' is unknown or failed",
                        surface_id=surface_id,
                        component_id=component_id,
                    )
                )
            metrics_collector.record_action("local")
            return Success(TriggerOutcome(function_result=result))

        return Failure(
            ActionError(
                ActionErrorKind.NO_ACTION,
                f"Component '{component_id}' declares no action",
                surface_id=surface_id,
                component_id=component_id,
            )
        )
