"""Protocol message shapes.

Server-to-client messages mutate surfaces; the single client-to-server
message reports a user action. Every message carries a ``type``
discriminant; payload keys are camelCase on the wire.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import AfterValidator, Field, StrictBool, StrictInt, StrictStr

from a2ui.binding import is_valid_pointer
from a2ui.catalog.common import CatalogId, ComponentId, SurfaceId
from a2ui.core.validate import WireModel


def _check_absolute_pointer(path: str) -> str:
    if not is_valid_pointer(path):
        raise ValueError(f"invalid data model path: {path!r}")
    return path


AbsolutePointer = Annotated[StrictStr, AfterValidator(_check_absolute_pointer)]


# ============================================================================
# Server to client
# ============================================================================


class CreateSurfaceMessage(WireModel):
    type: Literal["createSurface"] = "createSurface"
    surface_id: SurfaceId
    catalog_id: CatalogId
    theme: Any = None
    send_data_model: StrictBool | None = None


class UpdateComponentsMessage(WireModel):
    """Components are validated later, per item, against the surface catalog."""

    type: Literal["updateComponents"] = "updateComponents"
    surface_id: SurfaceId
    components: list[Any]


class UpdateDataModelMessage(WireModel):
    type: Literal["updateDataModel"] = "updateDataModel"
    surface_id: SurfaceId
    path: AbsolutePointer
    value: Any = None


ServerMessage = Union[CreateSurfaceMessage, UpdateComponentsMessage, UpdateDataModelMessage]


# ============================================================================
# Client to server
# ============================================================================


class ActionContext(WireModel):
    form_values: dict[str, Any] | None = None
    data_bindings: dict[str, Any] | None = None
    data_model: Any = None

    def is_empty(self) -> bool:
        return not self.form_values and not self.data_bindings and self.data_model is None


class ActionMessage(WireModel):
    type: Literal["action"] = "action"
    surface_id: SurfaceId
    source_component_id: ComponentId
    action_name: Annotated[StrictStr, Field(min_length=1)]
    timestamp: StrictInt
    context: ActionContext | None = None


ClientMessage = ActionMessage

SERVER_MESSAGE_TYPES: dict[str, type[WireModel]] = {
    "createSurface": CreateSurfaceMessage,
    "updateComponents": UpdateComponentsMessage,
    "updateDataModel": UpdateDataModelMessage,
}

CLIENT_MESSAGE_TYPES: dict[str, type[WireModel]] = {
    "action": ActionMessage,
}
