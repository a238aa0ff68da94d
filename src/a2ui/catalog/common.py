"""Shared catalog types: identifiers, dynamic values, actions and tokens."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from a2ui.binding.models import DataBinding, FunctionCall, JsonPointer
from a2ui.core.validate import WireModel

# ============================================================================
# Identifiers
# ============================================================================

ComponentId = Annotated[StrictStr, Field(min_length=1)]
SurfaceId = Annotated[StrictStr, Field(min_length=1)]
CatalogId = Annotated[StrictStr, Field(min_length=1)]

Number = Union[StrictInt, StrictFloat]

# ============================================================================
# Dynamic values: literal, data binding or function call
# ============================================================================

DynamicString = Union[StrictStr, DataBinding, FunctionCall]
DynamicNumber = Union[StrictInt, StrictFloat, DataBinding, FunctionCall]
DynamicBoolean = Union[StrictBool, DataBinding, FunctionCall]
DynamicStringList = Union[list[StrictStr], DataBinding, FunctionCall]


class ChildTemplate(WireModel):
    """Render ``component_id`` once per item of the list at ``path``."""

    component_id: ComponentId
    path: JsonPointer


ChildList = Union[list[ComponentId], ChildTemplate]


class Accessibility(WireModel):
    label: DynamicString | None = None
    description: DynamicString | None = None


# ============================================================================
# Actions and checks
# ============================================================================


class EventSpec(WireModel):
    name: Annotated[StrictStr, Field(min_length=1)]
    context: dict[str, Any] | None = None


class EventAction(WireModel):
    """Server event raised on interaction."""

    event: EventSpec


class FunctionCallAction(WireModel):
    """Local client function invoked on interaction."""

    function_call: FunctionCall


Action = Union[EventAction, FunctionCallAction]


class CheckRule(WireModel):
    call: Annotated[StrictStr, Field(min_length=1)]
    args: dict[str, Any] | None = None
    message: StrictStr


# ============================================================================
# Tokens
# ============================================================================

TextVariant = Literal["h1", "h2", "h3", "h4", "h5", "caption", "body"]
ImageFit = Literal["contain", "cover", "fill", "none", "scale-down"]
ImageVariant = Literal["icon", "avatar", "smallFeature", "mediumFeature", "largeFeature", "header"]
ButtonVariant = Literal["primary", "borderless"]
TextFieldVariant = Literal["longText", "number", "shortText", "obscured"]
ChoicePickerVariant = Literal["multipleSelection", "mutuallyExclusive"]
Justify = Literal["start", "center", "end", "spaceBetween", "spaceAround", "spaceEvenly", "stretch"]
Align = Literal["start", "center", "end", "stretch"]
Axis = Literal["horizontal", "vertical"]


class ComponentFamily(str, Enum):
    LAYOUT = "layout"
    CONTENT = "content"
    INPUT = "input"
    SYNTHETIC = "synthetic"


# Input keys that carry the discriminant. ``component`` is canonical.
TAG_KEYS = ("component", "componentType")


def tag_field(tag: str) -> Any:
    """Discriminant field: defaulted to ``tag``, accepted under either key."""
    return Field(
        default=tag,
        validation_alias=AliasChoices(*TAG_KEYS),
        serialization_alias=TAG_KEYS[0],
    )
