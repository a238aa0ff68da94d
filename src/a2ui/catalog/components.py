"""Standard component catalog.

Eighteen variants in three families plus the synthetic ``Fallback`` variant:

- Layout (7): Row, Column, List, Card, Tabs, Divider, Modal
- Content (5): Text, Image, Icon, Video, AudioPlayer
- Input (6): Button, CheckBox, TextField, DateTimeInput, ChoicePicker, Slider

Children are referenced by id, never nested; ``child_ids()`` lists every
reference a component makes so trees can be checked for dangling edges.
"""

from enum import Enum
from typing import ClassVar, Literal, Union

from pydantic import AliasChoices, Field, StrictBool, StrictStr, model_validator

from a2ui.core.validate import WireModel
from .common import (
    Accessibility,
    Action,
    Align,
    Axis,
    ButtonVariant,
    CheckRule,
    ChildList,
    ChildTemplate,
    ChoicePickerVariant,
    ComponentFamily,
    ComponentId,
    DynamicBoolean,
    DynamicNumber,
    DynamicString,
    DynamicStringList,
    ImageFit,
    ImageVariant,
    Justify,
    Number,
    TextFieldVariant,
    TextVariant,
    tag_field,
)


class ComponentBase(WireModel):
    """Fields shared by every variant."""

    family: ClassVar[ComponentFamily]

    id: ComponentId
    accessibility: Accessibility | None = None
    weight: Number | None = None

    @property
    def tag(self) -> str:
        return self.component_type  # type: ignore[attr-defined]

    def child_ids(self) -> list[str]:
        return []


def _child_list_ids(children: ChildList) -> list[str]:
    if isinstance(children, ChildTemplate):
        return [children.component_id]
    return list(children)


# =============================================================================
# Layout
# =============================================================================


class Row(ComponentBase):
    """Horizontal container."""

    family: ClassVar[ComponentFamily] = ComponentFamily.LAYOUT
    component_type: Literal["Row"] = tag_field("Row")
    children: ChildList
    justify: Justify | None = None
    align: Align | None = None

    def child_ids(self) -> list[str]:
        return _child_list_ids(self.children)


class Column(ComponentBase):
    """Vertical container."""

    family: ClassVar[ComponentFamily] = ComponentFamily.LAYOUT
    component_type: Literal["Column"] = tag_field("Column")
    children: ChildList
    justify: Justify | None = None
    align: Align | None = None

    def child_ids(self) -> list[str]:
        return _child_list_ids(self.children)


class List(ComponentBase):
    """Scrollable list, static or template driven."""

    family: ClassVar[ComponentFamily] = ComponentFamily.LAYOUT
    component_type: Literal["List"] = tag_field("List")
    children: ChildList
    direction: Axis | None = None
    align: Align | None = None

    def child_ids(self) -> list[str]:
        return _child_list_ids(self.children)


class Card(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.LAYOUT
    component_type: Literal["Card"] = tag_field("Card")
    child: ComponentId

    def child_ids(self) -> list[str]:
        return [self.child]


class TabItem(WireModel):
    title: DynamicString
    child: ComponentId


class Tabs(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.LAYOUT
    component_type: Literal["Tabs"] = tag_field("Tabs")
    tabs: list[TabItem]

    def child_ids(self) -> list[str]:
        return [tab.child for tab in self.tabs]


class Divider(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.LAYOUT
    component_type: Literal["Divider"] = tag_field("Divider")
    axis: Axis | None = None


class Modal(ComponentBase):
    """Overlay opened by ``trigger``, showing ``content``."""

    family: ClassVar[ComponentFamily] = ComponentFamily.LAYOUT
    component_type: Literal["Modal"] = tag_field("Modal")
    trigger: ComponentId
    content: ComponentId

    def child_ids(self) -> list[str]:
        return [self.trigger, self.content]


# =============================================================================
# Content
# =============================================================================


class Text(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.CONTENT
    component_type: Literal["Text"] = tag_field("Text")
    text: DynamicString = Field(
        validation_alias=AliasChoices("text", "content"), serialization_alias="text"
    )
    variant: TextVariant | None = None


class Image(ComponentBase):
    """Image by URL, or by a generation prompt resolved before rendering."""

    family: ClassVar[ComponentFamily] = ComponentFamily.CONTENT
    component_type: Literal["Image"] = tag_field("Image")
    url: DynamicString | None = Field(
        default=None, validation_alias=AliasChoices("url", "src"), serialization_alias="url"
    )
    prompt: DynamicString | None = None
    fit: ImageFit | None = None
    variant: ImageVariant | None = None

    @model_validator(mode="after")
    def _require_source(self) -> "Image":
        if self.url is None and self.prompt is None:
            raise ValueError("Image requires either 'url' or 'prompt'")
        return self


class Icon(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.CONTENT
    component_type: Literal["Icon"] = tag_field("Icon")
    name: DynamicString


class Video(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.CONTENT
    component_type: Literal["Video"] = tag_field("Video")
    url: DynamicString


class AudioPlayer(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.CONTENT
    component_type: Literal["AudioPlayer"] = tag_field("AudioPlayer")
    url: DynamicString
    description: DynamicString | None = None


# =============================================================================
# Input
# =============================================================================


class Button(ComponentBase):
    """Clickable button; ``child`` is the label component."""

    family: ClassVar[ComponentFamily] = ComponentFamily.INPUT
    component_type: Literal["Button"] = tag_field("Button")
    child: ComponentId
    variant: ButtonVariant | None = None
    action: Action
    checks: list[CheckRule] | None = None

    def child_ids(self) -> list[str]:
        return [self.child]


class CheckBox(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.INPUT
    component_type: Literal["CheckBox"] = tag_field("CheckBox")
    label: DynamicString
    value: DynamicBoolean
    action: Action | None = None
    checks: list[CheckRule] | None = None


class TextField(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.INPUT
    component_type: Literal["TextField"] = tag_field("TextField")
    label: DynamicString
    value: DynamicString | None = None
    variant: TextFieldVariant | None = None
    action: Action | None = None
    checks: list[CheckRule] | None = None


class DateTimeInput(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.INPUT
    component_type: Literal["DateTimeInput"] = tag_field("DateTimeInput")
    value: DynamicString
    enable_date: StrictBool | None = None
    enable_time: StrictBool | None = None
    min: DynamicString | None = None
    max: DynamicString | None = None
    action: Action | None = None
    checks: list[CheckRule] | None = None


class ChoiceOption(WireModel):
    label: DynamicString
    value: StrictStr


class ChoicePicker(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.INPUT
    component_type: Literal["ChoicePicker"] = tag_field("ChoicePicker")
    label: DynamicString | None = None
    variant: ChoicePickerVariant | None = None
    options: list[ChoiceOption]
    value: DynamicStringList
    action: Action | None = None
    checks: list[CheckRule] | None = None


class Slider(ComponentBase):
    family: ClassVar[ComponentFamily] = ComponentFamily.INPUT
    component_type: Literal["Slider"] = tag_field("Slider")
    label: DynamicString | None = None
    min: Number
    max: Number
    value: DynamicNumber
    action: Action | None = None
    checks: list[CheckRule] | None = None


# =============================================================================
# Synthetic fallback
# =============================================================================


class FallbackReason(str, Enum):
    """Why a subtree was replaced by a placeholder."""

    MISSING = "missing"
    MALFORMED = "malformed"
    UNKNOWN_COMPONENT = "unknown_component"
    INVALID_FIELDS = "invalid_fields"
    NO_RENDERER = "no_renderer"
    CYCLE = "cycle"
    DEPTH_EXCEEDED = "depth_exceeded"
    IMAGE_UNRESOLVED = "image_unresolved"
    RENDER_ERROR = "render_error"


class Fallback(ComponentBase):
    """Placeholder for a missing or invalid artifact. Never accepted from the wire."""

    family: ClassVar[ComponentFamily] = ComponentFamily.SYNTHETIC
    component_type: Literal["Fallback"] = tag_field("Fallback")
    reason: FallbackReason
    original_type: str | None = None
    detail: str = ""


LAYOUT_COMPONENTS: tuple[type[ComponentBase], ...] = (Row, Column, List, Card, Tabs, Divider, Modal)
CONTENT_COMPONENTS: tuple[type[ComponentBase], ...] = (Text, Image, Icon, Video, AudioPlayer)
INPUT_COMPONENTS: tuple[type[ComponentBase], ...] = (
    Button,
    CheckBox,
    TextField,
    DateTimeInput,
    ChoicePicker,
    Slider,
)

STANDARD_COMPONENTS = LAYOUT_COMPONENTS + CONTENT_COMPONENTS + INPUT_COMPONENTS

Component = Union[
    Row, Column, List, Card, Tabs, Divider, Modal,
    Text, Image, Icon, Video, AudioPlayer,
    Button, CheckBox, TextField, DateTimeInput, ChoicePicker, Slider,
]


def tag_of(variant: type[ComponentBase]) -> str:
    """Discriminant value declared by a variant class."""
    return variant.model_fields["component_type"].default
