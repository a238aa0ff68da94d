"""
Component Catalog
Typed, closed set of A2UI component variants
"""

from .common import (
    Accessibility,
    Action,
    CheckRule,
    ChildList,
    ChildTemplate,
    ComponentFamily,
    DynamicBoolean,
    DynamicNumber,
    DynamicString,
    DynamicStringList,
    EventAction,
    EventSpec,
    FunctionCallAction,
    TAG_KEYS,
)
from .components import (
    AudioPlayer,
    Button,
    Card,
    CheckBox,
    ChoiceOption,
    ChoicePicker,
    Column,
    Component,
    ComponentBase,
    DateTimeInput,
    Divider,
    Fallback,
    FallbackReason,
    Icon,
    Image,
    List,
    Modal,
    Row,
    Slider,
    STANDARD_COMPONENTS,
    TabItem,
    Tabs,
    Text,
    TextField,
    Video,
    tag_of,
)
from .registry import Catalog, CatalogRegistry, STANDARD_CATALOG_ID, standard_catalog

__all__ = [
    "Accessibility",
    "Action",
    "CheckRule",
    "ChildList",
    "ChildTemplate",
    "ComponentFamily",
    "DynamicBoolean",
    "DynamicNumber",
    "DynamicString",
    "DynamicStringList",
    "EventAction",
    "EventSpec",
    "FunctionCallAction",
    "TAG_KEYS",
    "AudioPlayer",
    "Button",
    "Card",
    "CheckBox",
    "ChoiceOption",
    "ChoicePicker",
    "Column",
    "Component",
    "ComponentBase",
    "DateTimeInput",
    "Divider",
    "Fallback",
    "FallbackReason",
    "Icon",
    "Image",
    "List",
    "Modal",
    "Row",
    "Slider",
    "STANDARD_COMPONENTS",
    "TabItem",
    "Tabs",
    "Text",
    "TextField",
    "Video",
    "tag_of",
    "Catalog",
    "CatalogRegistry",
    "STANDARD_CATALOG_ID",
    "standard_catalog",
]
