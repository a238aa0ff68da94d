"""Binding reference types shared by the catalog and the resolver."""

from typing import Annotated, Any, Literal

from pydantic import AfterValidator, Field, StrictStr

from a2ui.core.validate import WireModel
from .pointer import is_valid_pointer


def _check_pointer(path: str) -> str:
    if not is_valid_pointer(path, allow_relative=True):
        raise ValueError(f"invalid data binding path: {path!r}")
    return path


JsonPointer = Annotated[StrictStr, AfterValidator(_check_pointer)]


class DataBinding(WireModel):
    """Reference into the surface data model."""

    path: JsonPointer


class FunctionCall(WireModel):
    """Named client-side function whose return value stands in for a literal."""

    call: Annotated[StrictStr, Field(min_length=1)]
    args: dict[str, Any] | None = None
    return_type: Literal["string", "number", "boolean", "array", "object", "any", "void"] | None = None
