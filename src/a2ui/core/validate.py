"""Wire model base and structured validation issues."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


class ValidationError(Exception):
    """Validation failed."""

    pass


class WireModel(BaseModel):
    """Base for everything that crosses the protocol boundary.

    camelCase on the wire, snake_case in Python, immutable once parsed.
    Unknown keys are dropped so that additive protocol changes do not
    invalidate otherwise well-formed payloads.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class IssueCode(str, Enum):
    """Why a single field failed."""

    MISSING = "missing"
    WRONG_TYPE = "wrong_type"
    INVALID_VALUE = "invalid_value"


@dataclass(frozen=True)
class FieldIssue:
    """One failing field inside a payload."""

    path: str
    code: IssueCode
    message: str


def _issue_code(error_type: str) -> IssueCode:
    if error_type == "missing":
        return IssueCode.MISSING
    if error_type.endswith("_type") or error_type in ("model_attributes_type", "is_instance_of"):
        return IssueCode.WRONG_TYPE
    return IssueCode.INVALID_VALUE


def _loc_to_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def issues_from_error(error: PydanticValidationError) -> tuple[FieldIssue, ...]:
    """
    Flatten a pydantic error into field issues.

    Args:
        error: pydantic validation error

    Returns:
        Issues in the order pydantic reported them, de-duplicated by path
    """
    seen: set[tuple[str, IssueCode]] = set()
    issues: list[FieldIssue] = []
    for detail in error.errors(include_url=False):
        path = _loc_to_path(tuple(detail.get("loc", ())))
        code = _issue_code(detail.get("type", ""))
        if (path, code) in seen:
            continue
        seen.add((path, code))
        issues.append(FieldIssue(path=path, code=code, message=detail.get("msg", "invalid")))
    return tuple(issues)


def dump_wire(model: BaseModel) -> dict[str, Any]:
    """Serialize a wire model to its JSON-compatible camelCase form."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)
