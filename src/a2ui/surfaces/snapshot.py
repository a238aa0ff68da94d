"""Surface snapshots for an external key-value store."""

from types import MappingProxyType
from typing import Any

from pydantic import Field, StrictBool, StrictFloat, StrictInt, ValidationError as PydanticValidationError
from returns.result import Success

from a2ui.catalog import ComponentBase
from a2ui.core.json import decode_json, encode_json
from a2ui.core.logging_config import get_logger
from a2ui.core.validate import ValidationError, WireModel, dump_wire
from a2ui.validation import SchemaValidator
from .models import ComponentEntry, InvalidComponent, Surface

logger = get_logger(__name__)


class SurfaceSnapshot(WireModel):
    """Persisted shape of a surface."""

    surface_id: str = Field(min_length=1)
    catalog_id: str = Field(min_length=1)
    theme: Any = None
    send_data_model: StrictBool = False
    components: list[Any] = Field(default_factory=list)
    data_model: Any = Field(default_factory=dict)
    created_at: StrictInt | StrictFloat = 0.0
    updated_at: StrictInt | StrictFloat = 0.0
    revision: StrictInt = 0


def _dump_entry(entry: ComponentEntry) -> Any:
    if isinstance(entry, InvalidComponent):
        return entry.raw
    return dump_wire(entry)


def dump_surface(surface: Surface) -> dict[str, Any]:
    """Serialize a surface; invalid entries keep their raw payload."""
    return {
        "surfaceId": surface.surface_id,
        "catalogId": surface.catalog_id,
        "theme": surface.theme,
        "sendDataModel": surface.send_data_model,
        "components": [_dump_entry(entry) for entry in surface.components.values()],
        "dataModel": surface.data_model,
        "createdAt": surface.created_at,
        "updatedAt": surface.updated_at,
        "revision": surface.revision,
    }


def load_surface(data: Any, validator: SchemaValidator | None = None) -> Surface:
    """
    Rebuild a surface from ``dump_surface`` output.

    Components are validated again against the surface catalog, so a
    snapshot taken under an older catalog degrades to invalid entries
    instead of failing the whole load.

    Raises:
        ValidationError: If the envelope is malformed or its catalog is unknown
    """
    try:
        snapshot = SurfaceSnapshot.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid surface snapshot: {e}") from e

    validator = validator or SchemaValidator()
    if snapshot.catalog_id not in validator.registry:
        raise ValidationError(f"Snapshot names unknown catalog '{snapshot.catalog_id}'")

    components: dict[str, ComponentEntry] = {}
    for raw in snapshot.components:
        result = validator.validate_component(raw, snapshot.catalog_id)
        if isinstance(result, Success):
            component: ComponentBase = result.unwrap()
            components[component.id] = component
            continue
        failure = result.failure()
        if failure.component_id is None:
            logger.warning("snapshot_entry_dropped", surface_id=snapshot.surface_id, reason=failure.message)
            continue
        components[failure.component_id] = InvalidComponent(id=failure.component_id, raw=raw, failure=failure)

    return Surface(
        surface_id=snapshot.surface_id,
        catalog_id=snapshot.catalog_id,
        theme=snapshot.theme,
        send_data_model=snapshot.send_data_model,
        components=MappingProxyType(components),
        data_model=snapshot.data_model,
        created_at=float(snapshot.created_at),
        updated_at=float(snapshot.updated_at),
        revision=snapshot.revision,
    )


def dumps_surface(surface: Surface) -> str:
    return encode_json(dump_surface(surface))


def loads_surface(text: str | bytes, validator: SchemaValidator | None = None) -> Surface:
    return load_surface(decode_json(text), validator)
