"""
Schema Validator
Parses untrusted component payloads against a registered catalog.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure, Result, Success

from a2ui.catalog import TAG_KEYS, CatalogRegistry, ComponentBase, STANDARD_CATALOG_ID
from a2ui.core.json import JSONParseError, validate_json_depth
from a2ui.core.logging_config import get_logger
from a2ui.core.validate import issues_from_error
from a2ui.monitoring import metrics_collector
from .errors import FailureKind, ValidationFailure

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComponentTree:
    """A validated, reference-complete set of components."""

    components: Mapping[str, ComponentBase] = field(default_factory=dict)
    root_id: str | None = None

    @property
    def root(self) -> ComponentBase | None:
        return self.components.get(self.root_id) if self.root_id is not None else None

    def __len__(self) -> int:
        return len(self.components)


def read_tag(raw: Mapping[str, Any]) -> Any:
    """Discriminant value under the first tag key present, or None."""
    for key in TAG_KEYS:
        if key in raw:
            return raw[key]
    return None


class SchemaValidator:
    """
    Validates raw component payloads.

    The discriminant is matched against the catalog before any variant is
    parsed, so a payload is only ever checked against the fields of the one
    variant its tag names.
    """

    def __init__(self, registry: CatalogRegistry | None = None, max_depth: int = 20) -> None:
        self.registry = registry or CatalogRegistry()
        self.max_depth = max_depth

    def validate_component(
        self, raw: Any, catalog_id: str = STANDARD_CATALOG_ID
    ) -> Result[ComponentBase, ValidationFailure]:
        """
        Validate a single component payload.

        Args:
            raw: Decoded JSON value from the wire
            catalog_id: Catalog to validate against

        Returns:
            Success with the typed component, or Failure describing why not
        """
        result = self._validate(raw, catalog_id)
        if isinstance(result, Failure):
            failure = result.failure()
            metrics_collector.record_validation_failure(failure.kind.value)
            logger.debug(
                "component_rejected",
                kind=failure.kind.value,
                component_id=failure.component_id,
                component_type=failure.component_type,
            )
        return result

    def _validate(self, raw: Any, catalog_id: str) -> Result[ComponentBase, ValidationFailure]:
        catalog = self.registry.get(catalog_id)
        if catalog is None:
            return Failure(
                ValidationFailure(FailureKind.UNKNOWN_CATALOG, f"Unknown catalog '{catalog_id}'")
            )

        if not isinstance(raw, Mapping):
            return Failure(
                ValidationFailure(
                    FailureKind.MALFORMED,
                    f"Component must be an object, got {type(raw).__name__}",
                )
            )

        try:
            validate_json_depth(raw, self.max_depth)
        except JSONParseError as e:
            return Failure(ValidationFailure(FailureKind.MALFORMED, str(e)))

        component_id = raw.get("id")
        if not isinstance(component_id, str) or not component_id:
            return Failure(
                ValidationFailure(FailureKind.MALFORMED, "Component requires a non-empty string 'id'")
            )

        tag = read_tag(raw)
        if not isinstance(tag, str) or not tag:
            return Failure(
                ValidationFailure(
                    FailureKind.UNKNOWN_COMPONENT,
                    "Component has no type discriminant",
                    component_id=component_id,
                )
            )

        variant = catalog.get(tag)
        if variant is None:
            return Failure(
                ValidationFailure(
                    FailureKind.UNKNOWN_COMPONENT,
                    f"Unknown component type '{tag}' in catalog '{catalog_id}'",
                    component_id=component_id,
                    component_type=tag,
                )
            )

        try:
            return Success(variant.model_validate(raw))
        except PydanticValidationError as e:
            issues = issues_from_error(e)
            return Failure(
                ValidationFailure(
                    FailureKind.INVALID_FIELDS,
                    f"{tag} '{component_id}' has {len(issues)} invalid field(s)",
                    component_id=component_id,
                    component_type=tag,
                    issues=issues,
                )
            )

    def validate_components(
        self, raws: Iterable[Any], catalog_id: str = STANDARD_CATALOG_ID
    ) -> list[Result[ComponentBase, ValidationFailure]]:
        """Validate a batch; one result per payload, in input order."""
        return [self.validate_component(raw, catalog_id) for raw in raws]

    def validate_tree(
        self,
        raws: Iterable[Any],
        catalog_id: str = STANDARD_CATALOG_ID,
        root_id: str | None = None,
    ) -> Result[ComponentTree, tuple[ValidationFailure, ...]]:
        """
        Validate a whole component tree.

        On top of per-component validation, ids must be unique and every
        child reference must name a component in the same batch.
        """
        failures: list[ValidationFailure] = []
        components: dict[str, ComponentBase] = {}

        for result in self.validate_components(raws, catalog_id):
            if isinstance(result, Failure):
                failures.append(result.failure())
                continue
            component = result.unwrap()
            if component.id in components:
                failures.append(
                    ValidationFailure(
                        FailureKind.MALFORMED,
                        f"Duplicate component id '{component.id}'",
                        component_id=component.id,
                        component_type=component.tag,
                    )
                )
                continue
            components[component.id] = component

        for component in components.values():
            for child_id in component.child_ids():
                if child_id not in components:
                    failures.append(
                        ValidationFailure(
                            FailureKind.DANGLING_REFERENCE,
                            f"'{component.id}' references missing component '{child_id}'",
                            component_id=component.id,
                            component_type=component.tag,
                        )
                    )

        if root_id is not None and root_id not in components:
            failures.append(
                ValidationFailure(
                    FailureKind.DANGLING_REFERENCE,
                    f"Root component '{root_id}' is not in the tree",
                    component_id=root_id,
                )
            )

        if failures:
            for failure in failures:
                if failure.kind is FailureKind.DANGLING_REFERENCE:
                    metrics_collector.record_validation_failure(failure.kind.value)
            return Failure(tuple(failures))

        if root_id is None and components:
            root_id = "root" if "root" in components else next(iter(components))
        return Success(ComponentTree(components=MappingProxyType(components), root_id=root_id))
