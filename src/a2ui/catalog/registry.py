"""Catalog registry: catalogId -> closed set of component variants."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from a2ui.core.logging_config import get_logger
from .components import STANDARD_COMPONENTS, ComponentBase, tag_of

logger = get_logger(__name__)

STANDARD_CATALOG_ID = "standard"


@dataclass(frozen=True)
class Catalog:
    """A versioned, closed set of component variants keyed by discriminant."""

    catalog_id: str
    variants: Mapping[str, type[ComponentBase]] = field(default_factory=dict)

    @classmethod
    def from_variants(cls, catalog_id: str, variants: Iterable[type[ComponentBase]]) -> "Catalog":
        table = {tag_of(variant): variant for variant in variants}
        return cls(catalog_id=catalog_id, variants=MappingProxyType(table))

    def get(self, tag: str) -> type[ComponentBase] | None:
        return self.variants.get(tag)

    @property
    def tags(self) -> frozenset[str]:
        return frozenset(self.variants)

    def __contains__(self, tag: object) -> bool:
        return tag in self.variants


def standard_catalog() -> Catalog:
    return Catalog.from_variants(STANDARD_CATALOG_ID, STANDARD_COMPONENTS)


class CatalogRegistry:
    """
    Registry of available catalogs.

    Surfaces name their catalog at creation; every validation for that
    surface dispatches through the catalog registered under that id.
    """

    def __init__(self, catalogs: Iterable[Catalog] | None = None) -> None:
        self._catalogs: dict[str, Catalog] = {}
        for catalog in catalogs if catalogs is not None else (standard_catalog(),):
            self.register(catalog)

    def register(self, catalog: Catalog) -> None:
        if catalog.catalog_id in self._catalogs:
            logger.warning("catalog_replaced", catalog_id=catalog.catalog_id)
        self._catalogs[catalog.catalog_id] = catalog
        logger.debug("catalog_registered", catalog_id=catalog.catalog_id, variants=len(catalog.variants))

    def get(self, catalog_id: str) -> Catalog | None:
        return self._catalogs.get(catalog_id)

    def ids(self) -> list[str]:
        return list(self._catalogs)

    def __contains__(self, catalog_id: object) -> bool:
        return catalog_id in self._catalogs
