"""Pre-render pass resolving generated and inline images to URLs."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace
from types import MappingProxyType

from a2ui.catalog import FallbackReason, Image
from a2ui.core.logging_config import get_logger
from a2ui.core.validate import dump_wire
from a2ui.surfaces import ComponentEntry, InvalidComponent, Surface
from a2ui.validation import FailureKind, ValidationFailure

logger = get_logger(__name__)

ImageResolver = Callable[[str], Awaitable[str | None]]

DATA_URL_PREFIX = "data:"


def image_source(image: Image) -> str | None:
    """Literal prompt or ``data:`` URL that still needs resolving, if any."""
    if isinstance(image.url, str) and image.url.startswith(DATA_URL_PREFIX):
        return image.url
    if image.url is None and isinstance(image.prompt, str) and image.prompt:
        return image.prompt
    return None


def _unresolved(image: Image, detail: str) -> InvalidComponent:
    return InvalidComponent(
        id=image.id,
        raw=dump_wire(image),
        failure=ValidationFailure(
            FailureKind.INVALID_FIELDS,
            f"Image '{image.id}' could not be resolved: {detail}",
            component_id=image.id,
            component_type="Image",
        ),
        reason=FallbackReason.IMAGE_UNRESOLVED,
    )


async def normalize_images(surface: Surface, resolve_image: ImageResolver) -> Surface:
    """
    Resolve every prompt or inline image of a surface.

    Each distinct source is resolved once. The returned snapshot carries
    the resolved URLs; images whose resolution returned None or raised
    become ``image_unresolved`` entries. The input snapshot is untouched.

    Args:
        surface: Snapshot to normalize
        resolve_image: Async collaborator mapping a prompt or data URL to a URL

    Returns:
        A new snapshot (or ``surface`` itself if nothing needed resolving)
    """
    pending: dict[str, Image] = {}
    for component_id, entry in surface.components.items():
        if isinstance(entry, Image) and image_source(entry) is not None:
            pending[component_id] = entry
    if not pending:
        return surface

    sources = sorted({image_source(image) for image in pending.values()})
    results = await asyncio.gather(*(resolve_image(source) for source in sources), return_exceptions=True)
    resolved = dict(zip(sources, results))

    components: dict[str, ComponentEntry] = dict(surface.components)
    for component_id, image in pending.items():
        outcome = resolved[image_source(image)]
        if isinstance(outcome, BaseException):
            logger.warning(
                "image_resolution_failed",
                surface_id=surface.surface_id,
                component_id=component_id,
                error=str(outcome),
            )
            components[component_id] = _unresolved(image, str(outcome))
        elif isinstance(outcome, str) and outcome:
            components[component_id] = image.model_copy(update={"url": outcome})
        else:
            logger.info("image_unresolved", surface_id=surface.surface_id, component_id=component_id)
            components[component_id] = _unresolved(image, "resolver returned no URL")

    return replace(surface, components=MappingProxyType(components))
