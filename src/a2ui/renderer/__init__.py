"""
Renderer
Surface snapshot in, neutral RenderNode tree out
"""

from .context import RenderContext
from .dispatcher import FALLBACK_TAG, Handler, Renderer
from .handlers import STANDARD_HANDLERS
from .images import ImageResolver, image_source, normalize_images
from .nodes import RenderNode

__all__ = [
    "RenderContext",
    "FALLBACK_TAG",
    "Handler",
    "Renderer",
    "STANDARD_HANDLERS",
    "ImageResolver",
    "image_source",
    "normalize_images",
    "RenderNode",
]
