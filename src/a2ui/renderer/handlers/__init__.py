"""Standard handler table: one entry per catalog variant plus ``Fallback``."""

from .content import CONTENT_HANDLERS
from .fallback import FALLBACK_HANDLERS, render_fallback
from .input import INPUT_HANDLERS
from .layout import LAYOUT_HANDLERS

STANDARD_HANDLERS = {
    **LAYOUT_HANDLERS,
    **CONTENT_HANDLERS,
    **INPUT_HANDLERS,
    **FALLBACK_HANDLERS,
}

__all__ = [
    "CONTENT_HANDLERS",
    "FALLBACK_HANDLERS",
    "INPUT_HANDLERS",
    "LAYOUT_HANDLERS",
    "STANDARD_HANDLERS",
    "render_fallback",
]
