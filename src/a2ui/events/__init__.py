"""
Events
User interactions to outbound action messages
"""

from .dispatch import (
    DEFAULT_DEBOUNCE_MS,
    ActionDispatcher,
    Sink,
    TriggerOutcome,
    resolve_event_context,
)
from .errors import ActionError, ActionErrorKind
from .form import SUBMIT_ACTION, FormSubmitHandler, FormValueRegistry, collect_form_values

__all__ = [
    "DEFAULT_DEBOUNCE_MS",
    "ActionDispatcher",
    "Sink",
    "TriggerOutcome",
    "resolve_event_context",
    "ActionError",
    "ActionErrorKind",
    "SUBMIT_ACTION",
    "FormSubmitHandler",
    "FormValueRegistry",
    "collect_form_values",
]
