"""Core utilities and infrastructure."""

from .config import RetentionPolicy, Settings, get_settings
from .validate import (
    FieldIssue,
    IssueCode,
    ValidationError,
    WireModel,
    dump_wire,
    issues_from_error,
)
from .logging_config import configure_from_settings, configure_logging, get_logger, LogContext
from .json import (
    JSONDepthError,
    JSONParseError,
    decode_json,
    encode_json,
    validate_json_size,
    validate_json_depth,
)


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "RetentionPolicy",
    "Settings",
    "get_settings",
    # Validation
    "FieldIssue",
    "IssueCode",
    "ValidationError",
    "WireModel",
    "dump_wire",
    "issues_from_error",
    # Logging
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "JSONDepthError",
    "JSONParseError",
    "decode_json",
    "encode_json",
    "validate_json_size",
    "validate_json_depth",
    # DI
    "create_container",
]
