"""
Schema Validation
Untrusted JSON in, typed components or structured failures out
"""

from .errors import FailureKind, ValidationFailure
from .validator import ComponentTree, SchemaValidator, read_tag

__all__ = [
    "FailureKind",
    "ValidationFailure",
    "ComponentTree",
    "SchemaValidator",
    "read_tag",
]
