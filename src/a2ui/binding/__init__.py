"""
Data Binding
JSON Pointer resolution and dynamic field coercion
"""

from .pointer import (
    UNRESOLVED,
    Unresolved,
    escape_token,
    is_root_pointer,
    is_valid_pointer,
    join_pointer,
    parse_pointer,
    resolve_pointer,
)
from .models import DataBinding, FunctionCall, JsonPointer
from .dynamic import (
    FunctionTable,
    resolve_dynamic,
    resolve_string,
    resolve_number,
    resolve_boolean,
    resolve_string_list,
)

__all__ = [
    "UNRESOLVED",
    "Unresolved",
    "escape_token",
    "is_root_pointer",
    "is_valid_pointer",
    "join_pointer",
    "parse_pointer",
    "resolve_pointer",
    "DataBinding",
    "FunctionCall",
    "JsonPointer",
    "FunctionTable",
    "resolve_dynamic",
    "resolve_string",
    "resolve_number",
    "resolve_boolean",
    "resolve_string_list",
]
