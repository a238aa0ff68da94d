"""Resolution of dynamic (literal-or-bound) component fields."""

import math
from collections.abc import Callable, Mapping
from typing import Any

from a2ui.core.json import encode_json
from a2ui.core.logging_config import get_logger
from .models import DataBinding, FunctionCall
from .pointer import UNRESOLVED, is_valid_pointer, resolve_pointer

logger = get_logger(__name__)

FunctionTable = Mapping[str, Callable[..., Any]]


def is_bare_pointer(value: Any) -> bool:
    """A bare string that starts with ``/`` is treated as a binding."""
    return isinstance(value, str) and value.startswith("/") and is_valid_pointer(value)


def _resolve_args(args: Mapping[str, Any], data_model: Any, scope: Any) -> dict[str, Any]:
    resolved: dict[str, Any] = {}
    for name, arg in args.items():
        if isinstance(arg, Mapping) and set(arg.keys()) == {"path"}:
            value = resolve_pointer(data_model, arg["path"], scope)
            resolved[name] = None if value is UNRESOLVED else value
        else:
            resolved[name] = arg
    return resolved


def call_function(
    fn: FunctionCall, data_model: Any, scope: Any = UNRESOLVED, functions: FunctionTable | None = None
) -> Any:
    """Invoke a registered client function; unknown or failing calls are unresolved."""
    target = (functions or {}).get(fn.call)
    if target is None:
        logger.debug("function_unknown", call=fn.call)
        return UNRESOLVED
    try:
        return target(**_resolve_args(fn.args or {}, data_model, scope))
    except Exception as e:
        logger.warning("function_failed", call=fn.call, error=str(e))
        return UNRESOLVED


def resolve_dynamic(
    value: Any, data_model: Any, scope: Any = UNRESOLVED, functions: FunctionTable | None = None
) -> Any:
    """
    Resolve a dynamic field to its concrete value.

    Args:
        value: Literal, DataBinding, FunctionCall or bare pointer string
        data_model: Surface data model
        scope: Template item for relative pointers
        functions: Client function table for FunctionCall values

    Returns:
        Concrete value or UNRESOLVED
    """
    if isinstance(value, DataBinding):
        return resolve_pointer(data_model, value.path, scope)
    if isinstance(value, FunctionCall):
        return call_function(value, data_model, scope, functions)
    if is_bare_pointer(value):
        return resolve_pointer(data_model, value, scope)
    if value is None:
        return UNRESOLVED
    return value


# ============================================================================
# Coercion
# ============================================================================


def coerce_string(value: Any) -> str | None:
    if value is UNRESOLVED or value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, int):
        return str(value)
    return encode_json(value)


def coerce_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(parsed):
            return None
        return int(parsed) if parsed.is_integer() and "." not in value else parsed
    return None


def coerce_boolean(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "1"):
            return True
        if normalized in ("false", "0"):
            return False
        return None
    if isinstance(value, (int, float)):
        return value != 0
    return None


def coerce_string_list(value: Any) -> list[str] | None:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        items = [coerce_string(item) for item in value]
        return [item for item in items if item is not None]
    return None


# ============================================================================
# Typed resolution with render defaults
# ============================================================================


def resolve_string(value: Any, data_model: Any, scope: Any = UNRESOLVED,
                   functions: FunctionTable | None = None, default: str = "") -> str:
    result = coerce_string(resolve_dynamic(value, data_model, scope, functions))
    return default if result is None else result


def resolve_number(value: Any, data_model: Any, scope: Any = UNRESOLVED,
                   functions: FunctionTable | None = None,
                   default: int | float | None = None) -> int | float | None:
    result = coerce_number(resolve_dynamic(value, data_model, scope, functions))
    return default if result is None else result


def resolve_boolean(value: Any, data_model: Any, scope: Any = UNRESOLVED,
                    functions: FunctionTable | None = None, default: bool = False) -> bool:
    result = coerce_boolean(resolve_dynamic(value, data_model, scope, functions))
    return default if result is None else result


def resolve_string_list(value: Any, data_model: Any, scope: Any = UNRESOLVED,
                        functions: FunctionTable | None = None) -> list[str]:
    result = coerce_string_list(resolve_dynamic(value, data_model, scope, functions))
    return [] if result is None else result
