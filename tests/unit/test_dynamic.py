"""Tests for dynamic field resolution and coercion."""

import math

import pytest

from a2ui.binding import (
    UNRESOLVED,
    DataBinding,
    FunctionCall,
    resolve_boolean,
    resolve_dynamic,
    resolve_number,
    resolve_string,
    resolve_string_list,
)
from a2ui.binding.dynamic import coerce_boolean, coerce_number, coerce_string, is_bare_pointer

MODEL = {"user": {"name": "Jane", "age": "42", "active": "true", "tags": ["a", 1]}}


@pytest.mark.unit
def test_literal_passes_through():
    """Test literals resolve to themselves."""
    assert resolve_dynamic("hello", MODEL) == "hello"
    assert resolve_dynamic(3, MODEL) == 3


@pytest.mark.unit
def test_data_binding_resolves():
    """Test explicit bindings read the data model."""
    assert resolve_dynamic(DataBinding(path="/user/name"), MODEL) == "Jane"
    assert resolve_dynamic(DataBinding(path="/user/missing"), MODEL) is UNRESOLVED


@pytest.mark.unit
def test_bare_pointer_string_is_binding():
    """Test a string starting with a slash is treated as a binding."""
    assert is_bare_pointer("/user/name")
    assert not is_bare_pointer("user/name")
    assert resolve_dynamic("/user/name", MODEL) == "Jane"


@pytest.mark.unit
def test_function_call_uses_table():
    """Test function calls dispatch to registered functions with resolved args."""
    functions = {"greet": lambda who: f"hi {who}"}
    call = FunctionCall(call="greet", args={"who": {"path": "/user/name"}})
    assert resolve_dynamic(call, MODEL, functions=functions) == "hi Jane"


@pytest.mark.unit
def test_function_call_unknown_or_failing_is_unresolved():
    """Test unknown and raising functions degrade to unresolved."""
    def boom():
        raise RuntimeError("nope")

    assert resolve_dynamic(FunctionCall(call="missing"), MODEL) is UNRESOLVED
    assert resolve_dynamic(FunctionCall(call="boom"), MODEL, functions={"boom": boom}) is UNRESOLVED


@pytest.mark.unit
def test_typed_resolution_defaults():
    """Test unresolved values fall back to render defaults."""
    assert resolve_string("/nope", MODEL) == ""
    assert resolve_number("/nope", MODEL) is None
    assert resolve_boolean("/nope", MODEL) is False
    assert resolve_string_list("/nope", MODEL) == []


@pytest.mark.unit
def test_typed_resolution_coerces():
    """Test string model values coerce to the field type."""
    assert resolve_number("/user/age", MODEL) == 42
    assert resolve_boolean("/user/active", MODEL) is True
    assert resolve_string_list("/user/tags", MODEL) == ["a", "1"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [("x", "x"), (True, "true"), (2.0, "2"), (2.5, "2.5"), (7, "7"), ({"a": 1}, '{"a":1}'), (None, None)],
)
def test_coerce_string(value, expected):
    """Test string coercion rules."""
    assert coerce_string(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [("3", 3), ("3.5", 3.5), (" 4 ", 4), ("abc", None), ("inf", None), (True, 1), ([], None)],
)
def test_coerce_number(value, expected):
    """Test number coercion rules."""
    assert coerce_number(value) == expected


@pytest.mark.unit
def test_coerce_number_rejects_non_finite():
    """Test NaN and infinity are unresolved."""
    assert coerce_number(math.inf) is None
    assert coerce_number(math.nan) is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [("true", True), ("1", True), ("FALSE", False), ("0", False), ("yes", None), (0, False), (2, True)],
)
def test_coerce_boolean(value, expected):
    """Test boolean coercion rules."""
    assert coerce_boolean(value) is expected
