"""Tests for JSON pointer resolution."""

import pytest
from hypothesis import given, strategies as st

from a2ui.binding import (
    UNRESOLVED,
    escape_token,
    is_valid_pointer,
    join_pointer,
    parse_pointer,
    resolve_pointer,
)

json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.floats(allow_nan=True) | st.text(max_size=8),
    lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=4), children, max_size=4),
    max_leaves=20,
)


# ============================================================================
# Syntax
# ============================================================================

@pytest.mark.unit
@pytest.mark.parametrize("path", ["", "/", "/a", "/a/b", "/a/0", "/a~1b", "/~0"])
def test_valid_absolute_pointers(path):
    """Test accepted absolute pointer syntax."""
    assert is_valid_pointer(path)


@pytest.mark.unit
@pytest.mark.parametrize("path", ["a", "a/b", "//", "/a//b", "/a/", None, 5])
def test_invalid_absolute_pointers(path):
    """Test rejected absolute pointer syntax."""
    assert not is_valid_pointer(path)


@pytest.mark.unit
def test_relative_pointers_need_flag():
    """Test relative pointers are only valid when allowed."""
    assert not is_valid_pointer("name")
    assert is_valid_pointer("name", allow_relative=True)
    assert is_valid_pointer("a/b", allow_relative=True)
    assert not is_valid_pointer("a//b", allow_relative=True)


@pytest.mark.unit
def test_parse_pointer_unescapes():
    """Test segments are unescaped in RFC 6901 order."""
    assert parse_pointer("/a~1b/c~0d/~01") == ["a/b", "c~d", "~1"]
    assert parse_pointer("/") == []
    assert parse_pointer("") == []
    assert parse_pointer("//") is None


@pytest.mark.unit
def test_escape_and_join():
    """Test building pointers from raw segments."""
    assert escape_token("a/b~c") == "a~1b~0c"
    assert join_pointer("user", "a/b", 0) == "/user/a~1b/0"


# ============================================================================
# Resolution
# ============================================================================

@pytest.mark.unit
def test_resolve_nested_values():
    """Test mapping keys and list indices."""
    model = {"user": {"name": "Jane", "tags": ["a", "b"]}}
    assert resolve_pointer(model, "/user/name") == "Jane"
    assert resolve_pointer(model, "/user/tags/1") == "b"


@pytest.mark.unit
@pytest.mark.parametrize("path", ["", "/"])
def test_resolve_root(path):
    """Test empty string and lone slash return the whole model."""
    model = {"a": 1}
    assert resolve_pointer(model, path) is model


@pytest.mark.unit
@pytest.mark.parametrize(
    "path",
    ["/missing", "/user/tags/2", "/user/tags/01", "/user/tags/-1", "/user/name/first", "/user/tags/x"],
)
def test_resolve_unresolved(path):
    """Test missing keys, bad indices and scalar descent are unresolved."""
    model = {"user": {"name": "Jane", "tags": ["a", "b"]}}
    assert resolve_pointer(model, path) is UNRESOLVED


@pytest.mark.unit
def test_resolve_escaped_keys():
    """Test keys containing slash and tilde."""
    model = {"a/b": {"c~d": 1}}
    assert resolve_pointer(model, "/a~1b/c~0d") == 1


@pytest.mark.unit
def test_resolve_relative_against_scope():
    """Test relative paths resolve against the template item."""
    item = {"name": "first"}
    assert resolve_pointer({"name": "model"}, "name", scope=item) == "first"
    assert resolve_pointer({"name": "model"}, "name") is UNRESOLVED


@pytest.mark.unit
def test_resolve_null_value_is_resolved():
    """Test an explicit null is a value, not a miss."""
    assert resolve_pointer({"a": None}, "/a") is None


@pytest.mark.unit
def test_unresolved_is_falsy():
    """Test the sentinel is falsy and prints clearly."""
    assert not UNRESOLVED
    assert repr(UNRESOLVED) == "UNRESOLVED"


@given(json_values, st.text(max_size=20))
def test_resolve_is_total(model, path):
    """Test resolution never raises for any model and path."""
    result = resolve_pointer(model, path)
    if path in ("", "/"):
        assert result is model
    if not is_valid_pointer(path, allow_relative=True):
        assert result is UNRESOLVED


@given(json_values, st.one_of(st.none(), st.integers(), st.lists(st.text())), json_values)
def test_resolve_total_for_non_string_paths(model, path, scope):
    """Test non-string paths are unresolved, not errors."""
    assert resolve_pointer(model, path, scope) is UNRESOLVED
