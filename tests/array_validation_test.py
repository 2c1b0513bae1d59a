#!/usr/bin/env python3
"""
Tests for list, tuple, set and frozenset validation.
"""
from collections import deque

import pytest

from schema_core import ErrorCode, compile_schema, validate


class TestListValidation:
    """Tests for list-specific validation features."""

    def setup_method(self):
        """Set up the test environment."""
        self.compiled = compile_schema({
            "type": "list",
            "items_schema": {"type": "int"},
            "min_length": 1,
            "max_length": 3
        })

    def test_list_constraints(self):
        """Test item validation and length constraints."""
        # Valid list with coercion
        result = validate(self.compiled, [1, "2", 3.0])
        assert result.valid
        assert result.value == [1, 2, 3]

        # Empty list (violates min_length)
        result = validate(self.compiled, [])
        assert not result.valid
        assert len(result.errors) == 1
        assert result.errors[0].code == ErrorCode.TOO_SHORT
        assert result.errors[0].loc == ()
        assert result.errors[0].message == "List should have at least 1 items after validation, not 0"

        # Too many items
        result = validate(self.compiled, [1, 2, 3, 4])
        assert not result.valid
        assert result.errors[0].code == ErrorCode.TOO_LONG
        assert result.errors[0].context["actual_length"] == 4

    def test_item_errors_are_located(self):
        """Test that every failing item is reported at its index."""
        result = validate(self.compiled, ["a", 2, "c"])
        assert not result.valid
        assert [error.loc for error in result.errors] == [(0,), (2,)]
        assert all(error.code == ErrorCode.INT_PARSING for error in result.errors)

    def test_fail_fast(self):
        result = validate(self.compiled, ["a", 2, "c"], fail_fast=True)
        assert not result.valid
        assert len(result.errors) == 1
        assert result.errors[0].loc == (0,)

    def test_lax_sources(self):
        """Test the container types accepted in lax mode."""
        compiled = compile_schema({"type": "list"})
        assert validate(compiled, (1, 2)).value == [1, 2]
        assert validate(compiled, deque([1])).value == [1]
        assert validate(compiled, (x for x in range(3))).value == [0, 1, 2]
        assert validate(compiled, {"a": 1}.keys()).value == ["a"]

    def test_strict_mode(self):
        compiled = compile_schema({"type": "list"})
        result = validate(compiled, (1, 2), "strict")
        assert not result.valid
        assert result.errors[0].code == ErrorCode.LIST_TYPE

    def test_not_a_list(self):
        compiled = compile_schema({"type": "list"})
        for value in ("abc", {"a": 1}, 5):
            result = validate(compiled, value)
            assert not result.valid
            assert result.errors[0].code == ErrorCode.LIST_TYPE

    def test_json_input(self):
        result = validate(self.compiled, ["1", 2], input_type="json")
        assert result.value == [1, 2]

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            validate(self.compiled, [1], "sloppy")


class TestTupleValidation:
    """Tests for positional and variadic tuples."""

    def test_fixed_arity(self):
        compiled = compile_schema({
            "type": "tuple",
            "items_schema": [{"type": "int"}, {"type": "str"}]
        })
        result = validate(compiled, [1, "a"])
        assert result.value == (1, "a")

        result = validate(compiled, (1,))
        assert not result.valid
        assert result.errors[0].code == ErrorCode.TOO_SHORT
        assert result.errors[0].context["min_length"] == 2

        result = validate(compiled, (1, "a", "b"))
        assert result.errors[0].code == ErrorCode.TOO_LONG

        result = validate(compiled, ("x", 1))
        assert [error.loc for error in result.errors] == [(0,), (1,)]

    def test_variadic(self):
        compiled = compile_schema({
            "type": "tuple",
            "items_schema": [{"type": "str"}, {"type": "int"}, {"type": "bool"}],
            "variadic_item_index": 1
        })
        assert validate(compiled, ("a", True)).value == ("a", True)
        assert validate(compiled, ("a", 1, "2", 3, False)).value == ("a", 1, 2, 3, False)

        result = validate(compiled, ("a",))
        assert result.errors[0].code == ErrorCode.TOO_SHORT

        result = validate(compiled, ("a", "x", "maybe"))
        assert [error.loc for error in result.errors] == [(1,), (2,)]
        assert [error.code for error in result.errors] == [ErrorCode.INT_PARSING, ErrorCode.BOOL_PARSING]

    def test_homogeneous_default(self):
        compiled = compile_schema({"type": "tuple"})
        assert validate(compiled, [1, "a", None]).value == (1, "a", None)
        assert validate(compiled, []).value == ()

    def test_length_bounds_on_variadic(self):
        compiled = compile_schema({
            "type": "tuple",
            "items_schema": [{"type": "int"}],
            "variadic_item_index": 0,
            "max_length": 2
        })
        assert validate(compiled, (1, 2)).valid
        result = validate(compiled, (1, 2, 3))
        assert result.errors[0].code == ErrorCode.TOO_LONG

    def test_json_list_is_a_tuple(self):
        compiled = compile_schema({"type": "tuple", "items_schema": [{"type": "int"}]})
        result = validate(compiled, [5], "strict", input_type="json")
        assert result.value == (5,)


class TestSetValidation:
    """Tests for set and frozenset nodes."""

    def test_set(self):
        compiled = compile_schema({"type": "set", "items_schema": {"type": "int"}})
        result = validate(compiled, [1, "1", 2])
        assert result.value == {1, 2}
        assert isinstance(result.value, set)

    def test_length_counts_unique_items(self):
        compiled = compile_schema({"type": "set", "min_length": 2})
        result = validate(compiled, [1, 1])
        assert not result.valid
        assert result.errors[0].code == ErrorCode.TOO_SHORT
        assert result.errors[0].context["actual_length"] == 1

    def test_unhashable_items(self):
        compiled = compile_schema({"type": "set"})
        result = validate(compiled, [1, [2]])
        assert not result.valid
        assert result.errors[0].code == ErrorCode.SET_ITEM_NOT_HASHABLE
        assert result.errors[0].loc == (1,)

    def test_frozenset(self):
        compiled = compile_schema({"type": "frozenset", "items_schema": {"type": "str"}})
        result = validate(compiled, {"a", "b"})
        assert result.value == frozenset({"a", "b"})
        assert isinstance(result.value, frozenset)

        result = validate(compiled, {"a"}, "strict")
        assert result.errors[0].code == ErrorCode.FROZEN_SET_TYPE

    def test_strict_set(self):
        compiled = compile_schema({"type": "set", "strict": True})
        assert validate(compiled, {1}).valid
        result = validate(compiled, [1])
        assert result.errors[0].code == ErrorCode.SET_TYPE
