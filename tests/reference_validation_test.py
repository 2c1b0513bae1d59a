#!/usr/bin/env python3
"""
Tests for recursive definitions and the recursion guard.
"""
import sys

from schema_core import ErrorCode, compile_schema, validate


def linked_list_schema():
    return {
        "type": "definitions",
        "schema": {"type": "definition-ref", "schema_ref": "node"},
        "definitions": [{
            "type": "typed-dict",
            "ref": "node",
            "fields": {
                "value": {"type": "typed-dict-field", "schema": {"type": "int"}},
                "next": {"type": "typed-dict-field", "schema": {
                    "type": "nullable",
                    "schema": {"type": "definition-ref", "schema_ref": "node"}
                }}
            }
        }]
    }


def chain(length):
    node = None
    for value in reversed(range(length)):
        node = {"value": value, "next": node}
    return node


class TestRecursiveDefinitions:
    """Tests for self-referencing schemas."""

    def setup_method(self):
        """Set up the test environment."""
        self.compiled = compile_schema(linked_list_schema())

    def test_valid_chain(self):
        result = validate(self.compiled, {"value": "1", "next": {"value": 2, "next": None}})
        assert result.valid
        assert result.value == {"value": 1, "next": {"value": 2, "next": None}}

    def test_nested_error_location(self):
        result = validate(self.compiled, {"value": 1, "next": {"value": 2, "next": {"value": "x", "next": None}}})
        assert not result.valid
        assert result.errors[0].loc == ("next", "next", "value")

    def test_definitions_are_registered(self):
        assert "node" in self.compiled.validators
        assert "node" in self.compiled.serializers

    def test_shared_subtree_is_not_a_cycle(self):
        compiled = compile_schema({
            "type": "definitions",
            "schema": {"type": "list", "items_schema": {"type": "definition-ref", "schema_ref": "node"}},
            "definitions": linked_list_schema()["definitions"]
        })
        shared = {"value": 1, "next": None}
        result = validate(compiled, [shared, shared, {"value": 0, "next": shared}])
        assert result.valid

    def test_mutual_recursion(self):
        compiled = compile_schema({
            "type": "definitions",
            "schema": {"type": "definition-ref", "schema_ref": "folder"},
            "definitions": [
                {
                    "type": "typed-dict",
                    "ref": "folder",
                    "fields": {
                        "name": {"type": "typed-dict-field", "schema": {"type": "str"}},
                        "entries": {"type": "typed-dict-field", "schema": {
                            "type": "list",
                            "items_schema": {"type": "definition-ref", "schema_ref": "entry"}
                        }}
                    }
                },
                {
                    "type": "union",
                    "ref": "entry",
                    "choices": [
                        {"type": "definition-ref", "schema_ref": "folder"},
                        {"type": "str"}
                    ]
                }
            ]
        })
        tree = {"name": "root", "entries": ["a.txt", {"name": "sub", "entries": ["b.txt"]}]}
        result = validate(compiled, tree)
        assert result.valid
        assert result.value == tree


class TestRecursionGuard:
    """Tests for cyclic inputs and the depth limit."""

    def test_cyclic_input(self):
        compiled = compile_schema(linked_list_schema())
        node = {"value": 1}
        node["next"] = node
        result = validate(compiled, node)
        assert not result.valid
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.code == ErrorCode.RECURSION_LOOP
        assert error.loc == ("next",)
        assert error.message == "Recursion error - cyclic reference detected"

    def test_cyclic_list(self):
        compiled = compile_schema({
            "type": "definitions",
            "schema": {"type": "definition-ref", "schema_ref": "tree"},
            "definitions": [{
                "type": "list",
                "ref": "tree",
                "items_schema": {"type": "definition-ref", "schema_ref": "tree"}
            }]
        })
        assert validate(compiled, [[], [[]]]).valid

        loop = []
        loop.append(loop)
        result = validate(compiled, loop)
        assert [(error.code, error.loc) for error in result.errors] == [(ErrorCode.RECURSION_LOOP, (0,))]

    def test_recursion_limit(self):
        compiled = compile_schema(linked_list_schema(), {"recursion_limit": 3})
        assert validate(compiled, chain(3)).valid

        result = validate(compiled, chain(4))
        assert not result.valid
        error = result.errors[0]
        assert error.code == ErrorCode.RECURSION_LIMIT
        assert error.loc == ("next", "next", "next")
        assert error.context == {"definition": "node", "limit": 3}
        assert error.message == "Recursion error - nesting of definition 'node' exceeds 3 levels"

    def test_deep_chain_within_default_limit(self):
        compiled = compile_schema(linked_list_schema())
        result = validate(compiled, chain(254))
        assert result.valid
        assert result.value == chain(254)

    def test_deep_chain_beyond_default_limit(self):
        compiled = compile_schema(linked_list_schema())
        result = validate(compiled, chain(256))
        assert [error.code for error in result.errors] == [ErrorCode.RECURSION_LIMIT]
        assert len(result.errors[0].loc) == 255

    def test_raised_recursion_limit(self):
        compiled = compile_schema(linked_list_schema(), {"recursion_limit": 1000})
        assert validate(compiled, chain(400)).valid

    def test_interpreter_limit_is_restored(self):
        before = sys.getrecursionlimit()
        compiled = compile_schema(linked_list_schema())
        assert validate(compiled, chain(200)).valid
        assert not validate(compiled, chain(300)).valid
        assert sys.getrecursionlimit() == before

    def test_guard_state_does_not_leak_between_calls(self):
        compiled = compile_schema(linked_list_schema(), {"recursion_limit": 3})
        node = {"value": 1}
        node["next"] = node
        assert not validate(compiled, node).valid
        assert validate(compiled, chain(3)).valid
