#!/usr/bin/env python3
"""
Tests for the schema compiler and its structural checks.
"""
from enum import Enum

import pytest

from schema_core import CoreConfig, SchemaCompiler, SchemaError, SchemaValidator, compile_schema


class Shade(Enum):
    DARK = "dark"


class Point:
    pass


def problems_of(schema, config=None):
    with pytest.raises(SchemaError) as exc_info:
        compile_schema(schema, config)
    return exc_info.value.problems


class TestSchemaChecks:
    """Tests for problems reported at compile time."""

    def test_not_a_dict(self):
        assert problems_of(["int"]) == [("", "Schema must be a dict, not list")]

    def test_missing_type(self):
        assert problems_of({"strict": True}) == [("", "Schema is missing the 'type' key")]

    def test_unknown_type(self):
        assert problems_of({"type": "integer"}) == [("", "Unknown schema type 'integer'")]

    def test_unknown_key(self):
        problems = problems_of({"type": "int", "minimum": 3})
        assert problems == [("/minimum", "Unknown key 'minimum' for schema type 'int'")]

    def test_nullable_takes_only_a_schema(self):
        problems = problems_of({"type": "nullable", "schema": {"type": "int"}, "strict": True})
        assert problems == [("/strict", "Unknown key 'strict' for schema type 'nullable'")]

    def test_bad_key_value(self):
        problems = problems_of({"type": "str", "min_length": -1})
        assert problems == [("/min_length", "'min_length' must be a non-negative integer")]

    def test_missing_required_key(self):
        problems = problems_of({"type": "model", "cls": Point})
        assert problems == [("", "Missing required key 'schema' for schema type 'model'")]

    def test_nested_paths(self):
        problems = problems_of({
            "type": "list",
            "items_schema": {"type": "dict", "values_schema": {"type": "int", "gt": "x"}}
        })
        assert problems == [("/items_schema/values_schema/gt", "'gt' must be a number")]

    def test_every_problem_is_reported(self):
        problems = problems_of({
            "type": "typed-dict",
            "fields": {
                "a": {"type": "typed-dict-field", "schema": {"type": "nope"}},
                "b": {"type": "model-field", "schema": {"type": "int"}}
            }
        })
        assert problems == [
            ("/fields/a/schema", "Unknown schema type 'nope'"),
            ("/fields/b", "Field type must be 'typed-dict-field'"),
        ]

    def test_exclusive_bounds(self):
        problems = problems_of({"type": "int", "gt": 1, "ge": 2, "lt": 5, "le": 4})
        assert problems == [
            ("", "'gt' and 'ge' cannot be combined"),
            ("", "'lt' and 'le' cannot be combined"),
        ]

    def test_min_greater_than_max(self):
        problems = problems_of({"type": "list", "min_length": 3, "max_length": 1})
        assert problems == [("", "'min_length' (3) is greater than 'max_length' (1)")]

    def test_bad_pattern(self):
        problems = problems_of({"type": "str", "pattern": "("})
        assert len(problems) == 1
        assert problems[0][0] == "/pattern"
        assert problems[0][1].startswith("'pattern' is not a valid regular expression")

    def test_empty_choices(self):
        assert problems_of({"type": "union", "choices": []}) == [("/choices", "'choices' must not be empty")]
        assert problems_of({"type": "literal", "expected": []}) == [("/expected", "'expected' must not be empty")]

    def test_labelled_choice_shape(self):
        problems = problems_of({"type": "union", "choices": [[{"type": "int"}]]})
        assert problems == [("/choices/0", "A labelled choice must be a [schema, label] pair")]

    def test_default_needs_exactly_one_source(self):
        both = problems_of({"type": "default", "schema": {"type": "int"}, "default": 1,
                            "default_factory": int})
        assert both == [("", "'default' and 'default_factory' cannot be combined")]
        neither = problems_of({"type": "default", "schema": {"type": "int"}})
        assert neither == [("", "One of 'default' or 'default_factory' is required")]

    def test_extras_schema_requires_allow(self):
        problems = problems_of({"type": "typed-dict", "fields": {}, "extras_schema": {"type": "int"}})
        assert problems == [("", "'extras_schema' requires extra_behavior 'allow'")]
        # the config default counts too
        compile_schema({"type": "typed-dict", "fields": {}, "extras_schema": {"type": "int"}},
                       {"extra_behavior": "allow"})

    def test_variadic_index_out_of_range(self):
        problems = problems_of({"type": "tuple", "items_schema": [{"type": "int"}], "variadic_item_index": 1})
        assert problems == [("/variadic_item_index", "'variadic_item_index' 1 is out of range for 1 items")]

    def test_enum_members(self):
        problems = problems_of({"type": "enum", "cls": Shade, "members": ["dark"]})
        assert problems == [("/members/0", "'dark' is not a member of Shade")]
        assert problems_of({"type": "enum", "cls": int}) == [("/cls", "'cls' must be an Enum subclass")]

    def test_serialization_entry(self):
        problems = problems_of({"type": "int", "serialization": {"type": "function-plain"}})
        assert problems == [("/serialization", "Missing required key 'function' for schema type 'function-plain'")]
        problems = problems_of({"type": "int", "serialization": {"type": "format"}})
        assert problems == [("/serialization", "Unknown serialization type 'format'")]

    def test_error_message(self):
        with pytest.raises(SchemaError) as exc_info:
            compile_schema({"type": "int", "gt": "x"})
        assert str(exc_info.value) == "Invalid schema (1 problem):\n  - /gt: 'gt' must be a number"


class TestDefinitionChecks:
    """Tests for definition and reference problems."""

    def test_undefined_reference(self):
        problems = problems_of({"type": "list", "items_schema": {"type": "definition-ref", "schema_ref": "x"}})
        assert problems == [("/items_schema", "Definition 'x' is not defined")]

    def test_duplicate_definition(self):
        problems = problems_of({
            "type": "definitions",
            "schema": {"type": "definition-ref", "schema_ref": "a"},
            "definitions": [{"type": "int", "ref": "a"}, {"type": "str", "ref": "a"}]
        })
        assert problems == [("/definitions/1", "Duplicate definition 'a' (first defined at '/definitions/0')")]

    def test_definitions_need_ref(self):
        problems = problems_of({
            "type": "definitions",
            "schema": {"type": "int"},
            "definitions": [{"type": "int"}]
        })
        assert problems == [("/definitions/0", "Definitions must carry a 'ref'")]

    def test_wrapper_cycle(self):
        problems = problems_of({
            "type": "definitions",
            "schema": {"type": "definition-ref", "schema_ref": "a"},
            "definitions": [{"type": "nullable", "ref": "a",
                             "schema": {"type": "definition-ref", "schema_ref": "a"}}]
        })
        assert problems == [("/definitions/0", "Definition cycle never consumes input: a -> a")]

    def test_two_definition_wrapper_cycle(self):
        problems = problems_of({
            "type": "definitions",
            "schema": {"type": "definition-ref", "schema_ref": "a"},
            "definitions": [
                {"type": "union", "ref": "a", "choices": [
                    {"type": "int"}, {"type": "definition-ref", "schema_ref": "b"}]},
                {"type": "default", "ref": "b", "default": None,
                 "schema": {"type": "definition-ref", "schema_ref": "a"}}
            ]
        })
        assert problems == [("/definitions/0", "Definition cycle never consumes input: a -> b -> a")]

    def test_cycle_through_container_is_allowed(self):
        compile_schema({
            "type": "definitions",
            "schema": {"type": "definition-ref", "schema_ref": "a"},
            "definitions": [{"type": "list", "ref": "a",
                             "items_schema": {"type": "definition-ref", "schema_ref": "a"}}]
        })

    def test_inline_ref(self):
        validator = SchemaValidator({
            "type": "typed-dict",
            "ref": "pair",
            "fields": {
                "other": {"type": "typed-dict-field", "required": False,
                          "schema": {"type": "definition-ref", "schema_ref": "pair"}}
            }
        })
        assert validator.validate_python({"other": {"other": {}}}) == {"other": {"other": {}}}


class TestCompiledSchema:
    """Tests for the compiled product and config handling."""

    def test_title(self):
        assert compile_schema({"type": "int"}).title == "int"
        assert compile_schema({"type": "int", "ref": "Age"}).title == "Age"
        model = compile_schema({"type": "model", "cls": Point,
                                "schema": {"type": "model-fields", "fields": {}}})
        assert model.title == "Point"

    def test_registries_are_frozen(self):
        compiled = compile_schema({"type": "int", "ref": "n"})
        assert compiled.validators.frozen
        assert compiled.serializers.frozen
        with pytest.raises(RuntimeError):
            compiled.validators.define("m", object())

    def test_compiler_is_reusable(self):
        compiler = SchemaCompiler()
        first = compiler.compile({"type": "int", "ref": "a"})
        second = compiler.compile({"type": "str", "ref": "a"})
        assert first.validators.get("a") is not second.validators.get("a")

    def test_config_from_dict(self):
        compiled = compile_schema({"type": "str"}, {"str_to_upper": True})
        assert compiled.config == CoreConfig(str_to_upper=True)
        assert SchemaValidator({"type": "str"}, config={"str_to_upper": True}).validate_python("a") == "A"

    def test_config_problems(self):
        problems = problems_of({"type": "int"}, {"colour": "red", "extra_behavior": "keep",
                                                 "recursion_limit": 0})
        assert problems == [
            ("config", "Unknown config key 'colour'"),
            ("config", "Invalid value 'keep' for 'extra_behavior', expected one of: ignore, forbid, allow"),
            ("config", "'recursion_limit' must be a positive integer"),
        ]

    def test_node_strict_overrides_config(self):
        validator = SchemaValidator({"type": "int", "strict": False}, config={"strict": True})
        assert validator.validate_python("1") == 1
