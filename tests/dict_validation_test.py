#!/usr/bin/env python3
"""
Tests for dict and typed-dict validation.
"""
from collections import OrderedDict
from types import MappingProxyType

from schema_core import ErrorCode, SchemaValidator, ValidationFailed, compile_schema, validate


def field(schema, **extra):
    return {"type": "typed-dict-field", "schema": schema, **extra}


class TestDictValidation:
    """Tests for the dict node."""

    def setup_method(self):
        """Set up the test environment."""
        self.compiled = compile_schema({
            "type": "dict",
            "keys_schema": {"type": "str"},
            "values_schema": {"type": "int"}
        })

    def test_valid_dict(self):
        result = validate(self.compiled, {"a": "1", "b": 2})
        assert result.valid
        assert result.value == {"a": 1, "b": 2}

    def test_value_errors_at_key(self):
        result = validate(self.compiled, {"a": "x", "b": 2, "c": "y"})
        assert not result.valid
        assert [error.loc for error in result.errors] == [("a",), ("c",)]

    def test_key_errors(self):
        result = validate(self.compiled, {1: 1})
        assert not result.valid
        assert result.errors[0].code == ErrorCode.STRING_TYPE
        assert result.errors[0].loc == (1, "[key]")

    def test_non_scalar_key_location(self):
        compiled = compile_schema({"type": "dict", "keys_schema": {"type": "int"}})
        result = validate(compiled, {(1, 2): "v"})
        assert result.errors[0].loc == ("(1, 2)", "[key]")

    def test_lax_mappings(self):
        assert validate(self.compiled, OrderedDict(a=1)).value == {"a": 1}
        assert validate(self.compiled, MappingProxyType({"a": 1})).value == {"a": 1}
        result = validate(self.compiled, MappingProxyType({"a": 1}), "strict")
        assert result.errors[0].code == ErrorCode.DICT_TYPE

    def test_length(self):
        compiled = compile_schema({"type": "dict", "max_length": 1})
        result = validate(compiled, {"a": 1, "b": 2})
        assert result.errors[0].code == ErrorCode.TOO_LONG
        assert result.errors[0].context["field_type"] == "Dictionary"

    def test_not_a_dict(self):
        result = validate(self.compiled, [("a", 1)])
        assert result.errors[0].code == ErrorCode.DICT_TYPE

    def test_json_keys(self):
        compiled = compile_schema({"type": "dict", "keys_schema": {"type": "int"}})
        result = validate(compiled, {"1": True}, input_type="json")
        assert result.value == {1: True}


class TestTypedDictValidation:
    """Tests for the typed-dict node."""

    def setup_method(self):
        """Set up the test environment."""
        self.schema = {
            "type": "typed-dict",
            "fields": {
                "name": field({"type": "str"}),
                "age": field({"type": "int", "ge": 0}),
                "nickname": field({"type": "str"}, required=False)
            }
        }
        self.validator = SchemaValidator(self.schema)

    def test_valid(self):
        assert self.validator.validate_python({"name": "Ann", "age": "30"}) == {"name": "Ann", "age": 30}

    def test_missing_fields(self):
        try:
            self.validator.validate_python({})
            assert False, "should have failed"
        except ValidationFailed as exc:
            assert [error.code for error in exc.errors] == [ErrorCode.MISSING, ErrorCode.MISSING]
            assert [error.loc for error in exc.errors] == [("name",), ("age",)]
            assert exc.errors[0].message == "Field required"

    def test_field_error_location(self):
        result = validate(self.validator.compiled, {"name": "Ann", "age": -1})
        assert result.errors[0].loc == ("age",)
        assert result.errors[0].code == ErrorCode.GREATER_THAN_EQUAL

    def test_total_false(self):
        validator = SchemaValidator({**self.schema, "total": False})
        assert validator.validate_python({}) == {}

    def test_extra_ignore(self):
        assert self.validator.validate_python({"name": "A", "age": 1, "x": 2}) == {"name": "A", "age": 1}

    def test_extra_forbid(self):
        validator = SchemaValidator({**self.schema, "extra_behavior": "forbid"})
        result = validate(validator.compiled, {"name": "A", "age": 1, "x": 2})
        assert not result.valid
        assert result.errors[0].code == ErrorCode.EXTRA_FORBIDDEN
        assert result.errors[0].loc == ("x",)
        assert result.errors[0].input == 2

    def test_extra_allow_with_schema(self):
        validator = SchemaValidator({**self.schema, "extra_behavior": "allow",
                                     "extras_schema": {"type": "int"}})
        assert validator.validate_python({"name": "A", "age": 1, "x": "2"}) == {"name": "A", "age": 1, "x": 2}
        result = validate(validator.compiled, {"name": "A", "age": 1, "x": "two"})
        assert result.errors[0].loc == ("x",)

    def test_config_extra_behavior(self):
        validator = SchemaValidator(self.schema, config={"extra_behavior": "forbid"})
        result = validate(validator.compiled, {"name": "A", "age": 1, "x": 2})
        assert result.errors[0].code == ErrorCode.EXTRA_FORBIDDEN

    def test_defaults(self):
        validator = SchemaValidator({
            "type": "typed-dict",
            "fields": {
                "tags": field({"type": "default", "schema": {"type": "list"}, "default": []})
            }
        })
        first = validator.validate_python({})
        second = validator.validate_python({})
        assert first == {"tags": []}
        first["tags"].append("x")
        assert second == {"tags": []}

    def test_not_a_mapping(self):
        result = validate(self.validator.compiled, ["name"])
        assert result.errors[0].code == ErrorCode.DICT_TYPE


class TestAliases:
    """Tests for validation aliases and alias paths."""

    def test_alias(self):
        validator = SchemaValidator({
            "type": "typed-dict",
            "fields": {"user_id": field({"type": "int"}, validation_alias="userId")}
        })
        assert validator.validate_python({"userId": 3}) == {"user_id": 3}

        result = validate(validator.compiled, {"user_id": 3})
        assert result.errors[0].code == ErrorCode.MISSING
        assert result.errors[0].loc == ("userId",)

    def test_populate_by_name(self):
        validator = SchemaValidator({
            "type": "typed-dict",
            "populate_by_name": True,
            "fields": {"user_id": field({"type": "int"}, validation_alias="userId")}
        })
        assert validator.validate_python({"user_id": 3}) == {"user_id": 3}
        assert validator.validate_python({"userId": 4}) == {"user_id": 4}

    def test_alias_path(self):
        validator = SchemaValidator({
            "type": "typed-dict",
            "fields": {"city": field({"type": "str"}, validation_alias=["address", "city"])}
        })
        assert validator.validate_python({"address": {"city": "Oslo"}}) == {"city": "Oslo"}

        result = validate(validator.compiled, {"address": {"city": 1}})
        assert result.errors[0].loc == ("address", "city")

    def test_alias_choices(self):
        validator = SchemaValidator({
            "type": "typed-dict",
            "fields": {"first": field({"type": "str"}, validation_alias=[["names", 0], ["first_name"]])}
        })
        assert validator.validate_python({"names": ["Ann", "Lee"]}) == {"first": "Ann"}
        assert validator.validate_python({"first_name": "Bob"}) == {"first": "Bob"}

        result = validate(validator.compiled, {})
        assert result.errors[0].loc == ("names", 0)

    def test_alias_key_is_not_an_extra(self):
        validator = SchemaValidator({
            "type": "typed-dict",
            "extra_behavior": "forbid",
            "fields": {"user_id": field({"type": "int"}, validation_alias="userId")}
        })
        assert validator.validate_python({"userId": 1}) == {"user_id": 1}
