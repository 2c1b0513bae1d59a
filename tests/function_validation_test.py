#!/usr/bin/env python3
"""
Tests for function validators, defaults and nullable nodes.
"""
import pytest

from schema_core import (
    MISSING,
    CustomError,
    ErrorCode,
    KnownError,
    OmitValue,
    SchemaValidator,
    UseDefault,
    ValidationFailed,
)


def errors_of(validator, value, **kwargs):
    with pytest.raises(ValidationFailed) as exc_info:
        validator.validate_python(value, **kwargs)
    return exc_info.value.errors


class TestFunctionValidators:
    """Tests for before, after, plain and wrap functions."""

    def test_before(self):
        validator = SchemaValidator({
            "type": "function-before",
            "function": lambda value, info: value.strip(),
            "schema": {"type": "int"}
        })
        assert validator.validate_python("  42 ") == 42

    def test_before_result_is_read_as_python(self):
        validator = SchemaValidator({
            "type": "function-before",
            "function": lambda value, info: (1, 2),
            "schema": {"type": "tuple", "items_schema": [{"type": "int"}, {"type": "int"}]}
        })
        # a tuple can never come out of JSON, but it may come out of user code
        assert validator.validate_json("null") == (1, 2)

    def test_after(self):
        def double(value, info):
            return value * 2

        validator = SchemaValidator({"type": "function-after", "function": double,
                                     "schema": {"type": "int"}})
        assert validator.validate_python("4") == 8
        assert errors_of(validator, "x")[0].code == ErrorCode.INT_PARSING

    def test_plain(self):
        validator = SchemaValidator({"type": "function-plain",
                                     "function": lambda value, info: repr(value)})
        assert validator.validate_python([1]) == "[1]"

    def test_wrap(self):
        def clamp(value, handler, info):
            result = handler(value)
            return min(result, 10)

        validator = SchemaValidator({"type": "function-wrap", "function": clamp,
                                     "schema": {"type": "int"}})
        assert validator.validate_python("50") == 10

    def test_wrap_can_recover(self):
        def fallback(value, handler, info):
            try:
                return handler(value)
            except ValidationFailed:
                return -1

        validator = SchemaValidator({"type": "function-wrap", "function": fallback,
                                     "schema": {"type": "int"}})
        assert validator.validate_python("x") == -1

    def test_info(self):
        seen = {}

        def capture(value, info):
            seen["info"] = info
            return value

        validator = SchemaValidator({
            "type": "typed-dict",
            "fields": {
                "a": {"type": "typed-dict-field", "schema": {"type": "int"}},
                "b": {"type": "typed-dict-field",
                      "schema": {"type": "function-after", "function": capture,
                                 "schema": {"type": "int"}}}
            }
        })
        validator.validate_python({"a": 1, "b": 2}, context="ctx")
        info = seen["info"]
        assert info.context == "ctx"
        assert info.mode == "python"
        assert info.data == {"a": 1}
        assert info.field_name == "b"


class TestFunctionErrors:
    """Tests for normalizing exceptions raised by user functions."""

    def run(self, exc):
        def fail(value, info):
            raise exc

        validator = SchemaValidator({"type": "function-plain", "function": fail})
        return errors_of(validator, "input")[0]

    def test_value_error(self):
        error = self.run(ValueError("too big"))
        assert error.code == ErrorCode.VALUE_ERROR
        assert error.message == "Value error, too big"
        assert error.input == "input"

    def test_assertion_error(self):
        error = self.run(AssertionError("nope"))
        assert error.code == ErrorCode.ASSERTION_ERROR
        assert error.message == "Assertion failed, nope"

    def test_other_exception(self):
        error = self.run(KeyError("k"))
        assert error.code == ErrorCode.FUNCTION_ERROR
        assert error.context["error_type"] == "KeyError"

    def test_custom_error(self):
        error = self.run(CustomError("too_far", "Distance {d} is too far", {"d": 9}))
        assert error.code == ErrorCode.CUSTOM_ERROR
        assert error.kind == "too_far"
        assert error.message == "Distance 9 is too far"
        assert error.context["d"] == 9

    def test_known_error(self):
        error = self.run(KnownError("greater_than", {"gt": 5}))
        assert error.code == ErrorCode.GREATER_THAN
        assert error.message == "Input should be greater than 5"

    def test_error_location(self):
        def fail(value, info):
            raise ValueError("bad")

        validator = SchemaValidator({
            "type": "list",
            "items_schema": {"type": "function-after", "function": fail, "schema": {"type": "int"}}
        })
        assert errors_of(validator, [1])[0].loc == (0,)


class TestDefaults:
    """Tests for default and nullable nodes."""

    def test_nullable(self):
        validator = SchemaValidator({"type": "nullable", "schema": {"type": "int"}})
        assert validator.validate_python(None) is None
        assert validator.validate_python("3") == 3
        assert validator.validate_json("null") is None

    def test_root_default(self):
        validator = SchemaValidator({"type": "default", "schema": {"type": "int"}, "default": 5})
        assert validator.get_default_value() == 5
        assert SchemaValidator({"type": "int"}).get_default_value() is MISSING

    def test_default_factory(self):
        validator = SchemaValidator({"type": "default", "schema": {"type": "list"},
                                     "default_factory": list})
        first = validator.get_default_value()
        assert first == []
        assert first is not validator.get_default_value()

    def test_default_factory_takes_data(self):
        validator = SchemaValidator({
            "type": "typed-dict",
            "fields": {
                "first": {"type": "typed-dict-field", "schema": {"type": "str"}},
                "greeting": {"type": "typed-dict-field", "schema": {
                    "type": "default",
                    "schema": {"type": "str"},
                    "default_factory": lambda data: "hi " + data["first"],
                    "default_factory_takes_data": True
                }}
            }
        })
        assert validator.validate_python({"first": "Ann"}) == {"first": "Ann", "greeting": "hi Ann"}

    def test_factory_error(self):
        def broken():
            raise RuntimeError("no value")

        validator = SchemaValidator({
            "type": "typed-dict",
            "fields": {"x": {"type": "typed-dict-field",
                             "schema": {"type": "default", "schema": {"type": "int"},
                                        "default_factory": broken}}}
        })
        error = errors_of(validator, {})[0]
        assert error.code == ErrorCode.DEFAULT_FACTORY_ERROR
        assert error.loc == ("x",)
        assert error.message == "Default factory raised RuntimeError: no value"

    def test_on_error_default(self):
        validator = SchemaValidator({
            "type": "list",
            "items_schema": {"type": "default", "schema": {"type": "int"}, "default": 0,
                             "on_error": "default"}
        })
        assert validator.validate_python([1, "x", 3]) == [1, 0, 3]

    def test_on_error_omit(self):
        validator = SchemaValidator({
            "type": "list",
            "items_schema": {"type": "default", "schema": {"type": "int"}, "default": 0,
                             "on_error": "omit"}
        })
        assert validator.validate_python([1, "x", 3]) == [1, 3]

    def test_validate_default(self):
        schema = {"type": "default", "schema": {"type": "int"}, "default": "7"}
        assert SchemaValidator(schema).get_default_value() == "7"
        assert SchemaValidator({**schema, "validate_default": True}).get_default_value() == 7
        assert SchemaValidator(schema, config={"validate_default": True}).get_default_value() == 7

    def test_invalid_default_is_reported(self):
        validator = SchemaValidator({"type": "default", "schema": {"type": "int"}, "default": "x",
                                     "validate_default": True})
        with pytest.raises(ValidationFailed):
            validator.get_default_value()

    def test_use_default_signal(self):
        def maybe(value, info):
            if value == "":
                raise UseDefault()
            return value

        validator = SchemaValidator({
            "type": "default",
            "default": 1,
            "schema": {"type": "function-before", "function": maybe, "schema": {"type": "int"}}
        })
        assert validator.validate_python("") == 1
        assert validator.validate_python("5") == 5

    def test_omit_signal(self):
        def drop_negative(value, info):
            if value < 0:
                raise OmitValue()
            return value

        validator = SchemaValidator({
            "type": "list",
            "items_schema": {"type": "function-after", "function": drop_negative,
                             "schema": {"type": "int"}}
        })
        assert validator.validate_python([1, -2, 3]) == [1, 3]

    def test_omit_at_root_is_an_error(self):
        validator = SchemaValidator({"type": "default", "schema": {"type": "int"}, "default": 0,
                                     "on_error": "omit"})
        error = errors_of(validator, "x")[0]
        assert error.code == ErrorCode.OMIT_NOT_ALLOWED
        assert error.loc == ()
        assert not validator.isinstance_python("x")

    def test_use_default_without_default_is_an_error(self):
        def blank(value, info):
            raise UseDefault()

        validator = SchemaValidator({"type": "function-before", "function": blank, "schema": {"type": "int"}})
        error = errors_of(validator, "")[0]
        assert error.code == ErrorCode.DEFAULT_UNAVAILABLE
        assert error.message == "No default value is available for this input"

    def test_omit_in_fixed_tuple_position(self):
        item = {"type": "default", "schema": {"type": "int"}, "default": 0, "on_error": "omit"}
        fixed = SchemaValidator({"type": "tuple", "items_schema": [item, {"type": "str"}]})
        error = errors_of(fixed, ("x", "a"))[0]
        assert error.code == ErrorCode.OMIT_NOT_ALLOWED
        assert error.loc == (0,)

        variadic = SchemaValidator({
            "type": "tuple",
            "items_schema": [{"type": "str"}, item],
            "variadic_item_index": 1
        })
        assert variadic.validate_python(("a", 1, "x", 3)) == ("a", 1, 3)
