#!/usr/bin/env python3
"""
Tests for literal and enum validation.
"""
from enum import Enum, IntEnum

import pytest

from schema_core import ErrorCode, SchemaValidator, ValidationFailed


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Level(IntEnum):
    LOW = 1
    HIGH = 2


def first_error(validator, value, method="validate_python", **kwargs):
    with pytest.raises(ValidationFailed) as exc_info:
        getattr(validator, method)(value, **kwargs)
    return exc_info.value.errors[0]


class TestLiteralValidation:
    """Tests for the literal node."""

    def test_values(self):
        validator = SchemaValidator({"type": "literal", "expected": ["a", 1, None]})
        assert validator.validate_python("a") == "a"
        assert validator.validate_python(1) == 1
        assert validator.validate_python(None) is None

        error = first_error(validator, "b")
        assert error.code == ErrorCode.LITERAL_ERROR
        assert error.message == "Input should be 'a', 1 or None"

    def test_type_family_is_part_of_the_value(self):
        validator = SchemaValidator({"type": "literal", "expected": [1]})
        assert first_error(validator, True).code == ErrorCode.LITERAL_ERROR
        assert first_error(validator, 1.0).code == ErrorCode.LITERAL_ERROR
        assert first_error(validator, "1").code == ErrorCode.LITERAL_ERROR

    def test_enum_members(self):
        validator = SchemaValidator({"type": "literal", "expected": [Color.RED]})
        assert validator.validate_python(Color.RED) is Color.RED
        assert first_error(validator, "red").code == ErrorCode.LITERAL_ERROR
        # JSON cannot carry members, so their value stands in for them
        assert validator.validate_json('"red"') is Color.RED


class TestEnumValidation:
    """Tests for the enum node."""

    def setup_method(self):
        """Set up the test environment."""
        self.validator = SchemaValidator({"type": "enum", "cls": Color})

    def test_members(self):
        assert self.validator.validate_python(Color.GREEN) is Color.GREEN
        assert self.validator.validate_python("red") is Color.RED
        assert self.validator.validate_json('"green"') is Color.GREEN

    def test_unknown_value(self):
        error = first_error(self.validator, "blue")
        assert error.code == ErrorCode.ENUM
        assert error.message == "Input should be 'red' or 'green'"

    def test_strict(self):
        assert self.validator.validate_python(Color.RED, strict=True) is Color.RED
        assert first_error(self.validator, "red", strict=True).code == ErrorCode.ENUM
        # JSON values are the strict way to name a member
        assert self.validator.validate_json('"red"', strict=True) is Color.RED

    def test_member_subset(self):
        validator = SchemaValidator({"type": "enum", "cls": Color, "members": [Color.RED]})
        assert validator.validate_python("red") is Color.RED
        assert first_error(validator, "green").code == ErrorCode.ENUM

    def test_member_subset_rejects_excluded_members(self):
        validator = SchemaValidator({"type": "enum", "cls": Color, "members": [Color.RED]})
        assert validator.validate_python(Color.RED) is Color.RED
        error = first_error(validator, Color.GREEN)
        assert error.code == ErrorCode.ENUM
        assert error.message == "Input should be 'red'"
        assert first_error(validator, Color.GREEN, strict=True).code == ErrorCode.ENUM

    def test_missing_hook_cannot_add_members(self):
        validator = SchemaValidator({
            "type": "enum",
            "cls": Color,
            "members": [Color.RED],
            "missing": lambda value: Color.GREEN
        })
        assert first_error(validator, "teal").code == ErrorCode.ENUM

    def test_sub_type(self):
        validator = SchemaValidator({"type": "enum", "cls": Level, "sub_type": "int"})
        assert validator.validate_python(2) is Level.HIGH
        assert validator.validate_python("1") is Level.LOW
        assert validator.validate_json('"2"') is Level.HIGH
        assert first_error(validator, "3").code == ErrorCode.ENUM

    def test_without_sub_type_no_coercion(self):
        validator = SchemaValidator({"type": "enum", "cls": Level})
        assert validator.validate_python(1) is Level.LOW
        assert first_error(validator, "1").code == ErrorCode.ENUM

    def test_missing_hook(self):
        validator = SchemaValidator({
            "type": "enum",
            "cls": Color,
            "missing": lambda value: Color.RED if value == "crimson" else None
        })
        assert validator.validate_python("crimson") is Color.RED
        assert first_error(validator, "teal").code == ErrorCode.ENUM
