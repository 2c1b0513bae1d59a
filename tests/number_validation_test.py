#!/usr/bin/env python3
"""
Tests for int, float and decimal validation.
"""
import math
from decimal import Decimal

import pytest

from schema_core import ErrorCode, SchemaValidator, ValidationFailed


def first_error(validator, value, **kwargs):
    with pytest.raises(ValidationFailed) as exc_info:
        validator.validate_python(value, **kwargs)
    return exc_info.value.errors[0]


class TestIntValidation:
    """Tests for the int node."""

    def setup_method(self):
        """Set up the test environment."""
        self.validator = SchemaValidator({"type": "int"})

    def test_exact_int(self):
        assert self.validator.validate_python(42) == 42
        assert self.validator.validate_json("42") == 42

    def test_lax_strings(self):
        assert self.validator.validate_python("42") == 42
        assert self.validator.validate_python(" -7 ") == -7
        assert self.validator.validate_python("1_000") == 1000
        assert self.validator.validate_python("4.000") == 4
        assert self.validator.validate_json('"12"') == 12

    def test_bad_strings(self):
        for text in ("4.5", "abc", "1__0", ""):
            assert first_error(self.validator, text).code == ErrorCode.INT_PARSING

    def test_floats(self):
        assert self.validator.validate_python(3.0) == 3
        assert first_error(self.validator, 3.5).code == ErrorCode.INT_FROM_FLOAT
        assert first_error(self.validator, float("inf")).code == ErrorCode.FINITE_NUMBER
        assert first_error(self.validator, float("nan")).code == ErrorCode.FINITE_NUMBER

    def test_bool_and_decimal(self):
        assert self.validator.validate_python(True) == 1
        assert self.validator.validate_python(Decimal("5")) == 5
        assert first_error(self.validator, Decimal("5.5")).code == ErrorCode.INT_FROM_FLOAT

    def test_strict_mode(self):
        assert self.validator.validate_python(5, strict=True) == 5
        for value in ("5", 5.0, True):
            assert first_error(self.validator, value, strict=True).code == ErrorCode.INT_TYPE
        with pytest.raises(ValidationFailed):
            self.validator.validate_json('"5"', strict=True)

    def test_not_a_number(self):
        assert first_error(self.validator, [1]).code == ErrorCode.INT_TYPE

    def test_bounds(self):
        validator = SchemaValidator({"type": "int", "gt": 0, "le": 10})
        assert validator.validate_python(10) == 10

        error = first_error(validator, 0)
        assert error.code == ErrorCode.GREATER_THAN
        assert error.context == {"gt": 0}
        assert error.message == "Input should be greater than 0"

        assert first_error(validator, 11).code == ErrorCode.LESS_THAN_EQUAL

    def test_bounds_run_after_type_check(self):
        validator = SchemaValidator({"type": "int", "gt": 0})
        with pytest.raises(ValidationFailed) as exc_info:
            validator.validate_python("x")
        assert [error.code for error in exc_info.value.errors] == [ErrorCode.INT_PARSING]

    def test_multiple_of(self):
        validator = SchemaValidator({"type": "int", "multiple_of": 5})
        assert validator.validate_python(25) == 25
        error = first_error(validator, 27)
        assert error.code == ErrorCode.MULTIPLE_OF
        assert error.context == {"multiple_of": 5}


class TestFloatValidation:
    """Tests for the float node."""

    def setup_method(self):
        """Set up the test environment."""
        self.validator = SchemaValidator({"type": "float"})

    def test_ints_become_floats(self):
        result = self.validator.validate_python(3)
        assert result == 3.0
        assert type(result) is float
        assert self.validator.validate_python(3, strict=True) == 3.0
        assert self.validator.validate_json("3") == 3.0

    def test_lax_strings(self):
        assert self.validator.validate_python("1.5") == 1.5
        assert self.validator.validate_python(" 2 ") == 2.0
        assert first_error(self.validator, "one").code == ErrorCode.FLOAT_PARSING
        assert first_error(self.validator, "1.5", strict=True).code == ErrorCode.FLOAT_TYPE

    def test_inf_nan_allowed_by_default(self):
        assert math.isinf(self.validator.validate_python(float("inf")))
        assert math.isnan(self.validator.validate_python("nan"))

    def test_inf_nan_rejected(self):
        validator = SchemaValidator({"type": "float", "allow_inf_nan": False})
        assert first_error(validator, float("inf")).code == ErrorCode.FINITE_NUMBER
        assert first_error(validator, "-inf").code == ErrorCode.FINITE_NUMBER

    def test_config_allow_inf_nan(self):
        validator = SchemaValidator({"type": "float"}, config={"allow_inf_nan": False})
        assert first_error(validator, float("nan")).code == ErrorCode.FINITE_NUMBER

    def test_bounds(self):
        validator = SchemaValidator({"type": "float", "ge": 0.5, "lt": 1})
        assert validator.validate_python(0.5) == 0.5
        assert first_error(validator, 0.4).code == ErrorCode.GREATER_THAN_EQUAL
        assert first_error(validator, 1.0).code == ErrorCode.LESS_THAN

    def test_multiple_of_tolerates_rounding(self):
        validator = SchemaValidator({"type": "float", "multiple_of": 0.1})
        assert validator.validate_python(0.3) == 0.3
        assert first_error(validator, 0.35).code == ErrorCode.MULTIPLE_OF


class TestDecimalValidation:
    """Tests for the decimal node."""

    def setup_method(self):
        """Set up the test environment."""
        self.validator = SchemaValidator({"type": "decimal"})

    def test_coercions(self):
        assert self.validator.validate_python(Decimal("1.23")) == Decimal("1.23")
        assert self.validator.validate_python("1.23") == Decimal("1.23")
        assert self.validator.validate_python(0.1) == Decimal("0.1")
        assert self.validator.validate_python(7) == Decimal(7)
        assert self.validator.validate_json('"2.50"') == Decimal("2.50")
        assert self.validator.validate_json("2.5") == Decimal("2.5")

    def test_strict_mode(self):
        assert first_error(self.validator, "1.5", strict=True).code == ErrorCode.DECIMAL_TYPE
        assert first_error(self.validator, True).code == ErrorCode.DECIMAL_TYPE
        # JSON strings and numbers are strict matches for decimals
        assert self.validator.validate_json('"1.5"', strict=True) == Decimal("1.5")

    def test_parsing_error(self):
        assert first_error(self.validator, "abc").code == ErrorCode.DECIMAL_PARSING

    def test_non_finite_rejected_by_default(self):
        assert first_error(self.validator, "Infinity").code == ErrorCode.FINITE_NUMBER
        validator = SchemaValidator({"type": "decimal", "allow_inf_nan": True})
        assert validator.validate_python("Infinity") == Decimal("Infinity")

    def test_digit_limits(self):
        validator = SchemaValidator({"type": "decimal", "max_digits": 4, "decimal_places": 2})
        assert validator.validate_python("12.34") == Decimal("12.34")
        # trailing zeros are not counted
        assert validator.validate_python("1.2000") == Decimal("1.2000")

        assert first_error(validator, "1.234").code == ErrorCode.DECIMAL_MAX_PLACES
        assert first_error(validator, "12345").code == ErrorCode.DECIMAL_MAX_DIGITS

        error = first_error(validator, "123.4")
        assert error.code == ErrorCode.DECIMAL_WHOLE_DIGITS
        assert error.context == {"whole_digits": 2}

    def test_bounds(self):
        validator = SchemaValidator({"type": "decimal", "gt": 0, "multiple_of": Decimal("0.5")})
        assert validator.validate_python("1.5") == Decimal("1.5")
        assert first_error(validator, "0").code == ErrorCode.GREATER_THAN
        assert first_error(validator, "1.2").code == ErrorCode.MULTIPLE_OF

    def test_float_constraints(self):
        validator = SchemaValidator({"type": "decimal", "multiple_of": 0.1, "le": 2.5})
        assert validator.validate_python("1.5") == Decimal("1.5")
        assert validator.validate_python(0.3) == Decimal("0.3")
        error = first_error(validator, "0.25")
        assert error.code == ErrorCode.MULTIPLE_OF
        assert error.message == "Input should be a multiple of 0.1"
        assert first_error(validator, "2.6").code == ErrorCode.LESS_THAN_EQUAL
