#!/usr/bin/env python3
"""
Tests for the native Python input adapter.
"""
from collections import OrderedDict, deque
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

import pytest

from schema_core import ErrorCode
from schema_core.inputs import MISSING, Exactness, InputError, InputKind, LiteralLookup, PythonInput


class Shade(str, Enum):
    DARK = "dark"


class Name(str):
    pass


class Thing:
    def __init__(self):
        self.label = "x"


def code_of(method, *args):
    with pytest.raises(InputError) as exc_info:
        method(*args)
    return exc_info.value.code


class TestPythonInputScalars:
    """Tests for scalar reads."""

    def setup_method(self):
        """Set up the test environment."""
        self.input = PythonInput()

    def test_kind(self):
        assert self.input.kind(None) is InputKind.NULL
        assert self.input.kind(True) is InputKind.BOOL
        assert self.input.kind(1) is InputKind.INT
        assert self.input.kind(datetime(2024, 1, 1)) is InputKind.DATETIME
        assert self.input.kind(date(2024, 1, 1)) is InputKind.DATE
        assert self.input.kind(OrderedDict()) is InputKind.MAPPING
        assert self.input.kind(frozenset()) is InputKind.SET
        assert self.input.kind(deque()) is InputKind.SEQUENCE
        assert self.input.kind(Thing()) is InputKind.OBJECT

    def test_str_exactness(self):
        assert self.input.validate_str("a", True).exactness is Exactness.EXACT
        match = self.input.validate_str(Name("a"), True)
        assert match.exactness is Exactness.STRICT
        assert type(match.value) is str

    def test_str_lax_sources(self):
        assert self.input.validate_str(b"hi", False).value == "hi"
        assert self.input.validate_str(Shade.DARK, False).value == "dark"
        assert self.input.validate_str(5, False, True).value == "5"
        assert code_of(self.input.validate_str, 5, False) == ErrorCode.STRING_TYPE
        assert code_of(self.input.validate_str, b"hi", True) == ErrorCode.STRING_TYPE
        assert code_of(self.input.validate_str, b"\xff", False) == ErrorCode.STRING_UNICODE

    def test_int(self):
        assert self.input.validate_int(3, True).exactness is Exactness.EXACT
        assert self.input.validate_int(True, False).value == 1
        assert self.input.validate_int(2.0, False).value == 2
        assert self.input.validate_int(Decimal("4"), False).value == 4
        assert self.input.validate_int(" 1_000 ", False).value == 1000
        assert self.input.validate_int("7.00", False).value == 7
        assert code_of(self.input.validate_int, 2.5, False) == ErrorCode.INT_FROM_FLOAT
        assert code_of(self.input.validate_int, float("nan"), False) == ErrorCode.FINITE_NUMBER
        assert code_of(self.input.validate_int, "1__0", False) == ErrorCode.INT_PARSING
        assert code_of(self.input.validate_int, True, True) == ErrorCode.INT_TYPE

    def test_numbers_from_bytes(self):
        assert self.input.validate_int(b"12", False).value == 12
        assert self.input.validate_int(bytearray(b" -3 "), False).value == -3
        assert self.input.validate_float(b"1.5", False).value == 1.5
        assert self.input.validate_int(b"12", False).exactness is Exactness.LAX
        assert code_of(self.input.validate_int, b"12", True) == ErrorCode.INT_TYPE
        assert code_of(self.input.validate_float, b"1.5", True) == ErrorCode.FLOAT_TYPE
        assert code_of(self.input.validate_int, b"x", False) == ErrorCode.INT_PARSING
        assert code_of(self.input.validate_int, b"\xff", False) == ErrorCode.STRING_UNICODE

    def test_float(self):
        assert self.input.validate_float(1.5, True).exactness is Exactness.EXACT
        match = self.input.validate_float(2, True)
        assert match.exactness is Exactness.STRICT
        assert type(match.value) is float
        assert self.input.validate_float("2.5", False).exactness is Exactness.LAX
        assert code_of(self.input.validate_float, "two", False) == ErrorCode.FLOAT_PARSING

    def test_bool(self):
        assert self.input.validate_bool("yes", False).value is True
        assert self.input.validate_bool(0, False).value is False
        assert code_of(self.input.validate_bool, 2, False) == ErrorCode.BOOL_PARSING
        assert code_of(self.input.validate_bool, "yes", True) == ErrorCode.BOOL_TYPE

    def test_decimal(self):
        assert self.input.validate_decimal(0.1, False).value == Decimal("0.1")
        assert code_of(self.input.validate_decimal, "abc", False) == ErrorCode.DECIMAL_PARSING
        assert code_of(self.input.validate_decimal, 1, True) == ErrorCode.DECIMAL_TYPE

    def test_dates(self):
        assert self.input.validate_date("2024-01-02", False).value == date(2024, 1, 2)
        assert code_of(self.input.validate_date, datetime(2024, 1, 2), True) == ErrorCode.DATE_TYPE
        assert self.input.validate_datetime(date(2024, 1, 2), False).value == datetime(2024, 1, 2)


class TestPythonInputContainers:
    """Tests for container reads."""

    def setup_method(self):
        """Set up the test environment."""
        self.input = PythonInput()

    def test_list(self):
        value = [1, 2]
        match = self.input.validate_list(value, True)
        assert match.value is value
        assert match.exactness is Exactness.EXACT
        assert self.input.validate_list((1, 2), False).value == [1, 2]
        assert self.input.validate_list({"a": 1}.keys(), False).value == ["a"]
        assert self.input.validate_list((i for i in range(2)), False).value == [0, 1]
        assert code_of(self.input.validate_list, (1, 2), True) == ErrorCode.LIST_TYPE
        assert code_of(self.input.validate_list, "ab", False) == ErrorCode.LIST_TYPE

    def test_tuple_and_sets(self):
        assert self.input.validate_tuple([1], False).exactness is Exactness.LAX
        assert self.input.validate_set([1, 1], False).value == [1, 1]
        assert self.input.validate_frozenset({1}, False).value == [1]
        assert code_of(self.input.validate_set, [1], True) == ErrorCode.SET_TYPE

    def test_dict(self):
        assert self.input.validate_dict({"a": 1}, True).exactness is Exactness.EXACT
        assert self.input.validate_dict(OrderedDict(a=1), True).exactness is Exactness.STRICT
        assert code_of(self.input.validate_dict, [("a", 1)], False) == ErrorCode.DICT_TYPE

    def test_fields(self):
        source = self.input.validate_fields({"a": 1}, True, False).value
        assert source.get("a") == 1
        assert source.get("b") is MISSING
        assert list(source.keys()) == ["a"]

        attributes = self.input.validate_fields(Thing(), False, True)
        assert attributes.exactness is Exactness.STRICT
        assert attributes.value.get("label") == "x"
        assert attributes.value.keys() is None

        assert code_of(self.input.validate_fields, 42, False, True) == ErrorCode.MODEL_ATTRIBUTES_TYPE
        assert code_of(self.input.validate_fields, Thing(), False, False) == ErrorCode.DICT_TYPE

    def test_alias_path_descent(self):
        source = self.input.validate_fields({"a": [{"b": 1}]}, True, False).value
        inner = source.descend(source.get("a"), 0)
        assert source.descend(inner, "b") == 1
        assert source.descend(inner, "c") is MISSING
        assert source.descend("text", 0) is MISSING

    def test_model_instance(self):
        thing = Thing()
        assert self.input.model_instance(thing, Thing).exactness is Exactness.EXACT
        assert self.input.model_instance({}, Thing) is None

    def test_literal_match(self):
        lookup = LiteralLookup([1, "a", Shade.DARK])
        assert self.input.literal_match(1, lookup) == 1
        assert self.input.literal_match(True, lookup) is MISSING
        assert self.input.literal_match("dark", lookup) is MISSING

    def test_dict_key_location(self):
        assert self.input.dict_key_location("k") == "k"
        assert self.input.dict_key_location(3) == 3
        assert self.input.dict_key_location(True) == "True"
        assert self.input.dict_key_location((1, 2)) == "(1, 2)"
