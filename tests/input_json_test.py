#!/usr/bin/env python3
"""
Tests for the JSON input adapter and the text codec.
"""
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum

import pytest

from schema_core import ErrorCode, SchemaValidator, ValidationFailed, codec
from schema_core.inputs import MISSING, Exactness, InputError, InputKind, JsonInput, LiteralLookup


class Shade(Enum):
    DARK = "dark"


def code_of(method, *args):
    with pytest.raises(InputError) as exc_info:
        method(*args)
    return exc_info.value.code


class TestJsonInput:
    """Tests for reads from a decoded JSON tree."""

    def setup_method(self):
        """Set up the test environment."""
        self.input = JsonInput()

    def test_kind(self):
        assert self.input.kind(None) is InputKind.NULL
        assert self.input.kind([]) is InputKind.SEQUENCE
        assert self.input.kind({}) is InputKind.MAPPING
        assert self.input.kind("x") is InputKind.STRING
        assert not self.input.carries_instances

    def test_strings_are_strict(self):
        assert self.input.validate_str("a", True).exactness is Exactness.STRICT
        assert code_of(self.input.validate_str, 1, False) == ErrorCode.STRING_TYPE
        assert self.input.validate_str(1, False, True).value == "1"

    def test_numbers(self):
        assert self.input.validate_int(1, True).exactness is Exactness.EXACT
        assert self.input.validate_int("2", False).value == 2
        assert code_of(self.input.validate_int, "2", True) == ErrorCode.INT_TYPE
        assert self.input.validate_float(1, True).exactness is Exactness.STRICT
        assert self.input.validate_decimal("1.10", True).value == Decimal("1.10")

    def test_rich_kinds_from_strings(self):
        match = self.input.validate_date("2024-01-02", True)
        assert match.value == date(2024, 1, 2)
        assert match.exactness is Exactness.STRICT
        assert self.input.validate_timedelta("PT1.5S", True).value == timedelta(seconds=1.5)
        assert code_of(self.input.validate_date, 0, True) == ErrorCode.DATE_TYPE
        assert self.input.validate_date(0, False).value == date(1970, 1, 1)

    def test_bytes_modes(self):
        assert self.input.validate_bytes("hi", True).value == b"hi"
        assert self.input.validate_bytes("aGk=", True, "base64").value == b"hi"
        assert self.input.validate_bytes("6869", True, "hex").value == b"hi"
        assert code_of(self.input.validate_bytes, "zz", True, "hex") == ErrorCode.BYTES_INVALID_ENCODING

    def test_arrays(self):
        assert self.input.validate_list([1], True).exactness is Exactness.EXACT
        assert self.input.validate_tuple([1], True).exactness is Exactness.STRICT
        assert self.input.validate_set([1], True).value == [1]
        assert code_of(self.input.validate_list, "ab", False) == ErrorCode.LIST_TYPE

    def test_objects(self):
        assert list(self.input.validate_dict({"a": 1}, True).value) == [("a", 1)]
        source = self.input.validate_fields({"a": 1}, True, True).value
        assert source.get("a") == 1
        assert code_of(self.input.validate_fields, [], False, True) == ErrorCode.DICT_TYPE

    def test_no_host_objects(self):
        assert self.input.model_instance({}, dict) is None
        assert not self.input.is_instance("x", str)

    def test_literal_match_by_enum_value(self):
        lookup = LiteralLookup([Shade.DARK, 1])
        assert self.input.literal_match("dark", lookup) is Shade.DARK
        assert self.input.literal_match(1, lookup) == 1
        assert self.input.literal_match("light", lookup) is MISSING


class TestCodec:
    """Tests for JSON text decoding and encoding."""

    def test_decode(self):
        assert codec.decode('{"a": [1, 2.5, null]}') == {"a": [1, 2.5, None]}
        assert codec.decode(b'"\xc3\xa9"') == "é"

    def test_invalid_json(self):
        with pytest.raises(ValidationFailed) as exc_info:
            codec.decode('{"a": ')
        error = exc_info.value.errors[0]
        assert error.code == ErrorCode.JSON_INVALID
        assert error.loc == ()
        assert error.message.startswith("Invalid JSON: Expecting value")

    def test_invalid_utf8(self):
        with pytest.raises(ValidationFailed) as exc_info:
            codec.decode(b"\xff")
        assert exc_info.value.errors[0].code == ErrorCode.JSON_INVALID

    def test_validate_json_reports_decode_errors(self):
        with pytest.raises(ValidationFailed) as exc_info:
            SchemaValidator({"type": "int"}).validate_json("[1,")
        assert exc_info.value.errors[0].code == ErrorCode.JSON_INVALID

    def test_encode(self):
        assert codec.encode({"a": [1, "é"]}) == '{"a":[1,"é"]}'.encode("utf-8")
        assert codec.encode([1], indent=2) == b"[\n  1\n]"
        with pytest.raises(ValueError):
            codec.encode(float("nan"), allow_nan=False)
