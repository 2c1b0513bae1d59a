"""
Input adapter for decoded JSON value trees.

The tree only ever holds ``dict``, ``list``, ``str``, ``int``, ``float``,
``bool`` and ``None`` (see ``codec.decode``). Strings are never EXACT for
rich kinds: a JSON string read as a date is a STRICT match at best.
"""

from decimal import Decimal
from typing import Any, Iterable, List, Optional

from ..errors import ErrorCode
from . import datetime_parse
from .base import (
    MISSING,
    InputAdapter,
    InputError,
    InputKind,
    LiteralLookup,
    MappingSource,
    ValidationMatch,
)
from .shared import (
    create_decimal,
    float_as_bool,
    float_as_int,
    int_as_bool,
    str_as_bool,
    str_as_bytes,
    str_as_float,
    str_as_int,
)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)


class JsonInput(InputAdapter):
    """Reads the generic value tree produced by the text codec."""

    name = "json"
    carries_instances = False

    def kind(self, value: Any) -> InputKind:
        if value is None:
            return InputKind.NULL
        if isinstance(value, bool):
            return InputKind.BOOL
        if isinstance(value, int):
            return InputKind.INT
        if isinstance(value, float):
            return InputKind.FLOAT
        if isinstance(value, str):
            return InputKind.STRING
        if isinstance(value, list):
            return InputKind.SEQUENCE
        if isinstance(value, dict):
            return InputKind.MAPPING
        return InputKind.OBJECT

    def validate_str(self, value: Any, strict: bool,
                     coerce_numbers_to_str: bool = False) -> ValidationMatch[str]:
        if isinstance(value, str):
            return ValidationMatch.strict(value)
        if not strict and coerce_numbers_to_str and _is_number(value):
            return ValidationMatch.lax(str(value))
        raise InputError(ErrorCode.STRING_TYPE)

    def validate_bytes(self, value: Any, strict: bool,
                       bytes_mode: str = "utf8") -> ValidationMatch[bytes]:
        if isinstance(value, str):
            return ValidationMatch.strict(str_as_bytes(value, bytes_mode))
        raise InputError(ErrorCode.BYTES_TYPE)

    def validate_bool(self, value: Any, strict: bool) -> ValidationMatch[bool]:
        if isinstance(value, bool):
            return ValidationMatch.exact(value)
        if not strict:
            if isinstance(value, str):
                return ValidationMatch.lax(str_as_bool(value))
            if _is_int(value):
                return ValidationMatch.lax(int_as_bool(value))
            if isinstance(value, float):
                return ValidationMatch.lax(float_as_bool(value))
        raise InputError(ErrorCode.BOOL_TYPE)

    def validate_int(self, value: Any, strict: bool) -> ValidationMatch[int]:
        if _is_int(value):
            return ValidationMatch.exact(value)
        if not strict:
            if isinstance(value, bool):
                return ValidationMatch.lax(int(value))
            if isinstance(value, float):
                return ValidationMatch.lax(float_as_int(value))
            if isinstance(value, str):
                return ValidationMatch.lax(str_as_int(value))
        raise InputError(ErrorCode.INT_TYPE)

    def validate_float(self, value: Any, strict: bool) -> ValidationMatch[float]:
        if isinstance(value, float):
            return ValidationMatch.exact(value)
        if _is_int(value):
            return ValidationMatch.strict(float(value))
        if not strict:
            if isinstance(value, bool):
                return ValidationMatch.lax(float(value))
            if isinstance(value, str):
                return ValidationMatch.lax(str_as_float(value))
        raise InputError(ErrorCode.FLOAT_TYPE)

    def validate_decimal(self, value: Any, strict: bool) -> ValidationMatch[Decimal]:
        if _is_number(value) or isinstance(value, str):
            return ValidationMatch.strict(create_decimal(value))
        raise InputError(ErrorCode.DECIMAL_TYPE)

    def validate_date(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        if isinstance(value, str):
            return ValidationMatch.strict(datetime_parse.parse_date(value))
        if not strict and _is_number(value):
            return ValidationMatch.lax(datetime_parse.timestamp_as_date(value))
        raise InputError(ErrorCode.DATE_TYPE)

    def validate_time(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        if isinstance(value, str):
            return ValidationMatch.strict(datetime_parse.parse_time(value))
        if not strict and _is_number(value):
            return ValidationMatch.lax(datetime_parse.seconds_as_time(value))
        raise InputError(ErrorCode.TIME_TYPE)

    def validate_datetime(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        if isinstance(value, str):
            return ValidationMatch.strict(datetime_parse.parse_datetime(value))
        if not strict and _is_number(value):
            return ValidationMatch.lax(datetime_parse.timestamp_as_datetime(value))
        raise InputError(ErrorCode.DATETIME_TYPE)

    def validate_timedelta(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        if isinstance(value, str):
            return ValidationMatch.strict(datetime_parse.parse_duration(value))
        if not strict and _is_number(value):
            return ValidationMatch.lax(datetime_parse.seconds_as_timedelta(value))
        raise InputError(ErrorCode.TIME_DELTA_TYPE)

    def validate_list(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        if isinstance(value, list):
            return ValidationMatch.exact(value)
        raise InputError(ErrorCode.LIST_TYPE)

    def validate_tuple(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        if isinstance(value, list):
            return ValidationMatch.strict(value)
        raise InputError(ErrorCode.TUPLE_TYPE)

    def validate_set(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        if isinstance(value, list):
            return ValidationMatch.strict(value)
        raise InputError(ErrorCode.SET_TYPE)

    def validate_frozenset(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        if isinstance(value, list):
            return ValidationMatch.strict(value)
        raise InputError(ErrorCode.FROZEN_SET_TYPE)

    def validate_dict(self, value: Any, strict: bool) -> ValidationMatch[Iterable]:
        if isinstance(value, dict):
            return ValidationMatch.exact(value.items())
        raise InputError(ErrorCode.DICT_TYPE)

    def validate_fields(self, value: Any, strict: bool, from_attributes: bool) -> ValidationMatch:
        if isinstance(value, dict):
            return ValidationMatch.exact(MappingSource(value))
        raise InputError(ErrorCode.DICT_TYPE)

    def is_instance(self, value: Any, cls: type) -> bool:
        # a decoded tree never holds host objects
        return False

    def model_instance(self, value: Any, cls: type) -> Optional[ValidationMatch[Any]]:
        return None

    def enum_lookup_value(self, value: Any, cls: type, strict: bool) -> ValidationMatch[Any]:
        return ValidationMatch.strict(value)

    def literal_match(self, value: Any, lookup: LiteralLookup) -> Any:
        # enum members cannot appear in JSON, so expected members match by value
        found = lookup.find(value)
        if found is MISSING:
            found = lookup.find_enum_value(value)
        return found
