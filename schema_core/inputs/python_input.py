"""
Input adapter for native Python objects.

See the coercion table in the package documentation: exact types match as
EXACT, subclasses as STRICT, and the lax ladder only applies when
``strict`` is false.
"""

from collections import deque
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from types import GeneratorType
from typing import Any, Iterable, List, Optional

from ..errors import ErrorCode
from . import datetime_parse
from .base import (
    AttributesSource,
    InputAdapter,
    InputError,
    InputKind,
    LiteralLookup,
    MappingSource,
    ValidationMatch,
)
from .shared import (
    bytes_as_str,
    create_decimal,
    decimal_as_int,
    float_as_bool,
    float_as_int,
    int_as_bool,
    str_as_bool,
    str_as_float,
    str_as_int,
)


_DICT_VIEWS = (type({}.keys()), type({}.values()))


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class PythonInput(InputAdapter):
    """Reads native host objects using item and attribute access."""

    name = "python"

    def kind(self, value: Any) -> InputKind:
        if value is None:
            return InputKind.NULL
        if isinstance(value, bool):
            return InputKind.BOOL
        if isinstance(value, int):
            return InputKind.INT
        if isinstance(value, float):
            return InputKind.FLOAT
        if isinstance(value, Decimal):
            return InputKind.DECIMAL
        if isinstance(value, str):
            return InputKind.STRING
        if isinstance(value, (bytes, bytearray)):
            return InputKind.BYTES
        if isinstance(value, datetime):
            return InputKind.DATETIME
        if isinstance(value, date):
            return InputKind.DATE
        if isinstance(value, time):
            return InputKind.TIME
        if isinstance(value, timedelta):
            return InputKind.TIMEDELTA
        if isinstance(value, Mapping):
            return InputKind.MAPPING
        if isinstance(value, (set, frozenset)):
            return InputKind.SET
        if isinstance(value, (list, tuple, deque, GeneratorType) + _DICT_VIEWS):
            return InputKind.SEQUENCE
        return InputKind.OBJECT

    # -- scalars ---------------------------------------------------------

    def validate_str(self, value: Any, strict: bool,
                     coerce_numbers_to_str: bool = False) -> ValidationMatch[str]:
        if type(value) is str:
            return ValidationMatch.exact(value)
        if isinstance(value, str) and not isinstance(value, Enum):
            return ValidationMatch.strict(str(value))
        if not strict:
            if isinstance(value, str) and isinstance(value, Enum):
                return ValidationMatch.lax(value.value)
            if isinstance(value, (bytes, bytearray)):
                return ValidationMatch.lax(bytes_as_str(value))
            if coerce_numbers_to_str and (_is_int(value) or isinstance(value, (float, Decimal))):
                return ValidationMatch.lax(str(value))
        raise InputError(ErrorCode.STRING_TYPE)

    def validate_bytes(self, value: Any, strict: bool,
                       bytes_mode: str = "utf8") -> ValidationMatch[bytes]:
        if type(value) is bytes:
            return ValidationMatch.exact(value)
        if isinstance(value, bytes):
            return ValidationMatch.strict(bytes(value))
        if not strict:
            if isinstance(value, str):
                return ValidationMatch.lax(value.encode("utf-8"))
            if isinstance(value, bytearray):
                return ValidationMatch.lax(bytes(value))
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
        if type(value) is int:
            return ValidationMatch.exact(value)
        if _is_int(value):
            return ValidationMatch.strict(int(value))
        if not strict:
            if isinstance(value, bool):
                return ValidationMatch.lax(int(value))
            if isinstance(value, float):
                return ValidationMatch.lax(float_as_int(value))
            if isinstance(value, Decimal):
                return ValidationMatch.lax(decimal_as_int(value))
            if isinstance(value, str):
                return ValidationMatch.lax(str_as_int(value))
            if isinstance(value, (bytes, bytearray)):
                return ValidationMatch.lax(str_as_int(bytes_as_str(value)))
        raise InputError(ErrorCode.INT_TYPE)

    def validate_float(self, value: Any, strict: bool) -> ValidationMatch[float]:
        if type(value) is float:
            return ValidationMatch.exact(value)
        if isinstance(value, float):
            return ValidationMatch.strict(float(value))
        if _is_int(value):
            return ValidationMatch.strict(float(value))
        if not strict:
            if isinstance(value, bool):
                return ValidationMatch.lax(float(value))
            if isinstance(value, str):
                return ValidationMatch.lax(str_as_float(value))
            if isinstance(value, (bytes, bytearray)):
                return ValidationMatch.lax(str_as_float(bytes_as_str(value)))
            if isinstance(value, Decimal):
                return ValidationMatch.lax(float(value))
        raise InputError(ErrorCode.FLOAT_TYPE)

    def validate_decimal(self, value: Any, strict: bool) -> ValidationMatch[Decimal]:
        if isinstance(value, Decimal):
            return ValidationMatch.exact(value)
        if not strict:
            if _is_int(value) or isinstance(value, (float, str)):
                return ValidationMatch.lax(create_decimal(value))
        raise InputError(ErrorCode.DECIMAL_TYPE)

    # -- dates and times ---------------------------------------------------

    def validate_date(self, value: Any, strict: bool) -> ValidationMatch[date]:
        if isinstance(value, date) and not isinstance(value, datetime):
            return ValidationMatch.exact(value)
        if not strict:
            if isinstance(value, (str, bytes, bytearray)):
                return ValidationMatch.lax(datetime_parse.parse_date(value))
            if isinstance(value, datetime):
                return ValidationMatch.lax(datetime_parse.datetime_as_date(value))
            if _is_int(value) or isinstance(value, float):
                return ValidationMatch.lax(datetime_parse.timestamp_as_date(value))
        raise InputError(ErrorCode.DATE_TYPE)

    def validate_time(self, value: Any, strict: bool) -> ValidationMatch[time]:
        if isinstance(value, time):
            return ValidationMatch.exact(value)
        if not strict:
            if isinstance(value, (str, bytes, bytearray)):
                return ValidationMatch.lax(datetime_parse.parse_time(value))
            if _is_int(value) or isinstance(value, float):
                return ValidationMatch.lax(datetime_parse.seconds_as_time(value))
        raise InputError(ErrorCode.TIME_TYPE)

    def validate_datetime(self, value: Any, strict: bool) -> ValidationMatch[datetime]:
        if isinstance(value, datetime):
            return ValidationMatch.exact(value)
        if not strict:
            if isinstance(value, (str, bytes, bytearray)):
                return ValidationMatch.lax(datetime_parse.parse_datetime(value))
            if _is_int(value) or isinstance(value, float):
                return ValidationMatch.lax(datetime_parse.timestamp_as_datetime(value))
            if isinstance(value, date):
                return ValidationMatch.lax(datetime(value.year, value.month, value.day))
        raise InputError(ErrorCode.DATETIME_TYPE)

    def validate_timedelta(self, value: Any, strict: bool) -> ValidationMatch[timedelta]:
        if isinstance(value, timedelta):
            return ValidationMatch.exact(value)
        if not strict:
            if isinstance(value, (str, bytes, bytearray)):
                return ValidationMatch.lax(datetime_parse.parse_duration(value))
            if _is_int(value) or isinstance(value, float):
                return ValidationMatch.lax(datetime_parse.seconds_as_timedelta(value))
        raise InputError(ErrorCode.TIME_DELTA_TYPE)

    # -- containers --------------------------------------------------------

    def _sequence(self, value: Any, exact_type: type, lax_types: tuple,
                  code: ErrorCode, strict: bool) -> ValidationMatch[List[Any]]:
        if type(value) is exact_type:
            return ValidationMatch.exact(list(value))
        if isinstance(value, exact_type):
            return ValidationMatch.strict(list(value))
        if not strict and isinstance(value, lax_types):
            return ValidationMatch.lax(list(value))
        raise InputError(code)

    def validate_list(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        if type(value) is list:
            return ValidationMatch.exact(value)
        return self._sequence(value, list,
                              (tuple, set, frozenset, deque, GeneratorType) + _DICT_VIEWS,
                              ErrorCode.LIST_TYPE, strict)

    def validate_tuple(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        return self._sequence(value, tuple, (list, set, frozenset, deque, GeneratorType),
                              ErrorCode.TUPLE_TYPE, strict)

    def validate_set(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        return self._sequence(value, set, (list, tuple, frozenset, deque, GeneratorType),
                              ErrorCode.SET_TYPE, strict)

    def validate_frozenset(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        return self._sequence(value, frozenset, (list, tuple, set, deque, GeneratorType),
                              ErrorCode.FROZEN_SET_TYPE, strict)

    def validate_dict(self, value: Any, strict: bool) -> ValidationMatch[Iterable]:
        if type(value) is dict:
            return ValidationMatch.exact(value.items())
        if isinstance(value, dict):
            return ValidationMatch.strict(value.items())
        if not strict and isinstance(value, Mapping):
            return ValidationMatch.lax(value.items())
        raise InputError(ErrorCode.DICT_TYPE)

    def validate_fields(self, value: Any, strict: bool, from_attributes: bool) -> ValidationMatch:
        if isinstance(value, dict):
            return ValidationMatch.exact(MappingSource(value))
        if not strict and isinstance(value, Mapping):
            return ValidationMatch.lax(MappingSource(value))
        if from_attributes and self.kind(value) is InputKind.OBJECT:
            return ValidationMatch.strict(AttributesSource(value))
        if from_attributes:
            raise InputError(ErrorCode.MODEL_ATTRIBUTES_TYPE)
        raise InputError(ErrorCode.DICT_TYPE)

    # -- models, enums, literals -------------------------------------------

    def model_instance(self, value: Any, cls: type) -> Optional[ValidationMatch[Any]]:
        if type(value) is cls:
            return ValidationMatch.exact(value)
        if isinstance(value, cls):
            return ValidationMatch.strict(value)
        return None

    def enum_lookup_value(self, value: Any, cls: type, strict: bool) -> ValidationMatch[Any]:
        if type(value) is cls:
            return ValidationMatch.exact(value)
        if isinstance(value, cls):
            return ValidationMatch.strict(value)
        if strict:
            raise InputError(ErrorCode.ENUM)
        return ValidationMatch.lax(value)

    def literal_match(self, value: Any, lookup: LiteralLookup) -> Any:
        return lookup.find(value)
