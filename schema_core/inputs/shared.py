"""
Coercion helpers shared by the Python and JSON input adapters.

These implement the lax-mode ladder; callers decide whether lax mode is
active before calling them.
"""

import base64
import binascii
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from ..errors import ErrorCode
from .base import InputError


# optional sign, digits with single underscores between them, and an
# optional fractional part made only of zeros
_INT_PATTERN = re.compile(r"^\s*([+-]?\d+(?:_\d+)*)(?:\.0*)?\s*\Z", re.ASCII)

_TRUE_STRINGS = frozenset({"1", "on", "t", "true", "y", "yes"})
_FALSE_STRINGS = frozenset({"0", "off", "f", "false", "n", "no"})


def str_as_int(text: str) -> int:
    match = _INT_PATTERN.match(text)
    if match is None:
        raise InputError(ErrorCode.INT_PARSING)
    return int(match.group(1))


def float_as_int(number: float) -> int:
    if math.isnan(number) or math.isinf(number):
        raise InputError(ErrorCode.FINITE_NUMBER)
    if number % 1 != 0:
        raise InputError(ErrorCode.INT_FROM_FLOAT)
    return int(number)


def decimal_as_int(number: Decimal) -> int:
    if not number.is_finite():
        raise InputError(ErrorCode.FINITE_NUMBER)
    if number != number.to_integral_value():
        raise InputError(ErrorCode.INT_FROM_FLOAT)
    return int(number)


def str_as_float(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError:
        raise InputError(ErrorCode.FLOAT_PARSING)


def str_as_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise InputError(ErrorCode.BOOL_PARSING)


def int_as_bool(number: int) -> bool:
    if number == 0:
        return False
    if number == 1:
        return True
    raise InputError(ErrorCode.BOOL_PARSING)


def float_as_bool(number: float) -> bool:
    if number == 0.0:
        return False
    if number == 1.0:
        return True
    raise InputError(ErrorCode.BOOL_PARSING)


def create_decimal(value: Any) -> Decimal:
    """Decimal from an int, a float (through its repr) or a string."""
    if isinstance(value, float):
        value = repr(value)
    if isinstance(value, str):
        value = value.strip()
    try:
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise InputError(ErrorCode.DECIMAL_PARSING)


def bytes_as_str(data: bytes) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError:
        raise InputError(ErrorCode.STRING_UNICODE)


def str_as_bytes(text: str, bytes_mode: str) -> bytes:
    """Decode a string into bytes according to the configured bytes mode."""
    if bytes_mode == "utf8":
        return text.encode("utf-8")
    if bytes_mode == "base64":
        try:
            padded = text + "=" * (-len(text) % 4)
            return base64.urlsafe_b64decode(padded.replace("+", "-").replace("/", "_"))
        except (binascii.Error, ValueError) as exc:
            raise InputError(ErrorCode.BYTES_INVALID_ENCODING,
                             encoding="base64", encoding_error=str(exc))
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise InputError(ErrorCode.BYTES_INVALID_ENCODING,
                         encoding="hex", encoding_error=str(exc))


def encode_bytes(data: bytes, bytes_mode: str) -> str:
    """Inverse of ``str_as_bytes`` used by JSON serialization."""
    if bytes_mode == "base64":
        return base64.urlsafe_b64encode(data).decode("ascii")
    if bytes_mode == "hex":
        return data.hex()
    return data.decode("utf-8")
