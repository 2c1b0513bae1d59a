"""
Integer, float and decimal validators.

Range and precision constraints run after the type check, so a type error
is always reported on its own.
"""

import math
from decimal import Decimal
from typing import Any, Optional

from .base import Validator, ValidationContext
from ..errors import ErrorCode
from ..inputs import InputError


class NumberValidator(Validator):
    """
    Shared bounds and multiple-of checks for numeric validators.
    """

    def __init__(self,
                 strict: bool = False,
                 gt: Any = None,
                 ge: Any = None,
                 lt: Any = None,
                 le: Any = None,
                 multiple_of: Any = None):
        self.strict = strict
        self.gt = gt
        self.ge = ge
        self.lt = lt
        self.le = le
        self.multiple_of = multiple_of

    def _check_bounds(self, number: Any, value: Any, context: ValidationContext) -> None:
        if self.multiple_of is not None and not self._is_multiple(number):
            raise context.fail(ErrorCode.MULTIPLE_OF, value, multiple_of=self.multiple_of)
        if self.gt is not None and not number > self.gt:
            raise context.fail(ErrorCode.GREATER_THAN, value, gt=self.gt)
        if self.ge is not None and not number >= self.ge:
            raise context.fail(ErrorCode.GREATER_THAN_EQUAL, value, ge=self.ge)
        if self.lt is not None and not number < self.lt:
            raise context.fail(ErrorCode.LESS_THAN, value, lt=self.lt)
        if self.le is not None and not number <= self.le:
            raise context.fail(ErrorCode.LESS_THAN_EQUAL, value, le=self.le)

    def _is_multiple(self, number: Any) -> bool:
        return number % self.multiple_of == 0

    def __str__(self) -> str:
        parts = [f"{name}={getattr(self, name)}"
                 for name in ("gt", "ge", "lt", "le", "multiple_of")
                 if getattr(self, name) is not None]
        if self.strict:
            parts.append("strict=True")
        return f"{self.__class__.__name__}({', '.join(parts)})"


class IntValidator(NumberValidator):
    """Validates integers."""

    kind = "int"

    def validate(self, value: Any, context: ValidationContext) -> int:
        try:
            number = context.input.validate_int(
                value, context.strict_or(self.strict)).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)
        self._check_bounds(number, value, context)
        return number


class FloatValidator(NumberValidator):
    """Validates floats; ints are accepted and converted."""

    kind = "float"

    def __init__(self, allow_inf_nan: bool = True, **kwargs):
        super().__init__(**kwargs)
        self.allow_inf_nan = allow_inf_nan

    def validate(self, value: Any, context: ValidationContext) -> float:
        try:
            number = context.input.validate_float(
                value, context.strict_or(self.strict)).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)
        if not math.isfinite(number):
            if not self.allow_inf_nan:
                raise context.fail(ErrorCode.FINITE_NUMBER, value)
            if math.isnan(number):
                # NaN compares false against every bound
                return number
        self._check_bounds(number, value, context)
        return number

    def _is_multiple(self, number: float) -> bool:
        remainder = number % self.multiple_of
        threshold = abs(number) / 1e9
        return abs(remainder) <= threshold or abs(remainder - self.multiple_of) <= threshold


class DecimalValidator(NumberValidator):
    """
    Validates decimals.

    ``max_digits`` and ``decimal_places`` count the digits of the
    normalized value, so trailing zeros after the point are not counted.
    """

    kind = "decimal"

    def __init__(self,
                 allow_inf_nan: bool = False,
                 max_digits: Optional[int] = None,
                 decimal_places: Optional[int] = None,
                 **kwargs):
        super().__init__(**kwargs)
        self.allow_inf_nan = allow_inf_nan
        self.max_digits = max_digits
        self.decimal_places = decimal_places

    def validate(self, value: Any, context: ValidationContext) -> Decimal:
        try:
            number = context.input.validate_decimal(
                value, context.strict_or(self.strict)).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)

        if not number.is_finite():
            if not self.allow_inf_nan:
                raise context.fail(ErrorCode.FINITE_NUMBER, value)
            return number

        self._check_digits(number, value, context)
        self._check_bounds(number, value, context)
        return number

    def _check_digits(self, number: Decimal, value: Any, context: ValidationContext) -> None:
        if self.max_digits is None and self.decimal_places is None:
            return
        _, digit_tuple, exponent = number.normalize().as_tuple()
        if exponent >= 0:
            decimals = 0
            digits = len(digit_tuple) + exponent
        else:
            decimals = -exponent
            digits = max(len(digit_tuple), decimals)

        if self.max_digits is not None and digits > self.max_digits:
            raise context.fail(ErrorCode.DECIMAL_MAX_DIGITS, value, max_digits=self.max_digits)
        if self.decimal_places is not None and decimals > self.decimal_places:
            raise context.fail(ErrorCode.DECIMAL_MAX_PLACES, value, decimal_places=self.decimal_places)
        if self.max_digits is not None and self.decimal_places is not None:
            whole_digits = self.max_digits - self.decimal_places
            if digits - decimals > whole_digits:
                raise context.fail(ErrorCode.DECIMAL_WHOLE_DIGITS, value, whole_digits=whole_digits)
