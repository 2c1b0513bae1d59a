"""
Date, time, datetime and timedelta validators.
"""

from typing import Any, Optional

from .base import Validator, ValidationContext
from ..errors import ErrorCode
from ..inputs import InputError


class TemporalValidator(Validator):
    """
    Base for temporal validators: reads the value through the input adapter
    method named by ``reader`` and applies ordering bounds.
    """

    reader = "abstract"

    def __init__(self, strict: bool = False, gt: Any = None, ge: Any = None,
                 lt: Any = None, le: Any = None):
        self.strict = strict
        self.gt = gt
        self.ge = ge
        self.lt = lt
        self.le = le

    def validate(self, value: Any, context: ValidationContext) -> Any:
        read = getattr(context.input, self.reader)
        try:
            result = read(value, context.strict_or(self.strict)).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)
        self._check_value(result, value, context)
        self._check_bounds(result, value, context)
        return result

    def _check_value(self, result: Any, value: Any, context: ValidationContext) -> None:
        pass

    def _check_bounds(self, result: Any, value: Any, context: ValidationContext) -> None:
        checks = (
            (self.gt, ErrorCode.GREATER_THAN, "gt", lambda a, b: a > b),
            (self.ge, ErrorCode.GREATER_THAN_EQUAL, "ge", lambda a, b: a >= b),
            (self.lt, ErrorCode.LESS_THAN, "lt", lambda a, b: a < b),
            (self.le, ErrorCode.LESS_THAN_EQUAL, "le", lambda a, b: a <= b),
        )
        for bound, code, key, compare in checks:
            if bound is None:
                continue
            try:
                ok = compare(result, bound)
            except TypeError:
                # naive vs aware datetimes cannot be ordered
                ok = False
            if not ok:
                raise context.fail(code, value, **{key: bound})


class DateValidator(TemporalValidator):
    kind = "date"
    reader = "validate_date"


class TimeValidator(TemporalValidator):
    kind = "time"
    reader = "validate_time"


class TimedeltaValidator(TemporalValidator):
    kind = "timedelta"
    reader = "validate_timedelta"


class DatetimeValidator(TemporalValidator):
    """Validates datetimes, optionally requiring timezone-aware or naive values."""

    kind = "datetime"
    reader = "validate_datetime"

    def __init__(self, tz_constraint: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.tz_constraint = tz_constraint

    def _check_value(self, result: Any, value: Any, context: ValidationContext) -> None:
        aware = result.tzinfo is not None and result.tzinfo.utcoffset(result) is not None
        if self.tz_constraint == "aware" and not aware:
            raise context.fail(ErrorCode.TIMEZONE_AWARE, value)
        if self.tz_constraint == "naive" and aware:
            raise context.fail(ErrorCode.TIMEZONE_NAIVE, value)
