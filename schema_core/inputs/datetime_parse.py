"""
Date, time, datetime and duration parsing for lax and JSON input.

Formats accepted:

- date: ``YYYY-MM-DD``
- time: ``HH:MM[:SS[.ffffff]][Z|±HH[:MM]]``
- datetime: date, or date + ``T``/``t``/space + time
- duration: ISO 8601 ``[±]P[nY][nM][nW][nD][T[nH][nM][nS]]`` or
  ``[±][D day[s][,]] HH:MM:SS[.ffffff]``
- numbers: unix timestamps (milliseconds when the magnitude exceeds
  ``2e10``) for dates and datetimes, seconds for times and durations
"""

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from ..errors import ErrorCode
from .base import InputError


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MS_WATERSHED = 2e10

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})\Z", re.ASCII)
_TIME_RE = re.compile(
    r"^(\d{2}):(\d{2})(?::(\d{2})(?:[.,](\d{1,6})\d*)?)?"
    r"(Z|z|[+-]\d{2}(?::?\d{2})?)?\Z",
    re.ASCII,
)
_ISO_DURATION_RE = re.compile(
    r"^([-+])?P"
    r"(?:(\d+(?:[.,]\d+)?)Y)?"
    r"(?:(\d+(?:[.,]\d+)?)M)?"
    r"(?:(\d+(?:[.,]\d+)?)W)?"
    r"(?:(\d+(?:[.,]\d+)?)D)?"
    r"(?:T(?:(\d+(?:[.,]\d+)?)H)?(?:(\d+(?:[.,]\d+)?)M)?(?:(\d+(?:[.,]\d+)?)S)?)?\Z",
    re.ASCII,
)
_CLOCK_DURATION_RE = re.compile(
    r"^([-+])?(?:(\d+)\s*d(?:ays?)?)?"
    r"(?:,?\s*(\d+):(\d{2}):(\d{2})(?:\.(\d{1,6}))?)?\Z",
    re.ASCII,
)

# days per ISO unit; years and months use fixed lengths
_ISO_UNIT_DAYS = (365, 30, 7, 1)


def _decode(value: Union[str, bytes], code: ErrorCode) -> str:
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("ascii")
        except UnicodeDecodeError:
            raise InputError(code, error="invalid characters in input")
    return value


def parse_date(value: Union[str, bytes]) -> date:
    text = _decode(value, ErrorCode.DATE_PARSING)
    if len(text) < 10:
        raise InputError(ErrorCode.DATE_PARSING, error="input is too short")
    match = _DATE_RE.match(text)
    if match is None:
        if len(text) > 10 and _DATE_RE.match(text[:10]):
            raise InputError(ErrorCode.DATE_PARSING, error="unexpected extra characters at the end of the input")
        raise InputError(ErrorCode.DATE_PARSING, error="invalid date format")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InputError(ErrorCode.DATE_PARSING, error=str(exc))


def _parse_offset(text: Optional[str], code: ErrorCode) -> Optional[timezone]:
    if not text:
        return None
    if text in ("Z", "z"):
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4]) if len(digits) > 2 else 0
    if hours > 23 or minutes > 59:
        raise InputError(code, error="timezone offset must be less than 24 hours")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_time(value: Union[str, bytes], code: ErrorCode = ErrorCode.TIME_PARSING) -> time:
    text = _decode(value, code)
    match = _TIME_RE.match(text)
    if match is None:
        if len(text) < 5:
            raise InputError(code, error="input is too short")
        raise InputError(code, error="invalid time format")
    hour, minute, second, fraction, offset = match.groups()
    hour, minute = int(hour), int(minute)
    second = int(second) if second else 0
    microsecond = int(fraction.ljust(6, "0")) if fraction else 0
    if hour > 23:
        raise InputError(code, error="hour value is outside expected range of 0-23")
    if minute > 59:
        raise InputError(code, error="minute value is outside expected range of 0-59")
    if second > 59:
        raise InputError(code, error="second value is outside expected range of 0-59")
    return time(hour, minute, second, microsecond, tzinfo=_parse_offset(offset, code))


def parse_datetime(value: Union[str, bytes]) -> datetime:
    text = _decode(value, ErrorCode.DATETIME_PARSING)
    if len(text) < 10:
        raise InputError(ErrorCode.DATETIME_PARSING, error="input is too short")
    try:
        day = parse_date(text[:10])
    except InputError as exc:
        raise InputError(ErrorCode.DATETIME_PARSING, **exc.payload)
    if len(text) == 10:
        return datetime(day.year, day.month, day.day)
    if text[10] not in "Tt ":
        raise InputError(ErrorCode.DATETIME_PARSING, error="invalid date separator, expected `T`, `t`, `_` or space")
    clock = parse_time(text[11:], ErrorCode.DATETIME_PARSING)
    return datetime.combine(day, clock)


def timestamp_as_datetime(number: float) -> datetime:
    if math.isnan(number) or math.isinf(number):
        raise InputError(ErrorCode.DATETIME_PARSING, error="NaN and infinite values are not permitted")
    if abs(number) > MS_WATERSHED:
        number = number / 1000
    try:
        return EPOCH + timedelta(seconds=number)
    except OverflowError:
        raise InputError(ErrorCode.DATETIME_PARSING, error="timestamp is outside the supported range")


def timestamp_as_date(number: float) -> date:
    try:
        moment = timestamp_as_datetime(number)
    except InputError as exc:
        raise InputError(ErrorCode.DATE_PARSING, **exc.payload)
    if moment.time() != time(0):
        raise InputError(ErrorCode.DATE_FROM_DATETIME_INEXACT)
    return moment.date()


def datetime_as_date(moment: datetime) -> date:
    if moment.time() != time(0):
        raise InputError(ErrorCode.DATE_FROM_DATETIME_INEXACT)
    return moment.date()


def seconds_as_time(number: float) -> time:
    if math.isnan(number) or math.isinf(number):
        raise InputError(ErrorCode.TIME_PARSING, error="NaN and infinite values are not permitted")
    if number < 0 or number >= 86400:
        raise InputError(ErrorCode.TIME_PARSING, error="time in seconds should be less than 86400 and not negative")
    whole = int(number)
    microsecond = int(round((number - whole) * 1_000_000))
    if microsecond == 1_000_000:
        whole, microsecond = whole + 1, 0
    hours, rest = divmod(whole, 3600)
    minutes, seconds = divmod(rest, 60)
    return time(hours, minutes, seconds, microsecond)


def seconds_as_timedelta(number: float) -> timedelta:
    if math.isnan(number) or math.isinf(number):
        raise InputError(ErrorCode.TIME_DELTA_PARSING, error="NaN and infinite values are not permitted")
    try:
        return timedelta(seconds=number)
    except OverflowError:
        raise InputError(ErrorCode.TIME_DELTA_PARSING, error="duration is outside the supported range")


def _unit(text: Optional[str]) -> float:
    return float(text.replace(",", ".")) if text else 0.0


def parse_duration(value: Union[str, bytes]) -> timedelta:
    text = _decode(value, ErrorCode.TIME_DELTA_PARSING).strip()
    if not text:
        raise InputError(ErrorCode.TIME_DELTA_PARSING, error="input is too short")

    match = _ISO_DURATION_RE.match(text)
    if match is not None and text.rstrip("T") not in ("P", "-P", "+P") and not text.endswith("T"):
        sign, years, months, weeks, days, hours, minutes, seconds = match.groups()
        total_days = sum(_unit(part) * factor
                         for part, factor in zip((years, months, weeks, days), _ISO_UNIT_DAYS))
        result = _build_timedelta(total_days, _unit(hours), _unit(minutes), _unit(seconds))
        return -result if sign == "-" else result

    match = _CLOCK_DURATION_RE.match(text)
    if match is not None and (match.group(2) or match.group(3)):
        sign, days, hours, minutes, seconds, fraction = match.groups()
        if minutes is not None and (int(minutes) > 59 or int(seconds) > 59):
            raise InputError(ErrorCode.TIME_DELTA_PARSING, error="minute or second value is outside expected range of 0-59")
        result = timedelta(
            days=int(days or 0),
            hours=int(hours or 0),
            minutes=int(minutes or 0),
            seconds=int(seconds or 0),
            microseconds=int(fraction.ljust(6, "0")) if fraction else 0,
        )
        return -result if sign == "-" else result

    raise InputError(ErrorCode.TIME_DELTA_PARSING, error="invalid duration format")


def _build_timedelta(days: float, hours: float, minutes: float, seconds: float) -> timedelta:
    try:
        return timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)
    except OverflowError:
        raise InputError(ErrorCode.TIME_DELTA_PARSING, error="duration is outside the supported range")


def format_duration(delta: timedelta) -> str:
    """ISO 8601 rendering that ``parse_duration`` reads back exactly."""
    sign = "-" if delta < timedelta(0) else ""
    delta = abs(delta)
    hours, rest = divmod(delta.seconds, 3600)
    minutes, seconds = divmod(rest, 60)

    out = f"{sign}P"
    if delta.days:
        out += f"{delta.days}D"
    clock = ""
    if hours:
        clock += f"{hours}H"
    if minutes:
        clock += f"{minutes}M"
    if delta.microseconds:
        clock += f"{seconds}.{delta.microseconds:06d}".rstrip("0") + "S"
    elif seconds:
        clock += f"{seconds}S"
    if clock:
        out += "T" + clock
    if out in ("P", "-P"):
        return "PT0S"
    return out
