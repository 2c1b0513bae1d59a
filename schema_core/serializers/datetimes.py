"""
Date, time, datetime and timedelta serializers.

JSON output uses ISO 8601 text; timedelta honors ``ser_json_timedelta``.
"""

from datetime import date, datetime, time, timedelta
from typing import Any

from .base import SerializationState, serialize_timedelta
from .simple import TypedSerializer


class IsoFormatSerializer(TypedSerializer):
    def render(self, value: Any, state: SerializationState) -> Any:
        return value.isoformat() if state.json else value


class DateSerializer(IsoFormatSerializer):
    kind = "date"
    python_type = date
    excluded_types = (datetime,)


class TimeSerializer(IsoFormatSerializer):
    kind = "time"
    python_type = time


class DatetimeSerializer(IsoFormatSerializer):
    kind = "datetime"
    python_type = datetime


class TimedeltaSerializer(TypedSerializer):
    kind = "timedelta"
    python_type = timedelta

    def render(self, value: Any, state: SerializationState) -> Any:
        return serialize_timedelta(value, state)
