"""
Base classes for serializer nodes and the per-call serialization state.
"""

import math
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from ..config import CoreConfig
from ..errors import ErrorCode, SerializationError, ValidationError
from ..inputs.datetime_parse import format_duration
from ..inputs.shared import encode_bytes
from ..utils import format_location, type_name
from .filters import filter_item, iter_filtered


class SerializationInfo:
    """
    Read-only view of the serialization state handed to user functions.

    Attributes:
        include: Include filter applying to the current value
        exclude: Exclude filter applying to the current value
        context: The opaque caller-supplied context
        mode: "python" or "json"
        by_alias: Whether serialization aliases are used
        exclude_unset: Whether fields absent from the input are omitted
        exclude_defaults: Whether fields equal to their default are omitted
        exclude_none: Whether fields holding None are omitted
        round_trip: Whether the output must validate back to the same value
        field_name: Name of the field being serialized, if any
    """

    __slots__ = ("include", "exclude", "context", "mode", "by_alias", "exclude_unset",
                 "exclude_defaults", "exclude_none", "round_trip", "field_name")

    def __init__(self, state: "SerializationState", include: Any, exclude: Any,
                 field_name: Optional[str] = None):
        self.include = include
        self.exclude = exclude
        self.context = state.user_context
        self.mode = state.mode
        self.by_alias = state.by_alias
        self.exclude_unset = state.exclude_unset
        self.exclude_defaults = state.exclude_defaults
        self.exclude_none = state.exclude_none
        self.round_trip = state.round_trip
        self.field_name = field_name

    def mode_is_json(self) -> bool:
        return self.mode == "json"

    def __repr__(self) -> str:
        return f"SerializationInfo(mode={self.mode!r}, field_name={self.field_name!r})"


class SerializationState:
    """
    Per-call state of a serialization run.

    Tracks the output path for error entries and the ids of containers
    currently being serialized, which is how reference cycles are caught.
    """

    def __init__(self,
                 mode: str = "python",
                 config: Optional[CoreConfig] = None,
                 by_alias: Optional[bool] = None,
                 exclude_defaults: bool = False,
                 exclude_none: bool = False,
                 exclude_unset: bool = False,
                 round_trip: bool = False,
                 user_context: Any = None):
        self.mode = mode
        self.config = config or CoreConfig()
        self.by_alias = self.config.serialize_by_alias if by_alias is None else by_alias
        self.exclude_defaults = exclude_defaults
        self.exclude_none = exclude_none
        self.exclude_unset = exclude_unset
        self.round_trip = round_trip
        self.user_context = user_context
        self.path_parts: List[Any] = []
        self.active: Set[int] = set()
        self.field_name: Optional[str] = None

    @property
    def json(self) -> bool:
        return self.mode == "json"

    @property
    def use_alias(self) -> bool:
        return self.by_alias

    @property
    def loc(self) -> tuple:
        return tuple(self.path_parts)

    def fail(self, code: ErrorCode, input_value: Any, **payload: Any) -> SerializationError:
        """Build an error located at the current output path; the caller raises it."""
        error = ValidationError.create(code, self.loc, input_value, payload or None)
        return SerializationError([error])

    def mismatch(self, expected: str, value: Any) -> SerializationError:
        return self.fail(ErrorCode.SERIALIZATION_TYPE_MISMATCH, value,
                         expected=expected, actual=type_name(value), value=repr(value)[:50])

    def info(self, include: Any, exclude: Any) -> SerializationInfo:
        return SerializationInfo(self, include, exclude, self.field_name)

    def with_path(self, *parts: Any) -> "StatePath":
        return StatePath(self, parts)

    def visit(self, value: Any) -> "VisitContext":
        """Context manager marking a container as being serialized."""
        return VisitContext(self, value)

    def __str__(self) -> str:
        return f"SerializationState(mode={self.mode!r}, path={format_location(self.path_parts)!r})"


class StatePath:
    """Context manager for temporarily adding output path parts."""

    __slots__ = ("state", "parts")

    def __init__(self, state: SerializationState, parts: tuple):
        self.state = state
        self.parts = parts

    def __enter__(self):
        self.state.path_parts.extend(self.parts)
        return self.state

    def __exit__(self, exc_type, exc_val, exc_tb):
        del self.state.path_parts[len(self.state.path_parts) - len(self.parts):]


class VisitContext:
    """Raises ``serialization_circular_reference`` when a container is re-entered."""

    __slots__ = ("state", "identity")

    def __init__(self, state: SerializationState, value: Any):
        self.state = state
        self.identity = id(value)

    def __enter__(self):
        if self.identity in self.state.active:
            raise self.state.fail(ErrorCode.SERIALIZATION_CIRCULAR_REFERENCE, None)
        self.state.active.add(self.identity)
        return self.state

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.state.active.discard(self.identity)


class Serializer(ABC):
    """
    Base class for all serializer nodes.

    Each node mirrors one validator node kind and turns validated values
    back into Python objects or JSON-compatible primitives.
    """

    kind: str = "abstract"

    @abstractmethod
    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        """
        Serialize a value.

        Args:
            value: A value of the shape this node produces when validating
            state: Serialization state
            include: Normalized include filter for this value
            exclude: Normalized exclude filter for this value

        Returns:
            The serialized value

        Raises:
            SerializationError: On shape mismatches and failing user functions
        """
        pass

    def accepts(self, value: Any, exact: bool) -> bool:
        """
        Shape check used by union serializers.

        Args:
            value: Candidate value
            exact: Require the exact output type rather than a compatible one
        """
        return True

    def __str__(self) -> str:
        return f"{self.__class__.__name__}"

    def __repr__(self) -> str:
        return self.__str__()


def serialize_float(number: float, state: SerializationState) -> Any:
    """JSON rendering of a float honoring ``ser_json_inf_nan``."""
    if not state.json or math.isfinite(number):
        return number
    behavior = state.config.ser_json_inf_nan
    if behavior == "null":
        return None
    if behavior == "strings":
        if math.isnan(number):
            return "NaN"
        return "Infinity" if number > 0 else "-Infinity"
    return number


def serialize_bytes(data: bytes, state: SerializationState) -> Any:
    if not state.json:
        return data
    try:
        return encode_bytes(bytes(data), state.config.ser_json_bytes)
    except UnicodeDecodeError as exc:
        raise state.fail(ErrorCode.SERIALIZATION_UNKNOWN_TYPE, data,
                         actual=f"bytes that are not valid utf-8 ({exc.reason})")


def serialize_timedelta(delta: timedelta, state: SerializationState) -> Any:
    if not state.json:
        return delta
    if state.config.ser_json_timedelta == "float":
        return delta.total_seconds()
    return format_duration(delta)


def json_key(key: Any, state: SerializationState) -> str:
    """Render a mapping key as a JSON object key."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, Enum):
        return json_key(key.value, state)
    if isinstance(key, (int, Decimal)):
        return str(key)
    if isinstance(key, float):
        rendered = serialize_float(key, state)
        return "null" if rendered is None else str(rendered)
    if isinstance(key, (date, time)):
        return key.isoformat()
    if isinstance(key, timedelta):
        return str(serialize_timedelta(key, state))
    if isinstance(key, (bytes, bytearray)):
        return serialize_bytes(key, state)
    if key is None:
        return "None"
    raise state.fail(ErrorCode.SERIALIZATION_UNKNOWN_TYPE, key, actual=type_name(key))


def is_model_instance(value: Any) -> bool:
    """Whether a value was built by a model validator."""
    return "__fields_set__" in getattr(value, "__dict__", {})


def model_parts(value: Any) -> tuple:
    """``(fields, fields_set, extras)`` of a model instance."""
    data: Dict[str, Any] = value.__dict__
    fields = {key: item for key, item in data.items() if not key.startswith("__")}
    return fields, data.get("__fields_set__"), data.get("__model_extra__")


def infer_serialize(value: Any, state: SerializationState,
                    include: Any = None, exclude: Any = None) -> Any:
    """
    Serialize a value using its runtime type.

    Used where the schema says nothing about the shape, such as ``any``
    nodes and the output of custom serialize functions.
    """
    if value is None or isinstance(value, (bool, int, str)) and not isinstance(value, Enum):
        return value
    if isinstance(value, float):
        return serialize_float(value, state)
    if isinstance(value, Decimal):
        return str(value) if state.json else value
    if isinstance(value, (bytes, bytearray)):
        return serialize_bytes(value, state)
    if isinstance(value, (date, time)):
        return value.isoformat() if state.json else value
    if isinstance(value, timedelta):
        return serialize_timedelta(value, state)
    if isinstance(value, Enum):
        return infer_serialize(value.value, state) if state.json else value

    if isinstance(value, dict) or is_model_instance(value):
        if isinstance(value, dict):
            items = value
        else:
            fields, _, extras = model_parts(value)
            items = dict(fields)
            items.update(extras or {})
        output = {}
        with state.visit(value):
            for key, item in items.items():
                skip, next_include, next_exclude = filter_item(key, include, exclude)
                if skip:
                    continue
                out_key = json_key(key, state) if state.json else key
                with state.with_path(key):
                    output[out_key] = infer_serialize(item, state, next_include, next_exclude)
        return output

    if isinstance(value, (list, tuple, set, frozenset)):
        items = []
        with state.visit(value):
            for index, item, next_include, next_exclude in iter_filtered(value, include, exclude):
                with state.with_path(index):
                    items.append(infer_serialize(item, state, next_include, next_exclude))
        if state.json or isinstance(value, list):
            return items
        if isinstance(value, tuple):
            return tuple(items)
        return type(value)(items)

    if state.json:
        raise state.fail(ErrorCode.SERIALIZATION_UNKNOWN_TYPE, value, actual=type_name(value))
    return value
