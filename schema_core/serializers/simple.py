"""
Serializers for scalar kinds and for values of unknown shape.
"""

from decimal import Decimal
from typing import Any

from .base import (
    Serializer,
    SerializationState,
    infer_serialize,
    serialize_bytes,
    serialize_float,
)


class AnySerializer(Serializer):
    """Serializes by runtime type; used for ``any`` and opaque nodes."""

    kind = "any"

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        return infer_serialize(value, state, include, exclude)


class NoneSerializer(Serializer):
    kind = "none"

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        if value is not None:
            raise state.mismatch("None", value)
        return None

    def accepts(self, value: Any, exact: bool) -> bool:
        return value is None


class TypedSerializer(Serializer):
    """
    Serializer for a node whose output is an instance of ``python_type``.

    Exact acceptance requires the type itself; loose acceptance admits
    subclasses.
    """

    python_type: type = object
    excluded_types: tuple = ()

    def accepts(self, value: Any, exact: bool) -> bool:
        if exact:
            return type(value) is self.python_type
        return isinstance(value, self.python_type) and not isinstance(value, self.excluded_types)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        if not self.accepts(value, exact=False):
            raise state.mismatch(self.kind, value)
        return self.render(value, state)

    def render(self, value: Any, state: SerializationState) -> Any:
        return value


class BoolSerializer(TypedSerializer):
    kind = "bool"
    python_type = bool


class IntSerializer(TypedSerializer):
    kind = "int"
    python_type = int
    excluded_types = (bool,)

    def render(self, value: Any, state: SerializationState) -> Any:
        # int subclasses such as IntEnum members become plain ints in JSON
        return int(value) if state.json else value


class FloatSerializer(TypedSerializer):
    kind = "float"
    python_type = float

    def accepts(self, value: Any, exact: bool) -> bool:
        if exact:
            return type(value) is float
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def render(self, value: Any, state: SerializationState) -> Any:
        return serialize_float(float(value), state) if state.json else value


class DecimalSerializer(TypedSerializer):
    kind = "decimal"
    python_type = Decimal

    def render(self, value: Any, state: SerializationState) -> Any:
        return str(value) if state.json else value


class StrSerializer(TypedSerializer):
    kind = "str"
    python_type = str

    def render(self, value: Any, state: SerializationState) -> Any:
        # plain text content, also for str-based enum members
        return str.__str__(value) if state.json else value


class BytesSerializer(TypedSerializer):
    kind = "bytes"
    python_type = bytes

    def accepts(self, value: Any, exact: bool) -> bool:
        if exact:
            return type(value) is bytes
        return isinstance(value, (bytes, bytearray))

    def render(self, value: Any, state: SerializationState) -> Any:
        return serialize_bytes(value, state)
