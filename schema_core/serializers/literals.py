"""
Literal and enum serializers.
"""

from enum import Enum
from typing import Any, List

from .base import Serializer, SerializationState, infer_serialize
from ..inputs import LiteralLookup, MISSING


class LiteralSerializer(Serializer):
    """Emits literal values as they are; enum members become their value in JSON."""

    kind = "literal"

    def __init__(self, expected: List[Any]):
        self.lookup = LiteralLookup(expected)

    def accepts(self, value: Any, exact: bool) -> bool:
        if self.lookup.find(value) is not MISSING:
            return True
        return not exact and self.lookup.find_enum_value(value) is not MISSING

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        return infer_serialize(value, state)


class EnumSerializer(Serializer):
    """Keeps members in Python mode and emits member values in JSON mode."""

    kind = "enum"

    def __init__(self, cls: type):
        self.cls = cls

    def accepts(self, value: Any, exact: bool) -> bool:
        if exact:
            return type(value) is self.cls
        return isinstance(value, self.cls)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        if not isinstance(value, self.cls):
            raise state.mismatch(self.cls.__name__, value)
        if state.json:
            member: Enum = value
            return infer_serialize(member.value, state)
        return value

    def __str__(self) -> str:
        return f"EnumSerializer({self.cls.__name__})"
