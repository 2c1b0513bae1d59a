"""
Nullable and default serializers.
"""

from typing import Any

from .base import Serializer, SerializationState
from ..inputs import MISSING


class NullableSerializer(Serializer):
    kind = "nullable"

    def __init__(self, serializer: Serializer):
        self.serializer = serializer

    def accepts(self, value: Any, exact: bool) -> bool:
        return value is None or self.serializer.accepts(value, exact)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        if value is None:
            return None
        return self.serializer.serialize(value, state, include, exclude)

    def __str__(self) -> str:
        return f"NullableSerializer({self.serializer})"


class DefaultSerializer(Serializer):
    """Delegates to the inner serializer and remembers the static default."""

    kind = "default"

    def __init__(self, serializer: Serializer, default: Any = MISSING):
        self.serializer = serializer
        self.default = default

    def accepts(self, value: Any, exact: bool) -> bool:
        return self.serializer.accepts(value, exact)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        return self.serializer.serialize(value, state, include, exclude)

    def __str__(self) -> str:
        return f"DefaultSerializer({self.serializer})"
