"""
Dict serializer.
"""

from typing import Any, Dict, Optional

from .base import Serializer, SerializationState, json_key
from .filters import filter_item
from .simple import AnySerializer

_ANY = AnySerializer()


class DictSerializer(Serializer):
    """Serializes keys and values; JSON keys are rendered as strings."""

    kind = "dict"

    def __init__(self,
                 keys_serializer: Optional[Serializer] = None,
                 values_serializer: Optional[Serializer] = None):
        self.keys_serializer = keys_serializer or _ANY
        self.values_serializer = values_serializer or _ANY

    def accepts(self, value: Any, exact: bool) -> bool:
        if exact:
            return type(value) is dict
        return isinstance(value, dict)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Dict[Any, Any]:
        if not isinstance(value, dict):
            raise state.mismatch("dict", value)

        output: Dict[Any, Any] = {}
        with state.visit(value):
            for key, item in value.items():
                skip, next_include, next_exclude = filter_item(key, include, exclude)
                if skip:
                    continue
                with state.with_path(key):
                    out_key = self.keys_serializer.serialize(key, state)
                    if state.json:
                        out_key = json_key(out_key, state)
                    output[out_key] = self.values_serializer.serialize(
                        item, state, next_include, next_exclude)
        return output

    def __str__(self) -> str:
        return f"DictSerializer({self.keys_serializer}, {self.values_serializer})"
