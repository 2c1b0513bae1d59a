"""
Recursive reference serializer.
"""

from typing import Any

from .base import Serializer, SerializationState
from ..definitions import DefinitionSlot


class DefinitionRefSerializer(Serializer):
    """
    Serializes with a named definition, resolved through its slot.

    Cycles in the value are caught by the containers the definition
    serializes, which mark themselves active while they are being visited.
    """

    kind = "definition-ref"

    def __init__(self, name: str, slot: DefinitionSlot):
        self.name = name
        self.slot = slot

    def accepts(self, value: Any, exact: bool) -> bool:
        return self.slot.value.accepts(value, exact)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        return self.slot.value.serialize(value, state, include, exclude)

    def __str__(self) -> str:
        return f"DefinitionRefSerializer({self.name!r})"
