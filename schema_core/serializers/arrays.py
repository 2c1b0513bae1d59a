"""
List, tuple, set and frozenset serializers.
"""

from typing import Any, List, Optional

from .base import Serializer, SerializationState
from .filters import iter_filtered
from .simple import AnySerializer

_ANY = AnySerializer()


class SequenceSerializer(Serializer):
    """
    Serializes each element with the item serializer.

    JSON output is always a list; Python output keeps the container type.
    Include/exclude filters address elements by index.
    """

    python_type: type = list

    def __init__(self, items_serializer: Optional[Serializer] = None):
        self.items_serializer = items_serializer or _ANY

    def accepts(self, value: Any, exact: bool) -> bool:
        if exact:
            return type(value) is self.python_type
        return isinstance(value, self.python_type)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        if not self.accepts(value, exact=False):
            raise state.mismatch(self.kind, value)

        items: List[Any] = []
        with state.visit(value):
            for index, item, next_include, next_exclude in iter_filtered(value, include, exclude):
                serializer = self._serializer_for(index, len(value))
                with state.with_path(index):
                    items.append(serializer.serialize(item, state, next_include, next_exclude))

        if state.json:
            return items
        return self._output(items)

    def _serializer_for(self, index: int, length: int) -> Serializer:
        return self.items_serializer

    def _output(self, items: List[Any]) -> Any:
        return items

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.items_serializer})"


class ListSerializer(SequenceSerializer):
    kind = "list"
    python_type = list


class SetSerializer(SequenceSerializer):
    kind = "set"
    python_type = set

    def _output(self, items: List[Any]) -> Any:
        return set(items)


class FrozenSetSerializer(SequenceSerializer):
    kind = "frozenset"
    python_type = frozenset

    def _output(self, items: List[Any]) -> Any:
        return frozenset(items)


class TupleSerializer(SequenceSerializer):
    """
    Positional tuple serializer.

    With a variadic index, the serializers before it match the prefix, the
    ones after it match the suffix, and the variadic one covers the middle.
    """

    kind = "tuple"
    python_type = tuple

    def __init__(self, items_serializers: List[Serializer], variadic_item_index: Optional[int] = None):
        super().__init__(None)
        self.items_serializers = items_serializers
        self.variadic_item_index = variadic_item_index

    def _serializer_for(self, index: int, length: int) -> Serializer:
        serializers = self.items_serializers
        variadic = self.variadic_item_index
        if variadic is None:
            return serializers[index] if index < len(serializers) else _ANY
        if index < variadic:
            return serializers[index]
        suffix = serializers[variadic + 1:]
        suffix_start = length - len(suffix)
        if index >= suffix_start:
            return suffix[index - suffix_start]
        return serializers[variadic]

    def _output(self, items: List[Any]) -> Any:
        return tuple(items)

    def __str__(self) -> str:
        members = ", ".join(str(serializer) for serializer in self.items_serializers)
        return f"TupleSerializer({members})"
