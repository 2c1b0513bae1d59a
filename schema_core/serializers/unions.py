"""
Union and tagged-union serializers.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from .base import Serializer, SerializationState
from ..errors import SerializationError
from ..inputs import MISSING


class UnionSerializer(Serializer):
    """
    Picks the member serializer whose shape check passes.

    Members accepting the value exactly are tried first, then members
    accepting it loosely, each in declaration order.
    """

    kind = "union"

    def __init__(self, choices: List[Serializer]):
        self.choices = choices

    def accepts(self, value: Any, exact: bool) -> bool:
        return any(choice.accepts(value, exact) for choice in self.choices)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        for exact in (True, False):
            for choice in self.choices:
                if not choice.accepts(value, exact):
                    continue
                try:
                    return choice.serialize(value, state, include, exclude)
                except SerializationError:
                    continue
        raise state.mismatch(self.expected, value)

    @property
    def expected(self) -> str:
        return "Union[" + ", ".join(choice.kind for choice in self.choices) + "]"

    def __str__(self) -> str:
        return f"UnionSerializer({', '.join(str(choice) for choice in self.choices)})"


class TaggedUnionSerializer(UnionSerializer):
    """
    Chooses the member by discriminator, falling back to shape checks.

    The tag is read from the serialized value the same way validation reads
    it from the input: a field name, a path of keys and attributes, or a
    callable.
    """

    kind = "tagged-union"

    def __init__(self,
                 choices: Dict[Any, Serializer],
                 discriminator: Union[str, List[Any], Callable[[Any], Any]]):
        super().__init__(list(choices.values()))
        self.tagged = choices
        self.discriminator = discriminator

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        serializer = self._choice_for(self._find_tag(value))
        if serializer is not None:
            try:
                return serializer.serialize(value, state, include, exclude)
            except SerializationError:
                pass
        return super().serialize(value, state, include, exclude)

    def _find_tag(self, value: Any) -> Any:
        if callable(self.discriminator):
            try:
                return self.discriminator(value)
            except Exception:
                # the shape checks decide when no tag can be computed
                return MISSING
        path = [self.discriminator] if isinstance(self.discriminator, str) else self.discriminator
        current = value
        for segment in path:
            current = _step(current, segment)
            if current is MISSING:
                break
        return current

    def _choice_for(self, tag: Any) -> Optional[Serializer]:
        if tag is MISSING or tag is None:
            return None
        try:
            found = self.tagged.get(tag)
        except TypeError:
            return None
        if found is None and hasattr(tag, "value"):
            found = self.tagged.get(tag.value)
        return found


def _step(value: Any, segment: Any) -> Any:
    if isinstance(value, dict):
        return value.get(segment, MISSING)
    if isinstance(value, (list, tuple)) and isinstance(segment, int):
        return value[segment] if -len(value) <= segment < len(value) else MISSING
    if isinstance(segment, str):
        return getattr(value, segment, MISSING)
    return MISSING
