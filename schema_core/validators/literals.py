"""
Literal and enum validators.
"""

from enum import Enum
from typing import Any, Callable, List, Optional

from .base import Validator, ValidationContext
from ..errors import ErrorCode
from ..inputs import MISSING, InputError, LiteralLookup, literal_key
from ..utils import display_choices


class LiteralValidator(Validator):
    """
    Accepts one of a fixed set of values.

    Values are compared by type family and value, so ``True``, ``1`` and
    ``1.0`` are distinct.
    """

    kind = "literal"

    def __init__(self, expected: List[Any]):
        self.lookup = LiteralLookup(expected)
        self.expected_repr = display_choices(expected)

    @property
    def expected(self) -> List[Any]:
        return self.lookup.expected

    def validate(self, value: Any, context: ValidationContext) -> Any:
        found = context.input.literal_match(value, self.lookup)
        if found is MISSING:
            raise context.fail(ErrorCode.LITERAL_ERROR, value, expected=self.expected_repr)
        return found

    def __str__(self) -> str:
        return f"LiteralValidator({self.expected_repr})"


_SUB_TYPE_READERS = {
    "int": "validate_int",
    "float": "validate_float",
    "str": "validate_str",
}


class EnumValidator(Validator):
    """
    Accepts members of an ``Enum`` class.

    Members of the allowed set are always accepted. Lax Python input and
    JSON input are looked up by member value; ``sub_type`` allows coercing
    the input to the value type first. The ``missing`` hook may supply an
    allowed member for unknown values.
    """

    kind = "enum"

    def __init__(self,
                 cls: type,
                 members: List[Enum],
                 sub_type: Optional[str] = None,
                 missing: Optional[Callable[[Any], Any]] = None,
                 strict: bool = False):
        self.cls = cls
        self.members = members
        self.allowed = frozenset(members)
        self.sub_type = sub_type
        self.missing = missing
        self.strict = strict
        self.by_value = {}
        for member in members:
            self.by_value.setdefault(literal_key(member.value), member)
        self.expected_repr = display_choices(members)

    def validate(self, value: Any, context: ValidationContext) -> Any:
        strict = context.strict_or(self.strict)
        try:
            match = context.input.enum_lookup_value(value, self.cls, strict)
        except InputError:
            raise context.fail(ErrorCode.ENUM, value, expected=self.expected_repr)

        candidate = match.value
        if isinstance(candidate, self.cls):
            if candidate not in self.allowed:
                raise context.fail(ErrorCode.ENUM, value, expected=self.expected_repr)
            return match.unpack(context)

        member = self.by_value.get(literal_key(candidate), MISSING)
        if member is MISSING and self.sub_type in _SUB_TYPE_READERS and not strict:
            member = self._lookup_coerced(candidate, context)
        if member is MISSING and self.missing is not None:
            supplied = self.missing(candidate)
            if isinstance(supplied, self.cls) and supplied in self.allowed:
                member = supplied
        if member is MISSING:
            raise context.fail(ErrorCode.ENUM, value, expected=self.expected_repr)

        match.unpack(context)
        return member

    def _lookup_coerced(self, candidate: Any, context: ValidationContext) -> Any:
        read = getattr(context.input, _SUB_TYPE_READERS[self.sub_type])
        try:
            coerced = read(candidate, False).value
        except InputError:
            return MISSING
        return self.by_value.get(literal_key(coerced), MISSING)

    def __str__(self) -> str:
        return f"EnumValidator({self.cls.__name__})"
