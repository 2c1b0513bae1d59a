"""
Input abstraction shared by every validator node.

An ``InputAdapter`` reads one concrete value representation. Nodes call
``context.input.validate_<kind>(value, strict, ...)`` and never inspect the
representation themselves.
"""

from abc import ABC, abstractmethod
from enum import Enum, IntEnum
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from ..errors import ErrorCode


T = TypeVar("T")

MISSING = object()


class Exactness(IntEnum):
    """How closely an input matched the requested kind; higher is better."""
    LAX = 0
    STRICT = 1
    EXACT = 2


class InputKind(Enum):
    """Coarse kind of an input value."""
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    BYTES = "bytes"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    TIMEDELTA = "timedelta"
    SEQUENCE = "sequence"
    SET = "set"
    MAPPING = "mapping"
    OBJECT = "object"


class ValidationMatch(Generic[T]):
    """A value read from the input together with its exactness."""

    __slots__ = ("value", "exactness")

    def __init__(self, value: T, exactness: Exactness):
        self.value = value
        self.exactness = exactness

    @classmethod
    def exact(cls, value: T) -> "ValidationMatch[T]":
        return cls(value, Exactness.EXACT)

    @classmethod
    def strict(cls, value: T) -> "ValidationMatch[T]":
        return cls(value, Exactness.STRICT)

    @classmethod
    def lax(cls, value: T) -> "ValidationMatch[T]":
        return cls(value, Exactness.LAX)

    def unpack(self, context) -> T:
        """Return the value, lowering the context's exactness to this match's."""
        context.floor_exactness(self.exactness)
        return self.value

    def __repr__(self) -> str:
        return f"ValidationMatch({self.value!r}, {self.exactness.name})"


class InputError(Exception):
    """
    Raised by an adapter when a value cannot be read as the requested kind.

    The node that asked converts it into a located validation error.
    """

    def __init__(self, code: ErrorCode, **payload: Any):
        super().__init__(code, payload)
        self.code = code
        self.payload = payload


class FieldSource(ABC):
    """Read access to the named entries of a fields input."""

    @abstractmethod
    def get(self, key: Any) -> Any:
        """Value stored under ``key``, or ``MISSING``."""

    @abstractmethod
    def keys(self) -> Optional[Iterable[Any]]:
        """All keys in input order, or None when they cannot be enumerated."""

    @abstractmethod
    def descend(self, value: Any, segment: Any) -> Any:
        """Step into a nested value for alias paths, or ``MISSING``."""

    def __len__(self) -> int:
        keys = self.keys()
        return 0 if keys is None else len(list(keys))


class MappingSource(FieldSource):
    """Field source over a mapping (native dict or decoded JSON object)."""

    __slots__ = ("mapping",)

    def __init__(self, mapping):
        self.mapping = mapping

    def get(self, key: Any) -> Any:
        try:
            return self.mapping[key]
        except (KeyError, TypeError):
            return MISSING

    def keys(self) -> Iterable[Any]:
        return self.mapping.keys()

    def descend(self, value: Any, segment: Any) -> Any:
        return descend_item(value, segment)


class AttributesSource(FieldSource):
    """Field source reading attributes of an arbitrary object."""

    __slots__ = ("obj",)

    def __init__(self, obj):
        self.obj = obj

    def get(self, key: Any) -> Any:
        if not isinstance(key, str):
            return MISSING
        return getattr(self.obj, key, MISSING)

    def keys(self) -> None:
        return None

    def descend(self, value: Any, segment: Any) -> Any:
        found = descend_item(value, segment)
        if found is MISSING and isinstance(segment, str):
            return getattr(value, segment, MISSING)
        return found


def descend_item(value: Any, segment: Any) -> Any:
    """Item access used for alias paths: mapping keys and sequence indices."""
    if isinstance(value, (str, bytes, bytearray)):
        return MISSING
    if isinstance(segment, int) and isinstance(value, (list, tuple)):
        if -len(value) <= segment < len(value):
            return value[segment]
        return MISSING
    getter = getattr(value, "__getitem__", None)
    if getter is None or isinstance(value, (list, tuple)):
        return MISSING
    try:
        return getter(segment)
    except (KeyError, IndexError, TypeError):
        return MISSING


class InputAdapter(ABC):
    """
    Uniform read interface over one concrete input representation.

    Every ``validate_*`` method returns a ``ValidationMatch`` or raises
    ``InputError``; none of them has side effects.
    """

    name: str = "abstract"
    # whether host objects such as model instances can appear in the input
    carries_instances: bool = True

    @abstractmethod
    def kind(self, value: Any) -> InputKind:
        """Coarse kind of the value."""

    def is_none(self, value: Any) -> bool:
        return value is None

    @abstractmethod
    def validate_str(self, value: Any, strict: bool,
                     coerce_numbers_to_str: bool = False) -> ValidationMatch[str]:
        pass

    @abstractmethod
    def validate_bytes(self, value: Any, strict: bool,
                       bytes_mode: str = "utf8") -> ValidationMatch[bytes]:
        pass

    @abstractmethod
    def validate_bool(self, value: Any, strict: bool) -> ValidationMatch[bool]:
        pass

    @abstractmethod
    def validate_int(self, value: Any, strict: bool) -> ValidationMatch[int]:
        pass

    @abstractmethod
    def validate_float(self, value: Any, strict: bool) -> ValidationMatch[float]:
        pass

    @abstractmethod
    def validate_decimal(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        pass

    @abstractmethod
    def validate_date(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        pass

    @abstractmethod
    def validate_time(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        pass

    @abstractmethod
    def validate_datetime(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        pass

    @abstractmethod
    def validate_timedelta(self, value: Any, strict: bool) -> ValidationMatch[Any]:
        pass

    @abstractmethod
    def validate_list(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        """Elements of a list-like input, materialized in input order."""

    @abstractmethod
    def validate_tuple(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        pass

    @abstractmethod
    def validate_set(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        pass

    @abstractmethod
    def validate_frozenset(self, value: Any, strict: bool) -> ValidationMatch[List[Any]]:
        pass

    @abstractmethod
    def validate_dict(self, value: Any, strict: bool) -> ValidationMatch[Iterator[Tuple[Any, Any]]]:
        """Key/value pairs of a mapping input, in input order."""

    @abstractmethod
    def validate_fields(self, value: Any, strict: bool,
                        from_attributes: bool) -> ValidationMatch[FieldSource]:
        """A field source for typed-dict/model-fields nodes."""

    @abstractmethod
    def model_instance(self, value: Any, cls: type) -> Optional[ValidationMatch[Any]]:
        """The value itself when it already is an instance of ``cls``."""

    @abstractmethod
    def enum_lookup_value(self, value: Any, cls: type, strict: bool) -> ValidationMatch[Any]:
        """
        The value to look up among an enum's members.

        Returns the member itself when the input already is one.
        """

    @abstractmethod
    def literal_match(self, value: Any, lookup: "LiteralLookup") -> Any:
        """The expected literal value matching ``value``, or ``MISSING``."""

    def is_instance(self, value: Any, cls: type) -> bool:
        return isinstance(value, cls)

    def dict_key_location(self, key: Any) -> Any:
        """Location segment used for errors on a mapping entry."""
        if isinstance(key, (str, int)) and not isinstance(key, bool):
            return key
        return repr(key)


def literal_key(value: Any) -> Tuple[str, Any]:
    """
    Hashable identity of a literal value.

    The type family is part of the key so ``True``, ``1`` and ``1.0`` are
    distinct expected values.
    """
    if isinstance(value, Enum):
        family = type(value).__qualname__
    elif isinstance(value, bool):
        family = "bool"
    elif isinstance(value, int):
        family = "int"
    elif isinstance(value, float):
        family = "float"
    elif isinstance(value, str):
        family = "str"
    elif isinstance(value, bytes):
        family = "bytes"
    elif value is None:
        family = "none"
    else:
        family = type(value).__qualname__
    try:
        hash(value)
    except TypeError:
        return family, repr(value)
    return family, value


class LiteralLookup:
    """
    Expected values of a literal, indexed by ``literal_key``.

    Enum members are also indexed by their value so representations that
    cannot carry members (JSON) can still match them.
    """

    def __init__(self, expected: List[Any]):
        self.expected = list(expected)
        self.by_key: Dict[Tuple[str, Any], Any] = {}
        self.by_enum_value: Dict[Tuple[str, Any], Any] = {}
        for value in self.expected:
            self.by_key.setdefault(literal_key(value), value)
            if isinstance(value, Enum):
                self.by_enum_value.setdefault(literal_key(value.value), value)

    def find(self, value: Any) -> Any:
        return self.by_key.get(literal_key(value), MISSING)

    def find_enum_value(self, value: Any) -> Any:
        return self.by_enum_value.get(literal_key(value), MISSING)
