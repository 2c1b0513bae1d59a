"""
Base classes for validator nodes and the per-call validation context.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set, Tuple

from ..config import CoreConfig, DEFAULT_RECURSION_LIMIT
from ..errors import (
    ErrorAccumulator,
    ErrorCode,
    RecursionLimitError,
    ValidationError,
    ValidationFailure,
)
from ..inputs import MISSING, Exactness, InputAdapter, InputError, InputKind
from ..utils import format_location


# input kinds that can take part in a reference cycle
_CONTAINER_KINDS = frozenset({
    InputKind.SEQUENCE, InputKind.SET, InputKind.MAPPING, InputKind.OBJECT,
})


class ValidationInfo:
    """
    Read-only view of the validation state handed to user functions.

    Attributes:
        context: The opaque caller-supplied context
        config: The schema's CoreConfig
        mode: Name of the active input representation ("python" or "json")
        data: Fields validated so far by the enclosing fields node
        field_name: Name of the field being validated, if any
    """

    __slots__ = ("context", "config", "mode", "data", "field_name")

    def __init__(self, context: Any, config: CoreConfig, mode: str,
                 data: Optional[Dict[str, Any]], field_name: Optional[str]):
        self.context = context
        self.config = config
        self.mode = mode
        self.data = data
        self.field_name = field_name

    def __repr__(self) -> str:
        return (f"ValidationInfo(mode={self.mode!r}, field_name={self.field_name!r}, "
                f"data={self.data!r}, context={self.context!r})")


class RecursionGuard:
    """
    Tracks entered recursive definitions for one call.

    Two conditions abort the call: the same container input entering the
    same definition while it is still active (a value cycle), and the
    nesting depth of one definition exceeding ``limit``.
    """

    def __init__(self, limit: int = DEFAULT_RECURSION_LIMIT):
        self.limit = limit
        self.depths: Dict[str, int] = {}
        self.active: Set[Tuple[int, str]] = set()

    def is_cycle(self, definition: str, identity: Optional[int]) -> bool:
        """
        Whether entering ``definition`` would repeat an active input.

        Args:
            definition: Name of the definition being entered
            identity: ``id()`` of a container input, or None for scalars
        """
        return identity is not None and (identity, definition) in self.active

    def at_limit(self, definition: str) -> bool:
        return self.depths.get(definition, 0) >= self.limit

    def enter(self, definition: str, identity: Optional[int]) -> None:
        self.depths[definition] = self.depths.get(definition, 0) + 1
        if identity is not None:
            self.active.add((identity, definition))

    def exit(self, definition: str, identity: Optional[int]) -> None:
        self.depths[definition] -= 1
        if identity is not None:
            self.active.discard((identity, definition))


class ValidationContext:
    """
    Per-call mutable state of a validation run.

    A context is created fresh for each top-level call and never shared
    between calls.
    """

    def __init__(self,
                 input_adapter: InputAdapter,
                 config: Optional[CoreConfig] = None,
                 strict: Optional[bool] = None,
                 user_context: Any = None,
                 fail_fast: bool = False):
        """
        Initialize a new validation context.

        Args:
            input_adapter: Reader for the input representation
            config: Config of the compiled schema
            strict: Call-level mode; overrides node settings when not None
            user_context: Opaque value passed through to user functions
            fail_fast: Stop every container at its first error
        """
        self.config = config or CoreConfig()
        self.input = input_adapter
        self.strict = strict
        self.user_context = user_context
        self.fail_fast = fail_fast or self.config.fail_fast
        self.path_parts: List[Any] = []
        self.guard = RecursionGuard(self.config.recursion_limit)
        self.exactness = Exactness.EXACT
        self.fields_set_count: Optional[int] = None
        self.data: Optional[Dict[str, Any]] = None
        self.field_name: Optional[str] = None

    @property
    def loc(self) -> Tuple[Any, ...]:
        return tuple(self.path_parts)

    @property
    def path(self) -> str:
        return format_location(self.path_parts)

    def strict_or(self, node_strict: bool) -> bool:
        return node_strict if self.strict is None else self.strict

    def floor_exactness(self, exactness: Exactness) -> None:
        if exactness < self.exactness:
            self.exactness = exactness

    def fail(self, code: ErrorCode, value: Any, **payload: Any) -> ValidationFailure:
        """
        Build a failure holding one error located at the current path.

        The caller raises the returned failure.
        """
        error = ValidationError.create(code, self.loc, value, payload or None)
        return ValidationFailure([error])

    def input_failure(self, exc: InputError, value: Any) -> ValidationFailure:
        return self.fail(exc.code, value, **exc.payload)

    def accumulator(self, node_fail_fast: bool = False) -> ErrorAccumulator:
        return ErrorAccumulator(self.fail_fast or node_fail_fast)

    def recursion_error(self, definition: str, value: Any,
                        limit: Optional[int] = None) -> RecursionLimitError:
        return RecursionLimitError(definition, self.loc, value, limit)

    def info(self, field_name: Optional[str] = None) -> ValidationInfo:
        return ValidationInfo(
            context=self.user_context,
            config=self.config,
            mode=self.input.name,
            data=self.data,
            field_name=field_name if field_name is not None else self.field_name,
        )

    def identity_of(self, value: Any) -> Optional[int]:
        """``id()`` of container inputs, None for scalar inputs."""
        if self.input.kind(value) in _CONTAINER_KINDS:
            return id(value)
        return None

    def with_path(self, *parts: Any) -> "PathContext":
        """
        Context manager for adding path parts temporarily.

        Args:
            parts: Path segments to add, outermost first

        Returns:
            Context manager
        """
        return PathContext(self, parts)

    def with_input(self, adapter: InputAdapter) -> "InputContext":
        """Context manager switching the active input adapter."""
        return InputContext(self, adapter)

    def with_fields(self, data: Optional[Dict[str, Any]]) -> "FieldsContext":
        """Context manager exposing field data to user functions."""
        return FieldsContext(self, data)

    def __str__(self) -> str:
        return f"ValidationContext(path={self.path!r}, input={self.input.name})"


class PathContext:
    """Context manager for temporarily adding path parts."""

    __slots__ = ("context", "parts")

    def __init__(self, context: ValidationContext, parts: Tuple[Any, ...]):
        self.context = context
        self.parts = parts

    def __enter__(self):
        self.context.path_parts.extend(self.parts)
        return self.context

    def __exit__(self, exc_type, exc_val, exc_tb):
        del self.context.path_parts[len(self.context.path_parts) - len(self.parts):]


class InputContext:
    """Context manager for temporarily switching the input adapter."""

    __slots__ = ("context", "adapter", "previous")

    def __init__(self, context: ValidationContext, adapter: InputAdapter):
        self.context = context
        self.adapter = adapter
        self.previous = None

    def __enter__(self):
        self.previous = self.context.input
        self.context.input = self.adapter
        return self.context

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.context.input = self.previous


class FieldsContext:
    """Context manager for the field data of an enclosing fields node."""

    __slots__ = ("context", "data", "previous")

    def __init__(self, context: ValidationContext, data: Optional[Dict[str, Any]]):
        self.context = context
        self.data = data
        self.previous = None

    def __enter__(self):
        self.previous = (self.context.data, self.context.field_name)
        self.context.data = self.data
        return self.context

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.context.data, self.context.field_name = self.previous


class Validator(ABC):
    """
    Base class for all validator nodes.

    Nodes are immutable after compilation and safe to share between
    concurrent calls; all per-call state lives in the context.
    """

    kind: str = "abstract"

    @abstractmethod
    def validate(self, value: Any, context: ValidationContext) -> Any:
        """
        Validate a value.

        Args:
            value: Input value in the context's representation
            context: Validation context

        Returns:
            The validated (possibly coerced) value

        Raises:
            ValidationFailure: With the located error entries
        """
        pass

    def default_value(self, context: ValidationContext) -> Any:
        """The value used when the input is absent, or ``MISSING``."""
        return MISSING

    def __str__(self) -> str:
        return f"{self.__class__.__name__}"

    def __repr__(self) -> str:
        return self.__str__()

