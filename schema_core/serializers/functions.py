"""
Custom serialization: plain and wrap functions and to-string.

Each custom serializer is gated by ``when_used``; when it does not apply,
the node's regular serializer runs instead.
"""

from typing import Any, Callable, Optional, Tuple

from .base import Serializer, SerializationState, infer_serialize
from ..errors import ErrorCode, SerializationError


WHEN_USED = ("always", "unless-none", "json", "json-unless-none")


def applies(when_used: str, value: Any, state: SerializationState) -> bool:
    """Whether a custom serializer gated by ``when_used`` handles this value."""
    if when_used == "unless-none":
        return value is not None
    if when_used == "json":
        return state.json
    if when_used == "json-unless-none":
        return state.json and value is not None
    return True


def call_serialize_function(function: Callable, args: Tuple[Any, ...], value: Any,
                            state: SerializationState) -> Any:
    """
    Call a user serialize function.

    Raises:
        SerializationError: ``serialization_function_error`` for foreign exceptions
    """
    try:
        return function(*args)
    except SerializationError:
        raise
    except Exception as exc:
        raise state.fail(ErrorCode.SERIALIZATION_FUNCTION_ERROR, value,
                         function=getattr(function, "__name__", repr(function)),
                         error_type=type(exc).__name__, error=str(exc))


class CustomSerializer(Serializer):
    """Base of the custom serializers; ``fallback`` is the node's regular serializer."""

    def __init__(self, fallback: Serializer, when_used: str = "always"):
        self.fallback = fallback
        self.when_used = when_used

    @property
    def kind(self) -> str:
        return self.fallback.kind

    def accepts(self, value: Any, exact: bool) -> bool:
        return self.fallback.accepts(value, exact)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        if not applies(self.when_used, value, state):
            return self.fallback.serialize(value, state, include, exclude)
        return self.custom(value, state, include, exclude)

    def custom(self, value: Any, state: SerializationState, include: Any, exclude: Any) -> Any:
        raise NotImplementedError


class FunctionPlainSerializer(CustomSerializer):
    """``function(value, info)`` produces the output; ``return_serializer`` renders it."""

    def __init__(self, function: Callable, fallback: Serializer,
                 return_serializer: Optional[Serializer] = None, when_used: str = "always"):
        super().__init__(fallback, when_used)
        self.function = function
        self.return_serializer = return_serializer

    def custom(self, value: Any, state: SerializationState, include: Any, exclude: Any) -> Any:
        returned = call_serialize_function(
            self.function, (value, state.info(include, exclude)), value, state)
        if self.return_serializer is not None:
            return self.return_serializer.serialize(returned, state)
        return infer_serialize(returned, state)

    def __str__(self) -> str:
        return f"FunctionPlainSerializer({getattr(self.function, '__name__', self.function)})"


class SerializerHandler:
    """
    The ``handler`` passed to wrap serialize functions.

    Calling it runs the node's regular serializer on a value, optionally
    under an extra output path segment.
    """

    __slots__ = ("serializer", "state", "include", "exclude")

    def __init__(self, serializer: Serializer, state: SerializationState,
                 include: Any, exclude: Any):
        self.serializer = serializer
        self.state = state
        self.include = include
        self.exclude = exclude

    def __call__(self, value: Any, key: Any = None) -> Any:
        if key is None:
            return self.serializer.serialize(value, self.state, self.include, self.exclude)
        with self.state.with_path(key):
            return self.serializer.serialize(value, self.state, self.include, self.exclude)


class FunctionWrapSerializer(CustomSerializer):
    """``function(value, handler, info)`` decides whether and how to call the handler."""

    def __init__(self, function: Callable, fallback: Serializer,
                 return_serializer: Optional[Serializer] = None, when_used: str = "always"):
        super().__init__(fallback, when_used)
        self.function = function
        self.return_serializer = return_serializer

    def custom(self, value: Any, state: SerializationState, include: Any, exclude: Any) -> Any:
        handler = SerializerHandler(self.fallback, state, include, exclude)
        returned = call_serialize_function(
            self.function, (value, handler, state.info(include, exclude)), value, state)
        if self.return_serializer is not None:
            return self.return_serializer.serialize(returned, state)
        return infer_serialize(returned, state)

    def __str__(self) -> str:
        return f"FunctionWrapSerializer({getattr(self.function, '__name__', self.function)})"


class ToStringSerializer(CustomSerializer):
    """Renders the value with ``str()``."""

    def custom(self, value: Any, state: SerializationState, include: Any, exclude: Any) -> Any:
        return call_serialize_function(str, (value,), value, state)
