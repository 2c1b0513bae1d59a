"""
Public API for schema_core.
"""

import logging
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from . import codec
from .cache import SchemaCache
from .config import CoreConfig
from .errors import (
    ErrorCode,
    OmitValue,
    RecursionLimitError,
    SerializationError,
    UseDefault,
    ValidationError,
    ValidationFailed,
    ValidationFailure,
)
from .inputs import JSON_INPUT, PYTHON_INPUT, InputAdapter
from .schema_compiler import CompiledSchema, SchemaCompiler
from .serializers import SerializationState, normalize_filter
from .validators import ValidationContext

logger = logging.getLogger("schema_core")

_MODES = {None: None, "lax": False, "strict": True}
_INPUTS = {"python": PYTHON_INPUT, "json": JSON_INPUT}

# interpreter frames one level of a recursive definition may take
_FRAMES_PER_LEVEL = 20
_MAX_STACK = 30000


class StackRoom:
    """
    Raises the interpreter recursion limit while a call walks recursive definitions.

    The limit is process-wide, so concurrent calls share one raised value
    and the last call to leave restores the original.
    """

    _lock = threading.Lock()
    _users = 0
    _saved = 0

    def __init__(self, frames: int):
        self.frames = frames

    @classmethod
    def for_definitions(cls, definitions: int, recursion_limit: int) -> "StackRoom":
        return cls(definitions * recursion_limit * _FRAMES_PER_LEVEL)

    def __enter__(self):
        if not self.frames:
            return self
        owner = type(self)
        with owner._lock:
            if owner._users == 0:
                owner._saved = sys.getrecursionlimit()
            owner._users += 1
            wanted = min(owner._saved + self.frames, _MAX_STACK)
            if wanted > sys.getrecursionlimit():
                sys.setrecursionlimit(wanted)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self.frames:
            return
        owner = type(self)
        with owner._lock:
            owner._users -= 1
            if owner._users == 0:
                sys.setrecursionlimit(owner._saved)


@dataclass
class ValidationResult:
    """
    Result of a validation call.

    Attributes:
        valid: Whether validation succeeded
        value: The validated value (None when invalid)
        errors: Error entries in discovery order (empty when valid)
        title: Name used when rendering the errors
        hide_input: Leave input values out of rendered errors
    """
    valid: bool = True
    value: Any = None
    errors: List[ValidationError] = field(default_factory=list)
    title: str = "Validation"
    hide_input: bool = False

    def __bool__(self) -> bool:
        return self.valid

    def error_count(self) -> int:
        return len(self.errors)

    def unwrap(self) -> Any:
        """
        The validated value.

        Raises:
            ValidationFailed: If validation failed
        """
        if not self.valid:
            raise ValidationFailed(self.errors, title=self.title, hide_input=self.hide_input)
        return self.value


@dataclass
class SerializationOptions:
    """
    Options of a serialization call.

    Attributes:
        mode: "python" keeps host objects; "json" produces JSON bytes
        exclude_defaults: Omit fields equal to their static default
        exclude_none: Omit fields holding None
        exclude_unset: Omit model fields that were absent from the input
        include: Paths or nested dict of what to keep
        exclude: Paths or nested dict of what to drop; wins over include
        round_trip: Output must validate back to the same value
        by_alias: Use serialization aliases; None follows the config
        context: Opaque value passed to custom serialize functions
    """
    mode: str = "python"
    exclude_defaults: bool = False
    exclude_none: bool = False
    exclude_unset: bool = False
    include: Any = None
    exclude: Any = None
    round_trip: bool = False
    by_alias: Optional[bool] = None
    context: Any = None


def compile_schema(schema: Dict[str, Any],
                   config: Union[CoreConfig, Dict[str, Any], None] = None,
                   cache: Optional[SchemaCache] = None) -> CompiledSchema:
    """
    Compile a schema description, consulting a cache when given.

    Raises:
        SchemaError: If the schema or config is invalid
    """
    config = CoreConfig.from_dict(config)
    if cache is not None:
        found = cache.get(schema, config)
        if found is not None:
            return found

    compiled = SchemaCompiler().compile(schema, config)
    if cache is not None:
        cache.put(schema, compiled, config)
    return compiled


def validate(compiled: CompiledSchema,
             input_value: Any,
             mode: Optional[str] = None,
             context: Any = None,
             *,
             input_type: str = "python",
             fail_fast: bool = False) -> ValidationResult:
    """
    Validate a value against a compiled schema.

    Args:
        compiled: The compiled schema
        input_value: Native object, or a decoded JSON tree for ``input_type="json"``
        mode: "lax" or "strict" force the mode on every node; None lets nodes decide
        context: Opaque value passed to user functions
        input_type: "python" or "json"
        fail_fast: Stop every container at its first error

    Returns:
        Validation result; never raises for invalid input
    """
    if mode not in _MODES:
        raise ValueError(f"Invalid validation mode {mode!r}, expected 'lax' or 'strict'")
    if input_type not in _INPUTS:
        raise ValueError(f"Invalid input type {input_type!r}, expected 'python' or 'json'")
    return _run(compiled, input_value, _INPUTS[input_type], _MODES[mode], context, fail_fast)


def _run(compiled: CompiledSchema, value: Any, adapter: InputAdapter, strict: Optional[bool],
         user_context: Any, fail_fast: bool) -> ValidationResult:
    context = ValidationContext(adapter, compiled.config, strict, user_context, fail_fast)
    hide_input = compiled.config.hide_input_in_errors
    room = StackRoom.for_definitions(len(compiled.validators), compiled.config.recursion_limit)
    try:
        with room:
            result = compiled.validator.validate(value, context)
    except ValidationFailure as failure:
        return ValidationResult(False, None, failure.errors, compiled.title, hide_input)
    except RecursionLimitError as exc:
        logger.debug("Validation aborted: %s", exc)
        return ValidationResult(False, None, [exc.to_error()], compiled.title, hide_input)
    except RecursionError:
        logger.debug("Validation aborted: interpreter recursion limit reached")
        error = ValidationError.create(ErrorCode.RECURSION_LIMIT, (), value,
                                       {"definition": compiled.title, "limit": sys.getrecursionlimit()})
        return ValidationResult(False, None, [error], compiled.title, hide_input)
    except UseDefault:
        # no enclosing default node caught it
        error = ValidationError.create(ErrorCode.DEFAULT_UNAVAILABLE, (), value)
        return ValidationResult(False, None, [error], compiled.title, hide_input)
    except OmitValue:
        error = ValidationError.create(ErrorCode.OMIT_NOT_ALLOWED, (), value)
        return ValidationResult(False, None, [error], compiled.title, hide_input)
    return ValidationResult(True, result, [], compiled.title, hide_input)


def serialize(compiled: CompiledSchema, value: Any,
              options: Optional[SerializationOptions] = None) -> Any:
    """
    Serialize a validated value.

    Returns:
        Python objects in "python" mode, UTF-8 JSON bytes in "json" mode

    Raises:
        SerializationError: On shape mismatches, cycles and failing functions
    """
    options = options or SerializationOptions()
    if options.mode not in ("python", "json"):
        raise ValueError(f"Invalid serialization mode {options.mode!r}, expected 'python' or 'json'")
    tree = _serialize(compiled, value, options)
    if options.mode == "json":
        return codec.encode(tree, allow_nan=compiled.config.ser_json_inf_nan == "constants")
    return tree


def _serialize(compiled: CompiledSchema, value: Any, options: SerializationOptions) -> Any:
    state = SerializationState(
        mode=options.mode,
        config=compiled.config,
        by_alias=options.by_alias,
        exclude_defaults=options.exclude_defaults,
        exclude_none=options.exclude_none,
        exclude_unset=options.exclude_unset,
        round_trip=options.round_trip,
        user_context=options.context,
    )
    include = normalize_filter(options.include)
    exclude = normalize_filter(options.exclude)
    room = StackRoom.for_definitions(len(compiled.serializers), compiled.config.recursion_limit)
    try:
        with room:
            return compiled.serializer.serialize(value, state, include, exclude)
    except RecursionError:
        error = ValidationError.create(ErrorCode.SERIALIZATION_CIRCULAR_REFERENCE, (), None)
        raise SerializationError([error])


class SchemaValidator:
    """
    Validator facade over a compiled schema.

    Example:
        validator = SchemaValidator({"type": "int", "gt": 0})
        validator.validate_python("3")  # 3
    """

    def __init__(self, schema: Dict[str, Any],
                 config: Union[CoreConfig, Dict[str, Any], None] = None,
                 cache: Optional[SchemaCache] = None):
        self.compiled = compile_schema(schema, config, cache)

    @property
    def config(self) -> CoreConfig:
        return self.compiled.config

    def validate_python(self, value: Any, *, strict: Optional[bool] = None,
                        context: Any = None, fail_fast: bool = False) -> Any:
        """
        Validate a native Python value.

        Raises:
            ValidationFailed: With every error found
        """
        return _run(self.compiled, value, PYTHON_INPUT, strict, context, fail_fast).unwrap()

    def validate_json(self, data: Union[str, bytes, bytearray], *, strict: Optional[bool] = None,
                      context: Any = None, fail_fast: bool = False) -> Any:
        """
        Decode JSON text and validate the resulting tree.

        Raises:
            ValidationFailed: If the text is not JSON or the data is invalid
        """
        tree = codec.decode(data)
        return _run(self.compiled, tree, JSON_INPUT, strict, context, fail_fast).unwrap()

    def isinstance_python(self, value: Any, *, strict: Optional[bool] = None,
                          context: Any = None) -> bool:
        return _run(self.compiled, value, PYTHON_INPUT, strict, context, True).valid

    def get_default_value(self, *, strict: Optional[bool] = None, context: Any = None) -> Any:
        """
        The default of the root node.

        Returns:
            The default value, or ``MISSING`` when the root has no default

        Raises:
            ValidationFailed: If validating the default fails
        """
        validation_context = ValidationContext(PYTHON_INPUT, self.compiled.config, strict, context)
        try:
            return self.compiled.validator.default_value(validation_context)
        except ValidationFailure as failure:
            raise ValidationFailed(failure.errors, title=self.compiled.title,
                                   hide_input=self.compiled.config.hide_input_in_errors)

    def __repr__(self) -> str:
        return f"SchemaValidator({self.compiled.validator})"


class SchemaSerializer:
    """Serializer facade over a compiled schema."""

    def __init__(self, schema: Dict[str, Any],
                 config: Union[CoreConfig, Dict[str, Any], None] = None,
                 cache: Optional[SchemaCache] = None):
        self.compiled = compile_schema(schema, config, cache)

    def to_python(self, value: Any, *, mode: str = "python", include: Any = None,
                  exclude: Any = None, by_alias: Optional[bool] = None,
                  exclude_unset: bool = False, exclude_defaults: bool = False,
                  exclude_none: bool = False, round_trip: bool = False,
                  context: Any = None) -> Any:
        """
        Serialize to Python objects.

        ``mode="json"`` restricts the output to JSON-compatible primitives
        without encoding it.
        """
        options = SerializationOptions(
            mode=mode, include=include, exclude=exclude, by_alias=by_alias,
            exclude_unset=exclude_unset, exclude_defaults=exclude_defaults,
            exclude_none=exclude_none, round_trip=round_trip, context=context,
        )
        return _serialize(self.compiled, value, options)

    def to_json(self, value: Any, *, indent: Optional[int] = None, include: Any = None,
                exclude: Any = None, by_alias: Optional[bool] = None,
                exclude_unset: bool = False, exclude_defaults: bool = False,
                exclude_none: bool = False, round_trip: bool = False,
                context: Any = None) -> bytes:
        """Serialize to UTF-8 JSON bytes."""
        tree = self.to_python(
            value, mode="json", include=include, exclude=exclude, by_alias=by_alias,
            exclude_unset=exclude_unset, exclude_defaults=exclude_defaults,
            exclude_none=exclude_none, round_trip=round_trip, context=context,
        )
        allow_nan = self.compiled.config.ser_json_inf_nan == "constants"
        return codec.encode(tree, indent=indent, allow_nan=allow_nan)

    def __repr__(self) -> str:
        return f"SchemaSerializer({self.compiled.serializer})"
