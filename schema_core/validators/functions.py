"""
Validators wrapping user-supplied functions.

User functions receive ``(value, info)``; wrap functions receive
``(value, handler, info)``. Exceptions they raise are normalized into
validation errors at the node's location.
"""

from typing import Any, Callable, Optional, Tuple

from .base import Validator, ValidationContext
from ..errors import (
    CustomError,
    ErrorCode,
    KnownError,
    OmitValue,
    RecursionLimitError,
    UseDefault,
    ValidationError,
    ValidationFailed,
    ValidationFailure,
)
from ..inputs import PYTHON_INPUT


# signals that must cross user code untouched
_PASSTHROUGH = (ValidationFailure, UseDefault, OmitValue, RecursionLimitError, RecursionError)


def call_user_function(function: Callable, args: Tuple[Any, ...], value: Any,
                       context: ValidationContext) -> Any:
    """
    Call a user function, normalizing what it raises.

    Args:
        function: The user function
        args: Positional arguments
        value: Input value reported on errors
        context: Validation context

    Returns:
        The function's return value

    Raises:
        ValidationFailure: For every exception not in the pass-through set
    """
    try:
        return function(*args)
    except _PASSTHROUGH:
        raise
    except CustomError as exc:
        payload = dict(exc.context or {})
        payload.update(error_type=exc.error_type, message=exc.message())
        raise context.fail(ErrorCode.CUSTOM_ERROR, value, **payload)
    except KnownError as exc:
        raise context.fail(exc.code, value, **(exc.context or {}))
    except ValidationFailed as exc:
        # a nested top-level validation; re-root its entries here
        errors = [ValidationError.create(error.code, context.loc + error.loc,
                                         error.input, error.context)
                  for error in exc.errors]
        raise ValidationFailure(errors)
    except ValueError as exc:
        raise context.fail(ErrorCode.VALUE_ERROR, value, error=str(exc))
    except AssertionError as exc:
        raise context.fail(ErrorCode.ASSERTION_ERROR, value, error=str(exc))
    except Exception as exc:
        raise context.fail(ErrorCode.FUNCTION_ERROR, value,
                           error_type=type(exc).__name__, error=str(exc))


def validate_returned(validator: Validator, returned: Any, original: Any,
                      context: ValidationContext) -> Any:
    """
    Validate a value handed back by user code.

    A value that is not the original input came out of user code, so it is
    read as a native object whatever the call's input representation.
    """
    if returned is original:
        return validator.validate(returned, context)
    with context.with_input(PYTHON_INPUT):
        return validator.validate(returned, context)


class FunctionValidator(Validator):
    """Base for function nodes."""

    def __init__(self, function: Callable, field_name: Optional[str] = None):
        self.function = function
        self.field_name = field_name

    @property
    def function_name(self) -> str:
        return getattr(self.function, "__name__", repr(self.function))

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.function_name})"


class FunctionBeforeValidator(FunctionValidator):
    """Runs the function on the raw input, then validates its result."""

    kind = "function-before"

    def __init__(self, function: Callable, validator: Validator, field_name: Optional[str] = None):
        super().__init__(function, field_name)
        self.validator = validator

    def validate(self, value: Any, context: ValidationContext) -> Any:
        returned = call_user_function(self.function, (value, context.info(self.field_name)),
                                      value, context)
        return validate_returned(self.validator, returned, value, context)

    def default_value(self, context: ValidationContext) -> Any:
        return self.validator.default_value(context)


class FunctionAfterValidator(FunctionValidator):
    """Validates the input, then runs the function on the validated value."""

    kind = "function-after"

    def __init__(self, function: Callable, validator: Validator, field_name: Optional[str] = None):
        super().__init__(function, field_name)
        self.validator = validator

    def validate(self, value: Any, context: ValidationContext) -> Any:
        result = self.validator.validate(value, context)
        return call_user_function(self.function, (result, context.info(self.field_name)),
                                  result, context)

    def default_value(self, context: ValidationContext) -> Any:
        return self.validator.default_value(context)


class FunctionPlainValidator(FunctionValidator):
    """The function alone decides the result."""

    kind = "function-plain"

    def validate(self, value: Any, context: ValidationContext) -> Any:
        return call_user_function(self.function, (value, context.info(self.field_name)),
                                  value, context)


class ValidatorHandler:
    """
    The ``handler`` passed to wrap functions.

    Calling it validates a value with the wrapped node at the current
    location, extended by ``outer_location`` when given.
    """

    __slots__ = ("validator", "context", "original")

    def __init__(self, validator: Validator, context: ValidationContext, original: Any):
        self.validator = validator
        self.context = context
        self.original = original

    def __call__(self, value: Any, outer_location: Any = None) -> Any:
        if outer_location is None:
            return validate_returned(self.validator, value, self.original, self.context)
        with self.context.with_path(outer_location):
            return validate_returned(self.validator, value, self.original, self.context)

    def __repr__(self) -> str:
        return f"ValidatorHandler({self.validator})"


class FunctionWrapValidator(FunctionValidator):
    """The function receives a handler and decides whether and how to call it."""

    kind = "function-wrap"

    def __init__(self, function: Callable, validator: Validator, field_name: Optional[str] = None):
        super().__init__(function, field_name)
        self.validator = validator

    def validate(self, value: Any, context: ValidationContext) -> Any:
        handler = ValidatorHandler(self.validator, context, value)
        return call_user_function(self.function, (value, handler, context.info(self.field_name)),
                                  value, context)

    def default_value(self, context: ValidationContext) -> Any:
        return self.validator.default_value(context)
