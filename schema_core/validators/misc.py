"""
Validators that do not read a specific kind: any, callable and is-instance.
"""

from typing import Any

from .base import Validator, ValidationContext
from ..errors import ErrorCode


class AnyValidator(Validator):
    """Accepts every value unchanged."""

    kind = "any"

    def validate(self, value: Any, context: ValidationContext) -> Any:
        return value


class CallableValidator(Validator):
    kind = "callable"

    def validate(self, value: Any, context: ValidationContext) -> Any:
        if not callable(value):
            raise context.fail(ErrorCode.CALLABLE_TYPE, value)
        return value


class IsInstanceValidator(Validator):
    """Accepts instances of a class."""

    kind = "is-instance"

    def __init__(self, cls: type):
        self.cls = cls

    def validate(self, value: Any, context: ValidationContext) -> Any:
        if not context.input.is_instance(value, self.cls):
            raise context.fail(ErrorCode.IS_INSTANCE_OF, value,
                               class_name=getattr(self.cls, "__name__", repr(self.cls)))
        return value

    def __str__(self) -> str:
        return f"IsInstanceValidator({self.cls.__name__})"
