"""
Nullable and default validators.
"""

import copy
from typing import Any, Callable, Optional

from .base import Validator, ValidationContext
from ..errors import ErrorCode, OmitValue, UseDefault, ValidationFailure
from ..inputs import MISSING, PYTHON_INPUT


class NullableValidator(Validator):
    """Accepts null before consulting the inner validator."""

    kind = "nullable"

    def __init__(self, validator: Validator):
        self.validator = validator

    def validate(self, value: Any, context: ValidationContext) -> Any:
        if context.input.is_none(value):
            return None
        return self.validator.validate(value, context)

    def default_value(self, context: ValidationContext) -> Any:
        return self.validator.default_value(context)

    def __str__(self) -> str:
        return f"NullableValidator({self.validator})"


class DefaultValidator(Validator):
    """
    Supplies a default when the enclosing field is absent.

    Present values go through the inner validator. The default is used
    instead when inner logic raises ``UseDefault``, or when validation fails
    and ``on_error`` is ``"default"``. With ``on_error="omit"`` a failing
    value is dropped from its container.
    """

    kind = "default"

    def __init__(self,
                 validator: Validator,
                 default: Any = MISSING,
                 default_factory: Optional[Callable] = None,
                 default_factory_takes_data: bool = False,
                 on_error: str = "raise",
                 validate_default: bool = False,
                 copy_default: bool = True):
        """
        Initialize a new default validator.

        Args:
            validator: Validator for present values
            default: The default value
            default_factory: Callable producing the default
            default_factory_takes_data: Pass validated field data to the factory
            on_error: "raise", "omit" or "default"
            validate_default: Run the default through the inner validator
            copy_default: Deep-copy the default on every use
        """
        self.validator = validator
        self.default = default
        self.default_factory = default_factory
        self.default_factory_takes_data = default_factory_takes_data
        self.on_error = on_error
        self.validate_default = validate_default
        self.copy_default = copy_default

    def validate(self, value: Any, context: ValidationContext) -> Any:
        try:
            return self.validator.validate(value, context)
        except UseDefault:
            return self.default_value(context)
        except ValidationFailure:
            if self.on_error == "default":
                return self.default_value(context)
            if self.on_error == "omit":
                raise OmitValue()
            raise

    def default_value(self, context: ValidationContext) -> Any:
        value = self._produce(context)
        if self.validate_default:
            with context.with_input(PYTHON_INPUT):
                return self.validator.validate(value, context)
        return value

    def _produce(self, context: ValidationContext) -> Any:
        if self.default_factory is None:
            if self.copy_default:
                return copy.deepcopy(self.default)
            return self.default
        try:
            if self.default_factory_takes_data:
                return self.default_factory(context.data)
            return self.default_factory()
        except (ValidationFailure, UseDefault, OmitValue):
            raise
        except Exception as exc:
            raise context.fail(ErrorCode.DEFAULT_FACTORY_ERROR, None,
                               error_type=type(exc).__name__, error=str(exc))

    def __str__(self) -> str:
        return f"DefaultValidator({self.validator})"
