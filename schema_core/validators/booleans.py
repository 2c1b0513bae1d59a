"""
Boolean validator.
"""

from typing import Any

from .base import Validator, ValidationContext
from ..inputs import InputError


class BoolValidator(Validator):
    """Validates booleans."""

    kind = "bool"

    def __init__(self, strict: bool = False):
        self.strict = strict

    def validate(self, value: Any, context: ValidationContext) -> bool:
        try:
            return context.input.validate_bool(
                value, context.strict_or(self.strict)).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)
