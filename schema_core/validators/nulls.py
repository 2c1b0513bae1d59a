"""
Null validator.
"""

from typing import Any

from .base import Validator, ValidationContext
from ..errors import ErrorCode


class NoneValidator(Validator):
    """Accepts only null."""

    kind = "none"

    def validate(self, value: Any, context: ValidationContext) -> None:
        if not context.input.is_none(value):
            raise context.fail(ErrorCode.NONE_REQUIRED, value)
        return None
