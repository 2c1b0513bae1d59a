"""
String validator.
"""

import re
from typing import Any, Optional

from .base import Validator, ValidationContext
from ..errors import ErrorCode
from ..inputs import InputError


class StrValidator(Validator):
    """
    Validates strings, with optional normalization and length/pattern checks.

    Normalization (strip, lower, upper) runs before the length and pattern
    checks.
    """

    kind = "str"

    def __init__(self,
                 strict: bool = False,
                 min_length: Optional[int] = None,
                 max_length: Optional[int] = None,
                 pattern: Optional[str] = None,
                 strip_whitespace: bool = False,
                 to_lower: bool = False,
                 to_upper: bool = False,
                 coerce_numbers_to_str: bool = False):
        """
        Initialize a new string validator.

        Args:
            strict: Accept only exact strings
            min_length: Minimum length in characters
            max_length: Maximum length in characters
            pattern: Regular expression searched in the value
            strip_whitespace: Strip leading and trailing whitespace
            to_lower: Lowercase the value
            to_upper: Uppercase the value
            coerce_numbers_to_str: Accept numbers in lax mode
        """
        self.strict = strict
        self.min_length = min_length
        self.max_length = max_length
        self.pattern = pattern
        self.regex = re.compile(pattern) if pattern is not None else None
        self.strip_whitespace = strip_whitespace
        self.to_lower = to_lower
        self.to_upper = to_upper
        self.coerce_numbers_to_str = coerce_numbers_to_str

    def validate(self, value: Any, context: ValidationContext) -> str:
        strict = context.strict_or(self.strict)
        try:
            text = context.input.validate_str(
                value, strict, self.coerce_numbers_to_str).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)

        if self.strip_whitespace:
            text = text.strip()
        if self.to_lower:
            text = text.lower()
        elif self.to_upper:
            text = text.upper()

        if self.min_length is not None and len(text) < self.min_length:
            raise context.fail(ErrorCode.STRING_TOO_SHORT, value, min_length=self.min_length)
        if self.max_length is not None and len(text) > self.max_length:
            raise context.fail(ErrorCode.STRING_TOO_LONG, value, max_length=self.max_length)
        if self.regex is not None and self.regex.search(text) is None:
            raise context.fail(ErrorCode.STRING_PATTERN_MISMATCH, value, pattern=self.pattern)
        return text

    def __str__(self) -> str:
        parts = []
        if self.min_length is not None:
            parts.append(f"min_length={self.min_length}")
        if self.max_length is not None:
            parts.append(f"max_length={self.max_length}")
        if self.pattern is not None:
            parts.append(f"pattern={self.pattern!r}")
        if self.strict:
            parts.append("strict=True")
        return f"StrValidator({', '.join(parts)})"
