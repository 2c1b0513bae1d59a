"""
Bytes validator.
"""

from typing import Any, Optional

from .base import Validator, ValidationContext
from ..errors import ErrorCode
from ..inputs import InputError


class BytesValidator(Validator):
    """
    Validates bytes.

    JSON strings are decoded according to ``bytes_mode``.
    """

    kind = "bytes"

    def __init__(self,
                 strict: bool = False,
                 min_length: Optional[int] = None,
                 max_length: Optional[int] = None,
                 bytes_mode: str = "utf8"):
        self.strict = strict
        self.min_length = min_length
        self.max_length = max_length
        self.bytes_mode = bytes_mode

    def validate(self, value: Any, context: ValidationContext) -> bytes:
        try:
            data = context.input.validate_bytes(
                value, context.strict_or(self.strict), self.bytes_mode).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)
        if self.min_length is not None and len(data) < self.min_length:
            raise context.fail(ErrorCode.BYTES_TOO_SHORT, value, min_length=self.min_length)
        if self.max_length is not None and len(data) > self.max_length:
            raise context.fail(ErrorCode.BYTES_TOO_LONG, value, max_length=self.max_length)
        return data
