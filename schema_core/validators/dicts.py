"""
Dictionary validator.
"""

from typing import Any, Dict, Optional

from .base import Validator, ValidationContext
from ..errors import ErrorCode, OmitValue, ValidationFailure
from ..inputs import InputError


KEY_SEGMENT = "[key]"


class DictValidator(Validator):
    """
    Validates mappings entry by entry.

    Key errors are located at ``(key, "[key]")``, value errors at ``(key,)``.
    """

    kind = "dict"
    field_type = "Dictionary"

    def __init__(self,
                 keys_validator: Optional[Validator] = None,
                 values_validator: Optional[Validator] = None,
                 min_length: Optional[int] = None,
                 max_length: Optional[int] = None,
                 fail_fast: bool = False,
                 strict: bool = False):
        self.keys_validator = keys_validator
        self.values_validator = values_validator
        self.min_length = min_length
        self.max_length = max_length
        self.fail_fast = fail_fast
        self.strict = strict

    def validate(self, value: Any, context: ValidationContext) -> Dict[Any, Any]:
        try:
            entries = context.input.validate_dict(
                value, context.strict_or(self.strict)).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)

        output = {}
        errors = context.accumulator(self.fail_fast)
        for key, item in entries:
            segment = context.input.dict_key_location(key)
            failed = False
            with context.with_path(segment):
                try:
                    out_key = self._validate_key(key, context)
                except ValidationFailure as failure:
                    failed = True
                    if errors.add(failure):
                        break
                try:
                    out_value = self._validate_value(item, context)
                except ValidationFailure as failure:
                    failed = True
                    if errors.add(failure):
                        break
                except OmitValue:
                    continue
            if not failed:
                output[out_key] = out_value
        errors.raise_if_errors()

        length = len(output)
        if self.min_length is not None and length < self.min_length:
            raise context.fail(ErrorCode.TOO_SHORT, value, field_type=self.field_type,
                               min_length=self.min_length, actual_length=length)
        if self.max_length is not None and length > self.max_length:
            raise context.fail(ErrorCode.TOO_LONG, value, field_type=self.field_type,
                               max_length=self.max_length, actual_length=length)
        return output

    def _validate_key(self, key: Any, context: ValidationContext) -> Any:
        if self.keys_validator is None:
            return key
        with context.with_path(KEY_SEGMENT):
            return self.keys_validator.validate(key, context)

    def _validate_value(self, item: Any, context: ValidationContext) -> Any:
        if self.values_validator is None:
            return item
        return self.values_validator.validate(item, context)

    def __str__(self) -> str:
        return f"DictValidator(keys={self.keys_validator}, values={self.values_validator})"
