"""
List, tuple, set and frozenset validators.
"""

from typing import Any, List, Optional

from .base import Validator, ValidationContext
from ..errors import ErrorCode, OmitValue, ValidationFailure
from ..inputs import InputError


def validate_items(validator: Validator, items: List[Any], context: ValidationContext,
                   fail_fast: bool = False) -> List[Any]:
    """
    Validate each item under its index, collecting errors in input order.

    Items whose validation raises ``OmitValue`` are dropped.
    """
    output = []
    errors = context.accumulator(fail_fast)
    for index, item in enumerate(items):
        with context.with_path(index):
            try:
                output.append(validator.validate(item, context))
            except ValidationFailure as failure:
                if errors.add(failure):
                    break
            except OmitValue:
                continue
    errors.raise_if_errors()
    return output


class SequenceValidator(Validator):
    """
    Shared behaviour of homogeneous collection validators.

    Length constraints are checked on the validated output.
    """

    reader = "abstract"
    field_type = "Sequence"

    def __init__(self,
                 items_validator: Optional[Validator] = None,
                 min_length: Optional[int] = None,
                 max_length: Optional[int] = None,
                 fail_fast: bool = False,
                 strict: bool = False):
        self.items_validator = items_validator
        self.min_length = min_length
        self.max_length = max_length
        self.fail_fast = fail_fast
        self.strict = strict

    def validate(self, value: Any, context: ValidationContext) -> Any:
        read = getattr(context.input, self.reader)
        try:
            items = read(value, context.strict_or(self.strict)).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)

        if self.items_validator is None:
            output = list(items)
        else:
            output = validate_items(self.items_validator, items, context, self.fail_fast)
        result = self._build(output, context)
        self._check_length(len(result), value, context)
        return result

    def _build(self, output: List[Any], context: ValidationContext) -> Any:
        return output

    def _check_length(self, length: int, value: Any, context: ValidationContext) -> None:
        if self.min_length is not None and length < self.min_length:
            raise context.fail(ErrorCode.TOO_SHORT, value, field_type=self.field_type,
                               min_length=self.min_length, actual_length=length)
        if self.max_length is not None and length > self.max_length:
            raise context.fail(ErrorCode.TOO_LONG, value, field_type=self.field_type,
                               max_length=self.max_length, actual_length=length)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(items={self.items_validator})"


class ListValidator(SequenceValidator):
    kind = "list"
    reader = "validate_list"
    field_type = "List"


class SetValidator(SequenceValidator):
    """Validates sets; every validated item must be hashable."""

    kind = "set"
    reader = "validate_set"
    field_type = "Set"
    output_type = set

    def _build(self, output: List[Any], context: ValidationContext) -> Any:
        errors = context.accumulator(self.fail_fast)
        hashable = []
        for index, item in enumerate(output):
            try:
                hash(item)
            except TypeError:
                with context.with_path(index):
                    if errors.add(context.fail(ErrorCode.SET_ITEM_NOT_HASHABLE, item)):
                        break
                continue
            hashable.append(item)
        errors.raise_if_errors()
        return self.output_type(hashable)


class FrozenSetValidator(SetValidator):
    kind = "frozenset"
    reader = "validate_frozenset"
    field_type = "Frozenset"
    output_type = frozenset


class TupleValidator(SequenceValidator):
    """
    Validates tuples against positional item validators.

    With ``variadic_item_index`` set, the validator at that index absorbs
    every item between the fixed prefix and the fixed suffix. Without it the
    tuple has a fixed arity and a wrong length fails before any item is
    validated.
    """

    kind = "tuple"
    field_type = "Tuple"

    def __init__(self,
                 items_validators: List[Validator],
                 variadic_item_index: Optional[int] = None,
                 min_length: Optional[int] = None,
                 max_length: Optional[int] = None,
                 fail_fast: bool = False,
                 strict: bool = False):
        super().__init__(None, min_length, max_length, fail_fast, strict)
        self.items_validators = items_validators
        self.variadic_item_index = variadic_item_index

    def validate(self, value: Any, context: ValidationContext) -> tuple:
        try:
            items = context.input.validate_tuple(
                value, context.strict_or(self.strict)).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)

        if self.variadic_item_index is None:
            output = self._validate_fixed(items, value, context)
        else:
            output = self._validate_variadic(items, value, context)

        self._check_length(len(output), value, context)
        return tuple(output)

    def _validate_fixed(self, items: List[Any], value: Any, context: ValidationContext) -> List[Any]:
        expected = len(self.items_validators)
        if len(items) < expected:
            raise context.fail(ErrorCode.TOO_SHORT, value, field_type=self.field_type,
                               min_length=expected, actual_length=len(items))
        if len(items) > expected:
            raise context.fail(ErrorCode.TOO_LONG, value, field_type=self.field_type,
                               max_length=expected, actual_length=len(items))
        return self._validate_positional(list(zip(self.items_validators, items)), context)

    def _validate_variadic(self, items: List[Any], value: Any, context: ValidationContext) -> List[Any]:
        index = self.variadic_item_index
        prefix = self.items_validators[:index]
        variadic = self.items_validators[index]
        suffix = self.items_validators[index + 1:]

        fixed = len(prefix) + len(suffix)
        if len(items) < fixed:
            raise context.fail(ErrorCode.TOO_SHORT, value, field_type=self.field_type,
                               min_length=fixed, actual_length=len(items))

        middle_count = len(items) - fixed
        pairs = list(zip(prefix, items))
        pairs.extend((variadic, item) for item in items[len(prefix):len(prefix) + middle_count])
        pairs.extend(zip(suffix, items[len(prefix) + middle_count:]))
        omittable = range(len(prefix), len(prefix) + middle_count)
        return self._validate_positional(pairs, context, omittable)

    def _validate_positional(self, pairs, context: ValidationContext,
                             omittable: range = range(0)) -> List[Any]:
        """Validate items by position; only variadic items may be omitted."""
        output = []
        errors = context.accumulator(self.fail_fast)
        for index, (validator, item) in enumerate(pairs):
            with context.with_path(index):
                try:
                    output.append(validator.validate(item, context))
                except ValidationFailure as failure:
                    if errors.add(failure):
                        break
                except OmitValue:
                    if index in omittable:
                        continue
                    if errors.add(context.fail(ErrorCode.OMIT_NOT_ALLOWED, item)):
                        break
        errors.raise_if_errors()
        return output

    def __str__(self) -> str:
        return f"TupleValidator(items={self.items_validators})"
