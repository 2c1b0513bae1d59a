"""
Union validators: smart / left-to-right unions and tagged unions.
"""

import dataclasses
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .base import Validator, ValidationContext
from .functions import call_user_function
from ..errors import ErrorCode, ValidationError, ValidationFailure
from ..inputs import MISSING, Exactness, InputError
from ..lookup import LookupKey


def relocate(errors: List[ValidationError], depth: int, segment: Any) -> List[ValidationError]:
    """Insert ``segment`` into each error location at position ``depth``."""
    return [dataclasses.replace(error, loc=error.loc[:depth] + (segment,) + error.loc[depth:])
            for error in errors]


class CustomErrorMixin:
    """Replaces a node's own errors with one configured error."""

    custom_error_type: Optional[str] = None
    custom_error_message: Optional[str] = None

    def _custom_failure(self, value: Any, context: ValidationContext) -> ValidationFailure:
        known = {code.value: code for code in ErrorCode}
        if self.custom_error_type in known and self.custom_error_message is None:
            return context.fail(known[self.custom_error_type], value)
        message = self.custom_error_message or self.custom_error_type
        return context.fail(ErrorCode.CUSTOM_ERROR, value,
                            error_type=self.custom_error_type, message=message)


class UnionValidator(CustomErrorMixin, Validator):
    """
    Tries each member and returns the best success.

    Smart mode makes one pass in declaration order. The first EXACT success
    of a non-model member returns at once; otherwise the highest exactness
    wins, ties going to the member that set more model fields and then to
    the earlier member. Left-to-right mode returns the first success.
    """

    kind = "union"

    def __init__(self,
                 choices: List[Tuple[Validator, Optional[str]]],
                 mode: str = "smart",
                 custom_error_type: Optional[str] = None,
                 custom_error_message: Optional[str] = None,
                 strict: bool = False):
        """
        Initialize a new union validator.

        Args:
            choices: ``(validator, label)`` pairs in declaration order
            mode: "smart" or "left_to_right"
            custom_error_type: Error type reported instead of member errors
            custom_error_message: Message of the custom error
            strict: Validate every member in strict mode
        """
        self.choices = choices
        self.mode = mode
        self.custom_error_type = custom_error_type
        self.custom_error_message = custom_error_message
        self.strict = strict

    def validate(self, value: Any, context: ValidationContext) -> Any:
        saved_strict = context.strict
        if self.strict and context.strict is None:
            context.strict = True
        try:
            if self.mode == "left_to_right":
                return self._left_to_right(value, context)
            return self._smart(value, context)
        finally:
            context.strict = saved_strict

    def _smart(self, value: Any, context: ValidationContext) -> Any:
        outer_exactness = context.exactness
        outer_fields = context.fields_set_count
        failures: List[Tuple[Any, List[ValidationError]]] = []
        best = None

        for index, (validator, label) in enumerate(self.choices):
            context.exactness = Exactness.EXACT
            context.fields_set_count = None
            try:
                result = validator.validate(value, context)
            except ValidationFailure as failure:
                failures.append((label if label is not None else index, failure.errors))
                continue

            exactness = context.exactness
            fields_set = context.fields_set_count
            if best is None or self._beats(exactness, fields_set, best):
                best = (exactness, fields_set, result)
            if exactness is Exactness.EXACT and fields_set is None:
                break

        context.exactness = outer_exactness
        context.fields_set_count = outer_fields
        if best is None:
            raise self._failure(value, failures, context)

        exactness, fields_set, result = best
        context.floor_exactness(exactness)
        context.fields_set_count = fields_set
        return result

    @staticmethod
    def _beats(exactness: Exactness, fields_set: Optional[int], best) -> bool:
        best_exactness, best_fields, _ = best
        if exactness != best_exactness:
            return exactness > best_exactness
        return (fields_set or 0) > (best_fields or 0)

    def _left_to_right(self, value: Any, context: ValidationContext) -> Any:
        outer_exactness = context.exactness
        failures: List[Tuple[Any, List[ValidationError]]] = []
        for index, (validator, label) in enumerate(self.choices):
            context.exactness = outer_exactness
            try:
                return validator.validate(value, context)
            except ValidationFailure as failure:
                failures.append((label if label is not None else index, failure.errors))
        context.exactness = outer_exactness
        raise self._failure(value, failures, context)

    def _failure(self, value: Any, failures, context: ValidationContext) -> ValidationFailure:
        if self.custom_error_type is not None:
            return self._custom_failure(value, context)
        depth = len(context.path_parts)
        errors: List[ValidationError] = []
        for segment, member_errors in failures:
            errors.extend(relocate(member_errors, depth, segment))
        return ValidationFailure(errors)

    def __str__(self) -> str:
        members = ", ".join(str(validator) for validator, _ in self.choices)
        return f"UnionValidator({self.mode}: {members})"


class TaggedUnionValidator(CustomErrorMixin, Validator):
    """
    Picks one member by a discriminator value.

    The discriminator is a field name, a lookup path, or a callable
    returning the tag (None meaning "not found").
    """

    kind = "tagged-union"

    def __init__(self,
                 choices: Dict[Any, Validator],
                 discriminator: Union[str, List[Any], Callable[[Any], Any]],
                 custom_error_type: Optional[str] = None,
                 custom_error_message: Optional[str] = None,
                 from_attributes: bool = False,
                 strict: bool = False):
        self.choices = choices
        self.discriminator = discriminator
        self.custom_error_type = custom_error_type
        self.custom_error_message = custom_error_message
        self.from_attributes = from_attributes
        self.strict = strict
        if callable(discriminator):
            self.lookup = None
        elif isinstance(discriminator, str):
            self.lookup = LookupKey(discriminator)
        else:
            self.lookup = LookupKey(str(discriminator[0]), alias=list(discriminator))

    @property
    def discriminator_repr(self) -> str:
        if self.lookup is None:
            return f"{getattr(self.discriminator, '__name__', 'discriminator')}()"
        return ".".join(repr(segment) for segment in self.lookup.paths[0])

    def validate(self, value: Any, context: ValidationContext) -> Any:
        tag = self._find_tag(value, context)
        if tag is MISSING or tag is None:
            if self.custom_error_type is not None:
                raise self._custom_failure(value, context)
            raise context.fail(ErrorCode.UNION_TAG_NOT_FOUND, value,
                               discriminator=self.discriminator_repr)

        validator = self._choice_for(tag)
        if validator is None:
            if self.custom_error_type is not None:
                raise self._custom_failure(value, context)
            expected = ", ".join(repr(choice) for choice in self.choices)
            raise context.fail(ErrorCode.UNION_TAG_INVALID, value, tag=tag,
                               discriminator=self.discriminator_repr,
                               expected_tags=expected)

        segment = tag if isinstance(tag, (str, int)) and not isinstance(tag, bool) else str(tag)
        with context.with_path(segment):
            return validator.validate(value, context)

    def _find_tag(self, value: Any, context: ValidationContext) -> Any:
        if self.lookup is None:
            return call_user_function(self.discriminator, (value,), value, context)
        try:
            source = context.input.validate_fields(
                value, context.strict_or(self.strict), self.from_attributes).value
        except InputError as exc:
            raise context.input_failure(exc, value)
        tag, _ = self.lookup.find(source)
        return tag

    def _choice_for(self, tag: Any) -> Optional[Validator]:
        try:
            validator = self.choices.get(tag)
        except TypeError:
            return None
        if validator is None and hasattr(tag, "value"):
            # enum members select the choice keyed by their value
            validator = self.choices.get(tag.value)
        return validator

    def __str__(self) -> str:
        return f"TaggedUnionValidator({self.discriminator_repr}: {list(self.choices)})"
