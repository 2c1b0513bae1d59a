"""
Error types for schema_core.

Validation errors are collected as ``ValidationError`` entries and carried
up the validator tree inside ``ValidationFailure``. Only ``SchemaError`` and
``RecursionLimitError`` abort a whole call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .utils import format_location, truncate_repr


Location = Tuple[Union[str, int], ...]


class ErrorCode(str, Enum):
    """Enumeration of validation and serialization error kinds."""
    # structure
    MISSING = "missing"
    EXTRA_FORBIDDEN = "extra_forbidden"
    DICT_TYPE = "dict_type"
    MODEL_TYPE = "model_type"
    MODEL_ATTRIBUTES_TYPE = "model_attributes_type"
    LIST_TYPE = "list_type"
    TUPLE_TYPE = "tuple_type"
    SET_TYPE = "set_type"
    FROZEN_SET_TYPE = "frozen_set_type"
    SET_ITEM_NOT_HASHABLE = "set_item_not_hashable"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    # strings and bytes
    STRING_TYPE = "string_type"
    STRING_UNICODE = "string_unicode"
    STRING_TOO_SHORT = "string_too_short"
    STRING_TOO_LONG = "string_too_long"
    STRING_PATTERN_MISMATCH = "string_pattern_mismatch"
    BYTES_TYPE = "bytes_type"
    BYTES_TOO_SHORT = "bytes_too_short"
    BYTES_TOO_LONG = "bytes_too_long"
    BYTES_INVALID_ENCODING = "bytes_invalid_encoding"
    # numbers
    INT_TYPE = "int_type"
    INT_PARSING = "int_parsing"
    INT_FROM_FLOAT = "int_from_float"
    FLOAT_TYPE = "float_type"
    FLOAT_PARSING = "float_parsing"
    FINITE_NUMBER = "finite_number"
    GREATER_THAN = "greater_than"
    GREATER_THAN_EQUAL = "greater_than_equal"
    LESS_THAN = "less_than"
    LESS_THAN_EQUAL = "less_than_equal"
    MULTIPLE_OF = "multiple_of"
    DECIMAL_TYPE = "decimal_type"
    DECIMAL_PARSING = "decimal_parsing"
    DECIMAL_MAX_DIGITS = "decimal_max_digits"
    DECIMAL_MAX_PLACES = "decimal_max_places"
    DECIMAL_WHOLE_DIGITS = "decimal_whole_digits"
    BOOL_TYPE = "bool_type"
    BOOL_PARSING = "bool_parsing"
    # dates and times
    DATE_TYPE = "date_type"
    DATE_PARSING = "date_parsing"
    DATE_FROM_DATETIME_INEXACT = "date_from_datetime_inexact"
    TIME_TYPE = "time_type"
    TIME_PARSING = "time_parsing"
    DATETIME_TYPE = "datetime_type"
    DATETIME_PARSING = "datetime_parsing"
    TIMEZONE_AWARE = "timezone_aware"
    TIMEZONE_NAIVE = "timezone_naive"
    TIME_DELTA_TYPE = "time_delta_type"
    TIME_DELTA_PARSING = "time_delta_parsing"
    # misc
    NONE_REQUIRED = "none_required"
    CALLABLE_TYPE = "callable_type"
    IS_INSTANCE_OF = "is_instance_of"
    LITERAL_ERROR = "literal_error"
    ENUM = "enum"
    UNION_TAG_INVALID = "union_tag_invalid"
    UNION_TAG_NOT_FOUND = "union_tag_not_found"
    RECURSION_LOOP = "recursion_loop"
    RECURSION_LIMIT = "recursion_limit"
    JSON_INVALID = "json_invalid"
    # custom logic
    VALUE_ERROR = "value_error"
    ASSERTION_ERROR = "assertion_error"
    FUNCTION_ERROR = "function_error"
    CUSTOM_ERROR = "custom_error"
    DEFAULT_FACTORY_ERROR = "default_factory_error"
    DEFAULT_UNAVAILABLE = "default_unavailable"
    OMIT_NOT_ALLOWED = "omit_not_allowed"
    # serialization
    SERIALIZATION_TYPE_MISMATCH = "serialization_type_mismatch"
    SERIALIZATION_UNKNOWN_TYPE = "serialization_unknown_type"
    SERIALIZATION_CIRCULAR_REFERENCE = "serialization_circular_reference"
    SERIALIZATION_FUNCTION_ERROR = "serialization_function_error"


ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.MISSING: "Field required",
    ErrorCode.EXTRA_FORBIDDEN: "Extra inputs are not permitted",
    ErrorCode.DICT_TYPE: "Input should be a valid dictionary",
    ErrorCode.MODEL_TYPE: "Input should be a valid dictionary or instance of {class_name}",
    ErrorCode.MODEL_ATTRIBUTES_TYPE: "Input should be a valid dictionary or object to extract fields from",
    ErrorCode.LIST_TYPE: "Input should be a valid list",
    ErrorCode.TUPLE_TYPE: "Input should be a valid tuple",
    ErrorCode.SET_TYPE: "Input should be a valid set",
    ErrorCode.FROZEN_SET_TYPE: "Input should be a valid frozenset",
    ErrorCode.SET_ITEM_NOT_HASHABLE: "Set items should be hashable",
    ErrorCode.TOO_SHORT: "{field_type} should have at least {min_length} items after validation, not {actual_length}",
    ErrorCode.TOO_LONG: "{field_type} should have at most {max_length} items after validation, not {actual_length}",
    ErrorCode.STRING_TYPE: "Input should be a valid string",
    ErrorCode.STRING_UNICODE: "Input should be a valid string, unable to parse raw data as a unicode string",
    ErrorCode.STRING_TOO_SHORT: "String should have at least {min_length} characters",
    ErrorCode.STRING_TOO_LONG: "String should have at most {max_length} characters",
    ErrorCode.STRING_PATTERN_MISMATCH: "String should match pattern '{pattern}'",
    ErrorCode.BYTES_TYPE: "Input should be a valid bytes",
    ErrorCode.BYTES_TOO_SHORT: "Data should have at least {min_length} bytes",
    ErrorCode.BYTES_TOO_LONG: "Data should have at most {max_length} bytes",
    ErrorCode.BYTES_INVALID_ENCODING: "Data should be valid {encoding}: {encoding_error}",
    ErrorCode.INT_TYPE: "Input should be a valid integer",
    ErrorCode.INT_PARSING: "Input should be a valid integer, unable to parse string as an integer",
    ErrorCode.INT_FROM_FLOAT: "Input should be a valid integer, got a number with a fractional part",
    ErrorCode.FLOAT_TYPE: "Input should be a valid number",
    ErrorCode.FLOAT_PARSING: "Input should be a valid number, unable to parse string as a number",
    ErrorCode.FINITE_NUMBER: "Input should be a finite number",
    ErrorCode.GREATER_THAN: "Input should be greater than {gt}",
    ErrorCode.GREATER_THAN_EQUAL: "Input should be greater than or equal to {ge}",
    ErrorCode.LESS_THAN: "Input should be less than {lt}",
    ErrorCode.LESS_THAN_EQUAL: "Input should be less than or equal to {le}",
    ErrorCode.MULTIPLE_OF: "Input should be a multiple of {multiple_of}",
    ErrorCode.DECIMAL_TYPE: "Decimal input should be an integer, float, string or Decimal object",
    ErrorCode.DECIMAL_PARSING: "Input should be a valid decimal",
    ErrorCode.DECIMAL_MAX_DIGITS: "Decimal input should have no more than {max_digits} digits in total",
    ErrorCode.DECIMAL_MAX_PLACES: "Decimal input should have no more than {decimal_places} decimal places",
    ErrorCode.DECIMAL_WHOLE_DIGITS: "Decimal input should have no more than {whole_digits} digits before the decimal point",
    ErrorCode.BOOL_TYPE: "Input should be a valid boolean",
    ErrorCode.BOOL_PARSING: "Input should be a valid boolean, unable to interpret input",
    ErrorCode.DATE_TYPE: "Input should be a valid date",
    ErrorCode.DATE_PARSING: "Input should be a valid date in the format YYYY-MM-DD, {error}",
    ErrorCode.DATE_FROM_DATETIME_INEXACT: "Datetimes provided to dates should have zero time - e.g. be exact dates",
    ErrorCode.TIME_TYPE: "Input should be a valid time",
    ErrorCode.TIME_PARSING: "Input should be in a valid time format, {error}",
    ErrorCode.DATETIME_TYPE: "Input should be a valid datetime",
    ErrorCode.DATETIME_PARSING: "Input should be a valid datetime, {error}",
    ErrorCode.TIMEZONE_AWARE: "Input should have timezone info",
    ErrorCode.TIMEZONE_NAIVE: "Input should not have timezone info",
    ErrorCode.TIME_DELTA_TYPE: "Input should be a valid timedelta",
    ErrorCode.TIME_DELTA_PARSING: "Input should be a valid timedelta, {error}",
    ErrorCode.NONE_REQUIRED: "Input should be None",
    ErrorCode.CALLABLE_TYPE: "Input should be callable",
    ErrorCode.IS_INSTANCE_OF: "Input should be an instance of {class_name}",
    ErrorCode.LITERAL_ERROR: "Input should be {expected}",
    ErrorCode.ENUM: "Input should be {expected}",
    ErrorCode.UNION_TAG_INVALID: "Input tag '{tag}' found using {discriminator} does not match any of the expected tags: {expected_tags}",
    ErrorCode.UNION_TAG_NOT_FOUND: "Unable to extract tag using discriminator {discriminator}",
    ErrorCode.RECURSION_LOOP: "Recursion error - cyclic reference detected",
    ErrorCode.RECURSION_LIMIT: "Recursion error - nesting of definition '{definition}' exceeds {limit} levels",
    ErrorCode.JSON_INVALID: "Invalid JSON: {error}",
    ErrorCode.VALUE_ERROR: "Value error, {error}",
    ErrorCode.ASSERTION_ERROR: "Assertion failed, {error}",
    ErrorCode.FUNCTION_ERROR: "Function raised {error_type}: {error}",
    ErrorCode.CUSTOM_ERROR: "{message}",
    ErrorCode.DEFAULT_FACTORY_ERROR: "Default factory raised {error_type}: {error}",
    ErrorCode.DEFAULT_UNAVAILABLE: "No default value is available for this input",
    ErrorCode.OMIT_NOT_ALLOWED: "Value cannot be omitted at this position",
    ErrorCode.SERIALIZATION_TYPE_MISMATCH: "Expected `{expected}` but got `{actual}` with value `{value}`",
    ErrorCode.SERIALIZATION_UNKNOWN_TYPE: "Unable to serialize unknown type: {actual}",
    ErrorCode.SERIALIZATION_CIRCULAR_REFERENCE: "Circular reference detected (id repeated)",
    ErrorCode.SERIALIZATION_FUNCTION_ERROR: "Error calling function `{function}`: {error_type}: {error}",
}


def render_message(code: ErrorCode, context: Optional[Dict[str, Any]]) -> str:
    """Render the message template of an error code with its payload."""
    template = ERROR_MESSAGES[code]
    if not context:
        return template
    return format_template(template, context)


def format_template(template: str, context: Dict[str, Any]) -> str:
    """
    Replace ``{key}`` placeholders present in the context.

    Placeholders without a matching key are left untouched, so partial
    payloads still produce a readable message.
    """
    message = template
    for key, value in context.items():
        message = message.replace("{" + key + "}", str(value))
    return message


@dataclass
class ValidationError:
    """
    A single entry of an error report.

    Attributes:
        code: The error kind
        loc: Location of the failing value, outermost segment first
        message: Human-readable error message
        input: The value that failed validation
        context: Kind-specific payload (expected-vs-actual, allowed set, ...)
    """
    code: ErrorCode
    loc: Location
    message: str
    input: Any = None
    context: Optional[Dict[str, Any]] = None

    @classmethod
    def create(cls,
               code: ErrorCode,
               loc: Location,
               input_value: Any = None,
               context: Optional[Dict[str, Any]] = None) -> "ValidationError":
        return cls(
            code=code,
            loc=tuple(loc),
            message=render_message(code, context),
            input=input_value,
            context=context or None,
        )

    @property
    def kind(self) -> str:
        """The error type string, custom error types included."""
        if self.code is ErrorCode.CUSTOM_ERROR and self.context:
            return self.context.get("error_type", self.code.value)
        return self.code.value

    @property
    def path(self) -> str:
        return format_location(self.loc)

    def as_dict(self, include_input: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.kind,
            "loc": self.loc,
            "msg": self.message,
        }
        if include_input:
            data["input"] = self.input
        if self.context:
            data["ctx"] = dict(self.context)
        return data

    def __str__(self) -> str:
        return f"Error at '{self.path}': {self.message}"


class ValidationFailed(ValueError):
    """Public exception raised when a validation result is unwrapped."""

    def __init__(self, errors: List[ValidationError], title: str = "Validation",
                 hide_input: bool = False):
        super().__init__(errors)
        self.errors = errors
        self.title = title
        self.hide_input = hide_input

    def error_count(self) -> int:
        return len(self.errors)

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [error.as_dict(include_input=not self.hide_input) for error in self.errors]

    def __str__(self) -> str:
        count = len(self.errors)
        plural = "error" if count == 1 else "errors"
        lines = [f"{count} validation {plural} for {self.title}"]
        for error in self.errors:
            if error.loc:
                lines.append(error.path)
            details = f"type={error.kind}"
            if not self.hide_input:
                details += (f", input_value={truncate_repr(error.input)}"
                            f", input_type={type(error.input).__name__}")
            lines.append(f"  {error.message} [{details}]")
        return "\n".join(lines)


class ValidationFailure(ValidationFailed):
    """
    Internal signal carrying one or more error entries up the validator tree.

    Containers catch it, merge its entries into their accumulator and keep
    validating siblings unless fail-fast is active. Its locations are
    absolute, so a wrap function may catch it as ``ValidationFailed`` and
    re-raise it unchanged.
    """

    def __init__(self, errors: List[ValidationError]):
        super().__init__(errors)


class ErrorAccumulator:
    """Collects error entries in discovery order for one container."""

    def __init__(self, fail_fast: bool = False):
        self.errors: List[ValidationError] = []
        self.fail_fast = fail_fast

    def add(self, failure: ValidationFailure) -> bool:
        """
        Record a failure.

        Returns:
            True when the caller should stop iterating (fail-fast)
        """
        self.errors.extend(failure.errors)
        return self.fail_fast

    def raise_if_errors(self) -> None:
        if self.errors:
            raise ValidationFailure(self.errors)

    def __bool__(self) -> bool:
        return bool(self.errors)

    def __len__(self) -> int:
        return len(self.errors)


class RecursionLimitError(Exception):
    """
    Fatal to the current call: cyclic or runaway self-reference.

    ``limit`` is set when the nesting depth ran out; it is None when the
    same input re-entered a definition that was still active.
    """

    def __init__(self, definition: str, loc: Location, input_value: Any = None,
                 limit: Optional[int] = None):
        if limit is None:
            message = f"cyclic reference in definition '{definition}'"
        else:
            message = f"recursion limit of {limit} exceeded in definition '{definition}'"
        super().__init__(message)
        self.definition = definition
        self.loc = tuple(loc)
        self.input = input_value
        self.limit = limit

    @property
    def cyclic(self) -> bool:
        return self.limit is None

    def to_error(self) -> ValidationError:
        if self.cyclic:
            return ValidationError.create(ErrorCode.RECURSION_LOOP, self.loc, self.input)
        return ValidationError.create(ErrorCode.RECURSION_LIMIT, self.loc, self.input,
                                      {"definition": self.definition, "limit": self.limit})


class SchemaError(Exception):
    """
    Raised when a schema cannot be compiled.

    Attributes:
        problems: ``(schema_path, message)`` pairs, one per detected issue
    """

    def __init__(self, problems: List[Tuple[str, str]]):
        self.problems = problems
        super().__init__(self._format())

    def _format(self) -> str:
        count = len(self.problems)
        plural = "problem" if count == 1 else "problems"
        lines = [f"Invalid schema ({count} {plural}):"]
        for path, message in self.problems:
            lines.append(f"  - {path or '<root>'}: {message}")
        return "\n".join(lines)


class SerializationError(ValueError):
    """Raised when a value does not match the shape a serializer expects."""

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        super().__init__("\n".join(str(error) for error in errors))


class CustomError(ValueError):
    """
    Raised by user functions to report an error with a custom type.

    The message template may contain ``{key}`` placeholders filled from
    ``context``.
    """

    def __init__(self, error_type: str, message_template: str,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(error_type, message_template, context)
        self.error_type = error_type
        self.message_template = message_template
        self.context = context

    def message(self) -> str:
        if not self.context:
            return self.message_template
        return format_template(self.message_template, self.context)

    def __str__(self) -> str:
        return self.message()


class KnownError(ValueError):
    """Raised by user functions to report one of the built-in error kinds."""

    def __init__(self, code: Union[ErrorCode, str], context: Optional[Dict[str, Any]] = None):
        super().__init__(code, context)
        self.code = ErrorCode(code)
        self.context = context

    def __str__(self) -> str:
        return render_message(self.code, self.context)


class UseDefault(Exception):
    """Raised by user functions to make the enclosing default node use its default."""

    def __repr__(self) -> str:
        return "UseDefault()"


class OmitValue(Exception):
    """Raised by user functions to drop the current item from its container."""

    def __repr__(self) -> str:
        return "OmitValue()"
