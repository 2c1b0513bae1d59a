"""
Utility classes and functions for schema_core.
"""

from typing import Any, Iterable, List, Union


class JsonPointer:
    """
    Utility class for building JSON Pointers (RFC 6901).

    Schema paths reported by the compiler are JSON Pointers into the schema
    description.
    """

    @staticmethod
    def from_parts(parts: Iterable[Any]) -> str:
        """
        Create a JSON Pointer from path parts.

        Args:
            parts: Path segments

        Returns:
            JSON Pointer string
        """
        parts = list(parts)
        if not parts:
            return ""

        return "/" + "/".join(JsonPointer.escape_part(part) for part in parts)

    @staticmethod
    def escape_part(part: Any) -> str:
        """
        Escape a JSON Pointer path segment.

        Args:
            part: Path segment to escape

        Returns:
            Escaped path segment
        """
        # Replace ~ with ~0 and / with ~1
        return str(part).replace("~", "~0").replace("/", "~1")


def format_location(loc: Iterable[Union[str, int]]) -> str:
    """
    Render an error location as a dotted path.

    String segments containing a dot are wrapped in backticks so the
    rendering stays unambiguous.
    """
    rendered: List[str] = []
    for item in loc:
        if isinstance(item, str) and "." in item:
            rendered.append(f"`{item}`")
        else:
            rendered.append(str(item))
    return ".".join(rendered)


def truncate_repr(value: Any, max_length: int = 50) -> str:
    """repr() of a value, shortened in the middle when too long."""
    text = repr(value)
    if len(text) <= max_length:
        return text
    half = (max_length - 3) // 2
    return f"{text[:half]}...{text[-half:]}"


def type_name(value: Any) -> str:
    return type(value).__name__


def display_choices(values: Iterable[Any], joiner: str = "or") -> str:
    """
    Render a list of allowed values for an error message.

    ``['a', 'b', 'c']`` renders as ``'a', 'b' or 'c'``.
    """
    reprs = [repr(v.value) if hasattr(v, "_value_") else repr(v) for v in values]
    if len(reprs) <= 1:
        return "".join(reprs)
    return f"{', '.join(reprs[:-1])} {joiner} {reprs[-1]}"


class SchemaKeys:
    """Constants for schema description keys."""

    # Common keys
    TYPE = "type"
    REF = "ref"
    METADATA = "metadata"
    SERIALIZATION = "serialization"
    STRICT = "strict"

    # Constraints
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    MULTIPLE_OF = "multiple_of"
    ALLOW_INF_NAN = "allow_inf_nan"
    MAX_DIGITS = "max_digits"
    DECIMAL_PLACES = "decimal_places"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    PATTERN = "pattern"
    STRIP_WHITESPACE = "strip_whitespace"
    TO_LOWER = "to_lower"
    TO_UPPER = "to_upper"
    COERCE_NUMBERS_TO_STR = "coerce_numbers_to_str"
    TZ_CONSTRAINT = "tz_constraint"

    # Containers
    ITEMS_SCHEMA = "items_schema"
    VARIADIC_ITEM_INDEX = "variadic_item_index"
    KEYS_SCHEMA = "keys_schema"
    VALUES_SCHEMA = "values_schema"
    FAIL_FAST = "fail_fast"

    # Fields
    FIELDS = "fields"
    EXTRA_BEHAVIOR = "extra_behavior"
    EXTRAS_SCHEMA = "extras_schema"
    TOTAL = "total"
    POPULATE_BY_NAME = "populate_by_name"
    FROM_ATTRIBUTES = "from_attributes"
    REQUIRED = "required"
    VALIDATION_ALIAS = "validation_alias"
    SERIALIZATION_ALIAS = "serialization_alias"
    SERIALIZATION_EXCLUDE = "serialization_exclude"
    SERIALIZATION_EXCLUDE_IF = "serialization_exclude_if"

    # Models
    CLS = "cls"
    SCHEMA = "schema"
    REVALIDATE_INSTANCES = "revalidate_instances"
    POST_INIT = "post_init"

    # Unions
    CHOICES = "choices"
    MODE = "mode"
    DISCRIMINATOR = "discriminator"
    CUSTOM_ERROR_TYPE = "custom_error_type"
    CUSTOM_ERROR_MESSAGE = "custom_error_message"

    # Literals and enums
    EXPECTED = "expected"
    MEMBERS = "members"
    SUB_TYPE = "sub_type"
    MISSING = "missing"

    # Definitions
    DEFINITIONS = "definitions"
    SCHEMA_REF = "schema_ref"

    # Functions
    FUNCTION = "function"
    FIELD_NAME = "field_name"
    RETURN_SCHEMA = "return_schema"
    WHEN_USED = "when_used"

    # Defaults
    DEFAULT = "default"
    DEFAULT_FACTORY = "default_factory"
    DEFAULT_FACTORY_TAKES_DATA = "default_factory_takes_data"
    ON_ERROR = "on_error"
    VALIDATE_DEFAULT = "validate_default"
    COPY_DEFAULT = "copy_default"

    COMMON = frozenset({TYPE, REF, METADATA, SERIALIZATION})

    # Node kinds that hand their own input on to a child schema
    WRAPPER_TYPES = frozenset({
        "nullable", "default", "function-before", "function-after",
        "function-wrap", "definition-ref", "definitions", "model",
        "union", "tagged-union",
    })
