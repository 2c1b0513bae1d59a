"""
Core configuration shared by every node of a compiled schema.

Node-level schema keys override the matching config value.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from .errors import SchemaError


DEFAULT_RECURSION_LIMIT = 255

_CHOICES = {
    "extra_behavior": ("ignore", "forbid", "allow"),
    "bytes_mode": ("utf8", "base64", "hex"),
    "ser_json_timedelta": ("iso8601", "float"),
    "ser_json_bytes": ("utf8", "base64", "hex"),
    "ser_json_inf_nan": ("null", "constants", "strings"),
    "revalidate_instances": ("never", "always", "subclass-instances"),
}


@dataclass(frozen=True)
class CoreConfig:
    """
    Validation and serialization settings.

    Attributes:
        strict: Reject every coercion unless a node overrides it
        extra_behavior: Default policy for unknown fields (ignore/forbid/allow)
        from_attributes: Read fields from object attributes
        populate_by_name: Accept field names as well as aliases
        str_strip_whitespace: Strip whitespace from strings
        str_to_lower: Lowercase strings
        str_to_upper: Uppercase strings
        str_min_length: Default minimum string length
        str_max_length: Default maximum string length
        coerce_numbers_to_str: Accept numbers for string fields in lax mode
        allow_inf_nan: Accept infinite and NaN floats
        bytes_mode: How JSON strings are decoded into bytes
        ser_json_timedelta: Timedelta format in JSON output
        ser_json_bytes: Bytes encoding in JSON output
        ser_json_inf_nan: Non-finite float handling in JSON output
        serialize_by_alias: Use serialization aliases by default
        validate_default: Run defaults through their field validator
        revalidate_instances: When model instances are revalidated
        recursion_limit: Maximum nesting depth per recursive definition
        hide_input_in_errors: Leave input values out of rendered errors
        fail_fast: Stop containers at their first error
    """
    strict: bool = False
    extra_behavior: str = "ignore"
    from_attributes: bool = False
    populate_by_name: bool = False
    str_strip_whitespace: bool = False
    str_to_lower: bool = False
    str_to_upper: bool = False
    str_min_length: Optional[int] = None
    str_max_length: Optional[int] = None
    coerce_numbers_to_str: bool = False
    allow_inf_nan: bool = True
    bytes_mode: str = "utf8"
    ser_json_timedelta: str = "iso8601"
    ser_json_bytes: str = "utf8"
    ser_json_inf_nan: str = "null"
    serialize_by_alias: bool = False
    validate_default: bool = False
    revalidate_instances: str = "never"
    recursion_limit: int = DEFAULT_RECURSION_LIMIT
    hide_input_in_errors: bool = False
    fail_fast: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CoreConfig":
        """
        Build a config from a plain mapping.

        Raises:
            SchemaError: On unknown keys or values outside the allowed set
        """
        if data is None:
            return cls()
        if isinstance(data, CoreConfig):
            return data

        known = {f.name for f in fields(cls)}
        problems = []
        for key, value in data.items():
            if key not in known:
                problems.append(("config", f"Unknown config key '{key}'"))
            elif key in _CHOICES and value not in _CHOICES[key]:
                allowed = ", ".join(_CHOICES[key])
                problems.append(("config", f"Invalid value {value!r} for '{key}', expected one of: {allowed}"))
        if "recursion_limit" in data and not (
                isinstance(data["recursion_limit"], int) and data["recursion_limit"] > 0):
            problems.append(("config", "'recursion_limit' must be a positive integer"))
        if problems:
            raise SchemaError(problems)

        return cls(**data)

    def fingerprint(self) -> tuple:
        return tuple(getattr(self, f.name) for f in fields(self))
