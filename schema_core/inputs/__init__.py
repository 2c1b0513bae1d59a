"""
Input abstraction: one read interface over native objects and decoded JSON.
"""

from .base import (
    MISSING,
    Exactness,
    FieldSource,
    InputAdapter,
    InputError,
    InputKind,
    LiteralLookup,
    ValidationMatch,
    literal_key,
)
from .json_input import JsonInput
from .python_input import PythonInput

PYTHON_INPUT = PythonInput()
JSON_INPUT = JsonInput()

__all__ = [
    "MISSING",
    "Exactness",
    "FieldSource",
    "InputAdapter",
    "InputError",
    "InputKind",
    "LiteralLookup",
    "ValidationMatch",
    "literal_key",
    "JsonInput",
    "PythonInput",
    "PYTHON_INPUT",
    "JSON_INPUT",
]
