"""
schema_core

Compiles declarative schema descriptions into validator and serializer
trees, then validates and coerces untyped input (native Python objects or
decoded JSON) and serializes validated values back out.
"""

import logging

from .api import (
    SchemaSerializer,
    SchemaValidator,
    SerializationOptions,
    ValidationResult,
    compile_schema,
    serialize,
    validate,
)
from .cache import SchemaCache
from .config import CoreConfig
from .errors import (
    CustomError,
    ErrorCode,
    KnownError,
    OmitValue,
    RecursionLimitError,
    SchemaError,
    SerializationError,
    UseDefault,
    ValidationError,
    ValidationFailed,
)
from .inputs import MISSING
from .schema_compiler import CompiledSchema, SchemaCompiler
from .version import __version__

# Library code only logs; handlers are configured by applications (see cli.main)
logger = logging.getLogger("schema_core")
logger.addHandler(logging.NullHandler())

__all__ = [
    "SchemaValidator",
    "SchemaSerializer",
    "SerializationOptions",
    "ValidationResult",
    "compile_schema",
    "validate",
    "serialize",
    "SchemaCache",
    "CoreConfig",
    "CompiledSchema",
    "SchemaCompiler",
    "ErrorCode",
    "ValidationError",
    "ValidationFailed",
    "SchemaError",
    "SerializationError",
    "RecursionLimitError",
    "CustomError",
    "KnownError",
    "UseDefault",
    "OmitValue",
    "MISSING",
    "__version__",
]
