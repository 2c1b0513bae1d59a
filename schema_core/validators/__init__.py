"""
Validator tree node set.
"""

from .base import Validator, ValidationContext, ValidationInfo, RecursionGuard
from .strings import StrValidator
from .numbers import IntValidator, FloatValidator, DecimalValidator
from .booleans import BoolValidator
from .nulls import NoneValidator
from .bytes import BytesValidator
from .datetimes import DateValidator, TimeValidator, DatetimeValidator, TimedeltaValidator
from .misc import AnyValidator, CallableValidator, IsInstanceValidator
from .arrays import ListValidator, TupleValidator, SetValidator, FrozenSetValidator
from .dicts import DictValidator
from .models import (
    Field,
    FieldsResult,
    TypedDictValidator,
    ModelFieldsValidator,
    ModelValidator
)
from .unions import UnionValidator, TaggedUnionValidator
from .literals import LiteralValidator, EnumValidator
from .references import DefinitionRefValidator
from .functions import (
    FunctionBeforeValidator,
    FunctionAfterValidator,
    FunctionPlainValidator,
    FunctionWrapValidator
)
from .defaults import NullableValidator, DefaultValidator

__all__ = [
    "Validator",
    "ValidationContext",
    "ValidationInfo",
    "RecursionGuard",
    "StrValidator",
    "IntValidator",
    "FloatValidator",
    "DecimalValidator",
    "BoolValidator",
    "NoneValidator",
    "BytesValidator",
    "DateValidator",
    "TimeValidator",
    "DatetimeValidator",
    "TimedeltaValidator",
    "AnyValidator",
    "CallableValidator",
    "IsInstanceValidator",
    "ListValidator",
    "TupleValidator",
    "SetValidator",
    "FrozenSetValidator",
    "DictValidator",
    "Field",
    "FieldsResult",
    "TypedDictValidator",
    "ModelFieldsValidator",
    "ModelValidator",
    "UnionValidator",
    "TaggedUnionValidator",
    "LiteralValidator",
    "EnumValidator",
    "DefinitionRefValidator",
    "FunctionBeforeValidator",
    "FunctionAfterValidator",
    "FunctionPlainValidator",
    "FunctionWrapValidator",
    "NullableValidator",
    "DefaultValidator"
]
