"""
Serializer tree node set.
"""

from .base import Serializer, SerializationState, SerializationInfo, infer_serialize
from .filters import normalize_filter
from .simple import (
    AnySerializer,
    NoneSerializer,
    BoolSerializer,
    IntSerializer,
    FloatSerializer,
    DecimalSerializer,
    StrSerializer,
    BytesSerializer
)
from .datetimes import DateSerializer, TimeSerializer, DatetimeSerializer, TimedeltaSerializer
from .arrays import ListSerializer, TupleSerializer, SetSerializer, FrozenSetSerializer
from .dicts import DictSerializer
from .models import FieldSerializer, FieldsSerializer, ModelSerializer
from .unions import UnionSerializer, TaggedUnionSerializer
from .literals import LiteralSerializer, EnumSerializer
from .references import DefinitionRefSerializer
from .functions import (
    WHEN_USED,
    FunctionPlainSerializer,
    FunctionWrapSerializer,
    ToStringSerializer
)
from .defaults import NullableSerializer, DefaultSerializer

__all__ = [
    "Serializer",
    "SerializationState",
    "SerializationInfo",
    "infer_serialize",
    "normalize_filter",
    "AnySerializer",
    "NoneSerializer",
    "BoolSerializer",
    "IntSerializer",
    "FloatSerializer",
    "DecimalSerializer",
    "StrSerializer",
    "BytesSerializer",
    "DateSerializer",
    "TimeSerializer",
    "DatetimeSerializer",
    "TimedeltaSerializer",
    "ListSerializer",
    "TupleSerializer",
    "SetSerializer",
    "FrozenSetSerializer",
    "DictSerializer",
    "FieldSerializer",
    "FieldsSerializer",
    "ModelSerializer",
    "UnionSerializer",
    "TaggedUnionSerializer",
    "LiteralSerializer",
    "EnumSerializer",
    "DefinitionRefSerializer",
    "WHEN_USED",
    "FunctionPlainSerializer",
    "FunctionWrapSerializer",
    "ToStringSerializer",
    "NullableSerializer",
    "DefaultSerializer"
]
