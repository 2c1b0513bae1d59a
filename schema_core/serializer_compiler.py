"""
Serializer compiler: builds the serializer tree of a checked schema.

The schema compiler runs this after its checks pass, so every node handed
in here is known to be well formed.
"""

import logging
from typing import Any, Callable, Dict, Optional

from .config import CoreConfig
from .definitions import DefinitionsRegistry
from .inputs import MISSING
from .lookup import normalize_alias
from .serializers import (
    Serializer,
    AnySerializer,
    NoneSerializer,
    BoolSerializer,
    IntSerializer,
    FloatSerializer,
    DecimalSerializer,
    StrSerializer,
    BytesSerializer,
    DateSerializer,
    TimeSerializer,
    DatetimeSerializer,
    TimedeltaSerializer,
    ListSerializer,
    TupleSerializer,
    SetSerializer,
    FrozenSetSerializer,
    DictSerializer,
    FieldSerializer,
    FieldsSerializer,
    ModelSerializer,
    UnionSerializer,
    TaggedUnionSerializer,
    LiteralSerializer,
    EnumSerializer,
    DefinitionRefSerializer,
    FunctionPlainSerializer,
    FunctionWrapSerializer,
    ToStringSerializer,
    NullableSerializer,
    DefaultSerializer
)
from .utils import SchemaKeys

logger = logging.getLogger("schema_core")

K = SchemaKeys

_SIMPLE: Dict[str, type] = {
    "any": AnySerializer,
    "callable": AnySerializer,
    "is-instance": AnySerializer,
    "function-plain": AnySerializer,
    "none": NoneSerializer,
    "bool": BoolSerializer,
    "int": IntSerializer,
    "float": FloatSerializer,
    "decimal": DecimalSerializer,
    "str": StrSerializer,
    "bytes": BytesSerializer,
    "date": DateSerializer,
    "time": TimeSerializer,
    "datetime": DatetimeSerializer,
    "timedelta": TimedeltaSerializer,
}

_SEQUENCES: Dict[str, type] = {
    "list": ListSerializer,
    "set": SetSerializer,
    "frozenset": FrozenSetSerializer,
}


def static_default(schema: Dict[str, Any]) -> Any:
    """The static default of a field schema, or ``MISSING``."""
    if schema.get(K.TYPE) == "default":
        return schema.get(K.DEFAULT, MISSING)
    return MISSING


class SerializerCompiler:
    """
    Builds serializer nodes mirroring the validator nodes of a schema.

    Definitions live in their own registry; references resolve through its
    slots exactly as validator references do.
    """

    def __init__(self, config: CoreConfig, definitions: Dict[str, Dict[str, Any]]):
        """
        Initialize a new serializer compiler.

        Args:
            config: Effective configuration
            definitions: Checked definition schemas by name
        """
        self.config = config
        self.definitions = definitions
        self.serializers = DefinitionsRegistry("serializer")
        self._building: set = set()
        self._builders: Dict[str, Callable[[Dict[str, Any]], Serializer]] = {
            "tuple": self._build_tuple,
            "dict": self._build_dict,
            "typed-dict": self._build_fields,
            "model-fields": self._build_fields,
            "model": lambda schema: ModelSerializer(schema[K.CLS], self.build(schema[K.SCHEMA])),
            "union": self._build_union,
            "tagged-union": self._build_tagged_union,
            "literal": lambda schema: LiteralSerializer(list(schema[K.EXPECTED])),
            "enum": lambda schema: EnumSerializer(schema[K.CLS]),
            "definitions": lambda schema: self.build(schema[K.SCHEMA]),
            "definition-ref": self._build_definition_ref,
            "function-before": lambda schema: self.build(schema[K.SCHEMA]),
            "function-after": lambda schema: self.build(schema[K.SCHEMA]),
            "function-wrap": lambda schema: self.build(schema[K.SCHEMA]),
            "nullable": lambda schema: NullableSerializer(self.build(schema[K.SCHEMA])),
            "default": lambda schema: DefaultSerializer(self.build(schema[K.SCHEMA]),
                                                        static_default(schema)),
        }

    def compile(self, schema: Dict[str, Any]) -> Serializer:
        """Build every definition, then the root serializer."""
        for name in self.definitions:
            self._build_definition(name)
        root = self.build(schema)
        logger.debug("Built serializer %s", root)
        return root

    def build(self, schema: Dict[str, Any]) -> Serializer:
        ref = schema.get(K.REF)
        if ref is not None and ref not in self._building:
            return self._build_definition(ref)

        tag = schema[K.TYPE]
        if tag in _SIMPLE:
            serializer = _SIMPLE[tag]()
        elif tag in _SEQUENCES:
            serializer = _SEQUENCES[tag](self._optional(schema, K.ITEMS_SCHEMA))
        else:
            serializer = self._builders[tag](schema)

        custom = schema.get(K.SERIALIZATION)
        if custom is not None:
            serializer = self._build_custom(custom, serializer)
        return serializer

    def _build_definition(self, name: str) -> Serializer:
        slot = self.serializers.slot(name)
        if not slot.filled:
            self._building.add(name)
            try:
                node = self.build(self.definitions[name])
            finally:
                self._building.discard(name)
            self.serializers.define(name, node)
        return slot.value

    def _optional(self, schema: Dict[str, Any], key: str) -> Optional[Serializer]:
        child = schema.get(key)
        return self.build(child) if child is not None else None

    def _build_custom(self, custom: Dict[str, Any], fallback: Serializer) -> Serializer:
        when_used = custom.get(K.WHEN_USED, "always")
        if custom[K.TYPE] == "to-string":
            return ToStringSerializer(fallback, when_used)
        cls = FunctionPlainSerializer if custom[K.TYPE] == "function-plain" else FunctionWrapSerializer
        return cls(custom[K.FUNCTION], fallback, self._optional(custom, K.RETURN_SCHEMA), when_used)

    def _build_tuple(self, schema: Dict[str, Any]) -> Serializer:
        items = schema.get(K.ITEMS_SCHEMA)
        if items is None:
            return TupleSerializer([AnySerializer()], 0)
        return TupleSerializer([self.build(item) for item in items],
                               schema.get(K.VARIADIC_ITEM_INDEX))

    def _build_dict(self, schema: Dict[str, Any]) -> Serializer:
        return DictSerializer(self._optional(schema, K.KEYS_SCHEMA),
                              self._optional(schema, K.VALUES_SCHEMA))

    def _build_fields(self, schema: Dict[str, Any]) -> Serializer:
        total = schema.get(K.TOTAL, True)
        fields = []
        for name, entry in schema[K.FIELDS].items():
            field_schema = entry[K.SCHEMA]
            default = static_default(field_schema)
            required = entry.get(K.REQUIRED, total) and field_schema.get(K.TYPE) != "default"
            fields.append(FieldSerializer(
                name,
                self.build(field_schema),
                alias=entry.get(K.SERIALIZATION_ALIAS),
                exclude=entry.get(K.SERIALIZATION_EXCLUDE, False),
                exclude_if=entry.get(K.SERIALIZATION_EXCLUDE_IF),
                default=default,
                required=required,
            ))
        return FieldsSerializer(
            schema[K.TYPE],
            fields,
            extra_behavior=schema.get(K.EXTRA_BEHAVIOR, self.config.extra_behavior),
            extras_serializer=self._optional(schema, K.EXTRAS_SCHEMA),
        )

    def _build_union(self, schema: Dict[str, Any]) -> Serializer:
        choices = []
        for choice in schema[K.CHOICES]:
            if isinstance(choice, (list, tuple)):
                choice = choice[0]
            choices.append(self.build(choice))
        return UnionSerializer(choices)

    def _build_tagged_union(self, schema: Dict[str, Any]) -> Serializer:
        discriminator = schema[K.DISCRIMINATOR]
        if not callable(discriminator) and not isinstance(discriminator, str):
            discriminator = list(normalize_alias(discriminator)[0])
        return TaggedUnionSerializer(
            {tag: self.build(choice) for tag, choice in schema[K.CHOICES].items()},
            discriminator,
        )

    def _build_definition_ref(self, schema: Dict[str, Any]) -> Serializer:
        name = schema[K.SCHEMA_REF]
        return DefinitionRefSerializer(name, self.serializers.slot(name))
