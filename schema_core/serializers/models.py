"""
Structured serializers: typed-dict, model-fields and model.
"""

from typing import Any, Callable, Dict, List, Optional, Set

from .base import (
    Serializer,
    SerializationState,
    infer_serialize,
    json_key,
    model_parts,
)
from .filters import filter_item
from ..errors import ErrorCode, SerializationError
from ..inputs import MISSING


class FieldSerializer:
    """
    One declared field of a fields serializer.

    Attributes:
        name: Field name in the validated value
        alias: Output key used when serializing by alias
        serializer: Serializer of the field value
        exclude: Never serialize this field
        exclude_if: Predicate; the field is omitted when it returns true
        default: The field's static default, used by ``exclude_defaults``
        required: Whether the field is always present in validated output
    """

    __slots__ = ("name", "alias", "serializer", "exclude", "exclude_if", "default", "required")

    def __init__(self,
                 name: str,
                 serializer: Serializer,
                 alias: Optional[str] = None,
                 exclude: bool = False,
                 exclude_if: Optional[Callable[[Any], bool]] = None,
                 default: Any = MISSING,
                 required: bool = True):
        self.name = name
        self.alias = alias
        self.serializer = serializer
        self.exclude = exclude
        self.exclude_if = exclude_if
        self.default = default
        self.required = required

    def output_key(self, state: SerializationState) -> str:
        if self.alias is not None and state.use_alias:
            return self.alias
        return self.name

    def __repr__(self) -> str:
        return f"FieldSerializer({self.name!r}, {self.serializer})"


class FieldsSerializer(Serializer):
    """
    Serializes a mapping of declared fields.

    Fields are emitted in declaration order, extras (when kept) after them.
    """

    def __init__(self,
                 kind: str,
                 fields: List[FieldSerializer],
                 extra_behavior: str = "ignore",
                 extras_serializer: Optional[Serializer] = None):
        self.kind = kind
        self.fields = fields
        self.extra_behavior = extra_behavior
        self.extras_serializer = extras_serializer
        self.names = {field.name for field in fields}

    def accepts(self, value: Any, exact: bool) -> bool:
        if not isinstance(value, dict):
            return False
        if not exact:
            return True
        if any(field.required and field.name not in value for field in self.fields):
            return False
        return self.extra_behavior == "allow" or set(value) <= self.names

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Dict[Any, Any]:
        if not isinstance(value, dict):
            raise state.mismatch(self.kind, value)
        extras = None
        if self.extra_behavior == "allow":
            extras = {key: item for key, item in value.items() if key not in self.names}
        with state.visit(value):
            return self.serialize_fields(value, state, include, exclude, None, extras)

    def serialize_fields(self,
                         fields: Dict[str, Any],
                         state: SerializationState,
                         include: Any,
                         exclude: Any,
                         fields_set: Optional[Set[str]],
                         extras: Optional[Dict[Any, Any]]) -> Dict[Any, Any]:
        """
        Serialize field values and extras into one output mapping.

        Args:
            fields: Declared field values by name
            state: Serialization state
            include: Include filter keyed by field name
            exclude: Exclude filter keyed by field name
            fields_set: Names of the fields present in the input, for models
            extras: Extra entries to emit after the declared fields
        """
        output: Dict[Any, Any] = {}
        saved_field_name = state.field_name
        try:
            for field in self.fields:
                if field.name not in fields or field.exclude:
                    continue
                skip, next_include, next_exclude = filter_item(field.name, include, exclude)
                if skip:
                    continue
                item = fields[field.name]
                state.field_name = field.name
                with state.with_path(field.name):
                    if self._omit(field, item, state, fields_set):
                        continue
                    output[field.output_key(state)] = field.serializer.serialize(
                        item, state, next_include, next_exclude)
        finally:
            state.field_name = saved_field_name

        for key, item in (extras or {}).items():
            skip, next_include, next_exclude = filter_item(key, include, exclude)
            if skip or (state.exclude_none and item is None):
                continue
            out_key = json_key(key, state) if state.json else key
            with state.with_path(key):
                if self.extras_serializer is None:
                    output[out_key] = infer_serialize(item, state, next_include, next_exclude)
                else:
                    output[out_key] = self.extras_serializer.serialize(
                        item, state, next_include, next_exclude)
        return output

    @staticmethod
    def _omit(field: FieldSerializer, item: Any, state: SerializationState,
              fields_set: Optional[Set[str]]) -> bool:
        if state.exclude_none and item is None:
            return True
        if state.exclude_unset and fields_set is not None and field.name not in fields_set:
            return True
        if (state.exclude_defaults and not state.round_trip
                and field.default is not MISSING and item == field.default):
            return True
        if field.exclude_if is not None:
            try:
                return bool(field.exclude_if(item))
            except SerializationError:
                raise
            except Exception as exc:
                raise state.fail(ErrorCode.SERIALIZATION_FUNCTION_ERROR, item,
                                 function=getattr(field.exclude_if, "__name__", "exclude_if"),
                                 error_type=type(exc).__name__, error=str(exc))
        return False

    def __str__(self) -> str:
        names = ", ".join(field.name for field in self.fields)
        return f"FieldsSerializer({self.kind}: {names})"


class ModelSerializer(Serializer):
    """Serializes a model instance from its ``__dict__``."""

    kind = "model"

    def __init__(self, cls: type, serializer: Serializer):
        self.cls = cls
        self.serializer = serializer

    def accepts(self, value: Any, exact: bool) -> bool:
        if exact:
            return type(value) is self.cls
        return isinstance(value, self.cls)

    def serialize(self, value: Any, state: SerializationState,
                  include: Any = None, exclude: Any = None) -> Any:
        if not isinstance(value, self.cls):
            raise state.mismatch(self.cls.__name__, value)

        fields, fields_set, extras = model_parts(value)
        with state.visit(value):
            if isinstance(self.serializer, FieldsSerializer):
                return self.serializer.serialize_fields(
                    fields, state, include, exclude, fields_set, extras)
            return self.serializer.serialize(fields, state, include, exclude)

    def __str__(self) -> str:
        return f"ModelSerializer({self.cls.__name__})"
