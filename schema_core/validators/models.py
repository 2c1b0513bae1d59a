"""
Structured validators: typed-dict, model-fields and model.

Fields nodes make one pass over the declared fields (lookups, defaults and
missing-field errors) and one pass over the input keys (extra fields).
"""

from typing import Any, Dict, List, NamedTuple, Optional, Set

from .base import Validator, ValidationContext
from .functions import call_user_function
from ..errors import ErrorCode, OmitValue, ValidationFailure
from ..inputs import MISSING, InputError
from ..lookup import LookupKey


class Field:
    """
    One declared field of a fields node.

    Attributes:
        name: Output name of the field
        lookup: Where the field is read from in the input
        validator: Validator of the field value
        required: Whether absence is an error when no default exists
    """

    __slots__ = ("name", "lookup", "validator", "required")

    def __init__(self, name: str, lookup: LookupKey, validator: Validator, required: bool = True):
        self.name = name
        self.lookup = lookup
        self.validator = validator
        self.required = required

    def __repr__(self) -> str:
        return f"Field({self.name!r}, {self.validator})"


class FieldsResult(NamedTuple):
    """Output of a model-fields node."""
    fields: Dict[str, Any]
    extras: Optional[Dict[Any, Any]]
    fields_set: Set[str]


class FieldsValidator(Validator):
    """Shared field handling of typed-dict and model-fields nodes."""

    def __init__(self,
                 fields: List[Field],
                 extra_behavior: str = "ignore",
                 extras_validator: Optional[Validator] = None,
                 from_attributes: bool = False,
                 fail_fast: bool = False,
                 strict: bool = False):
        self.fields = fields
        self.extra_behavior = extra_behavior
        self.extras_validator = extras_validator
        self.from_attributes = from_attributes
        self.fail_fast = fail_fast
        self.strict = strict

    def _validate_fields(self, value: Any, context: ValidationContext) -> FieldsResult:
        try:
            source = context.input.validate_fields(
                value, context.strict_or(self.strict), self.from_attributes).unpack(context)
        except InputError as exc:
            raise context.input_failure(exc, value)

        output: Dict[str, Any] = {}
        fields_set: Set[str] = set()
        used_keys: Set[Any] = set()
        errors = context.accumulator(self.fail_fast)

        with context.with_fields(output):
            for field in self.fields:
                context.field_name = field.name
                found, path = field.lookup.find(source)
                if found is not MISSING:
                    used_keys.add(path[0])
                    with context.with_path(*path):
                        try:
                            output[field.name] = field.validator.validate(found, context)
                            fields_set.add(field.name)
                        except ValidationFailure as failure:
                            if errors.add(failure):
                                break
                        except OmitValue:
                            pass
                    continue

                with context.with_path(*field.lookup.error_loc):
                    try:
                        default = field.validator.default_value(context)
                    except ValidationFailure as failure:
                        if errors.add(failure):
                            break
                        continue
                    except OmitValue:
                        continue
                    if default is not MISSING:
                        output[field.name] = default
                    elif field.required:
                        if errors.add(context.fail(ErrorCode.MISSING, value)):
                            break

        extras = None
        if not (errors and errors.fail_fast):
            extras = self._validate_extras(source, used_keys, context, errors)
        errors.raise_if_errors()
        context.fields_set_count = len(fields_set)
        return FieldsResult(output, extras, fields_set)

    def _validate_extras(self, source, used_keys: Set[Any], context: ValidationContext,
                         errors) -> Optional[Dict[Any, Any]]:
        if self.extra_behavior == "ignore":
            return None
        extras: Dict[Any, Any] = {}
        keys = source.keys()
        if keys is None:
            return extras
        for key in keys:
            if key in used_keys:
                continue
            item = source.get(key)
            with context.with_path(context.input.dict_key_location(key)):
                if self.extra_behavior == "forbid":
                    if errors.add(context.fail(ErrorCode.EXTRA_FORBIDDEN, item)):
                        break
                    continue
                if self.extras_validator is None:
                    extras[key] = item
                    continue
                try:
                    extras[key] = self.extras_validator.validate(item, context)
                except ValidationFailure as failure:
                    if errors.add(failure):
                        break
                except OmitValue:
                    pass
        return extras

    def __str__(self) -> str:
        names = ", ".join(field.name for field in self.fields)
        return f"{self.__class__.__name__}({names})"


class TypedDictValidator(FieldsValidator):
    """Validates a mapping with declared keys into a plain dict."""

    kind = "typed-dict"

    def validate(self, value: Any, context: ValidationContext) -> Dict[Any, Any]:
        result = self._validate_fields(value, context)
        if result.extras:
            output = dict(result.fields)
            output.update(result.extras)
            return output
        return result.fields


class ModelFieldsValidator(FieldsValidator):
    """Validates the fields of a model; returns a ``FieldsResult``."""

    kind = "model-fields"

    def validate(self, value: Any, context: ValidationContext) -> FieldsResult:
        return self._validate_fields(value, context)


class ModelValidator(Validator):
    """
    Builds instances of a class from validated fields.

    Instances are created with ``cls.__new__`` and their ``__dict__`` is
    filled directly, so ``__init__`` never runs. Each instance records the
    names of the fields present in the input in ``__fields_set__`` and the
    validated extra fields in ``__model_extra__``.
    """

    kind = "model"

    def __init__(self,
                 cls: type,
                 validator: Validator,
                 revalidate_instances: str = "never",
                 post_init: Optional[str] = None,
                 strict: bool = False):
        self.cls = cls
        self.validator = validator
        self.revalidate_instances = revalidate_instances
        self.post_init = post_init
        self.strict = strict

    def validate(self, value: Any, context: ValidationContext) -> Any:
        match = context.input.model_instance(value, self.cls)
        if match is not None:
            instance = match.unpack(context)
            if self._should_revalidate(instance):
                return self._revalidate(instance, context)
            context.fields_set_count = len(getattr(instance, "__fields_set__", ()))
            return instance

        if context.strict_or(self.strict) and context.input.carries_instances:
            raise context.fail(ErrorCode.MODEL_TYPE, value, class_name=self.cls.__name__)

        result = self.validator.validate(value, context)
        return self._build(result, value, context)

    def _should_revalidate(self, instance: Any) -> bool:
        if self.revalidate_instances == "always":
            return True
        if self.revalidate_instances == "subclass-instances":
            return type(instance) is not self.cls
        return False

    def _revalidate(self, instance: Any, context: ValidationContext) -> Any:
        data = {key: item for key, item in vars(instance).items() if not key.startswith("__")}
        data.update(getattr(instance, "__model_extra__", None) or {})
        result = self.validator.validate(data, context)
        built = self._build(result, instance, context)
        original = getattr(instance, "__fields_set__", None)
        if original is not None:
            built.__dict__["__fields_set__"] = set(original)
        return built

    def _build(self, result: Any, value: Any, context: ValidationContext) -> Any:
        if isinstance(result, FieldsResult):
            fields, extras, fields_set = result
        else:
            fields, extras, fields_set = dict(result), None, set(result)

        instance = self.cls.__new__(self.cls)
        instance.__dict__.update(fields)
        instance.__dict__["__fields_set__"] = fields_set
        instance.__dict__["__model_extra__"] = extras
        if self.post_init is not None:
            hook = getattr(instance, self.post_init)
            call_user_function(hook, (context.user_context,), value, context)
        return instance

    def __str__(self) -> str:
        return f"ModelValidator({self.cls.__name__})"
