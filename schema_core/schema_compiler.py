"""
Schema compiler: schema description to validator and serializer trees.

Compilation runs in three phases:

Phase 1: Check every node and collect definitions and references
Phase 2: Resolve references and reject self-reaching wrapper cycles
Phase 3: Build definitions through registry slots, then the root
"""

import logging
import re
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import CoreConfig
from .definitions import DefinitionsRegistry
from .errors import SchemaError
from .graph import DefinitionGraph
from .inputs import MISSING
from .lookup import LookupKey
from .serializer_compiler import SerializerCompiler
from .serializers import WHEN_USED, Serializer
from .utils import JsonPointer, SchemaKeys
from .validators import (
    Validator,
    AnyValidator,
    NoneValidator,
    BoolValidator,
    IntValidator,
    FloatValidator,
    DecimalValidator,
    StrValidator,
    BytesValidator,
    DateValidator,
    TimeValidator,
    DatetimeValidator,
    TimedeltaValidator,
    CallableValidator,
    IsInstanceValidator,
    ListValidator,
    TupleValidator,
    SetValidator,
    FrozenSetValidator,
    DictValidator,
    Field,
    TypedDictValidator,
    ModelFieldsValidator,
    ModelValidator,
    UnionValidator,
    TaggedUnionValidator,
    LiteralValidator,
    EnumValidator,
    DefinitionRefValidator,
    FunctionBeforeValidator,
    FunctionAfterValidator,
    FunctionPlainValidator,
    FunctionWrapValidator,
    NullableValidator,
    DefaultValidator
)

logger = logging.getLogger("schema_core")

K = SchemaKeys

# A checker returns a problem message, or None when the value is acceptable
Checker = Callable[[Any], Optional[str]]


def _is_bool(value: Any) -> Optional[str]:
    return None if isinstance(value, bool) else "must be a boolean"


def _is_str(value: Any) -> Optional[str]:
    return None if isinstance(value, str) else "must be a string"


def _is_length(value: Any) -> Optional[str]:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return None
    return "must be a non-negative integer"


def _is_number(value: Any) -> Optional[str]:
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return None
    return "must be a number"


def _as_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _is_positive_number(value: Any) -> Optional[str]:
    problem = _is_number(value)
    if problem is None and not value > 0:
        return "must be greater than 0"
    return problem


def _is_anything(value: Any) -> Optional[str]:
    return None


def _is_callable(value: Any) -> Optional[str]:
    return None if callable(value) else "must be callable"


def _is_class(value: Any) -> Optional[str]:
    return None if isinstance(value, type) else "must be a class"


def _is_enum_class(value: Any) -> Optional[str]:
    if isinstance(value, type) and issubclass(value, Enum):
        return None
    return "must be an Enum subclass"


def _is_schema(value: Any) -> Optional[str]:
    return None if isinstance(value, dict) else "must be a schema dict"


def _is_list(value: Any) -> Optional[str]:
    return None if isinstance(value, (list, tuple)) else "must be a list"


def _is_mapping(value: Any) -> Optional[str]:
    return None if isinstance(value, dict) else "must be a dict"


def _is_pattern(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return "must be a string"
    try:
        re.compile(value)
    except re.error as exc:
        return f"is not a valid regular expression: {exc}"
    return None


def _is_path(value: Any) -> bool:
    return (isinstance(value, (list, tuple)) and len(value) > 0
            and all(isinstance(segment, (str, int)) and not isinstance(segment, bool)
                    for segment in value))


def _is_alias(value: Any) -> Optional[str]:
    if isinstance(value, str) or _is_path(value):
        return None
    if isinstance(value, (list, tuple)) and value and all(_is_path(path) for path in value):
        return None
    return "must be a string, a path or a list of paths"


def _is_discriminator(value: Any) -> Optional[str]:
    if isinstance(value, str) or callable(value) or _is_alias(value) is None:
        return None
    return "must be a field name, a path or a callable"


def _one_of(*options: str) -> Checker:
    def check(value: Any) -> Optional[str]:
        if value in options:
            return None
        return "must be one of: " + ", ".join(repr(option) for option in options)
    return check


_BOUNDS: Dict[str, Checker] = {K.GT: _is_number, K.GE: _is_number, K.LT: _is_number, K.LE: _is_number}
_TEMPORAL: Dict[str, Checker] = {K.STRICT: _is_bool, K.GT: _is_anything, K.GE: _is_anything,
                                 K.LT: _is_anything, K.LE: _is_anything}
_SEQUENCE: Dict[str, Checker] = {K.ITEMS_SCHEMA: _is_schema, K.MIN_LENGTH: _is_length,
                                 K.MAX_LENGTH: _is_length, K.FAIL_FAST: _is_bool, K.STRICT: _is_bool}
_FIELDS: Dict[str, Checker] = {
    K.FIELDS: _is_mapping,
    K.EXTRA_BEHAVIOR: _one_of("ignore", "forbid", "allow"),
    K.EXTRAS_SCHEMA: _is_schema,
    K.POPULATE_BY_NAME: _is_bool,
    K.FROM_ATTRIBUTES: _is_bool,
    K.FAIL_FAST: _is_bool,
    K.STRICT: _is_bool,
}
_FUNCTION: Dict[str, Checker] = {K.FUNCTION: _is_callable, K.SCHEMA: _is_schema, K.FIELD_NAME: _is_str}
_CUSTOM_ERROR: Dict[str, Checker] = {K.CUSTOM_ERROR_TYPE: _is_str, K.CUSTOM_ERROR_MESSAGE: _is_str}

# Allowed keys per schema type, besides the common keys
NODE_KEYS: Dict[str, Dict[str, Checker]] = {
    "any": {},
    "none": {},
    "bool": {K.STRICT: _is_bool},
    "int": {K.STRICT: _is_bool, K.MULTIPLE_OF: _is_positive_number, **_BOUNDS},
    "float": {K.STRICT: _is_bool, K.MULTIPLE_OF: _is_positive_number, K.ALLOW_INF_NAN: _is_bool,
              **_BOUNDS},
    "decimal": {K.STRICT: _is_bool, K.MULTIPLE_OF: _is_positive_number, K.ALLOW_INF_NAN: _is_bool,
                K.MAX_DIGITS: _is_length, K.DECIMAL_PLACES: _is_length, **_BOUNDS},
    "str": {K.STRICT: _is_bool, K.MIN_LENGTH: _is_length, K.MAX_LENGTH: _is_length,
            K.PATTERN: _is_pattern, K.STRIP_WHITESPACE: _is_bool, K.TO_LOWER: _is_bool,
            K.TO_UPPER: _is_bool, K.COERCE_NUMBERS_TO_STR: _is_bool},
    "bytes": {K.STRICT: _is_bool, K.MIN_LENGTH: _is_length, K.MAX_LENGTH: _is_length},
    "date": _TEMPORAL,
    "time": _TEMPORAL,
    "timedelta": _TEMPORAL,
    "datetime": {K.TZ_CONSTRAINT: _one_of("aware", "naive"), **_TEMPORAL},
    "callable": {},
    "is-instance": {K.CLS: _is_class},
    "list": _SEQUENCE,
    "set": _SEQUENCE,
    "frozenset": _SEQUENCE,
    "tuple": {**_SEQUENCE, K.ITEMS_SCHEMA: _is_list, K.VARIADIC_ITEM_INDEX: _is_length},
    "dict": {K.KEYS_SCHEMA: _is_schema, K.VALUES_SCHEMA: _is_schema, K.MIN_LENGTH: _is_length,
             K.MAX_LENGTH: _is_length, K.FAIL_FAST: _is_bool, K.STRICT: _is_bool},
    "typed-dict": {**_FIELDS, K.TOTAL: _is_bool},
    "model-fields": _FIELDS,
    "model": {K.CLS: _is_class, K.SCHEMA: _is_schema,
              K.REVALIDATE_INSTANCES: _one_of("never", "always", "subclass-instances"),
              K.POST_INIT: _is_str, K.STRICT: _is_bool},
    "union": {K.CHOICES: _is_list, K.MODE: _one_of("smart", "left_to_right"), K.STRICT: _is_bool,
              **_CUSTOM_ERROR},
    "tagged-union": {K.CHOICES: _is_mapping, K.DISCRIMINATOR: _is_discriminator,
                     K.FROM_ATTRIBUTES: _is_bool, K.STRICT: _is_bool, **_CUSTOM_ERROR},
    "literal": {K.EXPECTED: _is_list},
    "enum": {K.CLS: _is_enum_class, K.MEMBERS: _is_list, K.SUB_TYPE: _one_of("int", "float", "str"),
             K.MISSING: _is_callable, K.STRICT: _is_bool},
    "definitions": {K.SCHEMA: _is_schema, K.DEFINITIONS: _is_list},
    "definition-ref": {K.SCHEMA_REF: _is_str},
    "function-before": _FUNCTION,
    "function-after": _FUNCTION,
    "function-wrap": _FUNCTION,
    "function-plain": {K.FUNCTION: _is_callable, K.FIELD_NAME: _is_str},
    "nullable": {K.SCHEMA: _is_schema},
    "default": {K.SCHEMA: _is_schema, K.DEFAULT: _is_anything, K.DEFAULT_FACTORY: _is_callable,
                K.DEFAULT_FACTORY_TAKES_DATA: _is_bool,
                K.ON_ERROR: _one_of("raise", "omit", "default"),
                K.VALIDATE_DEFAULT: _is_bool, K.COPY_DEFAULT: _is_bool},
}

REQUIRED_KEYS: Dict[str, Tuple[str, ...]] = {
    "is-instance": (K.CLS,),
    "typed-dict": (K.FIELDS,),
    "model-fields": (K.FIELDS,),
    "model": (K.CLS, K.SCHEMA),
    "union": (K.CHOICES,),
    "tagged-union": (K.CHOICES, K.DISCRIMINATOR),
    "literal": (K.EXPECTED,),
    "enum": (K.CLS,),
    "definitions": (K.SCHEMA, K.DEFINITIONS),
    "definition-ref": (K.SCHEMA_REF,),
    "function-before": (K.FUNCTION, K.SCHEMA),
    "function-after": (K.FUNCTION, K.SCHEMA),
    "function-wrap": (K.FUNCTION, K.SCHEMA),
    "function-plain": (K.FUNCTION,),
    "nullable": (K.SCHEMA,),
    "default": (K.SCHEMA,),
}

_FIELD_ENTRY: Dict[str, Checker] = {
    K.SCHEMA: _is_schema,
    K.VALIDATION_ALIAS: _is_alias,
    K.SERIALIZATION_ALIAS: _is_str,
    K.SERIALIZATION_EXCLUDE: _is_bool,
    K.SERIALIZATION_EXCLUDE_IF: _is_callable,
    K.METADATA: _is_mapping,
}

FIELD_KEYS: Dict[str, Dict[str, Checker]] = {
    "typed-dict-field": {**_FIELD_ENTRY, K.REQUIRED: _is_bool},
    "model-field": _FIELD_ENTRY,
}

_FIELD_TYPE_FOR = {"typed-dict": "typed-dict-field", "model-fields": "model-field"}

SERIALIZATION_KEYS: Dict[str, Dict[str, Checker]] = {
    "function-plain": {K.FUNCTION: _is_callable, K.RETURN_SCHEMA: _is_schema,
                       K.WHEN_USED: _one_of(*WHEN_USED)},
    "function-wrap": {K.FUNCTION: _is_callable, K.RETURN_SCHEMA: _is_schema,
                      K.WHEN_USED: _one_of(*WHEN_USED)},
    "to-string": {K.WHEN_USED: _one_of(*WHEN_USED)},
}


class CompiledSchema:
    """
    The immutable product of compilation.

    Attributes:
        schema: The schema description it was compiled from
        config: Effective configuration
        validator: Root validator node
        serializer: Root serializer node
        validators: Frozen registry of validator definitions
        serializers: Frozen registry of serializer definitions
    """

    def __init__(self,
                 schema: Dict[str, Any],
                 config: CoreConfig,
                 validator: Validator,
                 serializer: Serializer,
                 validators: DefinitionsRegistry,
                 serializers: DefinitionsRegistry):
        self.schema = schema
        self.config = config
        self.validator = validator
        self.serializer = serializer
        self.validators = validators
        self.serializers = serializers

    @property
    def title(self) -> str:
        cls = self.schema.get(K.CLS)
        if isinstance(cls, type):
            return cls.__name__
        return self.schema.get(K.REF) or self.schema.get(K.TYPE, "schema")

    def __repr__(self) -> str:
        return f"CompiledSchema({self.validator}, definitions={len(self.validators)})"


class SchemaChecker:
    """
    Phases 1 and 2: structural checks over a whole schema description.

    Every problem is collected with its schema path; nothing is built.
    """

    def __init__(self, config: CoreConfig):
        self.config = config
        self.problems: List[Tuple[str, str]] = []
        self.definitions: Dict[str, Dict[str, Any]] = {}
        self.definition_paths: Dict[str, str] = {}
        self.references: List[Tuple[str, str]] = []
        self.edges: List[Tuple[str, str, bool]] = []
        self.graph = DefinitionGraph()

    def check(self, schema: Any) -> None:
        self._check_node(schema, [], None, False)
        self._resolve()

    def problem(self, parts: List[Any], message: str) -> None:
        self.problems.append((JsonPointer.from_parts(parts), message))

    def _check_node(self, schema: Any, parts: List[Any], owner: Optional[str],
                    wrapper_only: bool) -> None:
        """
        Check one node and recurse into its children.

        Args:
            schema: Node description
            parts: Schema path segments of the node
            owner: Name of the innermost enclosing definition
            wrapper_only: No input-consuming node lies between ``owner`` and here
        """
        if not isinstance(schema, dict):
            self.problem(parts, f"Schema must be a dict, not {type(schema).__name__}")
            return
        tag = schema.get(K.TYPE)
        if tag is None:
            self.problem(parts, "Schema is missing the 'type' key")
            return
        if tag not in NODE_KEYS:
            self.problem(parts, f"Unknown schema type {tag!r}")
            return

        self._check_keys(schema, parts, tag, NODE_KEYS[tag], REQUIRED_KEYS.get(tag, ()))
        self._check_common(schema, parts)

        ref = schema.get(K.REF)
        if isinstance(ref, str):
            self._register(ref, schema, parts)
            if owner is not None:
                self.edges.append((owner, ref, wrapper_only))
            owner, wrapper_only = ref, True

        if tag == "definition-ref" and isinstance(schema.get(K.SCHEMA_REF), str):
            target = schema[K.SCHEMA_REF]
            self.references.append((target, JsonPointer.from_parts(parts)))
            if owner is not None:
                self.edges.append((owner, target, wrapper_only))

        self._check_combinations(schema, parts, tag)
        self._check_children(schema, parts, tag, owner, wrapper_only and tag in K.WRAPPER_TYPES)

    def _check_keys(self, schema: Dict[str, Any], parts: List[Any], tag: str,
                    allowed: Dict[str, Checker], required: Tuple[str, ...],
                    common: frozenset = K.COMMON) -> None:
        for key, value in schema.items():
            if key in common:
                continue
            checker = allowed.get(key)
            if checker is None:
                self.problem(parts + [key], f"Unknown key '{key}' for schema type '{tag}'")
                continue
            message = checker(value)
            if message:
                self.problem(parts + [key], f"'{key}' {message}")
        for key in required:
            if key not in schema:
                self.problem(parts, f"Missing required key '{key}' for schema type '{tag}'")

    def _check_common(self, schema: Dict[str, Any], parts: List[Any]) -> None:
        if K.REF in schema and not isinstance(schema[K.REF], str):
            self.problem(parts + [K.REF], "'ref' must be a string")
        if K.METADATA in schema and not isinstance(schema[K.METADATA], dict):
            self.problem(parts + [K.METADATA], "'metadata' must be a dict")
        if K.SERIALIZATION in schema:
            self._check_serialization(schema[K.SERIALIZATION], parts + [K.SERIALIZATION])

    def _check_serialization(self, custom: Any, parts: List[Any]) -> None:
        if not isinstance(custom, dict):
            self.problem(parts, "'serialization' must be a dict")
            return
        tag = custom.get(K.TYPE)
        if tag not in SERIALIZATION_KEYS:
            self.problem(parts, f"Unknown serialization type {tag!r}")
            return
        required = (K.FUNCTION,) if tag != "to-string" else ()
        self._check_keys(custom, parts, tag, SERIALIZATION_KEYS[tag], required,
                         common=frozenset({K.TYPE}))
        if isinstance(custom.get(K.RETURN_SCHEMA), dict):
            self._check_node(custom[K.RETURN_SCHEMA], parts + [K.RETURN_SCHEMA], None, False)

    def _register(self, name: str, schema: Dict[str, Any], parts: List[Any]) -> None:
        if name in self.definitions:
            self.problem(parts, f"Duplicate definition '{name}' "
                                f"(first defined at '{self.definition_paths[name] or '/'}')")
            return
        self.definitions[name] = schema
        self.definition_paths[name] = JsonPointer.from_parts(parts)

    def _check_combinations(self, schema: Dict[str, Any], parts: List[Any], tag: str) -> None:
        if K.GT in schema and K.GE in schema:
            self.problem(parts, "'gt' and 'ge' cannot be combined")
        if K.LT in schema and K.LE in schema:
            self.problem(parts, "'lt' and 'le' cannot be combined")

        min_length, max_length = schema.get(K.MIN_LENGTH), schema.get(K.MAX_LENGTH)
        if (_is_length(min_length) is None and _is_length(max_length) is None
                and min_length > max_length):
            self.problem(parts, f"'min_length' ({min_length}) is greater than 'max_length' ({max_length})")

        if tag == "decimal" and schema.get(K.ALLOW_INF_NAN) is True and (
                K.MAX_DIGITS in schema or K.DECIMAL_PLACES in schema):
            self.problem(parts, "'allow_inf_nan' cannot be combined with 'max_digits' or 'decimal_places'")

        if tag in _FIELD_TYPE_FOR and K.EXTRAS_SCHEMA in schema:
            behavior = schema.get(K.EXTRA_BEHAVIOR, self.config.extra_behavior)
            if behavior != "allow":
                self.problem(parts, "'extras_schema' requires extra_behavior 'allow'")

        if tag == "default":
            if K.DEFAULT in schema and K.DEFAULT_FACTORY in schema:
                self.problem(parts, "'default' and 'default_factory' cannot be combined")
            elif K.DEFAULT not in schema and K.DEFAULT_FACTORY not in schema:
                self.problem(parts, "One of 'default' or 'default_factory' is required")

        if tag == "literal" and isinstance(schema.get(K.EXPECTED), (list, tuple)) \
                and not schema[K.EXPECTED]:
            self.problem(parts + [K.EXPECTED], "'expected' must not be empty")

        if tag in ("union", "tagged-union") and isinstance(schema.get(K.CHOICES), (list, tuple, dict)) \
                and not schema[K.CHOICES]:
            self.problem(parts + [K.CHOICES], "'choices' must not be empty")

        if tag == "tuple":
            index = schema.get(K.VARIADIC_ITEM_INDEX)
            items = schema.get(K.ITEMS_SCHEMA, [])
            if _is_length(index) is None and isinstance(items, (list, tuple)) and index >= len(items):
                self.problem(parts + [K.VARIADIC_ITEM_INDEX],
                             f"'variadic_item_index' {index} is out of range for {len(items)} items")

        if tag == "enum":
            self._check_enum(schema, parts)

    def _check_enum(self, schema: Dict[str, Any], parts: List[Any]) -> None:
        cls = schema.get(K.CLS)
        if _is_enum_class(cls) is not None:
            return
        members = schema.get(K.MEMBERS, list(cls))
        if not members:
            self.problem(parts, f"Enum {cls.__name__} has no members")
        for index, member in enumerate(members if isinstance(members, (list, tuple)) else []):
            if not isinstance(member, cls):
                self.problem(parts + [K.MEMBERS, index], f"{member!r} is not a member of {cls.__name__}")

    def _check_children(self, schema: Dict[str, Any], parts: List[Any], tag: str,
                        owner: Optional[str], wrapper_only: bool) -> None:
        def visit(child: Any, *segments: Any) -> None:
            self._check_node(child, parts + list(segments), owner, wrapper_only)

        def visit_consumed(child: Any, *segments: Any) -> None:
            self._check_node(child, parts + list(segments), owner, False)

        for key in (K.ITEMS_SCHEMA, K.KEYS_SCHEMA, K.VALUES_SCHEMA, K.EXTRAS_SCHEMA):
            if isinstance(schema.get(key), dict):
                visit_consumed(schema[key], key)

        if tag == "tuple" and isinstance(schema.get(K.ITEMS_SCHEMA), (list, tuple)):
            for index, child in enumerate(schema[K.ITEMS_SCHEMA]):
                visit_consumed(child, K.ITEMS_SCHEMA, index)

        elif tag in _FIELD_TYPE_FOR and isinstance(schema.get(K.FIELDS), dict):
            for name, entry in schema[K.FIELDS].items():
                self._check_field(entry, parts + [K.FIELDS, name], _FIELD_TYPE_FOR[tag], owner)

        elif tag == "union" and isinstance(schema.get(K.CHOICES), (list, tuple)):
            for index, choice in enumerate(schema[K.CHOICES]):
                if isinstance(choice, (list, tuple)):
                    if len(choice) != 2 or not isinstance(choice[1], str):
                        self.problem(parts + [K.CHOICES, index],
                                     "A labelled choice must be a [schema, label] pair")
                        continue
                    visit(choice[0], K.CHOICES, index, 0)
                else:
                    visit(choice, K.CHOICES, index)

        elif tag == "tagged-union" and isinstance(schema.get(K.CHOICES), dict):
            for tag_value, choice in schema[K.CHOICES].items():
                visit(choice, K.CHOICES, tag_value)

        elif tag == "definitions" and isinstance(schema.get(K.DEFINITIONS), (list, tuple)):
            for index, definition in enumerate(schema[K.DEFINITIONS]):
                if isinstance(definition, dict) and not isinstance(definition.get(K.REF), str):
                    self.problem(parts + [K.DEFINITIONS, index], "Definitions must carry a 'ref'")
                    continue
                self._check_node(definition, parts + [K.DEFINITIONS, index], None, False)

        if isinstance(schema.get(K.SCHEMA), dict):
            visit(schema[K.SCHEMA], K.SCHEMA)

    def _check_field(self, entry: Any, parts: List[Any], field_type: str, owner: Optional[str]) -> None:
        if not isinstance(entry, dict):
            self.problem(parts, f"Field must be a dict, not {type(entry).__name__}")
            return
        if entry.get(K.TYPE) != field_type:
            self.problem(parts, f"Field type must be '{field_type}'")
            return
        self._check_keys(entry, parts, field_type, FIELD_KEYS[field_type], (K.SCHEMA,),
                         common=frozenset({K.TYPE}))
        if isinstance(entry.get(K.SCHEMA), dict):
            self._check_node(entry[K.SCHEMA], parts + [K.SCHEMA], owner, False)

    def _resolve(self) -> None:
        for target, path in self.references:
            if target not in self.definitions:
                self.problems.append((path, f"Definition '{target}' is not defined"))

        for name in self.definitions:
            self.graph.add_definition(name)
        for source, target, wrapper_only in self.edges:
            self.graph.add_reference(source, target, wrapper_only)

        for cycle in self.graph.wrapper_cycles():
            chain = " -> ".join(cycle + [cycle[0]])
            self.problems.append((self.definition_paths[cycle[0]],
                                  f"Definition cycle never consumes input: {chain}"))


class SchemaCompiler:
    """
    Compiles schema descriptions into validator and serializer trees.

    A compiler instance may be reused; all per-compilation state is reset
    at the start of ``compile``.
    """

    def __init__(self, config: Optional[CoreConfig] = None):
        self.default_config = config or CoreConfig()
        self.config = self.default_config
        self.checker: Optional[SchemaChecker] = None
        self.validators = DefinitionsRegistry("validator")
        self._building: set = set()
        self._builders: Dict[str, Callable[[Dict[str, Any]], Validator]] = {
            "any": lambda schema: AnyValidator(),
            "none": lambda schema: NoneValidator(),
            "bool": lambda schema: BoolValidator(strict=self._strict(schema)),
            "int": self._build_int,
            "float": self._build_float,
            "decimal": self._build_decimal,
            "str": self._build_str,
            "bytes": self._build_bytes,
            "date": self._temporal_builder(DateValidator),
            "time": self._temporal_builder(TimeValidator),
            "timedelta": self._temporal_builder(TimedeltaValidator),
            "datetime": self._build_datetime,
            "callable": lambda schema: CallableValidator(),
            "is-instance": lambda schema: IsInstanceValidator(schema[K.CLS]),
            "list": self._sequence_builder(ListValidator),
            "set": self._sequence_builder(SetValidator),
            "frozenset": self._sequence_builder(FrozenSetValidator),
            "tuple": self._build_tuple,
            "dict": self._build_dict,
            "typed-dict": self._build_typed_dict,
            "model-fields": self._build_model_fields,
            "model": self._build_model,
            "union": self._build_union,
            "tagged-union": self._build_tagged_union,
            "literal": lambda schema: LiteralValidator(list(schema[K.EXPECTED])),
            "enum": self._build_enum,
            "definitions": lambda schema: self.build(schema[K.SCHEMA]),
            "definition-ref": self._build_definition_ref,
            "function-before": self._function_builder(FunctionBeforeValidator),
            "function-after": self._function_builder(FunctionAfterValidator),
            "function-wrap": self._function_builder(FunctionWrapValidator),
            "function-plain": lambda schema: FunctionPlainValidator(
                schema[K.FUNCTION], schema.get(K.FIELD_NAME)),
            "nullable": lambda schema: NullableValidator(self.build(schema[K.SCHEMA])),
            "default": self._build_default,
        }

    def compile(self, schema: Dict[str, Any], config: Any = None) -> CompiledSchema:
        """
        Compile a schema description.

        Args:
            schema: Schema description
            config: CoreConfig, plain dict of config keys, or None

        Returns:
            The compiled schema

        Raises:
            SchemaError: Listing every problem found in the schema
        """
        self.config = CoreConfig.from_dict(config) if config is not None else self.default_config
        self.checker = SchemaChecker(self.config)
        self.validators = DefinitionsRegistry("validator")
        self._building = set()

        # Phases 1 and 2: check the whole description before building anything
        self.checker.check(schema)
        if self.checker.problems:
            logger.debug("Schema rejected with %d problems", len(self.checker.problems))
            raise SchemaError(self.checker.problems)

        # Phase 3: definitions in dependency order, then the root
        for name in self.checker.graph.build_order():
            self._build_definition(name)
        validator = self.build(schema)

        serializer_compiler = SerializerCompiler(self.config, self.checker.definitions)
        serializer = serializer_compiler.compile(schema)

        self.validators.freeze()
        serializer_compiler.serializers.freeze()
        logger.debug("Compiled %s schema with %d definitions",
                     schema[K.TYPE], len(self.validators))
        return CompiledSchema(schema, self.config, validator, serializer,
                              self.validators, serializer_compiler.serializers)

    def build(self, schema: Dict[str, Any]) -> Validator:
        """Build the validator of a checked node."""
        ref = schema.get(K.REF)
        if ref is not None and ref not in self._building:
            return self._build_definition(ref)
        return self._builders[schema[K.TYPE]](schema)

    def _build_definition(self, name: str) -> Validator:
        slot = self.validators.slot(name)
        if not slot.filled:
            self._building.add(name)
            try:
                node = self.build(self.checker.definitions[name])
            finally:
                self._building.discard(name)
            self.validators.define(name, node)
        return slot.value

    def _optional(self, schema: Dict[str, Any], key: str) -> Optional[Validator]:
        child = schema.get(key)
        return self.build(child) if child is not None else None

    def _strict(self, schema: Dict[str, Any]) -> bool:
        return schema.get(K.STRICT, self.config.strict)

    def _bounds(self, schema: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "strict": self._strict(schema),
            "gt": schema.get(K.GT),
            "ge": schema.get(K.GE),
            "lt": schema.get(K.LT),
            "le": schema.get(K.LE),
        }

    def _build_int(self, schema: Dict[str, Any]) -> Validator:
        return IntValidator(multiple_of=schema.get(K.MULTIPLE_OF), **self._bounds(schema))

    def _build_float(self, schema: Dict[str, Any]) -> Validator:
        return FloatValidator(
            allow_inf_nan=schema.get(K.ALLOW_INF_NAN, self.config.allow_inf_nan),
            multiple_of=schema.get(K.MULTIPLE_OF),
            **self._bounds(schema)
        )

    def _build_decimal(self, schema: Dict[str, Any]) -> Validator:
        # float constraints are converted through their repr so 0.1 means Decimal("0.1")
        bounds = {key: _as_decimal(value) if key != "strict" else value
                  for key, value in self._bounds(schema).items()}
        return DecimalValidator(
            allow_inf_nan=schema.get(K.ALLOW_INF_NAN, False),
            max_digits=schema.get(K.MAX_DIGITS),
            decimal_places=schema.get(K.DECIMAL_PLACES),
            multiple_of=_as_decimal(schema.get(K.MULTIPLE_OF)),
            **bounds
        )

    def _build_str(self, schema: Dict[str, Any]) -> Validator:
        config = self.config
        return StrValidator(
            strict=self._strict(schema),
            min_length=schema.get(K.MIN_LENGTH, config.str_min_length),
            max_length=schema.get(K.MAX_LENGTH, config.str_max_length),
            pattern=schema.get(K.PATTERN),
            strip_whitespace=schema.get(K.STRIP_WHITESPACE, config.str_strip_whitespace),
            to_lower=schema.get(K.TO_LOWER, config.str_to_lower),
            to_upper=schema.get(K.TO_UPPER, config.str_to_upper),
            coerce_numbers_to_str=schema.get(K.COERCE_NUMBERS_TO_STR, config.coerce_numbers_to_str),
        )

    def _build_bytes(self, schema: Dict[str, Any]) -> Validator:
        return BytesValidator(
            strict=self._strict(schema),
            min_length=schema.get(K.MIN_LENGTH),
            max_length=schema.get(K.MAX_LENGTH),
            bytes_mode=self.config.bytes_mode,
        )

    def _temporal_builder(self, cls: type) -> Callable[[Dict[str, Any]], Validator]:
        return lambda schema: cls(**self._bounds(schema))

    def _build_datetime(self, schema: Dict[str, Any]) -> Validator:
        return DatetimeValidator(tz_constraint=schema.get(K.TZ_CONSTRAINT), **self._bounds(schema))

    def _sequence_builder(self, cls: type) -> Callable[[Dict[str, Any]], Validator]:
        def build(schema: Dict[str, Any]) -> Validator:
            return cls(
                items_validator=self._optional(schema, K.ITEMS_SCHEMA),
                min_length=schema.get(K.MIN_LENGTH),
                max_length=schema.get(K.MAX_LENGTH),
                fail_fast=schema.get(K.FAIL_FAST, False),
                strict=self._strict(schema),
            )
        return build

    def _build_tuple(self, schema: Dict[str, Any]) -> Validator:
        items = schema.get(K.ITEMS_SCHEMA)
        if items is None:
            # a homogeneous tuple of anything
            items, variadic = [AnyValidator()], 0
        else:
            items, variadic = [self.build(item) for item in items], schema.get(K.VARIADIC_ITEM_INDEX)
        return TupleValidator(
            items_validators=items,
            variadic_item_index=variadic,
            min_length=schema.get(K.MIN_LENGTH),
            max_length=schema.get(K.MAX_LENGTH),
            fail_fast=schema.get(K.FAIL_FAST, False),
            strict=self._strict(schema),
        )

    def _build_dict(self, schema: Dict[str, Any]) -> Validator:
        return DictValidator(
            keys_validator=self._optional(schema, K.KEYS_SCHEMA),
            values_validator=self._optional(schema, K.VALUES_SCHEMA),
            min_length=schema.get(K.MIN_LENGTH),
            max_length=schema.get(K.MAX_LENGTH),
            fail_fast=schema.get(K.FAIL_FAST, False),
            strict=self._strict(schema),
        )

    def _fields(self, schema: Dict[str, Any], total: bool) -> List[Field]:
        populate_by_name = schema.get(K.POPULATE_BY_NAME, self.config.populate_by_name)
        fields = []
        for name, entry in schema[K.FIELDS].items():
            lookup = LookupKey(name, entry.get(K.VALIDATION_ALIAS), populate_by_name)
            required = entry.get(K.REQUIRED, total)
            fields.append(Field(name, lookup, self.build(entry[K.SCHEMA]), required))
        return fields

    def _fields_options(self, schema: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "extra_behavior": schema.get(K.EXTRA_BEHAVIOR, self.config.extra_behavior),
            "extras_validator": self._optional(schema, K.EXTRAS_SCHEMA),
            "from_attributes": schema.get(K.FROM_ATTRIBUTES, self.config.from_attributes),
            "fail_fast": schema.get(K.FAIL_FAST, False),
            "strict": self._strict(schema),
        }

    def _build_typed_dict(self, schema: Dict[str, Any]) -> Validator:
        fields = self._fields(schema, schema.get(K.TOTAL, True))
        return TypedDictValidator(fields, **self._fields_options(schema))

    def _build_model_fields(self, schema: Dict[str, Any]) -> Validator:
        return ModelFieldsValidator(self._fields(schema, True), **self._fields_options(schema))

    def _build_model(self, schema: Dict[str, Any]) -> Validator:
        return ModelValidator(
            cls=schema[K.CLS],
            validator=self.build(schema[K.SCHEMA]),
            revalidate_instances=schema.get(K.REVALIDATE_INSTANCES, self.config.revalidate_instances),
            post_init=schema.get(K.POST_INIT),
            strict=self._strict(schema),
        )

    def _build_union(self, schema: Dict[str, Any]) -> Validator:
        choices = []
        for choice in schema[K.CHOICES]:
            if isinstance(choice, (list, tuple)):
                choices.append((self.build(choice[0]), choice[1]))
            else:
                choices.append((self.build(choice), None))
        return UnionValidator(
            choices,
            mode=schema.get(K.MODE, "smart"),
            custom_error_type=schema.get(K.CUSTOM_ERROR_TYPE),
            custom_error_message=schema.get(K.CUSTOM_ERROR_MESSAGE),
            strict=schema.get(K.STRICT, False),
        )

    def _build_tagged_union(self, schema: Dict[str, Any]) -> Validator:
        return TaggedUnionValidator(
            {tag: self.build(choice) for tag, choice in schema[K.CHOICES].items()},
            discriminator=schema[K.DISCRIMINATOR],
            custom_error_type=schema.get(K.CUSTOM_ERROR_TYPE),
            custom_error_message=schema.get(K.CUSTOM_ERROR_MESSAGE),
            from_attributes=schema.get(K.FROM_ATTRIBUTES, self.config.from_attributes),
            strict=self._strict(schema),
        )

    def _build_enum(self, schema: Dict[str, Any]) -> Validator:
        cls = schema[K.CLS]
        return EnumValidator(
            cls,
            members=list(schema.get(K.MEMBERS, list(cls))),
            sub_type=schema.get(K.SUB_TYPE),
            missing=schema.get(K.MISSING),
            strict=self._strict(schema),
        )

    def _build_definition_ref(self, schema: Dict[str, Any]) -> Validator:
        name = schema[K.SCHEMA_REF]
        return DefinitionRefValidator(name, self.validators.slot(name))

    def _function_builder(self, cls: type) -> Callable[[Dict[str, Any]], Validator]:
        return lambda schema: cls(schema[K.FUNCTION], self.build(schema[K.SCHEMA]),
                                  schema.get(K.FIELD_NAME))

    def _build_default(self, schema: Dict[str, Any]) -> Validator:
        return DefaultValidator(
            self.build(schema[K.SCHEMA]),
            default=schema.get(K.DEFAULT, MISSING),
            default_factory=schema.get(K.DEFAULT_FACTORY),
            default_factory_takes_data=schema.get(K.DEFAULT_FACTORY_TAKES_DATA, False),
            on_error=schema.get(K.ON_ERROR, "raise"),
            validate_default=schema.get(K.VALIDATE_DEFAULT, self.config.validate_default),
            copy_default=schema.get(K.COPY_DEFAULT, True),
        )
