"""Model schemas: the declared validation rules of a model type.

A ``ModelSchema`` maps the fields of one class to ordered rules and tells the
orchestrator which fields hold nested models, lists or sets of models.

Example:
    ```python
    from dataknobs_validation import ModelSchema, register_schema, rules

    schema = (
        ModelSchema(Order)
        .field("reference", rules.required(), rules.pattern(r"^ORD-\\d+$"))
        .field("total", rules.min_value(0))
        .model("customer", Customer, rules.required())
        .list_field("lines", OrderLine, rules.min_length(1))
    )
    register_schema(schema)
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Tuple

from dataknobs_common import Registry

from .constants import ValidationKeys
from .exceptions import SchemaError

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    """How the orchestrator treats a field's value."""

    SCALAR = "scalar"
    MODEL = "model"
    LIST = "list"
    SET = "set"


@dataclass(frozen=True)
class Rule:
    """A validator key with the options the validator is invoked with."""

    key: str
    options: Mapping[str, Any] = dataclass_field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise SchemaError(f"Rule key must be a non-empty string: {self.key!r}")

    @property
    def message(self) -> str | None:
        return self.options.get("message")


@dataclass
class FieldSchema:
    """Validation rules declared for one field.

    Attributes:
        name: Attribute (or mapping key) name
        rules: Rules in the order they run
        kind: Nesting kind of the value
        types: Accepted model classes (MODEL) or element types (LIST, SET)
        description: Optional description
    """

    name: str
    rules: List[Rule] = dataclass_field(default_factory=list)
    kind: FieldKind = FieldKind.SCALAR
    types: Tuple[Any, ...] = ()
    description: str | None = None

    def add_rule(self, rule: Rule) -> FieldSchema:
        """Append a rule (fluent API)."""
        if not isinstance(rule, Rule):
            raise SchemaError(
                f"Field '{self.name}' expects Rule objects, got {type(rule).__name__}",
                context={"field": self.name},
            )
        self.rules.append(rule)
        return self

    def get_rule(self, key: str) -> Rule | None:
        return next((rule for rule in self.rules if rule.key == key), None)

    def has_rule(self, key: str) -> bool:
        return self.get_rule(key) is not None

    @property
    def is_nested(self) -> bool:
        return self.kind is not FieldKind.SCALAR


def _as_types(types: Any) -> Tuple[Any, ...]:
    if types is None:
        return ()
    if isinstance(types, (list, tuple, set, frozenset)):
        return tuple(types)
    return (types,)


class ModelSchema:
    """Declared fields and rules of a model class, built with a fluent API.

    Args:
        model: The class whose instances the schema validates
        description: Optional description
    """

    def __init__(self, model: type, description: str | None = None):
        if not isinstance(model, type):
            raise SchemaError(f"ModelSchema expects a class, got {model!r}")
        self.model_class = model
        self.description = description
        self.fields: Dict[str, FieldSchema] = {}

    @property
    def name(self) -> str:
        return self.model_class.__qualname__

    def field(
        self,
        name: str,
        *rules: Rule,
        kind: FieldKind | str = FieldKind.SCALAR,
        types: Any = None,
        description: str | None = None,
    ) -> ModelSchema:
        """Declare a field, or add rules to an already declared one (fluent API).

        Args:
            name: Field name
            *rules: Rules in the order they should run
            kind: Nesting kind
            types: Accepted model classes or element types
            description: Field description

        Returns:
            Self for chaining

        Raises:
            SchemaError: On an empty name, an unknown kind or a non-Rule argument
        """
        if not name:
            raise SchemaError("Field name must be a non-empty string", context={"model": self.name})
        try:
            kind = FieldKind(kind)
        except ValueError as e:
            raise SchemaError(
                f"Invalid field kind for '{name}': {kind}",
                context={"model": self.name, "field": name},
            ) from e

        field_schema = self.fields.get(name)
        if field_schema is None:
            field_schema = FieldSchema(name=name, kind=kind, types=_as_types(types), description=description)
            self.fields[name] = field_schema
        else:
            if kind is not FieldKind.SCALAR:
                field_schema.kind = kind
            if types is not None:
                field_schema.types = _as_types(types)
            if description:
                field_schema.description = description

        for rule in rules:
            field_schema.add_rule(rule)
        return self

    def model(self, name: str, model_type: Any, *rules: Rule, description: str | None = None) -> ModelSchema:
        """Declare a field holding a nested model (one class or a tuple of classes)."""
        return self.field(name, *rules, kind=FieldKind.MODEL, types=model_type, description=description)

    def list_field(self, name: str, element_types: Any, *rules: Rule, description: str | None = None) -> ModelSchema:
        """Declare a list field; a ``list`` rule checking the element types is added first."""
        return self._collection(name, FieldKind.LIST, element_types, rules, description)

    def set_field(self, name: str, element_types: Any, *rules: Rule, description: str | None = None) -> ModelSchema:
        """Declare a set field; a ``list`` rule checking the element types is added first."""
        return self._collection(name, FieldKind.SET, element_types, rules, description)

    def _collection(self, name, kind, element_types, rules, description) -> ModelSchema:
        types = _as_types(element_types)
        if not types:
            raise SchemaError(
                f"Collection field '{name}' needs at least one element type",
                context={"model": self.name, "field": name},
            )
        self.field(name, kind=kind, types=types, description=description)
        if not self.fields[name].has_rule(ValidationKeys.LIST):
            self.fields[name].add_rule(Rule(ValidationKeys.LIST, {"clazz": types}))
        return self.field(name, *rules)

    def extend(self, parent: ModelSchema) -> ModelSchema:
        """Copy the fields of a parent schema that this schema does not declare yet."""
        for name, parent_field in parent.fields.items():
            if name not in self.fields:
                self.fields[name] = FieldSchema(
                    name=name,
                    rules=list(parent_field.rules),
                    kind=parent_field.kind,
                    types=parent_field.types,
                    description=parent_field.description,
                )
        return self

    def with_description(self, description: str) -> ModelSchema:
        self.description = description
        return self

    def get_field(self, name: str) -> FieldSchema | None:
        return self.fields.get(name)

    def __iter__(self) -> Iterator[FieldSchema]:
        return iter(list(self.fields.values()))

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self) -> str:
        return f"ModelSchema({self.name}, fields={list(self.fields)})"


def type_key(model: type) -> str:
    """Registry key of a class: its module and qualified name."""
    return f"{model.__module__}.{model.__qualname__}"


class SchemaRegistry(Registry[ModelSchema]):
    """Schemas by model class.

    Lookups walk the class MRO, so a subclass without its own schema is
    validated with its nearest registered ancestor's schema.
    """

    def __init__(self, name: str = "schemas"):
        super().__init__(name)

    def register_schema(self, schema: ModelSchema) -> ModelSchema:
        """Register a schema, replacing any schema of the same class."""
        key = type_key(schema.model_class)
        if self.has(key):
            logger.debug(f"Replacing schema for {key}")
        self.register(key, schema, allow_overwrite=True)
        return schema

    def for_type(self, model: type) -> ModelSchema | None:
        for klass in model.__mro__:
            schema = self.get_optional(type_key(klass))
            if schema is not None:
                return schema
        return None

    def for_instance(self, instance: Any) -> ModelSchema | None:
        return self.for_type(type(instance))


_default_schemas = SchemaRegistry()


def get_schema_registry() -> SchemaRegistry:
    """The process-wide schema registry."""
    return _default_schemas


def register_schema(schema: ModelSchema, registry: SchemaRegistry | None = None) -> ModelSchema:
    """Register a schema in the given or the process-wide registry."""
    return (registry if registry is not None else _default_schemas).register_schema(schema)


def get_schema(model: Any, registry: SchemaRegistry | None = None) -> ModelSchema | None:
    """Schema for a class or an instance, or None."""
    if registry is None:
        registry = _default_schemas
    if isinstance(model, type):
        return registry.for_type(model)
    return registry.for_instance(model)
