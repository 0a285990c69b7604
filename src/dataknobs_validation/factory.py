"""Build model schemas from configuration dictionaries and YAML files."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Type, Union

from dataknobs_config import Config, ConfigError, FactoryBase, InheritanceError, load_config_with_inheritance
from dataknobs_config.builders import ObjectBuilder

from .exceptions import SchemaError
from .schema import FieldKind, ModelSchema, Rule, SchemaRegistry, get_schema, register_schema

logger = logging.getLogger(__name__)

_builder: ObjectBuilder | None = None


def load_class(class_path: str) -> Type[Any]:
    """Load a class from ``"package.module:Class"`` or ``"package.module.Class"``.

    Raises:
        SchemaError: If the class cannot be loaded
    """
    global _builder
    if _builder is None:
        _builder = ObjectBuilder(Config(use_env=False))

    try:
        target = _builder._load_class(class_path.replace(":", "."))
    except ConfigError as e:
        raise SchemaError(str(e), context={"class_path": class_path}) from e

    if not isinstance(target, type):
        raise SchemaError(f"{class_path} is not a class", context={"class_path": class_path})
    return target


class SchemaFactory(FactoryBase):
    """Factory for creating model schemas from configuration.

    Configuration Options:
        model (str | type): Model class or its import path
        description (str): Optional schema description
        extends (str | type): Optional parent model whose registered schema
            fields are inherited
        fields (list): List of field definitions

    Field Definition Options:
        name (str): Field name
        kind (str): scalar (default), model, list or set
        types (str | list): Model classes, import paths or type names
        description (str): Field description
        validators (list): Rules, each a validator key, a ``{key: ..., **options}``
            mapping or a single-entry ``{key: value}`` mapping

    Example Configuration:
        schemas:
          - model: myapp.models:Person
            fields:
              - name: name
                validators:
                  - required
                  - maxlength: 40
              - name: age
                validators:
                  - min: 0
                  - key: lessThan
                    lessThan: retirement_age
                    label: retirement age
              - name: address
                kind: model
                types: myapp.models:Address

    Args:
        registry: Schema registry used to resolve ``extends``
    """

    def __init__(self, registry: SchemaRegistry | None = None):
        self.registry = registry

    def create(self, **config: Any) -> ModelSchema:
        """Create a ModelSchema from configuration.

        Raises:
            SchemaError: If the configuration is invalid
        """
        model = config.get("model")
        if model is None:
            raise SchemaError("Schema configuration missing 'model'", context={"config": config})
        model_class = load_class(model) if isinstance(model, str) else model

        logger.info(f"Creating schema: {getattr(model_class, '__qualname__', model_class)}")

        schema = ModelSchema(model_class, description=config.get("description"))

        for field_config in config.get("fields", []):
            self._add_field_to_schema(schema, field_config)

        parent = config.get("extends")
        if parent is not None:
            parent_class = load_class(parent) if isinstance(parent, str) else parent
            parent_schema = get_schema(parent_class, self.registry)
            if parent_schema is None:
                raise SchemaError(
                    f"No schema registered for parent {parent_class.__qualname__}",
                    context={"model": schema.name},
                )
            schema.extend(parent_schema)

        return schema

    def _add_field_to_schema(self, schema: ModelSchema, field_config: Mapping[str, Any]) -> None:
        field_name = field_config.get("name")
        if not field_name:
            logger.warning("Field configuration missing 'name', skipping")
            return

        kind = str(field_config.get("kind", FieldKind.SCALAR.value)).lower()
        types = self._build_types(field_config.get("types"))
        rules = self._build_rules(field_config.get("validators", []), field_name)
        description = field_config.get("description")

        if kind == FieldKind.MODEL.value:
            if not types:
                raise SchemaError(
                    f"Model field '{field_name}' needs 'types'",
                    context={"model": schema.name, "field": field_name},
                )
            schema.model(field_name, types, *rules, description=description)
        elif kind == FieldKind.LIST.value:
            schema.list_field(field_name, types, *rules, description=description)
        elif kind == FieldKind.SET.value:
            schema.set_field(field_name, types, *rules, description=description)
        else:
            schema.field(field_name, *rules, kind=kind, types=types or None, description=description)

    def _build_types(self, types_config: Any) -> Tuple[Any, ...]:
        if types_config is None:
            return ()
        if not isinstance(types_config, (list, tuple)):
            types_config = [types_config]
        types: List[Any] = []
        for item in types_config:
            # bare names ("str", "number") stay names, paths are imported
            if isinstance(item, str) and (":" in item or "." in item):
                types.append(load_class(item))
            else:
                types.append(item)
        return tuple(types)

    def _build_rules(self, rule_configs: Any, field_name: str) -> List[Rule]:
        rules: List[Rule] = []
        for rule_config in rule_configs or []:
            if isinstance(rule_config, str):
                rules.append(Rule(rule_config))
            elif isinstance(rule_config, Mapping) and "key" in rule_config:
                options = {k: v for k, v in rule_config.items() if k != "key"}
                rules.append(Rule(str(rule_config["key"]), options))
            elif isinstance(rule_config, Mapping) and len(rule_config) == 1:
                key, value = next(iter(rule_config.items()))
                options = dict(value) if isinstance(value, Mapping) else {key: value}
                rules.append(Rule(str(key), options))
            else:
                raise SchemaError(
                    f"Invalid validator configuration on field '{field_name}': {rule_config!r}",
                    context={"field": field_name},
                )
        return rules


def load_schema_config(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read schema definitions from a YAML or JSON file.

    The file holds either a ``schemas`` list or a single schema mapping.
    Files are read with ``dataknobs_config``: a top-level ``extends`` names
    a parent file to merge, so a single schema that extends a parent model
    is declared inside a ``schemas`` list.

    Raises:
        SchemaError: If the file is missing, unreadable or malformed
    """
    try:
        data: Any = load_config_with_inheritance(path, substitute_vars=False)
    except (InheritanceError, ValueError) as e:
        raise SchemaError(f"Cannot load schemas from {path}: {e}", context={"path": str(path)}) from e

    data = data["schemas"] if "schemas" in data else [data]
    if not isinstance(data, list) or not all(isinstance(item, Mapping) for item in data):
        raise SchemaError(f"Schema file must hold a list of schema mappings: {path}", context={"path": str(path)})
    return [dict(item) for item in data]


def load_schemas(path: Union[str, Path], registry: SchemaRegistry | None = None) -> List[ModelSchema]:
    """Create and register every schema declared in a file.

    Schemas are registered in file order, so ``extends`` may refer to a
    schema declared earlier in the same file.
    """
    factory = SchemaFactory(registry)
    schemas = []
    for config in load_schema_config(path):
        schema = factory.create(**config)
        register_schema(schema, registry)
        schemas.append(schema)
    logger.info(f"Loaded {len(schemas)} schemas from {path}")
    return schemas
