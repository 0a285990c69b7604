"""Declarative validation of model instances for DataKnobs."""

from . import rules
from .constants import DEFAULT_ERROR_MESSAGES, ComparisonValidationKeys, ValidationKeys
from .exceptions import (
    ComparisonError,
    NotFoundError,
    PathResolutionError,
    RegistryError,
    SchemaError,
    SettingsError,
    ValidationEngineError,
    ValidationTargetError,
    ValidatorConfigurationError,
    ValidatorNotFoundError,
)
from .factory import SchemaFactory, load_schemas
from .path import PathAccessor, get_value_by_path
from .report import ErrorReport
from .schema import (
    FieldKind,
    FieldSchema,
    ModelSchema,
    Rule,
    SchemaRegistry,
    get_schema,
    get_schema_registry,
    register_schema,
)
from .settings import ValidationSettings, get_settings, load_settings, set_settings
from .strings import sf, string_format
from .validation import ValidatableModel, validate, validate_async
from .validators import (
    AsyncValidator,
    BaseValidator,
    Validation,
    Validator,
    ValidatorDefinition,
    ValidatorRegistry,
    get_validator,
    register_validator,
    set_registry,
    validator,
)

__version__ = "0.1.0"

__all__ = [
    # Validation
    "validate",
    "validate_async",
    "ValidatableModel",
    "ErrorReport",
    # Schemas
    "FieldKind",
    "FieldSchema",
    "ModelSchema",
    "Rule",
    "SchemaRegistry",
    "SchemaFactory",
    "get_schema",
    "get_schema_registry",
    "load_schemas",
    "register_schema",
    "rules",
    # Validators
    "AsyncValidator",
    "BaseValidator",
    "Validation",
    "Validator",
    "ValidatorDefinition",
    "ValidatorRegistry",
    "get_validator",
    "register_validator",
    "set_registry",
    "validator",
    # Paths and messages
    "PathAccessor",
    "get_value_by_path",
    "sf",
    "string_format",
    "DEFAULT_ERROR_MESSAGES",
    "ComparisonValidationKeys",
    "ValidationKeys",
    # Settings
    "ValidationSettings",
    "get_settings",
    "load_settings",
    "set_settings",
    # Exceptions
    "ComparisonError",
    "NotFoundError",
    "PathResolutionError",
    "RegistryError",
    "SchemaError",
    "SettingsError",
    "ValidationEngineError",
    "ValidationTargetError",
    "ValidatorConfigurationError",
    "ValidatorNotFoundError",
]
