"""Validator contract, built-in validators and the validator registry."""

from .base import AsyncValidator, BaseValidator, Validator, check_types, matches_type
from .builtin import (
    DateValidator,
    EmailValidator,
    ListValidator,
    MaxLengthValidator,
    MaxValidator,
    MinLengthValidator,
    MinValidator,
    OptionValidator,
    PasswordValidator,
    PatternValidator,
    RequiredValidator,
    StepValidator,
    TypeValidator,
    URLValidator,
)
from .comparison import (
    ComparisonValidator,
    DiffValidator,
    EqualsValidator,
    GreaterThanOrEqualValidator,
    GreaterThanValidator,
    LessThanOrEqualValidator,
    LessThanValidator,
)
from .registry import (
    Validation,
    ValidatorDefinition,
    ValidatorRegistry,
    get_validator,
    register_validator,
    set_registry,
    validator,
)

__all__ = [
    "AsyncValidator",
    "BaseValidator",
    "Validator",
    "check_types",
    "matches_type",
    "ComparisonValidator",
    "DateValidator",
    "DiffValidator",
    "EmailValidator",
    "EqualsValidator",
    "GreaterThanOrEqualValidator",
    "GreaterThanValidator",
    "LessThanOrEqualValidator",
    "LessThanValidator",
    "ListValidator",
    "MaxLengthValidator",
    "MaxValidator",
    "MinLengthValidator",
    "MinValidator",
    "OptionValidator",
    "PasswordValidator",
    "PatternValidator",
    "RequiredValidator",
    "StepValidator",
    "TypeValidator",
    "URLValidator",
    "Validation",
    "ValidatorDefinition",
    "ValidatorRegistry",
    "get_validator",
    "register_validator",
    "set_registry",
    "validator",
]
