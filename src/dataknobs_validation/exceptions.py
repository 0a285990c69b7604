"""Custom exceptions for the dataknobs_validation package.

This module defines exception types for the validation engine, built on the
common exception framework from dataknobs_common.

Most of these never reach application code: validator, path and comparison
failures are captured at the validator boundary and turned into report
messages. Only an invalid call to ``validate`` and setup-time misconfiguration
(registries, schemas, settings) surface to the caller.

Example:
    ```python
    from dataknobs_validation.exceptions import ValidationTargetError

    try:
        validate(42)
    except ValidationTargetError as e:
        logger.error(f"Cannot validate: {e} ({e.context})")
    ```
"""

from typing import Any

from dataknobs_common import (
    ConfigurationError,
    DataknobsError,
    NotFoundError,
    OperationError,
)


class ValidationEngineError(DataknobsError):
    """Base exception for the validation engine."""

    pass


class ValidationTargetError(ValidationEngineError, TypeError):
    """Raised when ``validate`` is called with something it cannot validate.

    Common scenarios:
    - ``None`` or a primitive value passed as the instance
    - An instance whose type has no registered schema
    """

    pass


class PathResolutionError(ValidationEngineError):
    """Raised when a path cannot be resolved against an object graph.

    Covers invalid path syntax, missing properties, missing parents and
    non-object contexts. Comparison validators report the message verbatim.
    """

    def __init__(self, message: str, path: Any = None, step: Any = None):
        self.path = path
        self.step = step
        super().__init__(message, context={"path": path, "step": step})


class ComparisonError(ValidationEngineError, TypeError):
    """Raised by ordering predicates when two values cannot be compared.

    The ``kind`` attribute names the comparability failure class: one of
    ``null``, ``type_mismatch``, ``nan``, ``invalid_date`` or ``unsupported``.
    """

    def __init__(self, message: str, kind: str):
        self.kind = kind
        super().__init__(message, context={"kind": kind})


class ValidatorConfigurationError(ValidationEngineError, ConfigurationError):
    """Raised when a validator is invoked without an option it requires.

    Example:
        ```python
        raise ValidatorConfigurationError(
            "Missing comparison target option 'lessThan'",
            context={"validator": "lessThan"}
        )
        ```
    """

    pass


class RegistryError(ValidationEngineError, OperationError):
    """Raised when a validator or schema cannot be registered."""

    pass


class ValidatorNotFoundError(RegistryError, NotFoundError):
    """Raised when no validator is registered under the requested key."""

    pass


class SchemaError(ValidationEngineError, ConfigurationError):
    """Raised when a model schema definition is invalid."""

    pass


class SettingsError(ValidationEngineError, ConfigurationError):
    """Raised when validation settings cannot be loaded or parsed."""

    pass


__all__ = [
    "ValidationEngineError",
    "ValidationTargetError",
    "PathResolutionError",
    "ComparisonError",
    "ValidatorConfigurationError",
    "RegistryError",
    "NotFoundError",
    "ValidatorNotFoundError",
    "SchemaError",
    "SettingsError",
]
