"""Validator registry and the process-wide ``Validation`` facade.

Example:
    ```python
    from dataknobs_validation.validators import Validator, validator

    @validator("even")
    class EvenValidator(Validator):
        def __init__(self, message="Must be even"):
            super().__init__(message, "int")

        def has_errors(self, value, options=None, accessor=None):
            return self.get_message(self.message_for(options)) if value % 2 else None
    ```
"""

import inspect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type, Union

from dataknobs_common import Registry

from ..exceptions import RegistryError, ValidatorNotFoundError
from .base import BaseValidator
from .builtin import BUILTIN_VALIDATORS
from .comparison import COMPARISON_VALIDATORS

logger = logging.getLogger(__name__)

ValidatorLike = Union[BaseValidator, Type[BaseValidator]]


@dataclass(frozen=True)
class ValidatorDefinition:
    """A validator (instance or class) bound to a registry key.

    Attributes:
        validator: Validator instance, or class instantiated on first lookup
        key: Registry key
        persist: Whether the key is listed in ``get_custom_keys``
    """

    validator: ValidatorLike
    key: str
    persist: bool = False


def _is_validator_class(item: Any) -> bool:
    return inspect.isclass(item) and issubclass(item, BaseValidator)


class ValidatorRegistry(Registry[ValidatorLike]):
    """Registry of validators by key.

    Registration is first-wins: registering a key that is already present is
    a no-op. Classes are instantiated lazily on their first ``get`` and the
    instance replaces the class.

    Args:
        *validators: Initial validators or definitions
        name: Registry name
    """

    def __init__(self, *validators: Union[ValidatorDefinition, BaseValidator], name: str = "validators"):
        super().__init__(name, enable_metrics=True)
        self._custom_keys: Dict[str, str] = {}
        if validators:
            self.register(*validators)

    def register(self, *validators: Union[ValidatorDefinition, BaseValidator]) -> None:  # type: ignore[override]
        """Register validator instances or definitions.

        Instances are registered under the keys their class was declared
        with (see ``@validator``).

        Raises:
            RegistryError: If an instance has no declared key, or an item is
                not a validator
        """
        with self._lock:
            for item in validators:
                for definition in self._definitions(item):
                    self._register_definition(definition)

    def _definitions(self, item: Any) -> List[ValidatorDefinition]:
        if isinstance(item, ValidatorDefinition):
            if not (isinstance(item.validator, BaseValidator) or _is_validator_class(item.validator)):
                raise RegistryError(
                    f"Not a validator: {item.validator!r}",
                    context={"key": item.key, "registry": self.name},
                )
            return [item]
        if isinstance(item, BaseValidator):
            keys = getattr(type(item), "validation_keys", None) or (
                (item.key,) if getattr(item, "key", None) else ()
            )
            if not keys:
                raise RegistryError(
                    f"Validator {type(item).__name__} has no registry key, use a ValidatorDefinition",
                    context={"registry": self.name},
                )
            return [ValidatorDefinition(item, key) for key in keys]
        raise RegistryError(
            f"Cannot register {item!r} as a validator",
            context={"registry": self.name},
        )

    def _register_definition(self, definition: ValidatorDefinition) -> None:
        key = definition.key
        if self.has(key):
            logger.debug(f"Validator '{key}' already registered in {self.name}, skipping")
            return
        super().register(key, definition.validator, metadata={"persist": definition.persist})
        if definition.persist:
            self._custom_keys[key.upper()] = key
        logger.debug(f"Registered validator '{key}' in {self.name}")

    def get(self, key: str) -> BaseValidator | None:  # type: ignore[override]
        """Get the validator registered under a key, or None."""
        with self._lock:
            item = self.get_optional(key)
            if item is None or isinstance(item, BaseValidator):
                return item
            instance = item()
            self._items[key] = instance
            return instance

    def require(self, key: str) -> BaseValidator:
        """Get the validator registered under a key.

        Raises:
            ValidatorNotFoundError: If nothing is registered under the key
        """
        validator = self.get(key)
        if validator is None:
            raise ValidatorNotFoundError(
                f"Validator not found: {key}",
                context={"key": key, "registry": self.name, "available_keys": self.list_keys()},
            )
        return validator

    def get_keys(self) -> List[str]:
        """All registered keys in registration order."""
        return self.list_keys()

    def get_custom_keys(self) -> Dict[str, str]:
        """Upper-cased key to key, for definitions registered with ``persist``."""
        with self._lock:
            return dict(self._custom_keys)

    def clear(self) -> None:
        with self._lock:
            super().clear()
            self._custom_keys.clear()


def default_definitions() -> List[ValidatorDefinition]:
    """Definitions of every built-in validator, classes left uninstantiated."""
    return [
        ValidatorDefinition(klass, key)
        for key, klass in {**BUILTIN_VALIDATORS, **COMPARISON_VALIDATORS}.items()
    ]


class Validation:
    """Process-wide access to the acting validator registry.

    The default registry is created on first use and holds every built-in
    validator. It can be swapped with ``set_registry``.
    """

    _registry: ValidatorRegistry | None = None
    _lock = threading.RLock()

    def __init__(self):
        raise TypeError("Validation is not instantiable")

    @classmethod
    def get_registry(cls) -> ValidatorRegistry:
        with cls._lock:
            if cls._registry is None:
                cls._registry = ValidatorRegistry(*default_definitions())
            return cls._registry

    @classmethod
    def set_registry(
        cls,
        registry: ValidatorRegistry,
        migration_handler: Callable[[BaseValidator], BaseValidator] | None = None,
    ) -> None:
        """Replace the acting registry.

        With a migration handler, every validator of the previous registry is
        passed through the handler and registered into the new one under its
        old key. Keys the new registry already holds are kept.

        Args:
            registry: New registry
            migration_handler: Optional callable mapping an old validator to
                the validator to register
        """
        with cls._lock:
            if migration_handler is not None:
                previous = cls.get_registry()
                for key in previous.get_keys():
                    old = previous.get(key)
                    if old is None:
                        continue
                    migrated = migration_handler(old)
                    persist = key.upper() in previous.get_custom_keys()
                    registry.register(ValidatorDefinition(migrated, key, persist))
                logger.info(
                    f"Migrated {previous.count()} validators from {previous.name} to {registry.name}"
                )
            cls._registry = registry

    @classmethod
    def reset(cls) -> None:
        """Drop the acting registry; the default one is rebuilt on next use."""
        with cls._lock:
            cls._registry = None

    @classmethod
    def register(cls, *validators: Union[ValidatorDefinition, BaseValidator]) -> None:
        cls.get_registry().register(*validators)

    @classmethod
    def get(cls, key: str) -> BaseValidator | None:
        return cls.get_registry().get(key)

    @classmethod
    def keys(cls) -> List[str]:
        return cls.get_registry().get_keys()


def register_validator(*validators: Union[ValidatorDefinition, BaseValidator]) -> None:
    """Register validators in the acting registry."""
    Validation.register(*validators)


def get_validator(key: str) -> BaseValidator | None:
    """Get a validator from the acting registry."""
    return Validation.get(key)


def set_registry(
    registry: ValidatorRegistry,
    migration_handler: Callable[[BaseValidator], BaseValidator] | None = None,
) -> None:
    """Swap the acting registry, see ``Validation.set_registry``."""
    Validation.set_registry(registry, migration_handler)


def validator(*keys: str) -> Callable[[Type[BaseValidator]], Type[BaseValidator]]:
    """Class decorator registering a validator class under one or more keys.

    Raises:
        RegistryError: If no key is given
    """
    if not keys:
        raise RegistryError("@validator needs at least one key")

    def decorate(klass: Type[BaseValidator]) -> Type[BaseValidator]:
        klass.validation_keys = tuple(keys)  # type: ignore[attr-defined]
        Validation.register(*(ValidatorDefinition(klass, key, persist=True) for key in keys))
        return klass

    return decorate
