"""Validation settings loaded from dictionaries, YAML/JSON files and the environment.

Files are read with ``dataknobs_config``, so a settings file may ``extends``
a parent file in the same directory.

Environment variables follow the dataknobs override format, with
``validation`` as the configuration type::

    DATAKNOBS_VALIDATION__0__<FIELD>
    DATAKNOBS_VALIDATION__0__MESSAGES__<VALIDATOR_KEY>

Examples:
    - ``DATAKNOBS_VALIDATION__0__ASYNC_ALLOWED=true``
    - ``DATAKNOBS_VALIDATION__0__MESSAGES__REQUIRED="Cannot be empty"``
"""

import logging
import threading
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from dataknobs_config import InheritanceError, InvalidReferenceError, load_config_with_inheritance
from dataknobs_config.environment import EnvironmentOverrides

from .constants import ENV_PREFIX, SETTINGS_TYPE
from .exceptions import SettingsError
from .validators.registry import Validation

logger = logging.getLogger(__name__)

_TRUE = ("true", "yes", "1", "on")
_FALSE = ("false", "no", "0", "off")

# selectors accepted in DATAKNOBS_VALIDATION__<SELECTOR>__<FIELD>
_SELECTORS = (0, "default")


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise SettingsError(
        f"Invalid boolean for setting '{name}': {value!r}",
        context={"setting": name, "value": value},
    )


@dataclass(frozen=True)
class ValidationSettings:
    """Engine-wide validation settings.

    Attributes:
        async_allowed: Default for ``ValidatableModel.has_errors``
        ignore_none_in_paths: Whether path resolution returns None values
            instead of failing on them
        messages: Message template overrides by validator key
        warn_unknown_validators: Log a warning for rules whose validator
            key is not registered
    """

    async_allowed: bool = False
    ignore_none_in_paths: bool = True
    messages: Mapping[str, str] = field(default_factory=dict)
    warn_unknown_validators: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ValidationSettings":
        """Build settings from a mapping.

        A top-level ``validation`` section is used when present.

        Raises:
            SettingsError: On unknown settings or invalid values
        """
        data = dict(data or {})
        if isinstance(data.get(SETTINGS_TYPE), Mapping):
            data = dict(data[SETTINGS_TYPE])
        return cls().merge(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ValidationSettings":
        """Load settings from a YAML or JSON file.

        Raises:
            SettingsError: If the file is missing, unreadable or not a mapping
        """
        try:
            data = load_config_with_inheritance(path, substitute_vars=False)
        except (InheritanceError, ValueError) as e:
            raise SettingsError(f"Cannot load settings from {path}: {e}", context={"path": str(path)}) from e

        logger.debug(f"Loaded validation settings from {path}")
        return cls.from_dict(data)

    from_yaml = from_file

    @classmethod
    def from_env(cls, base: "ValidationSettings | None" = None, prefix: str = ENV_PREFIX) -> "ValidationSettings":
        """Apply environment variable overrides on top of ``base``."""
        return (base or cls()).merge(env_overrides(prefix))

    def merge(self, data: Mapping[str, Any]) -> "ValidationSettings":
        """Return a copy with the given values applied; messages are merged key by key.

        Raises:
            SettingsError: On unknown settings or invalid values
        """
        known = {f.name for f in fields(self)}
        changes: Dict[str, Any] = {}
        for name, value in data.items():
            if name not in known:
                raise SettingsError(
                    f"Unknown validation setting: {name}",
                    context={"setting": name, "known": sorted(known)},
                )
            if name == "messages":
                if not isinstance(value, Mapping):
                    raise SettingsError(
                        "Setting 'messages' must be a mapping",
                        context={"setting": name, "value": value},
                    )
                changes[name] = {**self.messages, **{str(k): str(v) for k, v in value.items()}}
            else:
                changes[name] = _parse_bool(name, value)
        return replace(self, **changes)

    def message_for(self, key: str) -> str | None:
        """Configured message template for a validator key, if any."""
        return self.messages.get(key)


def env_overrides(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    """Collect setting overrides from the environment.

    Returns:
        Dictionary of setting name to value, with ``messages`` as a nested
        dictionary keyed by validator key
    """
    environment = EnvironmentOverrides(prefix)
    overrides: Dict[str, Any] = {}
    messages: Dict[str, str] = {}
    for ref, value in environment.get_overrides().items():
        try:
            type_name, selector, attribute = environment.parse_env_reference(ref)
        except InvalidReferenceError:
            logger.debug(f"Skipping environment override {ref}")
            continue
        if type_name != SETTINGS_TYPE:
            continue
        if selector not in _SELECTORS or not attribute:
            logger.warning(f"Ignoring unrecognized environment setting: {ref}")
            continue
        section, _, sub_key = attribute.partition(environment.ENV_SEPARATOR)
        if not sub_key:
            overrides[attribute] = value
        elif section == "messages":
            messages[_message_key(sub_key)] = str(value)
        else:
            logger.warning(f"Ignoring unrecognized environment setting: {ref}")
    if messages:
        overrides["messages"] = messages
    return overrides


def _message_key(env_key: str) -> str:
    # environment names are upper case; comparison keys are camel case
    lowered = env_key.lower()
    for key in Validation.keys():
        if key.lower() == lowered:
            return key
    return lowered


_settings: ValidationSettings | None = None
_settings_lock = threading.RLock()


def get_settings() -> ValidationSettings:
    """Process-wide settings, built from defaults and the environment on first use."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = ValidationSettings.from_env()
        return _settings


def set_settings(settings: ValidationSettings | None) -> None:
    """Replace the process-wide settings; None rebuilds them on next use."""
    global _settings
    with _settings_lock:
        _settings = settings


def load_settings(path: Union[str, Path]) -> ValidationSettings:
    """Load settings from a file, apply environment overrides and make them current."""
    settings = ValidationSettings.from_env(ValidationSettings.from_file(path))
    set_settings(settings)
    return settings
