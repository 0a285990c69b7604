"""Recursive validation of model instances against their schemas.

``validate`` walks an instance field by field, runs each field's rules,
descends into nested models, lists and sets, and collects every violation
into an ``ErrorReport``.

Synchronous and asynchronous validators share one walk. Every rule
invocation produces an outcome that is either ``Resolved`` (a message or
None) or ``Pending`` (an awaitable). When nothing is pending the report is
returned directly; otherwise ``validate`` returns a coroutine that awaits
all pending checks concurrently and then builds the report.

Example:
    ```python
    errors = validate(person)
    if errors:
        print(errors)

    errors = await validate_async(person)
    ```
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Sequence, Tuple, Union

from .constants import DEFAULT_ERROR_MESSAGES, MESSAGE_OPTION, ValidationKeys
from .exceptions import ValidationTargetError
from .path import MISSING, PathAccessor, get_property, is_object
from .report import ErrorReport
from .schema import FieldKind, FieldSchema, ModelSchema, Rule, SchemaRegistry, get_schema_registry
from .settings import ValidationSettings, get_settings
from .strings import sf
from .validators.base import BaseValidator, check_types, type_name
from .validators.registry import Validation, ValidatorRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolved:
    """Outcome of a check whose result is already known."""

    message: str | None


@dataclass(frozen=True)
class Pending:
    """Outcome of an asynchronous check, by index into the pending list."""

    index: int
    default_message: str


Outcome = Union[Resolved, Pending]

# a list slot before finalization: None, a message or a nested draft
DraftSlot = Union[None, str, "_Draft"]


@dataclass
class _Draft:
    """Outcomes collected for one node, turned into a report once resolved."""

    rules: Dict[str, Dict[str, Outcome]] = field(default_factory=dict)
    children: Dict[str, "_Draft"] = field(default_factory=dict)
    slots: Dict[str, List[DraftSlot]] = field(default_factory=dict)


def _failed(outcome: Outcome | None) -> bool:
    return isinstance(outcome, Resolved) and bool(outcome.message)


def _message_of(result: Any, default: str) -> str | None:
    if isinstance(result, BaseException):
        return str(result) or default
    return result or None


class _Walker:
    def __init__(
        self,
        async_allowed: bool,
        excluded: Sequence[str],
        schemas: SchemaRegistry,
        registry: ValidatorRegistry,
        settings: ValidationSettings,
    ):
        self.async_allowed = async_allowed
        self.excluded = tuple(excluded)
        self.schemas = schemas
        self.registry = registry
        self.settings = settings
        self.pending: List[Awaitable[Any]] = []

    def is_excluded(self, name: str, path: str) -> bool:
        """A bare name excludes the field at any depth, a dotted path only that field."""
        for entry in self.excluded:
            if "." in entry:
                if entry == path:
                    return True
            elif entry == name:
                return True
        return False

    def walk(self, node: Any, schema: ModelSchema, lineage: Tuple[Any, ...], prefix: str) -> _Draft:
        accessor = PathAccessor(node, lineage, ignore_none=self.settings.ignore_none_in_paths)
        draft = _Draft()
        logger.debug(f"Validating {type(node).__name__} at '{prefix or '<root>'}'")

        for field_schema in schema:
            path = f"{prefix}{field_schema.name}"
            if self.is_excluded(field_schema.name, path):
                continue

            try:
                value = get_property(node, field_schema.name)
            except Exception as e:
                logger.debug(f"Reading '{path}' raised {type(e).__name__}: {e}")
                draft.rules[field_schema.name] = {
                    ValidationKeys.MODEL: Resolved(str(e) or DEFAULT_ERROR_MESSAGES["DEFAULT"])
                }
                continue
            if value is MISSING:
                value = None

            outcomes = self.check_field(field_schema, value, accessor)
            if outcomes:
                draft.rules[field_schema.name] = outcomes

            if value is None or field_schema.kind is FieldKind.SCALAR:
                continue
            if field_schema.kind is FieldKind.MODEL:
                if any(_failed(outcome) for outcome in outcomes.values()):
                    continue
                self.descend(draft, field_schema, value, node, lineage, path)
            elif not _failed(outcomes.get(ValidationKeys.LIST)):
                self.walk_elements(draft, field_schema, value, node, lineage, path)

        return draft

    def check_field(self, field_schema: FieldSchema, value: Any, accessor: PathAccessor) -> Dict[str, Outcome]:
        outcomes: Dict[str, Outcome] = {}
        for rule in field_schema.rules:
            validator = self.registry.get(rule.key)
            if validator is None:
                if self.settings.warn_unknown_validators:
                    logger.warning(f"No validator registered for '{rule.key}', skipping it on field '{field_schema.name}'")
                continue
            if validator.is_async and not self.async_allowed:
                continue
            outcomes[rule.key] = self.invoke(validator, rule, value, accessor)
        return outcomes

    def invoke(self, validator: BaseValidator, rule: Rule, value: Any, accessor: PathAccessor) -> Outcome:
        options = dict(rule.options)
        override = self.settings.message_for(rule.key)
        if override and not options.get(MESSAGE_OPTION):
            options[MESSAGE_OPTION] = override

        try:
            result = validator.has_errors(value, options, accessor)
        except Exception as e:
            logger.debug(f"Validator '{rule.key}' raised {type(e).__name__}: {e}")
            return Resolved(str(e) or validator.message)

        if inspect.isawaitable(result):
            self.pending.append(result)
            return Pending(len(self.pending) - 1, validator.message)
        return Resolved(result or None)

    def descend(
        self,
        draft: _Draft,
        field_schema: FieldSchema,
        value: Any,
        node: Any,
        lineage: Tuple[Any, ...],
        path: str,
    ) -> None:
        name = field_schema.name
        if field_schema.types and not check_types(value, field_schema.types):
            message = sf(DEFAULT_ERROR_MESSAGES["MODEL_TYPE"], [type_name(t) for t in field_schema.types])
            draft.rules.setdefault(name, {})[ValidationKeys.TYPE] = Resolved(message)
            return
        if self.is_cycle(value, node, lineage):
            return

        schema = self.schemas.for_instance(value)
        if schema is None:
            logger.debug(f"No schema for {type(value).__name__} at '{path}', not descending")
            return
        try:
            draft.children[name] = self.walk(value, schema, (node, *lineage), f"{path}.")
        except Exception as e:
            logger.debug(f"Descending into '{path}' failed: {e}")
            draft.rules.setdefault(name, {})[ValidationKeys.MODEL] = Resolved(str(e) or DEFAULT_ERROR_MESSAGES["DEFAULT"])

    def walk_elements(
        self,
        draft: _Draft,
        field_schema: FieldSchema,
        value: Any,
        node: Any,
        lineage: Tuple[Any, ...],
        path: str,
    ) -> None:
        if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
            return
        types = field_schema.types
        slots: List[DraftSlot] = []
        for element in value:
            slots.append(self.element_slot(element, types, node, lineage, path))
        if any(slot is not None for slot in slots):
            draft.slots[field_schema.name] = slots

    def element_slot(
        self,
        element: Any,
        types: Tuple[Any, ...],
        node: Any,
        lineage: Tuple[Any, ...],
        path: str,
    ) -> DraftSlot:
        if element is None:
            return None
        declared = not types or check_types(element, types)
        schema = self.schemas.for_instance(element) if is_object(element) else None
        if schema is not None and declared:
            if self.is_cycle(element, node, lineage):
                return None
            try:
                return self.walk(element, schema, (node, *lineage), f"{path}.")
            except Exception as e:
                logger.debug(f"Validating element of '{path}' failed: {e}")
                return str(e) or DEFAULT_ERROR_MESSAGES["DEFAULT"]
        if not declared:
            return sf(DEFAULT_ERROR_MESSAGES["MODEL_TYPE"], [type_name(t) for t in types])
        return None

    @staticmethod
    def is_cycle(value: Any, node: Any, lineage: Tuple[Any, ...]) -> bool:
        return any(value is ancestor for ancestor in (node, *lineage))

    def finalize(self, draft: _Draft, results: Sequence[Any]) -> ErrorReport | None:
        errors: Dict[str, Dict[str, Any]] = {}

        for name, outcomes in draft.rules.items():
            entries: Dict[str, Any] = {}
            for key, outcome in outcomes.items():
                if isinstance(outcome, Pending):
                    message = _message_of(results[outcome.index], outcome.default_message)
                else:
                    message = outcome.message
                if message:
                    entries[key] = message
            if entries:
                errors[name] = entries

        for name, child in draft.children.items():
            child_report = self.finalize(child, results)
            if child_report is None:
                continue
            for child_field, child_entries in child_report.items():
                errors.setdefault(f"{name}.{child_field}", {}).update(child_entries)

        for name, slots in draft.slots.items():
            entries = errors.setdefault(name, {})
            if ValidationKeys.LIST in entries:
                continue
            finalized = [self.finalize(slot, results) if isinstance(slot, _Draft) else slot for slot in slots]
            if any(slot is not None for slot in finalized):
                entries[ValidationKeys.LIST] = finalized

        report = ErrorReport(errors)
        return report if report else None

    async def finalize_async(self, draft: _Draft) -> ErrorReport | None:
        results = await asyncio.gather(*self.pending, return_exceptions=True)
        for result in results:
            # only ordinary exceptions become messages
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
        return self.finalize(draft, results)


def validate(
    obj: Any,
    async_allowed: bool = False,
    *exclude: str,
    schemas: SchemaRegistry | None = None,
    registry: ValidatorRegistry | None = None,
    settings: ValidationSettings | None = None,
) -> Union[ErrorReport, None, Awaitable[ErrorReport | None]]:
    """Validate an instance against its registered schema.

    Args:
        obj: Instance to validate
        async_allowed: Run asynchronous validators; when any of them is
            invoked, an awaitable is returned
        *exclude: Field names (any depth) or dotted paths to skip
        schemas: Schema registry, defaults to the process-wide one
        registry: Validator registry, defaults to the acting one
        settings: Settings, default to the process-wide ones

    Returns:
        None when there are no violations, an ``ErrorReport`` otherwise,
        or an awaitable of either when asynchronous checks are pending

    Raises:
        ValidationTargetError: If ``obj`` is not an object with a schema
    """
    if not is_object(obj):
        raise ValidationTargetError(
            f"Cannot validate {type(obj).__name__} value, expected a model instance",
            context={"type": type(obj).__name__},
        )

    schemas = schemas if schemas is not None else get_schema_registry()
    schema = schemas.for_instance(obj)
    if schema is None:
        raise ValidationTargetError(
            f"No schema registered for {type(obj).__qualname__}",
            context={"type": type(obj).__qualname__, "registry": schemas.name},
        )

    walker = _Walker(
        async_allowed,
        exclude,
        schemas,
        registry if registry is not None else Validation.get_registry(),
        settings if settings is not None else get_settings(),
    )
    draft = walker.walk(obj, schema, (), "")

    if not walker.pending:
        return walker.finalize(draft, ())
    logger.debug(f"Awaiting {len(walker.pending)} asynchronous checks for {type(obj).__name__}")
    return walker.finalize_async(draft)


async def validate_async(
    obj: Any,
    *exclude: str,
    schemas: SchemaRegistry | None = None,
    registry: ValidatorRegistry | None = None,
    settings: ValidationSettings | None = None,
) -> ErrorReport | None:
    """Validate with asynchronous validators enabled and await the result."""
    result = validate(obj, True, *exclude, schemas=schemas, registry=registry, settings=settings)
    if inspect.isawaitable(result):
        return await result
    return result


class ValidatableModel:
    """Mixin giving model classes a ``has_errors`` method.

    Example:
        ```python
        @dataclass
        class Person(ValidatableModel):
            name: str | None = None

        register_schema(ModelSchema(Person).field("name", rules.required()))
        Person().has_errors()
        # ErrorReport({'name': {'required': 'This field is required'}})
        ```
    """

    def has_errors(self, *exclude: str, async_allowed: bool | None = None):
        """Validate this instance; see ``validate``."""
        if async_allowed is None:
            async_allowed = get_settings().async_allowed
        return validate(self, async_allowed, *exclude)
