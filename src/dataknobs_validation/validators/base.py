"""Validator contract and runtime type guard."""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Iterable, Tuple

from ..constants import DEFAULT_ERROR_MESSAGES, MESSAGE_OPTION
from ..strings import sf

if TYPE_CHECKING:
    from ..path import PathAccessor


# type names that stand for several runtime classes
TYPE_ALIASES: Dict[str, Tuple[type, ...]] = {
    "number": (int, float, Decimal),
    "string": (str,),
    "boolean": (bool,),
    "array": (list, tuple),
    "object": (dict,),
}


def type_name(declared: Any) -> str:
    """Name of a declared type, given as a class or a type name."""
    if isinstance(declared, type):
        return declared.__name__
    return str(declared)


def value_type_name(value: Any) -> str:
    """Name of the runtime type of a value."""
    return type(value).__name__


def matches_type(value: Any, accepted: Any) -> bool:
    """Check a value against one accepted type, given as a name or a class.

    A name matches the value's class or any class in its MRO. ``bool`` values
    only match ``bool``, never ``int`` or ``number``.
    """
    if isinstance(value, bool):
        return accepted is bool or accepted in ("bool", "boolean")

    if isinstance(accepted, type):
        return isinstance(value, accepted)

    name = str(accepted)
    alias = TYPE_ALIASES.get(name.lower())
    if alias is not None and isinstance(value, alias):
        return True
    return any(klass.__name__ == name for klass in type(value).__mro__)


def check_types(value: Any, accepted: Iterable[Any]) -> bool:
    """Check whether a value matches at least one of the accepted types."""
    return any(matches_type(value, item) for item in accepted)


async def resolved(result: str | None) -> str | None:
    """Wrap an already known result in an awaitable."""
    return result


class BaseValidator(ABC):
    """Base class of every validator.

    A validator is a stateless rule. ``has_errors`` returns ``None`` when the
    value passes and a message otherwise (or an awaitable of either for
    asynchronous validators).

    When ``accepted_types`` is given the rule body is guarded once, at
    construction: ``None`` passes without reaching the body, and a value of
    another type yields the type mismatch message.

    Args:
        message: Default message template
        *accepted_types: Names or classes of the value types the rule handles
    """

    is_async: bool = False
    # registry key used when an instance is registered without a definition
    key: str = ""

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["DEFAULT"], *accepted_types: Any):
        self.message = message
        self.accepted_types: Tuple[Any, ...] = tuple(accepted_types)
        if self.accepted_types:
            self.has_errors = self._guard(self.has_errors)  # type: ignore[method-assign]

    def _guard(self, body: Callable[..., Any]) -> Callable[..., Any]:
        is_async = self.is_async

        @functools.wraps(body)
        def guarded(value: Any, options: Dict[str, Any] | None = None, accessor: PathAccessor | None = None):
            if value is None:
                return resolved(None) if is_async else None
            if not check_types(value, self.accepted_types):
                message = sf(
                    DEFAULT_ERROR_MESSAGES["TYPE"],
                    [type_name(t) for t in self.accepted_types],
                    value_type_name(value),
                )
                return resolved(message) if is_async else message
            return body(value, options, accessor)

        return guarded

    def get_message(self, template: str | None, *args: Any) -> str:
        """Format a message template, falling back to the default message."""
        return sf(template or self.message, *args)

    def message_for(self, options: Dict[str, Any] | None) -> str:
        """Template to use for a rule: the ``message`` option or the default."""
        if options and options.get(MESSAGE_OPTION):
            return options[MESSAGE_OPTION]
        return self.message

    @abstractmethod
    def has_errors(
        self,
        value: Any,
        options: Dict[str, Any] | None = None,
        accessor: PathAccessor | None = None,
    ) -> str | None | Awaitable[str | None]:
        """Check a value against the rule."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"


class Validator(BaseValidator):
    """Synchronous validator; subclasses implement ``has_errors``."""

    @abstractmethod
    def has_errors(
        self,
        value: Any,
        options: Dict[str, Any] | None = None,
        accessor: PathAccessor | None = None,
    ) -> str | None:
        """Return an error message, or None when the value passes."""


class AsyncValidator(BaseValidator):
    """Asynchronous validator; subclasses implement ``async def has_errors``.

    Async validators only run when validation is called with async allowed.
    """

    is_async = True

    @abstractmethod
    async def has_errors(
        self,
        value: Any,
        options: Dict[str, Any] | None = None,
        accessor: PathAccessor | None = None,
    ) -> str | None:
        """Resolve to an error message, or None when the value passes."""
