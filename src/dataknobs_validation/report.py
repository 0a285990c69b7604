"""Error report returned by validation."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Sequence, Tuple


# a list slot: None (element passed), a nested report, or a plain message
Slot = Any


def _is_empty(value: Any) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, ErrorReport):
        return len(value) == 0
    if isinstance(value, (list, tuple)):
        return all(_is_empty(slot) for slot in value)
    return False


def _freeze_slot(slot: Any) -> Slot:
    if slot is None or isinstance(slot, (str, ErrorReport)):
        return slot
    if isinstance(slot, Mapping):
        return ErrorReport(slot) if slot else None
    return str(slot)


class ErrorReport(Mapping):
    """Immutable mapping of field name to ``{validator key: message}``.

    Nested model failures appear under dotted field names (``"address.city"``).
    Failures of list or set elements appear under the field's ``list`` key as
    a positional sequence whose slots are None, an ``ErrorReport`` or a
    message.

    Empty entries are dropped on construction; validation never returns an
    empty report.

    Example:
        ```python
        report = ErrorReport({"name": {"required": "This field is required"}})
        report == {"name": {"required": "This field is required"}}
        # True
        print(report)
        # name - This field is required
        ```
    """

    def __init__(self, errors: Mapping[str, Mapping[str, Any]] | None = None):
        cleaned: Dict[str, Mapping[str, Any]] = {}
        for field_name, entries in (errors or {}).items():
            if not entries:
                continue
            kept: Dict[str, Any] = {}
            for key, value in entries.items():
                if isinstance(value, (list, tuple)):
                    value = tuple(_freeze_slot(slot) for slot in value)
                if not _is_empty(value):
                    kept[key] = value
            if kept:
                cleaned[str(field_name)] = MappingProxyType(kept)
        self._errors = cleaned

    def __getitem__(self, field_name: str) -> Mapping[str, Any]:
        return self._errors[field_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorReport):
            return self.to_dict() == other.to_dict()
        if isinstance(other, Mapping):
            return self.to_dict() == {k: dict(v) if isinstance(v, Mapping) else v for k, v in other.items()}
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def fields(self) -> List[str]:
        """Names of the fields with at least one violation."""
        return list(self._errors)

    def messages(self, field_name: str) -> List[str]:
        """Every message recorded for a field, list slots flattened."""
        return [message for _, message in self._field_lines(field_name)]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Plain nested dictionaries and lists, nested reports included."""
        result: Dict[str, Dict[str, Any]] = {}
        for field_name, entries in self._errors.items():
            converted: Dict[str, Any] = {}
            for key, value in entries.items():
                if isinstance(value, tuple):
                    converted[key] = [slot.to_dict() if isinstance(slot, ErrorReport) else slot for slot in value]
                else:
                    converted[key] = value
            result[field_name] = converted
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> ErrorReport:
        """Build a report from ``to_dict`` output (slot dictionaries become reports)."""
        return cls(data)

    def _field_lines(self, field_name: str) -> List[Tuple[str, str]]:
        lines: List[Tuple[str, str]] = []
        for value in self._errors.get(field_name, {}).values():
            if isinstance(value, tuple):
                lines.extend(self._slot_lines(field_name, value))
            else:
                lines.append((field_name, str(value)))
        return lines

    @staticmethod
    def _slot_lines(field_name: str, slots: Sequence[Slot]) -> List[Tuple[str, str]]:
        lines: List[Tuple[str, str]] = []
        for index, slot in enumerate(slots):
            if slot is None:
                continue
            prefix = f"{field_name}.{index}"
            if isinstance(slot, ErrorReport):
                for nested_field in slot:
                    for nested_name, message in slot._field_lines(nested_field):
                        lines.append((f"{prefix}.{nested_name}", message))
            else:
                lines.append((prefix, str(slot)))
        return lines

    def __str__(self) -> str:
        lines = []
        for field_name in self._errors:
            lines.extend(f"{name} - {message}" for name, message in self._field_lines(field_name))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ErrorReport({self.to_dict()!r})"
