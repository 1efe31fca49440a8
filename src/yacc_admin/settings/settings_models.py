"""Value types shared by the settings validation workflow."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

RESERVED_FORM_FIELDS = ("submit",)


class FieldMap(MutableMapping[str, str]):
    """Ordered mapping of configuration field name to its string value."""

    def __init__(self, items: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        self._data: dict[str, str] = {}
        pairs = items.items() if isinstance(items, Mapping) else items
        for name, value in pairs:
            self[name] = value

    @classmethod
    def from_stored(cls, stored: Mapping[str, Any]) -> "FieldMap":
        """Build a map from a persisted blob, dropping non-string values."""
        fields = cls()
        for name, value in stored.items():
            if isinstance(value, str):
                fields[name] = value
            else:
                logger.debug(
                    "settings.fields.dropped_value",
                    field=name,
                    value_type=type(value).__name__,
                )
        return fields

    @classmethod
    def from_form(
        cls,
        items: Iterable[tuple[str, str]],
        *,
        reserved: Iterable[str] = RESERVED_FORM_FIELDS,
    ) -> "FieldMap":
        """Build a fresh map from submitted form pairs.

        Reserved control fields are skipped and empty values mean the field
        is not set. When a name repeats, the last non-empty value wins.
        """
        skipped = set(reserved)
        fields = cls()
        for name, value in items:
            if name in skipped or not value:
                continue
            fields[name] = value
        return fields

    def __getitem__(self, name: str) -> str:
        return self._data[name]

    def __setitem__(self, name: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"field '{name}' must be a string, got {type(value).__name__}")
        self._data[name] = value

    def __delitem__(self, name: str) -> None:
        del self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"FieldMap({self._data!r})"

    def to_dict(self) -> dict[str, str]:
        return dict(self._data)


class FieldErrors(Mapping[str, list[str]]):
    """Ordered mapping of field name to the messages that field failed.

    A field without messages is never present, so absence means valid.
    """

    def __init__(self) -> None:
        self._data: dict[str, list[str]] = {}

    def add(self, name: str, message: str) -> None:
        self._data.setdefault(name, []).append(message)

    def clear(self) -> None:
        self._data.clear()

    def __getitem__(self, name: str) -> list[str]:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldErrors):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"FieldErrors({self._data!r})"

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(messages) for name, messages in self._data.items()}


class ValidationErrors:
    """Sink handed to validators; clears the wrapped errors on construction."""

    def __init__(self, field_errors: FieldErrors) -> None:
        self.field_errors = field_errors
        self.field_errors.clear()
        # Form-level messages are collected but the settings form has no place to show them yet.
        self.form_errors: list[str] = []

    def add_field_error(self, name: str, message: str) -> None:
        self.field_errors.add(name, message)

    def add_form_error(self, message: str) -> None:
        self.form_errors.append(message)


@dataclass(frozen=True, slots=True)
class FieldCheck:
    """Outcome of checking a single field."""

    messages: tuple[str, ...] = ()
    error: BaseException | None = None

    @classmethod
    def ok(cls) -> "FieldCheck":
        return cls()

    @classmethod
    def failed(cls, *messages: str) -> "FieldCheck":
        return cls(messages=tuple(messages))

    @classmethod
    def fault(cls, error: BaseException) -> "FieldCheck":
        return cls(error=error)

    @property
    def is_fault(self) -> bool:
        return self.error is not None


@dataclass(slots=True)
class ConfigForm:
    """Request-scoped pair of field values and the errors computed for them."""

    fields: FieldMap = field(default_factory=FieldMap)
    errors: FieldErrors = field(default_factory=FieldErrors)


__all__ = [
    "ConfigForm",
    "FieldCheck",
    "FieldErrors",
    "FieldMap",
    "RESERVED_FORM_FIELDS",
    "ValidationErrors",
]
