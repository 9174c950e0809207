"""Declarative field-to-setter parsing of structured documents."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from rankagg.errors import DocumentParseError

T = TypeVar("T")


class ValueType(Enum):
    """Accepted shape of a declared field."""

    DOUBLE = "double"
    INT = "int"
    BOOLEAN = "boolean"
    STRING = "string"
    DOUBLE_ARRAY = "double_array"
    OBJECT = "object"


def parse_double(value: Any, field_name: str) -> float:
    """Coerce numbers and numeric strings to float."""
    if isinstance(value, bool):
        raise DocumentParseError(f"[{field_name}] expected a number but found a boolean")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise DocumentParseError(f"[{field_name}] cannot parse [{value}] as a number") from exc
    raise DocumentParseError(f"[{field_name}] expected a number but found {type(value).__name__}")


def parse_int(value: Any, field_name: str) -> int:
    """Coerce integers, integral floats and integer strings to int."""
    if isinstance(value, bool):
        raise DocumentParseError(f"[{field_name}] expected an integer but found a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError as exc:
            raise DocumentParseError(f"[{field_name}] cannot parse [{value}] as an integer") from exc
    raise DocumentParseError(f"[{field_name}] expected an integer but found {value!r}")


def parse_boolean(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if value in ("true", "false"):
        return value == "true"
    raise DocumentParseError(f"[{field_name}] expected a boolean but found {value!r}")


def parse_string(value: Any, field_name: str) -> str:
    if isinstance(value, str):
        return value
    raise DocumentParseError(f"[{field_name}] expected a string but found {type(value).__name__}")


def parse_double_array(value: Any, field_name: str) -> list[float]:
    """Accept a list of numbers; a lone number is treated as a one-element array."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return [float(value)]
    if isinstance(value, (str, Mapping)) or not isinstance(value, Sequence):
        raise DocumentParseError(f"[{field_name}] expected an array of numbers")
    return [parse_double(item, field_name) for item in value]


def parse_object(value: Any, field_name: str) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    raise DocumentParseError(f"[{field_name}] expected an object but found {type(value).__name__}")


_VALUE_PARSERS: dict[ValueType, Callable[[Any, str], Any]] = {
    ValueType.DOUBLE: parse_double,
    ValueType.INT: parse_int,
    ValueType.BOOLEAN: parse_boolean,
    ValueType.STRING: parse_string,
    ValueType.DOUBLE_ARRAY: parse_double_array,
    ValueType.OBJECT: parse_object,
}


@dataclass(frozen=True)
class FieldBinding(Generic[T]):
    """One declared field: how to read the raw value and where to apply it."""

    name: str
    value_type: ValueType
    reader: Callable[[Any, str], Any]
    consumer: Callable[[T, Any], Any]


class ObjectParser(Generic[T]):
    """Parse a mapping into a target object through declared field bindings.

    Fields are applied in document order, so a later key overrides the side
    effects of an earlier one. Keys without a binding are rejected.
    """

    def __init__(self, name: str, supplier: Callable[[], T] | None = None) -> None:
        self.name = name
        self._supplier = supplier
        self._fields: dict[str, FieldBinding[T]] = {}

    def declare_field(
        self,
        consumer: Callable[[T, Any], Any],
        field_name: str,
        value_type: ValueType,
        reader: Callable[[Any, str], Any] | None = None,
    ) -> None:
        """Bind ``field_name`` to ``consumer``; ``reader`` post-processes the coerced value."""
        if field_name in self._fields:
            raise ValueError(f"[{self.name}] field [{field_name}] is already declared")
        base = _VALUE_PARSERS[value_type]
        if reader is None:
            combined = base
        else:
            def combined(value: Any, name: str) -> Any:
                return reader(base(value, name), name)

        self._fields[field_name] = FieldBinding(field_name, value_type, combined, consumer)

    def declare_double(self, consumer: Callable[[T, float], Any], field_name: str) -> None:
        self.declare_field(consumer, field_name, ValueType.DOUBLE)

    def declare_int(self, consumer: Callable[[T, int], Any], field_name: str) -> None:
        self.declare_field(consumer, field_name, ValueType.INT)

    def declare_boolean(self, consumer: Callable[[T, bool], Any], field_name: str) -> None:
        self.declare_field(consumer, field_name, ValueType.BOOLEAN)

    def declare_string(self, consumer: Callable[[T, str], Any], field_name: str) -> None:
        self.declare_field(consumer, field_name, ValueType.STRING)

    def declare_double_array(self, consumer: Callable[[T, list[float]], Any], field_name: str) -> None:
        self.declare_field(consumer, field_name, ValueType.DOUBLE_ARRAY)

    def declare_object(
        self,
        consumer: Callable[[T, Any], Any],
        sub_parser: Callable[[Mapping[str, Any], str], Any],
        field_name: str,
    ) -> None:
        self.declare_field(consumer, field_name, ValueType.OBJECT, reader=sub_parser)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def parse(self, document: Mapping[str, Any], value: T | None = None) -> T:
        """Apply every key of ``document`` to ``value`` (or a freshly supplied one)."""
        if not isinstance(document, Mapping):
            raise DocumentParseError(f"[{self.name}] expected an object but found {type(document).__name__}")
        if value is None:
            if self._supplier is None:
                raise ValueError(f"[{self.name}] has no supplier, a target value is required")
            value = self._supplier()

        for key, raw in document.items():
            binding = self._fields.get(key)
            if binding is None:
                raise DocumentParseError(f"[{self.name}] unknown field [{key}]")
            if raw is None:
                raise DocumentParseError(f"[{self.name}] field [{key}] cannot be null")
            binding.consumer(value, binding.reader(raw, key))
        return value
