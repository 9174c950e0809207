"""Base classes shared by aggregation builders."""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar, cast

from rankagg.errors import InvalidArgumentError, MalformedWireDataError
from rankagg.io.stream import StreamInput, StreamOutput
from rankagg.search.context import SearchContext, ValuesSourceConfig
from rankagg.xcontent.builder import XContentBuilder
from rankagg.xcontent.parser import ObjectParser

B = TypeVar("B", bound="AggregationBuilder")
VS = TypeVar("VS", bound="ValuesSourceAggregationBuilder")

META_FIELD = "meta"


class AggregationBuilder(ABC):
    """Named node of an aggregation request.

    Subclasses provide the type name, the body written under it, wire fields
    and equality over their own settings.
    """

    TYPE: ClassVar[str]

    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("[name] must be a non-empty string")
        self._name = name
        self._meta: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def meta(self) -> dict[str, Any] | None:
        return None if self._meta is None else dict(self._meta)

    @property
    def writeable_name(self) -> str:
        return self.TYPE

    def set_meta(self: B, meta: Mapping[str, Any] | None) -> B:
        """Attach free-form metadata returned untouched with the response."""
        if meta is None:
            self._meta = None
            return self
        if not isinstance(meta, Mapping):
            raise InvalidArgumentError(f"[meta] must be an object: [{self._name}]")
        try:
            _canonical_json(meta)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"[meta] must be JSON serializable: [{self._name}]") from exc
        self._meta = dict(meta)
        return self

    # wire form

    def write_to(self, out: StreamOutput) -> None:
        self._write_base(out)
        self.inner_write_to(out)

    def _write_base(self, out: StreamOutput) -> None:
        out.write_string(self._name)
        out.write_optional_string(None if self._meta is None else _canonical_json(self._meta))

    def _read_base(self, stream: StreamInput) -> None:
        self._name = stream.read_string()
        raw_meta = stream.read_optional_string()
        self._meta = None if raw_meta is None else _decode_meta(raw_meta)

    @abstractmethod
    def inner_write_to(self, out: StreamOutput) -> None:
        """Write the fields specific to this aggregation type."""

    # document form

    def to_xcontent(self) -> dict[str, Any]:
        builder = XContentBuilder()
        builder.start_object(self._name)
        builder.start_object(self.TYPE)
        self.internal_xcontent(builder)
        builder.end_object()
        if self._meta is not None:
            builder.field(META_FIELD, dict(self._meta))
        builder.end_object()
        return builder.to_dict()

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_xcontent(), allow_nan=False, **kwargs)

    @abstractmethod
    def internal_xcontent(self, builder: XContentBuilder) -> None:
        """Write the body found under the type name."""

    # equality

    @abstractmethod
    def inner_equals(self, other: Any) -> bool:
        """Compare type-specific settings; ``other`` has the same class."""

    @abstractmethod
    def inner_hash(self) -> int:
        """Hash consistent with ``inner_equals``."""

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if type(other) is not type(self):
            return NotImplemented
        other = cast(AggregationBuilder, other)
        return (
            self._name == other._name
            and self._meta_key() == other._meta_key()
            and self.inner_equals(other)
        )

    def __hash__(self) -> int:
        return hash((self.TYPE, self._name, self._meta_key(), self.inner_hash()))

    def _meta_key(self) -> str | None:
        return None if self._meta is None else _canonical_json(self._meta)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


class ValuesSourceAggregationBuilder(AggregationBuilder):
    """Leaf aggregation reading numeric values from one document field."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._field: str | None = None
        self._missing: float | None = None

    @property
    def field(self) -> str | None:
        return self._field

    @property
    def missing(self) -> float | None:
        return self._missing

    def set_field(self: VS, field: str) -> VS:
        if not isinstance(field, str) or not field:
            raise InvalidArgumentError(f"[field] must be a non-empty string: [{self._name}]")
        self._field = field
        return self

    def set_missing(self: VS, missing: float | None) -> VS:
        """Value used for documents without one; ``None`` skips such documents."""
        if missing is None:
            self._missing = None
            return self
        if isinstance(missing, bool) or not isinstance(missing, (int, float)):
            raise InvalidArgumentError(f"[missing] must be a number: [{self._name}]")
        self._missing = float(missing)
        return self

    def sub_aggregation(self, aggregation: AggregationBuilder) -> ValuesSourceAggregationBuilder:
        raise InvalidArgumentError(
            f"Aggregator [{self._name}] of type [{self.TYPE}] cannot accept sub-aggregations"
        )

    def _write_base(self, out: StreamOutput) -> None:
        super()._write_base(out)
        out.write_optional_string(self._field)
        out.write_optional_double(self._missing)

    def _read_base(self, stream: StreamInput) -> None:
        super()._read_base(stream)
        self._field = stream.read_optional_string()
        self._missing = stream.read_optional_double()

    def internal_xcontent(self, builder: XContentBuilder) -> None:
        if self._field is not None:
            builder.field("field", self._field)
        if self._missing is not None:
            builder.field("missing", self._missing)
        self.do_xcontent_body(builder)

    @abstractmethod
    def do_xcontent_body(self, builder: XContentBuilder) -> None:
        """Write type-specific document fields after the values-source fields."""

    def build(self, context: SearchContext) -> Any:
        """Resolve the field against ``context`` and create the execution factory."""
        config = ValuesSourceConfig.resolve(context, self._field, self._missing, self.TYPE)
        return self.inner_build(context, config)

    @abstractmethod
    def inner_build(self, context: SearchContext, config: ValuesSourceConfig) -> Any:
        """Create the execution factory for a resolved values source."""

    def __eq__(self, other: object) -> bool:
        result = super().__eq__(other)
        if result is not True:
            return result
        other = cast(ValuesSourceAggregationBuilder, other)
        return self._field == other._field and _same_double(self._missing, other._missing)

    def __hash__(self) -> int:
        return hash((super().__hash__(), self._field, _double_key(self._missing)))


def declare_numeric_fields(parser: ObjectParser[Any]) -> None:
    """Declare the values-source fields every numeric leaf aggregation accepts."""
    parser.declare_string(lambda builder, value: builder.set_field(value), "field")
    parser.declare_double(lambda builder, value: builder.set_missing(value), "missing")


def _same_double(left: float | None, right: float | None) -> bool:
    if left is None or right is None:
        return left is right
    if math.isnan(left) and math.isnan(right):
        return True
    return left == right


def _double_key(value: float | None) -> float | str | None:
    if value is not None and math.isnan(value):
        return "NaN"
    return value


def _canonical_json(value: Mapping[str, Any]) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), allow_nan=False)


def _decode_meta(raw: str) -> dict[str, Any]:
    try:
        meta = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedWireDataError("aggregation metadata is not valid JSON") from exc
    if not isinstance(meta, dict):
        raise MalformedWireDataError("aggregation metadata must be a JSON object")
    return meta
