"""Builder for the ``percentile_ranks`` aggregation."""

from __future__ import annotations

import logging
import numbers
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np

from rankagg.errors import IllegalStateError, InvalidArgumentError
from rankagg.io.stream import StreamInput, StreamOutput
from rankagg.search.context import SearchContext, ValuesSourceConfig
from rankagg.xcontent.builder import XContentBuilder
from rankagg.xcontent.parser import ObjectParser

from .base import ValuesSourceAggregationBuilder, declare_numeric_fields
from .factories import HDRPercentileRanksAggregatorFactory, TDigestPercentileRanksAggregatorFactory
from .method import PercentilesMethod
from .options import HDROptions, TDigestOptions, parse_options

logger = logging.getLogger(__name__)

NAME = "percentile_ranks"

VALUES_FIELD = "values"
KEYED_FIELD = "keyed"
COMPRESSION_FIELD = "compression"
NUMBER_SIGNIFICANT_DIGITS_FIELD = "number_of_significant_value_digits"

DEFAULT_COMPRESSION = 100.0
DEFAULT_NUMBER_OF_SIGNIFICANT_VALUE_DIGITS = 3
MAX_NUMBER_OF_SIGNIFICANT_VALUE_DIGITS = 5

PercentileRanksFactory = TDigestPercentileRanksAggregatorFactory | HDRPercentileRanksAggregatorFactory


class PercentileRanksAggregationBuilder(ValuesSourceAggregationBuilder):
    """Configure percentile ranks of target values over a numeric field.

    Both tuning parameters are always stored so that switching the method back
    and forth keeps earlier tuning. Only the parameter of the active method is
    used by equality, hashing, document output and ``build``; the wire form
    carries both.
    """

    TYPE = NAME

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._values: tuple[float, ...] = ()
        self._keyed = True
        self._method = PercentilesMethod.TDIGEST
        self._number_of_significant_value_digits = DEFAULT_NUMBER_OF_SIGNIFICANT_VALUE_DIGITS
        self._compression = DEFAULT_COMPRESSION

    @classmethod
    def parse(cls, name: str, document: Mapping[str, Any]) -> PercentileRanksAggregationBuilder:
        """Build from the body found under ``percentile_ranks`` in a request."""
        return PARSER.parse(document, cls(name))

    @classmethod
    def read_from(cls, stream: StreamInput) -> PercentileRanksAggregationBuilder:
        """Decode from the wire; values were validated by the sender."""
        builder = cls.__new__(cls)
        builder._read_base(stream)
        builder._values = stream.read_double_array()
        builder._keyed = stream.read_boolean()
        builder._number_of_significant_value_digits = stream.read_vint()
        builder._compression = stream.read_double()
        builder._method = PercentilesMethod.read_from(stream)
        return builder

    def inner_write_to(self, out: StreamOutput) -> None:
        out.write_double_array(self._values)
        out.write_boolean(self._keyed)
        out.write_vint(self._number_of_significant_value_digits)
        out.write_double(self._compression)
        self._method.write_to(out)

    # settings

    @property
    def values(self) -> tuple[float, ...]:
        """Target values, sorted ascending."""
        return self._values

    def set_values(self, values: Iterable[float] | None) -> PercentileRanksAggregationBuilder:
        """Set the values to compute percentile ranks of."""
        if values is None:
            raise InvalidArgumentError(f"[values] must not be null: [{self._name}]")
        try:
            candidates = list(values)
        except TypeError as exc:
            raise InvalidArgumentError(f"[values] must be an array of numbers: [{self._name}]") from exc
        if any(isinstance(value, bool) or not isinstance(value, numbers.Real) for value in candidates):
            raise InvalidArgumentError(f"[values] must only contain numbers: [{self._name}]")
        array = np.asarray(candidates, dtype=np.float64)
        # Ascending with -0.0 before 0.0 and NaN last.
        order = np.lexsort((~np.signbit(array), array))
        self._values = tuple(float(value) for value in array[order])
        return self

    @property
    def keyed(self) -> bool:
        """Whether the response labels each rank by its value."""
        return self._keyed

    def set_keyed(self, keyed: bool) -> PercentileRanksAggregationBuilder:
        if not isinstance(keyed, bool):
            raise InvalidArgumentError(f"[keyed] must be a boolean: [{self._name}]")
        self._keyed = keyed
        return self

    @property
    def number_of_significant_value_digits(self) -> int:
        """Expert: HDR histogram precision. Only used with ``PercentilesMethod.HDR``."""
        return self._number_of_significant_value_digits

    def set_number_of_significant_value_digits(self, digits: int) -> PercentileRanksAggregationBuilder:
        if isinstance(digits, bool) or not isinstance(digits, numbers.Integral):
            raise InvalidArgumentError(f"[numberOfSignificantValueDigits] must be an integer: [{self._name}]")
        if digits < 0 or digits > MAX_NUMBER_OF_SIGNIFICANT_VALUE_DIGITS:
            raise InvalidArgumentError(
                f"[numberOfSignificantValueDigits] must be between 0 and "
                f"{MAX_NUMBER_OF_SIGNIFICANT_VALUE_DIGITS}: [{self._name}]"
            )
        self._number_of_significant_value_digits = int(digits)
        return self

    @property
    def compression(self) -> float:
        """Expert: TDigest compression. Higher is more accurate and uses more memory.

        Only used with ``PercentilesMethod.TDIGEST``.
        """
        return self._compression

    def set_compression(self, compression: float) -> PercentileRanksAggregationBuilder:
        if isinstance(compression, bool) or not isinstance(compression, numbers.Real):
            raise InvalidArgumentError(f"[compression] must be a number: [{self._name}]")
        if compression < 0.0:
            raise InvalidArgumentError(
                f"[compression] must be greater than or equal to 0. Found [{compression}] in [{self._name}]"
            )
        self._compression = float(compression)
        return self

    @property
    def method(self) -> PercentilesMethod:
        return self._method

    def set_method(self, method: PercentilesMethod | str | None) -> PercentileRanksAggregationBuilder:
        if method is None:
            raise InvalidArgumentError(f"[method] must not be null: [{self._name}]")
        if isinstance(method, str):
            method = PercentilesMethod.from_name(method)
        if not isinstance(method, PercentilesMethod):
            raise InvalidArgumentError(f"Unknown percentiles method [{method!r}]: [{self._name}]")
        self._method = method
        return self

    # execution

    def inner_build(self, context: SearchContext, config: ValuesSourceConfig) -> PercentileRanksFactory:
        logger.debug("Building %s percentile ranks factory for [%s]", self._method, self._name)
        if self._method is PercentilesMethod.TDIGEST:
            return TDigestPercentileRanksAggregatorFactory(
                self._name, config, self._values, self._compression, self._keyed, context, self.meta
            )
        if self._method is PercentilesMethod.HDR:
            return HDRPercentileRanksAggregatorFactory(
                self._name,
                config,
                self._values,
                self._number_of_significant_value_digits,
                self._keyed,
                context,
                self.meta,
            )
        raise IllegalStateError(f"Illegal method [{self._method}]")

    # document form

    def do_xcontent_body(self, builder: XContentBuilder) -> None:
        builder.array(VALUES_FIELD, self._values)
        builder.field(KEYED_FIELD, self._keyed)
        builder.start_object(str(self._method))
        if self._method is PercentilesMethod.TDIGEST:
            builder.field(COMPRESSION_FIELD, self._compression)
        else:
            builder.field(NUMBER_SIGNIFICANT_DIGITS_FIELD, self._number_of_significant_value_digits)
        builder.end_object()

    # equality

    def _live_setting(self) -> float | int:
        if self._method is PercentilesMethod.TDIGEST:
            return self._compression
        if self._method is PercentilesMethod.HDR:
            return self._number_of_significant_value_digits
        raise IllegalStateError(f"Illegal method [{self._method}]")

    def _values_key(self) -> bytes:
        # Bitwise per element, with every NaN collapsed to one pattern.
        array = np.asarray(self._values, dtype=np.float64)
        return np.where(np.isnan(array), np.nan, array).tobytes()

    def inner_equals(self, other: Any) -> bool:
        if self._method is not other._method:
            return False
        return (
            self._live_setting() == other._live_setting()
            and self._values_key() == other._values_key()
            and self._keyed == other._keyed
        )

    def inner_hash(self) -> int:
        return hash((self._values_key(), self._keyed, self._live_setting(), self._method))


def _apply_tdigest(builder: PercentileRanksAggregationBuilder, options: TDigestOptions) -> None:
    # Presence of the object selects the method even when it is empty.
    builder.set_method(PercentilesMethod.TDIGEST)
    if options.compression is not None:
        builder.set_compression(options.compression)


def _apply_hdr(builder: PercentileRanksAggregationBuilder, options: HDROptions) -> None:
    builder.set_method(PercentilesMethod.HDR)
    if options.number_of_significant_value_digits is not None:
        builder.set_number_of_significant_value_digits(options.number_of_significant_value_digits)


def _build_parser() -> ObjectParser[PercentileRanksAggregationBuilder]:
    parser: ObjectParser[PercentileRanksAggregationBuilder] = ObjectParser(NAME)
    declare_numeric_fields(parser)
    parser.declare_double_array(lambda builder, values: builder.set_values(values), VALUES_FIELD)
    parser.declare_boolean(lambda builder, keyed: builder.set_keyed(keyed), KEYED_FIELD)
    parser.declare_object(
        _apply_tdigest,
        lambda document, field: parse_options(TDigestOptions, document, field),
        PercentilesMethod.TDIGEST.parse_field,
    )
    parser.declare_object(
        _apply_hdr,
        lambda document, field: parse_options(HDROptions, document, field),
        PercentilesMethod.HDR.parse_field,
    )
    return parser


PARSER = _build_parser()
