"""Execution factories handed to the percentile-rank algorithm layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

import numpy as np

from rankagg.search.context import SearchContext, ValuesSourceConfig

from .method import PercentilesMethod


class _NumericSourceFactory:
    """Accessors shared by factories built over a numeric values source."""

    name: str
    config: ValuesSourceConfig
    values: tuple[float, ...]
    keyed: bool
    method: ClassVar[PercentilesMethod]

    def source_values(self) -> np.ndarray:
        """Samples to feed the algorithm; empty for an unmapped field."""
        if self.config.source is None:
            return np.empty(0, dtype=np.float64)
        return self.config.source.values

    def _describe_common(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "method": self.method.value,
            "field": self.config.field,
            "unmapped": self.config.unmapped,
            "sample_count": int(self.source_values().size),
            "values": list(self.values),
            "keyed": self.keyed,
        }


@dataclass(frozen=True)
class TDigestPercentileRanksAggregatorFactory(_NumericSourceFactory):
    """Percentile ranks backed by a TDigest sketch."""

    name: str
    config: ValuesSourceConfig = field(compare=False, repr=False)
    values: tuple[float, ...]
    compression: float
    keyed: bool
    context: SearchContext = field(compare=False, repr=False)
    meta: dict[str, Any] | None = field(default=None, compare=False)

    method: ClassVar[PercentilesMethod] = PercentilesMethod.TDIGEST

    def describe(self) -> dict[str, Any]:
        return {**self._describe_common(), "compression": self.compression}


@dataclass(frozen=True)
class HDRPercentileRanksAggregatorFactory(_NumericSourceFactory):
    """Percentile ranks backed by an HDR histogram."""

    name: str
    config: ValuesSourceConfig = field(compare=False, repr=False)
    values: tuple[float, ...]
    number_of_significant_value_digits: int
    keyed: bool
    context: SearchContext = field(compare=False, repr=False)
    meta: dict[str, Any] | None = field(default=None, compare=False)

    method: ClassVar[PercentilesMethod] = PercentilesMethod.HDR

    def describe(self) -> dict[str, Any]:
        return {
            **self._describe_common(),
            "number_of_significant_value_digits": self.number_of_significant_value_digits,
        }
