"""Percentile ranks aggregation builder."""

from .aggregations import PercentileRanksAggregationBuilder, PercentilesMethod
from .errors import (
    DocumentParseError,
    IllegalStateError,
    InvalidArgumentError,
    MalformedWireDataError,
    RankAggError,
)

__all__ = [
    "DocumentParseError",
    "IllegalStateError",
    "InvalidArgumentError",
    "MalformedWireDataError",
    "PercentileRanksAggregationBuilder",
    "PercentilesMethod",
    "RankAggError",
]
