"""Aggregation builders and their codecs."""

from .base import AggregationBuilder, ValuesSourceAggregationBuilder
from .factories import HDRPercentileRanksAggregatorFactory, TDigestPercentileRanksAggregatorFactory
from .method import PercentilesMethod
from .options import HDROptions, TDigestOptions
from .percentile_ranks import PercentileRanksAggregationBuilder
from .registry import (
    from_bytes,
    parse_aggregation,
    parse_aggregations,
    read_aggregation,
    to_bytes,
    write_aggregation,
)

__all__ = [
    "AggregationBuilder",
    "HDROptions",
    "HDRPercentileRanksAggregatorFactory",
    "PercentileRanksAggregationBuilder",
    "PercentilesMethod",
    "TDigestOptions",
    "TDigestPercentileRanksAggregatorFactory",
    "ValuesSourceAggregationBuilder",
    "from_bytes",
    "parse_aggregation",
    "parse_aggregations",
    "read_aggregation",
    "to_bytes",
    "write_aggregation",
]
