"""Lookup of aggregation types by name for document parsing and wire decoding."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from rankagg.errors import DocumentParseError, MalformedWireDataError
from rankagg.io.stream import StreamInput, StreamOutput

from .base import META_FIELD, AggregationBuilder
from .percentile_ranks import PercentileRanksAggregationBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregationSpec:
    """Entry points for one aggregation type."""

    name: str
    parser: Callable[[str, Mapping[str, Any]], AggregationBuilder]
    reader: Callable[[StreamInput], AggregationBuilder]


AGGREGATIONS: dict[str, AggregationSpec] = {
    spec.name: spec
    for spec in (
        AggregationSpec(
            name=PercentileRanksAggregationBuilder.TYPE,
            parser=PercentileRanksAggregationBuilder.parse,
            reader=PercentileRanksAggregationBuilder.read_from,
        ),
    )
}


def parse_aggregation(name: str, definition: Mapping[str, Any]) -> AggregationBuilder:
    """Parse ``{"<type>": {...}, "meta": {...}}`` for one named aggregation."""
    if not isinstance(definition, Mapping):
        raise DocumentParseError(f"Aggregation definition for [{name}] must be an object")

    type_names = [key for key in definition if key != META_FIELD]
    if len(type_names) != 1:
        raise DocumentParseError(
            f"Expected exactly one aggregation type for [{name}] but found {sorted(type_names)}"
        )
    type_name = type_names[0]
    spec = AGGREGATIONS.get(type_name)
    if spec is None:
        raise DocumentParseError(f"Unknown aggregation type [{type_name}] for [{name}]")

    body = definition[type_name]
    if not isinstance(body, Mapping):
        raise DocumentParseError(f"Body of [{type_name}] aggregation [{name}] must be an object")

    builder = spec.parser(name, body)
    if META_FIELD in definition:
        builder.set_meta(definition[META_FIELD])
    return builder


def parse_aggregations(aggregations: Mapping[str, Any]) -> dict[str, AggregationBuilder]:
    """Parse a request-level mapping of aggregation name to definition."""
    if not isinstance(aggregations, Mapping):
        raise DocumentParseError("Aggregations must be an object keyed by aggregation name")
    return {str(name): parse_aggregation(str(name), definition) for name, definition in aggregations.items()}


def write_aggregation(out: StreamOutput, aggregation: AggregationBuilder) -> None:
    """Write a type-name prefixed aggregation so the reader can pick the decoder."""
    out.write_string(aggregation.writeable_name)
    aggregation.write_to(out)


def read_aggregation(stream: StreamInput) -> AggregationBuilder:
    type_name = stream.read_string()
    spec = AGGREGATIONS.get(type_name)
    if spec is None:
        raise MalformedWireDataError(f"Unknown aggregation type [{type_name}] on the wire")
    aggregation = spec.reader(stream)
    logger.debug("Decoded [%s] aggregation [%s]", type_name, aggregation.name)
    return aggregation


def to_bytes(aggregation: AggregationBuilder) -> bytes:
    out = StreamOutput()
    write_aggregation(out, aggregation)
    return out.to_bytes()


def from_bytes(payload: bytes) -> AggregationBuilder:
    """Decode one aggregation; the payload must contain nothing else."""
    stream = StreamInput(payload)
    aggregation = read_aggregation(stream)
    stream.ensure_consumed()
    return aggregation
