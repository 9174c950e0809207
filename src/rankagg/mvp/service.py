"""Aggregation request adapter for the HTTP API."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from rankagg.aggregations import (
    AggregationBuilder,
    PercentileRanksAggregationBuilder,
    ValuesSourceAggregationBuilder,
    from_bytes,
    parse_aggregations,
    to_bytes,
)
from rankagg.config.schema import ServiceSettings
from rankagg.errors import InvalidArgumentError, MalformedWireDataError
from rankagg.search.context import SearchContext


class AggregationService:
    """Parse, normalize, transcode and plan aggregation requests."""

    def __init__(self, settings: ServiceSettings | None = None) -> None:
        self.settings = settings or ServiceSettings()
        self._context: SearchContext | None = None

    @property
    def context(self) -> SearchContext:
        """Documents from the configured CSV, loaded on first use."""
        if self._context is None:
            self._context = SearchContext.from_csv(
                Path(self.settings.dataset_csv), encoding=self.settings.csv_encoding
            )
        return self._context

    def parse(self, aggregations: Mapping[str, Any]) -> dict[str, AggregationBuilder]:
        parsed = parse_aggregations(aggregations)
        for builder in parsed.values():
            self._check_limits(builder)
        return parsed

    def normalize(self, aggregations: Mapping[str, Any]) -> dict[str, Any]:
        """Return the canonical document form of every aggregation."""
        return self._to_document(self.parse(aggregations).values())

    def encode(self, aggregations: Mapping[str, Any]) -> dict[str, str]:
        """Return base64 wire payloads keyed by aggregation name."""
        return {
            name: base64.b64encode(to_bytes(builder)).decode("ascii")
            for name, builder in self.parse(aggregations).items()
        }

    def decode(self, payloads: Mapping[str, str]) -> dict[str, Any]:
        """Decode base64 wire payloads back into the canonical document form."""
        decoded: list[AggregationBuilder] = []
        for name, payload in payloads.items():
            try:
                raw = base64.b64decode(payload, validate=True)
            except binascii.Error as exc:
                raise MalformedWireDataError(f"payload for [{name}] is not valid base64") from exc
            builder = from_bytes(raw)
            if builder.name != name:
                raise MalformedWireDataError(f"payload for [{name}] holds aggregation [{builder.name}]")
            decoded.append(builder)
        return self._to_document(decoded)

    def plan(self, aggregations: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
        """Resolve each aggregation against the dataset and describe its factory."""
        plans: dict[str, dict[str, Any]] = {}
        for name, builder in self.parse(aggregations).items():
            if not isinstance(builder, ValuesSourceAggregationBuilder):
                raise InvalidArgumentError(f"Aggregation [{name}] cannot be planned")
            plans[name] = builder.build(self.context).describe()
        return plans

    def _check_limits(self, builder: AggregationBuilder) -> None:
        if isinstance(builder, PercentileRanksAggregationBuilder):
            if len(builder.values) > self.settings.max_values:
                raise InvalidArgumentError(
                    f"[values] of [{builder.name}] has {len(builder.values)} entries, "
                    f"the limit is {self.settings.max_values}"
                )

    @staticmethod
    def _to_document(builders: Any) -> dict[str, Any]:
        document: dict[str, Any] = {}
        for builder in builders:
            document.update(builder.to_xcontent())
        return document
