"""HTTP service for aggregation requests."""

from .service import AggregationService

__all__ = ["AggregationService"]
