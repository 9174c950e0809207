"""Aggregation execution context."""

from .context import NumericValuesSource, SearchContext, ValuesSourceConfig

__all__ = ["NumericValuesSource", "SearchContext", "ValuesSourceConfig"]
