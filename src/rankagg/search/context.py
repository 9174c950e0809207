"""Execution context and numeric values-source resolution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from rankagg.data.loader import DocumentFrameLoader
from rankagg.errors import InvalidArgumentError


class SearchContext:
    """Documents an aggregation runs against, one row per document."""

    def __init__(self, documents: pd.DataFrame) -> None:
        self.documents = documents

    @classmethod
    def from_csv(cls, path: str | Path, encoding: str = "utf-8") -> SearchContext:
        return cls(DocumentFrameLoader().load_csv(path, encoding=encoding))

    @property
    def num_docs(self) -> int:
        return len(self.documents)

    def has_field(self, field: str) -> bool:
        return field in self.documents.columns

    def column(self, field: str) -> pd.Series:
        return self.documents[field]


@dataclass(frozen=True)
class NumericValuesSource:
    """Resolved numeric samples for one field."""

    field: str
    values: np.ndarray

    def __len__(self) -> int:
        return int(self.values.size)


@dataclass(frozen=True)
class ValuesSourceConfig:
    """Field selection after resolution against a context.

    ``source`` is ``None`` when the field is absent from the context and no
    ``missing`` value is configured.
    """

    field: str
    missing: float | None
    source: NumericValuesSource | None

    @property
    def unmapped(self) -> bool:
        return self.source is None

    @classmethod
    def resolve(
        cls,
        context: SearchContext,
        field: str | None,
        missing: float | None,
        aggregation_type: str,
    ) -> ValuesSourceConfig:
        if not field:
            raise InvalidArgumentError(f"[field] must be set for aggregation [{aggregation_type}]")

        if not context.has_field(field):
            if missing is None:
                return cls(field=field, missing=None, source=None)
            filled = np.full(context.num_docs, float(missing), dtype=np.float64)
            return cls(field=field, missing=missing, source=_frozen_source(field, filled))

        series = context.column(field)
        if pd.api.types.is_bool_dtype(series) or not pd.api.types.is_numeric_dtype(series):
            raise InvalidArgumentError(
                f"Field [{field}] of type [{series.dtype}] is not supported for aggregation [{aggregation_type}]"
            )

        numeric = series.astype(np.float64)
        numeric = numeric.fillna(float(missing)) if missing is not None else numeric.dropna()
        return cls(field=field, missing=missing, source=_frozen_source(field, numeric.to_numpy(copy=True)))


def _frozen_source(field: str, values: np.ndarray) -> NumericValuesSource:
    values.setflags(write=False)
    return NumericValuesSource(field=field, values=values)
