"""CSV loader for the documents aggregations run against."""

from __future__ import annotations

from pathlib import Path

import pandas as pd


class DocumentFrameLoader:
    """Load document CSV data into a frame with one row per document."""

    def load_csv(self, path: str | Path, encoding: str = "utf-8") -> pd.DataFrame:
        """Load CSV and normalize column names."""
        csv_path = Path(path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_path}")

        dataframe = pd.read_csv(csv_path, encoding=encoding)
        return self._normalize_columns(dataframe)

    @staticmethod
    def _normalize_columns(dataframe: pd.DataFrame) -> pd.DataFrame:
        return dataframe.rename(columns={column: str(column).strip().lower() for column in dataframe.columns})
