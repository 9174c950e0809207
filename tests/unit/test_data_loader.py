from __future__ import annotations

import pytest

from rankagg.data.loader import DocumentFrameLoader
from rankagg.search import SearchContext


def test_load_csv_normalizes_column_names(tmp_path):
    csv_path = tmp_path / "documents.csv"
    csv_path.write_text(
        " Latency ,Status\n" "12.5,ok\n" "40,error\n",
        encoding="utf-8",
    )

    frame = DocumentFrameLoader().load_csv(csv_path)

    assert list(frame.columns) == ["latency", "status"]
    assert frame["latency"].tolist() == [12.5, 40.0]


def test_missing_csv_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        DocumentFrameLoader().load_csv(tmp_path / "missing.csv")


def test_search_context_from_csv(tmp_path):
    csv_path = tmp_path / "documents.csv"
    csv_path.write_text("latency\n" "1\n" "2\n" "\n" "4\n", encoding="utf-8")

    context = SearchContext.from_csv(csv_path)

    assert context.has_field("latency")
    assert not context.has_field("status")
