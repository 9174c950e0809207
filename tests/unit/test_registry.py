from __future__ import annotations

import pytest

from rankagg.aggregations import PercentileRanksAggregationBuilder, parse_aggregation, parse_aggregations
from rankagg.aggregations.method import PercentilesMethod
from rankagg.errors import DocumentParseError, InvalidArgumentError


def test_parse_aggregations_builds_each_named_entry():
    parsed = parse_aggregations(
        {
            "fast": {"percentile_ranks": {"field": "latency", "values": [10]}},
            "precise": {
                "percentile_ranks": {"field": "latency", "values": [10], "hdr": {}},
                "meta": {"owner": "perf"},
            },
        }
    )

    assert list(parsed) == ["fast", "precise"]
    assert parsed["fast"].method is PercentilesMethod.TDIGEST
    assert parsed["precise"].method is PercentilesMethod.HDR
    assert parsed["precise"].meta == {"owner": "perf"}


def test_document_round_trip_through_request_form():
    original = (
        PercentileRanksAggregationBuilder("ranks")
        .set_field("latency")
        .set_values([3.0, 1.0])
        .set_meta({"owner": "perf"})
    )

    reparsed = parse_aggregations(original.to_xcontent())["ranks"]

    assert reparsed == original


@pytest.mark.parametrize(
    "definition",
    [
        {},
        {"percentile_ranks": {}, "percentiles": {}},
        {"percentile_ranks": []},
        "percentile_ranks",
    ],
)
def test_malformed_definitions_are_rejected(definition):
    with pytest.raises(DocumentParseError):
        parse_aggregation("ranks", definition)


def test_invalid_meta_is_rejected():
    with pytest.raises(InvalidArgumentError, match=r"\[meta\] must be an object"):
        parse_aggregation("ranks", {"percentile_ranks": {}, "meta": ["owner"]})


def test_aggregations_root_must_be_mapping():
    with pytest.raises(DocumentParseError):
        parse_aggregations(["ranks"])
