from __future__ import annotations

import json

import pytest

from rankagg.aggregations import PercentileRanksAggregationBuilder, PercentilesMethod
from rankagg.aggregations.percentile_ranks import PARSER
from rankagg.errors import DocumentParseError, InvalidArgumentError


def test_parse_full_tdigest_body():
    builder = PercentileRanksAggregationBuilder.parse(
        "load_time_ranks",
        {
            "field": "load_time",
            "missing": 0,
            "values": [30, 15],
            "keyed": False,
            "tdigest": {"compression": 200},
        },
    )

    assert builder.field == "load_time"
    assert builder.missing == 0.0
    assert builder.values == (15.0, 30.0)
    assert builder.keyed is False
    assert builder.method is PercentilesMethod.TDIGEST
    assert builder.compression == 200.0


def test_parse_hdr_object_selects_method():
    builder = PercentileRanksAggregationBuilder.parse(
        "ranks", {"values": [1.5], "hdr": {"number_of_significant_value_digits": 1}}
    )

    assert builder.method is PercentilesMethod.HDR
    assert builder.number_of_significant_value_digits == 1
    assert builder.compression == 100.0


def test_empty_method_object_still_selects_method():
    builder = PercentileRanksAggregationBuilder.parse("ranks", {"hdr": {}})

    assert builder.method is PercentilesMethod.HDR
    assert builder.number_of_significant_value_digits == 3


def test_last_method_object_wins():
    hdr_last = PercentileRanksAggregationBuilder.parse(
        "ranks", {"tdigest": {"compression": 50}, "hdr": {"number_of_significant_value_digits": 2}}
    )
    tdigest_last = PercentileRanksAggregationBuilder.parse(
        "ranks", {"hdr": {"number_of_significant_value_digits": 2}, "tdigest": {"compression": 50}}
    )

    assert hdr_last.method is PercentilesMethod.HDR
    assert tdigest_last.method is PercentilesMethod.TDIGEST
    # Both tuning values are retained regardless of which method won.
    assert hdr_last.compression == tdigest_last.compression == 50.0
    assert hdr_last.number_of_significant_value_digits == 2


def test_parse_propagates_setter_validation():
    with pytest.raises(InvalidArgumentError, match="must be between 0 and 5"):
        PercentileRanksAggregationBuilder.parse("ranks", {"hdr": {"number_of_significant_value_digits": 6}})
    with pytest.raises(InvalidArgumentError, match="greater than or equal to 0"):
        PercentileRanksAggregationBuilder.parse("ranks", {"tdigest": {"compression": -1}})


@pytest.mark.parametrize(
    "body",
    [
        {"percents": [1.0]},
        {"values": "fast"},
        {"values": [1.0, "slow"]},
        {"keyed": "yes"},
        {"tdigest": 100},
        {"tdigest": {"compression": 100, "accuracy": 1}},
        {"hdr": {"number_of_significant_value_digits": "three"}},
        {"field": 7},
        {"values": None},
    ],
)
def test_parse_rejects_malformed_bodies(body):
    with pytest.raises(DocumentParseError):
        PercentileRanksAggregationBuilder.parse("ranks", body)


@pytest.mark.parametrize(
    "body",
    [
        {"hdr": {"number_of_significant_value_digits": True}},
        {"tdigest": {"compression": True}},
        {"tdigest": {"compression": False}},
    ],
)
def test_parse_rejects_boolean_tuning_values(body):
    with pytest.raises(DocumentParseError, match="boolean"):
        PercentileRanksAggregationBuilder.parse("ranks", body)


def test_parse_coerces_numeric_strings():
    builder = PercentileRanksAggregationBuilder.parse("ranks", {"values": ["2.5", 1], "keyed": "false"})

    assert builder.values == (1.0, 2.5)
    assert builder.keyed is False


def test_parser_is_built_once_with_all_fields():
    assert PARSER.field_names == ("field", "missing", "values", "keyed", "tdigest", "hdr")


def test_emit_tdigest_writes_only_compression():
    builder = (
        PercentileRanksAggregationBuilder("ranks")
        .set_field("load_time")
        .set_values([30.0, 15.0])
        .set_number_of_significant_value_digits(1)
    )

    assert builder.to_xcontent() == {
        "ranks": {
            "percentile_ranks": {
                "field": "load_time",
                "values": [15.0, 30.0],
                "keyed": True,
                "tdigest": {"compression": 100.0},
            }
        }
    }


def test_emit_hdr_writes_only_significant_digits():
    builder = (
        PercentileRanksAggregationBuilder("ranks")
        .set_values([1.0])
        .set_keyed(False)
        .set_compression(999.0)
        .set_method(PercentilesMethod.HDR)
        .set_meta({"owner": "search"})
    )

    assert builder.to_xcontent() == {
        "ranks": {
            "percentile_ranks": {
                "values": [1.0],
                "keyed": False,
                "hdr": {"number_of_significant_value_digits": 3},
            },
            "meta": {"owner": "search"},
        }
    }


def test_document_round_trip_resets_inactive_field_to_default():
    original = (
        PercentileRanksAggregationBuilder("ranks")
        .set_field("latency")
        .set_values([5.0, 1.0])
        .set_compression(42.0)
        .set_method(PercentilesMethod.HDR)
        .set_number_of_significant_value_digits(5)
    )

    body = original.to_xcontent()["ranks"]["percentile_ranks"]
    parsed = PercentileRanksAggregationBuilder.parse("ranks", body)

    assert parsed == original
    assert parsed.number_of_significant_value_digits == 5
    assert parsed.compression == 100.0


def test_to_json_is_valid_json():
    builder = PercentileRanksAggregationBuilder("ranks").set_values([1.0, 2.0])

    assert json.loads(builder.to_json()) == builder.to_xcontent()
