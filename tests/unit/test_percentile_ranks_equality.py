from __future__ import annotations

import pytest

from rankagg.aggregations import PercentileRanksAggregationBuilder, PercentilesMethod
from rankagg.errors import IllegalStateError


def _builder(method: PercentilesMethod = PercentilesMethod.TDIGEST) -> PercentileRanksAggregationBuilder:
    return (
        PercentileRanksAggregationBuilder("ranks")
        .set_field("latency")
        .set_values([10.0, 50.0, 90.0])
        .set_keyed(False)
        .set_compression(200.0)
        .set_number_of_significant_value_digits(2)
        .set_method(method)
    )


def test_identical_configs_are_equal_and_hash_alike():
    left = _builder()
    right = _builder()

    assert left == right
    assert hash(left) == hash(right)


def test_different_methods_are_never_equal():
    tdigest = _builder(PercentilesMethod.TDIGEST)
    hdr = _builder(PercentilesMethod.HDR)

    assert tdigest != hdr
    assert hdr != tdigest


def test_inactive_tuning_parameter_is_ignored():
    left = _builder(PercentilesMethod.TDIGEST).set_number_of_significant_value_digits(5)
    right = _builder(PercentilesMethod.TDIGEST).set_number_of_significant_value_digits(0)
    assert left == right
    assert hash(left) == hash(right)

    left_hdr = _builder(PercentilesMethod.HDR).set_compression(1.0)
    right_hdr = _builder(PercentilesMethod.HDR).set_compression(500.0)
    assert left_hdr == right_hdr
    assert hash(left_hdr) == hash(right_hdr)


def test_live_tuning_parameter_is_compared():
    assert _builder().set_compression(201.0) != _builder()
    assert (
        _builder(PercentilesMethod.HDR).set_number_of_significant_value_digits(3)
        != _builder(PercentilesMethod.HDR)
    )


def test_values_comparison_is_order_insensitive_on_input_but_length_sensitive():
    assert _builder().set_values([90.0, 10.0, 50.0]) == _builder()
    assert _builder().set_values([10.0, 50.0]) != _builder()
    assert _builder().set_values([10.0, 50.0, 50.0, 90.0]) != _builder()


def test_nan_values_compare_equal():
    left = _builder().set_values([float("nan"), 1.0])
    right = _builder().set_values([1.0, float("nan")])

    assert left == right
    assert hash(left) == hash(right)


def test_keyed_name_field_and_meta_participate():
    assert _builder().set_keyed(True) != _builder()
    assert _builder().set_field("other") != _builder()
    assert _builder().set_meta({"team": "search"}) != _builder()

    renamed = (
        PercentileRanksAggregationBuilder("other_ranks")
        .set_field("latency")
        .set_values([10.0, 50.0, 90.0])
        .set_keyed(False)
        .set_compression(200.0)
    )
    assert renamed != _builder()


def test_not_equal_to_other_types():
    assert _builder() != "ranks"
    assert _builder() is not None


def test_signed_zeros_compare_equal_regardless_of_input_order():
    left = PercentileRanksAggregationBuilder("ranks").set_values([0.0, -0.0])
    right = PercentileRanksAggregationBuilder("ranks").set_values([-0.0, 0.0])

    assert left == right
    assert hash(left) == hash(right)


def test_usable_as_dict_key_for_deduplication():
    cache = {_builder(): "cached"}

    assert cache[_builder()] == "cached"


def test_equality_with_corrupted_method_raises_illegal_state():
    left = _builder()
    right = _builder()
    left._method = "bogus"
    right._method = "bogus"

    with pytest.raises(IllegalStateError, match=r"Illegal method \[bogus\]"):
        hash(left)
    with pytest.raises(IllegalStateError):
        _ = left == right
