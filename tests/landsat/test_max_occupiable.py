"""Tests for maximum occupiable area."""

import pytest
import numpy as np

from kelpseg.landsat import SegmentAssigner, max_occupiable_area
from tests.helpers.fake_landsat import make_pixel_table

pytestmark = pytest.mark.unit


def test_single_pixel_peak():
    table = make_pixel_table([("s1", 0.0, 0.0, [0, 3000, 0, 0])], [2000])
    result = max_occupiable_area(table)
    assert result["max_occupiable"].iloc[0] == pytest.approx(0.003)


def test_sum_of_pixel_maxima_across_years():
    table = make_pixel_table([
        ("s1", 0.0, 0.0, [0, 543, 0, 0, 0, 2000, 1400, 0]),
        ("s1", 0.1, 0.0, [0, 0, 0, 0, 0, 1000, 0, 0]),
    ], [1984, 1985])
    result = max_occupiable_area(table).set_index("segment_id")
    assert result.loc["s1", "max_occupiable"] == pytest.approx(0.003)


def test_never_imaged_pixel_contributes_zero():
    table = make_pixel_table([
        ("s1", 0.0, 0.0, [np.nan] * 4),
        ("s2", np.nan, np.nan, [np.nan] * 4),
    ], [2000])
    result = max_occupiable_area(table)
    assert result["segment_id"].tolist() == ["s1", "s2"]
    assert result["max_occupiable"].tolist() == [0.0, 0.0]


def test_from_assigned_pixels(landsat_ds, segments, internal_config):
    pixels = SegmentAssigner(internal_config).assign(landsat_ds, segments)
    result = max_occupiable_area(pixels).set_index("segment_id")["max_occupiable"]

    assert result["seg_a"] == pytest.approx((2000 + 1000 + 300) / 1e6)
    assert result["seg_b"] == pytest.approx(450 / 1e6)
    assert result["seg_c"] == 0.0
