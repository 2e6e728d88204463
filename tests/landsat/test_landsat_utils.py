import pytest
import numpy as np
import pandas as pd

from kelpseg.contracts import ConfigurationError
from kelpseg.landsat.landsat_utils import (
    coerce_whole_pixels,
    reconcile_segments,
    resolve_segment_ids,
    select_segments,
    slot_label,
    to_wide_frame,
)
from tests.helpers.fake_landsat import make_pixel_table

pytestmark = pytest.mark.unit


class TestResolveSegmentIds:

    def test_none_and_all_select_everything(self):
        assert resolve_segment_ids(None, ["b", "a"]) == ["b", "a"]
        assert resolve_segment_ids("all", ["b", "a"]) == ["b", "a"]

    def test_keeps_available_order(self):
        assert resolve_segment_ids(["c", "a"], ["a", "b", "c"]) == ["a", "c"]

    def test_single_string(self):
        assert resolve_segment_ids("b", ["a", "b"]) == ["b"]

    def test_unknown_raises(self):
        with pytest.raises(ConfigurationError, match="x"):
            resolve_segment_ids(["a", "x"], ["a", "b"])


class TestCoerceWholePixels:

    def test_array(self):
        out = coerce_whole_pixels(np.array([0.0, 12.5, np.nan, 900.0]))
        np.testing.assert_array_equal(out, [0.0, 900.0, np.nan, 900.0])

    def test_frame_is_idempotent(self):
        frame = pd.DataFrame({"a": [0.0, 5.0, np.nan]})
        once = coerce_whole_pixels(frame)
        pd.testing.assert_frame_equal(once, coerce_whole_pixels(once))
        assert once["a"].tolist()[:2] == [0.0, 900.0]

    def test_custom_area(self):
        out = coerce_whole_pixels(np.array([3.0]), pixel_area_m2=100.0)
        assert out.tolist() == [100.0]


def test_reconcile_adds_missing_and_drops_extra():
    table = make_pixel_table([
        ("b", 1.0, 1.0, [1, 2, 3, 4]),
        ("x", 2.0, 2.0, [1, 2, 3, 4]),
    ], [2000])

    out = reconcile_segments(table, ["a", "b"])

    assert out.index.get_level_values("segment_id").tolist() == ["a", "b"]
    assert out.loc["a"].isna().all().all()


def test_reconcile_empty_table():
    table = make_pixel_table([("b", 1.0, 1.0, [1, 2, 3, 4])], [2000]).iloc[0:0]
    out = reconcile_segments(table, ["a"])
    assert len(out) == 1
    assert out.columns.equals(table.columns)


def test_select_segments():
    table = make_pixel_table([
        ("a", 1.0, 1.0, [1, 2, 3, 4]),
        ("b", 2.0, 2.0, [1, 2, 3, 4]),
    ], [2000])
    assert len(select_segments(table, None)) == 2
    assert select_segments(table, ["b"]).index.get_level_values("segment_id").tolist() == ["b"]


def test_wide_frame_labels():
    table = make_pixel_table([("a", 1.0, 2.0, [1, 2, 3, 4])], [1984])
    wide = to_wide_frame(table)

    assert slot_label(1984, 1) == "Q1.1984"
    assert list(wide.columns) == ["segment_id", "longitude", "latitude", "Q1.1984", "Q2.1984", "Q3.1984", "Q4.1984"]
