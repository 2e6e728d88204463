"""Tests for KelpStatusCalculator."""

import pytest
import numpy as np
import pandas as pd

from kelpseg.contracts import ConfigurationError, NotFoundError
from kelpseg.indicators import KelpStatusCalculator, MISSING_BASELINE_STATUS, TimeSeriesExtractor
from kelpseg.indicators.status import resolve_status_year
from tests.helpers.fake_landsat import make_pixel_table

pytestmark = pytest.mark.unit


@pytest.fixture
def annual():
    return pd.DataFrame({
        "segment_id": ["a", "a", "b", "b", "c", "c"],
        "year": [2019, 2020] * 3,
        "area_abs": [0.0001, 0.0024, 0.001, 0.002, 0.0, 0.0],
        "historical_med": [1.87e-5] * 2 + [0.0] * 2 + [np.nan] * 2,
    })


@pytest.fixture
def presence():
    return pd.DataFrame({
        "segment_id": ["a", "b", "c"],
        "segment_area_km2": [1.0, 1.0, 1.0],
        "pixel_percent": [0.3, 0.1, np.nan],
        "presence": ["Kelp", "Ephemeral Kelp", "No Historical Kelp"],
    })


def test_status_ratio(annual, presence, internal_config):
    status = KelpStatusCalculator(internal_config).calculate(annual, presence)

    assert list(status.columns) == ["segment_id", "year", "presence", "status"]
    assert status["year"].unique().tolist() == [2020]
    assert status.loc[0, "status"] == pytest.approx(0.0024 / 1.87e-5)
    assert status.loc[0, "status"] == pytest.approx(128.34, abs=0.01)


def test_missing_baseline_sentinel(annual, presence, internal_config):
    status = KelpStatusCalculator(internal_config).calculate(annual, presence).set_index("segment_id")

    assert status.loc["b", "status"] == MISSING_BASELINE_STATUS
    assert status.loc["c", "status"] == -999.0


def test_presence_carried(annual, presence, internal_config):
    status = KelpStatusCalculator(internal_config).calculate(annual, presence)
    assert status["presence"].tolist() == ["Kelp", "Ephemeral Kelp", "No Historical Kelp"]


def test_explicit_year(annual, presence, internal_config):
    status = KelpStatusCalculator(internal_config).calculate(annual, presence, status_year=2019)
    assert status.loc[0, "status"] == pytest.approx(0.0001 / 1.87e-5)


def test_configured_year(annual, presence, make_config):
    status = KelpStatusCalculator(make_config(status_year=2019)).calculate(annual, presence)
    assert status["year"].unique().tolist() == [2019]


def test_latest_keyword(annual, presence, internal_config):
    status = KelpStatusCalculator(internal_config).calculate(annual, presence, status_year="latest")
    assert status["year"].unique().tolist() == [2020]


def test_missing_year_raises(annual, presence, internal_config):
    with pytest.raises(NotFoundError, match="2021"):
        KelpStatusCalculator(internal_config).calculate(annual, presence, status_year=2021)


def test_partial_year_rows_raise(annual, presence, internal_config):
    partial = annual[~((annual.segment_id == "b") & (annual.year == 2020))]
    with pytest.raises(NotFoundError, match="b"):
        KelpStatusCalculator(internal_config).calculate(partial, presence)


def test_segment_subset(annual, presence, internal_config):
    status = KelpStatusCalculator(internal_config).calculate(annual, presence, segment_ids=["c", "a"])
    assert status["segment_id"].tolist() == ["a", "c"]


def test_unknown_segment_raises(annual, presence, internal_config):
    with pytest.raises(ConfigurationError):
        KelpStatusCalculator(internal_config).calculate(annual, presence, segment_ids=["zz"])


def test_quarterly_input_rejected(annual, presence, internal_config):
    quarterly = annual.assign(quarter=1)
    with pytest.raises(ConfigurationError, match="annual"):
        KelpStatusCalculator(internal_config).calculate(quarterly, presence)


def test_resolve_status_year():
    frame = pd.DataFrame({"year": [1999, 2003, 2001]})
    assert resolve_status_year(frame, None) == 2003
    assert resolve_status_year(frame, "LATEST") == 2003
    assert resolve_status_year(frame, "2001") == 2001
    with pytest.raises(ConfigurationError):
        resolve_status_year(frame, "last year")


def test_status_from_extracted_series(internal_config, presence):
    table = make_pixel_table([
        ("a", 0.0, 0.0, [0, 900, 0, 0, 0, 1800, 0, 0]),
        ("b", 1.0, 0.0, [0] * 8),
        ("c", np.nan, np.nan, [np.nan] * 8),
    ], [2012, 2013])
    annual = TimeSeriesExtractor(internal_config).extract(table)

    status = KelpStatusCalculator(internal_config).calculate(annual, presence).set_index("segment_id")

    assert status.loc["a", "status"] == pytest.approx(2.0)
    assert status.loc["b", "status"] == MISSING_BASELINE_STATUS
