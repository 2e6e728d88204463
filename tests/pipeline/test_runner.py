"""Tests for the kelp indicator batch pipeline."""

import logging

import pytest
import numpy as np
import pandas as pd

from kelpseg.contracts import ConfigurationError
from kelpseg.pipeline import KelpIndicatorPipeline
from tests.helpers.fake_landsat import (
    DEFAULT_PIXELS,
    default_area,
    make_raw_landsat_ds,
    make_segments,
)

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The runner replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def source_files(temp_dir):
    lon = [p[0] for p in DEFAULT_PIXELS]
    lat = [p[1] for p in DEFAULT_PIXELS]
    raster = temp_dir / "kelp.nc"
    make_raw_landsat_ds(lon, lat, default_area(), [1984, 1985]).to_netcdf(raster)

    layer = temp_dir / "segments.geojson"
    make_segments().to_file(layer, driver="GeoJSON")
    return raster, layer


def test_compute_tables(landsat_ds, segments, internal_config, output_dirs):
    tables = KelpIndicatorPipeline(internal_config, output_dirs).compute(landsat_ds, segments)

    assert set(tables) == {"pixels", "presence", "max_occupiable", "time_series", "status"}
    assert tables["presence"]["presence"].tolist() == ["Kelp", "Ephemeral Kelp", "No Historical Kelp"]
    assert tables["status"]["year"].unique().tolist() == [1985]
    assert len(tables["time_series"]) == 6


def test_status_values(landsat_ds, segments, internal_config, output_dirs):
    tables = KelpIndicatorPipeline(internal_config, output_dirs).compute(landsat_ds, segments)
    status = tables["status"].set_index("segment_id")["status"]

    # seg_a max_first: 1984 843 m^2, 1985 3000 m^2; lower median is the 1984 value
    assert status["seg_a"] == pytest.approx(3000 / 843)
    # seg_b: 0 in 1984 then 450 -> median 0 -> no baseline
    assert status["seg_b"] == -999.0
    assert status["seg_c"] == -999.0


def test_quarterly_adds_annual_table(landsat_ds, segments, make_config, output_dirs):
    config = make_config(frequency="quarterly")
    tables = KelpIndicatorPipeline(config, output_dirs).compute(landsat_ds, segments)

    assert "quarter" in tables["time_series"].columns
    assert "quarter" not in tables["annual"].columns
    assert len(tables["time_series"]) == 24


def test_whole_pixels_only_affect_series(landsat_ds, segments, make_config, output_dirs):
    config = make_config(fractional_pixels=False)
    tables = KelpIndicatorPipeline(config, output_dirs).compute(landsat_ds, segments)

    max_occ = tables["max_occupiable"].set_index("segment_id")["max_occupiable"]
    assert max_occ["seg_a"] == pytest.approx(0.0033)

    series = tables["time_series"].set_index(["segment_id", "year"])
    # 1985: two detected pixels at 900 m^2 each
    assert series.loc[("seg_a", 1985), "area_abs"] == pytest.approx(0.0018)


def test_segment_selection(landsat_ds, segments, make_config, output_dirs):
    config = make_config(segment_ids=["seg_b"])
    tables = KelpIndicatorPipeline(config, output_dirs).compute(landsat_ds, segments)

    for key in ("presence", "max_occupiable", "time_series", "status"):
        assert tables[key]["segment_id"].unique().tolist() == ["seg_b"]


def test_write_tables(landsat_ds, segments, make_config, output_dirs):
    config = make_config(write_pixel_table=True)
    pipeline = KelpIndicatorPipeline(config, output_dirs)
    written = pipeline.write_tables(pipeline.compute(landsat_ds, segments))

    names = sorted(p.name for p in written.values())
    assert names == [
        "kelp_presence.csv",
        "kelp_status.csv",
        "max_occupiable.csv",
        "segmented_pixels.csv",
        "time_series_annual.csv",
    ]
    status = pd.read_csv(output_dirs["tables"] / "kelp_status.csv")
    assert list(status.columns) == ["segment_id", "year", "presence", "status"]

    pixels = pd.read_csv(output_dirs["tables"] / "segmented_pixels.csv")
    assert "Q2.1985" in pixels.columns


def test_run_requires_source_files(internal_config, output_dirs):
    with pytest.raises(ConfigurationError, match="landsat_file"):
        KelpIndicatorPipeline(internal_config, output_dirs).run()


def test_setup_logging_creates_log_file(internal_config, output_dirs):
    pipeline = KelpIndicatorPipeline(internal_config, output_dirs)
    log_path = pipeline.setup_logging()

    logging.getLogger("kelpseg.test").info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == output_dirs["logs"] / "kelp_indicators.log"
    assert "hello" in log_path.read_text()


@pytest.mark.integration
def test_run_end_to_end(source_files, make_config, temp_dir):
    raster, layer = source_files
    config = make_config(
        landsat_file=str(raster),
        segments_file=str(layer),
        base_dir=str(temp_dir / "out"),
        frequency="quarterly",
    )

    tables = KelpIndicatorPipeline(config).run()

    tables_dir = temp_dir / "out" / "tables"
    assert (tables_dir / "time_series_quarterly.csv").exists()
    assert (tables_dir / "time_series_annual.csv").exists()
    assert (temp_dir / "out" / "logs" / "kelp_indicators.log").exists()
    assert not (tables_dir / "segmented_pixels.csv").exists()

    presence = pd.read_csv(tables_dir / "kelp_presence.csv")
    assert presence["presence"].tolist() == tables["presence"]["presence"].tolist()
    assert np.isnan(presence["pixel_percent"].iloc[2])
