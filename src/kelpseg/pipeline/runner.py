"""Kelp indicator batch pipeline.

Runs every stage once over the in-memory tables:

    load -> assign -> presence -> max occupiable -> time series -> status

and writes each resulting table as CSV.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

import pandas as pd

from kelpseg.contracts import ConfigurationError
from kelpseg.indicators import KelpStatusCalculator, TimeSeriesExtractor
from kelpseg.landsat import (
    KelpPresenceClassifier,
    LandsatKelpLoader,
    SegmentAssigner,
    max_occupiable_area,
)
from kelpseg.landsat.landsat_utils import coerce_whole_pixels, to_wide_frame
from kelpseg.setup_directories import setup_output_directories

if TYPE_CHECKING:
    import geopandas as gpd
    import xarray as xr
    from kelpseg.schemas import InternalConfig

__all__ = ['KelpIndicatorPipeline']

logger = logging.getLogger(__name__)


class KelpIndicatorPipeline:
    """Compute and export every kelp indicator table for one configuration.

    **Stages:**

    1. **Load**: kelp canopy NetCDF and segment polygons
    2. **Assign**: pixels to segments (fractional areas)
    3. **Presence**: historical presence category per segment
    4. **Max occupiable**: per-segment area ceiling
    5. **Time series**: configured frequency; an annual series is always
       built because status needs one. With `fractional_pixels=False` the
       series use whole-pixel areas, while presence and max occupiable
       keep the fractional table.
    6. **Status**: configured status year (default latest)

    **Output Files** (in `tables/`):

    - kelp_presence.csv, max_occupiable.csv, kelp_status.csv
    - time_series_<frequency>.csv (+ time_series_annual.csv if quarterly)
    - segmented_pixels.csv when `output.write_pixel_table` is set

    Example usage::

        pipeline = KelpIndicatorPipeline(config)
        tables = pipeline.run()
        tables["status"].head()
    """

    def __init__(self, config: "InternalConfig", output_dirs: Optional[Dict[str, Path]] = None):
        self.config = config
        self.output_dirs = output_dirs
        self.loader = LandsatKelpLoader(config)
        self.assigner = SegmentAssigner(config)
        self.classifier = KelpPresenceClassifier(config)
        self.extractor = TimeSeriesExtractor(config)
        self.status_calculator = KelpStatusCalculator(config)

    def setup_logging(self) -> Path:
        """Configure root logger with file and console handlers."""
        log_level = getattr(logging, self.config.logging.level, logging.INFO)
        log_dir = Path(self.output_dirs["logs"])
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / "kelp_indicators.log"

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)
        return log_path

    def run(self) -> Dict[str, pd.DataFrame]:
        """Load sources from the configured paths, compute and write all tables.

        Raises
        ------
        ConfigurationError
            If landsat_file or segments_file is not configured.
        """
        if not self.config.landsat_file or not self.config.segments_file:
            raise ConfigurationError("Both landsat_file and segments_file must be configured")

        if self.output_dirs is None:
            self.output_dirs = setup_output_directories(self.config.base_dir)
        self.setup_logging()

        ds = self.loader.load(self.config.landsat_file)
        segments = self.loader.load_segments(self.config.segments_file)

        tables = self.compute(ds, segments)
        self.write_tables(tables)
        return tables

    def compute(self, ds: "xr.Dataset", segments: "gpd.GeoDataFrame") -> Dict[str, pd.DataFrame]:
        """Run stages 2-6 on in-memory sources."""
        segment_ids = self.config.segment_ids
        frequency = self.config.time_series.frequency

        pixels = self.assigner.assign(ds, segments, segment_ids, fractional_pixels=True)
        presence = self.classifier.classify(pixels, segments, segment_ids)
        max_occupiable = max_occupiable_area(pixels)

        if self.config.assigner.fractional_pixels:
            series_pixels = pixels
        else:
            logger.info("Using whole-pixel areas (%.0f m2) for time series", self.config.assigner.pixel_area_m2)
            series_pixels = coerce_whole_pixels(pixels, self.config.assigner.pixel_area_m2)

        tables = {
            "pixels": pixels,
            "presence": presence,
            "max_occupiable": max_occupiable,
        }

        annual = self.extractor.extract(series_pixels, frequency="annual", max_occupiable=max_occupiable)
        if frequency == "quarterly":
            tables["time_series"] = self.extractor.extract(
                series_pixels, frequency="quarterly", max_occupiable=max_occupiable
            )
            tables["annual"] = annual
        else:
            tables["time_series"] = annual

        tables["status"] = self.status_calculator.calculate(annual, presence)
        return tables

    def write_tables(self, tables: Dict[str, pd.DataFrame]) -> Dict[str, Path]:
        """Write indicator tables as CSV into the tables directory."""
        out_dir = Path(self.output_dirs["tables"])
        out_dir.mkdir(parents=True, exist_ok=True)
        float_format = self.config.output.float_format
        frequency = self.config.time_series.frequency

        targets = {
            "presence": "kelp_presence.csv",
            "max_occupiable": "max_occupiable.csv",
            "time_series": f"time_series_{frequency}.csv",
            "annual": "time_series_annual.csv",
            "status": "kelp_status.csv",
        }

        written = {}
        for key, filename in targets.items():
            if key not in tables:
                continue
            path = out_dir / filename
            tables[key].to_csv(path, index=False, float_format=float_format)
            written[key] = path
            logger.info("Wrote %s (%d rows)", path, len(tables[key]))

        if self.config.output.write_pixel_table:
            path = out_dir / "segmented_pixels.csv"
            to_wide_frame(tables["pixels"]).to_csv(path, index=False, float_format=float_format)
            written["pixels"] = path
            logger.info("Wrote %s", path)

        return written
