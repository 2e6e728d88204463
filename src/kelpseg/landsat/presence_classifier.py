"""Classify the historical kelp presence of each segment.

Many segments have only a few pixels ever detected in them. The share of
the segment covered by ever-detected pixels (each counted at its full
900 m^2 footprint) decides whether the segment is treated as having no
historical kelp, ephemeral kelp, or kelp.
"""

import logging
from typing import Iterable, Optional, TYPE_CHECKING

import geopandas as gpd
import numpy as np
import pandas as pd

from kelpseg.contracts import PRESENCE_CATEGORIES, assert_presence_table
from kelpseg.landsat.landsat_utils import (
    FULL_PIXEL_AREA_M2,
    M2_PER_KM2,
    real_pixel_mask,
    resolve_segment_ids,
)
from kelpseg.landsat.loader import compute_segment_areas_km2

if TYPE_CHECKING:
    from kelpseg.schemas import InternalConfig

__all__ = ['KelpPresenceClassifier', 'count_detected_pixels']

logger = logging.getLogger(__name__)

NO_HISTORICAL_KELP, EPHEMERAL_KELP, KELP = PRESENCE_CATEGORIES


def count_detected_pixels(pixels: pd.DataFrame) -> pd.Series:
    """Number of pixels per segment with any observation > 0.

    NaN observations count as not detected. Segments represented only by
    an empty-segment row are absent from the result.
    """
    real = pixels[real_pixel_mask(pixels)]
    detected = (real > 0).any(axis=1).astype(int)
    return detected.groupby(level="segment_id", sort=False).sum().rename("num_pixels")


class KelpPresenceClassifier:
    """Classify segments into No Historical Kelp / Ephemeral Kelp / Kelp.

    Configuration
    =============
    Reads `config.presence`:

    - `no_kelp_bound` : float, percent (default 0.02)
        Inclusive upper bound of pixel_percent for "No Historical Kelp".
    - `ephemeral_kelp_bound` : float, percent (default 0.15)
        Inclusive upper bound for "Ephemeral Kelp".
    - `area_crs` : str
        Equal-area CRS used to measure every segment polygon.

    Notes
    -----
    pixel_percent always assumes the full 900 m^2 per detected pixel,
    whatever the area values in the pixel table. It is NaN when the
    segment has no pixels at all or a zero area, and NaN is classified
    as "No Historical Kelp". A segment that has pixels, none ever
    detected, gets 0.0 instead: in the exported table NaN means "nothing
    to measure" and 0 means "measured, never seen".
    """

    def __init__(self, config: "InternalConfig"):
        self.no_kelp_bound = config.presence.no_kelp_bound
        self.ephemeral_kelp_bound = config.presence.ephemeral_kelp_bound
        self.area_crs = config.presence.area_crs

    def classify(
        self,
        pixels: pd.DataFrame,
        segments: gpd.GeoDataFrame,
        segment_ids: Optional[Iterable[str]] = None,
    ) -> pd.DataFrame:
        """Compute pixel_percent and the presence category per segment.

        Parameters
        ----------
        pixels : pd.DataFrame
            Segmented pixel table from SegmentAssigner.assign().
        segments : gpd.GeoDataFrame
            Polygon layer with `segment_id`; every polygon of interest
            gets a row even when the pixel table never mentions it.
        segment_ids : iterable of str, optional
            Restrict the output to these segments.

        Returns
        -------
        pd.DataFrame
            Columns segment_id, segment_area_km2, pixel_percent, presence.

        Raises
        ------
        ConfigurationError
            If a requested id is absent from the polygon layer.
        """
        ids = resolve_segment_ids(segment_ids, segments["segment_id"])
        segments = segments[segments["segment_id"].isin(ids)]

        segment_area = compute_segment_areas_km2(segments, self.area_crs)
        num_pixels = count_detected_pixels(pixels).reindex(segment_area.index)

        pixel_area = num_pixels * FULL_PIXEL_AREA_M2 / M2_PER_KM2
        pixel_percent = (pixel_area / segment_area * 100).where(segment_area > 0)

        presence = np.select(
            [
                pixel_percent.isna() | (pixel_percent <= self.no_kelp_bound),
                pixel_percent <= self.ephemeral_kelp_bound,
            ],
            [NO_HISTORICAL_KELP, EPHEMERAL_KELP],
            default=KELP,
        )

        result = pd.DataFrame({
            "segment_id": segment_area.index.to_numpy(),
            "segment_area_km2": segment_area.to_numpy(),
            "pixel_percent": pixel_percent.to_numpy(dtype=float),
            "presence": presence,
        })

        assert_presence_table(result)

        counts = result["presence"].value_counts()
        logger.info(
            "Presence: %s",
            ", ".join(f"{cat}={int(counts.get(cat, 0))}" for cat in PRESENCE_CATEGORIES),
        )
        return result
