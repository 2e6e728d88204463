"""Maximum occupiable kelp area per segment.

The maximum occupiable area of a pixel is the largest area it ever
showed over the whole record, e.g. a pixel with 3000 m^2 once and 0
otherwise contributes 0.003 km^2. A segment's value is the sum over its
pixels. Pixels rarely peak together, so this is a ceiling, not an
achieved area.
"""

import logging

import pandas as pd

from kelpseg.landsat.landsat_utils import M2_PER_KM2

__all__ = ['max_occupiable_area']

logger = logging.getLogger(__name__)


def max_occupiable_area(pixels: pd.DataFrame) -> pd.DataFrame:
    """Sum each pixel's all-time maximum area per segment.

    Parameters
    ----------
    pixels : pd.DataFrame
        Segmented pixel table with fractional (not whole-pixel) areas.

    Returns
    -------
    pd.DataFrame
        Columns segment_id, max_occupiable (km^2). A pixel that was never
        imaged contributes 0.
    """
    # areas are >= 0, so filling NaN with 0 leaves every non-empty max unchanged
    pixel_max = pixels.fillna(0.0).max(axis=1)
    per_segment = pixel_max.groupby(level="segment_id", sort=False).sum() / M2_PER_KM2

    logger.debug("Max occupiable area computed for %d segments", per_segment.size)
    return pd.DataFrame({
        "segment_id": per_segment.index.to_numpy(),
        "max_occupiable": per_segment.to_numpy(dtype=float),
    })
