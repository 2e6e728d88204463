"""Shared helpers for segmented Landsat pixel tables.

The segmented pixel table is a DataFrame indexed by
(segment_id, longitude, latitude) with (year, quarter) columns holding
kelp canopy area in m^2 (NaN = not imaged).
"""

import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from kelpseg.contracts.failure import ConfigurationError
from kelpseg.contracts.pixels import PIXEL_INDEX_NAMES

__all__ = [
    'FULL_PIXEL_AREA_M2',
    'M2_PER_KM2',
    'resolve_segment_ids',
    'select_segments',
    'coerce_whole_pixels',
    'reconcile_segments',
    'real_pixel_mask',
    'slot_label',
    'to_wide_frame',
]

logger = logging.getLogger(__name__)

FULL_PIXEL_AREA_M2 = 900.0  # 30 m x 30 m Landsat footprint
M2_PER_KM2 = 1e6


def resolve_segment_ids(requested: Optional[Iterable[str]], available: Iterable[str]) -> list[str]:
    """Validate a segment id request against the known ids.

    Parameters
    ----------
    requested : iterable of str or None
        Ids asked for by the caller. None or "all" selects every available id.
    available : iterable of str
        Ids known to the source table, in their canonical order.

    Returns
    -------
    list of str
        Requested ids in the order of ``available``.

    Raises
    ------
    ConfigurationError
        If any requested id is not available.
    """
    available = list(dict.fromkeys(available))
    if requested is None or (isinstance(requested, str) and requested == "all"):
        return available
    if isinstance(requested, str):
        requested = [requested]

    requested = [str(s) for s in requested]
    known = set(available)
    unknown = [s for s in requested if s not in known]
    if unknown:
        raise ConfigurationError(f"Unknown segment ids requested: {unknown}")

    wanted = set(requested)
    return [s for s in available if s in wanted]


def select_segments(pixels: pd.DataFrame, segment_ids: Optional[Iterable[str]]) -> pd.DataFrame:
    """Restrict a segmented pixel table to the requested segments."""
    if segment_ids is None:
        return pixels
    table_ids = pixels.index.get_level_values("segment_id")
    ids = resolve_segment_ids(segment_ids, table_ids)
    return pixels[table_ids.isin(ids)]


def coerce_whole_pixels(values, pixel_area_m2: float = FULL_PIXEL_AREA_M2):
    """Replace every positive area with the full pixel footprint.

    Zeros and NaN are kept, so coercing twice gives the same result.

    Parameters
    ----------
    values : np.ndarray or pd.DataFrame or pd.Series
        Area observations in m^2.
    pixel_area_m2 : float
        Footprint assigned to any pixel with kelp (default 900).
    """
    if isinstance(values, (pd.DataFrame, pd.Series)):
        return values.mask(values > 0, pixel_area_m2)
    values = np.asarray(values, dtype=float)
    return np.where(values > 0, pixel_area_m2, values)


def reconcile_segments(pixels: pd.DataFrame, segment_ids: list[str]) -> pd.DataFrame:
    """Make every segment of interest appear at least once.

    Segments with no rows get a single row with NaN coordinates and NaN
    observations. Rows of ids outside ``segment_ids`` are dropped. The
    result is ordered by ``segment_ids``, keeping row order within a
    segment.
    """
    present = set(pixels.index.get_level_values("segment_id"))
    missing = [s for s in segment_ids if s not in present]

    if missing:
        logger.debug("Adding empty rows for %d segments without pixels", len(missing))
        empty_index = pd.MultiIndex.from_arrays(
            [missing, np.full(len(missing), np.nan), np.full(len(missing), np.nan)],
            names=PIXEL_INDEX_NAMES,
        )
        empty = pd.DataFrame(np.nan, index=empty_index, columns=pixels.columns)
        pixels = pd.concat([pixels, empty]) if len(pixels) else empty

    order = pd.Index(segment_ids).get_indexer(pixels.index.get_level_values("segment_id"))
    keep = order >= 0
    pixels = pixels[keep]
    return pixels.iloc[np.argsort(order[keep], kind="stable")]


def real_pixel_mask(pixels: pd.DataFrame) -> np.ndarray:
    """True for rows backed by an actual raster pixel (not an empty-segment row)."""
    return pixels.index.get_level_values("longitude").notna()


def slot_label(year: int, quarter: int) -> str:
    """Column label used in wide exports, e.g. 'Q1.1984'."""
    return f"Q{int(quarter)}.{int(year)}"


def to_wide_frame(pixels: pd.DataFrame) -> pd.DataFrame:
    """Flatten a segmented pixel table for export.

    Columns are segment_id, longitude, latitude followed by one column per
    slot labelled 'Q<quarter>.<year>' in chronological order.
    """
    wide = pixels.copy()
    wide.columns = [slot_label(year, quarter) for year, quarter in pixels.columns]
    return wide.reset_index()
