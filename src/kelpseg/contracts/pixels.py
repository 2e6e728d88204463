"""Segmented pixel table contract.

Enforces the guarantee that after assignment every row belongs to a
segment and every observation carries its (year, quarter) label.
"""

import numpy as np
import pandas as pd
from kelpseg.contracts.base import require

PIXEL_INDEX_NAMES = ["segment_id", "longitude", "latitude"]
SLOT_NAMES = ["year", "quarter"]


def assert_segmented_pixels(pixels: pd.DataFrame) -> None:
    """Enforce the segmented pixel table contract.

    Parameters
    ----------
    pixels : pd.DataFrame
        Output of SegmentAssigner.assign()

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        isinstance(pixels, pd.DataFrame),
        f"Pixel contract violated: table is {type(pixels)}, expected DataFrame"
    )
    require(
        list(pixels.index.names) == PIXEL_INDEX_NAMES,
        f"Pixel contract violated: index names {list(pixels.index.names)}, "
        f"expected {PIXEL_INDEX_NAMES}"
    )
    require(
        list(pixels.columns.names) == SLOT_NAMES,
        f"Pixel contract violated: column names {list(pixels.columns.names)}, "
        f"expected {SLOT_NAMES}"
    )
    require(
        pixels.index.get_level_values("segment_id").notna().all(),
        "Pixel contract violated: rows without a segment_id"
    )

    quarters = pixels.columns.get_level_values("quarter")
    require(
        bool(np.isin(quarters, [1, 2, 3, 4]).all()),
        "Pixel contract violated: quarter labels outside 1..4"
    )

    values = pixels.to_numpy(dtype=float)
    require(
        bool((np.isnan(values) | (values >= 0)).all()),
        "Pixel contract violated: negative area observations"
    )
