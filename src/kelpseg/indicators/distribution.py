"""Cumulative distribution of percent-of-historical area across segments.

Builds the table behind the yearly ECDF chart of kelp segments: which
fraction of "Kelp" segments sits below each percent-of-historical value,
plus the per-year median.
"""

from typing import Iterable, Optional

import numpy as np
import pandas as pd

from kelpseg.contracts import PRESENCE_CATEGORIES
from kelpseg.indicators.indicator_utils import nearest_even_median

__all__ = ['cumulative_distribution']

KELP = PRESENCE_CATEGORIES[2]


def cumulative_distribution(
    annual: pd.DataFrame,
    presence: pd.DataFrame,
    years: Optional[Iterable[int]] = None,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """ECDF table and yearly medians of area_hist for Kelp segments.

    Parameters
    ----------
    annual : pd.DataFrame
        Annual time series with area_hist.
    presence : pd.DataFrame
        Presence table; only "Kelp" segments are kept.
    years : iterable of int, optional
        Years to include. Default: every year in `annual`.

    Returns
    -------
    ecdf : pd.DataFrame
        Columns year, segment_id, area_hist, fraction; sorted by year then
        area_hist. fraction is the ECDF value #{v <= x} / n within the
        year, so tied area_hist values share the upper fraction.
    medians : pd.DataFrame
        Columns year, area_hist. The yearly median is the nearest even
        order statistic, matching the chart's R `quantile(type = 3)`.
    """
    kelp_ids = presence.loc[presence["presence"] == KELP, "segment_id"]
    data = annual[annual["segment_id"].isin(kelp_ids) & annual["area_hist"].notna()]
    if years is not None:
        data = data[data["year"].isin(list(years))]

    ecdf = (
        data[["year", "segment_id", "area_hist"]]
        .sort_values(["year", "area_hist"], kind="stable")
        .reset_index(drop=True)
    )
    if ecdf.empty:
        ecdf["fraction"] = np.array([], dtype=float)
        return ecdf, pd.DataFrame({"year": pd.Series(dtype=int), "area_hist": pd.Series(dtype=float)})

    rank = ecdf.groupby("year")["area_hist"].rank(method="max")
    n = ecdf.groupby("year")["area_hist"].transform("size")
    ecdf["fraction"] = (rank / n).astype(float)

    medians = (
        ecdf.groupby("year", sort=False)["area_hist"]
        .agg(nearest_even_median)
        .rename("area_hist")
        .reset_index()
    )
    return ecdf, medians
