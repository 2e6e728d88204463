"""Small helpers shared by the indicator calculators."""

import numpy as np
import pandas as pd

__all__ = [
    'FREQUENCIES',
    'ANNUALIZATION_METHODS',
    'QUARTER_START_MONTH',
    'quarter_start_dates',
    'lower_median',
    'grouped_lower_median',
    'nearest_even_median',
]

FREQUENCIES = ("quarterly", "annual")
ANNUALIZATION_METHODS = ("max_first", "sum_first", "Q1", "Q2", "Q3", "Q4")
QUARTER_START_MONTH = {1: 1, 2: 4, 3: 7, 4: 10}


def quarter_start_dates(years, quarters=None) -> pd.Series:
    """First calendar day of each (year, quarter), or of each year when
    quarters is None."""
    years = np.asarray(years, dtype=int)
    if quarters is None:
        months = np.ones_like(years)
    else:
        months = 3 * (np.asarray(quarters, dtype=int) - 1) + 1
    return pd.to_datetime(pd.DataFrame({"year": years, "month": months, "day": 1}))


def lower_median(values) -> float:
    """Median as the value at rank ceil(n/2) of the sorted non-null sample.

    For even n this is the lower of the two middle values. NaN when no
    value is present.
    """
    values = pd.Series(values, dtype=float).dropna()
    if values.empty:
        return np.nan
    return float(values.quantile(0.5, interpolation="lower"))


def grouped_lower_median(frame: pd.DataFrame, by: str, column: str) -> pd.Series:
    """lower_median of `column` for every group of `by`."""
    # "lower" picks 0-based position floor((n-1)/2), i.e. 1-based rank ceil(n/2)
    return frame.groupby(by, sort=False)[column].quantile(0.5, interpolation="lower")


def nearest_even_median(values) -> float:
    """Median as the nearest even order statistic (R `quantile(type = 3)`).

    Differs from lower_median only when n % 4 == 1: for n = 5 this returns
    the 2nd smallest value, lower_median the 3rd.
    """
    v = np.sort(pd.Series(values, dtype=float).dropna().to_numpy())
    n = v.size
    if n == 0:
        return np.nan
    h = n * 0.5 - 0.5
    j = int(np.floor(h))
    k = j if (h == j and j % 2 == 0) else j + 1
    return float(v[min(max(k, 1), n) - 1])
