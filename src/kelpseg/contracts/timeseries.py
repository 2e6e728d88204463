"""Time series stage contract.

Enforces that per-segment baselines are broadcast consistently across
every row of that segment.
"""

import pandas as pd
from kelpseg.contracts.base import require


def assert_time_series(series: pd.DataFrame, frequency: str) -> None:
    """Enforce time series contract.

    Parameters
    ----------
    series : pd.DataFrame
        Output of TimeSeriesExtractor.extract()

    frequency : str
        "quarterly" or "annual"

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    required_cols = [
        "segment_id",
        "year",
        "date",
        "area_abs",
        "max_occupiable",
        "historical_med",
        "area_hist",
        "area_pct",
    ]
    if frequency == "quarterly":
        required_cols.append("quarter")

    for col in required_cols:
        require(
            col in series.columns,
            f"Time series contract violated: missing required column '{col}'"
        )

    keys = ["segment_id", "year", "quarter"] if frequency == "quarterly" else ["segment_id", "year"]
    require(
        not series.duplicated(subset=keys).any(),
        f"Time series contract violated: duplicate {keys} rows"
    )

    if len(series) > 0:
        per_segment = series.groupby("segment_id", sort=False)[["max_occupiable", "historical_med"]]
        require(
            bool((per_segment.nunique(dropna=False) <= 1).all().all()),
            "Time series contract violated: max_occupiable/historical_med vary within a segment"
        )
