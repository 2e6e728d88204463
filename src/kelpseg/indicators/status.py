"""Kelp status: a year's annual area relative to the historical median."""

import logging
from typing import Iterable, Optional, Union, TYPE_CHECKING

import pandas as pd

from kelpseg.contracts import ConfigurationError, NotFoundError, require
from kelpseg.landsat.landsat_utils import resolve_segment_ids

if TYPE_CHECKING:
    from kelpseg.schemas import InternalConfig

__all__ = ['KelpStatusCalculator', 'resolve_status_year', 'MISSING_BASELINE_STATUS']

logger = logging.getLogger(__name__)

MISSING_BASELINE_STATUS = -999.0


def resolve_status_year(annual: pd.DataFrame, status_year: Optional[Union[int, str]]) -> int:
    """Turn None / "latest" into the last year present in the series."""
    if status_year is None or (isinstance(status_year, str) and status_year.strip().lower() == "latest"):
        if annual.empty:
            raise NotFoundError("Cannot resolve the latest status year from an empty time series")
        return int(annual["year"].max())
    try:
        return int(status_year)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid status year: {status_year!r}") from e


class KelpStatusCalculator:
    """Ratio of a chosen year's annual area to the historical median.

    status = area_abs / historical_med for the status year, or -999 when
    the segment has no usable baseline (historical_med NaN or 0). The
    sentinel keeps "insufficient history" apart from a true zero ratio.

    Configuration
    =============
    Reads `config.status.status_year` (None = latest year in the series).

    Examples
    --------
    >>> calculator = KelpStatusCalculator(config)
    >>> status = calculator.calculate(annual, presence, status_year=2020)
    """

    def __init__(self, config: "InternalConfig"):
        self.status_year = config.status.status_year

    def calculate(
        self,
        annual: pd.DataFrame,
        presence: pd.DataFrame,
        segment_ids: Optional[Iterable[str]] = None,
        status_year: Optional[Union[int, str]] = None,
    ) -> pd.DataFrame:
        """Compute status per segment for one year.

        Parameters
        ----------
        annual : pd.DataFrame
            Annual series from TimeSeriesExtractor (any annualization method).
        presence : pd.DataFrame
            Presence table from KelpPresenceClassifier.
        segment_ids : iterable of str, optional
            Segments to report; default every segment of the presence table.
        status_year : int or "latest", optional
            Overrides the configured status year.

        Returns
        -------
        pd.DataFrame
            Columns segment_id, year, presence, status.

        Raises
        ------
        ConfigurationError
            Quarterly input, or a requested id absent from the presence table.
        NotFoundError
            A requested segment has no row for the status year.
        """
        if "quarter" in annual.columns:
            raise ConfigurationError("Status requires an annual time series, got a quarterly one")

        ids = resolve_segment_ids(segment_ids, presence["segment_id"])
        year = resolve_status_year(annual, self.status_year if status_year is None else status_year)

        rows = annual[(annual["year"] == year) & annual["segment_id"].isin(ids)]
        require(
            not rows["segment_id"].duplicated().any(),
            f"Status contract violated: several rows per segment for {year}"
        )

        found = set(rows["segment_id"])
        missing = [s for s in ids if s not in found]
        if missing:
            raise NotFoundError(f"No {year} row in the annual series for segments: {missing}")

        rows = rows.set_index("segment_id").loc[ids]
        med = rows["historical_med"]
        has_baseline = med > 0
        status = (rows["area_abs"] / med.where(has_baseline)).where(has_baseline, MISSING_BASELINE_STATUS)

        result = pd.DataFrame({
            "segment_id": ids,
            "year": year,
            "presence": presence.set_index("segment_id")["presence"].reindex(ids).to_numpy(),
            "status": status.to_numpy(dtype=float),
        })

        n_missing = int((~has_baseline).sum())
        logger.info(
            "Status %d: %d segments, %d without historical baseline",
            year, len(result), n_missing,
        )
        return result
