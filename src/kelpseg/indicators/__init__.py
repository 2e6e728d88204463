"""Segment-level kelp indicators.

- time_series: Quarterly/annual area series with historical normalization
- status: Status ratio against the historical median
- distribution: ECDF table of percent-of-historical for Kelp segments
"""

from kelpseg.indicators.time_series import TimeSeriesExtractor
from kelpseg.indicators.status import KelpStatusCalculator, MISSING_BASELINE_STATUS
from kelpseg.indicators.distribution import cumulative_distribution

__all__ = [
    "TimeSeriesExtractor",
    "KelpStatusCalculator",
    "MISSING_BASELINE_STATUS",
    "cumulative_distribution",
]
