"""Stage contracts and error types.

Contracts fail immediately and loudly when a stage does not produce its
promised invariants.

Key principle:
- Pydantic validates config correctness
- Loaders raise FormatError for malformed inputs
- Contracts validate stage correctness
- Indicator code resolves numeric edge cases to NaN or sentinels
"""

from kelpseg.contracts.failure import (
    ConfigurationError,
    ContractViolation,
    FormatError,
    NotFoundError,
)
from kelpseg.contracts.base import require
from kelpseg.contracts.pixels import assert_segmented_pixels
from kelpseg.contracts.presence import PRESENCE_CATEGORIES, assert_presence_table
from kelpseg.contracts.timeseries import assert_time_series

__all__ = [
    "ConfigurationError",
    "ContractViolation",
    "FormatError",
    "NotFoundError",
    "PRESENCE_CATEGORIES",
    "require",
    "assert_segmented_pixels",
    "assert_presence_table",
    "assert_time_series",
]
