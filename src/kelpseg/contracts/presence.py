"""Presence stage contract."""

import pandas as pd
from kelpseg.contracts.base import require

PRESENCE_CATEGORIES = ("No Historical Kelp", "Ephemeral Kelp", "Kelp")


def assert_presence_table(presence: pd.DataFrame) -> None:
    """Enforce presence classification contract.

    Every segment lands in exactly one of the three categories, and a
    missing pixel_percent always means "No Historical Kelp".

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    for col in ("segment_id", "segment_area_km2", "pixel_percent", "presence"):
        require(
            col in presence.columns,
            f"Presence contract violated: missing required column '{col}'"
        )

    require(
        presence["segment_id"].is_unique,
        "Presence contract violated: duplicate segment_id rows"
    )
    require(
        presence["presence"].isin(PRESENCE_CATEGORIES).all(),
        "Presence contract violated: unknown presence category"
    )
    missing_pct = presence["pixel_percent"].isna()
    require(
        (presence.loc[missing_pct, "presence"] == PRESENCE_CATEGORIES[0]).all(),
        "Presence contract violated: missing pixel_percent must be 'No Historical Kelp'"
    )
