"""Formal stage invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor and system reference.
"""

STAGE_INVARIANTS = {
    "load": [
        "Dataset has dims (pixel, time) and variable 'area'",
        "Coordinates longitude/latitude indexed by pixel, year/quarter by time",
        "Slots are contiguous quarters starting at Q1 of the first year",
        "Area values are >= 0 or NaN",
    ],

    "assignment": [
        "Index is (segment_id, longitude, latitude); columns are (year, quarter)",
        "No row has a null segment_id",
        "Every segment of interest has at least one row",
        "Segments with no pixels have exactly one all-NaN row",
    ],

    "presence": [
        "One row per polygon of interest",
        "Category is one of No Historical Kelp, Ephemeral Kelp, Kelp",
        "pixel_percent NaN implies No Historical Kelp",
    ],

    "time_series": [
        "One row per (segment, year) or (segment, year, quarter)",
        "max_occupiable and historical_med constant within a segment",
        "area_hist NaN where historical_med is NaN or 0",
    ],

    "status": [
        "One row per requested segment",
        "status is -999 exactly when historical_med is NaN or 0",
    ],
}
