"""Kelp indicator user configuration.

This is the user-facing configuration file. Modify settings here to customize
the pipeline behavior. Expert defaults live in kelpseg.schemas.param.

Usage:
    python scripts/run_kelp_indicators.py scripts/user_config.py
    python scripts/run_kelp_indicators.py scripts/user_config.py --status-year 2020
"""

CONFIG = {
    # ========================================================================
    # SOURCES & OUTPUT
    # ========================================================================
    "LANDSAT_FILE": "data/LandsatKelpBiomass_2024_Q4_withmetadata.nc",
    "SEGMENTS_FILE": "data/kelp_segments.shp",
    "SEGMENT_ID_FIELD": "Segment_ID",   # Polygon attribute holding the id
    "BASE_DIR": "./kelp_output",         # tables/ and logs/ go here

    # ========================================================================
    # PIXEL ASSIGNMENT
    # ========================================================================
    "FRACTIONAL_PIXELS": True,   # False: any kelp counts as the full 900 m2

    # ========================================================================
    # PRESENCE (percent of segment area covered by ever-detected pixels)
    # ========================================================================
    "NO_KELP_BOUND": 0.02,
    "EPHEMERAL_KELP_BOUND": 0.15,

    # ========================================================================
    # TIME SERIES
    # ========================================================================
    "FREQUENCY": "annual",              # "annual" or "quarterly"
    "ANNUALIZATION_METHOD": "max_first", # max_first, sum_first, Q1..Q4
    "BASELINE_START": 1984,
    "BASELINE_END": 2013,

    # ========================================================================
    # STATUS & SELECTION
    # ========================================================================
    "STATUS_YEAR": "latest",
    "SEGMENT_IDS": "all",        # or a list, e.g. ["1", "2", "17"]

    "WRITE_PIXEL_TABLE": False,
    "LOG_LEVEL": "INFO",
}
