"""`kelpseg` - coastal kelp canopy indicators from Landsat pixel data.

Subpackages:
- landsat: Raster/segment loading, pixel-to-segment assignment, presence, max occupiable area
- indicators: Quarterly/annual time series, status, cumulative distributions
- pipeline: Batch runner writing indicator tables
"""

__version__ = "0.1.0"
