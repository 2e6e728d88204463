"""Read Landsat kelp canopy NetCDF files and kelp segment polygon layers.

The raster product stores one row per kelp pixel (station) with
quarterly canopy area in m^2. This module standardizes it into an
xarray.Dataset with dims (pixel, time), attaching the (year, quarter)
label of every slot at ingestion, so downstream code never relies on
column position.

Key capabilities:
- Reads NetCDF with xarray (fill values masked to NaN)
- Accepts `year` stored per year or per quarterly slot
- Reads segment polygons with geopandas and normalizes the id field
- Raises FormatError for malformed or shape-inconsistent sources
"""

from pathlib import Path
import logging

import geopandas as gpd
import numpy as np
import pandas as pd
import xarray as xr

from typing import TYPE_CHECKING
from kelpseg.contracts.failure import FormatError
from kelpseg.landsat.landsat_utils import M2_PER_KM2

if TYPE_CHECKING:
    from kelpseg.schemas import InternalConfig

__all__ = [
    'LandsatKelpLoader',
    'standardize_landsat_dataset',
    'standardize_segments',
    'label_quarterly_slots',
    'compute_segment_areas_km2',
]

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"


def label_quarterly_slots(years: np.ndarray, n_slots: int) -> tuple[np.ndarray, np.ndarray]:
    """Return per-slot (year, quarter) labels for contiguous quarterly data.

    Slots start at quarter 1 of the first year and run chronologically.

    Parameters
    ----------
    years : np.ndarray
        Either one entry per year (``len(years) * 4 == n_slots``) or one
        entry per slot, each year repeated over 4 consecutive slots.
    n_slots : int
        Size of the time dimension of the area variable.

    Raises
    ------
    FormatError
        If the year variable cannot describe ``n_slots`` quarterly slots.
    """
    years = np.asarray(years).ravel()
    if not np.isfinite(years.astype(float)).all():
        raise FormatError("Year variable contains missing values")
    years = years.astype(int)

    if years.size * 4 == n_slots:
        per_year = years
    elif years.size == n_slots and n_slots % 4 == 0:
        grouped = years.reshape(-1, 4)
        if not (grouped == grouped[:, :1]).all():
            raise FormatError("Per-slot year variable must repeat each year over 4 consecutive quarters")
        per_year = grouped[:, 0]
    else:
        raise FormatError(
            f"Area has {n_slots} time slots, inconsistent with {years.size} year entries "
            f"(expected {years.size * 4} slots)"
        )

    if per_year.size > 1 and not (np.diff(per_year) > 0).all():
        raise FormatError("Years must be in strictly increasing chronological order")

    slot_years = np.repeat(per_year, 4)
    slot_quarters = np.tile(np.arange(1, 5), per_year.size)
    return slot_years, slot_quarters


def standardize_landsat_dataset(
    ds: xr.Dataset,
    latitude_var: str = "latitude",
    longitude_var: str = "longitude",
    area_var: str = "area",
    year_var: str = "year",
) -> xr.Dataset:
    """Validate a raw kelp canopy dataset and return the standard layout.

    Parameters
    ----------
    ds : xr.Dataset
        Raw dataset with 1-D latitude/longitude (one entry per pixel),
        2-D area (pixel x time, either order) and a year variable.

    Returns
    -------
    xr.Dataset
        Dataset with:
        - Dimensions: (pixel, time)
        - Data variables: area (float, m^2, NaN = no data)
        - Coordinates: longitude(pixel), latitude(pixel), year(time), quarter(time)

    Raises
    ------
    FormatError
        Missing variables, inconsistent shapes, or negative area values.
    """
    missing = [v for v in (latitude_var, longitude_var, area_var, year_var) if v not in ds.variables]
    if missing:
        raise FormatError(f"Missing variables in kelp dataset: {missing}")

    lat = ds[latitude_var]
    lon = ds[longitude_var]
    area = ds[area_var]

    if lat.ndim != 1 or lon.ndim != 1 or lat.shape != lon.shape:
        raise FormatError(
            f"latitude/longitude must be 1-D with equal length, got {lat.shape} and {lon.shape}"
        )
    if area.ndim != 2:
        raise FormatError(f"'{area_var}' has {area.ndim} dims, expected 2 (pixel x time)")

    pixel_dim = lat.dims[0]
    if pixel_dim not in area.dims:
        raise FormatError(f"'{area_var}' does not share the pixel dimension '{pixel_dim}'")
    time_dim = next(d for d in area.dims if d != pixel_dim)

    values = area.transpose(pixel_dim, time_dim).values.astype(float)
    n_pixels, n_slots = values.shape
    if n_pixels != lat.size:
        raise FormatError(f"'{area_var}' has {n_pixels} pixels, coordinates have {lat.size}")

    slot_years, slot_quarters = label_quarterly_slots(ds[year_var].values, n_slots)

    if (values[~np.isnan(values)] < 0).any():
        raise FormatError(f"'{area_var}' contains negative area values")

    out = xr.Dataset(
        data_vars={"area": (("pixel", "time"), values)},
        coords={
            "longitude": ("pixel", lon.values.astype(float)),
            "latitude": ("pixel", lat.values.astype(float)),
            "year": ("time", slot_years),
            "quarter": ("time", slot_quarters),
        },
        attrs=dict(ds.attrs),
    )
    out["area"].attrs["units"] = "m2"
    return out


def standardize_segments(segments: gpd.GeoDataFrame, segment_id_field: str = "Segment_ID") -> gpd.GeoDataFrame:
    """Normalize a segment polygon layer to (segment_id, geometry) in WGS84.

    Raises
    ------
    FormatError
        Missing id field, missing CRS, or duplicate ids.
    """
    if segment_id_field not in segments.columns:
        raise FormatError(
            f"Segment layer has no '{segment_id_field}' field. Available: {list(segments.columns)}"
        )
    if segments.crs is None:
        raise FormatError("Segment layer has no CRS; cannot place pixels")

    ids = segments[segment_id_field].astype(str)
    duplicated = ids[ids.duplicated()].unique().tolist()
    if duplicated:
        raise FormatError(f"Duplicate segment ids in segment layer: {duplicated}")

    out = gpd.GeoDataFrame(
        {"segment_id": ids.to_numpy(), "geometry": segments.geometry.to_numpy()},
        geometry="geometry",
        crs=segments.crs,
    )
    if out.crs.to_epsg() != 4326:
        out = out.to_crs(WGS84)
    return out


def compute_segment_areas_km2(segments: gpd.GeoDataFrame, area_crs: str = "EPSG:5070") -> pd.Series:
    """Compute polygon area in km^2 using an equal-area CRS (default: CONUS Albers).

    Returns
    -------
    pd.Series
        Areas indexed by segment_id.
    """
    if segments.crs is None:
        raise FormatError("Input geometries have no CRS; can't compute area safely.")
    areas = segments.to_crs(area_crs).geometry.area / M2_PER_KM2
    return pd.Series(
        areas.to_numpy(dtype=float),
        index=pd.Index(segments["segment_id"].to_numpy(), name="segment_id"),
        name="segment_area_km2",
    )


class LandsatKelpLoader:
    """Load the kelp canopy raster and the segment polygon layer.

    Configuration
    =============
    Reads `config.reader`:

    - `latitude_var`, `longitude_var`, `area_var`, `year_var` : str
        Variable names in the NetCDF file.
    - `segment_id_field` : str
        Attribute of the polygon layer holding the segment id.

    Notes
    -----
    - The raster is read fully into memory; no caching across calls
    - All failures raise (FileNotFoundError, FormatError); nothing is
      returned partially

    Examples
    --------
    >>> loader = LandsatKelpLoader(config)
    >>> ds = loader.load("LandsatKelpBiomass_2024_Q4.nc")
    >>> segments = loader.load_segments("kelp_segments.shp")
    """

    def __init__(self, config: "InternalConfig"):
        self.reader_config = config.reader

    def load(self, filepath: Path | str) -> xr.Dataset:
        """Read a kelp canopy NetCDF file into the standard (pixel, time) layout."""
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Kelp raster not found: {path}")

        cfg = self.reader_config
        with xr.open_dataset(path) as raw:
            ds = standardize_landsat_dataset(
                raw,
                latitude_var=cfg.latitude_var,
                longitude_var=cfg.longitude_var,
                area_var=cfg.area_var,
                year_var=cfg.year_var,
            )

        logger.info(
            "Loaded %s: %d pixels, %d quarters (%d-%d)",
            path.name, ds.sizes["pixel"], ds.sizes["time"],
            int(ds.year.min()) if ds.sizes["time"] else 0,
            int(ds.year.max()) if ds.sizes["time"] else 0,
        )
        return ds

    def load_segments(self, filepath: Path | str) -> gpd.GeoDataFrame:
        """Read the segment polygon layer (any OGR vector format)."""
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Segment layer not found: {path}")

        segments = standardize_segments(gpd.read_file(path), self.reader_config.segment_id_field)
        logger.info("Loaded %d kelp segments from %s", len(segments), path.name)
        return segments
