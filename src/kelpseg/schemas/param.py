"""ParamConfig: Expert defaults for the kelp indicator pipeline.

This module defines the complete default configuration. ALL parameters
must have defaults here. No runtime code should define fallback values.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional, Union
from pydantic import Field, field_validator, model_validator
from kelpseg.schemas.base import (
    KelpBaseModel,
    normalize_annualization_method,
    normalize_segment_ids,
    normalize_status_year,
)

Frequency = Literal["quarterly", "annual"]
AnnualizationMethod = Literal["max_first", "sum_first", "Q1", "Q2", "Q3", "Q4"]


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ReaderConfig(KelpBaseModel):
    """Raster and polygon source naming."""
    latitude_var: str = "latitude"
    longitude_var: str = "longitude"
    area_var: str = "area"
    year_var: str = "year"
    segment_id_field: str = "Segment_ID"


class AssignerConfig(KelpBaseModel):
    """Pixel-to-segment assignment."""
    fractional_pixels: bool = True
    pixel_area_m2: float = Field(900.0, gt=0, description="Full Landsat pixel footprint")


class PresenceConfig(KelpBaseModel):
    """Historical presence classification thresholds (percent of segment area)."""
    no_kelp_bound: float = Field(0.02, ge=0)
    ephemeral_kelp_bound: float = Field(0.15, ge=0)
    area_crs: str = Field("EPSG:5070", description="Equal-area CRS for segment areas")

    @model_validator(mode="after")
    def check_bounds_ordered(self):
        """Ephemeral upper bound cannot sit below the no-kelp bound."""
        if self.ephemeral_kelp_bound < self.no_kelp_bound:
            raise ValueError(
                f"ephemeral_kelp_bound ({self.ephemeral_kelp_bound}) must be >= "
                f"no_kelp_bound ({self.no_kelp_bound})"
            )
        return self


class TimeSeriesConfig(KelpBaseModel):
    """Time series frequency, annualization and historical baseline."""
    frequency: Frequency = "annual"
    annualization_method: AnnualizationMethod = "max_first"
    baseline_start: int = 1984
    baseline_end: int = 2013

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, v):
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("annualization_method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        return normalize_annualization_method(v)

    @model_validator(mode="after")
    def check_baseline(self):
        if self.baseline_start > self.baseline_end:
            raise ValueError(
                f"baseline_start ({self.baseline_start}) must be <= baseline_end ({self.baseline_end})"
            )
        return self


class StatusConfig(KelpBaseModel):
    """Status year selection. None means the latest year in the series."""
    status_year: Optional[int] = None

    @field_validator("status_year", mode="before")
    @classmethod
    def latest_to_none(cls, v):
        return normalize_status_year(v)


class SegmentsConfig(KelpBaseModel):
    """Which segments to process."""
    segment_ids: Union[Literal["all"], list[str]] = "all"

    @field_validator("segment_ids", mode="before")
    @classmethod
    def normalize_ids(cls, v):
        return normalize_segment_ids(v)


class OutputConfig(KelpBaseModel):
    """Output table configuration."""
    write_pixel_table: bool = False
    float_format: Optional[str] = None


class LoggingConfig(KelpBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(KelpBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all parameters. Every tunable
    parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    landsat_file: Optional[str] = None
    segments_file: Optional[str] = None
    base_dir: Optional[str] = None
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    assigner: AssignerConfig = Field(default_factory=AssignerConfig)
    presence: PresenceConfig = Field(default_factory=PresenceConfig)
    time_series: TimeSeriesConfig = Field(default_factory=TimeSeriesConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    segments: SegmentsConfig = Field(default_factory=SegmentsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
