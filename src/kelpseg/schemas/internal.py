"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and frozen.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional, Union
from pydantic import ConfigDict, Field, model_validator
from kelpseg.schemas.base import KelpBaseModel
from kelpseg.schemas.param import AnnualizationMethod, Frequency


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalReaderConfig(KelpBaseModel):
    """Runtime source naming."""
    latitude_var: str
    longitude_var: str
    area_var: str
    year_var: str
    segment_id_field: str


class InternalAssignerConfig(KelpBaseModel):
    """Runtime assignment configuration."""
    fractional_pixels: bool
    pixel_area_m2: float = Field(gt=0)


class InternalPresenceConfig(KelpBaseModel):
    """Runtime presence thresholds."""
    no_kelp_bound: float = Field(ge=0)
    ephemeral_kelp_bound: float = Field(ge=0)
    area_crs: str

    @model_validator(mode="after")
    def check_bounds_ordered(self):
        if self.ephemeral_kelp_bound < self.no_kelp_bound:
            raise ValueError(
                f"ephemeral_kelp_bound ({self.ephemeral_kelp_bound}) must be >= "
                f"no_kelp_bound ({self.no_kelp_bound})"
            )
        return self


class InternalTimeSeriesConfig(KelpBaseModel):
    """Runtime time series configuration."""
    frequency: Frequency
    annualization_method: AnnualizationMethod
    baseline_start: int
    baseline_end: int

    @model_validator(mode="after")
    def check_baseline(self):
        if self.baseline_start > self.baseline_end:
            raise ValueError(
                f"baseline_start ({self.baseline_start}) must be <= baseline_end ({self.baseline_end})"
            )
        return self


class InternalStatusConfig(KelpBaseModel):
    """Runtime status configuration (None = latest year)."""
    status_year: Optional[int]


class InternalSegmentsConfig(KelpBaseModel):
    """Runtime segment selection."""
    segment_ids: Union[Literal["all"], list[str]]


class InternalOutputConfig(KelpBaseModel):
    """Runtime output configuration."""
    write_pixel_table: bool
    float_format: Optional[str]


class InternalLoggingConfig(KelpBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(KelpBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.no_kelp_bound = config.presence.no_kelp_bound  # NOT .get()

    File paths stay Optional: the components work on in-memory data, and
    only the pipeline runner requires them (checked there).
    """

    landsat_file: Optional[str]
    segments_file: Optional[str]
    base_dir: Optional[str]
    reader: InternalReaderConfig
    assigner: InternalAssignerConfig
    presence: InternalPresenceConfig
    time_series: InternalTimeSeriesConfig
    status: InternalStatusConfig
    segments: InternalSegmentsConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )

    @property
    def segment_ids(self) -> Optional[list[str]]:
        """Requested segment ids, or None for all segments."""
        ids = self.segments.segment_ids
        return None if ids == "all" else list(ids)
