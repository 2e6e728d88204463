"""UserConfig: Forgiving, minimal user-facing configuration.

Accepts flat keys with uppercase aliases (LANDSAT_FILE -> landsat_file,
FREQUENCY -> frequency). Users only specify what they want to override
from the expert defaults. Unknown keys are ignored.
"""

from typing import Any, Literal, Optional, Union
from pydantic import ConfigDict, Field, field_validator
from kelpseg.schemas.base import (
    KelpBaseModel,
    normalize_annualization_method,
    normalize_segment_ids,
    normalize_status_year,
)


class UserConfig(KelpBaseModel):
    """User-facing configuration schema.

    Usage
    -----
        user_cfg = UserConfig(
            landsat_file="data/LandsatKelpBiomass_2024_Q4.nc",
            segments_file="data/kelp_segments.shp",
            frequency="annual",
            annualization_method="sum_first",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    model_config = ConfigDict(
        extra='ignore',           # Legacy/unknown keys are dropped
        validate_assignment=True,
        str_strip_whitespace=True,
        populate_by_name=True,    # Accept both 'landsat_file' and 'LANDSAT_FILE'
    )

    # Sources and outputs
    landsat_file: Optional[str] = Field(None, alias="LANDSAT_FILE")
    segments_file: Optional[str] = Field(None, alias="SEGMENTS_FILE")
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    segment_id_field: Optional[str] = Field(None, alias="SEGMENT_ID_FIELD")

    # Assignment
    fractional_pixels: Optional[bool] = Field(None, alias="FRACTIONAL_PIXELS")

    # Presence
    no_kelp_bound: Optional[float] = Field(None, alias="NO_KELP_BOUND")
    ephemeral_kelp_bound: Optional[float] = Field(None, alias="EPHEMERAL_KELP_BOUND")

    # Time series
    frequency: Optional[str] = Field(None, alias="FREQUENCY")
    annualization_method: Optional[str] = Field(None, alias="ANNUALIZATION_METHOD")
    baseline_start: Optional[int] = Field(None, alias="BASELINE_START")
    baseline_end: Optional[int] = Field(None, alias="BASELINE_END")

    # Status and selection
    status_year: Optional[Union[int, Literal["latest"]]] = Field(None, alias="STATUS_YEAR")
    segment_ids: Optional[Union[Literal["all"], list[str]]] = Field(None, alias="SEGMENT_IDS")

    write_pixel_table: Optional[bool] = Field(None, alias="WRITE_PIXEL_TABLE")
    log_level: Optional[str] = Field(None, alias="LOG_LEVEL")

    @field_validator("frequency", "log_level", mode="before")
    @classmethod
    def normalize_case(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("annualization_method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        return normalize_annualization_method(v)

    @field_validator("status_year", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str) and v.strip().lower() == "latest":
            return "latest"
        return v

    @field_validator("segment_ids", mode="before")
    @classmethod
    def normalize_ids(cls, v):
        return normalize_segment_ids(v)

    def to_internal_overrides(self) -> dict:
        """Convert flat user keys to the nested internal structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides: dict[str, Any] = {}

        for key in ("landsat_file", "segments_file", "base_dir"):
            value = getattr(self, key)
            if value is not None:
                overrides[key] = value

        sections = {
            "reader": {"segment_id_field": self.segment_id_field},
            "assigner": {"fractional_pixels": self.fractional_pixels},
            "presence": {
                "no_kelp_bound": self.no_kelp_bound,
                "ephemeral_kelp_bound": self.ephemeral_kelp_bound,
            },
            "time_series": {
                "frequency": self.frequency.lower() if self.frequency else None,
                "annualization_method": self.annualization_method,
                "baseline_start": self.baseline_start,
                "baseline_end": self.baseline_end,
            },
            "segments": {"segment_ids": self.segment_ids},
            "output": {"write_pixel_table": self.write_pixel_table},
            "logging": {"level": self.log_level.upper() if self.log_level else None},
        }
        for section, values in sections.items():
            values = {k: v for k, v in values.items() if v is not None}
            if values:
                overrides[section] = values

        if self.status_year is not None:
            overrides["status"] = {"status_year": normalize_status_year(self.status_year)}

        return overrides
