"""CLIConfig: Command-line operational overrides.

Minimal configuration for settings that commonly change between runs:
source files, output directory, status year, frequency, verbosity.
"""

from typing import Literal, Optional, Union
from kelpseg.schemas.base import KelpBaseModel, normalize_status_year


class CLIConfig(KelpBaseModel):
    """Command-line configuration overrides.

    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(base_dir="/scratch/kelp_out", status_year=2020)
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    landsat_file: Optional[str] = None
    segments_file: Optional[str] = None
    base_dir: Optional[str] = None
    status_year: Optional[Union[int, Literal["latest"]]] = None
    frequency: Optional[Literal["quarterly", "annual"]] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        for key in ("landsat_file", "segments_file", "base_dir"):
            value = getattr(self, key)
            if value is not None:
                overrides[key] = str(value)

        if self.status_year is not None:
            overrides["status"] = {"status_year": normalize_status_year(self.status_year)}

        if self.frequency is not None:
            overrides["time_series"] = {"frequency": self.frequency}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
