"""Core kelp indicator execution logic.

This module contains the actual pipeline runner, separated from argument
parsing. Scripts are thin wrappers; this is the real implementation.
"""

import json
import logging
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any

import pandas as pd

from kelpseg.setup_directories import setup_output_directories
from kelpseg.pipeline.runner import KelpIndicatorPipeline
from kelpseg.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def run_kelp_indicators(
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
) -> Dict[str, pd.DataFrame]:
    """Execute the kelp indicator pipeline.

    1. Loads and resolves configuration (Param < User < CLI)
    2. Sets up output directories
    3. Runs every stage and writes the CSV tables

    Parameters
    ----------
    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict).
    cli_args : dict, optional
        CLI overrides. Keys: landsat_file, segments_file, base_dir,
        status_year, frequency, log_level. All optional.
    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    dict of str -> pd.DataFrame
        Indicator tables keyed by name (pixels, presence, max_occupiable,
        time_series, [annual], status).

    Raises
    ------
    FileNotFoundError
        If a config or source file does not exist.
    ConfigurationError
        If configuration validation fails.

    Examples
    --------
    Run with CLI overrides::

        run_kelp_indicators(
            "config/kelp_config.py",
            cli_args={"status_year": 2020, "base_dir": "/scratch/kelp"},
        )
    """
    param_cfg = ParamConfig()

    user_cfg_dict = load_user_config_dict(user_config_path) if user_config_path else {}
    user_cfg = UserConfig.model_validate(user_cfg_dict)

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)
    output_dirs = setup_output_directories(config.base_dir)

    print(f"\n{'='*60}")
    print("Kelp Canopy Indicator Pipeline")
    print('='*60)
    print(f"Config:    {user_config_path}")
    print(f"Raster:    {config.landsat_file}")
    print(f"Segments:  {config.segments_file}")
    print(f"Frequency: {config.time_series.frequency} ({config.time_series.annualization_method})")
    print(f"Output:    {output_dirs['base']}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)

    pipeline = KelpIndicatorPipeline(config, output_dirs)
    return pipeline.run()
