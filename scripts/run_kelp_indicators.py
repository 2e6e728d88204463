#!/usr/bin/env python3
"""Kelp canopy indicator pipeline runner.

Usage:
    python scripts/run_kelp_indicators.py scripts/user_config.py
    python scripts/run_kelp_indicators.py scripts/user_config.py --status-year 2020
    python scripts/run_kelp_indicators.py scripts/user_config.py --frequency quarterly

Note: User config in scripts/user_config.py, expert defaults in kelpseg.schemas.param
"""

import sys
import argparse
import shutil
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from kelpseg.cli import run_kelp_indicators


def _status_year(value):
    return value if value.lower() == "latest" else int(value)


def main():
    parser = argparse.ArgumentParser(description="Compute kelp canopy indicators per coastal segment")
    parser.add_argument("config", help="Path to user config file")
    parser.add_argument("--landsat-file", help="Override kelp canopy NetCDF path")
    parser.add_argument("--segments-file", help="Override segment polygon layer path")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--status-year", type=_status_year, help="Status year, or 'latest'")
    parser.add_argument("--frequency", choices=["quarterly", "annual"], help="Override time series frequency")
    parser.add_argument("--rerun", action="store_true", help="Delete the tables directory before running")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    cli_args = {
        "landsat_file": args.landsat_file,
        "segments_file": args.segments_file,
        "base_dir": args.base_dir,
        "status_year": args.status_year,
        "frequency": args.frequency,
    }

    if args.rerun and args.base_dir:
        tables_dir = Path(args.base_dir) / "tables"
        if tables_dir.exists():
            print(f"Cleaning output directory: {tables_dir}")
            shutil.rmtree(tables_dir)

    tables = run_kelp_indicators(args.config, cli_args=cli_args, verbose=args.verbose)

    status = tables["status"]
    print(f"\nStatus {int(status['year'].iloc[0])}: {len(status)} segments")
    print(status["presence"].value_counts().to_string())


if __name__ == "__main__":
    main()
