"""
Directory setup for the kelp indicator pipeline.

Layout under the base directory:
- tables/  indicator CSV tables
- logs/    pipeline log file
"""

from pathlib import Path


def setup_output_directories(base_output_dir=None):
    """
    Set up the output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. Defaults to ./kelp_output.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'tables', 'logs'
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "kelp_output"

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "tables": base_output_dir / "tables",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    return directories
