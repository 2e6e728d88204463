"""Root-level pytest fixtures for the kelpseg test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture. Tests use these fixtures instead of creating raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from kelpseg.schemas import ParamConfig, UserConfig, resolve_config

from tests.helpers.fake_landsat import (
    make_default_landsat_ds,
    make_default_segments,
)


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults.

    Use this as the base for all test configs. Override specific values
    using make_config or by creating custom UserConfig instances.
    """
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_assigner_init(internal_config):
    ...     assigner = SegmentAssigner(internal_config)
    ...     assert assigner.fractional_pixels is True
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_quarterly(make_config):
    ...     config = make_config(frequency="quarterly")
    ...     assert config.time_series.frequency == "quarterly"
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def landsat_ds():
    """Standardized raster: 4 pixels in seg_a, 1 in seg_b, 1 outside, 1984-1985."""
    return make_default_landsat_ds()


@pytest.fixture
def segments():
    """Three adjacent ~1 km^2 segments off Santa Barbara; seg_c has no pixels."""
    return make_default_segments()


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def output_dirs(temp_dir):
    """Standard kelpseg output directory structure (base, tables, logs)."""
    dirs = {
        "base": temp_dir,
        "tables": temp_dir / "tables",
        "logs": temp_dir / "logs",
    }
    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)
    return dirs
