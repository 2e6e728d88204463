"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from kelpseg.contracts import ConfigurationError
from kelpseg.schemas import ParamConfig, UserConfig, CLIConfig, InternalConfig
from kelpseg.schemas.resolve import deep_merge, resolve_config

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert config.presence.no_kelp_bound == 0.02
        assert config.presence.ephemeral_kelp_bound == 0.15
        assert config.time_series.frequency == "annual"
        assert config.time_series.annualization_method == "max_first"
        assert (config.time_series.baseline_start, config.time_series.baseline_end) == (1984, 2013)
        assert config.assigner.fractional_pixels is True
        assert config.status.status_year is None
        assert config.segment_ids is None
        assert config.landsat_file is None

    def test_user_config_overrides_param_config(self):
        user = UserConfig(no_kelp_bound=0.05, frequency="quarterly")
        config = resolve_config(ParamConfig(), user, None)

        assert config.presence.no_kelp_bound == 0.05
        assert config.presence.ephemeral_kelp_bound == 0.15  # untouched default
        assert config.time_series.frequency == "quarterly"

    def test_dict_layers_accepted(self):
        config = resolve_config(
            {"time_series": {"frequency": "QUARTERLY"}},
            {"ANNUALIZATION_METHOD": "q3"},
            {"base_dir": "/tmp/kelp"},
        )
        assert config.time_series.frequency == "quarterly"
        assert config.time_series.annualization_method == "Q3"
        assert config.base_dir == "/tmp/kelp"

    def test_segment_selection(self):
        config = resolve_config(ParamConfig(), UserConfig(segment_ids=["s2", "s1"]))
        assert config.segment_ids == ["s2", "s1"]

        config = resolve_config(ParamConfig(), UserConfig(segment_ids="ALL"))
        assert config.segment_ids is None

    def test_internal_config_is_frozen(self):
        config = resolve_config(ParamConfig())
        with pytest.raises(ValidationError):
            config.base_dir = "/elsewhere"


class TestConfigErrors:

    def test_unsupported_frequency(self):
        with pytest.raises(ConfigurationError, match="frequency"):
            resolve_config(ParamConfig(), UserConfig(frequency="monthly"))

    def test_unsupported_annualization_method(self):
        with pytest.raises(ConfigurationError, match="annualization_method"):
            resolve_config(ParamConfig(), UserConfig(annualization_method="mean"))

    def test_inverted_presence_bounds(self):
        with pytest.raises(ConfigurationError, match="ephemeral_kelp_bound"):
            resolve_config(ParamConfig(), UserConfig(no_kelp_bound=0.5, ephemeral_kelp_bound=0.1))

    def test_inverted_baseline(self):
        with pytest.raises(ConfigurationError, match="baseline_start"):
            resolve_config(ParamConfig(), UserConfig(baseline_start=2010, baseline_end=2000))

    def test_negative_bound(self):
        with pytest.raises(ConfigurationError):
            resolve_config(ParamConfig(), UserConfig(no_kelp_bound=-1))

    def test_param_config_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ParamConfig(unknown_field=1)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_config(ParamConfig(), UserConfig(frequency="weekly"))


def test_deep_merge_nested():
    base = {"a": 1, "b": {"c": 2, "d": 3}}
    override = {"b": {"d": 4, "e": 5}, "f": 6}
    assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}
    assert base == {"a": 1, "b": {"c": 2, "d": 3}}
