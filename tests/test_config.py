"""Tests for configuration defaults, validation and loading."""

import pytest

from design_insight.config import (
    DEFAULT_CONFIG,
    AnalysisConfig,
    AposdConfig,
    ConnascenceConfig,
    TemporalConfig,
    load_config,
)
from design_insight.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test in an empty directory without DESIGN_INSIGHT_* variables."""
    monkeypatch.chdir(tmp_path)
    for key in ("DESIGN_INSIGHT_WORKERS", "DESIGN_INSIGHT_MAX_FILE_SIZE_MB", "DESIGN_INSIGHT_VERBOSITY"):
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    """Default values reproduce the fixed analyzer constants."""

    def test_analysis_defaults(self):
        assert DEFAULT_CONFIG.workers is None
        assert DEFAULT_CONFIG.max_file_size_mb == 10.0
        assert DEFAULT_CONFIG.max_file_size_bytes == 10 * 1024 * 1024
        assert DEFAULT_CONFIG.verbosity == "normal"

    def test_section_defaults(self):
        assert DEFAULT_CONFIG.aposd.exclude_rust_idioms is True
        assert DEFAULT_CONFIG.aposd.passthrough_ratio_threshold == 0.8
        assert DEFAULT_CONFIG.aposd.passthrough_confidence_threshold == 0.7
        assert DEFAULT_CONFIG.connascence.min_positional_args == 4
        assert DEFAULT_CONFIG.connascence.high_strength_threshold == 0.6
        assert DEFAULT_CONFIG.temporal.high_severity_threshold == 0.6
        assert DEFAULT_CONFIG.temporal.min_builder_methods == 3


class TestValidation:
    @pytest.mark.parametrize(
        "factory",
        [
            lambda: AposdConfig(passthrough_ratio_threshold=1.5),
            lambda: AposdConfig(passthrough_confidence_threshold=-0.1),
            lambda: ConnascenceConfig(min_positional_args=0),
            lambda: ConnascenceConfig(high_strength_threshold=2.0),
            lambda: TemporalConfig(min_builder_methods=0),
            lambda: TemporalConfig(high_severity_threshold=-1.0),
            lambda: AnalysisConfig(workers=0),
            lambda: AnalysisConfig(max_file_size_mb=0),
            lambda: AnalysisConfig(verbosity="loud"),
        ],
    )
    def test_invalid_values(self, factory):
        with pytest.raises(ValueError):
            factory()

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.workers = 4


class TestLoadConfig:
    """Source merging: project file, explicit file, environment, overrides."""

    def test_defaults_without_sources(self):
        assert load_config() == AnalysisConfig()

    def test_project_file(self, tmp_path):
        (tmp_path / "design-insight.toml").write_text(
            "workers = 2\n\n[aposd]\nexclude_methods = [\"dispatch\"]\n"
        )
        config = load_config()
        assert config.workers == 2
        assert config.aposd.exclude_methods == ["dispatch"]
        assert config.aposd.exclude_rust_idioms is True

    def test_explicit_file_merges_sections(self, tmp_path):
        (tmp_path / "design-insight.toml").write_text("[temporal]\nmin_builder_methods = 5\n")
        explicit = tmp_path / "ci.toml"
        explicit.write_text("[temporal]\nhigh_severity_threshold = 0.8\n")

        config = load_config(explicit)

        assert config.temporal.min_builder_methods == 5
        assert config.temporal.high_severity_threshold == 0.8

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("DESIGN_INSIGHT_WORKERS", "3")
        monkeypatch.setenv("DESIGN_INSIGHT_MAX_FILE_SIZE_MB", "2.5")
        monkeypatch.setenv("DESIGN_INSIGHT_VERBOSITY", "quiet")
        config = load_config()
        assert config.workers == 3
        assert config.max_file_size_mb == 2.5
        assert config.verbosity == "quiet"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("DESIGN_INSIGHT_WORKERS", "3")
        config = load_config(workers=8, connascence=ConnascenceConfig(min_positional_args=6))
        assert config.workers == 8
        assert config.connascence.min_positional_args == 6

    def test_section_override_as_dict(self):
        config = load_config(aposd={"exclude_rust_idioms": False})
        assert config.aposd.exclude_rust_idioms is False

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "absent.toml")

    def test_malformed_toml(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("workers = = 2\n")
        with pytest.raises(ConfigurationError):
            load_config(bad)

    def test_invalid_value(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("[connascence]\nmin_positional_args = 0\n")
        with pytest.raises(ConfigurationError):
            load_config(bad)

    def test_unknown_key(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("colour = \"blue\"\n")
        with pytest.raises(ConfigurationError):
            load_config(bad)

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("DESIGN_INSIGHT_WORKERS", "many")
        with pytest.raises(ConfigurationError):
            load_config()
