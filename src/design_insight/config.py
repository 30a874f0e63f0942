"""Configuration loading and management for Design Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig and its sub-configs)
    2. Project config (./design-insight.toml)
    3. Explicit config file
    4. Environment variables (DESIGN_INSIGHT_* prefix)
    5. Keyword overrides

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
    >>> config.aposd.exclude_rust_idioms
    True
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "DESIGN_INSIGHT_"
PROJECT_CONFIG_NAME = "design-insight.toml"


@dataclass(frozen=True)
class AposdConfig:
    """Module depth and pass-through detection settings.

    Attributes:
        exclude_rust_idioms: Skip conversion, accessor, trait, builder and
            iterator-adaptor method names when looking for pass-throughs
        exclude_prefixes: Extra method-name prefixes to skip
        exclude_methods: Extra exact method names to skip
        passthrough_ratio_threshold: Forward ratio at or above which a
            delegating method is a pass-through
        passthrough_confidence_threshold: Confidence above which a
            pass-through counts as confirmed
    """

    exclude_rust_idioms: bool = True
    exclude_prefixes: list[str] = field(default_factory=list)
    exclude_methods: list[str] = field(default_factory=list)
    passthrough_ratio_threshold: float = 0.8
    passthrough_confidence_threshold: float = 0.7

    def __post_init__(self) -> None:
        for field_name in ("passthrough_ratio_threshold", "passthrough_confidence_threshold"):
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{field_name} must be between 0.0 and 1.0")


@dataclass(frozen=True)
class ConnascenceConfig:
    """Connascence classifier settings."""

    min_positional_args: int = 4
    high_strength_threshold: float = 0.6

    def __post_init__(self) -> None:
        if self.min_positional_args < 1:
            raise ValueError("min_positional_args must be at least 1")
        if not 0.0 <= self.high_strength_threshold <= 1.0:
            raise ValueError("high_strength_threshold must be between 0.0 and 1.0")


@dataclass(frozen=True)
class TemporalConfig:
    """Temporal coupling detector settings."""

    high_severity_threshold: float = 0.6
    min_builder_methods: int = 3

    def __post_init__(self) -> None:
        if not 0.0 <= self.high_severity_threshold <= 1.0:
            raise ValueError("high_severity_threshold must be between 0.0 and 1.0")
        if self.min_builder_methods < 1:
            raise ValueError("min_builder_methods must be at least 1")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a project analysis run.

    Attributes:
        workers: Parallel per-module workers (None or 1 = sequential)
        max_file_size_mb: Source units larger than this are skipped
        verbosity: Logging verbosity level
        aposd: Depth / pass-through settings
        connascence: Connascence classifier settings
        temporal: Temporal coupling settings
    """

    workers: Optional[int] = None
    max_file_size_mb: float = 10.0
    verbosity: Verbosity = "normal"

    aposd: AposdConfig = field(default_factory=AposdConfig)
    connascence: ConnascenceConfig = field(default_factory=ConnascenceConfig)
    temporal: TemporalConfig = field(default_factory=TemporalConfig)

    def __post_init__(self) -> None:
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet/normal/verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


DEFAULT_CONFIG = AnalysisConfig()

_SECTIONS = {
    "aposd": AposdConfig,
    "connascence": ConnascenceConfig,
    "temporal": TemporalConfig,
}


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (scalar fields or whole sub-configs)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config source is invalid or missing
    """
    merged: dict[str, Any] = {}

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        _merge(merged, _load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        _merge(merged, _load_toml_file(config_file))

    merged.update(_load_env_vars())
    merged.update(overrides)

    for section, section_cls in _SECTIONS.items():
        value = merged.pop(section, None)
        if value is None:
            continue
        if isinstance(value, section_cls):
            merged[section] = value
        elif isinstance(value, dict):
            try:
                merged[section] = section_cls(**value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid [{section}] config: {e}")
        else:
            raise ConfigurationError(f"Invalid [{section}] config: expected a table")

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _merge(target: dict[str, Any], source: dict[str, Any]) -> None:
    """Merge a parsed TOML document into target, combining section tables."""
    for key, value in source.items():
        if key in _SECTIONS and isinstance(value, dict) and isinstance(target.get(key), dict):
            target[key] = {**target[key], **value}
        else:
            target[key] = value


def _load_env_vars() -> dict[str, Any]:
    """Load scalar top-level fields from DESIGN_INSIGHT_* environment variables.

    Supported environment variables:
        DESIGN_INSIGHT_WORKERS: int
        DESIGN_INSIGHT_MAX_FILE_SIZE_MB: float
        DESIGN_INSIGHT_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        if field_name in _SECTIONS:
            continue
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file, wrapping decode errors in ConfigurationError."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
