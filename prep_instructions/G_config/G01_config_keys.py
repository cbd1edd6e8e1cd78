# prep_instructions/G_config/G01_config_keys.py
"""
Configuration key constants for the prep-instruction pipeline.

Provides type-safe configuration key enums that:
- Prevent typos in configuration keys
- Document default values
- Centralize the config.yaml schema

Usage:
    from G_config.G01_config_keys import ConfigKey, PipelineKey, get_nested_config

    # Instead of: config.get("pipeline", {}).get("strategy", "phase")
    strategy = get_nested_config(config, ConfigKey.PIPELINE, PipelineKey.STRATEGY)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ConfigKeyBase(str, Enum):
    """
    Base class for configuration key enums.

    Inherits from str to allow direct use as dictionary keys.
    """

    _default: Any
    _description: str

    def __new__(cls, key: str, default: Any = None, description: str = "") -> "ConfigKeyBase":
        obj = str.__new__(cls, key)
        obj._value_ = key
        obj._default = default
        obj._description = description
        return obj

    @property
    def default(self) -> Any:
        return self._default

    @property
    def description(self) -> str:
        return self._description


class ConfigKey(ConfigKeyBase):
    """Top-level sections of config.yaml."""

    PIPELINE = ("pipeline", {}, "Segmentation and PDF extraction settings")
    PATHS = ("paths", {}, "Input/output file locations")
    LOGGING = ("logging", {}, "Log level and log file settings")
    HEURISTICS = ("heuristics", {}, "Classifier keyword tables and reference steps")


class PipelineKey(ConfigKeyBase):
    """Keys within the 'pipeline' section."""

    STRATEGY = ("strategy", "phase", "Segmentation strategy: phase or blank_line")
    BASELINE_TOLERANCE = ("baseline_tolerance", 1.0, "Max baseline difference (pt) for spans on one line")
    PARAGRAPH_GAP_RATIO = ("paragraph_gap_ratio", 1.8, "Line gap, in font sizes, that starts a new paragraph")


class PathsKey(ConfigKeyBase):
    """Keys within the 'paths' section."""

    MASTER_SEQUENCE = ("master_sequence", "data/sequence.csv", "Reference instruction sequence CSV")
    OUTPUT_DIR = ("output_dir", "output", "Directory for generated CSV files")


class LoggingKey(ConfigKeyBase):
    """Keys within the 'logging' section."""

    LEVEL = ("level", "INFO", "Console log level")
    LOG_DIR = ("log_dir", "logs", "Directory for rotating log files")
    FILE_LOGGING = ("file_logging", False, "Also write logs to log_dir")


# Helper functions for type-safe config access

def get_nested_config(
    config: Dict[str, Any],
    *keys: ConfigKeyBase,
    default: Optional[Any] = None,
) -> Any:
    """
    Get a nested configuration value.

    Example:
        >>> get_nested_config({}, ConfigKey.PIPELINE, PipelineKey.STRATEGY)
        'phase'
    """
    result = config
    for key in keys[:-1]:
        result = result.get(key.value, {})
        if not isinstance(result, dict):
            return default if default is not None else keys[-1].default

    final_key = keys[-1]
    value = result.get(final_key.value)
    if value is None:
        return default if default is not None else final_key.default
    return value


__all__ = [
    "ConfigKeyBase",
    "ConfigKey",
    "PipelineKey",
    "PathsKey",
    "LoggingKey",
    "get_nested_config",
]
