# prep_instructions/G_config/prep_config.py
"""
Run configuration for the prep-instruction pipeline.

Usage:
    from G_config import load_config

    config = load_config()                      # G_config/config.yaml
    config = load_config(Path("custom.yaml"))   # explicit file
    config = PipelineConfig(strategy=SegmentationStrategy.BLANK_LINE)

The ``heuristics`` section of the same file is loaded into
``config.heuristics`` (see A_core.A03_heuristics_config).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from A_core.A00_logging import get_logger
from A_core.A03_heuristics_config import DEFAULT_CONFIG_PATH, HeuristicsConfig
from A_core.A04_exceptions import ConfigurationError
from G_config.G01_config_keys import (
    ConfigKey,
    LoggingKey,
    PathsKey,
    PipelineKey,
    get_nested_config,
)

logger = get_logger(__name__)

# Relative paths in config.yaml resolve against the package directory
PACKAGE_ROOT = Path(__file__).resolve().parents[1]


class SegmentationStrategy(str, Enum):
    """How normalized text is cut into instruction candidates."""

    PHASE = "phase"  # SEVEN DAYS / THREE DAYS / DAY BEFORE / DAY OF headers
    BLANK_LINE = "blank_line"  # one candidate per paragraph


def parse_strategy(value: Union[str, SegmentationStrategy]) -> SegmentationStrategy:
    try:
        return SegmentationStrategy(str(getattr(value, "value", value)).strip().lower())
    except ValueError as e:
        raise ConfigurationError(
            "Unknown segmentation strategy",
            config_key=f"{ConfigKey.PIPELINE.value}.{PipelineKey.STRATEGY.value}",
            actual_value=value,
        ) from e


def _resolve(path_value: Union[str, Path]) -> Path:
    path = Path(path_value)
    return path if path.is_absolute() else PACKAGE_ROOT / path


@dataclass
class PipelineConfig:
    """Settings for one pipeline run."""

    strategy: SegmentationStrategy = SegmentationStrategy.PHASE
    baseline_tolerance: float = PipelineKey.BASELINE_TOLERANCE.default
    paragraph_gap_ratio: float = PipelineKey.PARAGRAPH_GAP_RATIO.default

    master_sequence_path: Path = field(default_factory=lambda: _resolve(PathsKey.MASTER_SEQUENCE.default))
    output_dir: Path = field(default_factory=lambda: Path(PathsKey.OUTPUT_DIR.default))

    log_level: str = LoggingKey.LEVEL.default
    log_dir: Path = field(default_factory=lambda: Path(LoggingKey.LOG_DIR.default))
    file_logging: bool = LoggingKey.FILE_LOGGING.default

    heuristics: HeuristicsConfig = field(default_factory=HeuristicsConfig)

    def __post_init__(self) -> None:
        self.strategy = parse_strategy(self.strategy)
        if isinstance(self.master_sequence_path, str):
            self.master_sequence_path = _resolve(self.master_sequence_path)
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)
        if self.baseline_tolerance < 0:
            raise ConfigurationError(
                "baseline_tolerance must not be negative",
                config_key=f"{ConfigKey.PIPELINE.value}.{PipelineKey.BASELINE_TOLERANCE.value}",
                actual_value=self.baseline_tolerance,
            )
        if self.paragraph_gap_ratio <= 0:
            raise ConfigurationError(
                "paragraph_gap_ratio must be positive",
                config_key=f"{ConfigKey.PIPELINE.value}.{PipelineKey.PARAGRAPH_GAP_RATIO.value}",
                actual_value=self.paragraph_gap_ratio,
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """Build from a parsed config.yaml mapping."""
        heuristics = data.get(ConfigKey.HEURISTICS.value) or {}
        if not isinstance(heuristics, dict):
            raise ConfigurationError("heuristics section must be a mapping", config_key=ConfigKey.HEURISTICS.value)

        try:
            return cls(
                strategy=get_nested_config(data, ConfigKey.PIPELINE, PipelineKey.STRATEGY),
                baseline_tolerance=float(get_nested_config(data, ConfigKey.PIPELINE, PipelineKey.BASELINE_TOLERANCE)),
                paragraph_gap_ratio=float(get_nested_config(data, ConfigKey.PIPELINE, PipelineKey.PARAGRAPH_GAP_RATIO)),
                master_sequence_path=_resolve(get_nested_config(data, ConfigKey.PATHS, PathsKey.MASTER_SEQUENCE)),
                output_dir=Path(get_nested_config(data, ConfigKey.PATHS, PathsKey.OUTPUT_DIR)),
                log_level=str(get_nested_config(data, ConfigKey.LOGGING, LoggingKey.LEVEL)).upper(),
                log_dir=Path(get_nested_config(data, ConfigKey.LOGGING, LoggingKey.LOG_DIR)),
                file_logging=bool(get_nested_config(data, ConfigKey.LOGGING, LoggingKey.FILE_LOGGING)),
                heuristics=HeuristicsConfig.from_dict(heuristics),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid pipeline configuration: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: Optional[Union[str, Path]] = None) -> "PipelineConfig":
        """
        Load configuration from a config.yaml file.

        Args:
            config_path: Path to config.yaml. If None, uses PREP_CONFIG_PATH
                or G_config/config.yaml.

        Returns:
            PipelineConfig; defaults when the file is missing or unreadable.
        """
        path = Path(config_path) if config_path is not None else Path(DEFAULT_CONFIG_PATH)

        if not path.exists():
            logger.warning(f"Config file not found: {path}, using defaults")
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config.yaml: {e}")
            return cls()

        if not isinstance(data, dict):
            raise ConfigurationError("config.yaml must contain a mapping", actual_value=type(data).__name__)
        return cls.from_dict(data)

    def summary(self) -> str:
        return (
            f"strategy={self.strategy.value} master={self.master_sequence_path.name} "
            f"output_dir={self.output_dir} log_level={self.log_level}"
        )


def load_config(config_path: Optional[Union[str, Path]] = None) -> PipelineConfig:
    """
    Load the pipeline configuration from config.yaml.

    Example:
        from G_config import load_config
        config = load_config()
        print(config.strategy)
    """
    if config_path is None and os.getenv("PREP_CONFIG_PATH"):
        config_path = os.environ["PREP_CONFIG_PATH"]
    return PipelineConfig.from_yaml(config_path)
