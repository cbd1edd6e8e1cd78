# prep_instructions/G_config/__init__.py
"""
Configuration module for the prep-instruction pipeline.

RECOMMENDED: Load configuration from config.yaml:

    from G_config import load_config

    config = load_config()
    print(config.strategy, config.heuristics.summary())

Choose the segmentation strategy in G_config/config.yaml:

    pipeline:
      strategy: phase        # or blank_line

Set PREP_CONFIG_PATH to use a config file outside the package.
"""

from .prep_config import (
    PipelineConfig,
    SegmentationStrategy,
    load_config,
    parse_strategy,
)

__all__ = [
    "PipelineConfig",
    "SegmentationStrategy",
    "load_config",
    "parse_strategy",
]
