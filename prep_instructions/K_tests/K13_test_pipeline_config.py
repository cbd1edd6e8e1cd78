# prep_instructions/K_tests/K13_test_pipeline_config.py
"""Tests for G_config: config keys, PipelineConfig and load_config."""
from pathlib import Path

import pytest

from A_core.A04_exceptions import ConfigurationError
from G_config import PipelineConfig, SegmentationStrategy, load_config, parse_strategy
from G_config.G01_config_keys import ConfigKey, LoggingKey, PipelineKey, get_nested_config
from G_config.prep_config import PACKAGE_ROOT

SHIPPED_CONFIG = PACKAGE_ROOT / "G_config" / "config.yaml"


class TestConfigKeys:
    def test_key_defaults(self):
        assert PipelineKey.STRATEGY.default == "phase"
        assert LoggingKey.FILE_LOGGING.default is False
        assert PipelineKey.STRATEGY.description

    def test_keys_usable_as_dict_keys(self):
        assert {"pipeline": 1}[ConfigKey.PIPELINE] == 1

    def test_nested_lookup(self):
        data = {"pipeline": {"strategy": "blank_line"}}
        assert get_nested_config(data, ConfigKey.PIPELINE, PipelineKey.STRATEGY) == "blank_line"

    def test_nested_falls_back_to_key_default(self):
        assert get_nested_config({}, ConfigKey.PIPELINE, PipelineKey.BASELINE_TOLERANCE) == 1.0
        assert get_nested_config({"pipeline": None}, ConfigKey.PIPELINE, PipelineKey.STRATEGY) == "phase"

    def test_explicit_default_wins(self):
        assert get_nested_config({}, ConfigKey.LOGGING, LoggingKey.LEVEL, default="DEBUG") == "DEBUG"


class TestParseStrategy:
    @pytest.mark.parametrize("value", ["phase", " PHASE ", SegmentationStrategy.PHASE])
    def test_phase(self, value):
        assert parse_strategy(value) is SegmentationStrategy.PHASE

    def test_unknown(self):
        with pytest.raises(ConfigurationError) as exc:
            parse_strategy("sentence")
        assert exc.value.config_key == "pipeline.strategy"


class TestPipelineConfig:
    def test_defaults(self):
        config = PipelineConfig()
        assert config.strategy is SegmentationStrategy.PHASE
        assert config.master_sequence_path == PACKAGE_ROOT / "data" / "sequence.csv"
        assert config.output_dir == Path("output")
        assert config.log_level == "INFO"

    def test_string_values_coerced(self):
        config = PipelineConfig(strategy="blank_line", output_dir="results", master_sequence_path="data/x.csv")
        assert config.strategy is SegmentationStrategy.BLANK_LINE
        assert config.output_dir == Path("results")
        assert config.master_sequence_path == PACKAGE_ROOT / "data" / "x.csv"

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ConfigurationError):
            PipelineConfig(baseline_tolerance=-0.5)

    def test_zero_gap_ratio_rejected(self):
        with pytest.raises(ConfigurationError):
            PipelineConfig(paragraph_gap_ratio=0)

    def test_summary(self):
        assert "strategy=phase" in PipelineConfig().summary()


class TestLoading:
    def test_shipped_config_matches_defaults(self):
        config = load_config(SHIPPED_CONFIG)
        assert config.strategy is SegmentationStrategy.PHASE
        assert config.master_sequence_path.is_file()
        assert list(config.heuristics.category_keywords) == ["medication", "bowelprep", "diet", "procedure"]

    def test_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "pipeline:\n"
            "  strategy: blank_line\n"
            "  baseline_tolerance: 2\n"
            "logging:\n"
            "  level: debug\n"
            "heuristics:\n"
            "  min_message_length: 10\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.strategy is SegmentationStrategy.BLANK_LINE
        assert config.baseline_tolerance == 2.0
        assert config.paragraph_gap_ratio == 1.8
        assert config.log_level == "DEBUG"
        assert config.heuristics.min_message_length == 10

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == PipelineConfig()

    def test_invalid_strategy_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("pipeline:\n  strategy: sentences\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_environment_override(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("paths:\n  output_dir: elsewhere\n", encoding="utf-8")
        monkeypatch.setenv("PREP_CONFIG_PATH", str(path))
        assert load_config().output_dir == Path("elsewhere")
