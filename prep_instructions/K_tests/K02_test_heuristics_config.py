# prep_instructions/K_tests/K02_test_heuristics_config.py
"""Tests for HeuristicsConfig loading/validation and the exception hierarchy."""
from pathlib import Path

import pytest

from A_core.A03_heuristics_config import (
    HeuristicsConfig,
    ReferenceStep,
    StepTemplate,
)
from A_core.A04_exceptions import (
    ConfigurationError,
    ExportError,
    ParsingError,
    PrepPipelineError,
    ReferenceDataError,
)

PACKAGE_ROOT = Path(__file__).parent.parent


class TestDefaults:
    def test_category_order(self, heuristics):
        assert list(heuristics.category_keywords) == ["medication", "bowelprep", "diet", "procedure"]

    def test_kit_alias_precedes_plain_product(self, heuristics):
        preps = list(heuristics.bowel_prep_aliases)
        assert preps.index("glycoprepkit") < preps.index("glycoprepo")

    def test_reference_steps(self, heuristics):
        offsets = [(r.category, r.offset) for r in heuristics.reference_steps]
        assert offsets == [("medication", -5), ("bowelprep", -3), ("diet", -2), ("diet", -1)]

    def test_summary_counts(self, heuristics):
        summary = heuristics.summary()
        assert summary["reference_steps"] == 4
        assert summary["required_steps"] == 3


class TestValidation:
    def test_unknown_category_table_rejected(self):
        with pytest.raises(ConfigurationError):
            HeuristicsConfig(category_keywords={"surgery": ["scalpel"]})

    def test_unknown_prep_rejected(self):
        with pytest.raises(ConfigurationError) as exc:
            HeuristicsConfig(bowel_prep_aliases={"colyte": ["colyte"]})
        assert exc.value.config_key == "heuristics.bowel_prep_aliases"

    def test_unknown_template_category_rejected(self):
        with pytest.raises(ConfigurationError):
            HeuristicsConfig(phase_templates={"seven_days": [StepTemplate("Stop iron", -7, "pharmacy")]})

    def test_tables_lowercased(self):
        config = HeuristicsConfig(category_keywords={"diet": ["Clear Liquids"]})
        assert config.category_keywords == {"diet": ["clear liquids"]}


class TestFromYaml:
    def test_shipped_config_matches_defaults(self, heuristics):
        loaded = HeuristicsConfig.from_yaml(PACKAGE_ROOT / "G_config" / "config.yaml")
        assert loaded.category_keywords == heuristics.category_keywords
        assert loaded.bowel_prep_aliases == heuristics.bowel_prep_aliases
        assert loaded.reference_steps == heuristics.reference_steps
        assert loaded.required_steps == heuristics.required_steps
        assert loaded.coverage_rules == heuristics.coverage_rules

    def test_missing_file_uses_defaults(self, tmp_path, heuristics):
        loaded = HeuristicsConfig.from_yaml(tmp_path / "absent.yaml")
        assert loaded.category_keywords == heuristics.category_keywords

    def test_partial_override(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "heuristics:\n"
            "  reference_steps:\n"
            "    - {order: 1, category: diet, offset: -4, message: Eat plain rice}\n",
            encoding="utf-8",
        )
        loaded = HeuristicsConfig.from_yaml(path)
        assert loaded.reference_steps == [ReferenceStep(1, "diet", -4, "Eat plain rice")]
        assert "medication" in loaded.category_keywords

    def test_malformed_entry(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("heuristics:\n  required_steps:\n    - {category: diet}\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            HeuristicsConfig.from_yaml(path)

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            HeuristicsConfig.from_yaml(path)


class TestExceptions:
    def test_hierarchy(self):
        for cls in (ConfigurationError, ParsingError, ExportError, ReferenceDataError):
            assert issubclass(cls, PrepPipelineError)

    def test_context_in_str(self):
        err = ParsingError("PDF file not found", file_path="a.pdf", page_number=2)
        assert str(err) == "PDF file not found [file=a.pdf, page=2]"
        assert err.message == "PDF file not found"

    def test_reference_row(self):
        err = ReferenceDataError("Unknown bowel prep", file_path="seq.csv", row_number=4)
        assert err.context == {"file": "seq.csv", "row": 4}

    def test_plain_message(self):
        assert str(ExportError("Disk full")) == "Disk full"
