# prep_instructions/K_tests/K04_test_section_segmenter.py
"""Tests for blank-line and phase-header segmentation."""
import pytest

from A_core.A03_heuristics_config import HeuristicsConfig
from B_parsing.B03_section_segmenter import (
    PHASE_OFFSETS,
    PhaseSections,
    segment_by_phase,
    split_into_sections,
)


class TestSplitIntoSections:
    def test_blank_lines_separate(self):
        assert split_into_sections("a\nb\n\nc\n\n\n d ") == ["a\nb", "c", "d"]

    def test_no_empty_sections(self):
        assert split_into_sections("\n\n   \n") == []
        assert split_into_sections("") == []


class TestSegmentByPhase:
    def test_all_phases(self, phase_document, heuristics):
        sections = segment_by_phase(phase_document, heuristics)
        assert sections.present_phases() == ["seven_days", "three_days", "day_before", "day_of"]
        assert sections.seven_days == "SEVEN DAYS BEFORE\nStop taking iron supplements"
        assert sections.three_days.startswith("THREE DAYS")
        assert "At 6:00pm drink" in sections.day_before
        assert "DAY OF" not in sections.day_before

    def test_terminator_ends_last_section(self, phase_document, heuristics):
        sections = segment_by_phase(phase_document, heuristics)
        assert sections.day_of.endswith("Arrive 2 hours before your appointment.")
        assert "Diabetic" not in sections.day_of

    def test_case_insensitive_markers(self, heuristics):
        sections = segment_by_phase("Day Before\nAt 6pm drink.\nDay of\nArrive early.", heuristics)
        assert sections.day_before == "Day Before\nAt 6pm drink."
        assert sections.day_of == "Day of\nArrive early."

    def test_missing_markers_give_empty_sections(self, heuristics):
        sections = segment_by_phase("DAY OF\nArrive 2 hours early.", heuristics)
        assert sections.seven_days == ""
        assert sections.day_before == ""
        assert sections.present_phases() == ["day_of"]

    def test_markers_out_of_order(self, heuristics):
        sections = segment_by_phase("DAY OF\nx\nSEVEN DAYS\ny", heuristics)
        assert sections.day_of == "DAY OF\nx"
        assert sections.seven_days == "SEVEN DAYS\ny"

    def test_no_markers(self, heuristics):
        assert segment_by_phase("Just some text", heuristics) == PhaseSections()

    def test_custom_markers(self):
        config = HeuristicsConfig(phase_markers={"day_of": "PROCEDURE DAY"}, phase_terminators=[])
        sections = segment_by_phase("intro\nPROCEDURE DAY\nArrive early. SPECIAL", config)
        assert sections.day_of == "PROCEDURE DAY\nArrive early. SPECIAL"

    def test_get_unknown_phase(self):
        with pytest.raises(KeyError):
            PhaseSections().get("month_before")

    def test_phase_offsets(self):
        assert PHASE_OFFSETS == {"seven_days": -7, "three_days": -3, "day_before": -1, "day_of": 0}
