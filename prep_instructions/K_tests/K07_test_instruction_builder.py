# prep_instructions/K_tests/K07_test_instruction_builder.py
"""Tests for InstructionBuilder (phase and blank-line strategies)."""
import pytest

from A_core.A03_heuristics_config import HeuristicsConfig
from B_parsing.B03_section_segmenter import split_into_sections
from H_pipeline.H01_instruction_builder import InstructionBuilder

WORKED_EXAMPLE = (
    "SEVEN DAYS\nStop taking iron supplements\nTHREE DAYS\n...\n"
    "DAY BEFORE\nAt 6:00pm drink the solution.\n"
    "DAY OF\nArrive 2 hours before your appointment."
)


def _find(instructions, **fields):
    return [i for i in instructions if all(getattr(i, k) == v for k, v in fields.items())]


class TestPhaseBuild:
    def test_worked_example(self, heuristics):
        steps = InstructionBuilder(heuristics).build(WORKED_EXAMPLE)

        assert _find(steps, offset=-7, category="medication")
        evening = _find(steps, offset=-1, category="bowelprep")
        assert len(evening) == 1
        assert evening[0].time == 18.0
        assert evening[0].message == "At 6:00pm drink the solution."
        arrive = _find(steps, offset=0, category="procedure")
        assert arrive[0].message == "Arrive 2 hours before your appointment."
        assert arrive[0].time == 7.0

    def test_templates_per_phase(self, phase_document, heuristics):
        steps = InstructionBuilder(heuristics).build(phase_document)
        messages = [s.message for s in steps]
        assert messages[:3] == [
            "Stop taking iron supplements",
            "Stop taking any drugs that may make you constipated",
            "Begin eating only a low residue diet",
        ]
        assert [(s.offset, s.time) for s in steps[:3]] == [(-7, 9.0), (-3, 9.0), (-3, 10.0)]

    def test_day_before_clauses(self, phase_document, heuristics):
        steps = InstructionBuilder(heuristics).build(phase_document)
        day_before = _find(steps, offset=-1)
        assert [(s.message, s.category, s.time) for s in day_before] == [
            ("At 6:00pm drink the first dose of the solution.", "bowelprep", 18.0),
            ("From 8pm clear fluids only.", "diet", 20.0),
        ]

    def test_document_flags_copied(self, phase_document, heuristics):
        steps = InstructionBuilder(heuristics).build(phase_document)
        assert {s.bowelprep for s in steps} == {"plenvu"}
        assert {s.procedure_time for s in steps} == {"morning"}
        assert {s.split for s in steps} == {False}

    def test_coverage_adds_diet_step(self, phase_document, heuristics):
        steps = InstructionBuilder(heuristics).build(phase_document)
        diet = _find(steps, offset=-2, category="diet")
        assert [(d.message, d.time) for d in diet] == [("Please start the low residue diet", 8.0)]

    def test_empty_document_gets_coverage_only(self, heuristics):
        steps = InstructionBuilder(heuristics).build("")
        assert [(s.offset, s.category) for s in steps] == [(-7, "medication"), (-2, "diet"), (0, "procedure")]
        assert [s.order for s in steps] == [1, 2, 3]

    def test_untimed_clause_skipped(self, heuristics):
        steps = InstructionBuilder(heuristics).build("DAY BEFORE\nAt home rest well.\nDAY OF\nnothing")
        assert not _find(steps, offset=-1)

    def test_reference_match_pins_offset(self, heuristics):
        text = "DAY BEFORE\nBy 5pm a reminder to purchase your kit from the pharmacy."
        steps = InstructionBuilder(heuristics).build(text)
        reminder = [s for s in steps if "reminder to purchase" in s.message]
        assert [(r.offset, r.category, r.time) for r in reminder] == [(-3, "bowelprep", 17.0)]

    def test_day_of_drink_is_bowelprep(self, heuristics):
        steps = InstructionBuilder(heuristics).build("DAY OF\nStop drinking 2 hours before you arrive.")
        assert _find(steps, offset=0, category="bowelprep")

    def test_custom_templates(self):
        config = HeuristicsConfig(phase_templates={"seven_days": [], "three_days": []})
        steps = InstructionBuilder(config).build("SEVEN DAYS\nStop iron\nTHREE DAYS\nLow fibre")
        # Only coverage steps remain
        assert len(steps) == 3


class TestSectionBuild:
    def test_paragraph_document(self, paragraph_document, heuristics):
        sections = split_into_sections(paragraph_document)
        steps = InstructionBuilder(heuristics).build_from_sections(sections, paragraph_document)

        by_message = {s.message: s for s in steps}
        stop = by_message[
            "To prepare for your procedure cease taking any iron supplements or antidiarrheals from today."
        ]
        assert (stop.offset, stop.category) == (-5, "medication")

        buy = by_message["3 days before the procedure buy your MoviPrep sachets."]
        assert (buy.offset, buy.category, buy.time) == (-3, "bowelprep", None)

        dose = by_message["Tomorrow at 6pm dissolve sachet A and B in water and drink the solution."]
        assert (dose.offset, dose.category, dose.time) == (-1, "bowelprep", 18.0)

        arrive = by_message["Today arrive at the hospital at 7:30am."]
        assert (arrive.offset, arrive.category, arrive.time) == (0, "procedure", 7.5)

    def test_document_flags(self, paragraph_document, heuristics):
        sections = split_into_sections(paragraph_document)
        steps = InstructionBuilder(heuristics).build_from_sections(sections, paragraph_document)
        assert {s.bowelprep for s in steps} == {"moviprep"}
        assert {s.split for s in steps} == {True}

    def test_unmatched_offset_defaults_to_zero(self, heuristics):
        steps = InstructionBuilder(heuristics).build_from_sections(["Bring your Medicare card"], "")
        assert steps[0].offset == 0
        assert steps[0].category == "procedure"

    def test_short_sections_dropped(self, heuristics):
        steps = InstructionBuilder(heuristics).build_from_sections(["Ok.", "Drink plenty of water"], "")
        assert "Ok." not in [s.message for s in steps]
        assert steps[0].message == "Drink plenty of water"

    @pytest.mark.parametrize("sections", [[], ["   "]])
    def test_coverage_without_candidates(self, sections, heuristics):
        steps = InstructionBuilder(heuristics).build_from_sections(sections, "")
        assert {s.offset for s in steps} == {-7, -2, 0}
