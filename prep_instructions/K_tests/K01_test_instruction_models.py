# prep_instructions/K_tests/K01_test_instruction_models.py
"""Tests for the Instruction model and its field validators."""
import pytest

from A_core.A01_instruction_models import (
    BOWEL_PREP_VALUES,
    Instruction,
    clean_message,
    validate_bowel_prep,
    validate_category,
    validate_offset,
    validate_order,
    validate_procedure_time,
    validate_split,
    validate_time,
)


class TestValidators:
    """Lenient coercion: malformed values default, never raise."""

    def test_category_lowercased(self):
        assert validate_category("Diet") == "diet"

    def test_category_unknown(self):
        assert validate_category("surgery") is None
        assert validate_category(None) is None

    @pytest.mark.parametrize("value,expected", [(-12, -7), (9, 7), ("-3", -3), (2.7, 2), ("abc", None), (None, None)])
    def test_offset(self, value, expected):
        assert validate_offset(value) == expected

    @pytest.mark.parametrize("value,expected", [(25, 23.99), (-1, 0.0), ("18.5", 18.5), ("", None), ("noon", None)])
    def test_time(self, value, expected):
        assert validate_time(value) == expected

    def test_procedure_time(self):
        assert validate_procedure_time("AFTERNOON") == "afternoon"
        assert validate_procedure_time("evening") == "morning"
        assert validate_procedure_time(None) == "morning"

    def test_bowel_prep(self):
        assert validate_bowel_prep("MoviPrep") == "moviprep"
        assert validate_bowel_prep("unknown") == "plenvu"
        assert validate_bowel_prep("") == "plenvu"

    def test_order(self):
        assert validate_order(3) == 3
        assert validate_order("4") == 4
        assert validate_order(0) == 1
        assert validate_order(2.5) == 1
        assert validate_order("x") == 1

    def test_split_strings(self):
        assert validate_split("true") is True
        assert validate_split("False") is False
        assert validate_split(True) is True
        assert validate_split(0) is False

    def test_clean_message(self):
        assert clean_message("  Take the   first\n dose  ") == "Take the first dose"
        assert clean_message(None) == ""


class TestInstruction:
    def test_defaults(self):
        inst = Instruction()
        assert inst.bowelprep == "plenvu"
        assert inst.order == 1
        assert inst.category == "procedure"
        assert inst.offset == 0
        assert inst.time is None
        assert inst.split is False
        assert inst.procedure_time == "morning"

    def test_clamps_on_construction(self):
        inst = Instruction(offset=-30, time=30, category="MEDICATION", bowelprep="nope")
        assert inst.offset == -7
        assert inst.time == 23.99
        assert inst.category == "medication"
        assert inst.bowelprep == "plenvu"

    def test_assignment_revalidated(self):
        inst = Instruction()
        inst.offset = 12
        inst.category = "other"
        assert inst.offset == 7
        assert inst.category == "procedure"

    def test_unparseable_offset_defaults_to_zero(self):
        assert Instruction(offset="soon").offset == 0

    def test_extra_fields_ignored(self):
        inst = Instruction(message="Drink water", originalText="raw")
        assert inst.message == "Drink water"
        assert not hasattr(inst, "originalText")

    def test_known_preps_accepted(self):
        for prep in BOWEL_PREP_VALUES:
            assert Instruction(bowelprep=prep).bowelprep == prep
