# prep_instructions/K_tests/K06_test_offset_time_extractors.py
"""Tests for day-offset and time-of-day extraction."""
import pytest

from C_generators.C03_offset_extractor import extract_offset
from C_generators.C04_time_extractor import extract_time, extract_time_range


class TestExtractOffset:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("3 days before the procedure", -3),
            ("2 days ahead of the colonoscopy", -2),
            ("5 days before", -5),
            ("Day 2 of recovery", 2),
            ("Today is your procedure", 0),
            ("On the morning of procedure arrive early", 0),
            ("tomorrow", -1),
            ("yesterday you started", 1),
            ("Resume iron 2 days after", 2),
            ("seven days before your test", -7),
            ("A week before, stop iron", -7),
        ],
    )
    def test_patterns(self, text, expected):
        assert extract_offset(text) == expected

    def test_numeric_pattern_beats_phrase(self):
        assert extract_offset("3 days before, not one day before") == -3

    def test_no_match(self):
        assert extract_offset("Bring your Medicare card") is None
        assert extract_offset("") is None


class TestExtractTime:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("6:00-8:00am", 6.0),
            ("6pm", 18.0),
            ("18:00", 18.0),
            ("At 6:30 pm drink", 18.5),
            ("12am", 0.0),
            ("12pm", 12.0),
            ("12:15am", 0.25),
            ("Between 6am to 8am", 6.0),
            ("from 7 - 9pm", 7.0),
            ("By 10:45", 10.75),
        ],
    )
    def test_patterns(self, text, expected):
        assert extract_time(text) == pytest.approx(expected)

    def test_range_uses_start_period_only(self):
        assert extract_time_range("6-8pm") == 6.0
        assert extract_time_range("6pm-8pm") == 18.0

    def test_no_match(self):
        assert extract_time("Nothing to eat") is None
        assert extract_time("") is None
        assert extract_time("2 hours before") is None

    def test_out_of_range_not_clamped_here(self):
        assert extract_time("30:00") == 30.0
