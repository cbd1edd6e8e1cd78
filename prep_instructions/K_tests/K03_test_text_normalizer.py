# prep_instructions/K_tests/K03_test_text_normalizer.py
"""Tests for raw-text normalization."""
import pytest

from A_core.A03_heuristics_config import HeuristicsConfig
from B_parsing.B02_text_normalizer import clean_text, normalize_text


class TestNormalizeText:
    def test_empty_and_none(self, heuristics):
        assert normalize_text(None, heuristics) == ""
        assert normalize_text("", heuristics) == ""

    def test_bullets_become_list_markers(self, heuristics):
        assert normalize_text("• Drink water\n●  Rest", heuristics) == "- Drink water\n- Rest"

    def test_star_marker_rewritten(self, heuristics):
        assert normalize_text("*Avoid seeds", heuristics) == "- Avoid seeds"

    def test_dashes_to_hyphen(self, heuristics):
        assert normalize_text("6:00–8:00am", heuristics) == "6:00-8:00am"

    def test_line_endings(self, heuristics):
        assert normalize_text("a line\r\nnext\rlast", heuristics) == "a line\nnext\nlast"

    def test_non_ascii_removed(self, heuristics):
        assert normalize_text("Café résumé", heuristics) == "Caf r sum"

    def test_ocr_numbers(self, heuristics):
        assert normalize_text("Take two sachets, One at 6pm", heuristics) == "Take 2 sachets, 1 at 6pm"

    def test_ocr_whole_words_only(self, heuristics):
        assert normalize_text("Call the phone line someone gave you", heuristics) == (
            "Call the phone line someone gave you"
        )

    def test_page_numbers_removed(self, heuristics):
        assert normalize_text("Diet advice Page 2 of 4\nMore", heuristics) == "Diet advice\nMore"

    def test_header_footer_markers(self, heuristics):
        text = "Header: Footer: City Hospital\nfooter: Ward 3"
        assert normalize_text(text, heuristics) == "City Hospital\nWard 3"

    def test_whitespace_and_blank_runs(self, heuristics):
        text = "  first   line  \n\n\n\n   second\t\tline\n\n"
        assert normalize_text(text, heuristics) == "first line\n\nsecond line"

    def test_custom_ocr_table(self):
        config = HeuristicsConfig(ocr_substitutions={"six": "6"})
        assert normalize_text("six days, two sachets", config) == "6 days, two sachets"

    @pytest.mark.parametrize(
        "raw",
        [
            "• Drink\r\n\r\n\r\nPage 1 of 2\n  - - item",
            "Header:  -  one\n\n\nfooter:*two",
            "SEVEN DAYS\n•\tStop  iron\n\n\n\nTHREE DAYS ● diet",
        ],
    )
    def test_idempotent(self, raw, heuristics):
        once = normalize_text(raw, heuristics)
        assert normalize_text(once, heuristics) == once


class TestCleanText:
    def test_single_line(self):
        assert clean_text("  At 6pm\n drink   the • solution. ") == "At 6pm drink the - solution."

    def test_empty(self):
        assert clean_text(None) == ""
