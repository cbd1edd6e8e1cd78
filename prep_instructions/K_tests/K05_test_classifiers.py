# prep_instructions/K_tests/K05_test_classifiers.py
"""Tests for category, bowel prep and regimen flag classifiers."""
import pytest

from A_core.A03_heuristics_config import HeuristicsConfig
from C_generators.C01_category_classifier import classify_category, score_categories
from C_generators.C02_bowel_prep_detector import detect_bowel_prep
from C_generators.C05_regimen_flags import detect_procedure_time, detect_split, score_procedure_time


class TestCategoryClassifier:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Stop taking iron tablets and aspirin", "medication"),
            ("Dissolve the sachet to make the solution", "bowelprep"),
            ("Only clear liquids, no solids or food", "diet"),
            ("Arrive at the hospital for your colonoscopy", "procedure"),
        ],
    )
    def test_categories(self, text, expected, heuristics):
        assert classify_category(text, heuristics) == expected

    def test_no_keywords_defaults_to_procedure(self, heuristics):
        assert classify_category("Bring your Medicare card", heuristics) == "procedure"
        assert classify_category("", heuristics) == "procedure"

    def test_tie_goes_to_earlier_category(self, heuristics):
        # one medication keyword (iron), one diet keyword (water)
        scores = score_categories("iron water", heuristics)
        assert scores["medication"] == scores["diet"] == 1
        assert classify_category("iron water", heuristics) == "medication"

    def test_distinct_keywords_counted_once(self, heuristics):
        scores = score_categories("water water water", heuristics)
        assert scores["diet"] == 1

    def test_multiword_keyword_across_punctuation(self, heuristics):
        assert score_categories("Clear-liquids only", heuristics)["diet"] == 1

    def test_injected_tokenizer(self, heuristics):
        calls = []

        def tokenizer(text):
            calls.append(text)
            return text.lower().split()

        assert classify_category("pills", heuristics, tokenizer=tokenizer) == "medication"
        assert calls

    def test_failure_returns_default(self, heuristics):
        def broken(text):
            raise RuntimeError("tokenizer down")

        assert classify_category("iron tablets", heuristics, tokenizer=broken) == "procedure"


class TestBowelPrepDetector:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Your PLENVU kit", "plenvu"),
            ("Glyco-Prep Orange sachets", "glycoprepo"),
            ("the Glyco Prep Kit contains", "glycoprepkit"),
            ("Movi Prep split dose", "moviprep"),
            ("Pico-Lax instructions", "picolax"),
            ("PicoPrep two sachets", "picoprep2"),
            ("Picosalax regimen", "picosalax"),
        ],
    )
    def test_aliases(self, text, expected, heuristics):
        assert detect_bowel_prep(text, heuristics) == expected

    def test_default(self, heuristics):
        assert detect_bowel_prep("Bowel preparation leaflet", heuristics) == "plenvu"
        assert detect_bowel_prep(None, heuristics) == "plenvu"

    def test_declaration_order_wins(self, heuristics):
        assert detect_bowel_prep("moviprep or plenvu", heuristics) == "plenvu"

    def test_custom_alias_table(self):
        config = HeuristicsConfig(bowel_prep_aliases={"picosalax": ["sodium picosulfate"]})
        assert detect_bowel_prep("Sodium Picosulfate 10mg", config) == "picosalax"


class TestRegimenFlags:
    def test_split(self):
        assert detect_split("This is a SPLIT dose preparation") is True
        assert detect_split("Single dose") is False
        assert detect_split(None) is False

    def test_procedure_time_morning_default(self, heuristics):
        assert detect_procedure_time("Your procedure is booked", heuristics) == "morning"

    def test_afternoon_when_strictly_higher(self, heuristics):
        assert detect_procedure_time("Afternoon procedure at the clinic", heuristics) == "afternoon"

    def test_tie_is_morning(self, heuristics):
        text = "Morning list patients drink at 5am; afternoon list patients at 7am"
        scores = score_procedure_time(text, heuristics)
        assert scores["morning"] == scores["afternoon"]
        assert detect_procedure_time(text, heuristics) == "morning"
