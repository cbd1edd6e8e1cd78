# prep_instructions/A_core/A03_heuristics_config.py
"""
Centralized heuristics configuration for instruction extraction.

All matcher tables used by the classifiers, the instruction builder and
the post-processor live here as data, not as branches in code. Values are
loaded from the ``heuristics`` section of G_config/config.yaml with the
hardcoded defaults below as fallback, so keyword lists and reference
phrasing can be tuned (or localized) without touching pipeline logic.

Key Components:
    - HeuristicsConfig: every table, validated on construction
    - StepTemplate: fixed instruction emitted for a document phase
    - ReferenceStep: canonical phrasing that pins offset/category
    - CoverageRule: builder-level guarantee for one (offset, category) slot
    - RequiredStep: post-processor guarantee (category at or before an offset)
    - get_default_heuristics_config: cached config from the default path

Example:
    >>> from A_core.A03_heuristics_config import get_default_heuristics_config
    >>> config = get_default_heuristics_config()
    >>> list(config.category_keywords)
    ['medication', 'bowelprep', 'diet', 'procedure']

Dependencies:
    - PyYAML: config.yaml parsing
    - A_core.A01_instruction_models: the closed value sets tables are checked against
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from A_core.A00_logging import get_logger
from A_core.A01_instruction_models import (
    BOWEL_PREP_VALUES,
    CATEGORY_VALUES,
    PROCEDURE_TIME_VALUES,
)
from A_core.A04_exceptions import ConfigurationError

logger = get_logger(__name__)

PHASE_NAMES = ("seven_days", "three_days", "day_before", "day_of")

MEDICATION_STOP_MESSAGE = (
    "To prepare for your procedure cease taking any iron supplements or antidiarrheals from today."
)


@dataclass(frozen=True)
class StepTemplate:
    """Instruction emitted verbatim when its phase section is present."""

    message: str
    offset: int
    category: str
    time: Optional[float] = None


@dataclass(frozen=True)
class ReferenceStep:
    """Canonical message; any instruction containing it takes its offset/category."""

    order: int
    category: str
    offset: int
    message: str


@dataclass(frozen=True)
class CoverageRule:
    """
    Slot the builder must fill.

    The slot is satisfied by any instruction at ``offset`` (and, when
    ``match_category`` is set, of ``category``); otherwise a step with
    ``message``/``time``/``category`` is synthesized.
    """

    offset: int
    category: str
    message: str
    time: Optional[float] = None
    match_category: bool = False


@dataclass(frozen=True)
class RequiredStep:
    """Post-processor guarantee: some ``category`` instruction with offset <= ``max_offset``."""

    category: str
    max_offset: int
    message: str
    time: Optional[float] = None


def _default_category_keywords() -> Dict[str, List[str]]:
    return {
        "medication": [
            "medication", "iron", "supplements", "antidiarrheals", "blood",
            "tablets", "aspirin", "warfarin", "prescriptions", "medicines", "pills",
        ],
        "bowelprep": [
            "plenvu", "glycoprep", "moviprep", "picolax", "picoprep", "prepkit",
            "dose", "sachet", "solution", "mixture", "dissolve", "preparation",
        ],
        "diet": [
            "diet", "food", "eat", "drink", "fluids", "breakfast", "lunch", "dinner",
            "meals", "clear liquids", "residue", "fasting", "solids", "water",
        ],
        "procedure": [
            "procedure", "colonoscopy", "hospital", "appointment", "admission",
            "examination", "arrive", "clinic", "endoscopy",
        ],
    }


def _default_bowel_prep_aliases() -> Dict[str, List[str]]:
    # Kit aliases come before the plain product so "glyco prep kit" is not
    # swallowed by the shorter "glyco prep" match.
    return {
        "plenvu": ["plenvu"],
        "glycoprepkit": ["glycoprepkit", "glycoprep kit", "glyco prep kit"],
        "glycoprepo": ["glycoprep", "glyco-prep", "glyco prep"],
        "moviprep": ["moviprep", "movi-prep", "movi prep"],
        "picolax": ["picolax", "pico-lax", "pico lax"],
        "picoprep2": ["picoprep", "pico-prep", "pico prep"],
        "picosalax": ["picosalax", "pico salax"],
    }


def _default_procedure_time_keywords() -> Dict[str, List[str]]:
    return {
        "morning": [
            "morning procedure", "morning appointment", "am procedure", "am appointment",
            "morning list", "morning",
        ],
        "afternoon": [
            "afternoon procedure", "afternoon appointment", "pm procedure", "pm appointment",
            "afternoon list", "afternoon",
        ],
    }


def _default_ocr_substitutions() -> Dict[str, str]:
    return {"one": "1", "two": "2", "three": "3", "four": "4", "five": "5"}


def _default_phase_markers() -> Dict[str, str]:
    return {
        "seven_days": "SEVEN DAYS",
        "three_days": "THREE DAYS",
        "day_before": "DAY BEFORE",
        "day_of": "DAY OF",
    }


def _default_phase_templates() -> Dict[str, List[StepTemplate]]:
    return {
        "seven_days": [
            StepTemplate("Stop taking iron supplements", -7, "medication", 9),
        ],
        "three_days": [
            StepTemplate("Stop taking any drugs that may make you constipated", -3, "medication", 9),
            StepTemplate("Begin eating only a low residue diet", -3, "diet", 10),
        ],
        "day_before": [],
        "day_of": [],
    }


def _default_reference_steps() -> List[ReferenceStep]:
    return [
        ReferenceStep(1, "medication", -5, MEDICATION_STOP_MESSAGE),
        ReferenceStep(2, "bowelprep", -3, "A reminder to purchase"),
        ReferenceStep(3, "diet", -2, "Please start the low residue diet"),
        ReferenceStep(4, "diet", -1, "You may have a light breakfast"),
    ]


def _default_coverage_rules() -> List[CoverageRule]:
    return [
        CoverageRule(-7, "medication", "Stop taking iron supplements", 9, match_category=False),
        CoverageRule(-2, "diet", "Please start the low residue diet", 8, match_category=True),
        CoverageRule(
            0, "procedure", "Today is your procedure. Please follow all instructions carefully.", 7,
            match_category=False,
        ),
    ]


def _default_required_steps() -> List[RequiredStep]:
    return [
        RequiredStep("medication", -5, MEDICATION_STOP_MESSAGE, 9),
        RequiredStep(
            "diet", -2, "Please start the low residue diet and only drink recommended clear fluids.", 9,
        ),
        RequiredStep("procedure", 0, "Today is your procedure. Please follow all instructions carefully.", 7),
    ]


@dataclass
class HeuristicsConfig:
    """
    All configurable matcher tables for the extraction heuristics.

    Dict tables are ordered: declaration order decides classifier ties
    (category_keywords) and first-match precedence (bowel_prep_aliases).
    """

    category_keywords: Dict[str, List[str]] = field(default_factory=_default_category_keywords)
    bowel_prep_aliases: Dict[str, List[str]] = field(default_factory=_default_bowel_prep_aliases)
    procedure_time_keywords: Dict[str, List[str]] = field(default_factory=_default_procedure_time_keywords)
    ocr_substitutions: Dict[str, str] = field(default_factory=_default_ocr_substitutions)

    phase_markers: Dict[str, str] = field(default_factory=_default_phase_markers)
    phase_terminators: List[str] = field(default_factory=lambda: ["SPECIAL"])
    phase_templates: Dict[str, List[StepTemplate]] = field(default_factory=_default_phase_templates)

    reference_steps: List[ReferenceStep] = field(default_factory=_default_reference_steps)
    coverage_rules: List[CoverageRule] = field(default_factory=_default_coverage_rules)
    required_steps: List[RequiredStep] = field(default_factory=_default_required_steps)

    # Clause handling inside the day-before / day-of sections
    drink_keyword: str = "drink"
    day_of_default_time: float = 7.0
    min_message_length: int = 5

    def __post_init__(self) -> None:
        """Reject tables that reference values outside the closed sets."""
        for category in self.category_keywords:
            if category not in CATEGORY_VALUES:
                raise ConfigurationError(
                    "Unknown category in category_keywords",
                    config_key="heuristics.category_keywords",
                    actual_value=category,
                )
        for prep in self.bowel_prep_aliases:
            if prep not in BOWEL_PREP_VALUES:
                raise ConfigurationError(
                    "Unknown bowel prep in bowel_prep_aliases",
                    config_key="heuristics.bowel_prep_aliases",
                    actual_value=prep,
                )
        for slot in self.procedure_time_keywords:
            if slot not in PROCEDURE_TIME_VALUES:
                raise ConfigurationError(
                    "Unknown procedure time in procedure_time_keywords",
                    config_key="heuristics.procedure_time_keywords",
                    actual_value=slot,
                )
        for phase in list(self.phase_markers) + list(self.phase_templates):
            if phase not in PHASE_NAMES:
                raise ConfigurationError(
                    "Unknown phase name",
                    config_key="heuristics.phase_markers",
                    actual_value=phase,
                )

        steps: List[Any] = [t for ts in self.phase_templates.values() for t in ts]
        steps += self.reference_steps + self.coverage_rules + self.required_steps
        for step in steps:
            if step.category not in CATEGORY_VALUES:
                raise ConfigurationError(
                    f"Unknown category in {type(step).__name__}",
                    config_key="heuristics",
                    actual_value=step.category,
                )

        # Matching is case-insensitive throughout
        self.category_keywords = {k: [w.lower() for w in v] for k, v in self.category_keywords.items()}
        self.bowel_prep_aliases = {k: [a.lower() for a in v] for k, v in self.bowel_prep_aliases.items()}
        self.procedure_time_keywords = {
            k: [w.lower() for w in v] for k, v in self.procedure_time_keywords.items()
        }
        self.ocr_substitutions = {k.lower(): str(v) for k, v in self.ocr_substitutions.items()}
        self.drink_keyword = self.drink_keyword.lower()

    @classmethod
    def from_dict(cls, heur: Dict[str, Any]) -> "HeuristicsConfig":
        """Build from the ``heuristics`` mapping of config.yaml; absent keys keep defaults."""
        kwargs: Dict[str, Any] = {}

        def to_table(key: str) -> Dict[str, List[str]]:
            val = heur[key]
            if not isinstance(val, dict):
                raise ConfigurationError("Expected a mapping", config_key=f"heuristics.{key}", actual_value=val)
            return {str(k): [str(w) for w in (v or [])] for k, v in val.items()}

        def to_records(key: str, record_cls: type) -> List[Any]:
            val = heur[key]
            if not isinstance(val, list):
                raise ConfigurationError("Expected a list", config_key=f"heuristics.{key}", actual_value=val)
            try:
                return [record_cls(**item) for item in val]
            except TypeError as e:
                raise ConfigurationError(
                    f"Malformed entry: {e}", config_key=f"heuristics.{key}"
                ) from e

        for key in ("category_keywords", "bowel_prep_aliases", "procedure_time_keywords"):
            if key in heur:
                kwargs[key] = to_table(key)

        if "ocr_substitutions" in heur:
            kwargs["ocr_substitutions"] = {str(k): str(v) for k, v in (heur["ocr_substitutions"] or {}).items()}
        if "phase_markers" in heur:
            kwargs["phase_markers"] = {str(k): str(v) for k, v in (heur["phase_markers"] or {}).items()}
        if "phase_terminators" in heur:
            kwargs["phase_terminators"] = [str(t) for t in (heur["phase_terminators"] or [])]

        if "phase_templates" in heur:
            templates = heur["phase_templates"] or {}
            try:
                kwargs["phase_templates"] = {
                    str(phase): [StepTemplate(**item) for item in (items or [])]
                    for phase, items in templates.items()
                }
            except TypeError as e:
                raise ConfigurationError(
                    f"Malformed entry: {e}", config_key="heuristics.phase_templates"
                ) from e

        if "reference_steps" in heur:
            kwargs["reference_steps"] = to_records("reference_steps", ReferenceStep)
        if "coverage_rules" in heur:
            kwargs["coverage_rules"] = to_records("coverage_rules", CoverageRule)
        if "required_steps" in heur:
            kwargs["required_steps"] = to_records("required_steps", RequiredStep)

        if "drink_keyword" in heur:
            kwargs["drink_keyword"] = str(heur["drink_keyword"])
        if "day_of_default_time" in heur:
            kwargs["day_of_default_time"] = float(heur["day_of_default_time"])
        if "min_message_length" in heur:
            kwargs["min_message_length"] = int(heur["min_message_length"])

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "HeuristicsConfig":
        """
        Load from a config.yaml file.

        A missing or unreadable file falls back to the defaults with a
        warning; a readable file with invalid values raises ConfigurationError.
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning(f"Config file not found: {config_path}, using default heuristics")
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}, using default heuristics")
            return cls()

        if not isinstance(data, dict):
            raise ConfigurationError("config.yaml must contain a mapping", actual_value=type(data).__name__)
        heur = data.get("heuristics") or {}
        if not isinstance(heur, dict):
            raise ConfigurationError("heuristics section must be a mapping", config_key="heuristics")
        return cls.from_dict(heur)

    def summary(self) -> Dict[str, int]:
        """Table sizes, for logging which config a run used."""
        return {
            "category_keywords": sum(len(v) for v in self.category_keywords.values()),
            "bowel_prep_aliases": sum(len(v) for v in self.bowel_prep_aliases.values()),
            "reference_steps": len(self.reference_steps),
            "coverage_rules": len(self.coverage_rules),
            "required_steps": len(self.required_steps),
        }


# Set PREP_CONFIG_PATH for a custom config location
DEFAULT_CONFIG_PATH = os.getenv(
    "PREP_CONFIG_PATH",
    str(Path(__file__).resolve().parents[1] / "G_config" / "config.yaml"),
)


@functools.lru_cache(maxsize=1)
def get_default_heuristics_config() -> HeuristicsConfig:
    """Heuristics from the default config path, loaded once and shared read-only."""
    return HeuristicsConfig.from_yaml(DEFAULT_CONFIG_PATH)
