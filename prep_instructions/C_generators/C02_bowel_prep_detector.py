# prep_instructions/C_generators/C02_bowel_prep_detector.py
"""
Bowel-prep product detection.

Walks the alias table in declaration order and returns the canonical id
of the first product with an alias present in the lower-cased text.
Documents that name no known product default to ``plenvu``.
"""

from __future__ import annotations

from typing import Optional

from A_core.A00_logging import get_logger, log_and_default
from A_core.A01_instruction_models import DEFAULT_BOWEL_PREP
from A_core.A03_heuristics_config import HeuristicsConfig, get_default_heuristics_config

logger = get_logger(__name__)


@log_and_default(DEFAULT_BOWEL_PREP)
def detect_bowel_prep(text: str, config: Optional[HeuristicsConfig] = None) -> str:
    """
    Canonical bowel-prep id for a document.

    >>> detect_bowel_prep("Your MoviPrep kit contains two sachets")
    'moviprep'
    """
    cfg = config or get_default_heuristics_config()
    lowered = (text or "").lower()

    for prep, aliases in cfg.bowel_prep_aliases.items():
        if any(alias and alias in lowered for alias in aliases):
            logger.debug(f"Bowel prep detected: {prep}")
            return prep
    return DEFAULT_BOWEL_PREP
