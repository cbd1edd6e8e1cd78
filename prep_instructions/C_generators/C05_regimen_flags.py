# prep_instructions/C_generators/C05_regimen_flags.py
"""
Document-level regimen flags: split dosing and procedure time of day.

Both are decided once per document and copied onto every instruction.
"""

from __future__ import annotations

from typing import Dict, Optional

from A_core.A00_logging import get_logger, log_and_default
from A_core.A01_instruction_models import DEFAULT_PROCEDURE_TIME, ProcedureTime
from A_core.A03_heuristics_config import HeuristicsConfig, get_default_heuristics_config

logger = get_logger(__name__)


@log_and_default(False)
def detect_split(text: str) -> bool:
    """True when the document describes a split-dose regimen."""
    return "split" in (text or "").lower()


def score_procedure_time(text: str, config: Optional[HeuristicsConfig] = None) -> Dict[str, int]:
    """Keyword hits for each procedure time slot."""
    cfg = config or get_default_heuristics_config()
    lowered = (text or "").lower()
    return {
        slot: sum(1 for keyword in keywords if keyword and keyword in lowered)
        for slot, keywords in cfg.procedure_time_keywords.items()
    }


@log_and_default(DEFAULT_PROCEDURE_TIME)
def detect_procedure_time(text: str, config: Optional[HeuristicsConfig] = None) -> str:
    """
    Morning or afternoon procedure.

    Afternoon is chosen only when its keyword score is strictly higher;
    ties and documents with no time keywords are morning.
    """
    scores = score_procedure_time(text, config)
    morning = scores.get(ProcedureTime.MORNING.value, 0)
    afternoon = scores.get(ProcedureTime.AFTERNOON.value, 0)
    if afternoon > morning:
        return ProcedureTime.AFTERNOON.value
    return DEFAULT_PROCEDURE_TIME
