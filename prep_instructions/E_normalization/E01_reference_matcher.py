# prep_instructions/E_normalization/E01_reference_matcher.py
"""
Reference-step matching.

A reference step is a canonical message from the master sequence. Any
instruction whose text contains that message (case-insensitive) is
pinned to the reference offset and category, overriding whatever the
classifiers inferred. The first matching reference in configuration
order wins.
"""

from __future__ import annotations

from typing import Optional

from A_core.A00_logging import get_logger
from A_core.A01_instruction_models import Instruction
from A_core.A03_heuristics_config import HeuristicsConfig, ReferenceStep, get_default_heuristics_config
from Z_utils.Z01_text_helpers import clean_whitespace

logger = get_logger(__name__)


def match_reference(text: str, config: Optional[HeuristicsConfig] = None) -> Optional[ReferenceStep]:
    """First reference step whose message occurs in ``text``."""
    cfg = config or get_default_heuristics_config()
    haystack = clean_whitespace(text).lower()
    if not haystack:
        return None

    for ref in cfg.reference_steps:
        needle = clean_whitespace(ref.message).lower()
        if needle and needle in haystack:
            return ref
    return None


def apply_reference(instruction: Instruction, config: Optional[HeuristicsConfig] = None) -> Instruction:
    """Copy of ``instruction`` with offset/category pinned by its reference step, if any."""
    ref = match_reference(instruction.message, config)
    if ref is None:
        return instruction
    if instruction.offset != ref.offset or instruction.category != ref.category:
        logger.debug(
            f"Reference match '{ref.message[:40]}': offset {instruction.offset} -> {ref.offset}, "
            f"category {instruction.category} -> {ref.category}"
        )
    return instruction.model_copy(update={"offset": ref.offset, "category": ref.category})
