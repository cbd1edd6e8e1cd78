# prep_instructions/E_normalization/E02_post_processor.py
"""
Final ordering and completeness pass over built instructions.

Steps:
    1. Sort by offset descending, ties by original order ascending.
    2. Renumber ``order`` to 1..N.
    3. For each required step (medication by day -5, diet by day -2,
       procedure by day 0) with no satisfying instruction, append a
       default step numbered N+1, N+2, ... after the sorted block.

Injected steps copy bowel prep, split flag and procedure time from the
first instruction, and are not re-sorted. Running the pass on a list
that already satisfies every requirement only renumbers it.

Example:
    >>> result = post_process([])
    >>> [(i.order, i.category, i.offset) for i in result]
    [(1, 'medication', -5), (2, 'diet', -2), (3, 'procedure', 0)]
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from A_core.A00_logging import get_logger
from A_core.A01_instruction_models import (
    DEFAULT_BOWEL_PREP,
    DEFAULT_PROCEDURE_TIME,
    Instruction,
)
from A_core.A03_heuristics_config import HeuristicsConfig, RequiredStep, get_default_heuristics_config

logger = get_logger(__name__)


def sort_instructions(instructions: Sequence[Instruction]) -> List[Instruction]:
    """Offset descending (procedure day before earlier days), then order ascending."""
    return sorted(instructions, key=lambda inst: (-inst.offset, inst.order))


def _satisfies(inst: Instruction, required: RequiredStep) -> bool:
    return inst.category == required.category and inst.offset <= required.max_offset


def post_process(
    instructions: Sequence[Instruction],
    config: Optional[HeuristicsConfig] = None,
) -> List[Instruction]:
    cfg = config or get_default_heuristics_config()

    result = [
        inst.model_copy(update={"order": idx})
        for idx, inst in enumerate(sort_instructions(instructions), start=1)
    ]

    first = result[0] if result else None
    bowel_prep = first.bowelprep if first else DEFAULT_BOWEL_PREP
    split = first.split if first else False
    procedure_time = first.procedure_time if first else DEFAULT_PROCEDURE_TIME

    for required in cfg.required_steps:
        if any(_satisfies(inst, required) for inst in result):
            continue
        logger.debug(f"Injecting required {required.category} step at offset {required.max_offset}")
        result.append(
            Instruction(
                bowelprep=bowel_prep,
                order=len(result) + 1,
                category=required.category,
                message=required.message,
                offset=required.max_offset,
                time=required.time,
                split=split,
                procedure_time=procedure_time,
            )
        )

    return result
