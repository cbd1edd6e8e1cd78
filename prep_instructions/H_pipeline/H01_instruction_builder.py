# prep_instructions/H_pipeline/H01_instruction_builder.py
"""
Instruction builder: normalized document text -> candidate instructions.

Two build modes, matching the two segmentation strategies:

    build(text)
        Phase strategy. The document is cut into its timeline phases
        (SEVEN DAYS / THREE DAYS / DAY BEFORE / DAY OF). Each present
        phase contributes its configured template steps; the day-before
        phase contributes every "At/From/By <time> ..." clause that has a
        readable time, and the day-of phase every sentence mentioning
        "<N> hours".

    build_from_sections(sections, document_text)
        Blank-line strategy. Every paragraph is one candidate whose
        offset, category and time come from the classifiers.

In both modes bowel prep, split flag and procedure time are detected once
for the whole document, messages shorter than ``min_message_length`` are
dropped, reference phrasing pins offset/category, and the coverage rules
add the minimum steps (day -7, diet on day -2, procedure day) when the
document did not provide them.

Example:
    >>> builder = InstructionBuilder()
    >>> steps = builder.build(normalized_text)
    >>> sorted({s.offset for s in steps})[0]
    -7
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from A_core.A00_logging import get_logger
from A_core.A01_instruction_models import Category, Instruction
from A_core.A02_interfaces import Tokenizer
from A_core.A03_heuristics_config import PHASE_NAMES, HeuristicsConfig, get_default_heuristics_config
from B_parsing.B02_text_normalizer import clean_text
from B_parsing.B03_section_segmenter import PhaseSections, segment_by_phase
from C_generators.C01_category_classifier import classify_category
from C_generators.C02_bowel_prep_detector import detect_bowel_prep
from C_generators.C03_offset_extractor import extract_offset
from C_generators.C04_time_extractor import extract_time
from C_generators.C05_regimen_flags import detect_procedure_time, detect_split
from E_normalization.E01_reference_matcher import apply_reference, match_reference
from Z_utils.Z01_text_helpers import word_tokenize

logger = get_logger(__name__)

# "At 6pm start drinking ...", "From 7:00 am clear fluids only ..."
_TIMED_CLAUSE_RE = re.compile(r"\b(?:At|From|By)\s+(\d{1,2}(?::\d{2})?\s*(?:am|pm)?)[^.]+\.", re.IGNORECASE)
# "Stop drinking 2 hours before your procedure."
_HOURS_SENTENCE_RE = re.compile(r"[^.\n]*\b\d+\s*hours?\b[^.]*\.", re.IGNORECASE)


@dataclass(frozen=True)
class DocumentFlags:
    """Document-level classification copied onto every instruction."""

    bowel_prep: str
    split: bool
    procedure_time: str


class InstructionBuilder:
    def __init__(
        self,
        config: Optional[HeuristicsConfig] = None,
        tokenizer: Tokenizer = word_tokenize,
    ) -> None:
        self.config = config or get_default_heuristics_config()
        self.tokenizer = tokenizer

    # =========================================================================
    # Document-level classification
    # =========================================================================

    def classify_document(self, text: str) -> DocumentFlags:
        flags = DocumentFlags(
            bowel_prep=detect_bowel_prep(text, self.config),
            split=detect_split(text),
            procedure_time=detect_procedure_time(text, self.config),
        )
        logger.debug(
            f"Document flags: prep={flags.bowel_prep} split={flags.split} "
            f"procedure_time={flags.procedure_time}"
        )
        return flags

    # =========================================================================
    # Phase strategy
    # =========================================================================

    def build(self, text: str, sections: Optional[PhaseSections] = None) -> List[Instruction]:
        """Candidate instructions from a normalized document using phase sections."""
        flags = self.classify_document(text)
        phases = sections if sections is not None else segment_by_phase(text, self.config)
        instructions: List[Instruction] = []

        for phase in PHASE_NAMES:
            if not phases.get(phase):
                continue
            for template in self.config.phase_templates.get(phase, []):
                self._add(instructions, flags, template.message, template.offset, template.time, template.category)

        if phases.day_before:
            for match in _TIMED_CLAUSE_RE.finditer(phases.day_before):
                clause = match.group(0)
                time = extract_time(clause)
                if time is None:
                    continue
                category = Category.BOWELPREP.value if self._mentions_drink(clause) else Category.DIET.value
                self._add(instructions, flags, clause, -1, time, category)

        if phases.day_of:
            for match in _HOURS_SENTENCE_RE.finditer(phases.day_of):
                sentence = match.group(0)
                time = extract_time(sentence)
                if time is None:
                    time = self.config.day_of_default_time
                category = Category.BOWELPREP.value if self._mentions_drink(sentence) else Category.PROCEDURE.value
                self._add(instructions, flags, sentence, 0, time, category)

        self._apply_references(instructions)
        self.ensure_coverage(instructions, flags)
        return instructions

    # =========================================================================
    # Blank-line strategy
    # =========================================================================

    def build_from_sections(self, sections: Sequence[str], document_text: str) -> List[Instruction]:
        """One candidate per paragraph; offset/category from references or classifiers."""
        flags = self.classify_document(document_text)
        instructions: List[Instruction] = []

        for section in sections:
            ref = match_reference(section, self.config)
            if ref is not None:
                offset, category = ref.offset, ref.category
            else:
                offset = extract_offset(section)
                if offset is None:
                    offset = 0
                category = classify_category(section, self.config, self.tokenizer)
            self._add(instructions, flags, section, offset, extract_time(section), category)

        self.ensure_coverage(instructions, flags)
        return instructions

    # =========================================================================
    # Shared steps
    # =========================================================================

    def ensure_coverage(self, instructions: List[Instruction], flags: DocumentFlags) -> None:
        """Append a step for every coverage rule the list does not satisfy."""
        for rule in self.config.coverage_rules:
            covered = any(
                inst.offset == rule.offset and (not rule.match_category or inst.category == rule.category)
                for inst in instructions
            )
            if not covered:
                logger.debug(f"Coverage: adding {rule.category} step at offset {rule.offset}")
                self._add(instructions, flags, rule.message, rule.offset, rule.time, rule.category)

    def _apply_references(self, instructions: List[Instruction]) -> None:
        for idx, inst in enumerate(instructions):
            instructions[idx] = apply_reference(inst, self.config)

    def _add(
        self,
        instructions: List[Instruction],
        flags: DocumentFlags,
        message: str,
        offset: int,
        time: Optional[float],
        category: str,
    ) -> None:
        message = clean_text(message)
        if len(message) < self.config.min_message_length:
            return
        instructions.append(
            Instruction(
                bowelprep=flags.bowel_prep,
                order=len(instructions) + 1,
                category=category,
                message=message,
                offset=offset,
                time=time,
                split=flags.split,
                procedure_time=flags.procedure_time,
            )
        )

    def _mentions_drink(self, text: str) -> bool:
        return self.config.drink_keyword in text.lower()
