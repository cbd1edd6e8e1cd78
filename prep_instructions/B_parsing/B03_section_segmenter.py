# prep_instructions/B_parsing/B03_section_segmenter.py
"""
Section segmentation of normalized document text.

Two strategies:
    - split_into_sections: blank-line separated paragraphs
    - segment_by_phase: the four timeline phases of a prep leaflet
      (SEVEN DAYS / THREE DAYS / DAY BEFORE / DAY OF)

Phase sections keep their marker text. A section runs from its marker to
the next marker found in the document (by position), or for the last
marker to the first configured terminator after it, or to the end of the
text. Markers that do not occur yield an empty section.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from A_core.A00_logging import get_logger
from A_core.A03_heuristics_config import PHASE_NAMES, HeuristicsConfig, get_default_heuristics_config

logger = get_logger(__name__)

# Day offset each phase section describes
PHASE_OFFSETS: Dict[str, int] = {
    "seven_days": -7,
    "three_days": -3,
    "day_before": -1,
    "day_of": 0,
}


def split_into_sections(text: str) -> List[str]:
    """Group consecutive non-blank lines; blank lines close a section."""
    sections: List[str] = []
    current: List[str] = []

    for line in (text or "").split("\n"):
        stripped = line.strip()
        if stripped:
            current.append(stripped)
        elif current:
            sections.append("\n".join(current))
            current = []

    if current:
        sections.append("\n".join(current))
    return sections


@dataclass(frozen=True)
class PhaseSections:
    seven_days: str = ""
    three_days: str = ""
    day_before: str = ""
    day_of: str = ""

    def get(self, phase: str) -> str:
        if phase not in PHASE_NAMES:
            raise KeyError(phase)
        return getattr(self, phase)

    def present_phases(self) -> List[str]:
        """Phases with a non-empty section, in timeline order."""
        return [phase for phase in PHASE_NAMES if getattr(self, phase)]


def _find_markers(lowered: str, markers: Dict[str, str]) -> List[Tuple[int, str]]:
    found: List[Tuple[int, str]] = []
    for phase in PHASE_NAMES:
        marker = markers.get(phase)
        if not marker:
            continue
        pos = lowered.find(marker.lower())
        if pos >= 0:
            found.append((pos, phase))
    found.sort()
    return found


def segment_by_phase(text: str, config: Optional[HeuristicsConfig] = None) -> PhaseSections:
    """
    Split a document into its timeline phases.

    Marker matching is case-insensitive and uses the first occurrence of
    each marker.
    """
    cfg = config or get_default_heuristics_config()
    text = text or ""
    lowered = text.lower()

    found = _find_markers(lowered, cfg.phase_markers)
    sections: Dict[str, str] = {}

    for idx, (start, phase) in enumerate(found):
        if idx + 1 < len(found):
            end = found[idx + 1][0]
        else:
            end = len(text)
            marker_end = start + len(cfg.phase_markers[phase])
            for terminator in cfg.phase_terminators:
                pos = lowered.find(terminator.lower(), marker_end)
                if 0 <= pos < end:
                    end = pos
        sections[phase] = text[start:end].strip()

    result = PhaseSections(**sections)
    logger.debug(f"Phase sections found: {result.present_phases()}")
    return result
