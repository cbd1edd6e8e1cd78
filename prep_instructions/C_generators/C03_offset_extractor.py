# prep_instructions/C_generators/C03_offset_extractor.py
"""
Day-offset extraction.

Turns relative day phrases into an offset from the procedure day
(negative = before, 0 = procedure day, positive = after). Numeric
patterns are tried in order, then spelled-out phrases; text with no
recognizable phrase gives None so callers can choose their own default.

Example:
    >>> extract_offset("3 days before the procedure")
    -3
    >>> extract_offset("Tomorrow you will need to fast")
    -1
    >>> extract_offset("Bring your Medicare card") is None
    True
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Pattern, Tuple

from A_core.A00_logging import get_logger, log_and_default

logger = get_logger(__name__)


# =============================================================================
# PATTERNS (first match wins)
# =============================================================================

_OFFSET_PATTERNS: List[Tuple[Pattern[str], Callable[["re.Match[str]"], int]]] = [
    (
        re.compile(
            r"(\d+)\s*days?\s*(?:before|prior|ahead of)\s*(?:the\s*)?(?:procedure|colonoscopy)",
            re.IGNORECASE,
        ),
        lambda m: -int(m.group(1)),
    ),
    (re.compile(r"(\d+)\s*days?\s*before", re.IGNORECASE), lambda m: -int(m.group(1))),
    (re.compile(r"day\s*(-?\d+)", re.IGNORECASE), lambda m: int(m.group(1))),
    (
        re.compile(r"today|day of (?:procedure|colonoscopy)|morning of procedure", re.IGNORECASE),
        lambda m: 0,
    ),
    (re.compile(r"tomorrow", re.IGNORECASE), lambda m: -1),
    (re.compile(r"yesterday", re.IGNORECASE), lambda m: 1),
    (re.compile(r"(\d+)\s*days?\s*after", re.IGNORECASE), lambda m: int(m.group(1))),
]

# Spelled-out phrases for text that escaped OCR digit substitution
DAY_PHRASES: List[Tuple[str, int]] = [
    ("one day before", -1),
    ("two days before", -2),
    ("three days before", -3),
    ("four days before", -4),
    ("five days before", -5),
    ("six days before", -6),
    ("seven days before", -7),
    ("week before", -7),
]


@log_and_default(None)
def extract_offset(text: str) -> Optional[int]:
    if not text:
        return None

    for pattern, handler in _OFFSET_PATTERNS:
        match = pattern.search(text)
        if match:
            return handler(match)

    lowered = text.lower()
    for phrase, offset in DAY_PHRASES:
        if phrase in lowered:
            return offset
    return None
