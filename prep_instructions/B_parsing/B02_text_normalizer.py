# prep_instructions/B_parsing/B02_text_normalizer.py
"""
Text normalization for extracted PDF text.

Cleans the raw page text before segmentation: bullet glyphs and dashes
become ASCII hyphens, line endings are unified, non-printable characters
are blanked, OCR spelled-out numbers are turned into digits, page
furniture ("Page 2 of 4", header:/footer: markers) is removed, list
markers get a uniform "- " prefix and whitespace is collapsed.

normalize_text is idempotent and never raises.

Example:
    >>> normalize_text("•  Take one  sachet\\r\\n\\r\\n\\r\\nPage 1 of 2")
    '- Take 1 sachet'
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Pattern, Tuple

from A_core.A00_logging import get_logger
from A_core.A03_heuristics_config import HeuristicsConfig, get_default_heuristics_config

logger = get_logger(__name__)

_BULLET_RE = re.compile(r"[•●○·▪■◦]")
_DASH_RE = re.compile(r"[–—]")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E\n]")
_PAGE_NUMBER_RE = re.compile(r"page\s+\d+\s+of\s+\d+", re.IGNORECASE)
_HEADER_FOOTER_RE = re.compile(r"^[ \t]*(?:header|footer):[ \t]*", re.IGNORECASE | re.MULTILINE)
_LIST_MARKER_RE = re.compile(r"^[ \t]*[-*][ \t]*(?=\S)", re.MULTILINE)
_SPACES_RE = re.compile(r"[ \t]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_WHITESPACE_RE = re.compile(r"\s+")

# Compiled OCR patterns per substitution table
_OCR_CACHE: Dict[Tuple[Tuple[str, str], ...], List[Tuple[Pattern[str], str]]] = {}

# Upper bound on normalization passes; one pass is enough for real documents
_MAX_PASSES = 4


def _ocr_patterns(substitutions: Dict[str, str]) -> List[Tuple[Pattern[str], str]]:
    key = tuple(substitutions.items())
    patterns = _OCR_CACHE.get(key)
    if patterns is None:
        patterns = []
        for word, digit in substitutions.items():
            if not word:
                continue
            first = re.escape(word[0])
            first_class = f"[{first}{re.escape(word[0].upper())}]"
            patterns.append((re.compile(rf"\b{first_class}{re.escape(word[1:])}\b"), digit))
        _OCR_CACHE[key] = patterns
    return patterns


def _normalize_once(text: str, substitutions: Dict[str, str]) -> str:
    text = _BULLET_RE.sub("-", text)
    text = _DASH_RE.sub("-", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _NON_PRINTABLE_RE.sub(" ", text)

    for pattern, digit in _ocr_patterns(substitutions):
        text = pattern.sub(digit, text)

    text = _PAGE_NUMBER_RE.sub("", text)
    # Repeated so that "Header: Footer: text" loses both markers
    while True:
        stripped = _HEADER_FOOTER_RE.sub("", text)
        if stripped == text:
            break
        text = stripped

    text = _LIST_MARKER_RE.sub("- ", text)

    lines = [_SPACES_RE.sub(" ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def normalize_text(text: Optional[str], config: Optional[HeuristicsConfig] = None) -> str:
    """
    Normalize raw extracted text for segmentation.

    Args:
        text: Raw text (None and "" give "").
        config: Heuristics config providing the OCR substitution table.

    Returns:
        Normalized text; applying it again returns the same string.
    """
    if not text:
        return ""

    cfg = config or get_default_heuristics_config()
    result = _normalize_once(text, cfg.ocr_substitutions)
    # A removal can expose a new list marker or blank run; settle to a fixpoint
    for _ in range(_MAX_PASSES):
        again = _normalize_once(result, cfg.ocr_substitutions)
        if again == result:
            break
        result = again
    return result


def clean_text(text: Optional[str]) -> str:
    """Single-line cleanup for instruction messages."""
    if not text:
        return ""
    text = _BULLET_RE.sub("-", text)
    text = _DASH_RE.sub("-", text)
    text = _NON_PRINTABLE_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()
