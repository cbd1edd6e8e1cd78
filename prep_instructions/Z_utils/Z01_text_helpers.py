# prep_instructions/Z_utils/Z01_text_helpers.py
"""
Text helpers shared by the normalizer and the classifiers.

word_tokenize is the default Tokenizer: a pure function with no state, so
it can be passed to classifiers (or swapped for another tokenizer in
tests) without any shared instance.
"""

from __future__ import annotations

import re
from typing import List

_WORD_RE = re.compile(r"[a-z0-9]+")


def word_tokenize(text: str) -> List[str]:
    """
    Lower-cased alphanumeric word tokens.

    Punctuation and hyphens split words: "Glyco-Prep, 2L" -> ["glyco", "prep", "2l"].
    """
    return _WORD_RE.findall((text or "").lower())


def token_text(text: str, tokenizer=word_tokenize) -> str:
    """Tokens re-joined by single spaces, so multi-word phrases match across line breaks and punctuation."""
    return " ".join(tokenizer(text))


def clean_whitespace(s: str) -> str:
    """Collapse all whitespace (including newlines) to single spaces and strip."""
    return " ".join((s or "").split())
