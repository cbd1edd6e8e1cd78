# prep_instructions/C_generators/C01_category_classifier.py
"""
Keyword-scored category classification.

Each category's score is the number of its keywords found in the text.
Text and keywords are both passed through the same tokenizer and
re-joined with single spaces before a substring test, so punctuation,
case and line breaks do not affect matching ("Clear-liquids" matches
"clear liquids").

The highest score wins. Ties go to the category declared first in
``category_keywords`` (medication, bowelprep, diet, procedure by
default); a zero score for every category gives ``procedure``.

Example:
    >>> classify_category("Stop taking iron tablets")
    'medication'
    >>> classify_category("Arrive at the hospital")
    'procedure'
"""

from __future__ import annotations

from typing import Dict, Optional

from A_core.A00_logging import get_logger, log_and_default
from A_core.A01_instruction_models import DEFAULT_CATEGORY
from A_core.A02_interfaces import Tokenizer
from A_core.A03_heuristics_config import HeuristicsConfig, get_default_heuristics_config
from Z_utils.Z01_text_helpers import token_text, word_tokenize

logger = get_logger(__name__)


def score_categories(
    text: str,
    config: Optional[HeuristicsConfig] = None,
    tokenizer: Tokenizer = word_tokenize,
) -> Dict[str, int]:
    """Distinct keyword hits per category, in declaration order."""
    cfg = config or get_default_heuristics_config()
    haystack = token_text(text, tokenizer)
    scores: Dict[str, int] = {}

    for category, keywords in cfg.category_keywords.items():
        hits = 0
        for keyword in keywords:
            needle = token_text(keyword, tokenizer)
            if needle and needle in haystack:
                hits += 1
        scores[category] = hits
    return scores


@log_and_default(DEFAULT_CATEGORY)
def classify_category(
    text: str,
    config: Optional[HeuristicsConfig] = None,
    tokenizer: Tokenizer = word_tokenize,
) -> str:
    scores = score_categories(text, config, tokenizer)

    best_category = DEFAULT_CATEGORY
    best_score = 0
    for category, score in scores.items():
        # Strictly greater keeps the earlier category on ties
        if score > best_score:
            best_category = category
            best_score = score
    return best_category
