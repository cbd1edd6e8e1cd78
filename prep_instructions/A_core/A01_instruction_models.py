# prep_instructions/A_core/A01_instruction_models.py
"""
Domain model for extracted preparation instructions.

An Instruction is the only entity exchanged between pipeline stages and
written to the tabular output. Its validators never raise on malformed
input: every field is clamped or defaulted so that rows coming from
external reference data can be loaded as-is.

Key Components:
    - Category / ProcedureTime / BowelPrep: the closed value sets
    - Instruction: Pydantic model, re-validated on assignment
    - validate_* / clean_message: standalone normalization helpers

Example:
    >>> from A_core.A01_instruction_models import Instruction
    >>> inst = Instruction(order="2", category="DIET", message=" Eat  light ", offset=-12)
    >>> inst.category, inst.message, inst.offset
    ('diet', 'Eat light', -7)
"""
from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


MIN_OFFSET = -7
MAX_OFFSET = 7
MIN_TIME = 0.0
MAX_TIME = 23.99

_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E]")
_WHITESPACE_RE = re.compile(r"\s+")


# -------------------------
# Value sets
# -------------------------


class Category(str, Enum):
    """Instruction category; declaration order is the classifier tie-break order."""

    MEDICATION = "medication"
    BOWELPREP = "bowelprep"
    DIET = "diet"
    PROCEDURE = "procedure"


class ProcedureTime(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"


class BowelPrep(str, Enum):
    """Canonical bowel-prep product identifiers used by the master sequence."""

    PLENVU = "plenvu"
    GLYCOPREP = "glycoprepo"
    MOVIPREP = "moviprep"
    PICOLAX = "picolax"
    PICOPREP = "picoprep2"
    GLYCOPREP_KIT = "glycoprepkit"
    PICOSALAX = "picosalax"


CATEGORY_VALUES = tuple(c.value for c in Category)
PROCEDURE_TIME_VALUES = tuple(p.value for p in ProcedureTime)
BOWEL_PREP_VALUES = tuple(b.value for b in BowelPrep)

DEFAULT_CATEGORY = Category.PROCEDURE.value
DEFAULT_PROCEDURE_TIME = ProcedureTime.MORNING.value
DEFAULT_BOWEL_PREP = BowelPrep.PLENVU.value


# -------------------------
# Field validation helpers
# -------------------------


def validate_category(value: Any) -> Optional[str]:
    """Lower-cased category if known, else None."""
    if value is None:
        return None
    candidate = str(value).strip().lower()
    return candidate if candidate in CATEGORY_VALUES else None


def validate_offset(value: Any) -> Optional[int]:
    """Integer day offset clamped to [-7, 7], or None if not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return max(MIN_OFFSET, min(MAX_OFFSET, int(number)))


def validate_time(value: Any) -> Optional[float]:
    """Decimal hour clamped to [0, 23.99], or None if absent/not numeric."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return max(MIN_TIME, min(MAX_TIME, number))


def validate_procedure_time(value: Any) -> str:
    if value is None:
        return DEFAULT_PROCEDURE_TIME
    candidate = str(value).strip().lower()
    return candidate if candidate in PROCEDURE_TIME_VALUES else DEFAULT_PROCEDURE_TIME


def validate_bowel_prep(value: Any) -> str:
    if value is None:
        return DEFAULT_BOWEL_PREP
    candidate = str(value).strip().lower()
    return candidate if candidate in BOWEL_PREP_VALUES else DEFAULT_BOWEL_PREP


def validate_order(value: Any) -> int:
    """Positive integer order, defaulting to 1."""
    if isinstance(value, bool):
        return 1
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return 1
    if math.isnan(number) or math.isinf(number) or number != int(number):
        return 1
    return max(1, int(number))


def validate_split(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def clean_message(value: Any) -> str:
    """Single-line display text: non-printable characters and runs of whitespace become one space."""
    if not value:
        return ""
    text = _NON_PRINTABLE_RE.sub(" ", str(value))
    return _WHITESPACE_RE.sub(" ", text).strip()


# -------------------------
# Instruction
# -------------------------


class Instruction(BaseModel):
    """
    One patient preparation step.

    offset is the day count relative to the procedure (0 = day of,
    negative = before); time is a decimal hour (18.5 = 18:30) or None.
    """

    bowelprep: str = DEFAULT_BOWEL_PREP
    order: int = 1
    category: str = DEFAULT_CATEGORY
    message: str = ""
    offset: int = 0
    time: Optional[float] = None
    split: bool = False
    procedure_time: str = DEFAULT_PROCEDURE_TIME

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    @field_validator("bowelprep", mode="before")
    @classmethod
    def _bowelprep(cls, v: Any) -> str:
        return validate_bowel_prep(v)

    @field_validator("order", mode="before")
    @classmethod
    def _order(cls, v: Any) -> int:
        return validate_order(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> str:
        return validate_category(v) or DEFAULT_CATEGORY

    @field_validator("message", mode="before")
    @classmethod
    def _message(cls, v: Any) -> str:
        return clean_message(v)

    @field_validator("offset", mode="before")
    @classmethod
    def _offset(cls, v: Any) -> int:
        offset = validate_offset(v)
        return 0 if offset is None else offset

    @field_validator("time", mode="before")
    @classmethod
    def _time(cls, v: Any) -> Optional[float]:
        return validate_time(v)

    @field_validator("split", mode="before")
    @classmethod
    def _split(cls, v: Any) -> bool:
        return validate_split(v)

    @field_validator("procedure_time", mode="before")
    @classmethod
    def _procedure_time(cls, v: Any) -> str:
        return validate_procedure_time(v)
