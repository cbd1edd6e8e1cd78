# prep_instructions/C_generators/C04_time_extractor.py
"""
Time-of-day extraction as fractional hours (18:30 -> 18.5).

Order of attempts:
    1. A time range ("6:00-8:00am", "6am to 8am"): the start of the range,
       using only the start's own am/pm marker.
    2. "H:MM" with optional am/pm.
    3. "H am|pm".
    4. 24-hour "HH:MM".

12am is 0, 12pm is 12, any other pm adds 12. The result is not clamped
here; Instruction validation clamps it into [0, 23.99].

Example:
    >>> extract_time("Between 6:00-8:00am drink the first dose")
    6.0
    >>> extract_time("At 6pm start the second sachet")
    18.0
    >>> extract_time("Nothing to eat") is None
    True
"""

from __future__ import annotations

import re
from typing import Optional

from A_core.A00_logging import get_logger, log_and_default

logger = get_logger(__name__)

_RANGE_RE = re.compile(
    r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\s*(?:-|to)\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)?",
    re.IGNORECASE,
)
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(am|pm)?", re.IGNORECASE)
_HOUR_PERIOD_RE = re.compile(r"(\d{1,2})\s*(am|pm)", re.IGNORECASE)
_TWENTY_FOUR_HOUR_RE = re.compile(r"(\d{2}):(\d{2})")


def _to_hours(hours: int, minutes: int, period: Optional[str]) -> float:
    period = (period or "").lower()
    if period == "pm" and hours != 12:
        hours += 12
    elif period == "am" and hours == 12:
        hours = 0
    return hours + minutes / 60


@log_and_default(None)
def extract_time_range(text: str) -> Optional[float]:
    """Start of the first time range in ``text``."""
    match = _RANGE_RE.search(text or "")
    if not match:
        return None
    return _to_hours(int(match.group(1)), int(match.group(2) or 0), match.group(3))


@log_and_default(None)
def extract_time(text: str) -> Optional[float]:
    if not text:
        return None

    range_start = extract_time_range(text)
    if range_start is not None:
        return range_start

    match = _CLOCK_RE.search(text)
    if match:
        return _to_hours(int(match.group(1)), int(match.group(2)), match.group(3))

    match = _HOUR_PERIOD_RE.search(text)
    if match:
        return _to_hours(int(match.group(1)), 0, match.group(2))

    match = _TWENTY_FOUR_HOUR_RE.search(text)
    if match:
        return int(match.group(1)) + int(match.group(2)) / 60
    return None
