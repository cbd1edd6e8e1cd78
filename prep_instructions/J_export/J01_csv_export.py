# prep_instructions/J_export/J01_csv_export.py
"""
CSV serialization of instruction lists.

Format:
    - Header row: bowelprep,order,category,message,offset,time,split,procedure_time
    - ``message`` is always double-quoted, embedded quotes doubled
    - Other fields are quoted only when they contain a comma, quote or newline
    - ``time`` is empty when absent; ``split`` is written as true/false

Reading goes through csv.DictReader and Instruction validation, so a
written file reads back field-for-field equal.

Example:
    >>> text = instructions_to_csv([Instruction(message='Take "Plenvu" dose 1', time=18.5)])
    >>> text.splitlines()[1]
    'plenvu,1,procedure,"Take ""Plenvu"" dose 1",0,18.5,false,morning'
"""

from __future__ import annotations

import csv
import io
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from A_core.A00_logging import get_logger
from A_core.A01_instruction_models import Instruction
from A_core.A04_exceptions import ExportError, ParsingError

logger = get_logger(__name__)

COLUMNS = ("bowelprep", "order", "category", "message", "offset", "time", "split", "procedure_time")

_NEEDS_QUOTING = (",", '"', "\n", "\r")


# -------------------------
# Field formatting
# -------------------------


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _quote_if_needed(value: str) -> str:
    return _quote(value) if any(ch in value for ch in _NEEDS_QUOTING) else value


def format_time(time: Optional[float]) -> str:
    """18.0 -> "18", 18.5 -> "18.5", None -> ""."""
    if time is None:
        return ""
    if float(time).is_integer():
        return str(int(time))
    return repr(float(time))


def format_row(inst: Instruction) -> str:
    fields: Dict[str, str] = {
        "bowelprep": inst.bowelprep,
        "order": str(inst.order),
        "category": inst.category,
        "offset": str(inst.offset),
        "time": format_time(inst.time),
        "split": "true" if inst.split else "false",
        "procedure_time": inst.procedure_time,
    }
    return ",".join(
        _quote(inst.message) if col == "message" else _quote_if_needed(fields[col]) for col in COLUMNS
    )


# -------------------------
# Text API
# -------------------------


def instructions_to_csv(instructions: Iterable[Instruction]) -> str:
    lines = [",".join(COLUMNS)]
    lines.extend(format_row(inst) for inst in instructions)
    return "\n".join(lines) + "\n"


def instructions_from_csv(text: str, source: str = "<string>") -> List[Instruction]:
    """
    Parse CSV text with a header row.

    Raises:
        ParsingError: header is missing one of the required columns.
    """
    reader = csv.DictReader(io.StringIO(text))
    missing = [col for col in COLUMNS if col not in (reader.fieldnames or [])]
    if missing:
        raise ParsingError(f"CSV is missing columns: {', '.join(missing)}", file_path=source)

    instructions: List[Instruction] = []
    for row in reader:
        # Skip blank lines DictReader reports as all-empty rows
        if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
            continue
        instructions.append(Instruction(**{col: row.get(col) for col in COLUMNS}))
    return instructions


# -------------------------
# File API
# -------------------------


def write_instructions_csv(instructions: Sequence[Instruction], output_path: Union[str, Path]) -> Path:
    """
    Write instructions to ``output_path``.

    The file is written to a temporary sibling and moved into place, so a
    failed export never leaves a partial CSV behind.

    Raises:
        ExportError: directory cannot be created or file cannot be written.
    """
    path = Path(output_path)
    content = instructions_to_csv(instructions)
    tmp_name: Optional[str] = None

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}_", suffix=".csv.tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise ExportError(f"Unable to write CSV: {e.strerror or e}", file_path=str(path)) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)

    logger.info(f"Wrote {len(instructions)} instruction(s) to {path}")
    return path


def read_instructions_csv(input_path: Union[str, Path]) -> List[Instruction]:
    """
    Read an instruction CSV written by write_instructions_csv (or edited by hand).

    Raises:
        ParsingError: file missing, unreadable or without the expected header.
    """
    path = Path(input_path)
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            text = f.read()
    except OSError as e:
        raise ParsingError(f"Unable to read CSV: {e.strerror or e}", file_path=str(path)) from e
    return instructions_from_csv(text, source=str(path))
