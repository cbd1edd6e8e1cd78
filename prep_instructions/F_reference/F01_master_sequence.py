# prep_instructions/F_reference/F01_master_sequence.py

"""
Master Sequence Loader

Loads the reference instruction sequence (sequence.csv) that lists the
canonical steps for every bowel prep and procedure time, and answers
lookups by (bowel_prep, procedure_time).

Validation applied:
    - header must contain every instruction column (ReferenceDataError)
    - rows with an unknown bowelprep or procedure_time are skipped with a
      warning; other fields are clamped or defaulted by Instruction

Rows are indexed once on first use; the loader is read-only afterwards.
"""

from __future__ import annotations

import csv
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from A_core.A00_logging import get_logger
from A_core.A01_instruction_models import BOWEL_PREP_VALUES, PROCEDURE_TIME_VALUES, Instruction
from A_core.A04_exceptions import ReferenceDataError
from J_export.J01_csv_export import COLUMNS

logger = get_logger(__name__)

SequenceKey = Tuple[str, str]


class MasterSequence:
    """
    Reference steps indexed by (bowel_prep, procedure_time).

    Example:
        >>> master = MasterSequence("data/sequence.csv")
        >>> [s.order for s in master.lookup("Plenvu", "MORNING")][:3]
        [1, 2, 3]
    """

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)
        self._index: Optional[Dict[SequenceKey, List[Instruction]]] = None

    # -------------------------
    # Public API
    # -------------------------

    def lookup(self, bowel_prep: str, procedure_time: str) -> List[Instruction]:
        """Steps for one regimen sorted by ``order``; empty when the pair is not listed."""
        key = ((bowel_prep or "").strip().lower(), (procedure_time or "").strip().lower())
        return list(self._load().get(key, []))

    def available_options(self) -> List[SequenceKey]:
        """(bowel_prep, procedure_time) pairs present in the file."""
        return sorted(self._load())

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._load().values())

    # -------------------------
    # Loading
    # -------------------------

    def _load(self) -> Dict[SequenceKey, List[Instruction]]:
        if self._index is None:
            self._index = self._build_index(self._read_rows())
            logger.debug(f"Master sequence loaded: {len(self._index)} regimen(s) from {self.file_path.name}")
        return self._index

    def _read_rows(self) -> List[Dict[str, str]]:
        try:
            with open(self.file_path, "r", encoding="utf-8-sig", newline="") as f:
                reader = csv.DictReader(f)
                missing = [col for col in COLUMNS if col not in (reader.fieldnames or [])]
                if missing:
                    raise ReferenceDataError(
                        f"Master sequence is missing columns: {', '.join(missing)}",
                        file_path=str(self.file_path),
                    )
                return [dict(row) for row in reader]
        except OSError as e:
            raise ReferenceDataError(
                f"Unable to read master sequence: {e.strerror or e}", file_path=str(self.file_path)
            ) from e
        except csv.Error as e:
            raise ReferenceDataError(
                f"Malformed master sequence: {e}", file_path=str(self.file_path)
            ) from e

    def _build_index(self, rows: List[Dict[str, str]]) -> Dict[SequenceKey, List[Instruction]]:
        index: Dict[SequenceKey, List[Instruction]] = defaultdict(list)

        # Row numbers are 1-based and count the header line
        for row_number, row in enumerate(rows, start=2):
            prep = (row.get("bowelprep") or "").strip().lower()
            slot = (row.get("procedure_time") or "").strip().lower()
            if prep not in BOWEL_PREP_VALUES or slot not in PROCEDURE_TIME_VALUES:
                logger.warning(
                    f"Skipping master sequence row {row_number} in {self.file_path}: "
                    f"unknown bowel prep or procedure time ({prep!r}, {slot!r})"
                )
                continue
            index[(prep, slot)].append(Instruction(**{col: row.get(col) for col in COLUMNS}))

        for steps in index.values():
            steps.sort(key=lambda inst: inst.order)
        return dict(index)
