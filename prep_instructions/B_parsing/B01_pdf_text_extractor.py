# prep_instructions/B_parsing/B01_pdf_text_extractor.py
"""
PDF text extraction with PyMuPDF.

Produces plain text page by page. Line breaks are rebuilt from the
vertical position of each text span: spans whose baselines agree (within
``baseline_tolerance`` points) are joined on one line, a new baseline
starts a new line, and a vertical jump larger than ``paragraph_gap_ratio``
times the previous font size leaves a blank line so that blank-line
segmentation can see paragraph boundaries. Pages are joined with a
newline.

Key Components:
    - PdfTextExtractor: BaseTextExtractor implementation
    - TextSpan: position + text of one span, used for line assembly
    - assemble_lines: baseline-driven line assembly (pure, testable)

Example:
    >>> extractor = PdfTextExtractor()
    >>> text = extractor.extract("bowel_prep.pdf")

Dependencies:
    - PyMuPDF (fitz): text spans with baseline origins
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import fitz  # PyMuPDF

from A_core.A00_logging import get_logger, timed
from A_core.A02_interfaces import BaseTextExtractor, PathLike
from A_core.A04_exceptions import ParsingError

logger = get_logger(__name__)

DEFAULT_BASELINE_TOLERANCE = 1.0
DEFAULT_PARAGRAPH_GAP_RATIO = 1.8
# Horizontal gap (as a fraction of font size) above which spans on one line get a space
WORD_GAP_RATIO = 0.15


@dataclass(frozen=True)
class TextSpan:
    text: str
    baseline: float
    x0: float
    x1: float
    size: float


def assemble_lines(
    spans: Iterable[TextSpan],
    baseline_tolerance: float = DEFAULT_BASELINE_TOLERANCE,
    paragraph_gap_ratio: float = DEFAULT_PARAGRAPH_GAP_RATIO,
) -> List[str]:
    """
    Join spans (in reading order) into lines by baseline.

    Returns the page lines, with "" entries marking paragraph gaps.
    """
    lines: List[str] = []
    current = ""
    last: Optional[TextSpan] = None

    for span in spans:
        if last is not None and abs(span.baseline - last.baseline) <= baseline_tolerance:
            needs_space = (
                span.x0 - last.x1 > last.size * WORD_GAP_RATIO
                and not current.endswith(" ")
                and not span.text.startswith(" ")
            )
            current += (" " if needs_space else "") + span.text
        else:
            if last is not None:
                lines.append(current.rstrip())
                if span.baseline - last.baseline > last.size * paragraph_gap_ratio:
                    lines.append("")
            current = span.text
        last = span

    if last is not None:
        lines.append(current.rstrip())
    return lines


class PdfTextExtractor(BaseTextExtractor):
    """Reads every page of a PDF and returns its text with inferred line breaks."""

    def __init__(
        self,
        baseline_tolerance: float = DEFAULT_BASELINE_TOLERANCE,
        paragraph_gap_ratio: float = DEFAULT_PARAGRAPH_GAP_RATIO,
    ) -> None:
        self.baseline_tolerance = baseline_tolerance
        self.paragraph_gap_ratio = paragraph_gap_ratio

    @property
    def name(self) -> str:
        return "pymupdf"

    @timed(logger)
    def extract(self, file_path: PathLike) -> str:
        """
        Extract the document text.

        Raises:
            ParsingError: file missing, not a PDF, encrypted or corrupt.
        """
        path = Path(file_path)
        if not path.is_file():
            raise ParsingError("PDF file not found", file_path=str(path))

        try:
            doc = fitz.open(path)
        except (RuntimeError, ValueError) as e:
            raise ParsingError(f"Unable to open PDF: {e}", file_path=str(path)) from e

        try:
            if not doc.is_pdf:
                raise ParsingError("File is not a PDF document", file_path=str(path))
            if doc.needs_pass:
                raise ParsingError("PDF is password protected", file_path=str(path))

            pages: List[str] = []
            for page_idx in range(doc.page_count):
                try:
                    page_spans = self._page_spans(doc[page_idx])
                except (RuntimeError, ValueError) as e:
                    raise ParsingError(
                        f"Unable to read page text: {e}", file_path=str(path), page_number=page_idx + 1
                    ) from e
                lines = assemble_lines(page_spans, self.baseline_tolerance, self.paragraph_gap_ratio)
                pages.append("\n".join(lines))
        finally:
            doc.close()

        logger.debug(f"Extracted {len(pages)} page(s) from {path.name}")
        return "\n".join(pages)

    def _page_spans(self, page: "fitz.Page") -> List[TextSpan]:
        """Non-empty text spans of a page in reading order."""
        text_dict = page.get_text("dict", sort=True)
        spans: List[TextSpan] = []

        for block in text_dict.get("blocks", []):
            # Only text blocks (type 0); images are type 1
            if block.get("type") != 0:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text.strip():
                        continue
                    x0, _, x1, _ = span.get("bbox", (0.0, 0.0, 0.0, 0.0))
                    spans.append(
                        TextSpan(
                            text=text,
                            baseline=float(span.get("origin", (x0, 0.0))[1]),
                            x0=float(x0),
                            x1=float(x1),
                            size=float(span.get("size", 0.0)),
                        )
                    )
        return spans
