# prep_instructions/K_tests/K12_test_pdf_text_extractor.py
"""Tests for PyMuPDF text extraction and baseline line assembly."""
import pytest

from A_core.A04_exceptions import ParsingError
from B_parsing.B01_pdf_text_extractor import PdfTextExtractor, TextSpan, assemble_lines


def _span(text, baseline, x0=72.0, x1=None, size=12.0):
    return TextSpan(text=text, baseline=baseline, x0=x0, x1=x1 if x1 is not None else x0 + 6 * len(text), size=size)


class TestAssembleLines:
    def test_same_baseline_joined(self):
        spans = [_span("At 6pm", 100, x0=72, x1=110), _span("drink", 100.4, x0=114, x1=140)]
        assert assemble_lines(spans) == ["At 6pm drink"]

    def test_adjacent_spans_not_spaced(self):
        spans = [_span("Plen", 100, x0=72, x1=96), _span("vu", 100, x0=96, x1=108)]
        assert assemble_lines(spans) == ["Plenvu"]

    def test_new_baseline_new_line(self):
        spans = [_span("DAY OF", 100), _span("Arrive early", 116)]
        assert assemble_lines(spans) == ["DAY OF", "Arrive early"]

    def test_paragraph_gap_inserts_blank_line(self):
        spans = [_span("First", 100), _span("Second", 150)]
        assert assemble_lines(spans) == ["First", "", "Second"]

    def test_tolerance_configurable(self):
        spans = [_span("a", 100, x0=72, x1=78), _span("b", 103, x0=90, x1=96)]
        assert assemble_lines(spans, baseline_tolerance=1.0) == ["a", "b"]
        assert assemble_lines(spans, baseline_tolerance=5.0) == ["a b"]

    def test_empty(self):
        assert assemble_lines([]) == []


class TestPdfTextExtractor:
    def test_lines_by_baseline(self, make_pdf):
        pdf = make_pdf([[
            (72, 72, "SEVEN DAYS"),
            (72, 88, "Stop taking iron supplements"),
            (72, 140, "THREE DAYS"),
        ]])
        text = PdfTextExtractor().extract(pdf)
        assert text.split("\n") == ["SEVEN DAYS", "Stop taking iron supplements", "", "THREE DAYS"]

    def test_same_baseline_spans_share_line(self, make_pdf):
        pdf = make_pdf([[(72, 72, "At 6pm"), (300, 72, "drink the solution.")]])
        assert PdfTextExtractor().extract(pdf) == "At 6pm drink the solution."

    def test_pages_joined_in_order(self, make_pdf):
        pdf = make_pdf([[(72, 72, "Page one text")], [(72, 72, "Page two text")]])
        assert PdfTextExtractor().extract(pdf) == "Page one text\nPage two text"

    def test_name(self):
        assert PdfTextExtractor().name == "pymupdf"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParsingError) as exc:
            PdfTextExtractor().extract(tmp_path / "absent.pdf")
        assert exc.value.file_path == str(tmp_path / "absent.pdf")

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "corrupt.pdf"
        path.write_bytes(b"this is not a pdf at all")
        with pytest.raises(ParsingError):
            PdfTextExtractor().extract(path)
