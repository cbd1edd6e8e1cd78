# prep_instructions/K_tests/K09_test_extraction_pipeline.py
"""End-to-end tests for extract_instructions and process_pdf."""
from pathlib import Path

import pytest

from A_core.A02_interfaces import BaseTextExtractor
from A_core.A04_exceptions import ParsingError
from A_core.A05_pipeline_trace import PipelineTrace, SpanStatus
from H_pipeline.H02_extraction_pipeline import (
    PrepInstructionPipeline,
    extract_instructions,
    process_pdf,
)
from J_export.J01_csv_export import read_instructions_csv


class StaticTextExtractor(BaseTextExtractor):
    """Returns fixed text for any path."""

    def __init__(self, text: str):
        self.text = text

    @property
    def name(self) -> str:
        return "static"

    def extract(self, file_path) -> str:
        return self.text


class FailingExtractor(BaseTextExtractor):
    @property
    def name(self) -> str:
        return "failing"

    def extract(self, file_path) -> str:
        raise ParsingError("Unable to open PDF: broken xref", file_path=str(file_path))


def _assert_complete(instructions):
    assert instructions
    assert [i.order for i in instructions] == list(range(1, len(instructions) + 1))
    assert any(i.category == "medication" and i.offset <= -5 for i in instructions)
    assert any(i.category == "diet" and i.offset <= -2 for i in instructions)
    assert any(i.category == "procedure" and i.offset <= 0 for i in instructions)
    assert any(i.offset == 0 for i in instructions)
    for i in instructions:
        assert -7 <= i.offset <= 7
        assert i.time is None or 0 <= i.time <= 23.99


class TestExtractInstructions:
    def test_phase_document(self, phase_document, pipeline_config):
        steps = extract_instructions(phase_document, pipeline_config)
        assert isinstance(steps, tuple)
        _assert_complete(steps)
        assert [(s.offset, s.category) for s in steps] == [
            (0, "procedure"),
            (-1, "bowelprep"),
            (-1, "diet"),
            (-2, "diet"),
            (-3, "medication"),
            (-3, "diet"),
            (-7, "medication"),
        ]

    def test_blank_line_strategy(self, paragraph_document, pipeline_config):
        steps = extract_instructions(paragraph_document, pipeline_config, strategy="blank_line")
        _assert_complete(steps)
        assert [s.offset for s in steps] == [0, 0, -1, -2, -3, -5, -7]
        assert steps[0].message == "MoviPrep split dose instructions"

    @pytest.mark.parametrize("text", ["", "   ", "Nothing useful here", None])
    def test_degenerate_input_still_complete(self, text, pipeline_config):
        _assert_complete(extract_instructions(text, pipeline_config))

    def test_trace_spans(self, phase_document, pipeline_config):
        trace = PipelineTrace(doc_id="sample")
        steps = extract_instructions(phase_document, pipeline_config, trace=trace)
        assert [s.name for s in trace.spans] == ["normalize", "segment", "build", "post_process"]
        assert trace.get("post_process").items_out == len(steps)
        assert trace.get("segment").attributes["strategy"] == "phase"
        assert not trace.failed

    def test_unknown_strategy(self, pipeline_config):
        from A_core.A04_exceptions import ConfigurationError

        with pytest.raises(ConfigurationError):
            extract_instructions("text", pipeline_config, strategy="columns")


class TestProcessPdf:
    def test_success_writes_csv(self, phase_document, pipeline_config, tmp_path):
        pipeline = PrepInstructionPipeline(pipeline_config, extractor=StaticTextExtractor(phase_document))
        out = tmp_path / "out" / "plenvu.csv"

        result = pipeline.process_pdf(tmp_path / "plenvu.pdf", out)

        assert result.success
        assert result.message == "CSV file created successfully"
        assert result.output_path == str(out)
        assert tuple(read_instructions_csv(out)) == result.instructions
        assert [s.name for s in result.trace.spans] == [
            "extract", "normalize", "segment", "build", "post_process", "export",
        ]

    def test_success_without_output(self, phase_document, pipeline_config, tmp_path):
        pipeline = PrepInstructionPipeline(pipeline_config, extractor=StaticTextExtractor(phase_document))
        result = pipeline.process_pdf(tmp_path / "plenvu.pdf")
        assert result.success
        assert result.output_path is None
        assert result.message == "Instructions extracted successfully"

    def test_parsing_failure(self, pipeline_config, tmp_path):
        pipeline = PrepInstructionPipeline(pipeline_config, extractor=FailingExtractor())
        out = tmp_path / "never.csv"

        result = pipeline.process_pdf(tmp_path / "broken.pdf", out)

        assert not result.success
        assert result.message == "Error processing PDF: Unable to open PDF: broken xref"
        assert result.instructions == ()
        assert not out.exists()
        assert result.trace.get("extract").status == SpanStatus.FAILED

    def test_export_failure(self, phase_document, pipeline_config, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        pipeline = PrepInstructionPipeline(pipeline_config, extractor=StaticTextExtractor(phase_document))

        result = pipeline.process_pdf(tmp_path / "plenvu.pdf", blocker / "out.csv")

        assert not result.success
        assert result.message.startswith("Error writing CSV")
        assert result.trace.get("export").status == SpanStatus.FAILED

    def test_missing_pdf(self, pipeline_config, tmp_path):
        result = process_pdf(tmp_path / "absent.pdf", tmp_path / "absent.csv", config=pipeline_config)
        assert not result.success
        assert result.message == "Error processing PDF: PDF file not found"
        assert not (tmp_path / "absent.csv").exists()

    def test_real_pdf(self, make_pdf, pipeline_config, tmp_path):
        lines = [
            "PLENVU - MORNING PROCEDURE",
            "SEVEN DAYS BEFORE",
            "Stop taking iron supplements",
            "THREE DAYS BEFORE",
            "Start a low residue diet.",
            "DAY BEFORE",
            "At 6:00pm drink the first dose.",
            "DAY OF",
            "Arrive 2 hours before your appointment.",
        ]
        pdf = make_pdf([[(72, 72 + 16 * idx, line) for idx, line in enumerate(lines)]])

        result = process_pdf(pdf, tmp_path / "plenvu.csv", config=pipeline_config)

        assert result.success, result.message
        _assert_complete(result.instructions)
        evening = [s for s in result.instructions if s.offset == -1]
        assert [(s.category, s.time) for s in evening] == [("bowelprep", 18.0)]
        assert Path(result.output_path).exists()

    def test_result_to_dict(self, phase_document, pipeline_config, tmp_path):
        pipeline = PrepInstructionPipeline(pipeline_config, extractor=StaticTextExtractor(phase_document))
        payload = pipeline.process_pdf(tmp_path / "plenvu.pdf").to_dict()
        assert payload["success"] is True
        assert payload["data"][0]["order"] == 1
        assert set(payload["data"][0]) == {
            "bowelprep", "order", "category", "message", "offset", "time", "split", "procedure_time",
        }
