# prep_instructions/K_tests/K14_test_logging_trace.py
"""Tests for logging helpers, pipeline trace spans and processing results."""
import logging

import pytest

from A_core.A00_logging import (
    ROOT_LOGGER_NAME,
    LogContext,
    configure_logging,
    get_logger,
    log_and_default,
    timed,
)
from A_core.A01_instruction_models import Instruction
from A_core.A05_pipeline_trace import PipelineTrace, SpanStatus
from A_core.A06_processing_result import ProcessingResult


class TestLogging:
    def test_logger_namespaced(self):
        assert get_logger("B_parsing.B02").name == f"{ROOT_LOGGER_NAME}.B_parsing.B02"
        assert get_logger(ROOT_LOGGER_NAME).name == ROOT_LOGGER_NAME

    def test_configure_file_logging(self, tmp_path, restore_root_logger):
        configure_logging(
            log_dir=tmp_path, log_level="debug", run_id="test", enable_file_logging=True,
            enable_console_logging=False,
        )
        get_logger("K14").debug("written to file")
        for handler in restore_root_logger.handlers:
            handler.flush()
        log_file = tmp_path / "prep_test.log"
        assert "written to file" in log_file.read_text(encoding="utf-8")
        assert restore_root_logger.level == logging.DEBUG

    def test_reconfigure_replaces_handlers(self, restore_root_logger):
        configure_logging(log_level="INFO")
        configure_logging(log_level="INFO")
        assert len(restore_root_logger.handlers) == 1

    def test_unknown_level_name_falls_back(self, restore_root_logger):
        configure_logging(log_level="chatty", enable_console_logging=False)
        assert restore_root_logger.level == logging.INFO

    def test_log_context_reraises(self, caplog):
        logger = get_logger("K14")
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            with pytest.raises(ValueError):
                with LogContext(logger, "doomed step"):
                    raise ValueError("boom")
        assert "Failed: doomed step" in caplog.text

    def test_timed_returns_result(self):
        @timed()
        def add(a, b):
            return a + b

        assert add(2, 3) == 5

    def test_log_and_default(self, caplog):
        @log_and_default("fallback")
        def broken(_text):
            raise RuntimeError("bad table")

        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER_NAME):
            assert broken("x") == "fallback"
        assert "bad table" in caplog.text


class TestPipelineTrace:
    def test_successful_span(self):
        trace = PipelineTrace(doc_id="doc.pdf")
        with trace.span("normalize", items_in=10) as span:
            span.items_out = 8
            span.attributes["note"] = "ok"
        stage = trace.get("normalize")
        assert stage.status is SpanStatus.OK
        assert (stage.items_in, stage.items_out) == (10, 8)
        assert stage.duration_ms >= 0
        assert not trace.failed

    def test_failed_span_propagates(self):
        trace = PipelineTrace()
        with pytest.raises(KeyError):
            with trace.span("segment"):
                raise KeyError("phase")
        assert trace.failed
        assert trace.get("segment").status is SpanStatus.FAILED
        assert trace.get("segment").error.startswith("KeyError")

    def test_get_returns_latest(self):
        trace = PipelineTrace()
        with trace.span("build") as span:
            span.items_out = 1
        with trace.span("build") as span:
            span.items_out = 2
        assert trace.get("build").items_out == 2
        assert trace.get("export") is None

    def test_summary_and_dict(self):
        trace = PipelineTrace(doc_id="leaflet.pdf")
        with trace.span("extract") as span:
            span.items_out = 120
        assert trace.summary().startswith("[TRACE] leaflet.pdf | extract=120(")
        data = trace.to_dict()
        assert data["doc_id"] == "leaflet.pdf"
        assert data["spans"][0]["status"] == "ok"


class TestProcessingResult:
    def test_ok_message_depends_on_output(self):
        inst = Instruction(order=1, message="Arrive early", offset=0)
        assert ProcessingResult.ok((inst,)).message == "Instructions extracted successfully"
        written = ProcessingResult.ok((inst,), output_path="out.csv")
        assert written.success and written.message == "CSV file created successfully"

    def test_failed(self):
        result = ProcessingResult.failed("Error processing PDF: PDF file not found")
        assert not result.success
        assert result.instructions == ()

    def test_to_dict(self):
        inst = Instruction(order=1, message="Arrive early", offset=0, time=7)
        data = ProcessingResult.ok((inst,), output_path="out.csv").to_dict()
        assert data["success"] is True
        assert data["data"][0]["message"] == "Arrive early"
        assert data["data"][0]["time"] == 7.0
