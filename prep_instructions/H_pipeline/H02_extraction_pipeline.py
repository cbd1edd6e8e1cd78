# prep_instructions/H_pipeline/H02_extraction_pipeline.py
"""
Prep-instruction extraction pipeline.

Runs the complete workflow for one document:

    extract -> normalize -> segment -> build -> post_process [-> export]

Every stage runs inside a PipelineTrace span, so a run can be inspected
stage by stage (item counts, timings, the failing stage).

Entry points:
    - extract_instructions(raw_text): text in, ordered instructions out (no I/O)
    - process_pdf(pdf_path, output_path): PDF in, ProcessingResult out; never
      raises for unreadable PDFs or failed CSV writes

Example:
    >>> result = process_pdf("plenvu_morning.pdf", "output/plenvu_morning.csv")
    >>> result.success, result.message
    (True, 'CSV file created successfully')
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import List, Optional, Tuple, Union

from A_core.A00_logging import get_logger
from A_core.A01_instruction_models import Instruction
from A_core.A02_interfaces import BaseTextExtractor, PathLike, Tokenizer
from A_core.A04_exceptions import ExportError, ParsingError
from A_core.A05_pipeline_trace import PipelineTrace
from A_core.A06_processing_result import ProcessingResult
from B_parsing.B01_pdf_text_extractor import PdfTextExtractor
from B_parsing.B02_text_normalizer import normalize_text
from B_parsing.B03_section_segmenter import PhaseSections, segment_by_phase, split_into_sections
from E_normalization.E02_post_processor import post_process
from G_config import PipelineConfig, SegmentationStrategy, load_config, parse_strategy
from H_pipeline.H01_instruction_builder import InstructionBuilder
from J_export.J01_csv_export import write_instructions_csv
from Z_utils.Z01_text_helpers import word_tokenize

logger = get_logger(__name__)


@functools.lru_cache(maxsize=1)
def get_default_pipeline_config() -> PipelineConfig:
    """Config from the default config.yaml, loaded once and shared read-only."""
    return load_config()


class PrepInstructionPipeline:
    """
    Turns bowel-prep leaflets into ordered instruction lists.

    Holds no per-document state; one instance can process any number of
    documents, including concurrently.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        extractor: Optional[BaseTextExtractor] = None,
        tokenizer: Tokenizer = word_tokenize,
    ) -> None:
        self.config = config or get_default_pipeline_config()
        self.extractor = extractor or PdfTextExtractor(
            baseline_tolerance=self.config.baseline_tolerance,
            paragraph_gap_ratio=self.config.paragraph_gap_ratio,
        )
        self.builder = InstructionBuilder(self.config.heuristics, tokenizer)

    # =========================================================================
    # Text -> instructions
    # =========================================================================

    def run_text(
        self,
        raw_text: str,
        strategy: Optional[Union[str, SegmentationStrategy]] = None,
        trace: Optional[PipelineTrace] = None,
    ) -> Tuple[Instruction, ...]:
        """Normalize, segment, build and post-process one document's text."""
        trace = trace if trace is not None else PipelineTrace()
        heuristics = self.config.heuristics
        chosen = parse_strategy(strategy) if strategy is not None else self.config.strategy

        with trace.span("normalize", items_in=len(raw_text or "")) as span:
            text = normalize_text(raw_text, heuristics)
            span.items_out = len(text)

        sections: List[str] = []
        phases: Optional[PhaseSections] = None
        with trace.span("segment", items_in=1) as span:
            span.attributes["strategy"] = chosen.value
            if chosen == SegmentationStrategy.BLANK_LINE:
                sections = split_into_sections(text)
                span.items_out = len(sections)
            else:
                phases = segment_by_phase(text, heuristics)
                span.items_out = len(phases.present_phases())
                span.attributes["phases"] = phases.present_phases()

        with trace.span("build", items_in=span.items_out) as span:
            if chosen == SegmentationStrategy.BLANK_LINE:
                built = self.builder.build_from_sections(sections, text)
            else:
                built = self.builder.build(text, phases)
            span.items_out = len(built)

        with trace.span("post_process", items_in=len(built)) as span:
            final: List[Instruction] = post_process(built, heuristics)
            span.items_out = len(final)
            span.attributes["injected"] = len(final) - len(built)

        return tuple(final)

    # =========================================================================
    # PDF -> result
    # =========================================================================

    def process_pdf(
        self,
        pdf_path: PathLike,
        output_path: Optional[PathLike] = None,
    ) -> ProcessingResult:
        """
        Extract instructions from a PDF and optionally write them as CSV.

        Unreadable PDFs and failed writes give ``success=False`` with a
        user-facing message; no CSV is left behind on failure.
        """
        path = Path(pdf_path)
        trace = PipelineTrace(doc_id=path.name)

        try:
            with trace.span("extract", items_in=1) as span:
                raw_text = self.extractor.extract(path)
                span.items_out = len(raw_text)
                span.attributes["extractor"] = self.extractor.name
            if not raw_text.strip():
                logger.warning(f"No text extracted from {path.name}; output will hold default steps only")

            instructions = self.run_text(raw_text, trace=trace)

            written: Optional[str] = None
            if output_path is not None:
                with trace.span("export", items_in=len(instructions)) as span:
                    written = str(write_instructions_csv(instructions, output_path))
                    span.items_out = len(instructions)
        except ParsingError as e:
            logger.error(f"Failed to extract text from {path.name}: {e}")
            return ProcessingResult.failed(f"Error processing PDF: {e.message}", trace)
        except ExportError as e:
            logger.error(f"Failed to write CSV for {path.name}: {e}")
            return ProcessingResult.failed(f"Error writing CSV: {e.message}", trace)

        logger.info(trace.summary())
        return ProcessingResult.ok(instructions, output_path=written, trace=trace)


# =============================================================================
# Module-level entry points
# =============================================================================


def extract_instructions(
    raw_text: str,
    config: Optional[PipelineConfig] = None,
    strategy: Optional[Union[str, SegmentationStrategy]] = None,
    trace: Optional[PipelineTrace] = None,
) -> Tuple[Instruction, ...]:
    """
    Ordered, complete instruction list for one document's text.

    Example:
        >>> steps = extract_instructions("DAY OF\\nArrive 2 hours before your appointment.")
        >>> [s.order for s in steps] == list(range(1, len(steps) + 1))
        True
    """
    return PrepInstructionPipeline(config).run_text(raw_text, strategy=strategy, trace=trace)


def process_pdf(
    pdf_path: PathLike,
    output_path: Optional[PathLike] = None,
    config: Optional[PipelineConfig] = None,
) -> ProcessingResult:
    return PrepInstructionPipeline(config).process_pdf(pdf_path, output_path)
