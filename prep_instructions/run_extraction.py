#!/usr/bin/env python3
# prep_instructions/run_extraction.py
"""
Command-line runner for the prep-instruction pipeline.

Extracts patient preparation instructions from bowel-prep PDFs and writes
one CSV per document.

Usage:
    # One document, CSV next to the configured output directory
    python run_extraction.py plenvu_morning.pdf

    # A folder of leaflets, paragraph-based segmentation, custom output dir
    python run_extraction.py leaflets/ --strategy blank_line --output-dir ./results

    # Print the reference sequence for a regimen instead of extracting
    python run_extraction.py --master plenvu morning

    # With a different config file
    python run_extraction.py leaflets/ --config ./my_config.yaml --verbose

Exit status is 1 when any document fails.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from A_core.A00_logging import LogContext, configure_logging, get_logger
from A_core.A04_exceptions import PrepPipelineError
from A_core.A06_processing_result import ProcessingResult
from F_reference.F01_master_sequence import MasterSequence
from G_config import PipelineConfig, SegmentationStrategy, load_config, parse_strategy
from H_pipeline.H02_extraction_pipeline import PrepInstructionPipeline
from J_export.J01_csv_export import format_time

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Extract bowel-prep instructions from PDF documents.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "input",
        nargs="*",
        help="PDF file(s) or directory to process",
    )

    options_group = parser.add_argument_group("Processing Options")
    options_group.add_argument(
        "--strategy", "-s",
        choices=[s.value for s in SegmentationStrategy],
        help="Segmentation strategy (default: from config.yaml)",
    )
    options_group.add_argument(
        "--config", "-c",
        type=Path,
        help="Path to config.yaml",
    )
    options_group.add_argument(
        "--master",
        nargs=2,
        metavar=("PREP", "TIME"),
        help="Print the reference sequence for a bowel prep and procedure time, then exit",
    )

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--output-dir", "-o",
        type=Path,
        help="Output directory for CSV files",
    )
    output_group.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output",
    )
    output_group.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )

    return parser


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Build PipelineConfig from config.yaml plus command-line overrides."""
    config = load_config(args.config)
    if args.strategy:
        config.strategy = parse_strategy(args.strategy)
    if args.output_dir:
        config.output_dir = args.output_dir
    if args.verbose:
        config.log_level = "DEBUG"
    elif args.quiet:
        config.log_level = "WARNING"
    return config


def collect_pdf_files(inputs: List[str]) -> List[Path]:
    """Collect PDF files from input paths."""
    pdf_files = []
    for input_path in inputs:
        path = Path(input_path)
        if path.is_file() and path.suffix.lower() == ".pdf":
            pdf_files.append(path)
        elif path.is_dir():
            pdf_files.extend(path.glob("**/*.pdf"))
        else:
            print(f"Warning: Skipping invalid path: {input_path}", file=sys.stderr)
    return sorted(set(pdf_files))


def print_master_sequence(config: PipelineConfig, prep: str, procedure_time: str) -> int:
    master = MasterSequence(config.master_sequence_path)
    try:
        steps = master.lookup(prep, procedure_time)
        options = master.available_options()
    except PrepPipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not steps:
        available = ", ".join(f"{p}/{t}" for p, t in options) or "none"
        print(f"No reference sequence for {prep}/{procedure_time}. Available: {available}", file=sys.stderr)
        return 1

    for step in steps:
        print(
            f"{step.order:>2}  day {step.offset:+d}  {format_time(step.time):>5}  "
            f"{step.category:<10}  {step.message}"
        )
    return 0


def run_extraction(
    pdf_path: Path,
    pipeline: PrepInstructionPipeline,
    output_dir: Path,
    quiet: bool = False,
) -> ProcessingResult:
    """Run the pipeline on a single PDF and write ``<output_dir>/<stem>.csv``."""
    if not quiet:
        print(f"\n{'=' * 60}")
        print(f"Processing: {pdf_path.name}")
        print(f"{'=' * 60}")

    result = pipeline.process_pdf(pdf_path, output_dir / f"{pdf_path.stem}.csv")

    if not quiet:
        if result.success:
            print(f"{result.message}: {result.output_path} ({len(result.instructions)} instructions)")
        else:
            print(result.message)
        if result.trace is not None:
            print(result.trace.summary())
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except PrepPipelineError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    configure_logging(
        log_dir=config.log_dir,
        log_level=config.log_level,
        enable_file_logging=config.file_logging,
    )

    if args.master:
        return print_master_sequence(config, *args.master)

    pdf_files = collect_pdf_files(args.input)
    if not pdf_files:
        print("Error: No PDF files found", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Configuration: {config.summary()}")
        print(f"Files to process: {len(pdf_files)}")

    pipeline = PrepInstructionPipeline(config)
    with LogContext(logger, f"Extraction of {len(pdf_files)} file(s)"):
        results = [run_extraction(pdf, pipeline, config.output_dir, quiet=args.quiet) for pdf in pdf_files]

    successful = sum(1 for r in results if r.success)
    if not args.quiet and len(pdf_files) > 1:
        print(f"\n{'=' * 60}")
        print("SUMMARY")
        print(f"{'=' * 60}")
        print(f"Processed: {len(pdf_files)} files")
        print(f"Successful: {successful}")
        print(f"Failed: {len(pdf_files) - successful}")

    return 0 if successful == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
