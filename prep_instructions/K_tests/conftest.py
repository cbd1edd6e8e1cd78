# prep_instructions/K_tests/conftest.py
"""
Pytest configuration and fixtures for prep_instructions tests.

Provides:
- Package root on sys.path (tests import A_core, B_parsing, ... directly)
- Heuristics and pipeline configs built from code defaults
- Sample leaflet text in both phase and paragraph layouts
- A factory that writes small PDFs with PyMuPDF
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Iterator, List, Sequence, Tuple

import fitz  # PyMuPDF
import pytest

# Add prep_instructions to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from A_core.A00_logging import ROOT_LOGGER_NAME  # noqa: E402
from A_core.A03_heuristics_config import HeuristicsConfig  # noqa: E402
from G_config import PipelineConfig  # noqa: E402

PACKAGE_ROOT = Path(__file__).parent.parent


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================

@pytest.fixture
def heuristics() -> HeuristicsConfig:
    """Heuristics from the hardcoded defaults (independent of config.yaml)."""
    return HeuristicsConfig()


@pytest.fixture
def pipeline_config(heuristics: HeuristicsConfig, tmp_path: Path) -> PipelineConfig:
    return PipelineConfig(
        heuristics=heuristics,
        output_dir=tmp_path / "output",
        master_sequence_path=PACKAGE_ROOT / "data" / "sequence.csv",
    )


@pytest.fixture
def master_sequence_path() -> Path:
    return PACKAGE_ROOT / "data" / "sequence.csv"


@pytest.fixture
def restore_root_logger() -> Iterator[logging.Logger]:
    """Undo configure_logging calls made by a test."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level, handlers = root.level, list(root.handlers)
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


# =============================================================================
# SAMPLE DOCUMENTS
# =============================================================================

@pytest.fixture
def phase_document() -> str:
    """Leaflet laid out with the four timeline headers."""
    return (
        "PLENVU BOWEL PREPARATION - MORNING PROCEDURE\n"
        "SEVEN DAYS BEFORE\n"
        "Stop taking iron supplements\n"
        "THREE DAYS BEFORE\n"
        "Start a low residue diet.\n"
        "DAY BEFORE\n"
        "You may have a light breakfast. "
        "At 6:00pm drink the first dose of the solution. "
        "From 8pm clear fluids only.\n"
        "DAY OF\n"
        "At 5am drink the second dose. "
        "Arrive 2 hours before your appointment.\n"
        "SPECIAL INSTRUCTIONS\n"
        "Diabetic patients should contact the clinic.\n"
    )


@pytest.fixture
def paragraph_document() -> str:
    """Leaflet laid out as blank-line separated paragraphs."""
    return (
        "MoviPrep split dose instructions\n"
        "\n"
        "To prepare for your procedure cease taking any iron supplements "
        "or antidiarrheals from today.\n"
        "\n"
        "3 days before the procedure buy your MoviPrep sachets.\n"
        "\n"
        "Tomorrow at 6pm dissolve sachet A and B in water and drink the solution.\n"
        "\n"
        "Today arrive at the hospital at 7:30am.\n"
    )


# =============================================================================
# PDF FACTORY
# =============================================================================

Placement = Tuple[float, float, str]


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """
    Write a PDF whose pages hold text at given baseline positions.

    Usage:
        path = make_pdf([[(72, 72, "SEVEN DAYS"), (72, 90, "Stop iron")]])
    """

    def _make(pages: Sequence[List[Placement]], name: str = "doc.pdf", fontsize: float = 12) -> Path:
        path = tmp_path / name
        doc = fitz.open()
        for placements in pages:
            page = doc.new_page()
            for x, y, text in placements:
                page.insert_text((x, y), text, fontsize=fontsize)
        doc.save(str(path))
        doc.close()
        return path

    return _make
