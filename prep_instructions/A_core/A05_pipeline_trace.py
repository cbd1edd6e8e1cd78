# prep_instructions/A_core/A05_pipeline_trace.py
"""
Per-stage trace spans for pipeline observability.

Each pipeline stage (extract, normalize, segment, build, post_process,
export) runs inside ``PipelineTrace.span``. A span records its timing,
how many items went in and came out, and whether the stage failed, so a
run can be inspected as structured data instead of free-text console
output. Spans are also logged at DEBUG level.

A trace belongs to one document run; it is never shared between
concurrent runs.

Example:
    >>> trace = PipelineTrace(doc_id="plenvu.pdf")
    >>> with trace.span("normalize", items_in=1) as span:
    ...     text = normalize_text(raw)
    ...     span.items_out = 1
    >>> trace.get("normalize").status
    <SpanStatus.OK: 'ok'>

Dependencies:
    - pydantic: span/trace models and JSON export
"""

from __future__ import annotations

import time
import uuid
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from A_core.A00_logging import get_logger

logger = get_logger(__name__)


class SpanStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


class StageSpan(BaseModel):
    """Timing and volume of one pipeline stage."""

    name: str
    started_at: datetime = Field(default_factory=datetime.now)
    duration_ms: float = 0.0
    items_in: Optional[int] = None
    items_out: Optional[int] = None
    status: SpanStatus = SpanStatus.OK
    error: Optional[str] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class PipelineTrace(BaseModel):
    """Ordered spans for a single document run."""

    run_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    doc_id: str = "text"
    started_at: datetime = Field(default_factory=datetime.now)
    spans: List[StageSpan] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @contextmanager
    def span(self, name: str, items_in: Optional[int] = None) -> Generator[StageSpan, None, None]:
        """
        Record a stage. The caller may set ``items_out`` and ``attributes``
        on the yielded span. Exceptions mark the span failed and propagate.
        """
        stage = StageSpan(name=name, items_in=items_in)
        self.spans.append(stage)
        start = time.perf_counter()
        try:
            yield stage
        except Exception as e:
            stage.status = SpanStatus.FAILED
            stage.error = f"{type(e).__name__}: {e}"
            raise
        finally:
            stage.duration_ms = round((time.perf_counter() - start) * 1000, 3)
            logger.debug(
                f"[{self.run_id}] {self.doc_id} :: {name} {stage.status.value} "
                f"in={stage.items_in} out={stage.items_out} ({stage.duration_ms:.1f}ms)"
            )

    def get(self, name: str) -> Optional[StageSpan]:
        """Latest span with this name."""
        for stage in reversed(self.spans):
            if stage.name == name:
                return stage
        return None

    @property
    def total_duration_ms(self) -> float:
        return round(sum(s.duration_ms for s in self.spans), 3)

    @property
    def failed(self) -> bool:
        return any(s.status == SpanStatus.FAILED for s in self.spans)

    def summary(self) -> str:
        """One line per run: stage names with item counts and timings."""
        parts = [
            f"{s.name}={s.items_out if s.items_out is not None else '-'}"
            f"({s.duration_ms:.1f}ms{'' if s.status == SpanStatus.OK else ', FAILED'})"
            for s in self.spans
        ]
        return f"[TRACE] {self.doc_id} | " + " | ".join(parts) + f" | total={self.total_duration_ms:.1f}ms"

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
