# prep_instructions/A_core/A06_processing_result.py
"""
Outcome of processing one source document.

The document-level entry point never raises for extraction or export
failures; it returns a ProcessingResult whose ``message`` is safe to show
to an end user (no stack detail).
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from A_core.A01_instruction_models import Instruction
from A_core.A05_pipeline_trace import PipelineTrace


class ProcessingResult(BaseModel):
    success: bool
    message: str
    instructions: Tuple[Instruction, ...] = ()
    output_path: Optional[str] = None
    trace: Optional[PipelineTrace] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def ok(
        cls,
        instructions: Tuple[Instruction, ...],
        output_path: Optional[str] = None,
        trace: Optional[PipelineTrace] = None,
    ) -> "ProcessingResult":
        message = "CSV file created successfully" if output_path else "Instructions extracted successfully"
        return cls(
            success=True,
            message=message,
            instructions=instructions,
            output_path=output_path,
            trace=trace,
        )

    @classmethod
    def failed(cls, message: str, trace: Optional[PipelineTrace] = None) -> "ProcessingResult":
        return cls(success=False, message=message, trace=trace)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready payload (instructions as column dicts)."""
        return {
            "success": self.success,
            "message": self.message,
            "output_path": self.output_path,
            "data": [inst.model_dump(mode="json") for inst in self.instructions],
        }
