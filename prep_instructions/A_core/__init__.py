"""
A_core: Instruction model, logging, tracing and the exception hierarchy.

Core abstractions shared by every stage of the prep-instruction pipeline:
- Pydantic Instruction model with clamping validators
- Centralized logging (console + rotating file)
- Per-stage trace spans
- Abstract interfaces for text extractors
"""
