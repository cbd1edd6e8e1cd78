# prep_instructions/A_core/A04_exceptions.py
"""
Exception hierarchy for the prep-instruction pipeline.

Only document-level failures are exceptions. Classification misses are
resolved to defaults and never raise.

Hierarchy:
    PrepPipelineError (base)
    ├── ConfigurationError     # Invalid config.yaml values
    ├── ParsingError           # PDF missing, unreadable or corrupt
    ├── ExportError            # Tabular output could not be written
    └── ReferenceDataError     # Master sequence file unreadable

Usage:
    from A_core.A04_exceptions import ParsingError

    try:
        text = extractor.extract(path)
    except ParsingError as e:
        return ProcessingResult.failed(e.message)
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PrepPipelineError(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description (safe to show users).
        context: Extra key/value data for logs.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigurationError(PrepPipelineError):
    """Raised when config.yaml holds a value the pipeline cannot use."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
    ):
        context: Dict[str, Any] = {}
        if config_key:
            context["key"] = config_key
        if actual_value is not None:
            context["actual"] = repr(actual_value)

        super().__init__(message, context)
        self.config_key = config_key
        self.actual_value = actual_value


class ParsingError(PrepPipelineError):
    """
    Raised when a source document cannot be turned into text.

    Examples:
        - File does not exist
        - Corrupted or encrypted PDF
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        page_number: Optional[int] = None,
    ):
        context: Dict[str, Any] = {}
        if file_path:
            context["file"] = file_path
        if page_number is not None:
            context["page"] = page_number

        super().__init__(message, context)
        self.file_path = file_path
        self.page_number = page_number


class ExportError(PrepPipelineError):
    """Raised when instructions cannot be written to the tabular output."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message, {"file": file_path} if file_path else None)
        self.file_path = file_path


class ReferenceDataError(PrepPipelineError):
    """Raised when the master sequence file is missing or malformed."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        row_number: Optional[int] = None,
    ):
        context: Dict[str, Any] = {}
        if file_path:
            context["file"] = file_path
        if row_number is not None:
            context["row"] = row_number

        super().__init__(message, context)
        self.file_path = file_path
        self.row_number = row_number


__all__ = [
    "PrepPipelineError",
    "ConfigurationError",
    "ParsingError",
    "ExportError",
    "ReferenceDataError",
]
