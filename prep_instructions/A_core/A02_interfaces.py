# prep_instructions/A_core/A02_interfaces.py
"""
Abstract seams between the pipeline core and its collaborators.

The core pipeline works on plain text. Anything that touches files (PDF
readers, OCR backends) implements BaseTextExtractor, and anything that
splits text into words is passed around as a Tokenizer function so the
classifiers hold no tokenizer state of their own.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Union

from typing_extensions import TypeAlias

# Stateless word splitter: text in, lower-case word tokens out
Tokenizer: TypeAlias = Callable[[str], List[str]]

PathLike: TypeAlias = Union[str, Path]


class BaseTextExtractor(ABC):
    """
    Turns a source document into page-ordered text.

    Implementations raise A_core.A04_exceptions.ParsingError when the
    document cannot be read; they never return partial text on failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs and traces."""

    @abstractmethod
    def extract(self, file_path: PathLike) -> str:
        """Return the document text, pages separated by a newline."""
