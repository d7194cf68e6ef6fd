"""
Extractor interface for question papers.

A question paper arrives as a file and leaves as plain text in which
every question starts on its own line. Each extractor turns one family of
formats into that text; page-break marker lines are removed here, once,
for all of them.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from qa_checker.models import ExtractedDocument

# Marker lines left behind by PDF-to-text converters between pages.
PAGE_BREAK_PATTERN = re.compile(r"-{16}Page\s\(\d+\)\sBreak-{16}")


def strip_page_breaks(text: str) -> str:
    """
    Remove every page-break marker line from extracted text.

    Args:
        text: Raw extracted text.

    Returns:
        The text without markers, trimmed.
    """
    return PAGE_BREAK_PATTERN.sub("", text).strip()


class ExtractionError(Exception):
    """
    A question paper could not be turned into text.

    Fatal for the submission that owns the file. `cause` holds the
    underlying library error, when there is one.
    """

    def __init__(self, message: str, file_path: str | Path, cause: Exception | None = None):
        self.file_path = str(file_path)
        self.cause = cause
        super().__init__(f"Failed to extract '{file_path}': {message}")


class DocumentExtractor(ABC):
    """
    Turns one family of file formats into question-paper text.

    Subclasses list the suffixes they read in `SUPPORTED_EXTENSIONS`
    and implement `extract`.
    """

    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def supports(cls, file_path: Path) -> bool:
        """True when the file's suffix (any case) is one this extractor reads."""
        return file_path.suffix.lower() in cls.SUPPORTED_EXTENSIONS

    @abstractmethod
    def extract(self, file_path: Path) -> ExtractedDocument:
        """
        Read a question paper.

        Args:
            file_path: Uploaded or local document.

        Returns:
            The paper's text with page breaks removed. A readable
            document with no text yields empty content.

        Raises:
            ExtractionError: If the document cannot be read.
        """
        ...

    def _check_readable(self, file_path: Path) -> None:
        """
        Raises:
            ExtractionError: For a missing path, a directory, or a suffix
                this extractor does not read.
        """
        if not file_path.exists():
            raise ExtractionError("File does not exist", file_path)
        if not file_path.is_file():
            raise ExtractionError("Path is not a file", file_path)
        if not self.supports(file_path):
            raise ExtractionError(
                f"{self.__class__.__name__} cannot read '{file_path.suffix}' files; "
                f"it handles {', '.join(self.SUPPORTED_EXTENSIONS)}",
                file_path,
            )

    def _to_document(self, text: str, file_path: Path) -> ExtractedDocument:
        """Wrap raw text as an ExtractedDocument, page breaks removed."""
        return ExtractedDocument(
            content=strip_page_breaks(text),
            source_path=str(file_path.resolve()),
            file_extension=file_path.suffix.lower(),
        )
