"""
Plain-text and Markdown question papers.

Teachers paste keys from all sorts of editors, so the bytes are decoded
with a short list of encodings rather than trusting UTF-8.
"""

from pathlib import Path
from typing import ClassVar

from qa_checker.extractors.base import DocumentExtractor, ExtractionError
from qa_checker.models import ExtractedDocument


class TextExtractor(DocumentExtractor):
    """Reads .txt and .md papers as they are; an empty file is an empty paper."""

    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = (".txt", ".md")

    # latin-1 decodes any byte string, so it must stay last
    ENCODINGS: ClassVar[tuple[str, ...]] = ("utf-8", "utf-8-sig", "cp1252", "latin-1")

    def extract(self, file_path: Path) -> ExtractedDocument:
        self._check_readable(file_path)

        try:
            raw = file_path.read_bytes()
        except OSError as e:
            raise ExtractionError(f"Could not read file: {e}", file_path, cause=e) from e

        return self._to_document(self._decode(raw, file_path), file_path)

    def _decode(self, raw: bytes, file_path: Path) -> str:
        failure: UnicodeDecodeError | None = None

        for codec in self.ENCODINGS:
            try:
                text = raw.decode(codec)
            except UnicodeDecodeError as e:
                failure = e
                continue
            # Normalise Windows line endings
            return text.replace("\r\n", "\n")

        raise ExtractionError(
            f"Text is not in any of {', '.join(self.ENCODINGS)}", file_path, cause=failure
        )
