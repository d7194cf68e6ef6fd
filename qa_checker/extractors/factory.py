"""
Extractor selection by file suffix.

`extract_document` is what the grading pipeline calls; it runs in a
worker thread, so everything here is synchronous.
"""

from pathlib import Path

from qa_checker.extractors.base import DocumentExtractor, ExtractionError
from qa_checker.extractors.docx_extractor import DocxExtractor
from qa_checker.extractors.pdf_extractor import PDFExtractor
from qa_checker.extractors.text_extractor import TextExtractor
from qa_checker.models import ExtractedDocument

_EXTRACTOR_BY_SUFFIX: dict[str, type[DocumentExtractor]] = {
    suffix: extractor_cls
    for extractor_cls in (PDFExtractor, DocxExtractor, TextExtractor)
    for suffix in extractor_cls.SUPPORTED_EXTENSIONS
}


def get_supported_extensions() -> tuple[str, ...]:
    """Every suffix some extractor reads, sorted."""
    return tuple(sorted(_EXTRACTOR_BY_SUFFIX))


def create_extractor(file_path: Path | str) -> DocumentExtractor:
    """
    Pick the extractor for a question paper.

    Raises:
        ExtractionError: If no extractor reads this suffix.
    """
    path = Path(file_path)
    extractor_cls = _EXTRACTOR_BY_SUFFIX.get(path.suffix.lower())
    if extractor_cls is None:
        raise ExtractionError(
            f"Unsupported file format '{path.suffix.lower()}'. "
            f"Supported formats: {', '.join(get_supported_extensions())}",
            path,
        )
    return extractor_cls()


def extract_document(file_path: Path | str) -> ExtractedDocument:
    """
    Read a question paper of any supported format.

    Args:
        file_path: Solution key or answer sheet.

    Returns:
        The paper's text, page-break markers removed. May be empty.

    Raises:
        ExtractionError: For unsupported, missing or unreadable files.
    """
    path = Path(file_path)
    return create_extractor(path).extract(path)
