"""
Document Extraction Module.

Turns an uploaded document into plain text for the question parser:
- PDF (.pdf)
- Word (.docx)
- Plain text (.txt, .md)
"""

from qa_checker.extractors.base import (
    DocumentExtractor,
    ExtractionError,
    strip_page_breaks,
)
from qa_checker.extractors.factory import (
    create_extractor,
    extract_document,
    get_supported_extensions,
)

__all__ = [
    "DocumentExtractor",
    "ExtractionError",
    "create_extractor",
    "extract_document",
    "get_supported_extensions",
    "strip_page_breaks",
]
