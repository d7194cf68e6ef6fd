"""
PDF question papers, read with PyMuPDF.

Pages are joined in reading order with a blank line so a question that
starts at the top of a page still begins on its own line.
"""

import logging
from pathlib import Path
from typing import ClassVar

import fitz  # PyMuPDF

from qa_checker.extractors.base import DocumentExtractor, ExtractionError
from qa_checker.models import ExtractedDocument

logger = logging.getLogger(__name__)

_TEXT_FLAGS = fitz.TEXT_PRESERVE_WHITESPACE | fitz.TEXT_PRESERVE_LIGATURES


class PDFExtractor(DocumentExtractor):
    """
    Reads the text layer of a PDF paper.

    Scanned papers have no text layer and come back empty rather than as
    an error; there is no OCR.
    """

    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = (".pdf",)

    def extract(self, file_path: Path) -> ExtractedDocument:
        """
        Read every page of a PDF paper.

        Raises:
            ExtractionError: For a damaged, empty or page-less PDF.
        """
        self._check_readable(file_path)

        try:
            with fitz.open(file_path) as pdf:
                if pdf.page_count == 0:
                    raise ExtractionError("PDF has no pages", file_path)
                pages = [page.get_text("text", flags=_TEXT_FLAGS).strip("\n") for page in pdf]
        except ExtractionError:
            raise
        except fitz.EmptyFileError as e:
            raise ExtractionError("PDF file is empty", file_path, cause=e) from e
        except fitz.FileDataError as e:
            raise ExtractionError("PDF file is corrupted or invalid", file_path, cause=e) from e
        except Exception as e:
            raise ExtractionError(f"PyMuPDF failed: {e}", file_path, cause=e) from e

        pages = [text for text in pages if text.strip()]
        if not pages:
            logger.warning("No text layer found in %s; it may be a scanned PDF", file_path)

        return self._to_document("\n\n".join(pages), file_path)
