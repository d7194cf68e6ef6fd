"""
Word (.docx) question papers, read with python-docx.

Legacy .doc files are not read; they have to be saved as .docx first.

Numbers that Word generates for list paragraphs (the "List Number" style
or any numPr numbering) are not part of the paragraph text and are not
rebuilt here. Question numbers have to be typed into the text to be
found.
"""

from pathlib import Path
from typing import ClassVar

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table

from qa_checker.extractors.base import DocumentExtractor, ExtractionError
from qa_checker.models import ExtractedDocument


class DocxExtractor(DocumentExtractor):
    """
    Reads the paragraphs and tables of a Word paper.

    Each non-blank paragraph becomes one line, so numbered questions stay
    at the start of a line. Tables follow the body, one row per line.
    """

    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = (".docx",)

    def extract(self, file_path: Path) -> ExtractedDocument:
        self._check_readable(file_path)

        try:
            word_doc = Document(str(file_path))
        except PackageNotFoundError as e:
            raise ExtractionError("Not a readable .docx package", file_path, cause=e) from e
        except Exception as e:
            raise ExtractionError(f"python-docx failed: {e}", file_path, cause=e) from e

        lines = [para.text for para in word_doc.paragraphs if para.text.strip()]
        for table in word_doc.tables:
            lines.extend(self._table_lines(table))

        return self._to_document("\n".join(lines), file_path)

    @staticmethod
    def _table_lines(table: Table) -> list[str]:
        lines: list[str] = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                lines.append(" | ".join(cells))
        return lines
