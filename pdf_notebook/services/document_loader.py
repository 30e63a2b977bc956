"""Document loading service for PDF processing."""
import logging
import re
from pathlib import Path
from typing import Union

import fitz  # PyMuPDF

from pdf_notebook.models.document import Document, PageText

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")


class DocumentLoadError(Exception):
    """The PDF could not be opened or read."""


def normalize_page_text(text: str) -> str:
    """Collapse internal whitespace runs to single spaces and trim."""
    return WHITESPACE.sub(" ", text or "").strip()


class DocumentLoader:
    """Extracts per-page text from PDF files."""

    def load_file(self, path: Union[str, Path]) -> Document:
        """
        Load a PDF from disk.

        Args:
            path: Path to the PDF file

        Returns:
            Document with one PageText per page
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read PDF {path}: {e}")
            raise DocumentLoadError(f"Could not read {path}: {e}") from e
        return self.load_bytes(data, path.name)

    def load_bytes(self, data: bytes, filename: str = "document.pdf") -> Document:
        """
        Load a PDF from an in-memory buffer, e.g. an upload.

        Args:
            data: Raw PDF bytes
            filename: Name reported on the Document

        Returns:
            Document with extracted, whitespace-normalized page text

        Raises:
            DocumentLoadError: If the bytes are not a readable PDF
        """
        try:
            pdf_document = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error(f"Failed to open PDF {filename}: {e}")
            raise DocumentLoadError(f"Could not open {filename} as PDF: {e}") from e

        try:
            pages = [
                PageText(page=page_num + 1, text=normalize_page_text(pdf_document[page_num].get_text()))
                for page_num in range(len(pdf_document))
            ]
        except Exception as e:
            logger.error(f"Failed to extract text from {filename}: {e}", exc_info=True)
            raise DocumentLoadError(f"Could not extract text from {filename}: {e}") from e
        finally:
            pdf_document.close()

        logger.info(f"Loaded {filename}: {len(pages)} pages")
        return Document(filename=filename, pages=pages)
