"""
PDF text layout reading module with PyMuPDF integration.

This module validates source PDF files and yields the positioned text runs of
each page, one page at a time, in the shape consumed by the outline pipeline.
"""

import re
import unicodedata
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import fitz  # PyMuPDF

from .config import LARGE_DOCUMENT_PAGES, ExtractionSettings
from .data_models import PageLayout, TextRun, OutlineResult
from .extractor import OutlineExtractor
from .logging_config import (
    setup_logging, DocumentParseError, EmptyDocumentError, UnsupportedDocumentError
)

logger = setup_logging()


class PDFLayoutReader:
    """
    Reads the text layer of PDF files page by page.

    Handles input validation, Unicode normalization of span text and the
    conversion of PyMuPDF spans into transform-carrying text runs.
    """

    def __init__(self):
        """Initialize the PDF layout reader."""
        self.supported_extensions = {'.pdf'}
        self.large_document_pages = LARGE_DOCUMENT_PAGES

    def validate(self, pdf_path: Union[str, Path]) -> Path:
        """
        Check that the source file exists, is a PDF and is not empty.

        Args:
            pdf_path: Path to the PDF file

        Returns:
            Validated path

        Raises:
            FileNotFoundError: If the PDF file doesn't exist
            UnsupportedDocumentError: If the file is not a PDF
            EmptyDocumentError: If the file has zero bytes
        """
        pdf_path = Path(pdf_path)

        if not pdf_path.exists() or not pdf_path.is_file():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")

        if pdf_path.suffix.lower() not in self.supported_extensions:
            raise UnsupportedDocumentError(f"Unsupported file type: {pdf_path.suffix}")

        size = pdf_path.stat().st_size
        if size == 0:
            raise EmptyDocumentError(f"PDF file is empty: {pdf_path}")

        logger.info(f"File size: {size / 1024 / 1024:.2f} MB")
        return pdf_path

    def iter_page_layouts(self, pdf_path: Union[str, Path]) -> Iterator[PageLayout]:
        """
        Yield the text layout of each page, in page order.

        The document is opened when iteration starts, so load failures surface
        inside the consumer rather than at call time.

        Args:
            pdf_path: Path to the PDF file

        Yields:
            PageLayout objects with 1-based page numbers

        Raises:
            DocumentParseError: If the document cannot be opened
        """
        pdf_path = Path(pdf_path)

        try:
            doc = fitz.open(str(pdf_path))
        except Exception as e:
            raise DocumentParseError(f"Failed to open PDF {pdf_path.name}: {e}") from e

        with doc:
            page_count = doc.page_count
            logger.info(f"PDF loaded successfully - {page_count} pages")

            if page_count > self.large_document_pages:
                logger.warning(
                    f"PDF has more than {self.large_document_pages} pages, processing may take longer"
                )

            for page_index in range(page_count):
                page = doc[page_index]
                yield PageLayout(
                    page_number=page_index + 1,
                    runs=self._extract_page_runs(page)
                )

    def _extract_page_runs(self, page: fitz.Page) -> List[TextRun]:
        """
        Convert the text spans of a page into text runs.

        Args:
            page: PyMuPDF page object

        Returns:
            List of TextRun objects in content order
        """
        runs = []
        blocks = page.get_text("dict")

        for block in blocks.get("blocks", []):
            if "lines" not in block:
                continue  # Skip non-text blocks (images, etc.)

            for line in block["lines"]:
                direction = line.get("dir", (1.0, 0.0))
                for span in line.get("spans", []):
                    text = self._normalize_text(span.get("text", ""))
                    if not text:
                        continue
                    runs.append(TextRun(
                        text=text,
                        transform=self._span_transform(span, direction),
                        height=self._span_height(span)
                    ))

        return runs

    def _span_transform(self, span: Dict[str, Any], direction) -> tuple:
        """
        Build the affine text matrix of a span from its size, direction and origin.

        Args:
            span: PyMuPDF text span dictionary
            direction: Writing direction (cos, sin) of the enclosing line

        Returns:
            6-tuple (a, b, c, d, e, f)
        """
        size = float(span.get("size", 0.0) or 0.0)
        cos, sin = direction
        origin = span.get("origin")
        if origin is None:
            bbox = span.get("bbox", (0.0, 0.0, 0.0, 0.0))
            origin = (bbox[0], bbox[3])

        return (size * cos, size * sin, -size * sin, size * cos, float(origin[0]), float(origin[1]))

    def _span_height(self, span: Dict[str, Any]) -> float:
        bbox = span.get("bbox")
        if not bbox:
            return 0.0
        return max(0.0, float(bbox[3]) - float(bbox[1]))

    def _normalize_text(self, text: str) -> str:
        """
        Normalize span text while preserving special characters.

        Args:
            text: Raw text from PDF

        Returns:
            Normalized text; leading/trailing whitespace is kept for the
            collector to trim
        """
        if not text:
            return ""

        # Apply Unicode NFC normalization to handle composed vs decomposed characters
        text = unicodedata.normalize('NFC', text)

        # Replace runs of whitespace with a single space
        text = re.sub(r'\s+', ' ', text)

        # Remove zero-width characters that might interfere with processing
        for char in ('\u200b', '\u200c', '\u200d', '\ufeff'):
            text = text.replace(char, '')

        return text


def extract_outline_from_pdf(pdf_path: Union[str, Path],
                             settings: Optional[ExtractionSettings] = None) -> OutlineResult:
    """
    Convenience function to extract the outline of a PDF file.

    Input errors (missing, empty or non-PDF file) are raised before the
    pipeline runs; every later failure yields the error outline.

    Args:
        pdf_path: Path to the PDF file
        settings: Optional pipeline settings

    Returns:
        OutlineResult for the document
    """
    reader = PDFLayoutReader()
    pdf_path = reader.validate(pdf_path)
    extractor = OutlineExtractor(settings)
    return extractor.extract(reader.iter_page_layouts(pdf_path), source=pdf_path.name)
