"""
PDF outline inference engine.

Reconstructs a title and H1/H2/H3 heading outline from the positioned text
runs of a paginated document, using typographic signal only.
"""

from .data_models import TextRun, PageLayout, OutlineResult
from .extractor import OutlineExtractor, extract_outline
from .pdf_extractor import PDFLayoutReader, extract_outline_from_pdf

__version__ = "1.0.0"

__all__ = [
    "TextRun",
    "PageLayout",
    "OutlineResult",
    "OutlineExtractor",
    "extract_outline",
    "PDFLayoutReader",
    "extract_outline_from_pdf",
]
