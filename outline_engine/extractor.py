"""
Outline extraction pipeline.

Runs the five stages (glyph collection, font hierarchy, line assembly,
heading classification, outline assembly) over the page layouts of one
document. The extraction never raises: any failure is converted into the
fixed error outline.
"""

import time
from typing import Iterable, Optional

from .collector import collect_glyphs
from .config import ExtractionSettings, DEFAULT_SETTINGS
from .data_models import PageLayout, OutlineResult, ExtractionState
from .font_hierarchy import build_heading_tiers
from .heading_classifier import classify_lines
from .line_assembler import assemble_lines
from .logging_config import setup_logging, handle_processing_error
from .outline import assemble_outline, empty_document_result, error_result

logger = setup_logging()


class OutlineExtractor:
    """
    Infers a title and heading outline from positioned text runs.

    The extractor holds only read-only settings; all working state is created
    per call, so one instance can serve concurrent extractions.
    """

    def __init__(self, settings: Optional[ExtractionSettings] = None):
        """
        Initialize the outline extractor.

        Args:
            settings: Pipeline settings, defaults to DEFAULT_SETTINGS
        """
        self.settings = settings or DEFAULT_SETTINGS

    def extract(self, pages: Iterable[PageLayout], source: str = "<document>") -> OutlineResult:
        """
        Extract the outline of a document.

        Args:
            pages: Page layouts in page order; may be a lazy iterator that
                loads the document on first use
            source: Document name used in log messages

        Returns:
            OutlineResult with a non-empty title and outline
        """
        start_time = time.time()
        logger.info(f"Starting outline analysis: {source}")

        try:
            result, state = self._run_pipeline(pages)
        except Exception as e:
            processing_time = time.time() - start_time
            handle_processing_error(source, e, logger)
            logger.info(f"Returning error outline after {processing_time * 1000:.0f}ms")
            return error_result(e)
        finally:
            # A suspended page generator keeps its document open
            close = getattr(pages, 'close', None)
            if callable(close):
                close()

        state.stats.processing_time = time.time() - start_time
        self._log_summary(result, state)
        return result

    def _run_pipeline(self, pages: Iterable[PageLayout]):
        state = ExtractionState()

        # Step 1: Collect glyph runs and the font size histogram
        collect_glyphs(pages, state, self.settings)

        if not state.glyphs:
            logger.warning("No text found in document, returning placeholder outline")
            return empty_document_result(), state

        # Step 2: Infer body size and heading tiers
        tiers = build_heading_tiers(state.histogram, self.settings)

        # Step 3: Group glyph runs into lines
        lines = assemble_lines(state.glyphs, self.settings)

        # Step 4: Classify headings
        candidates = classify_lines(lines, tiers, state, self.settings)

        # Step 5: Deduplicate, order and apply fallbacks
        result = assemble_outline(candidates, state.title, self.settings)
        state.stats.kept_headings = len(result.outline)

        return result, state

    def _log_summary(self, result: OutlineResult, state: ExtractionState) -> None:
        stats = state.stats
        logger.info(f"Extraction complete in {stats.processing_time * 1000:.0f}ms")
        logger.info(f"Title: \"{result.title}\"")
        logger.info(f"Processing speed: {stats.processing_speed:.1f} pages/second")
        logger.info(f"Outline items: {len(result.outline)}")

        distribution = result.level_distribution()
        logger.info(
            "Heading distribution: "
            + ', '.join(f"{level}:{count}" for level, count in distribution.items())
        )


def extract_outline(pages: Iterable[PageLayout],
                    settings: Optional[ExtractionSettings] = None) -> OutlineResult:
    """
    Convenience function to extract the outline of a document.

    Args:
        pages: Page layouts in page order
        settings: Optional pipeline settings

    Returns:
        OutlineResult with a non-empty title and outline
    """
    extractor = OutlineExtractor(settings)
    return extractor.extract(pages)
