"""
Glyph collection module.

Walks the text runs of every page, discards empty or too-short runs and records
the surviving runs with rounded font size and position, while tallying the
document-wide font size histogram.
"""

import logging
import math
from typing import Iterable, Optional, Sequence

from .config import ExtractionSettings, DEFAULT_SETTINGS
from .data_models import TextRun, PageLayout, GlyphRun, ExtractionState

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def _finite(value) -> float:
    """Coerce to float; missing, non-numeric, NaN and infinite values read as 0."""
    try:
        number = float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _transform_component(transform: Optional[Sequence[float]], index: int) -> float:
    if not transform or len(transform) <= index:
        return 0.0
    return _finite(transform[index])


def resolve_font_size(run: TextRun, default_font_size: int = 12) -> int:
    """
    Derive a font size for a run: horizontal scale, else run height, else default.

    Args:
        run: Raw text run
        default_font_size: Size used when neither transform nor height is usable

    Returns:
        Rounded font size
    """
    scale = _transform_component(run.transform, 0)
    height = _finite(run.height)
    return round_half_up(scale or height or default_font_size)


def collect_page(page: PageLayout, state: ExtractionState,
                 settings: ExtractionSettings = DEFAULT_SETTINGS) -> int:
    """
    Collect the surviving glyph runs of a single page into the state.

    Args:
        page: Page layout with raw text runs
        state: Extraction state receiving glyphs and histogram counts
        settings: Pipeline settings

    Returns:
        Number of glyph runs collected from the page
    """
    collected = 0

    for run in page.runs:
        text = run.text.strip() if isinstance(run.text, str) else ""
        if not text or len(text) < settings.min_run_length:
            continue

        font_size = resolve_font_size(run, settings.default_font_size)
        glyph = GlyphRun(
            text=text,
            font_size=font_size,
            x=round_half_up(_transform_component(run.transform, 4)),
            y=round_half_up(_transform_component(run.transform, 5)),
            page=page.page_number
        )

        # Track font usage for body text detection
        state.histogram.add(font_size, len(text))
        state.glyphs.append(glyph)
        collected += 1

    return collected


def collect_glyphs(pages: Iterable[PageLayout], state: ExtractionState,
                   settings: ExtractionSettings = DEFAULT_SETTINGS) -> ExtractionState:
    """
    Collect glyph runs from all pages, in page order.

    Pages are pulled one at a time so a lazy reader never has more than one
    page in flight.

    Args:
        pages: Iterable of page layouts
        state: Extraction state to fill
        settings: Pipeline settings

    Returns:
        The same state, filled with glyphs and histogram counts
    """
    for page in pages:
        collected = collect_page(page, state, settings)
        state.stats.pages_read += 1

        if page.page_number <= 5 or page.page_number % 10 == 0:
            logger.debug(f"Page {page.page_number}: {collected} text items")

    state.stats.glyph_runs = len(state.glyphs)
    logger.info(f"Total text items: {state.stats.glyph_runs} from {state.stats.pages_read} pages")
    if not state.histogram.is_empty():
        logger.info(f"Font sizes found: {', '.join(str(s) for s in reversed(state.histogram.sizes))}")

    return state
