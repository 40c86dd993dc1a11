"""
Font hierarchy module for outline inference.

This module infers the body text size from the document's font size histogram
and ranks the larger sizes into heading tiers, enabling consistent heading
classification across documents with varying font schemes.
"""

import logging
from functools import cmp_to_key
from typing import List

from .config import ExtractionSettings, DEFAULT_SETTINGS
from .data_models import FontHistogram, HeadingTiers

logger = logging.getLogger(__name__)


def rank_font_sizes(histogram: FontHistogram,
                    frequency_weight: float = DEFAULT_SETTINGS.frequency_weight) -> List[int]:
    """
    Rank distinct font sizes, larger first, with a soft frequency tie-break.

    The comparator is ``(b - a) + (count(a) - count(b)) * frequency_weight``:
    magnitude dominates, but sizes close in magnitude may swap when their
    character counts differ a lot. It is a pairwise nudge, not a sort key.

    Args:
        histogram: Document font size histogram
        frequency_weight: Weight of the character count difference

    Returns:
        List of font sizes in ranked order
    """
    def compare(a: int, b: int) -> float:
        size_weight = b - a
        freq_weight = (histogram.count(a) - histogram.count(b)) * frequency_weight
        return size_weight + freq_weight

    return sorted(histogram.sizes, key=cmp_to_key(compare))


def detect_body_size(histogram: FontHistogram, ranked_sizes: List[int]) -> int:
    """
    Find the font size with the highest character count.

    Ties go to the size that comes first in ranked order.

    Args:
        histogram: Document font size histogram
        ranked_sizes: Output of rank_font_sizes

    Returns:
        Body text font size
    """
    if not ranked_sizes:
        raise ValueError("Cannot detect body size of an empty font histogram")

    body_size = ranked_sizes[0]
    for size in ranked_sizes[1:]:
        if histogram.count(size) > histogram.count(body_size):
            body_size = size
    return body_size


def build_heading_tiers(histogram: FontHistogram,
                        settings: ExtractionSettings = DEFAULT_SETTINGS) -> HeadingTiers:
    """
    Build the size-to-level mapping for a document.

    Args:
        histogram: Document font size histogram
        settings: Pipeline settings

    Returns:
        HeadingTiers with the body size and up to four heading sizes
    """
    ranked_sizes = rank_font_sizes(histogram, settings.frequency_weight)
    body_size = detect_body_size(histogram, ranked_sizes)

    logger.info(f"Body text size detected: {body_size}px")

    # Identify heading sizes (larger than body text)
    heading_sizes = [size for size in ranked_sizes if size > body_size]
    heading_sizes = heading_sizes[:settings.max_heading_tiers]

    tiers = HeadingTiers(body_size=body_size, sizes=tuple(heading_sizes))

    logger.info(
        f"Heading sizes: H1={tiers.h1_size}, H2={tiers.h2_size}, "
        f"H3={tiers.h3_size}, H4={tiers.h4_size}"
    )
    if not tiers.has_tiers():
        logger.debug("No font size above body text, relying on heuristic classification only")

    return tiers
