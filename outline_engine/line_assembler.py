"""
Line assembly module.

Groups glyph runs into visual lines by page and a quantized vertical
coordinate, orders each line left to right and merges it into one string.
"""

import logging
from typing import Dict, List, Tuple, Iterable, Set

from .collector import round_half_up
from .config import ExtractionSettings, DEFAULT_SETTINGS
from .data_models import GlyphRun, Line

logger = logging.getLogger(__name__)


def line_key(glyph: GlyphRun, band: int = DEFAULT_SETTINGS.line_band) -> Tuple[int, int]:
    """
    Compute the grouping key of a glyph: its page and quantized y position.

    Glyphs within the same ``band``-unit vertical band share a key, which
    absorbs baseline jitter from mixed-size text on one line.
    """
    return glyph.page, round_half_up(glyph.y / band) * band


def group_glyphs(glyphs: Iterable[GlyphRun],
                 band: int = DEFAULT_SETTINGS.line_band) -> Dict[Tuple[int, int], List[GlyphRun]]:
    """
    Group glyphs by line key, keeping groups in first-seen order.
    """
    groups: Dict[Tuple[int, int], List[GlyphRun]] = {}
    for glyph in glyphs:
        groups.setdefault(line_key(glyph, band), []).append(glyph)
    return groups


def merge_line(members: List[GlyphRun]) -> Line:
    """
    Merge the glyphs of one visual line.

    Args:
        members: Glyph runs sharing a line key

    Returns:
        Line with joined text, rounded mean font size and first member's page
    """
    ordered = sorted(members, key=lambda g: g.x)

    text = ' '.join(g.text for g in ordered).strip()
    avg_font_size = sum(g.font_size for g in ordered) / len(ordered)

    return Line(
        text=text,
        font_size=round_half_up(avg_font_size),
        page=ordered[0].page,
        run_count=len(ordered)
    )


def assemble_lines(glyphs: List[GlyphRun],
                   settings: ExtractionSettings = DEFAULT_SETTINGS) -> List[Line]:
    """
    Assemble glyph runs into lines, dropping lines that are too short.

    Args:
        glyphs: Glyph runs of the whole document, in collection order
        settings: Pipeline settings

    Returns:
        Lines in first-seen order
    """
    groups = group_glyphs(glyphs, settings.line_band)
    logger.info(f"{len(groups)} text lines detected")

    lines = []
    for members in groups.values():
        line = merge_line(members)
        if len(line.text) < settings.min_line_length:
            continue
        lines.append(line)

    return lines


def is_unseen(line: Line, seen_texts: Set[str]) -> bool:
    """True unless the line's lowercase text was already accepted."""
    return line.text.lower() not in seen_texts
