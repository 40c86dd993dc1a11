"""
Heading classification module.

Decides for each assembled line whether it is a heading and at what level.
Font size tiers take precedence; when they are inconclusive a typographic
heuristic (capitalization, numbering, punctuation, isolation) is applied.
The first line promoted to H1 under the title length cap becomes the title.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .config import ExtractionSettings, DEFAULT_SETTINGS
from .data_models import Line, HeadingTiers, HeadingCandidate, ExtractionState
from .line_assembler import is_unseen

logger = logging.getLogger(__name__)

# Numbered sections such as "1 Introduction" or "2. Methods"
NUMBERED_PATTERN = re.compile(r'^[0-9]+\.?\s')
STARTS_UPPERCASE_PATTERN = re.compile(r'^[A-Z]')
TRAILING_PUNCTUATION = '.!?;,'


@dataclass(frozen=True)
class HeuristicSignals:
    """
    Boolean typographic signals of a line.
    """
    reasonable_length: bool
    starts_uppercase: bool
    all_caps: bool
    no_trailing_punctuation: bool
    numbered: bool
    isolated: bool

    @property
    def qualifies(self) -> bool:
        """Whether the line looks like a heading regardless of its size."""
        return self.reasonable_length and (
            self.all_caps
            or self.numbered
            or (self.starts_uppercase and self.no_trailing_punctuation and self.isolated)
        )


def compute_signals(line: Line, settings: ExtractionSettings = DEFAULT_SETTINGS) -> HeuristicSignals:
    text = line.text
    return HeuristicSignals(
        reasonable_length=settings.heuristic_min_length <= len(text) <= settings.reasonable_max_length,
        starts_uppercase=bool(STARTS_UPPERCASE_PATTERN.match(text)),
        all_caps=text == text.upper() and len(text) > 2,
        no_trailing_punctuation=not text or text[-1] not in TRAILING_PUNCTUATION,
        numbered=bool(NUMBERED_PATTERN.match(text)),
        isolated=line.is_isolated
    )


def classify_by_size(line: Line, tiers: HeadingTiers, state: ExtractionState,
                     settings: ExtractionSettings = DEFAULT_SETTINGS) -> Optional[str]:
    """
    Assign a level from the heading size tiers.

    Args:
        line: Line to classify
        tiers: Heading size tiers of the document
        state: Extraction state (title may be claimed)
        settings: Pipeline settings

    Returns:
        "H1", "H2", "H3" or None when no tier applies
    """
    size = line.font_size
    h1, h2, h3, h4 = tiers.h1_size, tiers.h2_size, tiers.h3_size, tiers.h4_size

    if h1 is not None and size >= h1:
        if len(line.text) < settings.title_max_length:
            state.claim_title(line.text)
        return 'H1'
    if h2 is not None and h2 <= size < h1:
        return 'H2'
    if h3 is not None and h3 <= size < h2:
        return 'H3'
    if h4 is not None and h4 <= size < h3:
        return 'H3'  # fourth tier folds into H3
    return None


def classify_by_heuristics(line: Line, tiers: HeadingTiers, state: ExtractionState,
                           settings: ExtractionSettings = DEFAULT_SETTINGS) -> Optional[str]:
    """
    Assign a level from typographic signals when size tiers are inconclusive.

    Only lines strictly between the heuristic length bounds are considered.
    Qualifying lines are leveled by how far their size exceeds body size.

    Returns:
        "H1", "H2", "H3" or None
    """
    if not settings.heuristic_min_length < len(line.text) < settings.heuristic_max_length:
        return None

    signals = compute_signals(line, settings)
    if not signals.qualifies:
        return None

    size = line.font_size
    body_size = tiers.body_size

    if size >= body_size + settings.h1_size_margin:
        state.claim_title(line.text)
        return 'H1'
    if size >= body_size + settings.h2_size_margin:
        return 'H2'
    if size >= body_size or signals.all_caps or signals.numbered:
        return 'H3'
    return None


def classify_line(line: Line, tiers: HeadingTiers, state: ExtractionState,
                  settings: ExtractionSettings = DEFAULT_SETTINGS) -> Optional[HeadingCandidate]:
    """
    Classify a single line.

    Returns:
        HeadingCandidate, or None if the line is not a heading
    """
    level = classify_by_size(line, tiers, state, settings)

    if level is None:
        level = classify_by_heuristics(line, tiers, state, settings)

    if level is None or len(line.text) < settings.min_line_length:
        return None

    return HeadingCandidate(
        level=level,
        text=line.text,
        page=line.page,
        font_size=line.font_size
    )


def classify_lines(lines: List[Line], tiers: HeadingTiers, state: ExtractionState,
                   settings: ExtractionSettings = DEFAULT_SETTINGS) -> List[HeadingCandidate]:
    """
    Classify all lines of a document in order.

    A line whose lowercase text was already accepted as a heading is skipped,
    so the first occurrence wins.

    Args:
        lines: Assembled lines in first-seen order
        tiers: Heading size tiers of the document
        state: Extraction state (seen texts and title are updated)
        settings: Pipeline settings

    Returns:
        Heading candidates in discovery order
    """
    candidates = []

    for line in lines:
        if not is_unseen(line, state.seen_texts):
            continue

        candidate = classify_line(line, tiers, state, settings)
        if candidate is None:
            continue

        state.seen_texts.add(candidate.text.lower())
        candidates.append(candidate)
        logger.debug(f"{candidate.level} on page {candidate.page}: '{candidate.text[:50]}'")

    state.stats.lines = len(lines)
    state.stats.heading_candidates = len(candidates)
    logger.info(f"Found {len(candidates)} potential headings")

    return candidates
