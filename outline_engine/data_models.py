"""
Core data models for the outline inference engine.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Any, Optional, Set, Sequence


HEADING_LEVELS = ("H1", "H2", "H3")


@dataclass
class TextRun:
    """
    A positioned piece of text as emitted by a document's text layer.

    The transform is the 2D affine matrix ``(a, b, c, d, e, f)`` of the run:
    ``a`` is the horizontal scale (font size proxy), ``e``/``f`` the x/y
    translation.
    """
    text: str
    transform: Sequence[float] = (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    height: float = 0.0


@dataclass
class PageLayout:
    """
    Text layout of a single page, as produced by a document reader.
    """
    page_number: int  # 1-based
    runs: List[TextRun] = field(default_factory=list)


@dataclass(frozen=True)
class GlyphRun:
    """
    A text run that survived collection, with rounded geometry.
    """
    text: str
    font_size: int
    x: int
    y: int
    page: int


@dataclass
class FontHistogram:
    """
    Cumulative character counts per rounded font size across a document.
    """
    counts: Dict[int, int] = field(default_factory=dict)

    def add(self, font_size: int, char_count: int) -> None:
        """Accumulate characters rendered at the given font size."""
        self.counts[font_size] = self.counts.get(font_size, 0) + char_count

    def count(self, font_size: int) -> int:
        return self.counts.get(font_size, 0)

    @property
    def sizes(self) -> List[int]:
        """Distinct font sizes in ascending order."""
        return sorted(self.counts)

    def is_empty(self) -> bool:
        return not self.counts


@dataclass(frozen=True)
class HeadingTiers:
    """
    Mapping of heading font sizes to outline levels.

    ``sizes`` holds up to four font sizes strictly larger than the body size,
    in ranked order. Positions map to H1, H2, H3 and H3 (the fourth tier
    folds into H3). Absent tiers read as ``None``.
    """
    body_size: int
    sizes: Tuple[int, ...] = ()

    def _tier(self, index: int) -> Optional[int]:
        return self.sizes[index] if index < len(self.sizes) else None

    @property
    def h1_size(self) -> Optional[int]:
        return self._tier(0)

    @property
    def h2_size(self) -> Optional[int]:
        return self._tier(1)

    @property
    def h3_size(self) -> Optional[int]:
        return self._tier(2)

    @property
    def h4_size(self) -> Optional[int]:
        return self._tier(3)

    def has_tiers(self) -> bool:
        return bool(self.sizes)


@dataclass
class Line:
    """
    Glyph runs sharing a page and vertical band, merged left to right.
    """
    text: str
    font_size: int
    page: int
    run_count: int = 1

    @property
    def is_isolated(self) -> bool:
        """True when the line consists of a single text run."""
        return self.run_count == 1


@dataclass
class HeadingCandidate:
    """
    A line that was assigned a heading level, before deduplication.
    """
    level: str
    text: str
    page: int
    font_size: int

    def to_outline_entry(self) -> Dict[str, Any]:
        """Emit the public outline shape (font size is internal only)."""
        return {
            'level': self.level,
            'text': self.text,
            'page': self.page
        }


@dataclass
class OutlineResult:
    """
    Final title and outline of a document.
    """
    title: str
    outline: List[Dict[str, Any]]
    error: Optional[str] = None
    timestamp: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary matching the output schema."""
        data: Dict[str, Any] = {
            'title': self.title,
            'outline': [
                {
                    'level': entry['level'],
                    'text': entry['text'],
                    'page': entry['page']
                }
                for entry in self.outline
            ]
        }
        if self.error is not None:
            data['error'] = self.error
            data['timestamp'] = self.timestamp
        return data

    def level_distribution(self) -> Dict[str, int]:
        """Count outline entries per heading level."""
        counts: Dict[str, int] = {}
        for entry in self.outline:
            counts[entry['level']] = counts.get(entry['level'], 0) + 1
        return {level: counts[level] for level in HEADING_LEVELS if level in counts}


@dataclass
class ExtractionStats:
    """
    Counters for a single extraction call.
    """
    pages_read: int = 0
    glyph_runs: int = 0
    lines: int = 0
    heading_candidates: int = 0
    kept_headings: int = 0
    processing_time: float = 0.0

    @property
    def processing_speed(self) -> float:
        """Calculate pages processed per second."""
        if self.processing_time == 0.0:
            return 0.0
        return self.pages_read / self.processing_time


@dataclass
class ExtractionState:
    """
    Per-document working state threaded through the pipeline stages.

    One instance is created for every extraction call and never shared, so
    independent documents can be processed concurrently.
    """
    glyphs: List[GlyphRun] = field(default_factory=list)
    histogram: FontHistogram = field(default_factory=FontHistogram)
    seen_texts: Set[str] = field(default_factory=set)
    title: str = ""
    stats: ExtractionStats = field(default_factory=ExtractionStats)

    def claim_title(self, text: str) -> bool:
        """Set the document title if none has been claimed yet."""
        if self.title:
            return False
        self.title = text
        return True
