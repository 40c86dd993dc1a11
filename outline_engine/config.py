# outline_engine/config.py
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid integer for {name}: {raw!r}, using {default}")
        return default


# Environment variable overrides, fallback to bundled defaults
LOG_LEVEL = os.getenv("OUTLINE_LOG_LEVEL", "INFO")

MAX_WORKERS = max(1, _env_int("OUTLINE_MAX_WORKERS", 1))

SCHEMA_PATH = os.getenv(
    "OUTLINE_SCHEMA_PATH",
    os.path.join(os.path.dirname(__file__), "schema", "output_schema.json")
)

# Documents above this page count get a "may take longer" warning
LARGE_DOCUMENT_PAGES = _env_int("OUTLINE_LARGE_DOCUMENT_PAGES", 50)


@dataclass(frozen=True)
class ExtractionSettings:
    """
    Tunable constants of the outline inference pipeline.

    The defaults are the tuned heuristics; a settings object is
    shared read-only across extractions.
    """
    # Glyph collection
    min_run_length: int = 2
    default_font_size: int = 12

    # Font hierarchy
    frequency_weight: float = 0.05
    max_heading_tiers: int = 4

    # Line assembly
    line_band: int = 3
    min_line_length: int = 3

    # Heading classification
    title_max_length: int = 100
    heuristic_min_length: int = 5
    heuristic_max_length: int = 150
    reasonable_max_length: int = 100
    h1_size_margin: int = 3
    h2_size_margin: int = 1

    # Deduplication
    duplicate_length_tolerance: int = 10


DEFAULT_SETTINGS = ExtractionSettings()
