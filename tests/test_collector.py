"""
Unit tests for glyph collection.
"""

import pytest

from outline_engine.collector import round_half_up, resolve_font_size, collect_page, collect_glyphs
from outline_engine.data_models import TextRun, PageLayout, GlyphRun, ExtractionState

from pdf_factory import run, page


class TestRoundHalfUp:
    """Test rounding of geometry values."""

    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-2.5) == -2

    def test_regular_rounding(self):
        assert round_half_up(2.4) == 2
        assert round_half_up(11.955) == 12
        assert round_half_up(-0.6) == -1


class TestResolveFontSize:
    """Test the font size fallback chain."""

    def test_uses_horizontal_scale(self):
        assert resolve_font_size(run("Heading", 17.6)) == 18

    def test_falls_back_to_height(self):
        text_run = TextRun(text="Rotated", transform=(0, 14, -14, 0, 10, 10), height=11.6)
        assert resolve_font_size(text_run) == 12

    def test_falls_back_to_default(self):
        text_run = TextRun(text="Degenerate", transform=(0, 0, 0, 0, 0, 0), height=0)
        assert resolve_font_size(text_run) == 12
        assert resolve_font_size(text_run, default_font_size=9) == 9

    def test_missing_transform(self):
        text_run = TextRun(text="No matrix", transform=None, height=10.2)
        assert resolve_font_size(text_run) == 10

    def test_non_numeric_transform(self):
        text_run = TextRun(text="Broken", transform=("a", "b"), height=0)
        assert resolve_font_size(text_run) == 12

    def test_negative_scale_is_kept(self):
        assert resolve_font_size(run("Mirrored", -12)) == -12


class TestCollectPage:
    """Test per-page collection."""

    def setup_method(self):
        self.state = ExtractionState()

    def test_trims_and_rounds(self):
        layout = page(3, run("  Hello  ", 14, x=100.4, y=700.5))

        collected = collect_page(layout, self.state)

        assert collected == 1
        assert self.state.glyphs == [GlyphRun(text="Hello", font_size=14, x=100, y=701, page=3)]

    def test_skips_empty_and_short_runs(self):
        layout = page(1, run("", 12), run("   ", 12), run("A", 12), run(" b ", 12), run("ok", 12))

        collect_page(layout, self.state)

        assert [g.text for g in self.state.glyphs] == ["ok"]
        assert self.state.histogram.counts == {12: 2}

    def test_skips_malformed_text(self):
        layout = PageLayout(page_number=1, runs=[TextRun(text=None), TextRun(text=42)])

        assert collect_page(layout, self.state) == 0
        assert self.state.histogram.is_empty()

    def test_histogram_counts_characters(self):
        layout = page(1, run("Hello", 14), run("World!", 14, y=650), run("Body text", 10, y=600))

        collect_page(layout, self.state)

        assert self.state.histogram.count(14) == 11
        assert self.state.histogram.count(10) == 9
        assert self.state.histogram.sizes == [10, 14]

    def test_missing_transform_positions_default_to_zero(self):
        layout = PageLayout(page_number=1, runs=[TextRun(text="Loose", transform=(), height=9)])

        collect_page(layout, self.state)

        glyph = self.state.glyphs[0]
        assert (glyph.x, glyph.y, glyph.font_size) == (0, 0, 9)


class TestCollectGlyphs:
    """Test whole-document collection."""

    def test_pages_are_pulled_in_order(self):
        pulled = []

        def lazy_pages():
            for number in (1, 2, 3):
                pulled.append(number)
                yield page(number, run(f"Page {number} text", 10))

        state = collect_glyphs(lazy_pages(), ExtractionState())

        assert pulled == [1, 2, 3]
        assert [g.page for g in state.glyphs] == [1, 2, 3]
        assert state.stats.pages_read == 3
        assert state.stats.glyph_runs == 3

    def test_empty_document(self):
        state = collect_glyphs([], ExtractionState())

        assert state.glyphs == []
        assert state.histogram.is_empty()
        assert state.stats.pages_read == 0

    def test_errors_from_page_source_propagate(self):
        def failing_pages():
            yield page(1, run("Fine text", 10))
            raise RuntimeError("page 2 unreadable")

        with pytest.raises(RuntimeError, match="page 2 unreadable"):
            collect_glyphs(failing_pages(), ExtractionState())


class TestNonFiniteGeometry:
    """Runs with NaN or infinite geometry are collected with safe values."""

    def test_nan_scale_falls_back_to_height(self):
        text_run = TextRun(text="Corrupt", transform=(float('nan'), 0, 0, 0, 72, 650), height=13.8)
        assert resolve_font_size(text_run) == 14

    def test_infinite_scale_falls_back_to_default(self):
        text_run = TextRun(text="Corrupt", transform=(float('inf'), 0, 0, 0, 72, 650))
        assert resolve_font_size(text_run) == 12

    def test_nan_height_falls_back_to_default(self):
        text_run = TextRun(text="Corrupt", transform=(0, 0, 0, 0, 72, 650), height=float('nan'))
        assert resolve_font_size(text_run) == 12

    def test_infinite_position_reads_as_zero(self):
        state = ExtractionState()
        layout = PageLayout(page_number=1, runs=[
            TextRun(text="Far away", transform=(12, 0, 0, 12, float('inf'), float('-inf')))
        ])

        assert collect_page(layout, state) == 1
        assert state.glyphs == [GlyphRun(text="Far away", font_size=12, x=0, y=0, page=1)]
