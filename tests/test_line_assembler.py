"""
Unit tests for line assembly.
"""

from outline_engine.config import ExtractionSettings
from outline_engine.data_models import GlyphRun, Line
from outline_engine.line_assembler import line_key, group_glyphs, merge_line, assemble_lines, is_unseen


def glyph(text, size=12, x=72, y=700, page=1):
    return GlyphRun(text=text, font_size=size, x=x, y=y, page=page)


class TestLineKey:
    """Test vertical quantization."""

    def test_nearby_baselines_share_a_band(self):
        assert line_key(glyph("a", y=99)) == line_key(glyph("b", y=100)) == (1, 99)

    def test_distant_baselines_split(self):
        assert line_key(glyph("a", y=100)) != line_key(glyph("b", y=102))

    def test_page_is_part_of_key(self):
        assert line_key(glyph("a", page=1)) != line_key(glyph("a", page=2))

    def test_negative_coordinates(self):
        assert line_key(glyph("a", y=-4)) == (1, -3)

    def test_custom_band(self):
        assert line_key(glyph("a", y=100), band=10) == (1, 100)
        assert line_key(glyph("a", y=104), band=10) == (1, 100)


class TestMergeLine:
    """Test merging glyphs of one line."""

    def test_orders_left_to_right(self):
        line = merge_line([glyph("World", x=200), glyph("Hello", x=50)])

        assert line.text == "Hello World"
        assert line.run_count == 2
        assert not line.is_isolated

    def test_rounded_mean_font_size(self):
        line = merge_line([glyph("Mixed", size=12), glyph("sizes", size=15, x=120)])

        assert line.font_size == 14

    def test_single_glyph_is_isolated(self):
        line = merge_line([glyph("Alone", page=4)])

        assert line == Line(text="Alone", font_size=12, page=4, run_count=1)
        assert line.is_isolated


class TestAssembleLines:
    """Test whole-document line assembly."""

    def test_groups_in_first_seen_order(self):
        glyphs = [
            glyph("Second", y=500),
            glyph("First", y=700),
            glyph("line", x=150, y=501),
        ]

        lines = assemble_lines(glyphs)

        assert [line.text for line in lines] == ["Second line", "First"]

    def test_same_position_on_different_pages(self):
        lines = assemble_lines([glyph("Page one", page=1), glyph("Page two", page=2)])

        assert [(line.text, line.page) for line in lines] == [("Page one", 1), ("Page two", 2)]

    def test_drops_short_lines(self):
        lines = assemble_lines([glyph("ab", y=700), glyph("abc", y=600)])

        assert [line.text for line in lines] == ["abc"]

    def test_min_line_length_setting(self):
        settings = ExtractionSettings(min_line_length=5)
        lines = assemble_lines([glyph("abcd", y=700), glyph("abcde", y=600)], settings)

        assert [line.text for line in lines] == ["abcde"]

    def test_no_glyphs(self):
        assert assemble_lines([]) == []

    def test_group_glyphs_keys(self):
        groups = group_glyphs([glyph("a1", y=700), glyph("a2", y=698), glyph("b1", y=600, page=2)])

        assert list(groups) == [(1, 699), (2, 600)]
        assert [g.text for g in groups[(1, 699)]] == ["a1", "a2"]


class TestIsUnseen:
    """Test case-insensitive first-seen filtering."""

    def test_case_insensitive(self):
        seen = {"chapter 1 overview"}

        assert not is_unseen(Line(text="Chapter 1 Overview", font_size=16, page=2), seen)
        assert is_unseen(Line(text="Chapter 2 Overview", font_size=16, page=2), seen)
