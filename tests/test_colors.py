"""Tests for pushpuzzle.ui.colors – palette, tile glyphs and color blending."""

from __future__ import annotations

import pytest

from pushpuzzle.ui.colors import TILE_GLYPHS, BoardColors, blend_hex


# ===========================================================================
# BoardColors – constants exist
# ===========================================================================

class TestBoardColors:
    @pytest.mark.parametrize(
        "name", ["BG_TOP", "PRIMARY", "FLOOR", "WALL", "TARGET", "BOX", "BOX_ON_TARGET", "PLAYER"]
    )
    def test_tile_colors_are_hex(self, name):
        value = getattr(BoardColors, name)
        assert value.startswith("#")
        assert len(value) == 7

    def test_box_states_differ(self):
        assert BoardColors.BOX != BoardColors.BOX_ON_TARGET


class TestTileGlyphs:
    def test_every_piece_has_a_glyph(self):
        assert set(TILE_GLYPHS) == {"wall", "target", "box", "player"}
        assert all(TILE_GLYPHS.values())

    def test_glyphs_distinct(self):
        assert len(set(TILE_GLYPHS.values())) == len(TILE_GLYPHS)


# ===========================================================================
# blend_hex – tile outlines
# ===========================================================================

class TestBlendHex:
    def test_outline_darkens_fill(self):
        assert blend_hex("#FFFFFF", "#000000", 0.12) == "#E0E0E0"

    @pytest.mark.parametrize(
        "name", ["FLOOR", "WALL", "TARGET", "BOX", "BOX_ON_TARGET"]
    )
    def test_outline_is_darker_than_tile(self, name):
        fill = getattr(BoardColors, name)
        outline = blend_hex(fill, "#000000", 0.12)
        assert outline != fill
        assert int(outline[1:], 16) < int(fill[1:], 16)

    def test_malformed_fill_returned_unchanged(self):
        assert blend_hex("#FFF", "#000000", 0.12) == "#FFF"
