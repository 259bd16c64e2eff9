"""Tests for glyph geometry utilities."""

import pytest

from bon_fonts.core.errors import MalformedFontError
from bon_fonts.core.geometry import (
    GlyphTransform,
    decompose_composites,
    has_outline,
    left_side_bearing,
    transform_glyphs,
)
from tests.conftest import build_font, composite_glyph, empty_glyph, rect_glyph


@pytest.fixture
def font():
    glyphs = {
        ".notdef": empty_glyph(),
        "space": empty_glyph(),
        "box": rect_glyph(100, 0, 500, 700),
        "boxes": composite_glyph("box", 200),
    }
    return build_font(glyphs, {0x20: "space", 0x41: "box", 0x42: "boxes"})


def bounds(font, name):
    glyph = font["glyf"][name]
    glyph.recalcBounds(font["glyf"])
    return glyph.xMin, glyph.yMin, glyph.xMax, glyph.yMax


def test_identity_transform_is_noop(font):
    """Test the identity transform changes nothing."""
    assert GlyphTransform().is_identity
    assert transform_glyphs(font, ["box"], GlyphTransform()) == 0
    assert bounds(font, "box") == (100, 0, 500, 700)


def test_transform_scales_then_offsets(font):
    """Test points are scaled before being offset."""
    count = transform_glyphs(font, ["box"], GlyphTransform(1.5, 2.0, 10, -20))

    assert count == 1
    assert bounds(font, "box") == (160, -20, 760, 1380)


def test_transform_skips_empty_glyphs(font):
    """Test glyphs without outlines are skipped."""
    assert transform_glyphs(font, ["space"], GlyphTransform(offset_x=50)) == 0


def test_transform_composite_moves_component_offset(font):
    """Test composite glyphs only move their component placement."""
    transform_glyphs(font, ["boxes"], GlyphTransform(2.0, 1.0))

    assert font["glyf"]["boxes"].components[0].x == 400
    assert bounds(font, "box") == (100, 0, 500, 700)


def test_decompose_composites(font):
    """Test composites are replaced by their outlines."""
    assert decompose_composites(font, ["box", "boxes"]) == 1

    glyph = font["glyf"]["boxes"]
    assert not glyph.isComposite()
    assert bounds(font, "boxes") == (300, 0, 700, 700)


def test_has_outline_and_left_side_bearing(font):
    """Test outline detection and side bearing."""
    assert has_outline(font, "box")
    assert not has_outline(font, "space")
    assert left_side_bearing(font, "box") == 100
    assert left_side_bearing(font, "space") == 0


def test_transform_requires_outlines(font):
    """Test fonts without outline tables are rejected."""
    del font["glyf"]
    del font["loca"]

    with pytest.raises(MalformedFontError):
        transform_glyphs(font, ["box"], GlyphTransform(2.0))
