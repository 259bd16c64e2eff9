"""Tests for glyph set merging."""

import pytest

from bon_fonts.config.fonts import KoreanAdjustments
from bon_fonts.core.errors import MalformedFontError
from bon_fonts.core.font_io import read_font
from bon_fonts.operations.korean import extract_korean_subset
from bon_fonts.operations.merge import (
    GlyphImporter,
    consolidate_font,
    merge_font_files,
    merge_glyph_sets,
)
from tests.conftest import build_font, empty_glyph, rect_glyph


def test_merge_base_wins_collisions(latin_font, korean_font):
    """Test colliding code points keep the base glyph and metrics."""
    merged, report = merge_glyph_sets(latin_font, korean_font)
    cmap = merged.getBestCmap()

    assert cmap[0x41] == "A"
    assert cmap[0xAC00] == "hangul"
    assert merged["hmtx"]["A"][0] == 600
    assert report.collisions == 3


def test_merge_adds_donor_codepoints(latin_font, korean_font):
    """Test every donor code point is mapped after the merge."""
    merged, report = merge_glyph_sets(latin_font, korean_font)
    cmap = merged.getBestCmap()

    assert set(cmap) == set(latin_font.getBestCmap()) | set(korean_font.getBestCmap())
    assert report.added == 4
    assert merged["hmtx"][cmap[0x3131]][0] == 1000


def test_merge_renames_clashing_glyph_names(latin_font, korean_font):
    """Test imported glyphs never overwrite base glyphs of the same name."""
    merged, _ = merge_glyph_sets(latin_font, korean_font)
    cmap = merged.getBestCmap()

    assert cmap[0x43] == "uniAC01"
    assert cmap[0xAC01] == "uniAC01.1"
    assert merged["hmtx"]["uniAC01"][0] == 600


def test_merge_keeps_aliases_and_components(latin_font, korean_font):
    """Test a shared donor glyph is imported once and components follow it."""
    merged, report = merge_glyph_sets(latin_font, korean_font)
    cmap = merged.getBestCmap()

    assert cmap[0xAC02] == "uniAC00"
    composite = merged["glyf"]["uniAC01.1"]
    assert composite.isComposite()
    assert [c.glyphName for c in composite.components] == ["uniAC00"]
    assert report.imported == 4


def test_merge_drops_unreachable_glyphs(latin_font, korean_font):
    """Test consolidation removes glyphs no code point reaches."""
    merged, report = merge_glyph_sets(latin_font, korean_font)
    order = merged.getGlyphOrder()

    assert "unused" not in order
    assert "A.1" not in order
    assert order[0] == ".notdef"
    assert report.glyphs_after < report.glyphs_before
    assert report.glyphs_after == len(order)


def test_merge_does_not_modify_inputs(latin_font, korean_font):
    """Test both inputs keep their cmaps."""
    latin_cmap = dict(latin_font.getBestCmap())
    korean_cmap = dict(korean_font.getBestCmap())

    merge_glyph_sets(latin_font, korean_font)

    assert latin_font.getBestCmap() == latin_cmap
    assert korean_font.getBestCmap() == korean_cmap


def test_merge_ors_capability_bits(latin_font, korean_font):
    """Test donor code page and Unicode range bits are added to the base."""
    latin_font["OS/2"].ulCodePageRange1 = (1 << 0) | (1 << 20)
    korean_font["OS/2"].ulCodePageRange1 = 1 << 19
    latin_font["OS/2"].ulUnicodeRange2 = 1 << 3
    korean_font["OS/2"].ulUnicodeRange2 = 1 << 24

    merged, _ = merge_glyph_sets(latin_font, korean_font)
    os2 = merged["OS/2"]

    assert os2.ulCodePageRange1 == (1 << 0) | (1 << 19) | (1 << 20)
    assert os2.ulUnicodeRange2 == (1 << 3) | (1 << 24)


def test_merge_scales_donor_to_base_upm(latin_font):
    """Test a donor with a different units-per-em is rescaled first."""
    donor = build_font(
        {".notdef": empty_glyph(), "uniAC00": rect_glyph(200, 0, 1800, 1600)},
        {0xAC05: "uniAC00"},
        widths={".notdef": 2000, "uniAC00": 2000},
        upm=2000,
    )

    merged, _ = merge_glyph_sets(latin_font, donor)
    name = merged.getBestCmap()[0xAC05]

    assert merged["head"].unitsPerEm == 1000
    assert merged["hmtx"][name][0] == 1000


def test_merge_keeps_mono_width_of_rescaled_subset(latin_font):
    """Test a forced width survives when donor and base units-per-em differ."""
    donor = build_font(
        {".notdef": empty_glyph(), "uniAC00": rect_glyph(200, 0, 1800, 1600)},
        {0xAC05: "uniAC00"},
        widths={".notdef": 2000, "uniAC00": 2000},
        upm=2000,
    )
    adjustments = KoreanAdjustments(force_mono_width=True)

    subset, _ = extract_korean_subset(donor, adjustments, mono_width=1200, units_per_em=1000)
    merged, _ = merge_glyph_sets(latin_font, subset)
    name = merged.getBestCmap()[0xAC05]

    assert subset["head"].unitsPerEm == 1000
    assert merged["hmtx"][name][0] == 1200


def test_merge_requires_cmap(latin_font, korean_font):
    """Test a donor without cmap is rejected."""
    del korean_font["cmap"]

    with pytest.raises(MalformedFontError):
        merge_glyph_sets(latin_font, korean_font)


def test_merge_requires_truetype_base(latin_font, korean_font):
    """Test a base without glyf outlines is rejected."""
    del latin_font["glyf"]
    del latin_font["loca"]

    with pytest.raises(MalformedFontError):
        merge_glyph_sets(latin_font, korean_font)


def test_glyph_importer_unique_names(latin_font, korean_font):
    """Test generated names skip names already in use."""
    importer = GlyphImporter(korean_font, latin_font)
    importer.names.add("A.1")

    assert importer.unique_name("A") == "A.2"
    assert importer.unique_name("fresh") == "fresh"


def test_consolidate_font_keeps_names(latin_font):
    """Test consolidation preserves glyph names and name records."""
    names_before = len(latin_font["name"].names)

    count = consolidate_font(latin_font)

    assert count == len(latin_font.getGlyphOrder())
    assert "hangul" in latin_font.getGlyphOrder()
    assert len(latin_font["name"].names) == names_before


def test_merge_font_files(latin_font, korean_font, temp_font_dir):
    """Test the file-level merge writes the merged font."""
    base = temp_font_dir / "latin.ttf"
    donor = temp_font_dir / "korean.ttf"
    output = temp_font_dir / "merged.ttf"
    latin_font.save(base)
    korean_font.save(donor)

    report = merge_font_files(base, donor, output)

    assert report.added == 4
    assert 0xAC01 in read_font(output).getBestCmap()
