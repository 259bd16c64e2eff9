"""Tests for output font validation."""

from bon_fonts.operations.metadata import MetadataRequest, reconcile_metadata
from bon_fonts.pipeline.validate import (
    check_capabilities,
    check_coverage,
    check_style_consistency,
    validate_font,
    validate_outputs,
)
from tests.conftest import build_font, rect_glyph


def hybrid_font(hangul=1001, latin=95):
    """A font mapping the given number of Hangul syllables and ASCII characters."""
    glyphs = {".notdef": rect_glyph(0, 0, 500, 700), "g": rect_glyph(0, 0, 500, 700)}
    cmap = {0xAC00 + i: "g" for i in range(hangul)}
    cmap.update({0x20 + i: "g" for i in range(latin)})
    return build_font(glyphs, cmap)


def test_check_coverage():
    """Test Hangul and Basic Latin thresholds."""
    assert check_coverage(hybrid_font()) == []

    problems = check_coverage(hybrid_font(hangul=1000, latin=50))
    assert len(problems) == 2


def test_check_style_consistency():
    """Test fsSelection must agree with the style name and weight class."""
    font = reconcile_metadata(hybrid_font(), MetadataRequest("Bon Mono", "Bold Italic", weight_class=700))
    assert check_style_consistency(font) == []

    extra_bold = reconcile_metadata(hybrid_font(), MetadataRequest("Bon Mono", "ExtraBold", weight_class=800))
    assert check_style_consistency(extra_bold) == []

    font["OS/2"].fsSelection = 0x40
    assert len(check_style_consistency(font)) == 3


def test_check_capabilities():
    """Test monospace, code page and language tag checks."""
    font = hybrid_font()
    font["OS/2"].ulCodePageRange1 = 0
    assert len(check_capabilities(font)) == 3

    reconciled = reconcile_metadata(font, MetadataRequest("Bon Mono", "Regular"))
    assert check_capabilities(reconciled) == []


def test_validate_font_unreadable(tmp_path):
    """Test unreadable files are reported, not raised."""
    path = tmp_path / "broken.ttf"
    path.write_bytes(b"broken")

    assert validate_font(path)


def test_validate_outputs(tmp_path):
    """Test a directory of valid fonts passes."""
    family_dir = tmp_path / "Mono"
    family_dir.mkdir()
    font = reconcile_metadata(hybrid_font(), MetadataRequest("Bon Mono", "Regular"))
    font.save(family_dir / "Bon-Mono-Regular.ttf")

    assert validate_outputs(tmp_path)
