"""Shared pytest fixtures."""

from io import BytesIO

import pytest
from fontTools import varLib
from fontTools.designspaceLib import AxisDescriptor, DesignSpaceDocument, SourceDescriptor
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont


def rect_glyph(x_min, y_min, x_max, y_max):
    """A glyph with one rectangular contour."""
    pen = TTGlyphPen(None)
    pen.moveTo((x_min, y_min))
    pen.lineTo((x_max, y_min))
    pen.lineTo((x_max, y_max))
    pen.lineTo((x_min, y_max))
    pen.closePath()
    return pen.glyph()


def empty_glyph():
    """A glyph without outlines."""
    return TTGlyphPen(None).glyph()


def composite_glyph(base, dx, dy=0):
    """A composite glyph placing base at (dx, dy)."""
    pen = TTGlyphPen({base: None})
    pen.addComponent(base, (1, 0, 0, 1, dx, dy))
    return pen.glyph()


def build_font(
    glyphs,
    cmap,
    *,
    widths=None,
    upm=1000,
    family="Test",
    style="Regular",
    weight=400,
    fs_selection=0x40,
    extra_names=None,
):
    """
    Build a small TrueType font in memory.

    The font is saved and read back so its tables look like those of a
    font loaded from disk.
    """
    order = list(glyphs)
    widths = widths or {}

    fb = FontBuilder(upm, isTTF=True)
    fb.setupGlyphOrder(order)
    fb.setupCharacterMap(cmap)
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics({name: (widths.get(name, upm // 2), 0) for name in order})
    fb.setupHorizontalHeader(ascent=int(upm * 0.8), descent=-int(upm * 0.2))
    fb.setupOS2(
        usWeightClass=weight,
        fsSelection=fs_selection,
        sTypoAscender=int(upm * 0.8),
        sTypoDescender=-int(upm * 0.2),
        usWinAscent=int(upm * 0.8),
        usWinDescent=int(upm * 0.2),
    )
    fb.setupPost()
    fb.setupNameTable(
        {
            "familyName": family,
            "styleName": style,
            "fullName": f"{family} {style}",
            "psName": f"{family.replace(' ', '')}-{style.replace(' ', '')}",
            "typographicFamily": family,
            "typographicSubfamily": style,
        }
    )
    for name_id, value in (extra_names or {}).items():
        fb.font["name"].setName(value, name_id, 3, 1, 0x409)

    buffer = BytesIO()
    fb.save(buffer)
    buffer.seek(0)
    return TTFont(buffer)


def build_variable_font(family="Test Mono Variable"):
    """
    Build a two-master wght variable font with varLib.

    The axis map is not linear and the masters differ in outlines, advances
    and vertical metrics, so the font carries avar, gvar, HVAR and MVAR.
    """
    doc = DesignSpaceDocument()

    weight_axis = AxisDescriptor()
    weight_axis.name = "Weight"
    weight_axis.tag = "wght"
    weight_axis.minimum = 100
    weight_axis.default = 400
    weight_axis.maximum = 900
    weight_axis.map = [(100, 100), (400, 400), (700, 600), (900, 900)]
    doc.addAxis(weight_axis)

    for weight, stem in ((400, 100), (900, 200)):
        glyphs = {
            ".notdef": rect_glyph(50, 0, 550, 700),
            "space": empty_glyph(),
            "A": rect_glyph(50, 0, 450 + stem, 700),
        }
        widths = {".notdef": 600, "space": 600, "A": 500 + stem}
        master = build_font(
            glyphs, {0x20: "space", 0x41: "A"}, widths=widths, family=family, weight=weight
        )
        master["OS/2"].sTypoAscender += stem // 2

        source = SourceDescriptor()
        source.name = f"master-{weight}"
        source.font = master
        source.location = {"Weight": weight}
        doc.addSource(source)

    font, _, _ = varLib.build(doc)

    buffer = BytesIO()
    font.save(buffer)
    buffer.seek(0)
    return TTFont(buffer)


@pytest.fixture
def temp_font_dir(tmp_path):
    """Create a temporary directory for font testing."""
    path = tmp_path / "fonts"
    path.mkdir()
    return path


@pytest.fixture
def latin_font():
    """
    Latin base font.

    Maps U+AC00 to its own glyph (collides with the Korean font) and has a
    glyph named "uniAC01" mapped to "C" (clashes with a Korean glyph name).
    """
    glyphs = {
        ".notdef": rect_glyph(50, 0, 550, 700),
        "space": empty_glyph(),
        "A": rect_glyph(50, 0, 550, 700),
        "B": rect_glyph(60, 0, 540, 700),
        "hangul": rect_glyph(0, 0, 600, 600),
        "uniAC01": rect_glyph(70, 0, 530, 700),
        "unused": rect_glyph(0, 0, 10, 10),
    }
    cmap = {0x20: "space", 0x41: "A", 0x42: "B", 0x43: "uniAC01", 0xAC00: "hangul"}
    widths = {name: 600 for name in glyphs}
    return build_font(glyphs, cmap, widths=widths, family="Test Mono")


@pytest.fixture
def korean_glyphs():
    """Glyphs of the Korean donor font."""
    return {
        ".notdef": rect_glyph(100, 0, 900, 800),
        "space": empty_glyph(),
        "A": rect_glyph(100, 0, 900, 800),
        "uniAC00": rect_glyph(100, 0, 900, 800),
        "uniAC01": composite_glyph("uniAC00", 50),
        "uni3131": rect_glyph(200, 100, 800, 700),
        "uni4E00": rect_glyph(100, 300, 900, 500),
    }


@pytest.fixture
def korean_cmap():
    """
    Code points of the Korean donor font.

    U+AC02 shares the glyph of U+AC00; U+0020, U+0041 and U+4E00 are not
    Korean.
    """
    return {
        0x20: "space",
        0x41: "A",
        0x3131: "uni3131",
        0x4E00: "uni4E00",
        0xAC00: "uniAC00",
        0xAC01: "uniAC01",
        0xAC02: "uniAC00",
    }


@pytest.fixture
def korean_font(korean_glyphs, korean_cmap):
    """Korean donor font with 1000-unit advance widths."""
    widths = {name: 1000 for name in korean_glyphs}
    widths["space"] = 500
    return build_font(korean_glyphs, korean_cmap, widths=widths, family="TestK")


@pytest.fixture
def variable_font():
    """Variable font with a wght axis and every common variation table."""
    return build_variable_font()
