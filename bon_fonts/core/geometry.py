"""
Glyph geometry manipulation utilities.

Supports TrueType (glyf) and CFF outlines. Transforms are applied to every
point of a glyph, on-curve and off-curve alike.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from fontTools.misc.transform import Transform
from fontTools.pens.boundsPen import ControlBoundsPen
from fontTools.pens.recordingPen import DecomposingRecordingPen, RecordingPen
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.transformPen import TransformPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont

from bon_fonts.core.errors import MalformedFontError


@dataclass(frozen=True)
class GlyphTransform:
    """Independent X/Y scale followed by an X/Y offset."""

    scale_x: float = 1.0
    scale_y: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def is_identity(self) -> bool:
        return (
            self.scale_x == 1.0
            and self.scale_y == 1.0
            and self.offset_x == 0.0
            and self.offset_y == 0.0
        )

    def to_transform(self) -> Transform:
        """Affine transform matrix for pens."""
        return Transform(self.scale_x, 0, 0, self.scale_y, self.offset_x, self.offset_y)


def _require_outlines(font: TTFont) -> str:
    if "glyf" in font:
        return "glyf"
    if "CFF " in font:
        return "CFF "
    raise MalformedFontError("Font has no glyf or CFF outlines")


def has_outline(font: TTFont, glyph_name: str) -> bool:
    """Check whether a glyph carries any outline geometry."""
    if _require_outlines(font) == "glyf":
        glyph = font["glyf"][glyph_name]
        return glyph.numberOfContours != 0

    pen = ControlBoundsPen(font.getGlyphSet())
    font.getGlyphSet()[glyph_name].draw(pen)
    return pen.bounds is not None


def left_side_bearing(font: TTFont, glyph_name: str) -> int:
    """Current left side bearing of a glyph (0 for empty glyphs)."""
    if _require_outlines(font) == "glyf":
        glyf = font["glyf"]
        glyph = glyf[glyph_name]
        if glyph.numberOfContours == 0:
            return 0
        glyph.recalcBounds(glyf)
        return glyph.xMin

    glyph_set = font.getGlyphSet()
    pen = ControlBoundsPen(glyph_set)
    glyph_set[glyph_name].draw(pen)
    return int(round(pen.bounds[0])) if pen.bounds else 0


def decompose_composites(font: TTFont, glyph_names: Iterable[str]) -> int:
    """
    Replace composite glyphs with their decomposed outlines.

    Composite glyphs share component geometry; decomposing them first means
    each glyph owns its points and a later transform is applied exactly once.

    Returns:
        Number of glyphs decomposed
    """
    if "glyf" not in font:
        return 0

    glyf = font["glyf"]
    glyph_set = font.getGlyphSet()
    composites = [name for name in glyph_names if glyf[name].isComposite()]

    # Record everything before replacing anything
    recorded = {}
    for name in composites:
        pen = DecomposingRecordingPen(glyph_set)
        glyph_set[name].draw(pen)
        recorded[name] = pen

    for name, pen in recorded.items():
        tt_pen = TTGlyphPen(None)
        pen.replay(tt_pen)
        glyf[name] = tt_pen.glyph()
        glyf[name].recalcBounds(glyf)

    return len(recorded)


def transform_glyphs(
    font: TTFont, glyph_names: Iterable[str], transform: GlyphTransform
) -> int:
    """
    Apply an affine transform to every point of the named glyphs.

    Glyph names must be unique; glyphs without outlines are skipped.

    Returns:
        Number of glyphs transformed
    """
    if transform.is_identity:
        return 0

    if _require_outlines(font) == "glyf":
        return _transform_truetype_glyphs(font, glyph_names, transform)
    return _transform_cff_glyphs(font, glyph_names, transform)


def _transform_truetype_glyphs(
    font: TTFont, glyph_names: Iterable[str], transform: GlyphTransform
) -> int:
    """Transform TrueType glyph coordinates in place."""
    glyf = font["glyf"]
    count = 0

    for glyph_name in glyph_names:
        glyph = glyf[glyph_name]
        if glyph.numberOfContours == 0:
            continue

        if glyph.isComposite():
            # Components carry their own points; only their placement moves
            for component in glyph.components:
                if not hasattr(component, "x"):
                    continue
                component.x = round(component.x * transform.scale_x + transform.offset_x)
                component.y = round(component.y * transform.scale_y + transform.offset_y)
        else:
            coordinates = glyph.coordinates
            coordinates.scale((transform.scale_x, transform.scale_y))
            coordinates.translate((transform.offset_x, transform.offset_y))
            coordinates.toInt()

        glyph.recalcBounds(glyf)
        count += 1

    return count


def _transform_cff_glyphs(
    font: TTFont, glyph_names: Iterable[str], transform: GlyphTransform
) -> int:
    """Redraw CFF charstrings through a transform pen."""
    cff = font["CFF "]
    top_dict = cff.cff.topDictIndex[0]
    char_strings = top_dict.CharStrings
    glyph_set = font.getGlyphSet()
    matrix = transform.to_transform()

    # Record everything before replacing anything
    recorded = {}
    for glyph_name in glyph_names:
        recording_pen = RecordingPen()
        glyph_set[glyph_name].draw(TransformPen(recording_pen, matrix))
        if recording_pen.value:
            recorded[glyph_name] = recording_pen

    for glyph_name, recording_pen in recorded.items():
        private = char_strings[glyph_name].private
        t2_pen = T2CharStringPen(width=None, glyphSet=glyph_set)
        recording_pen.replay(t2_pen)
        char_strings[glyph_name] = t2_pen.getCharString(private=private)

    return len(recorded)
