"""
Korean subset extraction.

Reduces a Korean donor font to the Hangul ranges and a few CJK punctuation
marks, then normalizes glyph geometry and advance widths so the glyphs sit
in the Latin font's monospace grid.
"""

from dataclasses import dataclass, field
from pathlib import Path

from fontTools.ttLib import TTFont
from fontTools.ttLib.scaleUpem import scale_upem

from bon_fonts.config.fonts import DEFAULT_MONO_WIDTH, KoreanAdjustments
from bon_fonts.config.unicode_ranges import is_korean_codepoint
from bon_fonts.core.cmap import get_unicode_map, glyph_aliases, remove_codepoints
from bon_fonts.core.font_io import clone_font, read_font, require_tables, write_font
from bon_fonts.core.geometry import (
    GlyphTransform,
    decompose_composites,
    has_outline,
    left_side_bearing,
    transform_glyphs,
)
from bon_fonts.utils.logging import logger

NOTDEF = ".notdef"

# Centering is skipped when the width changes by no more than this
CENTER_TOLERANCE = 1


@dataclass
class ExtractionReport:
    """Outcome of a Korean subset extraction."""

    removed: int = 0
    retained: int = 0
    adjusted: int = 0
    warnings: list[str] = field(default_factory=list)


def filter_to_korean(font: TTFont) -> int:
    """
    Drop every non-Korean code point from all Unicode cmap subtables.

    Glyph data is left in place; unreachable glyphs are removed when the
    merged font is consolidated.

    Returns:
        Number of code points removed
    """
    return remove_codepoints(font, lambda cp: not is_korean_codepoint(cp))


def final_width(
    source_width: int,
    adjustments: KoreanAdjustments,
    mono_width: int = DEFAULT_MONO_WIDTH,
) -> tuple[int, int]:
    """
    Choose the advance width of an adjusted glyph.

    The first matching policy wins: forced monospace width, native width,
    configured target width, then the source width scaled by scaleX.

    Args:
        source_width: Advance width in the donor font
        adjustments: Family adjustments
        mono_width: Family monospace width

    Returns:
        (final width, width the geometry step left the glyph at)
    """
    scaled_width = int(round(source_width * adjustments.scale_x))
    geometry_width = scaled_width if adjustments.scale_to_match_height else source_width

    if adjustments.force_mono_width:
        return mono_width, geometry_width
    if adjustments.use_native_width:
        return geometry_width, geometry_width
    if adjustments.target_width:
        return adjustments.target_width, geometry_width
    return scaled_width, geometry_width


def centering_offset(width: int, geometry_width: int) -> float:
    """
    Horizontal shift that centers an outline drawn for geometry_width
    inside a cell of width. Zero when the difference is within tolerance.
    """
    delta = width - geometry_width
    if abs(delta) <= CENTER_TOLERANCE:
        return 0.0
    return delta / 2


def extract_korean_subset(
    font: TTFont,
    adjustments: KoreanAdjustments | None = None,
    mono_width: int = DEFAULT_MONO_WIDTH,
    units_per_em: int | None = None,
) -> tuple[TTFont, ExtractionReport]:
    """
    Extract the Korean subset of a donor font.

    The input font is not modified.

    Args:
        font: Korean donor font
        adjustments: Geometry and width adjustments (default: none)
        mono_width: Family monospace width for forceMonoWidth
        units_per_em: Units-per-em of the Latin font the glyphs are merged
            into; the subset is rescaled to it before any width is set

    Returns:
        (extracted font, extraction report)

    Raises:
        MalformedFontError: If the font lacks cmap, name or outlines
    """
    adjustments = adjustments or KoreanAdjustments()
    require_tables(font, "Korean source")

    result = clone_font(font)
    report = ExtractionReport()

    if NOTDEF not in result.getGlyphOrder():
        message = "No .notdef glyph found in Korean source"
        logger.warning(message)
        report.warnings.append(message)

    report.removed = filter_to_korean(result)

    source_upm = result["head"].unitsPerEm
    if units_per_em and units_per_em != source_upm:
        logger.info(f"  Scaling Korean glyphs from {source_upm} to {units_per_em} units per em")
        scale_upem(result, units_per_em)

    aliases = glyph_aliases(get_unicode_map(result, "Korean source"))
    glyph_names = list(aliases)
    report.retained = len(glyph_names)

    logger.info(
        f"Kept {sum(len(cps) for cps in aliases.values())} Korean code points "
        f"({len(glyph_names)} glyphs), removed {report.removed}"
    )

    decompose_composites(result, glyph_names)

    hmtx = result["hmtx"].metrics
    source_widths = {name: hmtx[name][0] for name in glyph_names}

    if adjustments.scale_to_match_height:
        transform = GlyphTransform(
            adjustments.scale_x,
            adjustments.scale_y,
            adjustments.offset_x,
            adjustments.offset_y,
        )
        transformed = transform_glyphs(result, glyph_names, transform)
        logger.info(
            f"  Scaled {transformed} glyphs by ({transform.scale_x:g}, {transform.scale_y:g}), "
            f"offset ({transform.offset_x:g}, {transform.offset_y:g})"
        )

    for name in glyph_names:
        width, geometry_width = final_width(source_widths[name], adjustments, mono_width)

        if adjustments.center_in_cell:
            offset = centering_offset(width, geometry_width)
            if offset and has_outline(result, name):
                transform_glyphs(result, [name], GlyphTransform(offset_x=offset))

        hmtx[name] = (width, left_side_bearing(result, name))
        report.adjusted += 1

    logger.info(f"Adjusted {report.adjusted} Korean glyphs for hybrid font")
    return result, report


def extract_korean(
    source: Path,
    output: Path,
    adjustments: KoreanAdjustments | None = None,
    mono_width: int = DEFAULT_MONO_WIDTH,
    units_per_em: int | None = None,
) -> ExtractionReport:
    """
    Extract the Korean subset of a donor font file.

    Args:
        source: Korean donor font path
        output: Output file path (written atomically)
        adjustments: Geometry and width adjustments
        mono_width: Family monospace width
        units_per_em: Target units-per-em (default: keep the source's)

    Returns:
        Extraction report

    Raises:
        MissingInputError: If the source does not exist
        MalformedFontError: If the source cannot be used
        FontWriteError: If the output cannot be written
    """
    logger.info(f"Extracting Korean glyphs: {source.name} -> {output.name}")

    font = read_font(source)
    try:
        extracted, report = extract_korean_subset(font, adjustments, mono_width, units_per_em)
        write_font(output, extracted)
    finally:
        font.close()

    return report
