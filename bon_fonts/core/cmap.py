"""
Character map helpers.

The pipeline treats the Unicode subtables of ``cmap`` as a single mapping
from code point to glyph name. Reads go through ``getBestCmap``; writes are
applied to every Unicode subtable so platforms never disagree.
"""

from collections.abc import Callable, Iterable, Iterator
from itertools import chain

from fontTools.ttLib import TTFont
from fontTools.ttLib.tables._c_m_a_p import CmapSubtable

from bon_fonts.core.errors import MalformedFontError
from bon_fonts.utils.logging import logger

# Highest code point representable in BMP-only subtables
BMP_MAX = 0xFFFF


def get_unicode_map(font: TTFont, label: str = "font") -> dict[int, str]:
    """
    Return the code point -> glyph name mapping of a font.

    Raises:
        MalformedFontError: If the font has no Unicode cmap subtable
    """
    if "cmap" not in font:
        raise MalformedFontError(f"{label} has no cmap table")

    best = font.getBestCmap()
    if best is None:
        raise MalformedFontError(f"{label} has no Unicode cmap subtable")
    return dict(best)


def iter_unicode_subtables(font: TTFont) -> Iterator[CmapSubtable]:
    """Yield every Unicode subtable that maps code points to glyphs."""
    for subtable in font["cmap"].tables:
        # Format 14 holds variation sequences, not a plain mapping
        if subtable.format == 14:
            continue
        if subtable.isUnicode():
            yield subtable


def remove_codepoints(font: TTFont, predicate: Callable[[int], bool]) -> int:
    """
    Remove every code point matching predicate from all Unicode subtables.

    Returns:
        Number of distinct code points removed
    """
    removed: set[int] = set()
    for subtable in iter_unicode_subtables(font):
        doomed = [cp for cp in subtable.cmap if predicate(cp)]
        for cp in doomed:
            del subtable.cmap[cp]
        removed.update(doomed)
    return len(removed)


def set_codepoint(font: TTFont, codepoint: int, glyph_name: str) -> None:
    """
    Map codepoint to glyph_name in every Unicode subtable able to hold it.

    Format 4 (and the other 16-bit formats) are BMP-only; supplementary
    plane code points only go into format 12/13 subtables.
    """
    bmp = codepoint <= BMP_MAX

    for subtable in iter_unicode_subtables(font):
        if subtable.format in (12, 13) or bmp:
            subtable.cmap[codepoint] = glyph_name


def ensure_full_unicode_subtable(font: TTFont, incoming: Iterable[int] = ()) -> bool:
    """
    Add a format 12 subtable when the mapping will hold non-BMP code points.

    Must run before supplementary plane code points are added to a font
    that only carries BMP subtables, or they have nowhere to go.

    Args:
        font: Font to modify
        incoming: Code points about to be added

    Returns:
        True if a subtable was added
    """
    best = get_unicode_map(font)
    if all(cp <= BMP_MAX for cp in chain(best, incoming)):
        return False
    if any(t.format == 12 for t in font["cmap"].tables):
        return False

    logger.info("Adding full-Unicode cmap format 12 subtable")
    subtable = CmapSubtable.newSubtable(12)
    subtable.platformID = 3
    subtable.platEncID = 10
    subtable.language = 0
    subtable.cmap = best
    font["cmap"].tables.append(subtable)
    return True


def glyph_aliases(unicode_map: dict[int, str]) -> dict[str, list[int]]:
    """
    Group code points by the glyph they map to.

    Glyphs shared by several code points appear once with all their
    code points, in ascending order.
    """
    aliases: dict[str, list[int]] = {}
    for cp in sorted(unicode_map):
        aliases.setdefault(unicode_map[cp], []).append(cp)
    return aliases
