"""
Glyph set merging.

Merges the Korean subset into a Latin base font. The base wins every code
point collision; donor glyphs are imported under names that never clash
with the base, then the font is consolidated with the fontTools subsetter
so unreachable glyphs are dropped and glyph ids are renumbered.
"""

import copy
from dataclasses import dataclass
from pathlib import Path

from fontTools.subset import Options, Subsetter
from fontTools.ttLib import TTFont
from fontTools.ttLib.scaleUpem import scale_upem

from bon_fonts.core.cmap import ensure_full_unicode_subtable, get_unicode_map, set_codepoint
from bon_fonts.core.errors import MalformedFontError
from bon_fonts.core.font_io import clone_font, read_font, require_tables, write_font
from bon_fonts.core.metrics import merge_code_pages
from bon_fonts.utils.logging import logger

# OS/2 capability bitmasks merged from the donor
CAPABILITY_FIELDS = (
    "ulUnicodeRange1",
    "ulUnicodeRange2",
    "ulUnicodeRange3",
    "ulUnicodeRange4",
    "ulCodePageRange1",
    "ulCodePageRange2",
)


@dataclass
class MergeReport:
    """Outcome of a glyph set merge."""

    added: int = 0  # donor code points now mapped in the result
    imported: int = 0  # donor glyphs copied, components included
    collisions: int = 0  # donor code points dropped in favor of the base
    glyphs_before: int = 0  # glyph count before consolidation
    glyphs_after: int = 0  # glyph count after consolidation


class GlyphImporter:
    """
    Copy glyphs from a donor font into a target font.

    Each donor glyph is imported at most once, so donor code points sharing
    a glyph keep sharing it, and composite components are imported along
    with the glyphs that use them.
    """

    def __init__(self, donor: TTFont, target: TTFont):
        self.donor = donor
        self.target = target
        self.order = list(target.getGlyphOrder())
        self.names = set(self.order)
        self.imported: dict[str, str] = {}

    def unique_name(self, name: str) -> str:
        """A glyph name not yet used in the target."""
        if name not in self.names:
            return name
        index = 1
        while f"{name}.{index}" in self.names:
            index += 1
        return f"{name}.{index}"

    def import_glyph(self, name: str) -> str:
        """
        Import a donor glyph.

        Returns:
            The glyph's name in the target font
        """
        if name in self.imported:
            return self.imported[name]

        new_name = self.unique_name(name)
        self.names.add(new_name)
        self.imported[name] = new_name
        self.order.append(new_name)

        glyph = copy.deepcopy(self.donor["glyf"][name])
        if glyph.isComposite():
            for component in glyph.components:
                component.glyphName = self.import_glyph(component.glyphName)

        self.target["glyf"][new_name] = glyph
        self._copy_metrics(name, new_name)
        return new_name

    def _copy_metrics(self, name: str, new_name: str) -> None:
        upm = self.target["head"].unitsPerEm

        donor_hmtx = self.donor["hmtx"].metrics
        self.target["hmtx"].metrics[new_name] = donor_hmtx.get(name, (upm, 0))

        if "vmtx" in self.target:
            donor_vmtx = self.donor["vmtx"].metrics if "vmtx" in self.donor else {}
            self.target["vmtx"].metrics[new_name] = donor_vmtx.get(name, (upm, 0))

    def finish(self) -> int:
        """
        Commit the glyph order.

        Returns:
            Number of glyphs imported
        """
        self.target.setGlyphOrder(self.order)
        # glyf appends components before their parents; keep it in step
        self.target["glyf"].setGlyphOrder(self.order)
        return len(self.imported)


def check_outline_formats(base: TTFont, donor: TTFont) -> None:
    """
    Check that both fonts carry TrueType outlines.

    Raises:
        MalformedFontError: If the base is CFF or the formats differ
    """
    if "glyf" not in base:
        raise MalformedFontError("Base font must have TrueType (glyf) outlines")
    if "glyf" not in donor:
        raise MalformedFontError("Cannot merge CFF donor outlines into a TrueType base")


def match_units_per_em(base: TTFont, donor: TTFont) -> None:
    """Rescale the donor in place to the base units-per-em."""
    base_upm = base["head"].unitsPerEm
    donor_upm = donor["head"].unitsPerEm

    if base_upm == donor_upm:
        return

    logger.warning(f"UPM mismatch: base={base_upm}, donor={donor_upm}. Scaling donor")
    scale_upem(donor, base_upm)


def merge_capabilities(base: TTFont, donor: TTFont) -> None:
    """OR the donor's OS/2 Unicode range and code page bits into the base."""
    if "OS/2" not in base or "OS/2" not in donor:
        return

    base_os2 = base["OS/2"]
    donor_os2 = donor["OS/2"]
    for name in CAPABILITY_FIELDS:
        if hasattr(base_os2, name) and hasattr(donor_os2, name):
            setattr(
                base_os2,
                name,
                merge_code_pages(getattr(base_os2, name), getattr(donor_os2, name)),
            )


def consolidate_font(font: TTFont) -> int:
    """
    Drop glyphs unreachable from the cmap and renumber glyph ids.

    Layout closure, every name record and hinting are kept.

    Returns:
        Number of glyphs after consolidation
    """
    options = Options()
    options.layout_features = ["*"]
    options.name_IDs = ["*"]
    options.name_languages = ["*"]
    options.name_legacy = True
    options.notdef_glyph = True
    options.notdef_outline = True
    options.glyph_names = True
    options.legacy_cmap = True
    options.symbol_cmap = True
    options.hinting = True
    options.passthrough_tables = True
    options.prune_unicode_ranges = False
    options.prune_codepage_ranges = False

    subsetter = Subsetter(options=options)
    subsetter.populate(unicodes=list(get_unicode_map(font)))
    subsetter.subset(font)

    return len(font.getGlyphOrder())


def merge_glyph_sets(base: TTFont, donor: TTFont) -> tuple[TTFont, MergeReport]:
    """
    Merge donor glyphs into a copy of the base font.

    Args:
        base: Latin base font (wins every collision)
        donor: Korean donor font

    Returns:
        (merged font, merge report)

    Raises:
        MalformedFontError: If either font lacks a Unicode cmap, or the
            outline formats cannot be merged
    """
    require_tables(base, "Base font")
    require_tables(donor, "Donor font")
    base_map = get_unicode_map(base, "Base font")
    donor_map = get_unicode_map(donor, "Donor font")
    check_outline_formats(base, donor)

    result = clone_font(base)
    donor = clone_font(donor)
    match_units_per_em(result, donor)

    report = MergeReport()
    incoming = {cp: name for cp, name in donor_map.items() if cp not in base_map}
    report.collisions = len(donor_map) - len(incoming)

    ensure_full_unicode_subtable(result, incoming)
    importer = GlyphImporter(donor, result)
    for cp in sorted(incoming):
        set_codepoint(result, cp, importer.import_glyph(incoming[cp]))
    report.imported = importer.finish()
    report.added = len(incoming)

    merge_capabilities(result, donor)

    report.glyphs_before = len(result.getGlyphOrder())
    report.glyphs_after = consolidate_font(result)

    logger.info(
        f"Merged {report.added} code points ({report.imported} glyphs), "
        f"{report.collisions} collisions kept from base"
    )
    logger.info(f"  Glyphs: {report.glyphs_before} -> {report.glyphs_after}")

    donor.close()
    return result, report


def merge_font_files(base_path: Path, donor_path: Path, output: Path) -> MergeReport:
    """
    Merge two font files and write the result atomically.

    Raises:
        MissingInputError: If either input does not exist
        MalformedFontError: If the fonts cannot be merged
        FontWriteError: If the output cannot be written
    """
    logger.info(f"Merging {base_path.name} + {donor_path.name} -> {output.name}")

    base = read_font(base_path)
    donor = read_font(donor_path)
    try:
        merged, report = merge_glyph_sets(base, donor)
        write_font(output, merged)
    finally:
        base.close()
        donor.close()

    return report
