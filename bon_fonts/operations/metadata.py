"""
Font metadata reconciliation.

Rewrites naming, STAT labels, weight/style flags, monospace flags, code
pages and language tags of a merged font so operating systems group and
detect it correctly. Applying the same request twice gives the same
tables.
"""

import re
from dataclasses import dataclass

from fontTools.ttLib import TTFont, newTable

from bon_fonts.core.font_io import clone_font
from bon_fonts.core.metrics import (
    KOREAN_CODE_PAGES,
    apply_code_pages,
    apply_style_flags,
    round_weight_class,
    set_head_flags,
    set_monospace_flags,
)
from bon_fonts.core.naming import (
    VENDOR_ID,
    FontNaming,
    is_italic_style,
    to_postscript_name,
    update_name_table,
)
from bon_fonts.core.stat_labels import LabelContext, reconcile_stat_labels
from bon_fonts.utils.logging import logger

# meta table language tags
DEFAULT_SCRIPT = "Latn"
SUPPORTED_SCRIPT = "Kore"


@dataclass(frozen=True)
class MetadataRequest:
    """What a reconciled font should say about itself."""

    family_name: str  # e.g., "Bon JetBrains Mono"
    style_name: str  # e.g., "SemiBold Italic"
    version: str = "1.000"
    weight_class: int | None = None  # None keeps the font's own, rounded
    postscript_prefix: str | None = None
    source_weight_labels: dict[str, str] | None = None

    @property
    def italic(self) -> bool:
        return is_italic_style(self.style_name)

    @property
    def naming(self) -> FontNaming:
        return FontNaming(
            family=self.family_name,
            style=self.style_name,
            version=self.version,
            postscript_family=self.postscript_prefix or to_postscript_name(self.family_name),
        )

    @property
    def label_context(self) -> LabelContext:
        return LabelContext(self.style_name, dict(self.source_weight_labels or {}))


def compute_font_revision(version: str) -> float:
    """
    head.fontRevision for a version string.

    Uses the leading "major.minor" digits ("1.002-beta" -> 1.002); versions
    without one give 1.0.
    """
    match = re.match(r"\s*(\d+)(?:\.(\d+))?", version)
    if not match:
        return 1.0
    major, minor = match.groups()
    return float(f"{major}.{minor or 0}")


def set_language_tags(font: TTFont) -> None:
    """Set meta dlng/slng, keeping any other entries."""
    if "meta" not in font:
        font["meta"] = newTable("meta")
        font["meta"].data = {}

    meta = font["meta"]
    meta.data["dlng"] = DEFAULT_SCRIPT
    meta.data["slng"] = SUPPORTED_SCRIPT


def set_vendor_id(font: TTFont) -> None:
    """Set OS/2.achVendID to the project vendor id."""
    if "OS/2" in font:
        font["OS/2"].achVendID = VENDOR_ID


def reconcile_metadata(font: TTFont, request: MetadataRequest) -> TTFont:
    """
    Reconcile the metadata of a copy of font.

    Args:
        font: Merged font
        request: Requested family, style, version and weight

    Returns:
        The reconciled copy; font is not modified
    """
    result = clone_font(font)
    naming = request.naming

    written = update_name_table(result, naming)
    logger.info(f"  Name table: {naming.canonical_family} / {naming.canonical_style}")
    logger.info(f"    Full name: {naming.full_name}, PostScript: {naming.postscript_name}")
    logger.debug(f"    {written} name records written")

    changed = reconcile_stat_labels(result, request.label_context)
    for rule_name, count in changed.items():
        logger.info(f"  STAT labels: {count} rewritten ({rule_name})")

    weight = request.weight_class
    if weight is None:
        current = result["OS/2"].usWeightClass if "OS/2" in result else 400
        weight = round_weight_class(current)

    flags = apply_style_flags(result, weight, request.italic)
    logger.info(
        f"  Weight {weight}: bold={flags.bold}, italic={flags.italic}, regular={flags.regular}"
    )

    set_monospace_flags(result)
    apply_code_pages(result, KOREAN_CODE_PAGES)
    set_language_tags(result)
    set_vendor_id(result)
    set_head_flags(result)

    if "head" in result:
        result["head"].fontRevision = compute_font_revision(request.version)

    return result
