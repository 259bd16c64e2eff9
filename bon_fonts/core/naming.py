"""
Name table manipulation utilities.

Operating systems only understand four style names (Regular, Bold, Italic,
Bold Italic) in the legacy family/style fields. Every other weight is folded
into the family name there, while the typographic family/subfamily fields
carry the requested names unchanged.
"""

import re
from dataclasses import dataclass

from fontTools.ttLib import TTFont

from bon_fonts.utils.logging import logger

# Name table IDs
NAME_ID_COPYRIGHT = 0
NAME_ID_FAMILY = 1
NAME_ID_STYLE = 2
NAME_ID_UNIQUE_ID = 3
NAME_ID_FULL_NAME = 4
NAME_ID_VERSION = 5
NAME_ID_POSTSCRIPT = 6
NAME_ID_TRADEMARK = 7
NAME_ID_MANUFACTURER = 8
NAME_ID_DESIGNER = 9
NAME_ID_TYPOGRAPHIC_FAMILY = 16
NAME_ID_TYPOGRAPHIC_SUBFAMILY = 17

# First name ID available for font-specific strings (STAT axis value labels)
FIRST_FONT_SPECIFIC_NAME_ID = 256

# Windows Unicode BMP English (US)
WINDOWS_ENGLISH = (3, 1, 0x409)

# Project strings
COPYRIGHT = "Copyright (c) 2025 Bon-Code-Fonts Project"
TRADEMARK = "Bon-Code-Fonts"
MANUFACTURER = "Bon-Code-Fonts Project"
DESIGNER = "Bon-Code-Fonts Team"
VENDOR_ID = "BCFT"

REGULAR = "Regular"
BOLD = "Bold"
ITALIC = "Italic"
BOLD_ITALIC = "Bold Italic"

CANONICAL_STYLES = (REGULAR, BOLD, ITALIC, BOLD_ITALIC)

# Weight words that may trail a family name
WEIGHT_TOKENS = (
    "Thin",
    "ExtraLight",
    "Light",
    "Regular",
    "Medium",
    "SemiBold",
    "Bold",
    "ExtraBold",
    "Black",
)


def is_italic_style(style: str) -> bool:
    """Check whether a style name denotes an italic."""
    return ITALIC in style


def weight_token(style: str) -> str:
    """
    Weight part of a style name.

    "SemiBold Italic" -> "SemiBold", "Italic" -> "Regular".
    """
    return style.replace(ITALIC, "").strip() or REGULAR


def canonical_style(style: str) -> str:
    """
    Map a style name to one of the four platform style names.

    Italics collapse to "Italic" unless the style is exactly "Bold Italic";
    uprights collapse to "Regular" unless the style is exactly "Bold".
    """
    if is_italic_style(style):
        return BOLD_ITALIC if style == BOLD_ITALIC else ITALIC
    return BOLD if style == BOLD else REGULAR


def canonical_family(family: str, style: str) -> str:
    """
    Legacy family name for a requested family and style.

    For the four platform styles a trailing weight word is stripped from the
    family so it is not repeated in the style field. Other weights cannot be
    expressed by the style field, so the weight stays in the family name.
    """
    words = family.split()

    if style in CANONICAL_STYLES:
        if len(words) > 1 and words[-1] in WEIGHT_TOKENS:
            words = words[:-1]
        return " ".join(words)

    weight = weight_token(style)
    if words and words[-1] == weight:
        return " ".join(words)
    return " ".join([*words, weight])


def to_postscript_name(name: str) -> str:
    """Strip characters PostScript names may not contain."""
    return re.sub(r"[^A-Za-z0-9-]", "", name)


@dataclass(frozen=True)
class FontNaming:
    """Font naming configuration."""

    family: str  # e.g., "Bon JetBrains Mono"
    style: str  # e.g., "SemiBold Italic"
    version: str = "1.000"
    postscript_family: str | None = None  # e.g., "BonJetBrainsMono"

    @property
    def canonical_style(self) -> str:
        """Style for the legacy style field (nameID 2)."""
        return canonical_style(self.style)

    @property
    def canonical_family(self) -> str:
        """Family for the legacy family field (nameID 1)."""
        return canonical_family(self.family, self.style)

    @property
    def full_name(self) -> str:
        """Full font name with family and style."""
        return f"{self.family} {self.style}"

    @property
    def postscript_name(self) -> str:
        """PostScript name (no spaces)."""
        base = self.postscript_family or self.family
        return to_postscript_name(f"{base}-{self.style}")

    @property
    def unique_id(self) -> str:
        """Unique font identifier."""
        return f"{self.version};{VENDOR_ID};{self.postscript_name}"

    @property
    def version_string(self) -> str:
        """Version string for the name table."""
        return format_version_string(self.version)

    def name_records(self) -> dict[int, str]:
        """Every standard name ID this naming controls, with its value."""
        return {
            NAME_ID_COPYRIGHT: COPYRIGHT,
            NAME_ID_FAMILY: self.canonical_family,
            NAME_ID_STYLE: self.canonical_style,
            NAME_ID_UNIQUE_ID: self.unique_id,
            NAME_ID_FULL_NAME: self.full_name,
            NAME_ID_VERSION: self.version_string,
            NAME_ID_POSTSCRIPT: self.postscript_name,
            NAME_ID_TRADEMARK: TRADEMARK,
            NAME_ID_MANUFACTURER: MANUFACTURER,
            NAME_ID_DESIGNER: DESIGNER,
            NAME_ID_TYPOGRAPHIC_FAMILY: self.family,
            NAME_ID_TYPOGRAPHIC_SUBFAMILY: self.style,
        }


def format_version_string(version: str) -> str:
    """Format version string for name table."""
    return f"Version {version}"


def encode_name(record, text: str) -> bool:
    """
    Encode text for name table record.

    Returns:
        False if the record's encoding cannot represent text (legacy Mac
        records); the record is left unchanged
    """
    try:
        record.string = text.encode(record.getEncoding())
    except (LookupError, TypeError, UnicodeEncodeError):
        return False
    return True


def remove_records(font: TTFont, records: list) -> None:
    """Remove name records from the name table."""
    if not records:
        return
    dropped = {id(record) for record in records}
    font["name"].names = [r for r in font["name"].names if id(r) not in dropped]
    logger.debug(f"Dropped {len(records)} name records that cannot encode their new text")


def rewrite_records(font: TTFont, values: dict[int, str]) -> set[int]:
    """
    Rewrite every existing record whose ID is in values.

    Records whose encoding cannot represent the new text are removed.

    Returns:
        Name IDs with at least one rewritten record
    """
    seen: set[int] = set()
    unencodable = []

    for record in font["name"].names:
        if record.nameID not in values:
            continue
        if encode_name(record, values[record.nameID]):
            seen.add(record.nameID)
        else:
            unencodable.append(record)

    remove_records(font, unencodable)
    return seen


def get_name(font: TTFont, name_id: int) -> str | None:
    """Get a name table entry by ID (prefers Windows, then Mac)."""
    name_table = font["name"]
    for platform_id, encoding_id in [(3, 1), (1, 0)]:
        record = name_table.getName(name_id, platform_id, encoding_id, None)
        if record is not None:
            return record.toUnicode()
    return name_table.getDebugName(name_id)


def set_names(font: TTFont, values: dict[int, str]) -> int:
    """
    Set name records for every platform/encoding/language present.

    Records already in the table are updated in place. A name ID without
    any record gets a Windows English record.

    Returns:
        Number of records written
    """
    name_table = font["name"]
    seen = rewrite_records(font, values)
    written = sum(1 for record in name_table.names if record.nameID in seen)

    for name_id, value in values.items():
        if name_id not in seen:
            platform_id, encoding_id, language_id = WINDOWS_ENGLISH
            name_table.setName(value, name_id, platform_id, encoding_id, language_id)
            written += 1

    return written


def update_name_table(font: TTFont, naming: FontNaming) -> int:
    """
    Update font name table with consistent naming.

    Args:
        font: TTFont instance to modify
        naming: Naming configuration

    Returns:
        Number of records written
    """
    return set_names(font, naming.name_records())


def update_instance_names(font: TTFont, weight: str, italic: bool) -> str:
    """
    Rename a static instance extracted from a variable font.

    Updates the style (2), full name (4), PostScript name (6) and typographic
    subfamily (17) records from the source family name.

    Returns:
        The instance style name (e.g., "Bold Italic")
    """
    style = f"{weight} {ITALIC}" if italic else weight
    family = (
        get_name(font, NAME_ID_TYPOGRAPHIC_FAMILY)
        or get_name(font, NAME_ID_FAMILY)
        or "Unknown"
    )

    rewrite_records(
        font,
        {
            NAME_ID_STYLE: style,
            NAME_ID_FULL_NAME: f"{family} {style}",
            NAME_ID_POSTSCRIPT: to_postscript_name(f"{family}-{style}"),
            NAME_ID_TYPOGRAPHIC_SUBFAMILY: style,
        },
    )

    return style
