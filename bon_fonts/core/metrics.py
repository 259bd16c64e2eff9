"""
Font metrics and style flag utilities.

The weight and style derivations are pure functions of a numeric weight and
an italic flag; the ``apply_*`` functions write them into OS/2, head and post.
"""

from dataclasses import dataclass

from fontTools.ttLib import TTFont

# OS/2.fsSelection bits
FS_ITALIC = 1 << 0
FS_BOLD = 1 << 5
FS_REGULAR = 1 << 6
FS_USE_TYPO_METRICS = 1 << 7
FS_WWS = 1 << 8

# head.macStyle bits
MAC_BOLD = 1 << 0
MAC_ITALIC = 1 << 1

# head.flags bits set on every hybrid font
HEAD_BASELINE_AT_Y0 = 1 << 0
HEAD_LSB_AT_X0 = 1 << 1
HEAD_INSTRUCTIONS_DEPEND_ON_PPEM = 1 << 2
HEAD_FORCE_INTEGER_PPEM = 1 << 3
HEAD_FLAGS = (
    HEAD_BASELINE_AT_Y0
    | HEAD_LSB_AT_X0
    | HEAD_INSTRUCTIONS_DEPEND_ON_PPEM
    | HEAD_FORCE_INTEGER_PPEM
)

# OS/2.ulCodePageRange1 bits
CP_LATIN_1 = 1 << 0  # cp1252
CP_KOREAN_WANSUNG = 1 << 19  # cp949
CP_KOREAN_JOHAB = 1 << 21  # cp1361

KOREAN_CODE_PAGES = CP_LATIN_1 | CP_KOREAN_WANSUNG | CP_KOREAN_JOHAB

# PANOSE value for monospaced fonts
PANOSE_MONOSPACED = 9

# Weight at and above which a font is flagged bold
BOLD_THRESHOLD = 700

MIN_WEIGHT = 0
MAX_WEIGHT = 1000


@dataclass(frozen=True)
class StyleFlags:
    """Boolean style flags. REGULAR and BOLD are mutually exclusive."""

    regular: bool
    bold: bool
    italic: bool

    @property
    def fs_selection_bits(self) -> int:
        bits = 0
        if self.regular:
            bits |= FS_REGULAR
        if self.bold:
            bits |= FS_BOLD
        if self.italic:
            bits |= FS_ITALIC
        return bits

    @property
    def mac_style_bits(self) -> int:
        bits = 0
        if self.bold:
            bits |= MAC_BOLD
        if self.italic:
            bits |= MAC_ITALIC
        return bits


def _check_weight(weight: int) -> None:
    if not MIN_WEIGHT <= weight <= MAX_WEIGHT:
        raise ValueError(f"Weight {weight} outside {MIN_WEIGHT}-{MAX_WEIGHT}")


def panose_weight(weight: int) -> int:
    """
    PANOSE bWeight bucket for a usWeightClass value.

    Thresholds are inclusive: <=100 -> 1, <=200 -> 2, ... <=800 -> 8,
    anything heavier -> 9.
    """
    _check_weight(weight)
    for bucket, threshold in enumerate(range(100, 900, 100), start=1):
        if weight <= threshold:
            return bucket
    return 9


def style_flags(weight: int, italic: bool) -> StyleFlags:
    """
    Style flags for a weight and italic flag.

    BOLD is set from 700 up, REGULAR below that; ITALIC always clears
    REGULAR.
    """
    _check_weight(weight)
    bold = weight >= BOLD_THRESHOLD
    return StyleFlags(regular=not bold and not italic, bold=bold, italic=italic)


def round_weight_class(weight: int) -> int:
    """Round a usWeightClass to the nearest hundred, within 100-900."""
    return min(900, max(100, int(round(weight / 100.0)) * 100))


def merge_code_pages(a: int, b: int) -> int:
    """Merge two code page bitmasks. Bits are only ever added."""
    return a | b


def apply_style_flags(font: TTFont, weight: int, italic: bool) -> StyleFlags:
    """
    Write weight class and style flags into OS/2 and head.

    Updates:
    - OS/2.usWeightClass
    - OS/2.panose.bWeight
    - OS/2.fsSelection (ITALIC/BOLD/REGULAR, USE_TYPO_METRICS, WWS cleared)
    - head.macStyle (bold/italic)

    Args:
        font: TTFont instance to modify
        weight: usWeightClass value
        italic: Whether the font is italic

    Returns:
        The flags that were written
    """
    flags = style_flags(weight, italic)

    if "OS/2" in font:
        os2 = font["OS/2"]
        os2.usWeightClass = weight
        if hasattr(os2, "panose"):
            os2.panose.bWeight = panose_weight(weight)

        fs = os2.fsSelection & ~(FS_ITALIC | FS_BOLD | FS_REGULAR | FS_WWS)
        fs |= flags.fs_selection_bits
        if os2.version >= 4:
            fs |= FS_USE_TYPO_METRICS
        os2.fsSelection = fs

    if "head" in font:
        head = font["head"]
        head.macStyle = (head.macStyle & ~(MAC_BOLD | MAC_ITALIC)) | flags.mac_style_bits

    return flags


def apply_code_pages(font: TTFont, required: int = KOREAN_CODE_PAGES) -> None:
    """
    OR required code page bits into OS/2.ulCodePageRange1.

    Existing bits are never cleared.
    """
    if "OS/2" not in font:
        return

    os2 = font["OS/2"]
    if os2.version < 1:
        os2.version = 1
        os2.ulCodePageRange1 = 0
        os2.ulCodePageRange2 = 0

    os2.ulCodePageRange1 = merge_code_pages(os2.ulCodePageRange1, required)


def set_monospace_flags(font: TTFont) -> None:
    """
    Set font flags to advertise as monospaced.

    Updates:
    - post.isFixedPitch
    - OS/2.panose.bProportion
    """
    if "post" in font:
        font["post"].isFixedPitch = 1

    if "OS/2" in font:
        os2 = font["OS/2"]
        if hasattr(os2, "panose"):
            os2.panose.bProportion = PANOSE_MONOSPACED


def set_head_flags(font: TTFont) -> None:
    """Set the baseline, sidebearing and ppem flags in head."""
    if "head" in font:
        font["head"].flags |= HEAD_FLAGS
