"""
Output font validation.

Checks every font in out/ for Hangul and Latin coverage and for metadata
that agrees with itself across the name, OS/2, head, post and meta tables.
"""

import sys
from pathlib import Path

from fontTools.ttLib import TTFont

from bon_fonts.config.paths import OUT_DIR
from bon_fonts.config.unicode_ranges import BASIC_LATIN, HANGUL_SYLLABLES, in_range
from bon_fonts.core.cmap import get_unicode_map
from bon_fonts.core.errors import BuildError
from bon_fonts.core.font_io import iter_fonts, read_font
from bon_fonts.core.metrics import BOLD_THRESHOLD, FS_BOLD, FS_ITALIC, FS_REGULAR, KOREAN_CODE_PAGES
from bon_fonts.core.naming import BOLD, ITALIC, NAME_ID_STYLE, get_name
from bon_fonts.operations.metadata import DEFAULT_SCRIPT, SUPPORTED_SCRIPT
from bon_fonts.utils.logging import logger

# Minimum code point counts for a usable hybrid font
MIN_HANGUL_SYLLABLES = 1000
MIN_BASIC_LATIN = 50


def check_coverage(font: TTFont) -> list[str]:
    """Check Hangul syllable and Basic Latin coverage."""
    unicode_map = get_unicode_map(font)
    hangul = sum(1 for cp in unicode_map if in_range(cp, HANGUL_SYLLABLES))
    latin = sum(1 for cp in unicode_map if in_range(cp, BASIC_LATIN))

    problems = []
    if hangul <= MIN_HANGUL_SYLLABLES:
        problems.append(f"only {hangul} Hangul syllables (need > {MIN_HANGUL_SYLLABLES})")
    if latin <= MIN_BASIC_LATIN:
        problems.append(f"only {latin} Basic Latin characters (need > {MIN_BASIC_LATIN})")
    return problems


def check_style_consistency(font: TTFont) -> list[str]:
    """Check that the legacy style name and usWeightClass agree with fsSelection."""
    style = get_name(font, NAME_ID_STYLE) or ""
    os2 = font["OS/2"]
    fs = os2.fsSelection

    problems = []
    if bool(fs & FS_ITALIC) != (ITALIC in style):
        problems.append(f"style '{style}' disagrees with fsSelection ITALIC bit")
    if bool(fs & FS_BOLD) != (os2.usWeightClass >= BOLD_THRESHOLD):
        problems.append(f"usWeightClass {os2.usWeightClass} disagrees with fsSelection BOLD bit")
    if BOLD in style and not fs & FS_BOLD:
        problems.append(f"style '{style}' without fsSelection BOLD bit")
    if fs & FS_REGULAR and fs & (FS_BOLD | FS_ITALIC):
        problems.append("fsSelection REGULAR set together with BOLD or ITALIC")
    return problems


def check_capabilities(font: TTFont) -> list[str]:
    """Check monospace flag, Korean code pages and language tags."""
    problems = []

    if not font["post"].isFixedPitch:
        problems.append("post.isFixedPitch is not set")

    code_pages = font["OS/2"].ulCodePageRange1
    if code_pages & KOREAN_CODE_PAGES != KOREAN_CODE_PAGES:
        problems.append(f"missing Korean code pages (ulCodePageRange1={code_pages:#010x})")

    if "meta" not in font:
        problems.append("no meta table")
    else:
        data = font["meta"].data
        if data.get("dlng") != DEFAULT_SCRIPT or data.get("slng") != SUPPORTED_SCRIPT:
            problems.append(f"unexpected meta language tags: {data}")

    return problems


def validate_font(path: Path) -> list[str]:
    """
    Validate one output font.

    Returns:
        Problems found (empty if the font is valid)
    """
    try:
        font = read_font(path)
    except BuildError as e:
        return [str(e)]

    try:
        return [
            *check_coverage(font),
            *check_style_consistency(font),
            *check_capabilities(font),
        ]
    except (BuildError, KeyError) as e:
        return [f"unreadable metadata: {e}"]
    finally:
        font.close()


def validate_outputs(out_dir: Path = OUT_DIR) -> bool:
    """
    Validate every font under out_dir.

    Returns:
        True if every font passed
    """
    fonts = list(iter_fonts(out_dir, "*/*.ttf"))
    if not fonts:
        logger.error(f"No fonts found in {out_dir}/")
        return False

    failures = 0
    for path in fonts:
        problems = validate_font(path)
        if problems:
            failures += 1
            logger.error(f"{path.name}:")
            for problem in problems:
                logger.error(f"  {problem}")
        else:
            logger.info(f"{path.name}: OK")

    logger.info(f"{len(fonts) - failures}/{len(fonts)} fonts passed validation")
    return failures == 0


def main(out_dir: Path = OUT_DIR) -> None:
    """Validate outputs and exit non-zero on failure."""
    if not validate_outputs(out_dir):
        sys.exit(1)
