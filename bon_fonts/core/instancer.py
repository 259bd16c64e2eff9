"""
Variable font instance extraction utilities.
"""

from pathlib import Path

from fontTools.ttLib import TTFont

from bon_fonts.config.unicode_ranges import VF_TABLES_TO_DROP
from bon_fonts.core.font_io import read_font
from bon_fonts.utils.logging import logger
from bon_fonts.utils.subprocess import run_fonttools


def extract_instance(
    variable_font: Path,
    output: Path,
    axis_args: list[str],
    *,
    exit_on_error: bool = True,
) -> None:
    """
    Extract a static instance from a variable font.

    Args:
        variable_font: Path to variable font
        output: Output file path
        axis_args: Axis value arguments (e.g., ["wght=400"])
        exit_on_error: Whether to exit on failure
    """
    output.parent.mkdir(parents=True, exist_ok=True)

    args = [str(variable_font), *axis_args, "-o", str(output)]

    run_fonttools(
        "varLib.instancer",
        args,
        f"Extracting instance to {output.name}",
        exit_on_error,
    )


def extract_weight_instance(
    variable_font: Path,
    output: Path,
    *,
    wght: float = 400.0,
    exit_on_error: bool = True,
) -> None:
    """
    Extract a weight instance with the instancer subprocess.

    Args:
        variable_font: Path to a variable font with a wght axis
        output: Output file path
        wght: wght axis value
        exit_on_error: Whether to exit on failure
    """
    logger.info(f"Extracting: wght={wght:g} from {variable_font.name}")
    extract_instance(variable_font, output, [f"wght={wght:g}"], exit_on_error=exit_on_error)


def strip_variation_tables(font: TTFont) -> list[str]:
    """
    Remove variation tables so the default instance reads as a static font.

    Returns:
        Tags of the removed tables
    """
    removed = [tag for tag in VF_TABLES_TO_DROP if tag in font]
    for tag in removed:
        del font[tag]
    return removed


def read_default_instance(variable_font: Path) -> TTFont:
    """
    Read a variable font as its default instance.

    Glyph shapes are those of the default axis position, whatever weight
    was asked for.
    """
    logger.info(f"Reading variable font directly (default instance): {variable_font.name}")
    font = read_font(variable_font)
    removed = strip_variation_tables(font)
    if removed:
        logger.info(f"  Dropped variation tables: {', '.join(removed)}")
    return font
