"""
Weight and build target definitions.

Defines the named weights a family may declare and how a (family, weight,
italic) build target maps to style names and file names.
"""

from dataclasses import dataclass
from enum import IntEnum


class Weight(IntEnum):
    """Font weight values matching OpenType usWeightClass."""

    THIN = 100
    EXTRALIGHT = 200
    LIGHT = 300
    REGULAR = 400
    MEDIUM = 500
    SEMIBOLD = 600
    BOLD = 700
    EXTRABOLD = 800
    BLACK = 900


# Weight names as they appear in configuration and style names
WEIGHT_NAMES: dict[str, Weight] = {
    "Thin": Weight.THIN,
    "ExtraLight": Weight.EXTRALIGHT,
    "Light": Weight.LIGHT,
    "Regular": Weight.REGULAR,
    "Medium": Weight.MEDIUM,
    "SemiBold": Weight.SEMIBOLD,
    "Bold": Weight.BOLD,
    "ExtraBold": Weight.EXTRABOLD,
    "Black": Weight.BLACK,
}


def weight_value(name: str) -> int:
    """
    Get the numeric weight for a weight name.

    Unknown names resolve to Regular (400).
    """
    return int(WEIGHT_NAMES.get(name, Weight.REGULAR))


def style_name(weight: str, italic: bool) -> str:
    """
    Human-readable style name for a weight.

    Regular italic is plain "Italic"; other italics append " Italic".
    """
    if italic and weight == "Regular":
        return "Italic"
    return f"{weight} Italic" if italic else weight


def file_style_name(weight: str, italic: bool) -> str:
    """Style name as used in font file names (no spaces)."""
    return style_name(weight, italic).replace(" ", "")


@dataclass(frozen=True)
class BuildTarget:
    """
    One hybrid font to build.

    Every path derived from a target is unique to it, so targets can be
    built in any order or in parallel.
    """

    font_key: str
    weight: str
    italic: bool = False

    @property
    def style_name(self) -> str:
        """Requested style name (e.g., "SemiBold Italic")."""
        return style_name(self.weight, self.italic)

    @property
    def file_style(self) -> str:
        """Style name used in file names (e.g., "SemiBoldItalic")."""
        return file_style_name(self.weight, self.italic)

    @property
    def weight_class(self) -> int:
        """usWeightClass of the output font."""
        return weight_value(self.weight)

    @property
    def intermediate_name(self) -> str:
        """File name for per-target intermediate fonts."""
        suffix = "-Italic" if self.italic else ""
        return f"{self.font_key}-{self.weight}{suffix}.ttf"

    def output_name(self, prefix: str) -> str:
        """Generate output filename."""
        return f"{prefix}-{self.font_key}-{self.file_style}.ttf"

    def __str__(self) -> str:
        return f"{self.font_key} {self.style_name}"
