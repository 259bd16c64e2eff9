"""
Font I/O utilities for loading, saving, copying and traversing font files.
"""

import struct
from collections.abc import Iterator
from io import BytesIO
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from bon_fonts.core.errors import FontWriteError, MalformedFontError, MissingInputError
from bon_fonts.utils.logging import logger

# Tables every font entering the pipeline must carry
REQUIRED_TABLES = ("cmap", "name")
OUTLINE_TABLES = ("glyf", "CFF ", "CFF2")


def iter_fonts(directory: Path, pattern: str = "*.ttf") -> Iterator[Path]:
    """
    Iterate over font files under directory, sorted by path.

    Temporary files of in-flight atomic writes (*.ttf.tmp) never match.

    Args:
        directory: Directory to search
        pattern: Glob pattern relative to directory (e.g., "*/*.ttf")

    Yields:
        Paths to matching font files
    """
    yield from sorted(path for path in Path(directory).glob(pattern) if path.is_file())


def read_font(path: Path) -> TTFont:
    """
    Read a font file.

    Args:
        path: Path to the font file

    Returns:
        TTFont instance

    Raises:
        MissingInputError: If the file does not exist
        MalformedFontError: If the file cannot be parsed as a font
    """
    path = Path(path)
    if not path.exists():
        raise MissingInputError(path)

    try:
        return TTFont(path)
    except (TTLibError, OSError, struct.error, AssertionError) as e:
        raise MalformedFontError(f"Unreadable font {path}: {e}") from e


def write_font(path: Path, font: TTFont) -> None:
    """
    Write a font atomically.

    The font is compiled to a temporary file next to the target and moved
    into place, so readers never observe a partially written file.

    Args:
        path: Output file path
        font: Font to write

    Raises:
        FontWriteError: If the font cannot be compiled or written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.tmp")

    try:
        font.save(temp_path)
        temp_path.replace(path)
    except Exception as e:
        temp_path.unlink(missing_ok=True)
        raise FontWriteError(f"Unwritable font {path}: {e}") from e


def clone_font(font: TTFont) -> TTFont:
    """
    Return an independent copy of a font.

    The font is compiled to memory and parsed back, so the copy shares no
    table objects with the original.
    """
    buffer = BytesIO()
    font.save(buffer)
    buffer.seek(0)
    return TTFont(buffer)


def require_tables(font: TTFont, label: str = "font") -> None:
    """
    Check the tables the pipeline cannot operate without.

    Raises:
        MalformedFontError: If cmap, name or an outline table is missing
    """
    missing = [tag for tag in REQUIRED_TABLES if tag not in font]
    if not any(tag in font for tag in OUTLINE_TABLES):
        missing.append("glyf/CFF")
    if missing:
        raise MalformedFontError(f"{label} is missing required tables: {', '.join(missing)}")


def get_font_size_mb(path: Path) -> float:
    """Get font file size in megabytes."""
    return path.stat().st_size / 1024 / 1024


def log_font_summary(path: Path) -> None:
    """Log the name and size of a written font."""
    logger.info(f"  {path.name:40} {get_font_size_mb(path):6.2f} MB")
