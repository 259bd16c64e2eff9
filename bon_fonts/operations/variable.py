"""
Static instance extraction from continuous-weight Latin fonts.

The fonttools instancer is run as a subprocess. When it is not installed
or fails, the variable font is read as-is and its variation tables are
dropped: the result is the default instance, flagged as degraded.
"""

import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from fontTools.ttLib import TTFont

from bon_fonts.config.instances import weight_value
from bon_fonts.core.errors import InstancerError, MalformedFontError, MissingInputError
from bon_fonts.core.font_io import clone_font, read_font, write_font
from bon_fonts.core.instancer import extract_weight_instance, read_default_instance
from bon_fonts.core.metrics import apply_style_flags
from bon_fonts.core.naming import update_instance_names
from bon_fonts.utils.logging import logger


@dataclass
class InstanceResult:
    """A static instance and how it was obtained."""

    font: TTFont
    degraded: bool = False
    warnings: list[str] = field(default_factory=list)


def _run_instancer(source: Path, wght: int) -> TTFont:
    """
    Instantiate source at wght with the instancer subprocess.

    The instance is copied into memory before its temporary file is removed.

    Raises:
        InstancerError: If the subprocess is missing or exits non-zero
    """
    with tempfile.TemporaryDirectory(prefix="bon-instance-") as tmp:
        output = Path(tmp) / source.name
        try:
            extract_weight_instance(source, output, wght=wght, exit_on_error=False)
        except subprocess.CalledProcessError as e:
            raise InstancerError(
                f"varLib.instancer exited with {e.returncode}", e.stderr or ""
            ) from e
        except FileNotFoundError as e:
            raise InstancerError(f"fonttools executable not found: {e}") from e
        font = read_font(output)
        try:
            return clone_font(font)
        finally:
            font.close()


def extract_variable_instance(source: Path, weight: str, italic: bool = False) -> InstanceResult:
    """
    Produce a static instance of a variable font at a named weight.

    Args:
        source: Variable font path
        weight: Weight name (e.g., "SemiBold"); unknown names mean 400
        italic: Whether the instance is italic

    Returns:
        The instance, degraded if the default instance had to be used

    Raises:
        MissingInputError: If the source does not exist
        MalformedFontError: If the fallback cannot read the source
    """
    source = Path(source)
    if not source.exists():
        raise MissingInputError(source, "variable Latin source")

    wght = weight_value(weight)
    result: InstanceResult

    try:
        font = _run_instancer(source, wght)
        result = InstanceResult(font)
    except (InstancerError, MalformedFontError) as e:
        message = (
            f"Instancer failed for {source.name} at wght={wght} ({e}); "
            "using default instance, glyph shapes do not match the requested weight"
        )
        logger.warning(message)
        result = InstanceResult(read_default_instance(source), degraded=True, warnings=[message])

    style = update_instance_names(result.font, weight, italic)
    apply_style_flags(result.font, wght, italic)
    logger.info(f"  Instance style: {style} (wght={wght}{', degraded' if result.degraded else ''})")

    return result


def save_variable_instance(
    source: Path, output: Path, weight: str, italic: bool = False
) -> InstanceResult:
    """
    Extract a named weight instance and write it atomically.

    Raises:
        MissingInputError: If the source does not exist
        MalformedFontError: If the fallback cannot read the source
        FontWriteError: If the output cannot be written
    """
    logger.info(f"Extracting {weight}{' Italic' if italic else ''} instance: {source.name}")

    result = extract_variable_instance(source, weight, italic)
    write_font(output, result.font)
    return result
