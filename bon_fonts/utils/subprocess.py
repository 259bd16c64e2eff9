"""
Subprocess execution utilities with consistent error handling.
"""

import subprocess
import sys

from bon_fonts.utils.logging import logger


def run_command(
    cmd: list[str],
    description: str | None = None,
    exit_on_error: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run a subprocess command with consistent logging and error handling.

    Args:
        cmd: Command and arguments to run
        description: Optional description for logging
        exit_on_error: Whether to exit on failure (default True)

    Returns:
        CompletedProcess result

    Raises:
        SystemExit: If exit_on_error is True and command fails
        subprocess.CalledProcessError: If the command exits non-zero
        FileNotFoundError: If the executable is not installed
    """
    if description:
        logger.info(description)

    try:
        result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        if result.stdout:
            logger.debug(result.stdout)
        return result
    except subprocess.CalledProcessError as e:
        logger.error(f"Command failed: {' '.join(cmd)}")
        if e.stderr:
            logger.error(e.stderr)
        if exit_on_error:
            sys.exit(1)
        raise
    except FileNotFoundError:
        logger.error(f"Command not found: {cmd[0]}")
        if exit_on_error:
            sys.exit(1)
        raise


def run_fonttools(
    subcommand: str,
    args: list[str],
    description: str | None = None,
    exit_on_error: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run a fonttools subcommand.

    Args:
        subcommand: fonttools subcommand (e.g., "varLib.instancer")
        args: Additional arguments
        description: Optional description for logging
        exit_on_error: Whether to exit on failure

    Returns:
        CompletedProcess result
    """
    cmd = ["fonttools", subcommand, *args]
    return run_command(cmd, description, exit_on_error)
