"""
Build error taxonomy.

Every error except ConfigurationError is scoped to a single build target:
the pipeline records it on that target's result and carries on with the
siblings.
"""

from pathlib import Path


class BuildError(Exception):
    """Base class for all build failures."""


class MissingInputError(BuildError):
    """A source font file does not exist."""

    def __init__(self, path: Path, hint: str | None = None):
        self.path = Path(path)
        message = f"Input file not found: {self.path}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


class MalformedFontError(BuildError):
    """A font could not be parsed or lacks a required table."""


class FontWriteError(BuildError):
    """A font could not be compiled or written to disk."""


class InstancerError(BuildError):
    """The external variable font instancer failed."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr
        super().__init__(message)


class ConfigurationError(BuildError):
    """The build request cannot be satisfied by the configuration."""
