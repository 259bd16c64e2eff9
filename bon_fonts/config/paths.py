"""
Filesystem path constants for the build.

Centralizes path definitions to avoid magic strings in individual operations.
"""

from pathlib import Path

BUILD_DIR = Path(".build")
OUT_DIR = Path("out")
SOURCES_DIR = Path("sources")

# Declarative family configuration
CONFIG_FILE = Path("config") / "base-config.json"

# Intermediate artifact directories
VARIABLE_INSTANCES_DIR = BUILD_DIR / "variable-instances"
KOREAN_DIR = BUILD_DIR / "korean"

# Korean donor defaults (overridable in the config file)
KOREAN_SOURCE_DIR = SOURCES_DIR / "SarasaFixedK"
KOREAN_FAMILY = "SarasaFixedK"

# Output font prefix
OUTPUT_PREFIX = "Bon"
