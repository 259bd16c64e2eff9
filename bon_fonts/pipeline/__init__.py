"""Build pipeline orchestration and validation."""
