"""Build operations."""
