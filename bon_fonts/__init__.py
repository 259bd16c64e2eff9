"""Bon hybrid font builder."""

__version__ = "1.0.0"
