"""Logging and subprocess utilities."""
