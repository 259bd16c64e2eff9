"""Font table helpers shared by the build operations."""
