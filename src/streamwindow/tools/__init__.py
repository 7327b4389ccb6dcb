"""Command-line runners and debugging helpers."""
