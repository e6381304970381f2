"""Command-line interface for healing-guide."""
