"""Command-line scripts (non-interactive entry points)."""
