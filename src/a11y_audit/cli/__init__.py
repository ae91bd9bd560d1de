"""Command-line interface for a11y-audit."""
