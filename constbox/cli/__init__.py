"""Command-line interface for constbox."""
