"""Command-line interface for targetedid."""
