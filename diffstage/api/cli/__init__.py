"""Command line interface for diffstage."""
