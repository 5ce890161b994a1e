"""Core configuration, types and errors for diffstage."""
