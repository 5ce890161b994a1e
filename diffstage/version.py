"""Version information for diffstage."""

__version__ = "0.3.0"
