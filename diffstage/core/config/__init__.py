"""Configuration models for diffstage."""

from .overlay_config import OverlayConfig

__all__ = ["OverlayConfig"]
