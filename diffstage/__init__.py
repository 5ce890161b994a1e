"""diffstage: stage, review and commit file edits proposed by an agent."""

from .core.config.overlay_config import OverlayConfig
from .services.overlay_service import OverlayService
from .version import __version__

__all__ = ["OverlayConfig", "OverlayService", "__version__"]
