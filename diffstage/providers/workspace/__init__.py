"""Host workspace providers for diffstage."""

from .local_workspace import LocalWorkspace

__all__ = ["LocalWorkspace"]
