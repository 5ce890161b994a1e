"""Abstract interfaces for diffstage collaborators."""

from .host_workspace import HostWorkspace

__all__ = ["HostWorkspace"]
