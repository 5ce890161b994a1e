"""Providers package for diffstage - concrete implementations of abstract interfaces."""

__all__ = ["LocalWorkspace"]


def __getattr__(name: str):
    if name == "LocalWorkspace":
        from .workspace import LocalWorkspace  # lazy

        return LocalWorkspace
    raise AttributeError(name)
