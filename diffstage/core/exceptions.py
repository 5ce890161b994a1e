"""Error taxonomy for the overlay engine.

These exceptions are raised by the internal components and converted into
``success=False`` responses by ``OverlayService``; none of them crosses the
service boundary.
"""


class OverlayError(Exception):
    """Base class for overlay engine errors."""


class OverlayNotFoundError(OverlayError, KeyError):
    """Raised by the store when a path has no open overlay."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"No open overlay for {self.path}"


class NothingPendingError(OverlayError):
    """Raised when an operation needs pending content that does not exist."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        super().__init__(reason or f"No in-memory content for {path}, nothing to save")


class WorkspaceIOError(OverlayError):
    """Raised when the host workspace fails to read or write a file."""

    def __init__(self, path: str, operation: str, cause: BaseException | None = None):
        self.path = path
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to {operation} {path}{detail}")
